"""Service layer: commands, handlers, queries and the message bus."""
