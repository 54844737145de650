"""Persistence adapters for the review workflow.

`schema` holds the table definitions; `sqlalchemy_adapters` and
`in_memory_adapters` implement the booking, review and tutor-profile ports
against a relational database and against process memory respectively.
"""
