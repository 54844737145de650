"""The ``plaudit`` command-line interface."""
