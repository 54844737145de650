"""Interface for generating review identifiers."""

import abc

# pylint: disable=too-few-public-methods


class IdGenerator(abc.ABC):
    """Contract for an ID generator.

    Review ids are stored in a 26-character column, so generators used for
    reviews must produce exactly 26 characters.
    """

    @abc.abstractmethod
    def new_id(self) -> str:
        """Return a new identifier, unique across all calls and processes."""
