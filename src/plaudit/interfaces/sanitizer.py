"""Interface for sanitizing user-supplied free text.

A sanitizer takes text that will be stored and later displayed to other users
and returns a display-safe version of it. It is a pure function of its input:
no storage, no I/O, no length policy (callers truncate).
"""

import abc

# pylint: disable=too-few-public-methods


class Sanitizer(abc.ABC):
    """Contract for a free-text sanitizer."""

    @abc.abstractmethod
    def sanitize(self, text: str) -> str:
        """Return a display-safe version of `text`.

        Args:
            text: Raw user input.

        Returns:
            The sanitized text, possibly empty.
        """
