"""ID generators for PLAUDIT reviews."""

import threading

from ulid import monotonic

from plaudit.interfaces.id_generator import IdGenerator

# pylint: disable=too-few-public-methods


class ULIDGenerator(IdGenerator):
    """Thread-safe monotonic ULID generator.

    ULIDs are 26-character, lexicographically sortable identifiers made of a
    millisecond timestamp and a random component, which makes them a natural
    fit for the ``reviews.id`` column. Backed by `ulid-py`.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()

    def new_id(self) -> str:
        """Generate a new ULID (serialized across threads)."""
        with self._lock:
            return str(monotonic.new())


class SimpleIdGenerator(IdGenerator):
    """Sequential, zero-padded ids. For tests and demos only."""

    def __init__(self, length: int = 26, prefix: str = "") -> None:
        if len(prefix) >= length:
            raise ValueError("prefix must be shorter than length")
        self._counter = 0
        self._length = length
        self._prefix = prefix
        self._lock = threading.Lock()

    def new_id(self) -> str:
        with self._lock:
            self._counter += 1
            counter = self._counter
        return f"{self._prefix}{counter:0{self._length - len(self._prefix)}d}"
