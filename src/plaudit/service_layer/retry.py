"""Bounded retry of whole units of work on transient storage errors.

Only `TransientStorageError` is retried. The callable passed to
`run_with_retry` must open its own unit of work, so every attempt starts from
a fresh transaction and re-reads everything it depends on.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

import backoff

from plaudit.interfaces.errors import StorageError, TransientStorageError

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_ATTEMPTS = 3


@dataclass(frozen=True)
class RetryPolicy:
    """Exponential backoff settings.

    Args:
        max_attempts: Total attempts, including the first (>= 1).
        initial_delay: Seconds to wait before the second attempt.
        max_delay: Upper bound on a single wait.
        backoff_factor: Multiplier applied to the wait after each attempt.
        jitter: Wait a random fraction of the delay ("full jitter") so racing
            units spread out.
    """

    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    initial_delay: float = 0.05
    max_delay: float = 1.0
    backoff_factor: float = 2.0
    jitter: bool = True

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")


def run_with_retry(
    fn: Callable[[], T], policy: RetryPolicy, description: str = "operation"
) -> T:
    """Call `fn` until it succeeds, fails permanently, or attempts run out.

    Args:
        fn: Runs one complete unit of work.
        policy: How many attempts and how long to wait between them.
        description: Used in log messages.

    Returns:
        Whatever `fn` returns.

    Raises:
        StorageError: If every attempt failed with `TransientStorageError`.
        Exception: Anything else `fn` raises, unchanged and without retrying.
    """

    def log_backoff(details: dict[str, Any]) -> None:
        logger.warning(
            "%s hit a transient storage error on attempt %d/%d; "
            "retrying in %.3fs: %s",
            description,
            details["tries"],
            policy.max_attempts,
            details["wait"],
            details["exception"],
        )

    retrying = backoff.on_exception(
        backoff.expo,
        TransientStorageError,
        max_tries=policy.max_attempts,
        jitter=backoff.full_jitter if policy.jitter else None,
        on_backoff=log_backoff,
        logger=None,
        base=policy.backoff_factor,
        factor=policy.initial_delay,
        max_value=policy.max_delay,
    )(fn)

    try:
        return retrying()
    except TransientStorageError as e:
        raise StorageError(
            f"{description} failed after {policy.max_attempts} attempt(s): {e}"
        ) from e
