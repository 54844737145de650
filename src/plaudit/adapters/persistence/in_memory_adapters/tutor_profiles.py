"""In-memory TutorProfileStore with per-tutor locks."""

from plaudit.domain.errors import TutorProfileNotFoundError
from plaudit.domain.model import TutorAggregate
from plaudit.interfaces.errors import TransientStorageError
from plaudit.interfaces.tutor_profiles import TutorProfileStore

from .data import InMemoryReviewData, PendingChanges

DEFAULT_LOCK_TIMEOUT_S = 5.0


class InMemoryTutorProfileStore(TutorProfileStore):
    """In-memory TutorProfileStore.

    Locks acquired here are recorded in the unit's `PendingChanges` and
    released by the unit of work on commit or rollback.
    """

    def __init__(
        self,
        data: InMemoryReviewData,
        pending: PendingChanges,
        lock_timeout_s: float = DEFAULT_LOCK_TIMEOUT_S,
    ):
        self._data = data
        self._pending = pending
        self._lock_timeout_s = lock_timeout_s

    def lock(self, tutor_profile_id: str) -> None:
        if tutor_profile_id in self._pending.held_locks:
            return
        with self._data.lock:
            if tutor_profile_id not in self._data.tutor_profiles:
                raise TutorProfileNotFoundError(tutor_profile_id)
        tutor_lock = self._data.tutor_lock(tutor_profile_id)
        if not tutor_lock.acquire(timeout=self._lock_timeout_s):
            raise TransientStorageError(
                f"lock timeout waiting for tutor profile {tutor_profile_id!r}"
            )
        self._pending.held_locks[tutor_profile_id] = tutor_lock

    def get_aggregate(self, tutor_profile_id: str) -> TutorAggregate | None:
        if (staged := self._pending.aggregates.get(tutor_profile_id)) is not None:
            return staged
        with self._data.lock:
            return self._data.tutor_profiles.get(tutor_profile_id)

    def save_aggregate(self, tutor_profile_id: str, aggregate: TutorAggregate) -> None:
        with self._data.lock:
            if tutor_profile_id not in self._data.tutor_profiles:
                raise TutorProfileNotFoundError(tutor_profile_id)
        self._pending.aggregates[tutor_profile_id] = aggregate
