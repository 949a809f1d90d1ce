"""In-process mutual exclusion for per-user materialization."""

import asyncio
import weakref


class UserLockRegistry:
    """
    Hands out one asyncio.Lock per user ID.

    Serializes reminder creation for a user within this process. Runs in
    other processes are not covered; the scheduler must not start two
    daily runs for the same user concurrently.

    Entries are weak: a lock nobody holds or waits on is dropped, so the
    registry does not grow with every user ever seen.
    """

    def __init__(self) -> None:
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    def lock_for(self, user_id: str) -> asyncio.Lock:
        lock = self._locks.get(user_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[user_id] = lock
        return lock

    def is_locked(self, user_id: str) -> bool:
        lock = self._locks.get(user_id)
        return lock is not None and lock.locked()


_registry: UserLockRegistry | None = None


def get_user_lock_registry() -> UserLockRegistry:
    """Get the process-wide lock registry."""
    global _registry
    if _registry is None:
        _registry = UserLockRegistry()
    return _registry
