"""Per-key debounce timers."""

import asyncio
import itertools
import logging
from collections.abc import Awaitable, Callable, Hashable
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)

FlushCallback = Callable[[], Awaitable[Any]]
ErrorHook = Callable[[Hashable, Exception], Awaitable[None]]


@dataclass
class _Slot:
    generation: int
    task: asyncio.Task[None]


@dataclass
class _KeyGuard:
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    users: int = 0


class BatchScheduler:
    """Keeps at most one pending flush timer per key.

    Every ``reschedule`` replaces the key's slot with a fresh timer and a new
    generation. A timer that wakes up runs its callback only if its generation
    still owns the slot, and it releases the slot before invoking the callback.
    A later ``reschedule`` or ``cancel`` for the same key never interrupts a
    callback already in progress, and callbacks for one key run one at a
    time: a newer timer that fires while an older callback is still running
    waits for it to finish.

    Slot updates never await, so they are atomic with respect to the event
    loop. All methods must be called from the loop that owns the timers.
    """

    def __init__(self, on_error: ErrorHook | None = None) -> None:
        self._on_error = on_error
        self._slots: dict[Hashable, _Slot] = {}
        self._tasks: set[asyncio.Task[None]] = set()
        self._guards: dict[Hashable, _KeyGuard] = {}
        self._generations = itertools.count(1)
        self._closed = False

    def reschedule(
        self, key: Hashable, delay: float, callback: FlushCallback
    ) -> int:
        """Cancel the key's pending timer and start a new one.

        Returns the generation of the new timer.
        """
        if self._closed:
            raise RuntimeError("scheduler is shut down")
        generation = next(self._generations)
        previous = self._slots.get(key)
        if previous is not None:
            previous.task.cancel()
        task = asyncio.create_task(self._run(key, generation, delay, callback))
        self._slots[key] = _Slot(generation=generation, task=task)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        logger.debug(
            "Scheduled flush for %s in %.2fs (generation %d)", key, delay, generation
        )
        return generation

    def cancel(self, key: Hashable) -> bool:
        """Cancel the key's pending timer; no-op if it already fired or is absent."""
        slot = self._slots.pop(key, None)
        if slot is None:
            return False
        slot.task.cancel()
        logger.debug("Cancelled flush for %s (generation %d)", key, slot.generation)
        return True

    def is_scheduled(self, key: Hashable) -> bool:
        return key in self._slots

    def generation(self, key: Hashable) -> int | None:
        slot = self._slots.get(key)
        return slot.generation if slot else None

    async def _run(
        self, key: Hashable, generation: int, delay: float, callback: FlushCallback
    ) -> None:
        try:
            await asyncio.sleep(delay)
        except asyncio.CancelledError:
            return
        slot = self._slots.get(key)
        if slot is None or slot.generation != generation:
            return
        del self._slots[key]
        try:
            await self._serialized(key, callback)
        except Exception as exc:
            logger.exception("Scheduled flush failed for %s", key)
            await self._report(key, exc)

    async def run_now(self, key: Hashable, callback: FlushCallback) -> Any:
        """Cancel the key's pending timer and run ``callback`` immediately.

        The call still waits for any callback of the same key that is already
        running. Exceptions propagate to the caller.
        """
        self.cancel(key)
        return await self._serialized(key, callback)

    async def _serialized(self, key: Hashable, callback: FlushCallback) -> Any:
        guard = self._guards.get(key)
        if guard is None:
            guard = _KeyGuard()
            self._guards[key] = guard
        guard.users += 1
        try:
            async with guard.lock:
                return await callback()
        finally:
            guard.users -= 1
            if guard.users == 0:
                self._guards.pop(key, None)

    async def _report(self, key: Hashable, exc: Exception) -> None:
        if self._on_error is None:
            return
        try:
            await self._on_error(key, exc)
        except Exception:
            logger.exception("Error hook failed for %s", key)

    async def shutdown(self, grace_seconds: float = 5.0) -> None:
        """Drop pending timers and give in-flight callbacks time to finish."""
        self._closed = True
        for key in list(self._slots):
            self.cancel(key)
        running = set(self._tasks)
        if not running:
            return
        _, abandoned = await asyncio.wait(running, timeout=grace_seconds)
        for task in abandoned:
            task.cancel()
        if abandoned:
            logger.warning(
                "Abandoned %d in-flight flush(es) on shutdown", len(abandoned)
            )
