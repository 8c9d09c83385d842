# projectinsight/services/projects/tasks.py
from __future__ import annotations

import asyncio
from typing import Awaitable, Dict, List, Optional

from projectinsight.utils.logger import get_logger


logger = get_logger(__name__)


class BackgroundTasks:
    """Owns fire-and-forget generation tasks, keyed by project id.

    The event loop only keeps weak references to tasks, so the registry
    holds a strong one until the task finishes.  Results are never joined
    by the request that spawned the task; callers observe them through the
    persisted project record.  There is no cancellation.
    """

    def __init__(self) -> None:
        self._tasks: Dict[str, asyncio.Task] = {}

    def spawn(self, key: str, coro: Awaitable[None]) -> asyncio.Task:
        task = asyncio.create_task(coro, name=f"generate:{key}")
        self._tasks[key] = task
        task.add_done_callback(lambda t, k=key: self._on_done(k, t))
        logger.debug("[tasks] spawned | key=%s | active=%d", key, len(self._tasks))
        return task

    def _on_done(self, key: str, task: asyncio.Task) -> None:
        if self._tasks.get(key) is task:
            del self._tasks[key]
        if task.cancelled():
            logger.warning("[tasks] cancelled | key=%s", key)
            return
        exc = task.exception()
        if exc is not None:
            # the task body stores its own failures; this is a last resort
            logger.error("[tasks] unhandled failure | key=%s | err=%r", key, exc)

    @property
    def active(self) -> List[str]:
        return [k for k, t in self._tasks.items() if not t.done()]

    def __len__(self) -> int:
        return len(self.active)

    async def drain(self, timeout: Optional[float] = None) -> bool:
        """Wait for in-flight tasks; True when all of them finished in time."""
        pending = [t for t in self._tasks.values() if not t.done()]
        if not pending:
            return True
        logger.info("[tasks] draining %d task(s)", len(pending))
        done, still_pending = await asyncio.wait(pending, timeout=timeout)
        if still_pending:
            logger.warning(
                "[tasks] %d task(s) still running after %.1fs",
                len(still_pending),
                timeout or 0.0,
            )
        return not still_pending
