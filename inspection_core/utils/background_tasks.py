"""
Background task helper
----------------------

Per-tick handlers must never await slow work. They hand it to `spawn()`,
which keeps a strong reference until the task finishes and logs any
exception the task did not handle itself.
"""

# Standard library imports
import asyncio
import logging
from typing import Coroutine, Any, Optional

logger = logging.getLogger(__name__)


class BackgroundTasks:
    """Fire-and-forget task set owned by one runtime."""

    def __init__(self, name: str = "background"):
        self.name = name
        self._tasks: set[asyncio.Task] = set()

    def __len__(self) -> int:
        return len(self._tasks)

    def spawn(self, coro: Coroutine[Any, Any, Any], name: Optional[str] = None) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                f"[{self.name}] Background task {task.get_name()} failed: {exc}",
                exc_info=exc,
            )

    async def drain(self, timeout: Optional[float] = None) -> None:
        """Wait for running tasks; cancel whatever is left after the timeout."""
        if not self._tasks:
            return
        pending = set(self._tasks)
        _, still_pending = await asyncio.wait(pending, timeout=timeout)
        for task in still_pending:
            task.cancel()
        if still_pending:
            await asyncio.gather(*still_pending, return_exceptions=True)
            logger.info(f"[{self.name}] Cancelled {len(still_pending)} unfinished background task(s)")
