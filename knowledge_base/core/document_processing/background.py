"""
Fire-and-forget background task runner.

Wraps asyncio.create_task so scheduled work keeps a strong reference until
it finishes, failures are logged instead of vanishing, and tests can
drain() the runner and then inspect the observable state it produced.

Dependencies: asyncio
System role: Scheduling of background chunking
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from knowledge_base.core.exceptions import KnowledgeBaseException

logger = logging.getLogger(__name__)


class BackgroundTaskRunner:
    """Schedule coroutines without awaiting them."""

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        """Number of scheduled tasks that have not finished."""
        return len(self._tasks)

    def schedule(
        self,
        func: Callable[..., Awaitable[Any]],
        *args: Any,
        name: str | None = None,
    ) -> asyncio.Task:
        """
        Start func(*args) on the running loop and return immediately.

        Args:
            func: Coroutine function
            *args: Positional arguments for func
            name: Task name used in logs

        Returns:
            asyncio.Task: The scheduled task
        """
        task = asyncio.create_task(func(*args), name=name)
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            logger.warning(f"{__name__}:_on_done - Task {task.get_name()} cancelled")
            return
        exc = task.exception()
        if isinstance(exc, KnowledgeBaseException):
            # Domain errors are logged with traceback where they are raised
            logger.debug(f"{__name__}:_on_done - Task {task.get_name()} failed: {type(exc).__name__}: {exc}")
        elif exc is not None:
            logger.error(
                f"{__name__}:_on_done - Task {task.get_name()} failed: {type(exc).__name__}: {exc}",
                exc_info=exc,
            )

    async def drain(self) -> None:
        """Wait until every scheduled task (including ones scheduled meanwhile) has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
