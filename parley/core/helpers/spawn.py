import asyncio
import logging
from typing import Any, Coroutine

from parley.core.errors import ParleyError


class TaskSpawner:
    """
    Spawns and tracks the concurrently scheduled tasks of a session.

    Every task is registered until it completes, so the coordinator can
    tell at any moment how many execution contexts are still alive.
    Exceptions escaping a task are logged once here; cancellation is an
    expected way for a task to end and is only traced at debug level.

    The spawner does not await, cancel or otherwise schedule anything on
    its own: callers keep the returned task and decide its fate.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._loop = loop
        self._tasks: set[asyncio.Task[Any]] = set()
        self._logger = logging.getLogger("core.helpers.spawn")

    @property
    def remaining_tasks(self) -> int:
        """Number of spawned tasks that have not completed yet."""
        return len(self._tasks)

    def on_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)

        if task.cancelled():
            self._logger.debug(f"Task {task.get_name()} cancelled")
            return

        ex = task.exception()
        if isinstance(ex, ParleyError):
            # surfaced to the caller by whoever awaits the task
            self._logger.info(f"Task {task.get_name()} failed: {ex}")
        elif ex is not None:
            self._logger.error(
                f"Error occurred in task {task.get_name()}: {str(ex)}",
                exc_info=ex
            )

    def spawn(
        self,
        coro: Coroutine[Any, Any, Any],
        name: str | None = None,
    ) -> asyncio.Task[Any]:
        """
        Schedule `coro` as a task on the spawner's loop (or the running
        loop when none was given) and track it until completion.
        """
        loop = self._loop or asyncio.get_running_loop()
        task = loop.create_task(coro, name=name)
        task.add_done_callback(self.on_done)
        self._tasks.add(task)
        return task
