"""
Fan-out event registry for one session.

Every handler sees every event the long poll delivers. Routing by
``sender`` is left to the handler.
"""

import asyncio
import inspect
import logging
from typing import Any, Callable, Optional

from janus_http.models.envelope import JanusResponse

EventHandler = Callable[[JanusResponse], Any]


class EventBus:
    def __init__(self, logger: Optional[logging.Logger] = None):
        self._logger = logger or logging.getLogger("janus_http.events")
        self._handlers: list[EventHandler] = []
        self._tasks: set[asyncio.Task[Any]] = set()

    def __len__(self) -> int:
        return len(self._handlers)

    def add_event_handler(self, handler: EventHandler) -> Callable[[], None]:
        """Add a handler. Returns a cleanup function.

        Plain callables run inline on the poll task and should only hand the
        event off (e.g. ``queue.put_nowait``). Coroutine functions are
        scheduled as their own task.
        """
        # Copy-on-write so publish() can iterate without a lock
        self._handlers = [*self._handlers, handler]

        def remove() -> None:
            self._handlers = [h for h in self._handlers if h is not handler]
        return remove

    def publish(self, event: JanusResponse) -> None:
        for handler in self._handlers:
            try:
                result = handler(event)
            except Exception:
                self._logger.exception("Event handler %r failed on %s", handler, event.janus)
                continue
            if inspect.isawaitable(result):
                task = asyncio.ensure_future(result)
                self._tasks.add(task)
                task.add_done_callback(self._task_done)

    def _task_done(self, task: "asyncio.Task[Any]") -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            self._logger.error("Async event handler failed", exc_info=task.exception())

    async def close(self) -> None:
        """Drop all handlers and cancel handler tasks still running."""
        self._handlers = []
        # A handler may be closing its own session
        current = asyncio.current_task()
        tasks = [t for t in self._tasks if t is not current]
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.difference_update(tasks)
