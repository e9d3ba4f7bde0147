"""
A live Janus session: its id, handles, long-poll loop and subscribers.
"""

import asyncio
import logging
from typing import AsyncGenerator, Callable, Optional

from janus_http.events import EventBus, EventHandler
from janus_http.models.envelope import JanusResponse
from janus_http.poller import LongPoller

EventPredicate = Callable[[JanusResponse], bool]

DEFAULT_QUEUE_SIZE = 256


def has_jsep(event: JanusResponse) -> bool:
    return event.jsep is not None


class JanusSession:
    """Returned by ``SessionsAPI.create``. Owns exactly one long-poll loop."""

    def __init__(self, session_id: int, bus: EventBus, poller: LongPoller, logger: Optional[logging.Logger] = None):
        self.id = session_id
        self.handles: dict[int, str] = {}
        self._bus = bus
        self._poller = poller
        self._logger = logger or logging.getLogger("janus_http.session")
        self._closed = False

    def __repr__(self) -> str:
        return f"JanusSession(id={self.id!r}, handles={sorted(self.handles)!r}, closed={self._closed!r})"

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def polling(self) -> bool:
        return self._poller.running

    def add_event_handler(self, handler: EventHandler) -> Callable[[], None]:
        """Receive every non-keepalive event of this session. Returns a cleanup function."""
        return self._bus.add_event_handler(handler)

    def expect(
        self,
        handle_id: Optional[int] = None,
        predicate: Optional[EventPredicate] = None,
    ) -> "asyncio.Future[JanusResponse]":
        """Future for the next event from ``handle_id`` matching ``predicate``.

        Call before sending the request whose result arrives on the long poll,
        otherwise the event can be delivered before anyone listens. Matching is
        by sender only: two negotiations in flight on the same handle cannot be
        told apart.
        """
        future: asyncio.Future[JanusResponse] = asyncio.get_running_loop().create_future()

        def handler(event: JanusResponse) -> None:
            if future.done():
                return
            if handle_id is not None and event.sender != handle_id:
                return
            if predicate is not None and not predicate(event):
                return
            future.set_result(event)

        remove = self._bus.add_event_handler(handler)
        future.add_done_callback(lambda _f: remove())
        return future

    async def wait_for(
        self,
        handle_id: Optional[int] = None,
        predicate: Optional[EventPredicate] = None,
        timeout: float = 30.0,
    ) -> JanusResponse:
        try:
            return await asyncio.wait_for(self.expect(handle_id, predicate), timeout=timeout)
        except asyncio.TimeoutError:
            raise TimeoutError(f"Timed out waiting for event from handle {handle_id} in session {self.id}")

    async def events(
        self,
        handle_id: Optional[int] = None,
        maxsize: int = DEFAULT_QUEUE_SIZE,
    ) -> AsyncGenerator[JanusResponse, None]:
        """Persistent event stream; ends when the session is destroyed."""
        queue: asyncio.Queue[JanusResponse] = asyncio.Queue(maxsize=maxsize)

        def _handler(event: JanusResponse) -> None:
            if handle_id is not None and event.sender != handle_id:
                return
            try:
                queue.put_nowait(event)
            except asyncio.QueueFull:
                self._logger.warning("Subscriber queue full for session %s, dropping %s event",
                                     self.id, event.janus, extra={"janus_session": self.id})

        remove = self._bus.add_event_handler(_handler)
        try:
            while not self._closed:
                try:
                    yield await asyncio.wait_for(queue.get(), timeout=0.5)
                except asyncio.TimeoutError:
                    continue
            while not queue.empty():
                yield queue.get_nowait()
        finally:
            remove()

    async def close(self) -> None:
        """Stop polling and drop subscribers. Does not talk to the gateway."""
        self._closed = True
        await self._poller.stop()
        await self._bus.close()
        self.handles.clear()

    def start(self) -> None:
        self._poller.start()
