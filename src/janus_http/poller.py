"""
Long-poll event loop.

Janus holds ``GET /{session_id}`` open until an event is pending or its own
timeout elapses. The same GET doubles as the session keepalive, and it is
the only channel for plugin events, SDP answers and trickle candidates of
every handle in the session. A failed poll is therefore logged and retried
forever at a fixed cadence; only cancellation ends the loop.
"""

import asyncio
import logging
from typing import Any, Optional

from janus_http.errors import DecodeError, JanusError
from janus_http.events import EventBus
from janus_http.models.envelope import JanusOperation
from janus_http.transport.envelope import parse_response
from janus_http.transport.http import DEFAULT_LONG_POLL_TIMEOUT, HttpClient

DEFAULT_POLL_INTERVAL = 1.0


class LongPoller:
    def __init__(
        self,
        http: HttpClient,
        session_id: int,
        bus: EventBus,
        interval: float = DEFAULT_POLL_INTERVAL,
        timeout: float = DEFAULT_LONG_POLL_TIMEOUT,
        max_events: int = 1,
        logger: Optional[logging.Logger] = None,
    ):
        self._http = http
        self._session_id = session_id
        self._bus = bus
        self._interval = interval
        self._timeout = timeout
        self._max_events = max_events
        self._logger = logger or logging.getLogger("janus_http.poller")
        self._task: Optional[asyncio.Task[None]] = None
        self._stopping = False

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self._task is not None:
            raise RuntimeError(f"Long poll for session {self._session_id} already started")
        self._task = asyncio.get_running_loop().create_task(
            self._run(), name=f"janus-poll-{self._session_id}",
        )

    async def stop(self) -> None:
        """Cancel the in-flight GET and wait for the loop to exit."""
        self._stopping = True
        task, self._task = self._task, None
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def _run(self) -> None:
        path = str(self._session_id)
        params = {"maxev": self._max_events} if self._max_events > 1 else None
        extra = {"janus_session": self._session_id}
        try:
            while not self._stopping:
                self._logger.debug("Sending long poll GET for session %s", self._session_id, extra=extra)
                try:
                    payload = await self._http.get(path, params=params, timeout=self._timeout)
                    if payload is not None:
                        self._deliver(payload)
                except JanusError as e:
                    self._logger.warning("Long poll for session %s failed: %s", self._session_id, e, extra=extra)
                except Exception:
                    self._logger.exception("Unexpected long poll failure for session %s", self._session_id, extra=extra)
                await asyncio.sleep(self._interval)
        finally:
            self._logger.debug("Long poll for session %s exiting", self._session_id, extra=extra)

    def _deliver(self, payload: Any) -> None:
        # maxev > 1 answers with an array of envelopes
        items = payload if isinstance(payload, list) else [payload]
        for raw in items:
            try:
                event = parse_response(raw)
            except DecodeError as e:
                self._logger.warning("Dropping undecodable event for session %s: %s", self._session_id, e)
                continue
            if event.op == JanusOperation.KEEPALIVE:
                continue
            self._logger.debug("Event %s from sender %s", event.janus, event.sender,
                               extra={"janus_session": self._session_id, "janus_handle": event.sender})
            self._bus.publish(event)
