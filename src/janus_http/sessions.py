"""
Session lifecycle: create, keepalive, destroy.
"""

from __future__ import annotations

import logging
from typing import Optional

from janus_http.errors import JanusError, LifecycleError
from janus_http.events import EventBus
from janus_http.models.envelope import JanusOperation, JanusResponse
from janus_http.poller import DEFAULT_POLL_INTERVAL, LongPoller
from janus_http.session import JanusSession
from janus_http.transport.envelope import build_request, parse_response, raise_for_error
from janus_http.transport.http import DEFAULT_LONG_POLL_TIMEOUT, HttpClient


class SessionsAPI:
    def __init__(
        self,
        http: HttpClient,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        long_poll_timeout: float = DEFAULT_LONG_POLL_TIMEOUT,
        max_events: int = 1,
        logger: Optional[logging.Logger] = None,
    ):
        self._http = http
        self._poll_interval = poll_interval
        self._long_poll_timeout = long_poll_timeout
        self._max_events = max_events
        self._logger = logger or logging.getLogger("janus_http.sessions")
        self._sessions: dict[int, JanusSession] = {}

    @property
    def active(self) -> list[int]:
        return list(self._sessions)

    def get(self, session_id: int) -> JanusSession:
        session = self._sessions.get(session_id) if session_id else None
        if session is None:
            raise LifecycleError(f"No live Janus session {session_id}. Call create() first.")
        return session

    async def create(self) -> JanusSession:
        """Create a session and start its long-poll loop."""
        resp = parse_response(await self._http.post("", build_request(JanusOperation.CREATE)))
        raise_for_error(resp)
        session_id = resp.data.id if resp.data else 0
        if not session_id:
            raise LifecycleError(f"Janus session creation failed: no id in {resp.janus!r} response")

        bus = EventBus(logger=self._logger)
        poller = LongPoller(
            self._http, session_id, bus,
            interval=self._poll_interval,
            timeout=self._long_poll_timeout,
            max_events=self._max_events,
            logger=self._logger,
        )
        session = JanusSession(session_id, bus, poller, logger=self._logger)
        self._sessions[session_id] = session
        session.start()
        self._logger.info("Janus session %s created", session_id, extra={"janus_session": session_id})
        return session

    async def keepalive(self, session_id: int) -> JanusResponse:
        self.get(session_id)
        resp = parse_response(await self._http.post(str(session_id), build_request(JanusOperation.KEEPALIVE)))
        return raise_for_error(resp)

    async def destroy(self, session_id: int) -> None:
        """Destroy a session and stop its poll loop.

        Best-effort and idempotent: unknown ids are ignored and gateway or
        network failures are only logged.
        """
        session = self._sessions.pop(session_id, None)
        if session is None:
            self._logger.debug("Session %s already destroyed", session_id)
            return
        extra = {"janus_session": session_id}
        try:
            resp = parse_response(await self._http.post(str(session_id), build_request(JanusOperation.DESTROY)))
            raise_for_error(resp)
            self._logger.info("Janus session %s destroyed", session_id, extra=extra)
        except JanusError as e:
            self._logger.warning("Destroy of session %s failed: %s", session_id, e, extra=extra)
        finally:
            await session.close()

    async def destroy_all(self) -> None:
        for session_id in list(self._sessions):
            await self.destroy(session_id)
