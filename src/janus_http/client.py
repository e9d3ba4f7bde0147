"""
AsyncJanus / Janus: main client classes.
"""

import asyncio
import functools
import inspect
import logging
import threading
from typing import Any, Callable, Optional, Union

import httpx

from janus_http.events import EventHandler
from janus_http.handles import HandlesAPI
from janus_http.messages import MessageDispatcher
from janus_http.models.info import ServerInfo
from janus_http.models.plugins import JanusPlugin
from janus_http.plugins.echotest import EchoTestAPI
from janus_http.plugins.streaming import StreamingAPI
from janus_http.plugins.videoroom import VideoRoomAPI
from janus_http.poller import DEFAULT_POLL_INTERVAL
from janus_http.session import JanusSession
from janus_http.sessions import SessionsAPI
from janus_http.transport.http import (
    DEFAULT_BASE_URL,
    DEFAULT_LONG_POLL_TIMEOUT,
    DEFAULT_TIMEOUT,
    HttpClient,
)


class AsyncJanus:
    """Async Janus REST client (primary)."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        long_poll_timeout: float = DEFAULT_LONG_POLL_TIMEOUT,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        max_events: int = 1,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._logger = logger or logging.getLogger("janus_http")

        self.http = HttpClient(base_url=base_url, timeout=timeout, transport=transport)
        self.sessions = SessionsAPI(
            self.http,
            poll_interval=poll_interval,
            long_poll_timeout=long_poll_timeout,
            max_events=max_events,
            logger=self._logger,
        )
        self.handles = HandlesAPI(self.http, self.sessions, logger=self._logger)
        self.messages = MessageDispatcher(self.http, logger=self._logger)
        self.videoroom = VideoRoomAPI(self.messages)
        self.streaming = StreamingAPI(self.messages)
        self.echotest = EchoTestAPI(self.messages)

    async def __aenter__(self) -> "AsyncJanus":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def info(self) -> ServerInfo:
        """Server name, version and available plugins."""
        return ServerInfo.model_validate(await self.http.get("info"))

    async def create_session(self) -> JanusSession:
        return await self.sessions.create()

    async def destroy_session(self, session_id: int) -> None:
        await self.sessions.destroy(session_id)

    def session(self, session_id: int) -> JanusSession:
        return self.sessions.get(session_id)

    async def attach(self, session_id: int, plugin: Union[str, JanusPlugin]) -> int:
        return await self.handles.attach(session_id, plugin)

    async def detach(self, session_id: int, handle_id: int) -> None:
        await self.handles.detach(session_id, handle_id)

    async def start_echo(self, session_id: int, offer: str, **kwargs: Any) -> int:
        """Convenience: attach the echo test plugin and send the offer. Returns the handle id."""
        handle_id = await self.attach(session_id, JanusPlugin.ECHO_TEST)
        await self.echotest.start(session_id, handle_id, offer, **kwargs)
        return handle_id

    async def create_stream(self, session_id: int, id: int, name: str, **kwargs: Any) -> dict[str, Any]:
        """Convenience: create a mountpoint on a throwaway streaming handle."""
        handle_id = await self.attach(session_id, JanusPlugin.STREAMING)
        try:
            return await self.streaming.create(session_id, handle_id, id, name, **kwargs)
        finally:
            await self.detach(session_id, handle_id)

    async def close(self) -> None:
        await self.sessions.destroy_all()
        await self.http.close()


class _SyncProxy:
    """Blocking view of one of the async plugin APIs."""

    def __init__(self, target: Any, run: Callable[[Any], Any]):
        self._target = target
        self._run = run

    def __getattr__(self, name: str) -> Any:
        attr = getattr(self._target, name)
        if not inspect.iscoroutinefunction(attr):
            return attr

        @functools.wraps(attr)
        def call(*args: Any, **kwargs: Any) -> Any:
            return self._run(attr(*args, **kwargs))
        return call


class Janus:
    """Sync wrapper around AsyncJanus.

    The event loop runs on a daemon thread so the long poll keeps going
    between calls. Event handlers are invoked on that thread.
    """

    def __init__(self, **kwargs: Any):
        self._loop = asyncio.new_event_loop()
        self._thread = threading.Thread(target=self._loop.run_forever, name="janus-loop", daemon=True)
        self._thread.start()
        self._async = AsyncJanus(**kwargs)
        self.videoroom = _SyncProxy(self._async.videoroom, self._run)
        self.streaming = _SyncProxy(self._async.streaming, self._run)
        self.echotest = _SyncProxy(self._async.echotest, self._run)
        self.messages = _SyncProxy(self._async.messages, self._run)

    def _run(self, coro: Any) -> Any:
        return asyncio.run_coroutine_threadsafe(coro, self._loop).result()

    def __enter__(self) -> "Janus":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def info(self) -> ServerInfo:
        return self._run(self._async.info())

    def create_session(self) -> int:
        return self._run(self._async.create_session()).id

    def destroy_session(self, session_id: int) -> None:
        self._run(self._async.destroy_session(session_id))

    def attach(self, session_id: int, plugin: Union[str, JanusPlugin]) -> int:
        return self._run(self._async.attach(session_id, plugin))

    def detach(self, session_id: int, handle_id: int) -> None:
        self._run(self._async.detach(session_id, handle_id))

    def add_event_handler(self, session_id: int, handler: EventHandler) -> Callable[[], None]:
        remove = self._async.session(session_id).add_event_handler(handler)
        return lambda: self._loop.call_soon_threadsafe(remove)

    def wait_for(self, session_id: int, handle_id: Optional[int] = None, **kwargs: Any) -> Any:
        return self._run(self._async.session(session_id).wait_for(handle_id, **kwargs))

    def close(self) -> None:
        if self._loop.is_closed():
            return
        self._run(self._async.close())
        self._loop.call_soon_threadsafe(self._loop.stop)
        self._thread.join()
        self._loop.close()
