"""Fake Janus gateway on httpx.MockTransport."""

import asyncio
import json
from typing import Any, Callable, Optional

import httpx
import pytest_asyncio

from janus_http import AsyncJanus

BASE_URL = "http://janus.test/janus"
SESSION_ID = 12345
HANDLE_ID = 999

# Requests Janus answers with an ack, delivering the result on the long poll
ASYNC_REQUESTS = {"join", "publish", "watch", "start", "configure", "unpublish", "leave"}


class FakeJanus:
    def __init__(self) -> None:
        self.requests: list[tuple[str, str, Any]] = []
        self.events: list[Any] = []
        self.scripted: dict[str, list[Any]] = {}
        self.followups: dict[str, list[Any]] = {}
        self.next_session_id = SESSION_ID
        self.next_handle_id = HANDLE_ID

    def script(self, verb: str, response: Any) -> None:
        """Queue the next reply to a ``janus`` verb (or to a message ``request``)."""
        self.scripted.setdefault(verb, []).append(response)

    def after(self, request: str, event: Any) -> None:
        """Queue ``event`` on the long poll once ``request`` has been answered."""
        self.followups.setdefault(request, []).append(event)

    def posts(self, verb: Optional[str] = None) -> list[tuple[str, Any]]:
        return [(p, b) for m, p, b in self.requests if m == "POST" and (verb is None or b["janus"] == verb)]

    def polls(self) -> int:
        return sum(1 for m, p, _ in self.requests if m == "GET" and p != "info")

    def _reply(self, item: Any) -> httpx.Response:
        if isinstance(item, Exception):
            raise item
        if isinstance(item, httpx.Response):
            return item
        if isinstance(item, bytes):
            return httpx.Response(200, content=item)
        return httpx.Response(200, json=item)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path[len("/janus"):].strip("/")
        if request.method == "GET":
            self.requests.append(("GET", path, None))
            if path == "info":
                return httpx.Response(200, json={
                    "janus": "server_info", "name": "Janus WebRTC Server", "version": 1100,
                    "version_string": "1.1.0",
                    "plugins": {"janus.plugin.videoroom": {"name": "JANUS VideoRoom plugin", "version": 9}},
                })
            if self.events:
                return self._reply(self.events.pop(0))
            return httpx.Response(200, content=b"")

        body = json.loads(request.content)
        self.requests.append(("POST", path, body))
        verb = body["janus"]
        request_name = (body.get("body") or {}).get("request")
        if request_name and self.followups.get(request_name):
            self.events.append(self.followups[request_name].pop(0))
        for key in (request_name, verb):
            if key and self.scripted.get(key):
                return self._reply(self.scripted[key].pop(0))

        tx = body.get("transaction")
        if verb == "create":
            sid, self.next_session_id = self.next_session_id, self.next_session_id + 1
            return httpx.Response(200, json={"janus": "success", "transaction": tx, "data": {"id": sid}})
        if verb == "attach":
            hid, self.next_handle_id = self.next_handle_id, self.next_handle_id + 1
            return httpx.Response(200, json={
                "janus": "success", "session_id": int(path), "transaction": tx, "data": {"id": hid},
            })
        if verb in ("destroy", "keepalive"):
            return httpx.Response(200, json={"janus": "success" if verb == "destroy" else "ack",
                                             "session_id": int(path), "transaction": tx})
        session_id, handle_id = (int(p) for p in path.split("/"))
        if verb == "trickle" or request_name in ASYNC_REQUESTS:
            return httpx.Response(200, json={"janus": "ack", "session_id": session_id, "transaction": tx})
        return httpx.Response(200, json={
            "janus": "success", "session_id": session_id, "sender": handle_id, "transaction": tx,
            "plugindata": {"plugin": "janus.plugin.videoroom", "data": {"videoroom": "success", "list": []}},
        })


def plugin_event(sender: int, data: dict, jsep: Optional[dict] = None) -> dict:
    event = {
        "janus": "event", "session_id": SESSION_ID, "sender": sender,
        "plugindata": {"plugin": "janus.plugin.videoroom", "data": data},
    }
    if jsep is not None:
        event["jsep"] = jsep
    return event


async def eventually(condition: Callable[[], bool], timeout: float = 2.0) -> None:
    deadline = asyncio.get_running_loop().time() + timeout
    while not condition():
        if asyncio.get_running_loop().time() > deadline:
            raise AssertionError("condition not met in time")
        await asyncio.sleep(0.005)


@pytest_asyncio.fixture
async def gateway() -> FakeJanus:
    return FakeJanus()


@pytest_asyncio.fixture
async def client(gateway: FakeJanus):
    janus = AsyncJanus(base_url=BASE_URL, poll_interval=0.01, transport=httpx.MockTransport(gateway))
    yield janus
    await janus.close()
