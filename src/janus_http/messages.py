"""
Message dispatcher: plugin messages and trickle candidates addressed to
``{session_id}/{handle_id}``.

Janus often answers a message twice: an immediate ``ack`` on the POST and
the actual result (typically carrying ``jsep``) later on the long poll.
``send`` returns only the first. Use ``JanusSession.expect`` to catch the
second.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Union

from janus_http.errors import LifecycleError, ProtocolError
from janus_http.models.envelope import JanusOperation, JanusResponse, Jsep
from janus_http.models.plugins import PluginBody, body_to_dict
from janus_http.transport.envelope import build_request, parse_response, raise_for_error
from janus_http.transport.http import HttpClient


def check_plugin_error(response: Union[dict[str, Any], JanusResponse]) -> None:
    """Raise ProtocolError for a plugin-level failure.

    Plugins report errors inside a ``success`` or ``event`` envelope as
    ``plugindata.data.error_code`` / ``error``, which ``send`` does not look at.
    """
    resp = response if isinstance(response, JanusResponse) else parse_response(response)
    data = resp.plugin_payload
    if "error_code" in data or "error" in data:
        raise ProtocolError(
            int(data.get("error_code", 0)),
            str(data.get("error", "plugin error")),
            details={"plugin": resp.plugindata.plugin if resp.plugindata else None},
        )


class MessageDispatcher:
    def __init__(self, http: HttpClient, logger: Optional[logging.Logger] = None):
        self._http = http
        self._logger = logger or logging.getLogger("janus_http.messages")

    @staticmethod
    def _path(session_id: int, handle_id: int) -> str:
        if not session_id:
            raise LifecycleError("No Janus session: create a session before sending messages")
        if not handle_id:
            raise LifecycleError(f"No plugin handle in session {session_id}: attach a plugin first")
        return f"{session_id}/{handle_id}"

    async def _post(self, session_id: int, handle_id: int, request: dict[str, Any]) -> dict[str, Any]:
        path = self._path(session_id, handle_id)
        self._logger.debug("POST %s %s", path, request.get("body") or request.get("janus"))
        raw = await self._http.post(path, request)
        resp = parse_response(raw)
        try:
            raise_for_error(resp)
        except ProtocolError as e:
            self._logger.warning("Janus rejected %s on handle %s: %s", request["janus"], handle_id, e,
                                 extra={"janus_session": session_id, "janus_handle": handle_id})
            raise
        return raw

    async def send(
        self,
        session_id: int,
        handle_id: int,
        body: PluginBody,
        jsep: Optional[Jsep] = None,
    ) -> dict[str, Any]:
        """Send a plugin message. Returns the decoded response as-is."""
        request = build_request(JanusOperation.MESSAGE, body=body_to_dict(body), jsep=jsep)
        return await self._post(session_id, handle_id, request)

    async def trickle(
        self,
        session_id: int,
        handle_id: int,
        candidate: Optional[Union[dict[str, Any], list[dict[str, Any]]]] = None,
    ) -> dict[str, Any]:
        """Send one ICE candidate, a batch, or (with None) end-of-candidates."""
        request = build_request(JanusOperation.TRICKLE, candidate=candidate if candidate is not None else {"completed": True})
        return await self._post(session_id, handle_id, request)
