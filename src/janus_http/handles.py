"""
Plugin handles: attach and detach within a session.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

from janus_http.errors import JanusError, LifecycleError
from janus_http.models.envelope import JanusOperation
from janus_http.models.plugins import DetachRequest, JanusPlugin, body_to_dict, resolve_plugin
from janus_http.sessions import SessionsAPI
from janus_http.transport.envelope import build_request, parse_response, raise_for_error
from janus_http.transport.http import HttpClient


class HandlesAPI:
    def __init__(self, http: HttpClient, sessions: SessionsAPI, logger: Optional[logging.Logger] = None):
        self._http = http
        self._sessions = sessions
        self._logger = logger or logging.getLogger("janus_http.handles")

    async def attach(self, session_id: int, plugin: Union[str, JanusPlugin]) -> int:
        """Attach a plugin instance to the session and return its handle id."""
        session = self._sessions.get(session_id)
        plugin_id = resolve_plugin(plugin)
        self._logger.debug("Sending attach to %s", plugin_id)
        resp = parse_response(await self._http.post(
            str(session_id), build_request(JanusOperation.ATTACH, plugin=plugin_id),
        ))
        raise_for_error(resp)
        handle_id = resp.data.id if resp.data else 0
        if not handle_id:
            raise LifecycleError(f"Janus session {session_id} failed to attach {plugin_id}")
        session.handles[handle_id] = plugin_id
        self._logger.info("Attached %s as handle %s", plugin_id, handle_id,
                          extra={"janus_session": session_id, "janus_handle": handle_id})
        return handle_id

    async def detach(self, session_id: int, handle_id: int) -> None:
        """Detach a handle. Best-effort: failures are logged, not raised."""
        extra = {"janus_session": session_id, "janus_handle": handle_id}
        if not session_id or not handle_id:
            self._logger.debug("Nothing to detach for session %s handle %s", session_id, handle_id)
            return
        try:
            resp = parse_response(await self._http.post(
                f"{session_id}/{handle_id}",
                build_request(JanusOperation.MESSAGE, body=body_to_dict(DetachRequest())),
            ))
            raise_for_error(resp)
            self._logger.info("Detached handle %s", handle_id, extra=extra)
        except JanusError as e:
            self._logger.warning("Detach of handle %s failed: %s", handle_id, e, extra=extra)
        finally:
            try:
                self._sessions.get(session_id).handles.pop(handle_id, None)
            except LifecycleError:
                pass
