"""
EchoTest plugin actions (janus.plugin.echotest).
"""

from __future__ import annotations

from typing import Any, Optional

from janus_http.messages import MessageDispatcher
from janus_http.models.envelope import Jsep
from janus_http.models.plugins import EchoTestRequest


class EchoTestAPI:
    def __init__(self, messages: MessageDispatcher):
        self._messages = messages

    async def start(
        self,
        session_id: int,
        handle_id: int,
        offer: str,
        audio: bool = True,
        video: bool = True,
        bitrate: Optional[int] = None,
    ) -> dict[str, Any]:
        """Send the SDP offer; the echo answer arrives on the long poll."""
        body = EchoTestRequest(audio=audio, video=video, bitrate=bitrate)
        return await self._messages.send(session_id, handle_id, body, jsep=Jsep(type="offer", sdp=offer))
