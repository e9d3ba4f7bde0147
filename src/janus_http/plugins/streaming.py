"""
Streaming plugin actions (janus.plugin.streaming).
"""

from __future__ import annotations

from typing import Any, Optional

from janus_http.messages import MessageDispatcher
from janus_http.models.envelope import Jsep
from janus_http.models.plugins import (
    CreateStreamRequest,
    DestroyStreamRequest,
    ListRequest,
    StartRequest,
    StreamMedia,
    WatchRequest,
    WatchStream,
)

DEFAULT_MEDIA = (
    StreamMedia(type="video", mid="video1", codec="vp8", port=8004, pt=100),
    StreamMedia(type="audio", mid="audio1", codec="opus", port=8005, pt=111),
)


class StreamingAPI:
    def __init__(self, messages: MessageDispatcher):
        self._messages = messages

    async def list(self, session_id: int, handle_id: int) -> dict[str, Any]:
        """List mountpoints."""
        return await self._messages.send(session_id, handle_id, ListRequest())

    async def create(
        self,
        session_id: int,
        handle_id: int,
        id: int,
        name: str,
        media: Optional[list[StreamMedia]] = None,
        description: Optional[str] = None,
        is_private: bool = False,
        permanent: bool = True,
    ) -> dict[str, Any]:
        """Create an RTP mountpoint; defaults to VP8 video on 8004 and Opus audio on 8005."""
        body = CreateStreamRequest(
            id=id,
            name=name,
            description=description or f"{name} STREAM",
            is_private=is_private,
            permanent=permanent,
            media=list(media) if media is not None else list(DEFAULT_MEDIA),
        )
        return await self._messages.send(session_id, handle_id, body)

    async def destroy(
        self, session_id: int, handle_id: int, id: int, secret: Optional[str] = None,
    ) -> dict[str, Any]:
        return await self._messages.send(session_id, handle_id, DestroyStreamRequest(id=id, secret=secret or None))

    async def watch(
        self,
        session_id: int,
        handle_id: int,
        id: int,
        video_mid: Optional[str] = None,
        audio_mid: Optional[str] = None,
    ) -> dict[str, Any]:
        """Ask to watch mountpoint ``id``. Janus sends its SDP offer on the long poll."""
        mids = [mid for mid in (video_mid, audio_mid) if mid]
        body = WatchRequest(id=id, streams=[WatchStream(mid=mid) for mid in mids] or None)
        return await self._messages.send(session_id, handle_id, body)

    async def start(self, session_id: int, handle_id: int, answer: str) -> dict[str, Any]:
        """Answer the offer received after ``watch`` and start the stream."""
        return await self._messages.send(session_id, handle_id, StartRequest(), jsep=Jsep(type="answer", sdp=answer))
