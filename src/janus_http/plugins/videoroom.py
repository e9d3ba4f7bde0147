"""
VideoRoom plugin actions (janus.plugin.videoroom).
"""

from __future__ import annotations

from typing import Any, Optional

from janus_http.messages import MessageDispatcher
from janus_http.models.envelope import Jsep
from janus_http.models.plugins import (
    CreateRoomRequest,
    DestroyRoomRequest,
    JoinRoomRequest,
    LeaveRequest,
    ListParticipantsRequest,
    ListRequest,
    ParticipantType,
    PublishRequest,
    StartRequest,
    SubscribeFeed,
    SubscribeRequest,
    UnpublishRequest,
)


class VideoRoomAPI:
    def __init__(self, messages: MessageDispatcher):
        self._messages = messages

    async def list_rooms(self, session_id: int, handle_id: int) -> dict[str, Any]:
        return await self._messages.send(session_id, handle_id, ListRequest())

    async def room_exists(self, session_id: int, handle_id: int, room: int) -> bool:
        """True if ``room`` shows up in the room list."""
        rooms = await self.list_rooms(session_id, handle_id)
        listing = ((rooms.get("plugindata") or {}).get("data") or {}).get("list") or []
        return any(entry.get("room") == room for entry in listing)

    async def list_participants(self, session_id: int, handle_id: int, room: int) -> dict[str, Any]:
        return await self._messages.send(session_id, handle_id, ListParticipantsRequest(room=room))

    async def create_room(
        self,
        session_id: int,
        handle_id: int,
        room: int,
        description: Optional[str] = None,
        secret: Optional[str] = None,
        bitrate: int = 0,
        publishers: Optional[str] = None,
        record: bool = False,
        rec_dir: Optional[str] = None,
        fir_freq: int = 0,
        is_private: bool = False,
        permanent: Optional[bool] = None,
    ) -> dict[str, Any]:
        """Create a room. ``publishers`` is a comma separated allow-list of tokens."""
        body = CreateRoomRequest(
            room=room,
            description=description or None,
            secret=secret or None,
            bitrate=bitrate if bitrate > 0 else None,
            fir_freq=fir_freq if fir_freq > 0 else None,
            allowed=[p.strip() for p in publishers.split(",")] if publishers else None,
            record=record,
            rec_dir=rec_dir or None,
            is_private=is_private,
            permanent=permanent,
        )
        return await self._messages.send(session_id, handle_id, body)

    async def destroy_room(
        self, session_id: int, handle_id: int, room: int, secret: Optional[str] = None,
    ) -> dict[str, Any]:
        return await self._messages.send(session_id, handle_id, DestroyRoomRequest(room=room, secret=secret or None))

    async def join(
        self,
        session_id: int,
        handle_id: int,
        room: int,
        ptype: str = ParticipantType.PUBLISHER,
        id: Optional[int] = None,
        display: Optional[str] = None,
        token: Optional[str] = None,
    ) -> dict[str, Any]:
        """Join as a participant. The ``joined`` event arrives on the long poll."""
        body = JoinRoomRequest(room=room, ptype=ptype, id=id, display=display, token=token)
        return await self._messages.send(session_id, handle_id, body)

    async def subscribe(self, session_id: int, handle_id: int, room: int, feed: int) -> dict[str, Any]:
        """Join as subscriber to ``feed``. Janus sends its SDP offer on the long poll."""
        body = SubscribeRequest(room=room, streams=[SubscribeFeed(feed=feed)])
        return await self._messages.send(session_id, handle_id, body)

    async def publish(
        self,
        session_id: int,
        handle_id: int,
        offer: str,
        videocodec: Optional[str] = None,
        audiocodec: Optional[str] = None,
        bitrate: int = 0,
    ) -> dict[str, Any]:
        """Publish with an SDP offer. Returns the ``ack``; the answer comes on the long poll."""
        body = PublishRequest(
            videocodec=videocodec,
            audiocodec=audiocodec,
            bitrate=bitrate if bitrate > 0 else None,
        )
        return await self._messages.send(session_id, handle_id, body, jsep=Jsep(type="offer", sdp=offer))

    async def unpublish(self, session_id: int, handle_id: int) -> dict[str, Any]:
        return await self._messages.send(session_id, handle_id, UnpublishRequest())

    async def leave(self, session_id: int, handle_id: int) -> dict[str, Any]:
        return await self._messages.send(session_id, handle_id, LeaveRequest())

    async def start(self, session_id: int, handle_id: int, answer: str) -> dict[str, Any]:
        """Complete a subscription with the local SDP answer."""
        return await self._messages.send(session_id, handle_id, StartRequest(), jsep=Jsep(type="answer", sdp=answer))
