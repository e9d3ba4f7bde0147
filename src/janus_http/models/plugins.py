"""
Plugin identifiers and per-action message bodies.

Each body model is one variant of what a plugin accepts in ``body``. The
gateway validates them, not this package, so any plain ``dict`` is also
accepted where a body is expected.
"""

from enum import Enum
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, Field, model_validator


class JanusPlugin(str, Enum):
    ECHO_TEST = "janus.plugin.echotest"
    VIDEO_ROOM = "janus.plugin.videoroom"
    STREAMING = "janus.plugin.streaming"


PLUGIN_ALIASES = {
    "echo": JanusPlugin.ECHO_TEST,
    "echotest": JanusPlugin.ECHO_TEST,
    "videoroom": JanusPlugin.VIDEO_ROOM,
    "streaming": JanusPlugin.STREAMING,
}


def resolve_plugin(plugin: Union[str, JanusPlugin]) -> str:
    """Map a short alias or full plugin id onto the id sent in ``attach``."""
    if isinstance(plugin, JanusPlugin):
        return plugin.value
    if plugin in PLUGIN_ALIASES:
        return PLUGIN_ALIASES[plugin].value
    if plugin.startswith("janus.plugin."):
        return plugin
    raise ValueError(f"Unknown Janus plugin: {plugin!r}")


class VideoRoomRequest:
    LIST = "list"
    LISTPARTICIPANTS = "listparticipants"
    JOIN = "join"
    START = "start"
    CREATE = "create"
    DESTROY = "destroy"
    DETACH = "detach"
    PUBLISH = "publish"
    UNPUBLISH = "unpublish"
    LEAVE = "leave"
    WATCH = "watch"


class ParticipantType:
    PUBLISHER = "publisher"
    SUBSCRIBER = "subscriber"


# --- shared ---

class ListRequest(BaseModel):
    request: Literal["list"] = "list"


class DetachRequest(BaseModel):
    request: Literal["detach"] = "detach"


class StartRequest(BaseModel):
    request: Literal["start"] = "start"


# --- janus.plugin.videoroom ---

class ListParticipantsRequest(BaseModel):
    request: Literal["listparticipants"] = "listparticipants"
    room: int


class CreateRoomRequest(BaseModel):
    request: Literal["create"] = "create"
    room: int
    permanent: Optional[bool] = None
    description: Optional[str] = None
    secret: Optional[str] = None
    pin: Optional[str] = None
    is_private: bool = False
    allowed: Optional[list[str]] = None
    bitrate: Optional[int] = None
    fir_freq: Optional[int] = None
    record: bool = False
    rec_dir: Optional[str] = None
    videocodec: Optional[str] = "vp9,h264,vp8"
    h264_profile: Optional[str] = "42e01f"


class DestroyRoomRequest(BaseModel):
    request: Literal["destroy"] = "destroy"
    room: int
    secret: Optional[str] = None
    permanent: Optional[bool] = None


class JoinRoomRequest(BaseModel):
    request: Literal["join"] = "join"
    room: int
    ptype: str = ParticipantType.PUBLISHER
    id: Optional[int] = None
    display: Optional[str] = None
    token: Optional[str] = None


class SubscribeFeed(BaseModel):
    feed: int
    mid: Optional[str] = None


class SubscribeRequest(BaseModel):
    request: Literal["join"] = "join"
    ptype: Literal["subscriber"] = "subscriber"
    room: int
    streams: list[SubscribeFeed]


class PublishRequest(BaseModel):
    request: Literal["publish"] = "publish"
    audiocodec: Optional[str] = None
    videocodec: Optional[str] = None
    bitrate: Optional[int] = None
    record: Optional[bool] = None
    filename: Optional[str] = None
    display: Optional[str] = None


class UnpublishRequest(BaseModel):
    request: Literal["unpublish"] = "unpublish"


class LeaveRequest(BaseModel):
    request: Literal["leave"] = "leave"


# --- janus.plugin.streaming ---

class StreamMedia(BaseModel):
    type: Literal["audio", "video", "data"]
    mid: str
    port: int
    codec: Optional[str] = None
    pt: Optional[int] = None
    payload_type: Optional[int] = None

    @model_validator(mode="after")
    def _mirror_pt(self) -> "StreamMedia":
        # Older Janus releases read payload_type, newer ones pt
        if self.payload_type is None:
            self.payload_type = self.pt
        return self


class CreateStreamRequest(BaseModel):
    request: Literal["create"] = "create"
    type: str = "rtp"
    id: int
    name: str
    description: Optional[str] = None
    is_private: bool = False
    permanent: bool = True
    media: list[StreamMedia] = Field(default_factory=list)


class DestroyStreamRequest(BaseModel):
    request: Literal["destroy"] = "destroy"
    id: int
    secret: Optional[str] = None
    permanent: Optional[bool] = None


class WatchStream(BaseModel):
    mid: str


class WatchRequest(BaseModel):
    request: Literal["watch"] = "watch"
    id: int
    offer_audio: Optional[bool] = None
    offer_video: Optional[bool] = True
    streams: Optional[list[WatchStream]] = None


# --- janus.plugin.echotest ---

class EchoTestRequest(BaseModel):
    audio: bool = True
    video: bool = True
    bitrate: Optional[int] = None


PluginBody = Union[
    ListRequest,
    DetachRequest,
    StartRequest,
    ListParticipantsRequest,
    CreateRoomRequest,
    DestroyRoomRequest,
    JoinRoomRequest,
    SubscribeRequest,
    PublishRequest,
    UnpublishRequest,
    LeaveRequest,
    CreateStreamRequest,
    DestroyStreamRequest,
    WatchRequest,
    EchoTestRequest,
    dict[str, Any],
]


def body_to_dict(body: PluginBody) -> dict[str, Any]:
    """Wire form of a body variant; unset optional keys are left out."""
    if isinstance(body, BaseModel):
        return body.model_dump(mode="json", exclude_none=True)
    return dict(body)
