"""
Janus envelope: the request/response/event wrapper used by every call.
"""

from enum import Enum
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class JanusOperation(str, Enum):
    UNKNOWN = "unknown"
    ACK = "ack"
    ATTACH = "attach"
    CREATE = "create"
    DESTROY = "destroy"
    DETACH = "detach"
    DETACHED = "detached"
    ERROR = "error"
    EVENT = "event"
    HANGUP = "hangup"
    HINT = "hint"
    INFO = "info"
    KEEPALIVE = "keepalive"
    MEDIA = "media"
    MESSAGE = "message"
    SERVER_INFO = "server_info"
    SLOWLINK = "slowlink"
    SUCCESS = "success"
    TIMEOUT = "timeout"
    TRICKLE = "trickle"
    WEBRTCUP = "webrtcup"

    @classmethod
    def _missing_(cls, value: object) -> "JanusOperation":
        # The gateway grows new verbs over time
        return cls.UNKNOWN


class Jsep(BaseModel):
    type: Literal["offer", "answer"]
    sdp: str
    trickle: bool = True


class JanusErrorInfo(BaseModel):
    code: int = 0
    reason: str = ""


class JanusData(BaseModel):
    """``data`` block of a success response; ``id`` is the newly allocated session or handle."""
    model_config = ConfigDict(extra="allow")

    id: int = 0


class PluginData(BaseModel):
    plugin: str = ""
    data: dict[str, Any] = Field(default_factory=dict)


class JanusRequest(BaseModel):
    janus: JanusOperation
    transaction: str
    plugin: Optional[str] = None
    body: Optional[dict[str, Any]] = None
    jsep: Optional[Jsep] = None
    candidate: Optional[dict[str, Any]] = None
    candidates: Optional[list[dict[str, Any]]] = None


class JanusResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    janus: str
    session_id: int = 0
    transaction: Optional[str] = None
    sender: int = 0
    hint: Optional[str] = None
    data: Optional[JanusData] = None
    error: Optional[JanusErrorInfo] = None
    plugindata: Optional[PluginData] = None
    jsep: Optional[Jsep] = None

    @property
    def op(self) -> JanusOperation:
        return JanusOperation(self.janus)

    @property
    def plugin_payload(self) -> dict[str, Any]:
        """``plugindata.data`` or an empty mapping."""
        return self.plugindata.data if self.plugindata else {}
