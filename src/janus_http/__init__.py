"""
janus-http: Janus WebRTC gateway client for Python.

REST + long-poll signaling: sessions, plugin handles, plugin messages and
asynchronous events.
"""

from janus_http.client import AsyncJanus, Janus
from janus_http.errors import DecodeError, JanusError, LifecycleError, ProtocolError, TransportError
from janus_http.models.envelope import JanusOperation, JanusResponse, Jsep
from janus_http.models.plugins import JanusPlugin
from janus_http.session import JanusSession, has_jsep

__version__ = "0.1.0"
__all__ = [
    "AsyncJanus",
    "Janus",
    "JanusSession",
    "JanusError",
    "TransportError",
    "ProtocolError",
    "LifecycleError",
    "DecodeError",
    "JanusOperation",
    "JanusResponse",
    "Jsep",
    "JanusPlugin",
    "has_jsep",
]
