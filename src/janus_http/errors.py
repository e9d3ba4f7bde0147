"""
Janus client error types.
"""

from typing import Any, Optional, Union


class JanusError(Exception):
    def __init__(self, code: Union[int, str], message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.details = details


class TransportError(JanusError):
    """Network or HTTP level failure: connection refused, timeout, non-2xx."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__("transport_error", message)
        self.status_code = status_code


class ProtocolError(JanusError):
    """The gateway answered with ``janus: error``."""

    def __init__(self, code: int, reason: str, details: Optional[dict[str, Any]] = None):
        super().__init__(code, f"Janus error {code}: {reason}", details)
        self.reason = reason


class LifecycleError(JanusError):
    def __init__(self, message: str, code: str = "lifecycle_error"):
        super().__init__(code, message)


class DecodeError(JanusError):
    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__("decode_error", message, details)
