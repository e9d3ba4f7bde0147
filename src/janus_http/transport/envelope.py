"""
Envelope construction and parsing.
"""

import time
from typing import Any, Optional, Union

from pydantic import ValidationError

from janus_http.errors import DecodeError, ProtocolError
from janus_http.models.envelope import JanusOperation, JanusRequest, JanusResponse, Jsep


def new_transaction() -> str:
    """Transaction id from a monotonic clock tick. Never checked on the way back."""
    return str(time.monotonic_ns())


def build_request(
    op: JanusOperation,
    body: Optional[dict[str, Any]] = None,
    jsep: Optional[Jsep] = None,
    plugin: Optional[str] = None,
    candidate: Optional[Union[dict[str, Any], list[dict[str, Any]]]] = None,
) -> dict[str, Any]:
    """Build a request envelope as a dict ready to POST.

    A list of candidates goes out as a trickle batch under ``candidates``.
    """
    batch = candidate if isinstance(candidate, list) else None
    request = JanusRequest(
        janus=op,
        transaction=new_transaction(),
        plugin=plugin,
        body=body,
        jsep=jsep,
        candidate=None if batch is not None else candidate,
        candidates=batch,
    )
    return request.model_dump(mode="json", exclude_none=True)


def parse_response(raw: Any) -> JanusResponse:
    """Parse a response or event envelope. Raises DecodeError if the shape is wrong."""
    if not isinstance(raw, dict):
        raise DecodeError(f"Expected a JSON object, got {type(raw).__name__}")
    try:
        return JanusResponse.model_validate(raw)
    except ValidationError as e:
        raise DecodeError(f"Malformed Janus envelope: {e.error_count()} validation errors", details={"raw": raw})


def raise_for_error(resp: JanusResponse) -> JanusResponse:
    if resp.op == JanusOperation.ERROR:
        err = resp.error
        raise ProtocolError(
            err.code if err else 0,
            err.reason if err else "unknown error",
            details={"transaction": resp.transaction, "session_id": resp.session_id},
        )
    return resp
