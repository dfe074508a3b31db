"""
Tagged byte encoding for fetch outcomes.

Every entry starts with a one byte tag:

- ``O``: JSON text of a structured payload
- ``S``: UTF-8 text payload
- ``B``: raw binary payload
- ``E``: cached negative outcome, followed by ``404`` or ``403``

Opaque failures have no encoding and are never written.
"""

import json
from typing import Optional, Union

from shared.errors import DecodeError, EncodeError, UpstreamError
from .models import FetchResult, error_for_status, status_code

TAG_OBJECT = b"O"
TAG_STRING = b"S"
TAG_BINARY = b"B"
TAG_ERROR = b"E"

_ERROR_BODIES = (b"404", b"403")


def encode(result: Optional[FetchResult] = None, error: Optional[BaseException] = None) -> Optional[bytes]:
    """Encode a fetch outcome, or return None when it must not be cached."""
    if error is not None:
        status = status_code(error)
        if status is None:
            return None
        return TAG_ERROR + str(status).encode("ascii")

    payload = result.payload if result is not None else None

    if payload is None:
        return TAG_BINARY
    if isinstance(payload, (bytes, bytearray, memoryview)):
        return TAG_BINARY + bytes(payload)
    if isinstance(payload, str):
        return TAG_STRING + payload.encode("utf-8")

    try:
        text = json.dumps(payload, separators=(",", ":"))
    except (TypeError, ValueError) as e:
        raise EncodeError(f"Payload is not JSON serializable: {e}",
                          details={"payload_type": type(payload).__name__})
    return TAG_OBJECT + text.encode("utf-8")


def decode(entry: bytes) -> Union[FetchResult, UpstreamError]:
    """Decode a stored entry.

    Cached negative outcomes are returned (not raised) as a fresh
    ``NotFoundError``/``ForbiddenError`` flagged ``cached=True``.

    Raises:
        DecodeError: the entry is empty, carries an unknown tag, or its
            body does not parse.
    """
    if not entry:
        raise DecodeError("Empty cache value")

    tag, body = bytes(entry[:1]), bytes(entry[1:])

    if tag == TAG_ERROR:
        if body not in _ERROR_BODIES:
            raise DecodeError("Invalid cached error status", details={"status": body.decode("latin-1")})
        return error_for_status(int(body), cached=True)

    try:
        if tag == TAG_OBJECT:
            return FetchResult(json.loads(body.decode("utf-8")))
        if tag == TAG_STRING:
            return FetchResult(body.decode("utf-8"))
    except ValueError as e:
        raise DecodeError(f"Corrupt cache value: {e}", details={"tag": tag.decode("latin-1")})

    if tag == TAG_BINARY:
        return FetchResult(body)

    raise DecodeError("Invalid cache value", details={"tag": tag.decode("latin-1")})
