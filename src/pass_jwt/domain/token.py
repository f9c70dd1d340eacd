"""
Compact token decoding.

Splits `header.payload.signature`, decodes each base64url segment and
parses header/payload as JSON objects. No cryptography happens here.
"""

from __future__ import annotations

import binascii
import json
import re
from types import MappingProxyType
from typing import Any

from jwt.utils import base64url_decode, base64url_encode

from .constants import MAX_TOKEN_LENGTH
from .entities import DecodedToken, TokenHeader
from .exceptions import MalformedTokenError

_SEGMENT_RE = re.compile(r"[A-Za-z0-9_-]+")


def _decode_segment(segment: str, part: str) -> bytes:
    # length % 4 == 1 can never come out of an encoder
    if not _SEGMENT_RE.fullmatch(segment) or len(segment) % 4 == 1:
        raise MalformedTokenError(f"Token {part} is not valid base64url")
    try:
        raw = base64url_decode(segment)
    except (binascii.Error, ValueError) as exc:
        raise MalformedTokenError(f"Token {part} is not valid base64url") from exc

    # Reject segments with non-zero trailing bits: each byte string has
    # exactly one accepted encoding.
    if base64url_encode(raw).decode("ascii") != segment:
        raise MalformedTokenError(f"Token {part} is not canonical base64url")
    return raw


def _reject_duplicates(pairs: list[tuple[str, Any]]) -> dict[str, Any]:
    obj: dict[str, Any] = {}
    for name, value in pairs:
        if name in obj:
            raise ValueError(f"duplicate member {name!r}")
        obj[name] = value
    return obj


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-finite number {name}")


def _parse_object(raw: bytes, part: str) -> dict[str, Any]:
    try:
        obj = json.loads(
            raw.decode("utf-8"),
            object_pairs_hook=_reject_duplicates,
            parse_constant=_reject_constant,
        )
    except (UnicodeDecodeError, ValueError) as exc:
        raise MalformedTokenError(f"Token {part} is not valid JSON: {exc}") from exc

    # "\ud800" escapes parse into lone surrogates, which have no UTF-8 form
    try:
        json.dumps(obj, ensure_ascii=False).encode("utf-8")
    except UnicodeEncodeError as exc:
        raise MalformedTokenError(f"Token {part} contains an unpaired surrogate escape") from exc

    if not isinstance(obj, dict):
        raise MalformedTokenError(f"Token {part} must be a JSON object")
    return obj


def _parse_header(obj: dict[str, Any]) -> TokenHeader:
    alg = obj.get("alg")
    if not isinstance(alg, str) or not alg:
        raise MalformedTokenError("Token header has no 'alg'")

    kid = obj.get("kid")
    if not isinstance(kid, str) or not kid:
        raise MalformedTokenError("Token header has no 'kid'")

    typ = obj.get("typ")
    if typ is not None and not isinstance(typ, str):
        raise MalformedTokenError("Token header 'typ' must be a string")

    return TokenHeader(alg=alg, kid=kid, typ=typ)


def decode_token(token: str | bytes, max_length: int = MAX_TOKEN_LENGTH) -> DecodedToken:
    """
    Decode a compact token without verifying it.

    Raises:
        MalformedTokenError if the token is too long, is not ASCII, does not
        have exactly three segments, or a segment does not decode.
    """
    if isinstance(token, str):
        data = token.encode("utf-8")
    elif isinstance(token, (bytes, bytearray)):
        data = bytes(token)
    else:
        raise MalformedTokenError(f"Token must be str or bytes, got {type(token).__name__}")

    if len(data) > max_length:
        raise MalformedTokenError(f"Token is {len(data)} bytes, maximum is {max_length}")

    try:
        text = data.decode("ascii")
    except UnicodeDecodeError as exc:
        raise MalformedTokenError("Token must be ASCII") from exc

    segments = text.split(".")
    if len(segments) != 3:
        raise MalformedTokenError(f"Token must have 3 segments, got {len(segments)}")

    header_b64, payload_b64, signature_b64 = segments
    header = _parse_header(_parse_object(_decode_segment(header_b64, "header"), "header"))
    payload = _parse_object(_decode_segment(payload_b64, "payload"), "payload")
    signature = _decode_segment(signature_b64, "signature")

    return DecodedToken(
        header=header,
        payload=MappingProxyType(payload),
        signing_input=f"{header_b64}.{payload_b64}".encode("ascii"),
        signature=signature,
    )
