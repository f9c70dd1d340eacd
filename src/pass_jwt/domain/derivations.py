"""
Deterministic derivations from verified claims.

- DeviceId:    BLAKE2b-256 of the UTF-8 `sub`.
- AuthorityId: authority component of `aud`:
    * `urn:authority:<id>`                  -> `<id>`
    * `<scheme>://[userinfo@]host[:port]/...` -> lowercased `host`
- jti binding, tried in this order:
    1. `0x` + 64 hex digits                  -> MethodHash
    2. SS58 address with a 32-byte account   -> SessionKey
"""

from __future__ import annotations

import hashlib
import re
from typing import Optional
from urllib.parse import urlsplit

import base58

from .exceptions import InvalidAudienceError, InvalidClaimError
from .value_objects import (
    AuthorityId,
    DeviceId,
    JtiBinding,
    MethodHash,
    SessionKey,
    parse_hex32,
)

_SCHEME_RE = re.compile(r"([A-Za-z][A-Za-z0-9+.-]*):(.*)", re.DOTALL)
_URN_AUTHORITY_RE = re.compile(r"authority:([A-Za-z0-9._~-]+)", re.IGNORECASE)
_FORBIDDEN_RE = re.compile(r"[\x00-\x20\x7f]")
_METHOD_HASH_RE = re.compile(r"0x[0-9a-fA-F]{64}")
_BASE58_RE = re.compile(r"[1-9A-HJ-NP-Za-km-z]+")

SS58_CHECKSUM_PREFIX = b"SS58PRE"
_SS58_ACCOUNT_LENGTH = 32
_SS58_CHECKSUM_LENGTH = 2


def device_id_from_subject(sub: str) -> DeviceId:
    return DeviceId(hashlib.blake2b(sub.encode("utf-8"), digest_size=32).digest())


def authority_from_audience(aud: str) -> AuthorityId:
    """
    Raises:
        InvalidAudienceError if no authority can be extracted.
    """
    match = _SCHEME_RE.fullmatch(aud)
    if match is None or _FORBIDDEN_RE.search(aud):
        raise InvalidAudienceError(f"Audience {aud!r} is not a URI")

    scheme, rest = match.group(1).lower(), match.group(2)

    if scheme == "urn":
        urn = _URN_AUTHORITY_RE.fullmatch(rest)
        if urn is None:
            raise InvalidAudienceError(f"Audience {aud!r} is not an authority URN")
        return AuthorityId(urn.group(1))

    if rest.startswith("//"):
        try:
            host = urlsplit(aud).hostname
        except ValueError as exc:
            raise InvalidAudienceError(f"Audience {aud!r} has a malformed authority") from exc
        if not host:
            raise InvalidAudienceError(f"Audience {aud!r} has no host")
        return AuthorityId(host)

    raise InvalidAudienceError(f"Audience {aud!r} has no authority component")


# --- jti ------------------------------------------------------------------


def _ss58_prefix(data: bytes) -> tuple[int, int]:
    """Return (network prefix, prefix length in bytes)."""
    first = data[0]
    if first < 64:
        return first, 1
    if first < 128:
        second = data[1]
        ident = ((first & 0x3F) << 2) | (second >> 6) | ((second & 0x3F) << 8)
        return ident, 2
    raise ValueError(f"reserved SS58 prefix byte {first}")


def decode_ss58(address: str) -> SessionKey:
    """
    Decode an SS58 address carrying a 32-byte account id.

    Raises:
        ValueError if the address is not valid SS58 or the checksum fails.
    """
    if not _BASE58_RE.fullmatch(address):
        raise ValueError("not base58")
    try:
        data = base58.b58decode(address)
    except ValueError as exc:
        raise ValueError(f"not base58: {exc}") from exc

    if len(data) < 1 + _SS58_ACCOUNT_LENGTH + _SS58_CHECKSUM_LENGTH:
        raise ValueError("too short for an SS58 account address")

    network_prefix, prefix_length = _ss58_prefix(data)
    if len(data) != prefix_length + _SS58_ACCOUNT_LENGTH + _SS58_CHECKSUM_LENGTH:
        raise ValueError(f"unexpected SS58 payload length {len(data)}")

    body, checksum = data[:-_SS58_CHECKSUM_LENGTH], data[-_SS58_CHECKSUM_LENGTH:]
    expected = hashlib.blake2b(SS58_CHECKSUM_PREFIX + body, digest_size=64).digest()
    if checksum != expected[:_SS58_CHECKSUM_LENGTH]:
        raise ValueError("SS58 checksum mismatch")

    return SessionKey(
        address=address,
        public_key=body[prefix_length:],
        network_prefix=network_prefix,
    )


def binding_from_jti(jti: str, ss58_prefix: Optional[int] = None) -> JtiBinding:
    """
    Classify and decode the `jti` claim.

    Raises:
        InvalidClaimError if `jti` is neither a method hash nor an SS58
        address (or the address is for another network than `ss58_prefix`).
    """
    if _METHOD_HASH_RE.fullmatch(jti):
        return MethodHash(parse_hex32(jti))

    try:
        session_key = decode_ss58(jti)
    except ValueError as exc:
        raise InvalidClaimError("jti", f"Claim 'jti' is neither a method hash nor an SS58 address: {exc}") from exc

    if ss58_prefix is not None and session_key.network_prefix != ss58_prefix:
        raise InvalidClaimError(
            "jti",
            f"Claim 'jti' is an address for network {session_key.network_prefix}, expected {ss58_prefix}",
        )
    return session_key
