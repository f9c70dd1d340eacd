# src/pass_jwt/domain/value_objects.py

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Mapping

from .constants import ChallengePurpose, MAX_INTRINSIC_LENGTH, MAX_ISSUER_LENGTH

_HEX32_RE = re.compile(r"0x[0-9a-fA-F]{64}")


def parse_hex32(value: Any) -> bytes:
    """
    Parse a `0x`-prefixed, 64 hex digit string into 32 bytes.
    Hex digits are case-insensitive.
    """
    if not isinstance(value, str) or not _HEX32_RE.fullmatch(value):
        raise ValueError(f"Expected 0x-prefixed 32-byte hex string, got {value!r}")
    return bytes.fromhex(value[2:])


def to_hex32(value: bytes) -> str:
    return "0x" + value.hex()


# --- Issuer ---------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class IssuerId:
    """
    Opaque issuer identifier as registered in the key registry.

    The same bytes are expected in the token's `iss` claim (UTF-8 encoded).
    """
    value: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.value, bytes):
            raise ValueError("Issuer id must be bytes")
        if not self.value:
            raise ValueError("Issuer id must not be empty")

    @classmethod
    def parse(cls, raw: str | bytes | IssuerId, max_length: int = MAX_ISSUER_LENGTH) -> IssuerId:
        if isinstance(raw, IssuerId):
            issuer = raw
        elif isinstance(raw, str):
            issuer = cls(raw.encode("utf-8"))
        elif isinstance(raw, (bytes, bytearray)):
            issuer = cls(bytes(raw))
        else:
            raise ValueError(f"Unsupported issuer id type: {type(raw).__name__}")

        if len(issuer.value) > max_length:
            raise ValueError(
                f"Issuer id is {len(issuer.value)} bytes, maximum is {max_length}"
            )
        return issuer

    def __str__(self) -> str:
        return self.value.decode("utf-8", errors="backslashreplace")


# --- Values derived from claims -------------------------------------------


@dataclass(frozen=True, slots=True)
class DeviceId:
    """
    32-byte device identifier, the BLAKE2b-256 digest of the `sub` claim.
    """
    value: bytes

    @property
    def hex(self) -> str:
        return to_hex32(self.value)

    def __str__(self) -> str:
        return self.hex


@dataclass(frozen=True, slots=True)
class AuthorityId:
    """
    Target authority, extracted from the `aud` claim.
    """
    value: str

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class SessionKey:
    """
    Session key carried as an SS58 address in the `jti` claim.
    """
    address: str
    public_key: bytes
    network_prefix: int

    def __str__(self) -> str:
        return self.address


@dataclass(frozen=True, slots=True)
class MethodHash:
    """
    32-byte hash of a method identifier carried in the `jti` claim.
    """
    value: bytes

    @property
    def hex(self) -> str:
        return to_hex32(self.value)

    def __str__(self) -> str:
        return self.hex


JtiBinding = SessionKey | MethodHash


# --- Challenge ------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class IntrinsicChallenge:
    """
    Per-attempt value supplied by the calling environment.

    `purpose` tells enrollment and session authentication apart; it feeds
    the derived challenge context.
    """
    value: bytes
    purpose: ChallengePurpose = ChallengePurpose.AUTHENTICATE_SESSION

    def __post_init__(self) -> None:
        if not isinstance(self.value, bytes):
            raise ValueError("Intrinsic challenge must be bytes")
        if not 0 < len(self.value) <= MAX_INTRINSIC_LENGTH:
            raise ValueError(
                f"Intrinsic challenge must be 1..{MAX_INTRINSIC_LENGTH} bytes"
            )
        if not isinstance(self.purpose, ChallengePurpose):
            raise ValueError(f"Unknown challenge purpose: {self.purpose!r}")


@dataclass(frozen=True, slots=True)
class ChallengePair:
    """
    The (challenge, context) pair carried by the `challenge` claim.
    """
    challenge: bytes
    context: bytes

    @classmethod
    def from_claim(cls, raw: Any) -> ChallengePair:
        if not isinstance(raw, Mapping):
            raise ValueError("Challenge claim must be an object")
        return cls(
            challenge=parse_hex32(raw.get("challenge")),
            context=parse_hex32(raw.get("context")),
        )

    def to_claim(self) -> dict[str, str]:
        return {
            "challenge": to_hex32(self.challenge),
            "context": to_hex32(self.context),
        }
