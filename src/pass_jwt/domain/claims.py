from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .exceptions import InvalidAudienceError, InvalidClaimError, MissingClaimError
from .value_objects import ChallengePair

REQUIRED_CLAIMS = ("iss", "sub", "aud", "iat", "exp", "jti", "challenge")

_URI_SCHEME_RE = re.compile(r"[A-Za-z][A-Za-z0-9+.-]*:")


def _string(payload: Mapping[str, Any], name: str) -> str:
    value = payload[name]
    if not isinstance(value, str) or not value:
        raise InvalidClaimError(name, f"Claim {name!r} must be a non-empty string")
    return value


def _timestamp(payload: Mapping[str, Any], name: str) -> int:
    value = payload[name]
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidClaimError(name, f"Claim {name!r} must be a non-negative integer")
    return value


def _optional_string(payload: Mapping[str, Any], name: str) -> Optional[str]:
    if name not in payload:
        return None
    return _string(payload, name)


@dataclass(frozen=True, slots=True)
class TokenClaims:
    """
    Typed view over a decoded payload.

    Only structure is checked here; issuer match, validity window and
    challenge binding are decided by the authenticator.
    """
    iss: str
    sub: str
    aud: str
    iat: int
    exp: int
    jti: str
    challenge: ChallengePair
    alg: Optional[str] = None
    kid: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> TokenClaims:
        """
        Raises:
            MissingClaimError
            InvalidClaimError
            InvalidAudienceError
        """
        for name in REQUIRED_CLAIMS:
            if name not in payload:
                raise MissingClaimError(name)

        iss = _string(payload, "iss")
        sub = _string(payload, "sub")

        aud = payload["aud"]
        if not isinstance(aud, str) or not _URI_SCHEME_RE.match(aud):
            raise InvalidAudienceError(f"Claim 'aud' must be a URI, got {aud!r}")

        iat = _timestamp(payload, "iat")
        exp = _timestamp(payload, "exp")
        if exp <= iat:
            raise InvalidClaimError("exp", "Claim 'exp' must be later than 'iat'")

        jti = _string(payload, "jti")

        try:
            challenge = ChallengePair.from_claim(payload["challenge"])
        except ValueError as exc:
            raise InvalidClaimError("challenge", f"Invalid claim 'challenge': {exc}") from exc

        return cls(
            iss=iss,
            sub=sub,
            aud=aud,
            iat=iat,
            exp=exp,
            jti=jti,
            challenge=challenge,
            alg=_optional_string(payload, "alg"),
            kid=_optional_string(payload, "kid"),
        )
