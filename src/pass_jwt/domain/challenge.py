"""
Challenge binding, derivation rule version 1.

    context   = BLAKE2b-256(b"pass-jwt/v1/context/"   || purpose)
    challenge = BLAKE2b-256(b"pass-jwt/v1/challenge/" || context || intrinsic)

`purpose` is the ASCII value of `ChallengePurpose`. Token issuers must use
the same rule (see `derive_challenge`) for tokens to bind.
"""

from __future__ import annotations

import hashlib
import hmac

from .exceptions import InvalidChallengeError
from .value_objects import ChallengePair, IntrinsicChallenge

DERIVATION_VERSION = 1

_CONTEXT_DOMAIN = b"pass-jwt/v1/context/"
_CHALLENGE_DOMAIN = b"pass-jwt/v1/challenge/"


def _blake2b_256(*parts: bytes) -> bytes:
    h = hashlib.blake2b(digest_size=32)
    for part in parts:
        h.update(part)
    return h.digest()


def derive_challenge(intrinsic: IntrinsicChallenge) -> ChallengePair:
    context = _blake2b_256(_CONTEXT_DOMAIN, intrinsic.purpose.value.encode("ascii"))
    challenge = _blake2b_256(_CHALLENGE_DOMAIN, context, intrinsic.value)
    return ChallengePair(challenge=challenge, context=context)


def bind_challenge(claimed: ChallengePair, intrinsic: IntrinsicChallenge) -> ChallengePair:
    """
    Check the token's challenge claim against the caller's intrinsic value.

    Returns the derived pair on success.

    Raises:
        InvalidChallengeError on any mismatch.
    """
    expected = derive_challenge(intrinsic)

    # both fields are always compared
    context_ok = hmac.compare_digest(claimed.context, expected.context)
    challenge_ok = hmac.compare_digest(claimed.challenge, expected.challenge)
    if not (context_ok and challenge_ok):
        raise InvalidChallengeError("Challenge claim does not match the intrinsic challenge")
    return expected
