from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .constants import Algorithm, ChallengePurpose
from .exceptions import AuthenticationError, ClaimError
from .value_objects import AuthorityId, DeviceId, IssuerId, JtiBinding, MethodHash, SessionKey


@dataclass(frozen=True, slots=True)
class TokenHeader:
    """
    Decoded JOSE header. `alg` is kept verbatim; whether it names a
    supported algorithm is decided by the authenticator.
    """
    alg: str
    kid: str
    typ: Optional[str] = None


@dataclass(frozen=True, slots=True)
class DecodedToken:
    """
    A compact token split into its parts.

    `signing_input` is the exact `header.payload` byte span as received;
    signatures are checked against it, never against a re-serialization.
    """
    header: TokenHeader
    payload: Mapping[str, Any]
    signing_input: bytes
    signature: bytes


@dataclass(frozen=True, slots=True)
class VerifiedToken:
    """
    Facts extracted from a token that passed every verification stage.
    """
    issuer: IssuerId
    kid: str
    algorithm: Algorithm
    device_id: DeviceId
    authority_id: AuthorityId
    binding: JtiBinding
    issued_at: int
    expires_at: int
    purpose: ChallengePurpose

    # --- Read-only shortcuts ----------------------------------------------

    @property
    def session_key(self) -> Optional[SessionKey]:
        return self.binding if isinstance(self.binding, SessionKey) else None

    @property
    def method_hash(self) -> Optional[MethodHash]:
        return self.binding if isinstance(self.binding, MethodHash) else None


@dataclass(frozen=True, slots=True)
class VerificationFailure:
    """
    Value form of a verification error, comparable across calls.
    """
    code: str
    message: str
    claim: Optional[str] = None

    @classmethod
    def from_error(cls, exc: AuthenticationError) -> VerificationFailure:
        return cls(
            code=exc.code,
            message=str(exc),
            claim=exc.claim if isinstance(exc, ClaimError) else None,
        )


@dataclass(frozen=True, slots=True)
class VerificationOutcome:
    """
    Either a verified token or a failure, never both.
    """
    verified: Optional[VerifiedToken] = None
    failure: Optional[VerificationFailure] = None

    def __post_init__(self) -> None:
        if (self.verified is None) == (self.failure is None):
            raise ValueError("Outcome must hold exactly one of verified/failure")

    @property
    def ok(self) -> bool:
        return self.verified is not None
