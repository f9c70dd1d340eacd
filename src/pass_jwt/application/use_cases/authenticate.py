from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from ...config.settings import VerifierSettings
from ...domain.challenge import bind_challenge
from ...domain.claims import TokenClaims
from ...domain.constants import Algorithm
from ...domain.derivations import authority_from_audience, binding_from_jti, device_id_from_subject
from ...domain.entities import (
    DecodedToken,
    VerificationFailure,
    VerificationOutcome,
    VerifiedToken,
)
from ...domain.exceptions import (
    AlgorithmMismatchError,
    AuthenticationError,
    InvalidClaimError,
    InvalidIssuerError,
    InvalidSignatureError,
    TokenExpiredError,
    TokenNotYetValidError,
    UnknownKeyError,
    UnsupportedAlgorithmError,
)
from ...domain.keys import Jwk
from ...domain.ports import AlgorithmVerifier, KeyRegistry
from ...domain.token import decode_token
from ...domain.value_objects import IntrinsicChallenge, IssuerId

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class AuthenticatePassTokenUseCase:
    """
    Application use case:
    - Decode a compact token and read its claims
    - Cross-check issuer/algorithm and the validity window
    - Resolve the signing key and check the signature
    - Bind the token's challenge to the caller's intrinsic challenge
    - Derive DeviceId / AuthorityId / jti binding

    Stages run in that order and the first failure ends the call. Cheap
    structural and temporal checks come before key lookup and
    cryptography; challenge binding only runs on authentic tokens.

    Holds no per-call state: the same instance may serve concurrent
    callers as long as each passes an immutable registry snapshot.
    """

    algorithm_verifier: AlgorithmVerifier
    key_registry: Optional[KeyRegistry] = None
    settings: VerifierSettings = field(default_factory=VerifierSettings)

    def execute(
        self,
        token: str | bytes,
        *,
        issuer_id: str | bytes | IssuerId,
        intrinsic_challenge: IntrinsicChallenge,
        current_time: int,
        key_registry: Optional[KeyRegistry] = None,
    ) -> VerifiedToken:
        """
        Verify a token and return the facts it proves.

        `key_registry` overrides the registry given at construction.

        Raises:
            MalformedTokenError
            MissingClaimError / InvalidClaimError
            UnsupportedAlgorithmError
            InvalidIssuerError / AlgorithmMismatchError
            TokenExpiredError / TokenNotYetValidError
            UnknownKeyError
            InvalidSignatureError (incl. AlgorithmKeyMismatchError)
            InvalidChallengeError
            InvalidAudienceError
        """
        registry = key_registry if key_registry is not None else self.key_registry
        if registry is None:
            raise ValueError("No key registry given")
        if isinstance(current_time, bool) or not isinstance(current_time, int):
            raise TypeError("current_time must be an integer timestamp")
        if not isinstance(intrinsic_challenge, IntrinsicChallenge):
            raise TypeError("intrinsic_challenge must be an IntrinsicChallenge")

        # 1) decode, 2) claims
        decoded = decode_token(token, max_length=self.settings.max_token_length)
        claims = TokenClaims.from_payload(decoded.payload)

        # 3) structural cross-checks
        algorithm = self._check_algorithm(decoded.header.alg)
        issuer = self._check_issuer(issuer_id, claims)
        if claims.alg is not None and claims.alg != decoded.header.alg:
            raise AlgorithmMismatchError(
                f"Claim 'alg' {claims.alg!r} does not match header 'alg' {decoded.header.alg!r}"
            )
        if claims.kid is not None and claims.kid != decoded.header.kid:
            raise InvalidClaimError("kid", "Claim 'kid' does not match header 'kid'")

        # 4) validity window
        self._check_time(claims, current_time)

        # 5) key, 6) signature
        key = self._resolve_key(registry, issuer, decoded.header.kid)
        self._check_signature(algorithm, key, decoded)

        # 7) challenge
        bind_challenge(claims.challenge, intrinsic_challenge)

        # 8) derived facts
        verified = VerifiedToken(
            issuer=issuer,
            kid=decoded.header.kid,
            algorithm=algorithm,
            device_id=device_id_from_subject(claims.sub),
            authority_id=authority_from_audience(claims.aud),
            binding=binding_from_jti(claims.jti, self.settings.ss58_prefix),
            issued_at=claims.iat,
            expires_at=claims.exp,
            purpose=intrinsic_challenge.purpose,
        )
        logger.debug("Token verified for issuer=%s kid=%s", issuer, verified.kid)
        return verified

    def verify(
        self,
        token: str | bytes,
        *,
        issuer_id: str | bytes | IssuerId,
        intrinsic_challenge: IntrinsicChallenge,
        current_time: int,
        key_registry: Optional[KeyRegistry] = None,
    ) -> VerificationOutcome:
        """
        Same as `execute`, but verification failures come back as a
        VerificationOutcome instead of being raised.
        """
        try:
            verified = self.execute(
                token,
                issuer_id=issuer_id,
                intrinsic_challenge=intrinsic_challenge,
                current_time=current_time,
                key_registry=key_registry,
            )
        except AuthenticationError as exc:
            logger.debug("Token rejected: %s", exc.code)
            return VerificationOutcome(failure=VerificationFailure.from_error(exc))
        return VerificationOutcome(verified=verified)

    # ------------------------------------------------------------------ #
    # Internal: stages
    # ------------------------------------------------------------------ #

    def _check_algorithm(self, alg: str) -> Algorithm:
        try:
            algorithm = Algorithm(alg)
        except ValueError as exc:
            raise UnsupportedAlgorithmError(f"Unsupported algorithm {alg!r}") from exc
        if algorithm not in self.settings.allowed_algorithms:
            raise UnsupportedAlgorithmError(f"Algorithm {alg!r} is not allowed")
        return algorithm

    def _check_issuer(self, issuer_id: str | bytes | IssuerId, claims: TokenClaims) -> IssuerId:
        try:
            issuer = IssuerId.parse(issuer_id, max_length=self.settings.max_issuer_length)
        except ValueError as exc:
            raise InvalidIssuerError(f"Invalid issuer id: {exc}") from exc

        if claims.iss.encode("utf-8") != issuer.value:
            raise InvalidIssuerError(f"Token issuer {claims.iss!r} does not match {issuer}")
        return issuer

    @staticmethod
    def _check_time(claims: TokenClaims, current_time: int) -> None:
        if current_time >= claims.exp:
            raise TokenExpiredError("Token has expired")
        if current_time < claims.iat:
            raise TokenNotYetValidError("Token is not valid yet")

    @staticmethod
    def _resolve_key(registry: KeyRegistry, issuer: IssuerId, kid: str) -> Jwk:
        key = registry.resolve(issuer.value, kid)
        if key is None:
            raise UnknownKeyError(f"No key {kid!r} registered for issuer {issuer}")
        return key

    def _check_signature(self, algorithm: Algorithm, key: Jwk, decoded: DecodedToken) -> None:
        if not self.algorithm_verifier.verify(
            algorithm,
            key,
            decoded.signing_input,
            decoded.signature,
        ):
            raise InvalidSignatureError("Signature verification failed")
