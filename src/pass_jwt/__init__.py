"""
pass_jwt

Verification engine for compact credential tokens signed by registered
issuers: decodes the token, checks claims, signature and challenge
binding, and derives DeviceId / AuthorityId / session binding.
"""

import logging

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

from .domain.constants import Algorithm, ChallengePurpose, KeyType
from .domain.entities import (
    DecodedToken,
    TokenHeader,
    VerificationFailure,
    VerificationOutcome,
    VerifiedToken,
)
from .domain.exceptions import (
    AuthenticationError,
    InvalidTokenError,
    TokenExpiredError,
    TokenNotYetValidError,
    MalformedTokenError,
    MissingClaimError,
    InvalidClaimError,
    UnsupportedAlgorithmError,
    InvalidIssuerError,
    AlgorithmMismatchError,
    UnknownKeyError,
    InvalidSignatureError,
    AlgorithmKeyMismatchError,
    InvalidChallengeError,
    InvalidAudienceError,
    KeySetLoadError,
)
from .domain.keys import EcJwk, Jwk, KeySet, OctJwk, OkpJwk, RsaJwk, parse_jwk
from .domain.value_objects import (
    AuthorityId,
    ChallengePair,
    DeviceId,
    IntrinsicChallenge,
    IssuerId,
    MethodHash,
    SessionKey,
)
from .domain.ports import AlgorithmVerifier, KeyRegistry
from .domain.token import decode_token
from .domain.claims import TokenClaims
from .domain.challenge import DERIVATION_VERSION, derive_challenge

from .application.use_cases.authenticate import AuthenticatePassTokenUseCase
from .config import VerifierSettings, settings_from_env

# Adapters
from .adapters.pyjwt.algorithm_verifier import PyJWTAlgorithmVerifier
from .adapters.memory.key_registry import InMemoryKeyRegistry
from .adapters.jwks.loader import AsyncJwksHttpLoader, JwksHttpLoader

from .factory import create_authenticator, create_authenticator_from_env

__all__ = [
    "__version__",
    # domain core
    "Algorithm",
    "ChallengePurpose",
    "KeyType",
    "DecodedToken",
    "TokenHeader",
    "TokenClaims",
    "VerifiedToken",
    "VerificationFailure",
    "VerificationOutcome",
    "Jwk",
    "RsaJwk",
    "EcJwk",
    "OkpJwk",
    "OctJwk",
    "KeySet",
    "parse_jwk",
    "IssuerId",
    "DeviceId",
    "AuthorityId",
    "SessionKey",
    "MethodHash",
    "ChallengePair",
    "IntrinsicChallenge",
    "KeyRegistry",
    "AlgorithmVerifier",
    "decode_token",
    "derive_challenge",
    "DERIVATION_VERSION",
    # exceptions
    "AuthenticationError",
    "InvalidTokenError",
    "TokenExpiredError",
    "TokenNotYetValidError",
    "MalformedTokenError",
    "MissingClaimError",
    "InvalidClaimError",
    "UnsupportedAlgorithmError",
    "InvalidIssuerError",
    "AlgorithmMismatchError",
    "UnknownKeyError",
    "InvalidSignatureError",
    "AlgorithmKeyMismatchError",
    "InvalidChallengeError",
    "InvalidAudienceError",
    "KeySetLoadError",
    # use cases / config
    "AuthenticatePassTokenUseCase",
    "VerifierSettings",
    "settings_from_env",
    "create_authenticator",
    "create_authenticator_from_env",
    # adapters
    "PyJWTAlgorithmVerifier",
    "InMemoryKeyRegistry",
    "JwksHttpLoader",
    "AsyncJwksHttpLoader",
]
