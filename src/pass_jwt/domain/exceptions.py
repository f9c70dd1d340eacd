from __future__ import annotations


class AuthenticationError(Exception):
    """Raised when a credential token cannot be accepted."""
    code = "authentication_failed"


class TokenExpiredError(AuthenticationError):
    """Raised when token has expired."""
    code = "expired_token"


class TokenNotYetValidError(AuthenticationError):
    """Raised when the current time is before the token's `iat`."""
    code = "not_yet_valid"


class InvalidTokenError(AuthenticationError):
    """Raised when token is malformed or invalid."""
    code = "invalid_token"


class MalformedTokenError(InvalidTokenError):
    """Raised when the compact token cannot be decoded."""
    code = "malformed_token"


class ClaimError(InvalidTokenError):
    """Base for failures tied to one named claim."""
    default_message = "Invalid claim"

    def __init__(self, claim: str, message: str | None = None) -> None:
        self.claim = claim
        super().__init__(message or f"{self.default_message}: {claim}")


class MissingClaimError(ClaimError):
    code = "missing_claim"
    default_message = "Missing required claim"


class InvalidClaimError(ClaimError):
    code = "invalid_claim"
    default_message = "Invalid claim"


class UnsupportedAlgorithmError(InvalidTokenError):
    code = "unsupported_algorithm"


class InvalidIssuerError(InvalidTokenError):
    code = "invalid_issuer"


class AlgorithmMismatchError(InvalidTokenError):
    """Raised when the `alg` claim disagrees with the header."""
    code = "algorithm_mismatch"


class UnknownKeyError(InvalidTokenError):
    code = "unknown_key"


class InvalidSignatureError(InvalidTokenError):
    code = "invalid_signature"


class AlgorithmKeyMismatchError(InvalidSignatureError):
    """Raised when the resolved key cannot be used with the token's algorithm."""
    code = "algorithm_key_mismatch"


class InvalidChallengeError(InvalidTokenError):
    code = "invalid_challenge"


class InvalidAudienceError(InvalidTokenError):
    code = "invalid_audience"


class KeySetLoadError(Exception):
    """Raised when a JWKS document cannot be fetched or parsed."""
    pass
