from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Optional

from ..domain.constants import Algorithm, MAX_ISSUER_LENGTH, MAX_TOKEN_LENGTH


@dataclass(frozen=True, slots=True)
class VerifierSettings:
    """
    Verification limits and policy.

    Host code decides how to construct this (env, config file, etc.).
    """
    max_token_length: int = MAX_TOKEN_LENGTH
    max_issuer_length: int = MAX_ISSUER_LENGTH
    allowed_algorithms: FrozenSet[Algorithm] = field(
        default_factory=lambda: frozenset(Algorithm)
    )

    # Only accept session keys for this SS58 network (None: any network)
    ss58_prefix: Optional[int] = None

    # JWKS loaders
    http_timeout: float = 10.0

    def __post_init__(self) -> None:
        if not 0 < self.max_token_length <= MAX_TOKEN_LENGTH:
            raise ValueError(f"max_token_length must be 1..{MAX_TOKEN_LENGTH}")
        if not 0 < self.max_issuer_length <= MAX_ISSUER_LENGTH:
            raise ValueError(f"max_issuer_length must be 1..{MAX_ISSUER_LENGTH}")
        if not self.allowed_algorithms:
            raise ValueError("allowed_algorithms must not be empty")
        object.__setattr__(self, "allowed_algorithms", frozenset(self.allowed_algorithms))
        if self.ss58_prefix is not None and not 0 <= self.ss58_prefix < 16384:
            raise ValueError("ss58_prefix must be 0..16383")
        if self.http_timeout <= 0:
            raise ValueError("http_timeout must be positive")
