from __future__ import annotations

from typing import Protocol

from .constants import Algorithm
from .keys import Jwk


class KeyRegistry(Protocol):
    """
    Port for read-only key lookup.

    Implementations are snapshots owned by the caller (in-memory, loaded
    from JWKS endpoints, backed by chain storage, ...). The authenticator
    calls `resolve` once per verification and never caches the result.
    """

    def resolve(self, issuer: bytes, kid: str) -> Jwk | None:
        """
        Return the key registered under `kid` for `issuer`, or None when the
        issuer is unknown/disabled or has no such key.
        """
        ...


class AlgorithmVerifier(Protocol):
    """
    Port for algorithm-specific signature checks.

    Implementations live in the adapters layer (e.g. PyJWT-backed verifier).
    """

    def verify(
        self,
        alg: Algorithm,
        key: Jwk,
        signed_bytes: bytes,
        signature: bytes,
    ) -> bool:
        """
        Check `signature` over `signed_bytes` with `key`.

        Should:
          - return False when the signature does not match
          - be deterministic and free of side effects
        Raises:
          - AlgorithmKeyMismatchError if `key` cannot be used with `alg`
          - InvalidSignatureError if the key material is unusable
        """
        ...
