from __future__ import annotations

from types import MappingProxyType
from typing import Any, Mapping

from ...domain.keys import Jwk, KeySet
from ...domain.ports import KeyRegistry
from ...domain.value_objects import IssuerId


def _issuer_bytes(issuer: str | bytes | IssuerId) -> bytes:
    return IssuerId.parse(issuer).value


class InMemoryKeyRegistry(KeyRegistry):
    """
    Immutable snapshot of issuer key sets.

    Updating the registry produces a new snapshot (`with_key_set`), so a
    snapshot handed to a verification call never changes underneath it.
    """

    def __init__(self, key_sets: Mapping[str | bytes | IssuerId, KeySet] | None = None) -> None:
        self._key_sets: Mapping[bytes, KeySet] = MappingProxyType(
            {_issuer_bytes(issuer): key_set for issuer, key_set in (key_sets or {}).items()}
        )

    @classmethod
    def from_jwks_documents(
        cls,
        documents: Mapping[str | bytes | IssuerId, Mapping[str, Any] | str | bytes],
    ) -> InMemoryKeyRegistry:
        """Build a registry from one JWKS document per issuer."""
        return cls({issuer: KeySet.from_jwks(doc) for issuer, doc in documents.items()})

    # ------------------------------------------------------------------ #
    # Port implementation
    # ------------------------------------------------------------------ #

    def resolve(self, issuer: bytes, kid: str) -> Jwk | None:
        key_set = self._key_sets.get(issuer)
        if key_set is None:
            return None
        return key_set.get(kid)

    # ------------------------------------------------------------------ #
    # Snapshot helpers
    # ------------------------------------------------------------------ #

    def key_set(self, issuer: str | bytes | IssuerId) -> KeySet | None:
        return self._key_sets.get(_issuer_bytes(issuer))

    def with_key_set(self, issuer: str | bytes | IssuerId, key_set: KeySet) -> InMemoryKeyRegistry:
        key_sets: dict[Any, KeySet] = dict(self._key_sets)
        key_sets[_issuer_bytes(issuer)] = key_set
        return InMemoryKeyRegistry(key_sets)

    def without_issuer(self, issuer: str | bytes | IssuerId) -> InMemoryKeyRegistry:
        issuer_bytes = _issuer_bytes(issuer)
        return InMemoryKeyRegistry(
            {k: v for k, v in self._key_sets.items() if k != issuer_bytes}
        )

    @property
    def issuers(self) -> tuple[bytes, ...]:
        return tuple(self._key_sets)

    def __contains__(self, issuer: object) -> bool:
        try:
            return _issuer_bytes(issuer) in self._key_sets  # type: ignore[arg-type]
        except ValueError:
            return False
