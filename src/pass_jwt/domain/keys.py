"""
Key material as published by issuers (RFC 7517 JWK members).

Every key type the verifier understands is a separate variant holding only
the public members needed to verify a signature. Anything else in the
source record (private members, x5c chains, ...) is dropped on parse.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, ClassVar, Iterator, Mapping, Union

from .constants import KeyType
from .exceptions import KeySetLoadError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RsaJwk:
    kty: ClassVar[KeyType] = KeyType.RSA

    kid: str
    n: str
    e: str
    alg: str | None = None

    def to_dict(self) -> dict[str, str]:
        return {"kty": self.kty.value, "kid": self.kid, "n": self.n, "e": self.e}


@dataclass(frozen=True, slots=True)
class EcJwk:
    kty: ClassVar[KeyType] = KeyType.EC

    kid: str
    crv: str
    x: str
    y: str
    alg: str | None = None

    def to_dict(self) -> dict[str, str]:
        return {
            "kty": self.kty.value,
            "kid": self.kid,
            "crv": self.crv,
            "x": self.x,
            "y": self.y,
        }


@dataclass(frozen=True, slots=True)
class OkpJwk:
    kty: ClassVar[KeyType] = KeyType.OKP

    kid: str
    crv: str
    x: str
    alg: str | None = None

    def to_dict(self) -> dict[str, str]:
        return {"kty": self.kty.value, "kid": self.kid, "crv": self.crv, "x": self.x}


@dataclass(frozen=True, slots=True)
class OctJwk:
    kty: ClassVar[KeyType] = KeyType.OCT

    kid: str
    k: str
    alg: str | None = None

    def to_dict(self) -> dict[str, str]:
        return {"kty": self.kty.value, "kid": self.kid, "k": self.k}


Jwk = Union[RsaJwk, EcJwk, OkpJwk, OctJwk]

_REQUIRED_MEMBERS: dict[KeyType, tuple[str, ...]] = {
    KeyType.RSA: ("n", "e"),
    KeyType.EC: ("crv", "x", "y"),
    KeyType.OKP: ("crv", "x"),
    KeyType.OCT: ("k",),
}


def _member(record: Mapping[str, Any], name: str, kid: str) -> str:
    value = record.get(name)
    if not isinstance(value, str) or not value:
        raise KeySetLoadError(f"Key {kid!r} is missing member {name!r}")
    return value


def parse_jwk(record: Mapping[str, Any]) -> Jwk:
    """
    Build a key variant from one JWK record.

    Raises:
        KeySetLoadError if `kty` is unknown, `kid` is absent or a required
        member is missing.
    """
    if not isinstance(record, Mapping):
        raise KeySetLoadError("JWK record must be an object")

    kid = record.get("kid")
    if not isinstance(kid, str) or not kid:
        raise KeySetLoadError("JWK record has no 'kid'")

    try:
        kty = KeyType(record.get("kty"))
    except ValueError as exc:
        raise KeySetLoadError(f"Key {kid!r} has unsupported kty {record.get('kty')!r}") from exc

    alg = record.get("alg")
    if alg is not None and not isinstance(alg, str):
        raise KeySetLoadError(f"Key {kid!r} has a non-string 'alg'")

    members = {name: _member(record, name, kid) for name in _REQUIRED_MEMBERS[kty]}

    if kty is KeyType.RSA:
        return RsaJwk(kid=kid, alg=alg, **members)
    if kty is KeyType.EC:
        return EcJwk(kid=kid, alg=alg, **members)
    if kty is KeyType.OKP:
        return OkpJwk(kid=kid, alg=alg, **members)
    return OctJwk(kid=kid, alg=alg, **members)


@dataclass(frozen=True, slots=True)
class KeySet:
    """
    The keys one issuer publishes, indexed by `kid`.

    A disabled key set resolves no keys at all.
    """
    keys: Mapping[str, Jwk] = field(default_factory=dict)
    enabled: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "keys", MappingProxyType(dict(self.keys)))

    @classmethod
    def of(cls, *keys: Jwk, enabled: bool = True) -> KeySet:
        by_kid: dict[str, Jwk] = {}
        for key in keys:
            if key.kid in by_kid:
                raise KeySetLoadError(f"Duplicate kid {key.kid!r} in key set")
            by_kid[key.kid] = key
        return cls(keys=by_kid, enabled=enabled)

    @classmethod
    def from_jwks(cls, document: Mapping[str, Any] | str | bytes, enabled: bool = True) -> KeySet:
        """
        Parse a JWKS document (`{"keys": [...]}`).

        Keys whose `use` is present and not "sig" are skipped.
        """
        if isinstance(document, (str, bytes)):
            try:
                document = json.loads(document)
            except ValueError as exc:
                raise KeySetLoadError(f"JWKS document is not valid JSON: {exc}") from exc

        if not isinstance(document, Mapping) or not isinstance(document.get("keys"), list):
            raise KeySetLoadError("JWKS document must be an object with a 'keys' list")

        keys: list[Jwk] = []
        for record in document["keys"]:
            if isinstance(record, Mapping) and record.get("use") not in (None, "sig"):
                logger.debug("Skipping key %r with use=%r", record.get("kid"), record.get("use"))
                continue
            keys.append(parse_jwk(record))

        return cls.of(*keys, enabled=enabled)

    def get(self, kid: str) -> Jwk | None:
        if not self.enabled:
            return None
        return self.keys.get(kid)

    def __iter__(self) -> Iterator[Jwk]:
        return iter(self.keys.values())

    def __len__(self) -> int:
        return len(self.keys)
