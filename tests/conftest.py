# tests/conftest.py
import json
from typing import Any

import pytest
from cryptography.hazmat.primitives.asymmetric import ec, ed25519, rsa
from jwt.algorithms import ECAlgorithm, HMACAlgorithm, OKPAlgorithm, RSAAlgorithm, get_default_algorithms
from jwt.utils import base64url_encode

from pass_jwt import (
    InMemoryKeyRegistry,
    IntrinsicChallenge,
    KeySet,
    create_authenticator,
    derive_challenge,
)

ISSUER = "org-42"
ALICE = "5GrwvaEF5zXb26Fz9rcQpDWS57CtERHpNehXCPcNoHGKutQY"
ALICE_PUBLIC_KEY = bytes.fromhex(
    "d43593c715fdd31c61141abd04a99fd6822c8558854ccde39a5684e7a56da27d"
)
HMAC_SECRET = b"pass-jwt-test-secret-0123456789abcdef-0123456789abcdef-0123456789"

DROP = object()


def b64(data: bytes) -> str:
    return base64url_encode(data).decode("ascii")


def b64_json(obj: Any) -> str:
    return b64(json.dumps(obj, separators=(",", ":")).encode("utf-8"))


class TokenFactory:
    """Builds compact tokens for the `org-42` issuer."""

    issuer = ISSUER
    intrinsic = IntrinsicChallenge(b"block-hash-0001")
    alice = ALICE
    alice_public_key = ALICE_PUBLIC_KEY
    hmac_secret = HMAC_SECRET

    def __init__(self, signing_keys: dict[str, Any]) -> None:
        self.signing_keys = signing_keys

    def claims(self, **overrides: Any) -> dict[str, Any]:
        claims: dict[str, Any] = {
            "iss": ISSUER,
            "sub": "device-9",
            "aud": "urn:authority:kreivo",
            "iat": 1000,
            "exp": 2000,
            "jti": ALICE,
            "challenge": derive_challenge(self.intrinsic).to_claim(),
        }
        claims.update(overrides)
        return {k: v for k, v in claims.items() if v is not DROP}

    def encode(
        self,
        payload: dict[str, Any] | None = None,
        *,
        alg: str = "RS256",
        kid: str = "k1",
        header: dict[str, Any] | None = None,
        signing_key: Any = None,
        signature: bytes | None = None,
    ) -> str:
        header_obj: dict[str, Any] = {"alg": alg, "kid": kid}
        header_obj.update(header or {})
        signing_input = f"{b64_json(header_obj)}.{b64_json(self.claims() if payload is None else payload)}"

        if signature is None:
            backend = get_default_algorithms()[alg]
            key = signing_key if signing_key is not None else self.signing_keys[kid]
            signature = backend.sign(signing_input.encode("ascii"), key)

        return f"{signing_input}.{b64(signature)}"


# --- Keys -----------------------------------------------------------------


@pytest.fixture(scope="session")
def rsa_private_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def ec_private_key():
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture(scope="session")
def ed25519_private_key():
    return ed25519.Ed25519PrivateKey.generate()


@pytest.fixture(scope="session")
def jwks_document(rsa_private_key, ec_private_key, ed25519_private_key) -> dict[str, Any]:
    def _with_kid(jwk: dict[str, Any], kid: str) -> dict[str, Any]:
        jwk = dict(jwk)
        jwk["kid"] = kid
        return jwk

    return {
        "keys": [
            _with_kid(RSAAlgorithm.to_jwk(rsa_private_key.public_key(), as_dict=True), "k1"),
            _with_kid(ECAlgorithm.to_jwk(ec_private_key.public_key(), as_dict=True), "k-ec"),
            _with_kid(OKPAlgorithm.to_jwk(ed25519_private_key.public_key(), as_dict=True), "k-ed"),
            _with_kid(HMACAlgorithm.to_jwk(HMAC_SECRET, as_dict=True), "k-hs"),
        ]
    }


@pytest.fixture(scope="session")
def key_set(jwks_document) -> KeySet:
    return KeySet.from_jwks(jwks_document)


@pytest.fixture
def registry(key_set) -> InMemoryKeyRegistry:
    return InMemoryKeyRegistry({ISSUER: key_set})


@pytest.fixture(scope="session")
def tokens(rsa_private_key, ec_private_key, ed25519_private_key) -> TokenFactory:
    return TokenFactory(
        {
            "k1": rsa_private_key,
            "k-ec": ec_private_key,
            "k-ed": ed25519_private_key,
            "k-hs": HMAC_SECRET,
        }
    )


@pytest.fixture
def authenticator(registry):
    return create_authenticator(key_registry=registry)
