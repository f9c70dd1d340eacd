# tests/test_algorithm_verifier.py
import pytest
from cryptography.hazmat.primitives.asymmetric import ec
from jwt.algorithms import ECAlgorithm, get_default_algorithms

from pass_jwt.adapters.pyjwt.algorithm_verifier import PyJWTAlgorithmVerifier
from pass_jwt.domain.constants import Algorithm
from pass_jwt.domain.exceptions import AlgorithmKeyMismatchError, InvalidSignatureError
from pass_jwt.domain.keys import EcJwk, OctJwk, RsaJwk, parse_jwk

MESSAGE = b"eyJhbGciOiJSUzI1NiJ9.eyJpc3MiOiJvcmctNDIifQ"


@pytest.fixture
def verifier():
    return PyJWTAlgorithmVerifier()


def _sign(alg: Algorithm, private_key, message: bytes = MESSAGE) -> bytes:
    return get_default_algorithms()[alg.value].sign(message, private_key)


@pytest.mark.parametrize(
    "alg, kid",
    [
        (Algorithm.RS256, "k1"),
        (Algorithm.RS384, "k1"),
        (Algorithm.RS512, "k1"),
        (Algorithm.PS256, "k1"),
        (Algorithm.PS512, "k1"),
        (Algorithm.ES256, "k-ec"),
        (Algorithm.EDDSA, "k-ed"),
        (Algorithm.HS256, "k-hs"),
        (Algorithm.HS384, "k-hs"),
        (Algorithm.HS512, "k-hs"),
    ],
)
def test_verify_each_family(verifier, key_set, tokens, alg, kid):
    signature = _sign(alg, tokens.signing_keys[kid])
    key = key_set.get(kid)

    assert verifier.verify(alg, key, MESSAGE, signature) is True
    assert verifier.verify(alg, key, MESSAGE + b"x", signature) is False
    assert verifier.verify(alg, key, MESSAGE, signature[:-1]) is False


def test_verify_es384():
    private_key = ec.generate_private_key(ec.SECP384R1())
    jwk = ECAlgorithm.to_jwk(private_key.public_key(), as_dict=True)
    jwk["kid"] = "p384"
    key = parse_jwk(jwk)

    signature = _sign(Algorithm.ES384, private_key)
    assert PyJWTAlgorithmVerifier().verify(Algorithm.ES384, key, MESSAGE, signature)


def test_verify_is_deterministic(verifier, key_set, tokens):
    signature = _sign(Algorithm.RS256, tokens.signing_keys["k1"])
    results = {verifier.verify(Algorithm.RS256, key_set.get("k1"), MESSAGE, signature) for _ in range(3)}
    assert results == {True}


def test_signature_from_another_key(verifier, key_set):
    signature = _sign(Algorithm.HS256, b"another-secret-another-secret-12")
    assert verifier.verify(Algorithm.HS256, key_set.get("k-hs"), MESSAGE, signature) is False


@pytest.mark.parametrize(
    "alg, kid",
    [
        (Algorithm.RS256, "k-ec"),
        (Algorithm.RS256, "k-hs"),
        (Algorithm.PS256, "k-ed"),
        (Algorithm.ES256, "k1"),
        (Algorithm.HS256, "k1"),
        (Algorithm.EDDSA, "k-ec"),
        # P-256 key for a P-384 algorithm
        (Algorithm.ES384, "k-ec"),
    ],
)
def test_algorithm_key_mismatch(verifier, key_set, alg, kid):
    with pytest.raises(AlgorithmKeyMismatchError) as exc_info:
        verifier.verify(alg, key_set.get(kid), MESSAGE, b"\x00" * 64)
    assert isinstance(exc_info.value, InvalidSignatureError)


def test_key_algorithm_pin(verifier, key_set, tokens):
    pinned = RsaJwk(kid="k1", n=key_set.get("k1").n, e=key_set.get("k1").e, alg="RS512")
    signature = _sign(Algorithm.RS256, tokens.signing_keys["k1"])

    with pytest.raises(AlgorithmKeyMismatchError):
        verifier.verify(Algorithm.RS256, pinned, MESSAGE, signature)

    signature = _sign(Algorithm.RS512, tokens.signing_keys["k1"])
    assert verifier.verify(Algorithm.RS512, pinned, MESSAGE, signature)


def test_unusable_key_material(verifier):
    key = EcJwk(kid="bad", crv="P-256", x="AAAA", y="AAAA")
    with pytest.raises(InvalidSignatureError) as exc_info:
        verifier.verify(Algorithm.ES256, key, MESSAGE, b"\x00" * 64)
    assert not isinstance(exc_info.value, AlgorithmKeyMismatchError)


def test_hmac_secret_from_jwk(verifier, tokens):
    key = OctJwk(kid="s", k="c2VjcmV0LXNlY3JldC1zZWNyZXQtc2VjcmV0LTEyMzQ")
    signature = _sign(Algorithm.HS256, b"secret-secret-secret-secret-1234")
    assert verifier.verify(Algorithm.HS256, key, MESSAGE, signature)
