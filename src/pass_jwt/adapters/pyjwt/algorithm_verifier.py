from __future__ import annotations

import logging
from typing import Dict, FrozenSet, Tuple, Type

from jwt.algorithms import (
    Algorithm as PyJWTAlgorithm,
    ECAlgorithm,
    HMACAlgorithm,
    OKPAlgorithm,
    RSAAlgorithm,
    RSAPSSAlgorithm,
)
from jwt.exceptions import InvalidKeyError

from ...domain.constants import Algorithm
from ...domain.exceptions import AlgorithmKeyMismatchError, InvalidSignatureError
from ...domain.keys import EcJwk, Jwk, OctJwk, OkpJwk, RsaJwk
from ...domain.ports import AlgorithmVerifier

logger = logging.getLogger(__name__)

# Algorithm -> (key variant, accepted curves). An empty curve set means the
# key type has no curve member.
_KEY_REQUIREMENTS: Dict[Algorithm, Tuple[Type, FrozenSet[str]]] = {
    Algorithm.RS256: (RsaJwk, frozenset()),
    Algorithm.RS384: (RsaJwk, frozenset()),
    Algorithm.RS512: (RsaJwk, frozenset()),
    Algorithm.PS256: (RsaJwk, frozenset()),
    Algorithm.PS384: (RsaJwk, frozenset()),
    Algorithm.PS512: (RsaJwk, frozenset()),
    Algorithm.ES256: (EcJwk, frozenset({"P-256"})),
    Algorithm.ES384: (EcJwk, frozenset({"P-384"})),
    Algorithm.ES512: (EcJwk, frozenset({"P-521"})),
    Algorithm.HS256: (OctJwk, frozenset()),
    Algorithm.HS384: (OctJwk, frozenset()),
    Algorithm.HS512: (OctJwk, frozenset()),
    Algorithm.EDDSA: (OkpJwk, frozenset({"Ed25519", "Ed448"})),
}

_BACKENDS: Dict[Algorithm, PyJWTAlgorithm] = {
    Algorithm.RS256: RSAAlgorithm(RSAAlgorithm.SHA256),
    Algorithm.RS384: RSAAlgorithm(RSAAlgorithm.SHA384),
    Algorithm.RS512: RSAAlgorithm(RSAAlgorithm.SHA512),
    Algorithm.PS256: RSAPSSAlgorithm(RSAPSSAlgorithm.SHA256),
    Algorithm.PS384: RSAPSSAlgorithm(RSAPSSAlgorithm.SHA384),
    Algorithm.PS512: RSAPSSAlgorithm(RSAPSSAlgorithm.SHA512),
    Algorithm.ES256: ECAlgorithm(ECAlgorithm.SHA256),
    Algorithm.ES384: ECAlgorithm(ECAlgorithm.SHA384),
    Algorithm.ES512: ECAlgorithm(ECAlgorithm.SHA512),
    Algorithm.HS256: HMACAlgorithm(HMACAlgorithm.SHA256),
    Algorithm.HS384: HMACAlgorithm(HMACAlgorithm.SHA384),
    Algorithm.HS512: HMACAlgorithm(HMACAlgorithm.SHA512),
    Algorithm.EDDSA: OKPAlgorithm(),
}


class PyJWTAlgorithmVerifier(AlgorithmVerifier):
    """
    Adapter implementing AlgorithmVerifier port using PyJWT's algorithm
    objects (cryptography backend).

    Infrastructure layer:
    - Knows which key variant each algorithm needs.
    - Knows how to turn a JWK into a PyJWT/cryptography key.
    """

    # ------------------------------------------------------------------ #
    # Port implementation
    # ------------------------------------------------------------------ #

    def verify(
        self,
        alg: Algorithm,
        key: Jwk,
        signed_bytes: bytes,
        signature: bytes,
    ) -> bool:
        """
        Raises:
            AlgorithmKeyMismatchError
            InvalidSignatureError
        """
        self._check_key(alg, key)
        backend = _BACKENDS[alg]

        try:
            prepared = backend.from_jwk(key.to_dict())
        except (InvalidKeyError, ValueError, TypeError) as exc:
            raise InvalidSignatureError(f"Key {key.kid!r} cannot be loaded: {exc}") from exc

        verified = bool(backend.verify(signed_bytes, prepared, signature))
        if not verified:
            logger.debug("%s signature does not match key %r", alg.value, key.kid)
        return verified

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _check_key(alg: Algorithm, key: Jwk) -> None:
        key_type, curves = _KEY_REQUIREMENTS[alg]

        if not isinstance(key, key_type):
            raise AlgorithmKeyMismatchError(
                f"{alg.value} requires a {key_type.kty.value} key, "
                f"key {key.kid!r} is {key.kty.value}"
            )

        if curves and key.crv not in curves:
            raise AlgorithmKeyMismatchError(
                f"{alg.value} cannot be used with curve {key.crv!r} (key {key.kid!r})"
            )

        if key.alg is not None and key.alg != alg.value:
            raise AlgorithmKeyMismatchError(
                f"Key {key.kid!r} is pinned to {key.alg}, token uses {alg.value}"
            )
