from __future__ import annotations

from typing import Optional

from .adapters.pyjwt.algorithm_verifier import PyJWTAlgorithmVerifier
from .application.use_cases.authenticate import AuthenticatePassTokenUseCase
from .config import VerifierSettings, settings_from_env
from .domain.ports import AlgorithmVerifier, KeyRegistry


def create_authenticator(
        *,
        key_registry: Optional[KeyRegistry] = None,
        settings: Optional[VerifierSettings] = None,
        algorithm_verifier: Optional[AlgorithmVerifier] = None,
) -> AuthenticatePassTokenUseCase:
    """
    High-level factory: settings + registry -> AuthenticatePassTokenUseCase.

    - uses the PyJWT-backed verifier unless one is given
    - `key_registry` may be left out and passed per call instead
    """
    return AuthenticatePassTokenUseCase(
        algorithm_verifier=algorithm_verifier or PyJWTAlgorithmVerifier(),
        key_registry=key_registry,
        settings=settings or VerifierSettings(),
    )


def create_authenticator_from_env(
        *,
        key_registry: Optional[KeyRegistry] = None,
) -> AuthenticatePassTokenUseCase:
    """Convenience wrapper using env-configured settings."""
    return create_authenticator(
        key_registry=key_registry,
        settings=settings_from_env(),
    )
