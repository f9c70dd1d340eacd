"""
pass_jwt.config

- VerifierSettings: verification limits and algorithm policy.
- settings_from_env: build settings from PASS_JWT_* environment variables.
"""

from __future__ import annotations

from .env import settings_from_env
from .settings import VerifierSettings

__all__ = [
    "VerifierSettings",
    "settings_from_env",
]
