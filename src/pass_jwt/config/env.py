from __future__ import annotations

import os
from typing import Any, Callable, Mapping, Optional

from ..domain.constants import Algorithm
from .settings import VerifierSettings

ENV_PREFIX = "PASS_JWT_"


def settings_from_env(environ: Optional[Mapping[str, str]] = None) -> VerifierSettings:
    """
    Build VerifierSettings from `PASS_JWT_*` environment variables.

    Unset variables keep the defaults.

    Raises:
        RuntimeError naming the offending variable.
    """
    env = os.environ if environ is None else environ

    def _get(key: str, parse: Callable[[str], Any]) -> Any:
        raw = env.get(ENV_PREFIX + key)
        if raw is None or not raw.strip():
            return None
        try:
            return parse(raw.strip())
        except ValueError as exc:
            raise RuntimeError(f"Invalid {ENV_PREFIX}{key}: {raw!r} ({exc})") from exc

    def _split_csv(raw: str) -> frozenset[Algorithm]:
        return frozenset(Algorithm(x.strip()) for x in raw.split(",") if x and x.strip())

    overrides: dict[str, Any] = {
        "max_token_length": _get("MAX_TOKEN_LENGTH", int),
        "allowed_algorithms": _get("ALLOWED_ALGORITHMS", _split_csv),
        "ss58_prefix": _get("SS58_PREFIX", int),
        "http_timeout": _get("HTTP_TIMEOUT", float),
    }

    try:
        return VerifierSettings(**{k: v for k, v in overrides.items() if v is not None})
    except ValueError as exc:
        raise RuntimeError(f"Invalid pass_jwt settings: {exc}") from exc
