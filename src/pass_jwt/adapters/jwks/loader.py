from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx
from requests import RequestException, Session

from ...config.settings import VerifierSettings
from ...domain.exceptions import KeySetLoadError
from ...domain.keys import KeySet

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


def _jwks_uri_from_configuration(config_url: str, body: Any) -> str:
    jwks_uri = body.get("jwks_uri") if isinstance(body, dict) else None
    if not isinstance(jwks_uri, str) or not jwks_uri:
        raise KeySetLoadError(f"OpenID configuration at {config_url} has no 'jwks_uri'")
    return jwks_uri


class JwksHttpLoader:
    """
    Fetches an issuer's JWKS document over HTTP and returns a KeySet
    snapshot.

    Nothing is cached: every call hits the network. Build a registry
    snapshot from the result and hand that to the authenticator.
    """

    def __init__(self, session: Optional[Session] = None, timeout: float = DEFAULT_TIMEOUT) -> None:
        self._session = session or Session()
        self._timeout = timeout

    @classmethod
    def from_settings(cls, settings: VerifierSettings, session: Optional[Session] = None) -> JwksHttpLoader:
        return cls(session=session, timeout=settings.http_timeout)

    def load(self, jwks_uri: str, *, enabled: bool = True) -> KeySet:
        """
        Raises:
            KeySetLoadError
        """
        body = self._get_json(jwks_uri)
        key_set = KeySet.from_jwks(body, enabled=enabled)
        logger.debug("Loaded %d keys from %s", len(key_set), jwks_uri)
        return key_set

    def load_from_openid_configuration(self, config_url: str, *, enabled: bool = True) -> KeySet:
        """
        Resolve `jwks_uri` from an OpenID configuration document, then load
        the key set it points to.
        """
        jwks_uri = _jwks_uri_from_configuration(config_url, self._get_json(config_url))
        return self.load(jwks_uri, enabled=enabled)

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    def _get_json(self, url: str) -> Dict[str, Any]:
        try:
            response = self._session.get(url, timeout=self._timeout)
            response.raise_for_status()
            return response.json()
        except RequestException as exc:
            raise KeySetLoadError(f"Failed to fetch {url}: {exc}") from exc
        except ValueError as exc:
            raise KeySetLoadError(f"Response from {url} is not JSON: {exc}") from exc


class AsyncJwksHttpLoader:
    """
    Async counterpart of JwksHttpLoader (httpx-based).

    `close()` only shuts a client the loader created itself.
    """

    def __init__(self, client: Optional[httpx.AsyncClient] = None, timeout: float = DEFAULT_TIMEOUT) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._timeout = timeout

    @classmethod
    def from_settings(
        cls, settings: VerifierSettings, client: Optional[httpx.AsyncClient] = None
    ) -> AsyncJwksHttpLoader:
        return cls(client=client, timeout=settings.http_timeout)

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def load(self, jwks_uri: str, *, enabled: bool = True) -> KeySet:
        body = await self._get_json(jwks_uri)
        key_set = KeySet.from_jwks(body, enabled=enabled)
        logger.debug("Loaded %d keys from %s", len(key_set), jwks_uri)
        return key_set

    async def load_from_openid_configuration(self, config_url: str, *, enabled: bool = True) -> KeySet:
        jwks_uri = _jwks_uri_from_configuration(config_url, await self._get_json(config_url))
        return await self.load(jwks_uri, enabled=enabled)

    async def _get_json(self, url: str) -> Dict[str, Any]:
        try:
            resp = await self._client.get(url, timeout=self._timeout)
            resp.raise_for_status()
            return resp.json()
        except httpx.HTTPError as exc:
            raise KeySetLoadError(f"Failed to fetch {url}: {exc}") from exc
        except ValueError as exc:
            raise KeySetLoadError(f"Response from {url} is not JSON: {exc}") from exc
