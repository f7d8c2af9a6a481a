"""
SafePath - Provider Client Base
Shared request/response handling for every external data source.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from safepath.core.config import settings
from safepath.core.exceptions import ProviderError, ProviderErrorKind
from safepath.core.geo_utils import Coordinate
from safepath.core.models import RawFeature

logger = logging.getLogger(__name__)


class ProviderClient:
    """
    One external data source.

    Subclasses build the provider-specific request in `fetch` and turn the
    JSON body into raw features with `parse`. Transport problems, HTTP
    errors and undecodable bodies all surface as ProviderError; an empty
    list is a successful answer.

    The httpx.AsyncClient is owned by the caller so that one aggregation
    call shares (and closes) a single connection pool.
    """

    name = "provider"

    def __init__(self, http: httpx.AsyncClient, timeout: Optional[float] = None):
        """
        Args:
            http: Shared async HTTP client
            timeout: Per-call timeout in seconds (default from settings)
        """
        self.http = http
        self.timeout = timeout if timeout is not None else settings.provider_timeout_seconds

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"

    async def fetch(self, center: Coordinate, radius_m: float) -> List[RawFeature]:
        raise NotImplementedError

    def parse(self, payload: Any, center: Coordinate, radius_m: float) -> List[RawFeature]:
        raise NotImplementedError

    def _error(self, kind: ProviderErrorKind, message: str, status_code: Optional[int] = None) -> ProviderError:
        return ProviderError(self.name, kind, message, status_code=status_code)

    async def _request_json(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        request_headers = {"User-Agent": settings.user_agent, "Accept": "application/json"}
        if headers:
            request_headers.update(headers)

        try:
            response = await self.http.request(
                method,
                url,
                params=params,
                data=data,
                headers=request_headers,
                timeout=self.timeout,
            )
        except httpx.TimeoutException as e:
            raise self._error(ProviderErrorKind.TIMEOUT, str(e) or "request timed out") from e
        except httpx.HTTPError as e:
            raise self._error(ProviderErrorKind.NETWORK, str(e) or type(e).__name__) from e

        if response.status_code >= 400:
            raise self._error(
                ProviderErrorKind.BAD_STATUS,
                f"HTTP {response.status_code}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise self._error(ProviderErrorKind.UNPARSEABLE, f"invalid JSON: {e}") from e

    async def _get_json(self, url: str, params: Optional[Dict[str, Any]] = None,
                        headers: Optional[Dict[str, str]] = None) -> Any:
        return await self._request_json("GET", url, params=params, headers=headers)

    async def _post_json(self, url: str, data: Dict[str, Any],
                         headers: Optional[Dict[str, str]] = None) -> Any:
        return await self._request_json("POST", url, data=data, headers=headers)

    def _require_dict(self, payload: Any) -> Dict[str, Any]:
        if not isinstance(payload, dict):
            raise self._error(
                ProviderErrorKind.UNPARSEABLE,
                f"expected a JSON object, got {type(payload).__name__}",
            )
        return payload

    def _require_list(self, payload: Dict[str, Any], key: str) -> List[Any]:
        """A list-valued key; absent means no results, any other type is unparseable."""
        value = payload.get(key)
        if value is None:
            return []
        if not isinstance(value, list):
            raise self._error(ProviderErrorKind.UNPARSEABLE, f"'{key}' is not a list")
        return value

    def _skip(self, reason: str, item: Any) -> None:
        logger.debug(f"{self.name}: discarding item ({reason}): {str(item)[:120]}")
