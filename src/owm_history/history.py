"""OpenWeatherMap history endpoint client."""

from __future__ import annotations

import logging
import os
from typing import Any

import httpx
from pydantic import ValidationError

from .config import DEFAULT_HISTORY_URL, DEFAULT_TIMEOUT_SECONDS, Settings
from .exceptions import (
    ConfigError,
    HistoryDecodeError,
    HistoryRequestError,
    InvalidInputError,
)
from .models import Coordinates, HistoricalParameters, HistoricalWeatherResponse
from .redaction import sanitize_text
from .units import units_code

API_KEY_ENV = "OWM_API_KEY"

# Marks "no transport supplied" so an explicit None can be rejected.
_DEFAULT_HTTP_CLIENT: Any = object()


class HistoricalClient:
    """Queries past weather by city name, city ID or coordinates.

    Each query returns its own ``HistoricalWeatherResponse``; the client holds
    no per-query state, so sequential reuse after an error is safe. Sharing one
    instance across threads is only as safe as the injected ``httpx.Client``.

    ``unit`` is matched against ``DATA_UNITS`` after upper-casing. An empty API
    key, whether passed or read from ``OWM_API_KEY``, raises ``ConfigError``.
    """

    def __init__(
        self,
        unit: str,
        api_key: str | None = None,
        *,
        http_client: httpx.Client | None = _DEFAULT_HTTP_CLIENT,
        base_url: str = DEFAULT_HISTORY_URL,
        logger: logging.Logger | None = None,
    ) -> None:
        token = unit.upper() if isinstance(unit, str) else unit
        self.units = units_code(token)
        self.unit = token
        self.api_key = api_key if api_key is not None else os.getenv(API_KEY_ENV, "")
        if not self.api_key.strip():
            raise ConfigError(
                f"Missing API key: pass api_key or set {API_KEY_ENV}."
            )
        self.base_url = base_url
        self.logger = logger or logging.getLogger(__name__)

        if http_client is _DEFAULT_HTTP_CLIENT:
            self._client = httpx.Client(
                timeout=DEFAULT_TIMEOUT_SECONDS,
                headers={"Accept": "application/json", "User-Agent": "owm-history/0.1"},
            )
            self._owns_client = True
        elif isinstance(http_client, httpx.Client):
            self._client = http_client
            self._owns_client = False
        else:
            raise ConfigError(
                "Invalid http client: expected an httpx.Client, "
                f"got {type(http_client).__name__}."
            )

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        logger: logging.Logger | None = None,
        *,
        unit: str | None = None,
    ) -> HistoricalClient:
        """Build a client that owns an httpx.Client configured from settings."""
        http_client = httpx.Client(
            timeout=settings.owm_timeout_seconds,
            headers={"Accept": "application/json", "User-Agent": "owm-history/0.1"},
        )
        try:
            client = cls(
                unit or settings.owm_default_unit,
                settings.owm_api_key,
                http_client=http_client,
                base_url=str(settings.owm_history_base_url),
                logger=logger,
            )
        except Exception:
            http_client.close()
            raise
        client._owns_client = True
        return client

    @property
    def http_client(self) -> httpx.Client:
        """The transport every request goes through."""
        return self._client

    def __enter__(self) -> HistoricalClient:
        return self

    def __exit__(self, exc_type: Any, exc: Any, exc_tb: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            self._client.close()

    def history_by_name(
        self,
        name: str,
        params: HistoricalParameters | None = None,
    ) -> HistoricalWeatherResponse:
        """Fetch history for a free-text location name such as ``"Vancouver"``."""
        if not isinstance(name, str) or not name.strip():
            raise InvalidInputError("Location name must be a non-empty string.")
        return self._fetch({"q": name.strip()}, params)

    def history_by_id(
        self,
        city_id: int,
        params: HistoricalParameters | None = None,
    ) -> HistoricalWeatherResponse:
        """Fetch history for a numeric city ID."""
        if isinstance(city_id, bool) or not isinstance(city_id, int):
            raise InvalidInputError(f"City ID must be an integer, got {city_id!r}.")
        return self._fetch({"id": city_id}, params)

    def history_by_coord(
        self,
        coords: Coordinates,
        params: HistoricalParameters | None = None,
    ) -> HistoricalWeatherResponse:
        """Fetch history for a latitude/longitude pair."""
        if not isinstance(coords, Coordinates):
            raise InvalidInputError(
                f"Expected Coordinates, got {type(coords).__name__}."
            )
        return self._fetch({"lat": coords.latitude, "lon": coords.longitude}, params)

    def _fetch(
        self,
        location_query: dict[str, Any],
        params: HistoricalParameters | None,
    ) -> HistoricalWeatherResponse:
        payload = self._request_json(self._build_query(location_query, params))
        self._raise_for_api_error(payload)
        try:
            return HistoricalWeatherResponse.model_validate(payload)
        except ValidationError as exc:
            raise HistoryDecodeError(
                f"History payload did not match the expected schema: "
                f"{exc.error_count()} error(s), first: {exc.errors()[0]['msg']}"
            ) from exc

    def _build_query(
        self,
        location_query: dict[str, Any],
        params: HistoricalParameters | None,
    ) -> dict[str, Any]:
        query: dict[str, Any] = dict(location_query)
        if params is not None:
            query.update(params.to_query())
        query["units"] = self.units
        query["appid"] = self.api_key
        return query

    def _request_json(self, query: dict[str, Any]) -> dict[str, Any]:
        self.logger.debug(
            "OWM history request",
            extra={"query": {k: v for k, v in query.items() if k != "appid"}},
        )
        try:
            response = self._client.get(self.base_url, params=query)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            raise HistoryRequestError(
                f"OWM history request failed with status {status}: "
                f"{sanitize_text(exc.response.text[:300])}",
                category=self._category_for_status(status),
                status_code=status,
            ) from exc
        except httpx.HTTPError as exc:
            raise HistoryRequestError(
                f"OWM history request failed: {sanitize_text(str(exc))}",
                category="network",
                status_code=None,
            ) from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise HistoryDecodeError("OWM history returned non-JSON response.") from exc

        if not isinstance(payload, dict):
            raise HistoryDecodeError(
                f"OWM history returned unexpected payload type {type(payload).__name__}."
            )
        return payload

    def _raise_for_api_error(self, payload: dict[str, Any]) -> None:
        # The service can report errors in-body with a string "cod".
        try:
            code = int(payload.get("cod", 200))
        except (TypeError, ValueError):
            return
        if code >= 400:
            message = payload.get("message") or "no message"
            raise HistoryRequestError(
                f"OWM history API error {code}: {sanitize_text(str(message))}",
                category="api",
                status_code=code,
            )

    @staticmethod
    def _category_for_status(status: int) -> str:
        if status in (401, 403):
            return "auth"
        if status == 404:
            return "not_found"
        if status == 429:
            return "rate_limit"
        if 400 <= status < 500:
            return "validation"
        if status >= 500:
            return "server"
        return "unknown"
