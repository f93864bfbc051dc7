from __future__ import annotations

from typing import Any, Dict, Optional

import requests

from cryptocard.errors import ConfigurationError, UpstreamError


class CoinMarketCapRestClient:
    """Minimal CoinMarketCap Pro REST client for latest quotes and listings."""

    DEFAULT_BASE_URL = "https://pro-api.coinmarketcap.com"
    _API_VERSIONS = ("v1", "v2")

    def __init__(
        self,
        api_key: Optional[str],
        api_version: str = "v1",
        convert: str = "USD",
        timeout: float = 5.0,
        session: Optional[Any] = None,
        base_url: Optional[str] = None,
    ) -> None:
        if not api_key:
            raise ConfigurationError("API key not configured")
        if api_version not in self._API_VERSIONS:
            raise ValueError("api_version must be one of: v1, v2")

        self.api_key = api_key
        self.api_version = api_version
        self.convert = convert
        self.timeout = timeout
        self.base_url = (base_url or self.DEFAULT_BASE_URL).rstrip("/")
        self.session = session or requests

    def _headers(self) -> Dict[str, str]:
        return {
            "X-CMC_PRO_API_KEY": self.api_key,
            "Accept": "application/json",
        }

    @staticmethod
    def _provider_message(response: Any) -> Optional[str]:
        try:
            payload = response.json()
        except ValueError:
            return None
        if not isinstance(payload, dict):
            return None
        status = payload.get("status")
        if isinstance(status, dict) and status.get("error_message"):
            return str(status["error_message"])
        return None

    def _get(self, endpoint: str, path: str, params: Dict[str, Any]) -> Dict[str, Any]:
        try:
            response = self.session.get(
                f"{self.base_url}{path}",
                headers=self._headers(),
                params=params,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            print(f"[CMC][transport_error] endpoint={endpoint} error={exc}", flush=True)
            raise UpstreamError(f"CoinMarketCap API unreachable: {exc}") from exc

        if not 200 <= response.status_code < 300:
            detail = self._provider_message(response)
            print(
                f"[CMC][upstream_error] endpoint={endpoint} status={response.status_code} detail={detail}",
                flush=True,
            )
            raise UpstreamError(
                f"CoinMarketCap API error: {response.status_code}",
                status_code=response.status_code,
                detail=detail,
            )

        try:
            return response.json()
        except ValueError as exc:
            print(f"[CMC][decode_error] endpoint={endpoint} error={exc}", flush=True)
            raise UpstreamError("CoinMarketCap API returned invalid JSON", status_code=response.status_code) from exc

    def get_quotes_latest(self, symbol: str) -> Dict[str, Any]:
        return self._get(
            "quotes",
            f"/{self.api_version}/cryptocurrency/quotes/latest",
            {"symbol": symbol.upper(), "convert": self.convert},
        )

    def get_listings_latest(self, limit: int) -> Dict[str, Any]:
        # listings/latest only exists under v1
        return self._get(
            "listings",
            "/v1/cryptocurrency/listings/latest",
            {"limit": int(limit), "convert": self.convert},
        )
