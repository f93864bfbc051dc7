from __future__ import annotations

import math
from typing import Any, Optional

import requests

from cryptocard.errors import ConfigurationError, CryptoDataError, SymbolNotFoundError, UpstreamError
from cryptocard.schemas.quote import QuoteSnapshot


def _to_float_or_none(value: Any) -> float | None:
    try:
        if value is None or value == "" or isinstance(value, bool):
            return None
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number):
        return None
    return number


def _derive_price_change(price: float | None, pct: float | None) -> float | None:
    # listings carry only the percentage; back out the absolute move from it
    if price is None or pct is None or pct <= -100:
        return None
    return price * pct / (100 + pct)


def normalize_entry(entry: dict, convert: str = "USD") -> QuoteSnapshot:
    """Flatten one provider entry (``{symbol, name, quote: {USD: {...}}}``)."""
    if not isinstance(entry, dict):
        raise UpstreamError("API returned an unexpected payload")
    quotes = entry.get("quote") or {}
    quote = (quotes.get(convert) or {}) if isinstance(quotes, dict) else None
    if not isinstance(quote, dict):
        raise UpstreamError("API returned an unexpected payload")
    price = _to_float_or_none(quote.get("price"))
    pct = _to_float_or_none(quote.get("percent_change_24h"))
    change = _to_float_or_none(quote.get("price_change_24h"))
    if change is None:
        change = _derive_price_change(price, pct)

    return QuoteSnapshot(
        symbol=str(entry.get("symbol") or ""),
        name=str(entry.get("name") or ""),
        current_price=price,
        price_change_24h=change,
        price_change_percentage_24h=pct,
        market_cap=_to_float_or_none(quote.get("market_cap")),
        volume_24h=_to_float_or_none(quote.get("volume_24h")),
    )


class CryptoDataService:
    """Client of the /quote and /listings proxy endpoints.

    Reshapes the proxied provider JSON into ``QuoteSnapshot`` records. Each
    call performs exactly one request; nothing is cached or retried.
    """

    def __init__(
        self,
        base_url: str = "http://127.0.0.1:8000",
        session: Optional[Any] = None,
        timeout: float = 10.0,
        convert: str = "USD",
        top_count: int = 10,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.session = session or requests
        self.timeout = timeout
        self.convert = convert
        self.top_count = top_count

    @staticmethod
    def _error_body(response: Any) -> dict:
        try:
            body = response.json()
        except ValueError:
            return {}
        return body if isinstance(body, dict) else {}

    def _fetch(self, path: str, params: dict | None = None) -> dict:
        try:
            response = self.session.get(f"{self.base_url}{path}", params=params, timeout=self.timeout)
        except requests.RequestException as exc:
            raise UpstreamError(f"API unreachable: {exc}") from exc

        if not 200 <= response.status_code < 300:
            body = self._error_body(response)
            if body.get("kind") == "CONFIGURATION":
                raise ConfigurationError(str(body.get("error") or "API key not configured"))
            raise UpstreamError(
                f"API error: {response.status_code}",
                status_code=response.status_code,
                detail=body.get("detail"),
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise UpstreamError("API returned invalid JSON") from exc

        if not isinstance(data, dict):
            raise UpstreamError("API returned an unexpected payload")
        if data.get("error"):
            raise UpstreamError(str(data["error"]))
        return data

    def get_current_crypto_info(self, symbol: str) -> QuoteSnapshot:
        wanted = symbol.upper()
        try:
            data = self._fetch("/quote", {"symbol": symbol})
            by_symbol = data.get("data") or {}
            if not isinstance(by_symbol, dict):
                raise UpstreamError("API returned an unexpected payload")
            entry = by_symbol.get(wanted)
            # v2 quotes map each symbol to a list of matching assets
            if isinstance(entry, list):
                entry = entry[0] if entry else None
            if not entry:
                raise SymbolNotFoundError(symbol)
            return normalize_entry(entry, self.convert)
        except CryptoDataError as exc:
            print(f"[CRYPTO][quote_error] symbol={wanted} kind={exc.kind} error={exc}", flush=True)
            raise

    def get_top_cryptocurrencies(self, limit: int | None = None) -> list[QuoteSnapshot]:
        count = limit or self.top_count
        try:
            data = self._fetch("/listings")
            rows = data.get("data") or []
            if not isinstance(rows, list):
                raise UpstreamError("API returned an unexpected payload")
            return [normalize_entry(entry, self.convert) for entry in rows[:count]]
        except CryptoDataError as exc:
            print(f"[CRYPTO][listings_error] kind={exc.kind} error={exc}", flush=True)
            raise
