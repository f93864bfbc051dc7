from __future__ import annotations


class CryptoDataError(Exception):
    """Base error for anything that stops a quote from being served."""

    kind = "UPSTREAM"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigurationError(CryptoDataError):
    kind = "CONFIGURATION"


class UpstreamError(CryptoDataError):
    kind = "UPSTREAM"

    def __init__(self, message: str, *, status_code: int | None = None, detail: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


class SymbolNotFoundError(CryptoDataError):
    kind = "NOT_FOUND"

    def __init__(self, symbol: str) -> None:
        super().__init__(f"Cryptocurrency {symbol} not found")
        self.symbol = symbol


class MalformedInputError(CryptoDataError):
    kind = "MALFORMED_INPUT"
