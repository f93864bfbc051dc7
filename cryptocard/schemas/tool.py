from typing import Any, Literal

from pydantic import BaseModel, Field

ErrorKind = Literal["CONFIGURATION", "UPSTREAM", "NOT_FOUND", "MALFORMED_INPUT"]


class CryptoPriceArgs(BaseModel):
    symbol: str = Field(description="The cryptocurrency symbol (e.g., BTC, ETH, ADA)")


class TopCryptocurrenciesArgs(BaseModel):
    limit: int | None = Field(default=None, ge=1, description="How many top-ranked assets to return")


class ToolError(BaseModel):
    kind: ErrorKind
    message: str


class ToolResult(BaseModel):
    ok: bool
    data: Any = None
    error: ToolError | None = None
