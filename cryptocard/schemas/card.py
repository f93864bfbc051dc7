from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


def _either(camel: str, snake: str, description: str):
    # camelCase wins when a caller sends both spellings
    return Field(
        default=None,
        validation_alias=AliasChoices(camel, snake),
        serialization_alias=camel,
        description=description,
    )


class CryptoCardProps(BaseModel):
    """Props of the CryptoCard component.

    Accepts camelCase or snake_case per field and stores one canonical
    snake_case set. ``symbol`` and ``name`` are optional here so the card can
    render its missing-data state instead of failing validation.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    symbol: str | None = Field(default=None, description="Cryptocurrency symbol (e.g., BTC)")
    name: str | None = Field(default=None, description="Cryptocurrency name (e.g., Bitcoin)")
    current_price: float | None = _either("currentPrice", "current_price", "Current price in USD")
    price_change_24h: float | None = _either("priceChange24h", "price_change_24h", "24h price change in USD")
    price_change_percentage_24h: float | None = _either(
        "priceChangePercentage24h", "price_change_percentage_24h", "24h price change percentage"
    )
    market_cap: float | None = _either("marketCap", "market_cap", "Market cap in USD")
    volume_24h: float | None = _either("volume24h", "volume_24h", "24h trading volume in USD")

    def to_tool_output(self) -> dict:
        return self.model_dump(by_alias=True)


class CardView(BaseModel):
    state: Literal["ok", "error"]
    symbol: str | None = None
    name: str | None = None
    price_text: str | None = None
    change_text: str | None = None
    change_percentage_text: str | None = None
    is_positive: bool | None = None
    arrow: str | None = None
    accent_color: str | None = None
    gradient: str | None = None
    border: str | None = None
    market_cap_text: str | None = None
    volume_text: str | None = None
    footer: str | None = None
    error_title: str | None = None
    error_message: str | None = None
    error_detail: str | None = None
