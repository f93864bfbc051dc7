from pydantic import BaseModel


class QuoteSnapshot(BaseModel):
    symbol: str
    name: str
    current_price: float | None = None
    price_change_24h: float | None = None
    price_change_percentage_24h: float | None = None
    market_cap: float | None = None
    volume_24h: float | None = None

    @property
    def is_renderable(self) -> bool:
        return self.current_price is not None and self.price_change_percentage_24h is not None
