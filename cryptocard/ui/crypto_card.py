from __future__ import annotations

import math
from datetime import datetime
from decimal import ROUND_HALF_UP, Context, Decimal
from html import escape
from numbers import Real
from typing import Any, Callable, Literal

from pydantic import ValidationError

from cryptocard.schemas.card import CardView, CryptoCardProps

POSITIVE_COLOR = "#22c55e"
NEGATIVE_COLOR = "#ef4444"

_MAGNITUDES = (
    (1e12, "T"),
    (1e9, "B"),
    (1e6, "M"),
    (1e3, "K"),
)

_CENTS = Decimal("0.01")
_SATOSHI = Decimal("0.00000001")
# wide enough for every finite float in fixed-point form
_FIXED = Context(prec=400, rounding=ROUND_HALF_UP)


def _is_number(value: Any) -> bool:
    if value is None or isinstance(value, bool) or not isinstance(value, Real):
        return False
    return math.isfinite(value)


def _to_fixed(value: float, digits: int = 2) -> str:
    """Fixed-point text of the exact binary value, ties rounded away from zero."""
    if value == 0:
        value = 0.0
    rounded = Decimal(value).quantize(Decimal(1).scaleb(-digits), context=_FIXED)
    return f"{rounded:.{digits}f}"


def classify_change(percentage: float) -> Literal["positive", "negative"]:
    """Zero counts as positive."""
    return "positive" if percentage >= 0 else "negative"


def format_large_number(value: Any) -> str:
    if not _is_number(value):
        return "N/A"
    for threshold, suffix in _MAGNITUDES:
        if value >= threshold:
            return f"${_to_fixed(value / threshold)}{suffix}"
    return f"${_to_fixed(value)}"


def format_price(price: float) -> str:
    """en-US grouped price; sub-dollar prices keep up to 8 decimals.

    Rounds the shortest decimal form of the float, half away from zero.
    """
    shortest = Decimal(repr(float(price)))
    if price > 1:
        return f"{shortest.quantize(_CENTS, context=_FIXED):,.2f}"
    text = f"{shortest.quantize(_SATOSHI, context=_FIXED):,.8f}"
    whole, _, decimals = text.partition(".")
    decimals = decimals.rstrip("0").ljust(2, "0")
    return f"{whole}.{decimals}"


def format_price_change(change: float | None) -> str:
    if not _is_number(change) or change == 0:
        return "N/A"
    sign = "+" if change > 0 else ""
    return f"{sign}${_to_fixed(abs(change))}"


def format_percentage(percentage: float) -> str:
    sign = "+" if percentage > 0 else ""
    return f"({sign}{_to_fixed(percentage)}%)"


def render_crypto_card(
    props: CryptoCardProps | dict,
    *,
    now: Callable[[], datetime] = datetime.now,
) -> CardView:
    """Derive the display fields of a price card.

    Missing symbol, name, price or percentage change yields the fixed error
    state; nothing is partially rendered.
    """
    if not isinstance(props, CryptoCardProps):
        try:
            props = CryptoCardProps.model_validate(props)
        except ValidationError as exc:
            raw = props if isinstance(props, dict) else {}
            invalid = ", ".join(".".join(str(p) for p in err["loc"]) or "props" for err in exc.errors())
            return CardView(
                state="error",
                error_title="Error Loading Data",
                error_message=f"Missing required crypto information: {raw.get('symbol')} - {raw.get('name')}",
                error_detail=f"Invalid fields: {invalid}",
            )

    price = props.current_price
    percentage = props.price_change_percentage_24h

    if not props.symbol or not props.name or price is None or percentage is None:
        return CardView(
            state="error",
            error_title="Error Loading Data",
            error_message=f"Missing required crypto information: {props.symbol} - {props.name}",
            error_detail=f"Price: {price}, Change: {percentage}",
        )

    positive = classify_change(percentage) == "positive"
    return CardView(
        state="ok",
        symbol=props.symbol.upper(),
        name=props.name,
        price_text=f"${format_price(price)}",
        change_text=format_price_change(props.price_change_24h),
        change_percentage_text=format_percentage(percentage),
        is_positive=positive,
        arrow="▲" if positive else "▼",
        accent_color=POSITIVE_COLOR if positive else NEGATIVE_COLOR,
        gradient="from-green-50 to-emerald-50" if positive else "from-red-50 to-rose-50",
        border="border-green-200" if positive else "border-red-200",
        market_cap_text=format_large_number(props.market_cap),
        volume_text=format_large_number(props.volume_24h),
        footer=f"Last updated: {now().strftime('%H:%M:%S')}",
    )


def render_html(view: CardView) -> str:
    if view.state == "error":
        return (
            '<div class="crypto-card crypto-card--error">'
            f"<h3>{escape(view.error_title or '')}</h3>"
            f"<p>{escape(view.error_message or '')}</p>"
            f'<p class="detail">{escape(view.error_detail or "")}</p>'
            "</div>"
        )

    return (
        f'<div class="crypto-card bg-gradient-to-br {view.gradient} {view.border}">'
        '<div class="header">'
        f"<h2>{escape(view.name or '')}</h2>"
        f'<div class="symbol">{escape(view.symbol or "")}</div>'
        "</div>"
        f'<div class="price">{escape(view.price_text or "")}</div>'
        f'<div class="change" style="color: {view.accent_color}">'
        f"<span>{view.arrow}</span> "
        f"<span>{escape(view.change_text or '')}</span> "
        f"<span>{escape(view.change_percentage_text or '')}</span>"
        "</div>"
        '<div class="caption">24h Change</div>'
        '<div class="stats">'
        f'<div><div class="label">Market Cap</div><div class="value">{escape(view.market_cap_text or "")}</div></div>'
        f'<div><div class="label">24h Volume</div><div class="value">{escape(view.volume_text or "")}</div></div>'
        "</div>"
        f'<div class="footer"><span>Powered by CoinMarketCap</span><span>{escape(view.footer or "")}</span></div>'
        "</div>"
    )
