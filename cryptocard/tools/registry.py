from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from pydantic import BaseModel, ValidationError

from cryptocard.errors import CryptoDataError, MalformedInputError, UpstreamError
from cryptocard.schemas.card import CryptoCardProps
from cryptocard.schemas.tool import CryptoPriceArgs, ToolError, ToolResult, TopCryptocurrenciesArgs
from cryptocard.services.crypto_data import CryptoDataService


@dataclass(frozen=True)
class Tool:
    name: str
    description: str
    func: Callable[[dict, CryptoDataService], Any]
    args_model: type[BaseModel]
    returns_model: type[BaseModel]


@dataclass(frozen=True)
class Component:
    name: str
    description: str
    props_model: type[BaseModel]


def _parse_args(model: type[BaseModel], args: Any) -> BaseModel:
    if not isinstance(args, dict):
        raise MalformedInputError("Invalid arguments provided")
    try:
        return model.model_validate(args, strict=True)
    except ValidationError as exc:
        raise MalformedInputError(f"Invalid arguments provided: {exc.errors()[0]['msg']}") from exc


def get_crypto_price(args: dict, service: CryptoDataService) -> dict:
    parsed = _parse_args(CryptoPriceArgs, args)
    symbol = parsed.symbol.strip()
    if not symbol:
        raise MalformedInputError("Invalid symbol provided")

    print(f"[TOOL][getCryptoPrice] symbol={symbol.upper()}", flush=True)
    info = service.get_current_crypto_info(symbol)
    if not info.is_renderable:
        raise UpstreamError(f"Incomplete price data for {symbol.upper()}")

    props = CryptoCardProps(
        symbol=info.symbol or symbol.upper(),
        name=info.name or symbol.upper(),
        current_price=info.current_price,
        price_change_24h=info.price_change_24h,
        price_change_percentage_24h=info.price_change_percentage_24h,
        market_cap=info.market_cap,
        volume_24h=info.volume_24h,
    )
    return props.to_tool_output()


def get_top_cryptocurrencies(args: dict, service: CryptoDataService) -> list[dict]:
    parsed = _parse_args(TopCryptocurrenciesArgs, args or {})
    print(f"[TOOL][getTopCryptocurrencies] limit={parsed.limit}", flush=True)
    rows = service.get_top_cryptocurrencies(parsed.limit)
    return [CryptoCardProps(**row.model_dump()).to_tool_output() for row in rows]


TOOLS: dict[str, Tool] = {
    tool.name: tool
    for tool in (
        Tool(
            name="getCryptoPrice",
            description=(
                "Use this for ANY crypto-related query. Gets price data for any cryptocurrency "
                "(BTC, ETH, etc.) and displays it in a beautiful card."
            ),
            func=get_crypto_price,
            args_model=CryptoPriceArgs,
            returns_model=CryptoCardProps,
        ),
        Tool(
            name="getTopCryptocurrencies",
            description="Lists the top-ranked cryptocurrencies by market cap with current price data.",
            func=get_top_cryptocurrencies,
            args_model=TopCryptocurrenciesArgs,
            returns_model=CryptoCardProps,
        ),
    )
}

COMPONENTS: dict[str, Component] = {
    "CryptoCard": Component(
        name="CryptoCard",
        description="Beautiful crypto price card with current price, changes, market cap, and volume.",
        props_model=CryptoCardProps,
    ),
}


def invoke_tool(name: str, args: Any, service: CryptoDataService) -> ToolResult:
    """Run a registered tool and fold taxonomy errors into a ``ToolResult``.

    Raises ``KeyError`` for an unknown tool name.
    """
    tool = TOOLS[name]
    try:
        data = tool.func(args, service)
    except CryptoDataError as exc:
        print(f"[TOOL][error] tool={name} kind={exc.kind} error={exc}", flush=True)
        return ToolResult(ok=False, error=ToolError(kind=exc.kind, message=exc.message))
    return ToolResult(ok=True, data=data)


def tool_manifest() -> dict:
    return {
        "tools": [
            {
                "name": tool.name,
                "description": tool.description,
                "args_schema": tool.args_model.model_json_schema(),
                "returns_schema": tool.returns_model.model_json_schema(mode="serialization", by_alias=True),
            }
            for tool in TOOLS.values()
        ],
        "components": [
            {
                "name": component.name,
                "description": component.description,
                "props_schema": component.props_model.model_json_schema(),
            }
            for component in COMPONENTS.values()
        ],
    }
