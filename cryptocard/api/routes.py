from fastapi import APIRouter, Body, HTTPException, Request
from fastapi.responses import HTMLResponse, JSONResponse

from cryptocard.errors import (
    ConfigurationError,
    MalformedInputError,
    SymbolNotFoundError,
    UpstreamError,
)
from cryptocard.integrations.cmc_rest import CoinMarketCapRestClient
from cryptocard.schemas.tool import ToolResult
from cryptocard.tools.registry import get_crypto_price, invoke_tool, tool_manifest
from cryptocard.ui.crypto_card import render_crypto_card, render_html

router = APIRouter()

_CONFIG_ERROR = 'API key not configured'


def _cmc_client(request: Request) -> CoinMarketCapRestClient:
    settings = request.app.state.get_settings()
    return CoinMarketCapRestClient(
        api_key=settings.CMC_API_KEY,
        api_version=settings.CMC_API_VERSION,
        convert=settings.CMC_CONVERT,
        timeout=settings.CMC_TIMEOUT_SEC,
        session=request.app.state.cmc_session,
        base_url=settings.CMC_BASE_URL,
    )


def _upstream_failure(message: str, exc: UpstreamError) -> JSONResponse:
    return JSONResponse(
        {'error': message, 'kind': 'UPSTREAM', 'upstream_status': exc.status_code, 'detail': exc.detail or exc.message},
        status_code=500,
    )


@router.get('/health')
def health(request: Request):
    settings = request.app.state.get_settings()
    return {'ok': True, 'api_key_configured': settings.api_key_configured}


@router.get('/quote')
def get_quote(request: Request, symbol: str | None = None):
    if not symbol or not symbol.strip():
        return JSONResponse({'error': 'Symbol parameter is required', 'kind': 'MALFORMED_INPUT'}, status_code=400)

    try:
        client = _cmc_client(request)
    except ConfigurationError:
        print('[API][quote] error=api_key_missing', flush=True)
        return JSONResponse({'error': _CONFIG_ERROR, 'kind': 'CONFIGURATION'}, status_code=500)

    try:
        return client.get_quotes_latest(symbol.strip())
    except UpstreamError as exc:
        print(f'[API][quote] symbol={symbol.strip().upper()} error={exc}', flush=True)
        return _upstream_failure('Failed to fetch cryptocurrency data', exc)


@router.get('/listings')
def get_listings(request: Request):
    try:
        client = _cmc_client(request)
    except ConfigurationError:
        print('[API][listings] error=api_key_missing', flush=True)
        return JSONResponse({'error': _CONFIG_ERROR, 'kind': 'CONFIGURATION'}, status_code=500)

    limit = request.app.state.get_settings().CMC_LISTING_LIMIT
    try:
        return client.get_listings_latest(limit)
    except UpstreamError as exc:
        print(f'[API][listings] limit={limit} error={exc}', flush=True)
        return _upstream_failure('Failed to fetch cryptocurrency listings', exc)


@router.get('/tools')
def list_tools():
    return tool_manifest()


@router.post('/tools/{name}', response_model=ToolResult)
def run_tool(name: str, request: Request, args: dict = Body(default_factory=dict)):
    service = request.app.state.crypto_data_service_factory()
    try:
        return invoke_tool(name, args, service)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail='tool not found') from exc


@router.get('/card/{symbol}', response_class=HTMLResponse)
def get_card(symbol: str, request: Request):
    service = request.app.state.crypto_data_service_factory()
    try:
        props = get_crypto_price({'symbol': symbol}, service)
    except MalformedInputError as exc:
        raise HTTPException(status_code=400, detail=exc.message) from exc
    except SymbolNotFoundError as exc:
        raise HTTPException(status_code=404, detail=exc.message) from exc
    except (ConfigurationError, UpstreamError) as exc:
        raise HTTPException(status_code=500, detail=exc.message) from exc
    return render_html(render_crypto_card(props))
