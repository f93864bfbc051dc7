from __future__ import annotations

from contextlib import asynccontextmanager

import requests
from fastapi import FastAPI

from cryptocard.api.routes import router
from cryptocard.config.settings import get_settings
from cryptocard.services.crypto_data import CryptoDataService


def _default_crypto_data_service() -> CryptoDataService:
    settings = app.state.get_settings()
    return CryptoDataService(
        base_url=settings.PROXY_BASE_URL,
        timeout=settings.CMC_TIMEOUT_SEC * 2,
        convert=settings.CMC_CONVERT,
        top_count=settings.TOP_CRYPTO_COUNT,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = app.state.get_settings()
    print(
        "[APP][startup] "
        f"api_key_configured={int(settings.api_key_configured)} "
        f"cmc_base_url={settings.CMC_BASE_URL} cmc_api_version={settings.CMC_API_VERSION} "
        f"listing_limit={settings.CMC_LISTING_LIMIT}",
        flush=True,
    )
    try:
        yield
    finally:
        print("[APP][shutdown]", flush=True)


app = FastAPI(title="Crypto Price Card", version="0.1.0", lifespan=lifespan)
app.include_router(router)

# NOTE: lazy-loaded so app import does not require env during tests.
app.state.get_settings = get_settings
app.state.cmc_session = requests
app.state.crypto_data_service_factory = _default_crypto_data_service
