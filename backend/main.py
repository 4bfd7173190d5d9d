"""FastAPI application exposing the StockWise inventory core."""

from __future__ import annotations

import logging
from functools import lru_cache

from fastapi import APIRouter, Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.api import catalog as catalog_router
from backend.api import dashboard as dashboard_router
from backend.api import reports as reports_router
from backend.api import stock as stock_router
from backend.dependencies.security import get_current_user
from backend.settings import Settings
from core.inventory_schema import ensure_inventory_tables

logger = logging.getLogger(__name__)

_DEFAULT_DEV_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",
]


@lru_cache
def create_app() -> FastAPI:
    """Build the FastAPI application and mount the domain routers."""

    settings = Settings.load()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="StockWise API",
        version="1.0.0",
        description="""
## Inventory API

- **Products** : filtered listing, creation, partial update, derived stock status
- **Stock** : entrada/saida movements and counted adjustments
- **Stats** : totals, low stock, 6-month movement trend, category breakdown
- **Report** : CSV or PDF export of the whole catalog

Every `/api` route requires a Bearer JWT issued by the authentication service.
        """,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    if not settings.skip_schema_init:
        ensure_inventory_tables()

    allowed_origins = settings.cors_allowed_origins or _DEFAULT_DEV_ORIGINS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials="*" not in allowed_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_router = APIRouter(prefix="/api", dependencies=[Depends(get_current_user)])
    api_router.include_router(catalog_router.router)
    api_router.include_router(stock_router.router)
    api_router.include_router(dashboard_router.router)
    api_router.include_router(reports_router.router)
    app.include_router(api_router)

    @app.get("/health")
    def healthcheck() -> dict[str, str]:
        return {"status": "ok", "service": "stockwise-backend"}

    logger.info("StockWise API ready (env=%s)", settings.app_env)
    return app


app = create_app()


# Run locally: uvicorn backend.main:app --reload --port 8000
