"""
IndyGx — FastAPI app factory with startup data loading and live change tracking.
"""
from __future__ import annotations

import logging
from contextlib import AsyncExitStack, asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from indygx.config import LOG_LEVEL
from indygx.data.client import EcosystemClient
from indygx.data.store import EcosystemStore
from indygx.api.dependencies import set_store
from indygx.api.router_meta import router as meta_router
from indygx.api.router_organizations import router as organizations_router
from indygx.api.router_dashboard import router as dashboard_router
from indygx.api.router_reports import router as reports_router

logger = logging.getLogger(__name__)


def configure_logging(level: str = LOG_LEVEL) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_app(store: EcosystemStore | None = None, watch: bool = True) -> FastAPI:
    """Build the API.

    With no store given, the lifespan opens an EcosystemClient from the
    environment and owns it until shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        async with AsyncExitStack() as stack:
            active = store
            if active is None:
                client = EcosystemClient()
                await client.open()
                stack.push_async_callback(client.close)
                active = EcosystemStore(client)

            if not active.is_loaded and active.client is not None:
                try:
                    await active.refresh()
                except Exception:
                    # last_error is served by /api/health and every data endpoint
                    logger.exception("Initial load failed")

            if watch and active.client is not None:
                await stack.enter_async_context(active.watch())

            set_store(active)
            logger.info("IndyGx ready: %d organizations", active.count())
            try:
                yield
            finally:
                set_store(None)

    app = FastAPI(
        title="IndyGx Ecosystem API",
        description="Startup ecosystem intelligence: organizations, stats, comparisons, reports",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(meta_router)
    app.include_router(organizations_router)
    app.include_router(dashboard_router)
    app.include_router(reports_router)

    return app


configure_logging()
app = create_app()
