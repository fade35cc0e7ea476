"""
Fleetboard — FastAPI app factory with the refresh lifecycle tied to app startup.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fleetboard.api.dependencies import set_dashboards
from fleetboard.api.router_dashboard import router as dashboard_router
from fleetboard.api.router_meta import router as meta_router
from fleetboard.config import Settings
from fleetboard.logging_config import setup_logging
from fleetboard.runtime import Dashboards

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, http_client=None) -> FastAPI:

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Build the stores, and start refreshing when the configured passcode is accepted."""
        resolved = settings or Settings.from_env()
        setup_logging(resolved.log_level)

        dashboards = Dashboards(resolved, http_client=http_client)
        set_dashboards(dashboards)

        if resolved.autostart:
            session = dashboards.gate.login(resolved.passcode)
            dashboards.start(session)
            logger.info("Fleetboard ready: refreshing %s", ", ".join(dashboards.stores))
        else:
            logger.info("Fleetboard ready: waiting for POST /api/session")
        try:
            yield
        finally:
            await dashboards.aclose()
            set_dashboards(None)

    app = FastAPI(
        title="Fleetboard API",
        description="Live sheet-backed dashboards for vessel inquiries and shipping operations",
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
    app.include_router(dashboard_router)

    return app


app = create_app()
