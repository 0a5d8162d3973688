"""
============================================================================
Project Appeal Desk v1.0.0
FastAPI Application Entry Point - Appeal Ingress
============================================================================

Reliability Level: L6 Critical
Input Constraints: Appeals via POST /api/submit-appeal
Side Effects: Steam login at startup, trade offers, Discord notifications

STARTUP ORDER:
1. Load and validate BotConfig (fatal on CFG-001)
2. Log in to Steam (fatal on GW-005)
3. Initialize Discord notifier (non-blocking)
4. Start OfferWatcher and SessionRenewalWorker
5. Expose AppealIntakeService to the router

SHUTDOWN ORDER is the reverse.

============================================================================
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from dotenv import load_dotenv
from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST

from app.api.appeal import router as appeal_router
from app.exchange.session_gateway import SessionGateway
from app.exchange.steam_gateway import SteamSessionGateway
from app.observability.discord_notifier import initialize_discord_notifier
from services.appeal_intake import AppealIntakeService
from services.bot_config import BotConfig
from services.offer_watcher import OfferWatcher
from services.session_renewal_worker import SessionRenewalWorker

load_dotenv()

logger = logging.getLogger(__name__)


def build_gateway(config: BotConfig) -> SessionGateway:
    """Gateway used by the lifespan; replaced in tests."""
    return SteamSessionGateway(config)


# ============================================================================
# APPLICATION LIFESPAN
# ============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager for startup/shutdown events.

    Login failure aborts startup; the process never serves appeals without
    a trading session.
    """
    logger.info(f"[STARTUP] Appeal Desk starting | time={datetime.now(timezone.utc).isoformat()}")

    config = BotConfig.from_environment(validate=True)

    gateway = build_gateway(config)
    await gateway.start()

    notifier = initialize_discord_notifier(webhook_url=config.discord_webhook_url)

    offer_watcher = OfferWatcher(
        gateway=gateway,
        notifier=notifier,
        interval_seconds=config.offer_poll_interval_seconds,
    )
    await offer_watcher.start()

    renewal_worker = SessionRenewalWorker(
        gateway=gateway,
        interval_seconds=config.session_check_interval_seconds,
    )
    await renewal_worker.start()

    app.state.config = config
    app.state.gateway = gateway
    app.state.notifier = notifier
    app.state.offer_watcher = offer_watcher
    app.state.appeal_service = AppealIntakeService(
        gateway=gateway,
        notifier=notifier,
        offer_watcher=offer_watcher,
    )

    logger.info(f"[STARTUP] Appeal Desk ready | port={config.port}")

    yield

    logger.info("[SHUTDOWN] Appeal Desk stopping")
    app.state.appeal_service = None

    await renewal_worker.stop()
    await offer_watcher.stop()
    notifier.shutdown()
    await gateway.close()

    logger.info("[SHUTDOWN] Complete")


# ============================================================================
# FASTAPI APPLICATION
# ============================================================================

app = FastAPI(
    title="Appeal Desk Ingress",
    description=(
        "Receives trade appeals, requests eligible TF2 items from the "
        "appellant through a Steam trade offer, and reports every outcome "
        "to Discord."
    ),
    version="1.0.0",
    lifespan=lifespan
)


# ============================================================================
# EXCEPTION HANDLERS
# ============================================================================

@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Generic 500 for anything unhandled; details stay in the log."""
    error_code = "SYS-500"
    logger.exception(f"[{error_code}] Unhandled exception | path={request.url.path}")

    return JSONResponse(
        status_code=500,
        content={"success": False, "message": "Internal server error"}
    )


# ============================================================================
# ROUTERS
# ============================================================================

app.include_router(
    appeal_router,
    prefix="/api",
    tags=["Appeals"]
)


@app.get(
    "/health",
    summary="Health Check",
    description="Lightweight health check for load balancers and monitoring.",
    tags=["System"]
)
async def health_check(request: Request):
    gateway = getattr(request.app.state, "gateway", None)
    session_alive = bool(gateway is not None and await gateway.is_session_alive())
    return {"status": "healthy", "session": session_alive}


@app.get(
    "/metrics",
    summary="Prometheus Metrics",
    description="Exposes Prometheus metrics for observability.",
    tags=["Observability"]
)
async def metrics():
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )
