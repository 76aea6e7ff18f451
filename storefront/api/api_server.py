"""
FastAPI server for the storefront.

Serves the product grid, cart page and checkout page, the JSON cart API and
the payment verification proxy.
"""
from __future__ import annotations

import logging
import os
import urllib.parse
from contextlib import asynccontextmanager
from typing import Any

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from storefront import __version__
from storefront.api.rate_limit import limiter
from storefront.api.routes_cart import router as cart_router
from storefront.api.routes_checkout import router as checkout_router
from storefront.api.routes_verify import router as verify_router
from storefront.checkout.verification import HttpVerificationClient
from storefront.core.config import Settings, debug_enabled, load_settings
from storefront.integrations.paystack import get_verifier
from storefront.integrations.storage import KeyValueStorage, create_storage

logger = logging.getLogger(__name__)


def _origin_from_url(value: str | None) -> str | None:
    if not value:
        return None
    try:
        parsed = urllib.parse.urlsplit(value.strip())
    except ValueError:
        return None
    if not parsed.scheme or not parsed.netloc:
        return None
    return f"{parsed.scheme}://{parsed.netloc}"


def create_api_app(
    settings: Settings | None = None,
    storage: KeyValueStorage | None = None,
    verifier: Any = None,
    checkout_verifier: Any = None,
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        settings: Loaded settings (read from the environment when omitted)
        storage: Shared cart storage backend (Redis or memory per REDIS_URL)
        verifier: Payment verifier behind /verify-payment (Paystack when a secret key is configured)
        checkout_verifier: Verifier the checkout flow asks (the /verify-payment proxy at VERIFY_URL)
    """
    settings = settings or load_settings()
    storage = storage if storage is not None else create_storage(settings.redis_url)
    verifier = verifier or get_verifier(settings.paystack)
    checkout_verifier = checkout_verifier or HttpVerificationClient(settings.verify_url)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Storefront starting (environment=%s)", settings.environment)
        if not settings.paystack.verification_enabled:
            logger.warning("PAYSTACK_SECRET_KEY is not set; payments cannot be verified")
        yield
        logger.info("Storefront shutting down")

    app = FastAPI(
        title="Storefront",
        version=__version__,
        lifespan=lifespan,
        debug=debug_enabled(),
        docs_url="/api/docs" if settings.is_dev else None,
        redoc_url=None,
    )
    app.state.settings = settings
    app.state.storage = storage
    app.state.verifier = verifier
    app.state.checkout_verifier = checkout_verifier

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    allowed_origins: list[str] = []
    for raw in os.getenv("CORS_ALLOWED_ORIGINS", "").split(","):
        origin = _origin_from_url(raw)
        if origin and origin not in allowed_origins:
            allowed_origins.append(origin)
    if settings.is_dev:
        allowed_origins.extend(["http://localhost:8000", "http://127.0.0.1:8000"])

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "X-Requested-With"],
    )

    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Frame-Options"] = "SAMEORIGIN"
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        if request.url.path.startswith(("/checkout", "/verify-payment", "/api/")):
            response.headers["Cache-Control"] = "no-store"
        return response

    app.include_router(verify_router)
    app.include_router(checkout_router)
    app.include_router(cart_router)

    @app.get("/health")
    async def health():
        return {"status": "ok", "service": "storefront", "version": __version__}

    return app


async def run_api_server(settings: Settings | None = None, host: str = "0.0.0.0", port: int | None = None):
    """Run the server inside an existing event loop."""
    settings = settings or load_settings()
    app = create_api_app(settings)

    config = uvicorn.Config(
        app, host=host, port=port or settings.port, log_level="info", access_log=True
    )
    server = uvicorn.Server(config)

    logger.info(f"Starting storefront on http://{host}:{port or settings.port}")
    await server.serve()
