"""
Kaos Euy Storefront

Catalog, cart and checkout API for a custom-apparel shop, plus the
custom design request intake and the admin back-office.
"""

import os
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.templating import Jinja2Templates
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

from .core.config import Settings, get_settings
from .core.errors import register_exception_handlers
from .core.middleware import RequestIdMiddleware
from .core.rate_limit import FixedWindowRateLimiter
from .database.carts import CartStore
from .pricing import CUSTOM_FEE_PER_POSITION, DISCOUNT_TIERS, format_idr
from .routes import (
    admin_router,
    cart_router,
    custom_requests_router,
    orders_router,
    products_router,
    uploads_router,
)
from .services.backend import BackendClient
from .services.notifications import SlackNotifier

# Load environment variables
load_dotenv()

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if get_settings().debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

templates_dir = os.path.join(os.path.dirname(__file__), "templates")
templates = Jinja2Templates(directory=templates_dir) if os.path.exists(templates_dir) else None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    settings: Settings = app.state.settings
    logger.info("Storefront starting up...")
    logger.info(f"Environment: {settings.environment}")
    missing = settings.missing_required()
    if missing:
        logger.warning(f"Missing configuration: {', '.join(missing)}")
    logger.info(f"Slack notifications: {'enabled' if settings.slack_webhook_url else 'disabled'}")

    yield

    logger.info("Storefront shutting down...")
    await app.state.backend.close()
    await app.state.notifier.close()


def create_app(
    settings: Optional[Settings] = None,
    backend: Optional[BackendClient] = None,
    notifier: Optional[SlackNotifier] = None,
    rate_limiter: Optional[FixedWindowRateLimiter] = None,
) -> FastAPI:
    """
    Build the application.

    Collaborators default to the ones described by ``settings``; tests pass
    their own in-memory replacements.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Storefront API for custom apparel orders",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.backend = backend or BackendClient(
        settings.supabase_url or "",
        settings.supabase_service_role_key or "",
        timeout=settings.backend_timeout_seconds,
    )
    app.state.notifier = notifier or SlackNotifier(settings.slack_webhook_url)
    app.state.carts = CartStore()
    app.state.rate_limiter = rate_limiter if rate_limiter is not None else FixedWindowRateLimiter()

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIdMiddleware)

    register_exception_handlers(app)

    # Include API routers
    app.include_router(products_router)
    app.include_router(cart_router)
    app.include_router(orders_router)
    app.include_router(custom_requests_router)
    app.include_router(uploads_router)
    app.include_router(admin_router)

    @app.get("/")
    async def home(request: Request):
        """Storefront home page"""
        if templates:
            return templates.TemplateResponse(
                request,
                "index.html",
                {
                    "title": settings.app_name,
                    "tiers": DISCOUNT_TIERS,
                    "custom_fee": format_idr(CUSTOM_FEE_PER_POSITION),
                },
            )
        return {
            "message": "Storefront API",
            "docs": "/docs",
            "endpoints": {
                "products": "/api/products",
                "cart": "/api/cart",
                "orders": "/api/orders",
                "custom_requests": "/api/custom-requests",
                "admin": "/api/admin",
            },
        }

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        missing = settings.missing_required()
        return {
            "status": "healthy" if not missing else "degraded",
            "service": "storefront",
            "missing_config": missing,
            "notifications_configured": bool(settings.slack_webhook_url),
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "storefront.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
