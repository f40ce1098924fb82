"""
FastAPI Main Application
Portfolio API: holdings, live prices, portfolio and sector summaries
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from portfolio_tracker.config import Settings, settings as default_settings
from portfolio_tracker.core.logging import configure_logging, get_logger
from portfolio_tracker.runtime import PortfolioRuntime
from portfolio_tracker.api.routes import cache, health, portfolio

logger = get_logger(__name__)


def _log_banner(settings: Settings, runtime: PortfolioRuntime) -> None:
    logger.info("=" * 50)
    logger.info("📊 Portfolio API Server")
    logger.info(f"   ✅ Listening on http://{settings.API_HOST}:{settings.PORT}")
    logger.info(f"   ✅ Environment: {settings.APP_ENV}")
    logger.info(f"   ✅ Debug mode: {'ON' if settings.DEBUG else 'OFF'}")
    logger.info(f"   ✅ Holdings loaded: {len(runtime.holdings_store)}")
    logger.info(f"   ✅ Price cache TTL: {runtime.price_cache.ttl_seconds:g}s")
    logger.info("📡 Data Sources:")
    logger.info("   • Yahoo Finance - real-time stock prices")
    logger.info("   • Google Finance - P/E ratio and earnings (scraped)")
    logger.info("=" * 50)


def create_app(
    settings: Optional[Settings] = None,
    runtime: Optional[PortfolioRuntime] = None,
) -> FastAPI:
    """
    Build the application.

    A runtime passed in is used as-is (and is not started or stopped by
    the lifespan); otherwise one is built from settings at startup.
    """
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator:
        owned: Optional[PortfolioRuntime] = None
        if getattr(app.state, "portfolio_runtime", None) is None:
            owned = PortfolioRuntime.from_settings(settings)
            try:
                await owned.start()
            except Exception:
                logger.error("❌ Failed to load portfolio data; refusing to serve")
                await owned.stop()
                raise
            app.state.portfolio_runtime = owned

        _log_banner(settings, app.state.portfolio_runtime)
        yield

        if owned is not None:
            logger.info("🛑 Shutting down portfolio runtime...")
            await owned.stop()
            app.state.portfolio_runtime = None

    app = FastAPI(
        title="Portfolio Tracker API",
        description="Equity holdings enriched with live prices and fundamentals",
        version=settings.APP_VERSION,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.portfolio_runtime = runtime

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if settings.DEBUG:
        @app.middleware("http")
        async def log_requests(request: Request, call_next):
            logger.debug(f"{request.method} {request.url.path}")
            return await call_next(request)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        # A known path with the wrong method is still an unknown endpoint
        if (exc.status_code, exc.detail) in ((404, "Not Found"), (405, "Method Not Allowed")):
            return JSONResponse(status_code=404, content={"error": "Endpoint not found"})
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"error": "Invalid request"})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Server error on {request.method} {request.url.path}")
        content = {"error": "Internal server error"}
        if settings.DEBUG:
            content["message"] = str(exc)
        return JSONResponse(status_code=500, content=content)

    app.include_router(health.router, tags=["Health"])
    app.include_router(portfolio.router, prefix="/api", tags=["Portfolio"])
    app.include_router(cache.router, prefix="/api", tags=["Price Cache"])

    return app


configure_logging(default_settings)
app = create_app()


if __name__ == "__main__":
    from portfolio_tracker.cli import main
    main()
