"""FastAPI application factory for the Stock Modeler API."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from stockmodeler import __version__
from stockmodeler.config import Settings
from stockmodeler.errors import (
    InsufficientDataError,
    InvalidParameterError,
    PriceDataUnavailableError,
    StockModelerError,
)
from stockmodeler.web.schemas import ErrorDetail, ErrorResponse

logger = logging.getLogger(__name__)

# Domain error -> (HTTP status, error code)
ERROR_STATUS = {
    InvalidParameterError: (400, "invalid_parameter"),
    PriceDataUnavailableError: (404, "price_data_unavailable"),
    InsufficientDataError: (422, "insufficient_data"),
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: the price collector is created lazily per app."""
    logger.info("Starting Stock Modeler API...")
    yield
    logger.info("Stock Modeler API shutdown complete")


async def _domain_error_handler(request: Request, exc: StockModelerError) -> JSONResponse:
    status, code = next(
        (v for cls, v in ERROR_STATUS.items() if isinstance(exc, cls)),
        (500, "internal_error"),
    )
    logger.warning("%s %s -> %d: %s", request.method, request.url.path, status, exc)
    return JSONResponse(
        status_code=status,
        content=ErrorResponse(error=ErrorDetail(code=code, message=str(exc))).model_dump(),
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    if settings is None:
        settings = Settings()

    app = FastAPI(
        title="Stock Modeler API",
        description="Monte Carlo price simulation of an equity against a benchmark fund",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.collector = None

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["GET"],
        allow_headers=["Content-Type", "Accept"],
    )

    app.add_exception_handler(StockModelerError, _domain_error_handler)
    _register_routers(app)

    return app


def _register_routers(app: FastAPI):
    """Register all API routers."""
    from stockmodeler.web.routers.simulation import router as simulation_router
    from stockmodeler.web.routers.system import router as system_router

    app.include_router(simulation_router, prefix="/api/v1")
    app.include_router(system_router, prefix="/api/v1")
