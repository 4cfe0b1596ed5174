"""
FastAPI main application for the portfolio engine.
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from portfolio_engine.core.exceptions.portfolio import (
    AssetValidationError,
    ConfigurationError,
    MissingRateError,
    ValidationError,
)

from .routers import comparison, portfolio

app = FastAPI(
    title="Portfolio Engine API",
    version="1.0.0",
    description="Valuation, liquidity and snapshot comparison for multi-currency portfolios",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",  # Development frontend
        "http://localhost:8080",  # Alternative development port
    ],
    allow_credentials=False,
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type", "Authorization", "Accept", "Origin"],
)

app.include_router(portfolio.router, prefix="/api/portfolio", tags=["portfolio"])
app.include_router(comparison.router, prefix="/api/comparison", tags=["comparison"])


@app.exception_handler(AssetValidationError)
async def asset_validation_handler(request: Request, exc: AssetValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={
            "error": "asset_validation_error",
            "message": str(exc),
            "details": {"errors": exc.errors, "asset_name": exc.asset_name},
        },
    )


@app.exception_handler(MissingRateError)
async def missing_rate_handler(request: Request, exc: MissingRateError) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={
            "error": "missing_rate",
            "message": str(exc),
            "details": {"currency": exc.currency, "view_currency": exc.view_currency},
        },
    )


@app.exception_handler(ValidationError)
async def validation_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=422, content={"error": "validation_error", "message": str(exc)}
    )


@app.exception_handler(ConfigurationError)
async def configuration_handler(request: Request, exc: ConfigurationError) -> JSONResponse:
    logger.error(f"Configuration error while handling {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500, content={"error": "configuration_error", "message": str(exc)}
    )


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint returning API information."""
    return {"message": "Portfolio Engine API", "version": "1.0.0", "status": "running"}


@app.get("/health")
async def health() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}
