"""FastAPI application exposing the pool engine query surface.

Only pool creation mutates state over HTTP; deposits, withdrawals and
swaps need a custody collaborator that authenticates callers, which is
outside this service.
"""

import logging
import os

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from pool_engine import __version__
from pool_engine.api.endpoints import router
from pool_engine.errors import (
    IdenticalTokens,
    InsufficientLiquidity,
    InsufficientShares,
    InvalidAmount,
    InvalidToken,
    PoolAlreadyExists,
    PoolEngineError,
    PoolNotFound,
    ReentrancyRejected,
    TransferError,
)
from pool_engine.models.api import ErrorResponse

logger = structlog.get_logger()

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("POOL_ENGINE_HOST", "0.0.0.0")
PORT = int(os.environ.get("POOL_ENGINE_PORT", "8000"))
DEBUG = os.environ.get("POOL_ENGINE_DEBUG", "false").lower() in ("true", "1", "yes")
LOG_LEVEL = os.environ.get("POOL_ENGINE_LOG_LEVEL", "INFO").upper()

# HTTP status per engine error type
ERROR_STATUS: dict[type[PoolEngineError], int] = {
    PoolNotFound: 404,
    PoolAlreadyExists: 409,
    IdenticalTokens: 400,
    InvalidToken: 400,
    InvalidAmount: 400,
    InsufficientLiquidity: 400,
    InsufficientShares: 400,
    TransferError: 400,
    ReentrancyRejected: 409,
}

app = FastAPI(
    title="Pool Engine",
    description="Constant product AMM pool registry and quotes",
    version=__version__,
)


@app.exception_handler(PoolEngineError)
async def engine_error_handler(request: Request, exc: PoolEngineError) -> JSONResponse:
    """Map engine errors to HTTP responses with a stable error code."""
    status = ERROR_STATUS.get(type(exc), 400)
    logger.info(
        "request_rejected",
        path=request.url.path,
        code=exc.code,
        status=status,
    )
    body = ErrorResponse(code=exc.code, detail=str(exc))
    return JSONResponse(status_code=status, content=body.model_dump())


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
    """Malformed account addresses and similar input errors."""
    logger.info("request_invalid", path=request.url.path, detail=str(exc))
    body = ErrorResponse(code="invalid_input", detail=str(exc))
    return JSONResponse(status_code=400, content=body.model_dump())


app.include_router(router)


@app.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok", "version": __version__}


def configure_logging(level: str = LOG_LEVEL) -> None:
    """Configure structlog for console output at the given level."""
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format="%(message)s")
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level, logging.INFO)
        ),
    )


def run() -> None:
    """Run the pool engine API server.

    Configuration via environment variables:
    - POOL_ENGINE_HOST: Host to bind to (default: 0.0.0.0)
    - POOL_ENGINE_PORT: Port to bind to (default: 8000)
    - POOL_ENGINE_DEBUG: Enable debug/reload mode (default: false)
    - POOL_ENGINE_LOG_LEVEL: Log level (default: INFO)
    """
    configure_logging()
    uvicorn.run(
        "pool_engine.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
