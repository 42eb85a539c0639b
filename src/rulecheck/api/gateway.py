"""
API Gateway -- FastAPI application factory.

Creates the FastAPI app with routes, middleware, and the shared engine.
This is the entrypoint for uvicorn:

    uvicorn rulecheck.api.gateway:create_app --factory --host 0.0.0.0 --port 8000

Or for development:

    uvicorn rulecheck.api.gateway:app --reload

Security:
  - CORS restricted to configured origins (default: localhost only)
  - Rate limiting on engine endpoints
  - All external input validated at boundary
"""

import logging
import os
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..config import EngineConfig
from ..engine import ComplianceEngine
from ..oracle import create_oracle
from .middleware.rate_limit import SlidingWindowLimiter, rate_limit_from_env
from .routes import health, preview, validate

logger = logging.getLogger(__name__)

DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:8000",
    "http://localhost:8080",
]


def _get_cors_origins() -> list[str]:
    """Load CORS origins from environment or use safe defaults."""
    origins_env = os.environ.get("CORS_ORIGINS", "")
    if origins_env.strip():
        return [o.strip() for o in origins_env.split(",") if o.strip()]
    return DEFAULT_CORS_ORIGINS


def create_app(
    config: EngineConfig | None = None,
    oracle=None,
    rate_limit: int | None = None,
) -> FastAPI:
    """
    Application factory -- creates and configures the FastAPI app.

    Args:
        config: Engine configuration (read from environment if None).
        oracle: TextOracle to use when the config enables it. If None and the
            config enables the oracle, one is built from provider API keys.
        rate_limit: Requests per minute per client (RATE_LIMIT_PER_MINUTE if None).
    """
    if config is None:
        config = EngineConfig.from_env()

    if oracle is None and config.oracle_enabled:
        try:
            oracle = create_oracle()
        except Exception as e:
            logger.warning(f"[Gateway] Oracle init failed (non-fatal): {e}")
            oracle = None

    application = FastAPI(
        title="rulecheck API",
        description="Validate documents against plain-language compliance rules",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=_get_cors_origins(),
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["Authorization", "Content-Type"],
    )

    @application.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"[Gateway] Unhandled error on {request.url.path}")
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})

    application.state.engine = ComplianceEngine(config, oracle=oracle)
    application.state.config = config
    application.state.rate_limiter = SlidingWindowLimiter(
        limit=rate_limit if rate_limit is not None else rate_limit_from_env()
    )
    application.state.start_time = time.time()

    application.include_router(health.router, tags=["Health"])
    application.include_router(preview.router, prefix="/api/v1", tags=["Rules"])
    application.include_router(validate.router, prefix="/api/v1", tags=["Validation"])

    logger.info("[Gateway] API gateway initialized")
    return application


app = create_app()
