"""FastAPI application factory."""

import logging
import time
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import sessionmaker

import timebill
from timebill.api.errors import register_error_handlers
from timebill.api.routers import ALL_ROUTERS
from timebill.calculators import utc_now
from timebill.config import TimebillConfig, get_config
from timebill.db import create_db_engine, get_session_factory, init_database
from timebill.utils.logging_utils import LogContext, generate_correlation_id

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def create_app(
    config: Optional[TimebillConfig] = None,
    session_factory: Optional[sessionmaker] = None,
) -> FastAPI:
    """Build the API application.

    Args:
        config: Application settings (default: the process-wide configuration)
        session_factory: Session factory to use; when omitted an engine is
            created from DATABASE_URL and missing tables are created

    Returns:
        Configured FastAPI application with all routes under ``/api``
    """
    config = config or get_config()
    if session_factory is None:
        engine = create_db_engine(config.database_url, config.database_echo)
        init_database(engine)
        session_factory = get_session_factory(engine)

    app = FastAPI(
        title="Timebill API",
        version=timebill.__version__,
        debug=config.debug,
    )
    app.state.config = config
    app.state.session_factory = session_factory

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[config.frontend_url],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER, "Content-Disposition"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or generate_correlation_id()
        started = time.perf_counter()
        with LogContext(correlation_id=request_id):
            response = await call_next(request)
            duration_ms = (time.perf_counter() - started) * 1000
            logger.info(
                f"{request.method} {request.url.path} {response.status_code} "
                f"{duration_ms:.1f}ms",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": response.status_code,
                    "duration_ms": round(duration_ms, 1),
                },
            )
        response.headers[REQUEST_ID_HEADER] = request_id
        return response

    register_error_handlers(app)

    @app.get("/api/health", tags=["health"])
    def health():
        return {"status": "Server is running", "timestamp": utc_now().isoformat()}

    for router in ALL_ROUTERS:
        app.include_router(router, prefix="/api")

    logger.info(f"Application created ({config.environment})")
    return app
