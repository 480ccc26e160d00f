"""
Gateway entry point.

create_app() wires settings, backend clients, routers and the static
browser console into one FastAPI instance. Tests build their own app
with explicit settings; servers import the module-level `app`.

Run locally against an emulator:
    uvicorn cloudconsole.main:app --reload --port 3000

Run without an emulator:
    BACKEND_MOCK_MODE=true uvicorn cloudconsole.main:app --port 3000
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from . import __version__
from .api.dependencies import create_backend_clients
from .api.errors import register_exception_handlers
from .api.routes import health, lambda_functions, s3, sns, sqs
from .config.settings import Settings, get_settings

# Configure logging
logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=logging.INFO,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Runs on startup and shutdown. The backend clients are already built
    by create_app; startup only reports the configuration in use.
    """
    settings: Settings = app.state.settings

    logger.info(
        "Cloud Console API starting",
        extra={
            "version": __version__,
            "endpoint": settings.aws_endpoint,
            "region": settings.aws_region,
            "mock_mode": settings.backend_mock_mode,
        }
    )
    logger.info(
        "LocalStack auth token: %s",
        settings.masked_auth_token or "not set",
    )

    yield

    # Shutdown
    logger.info("Cloud Console API shutting down")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Application factory.

    Creates and configures the FastAPI application. Pass settings
    explicitly in tests; otherwise they are read from the environment.
    """
    if settings is None:
        settings = get_settings()

    logging.getLogger().setLevel(settings.log_level.upper())

    app = FastAPI(
        title=settings.api_title,
        version=__version__,
        description="""
        HTTP gateway for a local cloud emulator.

        ## Features

        - Manage buckets and the files in them
        - List Lambda functions
        - List and create SQS queues and SNS topics

        ## Errors

        Failures return `{"error": "<message>"}`. Backend error details
        are written to the server log only.
        """,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Configuration and clients are built once and never mutated.
    app.state.settings = settings
    app.state.backend = create_backend_clients(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include routers
    app.include_router(health.router, prefix="/health", tags=["Health"])
    app.include_router(s3.router, prefix="/api/s3", tags=["S3"])
    app.include_router(lambda_functions.router, prefix="/api/lambda", tags=["Lambda"])
    app.include_router(sqs.router, prefix="/api/sqs", tags=["SQS"])
    app.include_router(sns.router, prefix="/api/sns", tags=["SNS"])

    # Static console last, so API routes take precedence over files at /
    static_dir = Path(settings.static_dir)
    if static_dir.is_dir():
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")
    else:
        logger.warning(
            "Static directory not found, serving API index at /",
            extra={"static_dir": str(static_dir)}
        )

        @app.get("/", include_in_schema=False)
        async def root():
            """Root endpoint when no browser console is installed."""
            return {
                "message": "Cloud Console API",
                "version": __version__,
                "docs": "/docs",
                "health": "/health",
            }

    logger.info(
        "FastAPI application created",
        extra={
            "title": settings.api_title,
            "version": __version__,
        }
    )

    return app


# Create the application instance
# This is what uvicorn/gunicorn will import
app = create_app()


# For debugging/development
if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "cloudconsole.main:app",
        host=settings.host,
        port=settings.port,
        reload=True,
        log_level=settings.log_level.lower(),
    )
