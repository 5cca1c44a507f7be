"""
FastAPI application for the physics lab site backend.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException

from api.auth import router as auth_router
from api.chat import router as chat_router
from api.handlers import (
    auth_exception_handler,
    general_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from api.schemas import HealthResponse
from api.services import AppServices, build_services
from auth.exceptions import AuthException
from config import Config

logger = logging.getLogger(__name__)


def create_app(services: AppServices | None = None) -> FastAPI:
    """Build the application.

    Without ``services`` the lifespan wires production services from
    ``Config`` and refuses to start when required settings are missing.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup/shutdown."""
        app.state.services = services or build_services()
        logger.info("Server ready (debug=%s)", Config.DEBUG)
        yield
        logger.info("Shutting down...")
        await app.state.services.shutdown()

    app = FastAPI(
        title="Physics Lab API",
        description="Accounts with email verification and a rate-limited lab assistant chat",
        lifespan=lifespan,
    )

    allow_all = Config.CORS_ORIGINS == ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=Config.CORS_ORIGINS,
        # Browsers reject credentialed responses with a wildcard origin
        allow_credentials=not allow_all,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    app.add_exception_handler(AuthException, auth_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    app.include_router(auth_router, prefix="/auth", tags=["auth"])
    app.include_router(chat_router, prefix="/chat", tags=["chat"])

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        """Health check."""
        return HealthResponse(
            status="healthy",
            apiKeyPresent=bool(Config.GEMINI_API_KEY),
            debug=Config.DEBUG,
        )

    # Mounted last so API routes take precedence
    if Config.STATIC_DIR:
        app.mount("/", StaticFiles(directory=Config.STATIC_DIR, html=True), name="static")

    return app


app = create_app()


def run() -> None:
    """Console entry point."""
    import uvicorn

    logging.basicConfig(
        level=logging.DEBUG if Config.DEBUG else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger.info("Starting server on port %s", Config.PORT)
    uvicorn.run("api.main:app", host=Config.API_HOST, port=Config.PORT)


if __name__ == "__main__":
    run()
