"""FastAPI application setup."""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from ..app import Application
from .routes import lsp_log, status, vector_profile


def create_fastapi_app(application: Application) -> FastAPI:
    """Create and configure the dashboard API around an application context."""

    @asynccontextmanager
    async def lifespan(fastapi_app: FastAPI):
        """Manage application lifespan."""
        await application.start()
        yield
        await application.stop()

    fastapi_app = FastAPI(
        title="LSP Trace Dashboard API",
        description="Live LSP message log and vector profile of a traced language server",
        version="0.1.0",
        lifespan=lifespan,
    )

    fastapi_app.include_router(status.create_status_router(application))
    fastapi_app.include_router(lsp_log.create_lsp_log_router(application))
    fastapi_app.include_router(vector_profile.create_vector_profile_router(application))

    return fastapi_app
