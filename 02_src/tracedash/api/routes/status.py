"""Status API routes."""

from fastapi import APIRouter
from pydantic import BaseModel

from ...app import Application


class StatusResponse(BaseModel):
    """Response model for dashboard status."""

    debug_server_url: str
    connected: bool
    thread_ids: list[int]
    frames_handled: int
    frames_failed: int
    lsp_log_entries: int
    polling: bool


def create_status_router(app: Application) -> APIRouter:
    """Create status router."""
    router = APIRouter(prefix="/api", tags=["status"])

    @router.get("/status", response_model=StatusResponse)
    async def get_status() -> StatusResponse:
        """Get connection and view state."""
        socket = app.socket
        return StatusResponse(
            debug_server_url=app.settings.debug_server_url,
            connected=app.connected,
            thread_ids=socket.thread_ids if socket else [],
            frames_handled=socket.frames_handled if socket else 0,
            frames_failed=socket.frames_failed if socket else 0,
            lsp_log_entries=len(app.lsp_log.entries),
            polling=app.poller.running if app.poller else False,
        )

    return router
