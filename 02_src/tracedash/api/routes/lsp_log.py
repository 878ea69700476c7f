"""LSP log API routes."""

from typing import Any

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from ...app import Application
from ...models import LogEntry


class LogEntryResponse(BaseModel):
    """Response model for one rendered log entry."""

    id: int
    timestamp: int
    summary: str
    category: str | None
    classes: list[str]
    has_id: bool
    has_method: bool
    has_error: bool
    has_params: bool


class ParamResponse(BaseModel):
    name: str
    value: str


class LogEntryDetailsResponse(BaseModel):
    """Response model for the details pane."""

    id: int | None
    message: dict[str, Any] | None
    params: list[ParamResponse]


def _entry_response(entry: LogEntry) -> LogEntryResponse:
    return LogEntryResponse(
        id=entry.id,
        timestamp=entry.timestamp,
        summary=entry.summary,
        category=entry.category.value if entry.category else None,
        classes=entry.css_classes(),
        has_id=entry.has_id,
        has_method=entry.has_method,
        has_error=entry.has_error,
        has_params=entry.has_params,
    )


def create_lsp_log_router(app: Application) -> APIRouter:
    """Create LSP log router."""
    router = APIRouter(prefix="/api/lsp-log", tags=["lsp-log"])

    def details() -> LogEntryDetailsResponse:
        selected = app.lsp_log.selected
        return LogEntryDetailsResponse(
            id=selected.id if selected else None,
            message=selected.message if selected else None,
            params=[
                ParamResponse(name=name, value=value)
                for name, value in app.lsp_log.details_view.params
            ],
        )

    @router.get("", response_model=list[LogEntryResponse])
    async def list_entries() -> list[LogEntryResponse]:
        """Get all log entries in arrival order."""
        return [_entry_response(entry) for entry in app.lsp_log.entries]

    @router.get("/selected", response_model=LogEntryDetailsResponse)
    async def get_selected() -> LogEntryDetailsResponse:
        """Get the details of the selected entry."""
        return details()

    @router.post("/{entry_id}/select", response_model=LogEntryDetailsResponse)
    async def select_entry(entry_id: int) -> LogEntryDetailsResponse:
        """Select an entry and return its details."""
        if app.lsp_log.select(entry_id) is None:
            raise HTTPException(status_code=404, detail=f"Unknown log entry: {entry_id}")
        return details()

    return router
