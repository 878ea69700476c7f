"""Vector profile API routes."""

from fastapi import APIRouter
from pydantic import BaseModel

from ...app import Application


class HistogramRowResponse(BaseModel):
    size: int
    count: int
    label: str
    scale: str


class HistogramResponse(BaseModel):
    """Response model for one owner's histogram."""

    owner: str
    total: int
    max: int
    rows: list[HistogramRowResponse]


def create_vector_profile_router(app: Application) -> APIRouter:
    """Create vector profile router."""
    router = APIRouter(prefix="/api", tags=["vector-profile"])

    @router.get("/vector-profile", response_model=list[HistogramResponse])
    async def get_histograms() -> list[HistogramResponse]:
        """Get every owner's max-size histogram."""
        return [
            HistogramResponse(
                owner=block.owner,
                total=block.total,
                max=block.max,
                rows=[
                    HistogramRowResponse(
                        size=row.size, count=row.count, label=row.label, scale=row.scale
                    )
                    for row in block.rows
                ],
            )
            for block in app.vector_profile.blocks
        ]

    return router
