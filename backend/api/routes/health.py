"""
Health check endpoint.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from api.dependencies import get_panel
from modules.debates.panel import PanelRegistry
from shared.config import get_settings

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    version: str
    panel_size: int


@router.get("/health", response_model=HealthResponse)
async def health_check(panel: PanelRegistry = Depends(get_panel)) -> HealthResponse:
    """
    Basic health check endpoint.

    Returns 200 if the API is running.
    """
    return HealthResponse(
        status="healthy",
        version=get_settings().app_version,
        panel_size=panel.size,
    )
