"""
Debate API endpoints.

Errors raised by the service are CouncilError subclasses; the application's
exception handler turns them into JSON responses with a status code.
"""

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from api.dependencies import get_debate_service, get_panel

from .interfaces import IDebateService
from .models import (
    AdmissionStatus,
    Debate,
    DebateSummary,
    Results,
    StartDebateRequest,
    StartDebateResponse,
    VotingResponse,
)
from .panel import PanelRegistry
from .service import DEFAULT_LIST_LIMIT, MAX_LIST_LIMIT

router = APIRouter()
panel_router = APIRouter()


class PanelMemberResponse(BaseModel):
    """Public view of a panel member (persona prompt omitted)."""

    id: str
    display_name: str


@router.post("", response_model=StartDebateResponse, status_code=201)
async def start_debate(
    request: StartDebateRequest,
    service: IDebateService = Depends(get_debate_service),
) -> StartDebateResponse:
    """
    Start a debate.

    Collects one opinion from every panel member before returning.
    """
    return await service.start_debate(request.topic)


@router.get("", response_model=list[DebateSummary])
async def list_debates(
    limit: int = Query(default=DEFAULT_LIST_LIMIT, ge=1, le=MAX_LIST_LIMIT),
    service: IDebateService = Depends(get_debate_service),
) -> list[DebateSummary]:
    """List recent debates, most recent first."""
    return await service.list_past_debates(limit)


# Declared before /{debate_id} so "admission" is not taken as an ID
@router.get("/admission", response_model=AdmissionStatus)
async def get_admission_status(
    service: IDebateService = Depends(get_debate_service),
) -> AdmissionStatus:
    """Current usage against the hourly and lifetime debate ceilings."""
    return await service.get_admission_status()


@router.get("/{debate_id}", response_model=Debate)
async def get_debate(
    debate_id: str,
    service: IDebateService = Depends(get_debate_service),
) -> Debate:
    return await service.get_debate(debate_id)


@router.post("/{debate_id}/votes", response_model=VotingResponse)
async def conduct_voting(
    debate_id: str,
    service: IDebateService = Depends(get_debate_service),
) -> VotingResponse:
    """Run the voting round of a debate whose opinions are complete."""
    return await service.conduct_voting(debate_id)


@router.get("/{debate_id}/results", response_model=Results)
async def get_results(
    debate_id: str,
    service: IDebateService = Depends(get_debate_service),
) -> Results:
    """
    Get debate results.

    Tallies the votes first if the debate has finished voting but has not
    been resolved yet.
    """
    return await service.get_results(debate_id)


@panel_router.get("", response_model=list[PanelMemberResponse])
async def list_panel(
    panel: PanelRegistry = Depends(get_panel),
) -> list[PanelMemberResponse]:
    """The council's members, in panel order."""
    return [
        PanelMemberResponse(id=member.id, display_name=member.display_name)
        for member in panel
    ]
