"""Clinical trial lookup endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Query, status

from pharmagenie.application.services import TrialService
from pharmagenie.domain.exceptions import EntityNotFoundError
from pharmagenie.infrastructure.dependencies import get_trial_service

router = APIRouter(prefix="/trials", tags=["Trials"])


@router.get("")
async def list_trials(
    limit: int | None = Query(default=None, ge=1, le=500),
    service: TrialService = Depends(get_trial_service),
) -> list[dict]:
    return await service.list_trials(limit)


@router.get("/{trial_id}")
async def get_trial(
    trial_id: str,
    service: TrialService = Depends(get_trial_service),
) -> dict:
    """A trial with its sites, participants and adverse events."""
    try:
        return await service.get_trial_detail(trial_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
