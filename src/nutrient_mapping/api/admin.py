"""Admin API endpoints with simple token auth."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from nutrient_mapping.api.models import (
    RecalculateNutrientsRequest,
    TaskCreated,
    TaskStatus,
)
from nutrient_mapping.errors import SurveyNotFoundError, TaskNotFoundError

if TYPE_CHECKING:
    from nutrient_mapping.containers import AppContainer

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.post(
    "/surveys/{survey_id}/recalculate-nutrients",
    status_code=status.HTTP_202_ACCEPTED,
    dependencies=[Depends(require_admin)],
)
def recalculate_nutrients(
    survey_id: str, body: RecalculateNutrientsRequest, request: Request
) -> TaskCreated:
    """Schedule a nutrient recalculation for every food in a survey."""
    container: AppContainer = request.app.state.container
    try:
        task_id = container.nutrient_mapping_service.recalculate_nutrients(
            owner_id=body.owner_id, survey_id=survey_id
        )
    except SurveyNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
        ) from exc
    return TaskCreated(task_id=task_id)


@router.get("/tasks/{task_id}", dependencies=[Depends(require_admin)])
def task_status(task_id: int, request: Request) -> TaskStatus:
    """Return the status of a background task."""
    container: AppContainer = request.app.state.container
    try:
        record = container.nutrient_mapping_service.get_task(task_id)
    except TaskNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
        ) from exc
    return TaskStatus.from_record(record)
