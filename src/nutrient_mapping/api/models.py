"""Request and response models for the HTTP API."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from nutrient_mapping.domain.tasks import TaskRecord, TaskState


class RecalculateNutrientsRequest(BaseModel):
    """Body of a recalculation request."""

    owner_id: int = Field(ge=0)


class TaskCreated(BaseModel):
    """Identifier of a newly scheduled task."""

    task_id: int


class TaskStatus(BaseModel):
    """Current status of a background task."""

    id: int
    owner_id: int
    type: str
    state: TaskState
    created_at: datetime | None = None
    started_at: datetime | None = None
    completed_at: datetime | None = None
    result: dict[str, Any] | None = None
    error: str | None = None

    @classmethod
    def from_record(cls, record: TaskRecord) -> "TaskStatus":
        return cls(
            id=record.id,
            owner_id=record.owner_id,
            type=record.type,
            state=record.state,
            created_at=record.created_at,
            started_at=record.started_at,
            completed_at=record.completed_at,
            result=record.result,
            error=record.error,
        )
