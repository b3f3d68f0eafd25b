"""Supabase-backed task status tracker."""

import traceback
from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from nutrient_mapping.domain.tasks import TaskRecord, TaskState
from nutrient_mapping.services.tasks import TaskStatusTracker


@dataclass
class SupabaseTaskRepository(TaskStatusTracker):
    """Supabase implementation for background task status."""

    client: Client

    def create_task(self, owner_id: int, task_type: str) -> int:
        """Create a task row and return its id."""
        response = (
            self.client.table("tasks")
            .insert(
                {
                    "owner_id": owner_id,
                    "type": task_type,
                    "created_at": _now(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create task")
        return int(response.data[0]["id"])

    def set_started(self, task_id: int) -> None:
        """Record the task start time."""
        self.client.table("tasks").update({"started_at": _now()}).eq(
            "id", task_id
        ).execute()

    def set_successful(self, task_id: int, result: dict[str, object] | None) -> None:
        """Record a successful completion with an optional result payload."""
        self.client.table("tasks").update(
            {"completed_at": _now(), "successful": True, "result": result}
        ).eq("id", task_id).execute()

    def set_failed(self, task_id: int, error: BaseException) -> None:
        """Record a failed completion with the error message and stack trace."""
        self.client.table("tasks").update(
            {
                "completed_at": _now(),
                "successful": False,
                "error_message": str(error) or type(error).__name__,
                "stack_trace": "".join(traceback.format_exception(error)),
            }
        ).eq("id", task_id).execute()

    def get_task(self, task_id: int) -> TaskRecord | None:
        """Return a task by id, if present."""
        response = (
            self.client.table("tasks")
            .select(
                "id, owner_id, type, created_at, started_at, completed_at, "
                "successful, result, error_message"
            )
            .eq("id", task_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_task(response.data[0])


def _now() -> str:
    return datetime.now(tz=UTC).isoformat()


def _parse_timestamp(value: object) -> datetime | None:
    if isinstance(value, str) and value:
        return datetime.fromisoformat(value)
    return None


def _task_state(row: dict[str, object]) -> TaskState:
    if row.get("completed_at"):
        return TaskState.SUCCESSFUL if row.get("successful") else TaskState.FAILED
    if row.get("started_at"):
        return TaskState.STARTED
    return TaskState.CREATED


def _parse_task(row: dict[str, object]) -> TaskRecord:
    return TaskRecord(
        id=int(row["id"]),
        owner_id=int(row["owner_id"]),
        type=str(row["type"]),
        state=_task_state(row),
        created_at=_parse_timestamp(row.get("created_at")),
        started_at=_parse_timestamp(row.get("started_at")),
        completed_at=_parse_timestamp(row.get("completed_at")),
        result=row.get("result"),
        error=row.get("error_message"),
    )
