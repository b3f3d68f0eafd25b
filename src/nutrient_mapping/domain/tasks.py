"""Task lifecycle domain models."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

from nutrient_mapping.errors import InvalidTaskTransitionError

RECALCULATE_NUTRIENTS_TASK = "recalculate-nutrients"


class TaskState(StrEnum):
    """Lifecycle states of a background task."""

    CREATED = "created"
    STARTED = "started"
    SUCCESSFUL = "successful"
    FAILED = "failed"


class TaskEvent(StrEnum):
    """Events that move a task between states."""

    START = "start"
    SUCCEED = "succeed"
    FAIL = "fail"


_TRANSITIONS: dict[tuple[TaskState, TaskEvent], TaskState] = {
    (TaskState.CREATED, TaskEvent.START): TaskState.STARTED,
    (TaskState.STARTED, TaskEvent.SUCCEED): TaskState.SUCCESSFUL,
    (TaskState.STARTED, TaskEvent.FAIL): TaskState.FAILED,
}

TERMINAL_STATES = frozenset({TaskState.SUCCESSFUL, TaskState.FAILED})


def transition(state: TaskState, event: TaskEvent) -> TaskState:
    """Return the state reached by applying an event."""
    try:
        return _TRANSITIONS[(state, event)]
    except KeyError:
        raise InvalidTaskTransitionError(
            f"Cannot apply {event.value} to a task in state {state.value}"
        ) from None


@dataclass(frozen=True)
class TaskRecord:
    """Persisted view of a background task."""

    id: int
    owner_id: int
    type: str
    state: TaskState
    created_at: datetime | None = None
    started_at: datetime | None = None
    completed_at: datetime | None = None
    result: dict[str, object] | None = None
    error: str | None = None
