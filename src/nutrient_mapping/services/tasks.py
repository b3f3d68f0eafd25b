"""Background task tracking and execution."""

from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Protocol

from nutrient_mapping.domain.tasks import TaskRecord


class TaskStatusTracker(Protocol):
    """Persistence interface for background task status."""

    def create_task(self, owner_id: int, task_type: str) -> int:
        """Register a task and return its id."""

    def set_started(self, task_id: int) -> None:
        """Mark a task as started."""

    def set_successful(self, task_id: int, result: dict[str, object] | None) -> None:
        """Mark a task as successfully completed."""

    def set_failed(self, task_id: int, error: BaseException) -> None:
        """Mark a task as failed with the error that stopped it."""

    def get_task(self, task_id: int) -> TaskRecord | None:
        """Return a task by id, if present."""


class TaskRunner(Protocol):
    """Runs jobs outside of the calling context."""

    def submit(self, job: Callable[[], None]) -> Future[None]:
        """Schedule a job and return a future for its completion."""

    def shutdown(self) -> None:
        """Wait for running jobs and release workers."""


@dataclass
class ThreadTaskRunner(TaskRunner):
    """Thread pool backed task runner."""

    max_workers: int = 2
    _executor: ThreadPoolExecutor = field(init=False)

    def __post_init__(self) -> None:
        self._executor = ThreadPoolExecutor(
            max_workers=self.max_workers, thread_name_prefix="nutrient-mapping"
        )

    def submit(self, job: Callable[[], None]) -> Future[None]:
        """Run the job on a pool thread."""
        return self._executor.submit(job)

    def shutdown(self) -> None:
        """Wait for running jobs and stop the pool."""
        self._executor.shutdown(wait=True)
