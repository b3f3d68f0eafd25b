"""Survey-wide nutrient recalculation."""

import logging
from concurrent.futures import Future
from dataclasses import dataclass, field

from nutrient_mapping.domain.recalculation import RecalculationSummary
from nutrient_mapping.domain.tasks import (
    RECALCULATE_NUTRIENTS_TASK,
    TaskEvent,
    TaskRecord,
    TaskState,
    transition,
)
from nutrient_mapping.errors import SurveyNotFoundError, TaskNotFoundError
from nutrient_mapping.services.batches import BatchFetcher, SubmissionRepository
from nutrient_mapping.services.recalculation import Recalculator
from nutrient_mapping.services.tasks import TaskRunner, TaskStatusTracker

_logger = logging.getLogger(__name__)


@dataclass
class RecalculationJob:
    """Recalculates every submission food of one survey for one task."""

    task_id: int
    survey_id: str
    fetcher: BatchFetcher
    recalculator: Recalculator
    tracker: TaskStatusTracker
    state: TaskState = TaskState.CREATED
    summary: RecalculationSummary = field(default_factory=RecalculationSummary)

    def run(self) -> None:
        """Run the batch loop and report the outcome to the tracker."""
        self._apply(TaskEvent.START)
        try:
            self.tracker.set_started(self.task_id)
            self._recalculate()
            self.tracker.set_successful(self.task_id, self.summary.as_dict())
            self._apply(TaskEvent.SUCCEED)
        except Exception as exc:
            _logger.exception(
                "Recalculate task %s failed for survey %s",
                self.task_id,
                self.survey_id,
            )
            self._apply(TaskEvent.FAIL)
            self._report_failure(exc)

    def _report_failure(self, error: Exception) -> None:
        try:
            self.tracker.set_failed(self.task_id, error)
        except Exception:
            _logger.exception("Could not record failure of task %s", self.task_id)

    def _recalculate(self) -> None:
        offset = 0
        while True:
            batch = self.fetcher.fetch_batch(self.survey_id, offset)
            if not batch:
                break
            self.summary.add(self.recalculator.recalculate_batch(batch))
            offset += len(batch)
        _logger.info(
            "Recalculation complete for survey %s: %s foods in %s batches",
            self.survey_id,
            self.summary.foods,
            self.summary.batches,
        )

    def _apply(self, event: TaskEvent) -> None:
        self.state = transition(self.state, event)


@dataclass
class NutrientMappingService:
    """Entry point for recalculating stored nutrients of a survey."""

    repository: SubmissionRepository
    fetcher: BatchFetcher
    recalculator: Recalculator
    tracker: TaskStatusTracker
    runner: TaskRunner

    def recalculate_nutrients(self, owner_id: int, survey_id: str) -> int:
        """Start a background recalculation and return its task id."""
        if not self.repository.survey_exists(survey_id):
            raise SurveyNotFoundError(survey_id)

        task_id = self.tracker.create_task(owner_id, RECALCULATE_NUTRIENTS_TASK)
        job = RecalculationJob(
            task_id=task_id,
            survey_id=survey_id,
            fetcher=self.fetcher,
            recalculator=self.recalculator,
            tracker=self.tracker,
        )
        future = self.runner.submit(job.run)
        future.add_done_callback(_log_job_crash)
        _logger.info(
            "Scheduled nutrient recalculation task %s for survey %s",
            task_id,
            survey_id,
        )
        return task_id

    def get_task(self, task_id: int) -> TaskRecord:
        """Return the current status of a task."""
        task = self.tracker.get_task(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task


def _log_job_crash(future: Future[None]) -> None:
    if future.cancelled():
        return
    error = future.exception()
    if error is not None:
        _logger.error("Recalculation job crashed", exc_info=error)
