"""Paginated retrieval of submission foods for recalculation."""

import logging
from dataclasses import dataclass
from typing import Protocol

from nutrient_mapping.domain.recalculation import (
    BatchReplacement,
    CompositionReference,
    RawPortionRow,
    RemappingUnit,
    reduce_portion_rows,
)

_logger = logging.getLogger(__name__)


class SubmissionRepository(Protocol):
    """Persistence interface for survey submission foods."""

    def survey_exists(self, survey_id: str) -> bool:
        """Return whether the survey is known."""

    def list_food_references(
        self, survey_id: str, offset: int, limit: int
    ) -> list[tuple[int, CompositionReference]]:
        """Return food ids and their composition references, ordered by id."""

    def list_portion_rows(self, food_ids: list[int]) -> list[RawPortionRow]:
        """Return serving and leftovers weight rows for the given foods."""

    def replace_batch_data(self, replacement: BatchReplacement) -> None:
        """Replace nutrients and fields for a batch in a single transaction."""


@dataclass
class BatchFetcher:
    """Fetches pages of submission foods reduced to remapping units."""

    repository: SubmissionRepository
    batch_size: int

    def __post_init__(self) -> None:
        if self.batch_size <= 0:
            raise ValueError(f"Batch size must be positive, got {self.batch_size}")

    def fetch_batch(self, survey_id: str, offset: int) -> list[RemappingUnit]:
        """Return the next page of remapping units, empty past the last food."""
        references = self.repository.list_food_references(
            survey_id, offset=offset, limit=self.batch_size
        )
        if not references:
            return []
        food_ids = [food_id for food_id, _ in references]
        rows = self.repository.list_portion_rows(food_ids)
        units = reduce_portion_rows(references, rows)
        _logger.debug(
            "Fetched food batch for survey %s at offset %s with limit %s, "
            "actual batch size %s",
            survey_id,
            offset,
            self.batch_size,
            len(units),
        )
        return units
