"""Supabase repository for survey submission foods."""

from dataclasses import dataclass

from supabase import Client

from nutrient_mapping.adapters.supabase_paging import DEFAULT_PAGE_SIZE, select_all
from nutrient_mapping.domain.recalculation import (
    PORTION_PARAMETERS,
    BatchReplacement,
    CompositionReference,
    RawPortionRow,
)
from nutrient_mapping.services.batches import SubmissionRepository

_REPLACE_FUNCTION = "replace_submission_food_data"


@dataclass
class SupabaseSubmissionRepository(SubmissionRepository):
    """Supabase implementation for submission food reads and replacements."""

    client: Client
    page_size: int = DEFAULT_PAGE_SIZE

    def survey_exists(self, survey_id: str) -> bool:
        """Return whether a survey row exists."""
        response = (
            self.client.table("surveys")
            .select("id")
            .eq("id", survey_id)
            .limit(1)
            .execute()
        )
        return bool(response.data)

    def list_food_references(
        self, survey_id: str, offset: int, limit: int
    ) -> list[tuple[int, CompositionReference]]:
        """Return a page of the survey's foods ordered by id."""
        response = (
            self.client.table("survey_submission_foods")
            .select(
                "id, nutrient_table_id, nutrient_table_code, "
                "survey_submission_meals!inner(survey_submissions!inner(survey_id))"
            )
            .eq("survey_submission_meals.survey_submissions.survey_id", survey_id)
            .order("id", desc=False)
            .range(offset, offset + limit - 1)
            .execute()
        )
        return [
            (
                int(row["id"]),
                CompositionReference(
                    table_id=str(row["nutrient_table_id"]),
                    record_id=str(row["nutrient_table_code"]),
                ),
            )
            for row in response.data or []
        ]

    def list_portion_rows(self, food_ids: list[int]) -> list[RawPortionRow]:
        """Return serving and leftovers weights for the given foods."""
        if not food_ids:
            return []
        rows = select_all(
            lambda: (
                self.client.table("survey_submission_portion_size_fields")
                .select("food_id, name, value")
                .in_("food_id", food_ids)
                .in_("name", list(PORTION_PARAMETERS))
                .order("food_id", desc=False)
                .order("name", desc=False)
            ),
            self.page_size,
        )
        return [
            RawPortionRow(
                food_id=int(row["food_id"]),
                parameter_name=str(row["name"]),
                parameter_value=str(row["value"]),
            )
            for row in rows
        ]

    def replace_batch_data(self, replacement: BatchReplacement) -> None:
        """Replace nutrients and fields through a single database function call."""
        self.client.rpc(
            _REPLACE_FUNCTION,
            {
                "nutrient_food_ids": replacement.nutrient_food_ids,
                "nutrients": [
                    {
                        "food_id": row.food_id,
                        "nutrient_type_id": row.nutrient_type_id,
                        "amount": row.amount,
                    }
                    for row in replacement.nutrients
                ],
                "field_food_ids": replacement.field_food_ids,
                "fields": [
                    {
                        "food_id": row.food_id,
                        "field_name": row.field_name,
                        "value": row.value,
                    }
                    for row in replacement.fields
                ],
            },
        ).execute()

