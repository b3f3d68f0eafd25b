"""Supabase repository for food composition table data."""

from collections import defaultdict
from dataclasses import dataclass
from functools import partial
from typing import Any

from supabase import Client

from nutrient_mapping.adapters.supabase_paging import DEFAULT_PAGE_SIZE, select_all
from nutrient_mapping.domain.recalculation import CompositionReference
from nutrient_mapping.services.composition import (
    CompositionTableService,
    FieldValues,
    NutrientValues,
)


@dataclass
class SupabaseCompositionRepository(CompositionTableService):
    """Reads nutrients and fields from the composition tables, one query per table."""

    client: Client
    page_size: int = DEFAULT_PAGE_SIZE

    def get_nutrients(
        self, references: set[CompositionReference]
    ) -> dict[CompositionReference, NutrientValues]:
        """Return per 100g nutrient amounts for the references that have any."""
        result: dict[CompositionReference, NutrientValues] = {}
        for table_id, record_ids in _group_by_table(references).items():
            rows = select_all(
                partial(self._nutrients_query, table_id, record_ids), self.page_size
            )
            for row in rows:
                reference = CompositionReference(
                    table_id, str(row["nutrient_table_record_id"])
                )
                result.setdefault(reference, []).append(
                    (int(row["nutrient_type_id"]), float(row["units_per_100g"]))
                )
        return result

    def get_fields(
        self, references: set[CompositionReference]
    ) -> dict[CompositionReference, FieldValues]:
        """Return extra fields for the references that have any."""
        result: dict[CompositionReference, FieldValues] = {}
        for table_id, record_ids in _group_by_table(references).items():
            rows = select_all(
                partial(self._fields_query, table_id, record_ids), self.page_size
            )
            for row in rows:
                reference = CompositionReference(
                    table_id, str(row["nutrient_table_record_id"])
                )
                result.setdefault(reference, []).append(
                    (str(row["field_name"]), str(row.get("field_value") or ""))
                )
        return result

    def _nutrients_query(self, table_id: str, record_ids: list[str]) -> Any:
        return (
            self.client.table("nutrient_table_records_nutrients")
            .select("nutrient_table_record_id, nutrient_type_id, units_per_100g")
            .eq("nutrient_table_id", table_id)
            .in_("nutrient_table_record_id", record_ids)
            .order("nutrient_table_record_id", desc=False)
            .order("nutrient_type_id", desc=False)
        )

    def _fields_query(self, table_id: str, record_ids: list[str]) -> Any:
        return (
            self.client.table("nutrient_table_record_fields")
            .select("nutrient_table_record_id, field_name, field_value")
            .eq("nutrient_table_id", table_id)
            .in_("nutrient_table_record_id", record_ids)
            .order("nutrient_table_record_id", desc=False)
            .order("field_name", desc=False)
        )


def _group_by_table(references: set[CompositionReference]) -> dict[str, list[str]]:
    grouped: dict[str, list[str]] = defaultdict(list)
    for reference in sorted(references, key=lambda r: (r.table_id, r.record_id)):
        grouped[reference.table_id].append(reference.record_id)
    return dict(grouped)
