"""Recalculation of nutrient amounts for a batch of submission foods."""

import logging
from dataclasses import dataclass

from nutrient_mapping.domain.recalculation import (
    BatchReplacement,
    BatchResult,
    CompositionReference,
    ExtraField,
    NutrientAmount,
    RemappingUnit,
    nutrient_amount,
)
from nutrient_mapping.services.batches import SubmissionRepository
from nutrient_mapping.services.composition import ReferenceResolver

_logger = logging.getLogger(__name__)


@dataclass
class Recalculator:
    """Computes and stores nutrients and fields for remapping units."""

    resolver: ReferenceResolver
    repository: SubmissionRepository

    def recalculate_batch(self, units: list[RemappingUnit]) -> BatchResult:
        """Recalculate a batch and replace its stored data atomically."""
        resolved = self.resolver.resolve(unit.reference for unit in units)
        _logger.debug(
            "Fetched nutrient data for the next batch, %s entries",
            len(resolved.nutrients),
        )

        with_nutrients = [u for u in units if u.reference in resolved.nutrients]
        without_nutrients = [u for u in units if u.reference not in resolved.nutrients]
        with_fields = [u for u in units if u.reference in resolved.fields]
        without_fields = [u for u in units if u.reference not in resolved.fields]

        nutrients = [
            NutrientAmount(
                food_id=unit.id,
                nutrient_type_id=nutrient_type_id,
                amount=nutrient_amount(per_100g, unit.portion_weight),
            )
            for unit in with_nutrients
            for nutrient_type_id, per_100g in resolved.nutrients[unit.reference]
        ]
        fields = [
            ExtraField(food_id=unit.id, field_name=name, value=value)
            for unit in with_fields
            for name, value in resolved.fields[unit.reference]
        ]

        missing_nutrients = _references(without_nutrients)
        missing_fields = _references(without_fields)
        if missing_nutrients:
            _logger.warning(
                "No nutrient data available for the following food composition "
                "table references: %s",
                ", ".join(str(reference) for reference in missing_nutrients),
            )
        if missing_fields:
            _logger.warning(
                "No fields data available for the following food composition "
                "table references: %s",
                ", ".join(str(reference) for reference in missing_fields),
            )

        replacement = BatchReplacement(
            nutrient_food_ids=[unit.id for unit in with_nutrients],
            nutrients=nutrients,
            field_food_ids=[unit.id for unit in with_fields],
            fields=fields,
        )
        if not replacement.is_empty:
            self.repository.replace_batch_data(replacement)
            _logger.debug(
                "Replaced data for %s foods: %s nutrient rows, %s field rows",
                len(units),
                len(nutrients),
                len(fields),
            )

        return BatchResult(
            foods=len(units),
            nutrient_rows=len(nutrients),
            field_rows=len(fields),
            missing_nutrients=missing_nutrients,
            missing_fields=missing_fields,
        )


def _references(units: list[RemappingUnit]) -> list[CompositionReference]:
    """Return the distinct references of units, keeping first-seen order."""
    return list(dict.fromkeys(unit.reference for unit in units))
