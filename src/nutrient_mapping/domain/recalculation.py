"""Domain models for nutrient recalculation."""

import math
from dataclasses import dataclass, field

from nutrient_mapping.errors import MalformedPortionValueError

SERVING_WEIGHT = "servingWeight"
LEFTOVERS_WEIGHT = "leftoversWeight"
PORTION_PARAMETERS = (SERVING_WEIGHT, LEFTOVERS_WEIGHT)


@dataclass(frozen=True)
class CompositionReference:
    """Locates a food record in a food composition table."""

    table_id: str
    record_id: str

    def __str__(self) -> str:
        return f"({self.table_id}, {self.record_id})"


@dataclass(frozen=True)
class RawPortionRow:
    """Single portion size parameter attached to a submission food."""

    food_id: int
    parameter_name: str
    parameter_value: str


@dataclass(frozen=True)
class RemappingUnit:
    """Submission food reduced to what the recalculation needs."""

    id: int
    reference: CompositionReference
    portion_weight: float


@dataclass(frozen=True)
class NutrientAmount:
    """Nutrient amount for a submission food."""

    food_id: int
    nutrient_type_id: int
    amount: float


@dataclass(frozen=True)
class ExtraField:
    """Non-nutrient field copied from the composition table."""

    food_id: int
    field_name: str
    value: str


@dataclass(frozen=True)
class BatchReplacement:
    """Rows that replace previously computed data for one batch."""

    nutrient_food_ids: list[int]
    nutrients: list[NutrientAmount]
    field_food_ids: list[int]
    fields: list[ExtraField]

    @property
    def is_empty(self) -> bool:
        return not (
            self.nutrient_food_ids
            or self.nutrients
            or self.field_food_ids
            or self.fields
        )


@dataclass(frozen=True)
class BatchResult:
    """Outcome of recalculating a single batch."""

    foods: int
    nutrient_rows: int
    field_rows: int
    missing_nutrients: list[CompositionReference] = field(default_factory=list)
    missing_fields: list[CompositionReference] = field(default_factory=list)


@dataclass
class RecalculationSummary:
    """Running totals for a whole recalculation task."""

    batches: int = 0
    foods: int = 0
    nutrient_rows: int = 0
    field_rows: int = 0
    missing_nutrient_references: set[CompositionReference] = field(
        default_factory=set
    )
    missing_field_references: set[CompositionReference] = field(default_factory=set)

    def add(self, result: BatchResult) -> None:
        """Accumulate a batch result."""
        self.batches += 1
        self.foods += result.foods
        self.nutrient_rows += result.nutrient_rows
        self.field_rows += result.field_rows
        self.missing_nutrient_references.update(result.missing_nutrients)
        self.missing_field_references.update(result.missing_fields)

    def as_dict(self) -> dict[str, object]:
        """Return a JSON friendly representation."""
        return {
            "batches": self.batches,
            "foods": self.foods,
            "nutrient_rows": self.nutrient_rows,
            "field_rows": self.field_rows,
            "missing_nutrient_references": sorted(
                str(reference) for reference in self.missing_nutrient_references
            ),
            "missing_field_references": sorted(
                str(reference) for reference in self.missing_field_references
            ),
        }


def parse_portion_value(food_id: int, name: str, raw: str | None) -> float:
    """Parse a stored portion size parameter, treating a missing one as 0."""
    if raw is None:
        return 0.0
    try:
        value = float(raw.strip())
    except ValueError as exc:
        raise MalformedPortionValueError(food_id, name, raw) from exc
    if not math.isfinite(value):
        raise MalformedPortionValueError(food_id, name, raw)
    return value


def portion_weight(serving_weight: float, leftovers_weight: float) -> float:
    """Return the consumed weight, never negative."""
    return max(0.0, serving_weight - leftovers_weight)


def nutrient_amount(per_100g: float, weight: float) -> float:
    """Scale a per 100g composition value to a portion weight."""
    return per_100g / 100.0 * weight


def reduce_portion_rows(
    references: list[tuple[int, CompositionReference]],
    rows: list[RawPortionRow],
) -> list[RemappingUnit]:
    """Build one remapping unit per food, in the order the foods were given."""
    parameters: dict[int, dict[str, str]] = {}
    for row in rows:
        if row.parameter_name not in PORTION_PARAMETERS:
            continue
        parameters.setdefault(row.food_id, {}).setdefault(
            row.parameter_name, row.parameter_value
        )

    units = []
    for food_id, reference in references:
        values = parameters.get(food_id, {})
        serving = parse_portion_value(
            food_id, SERVING_WEIGHT, values.get(SERVING_WEIGHT)
        )
        leftovers = parse_portion_value(
            food_id, LEFTOVERS_WEIGHT, values.get(LEFTOVERS_WEIGHT)
        )
        units.append(
            RemappingUnit(
                id=food_id,
                reference=reference,
                portion_weight=portion_weight(serving, leftovers),
            )
        )
    return units
