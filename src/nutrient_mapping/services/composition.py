"""Food composition table lookups."""

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Protocol

from nutrient_mapping.domain.recalculation import CompositionReference

NutrientValues = list[tuple[int, float]]
FieldValues = list[tuple[str, str]]


class CompositionTableService(Protocol):
    """Interface for food composition table data."""

    def get_nutrients(
        self, references: set[CompositionReference]
    ) -> dict[CompositionReference, NutrientValues]:
        """Return (nutrient type id, amount per 100g) pairs per reference."""

    def get_fields(
        self, references: set[CompositionReference]
    ) -> dict[CompositionReference, FieldValues]:
        """Return (field name, value) pairs per reference."""


@dataclass(frozen=True)
class ResolvedReferences:
    """Composition data found for a set of references."""

    nutrients: dict[CompositionReference, NutrientValues] = field(default_factory=dict)
    fields: dict[CompositionReference, FieldValues] = field(default_factory=dict)


@dataclass
class ReferenceResolver:
    """Resolves each distinct reference once per batch."""

    service: CompositionTableService

    def resolve(self, references: Iterable[CompositionReference]) -> ResolvedReferences:
        """Look up nutrients and fields for the distinct references."""
        unique = set(references)
        if not unique:
            return ResolvedReferences()
        return ResolvedReferences(
            nutrients=self.service.get_nutrients(unique),
            fields=self.service.get_fields(unique),
        )
