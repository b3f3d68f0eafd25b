"""Dependency container wiring for the application."""

from collections.abc import Callable
from dataclasses import dataclass

from supabase import create_client

from nutrient_mapping.adapters.supabase_composition_repository import (
    SupabaseCompositionRepository,
)
from nutrient_mapping.adapters.supabase_submission_repository import (
    SupabaseSubmissionRepository,
)
from nutrient_mapping.adapters.supabase_task_repository import SupabaseTaskRepository
from nutrient_mapping.config import Settings
from nutrient_mapping.services.batches import BatchFetcher
from nutrient_mapping.services.composition import ReferenceResolver
from nutrient_mapping.services.nutrient_mapping import NutrientMappingService
from nutrient_mapping.services.recalculation import Recalculator
from nutrient_mapping.services.tasks import ThreadTaskRunner


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    nutrient_mapping_service: NutrientMappingService
    close_resources: Callable[[], None]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    submission_repository = SupabaseSubmissionRepository(supabase_client)
    composition_repository = SupabaseCompositionRepository(supabase_client)
    task_repository = SupabaseTaskRepository(supabase_client)
    runner = ThreadTaskRunner(max_workers=resolved_settings.worker_threads)
    nutrient_mapping_service = NutrientMappingService(
        repository=submission_repository,
        fetcher=BatchFetcher(
            repository=submission_repository,
            batch_size=resolved_settings.recalculate_batch_size,
        ),
        recalculator=Recalculator(
            resolver=ReferenceResolver(composition_repository),
            repository=submission_repository,
        ),
        tracker=task_repository,
        runner=runner,
    )

    return AppContainer(
        settings=resolved_settings,
        nutrient_mapping_service=nutrient_mapping_service,
        close_resources=runner.shutdown,
    )
