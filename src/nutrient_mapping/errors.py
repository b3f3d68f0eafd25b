"""Exceptions raised by the nutrient mapping service."""


class NutrientMappingError(Exception):
    """Base class for nutrient mapping errors."""


class SurveyNotFoundError(NutrientMappingError):
    """Raised when a recalculation is requested for an unknown survey."""

    def __init__(self, survey_id: str) -> None:
        super().__init__(f"Survey not found: {survey_id}")
        self.survey_id = survey_id


class TaskNotFoundError(NutrientMappingError):
    """Raised when a task id does not exist."""

    def __init__(self, task_id: int) -> None:
        super().__init__(f"Task not found: {task_id}")
        self.task_id = task_id


class MalformedPortionValueError(NutrientMappingError, ValueError):
    """Raised when a stored portion size parameter is not a number."""

    def __init__(self, food_id: int, name: str, value: str) -> None:
        super().__init__(
            f"Malformed {name} value {value!r} for submission food {food_id}"
        )
        self.food_id = food_id
        self.name = name
        self.value = value


class InvalidTaskTransitionError(NutrientMappingError):
    """Raised when a task lifecycle event does not apply to its current state."""
