"""Domain errors raised by the workout engine."""


class WorkoutError(Exception):
    """Base for all workout engine errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NoActiveSession(WorkoutError):
    def __init__(self, message: str = "No active workout"):
        super().__init__(message)


class SessionAlreadyActive(WorkoutError):
    def __init__(self, message: str = "A workout is already active; finish or discard it first"):
        super().__init__(message)


class NotFound(WorkoutError):
    pass


class ValidationFailed(WorkoutError):
    """Caller-level validation (missing fields, empty title, limits)."""

    def __init__(self, message: str, fields: list[str] | None = None):
        super().__init__(message)
        self.fields = fields or []


class CatalogLookupFailed(WorkoutError):
    """Exercise catalog could not answer. Soft: logged and skipped, never propagated from enrichment."""

    def __init__(self, exercise_id: str, reason: str = ""):
        super().__init__(f"Catalog lookup failed for {exercise_id}" + (f": {reason}" if reason else ""))
        self.exercise_id = exercise_id
