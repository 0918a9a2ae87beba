"""Domain errors raised by meal tracker services."""

from dataclasses import dataclass

from pydantic import ValidationError as PydanticValidationError


@dataclass(frozen=True)
class FieldError:
    """A single invalid input field."""

    field: str
    message: str


class MealTrackerError(Exception):
    """Base class for meal tracker errors."""


class ValidationError(MealTrackerError):
    """Input was malformed or out of range; nothing was written."""

    def __init__(self, errors: list[FieldError]) -> None:
        self.errors = errors
        summary = "; ".join(f"{error.field}: {error.message}" for error in errors)
        super().__init__(summary or "Invalid request data")

    @classmethod
    def single(cls, field: str, message: str) -> "ValidationError":
        """Build an error for one field."""
        return cls([FieldError(field=field, message=message)])

    @classmethod
    def from_pydantic(cls, exc: PydanticValidationError) -> "ValidationError":
        """Convert a pydantic validation error into field errors."""
        errors = []
        for item in exc.errors():
            location = ".".join(str(part) for part in item.get("loc", ())) or "body"
            errors.append(FieldError(field=location, message=str(item.get("msg"))))
        return cls(errors)


class NotFoundError(MealTrackerError):
    """Entity is absent or owned by another user."""

    def __init__(self, resource: str) -> None:
        self.resource = resource
        super().__init__(f"{resource} not found")


class ConflictError(MealTrackerError):
    """Write conflicts with existing state."""


class PersistenceError(MealTrackerError):
    """The underlying store failed."""


class EstimatorUnavailableError(MealTrackerError):
    """AI macro estimation is not configured."""


class EstimationFailedError(MealTrackerError):
    """The estimator answered with unusable output."""
