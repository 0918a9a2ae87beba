"""Input parsing shared by the services."""

from typing import TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from meal_tracker.errors import ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)


def parse_input(model: type[ModelT], payload: object) -> ModelT:
    """Validate a raw payload, raising the domain ValidationError on failure."""
    if isinstance(payload, model):
        return payload
    try:
        return model.model_validate(payload or {})
    except PydanticValidationError as exc:
        raise ValidationError.from_pydantic(exc) from exc
