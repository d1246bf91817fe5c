"""
quick_api.tier1_runtime.validate
───────────────────────────────────
Payload validation via Pydantic v2. Raises quick_api ValidationError
(not raw Pydantic errors) so callers only handle one error type.
"""
from __future__ import annotations

from typing import Any, Type, TypeVar

from pydantic import BaseModel, ValidationError as PydanticValidationError

from quick_api.tier0_core.errors import ValidationError

T = TypeVar("T", bound=BaseModel)


def validate_input(model: Type[T], data: Any) -> T:
    """
    Validate decoded JSON against a Pydantic model.

    Usage:
        class Thing(BaseModel):
            id: str
            name: str

        thing = validate_input(Thing, {"id": "t_1", "name": "x"})
    """
    try:
        return model.model_validate(data)
    except PydanticValidationError as exc:
        fields = {
            ".".join(str(loc) for loc in err["loc"]): err["msg"]
            for err in exc.errors()
        }
        raise ValidationError(
            code="validation_error",
            user_message=f"Payload does not match {model.__name__}.",
            fields=fields,
        ) from exc
