"""
Explicit validation entry point for incoming payloads
"""

from typing import Any, Dict, List, Mapping, Type, TypeVar, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from app.core.errors import ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)


def collect_errors(exc: PydanticValidationError) -> List[Dict[str, str]]:
    """Flatten pydantic errors into ``{"field", "message"}`` entries"""
    errors = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"]) or "__root__"
        ctx_error = error.get("ctx", {}).get("error")
        message = str(ctx_error) if ctx_error is not None else error["msg"]
        errors.append({"field": field, "message": message})
    return errors


def validate_payload(schema: Type[ModelT], payload: Union[ModelT, Mapping[str, Any]]) -> ModelT:
    """Validate ``payload`` against ``schema``.

    Raises:
        ValidationError: With one entry per failing field.
    """
    if isinstance(payload, BaseModel):
        payload = payload.model_dump(exclude_unset=True)
    try:
        return schema.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError(collect_errors(e)) from e
