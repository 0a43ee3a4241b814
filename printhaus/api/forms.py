"""
Multipart form helpers

Form endpoints build their pydantic payload by hand; validation failures
are reported in the same 400 shape as JSON bodies.
"""
from typing import List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError as PydanticValidationError

from printhaus.core.exceptions import ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)


def parse_form(model: Type[ModelT], **values) -> ModelT:
    """Validate form values into `model`, dropping fields that were not sent."""
    try:
        return model.model_validate({k: v for k, v in values.items() if v is not None})
    except PydanticValidationError as e:
        errors = [
            {
                "field": ".".join(str(part) for part in err.get("loc", ())),
                "message": err.get("msg"),
                "type": err.get("type"),
            }
            for err in e.errors()
        ]
        raise ValidationError("Invalid form data", details={"errors": errors})


def split_tags(raw: Optional[str]) -> List[str]:
    """'a, b,c' -> ['a', 'b', 'c']"""
    if not raw:
        return []
    return [part.strip() for part in raw.split(",") if part.strip()]
