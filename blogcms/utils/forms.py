"""Helpers for multipart form fields."""

from typing import Any

from orjson import JSONDecodeError, loads
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from blogcms.errors.validation import ValidationError


def parse_tags(raw: list[str] | None) -> list[str] | None:
    """
    Normalize tags sent as repeated form fields or as one JSON array string.

    Raises:
        ValidationError: If a JSON string does not decode to a list of strings.
    """
    if raw is None:
        return None

    if len(raw) == 1 and raw[0].lstrip().startswith("["):
        try:
            decoded = loads(raw[0])
        except JSONDecodeError as e:
            raise ValidationError(detail="Invalid tags format") from e
        if not isinstance(decoded, list) or not all(isinstance(tag, str) for tag in decoded):
            raise ValidationError(detail="Invalid tags format")
        return decoded

    return raw


def validate_form[SchemaT: BaseModel](schema: type[SchemaT], data: dict[str, Any]) -> SchemaT:
    """
    Validate collected form values against a schema.

    Raises:
        ValidationError: With one ``{field, message, type}`` entry per problem.
    """
    try:
        return schema.model_validate(data)
    except PydanticValidationError as e:
        errors = [
            {
                "field": ".".join(str(loc) for loc in error["loc"]),
                "message": error["msg"],
                "type": error["type"],
            }
            for error in e.errors()
        ]
        raise ValidationError(detail="Invalid post data", errors=errors) from e
