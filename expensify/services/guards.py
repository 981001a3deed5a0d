"""Input validation and ownership checks shared by the managers."""

from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from expensify.exceptions import AuthError, ExpensifyError, ForbiddenError, ValidationError
from expensify.services.identity_provider import Principal

SchemaT = TypeVar("SchemaT", bound=BaseModel)
RecordT = TypeVar("RecordT")


def require_principal(principal: Principal | None) -> Principal:
    """Return the principal, or raise AuthError if the caller is anonymous."""
    if principal is None or not principal.id:
        raise AuthError("User not authenticated")
    return principal


def ensure_owned(
    record: RecordT | None,
    principal: Principal,
    denial: ExpensifyError | None = None,
) -> RecordT:
    """Return ``record`` if the principal owns it.

    An absent record and a record owned by someone else raise the same
    ``denial`` so callers cannot learn whether the record exists.
    """
    if record is None or getattr(record, "owner_id", None) != principal.id:
        raise denial or ForbiddenError("Forbidden")
    return record


def _field_label(schema: type[BaseModel], loc: tuple[Any, ...]) -> str | None:
    if not loc:
        return None
    head = loc[0]
    field = schema.model_fields.get(head) if isinstance(head, str) else None
    if field is not None and field.alias:
        head = field.alias
    return ".".join(str(part) for part in (head, *loc[1:]))


def to_alias_keys(schema: type[BaseModel], payload: Mapping[str, Any]) -> dict[str, Any]:
    """Rewrite snake_case field names in ``payload`` to their wire aliases."""
    result = {}
    for key, value in payload.items():
        field = schema.model_fields.get(key)
        result[field.alias if field is not None and field.alias else key] = value
    return result


def validate_payload(schema: type[SchemaT], payload: Any) -> SchemaT:
    """Validate a request body against ``schema``.

    Raises:
        ValidationError: With one detail entry per violated field
    """
    if not isinstance(payload, Mapping):
        raise ValidationError(
            "Invalid request body",
            details=[{"field": None, "message": "Request body must be a JSON object"}],
        )

    try:
        return schema.model_validate(dict(payload))
    except PydanticValidationError as e:
        details: dict[str | None, str] = {}
        for error in e.errors():
            label = _field_label(schema, tuple(error.get("loc", ())))
            details.setdefault(label, error.get("msg", "Invalid value"))
        raise ValidationError(
            "Invalid input",
            details=[{"field": field, "message": message} for field, message in details.items()],
        ) from None


def editable_values(schema: type[BaseModel], record: Any) -> dict[str, Any]:
    """Current values of a record keyed by the schema's wire aliases."""
    return {
        (field.alias or name): getattr(record, name)
        for name, field in schema.model_fields.items()
        if hasattr(record, name)
    }
