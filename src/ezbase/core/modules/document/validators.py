from ezbase.core.modules.document.models import Fields
from ezbase.errors import ValidationError


def validate_field_name(name: str, allow_id: bool = False) -> str:
    """Check a top-level field name.

    Names must be non-empty, must not start with '$' and must not contain '.' or NUL.
    `_id` is accepted only where it is read, never where it would be written.
    """
    if not name:
        raise ValidationError("Field name must not be empty")
    if name.startswith("$") or "." in name or "\x00" in name:
        raise ValidationError(f"Invalid field name '{name}'")
    if name == "_id" and not allow_id:
        raise ValidationError("Field '_id' is assigned by the server and cannot be set")
    return name


def validate_fields(fields: Fields) -> Fields:
    for name in fields:
        validate_field_name(name)
    return fields
