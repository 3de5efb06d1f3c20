import re

from ezbase.errors import ValidationError

COLLECTION_NAME_RE = re.compile(r"^[A-Za-z0-9_-]{1,120}$")


def validate_collection_name(name: str) -> str:
    """Collection names are 1-120 characters of letters, digits, '_' or '-' and may not start with 'system'."""
    if not COLLECTION_NAME_RE.fullmatch(name):
        raise ValidationError(f"Invalid collection name '{name}'")
    if name.startswith("system"):
        raise ValidationError(f"Collection name '{name}' is reserved")
    return name
