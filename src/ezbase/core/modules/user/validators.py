import re

from ezbase.errors import ValidationError

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

# bcrypt only accepts this many bytes
MAX_PASSWORD_BYTES = 72


def normalize_email(email: str) -> str:
    """Validate email shape and return it lowercased.

    Raises:
        ValidationError: If the address is not of the form local@domain.tld
    """
    email = email.strip().lower()
    if not EMAIL_RE.fullmatch(email):
        raise ValidationError("Invalid email address")
    return email


def validate_password(password: str) -> None:
    """Validate password meets requirements.

    Requirements:
    - No whitespace characters
    - Minimum length of 2 characters
    - At most MAX_PASSWORD_BYTES bytes once UTF-8 encoded

    Raises:
        ValidationError: If password doesn't meet requirements
    """
    if len(password) < 2:
        raise ValidationError("Password must be at least 2 characters long")

    if any(char.isspace() for char in password):
        raise ValidationError("Password cannot contain whitespace characters")

    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"Password cannot be longer than {MAX_PASSWORD_BYTES} bytes")
