"""Validation utilities for student input.

Provides validation for:
- Password strength
- Group and course codes
"""

import re
from typing import NamedTuple


# Password requirements
PASSWORD_MIN_LENGTH = 8

# Group/course codes: letters, digits, dash, underscore, dot
CODE_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")
CODE_MAX_LENGTH = 50


class ValidationResult(NamedTuple):
    """Result of a validation check."""

    valid: bool
    message: str | None = None
    formatted: str | None = None


def validate_password(password: str) -> ValidationResult:
    """Validate password strength.

    Requirements:
    - Minimum 8 characters
    - At least one letter
    - At least one digit

    Examples:
        >>> validate_password("secret123")
        ValidationResult(valid=True, message=None, formatted=None)
        >>> validate_password("weak")
        ValidationResult(valid=False, message='Password must be at least 8 characters', formatted=None)
    """
    if len(password) < PASSWORD_MIN_LENGTH:
        return ValidationResult(False, "Password must be at least 8 characters")

    if not re.search(r"[A-Za-z]", password):
        return ValidationResult(False, "Password must contain at least one letter")

    if not re.search(r"\d", password):
        return ValidationResult(False, "Password must contain at least one digit")

    return ValidationResult(True)


def validate_code(code: str) -> ValidationResult:
    """Validate a group or course code.

    Surrounding whitespace is stripped; the stripped code is returned as
    ``formatted``.

    Examples:
        >>> validate_code(" CS-2024 ")
        ValidationResult(valid=True, message=None, formatted='CS-2024')
        >>> validate_code("bad code")
        ValidationResult(valid=False, message='Invalid code', formatted=None)
    """
    stripped = code.strip()
    if not stripped:
        return ValidationResult(False, "Code is required")

    if len(stripped) > CODE_MAX_LENGTH:
        return ValidationResult(False, "Code is too long")

    if not CODE_PATTERN.match(stripped):
        return ValidationResult(False, "Invalid code")

    return ValidationResult(True, formatted=stripped)
