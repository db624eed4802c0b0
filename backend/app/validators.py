"""
MindScribe Backend — Request Field Checks
===========================================

Shared by the JSON routes: a field must be a string that is not blank once
surrounding whitespace is removed. The original (untrimmed) value is what the
route passes on.
"""

from typing import Any, Optional

from app.exceptions import ValidationError


def require_text(
    value: Any,
    field: str,
    missing_message: str,
    empty_message: Optional[str] = None,
) -> str:
    """
    Args:
        value:           Raw field value from the request
        field:           Field name recorded in the error context
        missing_message: Message when the value is absent or not a string
        empty_message:   Message when the value is whitespace only
                         (defaults to `missing_message`)

    Returns:
        `value` unchanged.

    Raises:
        ValidationError (400)
    """
    if not isinstance(value, str) or not value:
        raise ValidationError(message=missing_message, field=field)
    if not value.strip():
        raise ValidationError(message=empty_message or missing_message, field=field)
    return value
