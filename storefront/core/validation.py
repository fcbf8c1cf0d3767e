"""
Guard clauses that raise ValidationError on bad input and return None otherwise.
"""
from __future__ import annotations

import math
import re
from numbers import Real
from typing import Any

from storefront.core.errors import ValidationError

# Deliberately loose: no whitespace, one "@", a dot somewhere after it.
EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def validate_required(value: Any, field_name: str) -> None:
    if value is None or (isinstance(value, str) and value == ""):
        raise ValidationError(f"{field_name} is required")


def validate_email(email: Any) -> None:
    if not isinstance(email, str) or not EMAIL_RE.fullmatch(email):
        raise ValidationError("Invalid email format")


def validate_positive_number(value: Any, field_name: str) -> None:
    """Zero is accepted; NaN, infinities, negatives and non-numbers are not."""
    if (
        isinstance(value, bool)
        or not isinstance(value, Real)
        or (isinstance(value, float) and not math.isfinite(value))
        or value < 0
    ):
        raise ValidationError(f"{field_name} must be a positive number")
