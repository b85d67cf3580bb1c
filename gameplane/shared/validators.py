"""Shared validation utilities"""

import re
from typing import Optional


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Args:
        email: Email address string

    Returns:
        Lowercase email address

    Raises:
        ValueError: If email is blank or its format is invalid
    """
    if email is None:
        return email

    email = email.strip().lower()
    if not email:
        raise ValueError("Email is required")

    # Basic email validation pattern
    email_pattern = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"

    if not re.match(email_pattern, email):
        raise ValueError("Invalid email format")

    return email


def normalize_coupon_code(code: Optional[str]) -> Optional[str]:
    """Coupon codes are matched upper-case with surrounding whitespace removed"""
    if code is None:
        return code
    code = code.strip().upper()
    if not code:
        raise ValueError("Coupon code is required")
    return code


def same_email(left: Optional[str], right: Optional[str]) -> bool:
    if not left or not right:
        return False
    return left.strip().lower() == right.strip().lower()
