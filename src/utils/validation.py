"""Data validation utilities."""
import re
from typing import Tuple

from email_validator import EmailNotValidError, validate_email as _check_email

LETTERS_AND_SPACES = re.compile(r"^[a-zA-Z\s]+$")

EMAIL_ERROR = "Please enter a valid email address (example: name@example.com)."


def is_blank(value) -> bool:
    """True for None, empty strings and whitespace-only strings."""
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def validate_required(value, label: str) -> Tuple[bool, str]:
    """
    Validate that a field has a value.

    Args:
        value: Submitted value
        label: Human-readable field label

    Returns:
        Tuple of (is_valid: bool, error_message: str)
        - (True, "") if a value is present
        - (False, "<label> is required.") otherwise
    """
    if is_blank(value):
        return False, f"{label} is required."
    return True, ""


def validate_letters_only(value: str, label: str) -> Tuple[bool, str]:
    """
    Validate a free-text field that may only hold letters and whitespace.

    Args:
        value: Text to validate
        label: Human-readable field label used in the message

    Returns:
        Tuple of (is_valid: bool, error_message: str)
        - (True, "") if valid
        - (False, "<label> should contain only letters and spaces.") otherwise
    """
    if not isinstance(value, str) or not LETTERS_AND_SPACES.match(value):
        return False, f"{label} should contain only letters and spaces."
    return True, ""


def validate_email(email: str) -> Tuple[bool, str]:
    """
    Validate email syntax (local@domain) without DNS lookups.

    Returns:
        Tuple of (is_valid: bool, error_message: str)
    """
    if not isinstance(email, str) or not email.strip():
        return False, EMAIL_ERROR
    try:
        _check_email(email.strip(), check_deliverability=False)
    except EmailNotValidError:
        return False, EMAIL_ERROR
    return True, ""


def normalize_email(email: str) -> str:
    """
    Normalize email for duplicate comparison.

    Behavior:
        - Trims leading/trailing whitespace
        - Lowercases the whole address
        - Example: " Ada@Uni.EDU " -> "ada@uni.edu"
    """
    return email.strip().lower()
