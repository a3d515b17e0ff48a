"""
Text utility functions.
"""
from typing import Optional


def require_text(value: Optional[str], field_name: str) -> str:
    """
    Strip surrounding whitespace and make sure something is left.

    Args:
        value: The text to check
        field_name: Name used in the error message

    Returns:
        The stripped text

    Raises:
        ValueError: If the value is missing or only whitespace
    """
    if value is None or not value.strip():
        raise ValueError(f"{field_name} must not be empty")
    return value.strip()


def clean_optional_text(value: Optional[str]) -> Optional[str]:
    """Strip text, turning empty strings into None."""
    if value is None:
        return None
    value = value.strip()
    return value or None
