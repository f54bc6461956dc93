import re

RESIDENT_NUMBER_PATTERN = re.compile(r"\d{13}")


class InputError(ValueError):
    """Raised for input rejected locally, before any backend call."""


def require_text(value: str | None, label: str) -> str:
    text = (value or "").strip()
    if not text:
        raise InputError(f"Please enter {label}.")
    return text


def validate_resident_number(value: str | None) -> str:
    number = require_text(value, "a resident registration number")
    if not RESIDENT_NUMBER_PATTERN.fullmatch(number):
        raise InputError("Resident registration number must be exactly 13 digits (e.g. 9501011111111).")
    return number
