"""
Input validators for checkout and order tracking forms.
"""

import re

PHONE_PATTERN = re.compile(r"^09[0-9]{9}$")
POSTAL_CODE_PATTERN = re.compile(r"^[0-9]{10}$")

# Persian (U+06F0..) and Arabic-Indic (U+0660..) digits -> ASCII
_DIGITS = str.maketrans("۰۱۲۳۴۵۶۷۸۹٠١٢٣٤٥٦٧٨٩", "01234567890123456789")


def normalize_digits(value: str) -> str:
    return value.translate(_DIGITS).strip()


def is_valid_phone(phone: str) -> bool:
    """Iranian mobile number: leading 09, 11 digits total."""
    return bool(PHONE_PATTERN.fullmatch(normalize_digits(phone)))


def is_valid_postal_code(postal_code: str) -> bool:
    """Exactly ten digits, nothing else."""
    return bool(POSTAL_CODE_PATTERN.fullmatch(normalize_digits(postal_code)))
