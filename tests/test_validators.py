import pytest

from storefront.utils.validators import is_valid_phone, is_valid_postal_code, normalize_digits


def test_valid_mobile_number():
    assert is_valid_phone("09123456789")


@pytest.mark.parametrize("phone", ["9123456789", "0912345678", "0912345678901", "08123456789", "0912345678a", ""])
def test_invalid_mobile_numbers(phone):
    assert not is_valid_phone(phone)


def test_persian_digits_are_accepted():
    assert normalize_digits("۰۹۱۲۳۴۵۶۷۸۹") == "09123456789"
    assert is_valid_phone("۰۹۱۲۳۴۵۶۷۸۹")
    assert is_valid_postal_code("۱۲۳۴۵۶۷۸۹۰")


def test_valid_postal_code():
    assert is_valid_postal_code("1234567890")


@pytest.mark.parametrize("code", ["123456789", "12345678901", "12345-6789", "123456789x", "12345 67890"])
def test_invalid_postal_codes(code):
    assert not is_valid_postal_code(code)
