import pytest

from marketplace.core.errors import ValidationError
from marketplace.core.validation import (
    ensure_int,
    ensure_uuid,
    normalize_email,
    sanitize_text,
    validate_password,
)


@pytest.mark.parametrize("value", [True, "5", 5.0, None])
def test_ensure_int_rejects_non_integers(value):
    with pytest.raises(ValidationError, match="must be an integer"):
        ensure_int("Amount", value)


def test_ensure_int_checks_bounds():
    assert ensure_int("Amount", 5, minimum=1, maximum=5) == 5
    with pytest.raises(ValidationError, match="at least 1"):
        ensure_int("Amount", 0, minimum=1)
    with pytest.raises(ValidationError, match="at most 10"):
        ensure_int("Amount", 11, maximum=10)


def test_sanitize_text_trims_and_escapes():
    assert sanitize_text("  <b>Shop</b> ", field="Name") == "&lt;b&gt;Shop&lt;/b&gt;"
    with pytest.raises(ValidationError, match="must not be empty"):
        sanitize_text("   ", field="Name")
    with pytest.raises(ValidationError, match="at most 3"):
        sanitize_text("abcd", field="Name", max_length=3)


def test_normalize_email():
    assert normalize_email("  Alice@Example.COM ") == "alice@example.com"
    with pytest.raises(ValidationError):
        normalize_email("not-an-email")


@pytest.mark.parametrize("password", ["short1!", "nodigits!!", "nospecial12", "Passw0rd? "])
def test_validate_password_rejects_weak_passwords(password):
    with pytest.raises(ValidationError):
        validate_password(password)


def test_validate_password_accepts_strong_password():
    assert validate_password("Passw0rd!") == "Passw0rd!"


def test_ensure_uuid():
    assert ensure_uuid("6F1C1E2A-1B7A-4C2B-9F59-2A0E5B6A1C3D", entity="item") == (
        "6f1c1e2a-1b7a-4c2b-9f59-2a0e5b6a1c3d"
    )
    with pytest.raises(ValidationError, match="Invalid item ID format"):
        ensure_uuid("42", entity="item")
