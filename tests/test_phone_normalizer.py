"""Tests for Mozambique phone normalization."""

import pytest

from services.phone_normalizer import (
    format_phone_display,
    is_normalized_phone,
    normalize_phone,
)


@pytest.mark.unit
class TestNormalizePhone:
    """normalize_phone accepts exactly two shapes and rejects everything else."""

    def test_local_nine_digits_gets_prefix(self):
        """A bare 9-digit number gets 258 in front."""
        assert normalize_phone("841234567") == "258841234567"

    def test_twelve_digits_with_prefix_unchanged(self):
        """An already normalized number is returned as-is."""
        assert normalize_phone("258841234567") == "258841234567"

    def test_plus_and_spaces_are_stripped(self):
        """Separators and a leading + are ignored."""
        assert normalize_phone("+258 84 123 4567") == "258841234567"
        assert normalize_phone("84-123-4567") == "258841234567"
        assert normalize_phone("(84) 123 4567") == "258841234567"

    @pytest.mark.parametrize("raw", [
        "0841234567",      # 10 digits with trunk prefix
        "2580841234567",   # 13 digits
        "12345",
        "123456789012",    # 12 digits, wrong country code
        "25884123456",     # 11 digits
        "84123456a",       # letters leave 8 digits
    ])
    def test_other_shapes_rejected(self, raw):
        """Anything else is rejected rather than guessed."""
        assert normalize_phone(raw) is None

    @pytest.mark.parametrize("raw", ["", None, "   ", "abc"])
    def test_empty_input_rejected(self, raw):
        """Empty or digit-free input gives None."""
        assert normalize_phone(raw) is None

    def test_non_string_rejected(self):
        """Non-string input gives None instead of raising."""
        assert normalize_phone(841234567) is None

    def test_result_always_has_invariant_shape(self):
        """Every non-None result is 258 + 9 digits."""
        for raw in ["841234567", "+258841234567", "tel: 84 123 45 67", "x"]:
            result = normalize_phone(raw)
            assert result is None or is_normalized_phone(result)


@pytest.mark.unit
class TestPhoneHelpers:
    """Tests for is_normalized_phone and format_phone_display."""

    def test_is_normalized_phone(self):
        assert is_normalized_phone("258841234567") is True
        assert is_normalized_phone("841234567") is False
        assert is_normalized_phone("+258841234567") is False
        assert is_normalized_phone(None) is False

    def test_format_display(self):
        assert format_phone_display("841234567") == "+258 84 123 4567"

    def test_format_display_passthrough_for_invalid(self):
        assert format_phone_display("123") == "123"
        assert format_phone_display(None) == ""
