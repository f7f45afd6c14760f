"""
Unit tests for row scalar conversion, normalization and serialization.
"""

import json
import uuid
from datetime import date, datetime, time, timezone
from decimal import Decimal

import pytest

from tablesnap.core.exceptions import UnsupportedValueError
from tablesnap.snapshot.rows import coerce_row, normalize_row, serialize_row, to_scalar


class TestToScalar:
    """Tests for to_scalar."""

    @pytest.mark.parametrize("value", [None, True, False, 0, -7, 3.5, "", "text"])
    def test_scalars_pass_through(self, value):
        """Test that JSON scalars are returned unchanged."""
        assert to_scalar(value) is value

    def test_decimal_keeps_exact_digits(self):
        """Test that decimals are stringified without float rounding."""
        assert to_scalar(Decimal("12345678901234567890.0100")) == "12345678901234567890.0100"

    def test_datetime_types_use_isoformat(self):
        """Test ISO-8601 conversion of date and time values."""
        assert to_scalar(datetime(2024, 1, 2, 3, 4, 5)) == "2024-01-02T03:04:05"
        assert to_scalar(datetime(2024, 1, 2, tzinfo=timezone.utc)) == "2024-01-02T00:00:00+00:00"
        assert to_scalar(date(2024, 1, 2)) == "2024-01-02"
        assert to_scalar(time(13, 30)) == "13:30:00"

    def test_uuid_is_stringified(self):
        """Test that UUIDs become their canonical form."""
        value = uuid.UUID("12345678-1234-5678-1234-567812345678")
        assert to_scalar(value) == "12345678-1234-5678-1234-567812345678"

    def test_binary_becomes_hex(self):
        """Test that binary values become lowercase hex."""
        assert to_scalar(b"\x00\xff") == "00ff"
        assert to_scalar(bytearray(b"\x0a")) == "0a"
        assert to_scalar(memoryview(b"\xab")) == "ab"

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_float_rejected(self, value):
        """Test that NaN and infinities are rejected."""
        with pytest.raises(UnsupportedValueError):
            to_scalar(value, column="ratio")

    def test_non_finite_decimal_rejected(self):
        """Test that a NaN decimal is rejected."""
        with pytest.raises(UnsupportedValueError):
            to_scalar(Decimal("NaN"))

    def test_unknown_type_rejected(self):
        """Test that unknown types are rejected with column context."""
        with pytest.raises(UnsupportedValueError) as exc_info:
            to_scalar([1, 2], column="tags")

        assert exc_info.value.column == "tags"
        assert exc_info.value.value_type == "list"
        assert "tags" in str(exc_info.value)


class TestCoerceRow:
    """Tests for coerce_row."""

    def test_converts_every_value(self):
        """Test that each column value is converted."""
        row = coerce_row({"id": 1, "price": Decimal("9.99"), "day": date(2024, 5, 1)})
        assert row == {"id": 1, "price": "9.99", "day": "2024-05-01"}

    def test_error_names_the_column(self):
        """Test that the failing column is reported."""
        with pytest.raises(UnsupportedValueError) as exc_info:
            coerce_row({"id": 1, "blob": object()})
        assert exc_info.value.column == "blob"


class TestNormalizeRow:
    """Tests for normalize_row."""

    def test_keys_sorted(self):
        """Test that keys come out in lexicographic order."""
        row = normalize_row({"name": "a", "id": 1, "Zeta": None})
        assert list(row) == ["Zeta", "id", "name"]

    def test_values_untouched(self):
        """Test that values are not transformed."""
        row = {"b": None, "a": True, "c": 1.5}
        assert normalize_row(row) == row

    def test_input_not_modified(self):
        """Test that the input mapping keeps its order."""
        row = {"b": 1, "a": 2}
        normalize_row(row)
        assert list(row) == ["b", "a"]

    def test_empty_row(self):
        """Test that an empty mapping is accepted."""
        assert normalize_row({}) == {}


class TestSerializeRow:
    """Tests for serialize_row."""

    def test_order_independent_bytes(self):
        """Test that identical rows in any key order serialize identically."""
        first = serialize_row(normalize_row({"id": 1, "name": "a", "active": True}))
        second = serialize_row(normalize_row({"active": True, "name": "a", "id": 1}))
        assert first == second

    def test_indented_with_trailing_newline(self):
        """Test the on-disk text layout."""
        text = serialize_row(normalize_row({"name": "a", "id": 1}))
        assert text == '{\n  "id": 1,\n  "name": "a"\n}\n'

    def test_unicode_kept_literal(self):
        """Test that non-ASCII text is written as UTF-8, not escaped."""
        text = serialize_row({"name": "Zoë"})
        assert "Zoë" in text
        assert json.loads(text) == {"name": "Zoë"}

    def test_nan_rejected(self):
        """Test that NaN cannot reach the file."""
        with pytest.raises(ValueError):
            serialize_row({"x": float("nan")})
