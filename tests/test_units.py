"""Length converter — validation, formatting, and synchronized conversion."""

import pytest

from app.core.units import (
    convert,
    format_length,
    from_meters,
    is_valid_decimal,
    length_in_meters,
    parse_length,
    to_meters,
)
from app.models.calculation import LengthUnit, LengthValue


class TestValidation:
    @pytest.mark.parametrize("raw", ["", "0", "12", "12.5", ".5", "5.", "."])
    def test_accepts_decimal_patterns(self, raw):
        assert is_valid_decimal(raw)

    @pytest.mark.parametrize("raw", ["-1", "1.2.3", "abc", "1e5", " 1", "1,5", "inf"])
    def test_rejects_other_text(self, raw):
        assert not is_valid_decimal(raw)

    def test_parse_lone_point_is_none(self):
        assert parse_length(".") is None

    def test_parse_trailing_point(self):
        assert parse_length("5.") == pytest.approx(5.0)

    def test_parse_empty_is_none(self):
        assert parse_length("") is None


class TestFormatLength:
    def test_whole_number(self):
        assert format_length(1.0) == "1"

    def test_strips_trailing_zeros(self):
        assert format_length(1.2345) == "1.2345"

    def test_rounds_to_six_decimals(self):
        assert format_length(6.561679790026247) == "6.56168"

    def test_keeps_integer_zeros(self):
        assert format_length(200.0) == "200"

    def test_tiny_value_rounds_to_zero(self):
        assert format_length(1e-9) == "0"


class TestLengthConversion:
    def test_feet_to_meters(self):
        assert to_meters(1.0, LengthUnit.FEET) == pytest.approx(0.3048)

    def test_inches_to_meters(self):
        assert to_meters(100.0, LengthUnit.INCHES) == pytest.approx(2.54)

    def test_meters_to_cm(self):
        assert from_meters(1.5, LengthUnit.CENTIMETERS) == pytest.approx(150.0)

    def test_roundtrip(self):
        meters = to_meters(42.5, LengthUnit.FEET)
        assert from_meters(meters, LengthUnit.FEET) == pytest.approx(42.5)


class TestConvert:
    def test_two_meters(self):
        result = convert(LengthUnit.METERS, "2")
        assert result.as_dict() == {
            "ft": "6.56168",
            "in": "78.740157",
            "cm": "200",
            "m": "2",
        }

    def test_feet_input(self):
        result = convert(LengthUnit.FEET, "10")
        assert result.m == "3.048"
        assert result.inches == "120"
        assert result.cm == "304.8"

    def test_empty_clears_all(self):
        result = convert(LengthUnit.CENTIMETERS, "")
        assert result == LengthValue()
        assert result.is_empty

    @pytest.mark.parametrize("raw", ["-3", "abc", ".", "1.2.3"])
    def test_rejected_input_returns_none(self, raw):
        assert convert(LengthUnit.METERS, raw) is None

    @pytest.mark.parametrize("unit", list(LengthUnit))
    @pytest.mark.parametrize("raw", ["0", "0.5", "3", "12.345678", "1000"])
    def test_edited_field_reproduces_input(self, unit, raw):
        result = convert(unit, raw)
        assert float(result.get(unit)) == pytest.approx(float(raw), abs=1e-6)

    @pytest.mark.parametrize("unit", list(LengthUnit))
    def test_fields_agree_in_meters(self, unit):
        result = convert(unit, "17.3")
        meters = [to_meters(float(result.get(u)), u) for u in LengthUnit]
        for m in meters:
            assert m == pytest.approx(meters[0], abs=1e-6)

    def test_length_in_meters(self):
        assert length_in_meters(convert(LengthUnit.CENTIMETERS, "250")) == pytest.approx(2.5)

    def test_length_in_meters_empty(self):
        assert length_in_meters(LengthValue()) is None
