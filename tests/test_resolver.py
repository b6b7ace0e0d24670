"""Tests for grade resolution and CSV mode detection in backend_logic.py."""

import pytest

from cgpa_tracker.backend_logic import (
    InputMode,
    detect_input_mode,
    format_gpa,
    resolve,
)
from cgpa_tracker.errors import (
    MalformedNumberError,
    NoMatchingBandError,
    OutOfRangeError,
    UnknownGradeSymbolError,
    ValidationError,
)
from cgpa_tracker.grading_scales import GradingScalePreset, build_symbol_table


class TestLetterMode:
    def test_letter_lookup(self, ugc):
        assert resolve("A-", InputMode.LETTER, ugc) == (3.5, "A-")

    def test_letter_is_case_insensitive_and_canonical(self, ugc):
        result = resolve("b+", "letter", ugc)
        assert result.grade_point == 3.25
        assert result.label == "B+"

    def test_unknown_letter(self, ugc):
        with pytest.raises(UnknownGradeSymbolError):
            resolve("E", InputMode.LETTER, ugc)

    def test_none_letter(self, ugc):
        with pytest.raises(UnknownGradeSymbolError):
            resolve(None, InputMode.LETTER, ugc)


class TestPercentageMode:
    @pytest.mark.parametrize("pct,label", [
        (80, "A+"), (79, "A"), (39, "F"), (100, "A+"), (0, "F"), (70, "A-"), (44, "D"),
    ])
    def test_band_boundaries(self, ugc, pct, label):
        assert resolve(pct, InputMode.PERCENTAGE, ugc).label == label

    def test_fraction_between_integer_bands(self, ugc):
        assert resolve(79.5, InputMode.PERCENTAGE, ugc).label == "A"

    def test_numeric_text(self, ugc):
        assert resolve(" 65 ", InputMode.PERCENTAGE, ugc) == (3.25, "B+")

    @pytest.mark.parametrize("pct", [101, -0.5])
    def test_out_of_range(self, ugc, pct):
        with pytest.raises(OutOfRangeError):
            resolve(pct, InputMode.PERCENTAGE, ugc)

    def test_not_a_number(self, ugc):
        with pytest.raises(MalformedNumberError):
            resolve("eighty", InputMode.PERCENTAGE, ugc)

    def test_uncovered_value(self):
        partial = GradingScalePreset("partial", "Partial", build_symbol_table([
            ("P", 2.0, 50, 90),
        ]))
        with pytest.raises(NoMatchingBandError):
            resolve(95, InputMode.PERCENTAGE, partial)
        with pytest.raises(NoMatchingBandError):
            resolve(10, InputMode.PERCENTAGE, partial)


class TestGpaMode:
    def test_label_has_two_decimals(self, ugc):
        assert resolve(3.456, InputMode.GPA, ugc) == (3.456, "3.46")

    def test_out_of_scale_values_are_kept(self, ugc):
        assert resolve(4.5, InputMode.GPA, ugc).grade_point == 4.5
        assert resolve(-1, InputMode.GPA, ugc).label == "-1.00"

    def test_unknown_mode(self, ugc):
        with pytest.raises(ValidationError):
            resolve("A", "points", ugc)


class TestFormatting:
    def test_rounds_half_up(self):
        assert format_gpa(3.125) == "3.13"
        assert format_gpa(0) == "0.00"


class TestDetectInputMode:
    @pytest.mark.parametrize("text,mode,value", [
        ("85%", InputMode.PERCENTAGE, "85"),
        ("85", InputMode.PERCENTAGE, "85"),
        ("4.5", InputMode.PERCENTAGE, "4.5"),
        ("4", InputMode.GPA, "4"),
        ("3.75", InputMode.GPA, "3.75"),
        ("A+", InputMode.LETTER, "A+"),
        (" b ", InputMode.LETTER, "b"),
        ("nan", InputMode.LETTER, "nan"),
    ])
    def test_heuristic(self, text, mode, value):
        assert detect_input_mode(text) == (mode, value)
