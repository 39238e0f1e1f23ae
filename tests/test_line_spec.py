"""Tests for core/line_spec.py."""

from __future__ import annotations

import pytest

from gli_editor.core.line_spec import LineSpec
from gli_editor.errors import InvalidArgumentsError, OutOfBoundsError


class TestParse:
    def test_single_line_uses_default_context(self):
        spec = LineSpec.parse("42")
        assert spec == LineSpec(line=42, context=3)
        assert spec.focus_line == 42
        assert not spec.is_all

    def test_custom_default_context(self):
        assert LineSpec.parse("42", default_context=7).context == 7

    def test_line_with_context(self):
        assert LineSpec.parse("42+5") == LineSpec(line=42, context=5)

    def test_range(self):
        spec = LineSpec.parse("10-50")
        assert spec == LineSpec(start=10, end=50)
        assert spec.focus_line == 10

    def test_surrounding_whitespace(self):
        assert LineSpec.parse(" 7 ") == LineSpec(line=7, context=3)

    def test_reversed_range(self):
        with pytest.raises(InvalidArgumentsError) as exc_info:
            LineSpec.parse("50-10")
        assert "cannot be greater" in str(exc_info.value)

    @pytest.mark.parametrize("value", ["", "abc", "-5", "5-", "+3", "4+x", "1.5", "3-4-5"])
    def test_malformed(self, value):
        with pytest.raises(InvalidArgumentsError):
            LineSpec.parse(value)

    def test_all(self):
        spec = LineSpec.all()
        assert spec.is_all
        assert spec.focus_line is None


class TestCalculateRange:
    def test_context_around_line(self):
        assert LineSpec(line=42, context=3).calculate_range(100) == (39, 45)

    def test_context_clamped_at_start(self):
        assert LineSpec(line=2, context=5).calculate_range(100) == (1, 7)

    def test_context_clamped_at_end(self):
        assert LineSpec(line=99, context=5).calculate_range(100) == (94, 100)

    def test_range(self):
        assert LineSpec(start=10, end=20).calculate_range(30) == (10, 20)

    def test_all_lines(self):
        assert LineSpec.all().calculate_range(12) == (1, 12)

    def test_empty_file(self):
        assert LineSpec(line=5).calculate_range(0) == (0, 0)
        assert LineSpec.all().calculate_range(0) == (0, 0)

    @pytest.mark.parametrize(
        "spec",
        [
            LineSpec(line=0),
            LineSpec(line=101),
            LineSpec(start=0, end=5),
            LineSpec(start=101, end=120),
            LineSpec(start=10, end=101),
        ],
    )
    def test_out_of_bounds(self, spec):
        with pytest.raises(OutOfBoundsError):
            spec.calculate_range(100)
