import math

import pytest

from core.numeric import round_scalar, format_number, round_angle, format_vector, format_angles, is_default


class TestRoundScalar:
    def test_rounds_to_precision(self):
        assert round_scalar(1.23456, 2) == 1.23
        assert round_scalar(1.23456, 0) == 1.0

    def test_ties_round_away_from_zero(self):
        assert round_scalar(0.125, 2) == 0.13
        assert round_scalar(-0.125, 2) == -0.13

    def test_uses_exact_binary_value(self):
        # 1.005 is stored as 1.00499999999999989...
        assert round_scalar(1.005, 2) == 1.0


class TestFormatNumber:
    @pytest.mark.parametrize("value, expected", [
        (1.0, "1"),
        (0.5, "0.5"),
        (-2.25, "-2.25"),
        (100.0, "100"),
        (1e-05, "0.00001"),
        (-0.0, "0"),
    ])
    def test_javascript_rendering(self, value, expected):
        assert format_number(value) == expected


class TestRoundAngle:
    @pytest.mark.parametrize("value, expected", [
        (math.pi / 2, "Math.PI / 2"),
        (-math.pi / 2, "-Math.PI / 2"),
        (math.pi, "Math.PI"),
        (-math.pi, "-Math.PI"),
        (math.pi / 4, "Math.PI / 4"),
        (math.pi / 10, "Math.PI / 10"),
        (math.pi * 2, "Math.PI * 2"),
        (math.pi * 3, "Math.PI * 3"),
    ])
    def test_symbolic_multiples_of_pi(self, value, expected):
        assert round_angle(value, 3) == expected

    def test_matches_within_tolerance(self):
        assert round_angle(1.5707963, 3) == "Math.PI / 2"

    def test_decimal_fallback(self):
        assert round_angle(0.33, 3) == "0.33"
        assert round_angle(1.23456, 2) == "1.23"
        assert round_angle(0.0, 3) == "0"

    def test_pi_over_eleven_is_not_symbolic(self):
        assert round_angle(math.pi / 11, 3) == "0.286"


def test_format_vector_rounds_components():
    assert format_vector((1.0, 2.5, -0.0001), 3) == "[1, 2.5, 0]"


def test_format_angles_mixes_symbolic_and_decimal():
    assert format_angles((math.pi / 2, 0.0, 0.25), 3) == "[Math.PI / 2, 0, 0.25]"


def test_is_default_compares_rounded_values():
    assert is_default(0.10004, 0.1, 3)
    assert not is_default(0.2, 0.1, 3)
