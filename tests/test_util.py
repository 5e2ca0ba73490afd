import math

from arsradar.util import FLOAT32_EPSILON, float32, rough_eq


def test_rough_eq_within_epsilon():
    assert rough_eq(1.0, 1.0005, 0.001) is True


def test_rough_eq_outside_epsilon():
    assert rough_eq(1.0, 1.002, 0.001) is False


def test_rough_eq_is_symmetric():
    assert rough_eq(1.002, 1.0, 0.001) == rough_eq(1.0, 1.002, 0.001)


def test_rough_eq_default_epsilon_accepts_identical_values():
    assert rough_eq(2.5, 2.5) is True


def test_rough_eq_default_epsilon_is_strict():
    assert rough_eq(1.0, 1.0 + 1e-6) is False
    assert rough_eq(1.0, 1.0 + FLOAT32_EPSILON / 2) is True


def test_rough_eq_boundary_is_exclusive():
    assert rough_eq(0.0, 0.5, 0.5) is False


def test_float32_exact_values_unchanged():
    assert float32(0.5) == 0.5
    assert float32(-3.0) == -3.0


def test_float32_rounds_inexact_values():
    rounded = float32(0.1)
    assert rounded != 0.1
    assert abs(rounded - 0.1) < 1e-8


def test_float32_is_idempotent():
    once = float32(1.2345678901234)
    assert float32(once) == once


def test_float32_overflow_becomes_infinity():
    assert float32(1e40) == math.inf
    assert float32(-1e40) == -math.inf