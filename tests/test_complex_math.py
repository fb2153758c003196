"""Tests for scalar complex arithmetic."""

import math

import numpy as np
import pytest

from qfluency import complex_math as cm


def test_add_subtract():
    assert cm.add(1 + 2j, 3 - 1j) == 4 + 1j
    assert cm.subtract(1 + 2j, 3 - 1j) == -2 + 3j


def test_multiply_matches_native():
    a, b = 0.3 - 1.2j, -2.0 + 0.5j
    assert cm.multiply(a, b) == pytest.approx(a * b)
    assert cm.multiply(1j, 1j) == -1


def test_magnitude():
    assert cm.magnitude(3 + 4j) == pytest.approx(5.0)
    assert cm.magnitude_squared(3 + 4j) == pytest.approx(25.0)
    assert cm.magnitude(np.complex128(-1j)) == pytest.approx(1.0)


def test_negligible():
    assert cm.is_negligible(1e-12 + 1e-12j)
    assert not cm.is_negligible(1e-6)


# ---------------------------------------------------------------------------
# Display formatting
# ---------------------------------------------------------------------------

def test_format_magnitude_only():
    assert cm.format_complex(1 / math.sqrt(2)) == "0.707"
    assert cm.format_complex(-1 / math.sqrt(2)) == "0.707"
    assert cm.format_complex(1.0) == ""
    assert cm.format_complex(0.0) == "0"


@pytest.mark.parametrize("z,expected", [
    (1, ""),
    (-1, "-"),
    (1j, "i"),
    (-1j, "-i"),
    (-0.5, "-0.500"),
    (0.25j, "0.250i"),
    (0.5 + 0.5j, "(0.500+0.500i)"),
    (0.5 - 0.5j, "(0.500-0.500i)"),
    (0.5 + 1e-14j, "0.500"),
])
def test_format_with_phase(z, expected):
    assert cm.format_complex(z, include_phase=True) == expected


def test_formatting_does_not_touch_value():
    z = np.complex128(0.5 + 1e-14j)
    cm.format_complex(z, include_phase=True)
    assert z.imag == 1e-14
