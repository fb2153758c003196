"""
Scalar complex arithmetic.

Amplitudes are always stored as ``complex`` / ``numpy.complex128``; nothing
here collapses a value to a real number. The only place a negligible
imaginary (or real) part is dropped is ``format_complex``, which produces
display text.
"""

from __future__ import annotations

import math

EPSILON = 1e-10
"""Threshold below which a magnitude or component is treated as zero."""


def add(a: complex, b: complex) -> complex:
    return complex(a) + complex(b)


def subtract(a: complex, b: complex) -> complex:
    return complex(a) - complex(b)


def multiply(a: complex, b: complex) -> complex:
    a, b = complex(a), complex(b)
    return complex(a.real * b.real - a.imag * b.imag,
                   a.real * b.imag + a.imag * b.real)


def magnitude_squared(z: complex) -> float:
    """``re² + im²``."""
    z = complex(z)
    return z.real * z.real + z.imag * z.imag


def magnitude(z: complex) -> float:
    """``sqrt(re² + im²)``."""
    return math.sqrt(magnitude_squared(z))


def is_negligible(z: complex, eps: float = EPSILON) -> bool:
    """True if ``|z|`` is below ``eps``."""
    return magnitude(z) < eps


def format_complex(z: complex, include_phase: bool = False,
                   precision: int = 3, eps: float = EPSILON) -> str:
    """
    Format an amplitude for ket notation.

    Without phases only the magnitude is shown and a unit magnitude is
    omitted entirely (``|0⟩`` rather than ``1.000|0⟩``). With phases the
    real and imaginary parts are shown, dropping whichever is negligible;
    ``1``, ``-1``, ``i`` and ``-i`` are abbreviated.

    Examples
    --------
    >>> format_complex(0.5 ** 0.5)
    '0.707'
    >>> format_complex(-1, include_phase=True)
    '-'
    >>> format_complex(0.5 + 0.5j, include_phase=True)
    '(0.500+0.500i)'
    """
    z = complex(z)
    mag = magnitude(z)
    if mag < eps:
        return "0"

    if not include_phase:
        if abs(mag - 1) < eps:
            return ""
        return f"{mag:.{precision}f}"

    re = 0.0 if abs(z.real) < eps else z.real
    im = 0.0 if abs(z.imag) < eps else z.imag

    if im == 0.0:
        if abs(re - 1) < eps:
            return ""
        if abs(re + 1) < eps:
            return "-"
        return f"{re:.{precision}f}"

    if re == 0.0:
        if abs(im - 1) < eps:
            return "i"
        if abs(im + 1) < eps:
            return "-i"
        return f"{im:.{precision}f}i"

    sign = "+" if im > 0 else "-"
    return f"({re:.{precision}f}{sign}{abs(im):.{precision}f}i)"


__all__ = [
    "EPSILON",
    "add",
    "subtract",
    "multiply",
    "magnitude",
    "magnitude_squared",
    "is_negligible",
    "format_complex",
]
