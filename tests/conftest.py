"""Shared fixtures."""

import pytest

from qfluency import QuantumSimulator


class SequenceRandom:
    """Stand-in for numpy's Generator that returns preset ``random()`` values."""

    def __init__(self, *values):
        self.values = list(values)
        self.calls = 0

    def random(self):
        value = self.values[self.calls % len(self.values)]
        self.calls += 1
        return value


@pytest.fixture
def sim():
    return QuantumSimulator(seed=42)


@pytest.fixture
def fixed_random():
    return SequenceRandom
