"""State vector engine and measurement for qfluency."""

from qfluency.backends.statevector import StateVectorEngine
from qfluency.backends.measurement import (
    MeasurementRecord,
    MeasureAllRecord,
    measurement_probability,
    measure,
    measure_all,
)

__all__ = [
    "StateVectorEngine",
    "MeasurementRecord",
    "MeasureAllRecord",
    "measurement_probability",
    "measure",
    "measure_all",
]
