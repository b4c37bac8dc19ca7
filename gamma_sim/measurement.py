"""
gamma_sim/measurement.py - Readout and Run Statistics

Per-dimension readouts and trace summaries. Pure functions.
"""

from typing import Dict, Iterable, List

import numpy as np

from .types_state import DimensionalSystem


def measure_dimensions(system: DimensionalSystem) -> List[dict]:
    """
    Polar readout of every populated dimension.

    Returns:
        List of dicts with index, field_value, magnitude, phase, links
    """
    readout = []
    for dimension in system.dimensions:
        value = np.complex128(dimension.field_value)
        with np.errstate(over="ignore", invalid="ignore"):
            magnitude = float(np.abs(value))
        readout.append({
            "index": dimension.index,
            "field_value": dimension.field_value,
            "magnitude": magnitude,
            "phase": float(np.angle(value)),
            "links": list(dimension.linked_indices)
        })
    return readout


def measure_primary_trace(trace: Iterable[complex]) -> Dict[str, float]:
    """Magnitude summary of the primary value trace."""
    values = np.fromiter(trace, dtype=np.complex128)
    if not values.size:
        return {"max_magnitude": 0.0, "final_magnitude": 0.0, "zero_cycles": 0}

    with np.errstate(over="ignore", invalid="ignore"):
        magnitudes = np.abs(values)
    measured = magnitudes[~np.isnan(magnitudes)]
    return {
        "max_magnitude": float(measured.max()) if measured.size else float("nan"),
        "final_magnitude": float(magnitudes[-1]),
        "zero_cycles": int(np.count_nonzero(values == 0))
    }


def measure_statistics(system: DimensionalSystem) -> dict:
    """
    Run-level statistics for a GammaResult.

    Counts come from whole-run counters; magnitudes from the retained trace.
    """
    return {
        "cycles": system.cycle,
        "final_stage": system.seed.stage,
        "stage_transitions": len(system.transitions),
        "accumulated_time": system.seed.accumulated_time,
        "coherence": system.seed.coherence,
        "non_finite_cycles": system.non_finite_cycles,
        **measure_primary_trace(system.primary_trace)
    }
