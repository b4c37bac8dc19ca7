"""
gamma_sim/validation.py - Invariant Checks and Non-Finite Reporting

Structural invariants of seed and dimension graph, trace monotonicity, and
IEEE-754 special value detection. Values are reported, never clamped.
"""

import logging
import math
from itertools import islice
from typing import List, Optional

from receipts import emit_receipt, StopRule

from .constants import (
    PHI,
    N_GAMMA,
    MAX_STAGE,
    INITIAL_STAGE,
    COHERENCE_CEILING,
)
from .types_state import SeedState, DimensionalSystem

logger = logging.getLogger(__name__)


def is_finite_complex(value: complex) -> bool:
    return math.isfinite(value.real) and math.isfinite(value.imag)


# =============================================================================
# SEED INVARIANTS
# =============================================================================

def validate_seed(seed: SeedState) -> List[dict]:
    """
    Check static seed invariants.

    Args:
        seed: SeedState to inspect

    Returns:
        List of violation dicts (empty when valid)
    """
    violations = []

    if seed.gamma_field.shape != (N_GAMMA,):
        violations.append({
            "type": "gamma_field_shape",
            "expected": N_GAMMA,
            "actual": list(seed.gamma_field.shape)
        })

    if not INITIAL_STAGE <= seed.stage <= MAX_STAGE:
        violations.append({"type": "stage_out_of_range", "stage": seed.stage})

    if not 0.0 < seed.coherence <= COHERENCE_CEILING:
        violations.append({"type": "coherence_out_of_range", "coherence": seed.coherence})

    if seed.accumulated_time < 0.0:
        violations.append({"type": "negative_time", "accumulated_time": seed.accumulated_time})

    return violations


# =============================================================================
# SYSTEM INVARIANTS
# =============================================================================

def validate_system(system: DimensionalSystem) -> List[dict]:
    """
    Check seed invariants plus dimension graph structure.

    Every dimension must sit at its 1-based position, carry scale phi^index,
    and link only to strictly lower indices.
    """
    violations = validate_seed(system.seed)

    for position, dimension in enumerate(system.dimensions, start=1):
        if dimension.index != position:
            violations.append({
                "type": "dimension_order",
                "position": position,
                "index": dimension.index
            })

        if not math.isclose(dimension.scale_factor, PHI ** float(dimension.index)):
            violations.append({
                "type": "scale_factor",
                "index": dimension.index,
                "scale_factor": dimension.scale_factor
            })

        for link in dimension.linked_indices:
            if not 1 <= link < dimension.index:
                violations.append({
                    "type": "link_not_lower",
                    "index": dimension.index,
                    "link": link
                })

    return violations


def _trace_violations(name: str, pairs) -> List[dict]:
    violations = []
    for cycle, previous, current in pairs:
        if current < previous:
            violations.append({
                "type": f"{name}_decreased",
                "cycle": cycle,
                "previous": previous,
                "current": current
            })
    return violations


def validate_traces(system: DimensionalSystem) -> List[dict]:
    """Stage and coherence traces must be non-decreasing over the retained window."""
    violations = []

    for name, trace in (("stage", system.stage_trace), ("coherence", system.coherence_trace)):
        offset = system.cycle - len(trace)
        pairs = (
            (offset + i + 1, previous, current)
            for i, (previous, current) in enumerate(zip(trace, islice(trace, 1, None)))
        )
        violations.extend(_trace_violations(name, pairs))

    return violations


def validate_latest(system: DimensionalSystem) -> List[dict]:
    """Compare only the last two trace entries. O(1) per cycle."""
    violations = []

    for name, trace in (("stage", system.stage_trace), ("coherence", system.coherence_trace)):
        if len(trace) >= 2:
            violations.extend(_trace_violations(name, [(system.cycle - 1, trace[-2], trace[-1])]))

    return violations


def enforce_invariants(system: DimensionalSystem, full_traces: bool = True) -> None:
    """
    Args:
        system: DimensionalSystem to check
        full_traces: Scan the whole retained trace window; False checks only
            the latest step (the per-cycle gate)

    Raises:
        StopRule: listing every violation found
    """
    trace_check = validate_traces if full_traces else validate_latest
    violations = validate_system(system) + trace_check(system)
    if violations:
        kinds = ", ".join(sorted({v["type"] for v in violations}))
        raise StopRule(f"Invariant violation at cycle {system.cycle}: {kinds}")


# =============================================================================
# NON-FINITE VALUES
# =============================================================================

def check_non_finite(system: DimensionalSystem, base_value: complex) -> Optional[dict]:
    """
    Report the first cycle where the base value or a dimension field stops
    being finite. Arithmetic continues unguarded afterwards.

    Returns:
        non_finite_value receipt on first occurrence, else None
    """
    if system.non_finite_reported:
        return None

    bad_dimensions = [
        d.index for d in system.dimensions if not is_finite_complex(d.field_value)
    ]
    base_finite = is_finite_complex(base_value)
    if base_finite and not bad_dimensions:
        return None

    system.non_finite_reported = True
    logger.warning(
        f"Non-finite value at cycle {system.cycle}: base_finite={base_finite}, "
        f"dimensions={bad_dimensions}"
    )

    receipt = emit_receipt("non_finite_value", {
        "tenant_id": system.tenant_id,
        "cycle": system.cycle,
        "base_value": base_value,
        "base_finite": base_finite,
        "dimensions": bad_dimensions,
        "stage": system.seed.stage,
        "accumulated_time": system.seed.accumulated_time
    })
    system.receipt_ledger.append(receipt)
    return receipt
