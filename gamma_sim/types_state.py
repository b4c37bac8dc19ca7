"""
gamma_sim/types_state.py - Seed, Dimension and System Dataclasses

Mutable simulation state. Behavior lives in seed_operator, seed_stage,
dimensional and cycle; these are containers.
"""

import cmath
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, List, Optional, Tuple

import numpy as np

from .constants import (
    N_GAMMA,
    INITIAL_PRIMARY_MAGNITUDE,
    INITIAL_PRIMARY_ANGLE,
    INITIAL_GAMMA,
    INITIAL_STAGE,
    INITIAL_COHERENCE,
    DEFAULT_TENANT,
    HISTORY_LIMIT,
)


def _initial_primary() -> complex:
    return complex(INITIAL_PRIMARY_MAGNITUDE, 0.0) * cmath.exp(complex(0.0, INITIAL_PRIMARY_ANGLE))


def _initial_gamma_field() -> np.ndarray:
    return np.full(N_GAMMA, INITIAL_GAMMA, dtype=np.complex128)


# =============================================================================
# SEED STATE
# =============================================================================

@dataclass
class SeedState:
    """Primary state of the recurrence.

    Attributes:
        primary_value: Evolving scalar, replaced on every step
        gamma_field: Fixed-length (7) complex128 array, rescaled on stage
            transitions and never resized
        stage: 1..8, advances by exactly one, never goes back
        accumulated_time: Grows by 1/phi on every step
        coherence: Starts at 0.99, rises toward (never reaching) 1 on
            stage transitions, capped at 0.9999
    """
    primary_value: complex = field(default_factory=_initial_primary)
    gamma_field: np.ndarray = field(default_factory=_initial_gamma_field)
    stage: int = INITIAL_STAGE
    accumulated_time: float = 0.0
    coherence: float = INITIAL_COHERENCE


# =============================================================================
# DIMENSION
# =============================================================================

@dataclass
class Dimension:
    """One node of the propagation graph.

    linked_indices only ever point at strictly lower indices, so processing
    dimensions in index order is a topological order.
    """
    index: int
    field_value: complex
    scale_factor: float
    linked_indices: List[int] = field(default_factory=list)


# =============================================================================
# DIMENSIONAL SYSTEM
# =============================================================================

# Bounded by DimensionalSystem.history_limit
HISTORY_FIELDS = ("receipt_ledger", "primary_trace", "stage_trace", "coherence_trace")


@dataclass
class DimensionalSystem:
    """Owns one SeedState and its dimension sequence.

    The ledger and per-cycle traces are deques bounded by history_limit, so a
    system can run indefinitely in constant memory. Counters (cycle,
    non_finite_cycles, transitions) cover the whole run, not just the window.
    """
    seed: SeedState = field(default_factory=SeedState)
    dimensions: List[Dimension] = field(default_factory=list)
    cycle: int = 0
    tenant_id: str = DEFAULT_TENANT
    history_limit: Optional[int] = HISTORY_LIMIT

    # Observability
    receipt_ledger: Deque[dict] = field(default_factory=deque)
    non_finite_reported: bool = False
    non_finite_cycles: int = 0

    # Traces (one entry per retained cycle)
    primary_trace: Deque[complex] = field(default_factory=deque)
    stage_trace: Deque[int] = field(default_factory=deque)
    coherence_trace: Deque[float] = field(default_factory=deque)
    transitions: List[Tuple[int, int]] = field(default_factory=list)  # (cycle, new stage), at most 7

    def __post_init__(self):
        for name in HISTORY_FIELDS:
            setattr(self, name, deque(getattr(self, name), maxlen=self.history_limit))