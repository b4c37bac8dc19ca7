"""
gamma_sim/seed_stage.py - Stage State Machine

Stages 1..8 gated by accumulated time. One transition per check, stage 8 is
terminal. Each transition tightens coherence and rescales the gamma field.
"""

from typing import Optional

import numpy as np

from receipts import emit_receipt

from .constants import (
    MAX_STAGE,
    STAGE_THRESHOLDS,
    COHERENCE_GAIN,
    COHERENCE_CEILING,
    GAMMA_STAGE_SCALE,
    GAMMA_INDEX_SCALE,
    GAMMA_GROWTH_GAIN,
    DEFAULT_TENANT,
)
from .types_state import SeedState


def stage_threshold(stage: int) -> Optional[float]:
    """Accumulated time that must be exceeded to leave `stage`; None if terminal."""
    return STAGE_THRESHOLDS.get(stage)


def next_coherence(coherence: float) -> float:
    """Move 30% of the way toward 1, never above the ceiling."""
    return min(COHERENCE_CEILING, coherence + (1.0 - coherence) * COHERENCE_GAIN)


def gamma_growth_factors(stage: int, size: int) -> np.ndarray:
    """
    Per-entry multipliers for a transition into `stage`.

    factor_i = (1 + (stage/10 + i/20) * 0.2) + i*(stage/10 + i/20), i 0-indexed
    """
    phase_factor = stage / GAMMA_STAGE_SCALE + np.arange(size) / GAMMA_INDEX_SCALE
    growth = 1.0 + phase_factor * GAMMA_GROWTH_GAIN
    return growth + 1j * phase_factor


def evolve_gamma_field(seed: SeedState) -> None:
    """
    Rescale every gamma entry for the current (already advanced) stage.

    Args:
        seed: SeedState (gamma_field mutated in place, never resized)
    """
    factors = gamma_growth_factors(seed.stage, seed.gamma_field.shape[0])
    seed.gamma_field *= factors


def check_stage_advance(seed: SeedState, tenant_id: str = DEFAULT_TENANT) -> Optional[dict]:
    """
    Single threshold check; advances at most one stage.

    Args:
        seed: SeedState (mutated in place on transition)
        tenant_id: Tenant for the emitted receipt

    Returns:
        stage_transition receipt if the stage advanced, else None
    """
    if seed.stage >= MAX_STAGE:
        return None

    threshold = stage_threshold(seed.stage)
    if not seed.accumulated_time > threshold:
        return None

    previous_stage = seed.stage
    previous_coherence = seed.coherence

    seed.stage += 1
    seed.coherence = next_coherence(seed.coherence)
    evolve_gamma_field(seed)

    return emit_receipt("stage_transition", {
        "tenant_id": tenant_id,
        "from_stage": previous_stage,
        "to_stage": seed.stage,
        "accumulated_time": seed.accumulated_time,
        "threshold": threshold,
        "coherence_before": previous_coherence,
        "coherence_after": seed.coherence,
        "terminal": seed.stage == MAX_STAGE
    })
