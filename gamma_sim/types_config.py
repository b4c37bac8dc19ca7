"""
gamma_sim/types_config.py - GammaConfig Dataclass and Scenario Presets

Immutable configuration for driver runs. Frozen dataclass, no behavior.
"""

from dataclasses import dataclass
from typing import Optional

from .constants import REFERENCE_CYCLES, DEFAULT_TENANT, HISTORY_LIMIT


@dataclass(frozen=True)
class GammaConfig:
    """Driver configuration (immutable)."""
    n_cycles: int = REFERENCE_CYCLES
    tenant_id: str = DEFAULT_TENANT
    scenario_name: str = "REFERENCE"
    validate_each_cycle: bool = True  # latest-step check per cycle, full trace scan at the end
    history_limit: Optional[int] = HISTORY_LIMIT  # None retains every receipt and trace entry


# =============================================================================
# SCENARIO PRESETS
# =============================================================================

SCENARIO_REFERENCE = GammaConfig(
    n_cycles=REFERENCE_CYCLES,
    scenario_name="REFERENCE"
)

# phi^3 ~ 4.236 is crossed on step 7 (7 * 0.618 ~ 4.326)
SCENARIO_FIRST_TRANSITION = GammaConfig(
    n_cycles=7,
    scenario_name="FIRST_TRANSITION"
)

# phi^10 ~ 122.99 is crossed on step 200 (200 * 0.618 ~ 123.6)
SCENARIO_FULL_UNFOLDING = GammaConfig(
    n_cycles=200,
    scenario_name="FULL_UNFOLDING"
)

MANDATORY_SCENARIOS = [
    SCENARIO_REFERENCE,
    SCENARIO_FIRST_TRANSITION,
    SCENARIO_FULL_UNFOLDING,
]
