"""
gamma_sim - Gamma Seed Simulation Package

Public API for the seed recurrence, stage machine and dimension graph.
Flat, focused files. One file = one responsibility.
"""

# =============================================================================
# TYPES (Dataclasses)
# =============================================================================
from .types_config import (
    GammaConfig,
    SCENARIO_REFERENCE,
    SCENARIO_FIRST_TRANSITION,
    SCENARIO_FULL_UNFOLDING,
    MANDATORY_SCENARIOS,
)
from .types_state import SeedState, Dimension, DimensionalSystem
from .types_result import GammaResult

# =============================================================================
# CONSTANTS
# =============================================================================
from .constants import (
    PHI,
    PHI_INVERSE,
    N_GAMMA,
    N_DIMENSIONS,
    MAX_STAGE,
    STAGE_THRESHOLDS,
    DIMENSION_LINKS,
    RECEIPT_SCHEMA,
    HISTORY_LIMIT,
)

# =============================================================================
# SEED
# =============================================================================
from .seed_operator import (
    compose_operator,
    step_seed,
    apply_growth,
)
from .seed_stage import (
    check_stage_advance,
    evolve_gamma_field,
    stage_threshold,
)

# =============================================================================
# DIMENSIONAL SYSTEM
# =============================================================================
from .dimensional import (
    create_system,
    initialize_dimensions,
    propagate,
    read_dimension,
    current_stage,
)

# =============================================================================
# CORE SIMULATION
# =============================================================================
from .cycle import (
    run_cycle,
    run_simulation,
    run_ensemble,
    start_gamma_system,
)

# =============================================================================
# VALIDATION
# =============================================================================
from .validation import (
    validate_seed,
    validate_system,
    validate_traces,
    validate_latest,
    enforce_invariants,
    is_finite_complex,
)

# =============================================================================
# EXPORT
# =============================================================================
from .export import (
    export_to_json,
    generate_report,
    export_model_details,
)

__version__ = "1.0.0"
