"""
gamma_sim/constants.py - Recurrence and Simulation Constants

All constants for the seed operator, stage machine, and dimension graph.
Centralized for tuning. Pure data, no behavior.
"""

import math

# =============================================================================
# GOLDEN RATIO
# =============================================================================

PHI = 1.618033988749895
PHI_INVERSE = PHI ** -1.0  # Accumulated time increment per step (~0.618)
PHI_POW_PI = PHI ** math.pi  # Growth transform gain

# =============================================================================
# SEED STATE INITIALIZATION
# =============================================================================

N_GAMMA = 7  # gamma_field length, never resized
INITIAL_PRIMARY_MAGNITUDE = 0.01
INITIAL_PRIMARY_ANGLE = math.pi / 12.0
INITIAL_GAMMA = 0.01
INITIAL_STAGE = 1
INITIAL_COHERENCE = 0.99

# =============================================================================
# SEED OPERATOR COEFFICIENTS
# =============================================================================

GRADIENT_GAIN = 0.1  # |grad| = |psi| * (1 + GRADIENT_GAIN * stage/7)
GRADIENT_ANGLE = math.pi / 12.0  # arg shift per unit of stage/7
DOMAIN_RIPPLE = 0.1  # surface integral ripple amplitude
DOMAIN_PERIOD = PHI * 10.0  # surface integral ripple divisor
GOLDEN_ANGLE_RATE = 0.01  # theta = accumulated_time * rate
UNIFICATION_EXPONENT_DIVISOR = 3.0  # phi^(i/3)
UNIFICATION_PHASE = math.pi / 7.0
GROWTH_RIPPLE = 0.05
GROWTH_RIPPLE_RATE = 0.1

# =============================================================================
# STAGE MACHINE
# =============================================================================

MAX_STAGE = 8  # Terminal stage
COHERENCE_GAIN = 0.3  # Fraction of remaining distance to 1 gained per transition
COHERENCE_CEILING = 0.9999
GAMMA_STAGE_SCALE = 10.0  # stage/10 + i/20
GAMMA_INDEX_SCALE = 20.0
GAMMA_GROWTH_GAIN = 0.2

# Stage s advances to s+1 once accumulated_time > phi^k
STAGE_THRESHOLD_EXPONENTS = {1: 3, 2: 5, 3: 6, 4: 7, 5: 8, 6: 9, 7: 10}
STAGE_THRESHOLDS = {
    stage: PHI ** float(k) for stage, k in STAGE_THRESHOLD_EXPONENTS.items()
}

# =============================================================================
# DIMENSION GRAPH
# =============================================================================

N_DIMENSIONS = 7
DIMENSION_SEED_SCALE = 0.01  # field_value = psi * phi^i * 0.01 at init

# Only dimensions 2 and 3 are linked; 4-7 have no predecessors.
DIMENSION_LINKS = {
    2: (1,),
    3: (1, 2),
}

# =============================================================================
# DRIVER
# =============================================================================

REFERENCE_CYCLES = 100
DEFAULT_TENANT = "gamma"

# Receipts and trace entries kept per system; oldest are evicted first.
# None keeps everything.
HISTORY_LIMIT = 1000

# =============================================================================
# RECEIPT SCHEMA
# =============================================================================

RECEIPT_SCHEMA = [
    "gamma_init", "stage_transition", "gamma_cycle",
    "non_finite_value", "gamma_result",
]
