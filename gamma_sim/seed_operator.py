"""
gamma_sim/seed_operator.py - Seed Step Operator and Growth Transform

new_psi = surface_integral(grad psi) * golden_factor * gamma_product^(1/7) * unification
Pure functions over SeedState; only step_seed mutates.
"""

import cmath
import math
from typing import MutableSequence, Optional, Tuple

import numpy as np

from .constants import (
    PHI,
    PHI_INVERSE,
    PHI_POW_PI,
    GRADIENT_GAIN,
    GRADIENT_ANGLE,
    DOMAIN_RIPPLE,
    DOMAIN_PERIOD,
    GOLDEN_ANGLE_RATE,
    UNIFICATION_EXPONENT_DIVISOR,
    UNIFICATION_PHASE,
    GROWTH_RIPPLE,
    GROWTH_RIPPLE_RATE,
    DEFAULT_TENANT,
)
from .types_state import SeedState
from .seed_stage import check_stage_advance


# =============================================================================
# POLAR HELPERS
# =============================================================================

def modulus(value: complex) -> float:
    """|z| via numpy.hypot: overflows to inf instead of raising."""
    with np.errstate(over="ignore"):
        return float(np.hypot(value.real, value.imag))


def to_polar(value: complex) -> Tuple[float, float]:
    """(|z|, arg z)."""
    return modulus(value), math.atan2(value.imag, value.real)


def from_polar(magnitude: float, angle: float) -> complex:
    """r*cos(a) + i*r*sin(a), with no special-value rewriting."""
    return complex(magnitude * math.cos(angle), magnitude * math.sin(angle))


def stage_fraction(seed: SeedState) -> float:
    return seed.stage / 7.0


# =============================================================================
# OPERATOR TERMS
# =============================================================================

def compute_gradient(seed: SeedState) -> complex:
    """
    Stage-dependent polar perturbation of the primary value.

    |grad| = |psi| * (1 + 0.1 * stage/7)
    arg(grad) = arg(psi) + (stage/7) * pi/12
    """
    fraction = stage_fraction(seed)
    magnitude, angle = to_polar(seed.primary_value)
    return from_polar(
        magnitude * (1.0 + fraction * GRADIENT_GAIN),
        angle + fraction * GRADIENT_ANGLE,
    )


def domain_factor(seed: SeedState) -> float:
    """coherence * (1 + 0.1 * sin(t / (phi*10)))"""
    return seed.coherence * (1.0 + math.sin(seed.accumulated_time / DOMAIN_PERIOD) * DOMAIN_RIPPLE)


def integrate_domain(seed: SeedState, value: complex) -> complex:
    """Surface integral approximation: scale by the real domain factor."""
    return value * complex(domain_factor(seed), 0.0)


def golden_factor(accumulated_time: float) -> complex:
    """
    phi^(pi*cos(theta)) + i*phi^(pi*sin(theta)), theta = t * 0.01.

    Real and imaginary parts are two independent real powers. This is not
    phi raised to a complex exponent and must stay that way.
    """
    theta = accumulated_time * GOLDEN_ANGLE_RATE
    return complex(PHI ** (math.pi * math.cos(theta)), PHI ** (math.pi * math.sin(theta)))


def gamma_product(seed: SeedState) -> complex:
    """Product of the gamma field raised to 1/7 in polar form."""
    product = complex(np.prod(seed.gamma_field))
    magnitude, angle = to_polar(product)
    return from_polar(magnitude ** (1.0 / 7.0), angle / 7.0)


def unification_factor(seed: SeedState) -> complex:
    """
    e^(i*pi/7) * sum_i (psi * phi^(-i/3)) * gamma_i * phi^(i/3), i = 1..7
    """
    phase = cmath.exp(complex(0.0, UNIFICATION_PHASE))

    total = complex(0.0, 0.0)
    for i, gamma in enumerate(seed.gamma_field, start=1):
        phi_factor = PHI ** (i / UNIFICATION_EXPONENT_DIVISOR)
        psi_i = seed.primary_value * complex(phi_factor ** -1.0, 0.0)
        total = total + psi_i * complex(gamma) * complex(phi_factor, 0.0)

    return phase * total


def compose_operator(seed: SeedState) -> complex:
    """Evaluate the full operator on the current state without mutating it."""
    surface = integrate_domain(seed, compute_gradient(seed))
    golden = golden_factor(seed.accumulated_time)
    product = gamma_product(seed)
    unification = unification_factor(seed)
    return surface * golden * product * unification


# =============================================================================
# STEP
# =============================================================================

def step_seed(seed: SeedState, ledger: Optional[MutableSequence[dict]] = None,
              tenant_id: str = DEFAULT_TENANT) -> complex:
    """
    Advance the seed by one step.

    Args:
        seed: SeedState (mutated in place)
        ledger: Optional receipt ledger; a stage_transition receipt is
            appended to it when the stage advances
        tenant_id: Tenant for emitted receipts

    Returns:
        The new primary value
    """
    result = compose_operator(seed)

    seed.primary_value = result
    seed.accumulated_time += PHI_INVERSE

    receipt = check_stage_advance(seed, tenant_id)
    if receipt is not None and ledger is not None:
        ledger.append(receipt)

    return result


# =============================================================================
# GROWTH TRANSFORM
# =============================================================================

def growth_domain_factor(seed: SeedState) -> float:
    """coherence * (1 + 0.05 * sin(t * 0.1))"""
    return seed.coherence * (1.0 + GROWTH_RIPPLE * math.sin(seed.accumulated_time * GROWTH_RIPPLE_RATE))


def apply_growth(seed: SeedState, value: complex) -> complex:
    """
    psi * value * phi^pi * domain_factor * e^(i*t)

    Read-only: never touches seed state and does not feed back into step_seed.
    """
    integrated = seed.primary_value * complex(value) * complex(PHI_POW_PI, 0.0)
    temporal_phase = cmath.exp(complex(0.0, seed.accumulated_time))
    return integrated * complex(growth_domain_factor(seed), 0.0) * temporal_phase

