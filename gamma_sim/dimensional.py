"""
gamma_sim/dimensional.py - Dimension Graph Setup and Propagation

Seven dimensions fed by the seed output. Links point strictly downward in
index, so one ascending pass reads same-cycle values for every dependency.
"""

import cmath
import math
from typing import Optional

from receipts import emit_receipt, StopRule

from .constants import (
    PHI,
    N_DIMENSIONS,
    DIMENSION_SEED_SCALE,
    DIMENSION_LINKS,
    DEFAULT_TENANT,
    HISTORY_LIMIT,
)
from .types_state import Dimension, DimensionalSystem


def create_system(tenant_id: str = DEFAULT_TENANT,
                  history_limit: Optional[int] = HISTORY_LIMIT) -> DimensionalSystem:
    """Fresh system with a primordial seed and no dimensions."""
    return DimensionalSystem(tenant_id=tenant_id, history_limit=history_limit)


def initialize_dimensions(system: DimensionalSystem) -> dict:
    """
    Populate the 7 dimensions and their static links. Call exactly once.

    Args:
        system: DimensionalSystem (mutated in place)

    Returns:
        gamma_init receipt (also appended to the ledger)

    Raises:
        StopRule: if the system already has dimensions
    """
    if system.dimensions:
        raise StopRule(
            f"initialize_dimensions called on a system with {len(system.dimensions)} dimensions"
        )

    for i in range(1, N_DIMENSIONS + 1):
        factor = PHI ** float(i)
        initial = system.seed.primary_value * complex(factor * DIMENSION_SEED_SCALE, 0.0)
        system.dimensions.append(Dimension(
            index=i,
            field_value=initial,
            scale_factor=factor,
        ))

    establish_links(system)

    receipt = emit_receipt("gamma_init", {
        "tenant_id": system.tenant_id,
        "n_dimensions": len(system.dimensions),
        "links": {str(d.index): list(d.linked_indices) for d in system.dimensions},
        "initial_fields": [d.field_value for d in system.dimensions]
    })
    system.receipt_ledger.append(receipt)
    return receipt


def establish_links(system: DimensionalSystem) -> None:
    """Apply DIMENSION_LINKS. Dimensions 4-7 are left unlinked."""
    if len(system.dimensions) < N_DIMENSIONS:
        return

    for index, links in DIMENSION_LINKS.items():
        system.dimensions[index - 1].linked_indices.extend(links)


def link_influence(system: DimensionalSystem, dimension: Dimension) -> complex:
    """Product of linked field values; 1 when unlinked."""
    influence = complex(1.0, 0.0)
    for link in dimension.linked_indices:
        if 1 <= link <= len(system.dimensions):
            influence = influence * system.dimensions[link - 1].field_value
    return influence


def dimension_phase(index: int) -> complex:
    """e^(i*pi*index/7)"""
    return cmath.exp(complex(0.0, math.pi * index / 7.0))


def propagate(system: DimensionalSystem, base_value: complex) -> None:
    """
    field_k = base * influence_k * phi^k * e^(i*pi*k/7), ascending k.

    Args:
        system: DimensionalSystem (field values mutated in place)
        base_value: Seed output for this cycle
    """
    for dimension in system.dimensions:
        influence = link_influence(system, dimension)
        golden = complex(dimension.scale_factor, 0.0)
        dimension.field_value = base_value * influence * golden * dimension_phase(dimension.index)


def read_dimension(system: DimensionalSystem, index: int) -> Optional[complex]:
    """Field value of dimension `index` (1-based), or None when out of range."""
    if 0 < index <= len(system.dimensions):
        return system.dimensions[index - 1].field_value
    return None


def current_stage(system: DimensionalSystem) -> int:
    return system.seed.stage
