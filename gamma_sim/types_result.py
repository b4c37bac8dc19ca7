"""
gamma_sim/types_result.py - GammaResult Dataclass

Immutable run result container.
"""

from dataclasses import dataclass

from .types_config import GammaConfig
from .types_state import DimensionalSystem


@dataclass(frozen=True)
class GammaResult:
    """Immutable run result."""
    final_system: DimensionalSystem
    all_traces: dict
    statistics: dict
    config: GammaConfig
