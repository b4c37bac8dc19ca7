"""
gamma_sim/cycle.py - Core Evolution Loop

Entry points: run_cycle, run_simulation, run_ensemble, start_gamma_system.
Every cycle emits a gamma_cycle receipt.
"""

from typing import List, Optional

from receipts import emit_receipt, StopRule

from .constants import REFERENCE_CYCLES, HISTORY_LIMIT
from .types_config import GammaConfig
from .types_state import DimensionalSystem
from .types_result import GammaResult
from .seed_operator import step_seed
from .dimensional import create_system, initialize_dimensions, propagate
from .validation import check_non_finite, enforce_invariants, is_finite_complex
from .measurement import measure_statistics


def run_cycle(system: DimensionalSystem) -> complex:
    """
    One evolutionary cycle: step the seed, then propagate its output.

    Args:
        system: Initialized DimensionalSystem (mutated in place)

    Returns:
        The base value produced by the seed this cycle

    Raises:
        StopRule: if initialize_dimensions has not been called
    """
    if not system.dimensions:
        raise StopRule("run_cycle called before initialize_dimensions")

    stage_before = system.seed.stage
    base_value = step_seed(system.seed, system.receipt_ledger, system.tenant_id)
    propagate(system, base_value)

    if system.seed.stage != stage_before:
        system.transitions.append((system.cycle, system.seed.stage))

    system.primary_trace.append(base_value)
    system.stage_trace.append(system.seed.stage)
    system.coherence_trace.append(system.seed.coherence)

    if not is_finite_complex(base_value):
        system.non_finite_cycles += 1
    check_non_finite(system, base_value)

    receipt = emit_receipt("gamma_cycle", {
        "tenant_id": system.tenant_id,
        "cycle": system.cycle,
        "base_value": base_value,
        "stage": system.seed.stage,
        "accumulated_time": system.seed.accumulated_time,
        "coherence": system.seed.coherence,
        "fields": [d.field_value for d in system.dimensions]
    })
    system.receipt_ledger.append(receipt)

    system.cycle += 1
    return base_value


def run_simulation(config: GammaConfig) -> GammaResult:
    """
    Run a complete simulation.

    Args:
        config: GammaConfig with parameters

    Returns:
        GammaResult with final system, traces and statistics
    """
    system = create_system(config.tenant_id, config.history_limit)
    initialize_dimensions(system)

    for _ in range(config.n_cycles):
        run_cycle(system)
        if config.validate_each_cycle:
            enforce_invariants(system, full_traces=False)

    if config.validate_each_cycle:
        enforce_invariants(system)

    statistics = measure_statistics(system)

    receipt = emit_receipt("gamma_result", {
        "tenant_id": config.tenant_id,
        "scenario": config.scenario_name,
        **statistics
    })
    system.receipt_ledger.append(receipt)

    all_traces = {
        "primary_trace": list(system.primary_trace),
        "stage_trace": list(system.stage_trace),
        "coherence_trace": list(system.coherence_trace),
        "transitions": list(system.transitions)
    }

    return GammaResult(
        final_system=system,
        all_traces=all_traces,
        statistics=statistics,
        config=config
    )


def run_ensemble(configs: List[GammaConfig]) -> List[GammaResult]:
    """
    Run independent simulations in sequence. No state is shared between runs.

    Args:
        configs: List of GammaConfig objects

    Returns:
        List of GammaResult objects
    """
    results = []
    for config in configs:
        result = run_simulation(config)
        results.append(result)
    return results


def start_gamma_system(n_cycles: int = REFERENCE_CYCLES,
                       history_limit: Optional[int] = HISTORY_LIMIT) -> DimensionalSystem:
    """Reference driver: initialize and run the first 100 cycles."""
    system = create_system(history_limit=history_limit)
    initialize_dimensions(system)

    for _ in range(n_cycles):
        run_cycle(system)

    return system
