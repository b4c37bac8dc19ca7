"""
gamma_sim/export.py - Report and Export Functions

JSON export of run results and model constants, plus a plain text report.
"""

import json

from receipts import dual_hash, dumps_json, ledger_root
from .types_result import GammaResult
from .types_config import MANDATORY_SCENARIOS
from .measurement import measure_dimensions
from .constants import (
    PHI,
    PHI_INVERSE,
    N_GAMMA,
    N_DIMENSIONS,
    MAX_STAGE,
    INITIAL_COHERENCE,
    COHERENCE_CEILING,
    COHERENCE_GAIN,
    STAGE_THRESHOLD_EXPONENTS,
    STAGE_THRESHOLDS,
    DIMENSION_LINKS,
    RECEIPT_SCHEMA,
)


def result_to_dict(result: GammaResult) -> dict:
    """Plain dict view of a GammaResult; complex values stay complex."""
    system = result.final_system
    return {
        "config": {
            "n_cycles": result.config.n_cycles,
            "scenario_name": result.config.scenario_name,
            "tenant_id": result.config.tenant_id
        },
        "statistics": result.statistics,
        "dimensions": measure_dimensions(system),
        "seed": {
            "primary_value": system.seed.primary_value,
            "gamma_field": system.seed.gamma_field,
            "stage": system.seed.stage,
            "accumulated_time": system.seed.accumulated_time,
            "coherence": system.seed.coherence
        },
        "transitions": [list(t) for t in result.all_traces["transitions"]],
        "ledger_root": ledger_root(system.receipt_ledger)
    }


def export_to_json(result: GammaResult) -> str:
    """
    Format GammaResult as JSON.

    Complex values are [re, im] pairs; non-finite floats are the strings
    "NaN", "Infinity" and "-Infinity".

    Args:
        result: GammaResult to export

    Returns:
        str: JSON formatted output
    """
    return dumps_json(result_to_dict(result), indent=2)


def generate_report(result: GammaResult) -> str:
    """
    Generate human-readable summary.

    Args:
        result: GammaResult to summarize

    Returns:
        str: Formatted report
    """
    stats = result.statistics
    lines = [
        "=" * 60,
        f"GAMMA SIMULATION REPORT - {result.config.scenario_name}",
        "=" * 60,
        "",
        f"Cycles: {stats['cycles']}",
        f"Final stage: {stats['final_stage']} / {MAX_STAGE}",
        f"Stage transitions: {stats['stage_transitions']}",
        f"Accumulated time: {stats['accumulated_time']:.6f}",
        f"Coherence: {stats['coherence']:.6f}",
        f"Non-finite cycles: {stats['non_finite_cycles']}",
        "",
        "DIMENSIONS:",
    ]

    for row in measure_dimensions(result.final_system):
        links = ",".join(str(link) for link in row["links"]) or "-"
        lines.append(
            f"  {row['index']}: |psi|={row['magnitude']:.6e} "
            f"arg={row['phase']:+.6f} links={links}"
        )

    lines.append("")
    lines.append("=" * 60)
    return "\n".join(lines)


def export_model_details() -> dict:
    """
    Export the recurrence constants, stage table and link table.

    Returns:
        dict with version, constants, stages, links, scenarios, receipt
        schemas and a dual_hash over the content
    """
    details = {
        "version": "1.0.0",
        "name": "gamma_sim",
        "constants": {
            "PHI": PHI,
            "PHI_INVERSE": PHI_INVERSE,
            "N_GAMMA": N_GAMMA,
            "N_DIMENSIONS": N_DIMENSIONS,
            "MAX_STAGE": MAX_STAGE,
            "INITIAL_COHERENCE": INITIAL_COHERENCE,
            "COHERENCE_CEILING": COHERENCE_CEILING,
            "COHERENCE_GAIN": COHERENCE_GAIN
        },
        "stages": {
            str(stage): {
                "exponent": STAGE_THRESHOLD_EXPONENTS[stage],
                "threshold": STAGE_THRESHOLDS[stage]
            }
            for stage in sorted(STAGE_THRESHOLDS)
        },
        "links": {str(k): list(v) for k, v in DIMENSION_LINKS.items()},
        "scenarios": [
            {"name": c.scenario_name, "n_cycles": c.n_cycles} for c in MANDATORY_SCENARIOS
        ],
        "receipt_schemas": list(RECEIPT_SCHEMA)
    }
    details["dual_hash"] = dual_hash(json.dumps(details, sort_keys=True))
    return details
