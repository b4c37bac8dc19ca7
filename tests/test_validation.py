"""
tests/test_validation.py - Invariant Validation Tests

Validates seed and system invariant checks and the StopRule gate.
"""

import math

import numpy as np
import pytest

from gamma_sim.dimensional import create_system, initialize_dimensions
from gamma_sim.cycle import run_cycle
from gamma_sim.types_state import SeedState
from gamma_sim.validation import (
    is_finite_complex,
    validate_seed,
    validate_system,
    validate_traces,
    validate_latest,
    enforce_invariants,
)
from receipts import StopRule


@pytest.fixture
def system():
    s = create_system()
    initialize_dimensions(s)
    return s


def _types(violations):
    return {v["type"] for v in violations}


class TestIsFiniteComplex:

    def test_finite(self):
        assert is_finite_complex(1 + 2j)

    def test_special_values(self):
        assert not is_finite_complex(complex(math.inf, 0.0))
        assert not is_finite_complex(complex(0.0, math.nan))


class TestValidateSeed:
    """Test validate_seed."""

    def test_fresh_seed_valid(self):
        assert validate_seed(SeedState()) == []

    def test_resized_gamma_field(self):
        seed = SeedState()
        seed.gamma_field = np.zeros(6, dtype=np.complex128)
        assert "gamma_field_shape" in _types(validate_seed(seed))

    def test_stage_out_of_range(self):
        seed = SeedState()
        seed.stage = 9
        assert "stage_out_of_range" in _types(validate_seed(seed))

    def test_coherence_above_ceiling(self):
        seed = SeedState()
        seed.coherence = 1.0
        assert "coherence_out_of_range" in _types(validate_seed(seed))

    def test_negative_time(self):
        seed = SeedState()
        seed.accumulated_time = -1.0
        assert "negative_time" in _types(validate_seed(seed))


class TestValidateSystem:
    """Test validate_system."""

    def test_initialized_system_valid(self, system):
        assert validate_system(system) == []

    def test_upward_link_detected(self, system):
        system.dimensions[3].linked_indices.append(6)
        assert "link_not_lower" in _types(validate_system(system))

    def test_self_link_detected(self, system):
        system.dimensions[1].linked_indices.append(2)
        assert "link_not_lower" in _types(validate_system(system))

    def test_dimension_order(self, system):
        system.dimensions[0], system.dimensions[1] = system.dimensions[1], system.dimensions[0]
        assert "dimension_order" in _types(validate_system(system))

    def test_scale_factor(self, system):
        system.dimensions[4].scale_factor = 1.0
        assert "scale_factor" in _types(validate_system(system))


class TestValidateTraces:
    """Test validate_traces."""

    def test_clean_run(self, system):
        for _ in range(30):
            run_cycle(system)
        assert validate_traces(system) == []

    def test_stage_regression(self, system):
        system.stage_trace.extend([1, 2, 1])
        assert "stage_decreased" in _types(validate_traces(system))

    def test_coherence_regression(self, system):
        system.coherence_trace.extend([0.993, 0.99])
        assert "coherence_decreased" in _types(validate_traces(system))

    def test_cycle_numbers_follow_window(self):
        s = create_system(history_limit=3)
        initialize_dimensions(s)
        for _ in range(10):
            run_cycle(s)
        s.stage_trace[-1] = 0
        violations = validate_traces(s)
        assert [v["cycle"] for v in violations] == [9], "Cycle numbers are absolute, not window offsets"


class TestValidateLatest:
    """Test the per-cycle latest-step check."""

    def test_clean_step(self, system):
        for _ in range(5):
            run_cycle(system)
        assert validate_latest(system) == []

    def test_tail_regression(self, system):
        system.stage_trace.extend([2, 1])
        assert "stage_decreased" in _types(validate_latest(system))

    def test_ignores_older_entries(self, system):
        system.coherence_trace.extend([0.993, 0.99, 0.99])
        assert validate_latest(system) == []
        assert "coherence_decreased" in _types(validate_traces(system))


class TestEnforceInvariants:
    """Test enforce_invariants."""

    def test_passes_on_valid_system(self, system):
        enforce_invariants(system)

    def test_raises_stoprule(self, system):
        system.seed.stage = 0
        with pytest.raises(StopRule, match="stage_out_of_range"):
            enforce_invariants(system)

    def test_latest_only_gate(self, system):
        system.stage_trace.extend([2, 1, 1])
        enforce_invariants(system, full_traces=False)
        with pytest.raises(StopRule, match="stage_decreased"):
            enforce_invariants(system)
