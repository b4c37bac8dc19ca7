"""
tests/test_seed_stage.py - Stage State Machine Tests

Validates thresholds, single-step advancement, coherence updates and gamma
field rescaling.
"""

import numpy as np
import pytest

from gamma_sim.constants import PHI, MAX_STAGE, COHERENCE_CEILING, N_GAMMA
from gamma_sim.types_state import SeedState
from gamma_sim.seed_operator import step_seed
from gamma_sim.seed_stage import (
    stage_threshold,
    next_coherence,
    gamma_growth_factors,
    evolve_gamma_field,
    check_stage_advance,
)


class TestThresholds:
    """Test stage_threshold table."""

    def test_first_threshold_is_phi_cubed(self):
        assert stage_threshold(1) == pytest.approx(PHI ** 3)
        assert stage_threshold(1) == pytest.approx(4.236, abs=1e-3)

    def test_exponent_table(self):
        """Stages 1..7 use phi^3, phi^5 ... phi^10."""
        exponents = [3, 5, 6, 7, 8, 9, 10]
        for stage, k in zip(range(1, 8), exponents):
            assert stage_threshold(stage) == pytest.approx(PHI ** k), f"stage {stage}"

    def test_terminal_stage_has_no_threshold(self):
        assert stage_threshold(MAX_STAGE) is None


class TestCoherence:
    """Test next_coherence."""

    def test_single_update(self):
        assert next_coherence(0.99) == pytest.approx(0.993)

    def test_never_exceeds_ceiling(self):
        coherence = 0.99
        for _ in range(50):
            updated = next_coherence(coherence)
            assert updated >= coherence
            assert updated <= COHERENCE_CEILING
            coherence = updated
        assert coherence == COHERENCE_CEILING


class TestGammaEvolution:
    """Test gamma field rescaling."""

    def test_factors(self):
        """factor_i = (1 + (s/10 + i/20)*0.2) + i*(s/10 + i/20)."""
        factors = gamma_growth_factors(2, N_GAMMA)
        for i in range(N_GAMMA):
            pf = 2 / 10 + i / 20
            assert factors[i] == pytest.approx(complex(1 + pf * 0.2, pf))

    def test_evolve_keeps_shape(self):
        seed = SeedState()
        seed.stage = 3
        evolve_gamma_field(seed)
        assert seed.gamma_field.shape == (N_GAMMA,)
        assert seed.gamma_field.dtype == np.complex128


class TestSingleStepAdvance:
    """Stage advances exactly once per step."""

    def test_crossing_phi_cubed_on_step_seven(self):
        """Steps 1-6 stay at stage 1; step 7 crosses phi^3 and lands on stage 2."""
        seed = SeedState()
        for i in range(6):
            step_seed(seed)
            assert seed.stage == 1, f"Advanced early at step {i + 1}"
        assert np.all(seed.gamma_field == 0.01)

        step_seed(seed)
        assert seed.accumulated_time > PHI ** 3
        assert seed.stage == 2
        assert seed.coherence == pytest.approx(0.993)

        for i in range(N_GAMMA):
            pf = 2 / 10 + i / 20
            expected = 0.01 * complex(1 + pf * 0.2, pf)
            assert seed.gamma_field[i] == pytest.approx(expected, rel=1e-12, abs=0), f"entry {i}"

    def test_large_time_jump_advances_one_stage(self):
        """Time past every threshold still moves only one stage per step."""
        seed = SeedState()
        seed.accumulated_time = 500.0
        for expected_stage in range(2, MAX_STAGE + 1):
            step_seed(seed)
            assert seed.stage == expected_stage

    def test_terminal_stage(self):
        """Stage 8 never advances and leaves coherence untouched."""
        seed = SeedState()
        seed.stage = MAX_STAGE
        seed.accumulated_time = 1e6
        coherence = seed.coherence
        gamma = seed.gamma_field.copy()
        assert check_stage_advance(seed) is None
        step_seed(seed)
        assert seed.stage == MAX_STAGE
        assert seed.coherence == coherence
        assert np.array_equal(seed.gamma_field, gamma)

    def test_threshold_is_strict(self):
        """Time equal to the threshold does not advance."""
        seed = SeedState()
        seed.accumulated_time = PHI ** 3.0
        assert check_stage_advance(seed) is None
        assert seed.stage == 1

        seed.accumulated_time = PHI ** 3.0 + 1e-9
        assert check_stage_advance(seed) is not None
        assert seed.stage == 2


class TestTransitionReceipt:
    """Test stage_transition receipts."""

    def test_receipt_fields(self):
        seed = SeedState()
        seed.accumulated_time = 5.0
        receipt = check_stage_advance(seed)
        assert receipt["receipt_type"] == "stage_transition"
        assert receipt["from_stage"] == 1
        assert receipt["to_stage"] == 2
        assert receipt["coherence_before"] == 0.99
        assert receipt["coherence_after"] == pytest.approx(0.993)
        assert receipt["terminal"] is False

    def test_step_appends_to_ledger(self):
        seed = SeedState()
        seed.accumulated_time = 5.0
        ledger = []
        step_seed(seed, ledger)
        assert len(ledger) == 1
        step_seed(seed, ledger)
        assert len(ledger) == 1, "No transition expected below phi^5"

    def test_monotonic_over_long_run(self):
        """Stage and coherence never decrease across 300 steps."""
        seed = SeedState()
        stage, coherence = seed.stage, seed.coherence
        for _ in range(300):
            step_seed(seed)
            assert seed.stage >= stage
            assert seed.stage <= MAX_STAGE
            assert seed.coherence >= coherence
            assert seed.coherence <= COHERENCE_CEILING
            stage, coherence = seed.stage, seed.coherence
        assert seed.stage == MAX_STAGE
