"""
tests/test_dimensional.py - Dimension Graph Tests

Validates initialization, the static link table, propagation order and
readout bounds.
"""

import cmath
import math

import pytest

from gamma_sim.constants import PHI, N_DIMENSIONS
from gamma_sim.dimensional import (
    create_system,
    initialize_dimensions,
    establish_links,
    link_influence,
    propagate,
    read_dimension,
    current_stage,
)
from receipts import StopRule


@pytest.fixture
def system():
    """Initialized DimensionalSystem."""
    s = create_system()
    initialize_dimensions(s)
    return s


class TestInitialization:
    """Test initialize_dimensions."""

    def test_empty_before_init(self):
        s = create_system()
        assert s.dimensions == []
        assert read_dimension(s, 1) is None

    def test_seven_dimensions(self, system):
        assert len(system.dimensions) == N_DIMENSIONS
        assert [d.index for d in system.dimensions] == list(range(1, 8))

    def test_scale_factors(self, system):
        for d in system.dimensions:
            assert d.scale_factor == pytest.approx(PHI ** d.index)

    def test_initial_fields(self, system):
        """field_i = psi * phi^i * 0.01."""
        psi = system.seed.primary_value
        for d in system.dimensions:
            expected = psi * (PHI ** d.index) * 0.01
            assert d.field_value == pytest.approx(expected, rel=1e-12, abs=0)

    def test_link_table(self, system):
        """Only dimensions 2 and 3 are linked."""
        links = {d.index: list(d.linked_indices) for d in system.dimensions}
        assert links == {1: [], 2: [1], 3: [1, 2], 4: [], 5: [], 6: [], 7: []}

    def test_links_point_downward(self, system):
        for d in system.dimensions:
            for link in d.linked_indices:
                assert link < d.index

    def test_init_receipt(self, system):
        receipt = system.receipt_ledger[-1]
        assert receipt["receipt_type"] == "gamma_init"
        assert receipt["n_dimensions"] == 7
        assert receipt["links"]["3"] == [1, 2]

    def test_second_init_raises(self, system):
        with pytest.raises(StopRule):
            initialize_dimensions(system)
        assert len(system.dimensions) == N_DIMENSIONS

    def test_links_skipped_when_partial(self):
        """establish_links does nothing until all 7 dimensions exist."""
        s = create_system()
        establish_links(s)
        assert s.dimensions == []


class TestPropagation:
    """Test propagate."""

    def test_unlinked_influence_is_one(self, system):
        assert link_influence(system, system.dimensions[0]) == complex(1.0, 0.0)

    def test_unit_base(self, system):
        """With base 1, dimension 1 is phi * e^(i*pi/7)."""
        propagate(system, complex(1.0, 0.0))
        expected = PHI * cmath.exp(1j * math.pi / 7)
        assert read_dimension(system, 1) == pytest.approx(expected, rel=1e-12, abs=0)

    def test_same_cycle_values(self, system):
        """Dimension 2 reads dimension 1 after dimension 1 was updated."""
        base = complex(0.5, 0.25)
        propagate(system, base)
        d1 = read_dimension(system, 1)
        expected = base * d1 * PHI ** 2 * cmath.exp(2j * math.pi / 7)
        assert read_dimension(system, 2) == pytest.approx(expected, rel=1e-12, abs=0)

    def test_dimension_three(self, system):
        base = complex(0.5, 0.25)
        propagate(system, base)
        d1 = read_dimension(system, 1)
        d2 = read_dimension(system, 2)
        expected = base * d1 * d2 * PHI ** 3 * cmath.exp(3j * math.pi / 7)
        assert read_dimension(system, 3) == pytest.approx(expected, rel=1e-12, abs=0)

    def test_unlinked_upper_dimensions(self, system):
        """Dimensions 4-7 depend only on the base value."""
        base = complex(0.3, -0.1)
        propagate(system, base)
        for k in range(4, 8):
            expected = base * PHI ** k * cmath.exp(1j * math.pi * k / 7)
            assert read_dimension(system, k) == pytest.approx(expected, rel=1e-12, abs=0)


class TestReadout:
    """Test read_dimension and current_stage."""

    def test_out_of_range(self, system):
        assert read_dimension(system, 0) is None
        assert read_dimension(system, 8) is None
        assert read_dimension(system, -1) is None

    def test_in_range(self, system):
        for i in range(1, 8):
            value = read_dimension(system, i)
            assert isinstance(value, complex), f"dimension {i} returned {value!r}"

    def test_current_stage(self, system):
        assert current_stage(system) == 1
        system.seed.stage = 4
        assert current_stage(system) == 4
