"""Tests for the Peng-Robinson phase equilibrium solvers."""

import numpy as np
import pytest

from eos_estimator.core import (
    Contributions,
    PengRobinson,
    SolverOptions,
    create_butane_params,
    create_propane_butane_params,
    create_propane_params,
)
from eos_estimator.core.phase_equilibrium import (
    bubble_point,
    pure_phase_equilibrium,
    wilson_vapor_pressure,
)
from eos_estimator.errors import ModelError
from eos_estimator.units import Q_


@pytest.fixture(scope="module")
def propane():
    return PengRobinson(create_propane_params(), components=["propane"])


@pytest.fixture(scope="module")
def mixture():
    return PengRobinson(create_propane_butane_params(), components=["propane", "n-butane"])


class TestPurePhaseEquilibrium:
    """Tests for saturation of a pure component."""

    def test_propane_vapor_pressure(self, propane):
        """Propane boils at about 10 bar at 300 K."""
        vle = propane.pure_phase_equilibrium(Q_(300.0, "K"))
        assert 9.0 < vle.vapor_pressure.to("bar").magnitude < 11.0

    def test_phases_coexist(self, propane):
        """Equal pressure and chemical potential, different densities."""
        vle = propane.pure_phase_equilibrium(Q_(280.0, "K"))
        p_liquid = vle.liquid.pressure(Contributions.TOTAL).to("bar").magnitude
        p_vapor = vle.vapor.pressure(Contributions.TOTAL).to("bar").magnitude
        assert p_liquid == pytest.approx(p_vapor, rel=1e-8)
        mu_difference = (vle.liquid.chemical_potential() - vle.vapor.chemical_potential()).magnitude
        assert np.all(np.abs(mu_difference) < 1e-3)
        assert vle.liquid.mass_density().magnitude > 10.0 * vle.vapor.mass_density().magnitude

    def test_vapor_pressure_increases_with_temperature(self, propane):
        pressures = [
            propane.pure_phase_equilibrium(Q_(t, "K")).vapor_pressure.magnitude
            for t in (230.0, 260.0, 290.0, 320.0, 350.0)
        ]
        assert np.all(np.diff(pressures) > 0)

    def test_close_to_wilson_estimate(self):
        params = create_butane_params()
        vle = pure_phase_equilibrium(params, 300.0)
        wilson = wilson_vapor_pressure(300.0, params)[0] * 1e-5
        assert vle.vapor_pressure.to("bar").magnitude == pytest.approx(wilson, rel=0.1)

    def test_above_critical_temperature(self, propane):
        with pytest.raises(ModelError):
            propane.pure_phase_equilibrium(Q_(380.0, "K"))

    def test_mixture_rejected(self, mixture):
        with pytest.raises(ModelError):
            mixture.pure_phase_equilibrium(Q_(300.0, "K"))

    def test_iteration_limit(self):
        with pytest.raises(ModelError):
            pure_phase_equilibrium(create_propane_params(), 300.0, options=SolverOptions(max_iter=1))


class TestBinaryPhaseEquilibrium:
    """Tests for bubble and dew points of propane / n-butane."""

    def test_bubble_point(self, mixture):
        vle = mixture.bubble_point(Q_(300.0, "K"), np.array([0.5, 0.5]))
        p = vle.vapor_pressure.to("bar").magnitude
        assert 2.5 < p < 10.5
        assert vle.vapor_molefracs[0] > 0.5
        assert vle.vapor_molefracs.sum() == pytest.approx(1.0)

    def test_dew_point(self, mixture):
        vle = mixture.dew_point(Q_(300.0, "K"), np.array([0.5, 0.5]))
        assert vle.liquid_molefracs[0] < 0.5
        assert vle.liquid_molefracs.sum() == pytest.approx(1.0)

    def test_bubble_above_dew_pressure(self, mixture):
        bubble = mixture.bubble_point(Q_(300.0, "K"), np.array([0.5, 0.5]))
        dew = mixture.dew_point(Q_(300.0, "K"), np.array([0.5, 0.5]))
        assert bubble.vapor_pressure.magnitude > dew.vapor_pressure.magnitude

    def test_bubble_and_dew_consistent(self, mixture):
        """The dew point of the incipient vapor is the bubble point."""
        T = Q_(300.0, "K")
        bubble = mixture.bubble_point(T, np.array([0.3, 0.7]))
        dew = mixture.dew_point(T, bubble.vapor_molefracs)
        assert dew.vapor_pressure.magnitude == pytest.approx(bubble.vapor_pressure.magnitude, rel=1e-6)
        np.testing.assert_allclose(dew.liquid_molefracs, [0.3, 0.7], atol=1e-6)

    def test_fugacities_equal(self, mixture):
        """Chemical potentials of each component agree at the bubble point."""
        vle = mixture.bubble_point(Q_(310.0, "K"), np.array([0.6, 0.4]))
        difference = (vle.liquid.chemical_potential() - vle.vapor.chemical_potential()).magnitude
        assert np.all(np.abs(difference) < 1e-3)

    def test_initial_guess_accepted(self, mixture):
        T = Q_(300.0, "K")
        reference = mixture.bubble_point(T, np.array([0.5, 0.5]))
        hinted = mixture.bubble_point(
            T,
            np.array([0.5, 0.5]),
            pressure=reference.vapor_pressure,
            vapor_molefracs=reference.vapor_molefracs,
        )
        assert hinted.vapor_pressure.magnitude == pytest.approx(reference.vapor_pressure.magnitude, rel=1e-8)

    def test_pure_limit(self):
        """A bubble point of a pure component is its vapor pressure."""
        params = create_propane_params()
        vle = bubble_point(params, 300.0, np.ones(1))
        pure = pure_phase_equilibrium(params, 300.0)
        assert vle.vapor_pressure.magnitude == pytest.approx(pure.vapor_pressure.magnitude, rel=1e-6)
