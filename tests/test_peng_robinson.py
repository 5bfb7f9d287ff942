"""Tests for the reference Peng-Robinson equation of state."""

import jax.numpy as jnp
import numpy as np
import pytest

from eos_estimator.core import (
    Contributions,
    PengRobinson,
    Phase,
    State,
    create_peng_robinson_params,
    create_propane_butane_params,
    create_propane_params,
)
from eos_estimator.core.peng_robinson import (
    CRITICAL_COMPRESSIBILITY,
    GAS_CONSTANT,
    compressibility_factors,
    residual_helmholtz_energy,
    residual_pressure,
)
from eos_estimator.errors import IncompatibleInputError, ModelError
from eos_estimator.units import Q_


class TestParameters:
    """Tests for parameter creation."""

    def test_units(self):
        """Pressures are stored in Pa, molar weights in kg/mol."""
        params = create_propane_params()
        assert float(params.critical_pressure[0]) == pytest.approx(42.48e5)
        assert float(params.molar_weight[0]) == pytest.approx(0.044097)
        assert params.binary_interaction.shape == (1, 1)

    def test_mixture(self):
        params = create_propane_butane_params(kij=0.01)
        assert params.critical_temperature.shape == (2,)
        assert float(params.binary_interaction[0, 1]) == pytest.approx(0.01)

    def test_length_mismatch(self):
        with pytest.raises(IncompatibleInputError):
            create_peng_robinson_params([300.0, 400.0], [40.0], [0.1, 0.2], [40.0, 50.0])

    def test_kij_shape(self):
        with pytest.raises(IncompatibleInputError):
            create_peng_robinson_params([300.0, 400.0], [40.0, 30.0], [0.1, 0.2], [40.0, 50.0], [0.0])


class TestHelmholtzDerivatives:
    """Tests for properties obtained by automatic differentiation."""

    def test_pressure_matches_finite_difference(self):
        params = create_propane_params()
        T, V, n = 300.0, 1.0e-3, jnp.array([1.0])
        h = 1.0e-9
        numerical = -(
            residual_helmholtz_energy(T, V + h, n, params)
            - residual_helmholtz_energy(T, V - h, n, params)
        ) / (2.0 * h)
        assert float(residual_pressure(T, V, n, params)) == pytest.approx(float(numerical), rel=1e-5)

    def test_ideal_gas_limit(self):
        """At very low density Z approaches 1."""
        state = State(create_propane_params(), 300.0, 10.0, np.ones(1))
        assert state.compressibility() == pytest.approx(1.0, abs=1e-3)
        residual = state.pressure(Contributions.RESIDUAL).magnitude
        total = state.pressure(Contributions.TOTAL).magnitude
        assert abs(residual) < 1e-3 * total

    def test_contributions_add_up(self):
        state = State(create_propane_butane_params(), 300.0, 1.0e-4, np.array([0.4, 0.6]))
        ideal = state.chemical_potential(Contributions.IDEAL_GAS)
        residual = state.chemical_potential(Contributions.RESIDUAL)
        total = state.chemical_potential(Contributions.TOTAL)
        np.testing.assert_allclose((ideal + residual).magnitude, total.magnitude)
        assert total.units == Q_(1.0, "J/mol").units


class TestCompressibility:
    """Tests for the cubic equation in Z."""

    def test_two_phase_region_has_three_roots(self):
        params = create_propane_params()
        roots, B = compressibility_factors(300.0, 1.0e6, np.ones(1), params)
        assert roots.size == 3
        assert np.all(roots > B)
        assert np.all(np.diff(roots) > 0)

    def test_supercritical_single_root(self):
        roots, _ = compressibility_factors(500.0, 1.0e6, np.ones(1), create_propane_params())
        assert roots.size == 1


class TestStates:
    """Tests for single-phase states."""

    def test_liquid_and_vapor_roots(self):
        params = create_propane_params()
        liquid = State.from_pressure(params, 300.0, 20.0e5, np.ones(1), Phase.LIQUID)
        vapor = State.from_pressure(params, 300.0, 1.0e5, np.ones(1), Phase.VAPOR)
        assert 400.0 < liquid.mass_density().magnitude < 560.0
        assert 1.5 < vapor.mass_density().magnitude < 2.2

    def test_pressure_reproduced(self):
        state = State.from_pressure(create_propane_params(), 300.0, 20.0e5, np.ones(1))
        assert state.pressure().to("bar").magnitude == pytest.approx(20.0, rel=1e-8)

    def test_invalid_pressure(self):
        with pytest.raises(ModelError):
            State.from_pressure(create_propane_params(), 300.0, -1.0, np.ones(1))

    def test_repr(self):
        state = State.from_pressure(create_propane_params(), 300.0, 20.0e5, np.ones(1))
        assert "T=300.00 K" in repr(state)


class TestPengRobinsonModel:
    """Tests for the model wrapper."""

    def test_critical_point(self):
        """The critical state reproduces Tc and pc."""
        eos = PengRobinson(create_propane_params(), components=["propane"])
        critical = eos.critical_point(max_temperature=Q_(350.0, "K"))
        assert critical.temperature.to("K").magnitude == pytest.approx(369.83)
        assert critical.pressure().to("bar").magnitude == pytest.approx(42.48, rel=1e-5)
        expected_density = 0.044097 * 42.48e5 / (CRITICAL_COMPRESSIBILITY * GAS_CONSTANT * 369.83)
        assert critical.mass_density().magnitude == pytest.approx(expected_density)

    def test_critical_point_of_mixture(self):
        eos = PengRobinson(create_propane_butane_params())
        with pytest.raises(ModelError):
            eos.critical_point()

    def test_component_names(self):
        assert PengRobinson(create_propane_butane_params()).components == ["component 1", "component 2"]
        with pytest.raises(IncompatibleInputError):
            PengRobinson(create_propane_params(), components=["propane", "butane"])

    def test_single_phase_state(self):
        eos = PengRobinson(create_propane_params())
        state = eos.single_phase_state(Q_(300.0, "K"), Q_(2.0, "MPa"), np.ones(1), Phase.LIQUID)
        assert state.pressure().to("bar").magnitude == pytest.approx(20.0, rel=1e-8)

    def test_wrong_number_of_molefracs(self):
        eos = PengRobinson(create_propane_params())
        with pytest.raises(IncompatibleInputError):
            eos.single_phase_state(Q_(300.0, "K"), Q_(1.0, "bar"), np.array([0.5, 0.5]))

    def test_temperature_units(self):
        eos = PengRobinson(create_propane_params())
        kelvin = eos.pure_phase_equilibrium(Q_(300.0, "K")).vapor_pressure
        celsius = eos.pure_phase_equilibrium(Q_(26.85, "degC")).vapor_pressure
        assert celsius.magnitude == pytest.approx(kelvin.magnitude, rel=1e-8)
