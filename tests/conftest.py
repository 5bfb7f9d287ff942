"""Shared fixtures: an analytic thermodynamic model with call bookkeeping."""

from collections import Counter

import numpy as np
import pytest

from eos_estimator.core.types import Contributions, Phase, PhaseEquilibrium
from eos_estimator.errors import ModelError
from eos_estimator.units import Q_


class FakeState:
    """State with fixed properties."""

    def __init__(self, temperature, pressure=None, density=None, chemical_potential=None, molefracs=None):
        self.temperature = Q_(float(temperature), "K")
        self.molefracs = np.ones(1) if molefracs is None else np.asarray(molefracs, dtype=float)
        self._pressure = pressure
        self._density = density
        self._chemical_potential = chemical_potential

    def pressure(self, contributions=Contributions.TOTAL):
        return Q_(self._pressure, "bar")

    def mass_density(self):
        return Q_(self._density, "kg/m^3")

    def chemical_potential(self, contributions=Contributions.TOTAL):
        return Q_(np.asarray(self._chemical_potential, dtype=float), "J/mol")


class FakeModel:
    """Model with analytic phase behavior.

    Defaults (T in K, p in bar, x and y mole fractions of component 1):
    - vapor pressure 0.05 T, no equilibrium at or above Tc
    - saturated liquid density 1000 - T
    - liquid density 1000 - T + p
    - bubble pressure 1 + 2 x, dew pressure 1 + 2 y
    - chemical potential 100 * molefracs J/mol

    Every method call is counted in `calls`; the keyword arguments of the
    latest call of each method are kept in `last_kwargs`.
    """

    def __init__(
        self,
        critical_temperature=400.0,
        critical_density=200.0,
        vapor_pressure=lambda t: 0.05 * t,
        saturated_density=lambda t: 1000.0 - t,
        liquid_density=lambda t, p: 1000.0 - t + p,
        bubble_pressure=lambda t, x: 1.0 + 2.0 * x,
        dew_pressure=lambda t, y: 1.0 + 2.0 * y,
        chemical_potential=lambda t, p, molefracs, phase: 100.0 * molefracs,
        pure_failure_temperature=None,
        fail_single_phase=False,
    ):
        self.critical_temperature = critical_temperature
        self.critical_density = critical_density
        self.vapor_pressure = vapor_pressure
        self.saturated_density = saturated_density
        self.liquid_density = liquid_density
        self.bubble_pressure = bubble_pressure
        self.dew_pressure = dew_pressure
        self.mu = chemical_potential
        self.pure_failure_temperature = (
            critical_temperature if pure_failure_temperature is None else pure_failure_temperature
        )
        self.fail_single_phase = fail_single_phase
        self.calls = Counter()
        self.last_kwargs = {}

    def bubble_point(self, temperature, liquid_molefracs, pressure=None, vapor_molefracs=None):
        self.calls["bubble_point"] += 1
        self.last_kwargs["bubble_point"] = dict(pressure=pressure, vapor_molefracs=vapor_molefracs)
        t = temperature.to("K").magnitude
        x = np.asarray(liquid_molefracs)
        p = self.bubble_pressure(t, x[0])
        return PhaseEquilibrium(
            liquid=FakeState(t, pressure=p, molefracs=x),
            vapor=FakeState(t, pressure=p, molefracs=x),
        )

    def dew_point(self, temperature, vapor_molefracs, pressure=None, liquid_molefracs=None):
        self.calls["dew_point"] += 1
        self.last_kwargs["dew_point"] = dict(pressure=pressure, liquid_molefracs=liquid_molefracs)
        t = temperature.to("K").magnitude
        y = np.asarray(vapor_molefracs)
        p = self.dew_pressure(t, y[0])
        return PhaseEquilibrium(
            liquid=FakeState(t, pressure=p, molefracs=y),
            vapor=FakeState(t, pressure=p, molefracs=y),
        )

    def pure_phase_equilibrium(self, temperature, pressure=None):
        self.calls["pure_phase_equilibrium"] += 1
        t = temperature.to("K").magnitude
        if t >= self.pure_failure_temperature:
            raise ModelError(f"No phase equilibrium at {t} K")
        p = self.vapor_pressure(t)
        return PhaseEquilibrium(
            liquid=FakeState(t, pressure=p, density=self.saturated_density(t)),
            vapor=FakeState(t, pressure=p, density=1.0),
        )

    def critical_point(self, max_temperature=None):
        self.calls["critical_point"] += 1
        self.last_kwargs["critical_point"] = dict(max_temperature=max_temperature)
        return FakeState(self.critical_temperature, density=self.critical_density)

    def single_phase_state(self, temperature, pressure, molefracs, phase=Phase.LIQUID):
        self.calls["single_phase_state"] += 1
        if self.fail_single_phase:
            raise ModelError("Density iteration failed")
        t = temperature.to("K").magnitude
        p = pressure.to("bar").magnitude
        molefracs = np.asarray(molefracs, dtype=float)
        return FakeState(
            t,
            pressure=p,
            density=self.liquid_density(t, p),
            chemical_potential=self.mu(t, p, molefracs, phase),
            molefracs=molefracs,
        )


@pytest.fixture
def fake_model():
    """Analytic model with default behavior."""
    return FakeModel()


@pytest.fixture
def make_fake_model():
    """Factory for analytic models with custom behavior."""
    return FakeModel
