"""Single-phase states of the Peng-Robinson equation of state."""

import logging

import jax.numpy as jnp
import numpy as np
import pint

from eos_estimator.core.peng_robinson import (
    GAS_CONSTANT,
    compressibility_factors,
    ideal_gas_chemical_potential,
    ideal_gas_pressure,
    ln_fugacity_coefficients,
    residual_chemical_potential,
    residual_pressure,
)
from eos_estimator.core.types import Contributions, PengRobinsonParams, Phase
from eos_estimator.errors import ModelError
from eos_estimator.units import Q_

logger = logging.getLogger(__name__)


class State:
    """A homogeneous state defined by temperature, molar volume and composition.

    The state always contains one mole in total; all properties are
    intensive. Properties are returned as quantities in internal units.

    Attributes:
        params: Peng-Robinson parameters.
        molefracs: Mole fractions, shape (n,).
    """

    def __init__(
        self,
        params: PengRobinsonParams,
        temperature: float,
        molar_volume: float,
        molefracs: np.ndarray,
    ):
        self.params = params
        self.molefracs = np.asarray(molefracs, dtype=float)
        self._temperature = float(temperature)  # [K]
        self._volume = float(molar_volume)  # [m^3/mol]
        self._moles = jnp.asarray(self.molefracs)

    @classmethod
    def from_pressure(
        cls,
        params: PengRobinsonParams,
        temperature: float,
        pressure: float,
        molefracs: np.ndarray,
        phase: Phase = Phase.LIQUID,
    ) -> "State":
        """Create a state at given temperature [K] and pressure [Pa].

        The smallest volume root is used for liquid initialization, the
        largest for vapor initialization.

        Raises:
            ModelError: If the cubic has no physical root.
        """
        if not (np.isfinite(temperature) and np.isfinite(pressure)) or pressure <= 0:
            raise ModelError(f"Invalid conditions T={temperature} K, p={pressure} Pa")
        molefracs = np.asarray(molefracs, dtype=float)
        if not np.all(np.isfinite(molefracs)):
            raise ModelError(f"Invalid composition {molefracs}")

        roots, _ = compressibility_factors(temperature, pressure, molefracs, params)
        if roots.size == 0:
            logger.debug(f"No volume root at T={temperature} K, p={pressure} Pa")
            raise ModelError(
                f"No physical volume root at T={temperature} K, p={pressure} Pa"
            )
        Z = roots[0] if phase == Phase.LIQUID else roots[-1]
        return cls(params, temperature, Z * GAS_CONSTANT * temperature / pressure, molefracs)

    @property
    def temperature(self) -> pint.Quantity:
        return Q_(self._temperature, "K")

    @property
    def molar_volume(self) -> pint.Quantity:
        return Q_(self._volume, "m^3/mol")

    def _pressure_pa(self, contributions: Contributions = Contributions.TOTAL) -> float:
        T, V, n = self._temperature, self._volume, self._moles
        if contributions == Contributions.IDEAL_GAS:
            return float(ideal_gas_pressure(T, V, n))
        if contributions == Contributions.RESIDUAL:
            return float(residual_pressure(T, V, n, self.params))
        return float(ideal_gas_pressure(T, V, n) + residual_pressure(T, V, n, self.params))

    def pressure(self, contributions: Contributions = Contributions.TOTAL) -> pint.Quantity:
        """Pressure in bar."""
        return Q_(self._pressure_pa(contributions) * 1.0e-5, "bar")

    def mass_density(self) -> pint.Quantity:
        """Mass density in kg/m^3."""
        molar_weight = float(self.molefracs @ np.asarray(self.params.molar_weight))
        return Q_(molar_weight / self._volume, "kg/m^3")

    def chemical_potential(
        self, contributions: Contributions = Contributions.TOTAL
    ) -> pint.Quantity:
        """Chemical potential of each component in J/mol."""
        T, V, n = self._temperature, self._volume, self._moles
        if contributions == Contributions.IDEAL_GAS:
            mu = ideal_gas_chemical_potential(T, V, n)
        elif contributions == Contributions.RESIDUAL:
            mu = residual_chemical_potential(T, V, n, self.params)
        else:
            mu = ideal_gas_chemical_potential(T, V, n) + residual_chemical_potential(
                T, V, n, self.params
            )
        return Q_(np.asarray(mu), "J/mol")

    def ln_fugacity_coefficient(self) -> np.ndarray:
        """ln(phi_i) of each component."""
        return np.asarray(
            ln_fugacity_coefficients(self._temperature, self._volume, self._moles, self.params)
        )

    def compressibility(self) -> float:
        """Compressibility factor Z = pv / (RT)."""
        return self._pressure_pa() * self._volume / (GAS_CONSTANT * self._temperature)

    def __repr__(self) -> str:
        composition = ", ".join(f"{x:.4f}" for x in self.molefracs)
        return (
            f"State(T={self._temperature:.2f} K, p={self._pressure_pa() * 1e-5:.5g} bar, "
            f"rho={self.mass_density().magnitude:.5g} kg/m^3, x=[{composition}])"
        )
