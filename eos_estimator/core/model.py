"""Peng-Robinson model implementing the ThermodynamicModel protocol.

Quick start:
    >>> from eos_estimator.core import PengRobinson, create_propane_params
    >>> from eos_estimator.units import Q_
    >>> eos = PengRobinson(create_propane_params(), components=["propane"])
    >>> vle = eos.pure_phase_equilibrium(Q_(300.0, "K"))
    >>> vle.vapor_pressure
"""

import logging
from typing import Optional, Sequence

import numpy as np
import pint

from eos_estimator.core import phase_equilibrium
from eos_estimator.core.peng_robinson import CRITICAL_COMPRESSIBILITY, GAS_CONSTANT
from eos_estimator.core.state import State
from eos_estimator.core.types import (
    PengRobinsonParams,
    Phase,
    PhaseEquilibrium,
    SolverOptions,
    create_default_solver_options,
)
from eos_estimator.errors import IncompatibleInputError, ModelError
from eos_estimator.units import as_quantity, magnitude_in

logger = logging.getLogger(__name__)


class PengRobinson:
    """Peng-Robinson equation of state with van der Waals mixing rules.

    Args:
        params: Component parameters, see create_peng_robinson_params.
        components: Optional component names.
        options: Solver options for phase equilibria.
    """

    def __init__(
        self,
        params: PengRobinsonParams,
        components: Optional[Sequence[str]] = None,
        options: Optional[SolverOptions] = None,
    ):
        self.params = params
        self.options = options or create_default_solver_options()
        n = int(np.asarray(params.critical_temperature).shape[0])
        if components is None:
            components = [f"component {i + 1}" for i in range(n)]
        if len(components) != n:
            raise IncompatibleInputError(
                f"Got {len(components)} component names for {n} components"
            )
        self.components = list(components)

    @property
    def n_components(self) -> int:
        return len(self.components)

    def _molefracs(self, molefracs) -> np.ndarray:
        x = np.atleast_1d(np.asarray(molefracs, dtype=float))
        if x.shape != (self.n_components,):
            raise IncompatibleInputError(
                f"Expected {self.n_components} mole fractions, got {x.shape[0]}"
            )
        return x

    @staticmethod
    def _temperature(temperature: pint.Quantity) -> float:
        return float(magnitude_in(as_quantity(temperature, "K", "temperature"), "K"))

    @staticmethod
    def _pressure(pressure: Optional[pint.Quantity]) -> Optional[float]:
        if pressure is None:
            return None
        return float(magnitude_in(as_quantity(pressure, "bar", "pressure"), "Pa"))

    def bubble_point(
        self,
        temperature: pint.Quantity,
        liquid_molefracs: np.ndarray,
        pressure: Optional[pint.Quantity] = None,
        vapor_molefracs: Optional[np.ndarray] = None,
    ) -> PhaseEquilibrium:
        """Bubble point at given temperature and liquid composition."""
        return phase_equilibrium.bubble_point(
            self.params,
            self._temperature(temperature),
            self._molefracs(liquid_molefracs),
            pressure=self._pressure(pressure),
            vapor_molefracs=None if vapor_molefracs is None else self._molefracs(vapor_molefracs),
            options=self.options,
        )

    def dew_point(
        self,
        temperature: pint.Quantity,
        vapor_molefracs: np.ndarray,
        pressure: Optional[pint.Quantity] = None,
        liquid_molefracs: Optional[np.ndarray] = None,
    ) -> PhaseEquilibrium:
        """Dew point at given temperature and vapor composition."""
        return phase_equilibrium.dew_point(
            self.params,
            self._temperature(temperature),
            self._molefracs(vapor_molefracs),
            pressure=self._pressure(pressure),
            liquid_molefracs=None if liquid_molefracs is None else self._molefracs(liquid_molefracs),
            options=self.options,
        )

    def pure_phase_equilibrium(
        self,
        temperature: pint.Quantity,
        pressure: Optional[pint.Quantity] = None,
    ) -> PhaseEquilibrium:
        """Saturated liquid and vapor of a pure component."""
        return phase_equilibrium.pure_phase_equilibrium(
            self.params,
            self._temperature(temperature),
            pressure=self._pressure(pressure),
            options=self.options,
        )

    def critical_point(self, max_temperature: Optional[pint.Quantity] = None) -> State:
        """Critical state of a pure component.

        For the Peng-Robinson equation the critical point of a pure
        component is reproduced exactly by its parameters, so no search
        is performed and max_temperature is only checked for units.

        Raises:
            ModelError: For mixtures.
        """
        if max_temperature is not None:
            self._temperature(max_temperature)
        if self.n_components != 1:
            raise ModelError("Critical point search is only available for pure components")
        tc = float(self.params.critical_temperature[0])
        pc = float(self.params.critical_pressure[0])
        volume = CRITICAL_COMPRESSIBILITY * GAS_CONSTANT * tc / pc
        logger.debug(f"Critical point: T={tc:.3f} K, p={pc:.1f} Pa")
        return State(self.params, tc, volume, np.ones(1))

    def single_phase_state(
        self,
        temperature: pint.Quantity,
        pressure: pint.Quantity,
        molefracs: np.ndarray,
        phase: Phase = Phase.LIQUID,
    ) -> State:
        """Homogeneous state at given temperature, pressure and composition."""
        x = self._molefracs(molefracs)
        return State.from_pressure(
            self.params,
            self._temperature(temperature),
            self._pressure(pressure),
            x / x.sum(),
            phase,
        )

    def __repr__(self) -> str:
        return f"PengRobinson(components={self.components})"
