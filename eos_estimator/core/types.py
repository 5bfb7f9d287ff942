"""Types shared between the cost functions and thermodynamic models.

The estimator only depends on the protocols defined here. Any object that
implements ThermodynamicModel can be evaluated against experimental data;
the Peng-Robinson model in this package is one such implementation.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol

import chex
import numpy as np
import pint


class Contributions(Enum):
    """Which parts of a property are evaluated."""

    IDEAL_GAS = "ideal_gas"
    RESIDUAL = "residual"
    TOTAL = "total"


class Phase(Enum):
    """Initialization of the density solver for a single-phase state."""

    LIQUID = "liquid"
    VAPOR = "vapor"


@dataclass(frozen=True)
class SolverOptions:
    """Iteration controls for phase equilibrium solvers.

    Attributes:
        max_iter: Maximum number of successive substitution steps.
        tol: Convergence tolerance on the equilibrium condition.
    """

    max_iter: int = 200
    tol: float = 1e-10


def create_default_solver_options(
    max_iter: int = 200,
    tol: float = 1e-10,
) -> SolverOptions:
    """Create solver options for the reference equation of state.

    Args:
        max_iter: Maximum number of iterations.
        tol: Convergence tolerance.

    Returns:
        SolverOptions.
    """
    return SolverOptions(max_iter=max_iter, tol=tol)


@chex.dataclass
class PengRobinsonParams:
    """Pure-component and binary parameters of the Peng-Robinson equation of state.

    Attributes:
        critical_temperature: Critical temperatures, shape (n,) [K].
        critical_pressure: Critical pressures, shape (n,) [Pa].
        acentric_factor: Acentric factors, shape (n,).
        molar_weight: Molar weights, shape (n,) [kg/mol].
        binary_interaction: Binary interaction parameters k_ij, shape (n, n).
    """

    critical_temperature: chex.Array  # [K]
    critical_pressure: chex.Array  # [Pa]
    acentric_factor: chex.Array
    molar_weight: chex.Array  # [kg/mol]
    binary_interaction: chex.Array  # shape (n, n)


class ThermodynamicState(Protocol):
    """A single-phase state as seen by the cost functions."""

    temperature: pint.Quantity
    molefracs: np.ndarray

    def pressure(
        self, contributions: Contributions = Contributions.TOTAL
    ) -> pint.Quantity:
        ...

    def mass_density(self) -> pint.Quantity:
        ...

    def chemical_potential(
        self, contributions: Contributions = Contributions.TOTAL
    ) -> pint.Quantity:
        ...


@dataclass(frozen=True)
class PhaseEquilibrium:
    """Coexisting liquid and vapor states.

    Attributes:
        liquid: Liquid state.
        vapor: Vapor state.
    """

    liquid: ThermodynamicState
    vapor: ThermodynamicState

    @property
    def vapor_pressure(self) -> pint.Quantity:
        """Pressure of the vapor phase."""
        return self.vapor.pressure(Contributions.TOTAL)

    @property
    def liquid_molefracs(self) -> np.ndarray:
        return self.liquid.molefracs

    @property
    def vapor_molefracs(self) -> np.ndarray:
        return self.vapor.molefracs


class ThermodynamicModel(Protocol):
    """Capabilities a model must provide to be evaluated by an Estimator.

    Every method may raise ModelError when its solver fails.
    """

    def bubble_point(
        self,
        temperature: pint.Quantity,
        liquid_molefracs: np.ndarray,
        pressure: Optional[pint.Quantity] = None,
        vapor_molefracs: Optional[np.ndarray] = None,
    ) -> PhaseEquilibrium:
        ...

    def dew_point(
        self,
        temperature: pint.Quantity,
        vapor_molefracs: np.ndarray,
        pressure: Optional[pint.Quantity] = None,
        liquid_molefracs: Optional[np.ndarray] = None,
    ) -> PhaseEquilibrium:
        ...

    def pure_phase_equilibrium(
        self,
        temperature: pint.Quantity,
        pressure: Optional[pint.Quantity] = None,
    ) -> PhaseEquilibrium:
        ...

    def critical_point(
        self, max_temperature: Optional[pint.Quantity] = None
    ) -> ThermodynamicState:
        ...

    def single_phase_state(
        self,
        temperature: pint.Quantity,
        pressure: pint.Quantity,
        molefracs: np.ndarray,
        phase: Phase = Phase.LIQUID,
    ) -> ThermodynamicState:
        ...
