"""Thermodynamic model contract and the reference Peng-Robinson equation of state."""

from eos_estimator.core.types import (
    Contributions,
    Phase,
    PhaseEquilibrium,
    PengRobinsonParams,
    SolverOptions,
    ThermodynamicModel,
    ThermodynamicState,
    create_default_solver_options,
)
from eos_estimator.core.peng_robinson import (
    create_peng_robinson_params,
    create_propane_params,
    create_butane_params,
    create_propane_butane_params,
)
from eos_estimator.core.state import State
from eos_estimator.core.model import PengRobinson

__all__ = [
    "Contributions",
    "Phase",
    "PhaseEquilibrium",
    "PengRobinsonParams",
    "SolverOptions",
    "ThermodynamicModel",
    "ThermodynamicState",
    "create_default_solver_options",
    "create_peng_robinson_params",
    "create_propane_params",
    "create_butane_params",
    "create_propane_butane_params",
    "State",
    "PengRobinson",
]
