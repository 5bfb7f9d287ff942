"""Cost functions for fitting equation of state parameters to experimental data.

This package provides:
- Data sets for pure-component and binary phase equilibrium data
- Loss functions and a weighted Estimator producing residual vectors
  for nonlinear least-squares optimizers
- Orthogonal distance regression for binary VLE data
- A reference Peng-Robinson equation of state written in JAX
- pint-based quantities for experimental data

Quick start:
    >>> from eos_estimator import Estimator, VaporPressure, PengRobinson, Q_
    >>> from eos_estimator import create_propane_params
    >>> data = VaporPressure(Q_([5.0, 9.9], "bar"), Q_([273.15, 300.0], "K"))
    >>> estimator = Estimator([data], [1.0])
    >>> eos = PengRobinson(create_propane_params(), components=["propane"])
    >>> residuals = estimator.cost(eos)
"""

import jax

# Phase equilibria need double precision
jax.config.update("jax_enable_x64", True)

__version__ = "0.1.0"

# Errors
from eos_estimator.errors import (
    EstimatorError,
    IncompatibleInputError,
    ModelError,
    ParseError,
    QuantityError,
    ShapeError,
)

# Quantities
from eos_estimator.units import (
    Q_,
    ureg,
    REFERENCE_MASS_DENSITY,
    REFERENCE_MOLAR_ENERGY,
    REFERENCE_PRESSURE,
    REFERENCE_TEMPERATURE,
    to_reduced,
)

# Reference equation of state
from eos_estimator.core import (
    Contributions,
    Phase,
    PhaseEquilibrium,
    PengRobinson,
    create_peng_robinson_params,
    create_propane_params,
    create_butane_params,
    create_propane_butane_params,
)

# Cost functions
from eos_estimator.estimator import (
    BinaryTPx,
    BinaryTPxy,
    BinaryTPy,
    CostMode,
    DATASET_VARIANTS,
    EquilibriumLiquidDensity,
    Estimator,
    LiquidDensity,
    Loss,
    VaporPressure,
    print_estimator_report,
)

__all__ = [
    # Version
    "__version__",
    # Errors
    "EstimatorError",
    "IncompatibleInputError",
    "ModelError",
    "ParseError",
    "QuantityError",
    "ShapeError",
    # Quantities
    "Q_",
    "ureg",
    "REFERENCE_MASS_DENSITY",
    "REFERENCE_MOLAR_ENERGY",
    "REFERENCE_PRESSURE",
    "REFERENCE_TEMPERATURE",
    "to_reduced",
    # Reference equation of state
    "Contributions",
    "Phase",
    "PhaseEquilibrium",
    "PengRobinson",
    "create_peng_robinson_params",
    "create_propane_params",
    "create_butane_params",
    "create_propane_butane_params",
    # Cost functions
    "BinaryTPx",
    "BinaryTPxy",
    "BinaryTPy",
    "CostMode",
    "DATASET_VARIANTS",
    "EquilibriumLiquidDensity",
    "Estimator",
    "LiquidDensity",
    "Loss",
    "VaporPressure",
    "print_estimator_report",
]
