"""Cost functions for fitting equation of state parameters to experimental data.

This package provides:

- Loss functions for robust fitting
- Data sets for vapor pressures, liquid densities and binary VLE data
- Orthogonal distance regression for flat phase envelopes
- An Estimator that combines weighted data sets into one residual vector
- A summary report
"""

from eos_estimator.estimator.loss import Loss
from eos_estimator.estimator.dataset import CostMode, DataSet
from eos_estimator.estimator.vapor_pressure import VaporPressure
from eos_estimator.estimator.liquid_density import (
    EquilibriumLiquidDensity,
    LiquidDensity,
)
from eos_estimator.estimator.binary_vle import BinaryTPx, BinaryTPxy, BinaryTPy
from eos_estimator.estimator.distance import (
    DistanceOptions,
    DistanceResult,
    create_default_distance_options,
    distance_to_curve,
)
from eos_estimator.estimator.estimator import DATASET_VARIANTS, Estimator
from eos_estimator.estimator.reporting import (
    EstimatorReport,
    generate_estimator_report,
    print_estimator_report,
)

__all__ = [
    "Loss",
    "CostMode",
    "DataSet",
    "VaporPressure",
    "LiquidDensity",
    "EquilibriumLiquidDensity",
    "BinaryTPx",
    "BinaryTPy",
    "BinaryTPxy",
    "DistanceOptions",
    "DistanceResult",
    "create_default_distance_options",
    "distance_to_curve",
    "DATASET_VARIANTS",
    "Estimator",
    "EstimatorReport",
    "generate_estimator_report",
    "print_estimator_report",
]
