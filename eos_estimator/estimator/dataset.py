"""Experimental data sets and their cost functions.

A DataSet stores one series of measurements (all arrays share the same
length) and compares it to the predictions of a thermodynamic model.
`DataSet.cost` returns the residual vector an optimizer minimizes:

    cost = loss.apply(residual(model)) / datapoints

Data sets are immutable after construction: the stored arrays are
read-only and no model-dependent state is kept, so the same data set can
be evaluated repeatedly and shared between several estimators.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Dict, Optional

import numpy as np
import pint

from eos_estimator.core.types import ThermodynamicModel
from eos_estimator.errors import IncompatibleInputError
from eos_estimator.estimator.loss import Loss
from eos_estimator.units import Q_, as_quantity, to_reduced


class CostMode(Enum):
    """Residual used by the binary phase equilibrium data sets."""

    PRESSURE = "pressure"
    DISTANCE = "distance"
    CHEMICAL_POTENTIAL = "chemical_potential"


# =============================================================================
# Input Validation
# =============================================================================


def _read_only(values: np.ndarray) -> np.ndarray:
    values = np.array(values, dtype=float)
    values.flags.writeable = False
    return values


def quantity_array(value, unit: str, name: str) -> pint.Quantity:
    """Validate a one-dimensional, non-empty array of quantities.

    Args:
        value: Quantity array or plain numbers (interpreted in `unit`).
        unit: Internal unit, e.g. "K".
        name: Name used in error messages.

    Returns:
        Quantity wrapping a read-only float array in `unit`.

    Raises:
        QuantityError: If the dimension does not match `unit`.
        IncompatibleInputError: If the array is empty or not one-dimensional.
    """
    quantity = as_quantity(value, unit, name)
    magnitude = np.atleast_1d(np.asarray(quantity.magnitude, dtype=float))
    if magnitude.ndim != 1:
        raise IncompatibleInputError(f"{name} must be one-dimensional")
    if magnitude.size == 0:
        raise IncompatibleInputError(f"{name} must not be empty")
    return Q_(_read_only(magnitude), unit)


def molefrac_array(value, name: str) -> np.ndarray:
    """Validate mole fractions of the first component.

    Raises:
        IncompatibleInputError: If the array is empty, not one-dimensional
            or contains values outside [0, 1].
    """
    if isinstance(value, pint.Quantity):
        value = to_reduced(value, Q_(1.0, "dimensionless"))
    molefracs = np.atleast_1d(np.asarray(value, dtype=float))
    if molefracs.ndim != 1:
        raise IncompatibleInputError(f"{name} must be one-dimensional")
    if molefracs.size == 0:
        raise IncompatibleInputError(f"{name} must not be empty")
    if not np.all((molefracs >= 0.0) & (molefracs <= 1.0)):
        raise IncompatibleInputError(f"{name} must lie between 0 and 1")
    return _read_only(molefracs)


def check_lengths(**arrays) -> int:
    """Check that all arrays have the same length and return it.

    Raises:
        IncompatibleInputError: If the lengths differ.
    """
    lengths = {name: len(values) for name, values in arrays.items()}
    if len(set(lengths.values())) != 1:
        details = ", ".join(f"{name}={n}" for name, n in lengths.items())
        raise IncompatibleInputError(f"Input arrays differ in length: {details}")
    return next(iter(lengths.values()))


# =============================================================================
# DataSet Base
# =============================================================================


class DataSet(ABC):
    """Base class of all experimental data sets.

    Subclasses define `target_str`, `target_unit`, `input`, `predict` and
    `residual`. The set of subclasses accepted by an Estimator is closed,
    see DATASET_VARIANTS in eos_estimator.estimator.

    Args:
        target: Measured values of the target property.
    """

    target_str: str = ""
    target_unit: str = ""

    def __init__(self, target):
        self._target = quantity_array(target, self.target_unit, self.target_str)

    @property
    def target(self) -> pint.Quantity:
        """Measured values of the target property."""
        return self._target

    @property
    def datapoints(self) -> int:
        """Number of measurements."""
        return len(self._target.magnitude)

    @property
    def residual_length(self) -> int:
        """Length of the vector returned by `cost`."""
        return self.datapoints

    @property
    @abstractmethod
    def input(self) -> Dict[str, object]:
        """Named input arrays (quantities or mole fractions)."""

    @abstractmethod
    def predict(self, model: ThermodynamicModel) -> pint.Quantity:
        """Model predictions of the target property.

        Points for which the data set falls back to a penalty have no
        prediction and are NaN.
        """

    @abstractmethod
    def residual(self, model: ThermodynamicModel) -> np.ndarray:
        """Physical residuals before the loss function is applied."""

    def cost(self, model: ThermodynamicModel, loss: Optional[Loss] = None) -> np.ndarray:
        """Evaluate the cost function.

        Args:
            model: Thermodynamic model to evaluate.
            loss: Loss function, linear if omitted.

        Returns:
            Residuals after the loss function, divided by the number of
            data points, shape (residual_length,).

        Raises:
            ModelError: If the model fails outside a designed fallback.
        """
        if loss is None:
            loss = Loss.linear()
        residuals = np.array(self.residual(model), dtype=float)
        loss.apply(residuals)
        return residuals / self.datapoints

    def relative_difference(self, model: ThermodynamicModel) -> np.ndarray:
        """(prediction - target) / target for each point."""
        prediction = self.predict(model)
        return to_reduced((prediction - self._target) / self._target, Q_(1.0, "dimensionless"))

    def mean_absolute_relative_difference(self, model: ThermodynamicModel) -> float:
        """Mean of |relative_difference| ignoring NaN values."""
        difference = np.abs(np.atleast_1d(self.relative_difference(model)))
        if np.all(np.isnan(difference)):
            return float("nan")
        return float(np.nanmean(difference))

    def _input_ranges(self) -> str:
        parts = []
        for name, values in self.input.items():
            if isinstance(values, pint.Quantity):
                magnitude, unit = values.magnitude, f" {values.units:~}"
            else:
                magnitude, unit = np.asarray(values), ""
            parts.append(f"{name}=[{magnitude.min():.5g}, {magnitude.max():.5g}]{unit}")
        return ", ".join(parts)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(target={self.target_str!r}, "
            f"datapoints={self.datapoints}, {self._input_ranges()})"
        )
