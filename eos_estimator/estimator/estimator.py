"""Combination of weighted data sets into a single cost function."""

import logging
from typing import List, Optional, Sequence

import numpy as np
import pint

from eos_estimator.core.types import ThermodynamicModel
from eos_estimator.errors import IncompatibleInputError, ShapeError
from eos_estimator.estimator.binary_vle import BinaryTPx, BinaryTPxy, BinaryTPy
from eos_estimator.estimator.dataset import DataSet
from eos_estimator.estimator.liquid_density import EquilibriumLiquidDensity, LiquidDensity
from eos_estimator.estimator.loss import Loss
from eos_estimator.estimator.vapor_pressure import VaporPressure

logger = logging.getLogger(__name__)

# Data sets an Estimator accepts
DATASET_VARIANTS = (
    VaporPressure,
    LiquidDensity,
    EquilibriumLiquidDensity,
    BinaryTPx,
    BinaryTPy,
    BinaryTPxy,
)


def _check_dataset(dataset) -> DataSet:
    if not isinstance(dataset, DATASET_VARIANTS):
        names = ", ".join(variant.__name__ for variant in DATASET_VARIANTS)
        raise IncompatibleInputError(
            f"Expected one of {names}, got {type(dataset).__name__}"
        )
    return dataset


def _check_weight(weight) -> float:
    weight = float(weight)
    if not np.isfinite(weight) or weight < 0.0:
        raise IncompatibleInputError(f"Weights must be finite and non-negative, got {weight}")
    return weight


class Estimator:
    """Weighted collection of data sets evaluated against one model.

    The cost of data set i is multiplied by w_i / sum(w) and all costs are
    concatenated in insertion order. Weights are normalized on every call,
    so they can be changed between evaluations. Data sets are stored by
    reference and can be shared with other estimators.

    Example:
        >>> estimator = Estimator([vapor_pressure, liquid_density], [3.0, 2.0])
        >>> residuals = estimator.cost(model)  # pass to least_squares

    Args:
        data: Data sets.
        weights: Weight of each data set.
        losses: Loss of each data set, linear if omitted.

    Raises:
        IncompatibleInputError: If the lists differ in length or a data set
            is not one of DATASET_VARIANTS.
    """

    def __init__(
        self,
        data: Sequence[DataSet],
        weights: Sequence[float],
        losses: Optional[Sequence[Loss]] = None,
    ):
        if losses is None:
            losses = [Loss.linear() for _ in data]
        if not (len(data) == len(weights) == len(losses)):
            raise IncompatibleInputError(
                f"Got {len(data)} data sets, {len(weights)} weights and {len(losses)} losses"
            )
        self.data: List[DataSet] = [_check_dataset(d) for d in data]
        self.weights: List[float] = [_check_weight(w) for w in weights]
        self.losses: List[Loss] = list(losses)

    def add_data(self, dataset: DataSet, weight: float, loss: Optional[Loss] = None) -> None:
        """Append a data set with its weight and loss."""
        self.data.append(_check_dataset(dataset))
        self.weights.append(_check_weight(weight))
        self.losses.append(loss if loss is not None else Loss.linear())

    @property
    def datasets(self) -> List[DataSet]:
        """The stored data sets in insertion order."""
        return list(self.data)

    def _check_invariants(self) -> None:
        if not (len(self.data) == len(self.weights) == len(self.losses)):
            raise ShapeError(
                f"Estimator holds {len(self.data)} data sets, "
                f"{len(self.weights)} weights and {len(self.losses)} losses"
            )

    def normalized_weights(self) -> np.ndarray:
        """Weights divided by their sum."""
        self._check_invariants()
        weights = np.asarray(self.weights, dtype=float)
        total = weights.sum()
        if weights.size and total <= 0.0:
            raise ShapeError("Sum of weights must be positive")
        return weights / total

    def cost(self, model: ThermodynamicModel) -> np.ndarray:
        """Evaluate the weighted cost of all data sets.

        Args:
            model: Thermodynamic model to evaluate.

        Returns:
            Concatenated residuals, length sum of residual_length.

        Raises:
            ModelError: If any data set fails; no partial result is returned.
            ShapeError: If the estimator is inconsistent.
        """
        weights = self.normalized_weights()
        costs = []
        for dataset, weight, loss in zip(self.data, weights, self.losses):
            cost = dataset.cost(model, loss) * weight
            if cost.shape != (dataset.residual_length,):
                raise ShapeError(
                    f"{type(dataset).__name__} returned {cost.shape[0]} residuals, "
                    f"expected {dataset.residual_length}"
                )
            costs.append(cost)
        if not costs:
            return np.zeros(0)
        residuals = np.concatenate(costs)
        logger.debug(f"Cost of {len(costs)} data sets: sum of squares {np.sum(residuals**2):.6e}")
        return residuals

    def predict(self, model: ThermodynamicModel) -> List[pint.Quantity]:
        """Predictions of each data set."""
        return [dataset.predict(model) for dataset in self.data]

    def relative_difference(self, model: ThermodynamicModel) -> List[np.ndarray]:
        """Relative difference to the target of each data set."""
        return [dataset.relative_difference(model) for dataset in self.data]

    def mean_absolute_relative_difference(self, model: ThermodynamicModel) -> np.ndarray:
        """Mean absolute relative difference of each data set, NaN ignored."""
        return np.array(
            [dataset.mean_absolute_relative_difference(model) for dataset in self.data]
        )

    def __repr__(self) -> str:
        lines = [f"Estimator({len(self.data)} data sets)"]
        for dataset, weight, loss in zip(self.data, self.weights, self.losses):
            lines.append(f"  {dataset!r}, weight={weight}, loss={loss!r}")
        return "\n".join(lines)

    def _repr_markdown_(self) -> str:
        lines = [
            "| dataset | target | datapoints | weight | loss |",
            "|:-|:-|-:|-:|:-|",
        ]
        weights = self.normalized_weights() if sum(self.weights) > 0.0 else self.weights
        for dataset, weight, loss in zip(self.data, weights, self.losses):
            lines.append(
                f"| {type(dataset).__name__} | {dataset.target_str} | "
                f"{dataset.datapoints} | {weight:.4g} | {loss!r} |"
            )
        return "\n".join(lines)
