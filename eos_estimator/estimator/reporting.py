"""Summary report of an estimator evaluated against a model."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List

import numpy as np

from eos_estimator.core.types import ThermodynamicModel
from eos_estimator.estimator.estimator import Estimator


@dataclass
class DataSetSummary:
    """Evaluation of one data set.

    Attributes:
        name: Data set class name.
        target: Target property.
        datapoints: Number of measurements.
        weight: Normalized weight.
        loss: Loss function as text.
        mard: Mean absolute relative difference.
        cost_norm: Euclidean norm of the weighted cost.
        missing_predictions: Number of points without a prediction.
    """

    name: str
    target: str
    datapoints: int
    weight: float
    loss: str
    mard: float
    cost_norm: float
    missing_predictions: int


@dataclass
class EstimatorReport:
    """Evaluation of all data sets of an estimator.

    Attributes:
        timestamp: Report generation time.
        model: Model description.
        datasets: One summary per data set.
        total_cost: Sum of squares of the concatenated cost.
        warnings: Any warnings or issues.
    """

    timestamp: str
    model: str
    datasets: List[DataSetSummary]
    total_cost: float
    warnings: List[str] = field(default_factory=list)


def generate_estimator_report(
    estimator: Estimator,
    model: ThermodynamicModel,
) -> EstimatorReport:
    """Evaluate an estimator and collect per data set metrics.

    Args:
        estimator: Estimator to evaluate.
        model: Thermodynamic model.

    Returns:
        EstimatorReport.

    Raises:
        ModelError: If the model fails outside a designed fallback.
    """
    weights = estimator.normalized_weights()
    summaries = []
    warnings = []
    total_cost = 0.0

    for dataset, weight, loss in zip(estimator.data, weights, estimator.losses):
        cost = dataset.cost(model, loss) * weight
        total_cost += float(np.nansum(cost**2))
        relative = np.atleast_1d(dataset.relative_difference(model))
        missing = int(np.sum(np.isnan(relative)))
        mard = float(np.nanmean(np.abs(relative))) if missing < relative.size else np.nan
        name = type(dataset).__name__
        summaries.append(
            DataSetSummary(
                name=name,
                target=dataset.target_str,
                datapoints=dataset.datapoints,
                weight=float(weight),
                loss=repr(loss),
                mard=mard,
                cost_norm=float(np.linalg.norm(cost)),
                missing_predictions=missing,
            )
        )

        if missing > 0:
            warnings.append(f"{name}: {missing} of {relative.size} points without prediction")
        if np.any(np.isnan(cost)):
            warnings.append(f"{name}: cost contains NaN values")

    return EstimatorReport(
        timestamp=datetime.now().isoformat(),
        model=repr(model),
        datasets=summaries,
        total_cost=total_cost,
        warnings=warnings,
    )


def print_estimator_report(estimator: Estimator, model: ThermodynamicModel) -> None:
    """Print a formatted report of an estimator evaluated against a model.

    Args:
        estimator: Estimator to evaluate.
        model: Thermodynamic model.
    """
    report = generate_estimator_report(estimator, model)

    print("=" * 78)
    print("ESTIMATOR REPORT")
    print("=" * 78)
    print(f"Generated: {report.timestamp}")
    print(f"Model: {report.model}")

    print(
        f"\n{'Data set':<26} {'Points':>6} {'Weight':>8} {'Loss':<18} "
        f"{'MARD':>8} {'|cost|':>8}"
    )
    print("-" * 78)
    for s in report.datasets:
        print(
            f"{s.name:<26} {s.datapoints:>6d} {s.weight:>8.4f} {s.loss:<18} "
            f"{s.mard * 100:>7.3f}% {s.cost_norm:>8.2e}"
        )

    print(f"\nSum of squares: {report.total_cost:.6e}")

    if report.warnings:
        print("\n--- Warnings ---")
        for w in report.warnings:
            print(f"  {w}")

    print("=" * 78)
