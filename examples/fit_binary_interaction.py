#!/usr/bin/env python3
"""Scan the binary interaction parameter of propane / n-butane.

This script demonstrates how to:
1. Build data sets from (synthetic) experimental data
2. Combine them in a weighted Estimator
3. Evaluate the residual vector for a range of model parameters

Run with: python examples/fit_binary_interaction.py
"""

import numpy as np

from eos_estimator import (
    BinaryTPx,
    BinaryTPxy,
    CostMode,
    Estimator,
    Loss,
    PengRobinson,
    Q_,
    create_propane_butane_params,
    print_estimator_report,
)


def synthetic_data(kij: float, noise: float = 0.005, seed: int = 0):
    """Bubble points of a model with known kij plus relative noise."""
    rng = np.random.default_rng(seed)
    eos = PengRobinson(create_propane_butane_params(kij=kij))
    temperature = Q_(300.0, "K")
    x = np.linspace(0.1, 0.9, 9)
    pressures, y = [], []
    for xi in x:
        vle = eos.bubble_point(temperature, np.array([xi, 1.0 - xi]))
        pressures.append(vle.vapor_pressure.to("bar").magnitude)
        y.append(vle.vapor_molefracs[0])
    pressures = np.array(pressures) * (1.0 + noise * rng.standard_normal(len(x)))
    return Q_(np.full(len(x), 300.0), "K"), Q_(pressures, "bar"), x, np.clip(y, 0.0, 1.0)


def main():
    print("=" * 60)
    print("Binary Interaction Parameter Scan")
    print("=" * 60)

    true_kij = 0.02
    temperature, pressure, x, y = synthetic_data(true_kij)

    estimator = Estimator(
        [
            BinaryTPx(temperature, pressure, x),
            BinaryTPxy(temperature, pressure, x, y, cost=CostMode.CHEMICAL_POTENTIAL),
        ],
        [1.0, 0.1],
        [Loss.huber(0.05), Loss.linear()],
    )
    print(estimator)

    # =========================================================================
    # Scan
    # =========================================================================
    print(f"\n{'kij':>8} {'sum of squares':>16}")
    print("-" * 26)
    candidates = np.linspace(-0.02, 0.06, 9)
    objective = []
    for kij in candidates:
        eos = PengRobinson(create_propane_butane_params(kij=kij))
        cost = estimator.cost(eos)
        objective.append(float(np.sum(cost**2)))
        print(f"{kij:>8.4f} {objective[-1]:>16.6e}")

    best = candidates[int(np.argmin(objective))]
    print(f"\nBest kij: {best:.4f} (true value {true_kij})")

    print()
    print_estimator_report(estimator, PengRobinson(create_propane_butane_params(kij=best)))


if __name__ == "__main__":
    main()
