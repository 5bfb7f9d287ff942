"""Orthogonal distance of a measured point to a phase envelope.

For binary mixtures with a flat p(x) curve the vertical pressure residual
is ill-conditioned: a small error in composition leads to a large error in
pressure. Instead the distance between the measured point (x, p) and the
model's bubble or dew curve is measured in the plane of composition and
relative pressure. The foot of the perpendicular is found iteratively by
projecting the offset onto a finite-difference tangent of the curve.
"""

import logging
from dataclasses import dataclass
from typing import Callable

import numpy as np

from eos_estimator.errors import ModelError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DistanceOptions:
    """Controls of the distance iteration.

    Attributes:
        dx: Composition step of the finite-difference tangent.
        tol: Iteration stops once the composition shift is at most tol.
        max_iter: Maximum number of iterations.
        penalty: Distance reported when the model fails on the curve.
    """

    dx: float = 1e-4
    tol: float = 1e-9
    max_iter: int = 60
    penalty: float = 10.0


def create_default_distance_options(
    dx: float = 1e-4,
    tol: float = 1e-9,
    max_iter: int = 60,
    penalty: float = 10.0,
) -> DistanceOptions:
    """Create options for distance_to_curve.

    Args:
        dx: Finite-difference step in mole fraction.
        tol: Tolerance on the composition shift.
        max_iter: Maximum number of iterations.
        penalty: Residual used when the model fails.

    Returns:
        DistanceOptions.
    """
    return DistanceOptions(dx=dx, tol=tol, max_iter=max_iter, penalty=penalty)


@dataclass
class DistanceResult:
    """Result of a distance iteration.

    Attributes:
        distance: Length of the last offset vector, or the penalty.
        composition: Composition of the last evaluated curve point.
        iterations: Number of iterations performed.
        converged: True if the shift dropped below the tolerance.
        penalized: True if the model failed and the penalty was used.
    """

    distance: float
    composition: float
    iterations: int
    converged: bool
    penalized: bool = False


def _damping(k: int, shift: float) -> float:
    if k <= 2:
        return 0.75
    if k > 8 and abs(shift) < 1e-5:
        return 0.5
    if k > 25:
        return 0.25
    return 1.0


def distance_to_curve(
    pressure_at: Callable[[float], float],
    composition: float,
    pressure: float,
    options: DistanceOptions = DistanceOptions(),
) -> DistanceResult:
    """Calculate the distance of a measured point to a p(x) curve.

    Algorithm (iteration k = 0, 1, ...):
    1. x_f = x + shift * damping(k)
    2. Evaluate the curve at x_f and x_f + dx_i
    3. t = normalized (dx_i, (p(x_f + dx_i) - p(x_f)) / p)
    4. o = (x - x_f, (p - p(x_f)) / p), distance = |o|
    5. shift = t_x * sqrt(t . o), clipped to [-x_f, x_f]
    6. Stop once |shift| <= tol

    The step of 5. is a heuristic that is kept as is; the residual is
    always the length of the offset in the last iteration.

    Args:
        pressure_at: Curve pressure at a given composition, in the same
            unit as `pressure`. May raise ModelError.
        composition: Measured mole fraction of the first component.
        pressure: Measured pressure.
        options: Iteration controls.

    Returns:
        DistanceResult. If the model fails, the distance is the penalty.
    """
    dx = options.dx if composition < 0.5 else -options.dx
    shift = 0.0
    distance = np.nan
    x_f = composition

    for k in range(options.max_iter):
        x_f = composition + shift * _damping(k, shift)
        try:
            p_curve = pressure_at(x_f)
            if x_f > 1.0 - dx:
                dx = -dx
            p_neighbor = pressure_at(x_f + dx)
        except ModelError as e:
            logger.debug(
                f"Curve evaluation failed at x={x_f:.6f} (iteration {k + 1}): {e}"
            )
            return DistanceResult(
                distance=options.penalty,
                composition=x_f,
                iterations=k + 1,
                converged=False,
                penalized=True,
            )

        tangent = np.array([dx, (p_neighbor - p_curve) / pressure])
        tangent /= np.linalg.norm(tangent)
        offset = np.array([composition - x_f, (pressure - p_curve) / pressure])
        distance = float(np.linalg.norm(offset))

        with np.errstate(invalid="ignore"):
            shift = tangent[0] * np.sqrt(tangent @ offset)
        # NaN-ignoring clip
        shift = float(np.fmin(np.fmax(shift, -x_f), x_f))

        if abs(shift) <= options.tol:
            return DistanceResult(
                distance=distance,
                composition=x_f,
                iterations=k + 1,
                converged=True,
            )

    logger.debug(
        f"Distance iteration not converged after {options.max_iter} iterations "
        f"(x={composition}, residual {distance:.4g})"
    )
    return DistanceResult(
        distance=distance,
        composition=x_f,
        iterations=options.max_iter,
        converged=False,
    )
