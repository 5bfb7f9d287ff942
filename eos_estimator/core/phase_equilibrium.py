"""Vapor-liquid equilibrium solvers for the Peng-Robinson equation of state.

Bubble and dew points at fixed temperature and pure-component saturation
are computed by successive substitution of fugacity coefficients,
initialized with the Wilson correlation. All solvers raise ModelError
instead of returning unconverged results.
"""

import logging
from typing import Optional

import numpy as np

from eos_estimator.core.peng_robinson import (
    CRITICAL_PACKING,
    GAS_CONSTANT,
    compressibility_factors,
)
from eos_estimator.core.state import State
from eos_estimator.core.types import (
    PengRobinsonParams,
    Phase,
    PhaseEquilibrium,
    SolverOptions,
)
from eos_estimator.errors import ModelError

logger = logging.getLogger(__name__)


def wilson_vapor_pressure(T: float, params: PengRobinsonParams) -> np.ndarray:
    """Estimate pure-component vapor pressures with the Wilson correlation.

    P_sat = Pc * exp(5.373 (1 + omega) (1 - Tc / T))

    Args:
        T: Temperature [K].
        params: Peng-Robinson parameters.

    Returns:
        Vapor pressures [Pa], shape (n,).
    """
    tc = np.asarray(params.critical_temperature)
    pc = np.asarray(params.critical_pressure)
    omega = np.asarray(params.acentric_factor)
    return pc * np.exp(5.373 * (1.0 + omega) * (1.0 - tc / T))


def _check_trivial(liquid: State, vapor: State, name: str) -> None:
    v_liquid = liquid.molar_volume.magnitude
    v_vapor = vapor.molar_volume.magnitude
    if abs(v_vapor - v_liquid) <= 1e-6 * v_liquid:
        raise ModelError(f"{name} converged to the trivial solution")


def bubble_point(
    params: PengRobinsonParams,
    temperature: float,
    liquid_molefracs: np.ndarray,
    pressure: Optional[float] = None,
    vapor_molefracs: Optional[np.ndarray] = None,
    options: SolverOptions = SolverOptions(),
) -> PhaseEquilibrium:
    """Calculate the bubble point pressure at given temperature and liquid composition.

    Algorithm:
    1. Initialize pressure and vapor composition (Wilson or the given hints)
    2. K_i = phi_i^L / phi_i^V at the current pressure
    3. p <- p * sum(K_i x_i), y <- K_i x_i / sum(K_i x_i)
    4. Repeat until sum(K_i x_i) = 1 and y is stationary

    Args:
        params: Peng-Robinson parameters.
        temperature: Temperature [K].
        liquid_molefracs: Liquid mole fractions.
        pressure: Initial pressure [Pa].
        vapor_molefracs: Initial vapor mole fractions.
        options: Solver options.

    Returns:
        PhaseEquilibrium at the bubble point.

    Raises:
        ModelError: If the iteration diverges, stalls or becomes trivial.
    """
    x = np.asarray(liquid_molefracs, dtype=float)
    p_sat = wilson_vapor_pressure(temperature, params)
    p = float(x @ p_sat) if pressure is None else float(pressure)
    if vapor_molefracs is None:
        y = x * p_sat / (x @ p_sat)
    else:
        y = np.asarray(vapor_molefracs, dtype=float)

    for iteration in range(options.max_iter):
        liquid = State.from_pressure(params, temperature, p, x, Phase.LIQUID)
        vapor = State.from_pressure(params, temperature, p, y, Phase.VAPOR)
        k = np.exp(liquid.ln_fugacity_coefficient() - vapor.ln_fugacity_coefficient())
        kx = k * x
        s = kx.sum()
        if not np.isfinite(s) or s <= 0.0:
            raise ModelError(f"Bubble point iteration diverged at T={temperature} K")

        y_new = kx / s
        if abs(s - 1.0) < options.tol and np.max(np.abs(y_new - y)) < options.tol:
            _check_trivial(liquid, vapor, "Bubble point")
            return PhaseEquilibrium(liquid=liquid, vapor=vapor)
        y, p = y_new, p * s

    logger.debug(
        f"Bubble point not converged after {options.max_iter} iterations "
        f"(T={temperature} K, x={x})"
    )
    raise ModelError(f"Bubble point did not converge at T={temperature} K")


def dew_point(
    params: PengRobinsonParams,
    temperature: float,
    vapor_molefracs: np.ndarray,
    pressure: Optional[float] = None,
    liquid_molefracs: Optional[np.ndarray] = None,
    options: SolverOptions = SolverOptions(),
) -> PhaseEquilibrium:
    """Calculate the dew point pressure at given temperature and vapor composition.

    Mirror image of bubble_point:
    p <- p / sum(y_i / K_i), x <- (y_i / K_i) / sum(y_i / K_i)

    Args:
        params: Peng-Robinson parameters.
        temperature: Temperature [K].
        vapor_molefracs: Vapor mole fractions.
        pressure: Initial pressure [Pa].
        liquid_molefracs: Initial liquid mole fractions.
        options: Solver options.

    Returns:
        PhaseEquilibrium at the dew point.

    Raises:
        ModelError: If the iteration diverges, stalls or becomes trivial.
    """
    y = np.asarray(vapor_molefracs, dtype=float)
    p_sat = wilson_vapor_pressure(temperature, params)
    p = 1.0 / float(np.sum(y / p_sat)) if pressure is None else float(pressure)
    if liquid_molefracs is None:
        x = y * p / p_sat
        x = x / x.sum()
    else:
        x = np.asarray(liquid_molefracs, dtype=float)

    for iteration in range(options.max_iter):
        liquid = State.from_pressure(params, temperature, p, x, Phase.LIQUID)
        vapor = State.from_pressure(params, temperature, p, y, Phase.VAPOR)
        k = np.exp(liquid.ln_fugacity_coefficient() - vapor.ln_fugacity_coefficient())
        y_k = y / k
        s = y_k.sum()
        if not np.isfinite(s) or s <= 0.0:
            raise ModelError(f"Dew point iteration diverged at T={temperature} K")

        x_new = y_k / s
        if abs(s - 1.0) < options.tol and np.max(np.abs(x_new - x)) < options.tol:
            _check_trivial(liquid, vapor, "Dew point")
            return PhaseEquilibrium(liquid=liquid, vapor=vapor)
        x, p = x_new, p / s

    logger.debug(
        f"Dew point not converged after {options.max_iter} iterations "
        f"(T={temperature} K, y={y})"
    )
    raise ModelError(f"Dew point did not converge at T={temperature} K")


def pure_phase_equilibrium(
    params: PengRobinsonParams,
    temperature: float,
    pressure: Optional[float] = None,
    options: SolverOptions = SolverOptions(),
) -> PhaseEquilibrium:
    """Calculate the saturation state of a pure component.

    Iterates p <- p * phi^L / phi^V. When the cubic has a single root at the
    current pressure the pressure is moved towards the two-phase region.

    Args:
        params: Peng-Robinson parameters of a single component.
        temperature: Temperature [K].
        pressure: Initial pressure [Pa].
        options: Solver options.

    Returns:
        PhaseEquilibrium at saturation.

    Raises:
        ModelError: Above the critical temperature or if the iteration fails.
    """
    if np.asarray(params.critical_temperature).shape[0] != 1:
        raise ModelError("Pure phase equilibrium requires a single component")
    tc = float(params.critical_temperature[0])
    if temperature >= tc:
        raise ModelError(
            f"Temperature {temperature} K is not below the critical temperature {tc} K"
        )

    x = np.ones(1)
    p = float(wilson_vapor_pressure(temperature, params)[0]) if pressure is None else float(pressure)

    for iteration in range(options.max_iter):
        roots, B = compressibility_factors(temperature, p, x, params)
        if roots.size == 0:
            raise ModelError(f"No physical volume root at T={temperature} K")
        if roots.size == 1 or roots[-1] - roots[0] < 1e-10:
            # single root: dense means p is above the loop, dilute means below
            p *= 0.9 if B / roots[0] > CRITICAL_PACKING else 1.1
            continue

        liquid = State(params, temperature, roots[0] * GAS_CONSTANT * temperature / p, x)
        vapor = State(params, temperature, roots[-1] * GAS_CONSTANT * temperature / p, x)
        delta = float(liquid.ln_fugacity_coefficient()[0] - vapor.ln_fugacity_coefficient()[0])
        if not np.isfinite(delta):
            raise ModelError(f"Pure phase equilibrium diverged at T={temperature} K")
        if abs(delta) < options.tol:
            return PhaseEquilibrium(liquid=liquid, vapor=vapor)
        p *= np.exp(delta)

    logger.debug(
        f"Pure phase equilibrium not converged after {options.max_iter} "
        f"iterations (T={temperature} K)"
    )
    raise ModelError(f"Pure phase equilibrium did not converge at T={temperature} K")
