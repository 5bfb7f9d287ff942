"""Peng-Robinson equation of state.

This module provides JIT-compilable functions for:
- Pure-component and mixture energy/covolume parameters
- Residual Helmholtz energy
- Pressure and chemical potential via automatic differentiation
- Fugacity coefficients
- Compressibility factors at given temperature and pressure

Units are SI throughout: T [K], V [m^3], n [mol], P [Pa].
"""

import jax
import jax.numpy as jnp
import numpy as np

from eos_estimator.core.types import PengRobinsonParams
from eos_estimator.errors import IncompatibleInputError


GAS_CONSTANT = 8.314462618  # [J/(mol K)]
STANDARD_PRESSURE = 1.0e5  # [Pa]

OMEGA_A = 0.45723553
OMEGA_B = 0.07779607
CRITICAL_COMPRESSIBILITY = 0.30740131

# Packing fraction b/v at the critical point, separates liquid-like from
# vapor-like roots when the cubic has a single real solution
CRITICAL_PACKING = OMEGA_B / CRITICAL_COMPRESSIBILITY

SQRT2 = 2.0 ** 0.5


# =============================================================================
# Parameters
# =============================================================================


def create_peng_robinson_params(
    critical_temperature,
    critical_pressure,
    acentric_factor,
    molar_weight,
    binary_interaction=None,
) -> PengRobinsonParams:
    """Create Peng-Robinson parameters from tabulated component data.

    Args:
        critical_temperature: Critical temperature(s) [K].
        critical_pressure: Critical pressure(s) [bar].
        acentric_factor: Acentric factor(s).
        molar_weight: Molar weight(s) [g/mol].
        binary_interaction: Optional k_ij matrix, shape (n, n).

    Returns:
        PengRobinsonParams in SI units.

    Raises:
        IncompatibleInputError: If the component arrays differ in length.
    """
    tc = jnp.atleast_1d(jnp.asarray(critical_temperature, dtype=float))
    pc = jnp.atleast_1d(jnp.asarray(critical_pressure, dtype=float)) * 1.0e5
    omega = jnp.atleast_1d(jnp.asarray(acentric_factor, dtype=float))
    mw = jnp.atleast_1d(jnp.asarray(molar_weight, dtype=float)) * 1.0e-3

    n = tc.shape[0]
    if not (pc.shape[0] == omega.shape[0] == mw.shape[0] == n):
        raise IncompatibleInputError(
            "Component parameters must all have the same length"
        )

    if binary_interaction is None:
        kij = jnp.zeros((n, n))
    else:
        kij = jnp.asarray(binary_interaction, dtype=float)
        if kij.shape != (n, n):
            raise IncompatibleInputError(
                f"binary_interaction must have shape ({n}, {n}), got {kij.shape}"
            )

    return PengRobinsonParams(
        critical_temperature=tc,
        critical_pressure=pc,
        acentric_factor=omega,
        molar_weight=mw,
        binary_interaction=kij,
    )


def create_propane_params() -> PengRobinsonParams:
    """Create Peng-Robinson parameters for pure propane."""
    return create_peng_robinson_params(
        critical_temperature=369.83,
        critical_pressure=42.48,
        acentric_factor=0.1523,
        molar_weight=44.097,
    )


def create_butane_params() -> PengRobinsonParams:
    """Create Peng-Robinson parameters for pure n-butane."""
    return create_peng_robinson_params(
        critical_temperature=425.12,
        critical_pressure=37.96,
        acentric_factor=0.2002,
        molar_weight=58.123,
    )


def create_propane_butane_params(kij: float = 0.0033) -> PengRobinsonParams:
    """Create Peng-Robinson parameters for the propane (1) - n-butane (2) system.

    This is a nearly ideal mixture; kij is small.

    Args:
        kij: Binary interaction parameter.

    Returns:
        PengRobinsonParams for propane (light) - n-butane (heavy).
    """
    return create_peng_robinson_params(
        critical_temperature=[369.83, 425.12],
        critical_pressure=[42.48, 37.96],
        acentric_factor=[0.1523, 0.2002],
        molar_weight=[44.097, 58.123],
        binary_interaction=[[0.0, kij], [kij, 0.0]],
    )


def energy_parameters(T: jnp.ndarray, params: PengRobinsonParams) -> jnp.ndarray:
    """Calculate temperature-dependent energy parameters a_i(T).

    a_i = Omega_a R^2 Tc^2 / Pc * [1 + kappa (1 - sqrt(T/Tc))]^2
    kappa = 0.37464 + 1.54226 omega - 0.26992 omega^2

    Args:
        T: Temperature [K].
        params: Peng-Robinson parameters.

    Returns:
        a_i [Pa m^6 / mol^2], shape (n,).
    """
    tc = params.critical_temperature
    omega = params.acentric_factor
    kappa = 0.37464 + 1.54226 * omega - 0.26992 * omega * omega
    alpha = jnp.square(1.0 + kappa * (1.0 - jnp.sqrt(T / tc)))
    return OMEGA_A * jnp.square(GAS_CONSTANT * tc) / params.critical_pressure * alpha


def covolume_parameters(params: PengRobinsonParams) -> jnp.ndarray:
    """Calculate covolume parameters b_i [m^3/mol], shape (n,)."""
    return (
        OMEGA_B
        * GAS_CONSTANT
        * params.critical_temperature
        / params.critical_pressure
    )


def mixture_parameters(
    T: jnp.ndarray, moles: jnp.ndarray, params: PengRobinsonParams
) -> tuple[jnp.ndarray, jnp.ndarray]:
    """Apply the van der Waals one-fluid mixing rules.

    Args:
        T: Temperature [K].
        moles: Amount of each component [mol], shape (n,).
        params: Peng-Robinson parameters.

    Returns:
        Tuple of (n^2 a, n b).
    """
    a = energy_parameters(T, params)
    a_ij = jnp.sqrt(jnp.outer(a, a)) * (1.0 - params.binary_interaction)
    return moles @ a_ij @ moles, moles @ covolume_parameters(params)


# =============================================================================
# Helmholtz Energy and Derivatives
# =============================================================================


def residual_helmholtz_energy(
    T: jnp.ndarray,
    V: jnp.ndarray,
    moles: jnp.ndarray,
    params: PengRobinsonParams,
) -> jnp.ndarray:
    """Calculate the residual Helmholtz energy A_res(T, V, n).

    A_res = -n R T ln(1 - B/V)
            - A / (2 sqrt(2) B) * ln[(V + (1 + sqrt(2)) B) / (V + (1 - sqrt(2)) B)]

    with A = n^2 a and B = n b.

    Args:
        T: Temperature [K].
        V: Volume [m^3].
        moles: Amount of each component [mol].
        params: Peng-Robinson parameters.

    Returns:
        Residual Helmholtz energy [J].
    """
    A, B = mixture_parameters(T, moles, params)
    n = jnp.sum(moles)
    repulsion = -n * GAS_CONSTANT * T * jnp.log(1.0 - B / V)
    attraction = -A / (2.0 * SQRT2 * B) * jnp.log(
        (V + (1.0 + SQRT2) * B) / (V + (1.0 - SQRT2) * B)
    )
    return repulsion + attraction


@jax.jit
def residual_pressure(
    T: jnp.ndarray,
    V: jnp.ndarray,
    moles: jnp.ndarray,
    params: PengRobinsonParams,
) -> jnp.ndarray:
    """Residual pressure -dA_res/dV [Pa]."""
    return -jax.grad(residual_helmholtz_energy, argnums=1)(T, V, moles, params)


@jax.jit
def ideal_gas_pressure(
    T: jnp.ndarray, V: jnp.ndarray, moles: jnp.ndarray
) -> jnp.ndarray:
    """Ideal gas pressure n R T / V [Pa]."""
    return jnp.sum(moles) * GAS_CONSTANT * T / V


@jax.jit
def residual_chemical_potential(
    T: jnp.ndarray,
    V: jnp.ndarray,
    moles: jnp.ndarray,
    params: PengRobinsonParams,
) -> jnp.ndarray:
    """Residual chemical potentials dA_res/dn_i at constant T, V [J/mol]."""
    return jax.grad(residual_helmholtz_energy, argnums=2)(T, V, moles, params)


@jax.jit
def ideal_gas_chemical_potential(
    T: jnp.ndarray, V: jnp.ndarray, moles: jnp.ndarray
) -> jnp.ndarray:
    """Ideal gas chemical potentials relative to the pure ideal gas at 1 bar.

    mu_i^ig = R T ln(rho_i R T / p0)

    Temperature-only contributions are omitted; they cancel whenever two
    states at the same temperature are compared.

    Returns:
        Chemical potentials [J/mol], shape (n,).
    """
    rho = moles / V
    return GAS_CONSTANT * T * jnp.log(rho * GAS_CONSTANT * T / STANDARD_PRESSURE)


@jax.jit
def ln_fugacity_coefficients(
    T: jnp.ndarray,
    V: jnp.ndarray,
    moles: jnp.ndarray,
    params: PengRobinsonParams,
) -> jnp.ndarray:
    """Logarithmic fugacity coefficients.

    ln(phi_i) = mu_i^res(T, V) / (R T) - ln(Z)

    Returns:
        ln(phi_i), shape (n,).
    """
    p = ideal_gas_pressure(T, V, moles) + residual_pressure(T, V, moles, params)
    Z = p * V / (jnp.sum(moles) * GAS_CONSTANT * T)
    mu_res = residual_chemical_potential(T, V, moles, params)
    return mu_res / (GAS_CONSTANT * T) - jnp.log(Z)


# =============================================================================
# Volume Roots
# =============================================================================


def compressibility_factors(
    T: float,
    P: float,
    molefracs: np.ndarray,
    params: PengRobinsonParams,
) -> tuple[np.ndarray, float]:
    """Find the physical roots of the Peng-Robinson cubic in Z.

    Z^3 - (1 - B) Z^2 + (A - 3B^2 - 2B) Z - (AB - B^2 - B^3) = 0

    Args:
        T: Temperature [K].
        P: Pressure [Pa].
        molefracs: Mole fractions, shape (n,).
        params: Peng-Robinson parameters.

    Returns:
        Tuple of (sorted real roots Z > B, dimensionless B).
    """
    a_mix, b_mix = mixture_parameters(T, jnp.asarray(molefracs), params)
    A = float(a_mix) * P / (GAS_CONSTANT * T) ** 2
    B = float(b_mix) * P / (GAS_CONSTANT * T)

    coefficients = [1.0, -(1.0 - B), A - 3.0 * B * B - 2.0 * B, -(A * B - B * B - B ** 3)]
    roots = np.roots(coefficients)
    real = roots[np.abs(roots.imag) < 1e-8].real
    return np.sort(real[real > B]), B
