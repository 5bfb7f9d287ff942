"""Liquid density data of a pure component."""

import logging
from typing import Dict

import numpy as np
import pint

from eos_estimator.core.types import Phase, ThermodynamicModel
from eos_estimator.errors import ModelError
from eos_estimator.estimator.dataset import DataSet, check_lengths, quantity_array
from eos_estimator.units import Q_, STANDARD_UNITS, to_reduced

logger = logging.getLogger(__name__)

# Ratio of liquid to critical density used far above the critical point
SUPERCRITICAL_DENSITY_RATIO = 0.62


class LiquidDensity(DataSet):
    """Measured liquid densities at given temperatures and pressures.

    Args:
        target: Measured mass densities.
        temperature: Temperatures of the measurements.
        pressure: Pressures of the measurements.
    """

    target_str = "liquid density"
    target_unit = STANDARD_UNITS.mass_density

    def __init__(self, target, temperature, pressure):
        super().__init__(target)
        self._temperature = quantity_array(temperature, STANDARD_UNITS.temperature, "temperature")
        self._pressure = quantity_array(pressure, STANDARD_UNITS.pressure, "pressure")
        check_lengths(
            target=self.target.magnitude,
            temperature=self._temperature.magnitude,
            pressure=self._pressure.magnitude,
        )

    @property
    def temperature(self) -> pint.Quantity:
        return self._temperature

    @property
    def pressure(self) -> pint.Quantity:
        return self._pressure

    @property
    def input(self) -> Dict[str, pint.Quantity]:
        return {"temperature": self._temperature, "pressure": self._pressure}

    def predict(self, model: ThermodynamicModel) -> pint.Quantity:
        """Mass density of a liquid-initialized state at (T, p).

        Raises:
            ModelError: If the model cannot produce the state.
        """
        prediction = np.empty(self.datapoints)
        for i, (temperature, pressure) in enumerate(zip(self._temperature, self._pressure)):
            state = model.single_phase_state(temperature, pressure, np.ones(1), Phase.LIQUID)
            prediction[i] = to_reduced(state.mass_density(), Q_(1.0, self.target_unit))
        return Q_(prediction, self.target_unit)

    def residual(self, model: ThermodynamicModel) -> np.ndarray:
        """(rho_predicted - rho_measured) / rho_measured."""
        return self.relative_difference(model)


class EquilibriumLiquidDensity(DataSet):
    """Measured densities of the saturated liquid at given temperatures.

    When the model finds no phase equilibrium at a temperature, the
    prediction is NaN unless `extrapolate` is set. Then the density is
    estimated from the critical point of the model:

        t_r = T / Tc - 1
        rho = rho_c (1 + t_r ln t_r)   if t_r < 1/e
        rho = 0.62 rho_c               otherwise

    Args:
        target: Measured mass densities of the saturated liquid.
        temperature: Temperatures of the measurements.
        extrapolate: Replace failed equilibria by the estimate above.
    """

    target_str = "equilibrium liquid density"
    target_unit = STANDARD_UNITS.mass_density

    def __init__(self, target, temperature, extrapolate: bool = False):
        super().__init__(target)
        self._temperature = quantity_array(temperature, STANDARD_UNITS.temperature, "temperature")
        check_lengths(target=self.target.magnitude, temperature=self._temperature.magnitude)
        self._max_temperature = Q_(float(self._temperature.magnitude.max()), STANDARD_UNITS.temperature)
        self._extrapolate = bool(extrapolate)

    @property
    def temperature(self) -> pint.Quantity:
        return self._temperature

    @property
    def max_temperature(self) -> pint.Quantity:
        """Highest measured temperature, bound of the critical point search."""
        return self._max_temperature

    @property
    def extrapolate(self) -> bool:
        return self._extrapolate

    @property
    def input(self) -> Dict[str, pint.Quantity]:
        return {"temperature": self._temperature}

    def _extrapolated_density(self, critical_point, temperature: pint.Quantity) -> float:
        tc = critical_point.temperature
        rho_c = to_reduced(critical_point.mass_density(), Q_(1.0, self.target_unit))
        t_r = to_reduced(temperature, tc) - 1.0
        if t_r < np.exp(-1.0):
            # log of a negative t_r (failure below Tc) gives NaN
            with np.errstate(invalid="ignore", divide="ignore"):
                return rho_c * (1.0 + t_r * np.log(t_r))
        return SUPERCRITICAL_DENSITY_RATIO * rho_c

    def predict(self, model: ThermodynamicModel) -> pint.Quantity:
        """Liquid density of the pure phase equilibrium at each temperature.

        The critical point is only searched if an equilibrium fails and
        extrapolation is enabled.
        """
        prediction = np.empty(self.datapoints)
        critical_point = None
        for i, temperature in enumerate(self._temperature):
            try:
                vle = model.pure_phase_equilibrium(temperature)
            except ModelError as e:
                if not self.extrapolate:
                    logger.debug(f"No phase equilibrium at T={temperature:~}: {e}")
                    prediction[i] = np.nan
                    continue
                if critical_point is None:
                    critical_point = model.critical_point(max_temperature=self.max_temperature)
                prediction[i] = self._extrapolated_density(critical_point, temperature)
                logger.debug(
                    f"No phase equilibrium at T={temperature:~}, "
                    f"extrapolated density {prediction[i]:.5g} {self.target_unit}"
                )
                continue
            prediction[i] = to_reduced(vle.liquid.mass_density(), Q_(1.0, self.target_unit))
        return Q_(prediction, self.target_unit)

    def residual(self, model: ThermodynamicModel) -> np.ndarray:
        """(rho_predicted - rho_measured) / rho_measured, NaN without prediction."""
        return self.relative_difference(model)
