"""Vapor pressure data of a pure component."""

import logging
from typing import Dict, Optional, Sequence, Tuple

import numpy as np
import pint

from eos_estimator.core.types import ThermodynamicModel
from eos_estimator.errors import IncompatibleInputError
from eos_estimator.estimator.dataset import DataSet, check_lengths, quantity_array
from eos_estimator.units import (
    Q_,
    REFERENCE_TEMPERATURE,
    STANDARD_UNITS,
    to_reduced,
)

logger = logging.getLogger(__name__)

# Residual per kelvin above the critical temperature
SUPERCRITICAL_PENALTY = 5.0


class VaporPressure(DataSet):
    """Measured vapor pressures at given temperatures.

    Points above the critical temperature of the model cannot be
    evaluated; they get the residual 5 * (T - Tc) / 1 K instead, which
    pushes the optimizer towards a higher critical temperature.

    Args:
        target: Measured vapor pressures.
        temperature: Temperatures of the measurements.
        std_parameters: Parameters of an optional standard deviation model,
            stored but not used by the cost function.

    Raises:
        IncompatibleInputError: If the arrays differ in length.
        QuantityError: If an input has the wrong dimension.
    """

    target_str = "vapor pressure"
    target_unit = STANDARD_UNITS.pressure

    def __init__(
        self,
        target,
        temperature,
        std_parameters: Optional[Sequence[float]] = None,
    ):
        super().__init__(target)
        self._temperature = quantity_array(temperature, STANDARD_UNITS.temperature, "temperature")
        check_lengths(target=self.target.magnitude, temperature=self._temperature.magnitude)
        self._max_temperature = Q_(float(self._temperature.magnitude.max()), STANDARD_UNITS.temperature)

        if std_parameters is None:
            std_parameters = [0.0, 0.0, 0.0]
        if len(std_parameters) != 3:
            raise IncompatibleInputError(
                f"std_parameters must contain 3 values, got {len(std_parameters)}"
            )
        self._std_parameters = tuple(float(p) for p in std_parameters)

    @property
    def temperature(self) -> pint.Quantity:
        return self._temperature

    @property
    def max_temperature(self) -> pint.Quantity:
        """Highest measured temperature, bound of the critical point search."""
        return self._max_temperature

    @property
    def std_parameters(self) -> Tuple[float, float, float]:
        return self._std_parameters

    @property
    def input(self) -> Dict[str, pint.Quantity]:
        return {"temperature": self._temperature}

    def _critical_temperature(self, model: ThermodynamicModel) -> pint.Quantity:
        critical_point = model.critical_point(max_temperature=self.max_temperature)
        return critical_point.temperature

    def predict(self, model: ThermodynamicModel) -> pint.Quantity:
        tc = self._critical_temperature(model)
        prediction = np.full(self.datapoints, np.nan)
        for i, temperature in enumerate(self._temperature):
            if temperature > tc:
                continue
            vle = model.pure_phase_equilibrium(temperature)
            prediction[i] = to_reduced(vle.vapor_pressure, Q_(1.0, self.target_unit))
        return Q_(prediction, self.target_unit)

    def residual(self, model: ThermodynamicModel) -> np.ndarray:
        """(p_measured - p_predicted) / p_measured, penalty above Tc.

        The critical point is searched once per call.
        """
        tc = self._critical_temperature(model)
        residual = np.zeros(self.datapoints)
        for i, (temperature, pressure) in enumerate(zip(self._temperature, self.target)):
            if temperature > tc:
                residual[i] = SUPERCRITICAL_PENALTY * to_reduced(
                    temperature - tc, REFERENCE_TEMPERATURE
                )
                logger.debug(
                    f"T={temperature:~} above critical temperature {tc:~}, "
                    f"penalty {residual[i]:.4g}"
                )
                continue
            vle = model.pure_phase_equilibrium(temperature)
            residual[i] = to_reduced((pressure - vle.vapor_pressure) / pressure, Q_(1.0, "dimensionless"))
        return residual
