"""Vapor-liquid equilibrium data of binary mixtures.

Compositions are given as mole fractions of the first component; the
second component makes up the rest. Three kinds of data are supported:

- BinaryTPx: temperature, pressure and liquid composition (bubble points)
- BinaryTPy: temperature, pressure and vapor composition (dew points)
- BinaryTPxy: temperature, pressure and both compositions

The residual is selected with a CostMode:

- PRESSURE: (p_measured - p_predicted) / p_measured
- DISTANCE: orthogonal distance to the bubble or dew curve
- CHEMICAL_POTENTIAL: norm of the chemical potential difference between
  the measured liquid and vapor (BinaryTPxy only)
"""

import logging
from typing import Dict, Optional

import numpy as np
import pint

from eos_estimator.core.types import (
    Contributions,
    Phase,
    PhaseEquilibrium,
    ThermodynamicModel,
)
from eos_estimator.errors import IncompatibleInputError
from eos_estimator.estimator.dataset import (
    CostMode,
    DataSet,
    check_lengths,
    molefrac_array,
    quantity_array,
)
from eos_estimator.estimator.distance import (
    DistanceOptions,
    create_default_distance_options,
    distance_to_curve,
)
from eos_estimator.units import (
    Q_,
    REFERENCE_MOLAR_ENERGY,
    REFERENCE_PRESSURE,
    STANDARD_UNITS,
    to_reduced,
)

logger = logging.getLogger(__name__)


def binary_composition(x: float) -> np.ndarray:
    """Mole fractions [x, 1 - x] of a binary mixture."""
    return np.array([x, 1.0 - x])


class _BinaryDataSet(DataSet):
    """Temperature and pressure handling shared by the binary data sets."""

    target_unit = STANDARD_UNITS.pressure
    cost_modes = (CostMode.PRESSURE, CostMode.DISTANCE)

    def __init__(
        self,
        temperature,
        pressure,
        cost: CostMode,
        distance_options: Optional[DistanceOptions],
    ):
        super().__init__(pressure)
        self._temperature = quantity_array(temperature, STANDARD_UNITS.temperature, "temperature")
        try:
            cost = CostMode(cost)
        except ValueError as e:
            raise IncompatibleInputError(f"Unknown cost mode {cost!r}") from e
        if cost not in self.cost_modes:
            raise IncompatibleInputError(
                f"Cost mode {cost.value!r} is not available for {type(self).__name__}"
            )
        self._cost_mode = cost
        self._distance_options = distance_options or create_default_distance_options()

    @property
    def temperature(self) -> pint.Quantity:
        return self._temperature

    @property
    def cost_mode(self) -> CostMode:
        return self._cost_mode

    @property
    def distance_options(self) -> DistanceOptions:
        return self._distance_options

    @property
    def pressure(self) -> pint.Quantity:
        return self.target

    def _pressure_residual(self, equilibrium: PhaseEquilibrium, i: int) -> float:
        measured = self.target[i]
        return to_reduced((measured - equilibrium.vapor_pressure) / measured, Q_(1.0, "dimensionless"))

    def _bubble_point(self, model, i: int, x: float, y: Optional[float] = None) -> PhaseEquilibrium:
        return model.bubble_point(
            self._temperature[i],
            binary_composition(x),
            pressure=self.target[i],
            vapor_molefracs=None if y is None else binary_composition(y),
        )

    def _dew_point(self, model, i: int, y: float, x: Optional[float] = None) -> PhaseEquilibrium:
        return model.dew_point(
            self._temperature[i],
            binary_composition(y),
            pressure=self.target[i],
            liquid_molefracs=None if x is None else binary_composition(x),
        )

    def _distance(self, pressure_at, i: int, composition: float) -> float:
        measured = to_reduced(self.target[i], REFERENCE_PRESSURE)
        result = distance_to_curve(pressure_at, composition, measured, self.distance_options)
        if result.penalized:
            logger.debug(
                f"Point {i} of {type(self).__name__} penalized with {result.distance}"
            )
        return result.distance


class BinaryTPx(_BinaryDataSet):
    """Bubble point data: temperature, pressure and liquid composition.

    Args:
        temperature: Temperatures.
        pressure: Measured pressures.
        liquid_molefracs: Liquid mole fractions of the first component.
        cost: CostMode.PRESSURE or CostMode.DISTANCE.
        distance_options: Options of the distance iteration.

    Raises:
        IncompatibleInputError: If the arrays differ in length or the cost
            mode needs data that is not available.
    """

    target_str = "bubble point pressure"

    def __init__(
        self,
        temperature,
        pressure,
        liquid_molefracs,
        cost: CostMode = CostMode.PRESSURE,
        distance_options: Optional[DistanceOptions] = None,
    ):
        super().__init__(temperature, pressure, cost, distance_options)
        self._liquid_molefracs = molefrac_array(liquid_molefracs, "liquid_molefracs")
        check_lengths(
            temperature=self._temperature.magnitude,
            pressure=self.target.magnitude,
            liquid_molefracs=self._liquid_molefracs,
        )

    @property
    def liquid_molefracs(self) -> np.ndarray:
        return self._liquid_molefracs

    @property
    def input(self) -> Dict[str, object]:
        return {
            "temperature": self._temperature,
            "pressure": self.target,
            "liquid_molefracs": self._liquid_molefracs,
        }

    def predict(self, model: ThermodynamicModel) -> pint.Quantity:
        """Bubble point pressures at the measured liquid compositions."""
        prediction = [
            to_reduced(self._bubble_point(model, i, x).vapor_pressure, REFERENCE_PRESSURE)
            for i, x in enumerate(self._liquid_molefracs)
        ]
        return Q_(np.array(prediction), self.target_unit)

    def residual(self, model: ThermodynamicModel) -> np.ndarray:
        residual = np.zeros(self.datapoints)
        for i, x in enumerate(self._liquid_molefracs):
            if self.cost_mode == CostMode.DISTANCE:

                def pressure_at(x_f, i=i):
                    vle = self._bubble_point(model, i, x_f)
                    return to_reduced(vle.vapor_pressure, REFERENCE_PRESSURE)

                residual[i] = self._distance(pressure_at, i, x)
            else:
                residual[i] = self._pressure_residual(self._bubble_point(model, i, x), i)
        return residual


class BinaryTPy(_BinaryDataSet):
    """Dew point data: temperature, pressure and vapor composition.

    Args:
        temperature: Temperatures.
        pressure: Measured pressures.
        vapor_molefracs: Vapor mole fractions of the first component.
        cost: CostMode.PRESSURE or CostMode.DISTANCE.
        distance_options: Options of the distance iteration.

    Raises:
        IncompatibleInputError: If the arrays differ in length or the cost
            mode needs data that is not available.
    """

    target_str = "dew point pressure"

    def __init__(
        self,
        temperature,
        pressure,
        vapor_molefracs,
        cost: CostMode = CostMode.PRESSURE,
        distance_options: Optional[DistanceOptions] = None,
    ):
        super().__init__(temperature, pressure, cost, distance_options)
        self._vapor_molefracs = molefrac_array(vapor_molefracs, "vapor_molefracs")
        check_lengths(
            temperature=self._temperature.magnitude,
            pressure=self.target.magnitude,
            vapor_molefracs=self._vapor_molefracs,
        )

    @property
    def vapor_molefracs(self) -> np.ndarray:
        return self._vapor_molefracs

    @property
    def input(self) -> Dict[str, object]:
        return {
            "temperature": self._temperature,
            "pressure": self.target,
            "vapor_molefracs": self._vapor_molefracs,
        }

    def predict(self, model: ThermodynamicModel) -> pint.Quantity:
        """Dew point pressures at the measured vapor compositions."""
        prediction = [
            to_reduced(self._dew_point(model, i, y).vapor_pressure, REFERENCE_PRESSURE)
            for i, y in enumerate(self._vapor_molefracs)
        ]
        return Q_(np.array(prediction), self.target_unit)

    def residual(self, model: ThermodynamicModel) -> np.ndarray:
        residual = np.zeros(self.datapoints)
        for i, y in enumerate(self._vapor_molefracs):
            if self.cost_mode == CostMode.DISTANCE:

                def pressure_at(y_f, i=i):
                    vle = self._dew_point(model, i, y_f)
                    return to_reduced(vle.vapor_pressure, REFERENCE_PRESSURE)

                residual[i] = self._distance(pressure_at, i, y)
            else:
                residual[i] = self._pressure_residual(self._dew_point(model, i, y), i)
        return residual


class BinaryTPxy(_BinaryDataSet):
    """Complete VLE data: temperature, pressure and both compositions.

    The residual vector has two entries per point: the first half
    belongs to the liquid side, the second half to the vapor side.

    - PRESSURE: bubble point (measured y as initial guess), then dew
      point (measured x as initial guess)
    - DISTANCE: distance to the bubble curve; the vapor half is zero
    - CHEMICAL_POTENTIAL: |mu^L(T, p, x) - mu^V(T, p, y)| / (1 J/mol);
      the vapor half is zero

    Args:
        temperature: Temperatures.
        pressure: Measured pressures.
        liquid_molefracs: Liquid mole fractions of the first component.
        vapor_molefracs: Vapor mole fractions of the first component.
        cost: Any CostMode.
        distance_options: Options of the distance iteration.

    Raises:
        IncompatibleInputError: If the arrays differ in length.
    """

    target_str = "pressure"
    cost_modes = (CostMode.PRESSURE, CostMode.DISTANCE, CostMode.CHEMICAL_POTENTIAL)

    def __init__(
        self,
        temperature,
        pressure,
        liquid_molefracs,
        vapor_molefracs,
        cost: CostMode = CostMode.PRESSURE,
        distance_options: Optional[DistanceOptions] = None,
    ):
        super().__init__(temperature, pressure, cost, distance_options)
        self._liquid_molefracs = molefrac_array(liquid_molefracs, "liquid_molefracs")
        self._vapor_molefracs = molefrac_array(vapor_molefracs, "vapor_molefracs")
        check_lengths(
            temperature=self._temperature.magnitude,
            pressure=self.target.magnitude,
            liquid_molefracs=self._liquid_molefracs,
            vapor_molefracs=self._vapor_molefracs,
        )

    @property
    def liquid_molefracs(self) -> np.ndarray:
        return self._liquid_molefracs

    @property
    def vapor_molefracs(self) -> np.ndarray:
        return self._vapor_molefracs

    @property
    def residual_length(self) -> int:
        return 2 * self.datapoints

    @property
    def input(self) -> Dict[str, object]:
        return {
            "temperature": self._temperature,
            "pressure": self.target,
            "liquid_molefracs": self._liquid_molefracs,
            "vapor_molefracs": self._vapor_molefracs,
        }

    def predict(self, model: ThermodynamicModel) -> pint.Quantity:
        """Bubble point pressures followed by dew point pressures."""
        n = self.datapoints
        prediction = np.empty(2 * n)
        for i, (x, y) in enumerate(zip(self._liquid_molefracs, self._vapor_molefracs)):
            bubble = self._bubble_point(model, i, x, y)
            dew = self._dew_point(model, i, y, x)
            prediction[i] = to_reduced(bubble.vapor_pressure, REFERENCE_PRESSURE)
            prediction[n + i] = to_reduced(dew.vapor_pressure, REFERENCE_PRESSURE)
        return Q_(prediction, self.target_unit)

    def relative_difference(self, model: ThermodynamicModel) -> np.ndarray:
        """Relative difference of bubble and dew pressures to the measurement."""
        prediction = to_reduced(self.predict(model), REFERENCE_PRESSURE)
        target = np.tile(to_reduced(self.target, REFERENCE_PRESSURE), 2)
        return (prediction - target) / target

    def _chemical_potential_residual(self, model, i: int, x: float, y: float) -> float:
        temperature, pressure = self._temperature[i], self.target[i]
        liquid = model.single_phase_state(
            temperature, pressure, binary_composition(x), Phase.LIQUID
        )
        vapor = model.single_phase_state(
            temperature, pressure, binary_composition(y), Phase.VAPOR
        )
        difference = liquid.chemical_potential(Contributions.TOTAL) - vapor.chemical_potential(
            Contributions.TOTAL
        )
        return float(np.linalg.norm(to_reduced(difference, REFERENCE_MOLAR_ENERGY)))

    def residual(self, model: ThermodynamicModel) -> np.ndarray:
        n = self.datapoints
        residual = np.zeros(2 * n)
        for i, (x, y) in enumerate(zip(self._liquid_molefracs, self._vapor_molefracs)):
            if self.cost_mode == CostMode.CHEMICAL_POTENTIAL:
                residual[i] = self._chemical_potential_residual(model, i, x, y)
            elif self.cost_mode == CostMode.DISTANCE:

                def pressure_at(x_f, i=i, y=y):
                    vle = self._bubble_point(model, i, x_f, y)
                    return to_reduced(vle.vapor_pressure, REFERENCE_PRESSURE)

                residual[i] = self._distance(pressure_at, i, x)
            else:
                residual[i] = self._pressure_residual(self._bubble_point(model, i, x, y), i)
                residual[n + i] = self._pressure_residual(self._dew_point(model, i, y, x), i)
        return residual
