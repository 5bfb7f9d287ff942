"""Dimensioned quantities for experimental data and model results.

Experimental data and model predictions are carried as pint quantities.
Internally every quantity is expressed in a fixed set of units:

Internal units:
- Temperature: K (Kelvin)
- Pressure: bar
- Mass density: kg/m^3
- Molar energy (chemical potential): J/mol
- Amount of substance: mol
- Composition: mole fraction (0-1), plain floats

Reduced values are plain numbers obtained by dividing a quantity by a
reference quantity of the same dimension.
"""

from dataclasses import dataclass
from typing import Union

import numpy as np
import pint

from eos_estimator.errors import ParseError, QuantityError

ureg = pint.UnitRegistry()
Q_ = ureg.Quantity

ArrayLike = Union[float, np.ndarray, list]


@dataclass(frozen=True)
class StandardUnits:
    """Internal unit conventions.

    This dataclass documents the units every quantity is converted to
    when a data set or a state is created.
    """

    temperature: str = "K"
    pressure: str = "bar"
    mass_density: str = "kg/m^3"
    molar_energy: str = "J/mol"
    moles: str = "mol"


STANDARD_UNITS = StandardUnits()

# Reference quantities used to turn differences into plain numbers
REFERENCE_TEMPERATURE = Q_(1.0, STANDARD_UNITS.temperature)
REFERENCE_PRESSURE = Q_(1.0, STANDARD_UNITS.pressure)
REFERENCE_MASS_DENSITY = Q_(1.0, STANDARD_UNITS.mass_density)
REFERENCE_MOLAR_ENERGY = Q_(1.0, STANDARD_UNITS.molar_energy)


def as_quantity(
    value: Union[pint.Quantity, ArrayLike],
    unit: str,
    name: str = "value",
) -> pint.Quantity:
    """Convert a value to a quantity expressed in an internal unit.

    Bare numbers and arrays are interpreted as already being in `unit`.

    Args:
        value: Quantity or plain number(s).
        unit: Target unit, e.g. "K" or "bar".
        name: Name of the value used in error messages.

    Returns:
        Quantity in `unit`.

    Raises:
        QuantityError: If `value` has a dimension incompatible with `unit`.
    """
    if not isinstance(value, pint.Quantity):
        return Q_(np.asarray(value, dtype=float), unit)
    try:
        return value.to(unit)
    except pint.DimensionalityError as e:
        raise QuantityError(
            f"{name} must be convertible to {unit}, got {value.units}"
        ) from e


def to_reduced(
    value: Union[pint.Quantity, ArrayLike],
    reference: pint.Quantity,
) -> Union[float, np.ndarray]:
    """Express a quantity as a plain number relative to a reference.

    Args:
        value: Quantity (scalar or array).
        reference: Reference quantity of the same dimension.

    Returns:
        value / reference as float or numpy array.

    Raises:
        QuantityError: If the dimensions of value and reference differ.
    """
    try:
        ratio = (value / reference).to("dimensionless")
    except (pint.DimensionalityError, pint.OffsetUnitCalculusError) as e:
        raise QuantityError(
            f"Cannot reduce {value} with reference {reference}"
        ) from e
    magnitude = np.asarray(ratio.magnitude, dtype=float)
    if magnitude.ndim == 0:
        return float(magnitude)
    return magnitude


def magnitude_in(value: pint.Quantity, unit: str) -> Union[float, np.ndarray]:
    """Return the magnitude of a quantity in the given unit.

    Args:
        value: Quantity.
        unit: Target unit.

    Returns:
        Plain float or numpy array.
    """
    return to_reduced(value, Q_(1.0, unit))


def parse_quantity(text: str, unit: str) -> pint.Quantity:
    """Parse a quantity from text such as "300 K" or "1.5 bar".

    A bare number is interpreted in `unit`.

    Args:
        text: Text to parse.
        unit: Internal unit the result is converted to.

    Returns:
        Quantity in `unit`.

    Raises:
        ParseError: If the numeric part or the unit cannot be parsed.
        QuantityError: If the parsed unit has the wrong dimension.
    """
    parts = text.strip().split(maxsplit=1)
    try:
        magnitude = float(parts[0])
    except (IndexError, ValueError) as e:
        raise ParseError(f"Cannot parse a number from {text!r}") from e

    unit_str = parts[1] if len(parts) > 1 else unit
    try:
        value = Q_(magnitude, unit_str)
    except (pint.UndefinedUnitError, AttributeError) as e:
        raise ParseError(f"Unknown unit in {text!r}") from e
    return as_quantity(value, unit, name=text)
