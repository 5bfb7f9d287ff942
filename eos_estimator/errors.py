"""Exceptions raised by the estimator and the reference equation of state.

All exceptions derive from EstimatorError so callers driving an optimizer
can catch a single type. Input validation errors additionally derive from
ValueError, failures of the thermodynamic model from RuntimeError.
"""


class EstimatorError(Exception):
    """Base class for all errors raised by eos_estimator."""


class IncompatibleInputError(EstimatorError, ValueError):
    """Input arrays disagree in length or a cost mode does not fit a data set."""


class ShapeError(EstimatorError, ValueError):
    """A residual vector could not be assembled."""


class ParseError(EstimatorError, ValueError):
    """A numeric literal in upstream input could not be parsed."""


class QuantityError(EstimatorError, ValueError):
    """A quantity has the wrong physical dimension."""


class ModelError(EstimatorError, RuntimeError):
    """The thermodynamic model failed to produce a state or an equilibrium."""
