"""Loss functions applied to residual vectors before weighting."""

from dataclasses import dataclass
from typing import Optional

import numpy as np

from eos_estimator.errors import IncompatibleInputError


@dataclass(frozen=True)
class Loss:
    """Transformation of residuals that reduces the influence of outliers.

    Use the factory methods instead of the constructor:

        >>> Loss.linear()
        >>> Loss.huber(0.05)

    Attributes:
        kind: "linear" or "huber".
        scale: Huber scaling factor s, None for the linear loss.
    """

    kind: str = "linear"
    scale: Optional[float] = None

    def __post_init__(self):
        if self.kind not in ("linear", "huber"):
            raise IncompatibleInputError(f"Unknown loss {self.kind!r}")
        if self.kind == "huber":
            if self.scale is None or not np.isfinite(self.scale) or self.scale <= 0.0:
                raise IncompatibleInputError(
                    f"Huber scaling factor must be positive, got {self.scale}"
                )

    @classmethod
    def linear(cls) -> "Loss":
        """Identity loss."""
        return cls("linear")

    @classmethod
    def huber(cls, scaling_factor: float) -> "Loss":
        """Huber-like loss with scaling factor s.

        Residuals with |r| <= s are kept, larger ones are replaced by
        2 |r| / s - 1, which grows linearly instead of quadratically
        once squared by the optimizer. The sign of replaced residuals
        is not kept.
        """
        return cls("huber", float(scaling_factor))

    def apply(self, residuals: np.ndarray) -> np.ndarray:
        """Transform residuals in place.

        Args:
            residuals: Float array, modified in place.

        Returns:
            The same array.
        """
        if self.kind == "linear":
            return residuals
        z = residuals * residuals / (self.scale * self.scale)
        outliers = z > 1.0
        residuals[outliers] = 2.0 * np.sqrt(z[outliers]) - 1.0
        return residuals

    def __repr__(self) -> str:
        if self.kind == "linear":
            return "Loss.linear()"
        return f"Loss.huber({self.scale})"
