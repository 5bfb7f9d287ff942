"""Tests for the orthogonal distance iteration."""

import numpy as np
import pytest

from eos_estimator.errors import ModelError
from eos_estimator.estimator.distance import (
    DistanceOptions,
    _damping,
    create_default_distance_options,
    distance_to_curve,
)


class RecordingCurve:
    """Callable p(x) that records every composition it is queried at."""

    def __init__(self, function):
        self.function = function
        self.queries = []

    def __call__(self, x):
        self.queries.append(x)
        return self.function(x)


def failing_curve(x):
    raise ModelError("bubble point failed")


class TestDistanceOptions:
    """Tests for the iteration controls."""

    def test_defaults(self):
        options = create_default_distance_options()
        assert options == DistanceOptions()
        assert options.dx == 1e-4
        assert options.tol == 1e-9
        assert options.max_iter == 60
        assert options.penalty == 10.0

    def test_damping_schedule(self):
        """Damping depends on the zero-based iteration index and the last shift."""
        assert _damping(0, 0.0) == 0.75
        assert _damping(1, 0.1) == 0.75
        assert _damping(2, 0.1) == 0.75
        assert _damping(3, 0.1) == 1.0
        assert _damping(8, 1e-6) == 1.0
        assert _damping(9, 1e-6) == 0.5
        assert _damping(9, 0.1) == 1.0
        assert _damping(25, 0.1) == 1.0
        assert _damping(26, 0.1) == 0.25
        assert _damping(30, 1e-6) == 0.5


class TestDistanceToCurve:
    """Tests for distance_to_curve."""

    def test_point_on_linear_curve(self):
        """A point on the curve has zero distance after one iteration."""
        curve = RecordingCurve(lambda x: 1.0 + 2.0 * x)
        result = distance_to_curve(curve, 0.25, 1.5)
        assert result.distance == pytest.approx(0.0, abs=1e-12)
        assert result.converged
        assert not result.penalized
        assert result.iterations == 1
        assert result.composition == 0.25

    def test_flat_curve_gives_vertical_deviation(self):
        """On a flat curve the distance is the relative pressure deviation."""
        result = distance_to_curve(lambda x: 1.0, 0.3, 1.2)
        assert result.distance == pytest.approx(0.2 / 1.2)
        assert result.converged

    def test_neighbor_towards_center(self):
        """The tangent is probed towards the middle of the composition range."""
        low = RecordingCurve(lambda x: 1.0 + 2.0 * x)
        distance_to_curve(low, 0.25, 1.5)
        assert low.queries == pytest.approx([0.25, 0.25 + 1e-4])

        high = RecordingCurve(lambda x: 1.0 + 2.0 * x)
        distance_to_curve(high, 0.75, 2.5)
        assert high.queries == pytest.approx([0.75, 0.75 - 1e-4])

    def test_model_failure_gives_penalty(self):
        """A failing curve yields exactly the penalty after one query."""
        curve = RecordingCurve(failing_curve)
        result = distance_to_curve(curve, 0.4, 2.0)
        assert result.distance == 10.0
        assert result.penalized
        assert not result.converged
        assert len(curve.queries) == 1

    def test_failure_at_neighbor(self):
        """Failure of the tangent query is penalized as well."""

        def curve(x):
            if x != 0.4:
                raise ModelError("failed")
            return 1.0

        result = distance_to_curve(curve, 0.4, 2.0)
        assert result.distance == 10.0
        assert result.penalized

    def test_custom_penalty(self):
        options = create_default_distance_options(penalty=3.0)
        result = distance_to_curve(failing_curve, 0.4, 2.0, options)
        assert result.distance == 3.0

    def test_query_budget(self):
        """At most two curve evaluations per iteration."""
        curve = RecordingCurve(lambda x: 1.0 + 2.0 * x + 5.0 * x**2)
        options = create_default_distance_options(max_iter=10)
        result = distance_to_curve(curve, 0.3, 3.0, options)
        assert result.iterations <= options.max_iter
        assert len(curve.queries) <= 2 * options.max_iter
        assert np.isfinite(result.distance)


    def test_trial_compositions_on_quadratic_curve(self):
        """The first three trial steps are damped by 0.75, the fourth is not."""

        def pressure(x):
            return 1.0 + 2.0 * x + 5.0 * x**2

        curve = RecordingCurve(pressure)
        result = distance_to_curve(curve, 0.3, 3.0)

        # first step from the tangent at the measured composition
        tangent = np.array([1e-4, (pressure(0.3 + 1e-4) - pressure(0.3)) / 3.0])
        tangent /= np.linalg.norm(tangent)
        offset = np.array([0.0, (3.0 - pressure(0.3)) / 3.0])
        first_shift = tangent[0] * np.sqrt(tangent @ offset)

        x1 = 0.3 + 0.75 * first_shift
        # second shift is clipped to -x1
        x2 = 0.3 - 0.75 * x1
        # x2 < 0, so the clip yields x2 and the undamped step lands on 0.3 + x2
        x3 = 0.3 + x2

        trials = curve.queries[0::2]
        assert trials[:4] == pytest.approx([0.3, x1, x2, x3])
        assert trials[:4] == pytest.approx([0.3, 0.50106, -0.07580, 0.22420], abs=1e-4)

        assert result.iterations == len(trials)
        assert result.composition == curve.queries[-2]
        expected = np.hypot(
            0.3 - result.composition, (3.0 - pressure(result.composition)) / 3.0
        )
        assert result.distance == pytest.approx(expected)
