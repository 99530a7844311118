# Copyright 2025-2026 Dimensional Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Tests for path projectors."""

import numpy as np
import pytest

from conplan.paths.path import PathVector, StraightPath
from conplan.paths.projectors import (
    GlobalPathProjector,
    NoPathProjector,
    ProgressivePathProjector,
)
from conplan.spec import InvalidArgumentError, ProjectionResult


def _onto_x_axis(q, reference):
    projected = np.array([q[0], 0.0])
    return ProjectionResult(True, projected, 0.0, 1)


def _fails_beyond(limit):
    def project(q, reference):
        return ProjectionResult(bool(q[0] <= limit), np.array([q[0], 0.0]), 0.0, 1)

    return project


def _two_branches(q, reference):
    # Jumps from y = 1 to y = -1 at x = 0.5
    return ProjectionResult(True, np.array([q[0], 1.0 if q[0] < 0.5 else -1.0]), 0.0, 1)


@pytest.fixture
def path():
    return PathVector.from_waypoints([np.array([0.0, 0.3]), np.array([1.0, -0.2])])


def test_no_projector_returns_copy(path):
    result = NoPathProjector().apply(path)
    assert result is not path
    np.testing.assert_array_equal(result.end, path.end)


def test_no_projector_accepts_straight_path():
    result = NoPathProjector().apply(StraightPath(np.zeros(2), np.ones(2)))
    assert result.num_subpaths == 1


@pytest.mark.parametrize("projector_cls", [GlobalPathProjector, ProgressivePathProjector])
class TestProjectors:
    def test_projects_onto_manifold(self, projector_cls, path):
        result = projector_cls(_onto_x_axis, 0.2).apply(path)
        assert result is not None
        for q in result.waypoints():
            assert q[1] == pytest.approx(0.0)
        np.testing.assert_allclose(result.initial, [0.0, 0.0])
        np.testing.assert_allclose(result.end, [1.0, 0.0])

    def test_consecutive_waypoints_are_close(self, projector_cls, path):
        result = projector_cls(_onto_x_axis, 0.2).apply(path)
        waypoints = result.waypoints()
        gaps = [np.linalg.norm(b - a) for a, b in zip(waypoints[:-1], waypoints[1:])]
        assert max(gaps) <= 0.2 + 1e-9

    def test_failed_projection(self, projector_cls, path):
        assert projector_cls(_fails_beyond(0.5), 0.2).apply(path) is None

    def test_step_must_be_positive(self, projector_cls):
        with pytest.raises(InvalidArgumentError):
            projector_cls(_onto_x_axis, 0.0)


def test_global_projector_detects_discontinuity(path):
    assert GlobalPathProjector(_two_branches, 0.2).apply(path) is None


def test_progressive_projector_requires_progress(path):
    # Projection always sends the walk back to the start
    def stuck(q, reference):
        return ProjectionResult(True, np.array([0.0, 0.0]) if 0 < q[0] < 1 else q.copy(), 0.0, 1)

    assert ProgressivePathProjector(stuck, 0.2).apply(path) is None


def test_reference_is_forwarded(path):
    seen = []

    def project(q, reference):
        seen.append(reference)
        return ProjectionResult(True, q.copy(), 0.0, 0)

    reference = np.array([9.0, 9.0])
    GlobalPathProjector(project, 0.5).apply(path, reference=reference)
    assert seen
    assert all(r is reference for r in seen)
