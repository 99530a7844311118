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

import numpy as np

from conplan.paths.path_utils import concatenate_waypoints, interpolate_path, interpolate_segment


def test_segment_spacing():
    points = interpolate_segment(np.zeros(2), np.array([1.0, 0.0]), 0.3)
    assert len(points) == 5
    np.testing.assert_allclose(points[-1], [1.0, 0.0])
    gaps = [np.linalg.norm(b - a) for a, b in zip(points[:-1], points[1:])]
    assert max(gaps) <= 0.3


def test_short_segment_keeps_ends():
    points = interpolate_segment(np.zeros(2), np.array([0.1, 0.0]), 0.3)
    assert len(points) == 2


def test_interpolate_path_keeps_corners():
    corners = [np.zeros(2), np.array([1.0, 0.0]), np.array([1.0, 1.0])]
    points = interpolate_path(corners, 0.5)
    assert len(points) == 5
    np.testing.assert_allclose(points[2], [1.0, 0.0])


def test_concatenate_drops_repeated_junctions():
    a = [np.zeros(2), np.array([1.0, 0.0])]
    b = [np.array([1.0, 0.0]), np.array([1.0, 1.0])]
    assert len(concatenate_waypoints(a, b)) == 3
    assert len(concatenate_waypoints(a, [], b)) == 3
