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

"""Helpers over waypoint lists (sequences of configurations)."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from conplan.spec import Configuration


def interpolate_segment(start: Configuration, end: Configuration, step_size: float) -> list[Configuration]:
    """Evenly spaced configurations from start to end, both included, at most step_size apart."""
    distance = float(np.linalg.norm(end - start))
    count = max(int(np.ceil(distance / step_size)), 1)
    return list(np.linspace(start, end, count + 1))


def interpolate_path(waypoints: Sequence[Configuration], resolution: float = 0.05) -> list[Configuration]:
    """Resample every segment of a polyline so consecutive waypoints are at most resolution apart.

    Example:
        for q in interpolate_path(path.waypoints(), 0.2):
            result = project(q, reference)
    """
    if len(waypoints) < 2:
        return [np.array(q, dtype=np.float64) for q in waypoints]
    resampled = [np.array(waypoints[0], dtype=np.float64)]
    for start, end in zip(waypoints[:-1], waypoints[1:], strict=True):
        resampled.extend(interpolate_segment(start, end, resolution)[1:])
    return resampled


def concatenate_waypoints(*paths: Sequence[Configuration], tolerance: float = 1e-9) -> list[Configuration]:
    """Join waypoint lists, and drop any waypoint equal to the one before it."""
    joined: list[Configuration] = []
    for path in paths:
        for q in path:
            if joined and np.allclose(joined[-1], q, atol=tolerance, rtol=0):
                continue
            joined.append(np.array(q, dtype=np.float64))
    return joined
