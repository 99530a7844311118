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

"""Path projectors implementing PathProjectorSpec.

A projector maps a path onto the constraint manifold of the problem stack.
It receives a ``project`` callable ``(q, reference) -> ProjectionResult``
bound to the current stack and solver settings.

## Implementations

- NoPathProjector: returns the path unchanged
- GlobalPathProjector: projects samples taken every ``step`` along the path
- ProgressivePathProjector: walks towards the projected end, projecting each step
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

import numpy as np

from conplan.paths.path import PathVector
from conplan.spec import InvalidArgumentError

if TYPE_CHECKING:
    from conplan.paths.path import StraightPath
    from conplan.spec import Configuration, ProjectionResult

ProjectFn = Callable[["Configuration", "Configuration | None"], "ProjectionResult"]

# Consecutive projected samples further apart than this multiple of the step
# mean the projection jumped to another branch of the manifold
CONTINUITY_FACTOR = 2.0


def _as_path_vector(path: PathVector | StraightPath) -> PathVector:
    return path.copy() if isinstance(path, PathVector) else PathVector([path])


class NoPathProjector:
    def apply(
        self, path: PathVector | StraightPath, reference: Configuration | None = None
    ) -> PathVector | None:
        return _as_path_vector(path)


class GlobalPathProjector:
    """Projects samples taken every ``step`` along the path.

    Fails when a sample does not converge or when two consecutive projected
    samples are more than CONTINUITY_FACTOR * step apart.
    """

    def __init__(self, project: ProjectFn, step: float = 0.2):
        if step <= 0.0:
            raise InvalidArgumentError("Path projector step must be positive")
        self._project = project
        self._step = step

    def apply(
        self, path: PathVector | StraightPath, reference: Configuration | None = None
    ) -> PathVector | None:
        n_steps = max(int(np.ceil(path.length / self._step)), 1)
        projected: list[Configuration] = []
        for i in range(n_steps + 1):
            result = self._project(path.config_at_param(path.length * i / n_steps), reference)
            if not result.success:
                return None
            if projected and np.linalg.norm(result.config - projected[-1]) > CONTINUITY_FACTOR * self._step:
                return None
            projected.append(result.config)
        return PathVector.from_waypoints(projected)


class ProgressivePathProjector:
    """Walks from the projected start to the projected end in steps of ``step``.

    Every step moves straight towards the end and projects the result. Fails
    when a projection does not converge or when a step stops bringing the
    path closer to its end.
    """

    def __init__(self, project: ProjectFn, step: float = 0.2, max_steps: int = 1000):
        if step <= 0.0:
            raise InvalidArgumentError("Path projector step must be positive")
        self._project = project
        self._step = step
        self._max_steps = max_steps

    def apply(
        self, path: PathVector | StraightPath, reference: Configuration | None = None
    ) -> PathVector | None:
        waypoints: list[Configuration] = []
        for subpath in _as_path_vector(path):
            start = self._project(subpath.initial, reference)
            end = self._project(subpath.end, reference)
            if not (start.success and end.success):
                return None
            segment = self._walk(start.config, end.config, reference)
            if segment is None:
                return None
            waypoints.extend(segment if not waypoints else segment[1:])
        return PathVector.from_waypoints(waypoints)

    def _walk(
        self, start: Configuration, end: Configuration, reference: Configuration | None
    ) -> list[Configuration] | None:
        current = start
        segment = [start]
        for _ in range(self._max_steps):
            remaining = float(np.linalg.norm(end - current))
            if remaining <= self._step:
                segment.append(end)
                return segment
            target = current + (self._step / remaining) * (end - current)
            result = self._project(target, reference)
            if not result.success or np.linalg.norm(end - result.config) >= remaining:
                return None
            current = result.config
            segment.append(current)
        return None
