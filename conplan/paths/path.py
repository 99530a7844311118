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

"""Continuous paths in configuration space.

Paths are parametrised by arc length: ``config_at_param(0)`` is the initial
configuration and ``config_at_param(path.length)`` the end one.
"""

from __future__ import annotations

import bisect
from collections.abc import Iterator, Sequence
from typing import TYPE_CHECKING

import numpy as np

from conplan.paths.path_utils import concatenate_waypoints
from conplan.spec import InvalidArgumentError

if TYPE_CHECKING:
    from conplan.spec import Configuration

# Parameters this close outside [0, length] are clamped instead of rejected
PARAM_TOLERANCE = 1e-9


def _check_param(s: float, length: float) -> float:
    if s < -PARAM_TOLERANCE or s > length + PARAM_TOLERANCE:
        raise InvalidArgumentError(f"Parameter {s} outside [0, {length}]")
    return min(max(s, 0.0), length)


class StraightPath:
    """Linear interpolation between two configurations."""

    def __init__(self, start: Configuration, end: Configuration) -> None:
        self._start = np.array(start, dtype=np.float64)
        self._end = np.array(end, dtype=np.float64)
        if self._start.shape != self._end.shape:
            raise InvalidArgumentError("Path end points must have the same size")
        self._length = float(np.linalg.norm(self._end - self._start))

    @property
    def length(self) -> float:
        return self._length

    @property
    def initial(self) -> Configuration:
        return self._start.copy()

    @property
    def end(self) -> Configuration:
        return self._end.copy()

    def config_at_param(self, s: float) -> Configuration:
        s = _check_param(s, self._length)
        if self._length == 0.0:
            return self._start.copy()
        return self._start + (s / self._length) * (self._end - self._start)

    def waypoints(self) -> list[Configuration]:
        return [self.initial, self.end]

    def reverse(self) -> StraightPath:
        return StraightPath(self._end, self._start)

    def extract(self, s0: float, s1: float) -> StraightPath:
        return StraightPath(self.config_at_param(s0), self.config_at_param(s1))

    def __repr__(self) -> str:
        return f"StraightPath(length={self._length:.4f})"


class PathVector:
    """Concatenation of straight sub-paths, each starting where the previous ends."""

    def __init__(self, subpaths: Sequence[StraightPath] = ()) -> None:
        self._subpaths: list[StraightPath] = []
        self._offsets: list[float] = []
        self._length = 0.0
        for path in subpaths:
            self.append_path(path)

    @classmethod
    def from_waypoints(cls, waypoints: Sequence[Configuration]) -> PathVector:
        if len(waypoints) == 0:
            raise InvalidArgumentError("A path needs at least one waypoint")
        if len(waypoints) == 1:
            return cls([StraightPath(waypoints[0], waypoints[0])])
        return cls(
            [StraightPath(q0, q1) for q0, q1 in zip(waypoints[:-1], waypoints[1:], strict=True)]
        )

    # ============= Properties =============

    @property
    def length(self) -> float:
        return self._length

    @property
    def num_subpaths(self) -> int:
        return len(self._subpaths)

    @property
    def initial(self) -> Configuration:
        if not self._subpaths:
            raise InvalidArgumentError("Empty path has no initial configuration")
        return self._subpaths[0].initial

    @property
    def end(self) -> Configuration:
        if not self._subpaths:
            raise InvalidArgumentError("Empty path has no end configuration")
        return self._subpaths[-1].end

    def __iter__(self) -> Iterator[StraightPath]:
        return iter(self._subpaths)

    # ============= Construction =============

    def append_path(self, path: StraightPath | PathVector) -> None:
        """Append a path starting at the current end configuration."""
        pieces = list(path) if isinstance(path, PathVector) else [path]
        if not pieces:
            return
        if self._subpaths and not np.allclose(self.end, pieces[0].initial, atol=1e-6, rtol=0):
            raise InvalidArgumentError("Appended path does not start at the end of the path")
        for piece in pieces:
            self._offsets.append(self._length)
            self._subpaths.append(piece)
            self._length += piece.length

    def copy(self) -> PathVector:
        return PathVector(self._subpaths)

    # ============= Sampling =============

    def config_at_param(self, s: float) -> Configuration:
        if not self._subpaths:
            raise InvalidArgumentError("Empty path")
        s = _check_param(s, self._length)
        index = max(bisect.bisect_right(self._offsets, s) - 1, 0)
        path = self._subpaths[index]
        local = min(s - self._offsets[index], path.length)
        return path.config_at_param(local)

    def waypoints(self) -> list[Configuration]:
        return concatenate_waypoints(*(path.waypoints() for path in self._subpaths))

    def reverse(self) -> PathVector:
        return PathVector([path.reverse() for path in reversed(self._subpaths)])

    def extract(self, s0: float, s1: float) -> PathVector:
        """Part of the path between two parameters, reversed when s0 > s1."""
        if s0 > s1:
            return self.extract(s1, s0).reverse()
        s0 = _check_param(s0, self._length)
        s1 = _check_param(s1, self._length)
        waypoints = [self.config_at_param(s0)]
        for offset, path in zip(self._offsets, self._subpaths, strict=True):
            junction = offset + path.length
            if s0 < junction < s1:
                waypoints.append(path.end)
        waypoints.append(self.config_at_param(s1))
        return PathVector.from_waypoints(concatenate_waypoints(waypoints))

    def __repr__(self) -> str:
        return f"PathVector(subpaths={len(self._subpaths)}, length={self._length:.4f})"
