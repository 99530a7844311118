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

"""Path optimizers implementing PathOptimizerSpec.

Optimizers only replace parts of a path by local paths that the session's
steering method, projector and validator accept, through a
``connect(q1, q2) -> PathVector | None`` callable.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from conplan.paths.path import PathVector
from conplan.paths.path_utils import concatenate_waypoints

if TYPE_CHECKING:
    import numpy as np

    from conplan.spec import Configuration

ConnectFn = Callable[["Configuration", "Configuration"], "PathVector | None"]


def _join(pieces: list[PathVector]) -> PathVector:
    result = PathVector()
    for piece in pieces:
        result.append_path(piece)
    return result


class RandomShortcutOptimizer:
    """Shortens a path by random shortcutting.

    Randomly select two waypoints and try to connect them directly. If the
    connection is accepted, the waypoints in between are removed.
    """

    def __init__(self, connect: ConnectFn, rng: np.random.Generator, max_iterations: int = 100):
        self._connect = connect
        self._rng = rng
        self._max_iterations = max_iterations

    def optimize(self, path: PathVector) -> PathVector:
        waypoints = path.waypoints()
        if len(waypoints) <= 2:
            return path.copy()

        # Local path between waypoint k and k + 1
        pieces = [PathVector.from_waypoints([q0, q1]) for q0, q1 in zip(waypoints[:-1], waypoints[1:], strict=True)]
        for _ in range(self._max_iterations):
            if len(pieces) <= 1:
                break

            # Pick two waypoint indices at least 2 apart
            i = int(self._rng.integers(0, len(pieces) - 1))
            j = int(self._rng.integers(i + 2, len(pieces) + 1))
            shortcut = self._connect(pieces[i].initial, pieces[j - 1].end)
            if shortcut is None:
                continue
            if shortcut.length < sum(piece.length for piece in pieces[i:j]):
                pieces = pieces[:i] + [shortcut] + pieces[j:]

        return _join(pieces)


class PruneOptimizer:
    """Removes every waypoint whose neighbours can be connected directly.

    Deterministic single sweep from the start of the path.
    """

    def __init__(self, connect: ConnectFn):
        self._connect = connect

    def optimize(self, path: PathVector) -> PathVector:
        waypoints = concatenate_waypoints(path.waypoints())
        if len(waypoints) <= 2:
            return path.copy()

        pieces: list[PathVector] = []
        anchor = waypoints[0]
        pending = PathVector.from_waypoints([waypoints[0], waypoints[1]])
        for k in range(2, len(waypoints)):
            direct = self._connect(anchor, waypoints[k])
            if direct is not None:
                pending = direct
            else:
                pieces.append(pending)
                anchor = waypoints[k - 1]
                pending = PathVector.from_waypoints([anchor, waypoints[k]])
        pieces.append(pending)
        return _join(pieces)
