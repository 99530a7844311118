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

"""Workspace obstacles and point-based collision checking.

The robot is approximated by its joint origins and by points sampled along
each parent-to-child link segment. A configuration is valid when it lies
within the joint bounds and none of these points is inside an obstacle.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from conplan.spec import InvalidArgumentError, ObstacleType
from conplan.utils.logging_config import setup_logger

if TYPE_CHECKING:
    from numpy.typing import NDArray

    from conplan.model.kinematic_chain import KinematicChain
    from conplan.spec import Configuration

logger = setup_logger()


@dataclass(frozen=True)
class Obstacle:
    """Obstacle specification for collision avoidance.

    Attributes:
        name: Unique name for the obstacle
        obstacle_type: Type of geometry (BOX, SPHERE)
        dimensions: Type-specific dimensions:
            - BOX: (xmin, ymin, zmin, xmax, ymax, zmax), axis aligned
            - SPHERE: (cx, cy, cz, radius)
    """

    name: str
    obstacle_type: ObstacleType
    dimensions: tuple[float, ...]

    @staticmethod
    def box(name: str, lower: Sequence[float], upper: Sequence[float]) -> Obstacle:
        return Obstacle(name, ObstacleType.BOX, tuple(float(v) for v in (*lower, *upper)))

    @staticmethod
    def sphere(name: str, center: Sequence[float], radius: float) -> Obstacle:
        return Obstacle(name, ObstacleType.SPHERE, tuple(float(v) for v in (*center, radius)))

    def signed_distance(self, point: NDArray[np.float64]) -> float:
        """Distance from ``point`` to the surface, negative inside."""
        dims = np.asarray(self.dimensions, dtype=np.float64)
        if self.obstacle_type == ObstacleType.SPHERE:
            return float(np.linalg.norm(point - dims[:3]) - dims[3])
        lower, upper = dims[:3], dims[3:]
        center = 0.5 * (lower + upper)
        half = 0.5 * (upper - lower)
        d = np.abs(point - center) - half
        outside = float(np.linalg.norm(np.maximum(d, 0.0)))
        inside = float(min(np.max(d), 0.0))
        return outside + inside


def _check_dimensions(obstacle: Obstacle) -> None:
    dims = obstacle.dimensions
    if obstacle.obstacle_type == ObstacleType.SPHERE:
        if len(dims) != 4 or dims[3] <= 0.0:
            raise InvalidArgumentError(f"Sphere '{obstacle.name}' needs (cx, cy, cz, radius > 0)")
    elif obstacle.obstacle_type == ObstacleType.BOX:
        if len(dims) != 6 or any(lo > hi for lo, hi in zip(dims[:3], dims[3:], strict=True)):
            raise InvalidArgumentError(f"Box '{obstacle.name}' needs (min xyz, max xyz)")


class ObstacleWorld:
    """Collision checker over named workspace obstacles.

    Implements CollisionCheckerSpec for a KinematicChain.
    """

    def __init__(
        self,
        model: KinematicChain,
        margin: float = 0.0,
        link_resolution: float = 0.05,
    ) -> None:
        if link_resolution <= 0.0:
            raise InvalidArgumentError("link_resolution must be positive")
        self._model = model
        self._margin = margin
        self._link_resolution = link_resolution
        self._obstacles: dict[str, Obstacle] = {}

    # ============= Obstacle Management =============

    def add_obstacle(self, obstacle: Obstacle) -> str:
        if obstacle.name in self._obstacles:
            raise InvalidArgumentError(f"Obstacle '{obstacle.name}' already exists")
        _check_dimensions(obstacle)
        self._obstacles[obstacle.name] = obstacle
        logger.debug("Obstacle added", name=obstacle.name, type=obstacle.obstacle_type.name)
        return obstacle.name

    def remove_obstacle(self, name: str) -> bool:
        return self._obstacles.pop(name, None) is not None

    def clear_obstacles(self) -> None:
        self._obstacles.clear()

    def object_names(self) -> list[str]:
        return list(self._obstacles)

    # ============= Collision Checking =============

    def is_valid(self, q: Configuration) -> bool:
        if not self._model.within_bounds(q):
            return False
        if not self._obstacles:
            return True
        for point in self._sample_points(q):
            for obstacle in self._obstacles.values():
                if obstacle.signed_distance(point) < self._margin:
                    return False
        return True

    def distance_to_object(self, point: NDArray[np.float64], name: str) -> float:
        try:
            obstacle = self._obstacles[name]
        except KeyError:
            raise InvalidArgumentError(f"Object '{name}' not found") from None
        return obstacle.signed_distance(np.asarray(point, dtype=np.float64))

    def _sample_points(self, q: Configuration) -> list[NDArray[np.float64]]:
        frames = self._model.forward_kinematics(q)
        names = self._model.joint_names
        origins = {name: T[:3, 3] for name, T in zip(names, frames, strict=True)}
        points = list(origins.values())
        for name in names:
            for child in self._model.children(name):
                start, end = origins[name], origins[child]
                length = float(np.linalg.norm(end - start))
                n_steps = int(np.ceil(length / self._link_resolution))
                for i in range(1, n_steps):
                    points.append(start + (i / n_steps) * (end - start))
        return points
