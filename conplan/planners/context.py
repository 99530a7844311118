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

"""What strategies are built from.

``StrategyContext`` holds the session collaborators needed to build steering
methods, validators, projectors and shooters. ``PlanningContext`` adds the
built strategies and the roadmap, and is what planners and optimizers work
on.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from conplan.spec import EdgeDirection

if TYPE_CHECKING:
    from conplan.paths.path import PathVector
    from conplan.roadmap.roadmap import Roadmap
    from conplan.spec import (
        CollisionCheckerSpec,
        Configuration,
        ConfigurationShooterSpec,
        DeviceModelSpec,
        PathProjectorSpec,
        PathValidationSpec,
        ProjectionResult,
        SteeringMethodSpec,
    )

# End points of a connecting path may not move further than this
ENDPOINT_TOLERANCE = 1e-6


@dataclass
class StrategyContext:
    """Session collaborators strategies may depend on.

    Attributes:
        model: Device model
        checker: Collision checker
        rng: Session random generator
        project: Projects a configuration on the problem stack, given a reference
        initial_config: Initial configuration of the problem, if set
    """

    model: DeviceModelSpec
    checker: CollisionCheckerSpec
    rng: np.random.Generator
    project: Callable[[Configuration, Configuration | None], ProjectionResult]
    initial_config: Configuration | None


@dataclass
class PlanningContext(StrategyContext):
    """Strategy context plus the selected strategies and the roadmap."""

    roadmap: Roadmap
    steering: SteeringMethodSpec
    validation: PathValidationSpec
    projector: PathProjectorSpec
    shooter: ConfigurationShooterSpec
    extend_step: float

    def is_valid(self, q: Configuration) -> bool:
        return self.checker.is_valid(q)

    def local_path(self, q1: Configuration, q2: Configuration) -> tuple[PathVector | None, bool]:
        """Steer, project and validate a local path from q1 towards q2.

        Returns:
            (path, complete): the whole path when it is valid, otherwise its
            longest valid prefix (None when there is none)
        """
        candidate = self.steering.steer(q1, q2)
        if candidate is None:
            return None, False
        projected = self.projector.apply(candidate, reference=q1)
        if projected is None:
            return None, False
        valid, valid_until = self.validation.validate(projected)
        if valid:
            return projected, True
        if valid_until <= 0.0:
            return None, False
        return projected.extract(0.0, valid_until), False

    def connect(self, q1: Configuration, q2: Configuration) -> PathVector | None:
        """Valid local path joining exactly q1 and q2, or None."""
        path, complete = self.local_path(q1, q2)
        if path is None or not complete:
            return None
        if (
            np.linalg.norm(path.initial - q1) > ENDPOINT_TOLERANCE
            or np.linalg.norm(path.end - q2) > ENDPOINT_TOLERANCE
        ):
            return None
        return path

    def connect_nodes(self, node1: int, node2: int) -> bool:
        """Add edges both ways between two roadmap nodes when they can be connected."""
        path = self.connect(self.roadmap.node(node1), self.roadmap.node(node2))
        if path is None:
            return False
        self.roadmap.add_edge(node1, node2, path, direction=EdgeDirection.BOTH_WAYS)
        return True

    def try_connect_init_and_goals(self) -> bool:
        """Try a direct local path from the init node to every goal node."""
        init = self.roadmap.init_node
        if init is None:
            return False
        for goal in self.roadmap.goal_nodes:
            if not self.roadmap.same_component(init, goal):
                self.connect_nodes(init, goal)
        return self.roadmap.goal_reached()
