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

"""RRT-Connect planner implementing PathPlannerSpec.

The two trees are the roadmap component of the init node and the components
of the goal nodes. One step is one extend-then-connect iteration; the trees
swap roles after every step.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from conplan.planners.context import ENDPOINT_TOLERANCE
from conplan.spec import EdgeDirection, StepStatus
from conplan.utils.logging_config import setup_logger

if TYPE_CHECKING:
    import threading

    from conplan.planners.context import PlanningContext
    from conplan.spec import Configuration

logger = setup_logger()


class RRTConnectPlanner:
    """Bi-directional RRT-Connect planner growing the roadmap."""

    def __init__(self, ctx: PlanningContext, connect_step_size: float | None = None):
        self._ctx = ctx
        self._step_size = ctx.extend_step
        self._connect_step_size = connect_step_size or ctx.extend_step
        self._trees_swapped = False

    def get_name(self) -> str:
        return "RRTConnect"

    def start(self) -> None:
        self._trees_swapped = False
        self._ctx.try_connect_init_and_goals()

    def one_step(self, cancel: threading.Event) -> StepStatus:
        if cancel.is_set():
            return StepStatus.INTERRUPTED
        ctx = self._ctx
        roadmap = ctx.roadmap
        if roadmap.init_node is None or not roadmap.goal_nodes:
            return StepStatus.FAILED

        if roadmap.goal_reached():
            return StepStatus.SOLVED

        result = ctx.project(ctx.shooter.shoot(), None)
        if result.success and ctx.is_valid(result.config):
            start_tree, goal_tree = self._trees()
            if self._trees_swapped:
                start_tree, goal_tree = goal_tree, start_tree

            extended = self._extend_tree(start_tree, result.config, self._step_size)
            if extended is not None:
                self._connect_tree(goal_tree, extended, cancel)

        self._trees_swapped = not self._trees_swapped
        if roadmap.goal_reached():
            return StepStatus.SOLVED
        if cancel.is_set():
            return StepStatus.INTERRUPTED
        return StepStatus.PROGRESS

    def _trees(self) -> tuple[list[int], list[int]]:
        """Node ids of the init tree and of the goal trees."""
        roadmap = self._ctx.roadmap
        init = roadmap.init_node
        assert init is not None
        init_tree: list[int] = []
        goal_tree: list[int] = []
        for members in roadmap.components():
            if init in members:
                init_tree = members
            elif any(goal in members for goal in roadmap.goal_nodes):
                goal_tree.extend(members)
        return init_tree, goal_tree

    def _extend_tree(self, tree: list[int], target: Configuration, step_size: float) -> int | None:
        """Extend tree toward target, returns new node if successful."""
        ctx = self._ctx
        roadmap = ctx.roadmap
        nearest = roadmap.nearest_among(target, tree)

        diff = target - nearest.config
        dist = float(np.linalg.norm(diff))
        if dist < 1e-9:
            return None
        if dist <= step_size:
            new_config = target.copy()
        else:
            new_config = nearest.config + step_size * (diff / dist)

        path = ctx.connect(nearest.config, new_config)
        if path is None:
            return None
        new_node = roadmap.add_node(path.end)
        roadmap.add_edge(nearest.node_id, new_node, path, direction=EdgeDirection.BOTH_WAYS)
        tree.append(new_node)
        return new_node

    def _connect_tree(self, tree: list[int], target_node: int, cancel: threading.Event) -> bool:
        """Keep extending tree toward the target node until reached or blocked."""
        roadmap = self._ctx.roadmap
        if not tree:
            return False
        target = roadmap.node(target_node)
        nearest = roadmap.nearest_among(target, tree)
        max_extensions = int(np.ceil(nearest.distance / self._connect_step_size)) + 1
        for _ in range(max_extensions):
            if cancel.is_set():
                return False
            node = self._extend_tree(tree, target, self._connect_step_size)
            if node is None:
                return False
            if roadmap.same_component(node, target_node):
                return True
            if float(np.linalg.norm(roadmap.node(node) - target)) < ENDPOINT_TOLERANCE:
                return True
        return False
