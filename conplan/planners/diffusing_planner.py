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

"""Diffusing roadmap planner implementing PathPlannerSpec.

Each step shoots one random configuration, extends every connected component
of the roadmap towards it, then tries to link the new nodes to the other
components.
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


class DiffusingPlanner:
    """Grows every connected component towards shared random samples."""

    def __init__(self, ctx: PlanningContext):
        self._ctx = ctx

    def get_name(self) -> str:
        return "Diffusing"

    def start(self) -> None:
        self._ctx.try_connect_init_and_goals()

    def one_step(self, cancel: threading.Event) -> StepStatus:
        if cancel.is_set():
            return StepStatus.INTERRUPTED
        ctx = self._ctx
        roadmap = ctx.roadmap

        sample = self._shoot()
        if sample is None:
            return StepStatus.PROGRESS

        new_nodes: list[int] = []
        for members in roadmap.components():
            if cancel.is_set():
                return StepStatus.INTERRUPTED
            nearest = roadmap.nearest_among(sample, members)
            node = self._extend(nearest.node_id, nearest.config, sample)
            if node is not None:
                new_nodes.append(node)

        for node in new_nodes:
            for members in roadmap.components():
                if cancel.is_set():
                    return StepStatus.INTERRUPTED
                if roadmap.same_component(node, members[0]):
                    continue
                nearest = roadmap.nearest_among(roadmap.node(node), members)
                ctx.connect_nodes(node, nearest.node_id)

        logger.debug(
            "Diffusing step",
            new_nodes=len(new_nodes),
            nodes=roadmap.number_nodes,
            components=roadmap.number_connected_components,
        )
        return StepStatus.SOLVED if roadmap.goal_reached() else StepStatus.PROGRESS

    def _shoot(self) -> Configuration | None:
        ctx = self._ctx
        result = ctx.project(ctx.shooter.shoot(), None)
        if not result.success or not ctx.is_valid(result.config):
            return None
        return result.config

    def _extend(self, node: int, q_near: Configuration, target: Configuration) -> int | None:
        ctx = self._ctx
        distance = float(np.linalg.norm(target - q_near))
        if distance < 1e-9:
            return None
        if distance > ctx.extend_step:
            target = q_near + (ctx.extend_step / distance) * (target - q_near)
        path, _ = ctx.local_path(q_near, target)
        if path is None or path.length < 1e-9:
            return None
        if np.linalg.norm(path.initial - q_near) > ENDPOINT_TOLERANCE:
            return None
        new_node = ctx.roadmap.add_node(path.end)
        if new_node == node:
            return None
        ctx.roadmap.add_edge(node, new_node, path, direction=EdgeDirection.BOTH_WAYS)
        return new_node
