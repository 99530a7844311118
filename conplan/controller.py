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

"""Step-by-step planning state machine.

    IDLE --prepare--> READY --step--> STEPPING --step--> SOLVED | INTERRUPTED | FAILED
      ^                                                        |
      +------------------------- finish -----------------------+

``prepare`` may be called from any state and discards a previous run. It
clears the cancel event before any other work, so an interrupt sent while
``solve`` is still preparing stops the run at its first step.
``interrupt`` only sets a ``threading.Event`` and is safe to call from any
thread at any time; the planner observes it at its next checkpoint.
"""

from __future__ import annotations

from collections.abc import Callable
import threading
from typing import TYPE_CHECKING

from conplan.paths.path import PathVector
from conplan.spec import (
    NoActivePlanningError,
    NotConfiguredError,
    PlanningState,
    SolveResult,
    StepStatus,
    ValidationFailedError,
)
from conplan.utils.logging_config import setup_logger

if TYPE_CHECKING:
    from conplan.configuration_set import ConfigurationSet
    from conplan.paths.path_bank import PathBank
    from conplan.planners.context import PlanningContext
    from conplan.spec import Configuration, PathPlannerSpec

logger = setup_logger()


class PlanningController:
    """Drives a path planner over the roadmap, one step at a time.

    The controller does not lock anything itself: the owning session
    serializes calls, except ``interrupt`` which only touches the event.
    """

    def __init__(
        self,
        configurations: ConfigurationSet,
        path_bank: PathBank,
        build_context: Callable[[], PlanningContext],
        build_planner: Callable[[PlanningContext], PathPlannerSpec],
        generate_goal: Callable[[PlanningContext], Configuration | None],
        optimize: Callable[[int], list[int]],
    ) -> None:
        self._configurations = configurations
        self._path_bank = path_bank
        self._build_context = build_context
        self._build_planner = build_planner
        self._generate_goal = generate_goal
        self._optimize = optimize

        self._cancel = threading.Event()
        self._state = PlanningState.IDLE
        self._ctx: PlanningContext | None = None
        self._planner: PathPlannerSpec | None = None
        self._iterations = 0
        self.max_iterations: int | None = None

    @property
    def state(self) -> PlanningState:
        return self._state

    @property
    def iterations(self) -> int:
        return self._iterations

    # ============= Step By Step =============

    def prepare(self) -> None:
        """Check the problem definition and insert init and goal nodes in the roadmap.

        Raises:
            NotConfiguredError: no initial configuration, or no goal configuration
                and no goal constraint able to produce one
            ValidationFailedError: the initial or a goal configuration is invalid
        """
        # An interrupt arriving from here on belongs to this run
        self._cancel.clear()
        initial = self._configurations.get_initial_config()
        if initial is None:
            raise NotConfiguredError("Initial configuration is not set")
        ctx = self._build_context()
        goals = self._configurations.get_goal_configs()
        if not goals:
            generated = self._generate_goal(ctx)
            if generated is None:
                raise NotConfiguredError("No goal configuration and no goal constraint satisfied")
            goals = [generated]

        if not ctx.is_valid(initial):
            raise ValidationFailedError("Initial configuration is not valid")
        for i, goal in enumerate(goals):
            if not ctx.is_valid(goal):
                raise ValidationFailedError(f"Goal configuration {i} is not valid")

        planner = self._build_planner(ctx)

        roadmap = ctx.roadmap
        roadmap.reset_goal_nodes()
        roadmap.set_init_node(roadmap.add_node(initial))
        for goal in goals:
            roadmap.add_goal_node(roadmap.add_node(goal))

        self._ctx = ctx
        self._planner = planner
        self._iterations = 0
        planner.start()
        self._state = PlanningState.READY
        logger.info(
            "Planning prepared",
            planner=planner.get_name(),
            goals=len(goals),
            nodes=roadmap.number_nodes,
        )

    def execute_one_step(self) -> bool:
        """Perform one unit of planner work.

        Returns:
            True once the run is finished (solved, interrupted or failed)

        Raises:
            NoActivePlanningError: called while IDLE
        """
        if self._state == PlanningState.IDLE or self._planner is None:
            raise NoActivePlanningError("No planning prepared")
        if self._state.is_terminal:
            return True
        if self._cancel.is_set():
            self._transition(PlanningState.INTERRUPTED)
            return True
        if self._ctx is not None and self._ctx.roadmap.goal_reached():
            self._transition(PlanningState.SOLVED)
            return True

        status = self._planner.one_step(self._cancel)
        self._iterations += 1

        if status == StepStatus.SOLVED:
            self._transition(PlanningState.SOLVED)
        elif status == StepStatus.INTERRUPTED or self._cancel.is_set():
            self._transition(PlanningState.INTERRUPTED)
        elif status == StepStatus.FAILED:
            self._transition(PlanningState.FAILED)
        elif self.max_iterations is not None and self._iterations >= self.max_iterations:
            logger.info("Planning reached its iteration limit", iterations=self._iterations)
            self._transition(PlanningState.FAILED)
        else:
            self._state = PlanningState.STEPPING
            return False
        return True

    def finish(self) -> list[int]:
        """Store the path joining init and goal, if any, and return to IDLE.

        Returns:
            Ids of the stored paths (empty when no path was found)
        """
        if self._state == PlanningState.IDLE or self._ctx is None:
            raise NoActivePlanningError("No planning to finish")
        roadmap = self._ctx.roadmap
        path_ids: list[int] = []
        if roadmap.init_node is not None and roadmap.goal_reached():
            route = roadmap.shortest_path(roadmap.init_node, roadmap.goal_nodes)
            if route is not None:
                path = PathVector()
                for edge_id in route:
                    path.append_path(roadmap.edge(edge_id).path)
                if not route:
                    path = PathVector.from_waypoints([roadmap.node(roadmap.init_node)])
                path_ids.append(self._path_bank.add(path))

        logger.info(
            "Planning finished",
            state=self._state.name,
            iterations=self._iterations,
            path_ids=path_ids,
        )
        self._state = PlanningState.IDLE
        self._planner = None
        self._ctx = None
        self._cancel.clear()
        return path_ids

    def interrupt(self) -> None:
        self._cancel.set()

    # ============= Run To Completion =============

    def solve(self) -> SolveResult:
        """prepare, step until finished, finish, then optimize the raw path."""
        self.prepare()
        while not self.execute_one_step():
            pass
        interrupted = self._state == PlanningState.INTERRUPTED
        iterations = self._iterations
        path_ids = self.finish()
        for path_id in list(path_ids):
            path_ids.extend(self._optimize(path_id))
        return SolveResult(path_ids=path_ids, interrupted=interrupted, iterations=iterations)

    def _transition(self, state: PlanningState) -> None:
        self._state = state
        if state == PlanningState.INTERRUPTED:
            logger.info("Planning interrupted", iterations=self._iterations)
        elif state == PlanningState.SOLVED:
            logger.info("Planning solved", iterations=self._iterations)
        else:
            logger.debug("Planning state", state=state.name)
