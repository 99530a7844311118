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

"""Planning sessions.

A ``ProblemSession`` owns everything about one planning problem: device
model, collision checker, constraint registry and stacks, configurations,
roadmap, path bank, strategy selection and the planning controller. Every
operation of the problem is a method of the session.

``SessionManager`` maps problem names to sessions and tracks the current
one, replacing a process-wide "selected problem".

Thread model:
    Read-only queries take the shared side of the session's ReadWriteLock,
    mutating operations the exclusive side. ``interrupt_path_planning`` takes
    no lock at all, so it can stop a ``solve`` running in another thread.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
import threading
from typing import TYPE_CHECKING, Any

import numpy as np

from conplan.config import PlanningSettings
from conplan.configuration_set import ConfigurationSet
from conplan.constraints.registry import ConstraintRegistry
from conplan.constraints.solver import HierarchicalSolver
from conplan.constraints.stack import ConstraintStack
from conplan.controller import PlanningController
from conplan.factory import StrategySelector, available
from conplan.model.obstacle_world import ObstacleWorld
from conplan.paths.path import PathVector
from conplan.paths.path_bank import PathBank
from conplan.paths.path_utils import interpolate_path
from conplan.planners.context import PlanningContext, StrategyContext
from conplan.roadmap.roadmap import Roadmap
from conplan.roadmap.roadmap_io import read_roadmap, save_roadmap
from conplan.spec import (
    DirectPathResult,
    EdgeDirection,
    InvalidArgumentError,
    NotConfiguredError,
    PlanningState,
    ProjectionResult,
    StrategyKind,
    ValidationFailedError,
    as_configuration,
)
from conplan.utils.logging_config import setup_logger
from conplan.utils.rwlock import ReadWriteLock

if TYPE_CHECKING:
    from pathlib import Path

    from conplan.constraints.registry import ConstraintEntry
    from conplan.constraints.variants import Mask, Vec3
    from conplan.model.kinematic_chain import KinematicChain
    from conplan.spec import (
        CollisionCheckerSpec,
        Configuration,
        DeviceModelSpec,
        NearestConfig,
        NumericalSolverSpec,
        SolveResult,
        ValueAndJacobian,
    )

logger = setup_logger()


class ProblemSession:
    """One constrained planning problem.

    Example:
        robot = KinematicChain()
        robot.add_joint("x", "prismatic", axis=(1, 0, 0), bounds=(-2, 2))
        robot.add_joint("y", "prismatic", parent="x", axis=(0, 1, 0), bounds=(-2, 2))
        session = ProblemSession("plane", robot)
        session.set_initial_config([-1.0, 0.0])
        session.add_goal_config([1.0, 0.0])
        result = session.solve()
        waypoints = session.get_waypoints(result.path_ids[0])
    """

    def __init__(
        self,
        name: str,
        model: DeviceModelSpec,
        checker: CollisionCheckerSpec | None = None,
        settings: PlanningSettings | None = None,
        solver: NumericalSolverSpec | None = None,
    ) -> None:
        self.name = name
        self.settings = settings or PlanningSettings()
        self.model = model
        if checker is None:
            checker = ObstacleWorld(model)  # type: ignore[arg-type]
        self.checker = checker
        self.solver: NumericalSolverSpec = solver or HierarchicalSolver()

        self.registry = ConstraintRegistry(model, checker)
        self.problem_stack = ConstraintStack(self.registry)
        self.goal_stack = ConstraintStack(self.registry)
        self.configurations = ConfigurationSet(model.config_size)
        self.roadmap = Roadmap(model.config_size)
        self.path_bank = PathBank()
        self.selector = StrategySelector(self.settings)

        self._error_threshold = self.settings.error_threshold
        self._max_iterations = self.settings.max_iterations
        self._rng = np.random.default_rng(self.settings.random_seed)
        self._lock = ReadWriteLock()
        self.problem_names: Callable[[], list[str]] = lambda: [self.name]

        self.controller = PlanningController(
            self.configurations,
            self.path_bank,
            build_context=self._planning_context,
            build_planner=self.selector.build_path_planner,
            generate_goal=self._generate_goal_config,
            optimize=self._optimize_path,
        )
        self.controller.max_iterations = self.settings.max_iter_path_planning

    @property
    def world(self) -> ObstacleWorld:
        """The obstacle world, when the session uses the default collision checker."""
        if not isinstance(self.checker, ObstacleWorld):
            raise NotConfiguredError("Session does not use an ObstacleWorld")
        return self.checker

    # =========================================================================
    # Internals
    # =========================================================================

    def _config(self, values: object) -> Configuration:
        try:
            return as_configuration(values, self.model.config_size)
        except ValueError as e:
            raise InvalidArgumentError(str(e)) from None

    def _project(
        self,
        q: Configuration,
        reference: Configuration | None,
        stack: ConstraintStack | None = None,
    ) -> ProjectionResult:
        stacked = (stack or self.problem_stack).snapshot(self.model, self.checker, reference)
        return self.solver.project(q, stacked, self._error_threshold, self._max_iterations)

    def _strategy_context(self) -> StrategyContext:
        return StrategyContext(
            model=self.model,
            checker=self.checker,
            rng=self._rng,
            project=self._project,
            initial_config=self.configurations.get_initial_config(),
        )

    def _planning_context(self) -> PlanningContext:
        base = self._strategy_context()
        return PlanningContext(
            model=base.model,
            checker=base.checker,
            rng=base.rng,
            project=base.project,
            initial_config=base.initial_config,
            roadmap=self.roadmap,
            steering=self.selector.build_steering_method(base),
            validation=self.selector.build_path_validation(base),
            projector=self.selector.build_path_projector(base),
            shooter=self.selector.build_configuration_shooter(base),
            extend_step=self.settings.extend_step,
        )

    def _generate_goal_config(self, ctx: PlanningContext) -> Configuration | None:
        """Sample a configuration satisfying the goal stack, None when the stack is empty."""
        if self.goal_stack.is_empty():
            return None
        for _ in range(self._max_iterations):
            result = self._project(ctx.shooter.shoot(), None, self.goal_stack)
            if result.success and self.checker.is_valid(result.config):
                logger.debug("Goal configuration generated", residual=result.residual_error)
                return result.config
        return None

    def _optimize_path(self, path_id: int) -> list[int]:
        current = self.path_bank.get(path_id)
        if not self.selector.path_optimizers:
            return []
        ctx = self._planning_context()
        outputs = []
        for optimizer in self.selector.build_path_optimizers(ctx):
            current = optimizer.optimize(current)
            outputs.append(current)
        # Stored only once the whole chain succeeded
        new_ids = [self.path_bank.add(path) for path in outputs]
        for name, new_id, path in zip(self.selector.path_optimizers, new_ids, outputs, strict=True):
            logger.debug("Path optimized", optimizer=name, path_id=new_id, length=path.length)
        return new_ids

    def _satisfies_problem_stack(self, q: Configuration) -> bool:
        stacked = self.problem_stack.snapshot(self.model, self.checker)
        return stacked.is_satisfied(q, self._error_threshold)

    # =========================================================================
    # Constraint Registry
    # =========================================================================

    def create_orientation_constraint(
        self, name: str, joint1: str, joint2: str, target: Sequence[float], mask: Mask = (True, True, True)
    ) -> ConstraintEntry:
        with self._lock.write():
            return self.registry.create_orientation_constraint(name, joint1, joint2, target, mask)

    def create_transformation_constraint(
        self,
        name: str,
        joint1: str,
        joint2: str,
        target: Sequence[float],
        mask: Mask = (True, True, True, True, True, True),
    ) -> ConstraintEntry:
        with self._lock.write():
            return self.registry.create_transformation_constraint(name, joint1, joint2, target, mask)

    def create_position_constraint(
        self,
        name: str,
        joint1: str,
        joint2: str,
        point1: Vec3,
        point2: Vec3,
        mask: Mask = (True, True, True),
    ) -> ConstraintEntry:
        with self._lock.write():
            return self.registry.create_position_constraint(name, joint1, joint2, point1, point2, mask)

    def create_relative_com_constraint(
        self, name: str, com_name: str, joint: str, point: Vec3, mask: Mask = (True, True, True)
    ) -> ConstraintEntry:
        with self._lock.write():
            return self.registry.create_relative_com_constraint(name, com_name, joint, point, mask)

    def create_com_between_feet_constraint(
        self,
        name: str,
        com_name: str,
        joint_left: str,
        joint_right: str,
        point_left: Vec3,
        point_right: Vec3,
        joint_ref: str,
        mask: Mask = (True, True, True),
    ) -> ConstraintEntry:
        with self._lock.write():
            return self.registry.create_com_between_feet_constraint(
                name, com_name, joint_left, joint_right, point_left, point_right, joint_ref, mask
            )

    def create_convex_shape_contact_constraint(
        self,
        name: str,
        floor_joints: Sequence[str],
        object_joints: Sequence[str],
        points: Sequence[Vec3],
        object_triangles: Sequence[Sequence[int]],
        floor_triangles: Sequence[Sequence[int]],
    ) -> ConstraintEntry:
        with self._lock.write():
            return self.registry.create_convex_shape_contact_constraint(
                name, floor_joints, object_joints, points, object_triangles, floor_triangles
            )

    def create_static_stability_gravity_constraint(
        self,
        name: str,
        floor_joints: Sequence[str],
        object_joints: Sequence[str],
        points: Sequence[Vec3],
        object_triangles: Sequence[Sequence[int]],
        floor_triangles: Sequence[Sequence[int]],
    ) -> ConstraintEntry:
        with self._lock.write():
            return self.registry.create_static_stability_gravity_constraint(
                name, floor_joints, object_joints, points, object_triangles, floor_triangles
            )

    def create_static_stability_constraint(
        self,
        name: str,
        joints: Sequence[str],
        points: Sequence[Vec3],
        normals: Sequence[Vec3],
        com_root_joint: str = "",
    ) -> ConstraintEntry:
        with self._lock.write():
            return self.registry.create_static_stability_constraint(
                name, joints, points, normals, com_root_joint
            )

    def create_configuration_constraint(self, name: str, goal: Sequence[float]) -> ConstraintEntry:
        with self._lock.write():
            return self.registry.create_configuration_constraint(name, goal)

    def create_distance_between_joint_constraint(
        self, name: str, joint1: str, joint2: str, distance: float
    ) -> ConstraintEntry:
        with self._lock.write():
            return self.registry.create_distance_between_joint_constraint(name, joint1, joint2, distance)

    def create_distance_between_joint_and_objects(
        self, name: str, joint: str, objects: Sequence[str], distance: float
    ) -> ConstraintEntry:
        with self._lock.write():
            return self.registry.create_distance_between_joint_and_objects(name, joint, objects, distance)

    def create_locked_joint(self, name: str, joint: str, value: Sequence[float]) -> ConstraintEntry:
        with self._lock.write():
            return self.registry.create_locked_joint(name, joint, value)

    def set_constant_right_hand_side(self, name: str, constant: bool) -> None:
        with self._lock.write():
            self.registry.set_constant_right_hand_side(name, constant)

    def get_constant_right_hand_side(self, name: str) -> bool:
        with self._lock.read():
            return self.registry.get_constant_right_hand_side(name)

    def add_passive_dofs(self, constraint_name: str, dof_names: Sequence[str]) -> None:
        with self._lock.write():
            self.registry.add_passive_dofs(constraint_name, dof_names)

    def reset_constraint_map(self) -> None:
        """Remove every registered constraint and empty both stacks."""
        with self._lock.write():
            self.problem_stack.clear()
            self.goal_stack.clear()
            self.registry.reset()

    # =========================================================================
    # Constraint Stacks
    # =========================================================================

    def set_numerical_constraints(
        self, name: str, constraint_names: Sequence[str], priorities: Sequence[int]
    ) -> None:
        with self._lock.write():
            self.problem_stack.set(name, constraint_names, priorities)

    def set_goal_numerical_constraints(
        self, name: str, constraint_names: Sequence[str], priorities: Sequence[int]
    ) -> None:
        with self._lock.write():
            self.goal_stack.set(name, constraint_names, priorities)

    def lock_joint(self, joint: str, value: Sequence[float]) -> str:
        """Lock a joint on the problem stack. Returns the name of the locked-joint constraint."""
        with self._lock.write():
            name = f"lock_{joint}"
            self.registry.upsert_locked_joint(name, joint, value)
            self.problem_stack.push(name, 0)
            return name

    def add_goal_lock_joint(self, joint: str, value: Sequence[float]) -> str:
        with self._lock.write():
            name = f"goal_lock_{joint}"
            self.registry.upsert_locked_joint(name, joint, value)
            self.goal_stack.push(name, 0)
            return name

    def apply_constraints(self, config: object) -> ProjectionResult:
        """Project ``config`` on the problem stack.

        Non-convergence is reported through ``success``, never raised.
        """
        with self._lock.read():
            q = self._config(config)
            return self._project(q, q)

    def compute_value_and_jacobian(self, config: object) -> ValueAndJacobian:
        with self._lock.read():
            q = self._config(config)
            return self.problem_stack.snapshot(self.model, self.checker).value_and_jacobian(q)

    def generate_valid_config(self, max_iter: int) -> ProjectionResult:
        """Shoot and project until a valid configuration satisfies the problem stack."""
        if max_iter <= 0:
            raise InvalidArgumentError("max_iter must be positive")
        with self._lock.write():
            ctx = self._strategy_context()
            shooter = self.selector.build_configuration_shooter(ctx)
            reference = ctx.initial_config
            last = ProjectionResult(False, self.model.neutral_configuration(), float("inf"), 0)
            for _ in range(max_iter):
                result = self._project(shooter.shoot(), reference)
                if result.success and self.checker.is_valid(result.config):
                    return result
                last = ProjectionResult(False, result.config, result.residual_error, result.iterations)
            return last

    def set_error_threshold(self, threshold: float) -> None:
        if not threshold > 0.0:
            raise InvalidArgumentError("Error threshold must be positive")
        with self._lock.write():
            self._error_threshold = float(threshold)

    def get_error_threshold(self) -> float:
        return self._error_threshold

    def set_max_iterations(self, iterations: int) -> None:
        if iterations <= 0:
            raise InvalidArgumentError("Maximal number of iterations must be positive")
        with self._lock.write():
            self._max_iterations = int(iterations)

    def get_max_iterations(self) -> int:
        return self._max_iterations

    def reset_constraints(self) -> None:
        with self._lock.write():
            self.problem_stack.clear()

    def reset_goal_constraints(self) -> None:
        with self._lock.write():
            self.goal_stack.clear()

    # =========================================================================
    # Configurations
    # =========================================================================

    def set_initial_config(self, config: object) -> None:
        with self._lock.write():
            self.configurations.set_initial_config(config)

    def get_initial_config(self) -> Configuration:
        with self._lock.read():
            q = self.configurations.get_initial_config()
        if q is None:
            raise NotConfiguredError("Initial configuration is not set")
        return q

    def add_goal_config(self, config: object) -> None:
        with self._lock.write():
            self.configurations.add_goal_config(config)

    def get_goal_configs(self) -> list[Configuration]:
        with self._lock.read():
            return self.configurations.get_goal_configs()

    def reset_goal_configs(self) -> None:
        with self._lock.write():
            self.configurations.reset_goal_configs()

    # =========================================================================
    # Roadmap
    # =========================================================================

    def number_nodes(self) -> int:
        with self._lock.read():
            return self.roadmap.number_nodes

    def number_edges(self) -> int:
        with self._lock.read():
            return self.roadmap.number_edges

    def number_connected_components(self) -> int:
        with self._lock.read():
            return self.roadmap.number_connected_components

    def node(self, node_id: int) -> Configuration:
        with self._lock.read():
            return self.roadmap.node(node_id)

    def edge(self, edge_id: int) -> tuple[Configuration, Configuration]:
        """Start and end configurations of an edge."""
        with self._lock.read():
            edge = self.roadmap.edge(edge_id)
            return self.roadmap.node(edge.from_node), self.roadmap.node(edge.to_node)

    def nodes(self) -> list[Configuration]:
        with self._lock.read():
            return self.roadmap.nodes()

    def nodes_connected_component(self, component: int) -> list[Configuration]:
        with self._lock.read():
            return [self.roadmap.node(i) for i in self.roadmap.nodes_in_component(component)]

    def connected_component_of_node(self, node_id: int) -> int:
        with self._lock.read():
            return self.roadmap.connected_component_of_node(node_id)

    def connected_component_of_edge(self, edge_id: int) -> int:
        with self._lock.read():
            return self.roadmap.connected_component_of_edge(edge_id)

    def get_nearest_config(self, config: object, component: int = -1) -> NearestConfig:
        """Nearest roadmap node, within ``component`` when it is non-negative."""
        with self._lock.read():
            return self.roadmap.nearest_node(self._config(config), component)

    def clear_roadmap(self) -> None:
        with self._lock.write():
            self.roadmap.clear()

    def reset_roadmap(self) -> None:
        """Clear the roadmap, then insert the current initial and goal configurations."""
        with self._lock.write():
            self.roadmap.clear()
            initial = self.configurations.get_initial_config()
            if initial is not None:
                self.roadmap.set_init_node(self.roadmap.add_node(initial))
            for goal in self.configurations.get_goal_configs():
                self.roadmap.add_goal_node(self.roadmap.add_node(goal))

    def save_roadmap(self, filename: str | Path) -> None:
        with self._lock.read():
            save_roadmap(self.roadmap, filename)

    def read_roadmap(self, filename: str | Path) -> None:
        """Replace the roadmap content by the content of a file; unchanged on failure.

        The roadmap object is kept, so a planning run in progress continues on
        the loaded content.
        """
        with self._lock.write():
            self.roadmap.replace_contents(read_roadmap(filename, self.model.config_size))

    def add_config_to_roadmap(self, config: object) -> bool:
        with self._lock.write():
            q = self._config(config)
            if not self.checker.is_valid(q):
                logger.warning("Configuration refused by the collision checker")
                return False
            if not self._satisfies_problem_stack(q):
                logger.warning("Configuration does not satisfy the problem constraints")
                return False
            self.roadmap.add_node(q)
            return True

    def add_edge_to_roadmap(
        self, config1: object, config2: object, path_id: int, both_edges: bool
    ) -> bool:
        """Add an edge carrying a stored path between two configurations.

        Missing end nodes are created. Returns False, changing nothing, when
        an end configuration is not valid.

        Raises:
            UnknownPathError: no path with this id
            InvalidArgumentError: the path does not start at config1 and end at config2
        """
        with self._lock.write():
            q1 = self._config(config1)
            q2 = self._config(config2)
            path = self.path_bank.get(path_id)
            if not (
                np.allclose(path.initial, q1, atol=1e-6, rtol=0)
                and np.allclose(path.end, q2, atol=1e-6, rtol=0)
            ):
                raise InvalidArgumentError(f"Path {path_id} does not join the given configurations")
            if not (self.checker.is_valid(q1) and self.checker.is_valid(q2)):
                logger.warning("Edge refused, end configuration not valid", path_id=path_id)
                return False
            n1 = self.roadmap.add_node(q1)
            n2 = self.roadmap.add_node(q2)
            direction = EdgeDirection.BOTH_WAYS if both_edges else EdgeDirection.ONE_WAY
            self.roadmap.add_edge(n1, n2, path, path_id, direction)
            return True

    # =========================================================================
    # Paths
    # =========================================================================

    def number_paths(self) -> int:
        with self._lock.read():
            return len(self.path_bank)

    def path_length(self, path_id: int) -> float:
        with self._lock.read():
            return self.path_bank.path_length(path_id)

    def config_at_param(self, path_id: int, s: float) -> Configuration:
        with self._lock.read():
            return self.path_bank.config_at_param(path_id, s)

    def get_waypoints(self, path_id: int) -> list[Configuration]:
        with self._lock.read():
            return self.path_bank.waypoints(path_id)

    def direct_path(self, start: object, end: object) -> DirectPathResult:
        """Build and validate one local path; store it and add it to the roadmap on success."""
        with self._lock.write():
            q1 = self._config(start)
            q2 = self._config(end)
            ctx = self._planning_context()
            path, complete = ctx.local_path(q1, q2)
            if path is None or not complete:
                logger.debug("Direct path rejected")
                return DirectPathResult(False, None, "Local path is not valid")
            path_id = self.path_bank.add(path)
            n1 = self.roadmap.add_node(path.initial)
            n2 = self.roadmap.add_node(path.end)
            self.roadmap.add_edge(n1, n2, path, path_id)
            logger.debug("Direct path added", path_id=path_id, length=path.length)
            return DirectPathResult(True, path_id)

    def append_direct_path(self, path_id: int, config: object) -> None:
        """Extend a stored path with a local path ending at ``config``.

        Raises:
            UnknownPathError: no path with this id
            ValidationFailedError: the new segment is not valid
        """
        with self._lock.write():
            q = self._config(config)
            path = self.path_bank.get(path_id)
            segment = self._planning_context().connect(path.end, q)
            if segment is None:
                raise ValidationFailedError(f"Segment appended to path {path_id} is not valid")
            path.append_path(segment)
            self.path_bank.replace(path_id, path)

    def project_path(self, path_id: int) -> bool:
        """Project a stored path waypoint by waypoint.

        Waypoints are first resampled at the path projector tolerance. The
        path is unchanged unless every projection converges.
        """
        with self._lock.write():
            waypoints = interpolate_path(
                self.path_bank.waypoints(path_id), self.selector.path_projector_tolerance
            )
            reference = waypoints[0]
            projected: list[Configuration] = []
            for q in waypoints:
                result = self._project(q, reference)
                if not result.success:
                    logger.debug("Path projection failed", path_id=path_id)
                    return False
                projected.append(result.config)
            self.path_bank.replace(path_id, PathVector.from_waypoints(projected))
            return True

    def optimize_path(self, path_id: int) -> list[int]:
        """Run the optimizer chain on a stored path. Every output gets a new id."""
        with self._lock.write():
            return self._optimize_path(path_id)

    # =========================================================================
    # Strategies
    # =========================================================================

    def select_path_planner(self, name: str) -> None:
        with self._lock.write():
            self.selector.select_path_planner(name)

    def select_steering_method(self, name: str) -> None:
        with self._lock.write():
            self.selector.select_steering_method(name)

    def select_path_validation(self, name: str, tolerance: float) -> None:
        with self._lock.write():
            self.selector.select_path_validation(name, tolerance)

    def select_path_projector(self, name: str, tolerance: float) -> None:
        with self._lock.write():
            self.selector.select_path_projector(name, tolerance)

    def select_configuration_shooter(self, name: str) -> None:
        with self._lock.write():
            self.selector.select_configuration_shooter(name)

    def add_path_optimizer(self, name: str) -> None:
        with self._lock.write():
            self.selector.add_path_optimizer(name)

    def clear_path_optimizers(self) -> None:
        with self._lock.write():
            self.selector.clear_path_optimizers()

    def get_available(self, kind: str) -> list[str]:
        """Names available for a strategy kind, or 'problem' / 'constraint'."""
        if kind == "problem":
            return self.problem_names()
        if kind == "constraint":
            with self._lock.read():
                return self.registry.names()
        try:
            return available(StrategyKind(kind))
        except ValueError:
            kinds = [k.value for k in StrategyKind] + ["problem", "constraint"]
            raise InvalidArgumentError(f"Unknown kind: {kind}. Available: {kinds}") from None

    def set_random_seed(self, seed: int | None) -> None:
        """Reseed the session generator in place.

        Shooters, planners and optimizers of a run in progress hold the same
        generator, so they draw from the new seed at their next sample.
        """
        with self._lock.write():
            self._rng.bit_generator.state = np.random.default_rng(seed).bit_generator.state

    # =========================================================================
    # Planning
    # =========================================================================

    @property
    def planning_state(self) -> PlanningState:
        return self.controller.state

    def set_max_iter_path_planning(self, iterations: int | None) -> None:
        if iterations is not None and iterations <= 0:
            raise InvalidArgumentError("Maximal number of planning iterations must be positive")
        with self._lock.write():
            self.controller.max_iterations = iterations

    def prepare_solve_step_by_step(self) -> None:
        with self._lock.write():
            self.controller.prepare()

    def execute_one_step(self) -> bool:
        with self._lock.write():
            return self.controller.execute_one_step()

    def finish_solve_step_by_step(self) -> list[int]:
        with self._lock.write():
            return self.controller.finish()

    def interrupt_path_planning(self) -> None:
        self.controller.interrupt()

    def solve(self) -> SolveResult:
        with self._lock.write():
            return self.controller.solve()


class SessionManager:
    """Problem sessions by name.

    Example:
        manager = SessionManager(lambda name: ProblemSession(name, build_robot()))
        manager.select_problem("default")  # True, created
        manager.current.set_initial_config(q0)
    """

    def __init__(self, factory: Callable[[str], ProblemSession]) -> None:
        self._factory = factory
        self._sessions: dict[str, ProblemSession] = {}
        self._current: str | None = None
        self._lock = threading.Lock()

    def select_problem(self, name: str) -> bool:
        """Make ``name`` the current problem. Returns True when the session was created."""
        with self._lock:
            created = name not in self._sessions
            if created:
                session = self._factory(name)
                session.problem_names = self.names
                self._sessions[name] = session
            self._current = name
        logger.info("Problem selected", problem=name, created=created)
        return created

    @property
    def current(self) -> ProblemSession:
        with self._lock:
            if self._current is None:
                raise NotConfiguredError("No problem selected")
            return self._sessions[self._current]

    def get(self, name: str) -> ProblemSession:
        with self._lock:
            try:
                return self._sessions[name]
            except KeyError:
                raise NotConfiguredError(f"No problem named '{name}'") from None

    def names(self) -> list[str]:
        with self._lock:
            return list(self._sessions)

    def close(self, name: str) -> bool:
        """Interrupt and forget a session. Returns False when it did not exist."""
        with self._lock:
            session = self._sessions.pop(name, None)
            if self._current == name:
                self._current = None
        if session is None:
            return False
        session.interrupt_path_planning()
        logger.info("Problem closed", problem=name)
        return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


def default_session_factory(
    model_factory: Callable[[], KinematicChain], **kwargs: Any
) -> Callable[[str], ProblemSession]:
    """Session factory building a fresh model and obstacle world for every problem."""

    def build(name: str) -> ProblemSession:
        return ProblemSession(name, model_factory(), **kwargs)

    return build
