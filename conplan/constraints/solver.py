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

"""Hierarchical Gauss-Newton projection onto a constraint stack.

HierarchicalSolver implements NumericalSolverSpec. Each iteration solves the
priority levels in order, every level restricted to the null space of the
levels above it, so a lower priority constraint never degrades a higher
priority one to first order.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from conplan.spec import ProjectionResult
from conplan.utils.kinematics_utils import (
    damped_pseudoinverse,
    get_manipulability,
    null_space_projector,
)
from conplan.utils.logging_config import setup_logger

if TYPE_CHECKING:
    from conplan.constraints.stack import StackedConstraints
    from conplan.spec import Configuration

logger = setup_logger()


class HierarchicalSolver:
    """Prioritized damped least-squares projector.

    Example:
        solver = HierarchicalSolver()
        result = solver.project(q, stack.snapshot(model), 1e-4, 40)
        if result.success:
            q = result.config
    """

    def __init__(
        self,
        damping: float = 1e-3,
        max_step: float = 0.5,
        singularity_threshold: float = 1e-8,
    ):
        """Create the solver.

        Args:
            damping: Damping factor of the pseudoinverse
            max_step: Largest change of any dof in one iteration
            singularity_threshold: Manipulability below which damping is increased
        """
        self._damping = damping
        self._max_step = max_step
        self._singularity_threshold = singularity_threshold

    def project(
        self,
        q: Configuration,
        stack: StackedConstraints,
        error_threshold: float,
        max_iterations: int,
    ) -> ProjectionResult:
        current = np.array(q, dtype=np.float64)
        if stack.is_empty():
            return ProjectionResult(True, current, 0.0, 0)

        lower = stack.model.lower_bounds
        upper = stack.model.upper_bounds

        for iteration in range(max_iterations):
            if stack.is_satisfied(current, error_threshold):
                return ProjectionResult(
                    True, current, float(np.linalg.norm(stack.residual(current))), iteration
                )
            dq = self._step(current, stack)
            largest = float(np.max(np.abs(dq))) if dq.size else 0.0
            if largest > self._max_step:
                dq = dq * (self._max_step / largest)
            current = np.clip(current + dq, lower, upper)

        residual = float(np.linalg.norm(stack.residual(current)))
        success = stack.is_satisfied(current, error_threshold)
        if not success:
            logger.debug("Projection did not converge", iterations=max_iterations, residual=residual)
        return ProjectionResult(success, current, residual, max_iterations)

    def _step(self, q: Configuration, stack: StackedConstraints) -> np.ndarray:
        n = q.shape[0]
        dq = np.zeros(n)
        N = np.eye(n)
        for level in range(len(stack.levels)):
            error = stack.level_value(level, q)
            if error.size == 0:
                continue
            J = stack.level_jacobian(level, q)
            J_projected = J @ N
            damping = self._damping
            if get_manipulability(J_projected) < self._singularity_threshold:
                damping *= 10.0
            dq = dq + N @ damped_pseudoinverse(J_projected, damping) @ (-error - J @ dq)
            N = N @ null_space_projector(J_projected)
        return dq
