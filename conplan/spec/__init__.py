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

"""Constrained Planning Specifications."""

from conplan.spec.enums import (
    ConstraintKind,
    EdgeDirection,
    ObstacleType,
    PlanningState,
    StepStatus,
    StrategyKind,
)
from conplan.spec.errors import (
    DuplicateNameError,
    InvalidArgumentError,
    InvalidGeometryError,
    IOFailureError,
    LengthMismatchError,
    NoActivePlanningError,
    NotConfiguredError,
    PlanningError,
    UnknownConstraintError,
    UnknownPathError,
    UnknownStrategyError,
    ValidationFailedError,
)
from conplan.spec.protocols import (
    CollisionCheckerSpec,
    ConfigurationShooterSpec,
    DeviceModelSpec,
    NumericalSolverSpec,
    PathOptimizerSpec,
    PathPlannerSpec,
    PathProjectorSpec,
    PathValidationSpec,
    SteeringMethodSpec,
)
from conplan.spec.types import (
    ComponentId,
    Configuration,
    ConstraintName,
    DirectPathResult,
    EdgeId,
    Jacobian,
    JointName,
    NearestConfig,
    NodeId,
    PathId,
    ProjectionResult,
    SolveResult,
    ValueAndJacobian,
    as_configuration,
)

__all__ = [
    "CollisionCheckerSpec",
    "ComponentId",
    "Configuration",
    "ConfigurationShooterSpec",
    "ConstraintKind",
    "ConstraintName",
    "DeviceModelSpec",
    "DirectPathResult",
    "DuplicateNameError",
    "EdgeDirection",
    "EdgeId",
    "IOFailureError",
    "InvalidArgumentError",
    "InvalidGeometryError",
    "Jacobian",
    "JointName",
    "LengthMismatchError",
    "NearestConfig",
    "NoActivePlanningError",
    "NodeId",
    "NotConfiguredError",
    "NumericalSolverSpec",
    "ObstacleType",
    "PathId",
    "PathOptimizerSpec",
    "PathPlannerSpec",
    "PathProjectorSpec",
    "PathValidationSpec",
    "PlanningError",
    "PlanningState",
    "ProjectionResult",
    "SolveResult",
    "StepStatus",
    "SteeringMethodSpec",
    "StrategyKind",
    "UnknownConstraintError",
    "UnknownPathError",
    "UnknownStrategyError",
    "ValidationFailedError",
    "ValueAndJacobian",
    "as_configuration",
]
