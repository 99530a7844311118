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

"""
Constraints Module

Constraint variants, the named registry, prioritized stacks and the
numerical solver projecting configurations onto them.

## Usage

```python
registry = ConstraintRegistry(model)
registry.create_locked_joint("lock", "joint1", [0.5])
stack = ConstraintStack(registry)
stack.set("stack1", ["lock"], [0])
result = HierarchicalSolver().project(q, stack.snapshot(model), 1e-4, 40)
```
"""

from conplan.constraints.evaluation import (
    constraint_jacobian,
    constraint_value,
    validate_constraint,
)
from conplan.constraints.registry import ConstraintEntry, ConstraintRegistry
from conplan.constraints.solver import HierarchicalSolver
from conplan.constraints.stack import ConstraintStack, StackedConstraints, StackItem
from conplan.constraints.variants import (
    ComBetweenFeetConstraint,
    ConfigurationConstraint,
    Constraint,
    ConvexShapeContactConstraint,
    DistanceBetweenJointsConstraint,
    DistanceJointObjectsConstraint,
    LockedJointConstraint,
    OrientationConstraint,
    PositionConstraint,
    RelativeComConstraint,
    StaticStabilityConstraint,
    TransformationConstraint,
)

__all__ = [
    "ComBetweenFeetConstraint",
    "ConfigurationConstraint",
    "Constraint",
    "ConstraintEntry",
    "ConstraintRegistry",
    "ConstraintStack",
    "ConvexShapeContactConstraint",
    "DistanceBetweenJointsConstraint",
    "DistanceJointObjectsConstraint",
    "HierarchicalSolver",
    "LockedJointConstraint",
    "OrientationConstraint",
    "PositionConstraint",
    "RelativeComConstraint",
    "StackItem",
    "StackedConstraints",
    "StaticStabilityConstraint",
    "TransformationConstraint",
    "constraint_jacobian",
    "constraint_value",
    "validate_constraint",
]
