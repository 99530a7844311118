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
Constrained Planning

Motion planning for articulated devices whose configurations must satisfy
numerical constraints (contacts, balance, locked joints, relative poses).

## Architecture

- ProblemSession: one planning problem, every operation as a method
- SessionManager: problem sessions by name
- ConstraintRegistry / ConstraintStack: named constraints and prioritized stacks
- HierarchicalSolver: projection of configurations onto a constraint stack
- Roadmap / PathBank: planning graph and stored paths
- PlanningController: step-by-step planning state machine

## Example

```python
from conplan import KinematicChain, ProblemSession

robot = KinematicChain()
robot.add_joint("x", "prismatic", axis=(1, 0, 0), bounds=(-2, 2))
robot.add_joint("y", "prismatic", parent="x", axis=(0, 1, 0), bounds=(-2, 2))

session = ProblemSession("plane", robot)
session.create_locked_joint("lock_y", "y", [0.5])
session.set_numerical_constraints("proj", ["lock_y"], [0])
session.set_initial_config([-1.0, 0.5])
session.add_goal_config([1.0, 0.5])
result = session.solve()
```
"""

from conplan.config import PlanningSettings
from conplan.constraints import ConstraintRegistry, ConstraintStack, HierarchicalSolver
from conplan.controller import PlanningController
from conplan.model import KinematicChain, Obstacle, ObstacleWorld
from conplan.paths import PathBank, PathVector
from conplan.roadmap import Roadmap, read_roadmap, save_roadmap
from conplan.session import ProblemSession, SessionManager, default_session_factory
from conplan.spec import (
    DirectPathResult,
    PlanningError,
    PlanningState,
    ProjectionResult,
    SolveResult,
    StrategyKind,
)

__all__ = [
    "ConstraintRegistry",
    "ConstraintStack",
    "DirectPathResult",
    "HierarchicalSolver",
    "KinematicChain",
    "Obstacle",
    "ObstacleWorld",
    "PathBank",
    "PathVector",
    "PlanningController",
    "PlanningError",
    "PlanningSettings",
    "PlanningState",
    "ProblemSession",
    "ProjectionResult",
    "Roadmap",
    "SessionManager",
    "SolveResult",
    "StrategyKind",
    "default_session_factory",
    "read_roadmap",
    "save_roadmap",
]
