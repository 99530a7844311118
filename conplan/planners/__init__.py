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
Planners Module

Step-by-step roadmap planners and the strategies they are built on.

All planners implement PathPlannerSpec: ``start()`` once, then ``one_step``
until it reports SOLVED, INTERRUPTED or FAILED. They only touch the roadmap
and strategies held by their PlanningContext.

## Implementations

- DiffusingPlanner: extends every connected component towards random samples
- RRTConnectPlanner: bi-directional RRT between the init and goal components
- StraightSteeringMethod: straight local paths
- UniformShooter, GaussianShooter: configuration samplers

## Usage

Use factory functions to create planners:

```python
from conplan.factory import create_planner

planner = create_planner("rrt_connect", ctx)  # Returns PathPlannerSpec
planner.start()
while planner.one_step(cancel) == StepStatus.PROGRESS:
    pass
```
"""

from conplan.planners.context import PlanningContext, StrategyContext
from conplan.planners.diffusing_planner import DiffusingPlanner
from conplan.planners.rrt_planner import RRTConnectPlanner
from conplan.planners.shooters import GaussianShooter, UniformShooter
from conplan.planners.steering import StraightSteeringMethod

__all__ = [
    "DiffusingPlanner",
    "GaussianShooter",
    "PlanningContext",
    "RRTConnectPlanner",
    "StraightSteeringMethod",
    "StrategyContext",
    "UniformShooter",
]
