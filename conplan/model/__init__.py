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
Device Model Module

Default implementations of the device and collision capabilities.

## Implementations

- KinematicChain: tree of one-dof joints (DeviceModelSpec)
- ObstacleWorld: boxes and spheres checked against sampled robot points
  (CollisionCheckerSpec)
"""

from conplan.model.kinematic_chain import JointModel, KinematicChain
from conplan.model.obstacle_world import Obstacle, ObstacleWorld

__all__ = ["JointModel", "KinematicChain", "Obstacle", "ObstacleWorld"]
