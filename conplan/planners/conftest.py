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

import numpy as np
import pytest

from conplan.paths.projectors import NoPathProjector
from conplan.paths.validation import DiscretizedPathValidation
from conplan.planners.context import PlanningContext
from conplan.planners.shooters import UniformShooter
from conplan.planners.steering import StraightSteeringMethod
from conplan.roadmap.roadmap import Roadmap
from conplan.spec import ProjectionResult


def _identity_projection(q, reference):
    return ProjectionResult(True, np.array(q, dtype=np.float64), 0.0, 0)


@pytest.fixture
def make_context(point_robot, point_world):
    """Planning context factory over the point robot and the ball world."""

    def make(project=_identity_projection, seed=0, extend_step=0.3, projector=None):
        rng = np.random.default_rng(seed)
        return PlanningContext(
            model=point_robot,
            checker=point_world,
            rng=rng,
            project=project,
            initial_config=None,
            roadmap=Roadmap(point_robot.config_size),
            steering=StraightSteeringMethod(point_robot),
            validation=DiscretizedPathValidation(point_world, 0.02),
            projector=projector or NoPathProjector(),
            shooter=UniformShooter(point_robot, rng),
            extend_step=extend_step,
        )

    return make