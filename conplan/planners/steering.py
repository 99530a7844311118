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

"""Steering methods implementing SteeringMethodSpec."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from conplan.paths.path import StraightPath

if TYPE_CHECKING:
    from conplan.spec import Configuration, DeviceModelSpec


class StraightSteeringMethod:
    """Straight line in configuration space, rejected when an end point is out of bounds."""

    def __init__(self, model: DeviceModelSpec):
        self._lower = model.lower_bounds
        self._upper = model.upper_bounds

    def steer(self, q1: Configuration, q2: Configuration) -> StraightPath | None:
        for q in (q1, q2):
            if np.any(q < self._lower - 1e-9) or np.any(q > self._upper + 1e-9):
                return None
        return StraightPath(q1, q2)
