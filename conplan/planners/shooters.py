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

"""Configuration shooters implementing ConfigurationShooterSpec.

Shooters draw from the session's numpy Generator so that a seeded session
samples the same configurations run after run.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from conplan.spec import InvalidArgumentError

if TYPE_CHECKING:
    from conplan.spec import Configuration, DeviceModelSpec

# Stand-in for infinite joint bounds when sampling uniformly
UNBOUNDED_RANGE = 10.0


class UniformShooter:
    """Uniform samples within the joint bounds."""

    def __init__(self, model: DeviceModelSpec, rng: np.random.Generator):
        self._lower = np.nan_to_num(model.lower_bounds, neginf=-UNBOUNDED_RANGE)
        self._upper = np.nan_to_num(model.upper_bounds, posinf=UNBOUNDED_RANGE)
        self._rng = rng

    def shoot(self) -> Configuration:
        return self._rng.uniform(self._lower, self._upper)


class GaussianShooter:
    """Normal samples around a centre configuration, clipped to the joint bounds.

    The standard deviation of each dof is ``sigma`` times its range.
    """

    def __init__(
        self,
        model: DeviceModelSpec,
        rng: np.random.Generator,
        center: Configuration | None = None,
        sigma: float = 0.25,
    ):
        if sigma <= 0.0:
            raise InvalidArgumentError("sigma must be positive")
        self._lower = np.nan_to_num(model.lower_bounds, neginf=-UNBOUNDED_RANGE)
        self._upper = np.nan_to_num(model.upper_bounds, posinf=UNBOUNDED_RANGE)
        self._center = model.neutral_configuration() if center is None else np.asarray(center, dtype=np.float64)
        self._scale = sigma * (self._upper - self._lower)
        self._rng = rng

    def shoot(self) -> Configuration:
        q = self._rng.normal(self._center, self._scale)
        return np.clip(q, self._lower, self._upper)
