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

"""Tests for configuration shooters and the straight steering method."""

import numpy as np
import pytest

from conplan.planners.shooters import GaussianShooter, UniformShooter
from conplan.planners.steering import StraightSteeringMethod
from conplan.spec import InvalidArgumentError


class TestUniformShooter:
    def test_samples_within_bounds(self, point_robot):
        shooter = UniformShooter(point_robot, np.random.default_rng(0))
        samples = np.array([shooter.shoot() for _ in range(200)])
        assert samples.shape == (200, 2)
        assert np.all(samples >= -2.0)
        assert np.all(samples <= 2.0)

    def test_same_seed_same_samples(self, point_robot):
        first = UniformShooter(point_robot, np.random.default_rng(7))
        second = UniformShooter(point_robot, np.random.default_rng(7))
        for _ in range(5):
            np.testing.assert_array_equal(first.shoot(), second.shoot())


class TestGaussianShooter:
    def test_centered_and_clipped(self, point_robot):
        center = np.array([1.5, -1.5])
        shooter = GaussianShooter(point_robot, np.random.default_rng(0), center=center, sigma=0.05)
        samples = np.array([shooter.shoot() for _ in range(500)])
        assert np.all(samples >= -2.0)
        assert np.all(samples <= 2.0)
        np.testing.assert_allclose(samples.mean(axis=0), center, atol=0.05)

    def test_defaults_to_neutral_configuration(self, point_robot):
        shooter = GaussianShooter(point_robot, np.random.default_rng(0), sigma=0.01)
        np.testing.assert_allclose(shooter.shoot(), [0.0, 0.0], atol=0.2)

    def test_sigma_must_be_positive(self, point_robot):
        with pytest.raises(InvalidArgumentError):
            GaussianShooter(point_robot, np.random.default_rng(0), sigma=0.0)


class TestStraightSteering:
    def test_straight_path(self, point_robot):
        path = StraightSteeringMethod(point_robot).steer(np.zeros(2), np.array([1.0, 1.0]))
        assert path.length == pytest.approx(np.sqrt(2.0))

    def test_out_of_bounds(self, point_robot):
        steering = StraightSteeringMethod(point_robot)
        assert steering.steer(np.zeros(2), np.array([2.5, 0.0])) is None
        assert steering.steer(np.array([-2.5, 0.0]), np.zeros(2)) is None
