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

"""Tests for constraint validation and evaluation."""

import numpy as np
import pytest

from conplan.constraints.evaluation import (
    constraint_jacobian,
    constraint_value,
    validate_constraint,
)
from conplan.constraints.variants import (
    ConfigurationConstraint,
    ConvexShapeContactConstraint,
    DistanceBetweenJointsConstraint,
    DistanceJointObjectsConstraint,
    LockedJointConstraint,
    OrientationConstraint,
    PositionConstraint,
    RelativeComConstraint,
    StaticStabilityConstraint,
)
from conplan.spec import InvalidArgumentError, InvalidGeometryError

# =============================================================================
# Validation
# =============================================================================


class TestValidateConstraint:
    def test_output_sizes(self, planar_arm):
        assert validate_constraint(LockedJointConstraint("elbow", (0.5,)), planar_arm) == 1
        assert validate_constraint(ConfigurationConstraint((0.0, 0.0)), planar_arm) == 2
        masked = PositionConstraint("", "elbow", (0, 0, 0), (1, 0, 0), (True, False, True))
        assert validate_constraint(masked, planar_arm) == 2

    def test_unknown_joint(self, planar_arm):
        with pytest.raises(InvalidGeometryError, match="wrist"):
            validate_constraint(LockedJointConstraint("wrist", (0.0,)), planar_arm)

    def test_world_frame_not_allowed_for_locked_joint(self, planar_arm):
        with pytest.raises(InvalidGeometryError):
            validate_constraint(LockedJointConstraint("", (0.0,)), planar_arm)

    def test_wrong_mask_length(self, planar_arm):
        c = OrientationConstraint("", "elbow", (0.0, 0.0, 0.0, 1.0), (True, True))
        with pytest.raises(InvalidGeometryError, match="Mask"):
            validate_constraint(c, planar_arm)

    def test_configuration_goal_size(self, planar_arm):
        with pytest.raises(InvalidArgumentError):
            validate_constraint(ConfigurationConstraint((0.0, 0.0, 0.0)), planar_arm)

    def test_locked_value_size(self, planar_arm):
        with pytest.raises(InvalidGeometryError):
            validate_constraint(LockedJointConstraint("elbow", (0.0, 1.0)), planar_arm)

    def test_negative_distance(self, planar_arm):
        with pytest.raises(InvalidArgumentError):
            validate_constraint(DistanceBetweenJointsConstraint("shoulder", "elbow", -1.0), planar_arm)

    def test_unknown_object(self, point_robot, point_world):
        c = DistanceJointObjectsConstraint("y", ("table",), 0.1)
        with pytest.raises(InvalidGeometryError, match="table"):
            validate_constraint(c, point_robot, point_world)

    def test_degenerate_triangle(self, planar_arm):
        points = ((0, 0, 0), (1, 0, 0), (2, 0, 0), (0, 1, 0))
        c = ConvexShapeContactConstraint(("",), ("elbow",), points, ((0, 1, 3),), ((0, 1, 2),))
        with pytest.raises(InvalidGeometryError, match="Degenerate"):
            validate_constraint(c, planar_arm)

    def test_static_stability_size(self, planar_arm):
        c = StaticStabilityConstraint(
            ("shoulder", "elbow"), ((0, 0, 0), (0, 0, 0)), ((0, 0, 1), (0, 0, 1))
        )
        assert validate_constraint(c, planar_arm) == 6

    def test_static_stability_zero_normal(self, planar_arm):
        c = StaticStabilityConstraint(("shoulder",), ((0, 0, 0),), ((0, 0, 0),))
        with pytest.raises(InvalidGeometryError):
            validate_constraint(c, planar_arm)


# =============================================================================
# Values
# =============================================================================


class TestConstraintValue:
    def test_locked_joint(self, planar_arm):
        c = LockedJointConstraint("elbow", (0.5,))
        np.testing.assert_allclose(constraint_value(c, planar_arm, None, np.array([0.1, 0.2])), [-0.3])

    def test_position_of_tip(self, planar_arm):
        c = PositionConstraint("", "elbow", (2.0, 0.0, 0.0), (1.0, 0.0, 0.0))
        np.testing.assert_allclose(constraint_value(c, planar_arm, None, np.zeros(2)), 0.0, atol=1e-12)
        value = constraint_value(c, planar_arm, None, np.array([np.pi / 2, 0.0]))
        np.testing.assert_allclose(value, [-2.0, 2.0, 0.0], atol=1e-12)

    def test_orientation(self, planar_arm):
        c = OrientationConstraint("", "elbow", (0.0, 0.0, 0.0, 1.0))
        value = constraint_value(c, planar_arm, None, np.array([0.2, 0.1]))
        np.testing.assert_allclose(value, [0.0, 0.0, 0.3], atol=1e-9)

    def test_relative_com(self, planar_arm):
        c = RelativeComConstraint("", "shoulder", (1.0, 0.0, 0.0))
        np.testing.assert_allclose(constraint_value(c, planar_arm, None, np.zeros(2)), 0.0, atol=1e-12)

    def test_distance_between_joints(self, planar_arm):
        c = DistanceBetweenJointsConstraint("shoulder", "elbow", 0.25)
        np.testing.assert_allclose(constraint_value(c, planar_arm, None, np.zeros(2)), [0.75])

    def test_distance_to_objects(self, point_robot, point_world):
        c = DistanceJointObjectsConstraint("y", ("ball",), 0.5)
        value = constraint_value(c, point_robot, point_world, np.zeros(2))
        np.testing.assert_allclose(value, [0.4], atol=1e-12)


# =============================================================================
# Jacobians
# =============================================================================


class TestConstraintJacobian:
    def test_locked_joint_is_analytic(self, planar_arm):
        J = constraint_jacobian(LockedJointConstraint("elbow", (0.0,)), planar_arm, None, np.zeros(2))
        np.testing.assert_array_equal(J, [[0.0, 1.0]])

    def test_configuration_is_identity(self, point_robot):
        J = constraint_jacobian(ConfigurationConstraint((1.0, 1.0)), point_robot, None, np.zeros(2))
        np.testing.assert_array_equal(J, np.eye(2))

    def test_finite_difference_position(self, planar_arm):
        c = PositionConstraint("", "elbow", (2.0, 0.0, 0.0), (1.0, 0.0, 0.0))
        J = constraint_jacobian(c, planar_arm, None, np.zeros(2))
        np.testing.assert_allclose(J, [[0.0, 0.0], [2.0, 1.0], [0.0, 0.0]], atol=1e-6)
