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

"""Tests for ConstraintStack and StackedConstraints."""

import numpy as np
import pytest

from conplan.constants import PRIORITY_WEIGHT
from conplan.constraints.registry import ConstraintRegistry
from conplan.constraints.stack import ConstraintStack
from conplan.spec import LengthMismatchError, UnknownConstraintError


@pytest.fixture
def registry(point_robot):
    registry = ConstraintRegistry(point_robot)
    registry.create_locked_joint("lock_x", "x", [0.5])
    registry.create_locked_joint("lock_y", "y", [-0.5])
    registry.create_configuration_constraint("origin", [0.0, 0.0])
    return registry


# =============================================================================
# Stack Content
# =============================================================================


class TestConstraintStack:
    def test_set_orders_by_priority_then_registration(self, registry):
        stack = ConstraintStack(registry)
        stack.set("proj", ["origin", "lock_y", "lock_x"], [1, 0, 0])
        assert stack.label == "proj"
        assert stack.names() == ["lock_x", "lock_y", "origin"]

    def test_set_replaces_content(self, registry):
        stack = ConstraintStack(registry)
        stack.set("first", ["lock_x"], [0])
        stack.set("second", ["lock_y"], [0])
        assert stack.names() == ["lock_y"]

    def test_length_mismatch_leaves_stack_unchanged(self, registry):
        stack = ConstraintStack(registry)
        stack.set("proj", ["lock_x"], [0])
        with pytest.raises(LengthMismatchError):
            stack.set("other", ["lock_x", "lock_y"], [0])
        assert stack.label == "proj"
        assert stack.names() == ["lock_x"]

    def test_unknown_constraint_leaves_stack_unchanged(self, registry):
        stack = ConstraintStack(registry)
        stack.set("proj", ["lock_x"], [0])
        with pytest.raises(UnknownConstraintError):
            stack.set("other", ["lock_y", "missing"], [0, 0])
        assert stack.names() == ["lock_x"]

    def test_push_updates_priority(self, registry):
        stack = ConstraintStack(registry)
        stack.push("lock_x", 2)
        stack.push("lock_y", 1)
        assert stack.names() == ["lock_y", "lock_x"]
        stack.push("lock_x", 0)
        assert stack.names() == ["lock_x", "lock_y"]
        assert len(stack) == 2

    def test_clear(self, registry):
        stack = ConstraintStack(registry)
        stack.set("proj", ["lock_x"], [0])
        stack.clear()
        assert stack.is_empty()
        assert stack.label == ""


# =============================================================================
# Evaluation
# =============================================================================


class TestStackedConstraints:
    def test_levels(self, registry, point_robot):
        stack = ConstraintStack(registry)
        stack.set("proj", ["lock_x", "lock_y", "origin"], [0, 0, 3])
        stacked = stack.snapshot(point_robot)
        assert stacked.levels == [[0, 1], [2]]
        assert stacked.output_size == 4

    def test_value_and_jacobian_weights_lower_levels(self, registry, point_robot):
        stack = ConstraintStack(registry)
        stack.set("proj", ["lock_x", "origin"], [0, 1])
        value, jacobian = stack.snapshot(point_robot).value_and_jacobian(np.array([1.0, 2.0]))
        w = 1.0 / PRIORITY_WEIGHT
        np.testing.assert_allclose(value, [0.5, w * 1.0, w * 2.0])
        np.testing.assert_allclose(jacobian, [[1.0, 0.0], [w, 0.0], [0.0, w]])

    def test_empty_stack(self, registry, point_robot):
        stacked = ConstraintStack(registry).snapshot(point_robot)
        value, jacobian = stacked.value_and_jacobian(np.zeros(2))
        assert value.shape == (0,)
        assert jacobian.shape == (0, 2)
        assert stacked.is_satisfied(np.zeros(2), 1e-6)

    def test_non_constant_rhs_uses_reference(self, registry, point_robot):
        registry.set_constant_right_hand_side("lock_x", False)
        stack = ConstraintStack(registry)
        stack.set("proj", ["lock_x"], [0])
        stacked = stack.snapshot(point_robot, reference=np.array([1.5, 0.0]))
        np.testing.assert_allclose(stacked.residual(np.array([1.5, 1.0])), [0.0])
        np.testing.assert_allclose(stacked.residual(np.array([1.0, 1.0])), [-0.5])

    def test_non_constant_rhs_without_reference(self, registry, point_robot):
        registry.set_constant_right_hand_side("lock_x", False)
        stack = ConstraintStack(registry)
        stack.set("proj", ["lock_x"], [0])
        np.testing.assert_allclose(stack.snapshot(point_robot).residual(np.array([0.5, 0.0])), [0.0])

    def test_passive_dofs_zero_jacobian_columns(self, registry, point_robot):
        registry.add_passive_dofs("origin", ["y"])
        stack = ConstraintStack(registry)
        stack.set("proj", ["origin"], [0])
        _, jacobian = stack.snapshot(point_robot).value_and_jacobian(np.zeros(2))
        np.testing.assert_array_equal(jacobian, [[1.0, 0.0], [0.0, 0.0]])

    def test_is_satisfied_per_level(self, registry, point_robot):
        stack = ConstraintStack(registry)
        stack.set("proj", ["lock_x", "lock_y"], [0, 1])
        stacked = stack.snapshot(point_robot)
        assert stacked.is_satisfied(np.array([0.5, -0.5]), 1e-6)
        assert not stacked.is_satisfied(np.array([0.5, 0.0]), 1e-6)
