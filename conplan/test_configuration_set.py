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

"""Tests for ConfigurationSet."""

import numpy as np
import pytest

from conplan.configuration_set import ConfigurationSet
from conplan.spec import InvalidArgumentError


def test_initial_config():
    configs = ConfigurationSet(2)
    assert configs.get_initial_config() is None
    assert not configs.has_initial_config()
    configs.set_initial_config([0.5, 1.0])
    np.testing.assert_array_equal(configs.get_initial_config(), [0.5, 1.0])
    configs.set_initial_config([0.0, 0.0])
    np.testing.assert_array_equal(configs.get_initial_config(), [0.0, 0.0])


def test_goals_keep_insertion_order():
    configs = ConfigurationSet(2)
    configs.add_goal_config([1.0, 0.0])
    configs.add_goal_config([0.0, 1.0])
    goals = configs.get_goal_configs()
    np.testing.assert_array_equal(goals[0], [1.0, 0.0])
    np.testing.assert_array_equal(goals[1], [0.0, 1.0])


def test_reset_goals_is_idempotent():
    configs = ConfigurationSet(2)
    configs.add_goal_config([1.0, 0.0])
    configs.reset_goal_configs()
    configs.reset_goal_configs()
    assert configs.get_goal_configs() == []


@pytest.mark.parametrize("config", [[1.0], [1.0, 2.0, 3.0]])
def test_size_is_checked(config):
    configs = ConfigurationSet(2)
    with pytest.raises(InvalidArgumentError):
        configs.set_initial_config(config)
    with pytest.raises(InvalidArgumentError):
        configs.add_goal_config(config)
    assert configs.get_initial_config() is None
    assert configs.get_goal_configs() == []


def test_copies_in_and_out():
    configs = ConfigurationSet(2)
    q = np.array([0.5, 0.5])
    configs.set_initial_config(q)
    q[0] = 9.0
    out = configs.get_initial_config()
    out[1] = 9.0
    np.testing.assert_array_equal(configs.get_initial_config(), [0.5, 0.5])
