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

import threading

import numpy as np
import pytest

from conplan.model.kinematic_chain import KinematicChain
from conplan.model.obstacle_world import Obstacle, ObstacleWorld

_seen_threads = set()
_seen_threads_lock = threading.RLock()

_skip_for = ["slow"]


def pytest_configure(config):
    config.addinivalue_line("markers", "slow: long running planning scenario")


@pytest.fixture(autouse=True)
def monitor_threads(request):
    # Skip monitoring for tests marked with specified markers
    if any(request.node.get_closest_marker(marker) for marker in _skip_for):
        yield
        return

    yield

    threads = [t for t in threading.enumerate() if t.name != "MainThread" and not t.daemon]

    if not threads:
        return

    with _seen_threads_lock:
        new_leaks = [t for t in threads if t.ident not in _seen_threads]
        for t in threads:
            _seen_threads.add(t.ident)

    if not new_leaks:
        return

    thread_names = [t.name for t in new_leaks]

    pytest.fail(
        f"Non-closed threads before or during this test. The thread names: {thread_names}. "
        "Please look at the first test that fails and fix that."
    )


@pytest.fixture
def point_robot():
    """Point moving in the plane: prismatic joints x and y, both bounded to [-2, 2]."""
    robot = KinematicChain("point")
    robot.add_joint("x", "prismatic", axis=(1, 0, 0), bounds=(-2.0, 2.0))
    robot.add_joint("y", "prismatic", parent="x", axis=(0, 1, 0), bounds=(-2.0, 2.0))
    return robot


@pytest.fixture
def point_world(point_robot):
    """Obstacle world with a ball of radius 0.3 at (0, 1.2).

    The robot occupies the segment from (x, 0) to (x, y), so the straight
    line from (-1, 1.2) to (1, 1.2) hits the ball while y = -1 stays free.
    """
    world = ObstacleWorld(point_robot)
    world.add_obstacle(Obstacle.sphere("ball", (0.0, 1.2, 0.0), 0.3))
    return world


@pytest.fixture
def planar_arm():
    """Two-link planar arm: revolute joints about z, links of length 1 (tip at elbow + (1, 0, 0))."""
    robot = KinematicChain("arm")
    robot.add_joint(
        "shoulder", "revolute", axis=(0, 0, 1), bounds=(-np.pi, np.pi), mass=1.0, local_com=(0.5, 0.0, 0.0)
    )
    robot.add_joint(
        "elbow",
        "revolute",
        parent="shoulder",
        translation=(1.0, 0.0, 0.0),
        axis=(0, 0, 1),
        bounds=(-np.pi, np.pi),
        mass=1.0,
        local_com=(0.5, 0.0, 0.0),
    )
    return robot
