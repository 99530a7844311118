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

"""Tests for DiffusingPlanner."""

import threading

import numpy as np
import pytest

from conplan.planners.diffusing_planner import DiffusingPlanner
from conplan.spec import StepStatus

MAX_STEPS = 2000


def _setup(ctx, init, goal):
    roadmap = ctx.roadmap
    roadmap.set_init_node(roadmap.add_node(np.asarray(init, dtype=np.float64)))
    roadmap.add_goal_node(roadmap.add_node(np.asarray(goal, dtype=np.float64)))


def _run(planner, cancel):
    planner.start()
    for _ in range(MAX_STEPS):
        status = planner.one_step(cancel)
        if status != StepStatus.PROGRESS:
            return status
    return StepStatus.PROGRESS


def test_name(make_context):
    assert DiffusingPlanner(make_context()).get_name() == "Diffusing"


def test_direct_connection_solves_immediately(make_context):
    ctx = make_context()
    _setup(ctx, [-1.0, -1.0], [1.0, -1.0])
    planner = DiffusingPlanner(ctx)
    planner.start()
    assert ctx.roadmap.goal_reached()
    assert planner.one_step(threading.Event()) == StepStatus.SOLVED


def test_cancelled_step_does_nothing(make_context):
    ctx = make_context()
    _setup(ctx, [-1.0, 1.2], [1.0, 1.2])
    planner = DiffusingPlanner(ctx)
    planner.start()
    nodes = ctx.roadmap.number_nodes
    cancel = threading.Event()
    cancel.set()
    assert planner.one_step(cancel) == StepStatus.INTERRUPTED
    assert ctx.roadmap.number_nodes == nodes


@pytest.mark.slow
def test_plans_around_obstacle(make_context):
    ctx = make_context(seed=3)
    _setup(ctx, [-1.0, 1.2], [1.0, 1.2])
    planner = DiffusingPlanner(ctx)
    assert _run(planner, threading.Event()) == StepStatus.SOLVED

    roadmap = ctx.roadmap
    route = roadmap.shortest_path(roadmap.init_node, roadmap.goal_nodes)
    assert route
    for edge_id in route:
        edge = roadmap.edge(edge_id)
        for s in np.linspace(0.0, edge.path.length, 10):
            assert ctx.is_valid(edge.path.config_at_param(s))


def test_steps_grow_roadmap(make_context):
    ctx = make_context(seed=1)
    _setup(ctx, [-1.5, -1.5], [1.5, 1.8])
    planner = DiffusingPlanner(ctx)
    planner.start()
    before = ctx.roadmap.number_nodes
    for _ in range(20):
        planner.one_step(threading.Event())
    assert ctx.roadmap.number_nodes > before
    assert ctx.roadmap.number_edges % 2 == 0
