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

"""Tests for the roadmap file format."""

import json

import numpy as np
import pytest

from conplan.paths.path import PathVector
from conplan.roadmap.roadmap import Roadmap
from conplan.roadmap.roadmap_io import read_roadmap, save_roadmap
from conplan.spec import EdgeDirection, InvalidArgumentError, IOFailureError


@pytest.fixture
def roadmap():
    roadmap = Roadmap(config_size=2)
    a = roadmap.add_node(np.array([0.0, 0.0]))
    b = roadmap.add_node(np.array([1.0, 0.5]))
    c = roadmap.add_node(np.array([-1.0, 2.0]))
    roadmap.add_node(np.array([3.0, 3.0]))
    path = PathVector.from_waypoints([roadmap.node(a), np.array([0.5, 0.0]), roadmap.node(b)])
    roadmap.add_edge(a, b, path, path_id=4, direction=EdgeDirection.BOTH_WAYS)
    roadmap.add_edge(c, a, PathVector.from_waypoints([roadmap.node(c), roadmap.node(a)]))
    roadmap.set_init_node(a)
    roadmap.add_goal_node(c)
    return roadmap


def test_round_trip(roadmap, tmp_path):
    filename = tmp_path / "roadmap.json"
    save_roadmap(roadmap, filename)
    loaded = read_roadmap(filename, config_size=2)

    assert loaded.number_nodes == roadmap.number_nodes
    assert loaded.number_edges == roadmap.number_edges
    assert loaded.components() == roadmap.components()
    for i in range(roadmap.number_nodes):
        np.testing.assert_array_equal(loaded.node(i), roadmap.node(i))
        assert loaded.connected_component_of_node(i) == roadmap.connected_component_of_node(i)
    for original, copy in zip(roadmap.edges(), loaded.edges()):
        assert (copy.from_node, copy.to_node, copy.path_id) == (
            original.from_node,
            original.to_node,
            original.path_id,
        )
        assert copy.path.length == pytest.approx(original.path.length)
    assert loaded.init_node == roadmap.init_node
    assert loaded.goal_nodes == roadmap.goal_nodes


def test_file_layout(roadmap, tmp_path):
    filename = tmp_path / "roadmap.json"
    save_roadmap(roadmap, filename)
    document = json.loads(filename.read_text())
    assert document["format"] == "conplan-roadmap"
    assert document["version"] == 1
    assert document["edges"][1]["from"] == 1
    assert document["edges"][1]["to"] == 0
    assert document["components"] == [[0, 1, 2], [3]]


def test_empty_roadmap(tmp_path):
    filename = tmp_path / "empty.json"
    save_roadmap(Roadmap(3), filename)
    loaded = read_roadmap(filename, config_size=3)
    assert loaded.number_nodes == 0
    assert loaded.init_node is None


class TestReadFailures:
    def test_missing_file(self, tmp_path):
        with pytest.raises(IOFailureError):
            read_roadmap(tmp_path / "missing.json", config_size=2)

    def test_not_json(self, tmp_path):
        filename = tmp_path / "garbage.json"
        filename.write_text("this is not a roadmap")
        with pytest.raises(IOFailureError):
            read_roadmap(filename, config_size=2)

    def test_wrong_format_tag(self, roadmap, tmp_path):
        filename = tmp_path / "roadmap.json"
        save_roadmap(roadmap, filename)
        document = json.loads(filename.read_text())
        document["format"] = "other"
        filename.write_text(json.dumps(document))
        with pytest.raises(IOFailureError):
            read_roadmap(filename, config_size=2)

    def test_inconsistent_components(self, roadmap, tmp_path):
        filename = tmp_path / "roadmap.json"
        save_roadmap(roadmap, filename)
        document = json.loads(filename.read_text())
        document["components"] = [[0, 1, 2, 3]]
        filename.write_text(json.dumps(document))
        with pytest.raises(IOFailureError):
            read_roadmap(filename, config_size=2)

    def test_edge_to_missing_node(self, roadmap, tmp_path):
        filename = tmp_path / "roadmap.json"
        save_roadmap(roadmap, filename)
        document = json.loads(filename.read_text())
        document["edges"][0]["to"] = 17
        filename.write_text(json.dumps(document))
        with pytest.raises(IOFailureError):
            read_roadmap(filename, config_size=2)

    def test_config_size_mismatch(self, roadmap, tmp_path):
        filename = tmp_path / "roadmap.json"
        save_roadmap(roadmap, filename)
        with pytest.raises(InvalidArgumentError):
            read_roadmap(filename, config_size=3)


def test_save_to_missing_directory(roadmap, tmp_path):
    with pytest.raises(IOFailureError):
        save_roadmap(roadmap, tmp_path / "missing" / "roadmap.json")
