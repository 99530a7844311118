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

"""Roadmap graph with connected-component bookkeeping.

Nodes are configurations, edges are directed local paths between two nodes.
Components are undirected: an edge merges the components of its end nodes
whatever its direction, and every member of the absorbed component is
relabelled.

Node, edge and component ids are dense indices. Component ids are ordered by
the smallest node id they contain, so they change when components merge;
``connected_component_of_node`` always reflects the current partition.
"""

from __future__ import annotations

from dataclasses import dataclass
import heapq
from typing import TYPE_CHECKING

import numpy as np

from conplan.spec import EdgeDirection, InvalidArgumentError, NearestConfig

if TYPE_CHECKING:
    from conplan.paths.path import PathVector
    from conplan.spec import Configuration

# Configurations closer than this are the same node
SAME_NODE_TOLERANCE = 1e-12


@dataclass(frozen=True)
class RoadmapEdge:
    """Directed edge of the roadmap.

    Attributes:
        id: Edge index
        from_node: Id of the start node
        to_node: Id of the end node
        path: Local path from the start to the end configuration
        path_id: Id of the path in the path bank it was built from, if any
    """

    id: int
    from_node: int
    to_node: int
    path: PathVector
    path_id: int | None = None


class Roadmap:
    """Graph of validated configurations and local paths.

    Example:
        roadmap = Roadmap(config_size=2)
        a = roadmap.add_node(np.zeros(2))
        b = roadmap.add_node(np.ones(2))
        roadmap.add_edge(a, b, PathVector.from_waypoints([np.zeros(2), np.ones(2)]))
        roadmap.connected_component_of_node(a) == roadmap.connected_component_of_node(b)  # True
    """

    def __init__(self, config_size: int) -> None:
        self.config_size = config_size
        self._nodes: list[Configuration] = []
        self._edges: list[RoadmapEdge] = []
        self._out_edges: list[list[int]] = []
        # Representative of a component is its smallest node id
        self._representative: list[int] = []
        self._members: dict[int, list[int]] = {}
        self._init_node: int | None = None
        self._goal_nodes: list[int] = []

    # ============= Counts =============

    @property
    def number_nodes(self) -> int:
        return len(self._nodes)

    @property
    def number_edges(self) -> int:
        return len(self._edges)

    @property
    def number_connected_components(self) -> int:
        return len(self._members)

    # ============= Nodes =============

    def add_node(self, config: Configuration) -> int:
        """Insert a node, or return the id of an existing node with the same configuration."""
        q = np.array(config, dtype=np.float64)
        if q.shape != (self.config_size,):
            raise InvalidArgumentError(
                f"Expected a configuration of size {self.config_size}, got {q.shape[0]}"
            )
        existing = self.find_node(q)
        if existing is not None:
            return existing
        node_id = len(self._nodes)
        self._nodes.append(q)
        self._out_edges.append([])
        self._representative.append(node_id)
        self._members[node_id] = [node_id]
        return node_id

    def find_node(self, config: Configuration) -> int | None:
        for node_id, q in enumerate(self._nodes):
            if np.max(np.abs(q - config)) <= SAME_NODE_TOLERANCE:
                return node_id
        return None

    def node(self, node_id: int) -> Configuration:
        return self._nodes[self._require_node(node_id)].copy()

    def nodes(self) -> list[Configuration]:
        return [q.copy() for q in self._nodes]

    # ============= Edges =============

    def add_edge(
        self,
        from_node: int,
        to_node: int,
        path: PathVector,
        path_id: int | None = None,
        direction: EdgeDirection = EdgeDirection.ONE_WAY,
    ) -> list[int]:
        """Insert an edge (two for BOTH_WAYS) and merge the end components.

        Returns:
            Ids of the inserted edges
        """
        self._require_node(from_node)
        self._require_node(to_node)
        edges = [RoadmapEdge(len(self._edges), from_node, to_node, path.copy(), path_id)]
        if direction == EdgeDirection.BOTH_WAYS:
            edges.append(RoadmapEdge(len(self._edges) + 1, to_node, from_node, path.reverse(), path_id))
        for edge in edges:
            self._edges.append(edge)
            self._out_edges[edge.from_node].append(edge.id)
        self._merge(from_node, to_node)
        return [edge.id for edge in edges]

    def edge(self, edge_id: int) -> RoadmapEdge:
        if not 0 <= edge_id < len(self._edges):
            raise InvalidArgumentError(f"Edge {edge_id} does not exist ({len(self._edges)} edges)")
        return self._edges[edge_id]

    def edges(self) -> list[RoadmapEdge]:
        return list(self._edges)

    # ============= Components =============

    def connected_component_of_node(self, node_id: int) -> int:
        representative = self._representative[self._require_node(node_id)]
        return self._component_keys().index(representative)

    def connected_component_of_edge(self, edge_id: int) -> int:
        return self.connected_component_of_node(self.edge(edge_id).from_node)

    def nodes_in_component(self, component: int) -> list[int]:
        keys = self._component_keys()
        if not 0 <= component < len(keys):
            raise InvalidArgumentError(
                f"Connected component {component} does not exist ({len(keys)} components)"
            )
        return sorted(self._members[keys[component]])

    def components(self) -> list[list[int]]:
        """Node ids of every component, in component id order."""
        return [sorted(self._members[key]) for key in self._component_keys()]

    def same_component(self, node1: int, node2: int) -> bool:
        return self._representative[self._require_node(node1)] == self._representative[self._require_node(node2)]

    def _component_keys(self) -> list[int]:
        return sorted(self._members)

    def _merge(self, node1: int, node2: int) -> None:
        key1 = self._representative[node1]
        key2 = self._representative[node2]
        if key1 == key2:
            return
        keep, absorb = min(key1, key2), max(key1, key2)
        absorbed = self._members.pop(absorb)
        for member in absorbed:
            self._representative[member] = keep
        self._members[keep].extend(absorbed)

    # ============= Init / Goal =============

    @property
    def init_node(self) -> int | None:
        return self._init_node

    @property
    def goal_nodes(self) -> list[int]:
        return list(self._goal_nodes)

    def set_init_node(self, node_id: int) -> None:
        self._init_node = self._require_node(node_id)

    def add_goal_node(self, node_id: int) -> None:
        self._require_node(node_id)
        if node_id not in self._goal_nodes:
            self._goal_nodes.append(node_id)

    def reset_goal_nodes(self) -> None:
        self._goal_nodes.clear()

    def goal_reached(self) -> bool:
        """Whether a goal node is in the init node's component."""
        if self._init_node is None:
            return False
        return any(self.same_component(self._init_node, goal) for goal in self._goal_nodes)

    # ============= Search =============

    def nearest_node(self, config: Configuration, component: int = -1) -> NearestConfig:
        """Closest node to ``config`` in a component, or in the whole roadmap when negative."""
        if component >= 0:
            candidates = self.nodes_in_component(component)
        else:
            candidates = list(range(len(self._nodes)))
        return self.nearest_among(config, candidates)

    def nearest_among(self, config: Configuration, candidates: list[int]) -> NearestConfig:
        if not candidates:
            raise InvalidArgumentError("Roadmap is empty")
        q = np.asarray(config, dtype=np.float64)
        distances = [float(np.linalg.norm(self._nodes[i] - q)) for i in candidates]
        best = int(np.argmin(distances))
        node_id = candidates[best]
        return NearestConfig(self._nodes[node_id].copy(), distances[best], node_id)

    def shortest_path(self, start: int, goals: list[int]) -> list[int] | None:
        """Edge ids of the shortest directed route from ``start`` to any goal node."""
        self._require_node(start)
        targets = set(goals)
        if start in targets:
            return []
        distance = {start: 0.0}
        came_from: dict[int, int] = {}
        queue: list[tuple[float, int]] = [(0.0, start)]
        while queue:
            cost, node = heapq.heappop(queue)
            if cost > distance.get(node, np.inf):
                continue
            if node in targets:
                route = []
                while node != start:
                    edge_id = came_from[node]
                    route.append(edge_id)
                    node = self._edges[edge_id].from_node
                return list(reversed(route))
            for edge_id in self._out_edges[node]:
                edge = self._edges[edge_id]
                new_cost = cost + edge.path.length
                if new_cost < distance.get(edge.to_node, np.inf):
                    distance[edge.to_node] = new_cost
                    came_from[edge.to_node] = edge_id
                    heapq.heappush(queue, (new_cost, edge.to_node))
        return None

    # ============= Reset =============

    def replace_contents(self, other: Roadmap) -> None:
        """Take over the nodes, edges, components and init/goal nodes of ``other``.

        The roadmap keeps its identity, so every holder of a reference to it
        sees the new content.
        """
        if other.config_size != self.config_size:
            raise InvalidArgumentError(
                f"Roadmap configurations have size {other.config_size}, expected {self.config_size}"
            )
        self._nodes = [q.copy() for q in other._nodes]
        self._edges = list(other._edges)
        self._out_edges = [list(out) for out in other._out_edges]
        self._representative = list(other._representative)
        self._members = {key: list(members) for key, members in other._members.items()}
        self._init_node = other._init_node
        self._goal_nodes = list(other._goal_nodes)

    # ============= Reset =============

    def clear(self) -> None:
        self._nodes.clear()
        self._edges.clear()
        self._out_edges.clear()
        self._representative.clear()
        self._members.clear()
        self._init_node = None
        self._goal_nodes.clear()

    def _require_node(self, node_id: int) -> int:
        if not 0 <= node_id < len(self._nodes):
            raise InvalidArgumentError(f"Node {node_id} does not exist ({len(self._nodes)} nodes)")
        return int(node_id)
