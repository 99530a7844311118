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

"""Roadmap file format.

A roadmap is stored as one JSON document:

    {"format": "conplan-roadmap", "version": 1, "config_size": 2,
     "nodes": [{"id": 0, "config": [...], "component": 0}, ...],
     "edges": [{"id": 0, "from": 0, "to": 1, "path_id": null, "waypoints": [[...], ...]}, ...],
     "components": [[0, 1], ...],
     "init_node": 0, "goal_nodes": [1]}

Reading builds a new Roadmap; the caller swaps it in only when the whole
document was accepted.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from conplan.constants import ROADMAP_FILE_FORMAT, ROADMAP_FILE_VERSION
from conplan.paths.path import PathVector
from conplan.roadmap.roadmap import Roadmap
from conplan.spec import InvalidArgumentError, IOFailureError
from conplan.utils.logging_config import setup_logger

logger = setup_logger()


class NodeRecord(BaseModel):
    id: int = Field(ge=0)
    config: list[float]
    component: int = Field(ge=0)


class EdgeRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(ge=0)
    from_node: int = Field(ge=0, alias="from")
    to_node: int = Field(ge=0, alias="to")
    path_id: int | None = None
    waypoints: list[list[float]] = Field(min_length=1)


class RoadmapDocument(BaseModel):
    format: Literal["conplan-roadmap"]
    version: Literal[1]
    config_size: int = Field(ge=0)
    nodes: list[NodeRecord]
    edges: list[EdgeRecord]
    components: list[list[int]]
    init_node: int | None = None
    goal_nodes: list[int] = Field(default_factory=list)


def to_document(roadmap: Roadmap) -> RoadmapDocument:
    return RoadmapDocument(
        format=ROADMAP_FILE_FORMAT,
        version=ROADMAP_FILE_VERSION,
        config_size=roadmap.config_size,
        nodes=[
            NodeRecord(
                id=i, config=q.tolist(), component=roadmap.connected_component_of_node(i)
            )
            for i, q in enumerate(roadmap.nodes())
        ],
        edges=[
            EdgeRecord(
                id=edge.id,
                from_node=edge.from_node,
                to_node=edge.to_node,
                path_id=edge.path_id,
                waypoints=[q.tolist() for q in edge.path.waypoints()],
            )
            for edge in roadmap.edges()
        ],
        components=roadmap.components(),
        init_node=roadmap.init_node,
        goal_nodes=roadmap.goal_nodes,
    )


def from_document(document: RoadmapDocument) -> Roadmap:
    """Rebuild a roadmap, checking that its partition matches the stored one.

    Raises:
        IOFailureError: the document is inconsistent
    """
    roadmap = Roadmap(document.config_size)
    for expected_id, record in enumerate(document.nodes):
        if record.id != expected_id or len(record.config) != document.config_size:
            raise IOFailureError(f"Invalid node record {record.id}")
        if roadmap.add_node(np.asarray(record.config)) != expected_id:
            raise IOFailureError(f"Duplicate node configuration at node {record.id}")

    for expected_id, record in enumerate(document.edges):
        if record.id != expected_id:
            raise IOFailureError(f"Invalid edge record {record.id}")
        if record.from_node >= roadmap.number_nodes or record.to_node >= roadmap.number_nodes:
            raise IOFailureError(f"Edge {record.id} references a missing node")
        if any(len(q) != document.config_size for q in record.waypoints):
            raise IOFailureError(f"Edge {record.id} has waypoints of the wrong size")
        path = PathVector.from_waypoints([np.asarray(q) for q in record.waypoints])
        roadmap.add_edge(record.from_node, record.to_node, path, record.path_id)

    if roadmap.components() != [sorted(c) for c in document.components]:
        raise IOFailureError("Stored connected components do not match the edges")
    for record in document.nodes:
        if roadmap.connected_component_of_node(record.id) != record.component:
            raise IOFailureError(f"Node {record.id} has an inconsistent component id")

    try:
        if document.init_node is not None:
            roadmap.set_init_node(document.init_node)
        for goal in document.goal_nodes:
            roadmap.add_goal_node(goal)
    except InvalidArgumentError as e:
        raise IOFailureError(str(e)) from None
    return roadmap


def save_roadmap(roadmap: Roadmap, filename: str | Path) -> None:
    path = Path(filename)
    try:
        path.write_text(to_document(roadmap).model_dump_json(by_alias=True, indent=1), encoding="utf-8")
    except OSError as e:
        logger.error("Failed to save roadmap", file=str(path), error=str(e))
        raise IOFailureError(f"Cannot write roadmap to {path}: {e}") from e
    logger.info(
        "Roadmap saved",
        file=str(path),
        nodes=roadmap.number_nodes,
        edges=roadmap.number_edges,
    )


def read_roadmap(filename: str | Path, config_size: int) -> Roadmap:
    """Load a roadmap file.

    Raises:
        IOFailureError: the file cannot be read or is not a valid roadmap document
        InvalidArgumentError: the document's configuration size differs from ``config_size``
    """
    path = Path(filename)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        logger.error("Failed to read roadmap", file=str(path), error=str(e))
        raise IOFailureError(f"Cannot read roadmap from {path}: {e}") from e
    try:
        document = RoadmapDocument.model_validate_json(text)
    except ValidationError as e:
        logger.error("Malformed roadmap file", file=str(path), errors=e.error_count())
        raise IOFailureError(f"Malformed roadmap file {path}") from e
    if document.config_size != config_size:
        raise InvalidArgumentError(
            f"Roadmap configurations have size {document.config_size}, expected {config_size}"
        )
    roadmap = from_document(document)
    logger.info("Roadmap read", file=str(path), nodes=roadmap.number_nodes, edges=roadmap.number_edges)
    return roadmap
