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

"""Named store of constraint specifications."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from conplan.constraints.evaluation import validate_constraint
from conplan.constraints.variants import (
    FULL_MASK_3,
    FULL_MASK_6,
    ComBetweenFeetConstraint,
    ConfigurationConstraint,
    ConvexShapeContactConstraint,
    DistanceBetweenJointsConstraint,
    DistanceJointObjectsConstraint,
    LockedJointConstraint,
    Mask,
    OrientationConstraint,
    PositionConstraint,
    RelativeComConstraint,
    StaticStabilityConstraint,
    TransformationConstraint,
    Vec3,
)
from conplan.spec import (
    DuplicateNameError,
    InvalidArgumentError,
    InvalidGeometryError,
    UnknownConstraintError,
)
from conplan.utils.logging_config import setup_logger

if TYPE_CHECKING:
    from conplan.constraints.variants import Constraint
    from conplan.spec import CollisionCheckerSpec, DeviceModelSpec

logger = setup_logger()


@dataclass(frozen=True)
class ConstraintEntry:
    """A registered constraint.

    Attributes:
        name: Unique name in the registry
        constraint: The constraint variant
        order: Registration index, breaks ties between equal priorities
        output_size: Number of residual rows
        constant_rhs: When False the target is recomputed from a reference configuration
        passive_dofs: Configuration indices the constraint may not move
    """

    name: str
    constraint: Constraint
    order: int
    output_size: int
    constant_rhs: bool = True
    passive_dofs: tuple[int, ...] = ()


class ConstraintRegistry:
    """Constraints by name, validated against a device model on creation.

    Every ``create_*`` method checks the name and the payload before storing
    anything, so a failed call leaves the registry unchanged.
    """

    def __init__(self, model: DeviceModelSpec, world: CollisionCheckerSpec | None = None) -> None:
        self._model = model
        self._world = world
        self._entries: dict[str, ConstraintEntry] = {}
        self._next_order = 0

    # ============= Queries =============

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[ConstraintEntry]:
        return iter(sorted(self._entries.values(), key=lambda e: e.order))

    def names(self) -> list[str]:
        return [entry.name for entry in self]

    def get(self, name: str) -> ConstraintEntry:
        try:
            return self._entries[name]
        except KeyError:
            raise UnknownConstraintError(f"Constraint '{name}' is not registered") from None

    # ============= Creation =============

    def add(self, name: str, constraint: Constraint) -> ConstraintEntry:
        """Register a constraint variant under ``name``."""
        if not name:
            raise InvalidArgumentError("Constraint name must not be empty")
        if name in self._entries:
            raise DuplicateNameError(f"Constraint '{name}' already exists")
        output_size = validate_constraint(constraint, self._model, self._world)
        entry = ConstraintEntry(name, constraint, self._next_order, output_size)
        self._entries[name] = entry
        self._next_order += 1
        logger.debug("Constraint registered", name=name, kind=constraint.kind.name, size=output_size)
        return entry

    def create_orientation_constraint(
        self,
        name: str,
        joint1: str,
        joint2: str,
        target: Sequence[float],
        mask: Mask = FULL_MASK_3,
    ) -> ConstraintEntry:
        if len(target) != 4:
            raise InvalidGeometryError("Orientation target must be a quaternion (x, y, z, w)")
        return self.add(
            name, OrientationConstraint(joint1, joint2, _floats(target), tuple(mask))  # type: ignore[arg-type]
        )

    def create_transformation_constraint(
        self,
        name: str,
        joint1: str,
        joint2: str,
        target: Sequence[float],
        mask: Mask = FULL_MASK_6,
    ) -> ConstraintEntry:
        return self.add(name, TransformationConstraint(joint1, joint2, _floats(target), tuple(mask)))

    def create_position_constraint(
        self,
        name: str,
        joint1: str,
        joint2: str,
        point1: Vec3,
        point2: Vec3,
        mask: Mask = FULL_MASK_3,
    ) -> ConstraintEntry:
        return self.add(
            name,
            PositionConstraint(joint1, joint2, _floats(point1), _floats(point2), tuple(mask)),  # type: ignore[arg-type]
        )

    def create_relative_com_constraint(
        self,
        name: str,
        com_name: str,
        joint: str,
        point: Vec3,
        mask: Mask = FULL_MASK_3,
    ) -> ConstraintEntry:
        return self.add(
            name, RelativeComConstraint(com_name, joint, _floats(point), tuple(mask))  # type: ignore[arg-type]
        )

    def create_com_between_feet_constraint(
        self,
        name: str,
        com_name: str,
        joint_left: str,
        joint_right: str,
        point_left: Vec3,
        point_right: Vec3,
        joint_ref: str,
        mask: Mask = FULL_MASK_3,
    ) -> ConstraintEntry:
        return self.add(
            name,
            ComBetweenFeetConstraint(
                com_name,
                joint_left,
                joint_right,
                _floats(point_left),  # type: ignore[arg-type]
                _floats(point_right),  # type: ignore[arg-type]
                joint_ref,
                tuple(mask),
            ),
        )

    def create_convex_shape_contact_constraint(
        self,
        name: str,
        floor_joints: Sequence[str],
        object_joints: Sequence[str],
        points: Sequence[Vec3],
        object_triangles: Sequence[Sequence[int]],
        floor_triangles: Sequence[Sequence[int]],
    ) -> ConstraintEntry:
        return self.add(
            name,
            ConvexShapeContactConstraint(
                tuple(floor_joints),
                tuple(object_joints),
                tuple(_floats(p) for p in points),  # type: ignore[misc]
                tuple(tuple(int(i) for i in t) for t in object_triangles),  # type: ignore[misc]
                tuple(tuple(int(i) for i in t) for t in floor_triangles),  # type: ignore[misc]
            ),
        )

    def create_static_stability_gravity_constraint(
        self,
        name: str,
        floor_joints: Sequence[str],
        object_joints: Sequence[str],
        points: Sequence[Vec3],
        object_triangles: Sequence[Sequence[int]],
        floor_triangles: Sequence[Sequence[int]],
    ) -> ConstraintEntry:
        """Deprecated alias of ``create_convex_shape_contact_constraint``."""
        logger.warning(
            "create_static_stability_gravity_constraint is deprecated, "
            "use create_convex_shape_contact_constraint",
            name=name,
        )
        return self.create_convex_shape_contact_constraint(
            name, floor_joints, object_joints, points, object_triangles, floor_triangles
        )

    def create_static_stability_constraint(
        self,
        name: str,
        joints: Sequence[str],
        points: Sequence[Vec3],
        normals: Sequence[Vec3],
        com_root_joint: str = "",
    ) -> ConstraintEntry:
        return self.add(
            name,
            StaticStabilityConstraint(
                tuple(joints),
                tuple(_floats(p) for p in points),  # type: ignore[misc]
                tuple(_floats(n) for n in normals),  # type: ignore[misc]
                com_root_joint,
            ),
        )

    def create_configuration_constraint(self, name: str, goal: Sequence[float]) -> ConstraintEntry:
        return self.add(name, ConfigurationConstraint(_floats(goal)))

    def create_distance_between_joint_constraint(
        self, name: str, joint1: str, joint2: str, distance: float
    ) -> ConstraintEntry:
        return self.add(name, DistanceBetweenJointsConstraint(joint1, joint2, float(distance)))

    def create_distance_between_joint_and_objects(
        self, name: str, joint: str, objects: Sequence[str], distance: float
    ) -> ConstraintEntry:
        return self.add(name, DistanceJointObjectsConstraint(joint, tuple(objects), float(distance)))

    def create_locked_joint(self, name: str, joint: str, value: Sequence[float]) -> ConstraintEntry:
        return self.add(name, LockedJointConstraint(joint, _floats(value)))

    def upsert_locked_joint(self, name: str, joint: str, value: Sequence[float]) -> ConstraintEntry:
        """Register a locked joint, or update the value of an existing one with the same name."""
        existing = self._entries.get(name)
        if existing is None:
            return self.create_locked_joint(name, joint, value)
        if not isinstance(existing.constraint, LockedJointConstraint) or existing.constraint.joint != joint:
            raise DuplicateNameError(f"Constraint '{name}' already exists and does not lock '{joint}'")
        constraint = LockedJointConstraint(joint, _floats(value))
        validate_constraint(constraint, self._model, self._world)
        entry = replace(existing, constraint=constraint)
        self._entries[name] = entry
        return entry

    # ============= Flags =============

    def set_constant_right_hand_side(self, name: str, constant: bool) -> None:
        entry = self.get(name)
        self._entries[name] = replace(entry, constant_rhs=bool(constant))

    def get_constant_right_hand_side(self, name: str) -> bool:
        return self.get(name).constant_rhs

    def add_passive_dofs(self, name: str, dof_names: Sequence[str]) -> None:
        """Exclude the dofs of the given joints from what constraint ``name`` may move."""
        entry = self.get(name)
        ranks: list[int] = []
        for dof_name in dof_names:
            if not self._model.has_joint(dof_name):
                raise InvalidGeometryError(f"Joint '{dof_name}' not found")
            rank = self._model.joint_rank(dof_name)
            ranks.extend(range(rank, rank + self._model.joint_size(dof_name)))
        passive = tuple(sorted(set(entry.passive_dofs) | set(ranks)))
        self._entries[name] = replace(entry, passive_dofs=passive)

    def reset(self) -> None:
        self._entries.clear()
        self._next_order = 0


def _floats(values: Sequence[float]) -> tuple[float, ...]:
    return tuple(float(v) for v in values)
