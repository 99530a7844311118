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

"""Constraint variants.

Each variant is a plain frozen record tagged by ``ConstraintKind``. Validation
and evaluation of every variant live in ``conplan.constraints.evaluation``,
keyed by the tag.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, TypeAlias

from conplan.spec import ConstraintKind

Vec3: TypeAlias = tuple[float, float, float]
Mask: TypeAlias = tuple[bool, ...]

FULL_MASK_3: Mask = (True, True, True)
FULL_MASK_6: Mask = (True, True, True, True, True, True)


@dataclass(frozen=True)
class OrientationConstraint:
    """Orientation of joint2 relative to joint1 equals ``target`` (quaternion x, y, z, w)."""

    kind: ClassVar[ConstraintKind] = ConstraintKind.ORIENTATION
    joint1: str
    joint2: str
    target: tuple[float, float, float, float]
    mask: Mask = FULL_MASK_3


@dataclass(frozen=True)
class TransformationConstraint:
    """Placement of joint2 relative to joint1 equals ``target`` (x, y, z, qx, qy, qz, qw)."""

    kind: ClassVar[ConstraintKind] = ConstraintKind.TRANSFORMATION
    joint1: str
    joint2: str
    target: tuple[float, ...]
    mask: Mask = FULL_MASK_6


@dataclass(frozen=True)
class PositionConstraint:
    """``point2`` of joint2 coincides with ``point1`` of joint1, compared in joint1's frame."""

    kind: ClassVar[ConstraintKind] = ConstraintKind.POSITION
    joint1: str
    joint2: str
    point1: Vec3
    point2: Vec3
    mask: Mask = FULL_MASK_3


@dataclass(frozen=True)
class RelativeComConstraint:
    kind: ClassVar[ConstraintKind] = ConstraintKind.RELATIVE_COM
    com_name: str
    joint: str
    point: Vec3
    mask: Mask = FULL_MASK_3


@dataclass(frozen=True)
class ComBetweenFeetConstraint:
    """Centre of mass above the middle of the two feet points, in ``joint_ref``'s frame."""

    kind: ClassVar[ConstraintKind] = ConstraintKind.COM_BETWEEN_FEET
    com_name: str
    joint_left: str
    joint_right: str
    point_left: Vec3
    point_right: Vec3
    joint_ref: str
    mask: Mask = FULL_MASK_3


@dataclass(frozen=True)
class ConvexShapeContactConstraint:
    """One object triangle lies flat on one floor triangle.

    Triangle ``i`` of ``floor_triangles`` is attached to ``floor_joints[i]``
    and triangle ``j`` of ``object_triangles`` to ``object_joints[j]``; both
    index into ``points``, given in the frame of the joint they are attached to.
    """

    kind: ClassVar[ConstraintKind] = ConstraintKind.CONVEX_SHAPE_CONTACT
    floor_joints: tuple[str, ...]
    object_joints: tuple[str, ...]
    points: tuple[Vec3, ...]
    object_triangles: tuple[tuple[int, int, int], ...]
    floor_triangles: tuple[tuple[int, int, int], ...]


@dataclass(frozen=True)
class StaticStabilityConstraint:
    """Contacts touch the ground (z = 0) facing up, centre of mass above their centroid."""

    kind: ClassVar[ConstraintKind] = ConstraintKind.STATIC_STABILITY
    joints: tuple[str, ...]
    points: tuple[Vec3, ...]
    normals: tuple[Vec3, ...]
    com_root_joint: str = ""


@dataclass(frozen=True)
class ConfigurationConstraint:
    kind: ClassVar[ConstraintKind] = ConstraintKind.CONFIGURATION
    goal: tuple[float, ...]


@dataclass(frozen=True)
class DistanceBetweenJointsConstraint:
    kind: ClassVar[ConstraintKind] = ConstraintKind.DISTANCE_BETWEEN_JOINTS
    joint1: str
    joint2: str
    distance: float


@dataclass(frozen=True)
class DistanceJointObjectsConstraint:
    """Distance from the joint origin to the closest of ``objects``."""

    kind: ClassVar[ConstraintKind] = ConstraintKind.DISTANCE_JOINT_OBJECTS
    joint: str
    objects: tuple[str, ...]
    distance: float


@dataclass(frozen=True)
class LockedJointConstraint:
    kind: ClassVar[ConstraintKind] = ConstraintKind.LOCKED_JOINT
    joint: str
    value: tuple[float, ...]


Constraint: TypeAlias = (
    OrientationConstraint
    | TransformationConstraint
    | PositionConstraint
    | RelativeComConstraint
    | ComBetweenFeetConstraint
    | ConvexShapeContactConstraint
    | StaticStabilityConstraint
    | ConfigurationConstraint
    | DistanceBetweenJointsConstraint
    | DistanceJointObjectsConstraint
    | LockedJointConstraint
)
