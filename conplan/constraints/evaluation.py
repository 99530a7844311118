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

"""
Constraint Evaluation

Validation, value and Jacobian of every constraint variant, in tables keyed
by ``ConstraintKind``.

## Functions

- validate_constraint(): structural checks against the device model, returns output size
- constraint_value(): residual of a constraint at a configuration
- constraint_jacobian(): derivative of the residual with respect to the configuration

Values already include the constraint's target, so a configuration satisfies
a constraint when its value is zero. Jacobians are analytic for
CONFIGURATION and LOCKED_JOINT and computed by central differences otherwise.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any

import numpy as np

from conplan.constants import FINITE_DIFFERENCE_STEP
from conplan.spec import ConstraintKind, InvalidArgumentError, InvalidGeometryError
from conplan.utils.transform_utils import (
    invert_transform,
    rotation_from_quaternion,
    rotation_log,
    transform_from_pose7,
    transform_point,
)

if TYPE_CHECKING:
    from numpy.typing import NDArray

    from conplan.constraints.variants import Constraint
    from conplan.spec import CollisionCheckerSpec, Configuration, DeviceModelSpec


# =============================================================================
# Validation
# =============================================================================


def _check_joint(model: DeviceModelSpec, name: str, allow_world: bool = True) -> None:
    if name == "" and allow_world:
        return
    if not model.has_joint(name):
        raise InvalidGeometryError(f"Joint '{name}' not found")


def _check_mask(mask: Sequence[bool], size: int) -> int:
    if len(mask) != size:
        raise InvalidGeometryError(f"Mask must have {size} entries, got {len(mask)}")
    return sum(1 for m in mask if m)


def _check_point(point: Sequence[float], label: str) -> None:
    if len(point) != 3:
        raise InvalidGeometryError(f"{label} must have 3 coordinates, got {len(point)}")


def _check_com(model: DeviceModelSpec, name: str) -> None:
    if not model.has_com(name):
        raise InvalidGeometryError(f"Unknown center of mass '{name}'")


def _validate_orientation(c: Any, model: DeviceModelSpec, world: Any) -> int:
    _check_joint(model, c.joint1)
    _check_joint(model, c.joint2)
    try:
        rotation_from_quaternion(c.target)
    except ValueError as e:
        raise InvalidGeometryError(str(e)) from None
    return _check_mask(c.mask, 3)


def _validate_transformation(c: Any, model: DeviceModelSpec, world: Any) -> int:
    _check_joint(model, c.joint1)
    _check_joint(model, c.joint2)
    if len(c.target) != 7 or np.linalg.norm(c.target[3:]) < 1e-12:
        raise InvalidGeometryError("Target must be (x, y, z, qx, qy, qz, qw) with a non-zero quaternion")
    return _check_mask(c.mask, 6)


def _validate_position(c: Any, model: DeviceModelSpec, world: Any) -> int:
    _check_joint(model, c.joint1)
    _check_joint(model, c.joint2)
    _check_point(c.point1, "point1")
    _check_point(c.point2, "point2")
    return _check_mask(c.mask, 3)


def _validate_relative_com(c: Any, model: DeviceModelSpec, world: Any) -> int:
    _check_com(model, c.com_name)
    _check_joint(model, c.joint, allow_world=False)
    _check_point(c.point, "point")
    return _check_mask(c.mask, 3)


def _validate_com_between_feet(c: Any, model: DeviceModelSpec, world: Any) -> int:
    _check_com(model, c.com_name)
    for joint in (c.joint_left, c.joint_right, c.joint_ref):
        _check_joint(model, joint, allow_world=False)
    _check_point(c.point_left, "point_left")
    _check_point(c.point_right, "point_right")
    return _check_mask(c.mask, 3)


def _check_triangles(
    triangles: Sequence[Sequence[int]],
    joints: Sequence[str],
    points: Sequence[Sequence[float]],
    label: str,
) -> None:
    if not triangles:
        raise InvalidGeometryError(f"At least one {label} triangle is required")
    if len(triangles) != len(joints):
        raise InvalidGeometryError(f"Expected one joint per {label} triangle")
    for triangle in triangles:
        if len(triangle) != 3 or any(i < 0 or i >= len(points) for i in triangle):
            raise InvalidGeometryError(f"Invalid {label} triangle {tuple(triangle)}")
        a, b, c = (np.asarray(points[i], dtype=np.float64) for i in triangle)
        if np.linalg.norm(np.cross(b - a, c - a)) < 1e-12:
            raise InvalidGeometryError(f"Degenerate {label} triangle {tuple(triangle)}")


def _validate_convex_shape_contact(c: Any, model: DeviceModelSpec, world: Any) -> int:
    for joint in (*c.floor_joints, *c.object_joints):
        _check_joint(model, joint)
    for i, point in enumerate(c.points):
        _check_point(point, f"points[{i}]")
    _check_triangles(c.floor_triangles, c.floor_joints, c.points, "floor")
    _check_triangles(c.object_triangles, c.object_joints, c.points, "object")
    return 3


def _validate_static_stability(c: Any, model: DeviceModelSpec, world: Any) -> int:
    if not c.joints:
        raise InvalidGeometryError("At least one contact is required")
    if not (len(c.joints) == len(c.points) == len(c.normals)):
        raise InvalidGeometryError("joints, points and normals must have the same length")
    for joint in c.joints:
        _check_joint(model, joint, allow_world=False)
    for i, (point, normal) in enumerate(zip(c.points, c.normals, strict=True)):
        _check_point(point, f"points[{i}]")
        _check_point(normal, f"normals[{i}]")
        if np.linalg.norm(normal) < 1e-12:
            raise InvalidGeometryError(f"normals[{i}] must be non-zero")
    _check_com(model, c.com_root_joint)
    return 2 * len(c.joints) + 2


def _validate_configuration(c: Any, model: DeviceModelSpec, world: Any) -> int:
    if len(c.goal) != model.config_size:
        raise InvalidArgumentError(
            f"Goal has {len(c.goal)} values, configuration size is {model.config_size}"
        )
    return model.config_size


def _validate_distance_between_joints(c: Any, model: DeviceModelSpec, world: Any) -> int:
    _check_joint(model, c.joint1)
    _check_joint(model, c.joint2)
    if c.distance < 0.0:
        raise InvalidArgumentError("Distance must be non-negative")
    return 1


def _validate_distance_joint_objects(c: Any, model: DeviceModelSpec, world: Any) -> int:
    _check_joint(model, c.joint, allow_world=False)
    if not c.objects:
        raise InvalidArgumentError("At least one object name is required")
    known = set(world.object_names()) if world is not None else set()
    missing = [name for name in c.objects if name not in known]
    if missing:
        raise InvalidGeometryError(f"Unknown objects: {missing}")
    return 1


def _validate_locked_joint(c: Any, model: DeviceModelSpec, world: Any) -> int:
    _check_joint(model, c.joint, allow_world=False)
    size = model.joint_size(c.joint)
    if len(c.value) != size:
        raise InvalidGeometryError(
            f"Joint '{c.joint}' has {size} dof(s), locked value has {len(c.value)}"
        )
    return size


_VALIDATORS: dict[ConstraintKind, Callable[[Any, Any, Any], int]] = {
    ConstraintKind.ORIENTATION: _validate_orientation,
    ConstraintKind.TRANSFORMATION: _validate_transformation,
    ConstraintKind.POSITION: _validate_position,
    ConstraintKind.RELATIVE_COM: _validate_relative_com,
    ConstraintKind.COM_BETWEEN_FEET: _validate_com_between_feet,
    ConstraintKind.CONVEX_SHAPE_CONTACT: _validate_convex_shape_contact,
    ConstraintKind.STATIC_STABILITY: _validate_static_stability,
    ConstraintKind.CONFIGURATION: _validate_configuration,
    ConstraintKind.DISTANCE_BETWEEN_JOINTS: _validate_distance_between_joints,
    ConstraintKind.DISTANCE_JOINT_OBJECTS: _validate_distance_joint_objects,
    ConstraintKind.LOCKED_JOINT: _validate_locked_joint,
}


def validate_constraint(
    constraint: Constraint,
    model: DeviceModelSpec,
    world: CollisionCheckerSpec | None = None,
) -> int:
    """Check a constraint against the device model. Returns its output size.

    Raises:
        InvalidGeometryError: unknown joints/objects, wrong mask or point sizes
        InvalidArgumentError: other invalid payloads
    """
    return _VALIDATORS[constraint.kind](constraint, model, world)


# =============================================================================
# Evaluation
# =============================================================================


def _masked(values: NDArray[np.float64], mask: Sequence[bool]) -> NDArray[np.float64]:
    return values[np.asarray(mask, dtype=bool)]


def _orientation_value(c: Any, model: DeviceModelSpec, world: Any, q: Configuration) -> NDArray[np.float64]:
    R1 = model.joint_transform(q, c.joint1)[:3, :3]
    R2 = model.joint_transform(q, c.joint2)[:3, :3]
    R_target = rotation_from_quaternion(c.target)
    return _masked(rotation_log(R_target.T @ R1.T @ R2), c.mask)


def _transformation_value(c: Any, model: DeviceModelSpec, world: Any, q: Configuration) -> NDArray[np.float64]:
    T1 = model.joint_transform(q, c.joint1)
    T2 = model.joint_transform(q, c.joint2)
    T_rel = invert_transform(T1) @ T2
    T_target = transform_from_pose7(c.target)
    translation_error = T_rel[:3, 3] - T_target[:3, 3]
    rotation_error = rotation_log(T_target[:3, :3].T @ T_rel[:3, :3])
    return _masked(np.concatenate([translation_error, rotation_error]), c.mask)


def _position_value(c: Any, model: DeviceModelSpec, world: Any, q: Configuration) -> NDArray[np.float64]:
    T1 = model.joint_transform(q, c.joint1)
    T2 = model.joint_transform(q, c.joint2)
    delta = transform_point(T2, c.point2) - transform_point(T1, c.point1)
    return _masked(T1[:3, :3].T @ delta, c.mask)


def _relative_com_value(c: Any, model: DeviceModelSpec, world: Any, q: Configuration) -> NDArray[np.float64]:
    com = model.center_of_mass(q, c.com_name)
    T = model.joint_transform(q, c.joint)
    local = transform_point(invert_transform(T), com)
    return _masked(local - np.asarray(c.point, dtype=np.float64), c.mask)


def _com_between_feet_value(c: Any, model: DeviceModelSpec, world: Any, q: Configuration) -> NDArray[np.float64]:
    com = model.center_of_mass(q, c.com_name)
    left = transform_point(model.joint_transform(q, c.joint_left), c.point_left)
    right = transform_point(model.joint_transform(q, c.joint_right), c.point_right)
    R_ref = model.joint_transform(q, c.joint_ref)[:3, :3]
    return _masked(R_ref.T @ (com - 0.5 * (left + right)), c.mask)


def _triangle_world(
    model: DeviceModelSpec, q: Configuration, joint: str, points: Sequence[Sequence[float]], triangle: Sequence[int]
) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """World vertices (3x3) and unit normal of a triangle attached to a joint."""
    T = model.joint_transform(q, joint)
    vertices = np.array([transform_point(T, points[i]) for i in triangle])
    normal = np.cross(vertices[1] - vertices[0], vertices[2] - vertices[0])
    return vertices, normal / np.linalg.norm(normal)


def _distance_outside_triangle(point: NDArray[np.float64], vertices: NDArray[np.float64]) -> float:
    """Distance from a point lying in the triangle's plane to the triangle (0 inside)."""
    a, b, c = vertices
    normal = np.cross(b - a, c - a)
    inside = True
    for p0, p1 in ((a, b), (b, c), (c, a)):
        if np.dot(np.cross(p1 - p0, point - p0), normal) < 0.0:
            inside = False
            break
    if inside:
        return 0.0
    best = np.inf
    for p0, p1 in ((a, b), (b, c), (c, a)):
        edge = p1 - p0
        t = float(np.clip(np.dot(point - p0, edge) / np.dot(edge, edge), 0.0, 1.0))
        best = min(best, float(np.linalg.norm(point - (p0 + t * edge))))
    return best


def _convex_shape_contact_value(c: Any, model: DeviceModelSpec, world: Any, q: Configuration) -> NDArray[np.float64]:
    floors = [
        _triangle_world(model, q, joint, c.points, triangle)
        for joint, triangle in zip(c.floor_joints, c.floor_triangles, strict=True)
    ]
    objects = [
        _triangle_world(model, q, joint, c.points, triangle)
        for joint, triangle in zip(c.object_joints, c.object_triangles, strict=True)
    ]
    best: NDArray[np.float64] | None = None
    best_score = np.inf
    for obj_vertices, obj_normal in objects:
        centroid = obj_vertices.mean(axis=0)
        for floor_vertices, floor_normal in floors:
            height = float(np.dot(floor_normal, centroid - floor_vertices[0]))
            outside = _distance_outside_triangle(centroid - height * floor_normal, floor_vertices)
            alignment = 1.0 + float(np.dot(obj_normal, floor_normal))
            score = abs(height) + outside
            if score < best_score:
                best_score = score
                best = np.array([height, alignment, outside])
    assert best is not None
    return best


def _static_stability_value(c: Any, model: DeviceModelSpec, world: Any, q: Configuration) -> NDArray[np.float64]:
    values: list[float] = []
    contacts = []
    for joint, point, normal in zip(c.joints, c.points, c.normals, strict=True):
        T = model.joint_transform(q, joint)
        p = transform_point(T, point)
        n = T[:3, :3] @ np.asarray(normal, dtype=np.float64)
        n = n / np.linalg.norm(n)
        values.extend([p[2], 1.0 - n[2]])
        contacts.append(p)
    centroid = np.mean(contacts, axis=0)
    com = model.center_of_mass(q, c.com_root_joint)
    values.extend([com[0] - centroid[0], com[1] - centroid[1]])
    return np.asarray(values, dtype=np.float64)


def _configuration_value(c: Any, model: DeviceModelSpec, world: Any, q: Configuration) -> NDArray[np.float64]:
    return q - np.asarray(c.goal, dtype=np.float64)


def _distance_between_joints_value(c: Any, model: DeviceModelSpec, world: Any, q: Configuration) -> NDArray[np.float64]:
    o1 = model.joint_transform(q, c.joint1)[:3, 3]
    o2 = model.joint_transform(q, c.joint2)[:3, 3]
    return np.array([np.linalg.norm(o1 - o2) - c.distance])


def _distance_joint_objects_value(c: Any, model: DeviceModelSpec, world: Any, q: Configuration) -> NDArray[np.float64]:
    origin = model.joint_transform(q, c.joint)[:3, 3]
    closest = min(world.distance_to_object(origin, name) for name in c.objects)
    return np.array([closest - c.distance])


def _locked_joint_value(c: Any, model: DeviceModelSpec, world: Any, q: Configuration) -> NDArray[np.float64]:
    rank = model.joint_rank(c.joint)
    size = model.joint_size(c.joint)
    return q[rank : rank + size] - np.asarray(c.value, dtype=np.float64)


_EVALUATORS: dict[ConstraintKind, Callable[[Any, Any, Any, Any], NDArray[np.float64]]] = {
    ConstraintKind.ORIENTATION: _orientation_value,
    ConstraintKind.TRANSFORMATION: _transformation_value,
    ConstraintKind.POSITION: _position_value,
    ConstraintKind.RELATIVE_COM: _relative_com_value,
    ConstraintKind.COM_BETWEEN_FEET: _com_between_feet_value,
    ConstraintKind.CONVEX_SHAPE_CONTACT: _convex_shape_contact_value,
    ConstraintKind.STATIC_STABILITY: _static_stability_value,
    ConstraintKind.CONFIGURATION: _configuration_value,
    ConstraintKind.DISTANCE_BETWEEN_JOINTS: _distance_between_joints_value,
    ConstraintKind.DISTANCE_JOINT_OBJECTS: _distance_joint_objects_value,
    ConstraintKind.LOCKED_JOINT: _locked_joint_value,
}


def constraint_value(
    constraint: Constraint,
    model: DeviceModelSpec,
    world: CollisionCheckerSpec | None,
    q: Configuration,
) -> NDArray[np.float64]:
    return _EVALUATORS[constraint.kind](constraint, model, world, q)


# =============================================================================
# Jacobians
# =============================================================================


def _configuration_jacobian(c: Any, model: DeviceModelSpec, world: Any, q: Configuration) -> NDArray[np.float64]:
    return np.eye(model.config_size)


def _locked_joint_jacobian(c: Any, model: DeviceModelSpec, world: Any, q: Configuration) -> NDArray[np.float64]:
    rank = model.joint_rank(c.joint)
    size = model.joint_size(c.joint)
    J = np.zeros((size, model.config_size))
    J[:, rank : rank + size] = np.eye(size)
    return J


_ANALYTIC_JACOBIANS: dict[ConstraintKind, Callable[[Any, Any, Any, Any], NDArray[np.float64]]] = {
    ConstraintKind.CONFIGURATION: _configuration_jacobian,
    ConstraintKind.LOCKED_JOINT: _locked_joint_jacobian,
}


def constraint_jacobian(
    constraint: Constraint,
    model: DeviceModelSpec,
    world: CollisionCheckerSpec | None,
    q: Configuration,
) -> NDArray[np.float64]:
    analytic = _ANALYTIC_JACOBIANS.get(constraint.kind)
    if analytic is not None:
        return analytic(constraint, model, world, q)

    evaluate = _EVALUATORS[constraint.kind]
    h = FINITE_DIFFERENCE_STEP
    columns = []
    for j in range(model.config_size):
        q_plus = q.copy()
        q_minus = q.copy()
        q_plus[j] += h
        q_minus[j] -= h
        columns.append(
            (evaluate(constraint, model, world, q_plus) - evaluate(constraint, model, world, q_minus))
            / (2.0 * h)
        )
    if not columns:
        return np.zeros((0, 0))
    return np.stack(columns, axis=1)
