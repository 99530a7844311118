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

from collections.abc import Sequence
from functools import reduce

import numpy as np
from scipy.spatial.transform import Rotation as R


def create_transform(translation: Sequence[float], rpy: Sequence[float] = (0.0, 0.0, 0.0)) -> np.ndarray:
    """
    Create a 4x4 transformation matrix from a translation and roll/pitch/yaw.

    Args:
        translation: Translation vector [x, y, z] in meters
        rpy: Euler angles [rx, ry, rz] in radians (XYZ convention)

    Returns:
        4x4 transformation matrix
    """
    T = np.eye(4)
    T[0:3, 3] = np.asarray(translation, dtype=np.float64)

    if np.linalg.norm(rpy) > 1e-12:
        T[0:3, 0:3] = R.from_euler("xyz", rpy).as_matrix()

    return T


def transform_from_pose7(pose: Sequence[float]) -> np.ndarray:
    """
    Build a 4x4 transform from [x, y, z, qx, qy, qz, qw].
    """
    pose = np.asarray(pose, dtype=np.float64)
    if pose.shape != (7,):
        raise ValueError(f"Expected 7 values (translation + quaternion), got {pose.shape}")
    T = np.eye(4)
    T[0:3, 3] = pose[:3]
    T[0:3, 0:3] = R.from_quat(pose[3:]).as_matrix()
    return T


def rotation_from_quaternion(quat_xyzw: Sequence[float]) -> np.ndarray:
    """3x3 rotation matrix of a (not necessarily normalized) quaternion [x, y, z, w]."""
    quat = np.asarray(quat_xyzw, dtype=np.float64)
    if quat.shape != (4,) or np.linalg.norm(quat) < 1e-12:
        raise ValueError("Expected a non-zero quaternion [x, y, z, w]")
    return R.from_quat(quat).as_matrix()


def rotation_log(rotation: np.ndarray) -> np.ndarray:
    """Rotation vector (axis * angle) of a 3x3 rotation matrix."""
    return R.from_matrix(rotation).as_rotvec()


def invert_transform(T: np.ndarray) -> np.ndarray:
    """Inverse of a rigid 4x4 transform, using the transpose of its rotation."""
    Rot = T[:3, :3]
    t = T[:3, 3]

    T_inv = np.eye(4)
    T_inv[:3, :3] = Rot.T
    T_inv[:3, 3] = -Rot.T @ t

    return T_inv


def compose_transforms(*transforms: np.ndarray) -> np.ndarray:
    """T1 @ T2 @ ... @ Tn, identity when empty."""
    return reduce(np.matmul, transforms, np.eye(4))


def transform_point(T: np.ndarray, point: Sequence[float]) -> np.ndarray:
    return T[:3, :3] @ np.asarray(point, dtype=np.float64) + T[:3, 3]


def axis_rotation(axis: Sequence[float], angle: float) -> np.ndarray:
    """3x3 rotation of ``angle`` radians about a unit ``axis``."""
    axis = np.asarray(axis, dtype=np.float64)
    return R.from_rotvec(axis * angle).as_matrix()
