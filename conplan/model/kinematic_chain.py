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

"""Tree of one-dof joints implementing DeviceModelSpec.

Joints are added parent first, so insertion order is a valid order for
forward kinematics and also defines the configuration layout.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np

from conplan.spec import InvalidArgumentError, InvalidGeometryError
from conplan.utils.transform_utils import axis_rotation, create_transform

if TYPE_CHECKING:
    from numpy.typing import NDArray

    from conplan.spec import Configuration

JOINT_TYPES = ("revolute", "prismatic")

WORLD_FRAME = ""


@dataclass
class JointModel:
    """One-dof joint of a kinematic tree.

    Attributes:
        name: Unique joint name
        joint_type: 'revolute' or 'prismatic'
        parent: Parent joint name ('' for the world frame)
        placement: 4x4 transform of the joint frame in its parent frame at q = 0
        axis: Unit motion axis in the joint frame
        lower: Lower bound of the dof
        upper: Upper bound of the dof
        mass: Mass of the link carried by the joint
        local_com: Centre of mass of that link in the joint frame
    """

    name: str
    joint_type: str
    parent: str
    placement: NDArray[np.float64]
    axis: NDArray[np.float64]
    lower: float
    upper: float
    mass: float = 0.0
    local_com: NDArray[np.float64] = field(default_factory=lambda: np.zeros(3))

    def motion(self, value: float) -> NDArray[np.float64]:
        T = np.eye(4)
        if self.joint_type == "revolute":
            T[:3, :3] = axis_rotation(self.axis, value)
        else:
            T[:3, 3] = self.axis * value
        return T


class KinematicChain:
    """Serial or branching chain of revolute and prismatic joints.

    Example:
        robot = KinematicChain()
        robot.add_joint("x", "prismatic", axis=(1, 0, 0), bounds=(-2, 2))
        robot.add_joint("y", "prismatic", parent="x", axis=(0, 1, 0), bounds=(-2, 2))
        robot.joint_transform(np.array([0.5, 1.0]), "y")[:3, 3]  # -> [0.5, 1.0, 0.0]
    """

    def __init__(self, name: str = "robot") -> None:
        self.name = name
        self._joints: list[JointModel] = []
        self._index: dict[str, int] = {}
        self._partial_coms: dict[str, list[str]] = {}

    # ============= Construction =============

    def add_joint(
        self,
        name: str,
        joint_type: str,
        parent: str = WORLD_FRAME,
        translation: Sequence[float] = (0.0, 0.0, 0.0),
        rpy: Sequence[float] = (0.0, 0.0, 0.0),
        axis: Sequence[float] = (0.0, 0.0, 1.0),
        bounds: tuple[float, float] = (-np.pi, np.pi),
        mass: float = 0.0,
        local_com: Sequence[float] = (0.0, 0.0, 0.0),
    ) -> JointModel:
        if not name:
            raise InvalidArgumentError("Joint name must not be empty")
        if name in self._index:
            raise InvalidArgumentError(f"Joint '{name}' already exists")
        if joint_type not in JOINT_TYPES:
            raise InvalidArgumentError(
                f"Unknown joint type: {joint_type}. Available: {list(JOINT_TYPES)}"
            )
        if parent != WORLD_FRAME and parent not in self._index:
            raise InvalidGeometryError(f"Parent joint '{parent}' not found")
        axis_array = np.asarray(axis, dtype=np.float64)
        norm = float(np.linalg.norm(axis_array))
        if axis_array.shape != (3,) or norm < 1e-12:
            raise InvalidGeometryError(f"Joint '{name}' needs a non-zero 3D axis")
        lower, upper = float(bounds[0]), float(bounds[1])
        if lower > upper:
            raise InvalidArgumentError(f"Joint '{name}' has lower bound above upper bound")
        if mass < 0.0:
            raise InvalidArgumentError(f"Joint '{name}' has a negative mass")

        joint = JointModel(
            name=name,
            joint_type=joint_type,
            parent=parent,
            placement=create_transform(translation, rpy),
            axis=axis_array / norm,
            lower=lower,
            upper=upper,
            mass=float(mass),
            local_com=np.asarray(local_com, dtype=np.float64),
        )
        self._index[name] = len(self._joints)
        self._joints.append(joint)
        return joint

    def add_partial_com(self, com_name: str, joint_names: Sequence[str]) -> None:
        """Register a centre of mass over the subtrees rooted at ``joint_names``."""
        if not com_name:
            raise InvalidArgumentError("Partial COM name must not be empty")
        for joint_name in joint_names:
            self._require_joint(joint_name)
        self._partial_coms[com_name] = list(joint_names)

    # ============= DeviceModelSpec =============

    @property
    def config_size(self) -> int:
        return len(self._joints)

    @property
    def joint_names(self) -> list[str]:
        return [joint.name for joint in self._joints]

    @property
    def lower_bounds(self) -> NDArray[np.float64]:
        return np.array([joint.lower for joint in self._joints], dtype=np.float64)

    @property
    def upper_bounds(self) -> NDArray[np.float64]:
        return np.array([joint.upper for joint in self._joints], dtype=np.float64)

    def has_joint(self, name: str) -> bool:
        return name in self._index

    def joint(self, name: str) -> JointModel:
        return self._joints[self._require_joint(name)]

    def joint_rank(self, name: str) -> int:
        return self._require_joint(name)

    def joint_size(self, name: str) -> int:
        self._require_joint(name)
        return 1

    def joint_transform(self, q: Configuration, name: str) -> NDArray[np.float64]:
        if name == WORLD_FRAME:
            return np.eye(4)
        index = self._require_joint(name)
        chain = []
        while True:
            chain.append(index)
            parent = self._joints[index].parent
            if parent == WORLD_FRAME:
                break
            index = self._index[parent]
        T = np.eye(4)
        for i in reversed(chain):
            joint = self._joints[i]
            T = T @ joint.placement @ joint.motion(float(q[i]))
        return T

    def forward_kinematics(self, q: Configuration) -> list[NDArray[np.float64]]:
        """World placement of every joint frame, in configuration order."""
        frames: list[NDArray[np.float64]] = []
        for i, joint in enumerate(self._joints):
            parent_T = np.eye(4) if joint.parent == WORLD_FRAME else frames[self._index[joint.parent]]
            frames.append(parent_T @ joint.placement @ joint.motion(float(q[i])))
        return frames

    def has_com(self, name: str) -> bool:
        """Whole robot (''), a registered partial COM, or the subtree of a joint."""
        return name == "" or name in self._partial_coms or name in self._index

    def center_of_mass(self, q: Configuration, name: str = "") -> NDArray[np.float64]:
        if name == "":
            members = list(range(len(self._joints)))
        elif name in self._partial_coms:
            members = self._subtree(self._partial_coms[name])
        elif name in self._index:
            members = self._subtree([name])
        else:
            raise InvalidGeometryError(f"Unknown center of mass '{name}'")

        frames = self.forward_kinematics(q)
        total_mass = 0.0
        weighted = np.zeros(3)
        for i in members:
            joint = self._joints[i]
            if joint.mass <= 0.0:
                continue
            T = frames[i]
            weighted += joint.mass * (T[:3, :3] @ joint.local_com + T[:3, 3])
            total_mass += joint.mass
        if total_mass <= 0.0:
            raise InvalidGeometryError(f"Center of mass '{name}' has no mass")
        return weighted / total_mass

    def neutral_configuration(self) -> Configuration:
        return np.clip(np.zeros(self.config_size), self.lower_bounds, self.upper_bounds)

    def within_bounds(self, q: Configuration, tolerance: float = 1e-9) -> bool:
        return bool(
            np.all(q >= self.lower_bounds - tolerance) and np.all(q <= self.upper_bounds + tolerance)
        )

    def children(self, name: str) -> list[str]:
        return [joint.name for joint in self._joints if joint.parent == name]

    # ============= Helpers =============

    def _require_joint(self, name: str) -> int:
        try:
            return self._index[name]
        except KeyError:
            raise InvalidGeometryError(f"Joint '{name}' not found in '{self.name}'") from None

    def _subtree(self, roots: Sequence[str]) -> list[int]:
        members: set[int] = set()
        stack = [self._index[root] for root in roots]
        while stack:
            index = stack.pop()
            if index in members:
                continue
            members.add(index)
            name = self._joints[index].name
            stack.extend(self._index[child] for child in self.children(name))
        return sorted(members)
