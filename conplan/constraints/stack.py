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

"""Prioritized constraint stacks.

A ``ConstraintStack`` is the mutable list of (constraint name, priority)
pairs a session keeps for the problem and for the goal. ``snapshot()`` turns
it into ``StackedConstraints``, the immutable evaluation view handed to the
numerical solver.

Ordering is by priority (lower value first), then by registration order in
the registry. Consecutive entries with the same priority form one level.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from conplan.constants import PRIORITY_WEIGHT
from conplan.constraints.evaluation import constraint_jacobian, constraint_value
from conplan.spec import LengthMismatchError, ValueAndJacobian

if TYPE_CHECKING:
    from numpy.typing import NDArray

    from conplan.constraints.registry import ConstraintEntry, ConstraintRegistry
    from conplan.spec import CollisionCheckerSpec, Configuration, DeviceModelSpec


@dataclass(frozen=True)
class StackItem:
    name: str
    priority: int


class ConstraintStack:
    """Ordered, prioritized subset of a registry's constraints."""

    def __init__(self, registry: ConstraintRegistry) -> None:
        self._registry = registry
        self._label = ""
        self._items: dict[str, StackItem] = {}

    @property
    def label(self) -> str:
        """Name given by the last ``set`` call."""
        return self._label

    def __len__(self) -> int:
        return len(self._items)

    def is_empty(self) -> bool:
        return not self._items

    def set(self, label: str, names: Sequence[str], priorities: Sequence[int]) -> None:
        """Replace the whole content of the stack.

        Raises:
            LengthMismatchError: names and priorities differ in length
            UnknownConstraintError: a name is not registered
        """
        if len(names) != len(priorities):
            raise LengthMismatchError(
                f"Got {len(names)} constraint names and {len(priorities)} priorities"
            )
        for name in names:
            self._registry.get(name)
        self._items = {
            name: StackItem(name, int(priority)) for name, priority in zip(names, priorities, strict=True)
        }
        self._label = label

    def push(self, name: str, priority: int = 0) -> None:
        """Add a registered constraint, or update its priority if already present."""
        self._registry.get(name)
        self._items[name] = StackItem(name, int(priority))

    def clear(self) -> None:
        self._items.clear()
        self._label = ""

    def items(self) -> list[tuple[ConstraintEntry, int]]:
        """Registry entries with their priority, in stack order."""
        resolved = [(self._registry.get(item.name), item.priority) for item in self._items.values()]
        resolved.sort(key=lambda pair: (pair[1], pair[0].order))
        return resolved

    def names(self) -> list[str]:
        return [entry.name for entry, _ in self.items()]

    def snapshot(
        self,
        model: DeviceModelSpec,
        world: CollisionCheckerSpec | None = None,
        reference: Configuration | None = None,
    ) -> StackedConstraints:
        return StackedConstraints(model, world, self.items(), reference)


class StackedConstraints:
    """Evaluation view of a stack at a fixed reference configuration.

    Entries without a constant right-hand side are evaluated relative to
    their value at ``reference``; without a reference their target is the
    one given at creation.
    """

    def __init__(
        self,
        model: DeviceModelSpec,
        world: CollisionCheckerSpec | None,
        items: Sequence[tuple[ConstraintEntry, int]],
        reference: Configuration | None = None,
    ) -> None:
        self.model = model
        self.world = world
        self.entries = [entry for entry, _ in items]
        self.levels: list[list[int]] = []
        last_priority: int | None = None
        for index, (_, priority) in enumerate(items):
            if priority != last_priority:
                self.levels.append([])
                last_priority = priority
            self.levels[-1].append(index)

        self._rhs: list[NDArray[np.float64] | None] = []
        for entry in self.entries:
            if reference is not None and not entry.constant_rhs:
                self._rhs.append(constraint_value(entry.constraint, model, world, reference))
            else:
                self._rhs.append(None)

    def is_empty(self) -> bool:
        return not self.entries

    @property
    def output_size(self) -> int:
        return sum(entry.output_size for entry in self.entries)

    # ============= Per Entry =============

    def entry_value(self, index: int, q: Configuration) -> NDArray[np.float64]:
        entry = self.entries[index]
        value = constraint_value(entry.constraint, self.model, self.world, q)
        rhs = self._rhs[index]
        return value if rhs is None else value - rhs

    def entry_jacobian(self, index: int, q: Configuration) -> NDArray[np.float64]:
        entry = self.entries[index]
        J = constraint_jacobian(entry.constraint, self.model, self.world, q).reshape(
            entry.output_size, self.model.config_size
        )
        if entry.passive_dofs:
            J = J.copy()
            J[:, list(entry.passive_dofs)] = 0.0
        return J

    # ============= Per Level =============

    def level_value(self, level: int, q: Configuration) -> NDArray[np.float64]:
        parts = [self.entry_value(i, q) for i in self.levels[level]]
        return np.concatenate(parts) if parts else np.zeros(0)

    def level_jacobian(self, level: int, q: Configuration) -> NDArray[np.float64]:
        parts = [self.entry_jacobian(i, q) for i in self.levels[level]]
        return np.vstack(parts) if parts else np.zeros((0, self.model.config_size))

    # ============= Whole Stack =============

    def residual(self, q: Configuration) -> NDArray[np.float64]:
        """Unweighted residual of every entry, in stack order."""
        parts = [self.entry_value(i, q) for i in range(len(self.entries))]
        return np.concatenate(parts) if parts else np.zeros(0)

    def value_and_jacobian(self, q: Configuration) -> ValueAndJacobian:
        """Stacked residual and Jacobian, level k scaled by PRIORITY_WEIGHT ** -k."""
        values: list[NDArray[np.float64]] = []
        jacobians: list[NDArray[np.float64]] = []
        for k in range(len(self.levels)):
            weight = PRIORITY_WEIGHT ** (-k)
            values.append(weight * self.level_value(k, q))
            jacobians.append(weight * self.level_jacobian(k, q))
        if not values:
            return ValueAndJacobian(np.zeros(0), np.zeros((0, self.model.config_size)))
        return ValueAndJacobian(np.concatenate(values), np.vstack(jacobians))

    def is_satisfied(self, q: Configuration, error_threshold: float) -> bool:
        return all(
            float(np.linalg.norm(self.level_value(k, q))) <= error_threshold
            for k in range(len(self.levels))
        )
