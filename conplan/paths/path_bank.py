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

"""Append-only store of finished paths, indexed from 0."""

from __future__ import annotations

import numbers
from typing import TYPE_CHECKING

from conplan.spec import UnknownPathError

if TYPE_CHECKING:
    from conplan.paths.path import PathVector
    from conplan.spec import Configuration


class PathBank:
    """Paths are never removed. ``replace`` swaps the content of an id as a whole."""

    def __init__(self) -> None:
        self._paths: list[PathVector] = []

    def __len__(self) -> int:
        return len(self._paths)

    def add(self, path: PathVector) -> int:
        self._paths.append(path.copy())
        return len(self._paths) - 1

    def get(self, path_id: int) -> PathVector:
        """Copy of the stored path."""
        return self._require(path_id).copy()

    def replace(self, path_id: int, path: PathVector) -> None:
        self._require(path_id)
        self._paths[int(path_id)] = path.copy()

    def path_length(self, path_id: int) -> float:
        return self._require(path_id).length

    def config_at_param(self, path_id: int, s: float) -> Configuration:
        return self._require(path_id).config_at_param(s)

    def waypoints(self, path_id: int) -> list[Configuration]:
        return self._require(path_id).waypoints()

    def _require(self, path_id: int) -> PathVector:
        if (
            not isinstance(path_id, numbers.Integral)
            or isinstance(path_id, bool)
            or not 0 <= path_id < len(self._paths)
        ):
            raise UnknownPathError(f"Path {path_id} does not exist ({len(self._paths)} stored)")
        return self._paths[int(path_id)]
