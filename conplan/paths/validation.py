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

"""Path validation strategies implementing PathValidationSpec.

A validator samples configurations along a path and checks them with the
collision checker. It reports whether the whole path is valid and the
parameter up to which the path is known to be valid.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from conplan.spec import InvalidArgumentError

if TYPE_CHECKING:
    from conplan.paths.path import PathVector, StraightPath
    from conplan.spec import CollisionCheckerSpec


class DiscretizedPathValidation:
    """Checks samples every ``tolerance`` along the path, in order."""

    def __init__(self, checker: CollisionCheckerSpec, tolerance: float = 0.05):
        if tolerance <= 0.0:
            raise InvalidArgumentError("Path validation tolerance must be positive")
        self._checker = checker
        self._tolerance = tolerance

    def validate(self, path: PathVector | StraightPath) -> tuple[bool, float]:
        length = path.length
        n_steps = max(int(np.ceil(length / self._tolerance)), 1)
        valid_until = 0.0
        for i in range(n_steps + 1):
            s = length * i / n_steps
            if not self._checker.is_valid(path.config_at_param(s)):
                return False, valid_until
            valid_until = s
        return True, length


class DichotomyPathValidation:
    """Checks end points first, then midpoints of ever smaller intervals.

    Finds collisions in the middle of a path faster than an ordered sweep.
    Stops at the first invalid sample.
    """

    def __init__(self, checker: CollisionCheckerSpec, tolerance: float = 0.05):
        if tolerance <= 0.0:
            raise InvalidArgumentError("Path validation tolerance must be positive")
        self._checker = checker
        self._tolerance = tolerance

    def validate(self, path: PathVector | StraightPath) -> tuple[bool, float]:
        length = path.length
        checked: list[float] = []
        for s in (0.0, length):
            if not self._checker.is_valid(path.config_at_param(s)):
                return False, self._valid_prefix(checked, s)
            checked.append(s)

        intervals = [(0.0, length)]
        while intervals:
            next_intervals = []
            for lo, hi in intervals:
                if hi - lo <= self._tolerance:
                    continue
                mid = 0.5 * (lo + hi)
                if not self._checker.is_valid(path.config_at_param(mid)):
                    return False, self._valid_prefix(checked, mid)
                checked.append(mid)
                next_intervals.extend([(lo, mid), (mid, hi)])
            intervals = next_intervals
        return True, length

    def _valid_prefix(self, checked: list[float], invalid: float) -> float:
        """Largest checked parameter below the invalid one such that the prefix is dense."""
        valid_until = 0.0
        for s in sorted(checked):
            if s >= invalid or s - valid_until > self._tolerance:
                break
            valid_until = s
        return valid_until


class NoPathValidation:
    """Accepts every path."""

    def validate(self, path: PathVector | StraightPath) -> tuple[bool, float]:
        return True, path.length
