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
Paths Module

Continuous paths in configuration space, the path bank, and the path
strategies (validation, projection, optimization).

## Implementations

- StraightPath / PathVector: arc-length parametrised paths
- PathBank: append-only store indexed by path id
- DiscretizedPathValidation, DichotomyPathValidation, NoPathValidation
- NoPathProjector, GlobalPathProjector, ProgressivePathProjector
- RandomShortcutOptimizer, PruneOptimizer
"""

from conplan.paths.optimizers import PruneOptimizer, RandomShortcutOptimizer
from conplan.paths.path import PathVector, StraightPath
from conplan.paths.path_bank import PathBank
from conplan.paths.projectors import (
    GlobalPathProjector,
    NoPathProjector,
    ProgressivePathProjector,
)
from conplan.paths.validation import (
    DichotomyPathValidation,
    DiscretizedPathValidation,
    NoPathValidation,
)

__all__ = [
    "DichotomyPathValidation",
    "DiscretizedPathValidation",
    "GlobalPathProjector",
    "NoPathProjector",
    "NoPathValidation",
    "PathBank",
    "PathVector",
    "ProgressivePathProjector",
    "PruneOptimizer",
    "RandomShortcutOptimizer",
    "StraightPath",
]
