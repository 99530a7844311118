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

"""Linear algebra on constraint Jacobians.

All three helpers work from one SVD of the Jacobian, so they agree on what
counts as a singular direction.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from numpy.typing import NDArray

    from conplan.spec import Jacobian


def damped_pseudoinverse(J: Jacobian, damping: float = 0.01) -> NDArray[np.float64]:
    """Damped least-squares inverse of an m x n Jacobian (n x m result).

    Each singular value s is inverted as s / (s² + λ²), which stays bounded
    when s goes to zero.

    Example:
        J = stack.level_jacobian(0, q)
        dq = -damped_pseudoinverse(J, damping=1e-3) @ stack.level_value(0, q)
    """
    U, s, Vt = np.linalg.svd(J, full_matrices=False)
    inverted = s / (s**2 + damping**2)
    result: NDArray[np.float64] = (Vt.T * inverted) @ U.T
    return result


def null_space_projector(J: Jacobian, rcond: float = 1e-10) -> NDArray[np.float64]:
    """n x n orthogonal projector onto the null space of J."""
    n = J.shape[1]
    if J.shape[0] == 0:
        return np.eye(n)
    _, s, Vt = np.linalg.svd(J, full_matrices=True)
    rank = int(np.sum(s > rcond * s[0])) if s.size else 0
    kernel = Vt[rank:]
    result: NDArray[np.float64] = kernel.T @ kernel
    return result


def get_manipulability(J: Jacobian) -> float:
    """sqrt(det(J Jᵀ)), the product of the singular values. Zero at a singularity."""
    if J.shape[0] == 0:
        return 1.0
    s = np.linalg.svd(J, compute_uv=False)
    if s.size < J.shape[0]:
        return 0.0
    return float(np.prod(s))
