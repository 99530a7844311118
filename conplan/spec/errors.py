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

"""Hard failures of the planning session.

Every operation that raises one of these leaves the session as it was before
the call. Non-convergence is never an error: it is reported through a boolean
``success`` result instead.
"""


class PlanningError(Exception):
    """Base class of every hard failure raised by a planning session."""

    kind = "PlanningError"


class DuplicateNameError(PlanningError):
    """A constraint with the same name is already registered."""

    kind = "DuplicateName"


class UnknownConstraintError(PlanningError, KeyError):
    """No constraint is registered under the requested name."""

    kind = "UnknownConstraint"

    def __str__(self) -> str:
        return Exception.__str__(self)


class UnknownPathError(PlanningError, KeyError):
    """The path id does not refer to a stored path."""

    kind = "UnknownPath"

    def __str__(self) -> str:
        return Exception.__str__(self)


class UnknownStrategyError(PlanningError, KeyError):
    """No strategy is registered under the requested name."""

    kind = "UnknownStrategy"

    def __str__(self) -> str:
        return Exception.__str__(self)


class NotConfiguredError(PlanningError):
    """Planning was requested before the problem was fully defined."""

    kind = "NotConfigured"


class NoActivePlanningError(PlanningError):
    """A step-by-step operation was called while no planning is running."""

    kind = "NoActivePlanning"


class InvalidArgumentError(PlanningError, ValueError):
    kind = "InvalidArgument"


class InvalidGeometryError(InvalidArgumentError):
    """Referenced joints, points or masks are structurally invalid."""

    kind = "InvalidGeometry"


class LengthMismatchError(PlanningError, ValueError):
    kind = "LengthMismatch"


class ValidationFailedError(PlanningError):
    """A collision or geometric check rejected the request."""

    kind = "ValidationFailed"


class IOFailureError(PlanningError, OSError):
    kind = "IOFailure"
