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

"""Factory functions for named planning strategies.

Each strategy kind has a registry mapping a name to a factory. Third parties
add names with the ``register_*`` functions; ``StrategySelector`` records
which names a session uses.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from conplan.spec import InvalidArgumentError, StrategyKind, UnknownStrategyError

if TYPE_CHECKING:
    from conplan.config import PlanningSettings
    from conplan.planners.context import PlanningContext, StrategyContext
    from conplan.spec import (
        ConfigurationShooterSpec,
        PathOptimizerSpec,
        PathPlannerSpec,
        PathProjectorSpec,
        PathValidationSpec,
        SteeringMethodSpec,
    )

PlannerFactory = Callable[["PlanningContext"], "PathPlannerSpec"]
SteeringFactory = Callable[["StrategyContext"], "SteeringMethodSpec"]
ValidationFactory = Callable[["StrategyContext", float], "PathValidationSpec"]
ProjectorFactory = Callable[["StrategyContext", float], "PathProjectorSpec"]
ShooterFactory = Callable[["StrategyContext"], "ConfigurationShooterSpec"]
OptimizerFactory = Callable[["PlanningContext"], "PathOptimizerSpec"]


# =============================================================================
# Default factories
# =============================================================================


def _diffusing(ctx: PlanningContext) -> PathPlannerSpec:
    from conplan.planners.diffusing_planner import DiffusingPlanner

    return DiffusingPlanner(ctx)


def _rrt_connect(ctx: PlanningContext) -> PathPlannerSpec:
    from conplan.planners.rrt_planner import RRTConnectPlanner

    return RRTConnectPlanner(ctx)


def _straight(ctx: StrategyContext) -> SteeringMethodSpec:
    from conplan.planners.steering import StraightSteeringMethod

    return StraightSteeringMethod(ctx.model)


def _discretized(ctx: StrategyContext, tolerance: float) -> PathValidationSpec:
    from conplan.paths.validation import DiscretizedPathValidation

    return DiscretizedPathValidation(ctx.checker, tolerance)


def _dichotomy(ctx: StrategyContext, tolerance: float) -> PathValidationSpec:
    from conplan.paths.validation import DichotomyPathValidation

    return DichotomyPathValidation(ctx.checker, tolerance)


def _no_validation(ctx: StrategyContext, tolerance: float) -> PathValidationSpec:
    from conplan.paths.validation import NoPathValidation

    return NoPathValidation()


def _no_projector(ctx: StrategyContext, tolerance: float) -> PathProjectorSpec:
    from conplan.paths.projectors import NoPathProjector

    return NoPathProjector()


def _global_projector(ctx: StrategyContext, tolerance: float) -> PathProjectorSpec:
    from conplan.paths.projectors import GlobalPathProjector

    return GlobalPathProjector(ctx.project, tolerance)


def _progressive_projector(ctx: StrategyContext, tolerance: float) -> PathProjectorSpec:
    from conplan.paths.projectors import ProgressivePathProjector

    return ProgressivePathProjector(ctx.project, tolerance)


def _uniform(ctx: StrategyContext) -> ConfigurationShooterSpec:
    from conplan.planners.shooters import UniformShooter

    return UniformShooter(ctx.model, ctx.rng)


def _gaussian(ctx: StrategyContext) -> ConfigurationShooterSpec:
    from conplan.planners.shooters import GaussianShooter

    return GaussianShooter(ctx.model, ctx.rng, center=ctx.initial_config)


def _random_shortcut(ctx: PlanningContext) -> PathOptimizerSpec:
    from conplan.paths.optimizers import RandomShortcutOptimizer

    return RandomShortcutOptimizer(ctx.connect, ctx.rng)


def _prune(ctx: PlanningContext) -> PathOptimizerSpec:
    from conplan.paths.optimizers import PruneOptimizer

    return PruneOptimizer(ctx.connect)


_REGISTRIES: dict[StrategyKind, dict[str, Any]] = {
    StrategyKind.PLANNER: {"diffusing": _diffusing, "rrt_connect": _rrt_connect},
    StrategyKind.STEERING_METHOD: {"straight": _straight},
    StrategyKind.PATH_VALIDATION: {
        "discretized": _discretized,
        "dichotomy": _dichotomy,
        "no_validation": _no_validation,
    },
    StrategyKind.PATH_PROJECTOR: {
        "none": _no_projector,
        "global": _global_projector,
        "progressive": _progressive_projector,
    },
    StrategyKind.CONFIGURATION_SHOOTER: {"uniform": _uniform, "gaussian": _gaussian},
    StrategyKind.PATH_OPTIMIZER: {"random_shortcut": _random_shortcut, "prune": _prune},
}


# =============================================================================
# Registration
# =============================================================================


def _register(kind: StrategyKind, name: str, factory: Any) -> None:
    if not name:
        raise InvalidArgumentError("Strategy name must not be empty")
    _REGISTRIES[kind][name] = factory


def register_planner(name: str, factory: PlannerFactory) -> None:
    _register(StrategyKind.PLANNER, name, factory)


def register_steering_method(name: str, factory: SteeringFactory) -> None:
    _register(StrategyKind.STEERING_METHOD, name, factory)


def register_path_validation(name: str, factory: ValidationFactory) -> None:
    _register(StrategyKind.PATH_VALIDATION, name, factory)


def register_path_projector(name: str, factory: ProjectorFactory) -> None:
    _register(StrategyKind.PATH_PROJECTOR, name, factory)


def register_configuration_shooter(name: str, factory: ShooterFactory) -> None:
    _register(StrategyKind.CONFIGURATION_SHOOTER, name, factory)


def register_path_optimizer(name: str, factory: OptimizerFactory) -> None:
    _register(StrategyKind.PATH_OPTIMIZER, name, factory)


def available(kind: StrategyKind) -> list[str]:
    return sorted(_REGISTRIES[kind])


def _lookup(kind: StrategyKind, name: str) -> Any:
    try:
        return _REGISTRIES[kind][name]
    except KeyError:
        raise UnknownStrategyError(
            f"Unknown {kind.value}: {name}. Available: {available(kind)}"
        ) from None


# =============================================================================
# Creation
# =============================================================================


def create_planner(name: str, ctx: PlanningContext) -> PathPlannerSpec:
    """Create path planner. name='diffusing'|'rrt_connect'."""
    factory: PlannerFactory = _lookup(StrategyKind.PLANNER, name)
    return factory(ctx)


def create_steering_method(name: str, ctx: StrategyContext) -> SteeringMethodSpec:
    factory: SteeringFactory = _lookup(StrategyKind.STEERING_METHOD, name)
    return factory(ctx)


def create_path_validation(name: str, ctx: StrategyContext, tolerance: float) -> PathValidationSpec:
    """Create path validation. name='discretized'|'dichotomy'|'no_validation'."""
    factory: ValidationFactory = _lookup(StrategyKind.PATH_VALIDATION, name)
    return factory(ctx, tolerance)


def create_path_projector(name: str, ctx: StrategyContext, tolerance: float) -> PathProjectorSpec:
    """Create path projector. name='none'|'global'|'progressive'."""
    factory: ProjectorFactory = _lookup(StrategyKind.PATH_PROJECTOR, name)
    return factory(ctx, tolerance)


def create_configuration_shooter(name: str, ctx: StrategyContext) -> ConfigurationShooterSpec:
    factory: ShooterFactory = _lookup(StrategyKind.CONFIGURATION_SHOOTER, name)
    return factory(ctx)


def create_path_optimizer(name: str, ctx: PlanningContext) -> PathOptimizerSpec:
    factory: OptimizerFactory = _lookup(StrategyKind.PATH_OPTIMIZER, name)
    return factory(ctx)


# =============================================================================
# Selection
# =============================================================================


class StrategySelector:
    """Names of the strategies a session plans with.

    Selection only records names after checking they are registered, so a
    failed ``select_*`` leaves the previous choice in place.
    """

    def __init__(self, settings: PlanningSettings) -> None:
        self.path_planner = settings.path_planner
        self.steering_method = settings.steering_method
        self.configuration_shooter = settings.configuration_shooter
        self.path_validation = settings.path_validation
        self.path_validation_tolerance = settings.path_validation_tolerance
        self.path_projector = settings.path_projector
        self.path_projector_tolerance = settings.path_projector_tolerance
        self.path_optimizers: list[str] = []
        _lookup(StrategyKind.PLANNER, self.path_planner)
        _lookup(StrategyKind.STEERING_METHOD, self.steering_method)
        _lookup(StrategyKind.CONFIGURATION_SHOOTER, self.configuration_shooter)
        _lookup(StrategyKind.PATH_VALIDATION, self.path_validation)
        _lookup(StrategyKind.PATH_PROJECTOR, self.path_projector)
        for name in settings.path_optimizers:
            self.add_path_optimizer(name)

    def select_path_planner(self, name: str) -> None:
        _lookup(StrategyKind.PLANNER, name)
        self.path_planner = name

    def select_steering_method(self, name: str) -> None:
        _lookup(StrategyKind.STEERING_METHOD, name)
        self.steering_method = name

    def select_configuration_shooter(self, name: str) -> None:
        _lookup(StrategyKind.CONFIGURATION_SHOOTER, name)
        self.configuration_shooter = name

    def select_path_validation(self, name: str, tolerance: float) -> None:
        _lookup(StrategyKind.PATH_VALIDATION, name)
        if tolerance <= 0.0:
            raise InvalidArgumentError("Path validation tolerance must be positive")
        self.path_validation = name
        self.path_validation_tolerance = float(tolerance)

    def select_path_projector(self, name: str, tolerance: float) -> None:
        _lookup(StrategyKind.PATH_PROJECTOR, name)
        if tolerance <= 0.0:
            raise InvalidArgumentError("Path projector tolerance must be positive")
        self.path_projector = name
        self.path_projector_tolerance = float(tolerance)

    def add_path_optimizer(self, name: str) -> None:
        _lookup(StrategyKind.PATH_OPTIMIZER, name)
        self.path_optimizers.append(name)

    def clear_path_optimizers(self) -> None:
        self.path_optimizers.clear()

    # ============= Instantiation =============

    def build_steering_method(self, ctx: StrategyContext) -> SteeringMethodSpec:
        return create_steering_method(self.steering_method, ctx)

    def build_path_validation(self, ctx: StrategyContext) -> PathValidationSpec:
        return create_path_validation(self.path_validation, ctx, self.path_validation_tolerance)

    def build_path_projector(self, ctx: StrategyContext) -> PathProjectorSpec:
        return create_path_projector(self.path_projector, ctx, self.path_projector_tolerance)

    def build_configuration_shooter(self, ctx: StrategyContext) -> ConfigurationShooterSpec:
        return create_configuration_shooter(self.configuration_shooter, ctx)

    def build_path_planner(self, ctx: PlanningContext) -> PathPlannerSpec:
        return create_planner(self.path_planner, ctx)

    def build_path_optimizers(self, ctx: PlanningContext) -> list[PathOptimizerSpec]:
        return [create_path_optimizer(name, ctx) for name in self.path_optimizers]
