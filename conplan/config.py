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

"""Process-wide planning defaults, overridable through CONPLAN_* variables."""

from pydantic import Field, PositiveFloat, PositiveInt
from pydantic_settings import BaseSettings, SettingsConfigDict


class PlanningSettings(BaseSettings):
    error_threshold: PositiveFloat = 1e-4
    max_iterations: PositiveInt = 40
    max_iter_path_planning: PositiveInt | None = None

    path_planner: str = "diffusing"
    steering_method: str = "straight"
    configuration_shooter: str = "uniform"
    path_validation: str = "discretized"
    path_validation_tolerance: PositiveFloat = 0.05
    path_projector: str = "none"
    path_projector_tolerance: PositiveFloat = 0.2
    path_optimizers: list[str] = Field(default_factory=list)

    # Maximal length of a single roadmap extension
    extend_step: PositiveFloat = 0.3
    random_seed: int | None = None

    model_config = SettingsConfigDict(
        env_prefix="CONPLAN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )
