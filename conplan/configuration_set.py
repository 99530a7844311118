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

"""Initial configuration and ordered goal configurations of a problem."""

from __future__ import annotations

from typing import TYPE_CHECKING

from conplan.spec import InvalidArgumentError, as_configuration

if TYPE_CHECKING:
    from conplan.spec import Configuration


class ConfigurationSet:
    """Configurations are copied in and out, so callers never share arrays with the set."""

    def __init__(self, config_size: int) -> None:
        self.config_size = config_size
        self._initial: Configuration | None = None
        self._goals: list[Configuration] = []

    def _checked(self, config: object) -> Configuration:
        try:
            return as_configuration(config, self.config_size)
        except ValueError as e:
            raise InvalidArgumentError(str(e)) from None

    def set_initial_config(self, config: object) -> None:
        self._initial = self._checked(config)

    def get_initial_config(self) -> Configuration | None:
        return None if self._initial is None else self._initial.copy()

    def has_initial_config(self) -> bool:
        return self._initial is not None

    def add_goal_config(self, config: object) -> None:
        self._goals.append(self._checked(config))

    def get_goal_configs(self) -> list[Configuration]:
        return [q.copy() for q in self._goals]

    def reset_goal_configs(self) -> None:
        self._goals.clear()
