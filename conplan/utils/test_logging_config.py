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

import logging
from unittest.mock import patch

from conplan.utils import logging_config
from conplan.utils.logging_config import ROOT_LOGGER_NAME, setup_logger


def test_logger_is_named_after_module():
    setup_logger(level=logging.DEBUG)
    child = logging.getLogger(__name__)
    assert __name__.startswith(ROOT_LOGGER_NAME + ".")
    assert child.level == logging.DEBUG
    assert logging.getLogger(ROOT_LOGGER_NAME).handlers


def test_console_line():
    event = {
        "event": "Path added",
        "level": "info",
        "logger": "conplan.session",
        "timestamp": "2026-01-02T03:04:05.678000",
        "path_id": 3,
        "func_name": "direct_path",
        "lineno": 10,
    }
    with patch.object(logging_config, "_USE_COLORS", False):
        line = logging_config._render_console(None, "info", event)
    assert line.startswith("03:04:05.678[inf][session")
    assert line.endswith("Path added path_id=3")
    assert "func_name" not in line
