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

from pathlib import Path

CONPLAN_PROJECT_ROOT = Path(__file__).parent.parent

CONPLAN_LOG_DIR = CONPLAN_PROJECT_ROOT / "logs"

ROADMAP_FILE_FORMAT = "conplan-roadmap"
ROADMAP_FILE_VERSION = 1

# Rows of the k-th distinct priority level are scaled by PRIORITY_WEIGHT ** -k
PRIORITY_WEIGHT = 10.0

FINITE_DIFFERENCE_STEP = 1e-6
