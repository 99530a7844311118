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

from setuptools import find_packages, setup

setup(
    name="conplan",
    version="0.1.0",
    description="Constrained motion planning sessions: numerical constraints, roadmaps and sampling planners",
    license="Apache-2.0",
    python_requires=">=3.10",
    packages=find_packages(include=["conplan", "conplan.*"]),
    package_dir={"": "."},
    install_requires=[
        "numpy>=1.24",
        "scipy>=1.10",
        "structlog>=24.1",
        "pydantic>=2.0",
        "pydantic-settings>=2.0",
    ],
    extras_require={
        "test": ["pytest>=8.0"],
    },
)
