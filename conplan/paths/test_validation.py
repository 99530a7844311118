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

"""Tests for path validation strategies."""

from unittest.mock import MagicMock

import numpy as np
import pytest

from conplan.paths.path import PathVector
from conplan.paths.validation import (
    DichotomyPathValidation,
    DiscretizedPathValidation,
    NoPathValidation,
)
from conplan.spec import InvalidArgumentError


def _checker(blocked_from=None):
    """Checker rejecting configurations with x >= blocked_from."""
    checker = MagicMock()
    if blocked_from is None:
        checker.is_valid.return_value = True
    else:
        checker.is_valid.side_effect = lambda q: bool(q[0] < blocked_from)
    return checker


@pytest.fixture
def path():
    return PathVector.from_waypoints([np.zeros(2), np.array([1.0, 0.0])])


@pytest.mark.parametrize("validation_cls", [DiscretizedPathValidation, DichotomyPathValidation])
class TestSampledValidation:
    def test_free_path(self, validation_cls, path):
        valid, valid_until = validation_cls(_checker(), 0.1).validate(path)
        assert valid
        assert valid_until == pytest.approx(1.0)

    def test_blocked_path_reports_valid_prefix(self, validation_cls, path):
        valid, valid_until = validation_cls(_checker(0.55), 0.1).validate(path)
        assert not valid
        assert valid_until < 0.55
        assert valid_until >= 0.55 - 0.1 - 1e-9 or valid_until == 0.0

    def test_invalid_start(self, validation_cls, path):
        valid, valid_until = validation_cls(_checker(-1.0), 0.1).validate(path)
        assert not valid
        assert valid_until == 0.0

    def test_tolerance_must_be_positive(self, validation_cls):
        with pytest.raises(InvalidArgumentError):
            validation_cls(_checker(), 0.0)


def test_discretized_prefix_is_last_sample(path):
    valid, valid_until = DiscretizedPathValidation(_checker(0.55), 0.1).validate(path)
    assert not valid
    assert valid_until == pytest.approx(0.5)


def test_dichotomy_checks_midpoint_early(path):
    checker = _checker()
    DichotomyPathValidation(checker, 0.1).validate(path)
    checked = [float(call.args[0][0]) for call in checker.is_valid.call_args_list]
    assert checked[:3] == pytest.approx([0.0, 1.0, 0.5])


def test_no_validation(path):
    checker = _checker(-1.0)
    assert NoPathValidation().validate(path) == (True, pytest.approx(1.0))
    checker.is_valid.assert_not_called()
