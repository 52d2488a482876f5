# Copyright 2025 Stochnoise Development Team
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
import numpy as np
import pytest

from stochnoise.math import (
    baseline_rng,
    generate_seed,
    sampling_rng,
    trajectory_rng,
)


def test_trajectory_streams_are_reproducible():
    assert np.array_equal(
        trajectory_rng(42, 3).random(5), trajectory_rng(42, 3).random(5)
    )


def test_streams_are_distinct():
    draws = [
        trajectory_rng(42, 0).random(5),
        trajectory_rng(42, 1).random(5),
        trajectory_rng(43, 0).random(5),
        sampling_rng(42).random(5),
        baseline_rng(42).random(5),
    ]
    for i, a in enumerate(draws):
        for b in draws[i + 1 :]:
            assert not np.array_equal(a, b)


def test_negative_run_id():
    with pytest.raises(ValueError, match="'run_id' must be non-negative"):
        trajectory_rng(42, -1)


def test_generate_seed():
    seed = generate_seed()
    assert isinstance(seed, int)
    assert seed >= 0
    trajectory_rng(seed, 0).random()
