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
"""Deterministic random streams derived from a master seed.

Every stream is a `numpy.random.Generator` seeded from a
`numpy.random.SeedSequence` whose spawn key identifies its purpose. A
trajectory's stream only depends on the master seed and its run id, so the
outcome of a run does not depend on which worker executes it.
"""
from __future__ import annotations

import numpy as np

TRAJECTORY_STREAM = 0
SAMPLING_STREAM = 1
BASELINE_STREAM = 2


def trajectory_rng(seed: int, run_id: int) -> np.random.Generator:
    """The generator owned by the trajectory `run_id`."""
    if run_id < 0:
        raise ValueError(f"'run_id' must be non-negative, not {run_id}.")
    return np.random.default_rng(
        np.random.SeedSequence(seed, spawn_key=(TRAJECTORY_STREAM, run_id))
    )


def sampling_rng(seed: int) -> np.random.Generator:
    """The generator used to draw shots from aggregated results."""
    return np.random.default_rng(
        np.random.SeedSequence(seed, spawn_key=(SAMPLING_STREAM,))
    )


def baseline_rng(seed: int) -> np.random.Generator:
    """The generator used by the noiseless baseline run."""
    return np.random.default_rng(
        np.random.SeedSequence(seed, spawn_key=(BASELINE_STREAM,))
    )


def generate_seed() -> int:
    """Draws a fresh master seed from the OS entropy pool."""
    return int(np.random.SeedSequence().entropy)
