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
"""Utility function for sampling."""
from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike


def multinomial(
    n_samples: int,
    probabilities: ArrayLike,
    rng: np.random.Generator | None = None,
) -> np.ndarray:
    """Multinomial samples from the distribution given by `probabilities`.

    Unlike `np.random.multinomial`, this doesn't assert that the probabilities
    sum to 1, and returns the indices of the samples instead of
    aggregated counts as a large array.

    Each sample is the first index whose cumulative probability is strictly
    greater than a uniform draw, so a zero probability index is never
    drawn. The cumulative sums are normalized by their last value, so
    rounding never yields an out-of-range index.

    Args:
        n_samples: Number of samples to return.
        probabilities: Probability distribution. Should sum to 1.
        rng: The generator providing the uniform draws. Defaults to a
            freshly seeded generator.

    Returns:
        Indices of samples with replacement.
    """
    if rng is None:
        rng = np.random.default_rng()
    rnd = rng.random(n_samples)

    cumsums = np.cumsum(np.asarray(probabilities, dtype=float))
    if cumsums.size == 0 or cumsums[-1] <= 0:
        raise ValueError("Can't sample from an empty distribution.")

    return np.searchsorted(cumsums / cumsums[-1], rnd, side="right")
