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

from stochnoise.math import multinomial


def test_multinomial_small():
    rng = np.random.default_rng(123)
    draws = np.random.default_rng(123).random(10)
    samples = multinomial(10, [0.3, 0.1, 0.6], rng=rng)
    expected = np.searchsorted(
        np.cumsum([0.3, 0.1, 0.6]), draws, side="right"
    )
    assert np.array_equal(samples, expected)
    assert set(samples) <= {0, 1, 2}


def test_multinomial_large():
    distribution = np.array([0.001] * 100 * 2 + [0.7] + [0.001] * 100 * 1)
    assert abs(1 - sum(distribution)) < 1e-10

    samples = multinomial(10_000, distribution, rng=np.random.default_rng(7))
    assert samples.min() >= 0
    assert samples.max() < distribution.size
    assert np.mean(samples == 200) == pytest.approx(0.7, abs=0.03)


def test_multinomial_unnormalized():
    rng = np.random.default_rng(5)
    samples = multinomial(1000, [0.0, 2.0, 0.0, 2.0], rng=rng)
    assert set(samples) == {1, 3}


def test_multinomial_zero_probabilities():
    # Entries with no probability are never drawn
    samples = multinomial(1000, [0.0, 1.0, 0.0], rng=np.random.default_rng())
    assert np.all(samples == 1)


class _ZeroDraws:
    """A generator whose uniform draws are all exactly zero."""

    def random(self, size=None):
        return 0.0 if size is None else np.zeros(size)


def test_multinomial_zero_draw():
    # A zero draw skips the leading entries with no probability
    assert list(multinomial(2, [0.0, 1.0], rng=_ZeroDraws())) == [1, 1]
    assert list(multinomial(1, [0.0, 0.0, 0.3, 0.7], rng=_ZeroDraws())) == [
        2
    ]


@pytest.mark.parametrize("probs", [[], [0.0, 0.0]])
def test_multinomial_empty(probs):
    with pytest.raises(ValueError, match="empty distribution"):
        multinomial(10, probs)
