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
import contextlib
from collections.abc import Iterator

import matplotlib.pyplot as plt
import pytest

from stochnoise.circuit import Circuit


@pytest.fixture
def bell_circuit() -> Circuit:
    return Circuit(2, name="bell").h(0).cx(0, 1)


@pytest.fixture
def hadamard_circuit() -> Circuit:
    return Circuit(1, name="hadamard").h(0)


@pytest.fixture
def measured_circuit() -> Circuit:
    # Writes qubit 0 into clbit 1 and qubit 1 into clbit 0
    return (
        Circuit(2, n_clbits=2, name="measured")
        .x(0)
        .barrier(0, 1)
        .measure(0, 1)
        .measure(1, 0)
    )


@pytest.fixture()
def patch_plt_show(monkeypatch):
    # Close residual figures
    plt.close("all")
    # Closes a figure instead of showing it
    monkeypatch.setattr(plt, "show", plt.close)


class Helpers:
    """Testing helpers."""

    @staticmethod
    @contextlib.contextmanager
    def raises_all(
        expected: list[type[Exception]], match: str
    ) -> Iterator[None]:
        """Checks that a block raises an instance of every listed class.

        Used to check that an error is both a `StochNoiseError` and the
        builtin exception it used to be (e.g. a `ValueError`).
        """
        with pytest.raises(tuple(expected), match=match) as exc_info:
            yield
        for expected_type in expected:
            assert isinstance(exc_info.value, expected_type)


@pytest.fixture
def helpers() -> type[Helpers]:
    """Testing helpers."""
    return Helpers
