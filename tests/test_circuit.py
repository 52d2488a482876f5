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
import re

import numpy as np
import pytest

from stochnoise.circuit import Circuit, Operation


class TestOperation:
    def test_normalization(self):
        op = Operation("RX", [2], params=[1])
        assert op.kind == "rx"
        assert op.targets == (2,)
        assert op.params == (1.0,)
        assert op.controls == op.clbits == ()

    def test_qubits(self):
        op = Operation("x", (1,), controls=(0,))
        assert op.qubits == (0, 1)
        assert op.arity == 2
        assert op.is_noise_eligible
        assert Operation("swap", (0, 1)).arity == 2

    @pytest.mark.parametrize("kind", ["measure", "reset", "barrier"])
    def test_not_noise_eligible(self, kind):
        clbits = (0,) if kind == "measure" else ()
        assert not Operation(kind, (0,), clbits=clbits).is_noise_eligible

    @pytest.mark.parametrize(
        "kwargs, msg",
        [
            (dict(kind="foo", targets=(0,)), "Unknown operation kind 'foo'"),
            (dict(kind="h", targets=()), "Operation 'h' needs a target"),
            (
                dict(kind="x", targets=(0,), controls=(0,)),
                "uses the same qubit twice",
            ),
            (dict(kind="h", targets=(-1,)), "must be non-negative"),
            (dict(kind="rx", targets=(0,)), "takes 1 parameter(s), got 0"),
            (
                dict(kind="h", targets=(0,), params=(1.0,)),
                "takes 0 parameter(s), got 1",
            ),
            (dict(kind="swap", targets=(0,)), "exactly two targets"),
            (dict(kind="h", targets=(0, 1)), "acts on a single target"),
            (
                dict(kind="reset", targets=(0,), controls=(1,)),
                "'reset' can't be controlled",
            ),
            (
                dict(kind="measure", targets=(0, 1), clbits=(0,)),
                "one classical bit per target",
            ),
        ],
    )
    def test_invalid(self, kwargs, msg):
        with pytest.raises(ValueError, match=re.escape(msg)):
            Operation(**kwargs)

    def test_barrier_without_targets(self):
        assert Operation("barrier", ()).qubits == ()

    def test_matrix(self):
        assert np.allclose(
            Operation("h", (0,)).matrix(),
            np.array([[1, 1], [1, -1]]) / np.sqrt(2),
        )
        assert np.allclose(
            Operation("rx", (0,), params=(np.pi,)).matrix(),
            -1j * np.array([[0, 1], [1, 0]]),
        )
        assert np.allclose(
            Operation("p", (0,), params=(np.pi / 2,)).matrix(),
            Operation("s", (0,)).matrix(),
        )
        with pytest.raises(ValueError, match="has no single-target matrix"):
            Operation("swap", (0, 1)).matrix()

    @pytest.mark.parametrize(
        "kind", ["i", "x", "y", "z", "h", "s", "sdg", "t", "tdg", "sx"]
    )
    def test_fixed_gates_are_unitary(self, kind):
        mat = Operation(kind, (0,)).matrix()
        assert np.allclose(mat @ mat.conj().T, np.eye(2))

    def test_hashable(self):
        assert Operation("h", (0,)) == Operation("H", [0])
        assert len({Operation("h", (0,)), Operation("h", [0])}) == 1


class TestCircuit:
    def test_init(self):
        circ = Circuit(3)
        assert circ.n_qubits == 3
        assert circ.n_clbits == 0
        assert circ.name == "circuit"
        assert circ.n_ops == len(circ) == 0
        assert not circ.has_measurements

        with pytest.raises(ValueError, match="'n_qubits' must be greater"):
            Circuit(0)
        with pytest.raises(ValueError, match="'n_clbits' must be greater"):
            Circuit(1, n_clbits=-1)

    def test_chaining(self, bell_circuit):
        assert [op.kind for op in bell_circuit] == ["h", "x"]
        assert bell_circuit.operations[1] == Operation(
            "x", (1,), controls=(0,)
        )
        assert bell_circuit.n_ops == 2
        assert isinstance(bell_circuit.operations, tuple)

    def test_gate_helpers(self):
        circ = (
            Circuit(3, n_clbits=1)
            .i(0)
            .x(0)
            .y(0)
            .z(0)
            .h(0)
            .s(0)
            .sdg(0)
            .t(0)
            .tdg(0)
            .sx(0)
            .rx(0.1, 1)
            .ry(0.2, 1)
            .rz(0.3, 1)
            .p(0.4, 1)
            .cx(0, 1)
            .cy(1, 2)
            .cz(2, 0)
            .swap(0, 2)
            .reset(1)
            .barrier()
            .measure(2, 0)
        )
        assert circ.n_ops == 21
        assert circ.has_measurements
        assert circ.operations[10].params == (0.1,)
        assert circ.operations[15].controls == (1,)
        assert circ.operations[-1].clbits == (0,)

    @pytest.mark.parametrize(
        "name",
        [
            "i", "x", "y", "z", "h", "s", "sdg", "t", "tdg", "sx", "rx",
            "ry", "rz", "p", "cx", "cy", "cz", "swap", "measure", "reset",
            "barrier",
        ],
    )
    def test_gate_helpers_documented(self, name):
        assert getattr(Circuit, name).__doc__

    def test_out_of_range(self):
        circ = Circuit(2, n_clbits=1)
        with pytest.raises(ValueError, match="only has 2 qubit"):
            circ.h(2)
        with pytest.raises(ValueError, match="only has 1 classical bit"):
            circ.measure(0, 1)
        assert circ.n_ops == 0
