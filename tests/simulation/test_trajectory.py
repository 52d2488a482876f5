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
import dataclasses

import numpy as np
import pytest

from stochnoise.circuit import Circuit
from stochnoise.noise_model import NoiseModel
from stochnoise.simulation.qutip_engine import QutipStateEngine
from stochnoise.simulation.trajectory import TrajectorySampler

NOISELESS = NoiseModel(effects="")


class RecordingEngine(QutipStateEngine):
    """Keeps track of the calls made by the sampler."""

    instances: list = []

    def __init__(self, n_qubits):
        super().__init__(n_qubits)
        self.channels = []
        self.approximations = 0
        self.disposed = False
        RecordingEngine.instances.append(self)

    def apply_channel(self, kraus_ops, qubit, draw):
        self.channels.append(qubit)
        return super().apply_channel(kraus_ops, qubit, draw)

    def approximate(self, fidelity):
        self.approximations += 1
        return super().approximate(fidelity)

    def dispose(self):
        self.disposed = True
        super().dispose()


@pytest.fixture
def recording_engine():
    RecordingEngine.instances = []
    yield RecordingEngine
    RecordingEngine.instances = []


def _sampler(circuit, noise_model=NOISELESS, keys=((0, "0"),), **kwargs):
    return TrajectorySampler(circuit, noise_model, keys, **kwargs)


def test_noiseless_run():
    circ = Circuit(2).x(0)
    record = _sampler(circ, keys=((0, "01"), (1, "00"))).run(3, seed=11)
    assert record.run_id == 3
    assert record.property_keys == ((0, "01"), (1, "00"))
    assert record.property_values == pytest.approx((1.0, 0.0))
    assert record.outcome == "01"
    assert record.increment == 1
    assert record.approximations == 0
    assert record.wall_time > 0


def test_reproducible(bell_circuit):
    model = NoiseModel(0.05)
    sampler = _sampler(bell_circuit, model, ((0, "00"), (1, "11")))
    for run_id in range(10):
        a = sampler.run(run_id, seed=2)
        b = sampler.run(run_id, seed=2)
        assert dataclasses.replace(a, wall_time=0) == dataclasses.replace(
            b, wall_time=0
        )


def test_classical_register(measured_circuit):
    record = _sampler(measured_circuit).run(0, seed=0)
    # clbit 1 holds qubit 0 and is the leftmost character
    assert record.outcome == "10"


def test_reset():
    circ = Circuit(1).x(0).reset(0)
    assert _sampler(circ).run(0, seed=0).property_values == pytest.approx(
        (1.0,)
    )
    circ = Circuit(1).h(0).reset(0)
    for run_id in range(5):
        record = _sampler(circ).run(run_id, seed=0)
        assert record.property_values == pytest.approx((1.0,))


def test_certain_phase_flip():
    model = NoiseModel(1.0, 0.0, multi_qubit_factor=1.0, effects="P")
    # H Z H Z acts as X on |0>, up to a phase
    circ = Circuit(1).h(0).h(0)
    record = _sampler(circ, model, ((0, "1"),)).run(0, seed=4)
    assert record.property_values == pytest.approx((1.0,))


def test_certain_damping():
    model = NoiseModel(0.0, 1.0, multi_qubit_factor=1.0, effects="A")
    record = _sampler(Circuit(1).x(0), model).run(0, seed=4)
    assert record.property_values == pytest.approx((1.0,))
    assert record.outcome == "0"


def test_depolarizing_rate():
    model = NoiseModel(1.0, 0.0, multi_qubit_factor=1.0, effects="D")
    sampler = _sampler(Circuit(1).x(0), model, ((0, "1"),))
    flips = [sampler.run(i, seed=8).outcome == "0" for i in range(400)]
    # X and Y errors flip the qubit, each with probability 1/4
    assert 0.4 < np.mean(flips) < 0.6


def test_noise_on_every_touched_qubit(recording_engine):
    model = NoiseModel(0.0, 0.1, effects="A")
    circ = Circuit(3, n_clbits=1).cx(2, 0).barrier().h(1).measure(1, 0)
    _sampler(circ, model, engine_factory=recording_engine).run(0, seed=1)
    (engine,) = recording_engine.instances
    # Controls first, no noise after barriers nor measurements
    assert engine.channels == [2, 0, 1]
    assert engine.disposed


def test_zero_probability_effects_consume_draws():
    circ = Circuit(1).h(0)
    ap = _sampler(circ, NoiseModel(0.0, 0.0, effects="AP"), ())
    pa = _sampler(circ, NoiseModel(0.0, 0.0, effects="PA"), ())
    for run_id in range(20):
        a = ap.run(run_id, seed=6)
        b = pa.run(run_id, seed=6)
        assert a.property_values == b.property_values == ()
        assert a.outcome == b.outcome


def test_approximation_checkpoints(recording_engine):
    circ = Circuit(2).h(0).barrier().h(1).cx(0, 1).rz(0.3, 1).x(0)
    sampler = _sampler(
        circ,
        step_interval=2,
        step_fidelity=0.9,
        engine_factory=recording_engine,
    )
    record = sampler.run(0, seed=0)
    assert record.approximations == 2
    assert recording_engine.instances[0].approximations == 2

    exact = _sampler(circ, step_interval=2, step_fidelity=1.0)
    assert exact.run(0, seed=0).approximations == 0


def test_dispose_on_failure(recording_engine):
    class FailingEngine(RecordingEngine):
        def apply(self, operation):
            raise MemoryError("no room")

    with pytest.raises(MemoryError, match="no room"):
        _sampler(Circuit(1).h(0), engine_factory=FailingEngine).run(0, 0)
    assert recording_engine.instances[0].disposed


def test_baseline_is_noiseless():
    model = NoiseModel(1.0, 0.0, multi_qubit_factor=1.0, effects="P")
    circ = Circuit(1).h(0).h(0)
    sampler = _sampler(circ, model, ((0, "0"),), step_fidelity=0.5)
    record = sampler.run_baseline(seed=3)
    assert record.run_id == -1
    assert record.property_values == pytest.approx((1.0,))
    assert record.approximations == 0


@pytest.mark.parametrize(
    "kwargs, msg",
    [
        (dict(step_interval=0), "'step_interval' must be greater"),
        (dict(step_fidelity=0), "'step_fidelity' must be greater"),
    ],
)
def test_invalid_sampler(kwargs, msg):
    with pytest.raises(ValueError, match=msg):
        _sampler(Circuit(1), **kwargs)
