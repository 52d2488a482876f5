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
"""Samples single noisy trajectories of a circuit."""
from __future__ import annotations

import logging
import time
from collections.abc import Sequence

import numpy as np

from stochnoise.backend.engine import EngineFactory, StateEngine
from stochnoise.backend.results import PropertyKey, TrajectoryRecord
from stochnoise.circuit import Circuit, Operation
from stochnoise.math import baseline_rng, trajectory_rng
from stochnoise.noise_model import NoiseEffect, NoiseModel
from stochnoise.simulation.qutip_engine import QutipStateEngine

logger = logging.getLogger(__name__)

_NOISELESS = NoiseModel(effects=())


class TrajectorySampler:
    """Runs a circuit once, injecting randomly drawn gate errors.

    Every trajectory uses a fresh state engine and its own random stream,
    derived from the master seed and the run id, so its outcome doesn't
    depend on the worker running it nor on the other trajectories.

    Args:
        circuit: The circuit to run.
        noise_model: The gate noise.
        property_keys: The (ordinal, label) keys of the recorded basis state
            probabilities.
        step_interval: The number of gates between two approximations.
        step_fidelity: The fidelity kept by each approximation. No
            approximation happens when it is 1.
        engine_factory: Builds the state engine of a trajectory from the
            number of qubits.
    """

    def __init__(
        self,
        circuit: Circuit,
        noise_model: NoiseModel,
        property_keys: Sequence[PropertyKey],
        step_interval: int = 1,
        step_fidelity: float = 1.0,
        engine_factory: EngineFactory = QutipStateEngine,
    ) -> None:
        """Initializes a sampler."""
        if step_interval <= 0:
            raise ValueError(
                f"'step_interval' must be greater than zero, not "
                f"{step_interval}."
            )
        if not 0 < step_fidelity <= 1:
            raise ValueError(
                "'step_fidelity' must be greater than zero and smaller than "
                f"or equal to one, not {step_fidelity}."
            )
        self.circuit = circuit
        self.noise_model = noise_model
        self.property_keys = tuple(property_keys)
        self.step_interval = step_interval
        self.step_fidelity = step_fidelity
        self.engine_factory = engine_factory

    def run(self, run_id: int, seed: int) -> TrajectoryRecord:
        """Samples the trajectory `run_id`.

        Args:
            run_id: The id of the run, selecting its random stream.
            seed: The master seed of the simulation.

        Returns:
            The recorded properties and the measured outcome.
        """
        return self._run(
            run_id,
            trajectory_rng(seed, run_id),
            self.noise_model,
            self.step_fidelity,
        )

    def run_baseline(self, seed: int) -> TrajectoryRecord:
        """Runs the circuit without noise nor approximation.

        Only meant to measure the cost of a perfect run; the returned record
        is never aggregated.
        """
        return self._run(-1, baseline_rng(seed), _NOISELESS, 1.0)

    def _run(
        self,
        run_id: int,
        rng: np.random.Generator,
        noise_model: NoiseModel,
        step_fidelity: float,
    ) -> TrajectoryRecord:
        start = time.perf_counter()
        engine = self.engine_factory(self.circuit.n_qubits)
        try:
            clbits = ["0"] * self.circuit.n_clbits
            applied = 0
            approximations = 0
            for op in self.circuit:
                if op.kind == "barrier":
                    continue
                if op.kind == "measure":
                    outcome = engine.measure(rng, op.targets)
                    for clbit, bit in zip(op.clbits, outcome):
                        clbits[self.circuit.n_clbits - 1 - clbit] = bit
                    continue
                if op.kind == "reset":
                    (q,) = op.targets
                    if engine.measure(rng, [q]) == "1":
                        engine.apply(Operation("x", (q,)))
                    continue
                engine.apply(op)
                self._inject_noise(engine, op, rng, noise_model)
                applied += 1
                if step_fidelity < 1 and applied % self.step_interval == 0:
                    achieved = engine.approximate(step_fidelity)
                    approximations += 1
                    logger.debug(
                        "Run %d: approximation after %d gates kept a "
                        "fidelity of %g.",
                        run_id,
                        applied,
                        achieved,
                    )
            values = tuple(
                engine.probability(label) for _, label in self.property_keys
            )
            if self.circuit.has_measurements:
                outcome = "".join(clbits)
            else:
                outcome = engine.measure(rng)
        finally:
            engine.dispose()
        return TrajectoryRecord(
            run_id=run_id,
            property_keys=self.property_keys,
            property_values=values,
            outcome=outcome,
            approximations=approximations,
            wall_time=time.perf_counter() - start,
        )

    @staticmethod
    def _inject_noise(
        engine: StateEngine,
        op: Operation,
        rng: np.random.Generator,
        noise_model: NoiseModel,
    ) -> None:
        multi_qubit = op.arity > 1
        for q in op.qubits:
            for effect in noise_model.effects:
                draw = rng.random()
                if effect is NoiseEffect.AMPLITUDE_DAMPING:
                    engine.apply_channel(
                        noise_model.damping_operators(multi_qubit), q, draw
                    )
                elif draw < noise_model.error_probability(
                    effect, multi_qubit
                ):
                    channel = noise_model.select_error_channel(
                        effect, draw, multi_qubit
                    )
                    engine.apply(Operation(channel.value.lower(), (q,)))
