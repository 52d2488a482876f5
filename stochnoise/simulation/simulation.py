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
"""Defines the StochasticNoiseSimulator, sampling noisy trajectories."""
from __future__ import annotations

import dataclasses
import logging
import os
import time
from collections import Counter
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Optional

from stochnoise.backend.abc import Simulator
from stochnoise.backend.aggregators import Aggregator
from stochnoise.backend.engine import EngineFactory
from stochnoise.backend.results import RunStatistics, TrajectoryRecord
from stochnoise.circuit import Circuit
from stochnoise.exceptions import ConfigurationError, SimulationFailedError
from stochnoise.math import sampling_rng
from stochnoise.noise_model import NoiseModel
from stochnoise.result import SampledResult, StochasticResults
from stochnoise.simulation.qutip_engine import QutipStateEngine
from stochnoise.simulation.simconfig import StochasticConfig
from stochnoise.simulation.trajectory import TrajectorySampler

logger = logging.getLogger(__name__)


def available_parallelism(reserved: int = 4) -> int:
    """The number of workers to use by default.

    Args:
        reserved: The number of CPUs left to the rest of the system.

    Returns:
        The CPUs usable by this process minus ``reserved``, and at least 1.
    """
    try:
        n_cpus = len(os.sched_getaffinity(0))
    except (AttributeError, OSError):
        # Not available on every platform
        n_cpus = os.cpu_count() or 1
    return max(1, n_cpus - reserved)


def partition_runs(n_runs: int, n_workers: int) -> list[range]:
    """Splits the run ids into contiguous blocks, one per worker.

    The first ``n_runs % n_workers`` blocks get one extra run.

    Args:
        n_runs: The number of runs.
        n_workers: The number of blocks.
    """
    if n_runs <= 0 or n_workers <= 0:
        raise ValueError(
            "The number of runs and of workers must be greater than zero, "
            f"not {n_runs} and {n_workers}."
        )
    base, remainder = divmod(n_runs, n_workers)
    blocks = []
    start = 0
    for worker in range(n_workers):
        size = base + (1 if worker < remainder else 0)
        blocks.append(range(start, start + size))
        start += size
    return blocks


def _run_block(
    sampler: TrajectorySampler, run_ids: range, seed: int
) -> tuple[list[TrajectoryRecord], float]:
    logger.debug("Worker starting runs %d to %d.", run_ids[0], run_ids[-1])
    start = time.perf_counter()
    records = [sampler.run(run_id, seed) for run_id in run_ids]
    wall_time = time.perf_counter() - start
    logger.debug(
        "Worker finished runs %d to %d in %.3f s.",
        run_ids[0],
        run_ids[-1],
        wall_time,
    )
    return records, wall_time


class StochasticNoiseSimulator(Simulator):
    """Estimates the statistics of a circuit under gate noise.

    Many independent noisy trajectories are sampled in parallel and
    aggregated into the mean of the recorded properties and a histogram of
    the measured bitstrings. For a fixed seed, the results don't depend on
    the number of parallel instances.

    Args:
        circuit: The circuit to simulate.
        config: The configuration of the simulation. Defaults to
            `StochasticConfig()`.
        seed: The master seed. Generated from OS entropy when left
            undefined.
        engine_factory: Builds the state engine of a trajectory from the
            number of qubits.

    Example:
        ::

            circ = Circuit(2).h(0).cx(0, 1)
            sim = StochasticNoiseSimulator(
                circ, StochasticConfig(recorded_properties="0, 3"), seed=7
            )
            means = sim.stoch_simulate()
            counts = sim.simulate(1000)
    """

    def __init__(
        self,
        circuit: Circuit,
        config: Optional[StochasticConfig] = None,
        seed: int | None = None,
        engine_factory: EngineFactory = QutipStateEngine,
    ) -> None:
        """Instantiates a StochasticNoiseSimulator."""
        super().__init__(circuit, seed=seed)
        self._engine_factory = engine_factory
        self._results: StochasticResults | None = None
        self.set_config(config or StochasticConfig())

    @property
    def config(self) -> StochasticConfig:
        """The current configuration."""
        return self._config

    def set_config(self, config: StochasticConfig) -> None:
        """Sets a new configuration, discarding previous results.

        Args:
            config: The new configuration.
        """
        if not isinstance(config, StochasticConfig):
            raise TypeError(
                "'config' must be of type 'StochasticConfig', "
                f"not {type(config)}."
            )
        property_keys = config.property_keys(self.n_qubits)
        self._config = config
        self._property_keys = property_keys
        self._results = None

    def configure_noise(
        self,
        base_probability: float,
        amplitude_damping_probability: float | None = None,
        multi_qubit_factor: float = 2.0,
    ) -> None:
        """Sets the noise probabilities, discarding previous results.

        Args:
            base_probability: The error probability of single qubit gates.
            amplitude_damping_probability: The amplitude damping
                probability of single qubit gates. Defaults to twice
                ``base_probability``.
            multi_qubit_factor: Scales the probabilities of gates acting on
                several qubits.
        """
        self.set_config(
            dataclasses.replace(
                self._config,
                noise_probability=base_probability,
                amplitude_damping_probability=amplitude_damping_probability,
                multi_qubit_factor=multi_qubit_factor,
            )
        )

    def set_noise_effects(self, effects: str) -> None:
        """Sets the enabled noise effects, discarding previous results.

        Args:
            effects: The effect codes, in application order (e.g. "APD").
        """
        self.set_config(
            dataclasses.replace(self._config, noise_effects=effects)
        )

    def set_run_count(self, runs: int) -> None:
        """Sets the number of trajectories, discarding previous results."""
        if runs <= 0:
            raise ConfigurationError(
                f"The number of runs must be greater than zero, not {runs}."
            )
        self.set_config(dataclasses.replace(self._config, runs=runs))

    @property
    def noise_model(self) -> NoiseModel:
        """The noise model of the current configuration."""
        return self._config.noise_model

    @property
    def name(self) -> str:
        """The name of the simulation, e.g. 'stoch_APD_circuit'."""
        return f"stoch_{self._config.noise_effects}_{self.circuit.name}"

    @property
    def max_instances(self) -> int:
        """The maximal number of parallel workers."""
        return self._config.max_instances or available_parallelism()

    def _sampler(self) -> TrajectorySampler:
        return TrajectorySampler(
            self.circuit,
            self.noise_model,
            self._property_keys,
            step_interval=self._config.step_interval,
            step_fidelity=self._config.step_fidelity,
            engine_factory=self._engine_factory,
        )

    def run_baseline(self) -> float:
        """Times a single run without noise nor approximation.

        Returns:
            The wall time of the run, in seconds.
        """
        record = self._sampler().run_baseline(self.seed)
        logger.info(
            "%s: noiseless run took %.6f s.", self.name, record.wall_time
        )
        return record.wall_time

    def run_all(
        self,
        requested_runs: int | None = None,
        seed: int | None = None,
        perfect_run_time: float = 0.0,
    ) -> tuple[Aggregator, RunStatistics]:
        """Samples and aggregates every trajectory.

        Runs are split into contiguous blocks, each executed sequentially by
        its own worker thread. All workers are waited for; if any failed,
        no result is returned.

        Args:
            requested_runs: The number of trajectories. Defaults to the
                configured number of runs.
            seed: The master seed. Defaults to the simulator's seed.
            perfect_run_time: The wall time of the baseline run, reported in
                the statistics.

        Returns:
            The aggregated records and the statistics of the runs.
        """
        runs = self._config.runs if requested_runs is None else requested_runs
        if runs <= 0:
            raise ConfigurationError(
                f"The number of runs must be greater than zero, not {runs}."
            )
        seed = self.seed if seed is None else seed
        n_workers = min(self.max_instances, runs)
        blocks = partition_runs(runs, n_workers)
        sampler = self._sampler()

        start = time.perf_counter()
        with ThreadPoolExecutor(max_workers=n_workers) as executor:
            futures = [
                executor.submit(_run_block, sampler, block, seed)
                for block in blocks
            ]
            wait(futures)
        stoch_wall_time = time.perf_counter() - start

        for block, future in zip(blocks, futures):
            exc = future.exception()
            if exc is not None:
                logger.error(
                    "%s: the worker running runs %d to %d failed: %s",
                    self.name,
                    block[0],
                    block[-1],
                    exc,
                )
                raise SimulationFailedError(
                    f"The worker running runs {block[0]} to {block[-1]} "
                    f"failed with {type(exc).__name__}: {exc}"
                ) from exc

        aggregator = Aggregator(self._property_keys)
        worker_time = 0.0
        for future in futures:
            records, wall_time = future.result()
            aggregator = aggregator.merge(
                Aggregator(self._property_keys, records)
            )
            worker_time += wall_time

        stats = RunStatistics(
            runs=runs,
            approximation_runs=aggregator.approximation_runs,
            perfect_run_time=perfect_run_time,
            stoch_wall_time=stoch_wall_time,
            mean_stoch_run_time=worker_time / runs,
            parallel_instances=n_workers,
            step_fidelity=self._config.step_fidelity,
        )
        logger.info(
            "%s: %d runs on %d instance(s) took %.6f s "
            "(%d approximation(s)).",
            self.name,
            runs,
            n_workers,
            stoch_wall_time,
            stats.approximation_runs,
        )
        return aggregator, stats

    def stoch_simulate(self) -> dict[str, float]:
        """Runs the stochastic simulation.

        Results are cached until the configuration changes.

        Returns:
            The mean probability of each recorded basis state, by label.
        """
        if self._results is None:
            perfect_run_time = self.run_baseline()
            aggregator, stats = self.run_all(
                perfect_run_time=perfect_run_time
            )
            self._results = StochasticResults(
                property_means=aggregator.property_means(),
                sampled=SampledResult(
                    aggregator.measurement_counts(), self._outcome_length
                ),
                statistics=stats,
            )
        return dict(self._results.property_means)

    @property
    def _outcome_length(self) -> int:
        if self.circuit.has_measurements:
            return self.circuit.n_clbits
        return self.n_qubits

    @property
    def results(self) -> StochasticResults:
        """The results of the simulation, which is run if needed."""
        self.stoch_simulate()
        assert self._results is not None
        return self._results

    def simulate(self, shots: int) -> Counter[str]:
        """Samples measurement outcomes from the aggregated histogram.

        Shots are drawn with replacement from the outcome frequencies of
        the trajectories, using a stream dedicated to shot sampling. The
        stochastic simulation is run first if needed.

        Args:
            shots: The number of samples.

        Returns:
            The number of occurrences of each bitstring, summing to
            ``shots``.
        """
        if shots <= 0:
            raise ValueError(
                f"The number of shots must be greater than zero, not {shots}."
            )
        return self.results.sampled.get_samples(
            shots, rng=sampling_rng(self.seed)
        )

    def additional_statistics(self) -> dict[str, str]:
        """The statistics of the last stochastic simulation.

        Before the stochastic simulation runs, the counts and times are
        zero and the fidelity and worker count come from the
        configuration.
        """
        if self._results is None:
            return RunStatistics(
                runs=self._config.runs,
                approximation_runs=0,
                perfect_run_time=0,
                stoch_wall_time=0,
                mean_stoch_run_time=0,
                parallel_instances=min(self.max_instances, self._config.runs),
                step_fidelity=self._config.step_fidelity,
            ).as_dict()
        return self._results.statistics.as_dict()
