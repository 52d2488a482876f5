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
"""Defines the aggregation of trajectory records into final statistics."""
from __future__ import annotations

import math
from collections import Counter
from collections.abc import Iterable, Sequence

from stochnoise.backend.results import PropertyKey, TrajectoryRecord
from stochnoise.exceptions import PropertyMismatchError


def _mean_aggregator(values: Sequence[Sequence[float]]) -> list[float]:
    """Takes the mean of each position of the given sequences.

    The sums are exactly rounded (`math.fsum`), so the result does not
    depend on the order of ``values``.
    """
    if not values:
        raise ValueError("Cannot average 0 samples.")
    return [math.fsum(column) / len(values) for column in zip(*values)]


def _bag_union_aggregator(values: Iterable[Counter]) -> Counter:
    """Join a list of Counter objects."""
    total: Counter = Counter()
    for value in values:
        total.update(value)
    return total


class Aggregator:
    """Merges trajectory records into mean properties and outcome counts.

    Records are kept by run id; merging two aggregators is a union of
    their records, so merging is commutative and associative and the
    aggregated statistics don't depend on the order in which runs finished.

    Args:
        property_keys: The (ordinal, label) keys every record must carry.
        records: Records to start with.
    """

    def __init__(
        self,
        property_keys: Sequence[PropertyKey],
        records: Iterable[TrajectoryRecord] = (),
    ) -> None:
        """Initializes an aggregator."""
        self._property_keys = tuple(property_keys)
        self._records: dict[int, TrajectoryRecord] = {}
        for record in records:
            self.add(record)

    @property
    def property_keys(self) -> tuple[PropertyKey, ...]:
        """The keys every record carries."""
        return self._property_keys

    @property
    def n_runs(self) -> int:
        """The number of aggregated runs."""
        return len(self._records)

    @property
    def run_ids(self) -> list[int]:
        """The ids of the aggregated runs, sorted."""
        return sorted(self._records)

    @property
    def approximation_runs(self) -> int:
        """The approximation checkpoints that fired, over all runs."""
        return sum(rec.approximations for rec in self._records.values())

    @property
    def total_wall_time(self) -> float:
        """The summed wall time of the aggregated runs."""
        return math.fsum(rec.wall_time for rec in self._records.values())

    def add(self, record: TrajectoryRecord) -> None:
        """Adds a single record.

        Args:
            record: The record of a run that wasn't aggregated yet.
        """
        if record.property_keys != self._property_keys:
            raise PropertyMismatchError(
                expected=self._property_keys,
                received=record.property_keys,
                run_id=record.run_id,
            )
        if record.run_id in self._records:
            raise ValueError(f"Run {record.run_id} was already aggregated.")
        self._records[record.run_id] = record

    def merge(self, other: Aggregator) -> Aggregator:
        """Returns a new aggregator holding the records of both.

        Args:
            other: An aggregator over the same property keys and disjoint
                runs.
        """
        if not isinstance(other, Aggregator):
            raise TypeError(
                f"Can't merge an Aggregator with an object of type "
                f"{type(other)}."
            )
        merged = Aggregator(self._property_keys, self._records.values())
        for record in other._records.values():
            merged.add(record)
        return merged

    def property_means(self) -> dict[str, float]:
        """The mean of each recorded property, by label."""
        if not self._property_keys:
            return {}
        means = _mean_aggregator(
            [rec.property_values for rec in self._records.values()]
        )
        return {
            label: mean
            for (_, label), mean in zip(self._property_keys, means)
        }

    def measurement_counts(self) -> Counter[str]:
        """The number of occurrences of each measured bitstring."""
        return _bag_union_aggregator(
            {rec.outcome: rec.increment}
            for rec in self._records.values()
        )
