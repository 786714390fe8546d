"""Infected-count history and CSV export."""

from __future__ import annotations

from typing import Iterable, Iterator, NamedTuple

import pandas as pd

CSV_COLUMNS = ("Step", "Infected Nodes")


class Sample(NamedTuple):
    step: int
    infected_count: int


class TimeSeries:
    """Append-only ``(step, infected_count)`` samples, one per tick.

    Steps run 0, 1, 2, ... without gaps; counts never decrease.
    """

    def __init__(self, samples: Iterable[tuple[int, int]] = ()) -> None:
        self._samples: list[Sample] = []
        for s, count in samples:
            self.append(s, count)

    def append(self, step: int, infected_count: int) -> Sample:
        expected = self._samples[-1].step + 1 if self._samples else 0
        if step != expected:
            raise ValueError(f"Expected sample for step {expected}, got step {step}")
        if infected_count < 0:
            raise ValueError(f"Infected count must be >= 0, got {infected_count}")
        if self._samples and infected_count < self._samples[-1].infected_count:
            raise ValueError(
                f"Infected count decreased from {self._samples[-1].infected_count} "
                f"to {infected_count} at step {step}"
            )
        sample = Sample(step, infected_count)
        self._samples.append(sample)
        return sample

    def __len__(self) -> int:
        return len(self._samples)

    def __iter__(self) -> Iterator[Sample]:
        return iter(self._samples)

    @property
    def last(self) -> Sample | None:
        return self._samples[-1] if self._samples else None

    @property
    def steps(self) -> list[int]:
        return [s.step for s in self._samples]

    @property
    def counts(self) -> list[int]:
        return [s.infected_count for s in self._samples]

    def snapshot(self) -> list[Sample]:
        """Copy of the samples, safe to hand to exporters."""
        return list(self._samples)

    def to_csv(self) -> str:
        """Two-column CSV text with a header row and no trailing newline."""
        return to_csv(self._samples)


def to_csv(samples: Iterable[tuple[int, int]]) -> str:
    """Serialize ``(step, infected_count)`` pairs as ``Step,Infected Nodes`` CSV."""
    df = pd.DataFrame(
        [(int(s), int(c)) for s, c in samples],
        columns=list(CSV_COLUMNS),
    )
    return df.to_csv(index=False, lineterminator="\n").rstrip("\n")
