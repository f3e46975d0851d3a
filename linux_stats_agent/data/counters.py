"""Previous-reading store for cumulative kernel counters."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Sequence, Tuple

CPU_FAMILY = "cpu"
DISK_FAMILY = "disk"
NETWORK_FAMILY = "network"


@dataclass(frozen=True, slots=True)
class CounterSample:
    """Timestamped copy of one identity's cumulative counters."""

    timestamp: float
    values: Tuple[int, ...]


class CounterStore:
    """Holds the last sample per ``(family, identity)``.

    Samples are replaced whole on every read and are never deleted, so an
    identity that vanishes simply leaves a stale entry behind.
    """

    def __init__(self) -> None:
        self._samples: Dict[Tuple[str, str], CounterSample] = {}

    def exchange(self, family: str, identity: str, sample: CounterSample) -> CounterSample | None:
        """Store ``sample`` and return the one it replaced, if any."""

        key = (family, identity)
        previous = self._samples.get(key)
        self._samples[key] = sample
        return previous

    def get(self, family: str, identity: str) -> CounterSample | None:
        return self._samples.get((family, identity))

    def __len__(self) -> int:
        return len(self._samples)


def counter_deltas(previous: CounterSample | None, current: CounterSample) -> Tuple[int, ...] | None:
    """Per-counter increase since ``previous``.

    ``None`` when there is nothing to compare against or when any counter went
    backwards (the source was reset), so callers never report negative rates.
    """

    if previous is None or len(previous.values) != len(current.values):
        return None
    deltas = tuple(now - before for now, before in zip(current.values, previous.values))
    if any(delta < 0 for delta in deltas):
        return None
    return deltas


def per_second(previous: CounterSample | None, current: CounterSample) -> Sequence[float] | None:
    """Rates for every counter, or ``None`` when no rate can be reported."""

    deltas = counter_deltas(previous, current)
    if deltas is None:
        return None
    elapsed = current.timestamp - previous.timestamp
    if elapsed <= 0:
        return None
    return tuple(delta / elapsed for delta in deltas)
