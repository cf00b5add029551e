"""Threat scanners: the protocol the processor consumes plus two implementations."""
from __future__ import annotations

import math
import random as _random_mod
import time
import uuid
from collections import deque
from typing import Protocol, runtime_checkable

from t800.spatial import Location, distance
from t800.types import Threat


@runtime_checkable
class Scanner(Protocol):
    """Detects threats around a location.

    Called from the scan loop's worker thread; may block.
    """

    def scan_area(self, location: Location) -> list[Threat]:
        ...


def threat_level(threat_loc: Location, current: Location) -> int:
    """Closer threats are more severe."""
    dist = distance(threat_loc, current)
    if dist < 10.0:
        return 9
    if dist < 30.0:
        return 6
    if dist < 60.0:
        return 3
    return 1


class SimulatedScanner:
    """Randomized 360-degree sweep in 10 degree steps.

    Args:
        scan_range: Maximum detection distance in metres.
        detection_chance: Probability of a contact on each bearing.
        seed: Optional RNG seed for reproducible sweeps.
    """

    def __init__(
        self,
        scan_range: float = 100.0,
        detection_chance: float = 0.05,
        seed: int | None = None,
    ) -> None:
        self._range = scan_range
        self._chance = detection_chance
        # Per-instance RNG; the scan loop is the only caller.
        self._rng = _random_mod.Random(seed)

    def scan_area(self, location: Location) -> list[Threat]:
        threats: list[Threat] = []
        for angle in range(0, 360, 10):
            if self._rng.random() >= self._chance:
                continue
            rad = math.radians(angle)
            reach = self._rng.uniform(1.0, self._range)
            loc = Location(
                location.x + reach * math.cos(rad),
                location.y + reach * math.sin(rad),
                location.z,
            )
            threats.append(Threat(
                id=f"THREAT-{uuid.uuid4().hex[:12]}",
                kind="unknown",
                location=loc,
                severity=threat_level(loc, location),
                timestamp=time.time(),
            ))
        return threats


class StaticScanner:
    """Returns a fixed script of scan results, then the last one forever.

    Each entry is the list returned by one ``scan_area`` call. The most
    recent ``history`` scan locations are kept in ``calls``.
    """

    def __init__(
        self, script: list[list[Threat]] | None = None, history: int = 100,
    ) -> None:
        self._script = list(script) if script else [[]]
        self.calls: deque[Location] = deque(maxlen=history)

    def scan_area(self, location: Location) -> list[Threat]:
        self.calls.append(location)
        if len(self._script) > 1:
            return list(self._script.pop(0))
        return list(self._script[0])
