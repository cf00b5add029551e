"""Shared types and errors for the t800 control core."""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum

from t800.spatial import Location


class OperationMode(Enum):
    NORMAL = "normal"
    COMBAT = "combat"
    EMERGENCY = "emergency"
    MAINTENANCE = "maintenance"


@dataclass
class Threat:
    """An external entity the agent may engage.

    Only combat resolution mutates ``health``; the processor does so under
    its state lock.
    """

    id: str
    kind: str
    location: Location
    severity: int
    health: float = 100.0
    timestamp: float = field(default_factory=time.time)
    description: str = ""

    def __post_init__(self) -> None:
        if not 1 <= self.severity <= 9:
            raise ValueError(f"severity must be in 1..9, got {self.severity}")

    @property
    def is_eliminated(self) -> bool:
        return self.health <= 0.0

    def take_hit(self, damage: float) -> float:
        """Lower health by ``damage`` (clamped at 0) and return the amount applied."""
        if damage <= 0.0:
            return 0.0
        applied = min(damage, self.health)
        self.health = max(0.0, self.health - applied)
        return applied


@dataclass(frozen=True, slots=True)
class Status:
    active: bool
    mode: OperationMode
    last_scan: float | None = None


class T800Error(Exception):
    """Base class for errors raised by the control core."""


class InvalidStateError(T800Error):
    """Raised when an operation needs a running processor and there is none."""


class PartNotFoundError(T800Error, KeyError):
    """Raised on lookups of an unknown body part name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"part not found: {name}")


class InvalidOperationError(T800Error, ValueError):
    """Raised when a strategy action gets missing or mismatched inputs."""
