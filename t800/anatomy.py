"""Body parts and the anatomy registry that owns them."""
from __future__ import annotations

import threading
from dataclasses import dataclass, field
from enum import Enum

from t800.health import HealthTracker
from t800.types import PartNotFoundError


class PartType(Enum):
    HEAD = "head"
    BODY = "body"
    ARM = "arm"
    LEG = "leg"


@dataclass(frozen=True)
class Dimensions:
    """Physical size of a part: metres for lengths, kilograms for weight."""

    width: float
    height: float
    depth: float
    weight: float

    def __post_init__(self) -> None:
        if min(self.width, self.height, self.depth, self.weight) <= 0:
            raise ValueError("invalid dimensions: all values must be positive")

    @property
    def volume(self) -> float:
        return self.width * self.height * self.depth

    @property
    def surface_area(self) -> float:
        return 2 * (
            self.width * self.height + self.height * self.depth + self.depth * self.width
        )

    @property
    def density(self) -> float:
        return self.weight / self.volume

    def scale(self, factor: float) -> Dimensions:
        return Dimensions(
            self.width * factor,
            self.height * factor,
            self.depth * factor,
            self.weight * factor,
        )


@dataclass
class Protection:
    """Armor and shield values, each a 0-100 rating.

    Defensive strategies adjust these in place while a threat is engaged,
    from whichever loop is responding. Adjustments go through
    ``scale_armor`` / ``scale_shield``, which hold the record's lock for
    the whole read-modify-write; ``reduce`` reads both ratings under it.
    """

    armor_rating: float
    shield_strength: float
    damage_threshold: float
    armor_type: str = "standard-titanium"
    is_active: bool = True
    _lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False, compare=False,
    )

    def scale_armor(self, factor: float, ceiling: float = 100.0) -> float:
        """Multiply the armor rating by ``factor``, capped at ``ceiling``."""
        with self._lock:
            self.armor_rating = min(ceiling, self.armor_rating * factor)
            return self.armor_rating

    def scale_shield(self, factor: float, ceiling: float = 100.0) -> float:
        """Multiply the shield strength by ``factor``, capped at ``ceiling``."""
        with self._lock:
            self.shield_strength = min(ceiling, self.shield_strength * factor)
            return self.shield_strength

    def reduce(self, raw: float) -> float:
        """Return the damage left after armor and shields."""
        with self._lock:
            if not self.is_active:
                return raw
            return raw * (1 - self.armor_rating / 100) * (1 - self.shield_strength / 100)


def default_protection(part_type: PartType) -> Protection:
    if part_type is PartType.HEAD:
        return Protection(95, 90, 50, "reinforced-titanium")
    if part_type is PartType.BODY:
        return Protection(90, 85, 75, "titanium")
    return Protection(80, 75, 60, "standard-titanium")


@dataclass
class BodyPart:
    part_type: PartType
    name: str
    dimensions: Dimensions
    is_critical: bool = False
    protection: Protection | None = None
    health: HealthTracker = field(default_factory=HealthTracker)

    def __post_init__(self) -> None:
        if self.protection is None:
            self.protection = default_protection(self.part_type)

    def take_damage(self, impact: float) -> float:
        """Apply ``impact`` through protection; return the damage actually taken."""
        return self.health.reduce(self.protection.reduce(impact))


# Standard dimensions: width, height, depth (m), weight (kg).
HEAD_DIMENSIONS = Dimensions(0.3, 0.4, 0.3, 15.0)
BODY_DIMENSIONS = Dimensions(0.5, 0.8, 0.4, 45.0)
ARM_DIMENSIONS = Dimensions(0.2, 0.7, 0.2, 20.0)
LEG_DIMENSIONS = Dimensions(0.25, 0.9, 0.25, 25.0)


class Anatomy:
    """Registry of the agent's fixed set of body parts.

    The registry is the only mutator of its parts. Its lock guards the
    name-to-part mapping; health changes are serialized by each part's
    own tracker lock, so damage to one part does not hold up lookups.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.head = BodyPart(PartType.HEAD, "head", HEAD_DIMENSIONS, is_critical=True)
        self.body = BodyPart(PartType.BODY, "body", BODY_DIMENSIONS, is_critical=True)
        self.arms = tuple(
            BodyPart(PartType.ARM, f"arm_{side}", ARM_DIMENSIONS, is_critical=False)
            for side in ("left", "right")
        )
        self.legs = tuple(
            BodyPart(PartType.LEG, f"leg_{side}", LEG_DIMENSIONS, is_critical=True)
            for side in ("left", "right")
        )
        self._parts: dict[str, BodyPart] = {
            part.name: part for part in (self.head, self.body, *self.arms, *self.legs)
        }

    def parts(self) -> list[BodyPart]:
        with self._lock:
            return list(self._parts.values())

    def get_part(self, name: str) -> BodyPart:
        with self._lock:
            part = self._parts.get(name)
        if part is None:
            raise PartNotFoundError(name)
        return part

    def update_part(self, name: str, damage: float) -> float:
        """Route ``damage`` through the named part's protection.

        Returns the damage actually applied.
        """
        return self.get_part(name).take_damage(damage)

    def is_part_critical(self, name: str) -> bool:
        with self._lock:
            part = self._parts.get(name)
        return part is not None and part.is_critical

    def get_critical_parts(self) -> list[BodyPart]:
        with self._lock:
            return [part for part in self._parts.values() if part.is_critical]

    def update_all_parts(self, now: float) -> None:
        for part in self.parts():
            part.health.update(now)

    def get_health_status(self) -> dict[str, float]:
        """Snapshot of part name -> health percentage."""
        with self._lock:
            return {name: part.health.percentage() for name, part in self._parts.items()}

    def calculate_total_weight(self) -> float:
        with self._lock:
            return sum(part.dimensions.weight for part in self._parts.values())
