"""Defensive strategies and the read-only catalog that serves them."""
from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING

from t800.actions import Action, check_inputs
from t800.anatomy import PartType
from t800.types import InvalidOperationError

if TYPE_CHECKING:
    from t800.anatomy import BodyPart
    from t800.types import Threat

logger = logging.getLogger(__name__)

PROTECTION_CEILING = 100.0


@dataclass(frozen=True)
class EmergencyShields:
    """Scale shield strength up by ``boost``, capped at 100.

    The boost stays in place after the engagement; nothing reverts it.
    """

    boost: float = 1.5

    def apply(self, part: BodyPart | None, threat: Threat | None) -> None:
        check_inputs(part, threat, what="emergency shields")
        shield = part.protection.scale_shield(self.boost, PROTECTION_CEILING)
        logger.debug("Shields on %s raised to %.1f", part.name, shield)


@dataclass(frozen=True)
class EvasiveManeuver:
    def apply(self, part: BodyPart | None, threat: Threat | None) -> None:
        check_inputs(part, threat, what="evasive maneuver")
        logger.debug("Evasive maneuver for %s away from %s", part.name, threat.id)


@dataclass(frozen=True)
class ReinforceCriticalSystems:
    """Scale armor up by ``boost`` on critical parts, capped at 100."""

    boost: float = 1.3

    def apply(self, part: BodyPart | None, threat: Threat | None) -> None:
        check_inputs(part, threat, what="reinforcement")
        if not part.is_critical:
            raise InvalidOperationError(f"part is not critical: {part.name}")
        armor = part.protection.scale_armor(self.boost, PROTECTION_CEILING)
        logger.debug("Armor on %s raised to %.1f", part.name, armor)


@dataclass(frozen=True)
class DistributeShieldPower:
    """Rebalance shield strength in proportion to the threat's severity."""

    def apply(self, part: BodyPart | None, threat: Threat | None) -> None:
        check_inputs(part, threat, what="shield distribution")
        part.protection.scale_shield(threat.severity / 10.0, PROTECTION_CEILING)


@dataclass(frozen=True)
class DefenseStrategy:
    priority: int
    action: Action
    description: str


class DefenseCatalog:
    """Part type -> ordered defensive strategies. Immutable after construction."""

    def __init__(self, table: Mapping[PartType, list[DefenseStrategy]]) -> None:
        self._table: Mapping[PartType, tuple[DefenseStrategy, ...]] = MappingProxyType(
            {part_type: tuple(entries) for part_type, entries in table.items()}
        )

    def strategies(self, part: BodyPart) -> tuple[DefenseStrategy, ...]:
        return self._table.get(part.part_type, ())


def make_defense_catalog() -> DefenseCatalog:
    """Build the standard defensive catalog. Arms carry no defensive strategies."""
    return DefenseCatalog({
        PartType.HEAD: [
            DefenseStrategy(
                1, EmergencyShields(),
                "Emergency shield activation for critical head protection",
            ),
            DefenseStrategy(2, EvasiveManeuver(), "Rapid evasive movement to protect head"),
        ],
        PartType.BODY: [
            DefenseStrategy(
                1, ReinforceCriticalSystems(), "Reinforcing critical system protection",
            ),
            DefenseStrategy(2, DistributeShieldPower(), "Optimizing shield distribution"),
        ],
        PartType.LEG: [
            DefenseStrategy(1, EmergencyShields(), "Standard shield activation"),
            DefenseStrategy(2, EvasiveManeuver(), "Basic evasive movement"),
        ],
    })
