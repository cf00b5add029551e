"""Offensive strategies, weapon damage table and the offense catalog."""
from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING

from t800.actions import Action, check_inputs
from t800.anatomy import PartType

if TYPE_CHECKING:
    from t800.anatomy import BodyPart
    from t800.types import Threat

logger = logging.getLogger(__name__)

# Damage dealt to a threat's health per hit.
WEAPON_DAMAGE: Mapping[str, float] = MappingProxyType({
    "plasma_cannon": 25.0,
    "missile": 40.0,
    "emp": 15.0,
    "laser": 30.0,
})


@dataclass(frozen=True)
class FireWeapon:
    """Fire ``weapon`` from a part of type ``mount``.

    Only announces the shot; damage is resolved by the processor.
    """

    weapon: str
    mount: PartType
    verb: str = "Firing"

    def apply(self, part: BodyPart | None, threat: Threat | None) -> None:
        check_inputs(part, threat, self.mount, what=self.weapon)
        logger.info("%s %s from %s at threat %s", self.verb, self.weapon, part.name, threat.id)


@dataclass(frozen=True)
class AttackStrategy:
    priority: int
    action: Action
    description: str
    weapon: str
    power_usage: float
    range: float
    preemptive: bool = False


class OffenseCatalog:
    """Part type -> ordered attack strategies. Immutable after construction."""

    def __init__(self, table: Mapping[PartType, list[AttackStrategy]]) -> None:
        self._table: Mapping[PartType, tuple[AttackStrategy, ...]] = MappingProxyType(
            {part_type: tuple(entries) for part_type, entries in table.items()}
        )

    def strategies(self, part: BodyPart) -> tuple[AttackStrategy, ...]:
        return self._table.get(part.part_type, ())

    def preemptive_strategies(self, part: BodyPart) -> tuple[AttackStrategy, ...]:
        return tuple(s for s in self.strategies(part) if s.preemptive)

    def weapons(self) -> list[str]:
        """Distinct weapon names in catalog order."""
        seen: list[str] = []
        for entries in self._table.values():
            for strategy in entries:
                if strategy.weapon not in seen:
                    seen.append(strategy.weapon)
        return seen

    def mount_of(self, weapon: str) -> tuple[PartType, AttackStrategy] | None:
        """Return the part type carrying ``weapon`` and its strategy, if any."""
        for part_type, entries in self._table.items():
            for strategy in entries:
                if strategy.weapon == weapon:
                    return part_type, strategy
        return None


def make_offense_catalog() -> OffenseCatalog:
    return OffenseCatalog({
        PartType.ARM: [
            AttackStrategy(
                1, FireWeapon("plasma_cannon", PartType.ARM), "Plasma cannon attack",
                weapon="plasma_cannon", power_usage=75.0, range=50.0, preemptive=True,
            ),
        ],
        PartType.BODY: [
            AttackStrategy(
                2, FireWeapon("missile", PartType.BODY, verb="Launching"),
                "Guided missile launch",
                weapon="missile", power_usage=90.0, range=100.0, preemptive=True,
            ),
            AttackStrategy(
                3, FireWeapon("emp", PartType.BODY, verb="Activating"), "EMP pulse",
                weapon="emp", power_usage=85.0, range=30.0, preemptive=True,
            ),
        ],
        PartType.HEAD: [
            AttackStrategy(
                4, FireWeapon("laser", PartType.HEAD), "Laser beam attack",
                weapon="laser", power_usage=60.0, range=40.0, preemptive=True,
            ),
        ],
    })
