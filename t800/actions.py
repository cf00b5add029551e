"""Action protocol shared by the offense and defense catalogs."""
from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from t800.types import InvalidOperationError

if TYPE_CHECKING:
    from t800.anatomy import BodyPart, PartType
    from t800.types import Threat


@runtime_checkable
class Action(Protocol):
    """A single offensive or defensive behavior.

    ``apply`` returns normally on success and raises
    ``InvalidOperationError`` when it cannot run against the given inputs.
    """

    def apply(self, part: BodyPart | None, threat: Threat | None) -> None:
        ...


def check_inputs(
    part: BodyPart | None,
    threat: Threat | None,
    mount: PartType | None = None,
    what: str = "action",
) -> None:
    if part is None or threat is None:
        raise InvalidOperationError(f"{what}: invalid parameters")
    if mount is not None and part.part_type is not mount:
        raise InvalidOperationError(
            f"{what} can only be used from {mount.value}, not {part.name}"
        )
