"""3D location and movement arithmetic.

All operations are pure: they take locations and return new ones.
"""
from __future__ import annotations

import math
from dataclasses import dataclass

Vec = tuple[float, float, float]


def _sub(a: Vec, b: Vec) -> Vec:
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def _scale(v: Vec, s: float) -> Vec:
    return (v[0] * s, v[1] * s, v[2] * s)


def _magnitude(v: Vec) -> float:
    return math.sqrt(v[0] * v[0] + v[1] * v[1] + v[2] * v[2])


@dataclass(frozen=True, slots=True)
class Location:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def as_tuple(self) -> Vec:
        return (self.x, self.y, self.z)

    def distance_to(self, other: Location) -> float:
        return distance(self, other)

    def move_towards(self, target: Location, speed: float, dt: float) -> Location:
        return move_towards(self, target, speed, dt)

    def move_away_from(self, source: Location, speed: float, dt: float) -> Location:
        return move_away_from(self, source, speed, dt)

    def __str__(self) -> str:
        return f"({self.x:.2f}, {self.y:.2f}, {self.z:.2f})"


@dataclass(frozen=True, slots=True)
class MovementSpeed:
    linear: float = 5.0  # m/s
    angular: float = math.pi / 2  # rad/s


def distance(a: Location, b: Location) -> float:
    return _magnitude(_sub(b.as_tuple(), a.as_tuple()))


def move_towards(origin: Location, target: Location, speed: float, dt: float) -> Location:
    """Advance ``origin`` towards ``target`` by ``speed * dt`` metres.

    Never overshoots: if the step covers the remaining distance the result
    is ``target`` itself.
    """
    step = speed * dt
    if step <= 0.0:
        return origin
    delta = _sub(target.as_tuple(), origin.as_tuple())
    remaining = _magnitude(delta)
    if remaining <= step:
        return target
    dx, dy, dz = _scale(delta, step / remaining)
    return Location(origin.x + dx, origin.y + dy, origin.z + dz)


def move_away_from(origin: Location, source: Location, speed: float, dt: float) -> Location:
    """Step ``speed * dt`` metres directly away from ``source``.

    When both points coincide there is no direction to retreat in and
    ``origin`` is returned unchanged.
    """
    step = speed * dt
    delta = _sub(origin.as_tuple(), source.as_tuple())
    mag = _magnitude(delta)
    if step <= 0.0 or mag == 0.0:
        return origin
    dx, dy, dz = _scale(delta, step / mag)
    return Location(origin.x + dx, origin.y + dy, origin.z + dz)
