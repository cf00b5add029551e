"""Tests for threat scanners."""
from __future__ import annotations

from t800.scanner import Scanner, SimulatedScanner, StaticScanner, threat_level
from t800.spatial import Location, distance
from t800.types import Threat


class TestThreatLevel:
    def test_bands(self) -> None:
        here = Location()
        assert threat_level(Location(5, 0, 0), here) == 9
        assert threat_level(Location(20, 0, 0), here) == 6
        assert threat_level(Location(45, 0, 0), here) == 3
        assert threat_level(Location(90, 0, 0), here) == 1


class TestSimulatedScanner:
    def test_conforms_to_protocol(self) -> None:
        assert isinstance(SimulatedScanner(), Scanner)

    def test_always_detect_finds_one_per_bearing(self) -> None:
        scanner = SimulatedScanner(detection_chance=1.0, seed=1)
        threats = scanner.scan_area(Location(10, 10, 2))
        assert len(threats) == 36
        assert len({t.id for t in threats}) == 36

    def test_threats_within_range_and_fresh(self) -> None:
        origin = Location(10, 10, 2)
        scanner = SimulatedScanner(scan_range=50.0, detection_chance=1.0, seed=3)
        for threat in scanner.scan_area(origin):
            assert distance(origin, threat.location) <= 50.0 + 1e-9
            assert threat.location.z == 2
            assert threat.health == 100.0
            assert threat.severity == threat_level(threat.location, origin)

    def test_never_detect(self) -> None:
        assert SimulatedScanner(detection_chance=0.0).scan_area(Location()) == []

    def test_seeded_scans_repeat(self) -> None:
        a = SimulatedScanner(seed=42).scan_area(Location())
        b = SimulatedScanner(seed=42).scan_area(Location())
        assert [t.location for t in a] == [t.location for t in b]


class TestStaticScanner:
    def test_plays_script_then_repeats_last(self) -> None:
        t1 = Threat(id="A", kind="x", location=Location(), severity=1)
        scanner = StaticScanner([[t1], []])
        assert scanner.scan_area(Location()) == [t1]
        assert scanner.scan_area(Location()) == []
        assert scanner.scan_area(Location()) == []
        assert len(scanner.calls) == 3

    def test_call_history_is_bounded(self) -> None:
        scanner = StaticScanner(history=2)
        for x in range(5):
            scanner.scan_area(Location(x, 0, 0))
        assert list(scanner.calls) == [Location(3, 0, 0), Location(4, 0, 0)]

    def test_default_is_empty(self) -> None:
        assert StaticScanner().scan_area(Location()) == []
