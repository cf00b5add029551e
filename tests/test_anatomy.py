"""Tests for body parts, protection and the anatomy registry."""
from __future__ import annotations

import threading

import pytest

from t800.anatomy import (
    Anatomy,
    BodyPart,
    Dimensions,
    PartType,
    Protection,
    default_protection,
)
from t800.types import PartNotFoundError


class TestDimensions:
    @pytest.mark.parametrize("dims", [
        (0, 1, 1, 1),
        (1, 0, 1, 1),
        (1, 1, -1, 1),
        (1, 1, 1, 0),
    ])
    def test_non_positive_rejected(self, dims: tuple[float, ...]) -> None:
        with pytest.raises(ValueError):
            Dimensions(*dims)

    def test_derived_values(self) -> None:
        dims = Dimensions(1.0, 2.0, 3.0, 12.0)
        assert dims.volume == 6.0
        assert dims.surface_area == 22.0
        assert dims.density == 2.0

    def test_scale(self) -> None:
        assert Dimensions(1, 2, 3, 4).scale(2) == Dimensions(2, 4, 6, 8)


class TestProtection:
    def test_inactive_passes_raw_damage(self) -> None:
        prot = Protection(90, 90, 50, is_active=False)
        assert prot.reduce(40.0) == 40.0

    def test_multiplicative_reduction(self) -> None:
        prot = Protection(50, 50, 0)
        assert prot.reduce(100.0) == pytest.approx(25.0)

    def test_monotonic_in_armor_and_shield(self) -> None:
        previous = None
        for rating in range(0, 101, 10):
            damage = Protection(rating, 30, 0).reduce(100.0)
            if previous is not None:
                assert damage <= previous
            previous = damage
        previous = None
        for rating in range(0, 101, 10):
            damage = Protection(30, rating, 0).reduce(100.0)
            if previous is not None:
                assert damage <= previous
            previous = damage

    def test_scale_is_capped(self) -> None:
        prot = Protection(60, 60, 0)
        assert prot.scale_shield(1.5) == 90.0
        assert prot.scale_shield(1.5) == 100.0
        assert prot.scale_armor(0.5) == 30.0
        assert (prot.armor_rating, prot.shield_strength) == (30.0, 100.0)

    def test_concurrent_scaling_loses_no_updates(self) -> None:
        prot = Protection(1.0, 1.0, 0)
        unbounded = float("inf")

        def churn() -> None:
            for _ in range(500):
                prot.scale_shield(2.0, unbounded)
                prot.scale_armor(2.0, unbounded)
                prot.scale_shield(0.5, unbounded)
                prot.scale_armor(0.5, unbounded)

        threads = [threading.Thread(target=churn) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert (prot.armor_rating, prot.shield_strength) == (1.0, 1.0)

    def test_defaults_per_part_type(self) -> None:
        assert default_protection(PartType.HEAD).armor_rating == 95
        assert default_protection(PartType.BODY).shield_strength == 85
        leg = default_protection(PartType.LEG)
        assert (leg.armor_rating, leg.shield_strength, leg.armor_type) == (
            80, 75, "standard-titanium",
        )


class TestBodyPart:
    def test_take_damage_goes_through_protection(self) -> None:
        part = BodyPart(
            PartType.ARM, "arm_test", Dimensions(1, 1, 1, 1),
            protection=Protection(50, 0, 0),
        )
        assert part.take_damage(40.0) == pytest.approx(20.0)
        assert part.health.current == pytest.approx(80.0)

    def test_default_protection_assigned(self) -> None:
        part = BodyPart(PartType.HEAD, "h", Dimensions(1, 1, 1, 1))
        assert part.protection == default_protection(PartType.HEAD)


class TestAnatomy:
    def test_critical_parts(self) -> None:
        anatomy = Anatomy()
        names = {part.name for part in anatomy.get_critical_parts()}
        assert names == {"head", "body", "leg_left", "leg_right"}

    def test_total_weight(self) -> None:
        assert Anatomy().calculate_total_weight() == 150.0

    def test_named_and_typed_access_agree(self) -> None:
        anatomy = Anatomy()
        assert anatomy.get_part("head") is anatomy.head
        assert anatomy.get_part("body") is anatomy.body
        assert [anatomy.get_part(n) for n in ("arm_left", "arm_right")] == list(anatomy.arms)
        assert [anatomy.get_part(n) for n in ("leg_left", "leg_right")] == list(anatomy.legs)
        assert len(anatomy.parts()) == 6

    def test_get_part_unknown(self) -> None:
        with pytest.raises(PartNotFoundError):
            Anatomy().get_part("tail")

    def test_not_found_is_key_error(self) -> None:
        with pytest.raises(KeyError):
            Anatomy().update_part("tail", 10.0)

    def test_update_part_applies_protection(self) -> None:
        anatomy = Anatomy()
        # Arms: 80 armor, 75 shield -> 0.2 * 0.25 of raw.
        applied = anatomy.update_part("arm_left", 100.0)
        assert applied == pytest.approx(5.0)
        assert anatomy.get_health_status()["arm_left"] == pytest.approx(95.0)
        assert anatomy.get_health_status()["arm_right"] == 100.0

    def test_update_all_parts_regenerates(self) -> None:
        anatomy = Anatomy()
        anatomy.arms[0].protection.is_active = False
        anatomy.update_part("arm_left", 50.0)
        anatomy.update_all_parts(100.0)
        anatomy.update_all_parts(102.0)
        assert anatomy.get_health_status()["arm_left"] == pytest.approx(70.0)

    def test_health_status_covers_every_part(self) -> None:
        status = Anatomy().get_health_status()
        assert set(status) == {
            "head", "body", "arm_left", "arm_right", "leg_left", "leg_right",
        }
        assert all(value == 100.0 for value in status.values())

    def test_is_part_critical(self) -> None:
        anatomy = Anatomy()
        assert anatomy.is_part_critical("leg_left")
        assert not anatomy.is_part_critical("arm_right")
        assert not anatomy.is_part_critical("tail")
