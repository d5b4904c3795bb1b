"""Tests for ship stats and stat updates."""

import dataclasses
import random

import pytest

from galaxy_explorer.models.events import ExplorationEvent, ExplorationEventType
from galaxy_explorer.models.ships import (
    SHIP_CLASS_STATS,
    ShipClass,
    ShipStats,
    apply_black_hole_jump_damage,
    apply_exploration_event,
    generate_ship_options,
    generate_starship,
    repair_system,
    sell_cargo,
    upgrade_system,
)

from conftest import make_stats


def _event(event_type):
    return ExplorationEvent(event_type, "Title", "Description")


class TestShipStatsValidation:
    """Construction-time validation."""

    @pytest.mark.parametrize("tech_level", [0, 11, -1])
    def test_tech_level_range(self, tech_level):
        """Tech level must be 1 to 10."""
        with pytest.raises(ValueError, match="tech_level"):
            make_stats(tech_level=tech_level)

    def test_negative_values(self):
        """No stat may be negative."""
        with pytest.raises(ValueError, match="credits"):
            make_stats(credits=-1)

    def test_current_above_max(self):
        """Bounded stats cannot exceed their maximum."""
        with pytest.raises(ValueError, match="shields"):
            make_stats(shields=150)
        with pytest.raises(ValueError, match="crew"):
            make_stats(crew=60, max_crew=50)

    def test_diplomacy_unbounded(self):
        """Diplomacy has no upper bound."""
        assert make_stats(diplomacy=500).diplomacy == 500

    def test_with_changes_clamps(self, stats):
        """with_changes clamps bounded stats into range."""
        changed = stats.with_changes(hull=500, shields=-20)
        assert changed.hull == stats.max_hull
        assert changed.shields == 0

    def test_immutable(self, stats):
        """Stats cannot be modified in place."""
        with pytest.raises(dataclasses.FrozenInstanceError):
            stats.hull = 1


class TestGenerateStarship:
    """Seeded starship generation."""

    def test_deterministic(self):
        """The same seed builds the same ship."""
        assert generate_starship(7) == generate_starship(7)

    def test_explicit_class(self):
        """A requested class is honoured."""
        ship = generate_starship(7, ShipClass.SCOUT)
        assert ship.ship_class is ShipClass.SCOUT
        assert "Scout" in ship.display_name

    @pytest.mark.parametrize("seed", range(30))
    def test_stats_valid(self, seed):
        """Generated stats are always within range."""
        stats = generate_starship(seed).stats
        assert 3 <= stats.tech_level <= 8
        assert stats.scanners <= stats.max_scanners
        assert stats.crew <= stats.max_crew
        assert stats.name

    def test_every_class_has_modifiers(self):
        """All classes appear in the modifier table."""
        assert set(SHIP_CLASS_STATS) == set(ShipClass)

    def test_ship_options(self):
        """Option lists are reproducible."""
        assert generate_ship_options(3) == generate_ship_options(3)
        assert len(generate_ship_options(3, count=4)) == 4


class TestExplorationOutcomes:
    """Applying exploration events to the ship."""

    def test_resources(self, stats):
        """Resource finds add cargo and credits."""
        updated = apply_exploration_event(stats, _event(ExplorationEventType.RESOURCES), random.Random(0))
        assert updated.cargo == stats.cargo + 50
        assert updated.credits == stats.credits + 1000

    def test_artifact_caps_tech_level(self):
        """Artifacts raise tech level up to 10."""
        stats = make_stats(tech_level=10)
        updated = apply_exploration_event(stats, _event(ExplorationEventType.ARTIFACT))
        assert updated.tech_level == 10
        assert updated.credits == stats.credits + 2000

    def test_danger_costs_crew(self, stats):
        """Hazards cost between one and five crew."""
        updated = apply_exploration_event(stats, _event(ExplorationEventType.DANGER), random.Random(0))
        assert 1 <= stats.crew - updated.crew <= 5

    def test_empty_changes_nothing(self, stats):
        """Routine surveys leave the ship unchanged."""
        assert apply_exploration_event(stats, _event(ExplorationEventType.EMPTY)) == stats

    @pytest.mark.parametrize("event_type", list(ExplorationEventType))
    @pytest.mark.parametrize("seed", range(5))
    def test_results_stay_valid(self, event_type, seed):
        """Every outcome yields valid stats, even for a battered ship."""
        stats = make_stats(hull=5, shields=0, crew=1, combat_power=1, scanners=1, diplomacy=0)
        updated = apply_exploration_event(stats, _event(event_type), random.Random(seed))
        assert isinstance(updated, ShipStats)


class TestBlackHoleDamage:
    """Jump boost damage."""

    def test_shields_absorb(self):
        """Full shields take the whole hit."""
        stats = make_stats(shields=100, hull=90)
        updated = apply_black_hole_jump_damage(stats, random.Random(0))
        assert 15 <= stats.shields - updated.shields < 35
        assert updated.hull == stats.hull

    def test_hull_takes_overflow(self):
        """Without shields seventy percent of the damage hits the hull."""
        stats = make_stats(shields=0, hull=100)
        for seed in range(20):
            updated = apply_black_hole_jump_damage(stats, random.Random(seed))
            assert 10 <= stats.hull - updated.hull <= 23

    def test_critical_hull(self):
        """A weak hull is destroyed by the jump."""
        stats = make_stats(shields=0, hull=20)
        updated = apply_black_hole_jump_damage(stats, random.Random(0))
        assert updated.hull <= 10
        assert updated.is_destroyed


class TestServices:
    """Repairs, trading and upgrades."""

    @pytest.mark.parametrize("target, attr, maximum", [
        ("hull", "hull", "max_hull"),
        ("shields", "shields", "max_shields"),
        ("combat", "combat_power", "max_combat_power"),
    ])
    def test_repair(self, stats, target, attr, maximum):
        """Repairs restore the stat to full for the cost."""
        repaired = repair_system(stats, target, 1000)
        assert getattr(repaired, attr) == getattr(stats, maximum)
        assert repaired.credits == stats.credits - 1000

    def test_repair_unaffordable(self):
        """Without enough credits nothing happens."""
        stats = make_stats(credits=10)
        assert repair_system(stats, "hull", 1000) == stats

    def test_repair_unknown_target(self, stats):
        """Unknown repair targets are rejected."""
        with pytest.raises(ValueError):
            repair_system(stats, "warp core", 100)

    def test_sell_cargo_base_price(self, stats):
        """Outside a market each unit sells for ten credits."""
        updated = sell_cargo(stats, 100)
        assert updated.cargo == stats.cargo - 100
        assert updated.credits == stats.credits + 1000

    def test_sell_cargo_market_price(self, stats):
        """Markets pay between 80% and 160%."""
        updated = sell_cargo(stats, 100, at_market=True, rng=random.Random(0))
        assert 800 <= updated.credits - stats.credits <= 1600

    def test_sell_more_than_held(self, stats):
        """Selling more cargo than carried does nothing."""
        assert sell_cargo(stats, stats.cargo + 1) == stats

    def test_upgrade(self, stats):
        """Upgrades add the amount and charge the cost."""
        upgraded = upgrade_system(stats, "tech_level", 2000, 1)
        assert upgraded.tech_level == stats.tech_level + 1
        assert upgraded.credits == stats.credits - 2000

    def test_upgrade_capped(self):
        """Upgrades never pass the stat's cap."""
        stats = make_stats(tech_level=10, scanners=95)
        assert upgrade_system(stats, "tech_level", 100, 5).tech_level == 10
        assert upgrade_system(stats, "scanners", 100, 50).scanners == stats.max_scanners
        assert upgrade_system(stats, "max_cargo", 100, 5000).max_cargo == 2000

    def test_upgrade_unaffordable(self):
        """Without enough credits nothing happens."""
        stats = make_stats(credits=50)
        assert upgrade_system(stats, "hull", 100, 10) == stats

    @pytest.mark.parametrize("stat", ["name", "credits", "warp"])
    def test_upgrade_invalid_stat(self, stats, stat):
        """Only numeric ship systems can be upgraded."""
        with pytest.raises(ValueError):
            upgrade_system(stats, stat, 100, 1)
