"""Starship classes and stats for Galaxy Explorer.

ShipStats is an immutable value; every change (exploration outcome, repair,
upgrade, black hole jump damage) returns a new instance.
"""

from __future__ import annotations

import dataclasses
import enum
import random
from dataclasses import dataclass

from ..constants import CARGO_BASE_VALUE, MAX_TECH_LEVEL, MIN_TECH_LEVEL
from .events import ExplorationEvent, ExplorationEventType

CRITICAL_HULL = 10  # At or below this the ship is lost

# Upper bound for each current stat, named by the field holding the maximum
_BOUNDED_STATS: dict[str, str] = {
    "shields": "max_shields",
    "hull": "max_hull",
    "combat_power": "max_combat_power",
    "scanners": "max_scanners",
    "cargo": "max_cargo",
    "crew": "max_crew",
}

# Hard caps for upgrades that have no matching max_* field
_UPGRADE_CAPS: dict[str, int] = {
    "tech_level": MAX_TECH_LEVEL,
    "diplomacy": 999,
    "max_crew": 200,
    "max_shields": 200,
    "max_hull": 200,
    "max_combat_power": 200,
    "max_scanners": 200,
    "max_cargo": 2000,
}


@dataclass(frozen=True)
class ShipStats:
    """The player's ship capabilities."""

    tech_level: int
    shields: int
    hull: int
    combat_power: int
    diplomacy: int
    scanners: int
    cargo: int
    credits: int
    crew: int
    max_crew: int
    max_shields: int = 100
    max_hull: int = 100
    max_combat_power: int = 100
    max_scanners: int = 100
    max_cargo: int = 1000
    name: str = ""

    def __post_init__(self) -> None:
        if not MIN_TECH_LEVEL <= self.tech_level <= MAX_TECH_LEVEL:
            raise ValueError(
                f"tech_level must be between {MIN_TECH_LEVEL} and {MAX_TECH_LEVEL}, got {self.tech_level}"
            )
        for f in dataclasses.fields(self):
            value = getattr(self, f.name)
            if f.name != "name" and value < 0:
                raise ValueError(f"{f.name} must not be negative, got {value}")
        for stat, maximum in _BOUNDED_STATS.items():
            if getattr(self, stat) > getattr(self, maximum):
                raise ValueError(
                    f"{stat} ({getattr(self, stat)}) exceeds {maximum} ({getattr(self, maximum)})"
                )

    @property
    def is_destroyed(self) -> bool:
        return self.hull <= CRITICAL_HULL or self.crew == 0

    @property
    def needs_repair(self) -> bool:
        return self.shields < self.max_shields or self.hull < self.max_hull

    def with_changes(self, **changes: int) -> "ShipStats":
        """Copy with changes applied, each bounded stat clamped into [0, max]."""
        merged = {**dataclasses.asdict(self), **changes}
        for stat, maximum in _BOUNDED_STATS.items():
            merged[stat] = max(0, min(merged[maximum], merged[stat]))
        return ShipStats(**merged)


# ---------------------------------------------------------------------------
# Ship classes
# ---------------------------------------------------------------------------


class ShipClass(enum.Enum):
    """Classification of starships the player can command."""

    EXPLORER = "explorer"
    CRUISER = "cruiser"
    DESTROYER = "destroyer"
    FRIGATE = "frigate"
    BATTLESHIP = "battleship"
    SCOUT = "scout"
    RESEARCH = "research"
    DIPLOMATIC = "diplomatic"
    CARGO = "cargo"
    COLONY = "colony"


# Stat modifiers applied on top of the base stats
SHIP_CLASS_STATS: dict[ShipClass, dict] = {
    ShipClass.EXPLORER: {
        "description": "Balanced ship designed for long-range exploration",
        "combat_power": 0, "diplomacy": 10, "scanners": 20, "cargo": 5,
        "max_crew": 10, "shields": 0, "hull": 5,
    },
    ShipClass.CRUISER: {
        "description": "Well-rounded vessel suitable for any mission",
        "combat_power": 5, "diplomacy": 5, "scanners": 5, "cargo": 5,
        "max_crew": 5, "shields": 5, "hull": 5,
    },
    ShipClass.DESTROYER: {
        "description": "Combat-focused warship with heavy firepower",
        "combat_power": 25, "diplomacy": -10, "scanners": -5, "cargo": -10,
        "max_crew": 0, "shields": 10, "hull": 15,
    },
    ShipClass.FRIGATE: {
        "description": "Fast and maneuverable patrol vessel",
        "combat_power": 10, "diplomacy": 0, "scanners": 10, "cargo": -5,
        "max_crew": -5, "shields": 5, "hull": 0,
    },
    ShipClass.BATTLESHIP: {
        "description": "Heavily armored fortress with maximum firepower",
        "combat_power": 30, "diplomacy": -15, "scanners": -10, "cargo": -15,
        "max_crew": 15, "shields": 20, "hull": 25,
    },
    ShipClass.SCOUT: {
        "description": "Small, fast ship optimized for reconnaissance",
        "combat_power": -10, "diplomacy": 5, "scanners": 25, "cargo": -15,
        "max_crew": -15, "shields": -5, "hull": -10,
    },
    ShipClass.RESEARCH: {
        "description": "Scientific vessel equipped with advanced sensors",
        "combat_power": -15, "diplomacy": 15, "scanners": 30, "cargo": 0,
        "max_crew": 5, "shields": -5, "hull": -5,
    },
    ShipClass.DIPLOMATIC: {
        "description": "Luxury vessel designed for negotiations and trade",
        "combat_power": -20, "diplomacy": 35, "scanners": 0, "cargo": 10,
        "max_crew": 10, "shields": 0, "hull": 0,
    },
    ShipClass.CARGO: {
        "description": "Merchant freighter with massive storage capacity",
        "combat_power": -15, "diplomacy": 10, "scanners": -5, "cargo": 40,
        "max_crew": 0, "shields": -10, "hull": 5,
    },
    ShipClass.COLONY: {
        "description": "Transport ship designed for colonization missions",
        "combat_power": -10, "diplomacy": 20, "scanners": 5, "cargo": 20,
        "max_crew": 25, "shields": 0, "hull": 10,
    },
}

SHIP_NAMES = [
    "Enterprise", "Voyager", "Discovery", "Defiant", "Prometheus", "Intrepid",
    "Constitution", "Galaxy", "Sovereign", "Nebula", "Excelsior", "Miranda",
    "Phoenix", "Orion", "Andromeda", "Pegasus", "Titan", "Apollo",
]


@dataclass(frozen=True)
class Starship:
    name: str
    ship_class: ShipClass
    stats: ShipStats

    @property
    def display_name(self) -> str:
        return f"{self.name} ({self.ship_class.value.title()})"


def _generate_stats(rng: random.Random, name: str, ship_class: ShipClass) -> ShipStats:
    mods = SHIP_CLASS_STATS[ship_class]

    max_shields = max(50, 100 + mods["shields"])
    max_hull = max(50, 100 + mods["hull"])
    max_combat_power = max(20, 100 + mods["combat_power"])
    max_scanners = 100
    max_cargo = max(200, 1000 + mods["cargo"])
    max_crew = max(20, rng.randint(50, 99) + mods["max_crew"])

    # Current values start at 70–90% of max
    shields = int(max_shields * rng.uniform(0.7, 0.9))
    hull = int(max_hull * rng.uniform(0.7, 0.9))
    combat_power = int(max_combat_power * rng.uniform(0.7, 0.9))
    diplomacy = max(5, rng.randint(10, 89) + mods["diplomacy"])
    scanners = min(max_scanners, max(25, int(max_scanners * rng.uniform(0.7, 0.9)) + mods["scanners"]))
    cargo = int(max_cargo * rng.uniform(0.3, 0.7))
    credits = rng.randint(1000, 5999)

    return ShipStats(
        name=name,
        tech_level=rng.randint(3, 8),
        shields=shields,
        hull=hull,
        combat_power=combat_power,
        diplomacy=diplomacy,
        scanners=scanners,
        cargo=cargo,
        credits=credits,
        crew=int(max_crew * 0.8),
        max_crew=max_crew,
        max_shields=max_shields,
        max_hull=max_hull,
        max_combat_power=max_combat_power,
        max_scanners=max_scanners,
        max_cargo=max_cargo,
    )


def generate_starship(seed: int, ship_class: ShipClass | None = None) -> Starship:
    """Build a starship deterministically from a seed."""
    rng = random.Random(seed)
    name = rng.choice(SHIP_NAMES)
    if ship_class is None:
        ship_class = rng.choice(list(ShipClass))
    return Starship(name=name, ship_class=ship_class, stats=_generate_stats(rng, name, ship_class))


def generate_ship_options(seed: int, count: int = 3) -> list[Starship]:
    """Offer a handful of ships to pick from at game start."""
    rng = random.Random(seed)
    return [
        generate_starship(rng.randrange(1_000_000), rng.choice(list(ShipClass)))
        for _ in range(count)
    ]


# ---------------------------------------------------------------------------
# Stat updates
# ---------------------------------------------------------------------------


def apply_exploration_event(
    stats: ShipStats, event: ExplorationEvent, rng: random.Random | None = None,
) -> ShipStats:
    """Apply the outcome of a logged exploration event to the ship."""
    if rng is None:
        rng = random.Random()

    if event.type is ExplorationEventType.DISCOVERY:
        # Better scanners make a discovery more likely to pay off
        success = rng.random() > (0.2 if stats.scanners > 50 else 0.5)
        if success:
            return stats.with_changes(
                scanners=stats.scanners + 5,
                credits=stats.credits + 500,
                crew=stats.crew + 1,
            )
        return stats.with_changes(scanners=max(1, stats.scanners - 2))

    if event.type is ExplorationEventType.RESOURCES:
        return stats.with_changes(cargo=stats.cargo + 50, credits=stats.credits + 1000)

    if event.type is ExplorationEventType.CIVILIZATION:
        success = rng.random() > (0.1 if stats.diplomacy > 60 else 0.4)
        if success:
            increase = 5 if stats.diplomacy >= 100 else 10
            return stats.with_changes(
                diplomacy=stats.diplomacy + increase,
                credits=stats.credits + 750,
                crew=stats.crew + 2,
            )
        return stats.with_changes(diplomacy=max(0, stats.diplomacy - 5))

    if event.type is ExplorationEventType.ARTIFACT:
        return stats.with_changes(
            tech_level=min(MAX_TECH_LEVEL, stats.tech_level + 1),
            credits=stats.credits + 2000,
        )

    if event.type is ExplorationEventType.COMBAT:
        success = rng.random() > (0.2 if stats.combat_power > 70 else 0.6)
        if success:
            return stats.with_changes(
                credits=stats.credits + 1500,
                cargo=stats.cargo + 25,
                combat_power=stats.combat_power + 3,
            )
        return stats.with_changes(
            crew=stats.crew - rng.randint(1, 3),
            hull=stats.hull - rng.randint(10, 29),
            shields=stats.shields - rng.randint(15, 44),
            combat_power=max(1, stats.combat_power - 5),
        )

    if event.type is ExplorationEventType.DANGER:
        return stats.with_changes(crew=stats.crew - rng.randint(1, 5))

    if event.type is ExplorationEventType.MARKET:
        return stats.with_changes(credits=stats.credits + 250)

    if event.type is ExplorationEventType.DERELICT:
        return stats.with_changes(cargo=stats.cargo + 30, credits=stats.credits + 300)

    # Empty surveys and merchant hails leave the ship unchanged
    return stats


def apply_black_hole_jump_damage(stats: ShipStats, rng: random.Random | None = None) -> ShipStats:
    """Damage from a black hole jump boost: shields first, then hull and systems."""
    if rng is None:
        rng = random.Random()

    remaining = rng.randint(15, 34)
    shield_damage = min(remaining, stats.shields)
    remaining -= shield_damage
    changes = {"shields": stats.shields - shield_damage}
    if remaining <= 0:
        return stats.with_changes(**changes)

    hull_damage = int(remaining * 0.7)
    changes["hull"] = stats.hull - hull_damage
    if changes["hull"] <= CRITICAL_HULL:
        return stats.with_changes(**changes)

    system_damage = remaining - hull_damage
    if system_damage > 0:
        if rng.random() < 0.3:
            changes["combat_power"] = stats.combat_power - int(system_damage * 0.4)
        if rng.random() < 0.25:
            changes["crew"] = max(1, stats.crew - int(system_damage * 0.3))
        if rng.random() < 0.2:
            changes["scanners"] = stats.scanners - int(system_damage * 0.3)
        if rng.random() < 0.15:
            changes["cargo"] = stats.cargo - int(system_damage * 0.5)
    return stats.with_changes(**changes)


def repair_system(stats: ShipStats, target: str, cost: int) -> ShipStats:
    """Restore hull, shields or combat systems to full. No-op if unaffordable."""
    fields = {"hull": "max_hull", "shields": "max_shields", "combat": "max_combat_power"}
    if target not in fields:
        raise ValueError(f"unknown repair target {target!r}")
    if stats.credits < cost:
        return stats
    stat = "combat_power" if target == "combat" else target
    return stats.with_changes(**{stat: getattr(stats, fields[target]), "credits": stats.credits - cost})


def sell_cargo(
    stats: ShipStats, amount: int, at_market: bool = False, rng: random.Random | None = None,
) -> ShipStats:
    """Sell cargo for credits; markets pay 80–160% of the base value."""
    if amount <= 0 or stats.cargo < amount:
        return stats
    multiplier = 1.0
    if at_market:
        multiplier = (rng or random.Random()).uniform(0.8, 1.6)
    value = int(amount * CARGO_BASE_VALUE * multiplier)
    return stats.with_changes(cargo=stats.cargo - amount, credits=stats.credits + value)


def upgrade_system(stats: ShipStats, stat: str, cost: int, amount: int) -> ShipStats:
    """Buy an upgrade, capped at the stat's maximum. No-op if unaffordable."""
    if stat not in _BOUNDED_STATS and stat not in _UPGRADE_CAPS:
        raise ValueError(f"cannot upgrade ship stat {stat!r}")
    if stats.credits < cost:
        return stats
    cap = _UPGRADE_CAPS.get(stat)
    if cap is None:
        cap = getattr(stats, _BOUNDED_STATS[stat])
    value = min(cap, getattr(stats, stat) + amount)
    return stats.with_changes(**{stat: value, "credits": stats.credits - cost})
