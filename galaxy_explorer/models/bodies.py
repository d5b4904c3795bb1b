"""Stars, planets, moons and civilizations built from the seeded stream.

Every function here takes the stream explicitly and consumes a fixed number
of draws per decision, so the order of calls fully determines the result.
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass
from typing import Optional, Sequence, TypeVar

from ..constants import MAX_COMPANION_PLANETS, MAX_MOONS, MAX_PRIMARY_PLANETS
from .rng import SeededStream

T = TypeVar("T")


class StarType(enum.Enum):
    """Types of stars in the galaxy."""

    MAIN_SEQUENCE = "main-sequence"
    RED_GIANT = "red-giant"
    WHITE_DWARF = "white-dwarf"
    NEUTRON = "neutron"
    MAGNETAR = "magnetar"
    PULSAR = "pulsar"
    QUASAR = "quasar"
    BLACK_HOLE = "blackhole"


# Weighted probabilities for star types (black holes are generated separately)
_STAR_WEIGHTS: list[tuple[StarType, int]] = [
    (StarType.MAIN_SEQUENCE, 40),
    (StarType.RED_GIANT, 15),
    (StarType.WHITE_DWARF, 15),
    (StarType.NEUTRON, 10),
    (StarType.MAGNETAR, 8),
    (StarType.PULSAR, 8),
    (StarType.QUASAR, 4),
]

_COMPANION_WEIGHTS: list[tuple[StarType, int]] = [
    (StarType.MAIN_SEQUENCE, 45),
    (StarType.RED_GIANT, 20),
    (StarType.WHITE_DWARF, 20),
    (StarType.NEUTRON, 10),
    (StarType.PULSAR, 5),
]

# (min, max) flavor ranges per star type
_STAR_TEMPERATURES: dict[StarType, tuple[float, float]] = {
    StarType.MAIN_SEQUENCE: (3000, 30000),
    StarType.RED_GIANT: (3000, 5000),
    StarType.WHITE_DWARF: (8000, 40000),
    StarType.NEUTRON: (600000, 1000000),
    StarType.MAGNETAR: (1000000, 10000000),
    StarType.PULSAR: (1000000, 1000000),
    StarType.QUASAR: (10000000, 100000000),
}

_STAR_MASSES: dict[StarType, tuple[float, float]] = {
    StarType.MAIN_SEQUENCE: (0.1, 50),
    StarType.RED_GIANT: (0.5, 8),
    StarType.WHITE_DWARF: (0.17, 1.33),
    StarType.NEUTRON: (1.4, 2),
    StarType.MAGNETAR: (1.4, 2),
    StarType.PULSAR: (1.4, 2),
    StarType.QUASAR: (1000000, 10000000000),
}

_STAR_SIZES: dict[StarType, tuple[float, float]] = {
    StarType.MAIN_SEQUENCE: (80, 150),
    StarType.RED_GIANT: (200, 400),
    StarType.WHITE_DWARF: (30, 60),
    StarType.NEUTRON: (15, 30),
    StarType.MAGNETAR: (20, 35),
    StarType.PULSAR: (20, 35),
    StarType.QUASAR: (400, 700),
}


class PlanetType(enum.Enum):
    GAS_GIANT = "gas-giant"
    TERRESTRIAL = "terrestrial"
    ROCKY = "rocky"


class MoonType(enum.Enum):
    ROCKY = "rocky"
    ICE = "ice"
    METALLIC = "metallic"


class CivilizationType(enum.Enum):
    ADVANCED = "advanced"
    PRIMITIVE = "primitive"


# Cumulative bands for the planet type roll
_PLANET_TYPE_BANDS: list[tuple[float, PlanetType]] = [
    (0.3, PlanetType.GAS_GIANT),
    (0.7, PlanetType.TERRESTRIAL),
    (1.0, PlanetType.ROCKY),
]

_PLANET_RADII: dict[PlanetType, tuple[float, float]] = {
    PlanetType.GAS_GIANT: (6.0, 20.0),
    PlanetType.TERRESTRIAL: (0.5, 2.5),
    PlanetType.ROCKY: (0.2, 1.5),
}

_ATMOSPHERES: dict[PlanetType, list[str]] = {
    PlanetType.GAS_GIANT: ["hydrogen", "helium", "methane"],
    PlanetType.TERRESTRIAL: ["thin", "thick", "breathable", "toxic"],
    PlanetType.ROCKY: ["none", "thin", "toxic"],
}

_RESOURCES = [
    "iron", "titanium", "platinum", "rare-earth", "energy-crystals", "water", "organics",
]

_PLANET_PREFIXES = ["Keth", "Zeph", "Vex", "Nox", "Quin", "Bex", "Taal", "Rhen"]
_PLANET_SUFFIXES = ["ara", "ion", "ius", "eon", "oth", "ium", "lex", "nar"]
_MOON_PREFIXES = ["Luna", "Io", "Titan", "Europa", "Ganymede", "Callisto", "Mimas", "Enceladus"]
_MOON_NUMERALS = ["I", "II", "III", "IV", "V", "VI", "VII", "VIII"]

_CIVILIZATION_NAMES = [
    "Keplerians", "Voidwalkers", "Starborn", "Cosmic Collective", "Nexus Alliance",
    "Tidebound", "Ashen Choir", "Lumen Accord",
]


# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Civilization:
    """An inhabited world's society."""

    name: str
    type: CivilizationType
    tech_level: int  # 1–5
    population: int
    has_market: bool = False
    has_repair: bool = False


@dataclass(frozen=True)
class Moon:
    id: str
    name: str
    type: MoonType
    radius: float
    distance_from_planet: float


@dataclass(frozen=True)
class Planet:
    """A planet orbiting a star or captured by a black hole."""

    id: str
    name: str
    type: PlanetType
    radius: float
    distance_from_star: float
    size: str  # "small", "medium" or "large"
    atmosphere: str
    temperature: float
    has_water: bool
    has_life: bool
    resources: tuple[str, ...] = ()
    civilization: Optional[Civilization] = None
    moons: tuple[Moon, ...] = ()

    @property
    def inhabited(self) -> bool:
        return self.civilization is not None


@dataclass(frozen=True)
class CompanionStar:
    """A binary or trinary star riding on its parent system's position."""

    star_type: StarType
    temperature: float
    mass: float
    planets: tuple[Planet, ...] = ()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def weighted_choice(stream: SeededStream, choices: Sequence[tuple[T, int]]) -> T:
    """Weighted random selection from a list of (item, weight) tuples."""
    total = sum(weight for _, weight in choices)
    roll = stream.randint(1, total)
    cumulative = 0
    for item, weight in choices:
        cumulative += weight
        if roll <= cumulative:
            return item
    return choices[-1][0]


def _banded(roll: float, bands: Sequence[tuple[float, T]]) -> T:
    for upper, item in bands:
        if roll < upper:
            return item
    return bands[-1][1]


def _size_class(radius: float) -> str:
    if radius < 1.0:
        return "small"
    if radius < 6.0:
        return "medium"
    return "large"


def _pick_unique(stream: SeededStream, pool: Sequence[str], max_count: int) -> tuple[str, ...]:
    """Draw up to max_count items, dropping repeats but keeping draw order."""
    count = stream.randint(0, max_count)
    selected: list[str] = []
    for _ in range(count):
        item = stream.choice(pool)
        if item not in selected:
            selected.append(item)
    return tuple(selected)


# ---------------------------------------------------------------------------
# Celestial body factory
# ---------------------------------------------------------------------------


def generate_civilization(stream: SeededStream) -> Civilization:
    name = stream.choice(_CIVILIZATION_NAMES)
    civ_type = CivilizationType.ADVANCED if stream.chance(0.4) else CivilizationType.PRIMITIVE
    tech_level = stream.randint(1, 5)
    population = int(stream.uniform(1e5, 1e10))
    # Market and repair are rolled independently of each other and of tech level
    has_market = stream.chance(0.6)
    has_repair = stream.chance(0.5)
    return Civilization(
        name=name,
        type=civ_type,
        tech_level=tech_level,
        population=population,
        has_market=has_market,
        has_repair=has_repair,
    )


def generate_moons(stream: SeededStream, planet_id: str) -> tuple[Moon, ...]:
    moons: list[Moon] = []
    for i in range(stream.randint(0, MAX_MOONS)):
        name = f"{stream.choice(_MOON_PREFIXES)} {stream.choice(_MOON_NUMERALS)}"
        moons.append(
            Moon(
                id=f"{planet_id}-moon-{i}",
                name=name,
                type=stream.choice(list(MoonType)),
                radius=stream.uniform(0.1, 2.0),
                distance_from_planet=(i + 1) * stream.uniform(2, 10),
            )
        )
    return tuple(moons)


def generate_planet(stream: SeededStream, planet_id: str, orbit_index: int) -> Planet:
    """Generate a single planet, its optional civilization and its moons."""
    planet_type = _banded(stream.next(), _PLANET_TYPE_BANDS)
    name = stream.choice(_PLANET_PREFIXES) + stream.choice(_PLANET_SUFFIXES)
    radius = stream.uniform(*_PLANET_RADII[planet_type])
    distance = (orbit_index + 1) * stream.uniform(0.5, 3.0)
    atmosphere = stream.choice(_ATMOSPHERES[planet_type])
    temperature = 400.0 / math.sqrt(distance) + stream.uniform(-40.0, 40.0)

    # Rolls are always consumed so the draw count does not depend on the type
    water_possible = planet_type is not PlanetType.GAS_GIANT and atmosphere != "none"
    has_water = stream.next() < 0.45 and water_possible
    life_threshold = 0.5 if atmosphere == "breathable" else 0.25
    has_life = stream.next() < life_threshold and has_water

    resources = _pick_unique(stream, _RESOURCES, 3)

    civilization: Civilization | None = None
    if stream.next() > 0.5 and has_water and has_life:
        civilization = generate_civilization(stream)

    moons = generate_moons(stream, planet_id)

    return Planet(
        id=planet_id,
        name=name,
        type=planet_type,
        radius=radius,
        distance_from_star=distance,
        size=_size_class(radius),
        atmosphere=atmosphere,
        temperature=temperature,
        has_water=has_water,
        has_life=has_life,
        resources=resources,
        civilization=civilization,
        moons=moons,
    )


def generate_planets(stream: SeededStream, owner_id: str, max_planets: int) -> tuple[Planet, ...]:
    count = stream.randint(0, max_planets)
    return tuple(
        generate_planet(stream, f"{owner_id}-planet-{i}", i) for i in range(count)
    )


# ---------------------------------------------------------------------------
# Star factory
# ---------------------------------------------------------------------------


def pick_star_type(stream: SeededStream) -> StarType:
    return weighted_choice(stream, _STAR_WEIGHTS)


def star_size(stream: SeededStream, star_type: StarType) -> float:
    return stream.uniform(*_STAR_SIZES[star_type])


def star_temperature(stream: SeededStream, star_type: StarType) -> float:
    return stream.uniform(*_STAR_TEMPERATURES.get(star_type, (5000, 6000)))


def star_mass(stream: SeededStream, star_type: StarType) -> float:
    return stream.uniform(*_STAR_MASSES.get(star_type, (1, 1)))


def generate_primary_planets(stream: SeededStream, system_id: str) -> tuple[Planet, ...]:
    return generate_planets(stream, f"{system_id}-primary", MAX_PRIMARY_PLANETS)


def generate_companion(stream: SeededStream, owner_id: str) -> CompanionStar:
    """Companions reuse the planet factory but hold at most two planets."""
    star_type = weighted_choice(stream, _COMPANION_WEIGHTS)
    temperature = star_temperature(stream, star_type)
    mass = star_mass(stream, star_type)
    planets = generate_planets(stream, owner_id, MAX_COMPANION_PLANETS)
    return CompanionStar(star_type=star_type, temperature=temperature, mass=mass, planets=planets)


def generate_companions(
    stream: SeededStream,
    system_id: str,
    binary_frequency: float,
    trinary_frequency: float,
) -> tuple[CompanionStar | None, CompanionStar | None]:
    """Roll the binary companion, then the trinary only if the binary exists.

    trinary_frequency is the probability of a third star *given* a second one,
    not the overall share of trinary systems.
    """
    if not stream.chance(binary_frequency):
        return None, None
    binary = generate_companion(stream, f"{system_id}-binary")
    trinary = None
    if stream.chance(trinary_frequency):
        trinary = generate_companion(stream, f"{system_id}-trinary")
    return binary, trinary
