"""Procedural galaxy generation for Galaxy Explorer."""

from __future__ import annotations

import enum
import logging
import math
import time
from dataclasses import dataclass, field
from typing import Iterator, Optional, Union

from ..constants import (
    CENTRAL_BLACK_HOLE_ID,
    CENTRAL_BLACK_HOLE_NAME,
    CENTRAL_BLACK_HOLE_SIZE,
    DEFAULT_BINARY_FREQUENCY,
    DEFAULT_NUM_BLACK_HOLES,
    DEFAULT_NUM_SYSTEMS,
    DEFAULT_TRINARY_FREQUENCY,
    GALAXY_DEPTH,
    GALAXY_HEIGHT,
    GALAXY_RADIUS,
    GALAXY_WIDTH,
    MAX_CAPTURED_PLANETS,
    NEBULA_COLORS,
    NUM_NEBULAE,
)
from .bodies import (
    CompanionStar,
    Moon,
    Planet,
    StarType,
    generate_companions,
    generate_planets,
    generate_primary_planets,
    pick_star_type,
    star_mass,
    star_size,
    star_temperature,
)
from .rng import SeededStream, normalize_seed

logger = logging.getLogger(__name__)

Position = tuple[float, float, float]

SYSTEM_ID_PREFIX = "star-system-"
BLACK_HOLE_ID_PREFIX = "black-hole-"


class GalaxyType(enum.Enum):
    """Overall shape of the galaxy, picked by a single draw."""

    SPIRAL = "spiral"
    BARRED_SPIRAL = "barred-spiral"
    ELLIPTICAL = "elliptical"
    GLOBULAR = "globular"


# Cumulative probability bands: spiral 40%, barred 30%, elliptical 20%, globular 10%
_GALAXY_TYPE_BANDS: list[tuple[float, GalaxyType]] = [
    (0.4, GalaxyType.SPIRAL),
    (0.7, GalaxyType.BARRED_SPIRAL),
    (0.9, GalaxyType.ELLIPTICAL),
    (1.0, GalaxyType.GLOBULAR),
]


@dataclass(frozen=True)
class StarSystem:
    """A single star system in the galaxy."""

    id: str
    name: str
    position: Position
    star_type: StarType
    size: float
    temperature: float
    mass: float
    planets: tuple[Planet, ...] = ()
    binary_companion: Optional[CompanionStar] = None
    trinary_companion: Optional[CompanionStar] = None
    special_features: tuple[str, ...] = ()
    explored: bool = False

    @property
    def is_black_hole(self) -> bool:
        return False

    @property
    def companions(self) -> tuple[CompanionStar, ...]:
        return tuple(c for c in (self.binary_companion, self.trinary_companion) if c is not None)

    @property
    def all_planets(self) -> tuple[Planet, ...]:
        """Planets of the primary star followed by those of its companions."""
        planets = list(self.planets)
        for companion in self.companions:
            planets.extend(companion.planets)
        return tuple(planets)


@dataclass(frozen=True)
class BlackHole:
    """A black hole; jumpable like a system but never explorable for services."""

    id: str
    name: str
    position: Position
    size: float
    planets: tuple[Planet, ...] = ()
    star_type: StarType = StarType.BLACK_HOLE
    explored: bool = False

    @property
    def is_black_hole(self) -> bool:
        return True

    @property
    def all_planets(self) -> tuple[Planet, ...]:
        return self.planets


@dataclass(frozen=True)
class Nebula:
    """Decorative gas cloud, no gameplay effect."""

    id: str
    name: str
    position: Position
    color: str
    size: float


SpaceEntity = Union[StarSystem, BlackHole]


@dataclass(frozen=True)
class Galaxy:
    """Immutable result of a generation run."""

    seed: int
    galaxy_type: GalaxyType
    star_systems: tuple[StarSystem, ...] = ()
    black_holes: tuple[BlackHole, ...] = ()
    nebulae: tuple[Nebula, ...] = ()
    width: float = GALAXY_WIDTH
    height: float = GALAXY_HEIGHT
    depth: float = GALAXY_DEPTH
    _black_hole_index: dict[str, BlackHole] = field(
        default_factory=dict, init=False, repr=False, compare=False,
    )

    def __post_init__(self) -> None:
        self._black_hole_index.update({bh.id: bh for bh in self.black_holes})

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_system(self, system_id: str) -> StarSystem | None:
        """O(1) lookup: system ids encode their generation index."""
        if not system_id.startswith(SYSTEM_ID_PREFIX):
            return None
        try:
            index = int(system_id[len(SYSTEM_ID_PREFIX):])
        except ValueError:
            return None
        if not 0 <= index < len(self.star_systems):
            return None
        system = self.star_systems[index]
        # int() also accepts "01", "+1" and " 1"
        return system if system.id == system_id else None

    def get_black_hole(self, black_hole_id: str) -> BlackHole | None:
        return self._black_hole_index.get(black_hole_id)

    def get_entity(self, entity_id: str) -> SpaceEntity | None:
        return self.get_system(entity_id) or self.get_black_hole(entity_id)

    def all_entities(self) -> Iterator[SpaceEntity]:
        yield from self.star_systems
        yield from self.black_holes

    @property
    def central_black_hole(self) -> BlackHole:
        return self._black_hole_index[CENTRAL_BLACK_HOLE_ID]


# ---------------------------------------------------------------------------
# Celestial body queries
# ---------------------------------------------------------------------------


def celestial_bodies(entity: SpaceEntity) -> list[Union[Planet, Moon]]:
    """Every planet across all stars, then every moon of those planets."""
    planets = entity.all_planets
    bodies: list[Union[Planet, Moon]] = list(planets)
    for planet in planets:
        bodies.extend(planet.moons)
    return bodies


def count_celestial_bodies(entity: SpaceEntity) -> int:
    return sum(1 + len(planet.moons) for planet in entity.all_planets)


# ---------------------------------------------------------------------------
# Name generation
# ---------------------------------------------------------------------------

_PREFIXES = [
    "Ald", "Bel", "Cor", "Den", "Eri", "Fom", "Gal", "Hyd", "Ith",
    "Jov", "Kep", "Lyr", "Mir", "Neb", "Ori", "Pol", "Qua", "Rig",
    "Sol", "Tau", "Ult", "Veg", "Wol", "Xen", "Ygg", "Zan",
]

_SUFFIXES = [
    "aris", "eon", "ix", "us", "ara", "ion", "ax", "is", "or",
    "ium", "oth", "ael", "ine", "ova", "ux", "enn", "ark", "os",
]

_DESIGNATIONS = [
    "Alpha", "Beta", "Gamma", "Delta", "Epsilon", "Zeta", "Eta",
    "Theta", "Iota", "Kappa", "Lambda", "Mu", "Nu", "Xi", "Omicron",
    "Pi", "Rho", "Sigma", "Tau", "Upsilon", "Phi", "Chi", "Psi", "Omega",
]

_NEBULA_NAMES = [
    "Veil", "Crimson Veil", "Horsehead", "Lagoon", "Pillar", "Shroud",
    "Ember", "Tidewater", "Hourglass", "Ghost", "Cinder", "Lantern",
]

_SPECIAL_FEATURES = ["asteroid-field", "ancient-ruins", "space-station", "wormhole", "anomaly"]


def _generate_system_name(stream: SeededStream) -> str:
    """Generate a procedural star system name."""
    style = stream.randint(0, 2)
    if style == 0:
        # "Aldaris" style
        return stream.choice(_PREFIXES) + stream.choice(_SUFFIXES)
    elif style == 1:
        # "Aldaris Beta" style
        return stream.choice(_PREFIXES) + stream.choice(_SUFFIXES) + " " + stream.choice(_DESIGNATIONS)
    else:
        # "HD-47291" catalogue style
        catalogue = stream.choice(["HD", "GJ", "HR", "TYC", "KOI"])
        number = stream.randint(1000, 99999)
        return f"{catalogue}-{number}"


def _generate_special_features(stream: SeededStream) -> tuple[str, ...]:
    count = stream.randint(0, 2)
    selected: list[str] = []
    for _ in range(count):
        feature = stream.choice(_SPECIAL_FEATURES)
        if feature not in selected:
            selected.append(feature)
    return tuple(selected)


# ---------------------------------------------------------------------------
# Positions
# ---------------------------------------------------------------------------


def _clamp_height(y: float) -> float:
    half = GALAXY_HEIGHT / 2
    return max(-half, min(half, y))


def _spiral_position(stream: SeededStream, index: int, total: int, radius: float) -> Position:
    num_arms = 4
    per_arm = total / num_arms
    arm = int(index // per_arm)
    arm_progress = (index % per_arm) / per_arm

    angle = arm * (2 * math.pi / num_arms) + arm_progress * math.pi * 4
    distance = arm_progress * radius + stream.uniform(-5000, 5000)

    x = math.cos(angle) * distance + stream.uniform(-2000, 2000)
    z = math.sin(angle) * distance + stream.uniform(-2000, 2000)
    y = stream.uniform(-GALAXY_HEIGHT / 4, GALAXY_HEIGHT / 4)
    return (x, y, z)


def _barred_spiral_position(stream: SeededStream, index: int, total: int, radius: float) -> Position:
    bar_length = radius * 0.3
    bar_width = radius * 0.1

    # 30% in the central bar, the rest along the arms
    if stream.next() < 0.3:
        bar_progress = stream.uniform(-1, 1)
        x = bar_progress * bar_length + stream.uniform(-bar_width, bar_width)
        z = stream.uniform(-bar_width, bar_width)
        y = stream.uniform(-GALAXY_HEIGHT / 8, GALAXY_HEIGHT / 8)
        return (x, y, z)
    return _spiral_position(stream, index, total, radius)


def _elliptical_position(stream: SeededStream, radius: float) -> Position:
    distance = math.pow(stream.next(), 0.7) * radius * 0.8
    angle = stream.uniform(0, math.tau)
    y = stream.uniform(-GALAXY_HEIGHT / 2, GALAXY_HEIGHT / 2)

    x = distance * math.cos(angle)
    z = distance * math.sin(angle) * 0.6  # Flattened
    return (x, y, z)


def _globular_position(stream: SeededStream, radius: float) -> Position:
    # Denser toward the core
    distance = math.pow(stream.next(), 0.5) * radius * 0.6
    theta = stream.uniform(0, math.tau)
    phi = math.acos(1 - 2 * stream.next())

    x = distance * math.sin(phi) * math.cos(theta)
    y = _clamp_height(distance * math.cos(phi))
    z = distance * math.sin(phi) * math.sin(theta)
    return (x, y, z)


# ---------------------------------------------------------------------------
# Galaxy generation
# ---------------------------------------------------------------------------


class GalaxyAssembler:
    """Builds a galaxy from one shared stream, in a fixed order.

    Systems are generated in index order, then the procedural black holes,
    then the central black hole, then nebulae. Because every step shares the
    stream, system i depends on the draws consumed by systems 0..i-1.
    """

    def __init__(
        self,
        seed: int,
        num_systems: int = DEFAULT_NUM_SYSTEMS,
        num_black_holes: int = DEFAULT_NUM_BLACK_HOLES,
        binary_frequency: float = DEFAULT_BINARY_FREQUENCY,
        trinary_frequency: float = DEFAULT_TRINARY_FREQUENCY,
    ) -> None:
        self.seed = seed
        self.stream = SeededStream(seed)
        self.num_systems = max(0, num_systems)
        self.num_black_holes = num_black_holes
        self.binary_frequency = min(1.0, max(0.0, binary_frequency))
        self.trinary_frequency = min(1.0, max(0.0, trinary_frequency))
        self.galaxy_type = GalaxyType.SPIRAL

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    def assemble(self) -> Galaxy:
        self.galaxy_type = self._pick_galaxy_type()
        systems = self._generate_systems()
        black_holes = self._generate_black_holes()
        nebulae = self._generate_nebulae()
        return Galaxy(
            seed=self.seed,
            galaxy_type=self.galaxy_type,
            star_systems=systems,
            black_holes=black_holes,
            nebulae=nebulae,
        )

    def _pick_galaxy_type(self) -> GalaxyType:
        roll = self.stream.next()
        for upper, galaxy_type in _GALAXY_TYPE_BANDS:
            if roll < upper:
                return galaxy_type
        return GalaxyType.GLOBULAR

    def _position(self, index: int, total: int, scale: float = 1.0) -> Position:
        radius = GALAXY_RADIUS * scale
        if self.galaxy_type is GalaxyType.SPIRAL:
            return _spiral_position(self.stream, index, total, radius)
        if self.galaxy_type is GalaxyType.BARRED_SPIRAL:
            return _barred_spiral_position(self.stream, index, total, radius)
        if self.galaxy_type is GalaxyType.ELLIPTICAL:
            return _elliptical_position(self.stream, radius)
        return _globular_position(self.stream, radius)

    def _generate_systems(self) -> tuple[StarSystem, ...]:
        used_names: set[str] = set()
        systems: list[StarSystem] = []

        for i in range(self.num_systems):
            system_id = f"{SYSTEM_ID_PREFIX}{i}"
            position = self._position(i, self.num_systems)

            name = _generate_system_name(self.stream)
            while name in used_names:
                name = _generate_system_name(self.stream)
            used_names.add(name)

            star_type = pick_star_type(self.stream)
            size = star_size(self.stream, star_type)
            temperature = star_temperature(self.stream, star_type)
            mass = star_mass(self.stream, star_type)
            planets = generate_primary_planets(self.stream, system_id)
            binary, trinary = generate_companions(
                self.stream, system_id, self.binary_frequency, self.trinary_frequency,
            )

            systems.append(
                StarSystem(
                    id=system_id,
                    name=name,
                    position=position,
                    star_type=star_type,
                    size=size,
                    temperature=temperature,
                    mass=mass,
                    planets=planets,
                    binary_companion=binary,
                    trinary_companion=trinary,
                    special_features=_generate_special_features(self.stream),
                )
            )
        return tuple(systems)

    def _generate_black_holes(self) -> tuple[BlackHole, ...]:
        additional = max(0, self.num_black_holes - 1)
        scale = 0.6 if self.galaxy_type is GalaxyType.GLOBULAR else 0.8
        black_holes: list[BlackHole] = []

        for i in range(additional):
            black_hole_id = f"{BLACK_HOLE_ID_PREFIX}{i}"
            position = self._position(i, additional, scale)
            size = self.stream.uniform(100, 400)
            name = f"BH-{self.stream.randint(1000, 9999)}"
            planets = generate_planets(self.stream, black_hole_id, MAX_CAPTURED_PLANETS)
            black_holes.append(
                BlackHole(id=black_hole_id, name=name, position=position, size=size, planets=planets)
            )

        # The supermassive core is fixed and consumes no draws
        black_holes.append(
            BlackHole(
                id=CENTRAL_BLACK_HOLE_ID,
                name=CENTRAL_BLACK_HOLE_NAME,
                position=(0.0, 0.0, 0.0),
                size=CENTRAL_BLACK_HOLE_SIZE,
            )
        )
        return tuple(black_holes)

    def _generate_nebulae(self) -> tuple[Nebula, ...]:
        nebulae: list[Nebula] = []
        for i in range(NUM_NEBULAE):
            angle = self.stream.uniform(0, math.tau)
            r = GALAXY_RADIUS * math.sqrt(self.stream.next())
            y = self.stream.uniform(-GALAXY_HEIGHT / 2, GALAXY_HEIGHT / 2)
            nebulae.append(
                Nebula(
                    id=f"nebula-{i}",
                    name=f"{self.stream.choice(_NEBULA_NAMES)} Nebula",
                    position=(r * math.cos(angle), y, r * math.sin(angle)),
                    color=self.stream.choice(NEBULA_COLORS),
                    size=self.stream.uniform(2000, 8000),
                )
            )
        return tuple(nebulae)


def generate_galaxy(
    seed: object,
    num_systems: int = DEFAULT_NUM_SYSTEMS,
    num_black_holes: int = DEFAULT_NUM_BLACK_HOLES,
    binary_frequency: float = DEFAULT_BINARY_FREQUENCY,
    trinary_frequency: float = DEFAULT_TRINARY_FREQUENCY,
) -> Galaxy:
    """Generate a full galaxy. The same arguments always give an equal result."""
    generation_start = time.perf_counter()
    assembler = GalaxyAssembler(
        normalize_seed(seed),
        num_systems=num_systems,
        num_black_holes=num_black_holes,
        binary_frequency=binary_frequency,
        trinary_frequency=trinary_frequency,
    )
    galaxy = assembler.assemble()
    generation_stop = time.perf_counter()
    logger.info(
        f"generated {galaxy.galaxy_type.value} galaxy {galaxy.seed} with "
        f"{len(galaxy.star_systems)} systems and {len(galaxy.black_holes)} black holes "
        f"in {generation_stop - generation_start:.3f}s ({assembler.stream.draws} draws)"
    )
    return galaxy
