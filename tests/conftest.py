"""Pytest configuration and shared fixtures."""

import random

import pytest

from galaxy_explorer.models.bodies import (
    Civilization,
    CivilizationType,
    CompanionStar,
    Moon,
    MoonType,
    Planet,
    PlanetType,
    StarType,
)
from galaxy_explorer.models.galaxy import BlackHole, Galaxy, GalaxyType, StarSystem, generate_galaxy
from galaxy_explorer.models.ships import ShipStats


def make_stats(**overrides):
    """Mid-range ship: tech 5 gives a jump range of 3125."""
    values = dict(
        name="Test Ship",
        tech_level=5,
        shields=80,
        hull=80,
        combat_power=60,
        diplomacy=50,
        scanners=50,
        cargo=400,
        credits=5000,
        crew=40,
        max_crew=50,
    )
    values.update(overrides)
    return ShipStats(**values)


def make_civilization(has_market=True, has_repair=True, tech_level=3):
    return Civilization(
        name="Zephyrians",
        type=CivilizationType.ADVANCED,
        tech_level=tech_level,
        population=1_000_000,
        has_market=has_market,
        has_repair=has_repair,
    )


def make_moon(moon_id, moon_type=MoonType.ICE):
    return Moon(id=moon_id, name=f"Moon {moon_id}", type=moon_type, radius=0.5, distance_from_planet=4.0)


def make_planet(planet_id, planet_type=PlanetType.TERRESTRIAL, civilization=None, moons=()):
    inhabited = civilization is not None
    return Planet(
        id=planet_id,
        name=f"Planet {planet_id}",
        type=planet_type,
        radius=1.0,
        distance_from_star=1.0,
        size="medium",
        atmosphere="breathable",
        temperature=290.0,
        has_water=inhabited,
        has_life=inhabited,
        civilization=civilization,
        moons=tuple(moons),
    )


def make_system(index, position=(0.0, 0.0, 0.0), planets=(), binary=None, trinary=None, features=()):
    return StarSystem(
        id=f"star-system-{index}",
        name=f"System {index}",
        position=position,
        star_type=StarType.MAIN_SEQUENCE,
        size=100.0,
        temperature=5800.0,
        mass=1.0,
        planets=tuple(planets),
        binary_companion=binary,
        trinary_companion=trinary,
        special_features=tuple(features),
    )


def make_companion(planets=()):
    return CompanionStar(star_type=StarType.RED_GIANT, temperature=4000.0, mass=2.0, planets=tuple(planets))


def make_black_hole(black_hole_id, position):
    return BlackHole(id=black_hole_id, name=black_hole_id, position=position, size=200.0)


def make_galaxy(systems, black_holes=()):
    return Galaxy(
        seed=1,
        galaxy_type=GalaxyType.SPIRAL,
        star_systems=tuple(systems),
        black_holes=tuple(black_holes),
    )


@pytest.fixture
def stats():
    return make_stats()


@pytest.fixture
def small_galaxy():
    """A generated galaxy small enough for pairwise checks."""
    return generate_galaxy(42, 80, 6, 0.5, 0.5)


@pytest.fixture
def line_systems():
    """Four systems on the x axis, 1000, 3000 and 10000 apart from the first."""
    return [
        make_system(0, (0.0, 0.0, 0.0)),
        make_system(1, (1000.0, 0.0, 0.0)),
        make_system(2, (3000.0, 0.0, 0.0)),
        make_system(3, (10000.0, 0.0, 0.0)),
    ]


@pytest.fixture
def inhabited_system():
    civ_planet = make_planet(
        "star-system-0-primary-planet-0",
        civilization=make_civilization(),
        moons=[make_moon("star-system-0-primary-planet-0-moon-0")],
    )
    barren = make_planet("star-system-0-primary-planet-1", planet_type=PlanetType.ROCKY)
    return make_system(0, planets=[civ_planet, barren])


@pytest.fixture
def empty_system():
    return make_system(0)


@pytest.fixture
def rng():
    return random.Random(1234)
