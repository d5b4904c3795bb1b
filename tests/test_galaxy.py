"""Tests for galaxy generation."""

import pytest

from galaxy_explorer.constants import (
    CENTRAL_BLACK_HOLE_ID,
    GALAXY_HEIGHT,
    MAX_COMPANION_PLANETS,
    MAX_MOONS,
    MAX_PRIMARY_PLANETS,
)
from galaxy_explorer.models.bodies import StarType
from galaxy_explorer.models.galaxy import (
    GalaxyAssembler,
    celestial_bodies,
    count_celestial_bodies,
    generate_galaxy,
)

from conftest import make_companion, make_moon, make_planet, make_system


def _all_planets(galaxy):
    for system in galaxy.star_systems:
        yield from system.all_planets
    for black_hole in galaxy.black_holes:
        yield from black_hole.planets


class TestDeterminism:
    """Same inputs, same galaxy."""

    def test_same_seed_equal_galaxy(self):
        """Generating twice with identical parameters gives equal results."""
        first = generate_galaxy(42, 100, 10, 0.15, 0.03)
        second = generate_galaxy(42, 100, 10, 0.15, 0.03)
        assert first == second

    def test_different_seed_differs(self):
        """A different seed gives a different galaxy."""
        assert generate_galaxy(1, 30, 3) != generate_galaxy(2, 30, 3)

    def test_invalid_seed_uses_default(self):
        """A missing seed generates the default seed's galaxy."""
        assert generate_galaxy(None, 20, 2) == generate_galaxy(12345, 20, 2)

    def test_numeric_string_seed(self):
        """A numeric string seed is the same as the integer."""
        assert generate_galaxy("42", 20, 2) == generate_galaxy(42, 20, 2)

    def test_black_holes_follow_systems(self):
        """Black holes draw after every system, so the system count shifts them."""
        fewer = generate_galaxy(42, 10, 4)
        more = generate_galaxy(42, 11, 4)
        assert fewer.black_holes[:-1] != more.black_holes[:-1]
        assert fewer.central_black_hole == more.central_black_hole


class TestCounts:
    """Sizes of the generated populations."""

    def test_default_scenario(self):
        """Seed 12345 with the default parameters."""
        galaxy = generate_galaxy(12345, 1000, 50, 0.15, 0.03)
        assert len(galaxy.star_systems) == 1000
        assert len(galaxy.black_holes) == 50
        assert len(galaxy.nebulae) == 10

    @pytest.mark.parametrize("num_systems", [0, -5])
    def test_no_systems(self, num_systems):
        """Zero or negative system counts give an empty tuple."""
        galaxy = generate_galaxy(42, num_systems, 5)
        assert galaxy.star_systems == ()
        assert len(galaxy.black_holes) == 5

    @pytest.mark.parametrize("num_black_holes", [0, 1, -3])
    def test_only_central_black_hole(self, num_black_holes):
        """One or fewer black holes still yields the galactic core."""
        galaxy = generate_galaxy(42, 10, num_black_holes)
        assert [bh.id for bh in galaxy.black_holes] == [CENTRAL_BLACK_HOLE_ID]


class TestInvariants:
    """Structural guarantees of every galaxy."""

    def test_unique_ids(self, small_galaxy):
        """System and black hole ids are pairwise distinct."""
        ids = [entity.id for entity in small_galaxy.all_entities()]
        assert len(ids) == len(set(ids))

    def test_unique_body_ids(self, small_galaxy):
        """Planet and moon ids are pairwise distinct."""
        ids = []
        for planet in _all_planets(small_galaxy):
            ids.append(planet.id)
            ids.extend(moon.id for moon in planet.moons)
        assert len(ids) == len(set(ids))

    def test_id_format(self, small_galaxy):
        """Ids encode the generation index."""
        for i, system in enumerate(small_galaxy.star_systems):
            assert system.id == f"star-system-{i}"
        for i, black_hole in enumerate(small_galaxy.black_holes[:-1]):
            assert black_hole.id == f"black-hole-{i}"
        for i, nebula in enumerate(small_galaxy.nebulae):
            assert nebula.id == f"nebula-{i}"

    def test_planet_id_owners(self, small_galaxy):
        """Planet ids name the star they orbit."""
        for system in small_galaxy.star_systems:
            for planet in system.planets:
                assert planet.id.startswith(f"{system.id}-primary-planet-")
            if system.binary_companion:
                for planet in system.binary_companion.planets:
                    assert planet.id.startswith(f"{system.id}-binary-planet-")
            if system.trinary_companion:
                for planet in system.trinary_companion.planets:
                    assert planet.id.startswith(f"{system.id}-trinary-planet-")
            for planet in system.all_planets:
                for moon in planet.moons:
                    assert moon.id.startswith(f"{planet.id}-moon-")

    def test_central_black_hole(self, small_galaxy):
        """Exactly one fixed core at the origin."""
        cores = [bh for bh in small_galaxy.black_holes if bh.id == CENTRAL_BLACK_HOLE_ID]
        assert len(cores) == 1
        core = cores[0]
        assert core.position == (0.0, 0.0, 0.0)
        assert core.size == 500
        assert core.planets == ()
        assert small_galaxy.central_black_hole is core

    def test_central_black_hole_uses_no_draws(self):
        """Adding the core does not advance the stream."""
        assembler = GalaxyAssembler(42, num_systems=0, num_black_holes=1)
        assembler.stream.next()  # galaxy type
        before = assembler.stream.draws
        assembler._generate_black_holes()
        assert assembler.stream.draws == before

    def test_life_requires_water(self, small_galaxy):
        """No planet has life without water, nor a civilization without life."""
        for planet in _all_planets(small_galaxy):
            if planet.has_life:
                assert planet.has_water
            if planet.civilization is not None:
                assert planet.has_life
                assert 1 <= planet.civilization.tech_level <= 5

    def test_market_and_repair_independent(self):
        """Market and repair are separate rolls, unrelated to each other or to tech level."""
        galaxy = generate_galaxy(7, 2000, 1, 0.15, 0.03)
        civilizations = [p.civilization for p in _all_planets(galaxy) if p.civilization is not None]

        combinations = {(civ.has_market, civ.has_repair) for civ in civilizations}
        assert combinations == {(True, True), (True, False), (False, True), (False, False)}

        for tech_level in (1, 5):
            at_level = [civ for civ in civilizations if civ.tech_level == tech_level]
            assert {civ.has_market for civ in at_level} == {True, False}
            assert {civ.has_repair for civ in at_level} == {True, False}

    def test_planet_and_moon_bounds(self, small_galaxy):
        """Primaries hold up to four planets, companions two, planets two moons."""
        for system in small_galaxy.star_systems:
            assert len(system.planets) <= MAX_PRIMARY_PLANETS
            for companion in system.companions:
                assert len(companion.planets) <= MAX_COMPANION_PLANETS
            for planet in system.all_planets:
                assert len(planet.moons) <= MAX_MOONS
                assert len(planet.resources) <= 3

    def test_black_hole_sizes(self, small_galaxy):
        """Procedural black holes are 100 to 400 in size."""
        for black_hole in small_galaxy.black_holes[:-1]:
            assert 100 <= black_hole.size < 400
            assert black_hole.star_type is StarType.BLACK_HOLE
            assert len(black_hole.planets) <= 2

    def test_positions_within_disc(self, small_galaxy):
        """Nothing sits above or below the galactic disc."""
        for entity in small_galaxy.all_entities():
            assert abs(entity.position[1]) <= GALAXY_HEIGHT / 2

    def test_special_features(self, small_galaxy):
        """Systems carry up to two distinct special features."""
        for system in small_galaxy.star_systems:
            assert len(system.special_features) <= 2
            assert len(set(system.special_features)) == len(system.special_features)

    def test_systems_not_flagged_explored(self, small_galaxy):
        """Generation never marks anything explored."""
        assert not any(system.explored for system in small_galaxy.star_systems)


class TestCompanions:
    """Binary and trinary companion rolls."""

    def test_no_binaries(self):
        """Zero binary frequency means no companions at all."""
        galaxy = generate_galaxy(42, 60, 2, 0.0, 1.0)
        assert all(not system.companions for system in galaxy.star_systems)

    def test_all_binaries(self):
        """Binary frequency 1 with trinary 0 gives a binary everywhere."""
        galaxy = generate_galaxy(42, 60, 2, 1.0, 0.0)
        for system in galaxy.star_systems:
            assert system.binary_companion is not None
            assert system.trinary_companion is None

    def test_trinary_is_conditional_on_binary(self):
        """trinary_frequency only applies to systems that already have a binary."""
        galaxy = generate_galaxy(42, 200, 2, 0.5, 1.0)
        for system in galaxy.star_systems:
            if system.binary_companion is None:
                assert system.trinary_companion is None
            else:
                assert system.trinary_companion is not None

    def test_frequencies_are_clamped(self):
        """Out of range frequencies behave like the nearest bound."""
        assert generate_galaxy(42, 30, 2, 5.0, -1.0) == generate_galaxy(42, 30, 2, 1.0, 0.0)


class TestLookups:
    """Galaxy lookup helpers."""

    def test_get_system(self, small_galaxy):
        """System ids resolve by index."""
        assert small_galaxy.get_system("star-system-3") is small_galaxy.star_systems[3]

    @pytest.mark.parametrize("bad_id", [
        "star-system-999", "star-system-x", "nebula-1", "", "star-system--1",
        "star-system-01", "star-system-+1", "star-system- 1",
    ])
    def test_get_system_unknown(self, small_galaxy, bad_id):
        """Unknown ids give None."""
        assert small_galaxy.get_system(bad_id) is None

    def test_get_entity(self, small_galaxy):
        """get_entity finds both systems and black holes."""
        assert small_galaxy.get_entity("star-system-0").id == "star-system-0"
        assert small_galaxy.get_entity(CENTRAL_BLACK_HOLE_ID).is_black_hole
        assert small_galaxy.get_entity("black-hole-0").id == "black-hole-0"
        assert small_galaxy.get_entity("nowhere") is None
        assert small_galaxy.get_entity("star-system-01") is None


class TestCelestialBodies:
    """Body listing for exploration."""

    def test_planets_then_moons(self):
        """All planets across stars come first, then their moons."""
        p0 = make_planet("p0", moons=[make_moon("p0-m0"), make_moon("p0-m1")])
        p1 = make_planet("p1")
        p2 = make_planet("p2", moons=[make_moon("p2-m0")])
        system = make_system(0, planets=[p0], binary=make_companion([p1]), trinary=make_companion([p2]))

        bodies = celestial_bodies(system)
        assert [body.id for body in bodies] == ["p0", "p1", "p2", "p0-m0", "p0-m1", "p2-m0"]
        assert count_celestial_bodies(system) == 6

    def test_empty_system(self, empty_system):
        """A bare star has no bodies."""
        assert celestial_bodies(empty_system) == []
        assert count_celestial_bodies(empty_system) == 0
