"""Command line entry point for Galaxy Explorer."""

from __future__ import annotations

import dataclasses
import logging
import random

import click

from .constants import (
    DEFAULT_BINARY_FREQUENCY,
    DEFAULT_NUM_BLACK_HOLES,
    DEFAULT_NUM_SYSTEMS,
    DEFAULT_SEED,
    DEFAULT_TRINARY_FREQUENCY,
    GAME_VERSION,
)
from .models.events import generate_exploration_event, get_system_market_info
from .models.exploration import max_explorations_for
from .models.galaxy import Galaxy, count_celestial_bodies, generate_galaxy
from .models.navigation import get_jumpable_system_ids, get_scanner_range_system_ids, max_jump_distance
from .models.ships import ShipStats, generate_starship
from .models.starting_system import select_starting_system


def galaxy_options(func):
    """Shared options describing which galaxy to build."""
    options = [
        click.option('--seed', '-s', default=str(DEFAULT_SEED), show_default=True,
                     help='Galaxy seed'),
        click.option('--systems', 'num_systems', type=int, default=DEFAULT_NUM_SYSTEMS, show_default=True,
                     help='Number of star systems'),
        click.option('--black-holes', 'num_black_holes', type=int, default=DEFAULT_NUM_BLACK_HOLES,
                     show_default=True, help='Number of black holes, including the galactic core'),
        click.option('--binary', 'binary_frequency', type=float, default=DEFAULT_BINARY_FREQUENCY,
                     show_default=True, help='Chance that a system has a binary companion'),
        click.option('--trinary', 'trinary_frequency', type=float, default=DEFAULT_TRINARY_FREQUENCY,
                     show_default=True, help='Chance that a binary system also has a trinary companion'),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _build_galaxy(seed, num_systems, num_black_holes, binary_frequency, trinary_frequency) -> Galaxy:
    return generate_galaxy(seed, num_systems, num_black_holes, binary_frequency, trinary_frequency)


def _ship_stats(ship_seed: int, tech_level: int | None = None, scanners: int | None = None) -> ShipStats:
    stats = generate_starship(ship_seed).stats
    changes = {}
    if tech_level is not None:
        changes['tech_level'] = tech_level
    if scanners is not None:
        changes['scanners'] = scanners
    try:
        return dataclasses.replace(stats, **changes)
    except ValueError as e:
        raise click.BadParameter(str(e))


@click.group()
@click.version_option(GAME_VERSION)
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.pass_context
def main(ctx, verbose):
    """Galaxy Explorer - procedural galaxy generation and navigation.

    Builds a whole galaxy from a seed and answers jump range, scanner and
    exploration queries against it.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )


@main.command()
@galaxy_options
def generate(seed, num_systems, num_black_holes, binary_frequency, trinary_frequency):
    """Generate a galaxy and print a summary."""
    galaxy = _build_galaxy(seed, num_systems, num_black_holes, binary_frequency, trinary_frequency)

    binaries = sum(1 for s in galaxy.star_systems if s.binary_companion is not None)
    trinaries = sum(1 for s in galaxy.star_systems if s.trinary_companion is not None)
    bodies = sum(count_celestial_bodies(s) for s in galaxy.star_systems)
    markets = sum(1 for s in galaxy.star_systems if get_system_market_info(s) is not None)

    click.echo(f"Galaxy {galaxy.seed} ({galaxy.galaxy_type.value})")
    click.echo(f"  Star systems:   {len(galaxy.star_systems)}")
    click.echo(f"  Binary:         {binaries}")
    click.echo(f"  Trinary:        {trinaries}")
    click.echo(f"  Black holes:    {len(galaxy.black_holes)}")
    click.echo(f"  Nebulae:        {len(galaxy.nebulae)}")
    click.echo(f"  Bodies:         {bodies}")
    click.echo(f"  Civilizations:  {markets}")


@main.command()
@galaxy_options
@click.option('--ship-seed', type=int, default=1, show_default=True, help='Seed for the generated starship')
@click.option('--pick-seed', type=int, default=None, help='Seed for choosing among suitable systems')
def start(seed, num_systems, num_black_holes, binary_frequency, trinary_frequency, ship_seed, pick_seed):
    """Pick a starting system for a generated starship."""
    galaxy = _build_galaxy(seed, num_systems, num_black_holes, binary_frequency, trinary_frequency)
    ship = generate_starship(ship_seed)
    system = select_starting_system(
        galaxy.star_systems, ship.stats, galaxy.black_holes, rng=random.Random(pick_seed),
    )

    click.echo(f"Ship: {ship.display_name}, tech level {ship.stats.tech_level}")
    if system is None:
        click.echo("No starting system: the galaxy is empty", err=True)
        return

    market = get_system_market_info(system)
    services = []
    if market is not None and market.has_market:
        services.append("market")
    if market is not None and market.has_repair:
        services.append("repair")
    click.echo(f"Start: {system.id} ({system.name})")
    click.echo(f"  Services: {', '.join(services) or 'none'}")


@main.command()
@galaxy_options
@click.option('--from', 'from_id', required=True, help='Id of the system or black hole to jump from')
@click.option('--ship-seed', type=int, default=1, show_default=True, help='Seed for the generated starship')
@click.option('--tech-level', type=click.IntRange(1, 10), default=None, help='Override the ship tech level')
@click.option('--scanners', type=click.IntRange(0, 100), default=None, help='Override the ship scanner rating')
def jumps(seed, num_systems, num_black_holes, binary_frequency, trinary_frequency,
          from_id, ship_seed, tech_level, scanners):
    """List destinations in jump and scanner range."""
    galaxy = _build_galaxy(seed, num_systems, num_black_holes, binary_frequency, trinary_frequency)
    stats = _ship_stats(ship_seed, tech_level, scanners)

    origin = galaxy.get_entity(from_id)
    if origin is None:
        raise click.ClickException(f"Unknown system: {from_id}")

    jumpable = get_jumpable_system_ids(
        origin, galaxy.star_systems, stats, all_black_holes=galaxy.black_holes,
    )
    scanned = get_scanner_range_system_ids(origin, galaxy.star_systems, stats, galaxy.black_holes)

    click.echo(f"Jump range {max_jump_distance(stats):.0f} from {origin.id}")
    click.echo(f"Jumpable ({len(jumpable)}):")
    for entity_id in jumpable:
        click.echo(f"  {entity_id}")
    click.echo(f"In scanner range ({len(scanned)}):")
    for entity_id in scanned:
        click.echo(f"  {entity_id}")


@main.command()
@galaxy_options
@click.option('--system', 'system_id', required=True, help='Id of the system to explore')
@click.option('--event-seed', type=int, default=None, help='Seed for the exploration roll')
def survey(seed, num_systems, num_black_holes, binary_frequency, trinary_frequency, system_id, event_seed):
    """Roll one exploration event for a system."""
    galaxy = _build_galaxy(seed, num_systems, num_black_holes, binary_frequency, trinary_frequency)
    system = galaxy.get_entity(system_id)
    if system is None:
        raise click.ClickException(f"Unknown system: {system_id}")

    event = generate_exploration_event(system, random.Random(event_seed))
    click.echo(f"{system.name}: {max_explorations_for(system)} exploration(s) available")
    click.echo(f"[{event.type.value}] {event.title}")
    click.echo(f"  {event.description}")
    if event.rewards:
        click.echo(f"  Rewards: {', '.join(event.rewards)}")
    if event.consequences:
        click.echo(f"  Consequences: {', '.join(event.consequences)}")
    if event.market_info is not None:
        info = event.market_info
        click.echo(
            f"  Market: {info.type.value} tech {info.tech_level}, "
            f"market={'yes' if info.has_market else 'no'}, repair={'yes' if info.has_repair else 'no'}"
        )


if __name__ == '__main__':
    main()
