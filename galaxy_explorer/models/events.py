"""Exploration events for Galaxy Explorer.

Exploring a system picks one celestial body at random and rolls an event
category for it. Titles, descriptions and reward lists come from the tables
below, keyed by event type, with body-type flavor text mixed in. Systems with
no bodies at all draw from a separate space encounter table instead.
"""

from __future__ import annotations

import enum
import random
from dataclasses import dataclass
from typing import Optional, Union

from .bodies import CivilizationType, Moon, Planet
from .galaxy import SpaceEntity, celestial_bodies


class ExplorationEventType(enum.Enum):
    """Category of an exploration outcome."""

    DISCOVERY = "discovery"
    RESOURCES = "resources"
    CIVILIZATION = "civilization"
    ARTIFACT = "artifact"
    COMBAT = "combat"
    DANGER = "danger"
    MARKET = "market"
    EMPTY = "empty"
    # Space encounters, only for systems without bodies
    MERCHANT = "merchant"
    DERELICT = "derelict"


BODY_EVENT_TYPES = (
    ExplorationEventType.DISCOVERY,
    ExplorationEventType.RESOURCES,
    ExplorationEventType.CIVILIZATION,
    ExplorationEventType.ARTIFACT,
    ExplorationEventType.COMBAT,
    ExplorationEventType.DANGER,
    ExplorationEventType.MARKET,
    ExplorationEventType.EMPTY,
)

SPACE_ENCOUNTER_TYPES = (
    ExplorationEventType.MERCHANT,
    ExplorationEventType.DERELICT,
    ExplorationEventType.EMPTY,
)


@dataclass(frozen=True)
class MarketInfo:
    """Trade and repair services offered by a system's civilization."""

    type: CivilizationType
    tech_level: int
    has_repair: bool
    has_market: bool


@dataclass(frozen=True)
class ExplorationEvent:
    """A single narrative outcome of exploring one body (or empty space)."""

    type: ExplorationEventType
    title: str
    description: str
    body: Optional[Union[Planet, Moon]] = None
    rewards: tuple[str, ...] = ()
    consequences: tuple[str, ...] = ()
    market_info: Optional[MarketInfo] = None

    @property
    def body_id(self) -> str | None:
        return self.body.id if self.body is not None else None


@dataclass(frozen=True)
class EventTemplate:
    title: str
    description: str  # formatted with {body} and {flavor}
    rewards: tuple[str, ...] = ()
    consequences: tuple[str, ...] = ()


# ---------------------------------------------------------------------------
# Flavor text, keyed by body type value
# ---------------------------------------------------------------------------

_DISCOVERY_FLAVOR = {
    "terrestrial": "Unique geological formations suggest this world has experienced extraordinary tectonic activity.",
    "gas-giant": "Atmospheric analysis reveals previously unknown chemical compounds in the upper atmosphere.",
    "rocky": "Mineral composition analysis indicates this body formed under highly unusual stellar conditions.",
    "metallic": "Magnetic field readings suggest an exotic core composition unlike any previously catalogued.",
    "ice": "Subsurface ocean detected beneath the ice shell, with thermal vents potentially supporting life.",
}

_RESOURCE_FLAVOR = {
    "terrestrial": "Rich deposits of rare earth elements have been identified in multiple locations.",
    "gas-giant": "Atmospheric processors could extract valuable gases from the dense atmosphere.",
    "rocky": "Dense concentrations of metallic ores embedded within the rocky crust.",
    "metallic": "Extremely pure metal deposits with minimal refining requirements.",
    "ice": "Pure water ice reserves could support long-term colonization efforts.",
}

_DANGER_FLAVOR = {
    "terrestrial": "Seismic activity triggered landslides that nearly trapped the exploration team.",
    "gas-giant": "Violent atmospheric storms damaged survey equipment and threatened team safety.",
    "rocky": "Unstable surface conditions and rockfall events pose ongoing safety risks.",
    "metallic": "Intense electromagnetic fields interfered with equipment and communications.",
    "ice": "Thin ice layers over deep crevasses created treacherous exploration conditions.",
}

_COMBAT_FLAVOR = {
    "terrestrial": "Raiders were using the surface as a hidden staging ground.",
    "gas-giant": "Pirate vessels emerged from the cloud bands where they had been lying in wait.",
    "rocky": "An automated defense platform buried in the crust opened fire.",
    "metallic": "Salvagers working the ore fields refused to share their claim.",
    "ice": "Hostile ships had been sheltering in the shadow of the ice shell.",
}

_FLAVOR_TABLES: dict[ExplorationEventType, dict[str, str]] = {
    ExplorationEventType.DISCOVERY: _DISCOVERY_FLAVOR,
    ExplorationEventType.RESOURCES: _RESOURCE_FLAVOR,
    ExplorationEventType.DANGER: _DANGER_FLAVOR,
    ExplorationEventType.COMBAT: _COMBAT_FLAVOR,
}

_DEFAULT_FLAVOR: dict[ExplorationEventType, str] = {
    ExplorationEventType.DISCOVERY: "Anomalous readings detected that require further investigation.",
    ExplorationEventType.RESOURCES: "Valuable materials detected suitable for industrial extraction.",
    ExplorationEventType.DANGER: "Unexpected environmental hazards posed significant risks to the exploration team.",
    ExplorationEventType.COMBAT: "Unknown hostiles attacked without warning.",
}


# ---------------------------------------------------------------------------
# Event templates
# ---------------------------------------------------------------------------

_BODY_TEMPLATES: dict[ExplorationEventType, EventTemplate] = {
    ExplorationEventType.DISCOVERY: EventTemplate(
        "Scientific Discovery",
        "Exploration teams have made a remarkable scientific discovery on {body}. {flavor}",
        rewards=("Scientific Data", "Research Points", "Discovery Credits"),
    ),
    ExplorationEventType.RESOURCES: EventTemplate(
        "Resource Discovery",
        "Mining surveys on {body} have revealed valuable resource deposits. {flavor}",
        rewards=("Mineral Resources", "Mining Rights", "Economic Data"),
    ),
    ExplorationEventType.ARTIFACT: EventTemplate(
        "Mysterious Artifact",
        "Survey teams have located an artifact of unknown origin on {body}. Its purpose and "
        "creators remain a mystery, but it emanates strange energy signatures.",
        rewards=("Alien Artifact", "Energy Readings", "Research Opportunity"),
    ),
    ExplorationEventType.COMBAT: EventTemplate(
        "Hostile Contact",
        "The survey of {body} was interrupted by armed vessels. {flavor} Weapons are hot.",
        rewards=("Salvage", "Bounty Credits"),
        consequences=("Hull Damage", "Shield Strain", "Crew Casualties"),
    ),
    ExplorationEventType.DANGER: EventTemplate(
        "Exploration Hazard",
        "Exploration teams encountered unexpected dangers on {body}. {flavor} "
        "Mission protocols require immediate evacuation.",
        consequences=("Equipment Loss", "Team Injuries", "Mission Delay"),
    ),
    ExplorationEventType.MARKET: EventTemplate(
        "Trading Post",
        "A small trading post operates in orbit of {body}. Local traders are eager to do business.",
        rewards=("Trade Contacts", "Market Data"),
    ),
    ExplorationEventType.EMPTY: EventTemplate(
        "Routine Survey",
        "Comprehensive scans of {body} completed successfully. No unusual findings detected, "
        "but valuable baseline data has been collected for future reference.",
        rewards=("Survey Data",),
    ),
}

_FIRST_CONTACT = EventTemplate(
    "First Contact",
    "Diplomatic teams have established contact with the civilization on {body}. "
    "Cultural exchange protocols are being established.",
    rewards=("Diplomatic Relations", "Cultural Data", "Technology Exchange"),
)

_ANCIENT_RUINS = EventTemplate(
    "Ancient Ruins",
    "Archaeological teams have discovered ruins of an ancient civilization on {body}. "
    "The structures appear to be millions of years old.",
    rewards=("Archaeological Data", "Ancient Technology", "Historical Records"),
)

_SPACE_TEMPLATES: dict[ExplorationEventType, EventTemplate] = {
    ExplorationEventType.MERCHANT: EventTemplate(
        "Wandering Merchant",
        "A lone merchant vessel drifts through the empty system and hails your ship, "
        "offering to trade supplies for credits.",
        rewards=("Trade Opportunity", "Navigation Charts"),
    ),
    ExplorationEventType.DERELICT: EventTemplate(
        "Derelict Vessel",
        "Long range scans pick up the hulk of an abandoned ship tumbling between the stars. "
        "Salvage teams recover what they can.",
        rewards=("Salvaged Cargo", "Ship Logs"),
    ),
    ExplorationEventType.EMPTY: EventTemplate(
        "System Survey Complete",
        "Deep space scans reveal no significant celestial bodies in this system. "
        "Only stellar radiation and cosmic dust detected.",
        rewards=("Survey Data",),
    ),
}


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------


def get_system_market_info(system: SpaceEntity) -> MarketInfo | None:
    """Market info from the first civilization found across all stars."""
    for planet in system.all_planets:
        civ = planet.civilization
        if civ is not None:
            return MarketInfo(
                type=civ.type,
                tech_level=civ.tech_level,
                has_repair=civ.has_repair,
                has_market=civ.has_market,
            )
    return None


def _body_template(
    event_type: ExplorationEventType, body: Union[Planet, Moon],
) -> EventTemplate:
    if event_type is ExplorationEventType.CIVILIZATION:
        return _FIRST_CONTACT if _is_inhabited(body) else _ANCIENT_RUINS
    return _BODY_TEMPLATES[event_type]


def _is_inhabited(body: Union[Planet, Moon]) -> bool:
    return isinstance(body, Planet) and body.inhabited


def _flavor(event_type: ExplorationEventType, body: Union[Planet, Moon]) -> str:
    table = _FLAVOR_TABLES.get(event_type)
    if table is None:
        return ""
    return table.get(body.type.value, _DEFAULT_FLAVOR[event_type])


def build_body_event(
    event_type: ExplorationEventType,
    body: Union[Planet, Moon],
    system: SpaceEntity,
) -> ExplorationEvent:
    """Fill the template for one (event type, body) cell."""
    if event_type not in BODY_EVENT_TYPES:
        raise ValueError(f"{event_type.value} is not a body event")
    template = _body_template(event_type, body)
    description = template.description.format(body=body.name, flavor=_flavor(event_type, body)).strip()

    market_info = None
    if event_type is ExplorationEventType.CIVILIZATION and _is_inhabited(body):
        market_info = get_system_market_info(system)
    elif event_type is ExplorationEventType.MARKET:
        market_info = get_system_market_info(system)

    return ExplorationEvent(
        type=event_type,
        title=template.title,
        description=description,
        body=body,
        rewards=template.rewards,
        consequences=template.consequences,
        market_info=market_info,
    )


def build_space_encounter(event_type: ExplorationEventType) -> ExplorationEvent:
    template = _SPACE_TEMPLATES[event_type]
    return ExplorationEvent(
        type=event_type,
        title=template.title,
        description=template.description,
        rewards=template.rewards,
        consequences=template.consequences,
    )


def generate_exploration_event(
    system: SpaceEntity, rng: random.Random | None = None,
) -> ExplorationEvent:
    """Roll an exploration event for a system.

    Uses its own random source rather than the galaxy stream, so exploring
    never disturbs generation. Pass a seeded ``random.Random`` for
    reproducible results.
    """
    if rng is None:
        rng = random.Random()

    bodies = celestial_bodies(system)
    if not bodies:
        return build_space_encounter(rng.choice(SPACE_ENCOUNTER_TYPES))

    body = rng.choice(bodies)
    event_type = rng.choice(BODY_EVENT_TYPES)
    return build_body_event(event_type, body, system)
