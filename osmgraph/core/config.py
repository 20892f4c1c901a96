import os
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Iterable, Optional

from dotenv import load_dotenv

from .errors import ConfigError

logger = logging.getLogger(__name__)

load_dotenv()


# ======================= KONFIGURACJA / STAŁE =======================

EARTH_RADIUS_M = 6371000.0
DEFAULT_MAX_SPEED = 150  # brak zadeklarowanego ograniczenia prędkości


class HighwayType(str, Enum):
    """
    Kategorie dróg (tag highway=*), które trafiają do grafu.
    Zob. http://wiki.openstreetmap.org/wiki/DE:Key:highway
    """
    MOTORWAY = "motorway"
    TRUNK = "trunk"
    PRIMARY = "primary"
    SECONDARY = "secondary"
    TERTIARY = "tertiary"
    UNCLASSIFIED = "unclassified"
    RESIDENTIAL = "residential"
    SERVICE = "service"
    MOTORWAY_LINK = "motorway_link"
    TRUNK_LINK = "trunk_link"
    PRIMARY_LINK = "primary_link"
    SECONDARY_LINK = "secondary_link"
    TERTIARY_LINK = "tertiary_link"
    LIVING_STREET = "living_street"
    TRACK = "track"
    REST_AREA = "rest_area"
    SERVICES = "services"


DEFAULT_HIGHWAY_TYPES: FrozenSet[str] = frozenset(t.value for t in HighwayType)


@dataclass(frozen=True)
class ConverterConfig:
    """
    Konfiguracja konwertera.

    highway_types – lista dozwolonych wartości tagu highway
    (przekazywana jawnie do filtra dróg, w testach można ją podmienić).
    """
    highway_types: FrozenSet[str] = field(default_factory=lambda: DEFAULT_HIGHWAY_TYPES)
    default_max_speed: int = DEFAULT_MAX_SPEED
    earth_radius_m: float = EARTH_RADIUS_M

    def is_road(self, highway: Optional[str]) -> bool:
        return highway is not None and highway in self.highway_types


def parse_highway_types(raw: str) -> FrozenSet[str]:
    """Parsuje listę kategorii w formacie 'primary,secondary,...'."""
    values = [v.strip() for v in raw.split(",")]
    types = frozenset(v for v in values if v)
    if not types:
        raise ConfigError("OSMGRAPH_HIGHWAY_TYPES nie zawiera żadnej kategorii drogi")
    return types


def _env_max_speed(raw: Optional[str]) -> int:
    if raw is None or not raw.strip():
        return DEFAULT_MAX_SPEED
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"OSMGRAPH_DEFAULT_MAXSPEED musi być liczbą całkowitą, jest: {raw!r}")


# ======================= FABRYKA KONFIGURACJI =======================

def create_default_config(highway_types: Optional[Iterable[str]] = None) -> ConverterConfig:
    """
    Tworzy konfigurację na podstawie .env / zmiennych środowiskowych:
    - OSMGRAPH_HIGHWAY_TYPES – nadpisuje listę kategorii dróg,
    - OSMGRAPH_DEFAULT_MAXSPEED – wartość używana gdy droga nie ma maxspeed.
    """
    if highway_types is not None:
        types = frozenset(highway_types)
    else:
        raw_types = os.getenv("OSMGRAPH_HIGHWAY_TYPES")
        types = parse_highway_types(raw_types) if raw_types else DEFAULT_HIGHWAY_TYPES

    max_speed = _env_max_speed(os.getenv("OSMGRAPH_DEFAULT_MAXSPEED"))

    logger.debug(
        "Konfiguracja: %d kategorii dróg, domyślny maxspeed=%d",
        len(types),
        max_speed,
    )
    return ConverterConfig(highway_types=types, default_max_speed=max_speed)
