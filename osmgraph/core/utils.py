import math
import re
from typing import Optional, Tuple

from .config import EARTH_RADIUS_M

_INT_RE = re.compile(r"-?[0-9]+")


def distance(lat1: float, lon1: float, lat2: float, lon2: float,
             radius_m: float = EARTH_RADIUS_M) -> float:
    """
    Odległość po kole wielkim (haversine) w metrach.
    Nie waliduje danych – NaN po prostu przechodzi dalej.
    """
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)

    a = (
        math.sin(d_lat / 2) * math.sin(d_lat / 2)
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2))
        * math.sin(d_lon / 2) * math.sin(d_lon / 2)
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return radius_m * c


def haversine_distance_m(a: Tuple[float, float], b: Tuple[float, float],
                         radius_m: float = EARTH_RADIUS_M) -> float:
    """To samo co distance(), ale dla punktów (lat, lon)."""
    return distance(a[0], a[1], b[0], b[1], radius_m)


def parse_int(value: Optional[str]) -> Optional[int]:
    """
    Ścisłe parsowanie liczby całkowitej: opcjonalny minus i cyfry ASCII.
    '+5', '1_000', '--5', '5²' itp. dają None.
    """
    if value is None:
        return None
    value = value.strip()
    if not _INT_RE.fullmatch(value):
        return None
    return int(value)


def parse_max_speed(value: Optional[str], default: int) -> int:
    """maxspeed jako int; brak albo wartość nieliczbowa (np. 'walk', '50 mph') -> default."""
    speed = parse_int(value)
    return default if speed is None else speed
