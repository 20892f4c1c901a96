import logging
from dataclasses import dataclass
from typing import Dict, Iterator, Optional

from .osm_reader import OSMDocument
from .utils import parse_int

logger = logging.getLogger(__name__)


@dataclass
class Node:
    id: int
    lat: float
    lon: float
    used: bool = False
    compact_id: Optional[int] = None


class NodeTable:
    """
    Indeks id OSM -> Node.

    Kolejność iteracji = kolejność pierwszego wstawienia (kolejność w dokumencie),
    dzięki temu numeracja węzłów w grafie jest powtarzalna.
    """

    def __init__(self):
        self._nodes: Dict[int, Node] = {}
        self.skipped = 0

    def insert(self, node_id: int, lat: float, lon: float) -> Node:
        existing = self._nodes.get(node_id)
        if existing is not None:
            # duplikat: wygrywa ostatni rekord, pozycja z pierwszego wstawienia
            logger.debug("Duplikat węzła %d – nadpisuję współrzędne", node_id)
            existing.lat = lat
            existing.lon = lon
            return existing

        node = Node(id=node_id, lat=lat, lon=lon)
        self._nodes[node_id] = node
        return node

    def get(self, node_id: int) -> Optional[Node]:
        return self._nodes.get(node_id)

    def mark_used(self, node_id: int) -> None:
        self._nodes[node_id].used = True

    def nodes(self) -> Iterator[Node]:
        return iter(self._nodes.values())

    def used_nodes(self) -> Iterator[Node]:
        return (n for n in self._nodes.values() if n.used)

    def used_count(self) -> int:
        return sum(1 for _ in self.used_nodes())

    def __iter__(self) -> Iterator[Node]:
        return self.nodes()

    def __contains__(self, node_id) -> bool:
        return node_id in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)


def load_nodes(document: OSMDocument) -> NodeTable:
    """
    Przebieg 1: wszystkie elementy <node> trafiają do tabeli.
    Rekord z niepoprawnym id / lat / lon jest pomijany (z ostrzeżeniem),
    konwersja idzie dalej.
    """
    table = NodeTable()

    for raw in document.iter_nodes():
        node_id = parse_int(raw.id)
        if node_id is None:
            table.skipped += 1
            logger.warning("Pomijam węzeł z niepoprawnym id=%r", raw.id)
            continue

        try:
            lat = float(raw.lat)
            lon = float(raw.lon)
        except (TypeError, ValueError) as e:
            table.skipped += 1
            logger.warning(
                "Pomijam węzeł id=%r lat=%r lon=%r: %s", raw.id, raw.lat, raw.lon, e
            )
            continue

        table.insert(node_id, lat, lon)

    logger.info("Wczytano %d węzłów (pominięto %d)", len(table), table.skipped)
    return table
