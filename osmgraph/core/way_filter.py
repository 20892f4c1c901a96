import logging
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Sequence, Tuple

from .config import ConverterConfig
from .node_table import NodeTable
from .osm_reader import OSMDocument
from .utils import parse_int

logger = logging.getLogger(__name__)

Tags = Sequence[Tuple[str, str]]


@dataclass
class Way:
    """Droga po filtrowaniu: kolejne id węzłów OSM + maxspeed (jako tekst)."""
    nodes: List[int]
    max_speed: str
    source_id: Optional[str] = None

    @property
    def edge_count(self) -> int:
        return max(0, len(self.nodes) - 1)


@dataclass
class WayCollection:
    """
    Wynik przebiegu 2 – drogi w kolejności zapisu (razem z odwróconymi
    kopiami dróg dwukierunkowych) oraz liczniki do podsumowania.
    """
    ways: List[Way] = field(default_factory=list)
    edge_count: int = 0
    without_max_speed: int = 0
    dropped: int = 0

    def add(self, way: Way) -> None:
        self.ways.append(way)
        self.edge_count += way.edge_count

    def __iter__(self) -> Iterator[Way]:
        return iter(self.ways)

    def __len__(self) -> int:
        return len(self.ways)


def max_speed_tag(tags: Tags) -> Optional[str]:
    """Wartość tagu maxspeed – przy kilku wystąpieniach wygrywa ostatnie."""
    value = None
    for k, v in tags:
        if k == "maxspeed":
            value = v
    return value


def is_oneway(tags: Tags) -> bool:
    """Jednokierunkowa, jeśli którykolwiek tag oneway ma wartość 'yes' (bez rozróżniania wielkości liter)."""
    return any(k == "oneway" and v.lower() == "yes" for k, v in tags)


def resolve_refs(refs: Sequence[str], node_table: NodeTable) -> List[int]:
    """Zamienia ref-y na id węzłów; ref-y bez węzła w tabeli są po cichu pomijane."""
    resolved = []
    for ref in refs:
        node_id = parse_int(ref)
        if node_id is None or node_id not in node_table:
            continue
        resolved.append(node_id)
    return resolved


def build_ways(
    document: OSMDocument,
    node_table: NodeTable,
    config: ConverterConfig,
) -> WayCollection:
    """
    Przebieg 2: wybiera drogi z dozwolonych kategorii, oznacza użyte węzły
    i dla dróg dwukierunkowych dokłada kopię o odwróconej kolejności węzłów.
    """
    result = WayCollection()

    for raw in document.iter_ways(config.is_road):
        nodes = resolve_refs(raw.refs, node_table)

        if len(nodes) <= 1:
            # z jednego węzła nie zrobimy krawędzi
            result.dropped += 1
            continue

        max_speed = max_speed_tag(raw.tags)
        if max_speed is None:
            result.without_max_speed += 1
            max_speed = str(config.default_max_speed)

        for node_id in nodes:
            node_table.mark_used(node_id)

        result.add(Way(nodes=nodes, max_speed=max_speed, source_id=raw.id))

        if not is_oneway(raw.tags):
            result.add(Way(nodes=list(reversed(nodes)), max_speed=max_speed, source_id=raw.id))

    logger.info(
        "Wybrano %d dróg (z kopiami w przeciwnym kierunku), %d krawędzi, "
        "%d bez maxspeed, %d odrzuconych",
        len(result),
        result.edge_count,
        result.without_max_speed,
        result.dropped,
    )
    return result
