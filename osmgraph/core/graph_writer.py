import logging
from typing import Iterator, NamedTuple, Optional, TextIO

from .config import DEFAULT_MAX_SPEED, EARTH_RADIUS_M
from .errors import MapConverterError
from .node_table import Node, NodeTable
from .utils import distance, parse_max_speed
from .way_filter import WayCollection

logger = logging.getLogger(__name__)


class Edge(NamedTuple):
    start: int
    end: int
    length_m: float
    max_speed: int


class GraphWriter:
    """
    Zapisuje graf i plik mapowania id – oba opisują ten sam zbiór nowych id.

    Format grafu:
        <liczba węzłów>
        <liczba krawędzi>
        <id> <lat> <lon>                   (dla każdego węzła)
        <start> <koniec> <metry> <maxspeed> (dla każdej krawędzi)
    """

    def __init__(
        self,
        node_table: NodeTable,
        ways: WayCollection,
        default_max_speed: int = DEFAULT_MAX_SPEED,
        radius_m: float = EARTH_RADIUS_M,
    ):
        self.node_table = node_table
        self.ways = ways
        self.default_max_speed = default_max_speed
        self.radius_m = radius_m

    def _compact_id(self, node_id: int, node: Optional[Node]) -> int:
        if node is None or node.compact_id is None:
            raise MapConverterError(
                f"Węzeł {node_id} nie ma nowego id – czy assign_compact_ids() zostało wywołane?"
            )
        return node.compact_id

    def iter_edges(self) -> Iterator[Edge]:
        for way in self.ways:
            max_speed = parse_max_speed(way.max_speed, self.default_max_speed)
            for start_id, end_id in zip(way.nodes, way.nodes[1:]):
                start = self.node_table.get(start_id)
                end = self.node_table.get(end_id)
                yield Edge(
                    self._compact_id(start_id, start),
                    self._compact_id(end_id, end),
                    distance(start.lat, start.lon, end.lat, end.lon, self.radius_m),
                    max_speed,
                )

    def write_graph(self, out: TextIO) -> int:
        """Zapisuje plik grafu. Zwraca liczbę zapisanych krawędzi."""
        used = list(self.node_table.used_nodes())

        out.write(f"{len(used)}\n")
        out.write(f"{self.ways.edge_count}\n")

        for node in used:
            out.write(f"{self._compact_id(node.id, node)} {node.lat} {node.lon}\n")

        written = 0
        for edge in self.iter_edges():
            out.write(f"{edge.start} {edge.end} {edge.length_m:.1f} {edge.max_speed}\n")
            written += 1

        if written != self.ways.edge_count:
            raise MapConverterError(
                f"Liczba zapisanych krawędzi ({written}) różni się od nagłówka ({self.ways.edge_count})"
            )

        logger.info("Zapisano graf: %d węzłów, %d krawędzi", len(used), written)
        return written

    def write_mapping(self, out: TextIO) -> int:
        """Zapisuje pary '<id OSM> <nowe id>'. Zwraca liczbę linii."""
        count = 0
        for node in self.node_table.used_nodes():
            out.write(f"{node.id} {self._compact_id(node.id, node)}\n")
            count += 1
        return count
