import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Optional, TextIO, Tuple, Union

from osmgraph.core.compactor import assign_compact_ids
from osmgraph.core.config import ConverterConfig, create_default_config
from osmgraph.core.errors import OutputWriteError
from osmgraph.core.graph_writer import GraphWriter
from osmgraph.core.node_table import NodeTable, load_nodes
from osmgraph.core.osm_reader import open_document
from osmgraph.core.way_filter import WayCollection, build_ways


logger = logging.getLogger(__name__)


@dataclass
class ConversionStats:
    nodes_parsed: int = 0
    nodes_skipped: int = 0
    used_nodes: int = 0
    ways: int = 0
    edges: int = 0
    ways_without_max_speed: int = 0
    ways_dropped: int = 0


class MapConverter:
    """
    Serwis spajający:
    - wczytanie dokumentu OSM,
    - przebieg 1 (tabela węzłów),
    - przebieg 2 (filtrowanie dróg, oznaczanie użytych węzłów),
    - nadanie nowych id,
    - zapis grafu i pliku mapowania.
    """

    def __init__(self, config: Optional[ConverterConfig] = None, streaming: bool = False):
        self.config = config or create_default_config()
        self.streaming = streaming

    def build(self, source: Union[str, Path, BinaryIO]) -> Tuple[GraphWriter, ConversionStats]:
        """
        Wszystko w pamięci, bez dotykania plików wynikowych –
        błąd parsowania nie zostawia po sobie częściowego wyniku.
        """
        document = open_document(source, streaming=self.streaming)

        node_table: NodeTable = load_nodes(document)
        ways: WayCollection = build_ways(document, node_table, self.config)
        used = assign_compact_ids(node_table)

        stats = ConversionStats(
            nodes_parsed=len(node_table),
            nodes_skipped=node_table.skipped,
            used_nodes=used,
            ways=len(ways),
            edges=ways.edge_count,
            ways_without_max_speed=ways.without_max_speed,
            ways_dropped=ways.dropped,
        )

        logger.info("Nodes: %d", stats.used_nodes)
        logger.info("Ways: %d", stats.edges)
        logger.info("Ways without max: %d", stats.ways_without_max_speed)

        writer = GraphWriter(
            node_table,
            ways,
            default_max_speed=self.config.default_max_speed,
            radius_m=self.config.earth_radius_m,
        )
        return writer, stats

    def convert_streams(
        self,
        source: BinaryIO,
        graph_out: TextIO,
        mapping_out: TextIO,
    ) -> ConversionStats:
        writer, stats = self.build(source)
        writer.write_graph(graph_out)
        writer.write_mapping(mapping_out)
        return stats

    def convert(self, input_path: Path, graph_path: Path, mapping_path: Path) -> ConversionStats:
        """Główna metoda wołana z linii komend."""
        logger.info("Konwertuję %s -> %s, %s", input_path, graph_path, mapping_path)
        writer, stats = self.build(Path(input_path))

        # najpierw całość w pamięci, pliki dopiero gdy wynik jest kompletny
        graph_text = io.StringIO()
        mapping_text = io.StringIO()
        writer.write_graph(graph_text)
        writer.write_mapping(mapping_text)

        current = graph_path
        try:
            with open(graph_path, "w", encoding="utf-8", newline="\n") as graph_out:
                graph_out.write(graph_text.getvalue())
            current = mapping_path
            with open(mapping_path, "w", encoding="utf-8", newline="\n") as mapping_out:
                mapping_out.write(mapping_text.getvalue())
        except OSError as e:
            raise OutputWriteError(str(current), str(e)) from e

        return stats
