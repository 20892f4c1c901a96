"""
Konwerter eksportu OpenStreetMap (XML) do grafu dróg.

Użycie: python -m osmgraph.main input.osm output.graph output.node_mapping
  input.osm            – dane wyeksportowane z openstreetmap.org
  output.graph         – wygenerowany graf (węzły + krawędzie z wagami)
  output.node_mapping  – mapowanie id węzła OSM -> id węzła w grafie
"""
import logging
import sys
from pathlib import Path
from typing import List, Optional

from osmgraph.core.errors import MapConverterError
from osmgraph.services.converter_service import MapConverter

logger = logging.getLogger(__name__)


def run(argv: List[str], converter: Optional[MapConverter] = None) -> int:
    if len(argv) != 3:
        print("Użycie: python -m osmgraph.main input.osm output.graph output.node_mapping")
        return 1

    input_path, graph_path, mapping_path = (Path(a) for a in argv)

    status = 0
    try:
        converter = converter or MapConverter()
        converter.convert(input_path, graph_path, mapping_path)
    except MapConverterError:
        logger.exception("Konwersja przerwana")
        status = 1

    logger.info("Zakończono")
    return status


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    sys.exit(run(sys.argv[1:]))


if __name__ == "__main__":
    main()
