import logging
from pathlib import Path
from typing import Iterable, Optional, Tuple

import requests

from .config import DEFAULT_HIGHWAY_TYPES

logger = logging.getLogger(__name__)


OVERPASS_URL = "https://overpass-api.de/api/interpreter"


def build_overpass_query(
    bbox: Tuple[float, float, float, float],
    highway_types: Iterable[str] = DEFAULT_HIGHWAY_TYPES,
    timeout: int = 25,
) -> str:
    """
    bbox: (south, west, north, east)
    Zapytanie zwraca drogi z listy kategorii razem z ich węzłami (out body).
    """
    south, west, north, east = bbox
    pattern = "|".join(sorted(highway_types))

    query = f"""
    [out:xml][timeout:{timeout}];
    (
      way["highway"~"^({pattern})$"]({south},{west},{north},{east});
    );
    (._;>;);
    out body;
    """
    return query.strip()


def download_osm_roads(
    bbox: Tuple[float, float, float, float],
    highway_types: Iterable[str] = DEFAULT_HIGHWAY_TYPES,
    url: str = OVERPASS_URL,
    timeout: int = 60,
) -> str:
    """
    Pobiera dane OSM (XML) dla dróg w zadanym bboxie.
    bbox: (south, west, north, east) w stopniach WGS84.
    Zwraca string z zawartością XML.
    """
    query = build_overpass_query(bbox, highway_types)
    logger.info("Wysyłam zapytanie do Overpass API dla bbox=%s", bbox)

    response = requests.post(url, data={"data": query}, timeout=timeout)
    response.raise_for_status()

    logger.info("Odebrano dane z Overpass, długość odpowiedzi: %d znaków", len(response.text))
    return response.text


def download_to_file(
    bbox: Tuple[float, float, float, float],
    output_path: Path,
    highway_types: Optional[Iterable[str]] = None,
) -> Path:
    """Pobiera drogi dla bbox i zapisuje XML – gotowe wejście dla konwertera."""
    osm_xml = download_osm_roads(bbox, highway_types or DEFAULT_HIGHWAY_TYPES)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(osm_xml, encoding="utf-8")

    logger.info("Zapisano dane OSM do pliku %s", output_path)
    return output_path


if __name__ == "__main__":
    import sys

    logging.basicConfig(level=logging.INFO)

    if len(sys.argv) != 6:
        print("Użycie: python -m osmgraph.core.osm_downloader south west north east output.osm")
        print("Przykład: python -m osmgraph.core.osm_downloader 52.0 21.0 52.1 21.1 data/map.osm")
        sys.exit(1)

    south = float(sys.argv[1])
    west = float(sys.argv[2])
    north = float(sys.argv[3])
    east = float(sys.argv[4])

    output = download_to_file((south, west, north, east), Path(sys.argv[5]))
    print("Gotowe. Zapisano do:", output)
