from pathlib import Path
from typing import Dict, Iterator, TextIO, Union

import networkx as nx
from shapely.geometry import LineString

from .errors import MapConverterError

GraphSource = Union[str, Path, TextIO]


def _lines(source: GraphSource) -> Iterator[str]:
    if isinstance(source, (str, Path)):
        with open(source, "r", encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if line:
                    yield line
    else:
        for line in source:
            line = line.strip()
            if line:
                yield line


def read_graph(source: GraphSource) -> nx.MultiDiGraph:
    """
    Wczytuje plik grafu z powrotem do networkx (np. dla algorytmów najkrótszej ścieżki).
    Węzły są identyfikowane nowym id, krawędzie mają length_m, max_speed
    i geometrię shapely (lon, lat).
    """
    lines = _lines(source)

    try:
        node_count = int(next(lines))
        edge_count = int(next(lines))
    except (StopIteration, ValueError) as e:
        raise MapConverterError(f"Niepoprawny nagłówek pliku grafu: {e}") from e

    G = nx.MultiDiGraph()

    for _ in range(node_count):
        try:
            compact_id, lat, lon = next(lines).split()
        except StopIteration:
            raise MapConverterError(f"Plik grafu ma mniej niż {node_count} węzłów")
        lat, lon = float(lat), float(lon)
        G.add_node(int(compact_id), lat=lat, lon=lon, pos=(lat, lon))

    edges_read = 0
    for line in lines:
        start, end, length_m, max_speed = line.split()
        u, v = int(start), int(end)
        if u not in G or v not in G:
            raise MapConverterError(f"Krawędź {u}->{v} wskazuje na nieistniejący węzeł")

        segment = LineString([
            (G.nodes[u]["lon"], G.nodes[u]["lat"]),
            (G.nodes[v]["lon"], G.nodes[v]["lat"]),
        ])
        G.add_edge(u, v, length_m=float(length_m), max_speed=int(max_speed), geometry=segment)
        edges_read += 1

    if edges_read != edge_count:
        raise MapConverterError(
            f"Nagłówek mówi o {edge_count} krawędziach, w pliku jest {edges_read}"
        )

    return G


def read_mapping(source: GraphSource) -> Dict[int, int]:
    """Wczytuje plik mapowania: id OSM -> nowe id."""
    mapping = {}
    for line in _lines(source):
        original_id, compact_id = line.split()
        mapping[int(original_id)] = int(compact_id)
    return mapping
