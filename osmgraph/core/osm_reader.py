import io
import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Callable, Iterator, List, Optional, Tuple, Union

from .errors import OSMParseError

logger = logging.getLogger(__name__)

Source = Union[str, Path, BinaryIO]
RoadPredicate = Callable[[Optional[str]], bool]

_TOP_LEVEL = ("node", "way", "relation")


@dataclass
class RawNode:
    """Surowe atrybuty elementu <node> (jeszcze niesparsowane)."""
    id: Optional[str]
    lat: Optional[str]
    lon: Optional[str]


@dataclass
class RawWay:
    """
    Surowy element <way>:
    refs – atrybuty ref kolejnych <nd> (w kolejności z dokumentu),
    tags – pary (k, v) ze wszystkich <tag>, duplikaty zostają.
    """
    id: Optional[str]
    refs: List[str] = field(default_factory=list)
    tags: List[Tuple[str, str]] = field(default_factory=list)


def _raw_node(elem: ET.Element) -> RawNode:
    return RawNode(id=elem.get("id"), lat=elem.get("lat"), lon=elem.get("lon"))


def _raw_way(elem: ET.Element) -> RawWay:
    refs = [nd.get("ref") for nd in elem.findall("nd") if nd.get("ref") is not None]
    tags = [(t.get("k"), t.get("v", "")) for t in elem.findall("tag") if t.get("k") is not None]
    return RawWay(id=elem.get("id"), refs=refs, tags=tags)


def _has_road_tag(way: RawWay, is_road: RoadPredicate) -> bool:
    return any(k == "highway" and is_road(v) for k, v in way.tags)


class OSMDocument:
    """
    Widok na dokument OSM, po którym można wielokrotnie iterować.
    Konkretny backend parsowania (drzewo / strumień) jest wymienny.
    """

    def iter_nodes(self) -> Iterator[RawNode]:
        raise NotImplementedError

    def iter_ways(self, is_road: RoadPredicate) -> Iterator[RawWay]:
        """
        Zwraca tylko drogi, dla których is_road(wartość tagu highway) jest prawdą
        (zwykle ConverterConfig.is_road).
        """
        raise NotImplementedError


class ElementTreeDocument(OSMDocument):
    """Backend drzewiasty: dokument parsowany raz, potem tylko zapytania."""

    def __init__(self, root: ET.Element):
        self.root = root

    def iter_nodes(self) -> Iterator[RawNode]:
        for elem in self.root.iter("node"):
            yield _raw_node(elem)

    def iter_ways(self, is_road: RoadPredicate) -> Iterator[RawWay]:
        for elem in self.root.iter("way"):
            way = _raw_way(elem)
            if _has_road_tag(way, is_road):
                yield way


class IterparseDocument(OSMDocument):
    """
    Backend oszczędzający pamięć: surowe bajty dokumentu zostają w pamięci,
    ale drzewo nie jest budowane – przy każdym zapytaniu dokument jest
    parsowany od początku (iterparse), a przetworzone elementy są odpinane
    od korzenia.
    """

    def __init__(self, data: bytes):
        self.data = data

    def _iter_elements(self, tag: Optional[str]) -> Iterator[ET.Element]:
        root = None
        for event, elem in ET.iterparse(io.BytesIO(self.data), events=("start", "end")):
            if root is None:
                root = elem
                continue
            if event != "end" or elem.tag not in _TOP_LEVEL:
                continue
            if elem.tag == tag:
                yield elem
            elem.clear()
            root.clear()

    def validate(self) -> None:
        """Jedno pełne przejście – błędny XML wychodzi tutaj, a nie w połowie konwersji."""
        for _ in self._iter_elements(None):
            pass

    def iter_nodes(self) -> Iterator[RawNode]:
        for elem in self._iter_elements("node"):
            yield _raw_node(elem)

    def iter_ways(self, is_road: RoadPredicate) -> Iterator[RawWay]:
        for elem in self._iter_elements("way"):
            way = _raw_way(elem)
            if _has_road_tag(way, is_road):
                yield way


def _describe(source: Source) -> str:
    if isinstance(source, (str, Path)):
        return str(source)
    return getattr(source, "name", "<stream>")


def _read_bytes(source: Source) -> bytes:
    if isinstance(source, (str, Path)):
        return Path(source).read_bytes()
    return source.read()


def open_document(source: Source, streaming: bool = False) -> OSMDocument:
    """
    Wczytuje dokument OSM (ścieżka albo strumień binarny).

    Błędny XML / nieczytelny plik -> OSMParseError (błąd krytyczny).
    """
    name = _describe(source)
    logger.info("Wczytuję dokument OSM %s (streaming=%s)", name, streaming)

    try:
        if streaming:
            document = IterparseDocument(_read_bytes(source))
            document.validate()
            return document

        if isinstance(source, (str, Path)):
            tree = ET.parse(str(source))
        else:
            tree = ET.parse(source)
        return ElementTreeDocument(tree.getroot())
    except ET.ParseError as e:
        raise OSMParseError(name, f"niepoprawny XML ({e})") from e
    except OSError as e:
        raise OSMParseError(name, str(e)) from e
