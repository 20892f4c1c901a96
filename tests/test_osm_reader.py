import io
import xml.etree.ElementTree as ET

import pytest

from osmgraph.core import osm_reader
from osmgraph.core.config import ConverterConfig
from osmgraph.core.errors import OSMParseError
from osmgraph.core.osm_reader import (
    ElementTreeDocument,
    IterparseDocument,
    open_document,
)

ROADS_AND_FOOTWAYS = ConverterConfig(highway_types=frozenset({"residential", "footway"}))

OSM_XML = b"""<?xml version="1.0" encoding="UTF-8"?>
<osm version="0.6">
  <node id="1" lat="52.0" lon="21.0"/>
  <node id="2" lat="52.1" lon="21.1">
    <tag k="highway" v="traffic_signals"/>
  </node>
  <way id="10">
    <nd ref="1"/>
    <nd ref="2"/>
    <tag k="highway" v="residential"/>
    <tag k="maxspeed" v="50"/>
  </way>
  <way id="11">
    <nd ref="2"/>
    <nd ref="1"/>
    <tag k="highway" v="footway"/>
  </way>
  <way id="12">
    <nd ref="1"/>
    <tag k="building" v="yes"/>
  </way>
</osm>
"""


@pytest.mark.parametrize("streaming", [False, True])
def test_document_nodes_and_filtered_ways(streaming):
    """
    Oba backendy zwracają te same węzły i tylko drogi z listy kategorii.
    """
    doc = open_document(io.BytesIO(OSM_XML), streaming=streaming)

    nodes = list(doc.iter_nodes())
    assert [(n.id, n.lat, n.lon) for n in nodes] == [("1", "52.0", "21.0"), ("2", "52.1", "21.1")]

    ways = list(doc.iter_ways({"residential"}.__contains__))
    assert len(ways) == 1
    assert ways[0].id == "10"
    assert ways[0].refs == ["1", "2"]
    assert ways[0].tags == [("highway", "residential"), ("maxspeed", "50")]


@pytest.mark.parametrize("streaming", [False, True])
def test_document_can_be_queried_many_times(streaming):
    doc = open_document(io.BytesIO(OSM_XML), streaming=streaming)

    first = [w.id for w in doc.iter_ways(ROADS_AND_FOOTWAYS.is_road)]
    second = [w.id for w in doc.iter_ways(ROADS_AND_FOOTWAYS.is_road)]

    assert first == second == ["10", "11"]
    assert len(list(doc.iter_nodes())) == 2


def test_open_document_backend_types(tmp_path):
    path = tmp_path / "map.osm"
    path.write_bytes(OSM_XML)

    assert isinstance(open_document(path), ElementTreeDocument)
    assert isinstance(open_document(path, streaming=True), IterparseDocument)


@pytest.mark.parametrize("streaming", [False, True])
def test_malformed_document_is_fatal(streaming):
    with pytest.raises(OSMParseError):
        open_document(io.BytesIO(b"<osm><node id='1'></osm>"), streaming=streaming)


def test_missing_input_file_is_fatal(tmp_path):
    with pytest.raises(OSMParseError) as exc:
        open_document(tmp_path / "nie_ma.osm")

    assert "nie_ma.osm" in exc.value.source


@pytest.mark.parametrize("streaming", [False, True])
def test_relations_and_bounds_do_not_disturb_iteration(streaming):
    """
    Elementy inne niż node/way (bounds, relation) są pomijane, a backend
    strumieniowy daje ten sam wynik co drzewiasty także przy wielu elementach.
    """
    nodes = "".join(f'<node id="{i}" lat="1.{i}" lon="2.{i}"/>' for i in range(1, 51))
    ways = "".join(
        f'<way id="{i}"><nd ref="{i}"/><nd ref="{i + 1}"/><tag k="highway" v="service"/></way>'
        for i in range(1, 50)
    )
    xml = (
        '<osm><bounds minlat="1" minlon="2" maxlat="2" maxlon="3"/>'
        f"{nodes}{ways}"
        '<relation id="7"><member type="way" ref="1" role=""/><tag k="type" v="route"/></relation>'
        "</osm>"
    ).encode("utf-8")

    doc = open_document(io.BytesIO(xml), streaming=streaming)

    assert [n.id for n in doc.iter_nodes()] == [str(i) for i in range(1, 51)]
    ways = list(doc.iter_ways({"service"}.__contains__))
    assert len(ways) == 49
    assert ways[-1].refs == ["49", "50"]
    assert ways[-1].tags == [("highway", "service")]


def test_streaming_detaches_processed_elements_from_root(monkeypatch):
    """
    Po przejściu backendu strumieniowego korzeń nie trzyma już
    przetworzonych elementów node/way/relation.
    """
    roots = []
    real_iterparse = ET.iterparse

    def recording_iterparse(source, events):
        for event, elem in real_iterparse(source, events=events):
            if not roots:
                roots.append(elem)
            yield event, elem

    monkeypatch.setattr(osm_reader.ET, "iterparse", recording_iterparse)

    doc = IterparseDocument(OSM_XML)
    assert len(list(doc.iter_nodes())) == 2

    assert roots[0].tag == "osm"
    assert len(roots[0]) == 0
