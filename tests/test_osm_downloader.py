import pytest
import requests

from osmgraph.core import osm_downloader
from osmgraph.core.osm_downloader import build_overpass_query, download_to_file


class FakeResponse:
    def __init__(self, text, status_code=200):
        self.text = text
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code != 200:
            raise requests.HTTPError(f"HTTP {self.status_code}")


def test_build_overpass_query_uses_allow_list():
    query = build_overpass_query((52.0, 21.0, 52.1, 21.1), ["residential", "primary"])

    assert query.startswith("[out:xml]")
    assert 'way["highway"~"^(primary|residential)$"](52.0,21.0,52.1,21.1);' in query
    assert "out body;" in query


def test_download_to_file(monkeypatch, tmp_path):
    calls = {}

    def fake_post(url, data, timeout):
        calls["url"] = url
        calls["query"] = data["data"]
        return FakeResponse("<osm></osm>")

    monkeypatch.setattr(osm_downloader.requests, "post", fake_post)

    out = download_to_file((52.0, 21.0, 52.1, 21.1), tmp_path / "data" / "map.osm")

    assert out.read_text(encoding="utf-8") == "<osm></osm>"
    assert calls["url"] == osm_downloader.OVERPASS_URL
    assert "living_street" in calls["query"]


def test_download_http_error(monkeypatch):
    monkeypatch.setattr(
        osm_downloader.requests, "post", lambda url, data, timeout: FakeResponse("", 504)
    )

    with pytest.raises(requests.HTTPError, match="504"):
        osm_downloader.download_osm_roads((0.0, 0.0, 1.0, 1.0))
