"""
Feed loading adapters.

Fetches a flight-track export (FlightAware `/google_earth` KML, a local KML
file, or a GeoJSON document) and decodes it into a Feed. Point extraction
happens in tracklog.services.extractor.
"""

import json
import logging
import os
from pathlib import Path
from typing import Optional, Protocol
from urllib.parse import urlparse

import requests
from lxml import etree

from tracklog.errors import FeedFetchError
from tracklog.models.raw import Feed, FeedFeature


logger = logging.getLogger(__name__)


FETCH_TIMEOUT_S = float(os.getenv("TRACKLOG_FETCH_TIMEOUT", "20"))
KML_EXPORT_SUFFIX = "/google_earth"
FEED_SUFFIXES = (".kml", ".json", ".geojson", KML_EXPORT_SUFFIX)
USER_AGENT = "tracklog/0.1 (+G1000 track log converter)"
_LEADING = b"\xef\xbb\xbf \t\r\n"


class FeedAdapter(Protocol):
    """Adapter interface for flight-track documents."""

    name: str

    def can_parse(self, source: str, content: bytes) -> bool:
        ...

    def parse(self, source: str, content: bytes) -> Feed:
        ...


class KmlFeedAdapter:
    """
    Adapter for KML exports.

    Every Placemark becomes one feature, in document order. `gx:Track`
    placemarks carry the timestamped trajectory; `Point` and `LineString`
    placemarks carry coordinates only.
    """

    name = "kml"

    def can_parse(self, source: str, content: bytes) -> bool:
        if _suffix(source) == ".kml" or source.rstrip("/").endswith(KML_EXPORT_SUFFIX):
            return True
        return content.lstrip(_LEADING).startswith(b"<")

    def parse(self, source: str, content: bytes) -> Feed:
        parser = etree.XMLParser(resolve_entities=False, no_network=True, huge_tree=True)
        try:
            root = etree.fromstring(content, parser=parser)
        except etree.XMLSyntaxError as e:
            raise FeedFetchError(f"Malformed KML in {source}: {e}", source=source) from e

        doc_name = _text(root.find(".//{*}Document/{*}name")) or Path(source).stem
        features = [
            self._parse_placemark(placemark, i)
            for i, placemark in enumerate(root.iter("{*}Placemark"))
        ]
        logger.debug(f"Decoded {len(features)} KML placemarks from {source}")
        return Feed(name=doc_name, features=features, source=source)

    def _parse_placemark(self, placemark, index: int) -> FeedFeature:
        name = _text(placemark.find("{*}name")) or f"placemark-{index}"

        track = placemark.find(".//{*}Track")
        if track is not None:
            times = [_text(el) or "" for el in track.iterfind("{*}when")]
            coordinates = [
                _split_numbers((_text(el) or "").split())
                for el in track.iterfind("{*}coord")
            ]
            return FeedFeature(name=name, coordinates=coordinates, times=times)

        coords_el = placemark.find(".//{*}coordinates")
        if coords_el is None:
            return FeedFeature(name=name, coordinates=None, times=None)

        coordinates = [
            _split_numbers(tuple_text.split(","))
            for tuple_text in (_text(coords_el) or "").split()
        ]
        return FeedFeature(name=name, coordinates=coordinates, times=None)


class GeoJsonFeedAdapter:
    """
    Adapter for GeoJSON feature collections.

    Timestamps are read from `properties.coordTimes` (the layout produced by
    KML-to-GeoJSON converters) or `properties.times`.
    """

    name = "geojson"

    def can_parse(self, source: str, content: bytes) -> bool:
        if _suffix(source) in (".json", ".geojson"):
            return True
        return content.lstrip(_LEADING).startswith(b"{")

    def parse(self, source: str, content: bytes) -> Feed:
        try:
            doc = json.loads(content)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise FeedFetchError(f"Malformed GeoJSON in {source}: {e}", source=source) from e
        return feed_from_geojson(doc, source=source)


ADAPTERS: list[FeedAdapter] = [
    KmlFeedAdapter(),
    GeoJsonFeedAdapter(),
]


def feed_from_geojson(doc: dict, source: str = "") -> Feed:
    """Build a Feed from an already-decoded GeoJSON feature collection."""
    if not isinstance(doc, dict) or not isinstance(doc.get("features"), list):
        raise FeedFetchError(f"GeoJSON document in {source or 'request'} has no feature list", source=source)

    features = []
    for i, raw in enumerate(doc["features"]):
        raw = raw if isinstance(raw, dict) else {}
        geometry = raw.get("geometry") or {}
        properties = raw.get("properties") or {}

        coordinates = geometry.get("coordinates")
        if geometry.get("type") == "Point" and coordinates is not None:
            coordinates = [coordinates]
        times = properties.get("coordTimes", properties.get("times"))

        features.append(FeedFeature(
            name=str(properties.get("name") or f"feature-{i}"),
            coordinates=coordinates,
            times=times,
        ))

    name = str((doc.get("properties") or {}).get("name") or Path(source).stem or "feed")
    return Feed(name=name, features=features, source=source)


def export_url(url: str) -> str:
    """Point a flight page URL at its KML export."""
    trimmed = url.rstrip("/")
    if trimmed.lower().endswith(FEED_SUFFIXES):
        return trimmed
    return trimmed + KML_EXPORT_SUFFIX


def fetch_feed_content(url: str, timeout: float = FETCH_TIMEOUT_S) -> bytes:
    """Download a feed document."""
    logger.info(f"Fetching {url}")
    try:
        response = requests.get(url, headers={"User-Agent": USER_AGENT}, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        raise FeedFetchError(f"Could not fetch {url}: {e}", source=url) from e
    return response.content


def read_feed_content(path: Path) -> bytes:
    """Read a feed document from disk."""
    try:
        return path.read_bytes()
    except OSError as e:
        raise FeedFetchError(f"Could not read {path}: {e}", source=str(path)) from e


def parse_feed(source: str, content: bytes) -> Feed:
    """Decode feed content via adapter selection."""
    adapter = _select_adapter(source, content)
    logger.debug(f"Decoding {source} with {adapter.name} adapter")
    return adapter.parse(source, content)


def load_feed(source: str, timeout: float = FETCH_TIMEOUT_S) -> Feed:
    """
    Load and decode a feed from a URL or a local file path.

    Raises:
        FeedFetchError: unreachable URL, unreadable file, or malformed document.
    """
    if is_url(source):
        url = export_url(source)
        return parse_feed(url, fetch_feed_content(url, timeout=timeout))
    return parse_feed(source, read_feed_content(Path(source)))


def _select_adapter(source: str, content: bytes) -> FeedAdapter:
    for adapter in ADAPTERS:
        if adapter.can_parse(source, content):
            return adapter
    raise FeedFetchError(f"No adapter available for feed: {source}", source=source)


def is_url(source: str) -> bool:
    return urlparse(source).scheme in ("http", "https")


def _suffix(source: str) -> str:
    path = urlparse(source).path if is_url(source) else source
    return Path(path).suffix.lower()


def _text(element) -> Optional[str]:
    if element is None or element.text is None:
        return None
    return element.text.strip()


def _split_numbers(parts) -> list:
    values = []
    for part in parts:
        part = part.strip()
        if not part:
            continue
        try:
            values.append(float(part))
        except ValueError:
            # Kept as text; the extractor rejects it
            values.append(part)
    return values
