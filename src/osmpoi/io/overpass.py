"""
Overpass API client and response parser.

Queries are sent as Overpass QL with JSON output. The response is split into
points, lines, polygons and multipolygons, either as shapely geometries ('sf') or
as node-id topology ('topo').
"""

import logging
import time
from numbers import Number

import requests
from bs4 import BeautifulSoup
from shapely.geometry import LineString, MultiLineString, MultiPolygon, Point, Polygon

from osmpoi.config import MAX_RETRIES, OVERPASS_URL, REQUEST_TIMEOUT, RETRY_BACKOFF, USER_AGENT
from osmpoi.constants import AREA_RELATION_TYPES, LINEAR_KEYS, OUTPUT_FORMATS
from osmpoi.exceptions import ParseError, ServiceError, TransportError
from osmpoi.types import Feature, GeometryCollection, ResponseMeta

logger = logging.getLogger(__name__)

_RAW_LOG_LIMIT = 2000


class OverpassClient:
    """
    Blocking Overpass API client.

    Args:
        url (str): Interpreter endpoint.
        timeout (float): Client-side HTTP timeout in seconds.
        user_agent (str): User-Agent header sent with every request.
        max_retries (int): How often to retry after a TransportError. 0 disables retries.
        backoff (float): Seconds to wait per attempt; the n-th retry waits n * backoff.
        session (requests.Session, optional): Session to reuse.
    """

    def __init__(self, url=OVERPASS_URL, timeout=REQUEST_TIMEOUT, user_agent=USER_AGENT,
                 max_retries=MAX_RETRIES, backoff=RETRY_BACKOFF, session=None):
        self.url = url
        self.timeout = timeout
        self.max_retries = max_retries
        self.backoff = backoff
        self.session = session or requests.Session()
        self.session.headers.setdefault("User-Agent", user_agent)

    def fetch(self, descriptor):
        """Send the descriptor's query and return the decoded JSON document."""
        query = descriptor.to_overpass_ql()
        attempt = 0
        while True:
            try:
                return self._post(query)
            except TransportError as e:
                attempt += 1
                if attempt > self.max_retries:
                    raise
                wait = self.backoff * attempt
                logger.warning("Overpass request failed (attempt %d/%d), retrying in %.1fs: %s",
                               attempt, self.max_retries + 1, wait, e)
                time.sleep(wait)

    def execute(self, descriptor, format="sf"):
        """
        Run a query and parse the result.

        Args:
            descriptor (QueryDescriptor): Query to run.
            format (str): 'sf' for shapely geometries, 'topo' for node-id topology.

        Returns:
            GeometryCollection
        """
        _check_format(format)
        payload = self.fetch(descriptor)
        return parse_response(payload, descriptor, format=format)

    def _post(self, query):
        logger.info("Querying Overpass at %s", self.url)
        logger.debug("Overpass query:\n%s", query)
        try:
            resp = self.session.post(self.url, data={"data": query}, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(f"Overpass request to {self.url} failed: {e}") from e

        if resp.status_code == 429 or resp.status_code >= 500:
            raise TransportError(
                f"Overpass unavailable (HTTP {resp.status_code})", status_code=resp.status_code
            )
        if resp.status_code >= 400:
            reason = _service_reason(resp.text)
            raise ServiceError(
                f"Overpass rejected the query (HTTP {resp.status_code}): {reason}",
                reason=reason,
                status_code=resp.status_code,
            )

        try:
            return resp.json()
        except ValueError as e:
            logger.error("Overpass returned a non-JSON body: %s", resp.text[:_RAW_LOG_LIMIT])
            raise ParseError("Overpass response is not valid JSON", raw=resp.text) from e


def execute(descriptor, format="sf", client=None):
    """Run a query with `client`, or with a default OverpassClient."""
    if client is None:
        client = OverpassClient()
    return client.execute(descriptor, format=format)


def _service_reason(text):
    """Pull the 'Error: ...' paragraphs out of an Overpass HTML error page."""
    soup = BeautifulSoup(text or "", "lxml")
    found = []
    for paragraph in soup.find_all("p"):
        label = paragraph.find("strong")
        if label is None or label.get_text(strip=True) != "Error":
            continue
        label.extract()
        message = paragraph.get_text(" ", strip=True).lstrip(":").strip()
        if message:
            found.append(message)
    if found:
        return "; ".join(found)
    return (text or "").strip()[:500]


def _check_format(format):
    if format not in OUTPUT_FORMATS:
        raise ValueError(f"Unknown output format '{format}'. Expected one of {OUTPUT_FORMATS}.")


def parse_response(payload, descriptor, format="sf"):
    """
    Split an Overpass JSON document into a GeometryCollection.

    Elements matching the descriptor's filters become features. Untagged nodes and
    ways pulled in by recursion only supply geometry. Features keep response order.

    Args:
        payload (dict): Decoded Overpass JSON.
        descriptor (QueryDescriptor): The query that produced the payload.
        format (str): 'sf' or 'topo'.

    Returns:
        GeometryCollection

    Raises:
        ServiceError: If the payload carries a runtime error remark.
        ParseError: If the payload does not have the Overpass element structure.
    """
    _check_format(format)

    if not isinstance(payload, dict):
        _fail("Overpass payload is not a JSON object", payload)

    remark = payload.get("remark")
    if isinstance(remark, str) and "error" in remark.lower():
        raise ServiceError(f"Overpass reported: {remark}", reason=remark)

    elements = payload.get("elements")
    if not isinstance(elements, list):
        _fail("Overpass payload has no 'elements' list", payload)

    nodes = {}
    ways = {}
    ordered = []
    seen = set()
    for element in elements:
        etype, eid = _identify(element, payload)
        if (etype, eid) in seen:
            continue
        seen.add((etype, eid))

        if etype == "node":
            lat, lon = element.get("lat"), element.get("lon")
            if not isinstance(lat, Number) or not isinstance(lon, Number):
                _fail(f"node/{eid} has no coordinates", payload)
            nodes[eid] = (float(lon), float(lat))
        elif etype == "way":
            ways[eid] = [ref for ref in (element.get("nodes") or []) if isinstance(ref, int)]
        ordered.append((etype, eid, element))

    coords = _framed(nodes, descriptor.bbox)

    kinds = {"points": [], "lines": [], "polygons": [], "multipolygons": []}
    for etype, eid, element in ordered:
        tags = element.get("tags")
        tags = dict(tags) if isinstance(tags, dict) else {}
        osm_id = f"{etype}/{eid}"

        if etype == "node":
            if tags and descriptor.matches(tags):
                kinds["points"].append(Feature(osm_id, (eid,), tags))
        elif not descriptor.matches(tags):
            continue
        elif etype == "way":
            _classify_way(osm_id, ways[eid], tags, nodes, kinds)
        elif etype == "relation":
            _classify_relation(osm_id, element.get("members") or [], tags, coords, ways, kinds)

    if format == "sf":
        for kind, features in kinds.items():
            kinds[kind] = [Feature(f.osm_id, _to_shapely(kind, f.geometry, coords), f.tags) for f in features]

    osm3s = payload.get("osm3s") if isinstance(payload.get("osm3s"), dict) else {}
    version = payload.get("version")
    meta = ResponseMeta(
        timestamp=osm3s.get("timestamp_osm_base"),
        version=str(version) if version is not None else None,
        generator=payload.get("generator"),
    )

    collection = GeometryCollection(
        bbox=descriptor.bbox,
        query=descriptor.to_overpass_ql(),
        meta=meta,
        format=format,
        points=tuple(kinds["points"]),
        lines=tuple(kinds["lines"]),
        polygons=tuple(kinds["polygons"]),
        multipolygons=tuple(kinds["multipolygons"]),
        nodes=nodes if format == "topo" else {},
    )
    logger.info(
        "Parsed %d points, %d lines, %d polygons, %d multipolygons",
        len(collection.points), len(collection.lines),
        len(collection.polygons), len(collection.multipolygons),
    )
    return collection


def _fail(message, payload):
    logger.error("%s. Raw response: %s", message, repr(payload)[:_RAW_LOG_LIMIT])
    raise ParseError(message, raw=payload)


def _identify(element, payload):
    if not isinstance(element, dict):
        _fail("Overpass element is not an object", payload)
    etype, eid = element.get("type"), element.get("id")
    if etype not in ("node", "way", "relation") or not isinstance(eid, int):
        _fail(f"Overpass element lacks a valid type/id: {element!r}"[:200], payload)
    return etype, eid


def _resolve(refs, nodes, osm_id):
    resolved = tuple(ref for ref in refs if ref in nodes)
    if len(resolved) != len(refs):
        logger.debug("%s: dropped %d unresolved node references", osm_id, len(refs) - len(resolved))
    return resolved


def _is_closed(refs):
    return len(refs) >= 4 and refs[0] == refs[-1]


def _is_area(tags):
    area = tags.get("area")
    if area == "no":
        return False
    if area == "yes":
        return True
    return not any(key in tags for key in LINEAR_KEYS)


def _classify_way(osm_id, refs, tags, nodes, kinds):
    resolved = _resolve(refs, nodes, osm_id)
    if _is_closed(resolved) and _is_area(tags):
        kinds["polygons"].append(Feature(osm_id, (resolved,), tags))
    elif len(resolved) >= 2:
        kinds["lines"].append(Feature(osm_id, resolved, tags))
    else:
        logger.warning("Skipping %s: fewer than two resolvable nodes", osm_id)


def _classify_relation(osm_id, members, tags, nodes, ways, kinds):
    outer, inner, other = [], [], []
    for member in members:
        if not isinstance(member, dict) or member.get("type") != "way":
            continue
        ref = member.get("ref")
        if ref not in ways:
            logger.debug("%s: member way/%s missing from response", osm_id, ref)
            continue
        resolved = _resolve(ways[ref], nodes, f"way/{ref}")
        if len(resolved) < 2:
            continue
        role = member.get("role") or ""
        if role == "inner":
            inner.append(resolved)
        elif role in ("outer", ""):
            outer.append(resolved)
        else:
            other.append(resolved)

    if tags.get("type") in AREA_RELATION_TYPES:
        polygons = _build_polygons(_assemble_rings(outer, osm_id), _assemble_rings(inner, osm_id), nodes, osm_id)
        if polygons:
            kinds["multipolygons"].append(Feature(osm_id, polygons, tags))
        else:
            logger.warning("Skipping %s: no closed outer ring could be assembled", osm_id)
        return

    segments = tuple(outer + inner + other)
    if segments:
        kinds["lines"].append(Feature(osm_id, segments, tags))
    else:
        logger.debug("Skipping %s: relation has no way members", osm_id)


def _assemble_rings(segments, osm_id):
    """Join way segments end to end into closed rings of node ids."""
    rings = []
    pending = [list(s) for s in segments]
    while pending:
        ring = pending.pop(0)
        while ring[0] != ring[-1]:
            for i, seg in enumerate(pending):
                if seg[0] == ring[-1]:
                    ring = ring + seg[1:]
                elif seg[-1] == ring[-1]:
                    ring = ring + seg[-2::-1]
                elif seg[-1] == ring[0]:
                    ring = seg[:-1] + ring
                elif seg[0] == ring[0]:
                    ring = seg[:0:-1] + ring
                else:
                    continue
                del pending[i]
                break
            else:
                break
        if _is_closed(ring):
            rings.append(tuple(ring))
        else:
            logger.debug("%s: dropped unclosed ring of %d nodes", osm_id, len(ring))
    return rings


def _build_polygons(outers, inners, coords, osm_id):
    shells = [Polygon([coords[ref] for ref in ring]) for ring in outers]
    # Smallest shell first, so a lake inside a park is not given to an island inside the lake
    by_area = sorted(range(len(shells)), key=lambda i: shells[i].area)
    holes = [[] for _ in outers]
    for ring in inners:
        hole = Polygon([coords[ref] for ref in ring])
        for i in by_area:
            if shells[i].area > hole.area and shells[i].contains(hole):
                holes[i].append(ring)
                break
        else:
            logger.debug("%s: inner ring outside every outer ring", osm_id)
    return tuple((outer,) + tuple(holes[i]) for i, outer in enumerate(outers))


def _to_shapely(kind, geometry, nodes):
    def coords(refs):
        return [nodes[ref] for ref in refs]

    if kind == "points":
        return Point(nodes[geometry[0]])
    if kind == "polygons":
        return Polygon(coords(geometry[0]), [coords(ring) for ring in geometry[1:]])
    if kind == "multipolygons":
        return MultiPolygon([
            Polygon(coords(rings[0]), [coords(ring) for ring in rings[1:]]) for rings in geometry
        ])
    # lines: a way is a flat tuple of ids, a relation a tuple of tuples
    if geometry and isinstance(geometry[0], tuple):
        return MultiLineString([coords(part) for part in geometry])
    return LineString(coords(geometry))


def _framed(nodes, bbox):
    """
    Node coordinates in the bbox's longitude frame.

    For a box crossing the antimeridian (east > 180), longitudes west of the box are
    shifted by +360 so they fall between bbox.west and bbox.east.
    """
    if not bbox.crosses_antimeridian():
        return nodes
    return {
        ref: (lon + 360.0 if lon < bbox.west else lon, lat)
        for ref, (lon, lat) in nodes.items()
    }
