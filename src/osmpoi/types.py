import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional, Tuple

import geopandas as gpd
from shapely.geometry import box

from osmpoi.config import DEFAULT_CRS, QUERY_TIMEOUT
from osmpoi.constants import GEOMETRY_KINDS


@dataclass(frozen=True)
class BoundingBox:
    """
    Axis-aligned lat/lon rectangle, in Overpass order (south, west, north, east).

    A box crossing the antimeridian keeps west <= east by letting east run past 180,
    e.g. Fiji is BoundingBox(-21.0, 177.0, -12.0, 182.0).
    """
    south: float
    west: float
    north: float
    east: float

    @classmethod
    def from_wsen(cls, bounds):
        """Build from a (west, south, east, north) tuple, the order osmnx and shapely use."""
        west, south, east, north = bounds
        return cls(south=float(south), west=float(west), north=float(north), east=float(east))

    def to_wsen(self):
        return (self.west, self.south, self.east, self.north)

    def is_valid(self):
        if not all(isinstance(v, (int, float)) for v in (self.south, self.west, self.north, self.east)):
            return False
        if not (-90.0 <= self.south <= self.north <= 90.0):
            return False
        if not (-180.0 <= self.west <= 180.0):
            return False
        return self.west <= self.east and self.east - self.west <= 360.0

    def crosses_antimeridian(self):
        return self.east > 180.0

    def split_antimeridian(self):
        """
        Split into boxes that each lie within [-180, 180].

        Returns:
            tuple: One box, or two when the box crosses the antimeridian.
        """
        if not self.crosses_antimeridian():
            return (self,)
        return (
            BoundingBox(self.south, self.west, self.north, 180.0),
            BoundingBox(self.south, -180.0, self.north, self.east - 360.0),
        )

    def to_overpass(self):
        return ",".join(repr(float(v)) for v in (self.south, self.west, self.north, self.east))

    def to_polygon(self):
        return box(self.west, self.south, self.east, self.north)


@dataclass(frozen=True)
class FeatureFilter:
    """
    A (key, value) tag filter, e.g. FeatureFilter("amenity", "hospital").

    value=None matches any element carrying the key. exact=False treats value as a
    regular expression. negate inverts the filter; as in Overpass, a negated filter
    also matches elements that lack the key.
    """
    key: str
    value: Optional[str] = None
    exact: bool = True
    match_case: bool = True
    negate: bool = False

    def matches(self, tags: Mapping[str, str]) -> bool:
        if self.value is None:
            return (self.key in tags) != self.negate

        actual = tags.get(self.key)
        if actual is None:
            return self.negate

        if self.exact:
            if self.match_case:
                hit = actual == self.value
            else:
                hit = actual.lower() == self.value.lower()
        else:
            flags = 0 if self.match_case else re.IGNORECASE
            hit = re.search(self.value, actual, flags) is not None
        return hit != self.negate

    def to_overpass(self) -> str:
        key = _quote(self.key)
        if self.value is None:
            return f"[!{key}]" if self.negate else f"[{key}]"

        if self.exact and self.match_case:
            op = "!=" if self.negate else "="
            return f"[{key}{op}{_quote(self.value)}]"

        # Overpass only supports case-insensitivity on regex filters
        pattern = self.value if not self.exact else "^" + re.escape(self.value) + "$"
        op = "!~" if self.negate else "~"
        suffix = "" if self.match_case else ",i"
        return f"[{key}{op}{_quote(pattern)}{suffix}]"


def _quote(text):
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


@dataclass(frozen=True)
class QueryDescriptor:
    """A bounding box plus AND-combined tag filters, ready to be sent to Overpass."""
    bbox: BoundingBox
    filters: Tuple[FeatureFilter, ...] = ()
    timeout: int = QUERY_TIMEOUT
    maxsize: Optional[int] = None

    def matches(self, tags: Mapping[str, str]) -> bool:
        return all(f.matches(tags) for f in self.filters)

    def to_overpass_ql(self) -> str:
        """
        Serialize to Overpass QL.

        Every element type is queried in every bbox part, then recursed down so ways
        and relations arrive with their member nodes and ways.
        """
        settings = f"[out:json][timeout:{int(self.timeout)}]"
        if self.maxsize is not None:
            settings += f"[maxsize:{int(self.maxsize)}]"

        tag_part = "".join(f.to_overpass() for f in self.filters)
        lines = [settings + ";", "("]
        for part in self.bbox.split_antimeridian():
            for element in ("node", "way", "relation"):
                lines.append(f"  {element}{tag_part}({part.to_overpass()});")
        lines.extend([");", "(._;>;);", "out body;"])
        return "\n".join(lines)


@dataclass(frozen=True)
class Feature:
    """One OSM element. `tags` is a read-only mapping, so features are not hashable."""
    osm_id: str
    geometry: Any
    tags: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "tags", MappingProxyType(dict(self.tags)))


@dataclass(frozen=True)
class ResponseMeta:
    timestamp: Optional[str] = None
    version: Optional[str] = None
    generator: Optional[str] = None


@dataclass(frozen=True)
class GeometryCollection:
    """
    Features returned by one query, split by geometry kind.

    With format "sf" each geometry is a shapely object. With format "topo" each
    geometry is a nested tuple of node ids and `nodes` maps those ids to (lon, lat).
    Kinds with no matching features are empty tuples. `nodes` is a read-only mapping.
    """
    bbox: BoundingBox
    query: str
    meta: ResponseMeta
    format: str = "sf"
    points: Tuple[Feature, ...] = ()
    lines: Tuple[Feature, ...] = ()
    polygons: Tuple[Feature, ...] = ()
    multipolygons: Tuple[Feature, ...] = ()
    nodes: Mapping[int, Tuple[float, float]] = field(default_factory=dict)

    def __post_init__(self):
        for kind in GEOMETRY_KINDS:
            object.__setattr__(self, kind, tuple(getattr(self, kind)))
        object.__setattr__(self, "nodes", MappingProxyType(dict(self.nodes)))

    def __len__(self):
        return sum(len(getattr(self, kind)) for kind in GEOMETRY_KINDS)

    @property
    def is_empty(self):
        return len(self) == 0

    def kinds(self):
        """Names of the geometry kinds holding at least one feature."""
        return tuple(kind for kind in GEOMETRY_KINDS if getattr(self, kind))

    def to_geodataframe(self, kind):
        """
        Convert one geometry kind to a GeoDataFrame.

        Args:
            kind (str): One of 'points', 'lines', 'polygons', 'multipolygons'.

        Returns:
            geopandas.GeoDataFrame: 'osm_id', one column per tag key, and 'geometry' (EPSG:4326).
        """
        if kind not in GEOMETRY_KINDS:
            raise ValueError(f"Unknown geometry kind '{kind}'. Expected one of {GEOMETRY_KINDS}.")
        if self.format != "sf":
            raise ValueError("Only 'sf' collections can be converted to a GeoDataFrame.")

        features = getattr(self, kind)
        if not features:
            return gpd.GeoDataFrame({"osm_id": []}, geometry=[], crs=DEFAULT_CRS)

        reserved = ("osm_id", "geometry")
        records = [
            {"osm_id": f.osm_id, **{k: v for k, v in f.tags.items() if k not in reserved}}
            for f in features
        ]
        return gpd.GeoDataFrame(records, geometry=[f.geometry for f in features], crs=DEFAULT_CRS)
