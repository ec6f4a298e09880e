import logging

import geopandas as gpd
import osmnx as ox
import requests
from osmnx._errors import InsufficientResponseError, ResponseStatusCodeError
from shapely.affinity import translate

from osmpoi.exceptions import NotFoundError, TransportError
from osmpoi.types import BoundingBox

logger = logging.getLogger(__name__)


def resolve_bbox(place, which_result=None):
    """
    Resolve a place name to its bounding box using the Nominatim geocoder.

    Args:
        place (str): Place name, e.g. "Lagos" or "Enschede, Netherlands".
        which_result (int, optional): 1-based rank of the candidate to use. None takes
            the first candidate whose geometry is a (Multi)Polygon.

    Returns:
        BoundingBox: Bounds of the chosen candidate.

    Raises:
        NotFoundError: If nothing matches, the requested rank does not exist, or the
            chosen candidate is not an area.
        TransportError: If Nominatim cannot be reached or answers with an HTTP error.
    """
    if not isinstance(place, str) or not place.strip():
        raise NotFoundError("Place name must be a non-empty string.")

    try:
        gdf = ox.geocode_to_gdf(place, which_result=which_result)
    except InsufficientResponseError as e:
        raise NotFoundError(f"No region found for '{place}': {e}") from e
    except TypeError as e:
        # osmnx raises TypeError when the chosen candidate is a point or line
        if which_result is None:
            raise NotFoundError(f"No areal candidate found for '{place}': {e}") from e
        raise NotFoundError(f"Candidate {which_result} for '{place}' is not an area: {e}") from e
    except (ResponseStatusCodeError, requests.RequestException) as e:
        raise TransportError(f"Geocoding request for '{place}' failed: {e}") from e

    if gdf is None or gdf.empty:
        raise NotFoundError(f"No region found for '{place}'.")

    bbox = _bounds(gdf.geometry)
    logger.info("Resolved '%s' to %s", place, bbox)
    return bbox


def _bounds(geometry):
    """
    Bounds of a geocoded region, with east past 180 when the region straddles the antimeridian.

    Nominatim returns such regions (Fiji, Chukotka) as a MultiPolygon with parts on both
    sides of the date line, so their plain bounds span nearly the whole globe.
    """
    west, south, east, north = geometry.total_bounds
    if east - west <= 180:
        return BoundingBox.from_wsen((west, south, east, north))

    parts = geometry.explode(index_parts=False)
    shifted = gpd.GeoSeries([translate(part, xoff=360.0) if part.bounds[2] <= 0 else part for part in parts])
    west, south, east, north = shifted.total_bounds
    if east - west > 180:
        # parts are spread around the globe, not just across the date line
        return BoundingBox.from_wsen(geometry.total_bounds)
    logger.debug("Region crosses the antimeridian, bounds shifted to %s..%s", west, east)
    return BoundingBox.from_wsen((west, south, east, north))


class Geocoder:
    """Injectable region resolver with a fixed disambiguation policy."""

    def __init__(self, which_result=None):
        self.which_result = which_result

    def resolve(self, place):
        return resolve_bbox(place, which_result=self.which_result)
