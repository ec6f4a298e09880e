import re
from collections.abc import Mapping

from osmpoi.config import QUERY_TIMEOUT
from osmpoi.exceptions import InvalidQueryError
from osmpoi.types import BoundingBox, FeatureFilter, QueryDescriptor


def build(bbox, filters=(), vocabulary=None, timeout=QUERY_TIMEOUT, maxsize=None):
    """
    Compose a bounding box and tag filters into a QueryDescriptor.

    Args:
        bbox (BoundingBox or tuple): Region of interest. A plain tuple is read as
            (west, south, east, north), the order osmnx uses.
        filters: FeatureFilter objects, (key, value) pairs, or an osmnx-style tags
            dict such as {'amenity': ['hospital', 'clinic'], 'building': True}.
        vocabulary (FeatureVocabulary, optional): When given, every filter key must
            be one of vocabulary.keys().
        timeout (int): Server-side query timeout in seconds.
        maxsize (int, optional): Server-side memory limit in bytes.

    Returns:
        QueryDescriptor

    Raises:
        InvalidQueryError: If the bbox is malformed, a filter is malformed, or a
            filter key is not in the vocabulary.
    """
    if not isinstance(bbox, BoundingBox):
        try:
            bbox = BoundingBox.from_wsen(bbox)
        except (TypeError, ValueError) as e:
            raise InvalidQueryError(f"Cannot interpret {bbox!r} as a bounding box: {e}") from e

    if not bbox.is_valid():
        raise InvalidQueryError(
            f"Malformed bounding box {bbox}: expected south <= north, west <= east "
            "and coordinates within lat [-90, 90], lon [-180, 180]."
        )

    if timeout is None or timeout <= 0:
        raise InvalidQueryError(f"Query timeout must be positive, got {timeout!r}.")
    if maxsize is not None and maxsize <= 0:
        raise InvalidQueryError(f"Query maxsize must be positive, got {maxsize!r}.")

    normalized = tuple(normalize_filters(filters))

    if vocabulary is not None:
        known = set(vocabulary.keys())
        unknown = [f.key for f in normalized if f.key not in known]
        if unknown:
            raise InvalidQueryError(f"Unknown feature categories: {', '.join(unknown)}")

    return QueryDescriptor(bbox=bbox, filters=normalized, timeout=int(timeout), maxsize=maxsize)


def normalize_filters(filters):
    """
    Yield FeatureFilter objects from any of the accepted filter spellings.

    A list of values for one key becomes a single anchored regex filter, so
    {'amenity': ['hospital', 'clinic']} matches either value.
    """
    if filters is None:
        return

    if isinstance(filters, Mapping):
        items = filters.items()
    else:
        items = filters

    for item in items:
        if isinstance(item, FeatureFilter):
            f = item
        elif isinstance(item, (tuple, list)) and len(item) == 2:
            f = _filter_from_pair(*item)
        else:
            raise InvalidQueryError(f"Cannot interpret {item!r} as a feature filter.")

        if not isinstance(f.key, str) or not f.key.strip():
            raise InvalidQueryError(f"Feature filter key must be a non-empty string, got {f.key!r}.")
        if f.value is not None and not isinstance(f.value, str):
            raise InvalidQueryError(f"Feature filter value must be a string, got {f.value!r}.")
        if not f.exact and f.value is not None:
            try:
                re.compile(f.value)
            except re.error as e:
                raise InvalidQueryError(f"Invalid regular expression {f.value!r}: {e}") from e
        yield f


def _filter_from_pair(key, value):
    if value is True or value is None:
        return FeatureFilter(key)
    if isinstance(value, (list, tuple, set, frozenset)):
        if not value:
            raise InvalidQueryError(f"Empty value list for feature category '{key}'.")
        bad = [v for v in value if not isinstance(v, str)]
        if bad:
            raise InvalidQueryError(f"Values for feature category '{key}' must be strings, got {bad!r}.")
        values = sorted(value) if isinstance(value, (set, frozenset)) else list(value)
        if len(values) == 1:
            return FeatureFilter(key, values[0])
        pattern = "^(" + "|".join(re.escape(v) for v in values) + ")$"
        return FeatureFilter(key, pattern, exact=False)
    return FeatureFilter(key, value)
