"""
Feature vocabularies: the set of OSM keys (categories) and values a query may use.
"""

import logging
from typing import Iterable, Mapping, Protocol, runtime_checkable

import requests

from osmpoi.config import REQUEST_TIMEOUT, TAGINFO_URL, USER_AGENT
from osmpoi.constants import FEATURE_VOCABULARY
from osmpoi.exceptions import ParseError, ServiceError, TransportError

logger = logging.getLogger(__name__)


@runtime_checkable
class FeatureVocabulary(Protocol):
    def keys(self) -> Iterable[str]:
        ...

    def values(self, key: str) -> Iterable[str]:
        ...


class StaticVocabulary:
    """Vocabulary backed by an in-memory key -> values table."""

    def __init__(self, table: Mapping[str, Iterable[str]] = None):
        if table is None:
            table = FEATURE_VOCABULARY
        self._table = {k: tuple(v) for k, v in table.items()}

    def keys(self):
        return tuple(sorted(self._table))

    def values(self, key):
        if key not in self._table:
            raise KeyError(f"Unknown feature category '{key}'.")
        return self._table[key]


class TaginfoVocabulary:
    """
    Vocabulary read from the taginfo API.

    Keys are those used on at least `min_count` OSM objects. Responses are memoised
    for the lifetime of the instance.
    """

    def __init__(self, url=TAGINFO_URL, min_count=10000, session=None, timeout=REQUEST_TIMEOUT):
        self.url = url.rstrip("/")
        self.min_count = min_count
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.setdefault("User-Agent", USER_AGENT)
        self._keys = None
        self._values = {}

    def keys(self):
        if self._keys is None:
            data = self._get("keys/all", {"sortname": "count_all", "sortorder": "desc", "filter": "in_wiki"})
            self._keys = tuple(
                item["key"] for item in data if item.get("count_all", 0) >= self.min_count
            )
        return self._keys

    def values(self, key):
        if key not in self._values:
            data = self._get("key/values", {"key": key, "sortname": "count_all", "sortorder": "desc"})
            self._values[key] = tuple(
                item["value"] for item in data if item.get("count", 0) >= self.min_count
            )
        return self._values[key]

    def _get(self, path, params):
        url = f"{self.url}/{path}"
        logger.info("Fetching vocabulary from %s", url)
        try:
            resp = self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(f"taginfo request failed: {e}") from e

        if resp.status_code == 429 or resp.status_code >= 500:
            raise TransportError(f"taginfo unavailable (HTTP {resp.status_code})", status_code=resp.status_code)
        if resp.status_code >= 400:
            raise ServiceError(
                f"taginfo rejected the request (HTTP {resp.status_code})",
                reason=resp.text[:500],
                status_code=resp.status_code,
            )

        try:
            data = resp.json()["data"]
        except (ValueError, KeyError, TypeError) as e:
            logger.error("Unexpected taginfo response: %s", resp.text[:2000])
            raise ParseError("taginfo response has no 'data' list", raw=resp.text) from e
        if not isinstance(data, list):
            raise ParseError("taginfo 'data' is not a list", raw=resp.text)
        return data
