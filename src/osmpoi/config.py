# config.py
# Endpoints, timeouts and rendering defaults. Each network setting can be
# overridden through an OSMPOI_* environment variable.

import os

DEFAULT_CRS = "EPSG:4326"

OVERPASS_URL = os.environ.get("OSMPOI_OVERPASS_URL", "https://overpass-api.de/api/interpreter")
TAGINFO_URL = os.environ.get("OSMPOI_TAGINFO_URL", "https://taginfo.openstreetmap.org/api/4")

USER_AGENT = os.environ.get("OSMPOI_USER_AGENT", "osmpoi (+https://pypi.org/project/osmpoi/)")

# Client-side HTTP timeout in seconds. The Overpass server-side [timeout:] is QUERY_TIMEOUT.
REQUEST_TIMEOUT = float(os.environ.get("OSMPOI_REQUEST_TIMEOUT", "180"))
QUERY_TIMEOUT = 25

# Transport failures only; 0 disables retrying.
MAX_RETRIES = int(os.environ.get("OSMPOI_MAX_RETRIES", "0"))
RETRY_BACKOFF = 1.5

DEFAULT_BASEMAP = "CartoDB.Positron"
