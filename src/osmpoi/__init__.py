import logging
import os
import sys

# A PostGIS install on Windows often sets PROJ_LIB to an incompatible proj.db,
# which breaks the PROJ data bundled with pyproj (used by geopandas/osmnx).
if sys.platform == "win32" and "PROJ_LIB" in os.environ:
    proj_lib = os.environ["PROJ_LIB"]
    if "PostgreSQL" in proj_lib and "proj" in proj_lib.lower():
        del os.environ["PROJ_LIB"]

from .__about__ import __version__
from .core import OSMPOI
from .exceptions import (
    OSMPOIError,
    NotFoundError,
    InvalidQueryError,
    TransportError,
    ServiceError,
    ParseError,
)
from .query import build
from .types import BoundingBox, FeatureFilter, QueryDescriptor, Feature, ResponseMeta, GeometryCollection

logging.getLogger(__name__).addHandler(logging.NullHandler())
