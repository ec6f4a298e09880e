import copy

import matplotlib
matplotlib.use('Agg')  # Non-interactive backend for testing

import pytest

from osmpoi.types import BoundingBox, FeatureFilter, QueryDescriptor


# Lagos Island / mainland area, close to what Nominatim returns for "Lagos"
LAGOS_BBOX = BoundingBox(south=6.3, west=3.1, north=6.7, east=3.6)


def _node(osm_id, lat, lon, **tags):
    element = {"type": "node", "id": osm_id, "lat": lat, "lon": lon}
    if tags:
        element["tags"] = tags
    return element


HOSPITAL_PAYLOAD = {
    "version": 0.6,
    "generator": "Overpass API 0.7.62.1 084b4234",
    "osm3s": {
        "timestamp_osm_base": "2026-10-17T08:00:00Z",
        "copyright": "The data included in this document is from www.openstreetmap.org.",
    },
    "elements": [
        _node(1, 6.45, 3.40, amenity="hospital", name="General Hospital", website="https://gh.example.ng"),
        _node(2, 6.46, 3.41, amenity="hospital"),
        _node(3, 6.50, 3.45, amenity="pharmacy", name="Corner Pharmacy"),
        # way/100 vertices
        _node(10, 6.50, 3.30),
        _node(11, 6.50, 3.31),
        _node(12, 6.51, 3.31),
        _node(13, 6.51, 3.30),
        # relation/300 outer ring
        _node(20, 6.60, 3.50),
        _node(21, 6.60, 3.60),
        _node(22, 6.70, 3.60),
        _node(23, 6.70, 3.50),
        # relation/300 inner ring
        _node(30, 6.63, 3.53),
        _node(31, 6.63, 3.57),
        _node(32, 6.67, 3.57),
        _node(33, 6.67, 3.53),
        {
            "type": "way",
            "id": 100,
            "nodes": [10, 11, 12, 13, 10],
            "tags": {"amenity": "hospital", "building": "hospital", "name": "Lagos Island Hospital"},
        },
        {"type": "way", "id": 200, "nodes": [20, 21, 22]},
        {"type": "way", "id": 201, "nodes": [22, 23, 20]},
        {"type": "way", "id": 202, "nodes": [30, 31, 32, 33, 30]},
        {
            "type": "relation",
            "id": 300,
            "members": [
                {"type": "way", "ref": 200, "role": "outer"},
                {"type": "way", "ref": 201, "role": "outer"},
                {"type": "way", "ref": 202, "role": "inner"},
            ],
            "tags": {"type": "multipolygon", "amenity": "hospital", "name": "Teaching Hospital Campus"},
        },
    ],
}


@pytest.fixture
def lagos_bbox():
    return LAGOS_BBOX


@pytest.fixture
def hospital_descriptor():
    return QueryDescriptor(bbox=LAGOS_BBOX, filters=(FeatureFilter("amenity", "hospital"),))


@pytest.fixture
def hospital_payload():
    return copy.deepcopy(HOSPITAL_PAYLOAD)


@pytest.fixture
def mock_response(mocker):
    """Factory for fake requests.Response objects."""
    def _make(status_code=200, payload=None, text=""):
        resp = mocker.MagicMock()
        resp.status_code = status_code
        resp.text = text
        if payload is None:
            resp.json.side_effect = ValueError("Expecting value: line 1 column 1 (char 0)")
        else:
            resp.json.return_value = payload
        return resp
    return _make


@pytest.fixture
def mock_session(mocker):
    session = mocker.MagicMock()
    session.headers = {}
    return session
