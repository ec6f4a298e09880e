from osmpoi.config import QUERY_TIMEOUT
from osmpoi.io.geocode import Geocoder
from osmpoi.io.overpass import OverpassClient
from osmpoi.query import build
from osmpoi.viz.render import render


class OSMPOI:
    """
    Point-of-interest workflow: resolve a region, build a query, execute it, render it.

    The instance only holds its collaborators. Every step returns a value that the
    caller passes on to the next step, so results are never stored on the instance.
    """

    def __init__(self, geocoder=None, vocabulary=None, client=None):
        """
        Args:
            geocoder (optional): Object with resolve(place) -> BoundingBox. Defaults to Geocoder().
            vocabulary (FeatureVocabulary, optional): Used to validate filter keys. None disables validation.
            client (optional): Object with execute(descriptor, format). Defaults to OverpassClient().
        """
        self.geocoder = geocoder if geocoder is not None else Geocoder()
        self.vocabulary = vocabulary
        self.client = client if client is not None else OverpassClient()

    def resolve(self, place):
        return self.geocoder.resolve(place)

    def build(self, bbox, filters=(), timeout=QUERY_TIMEOUT, maxsize=None):
        return build(bbox, filters, vocabulary=self.vocabulary, timeout=timeout, maxsize=maxsize)

    def execute(self, descriptor, format="sf"):
        return self.client.execute(descriptor, format=format)

    def find(self, place, filters=(), format="sf"):
        """
        Resolve `place`, query it for `filters` and return the GeometryCollection.

        Args:
            place (str): Place name, e.g. "Lagos".
            filters: Tag filters, e.g. {'amenity': 'hospital'}.
            format (str): 'sf' or 'topo'.
        """
        bbox = self.resolve(place)
        descriptor = self.build(bbox, filters)
        return self.execute(descriptor, format=format)

    def render(self, collection, base_map=None, style=None, **kwargs):
        return render(base_map, collection, style=style, **kwargs)
