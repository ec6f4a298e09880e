from .geocode import Geocoder, resolve_bbox
from .overpass import OverpassClient, execute, parse_response
from .vocabulary import FeatureVocabulary, StaticVocabulary, TaginfoVocabulary

__all__ = [
    'Geocoder',
    'resolve_bbox',
    'OverpassClient',
    'execute',
    'parse_response',
    'FeatureVocabulary',
    'StaticVocabulary',
    'TaginfoVocabulary',
]
