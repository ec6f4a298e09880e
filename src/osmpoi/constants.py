# constants.py

GEOMETRY_KINDS = ("points", "lines", "polygons", "multipolygons")
OUTPUT_FORMATS = ("sf", "topo")

# Primary keys from the OSM "Map features" wiki page, with their most common values.
# An empty list means the key takes free-form values.
FEATURE_VOCABULARY = {
    "aerialway": ["cable_car", "chair_lift", "gondola", "station"],
    "aeroway": ["aerodrome", "apron", "gate", "helipad", "runway", "taxiway", "terminal"],
    "amenity": [
        "bank", "bar", "bus_station", "cafe", "childcare", "cinema", "clinic", "college",
        "community_centre", "courthouse", "dentist", "doctors", "drinking_water",
        "fast_food", "fire_station", "fuel", "hospital", "kindergarten", "library",
        "marketplace", "nursing_home", "parking", "pharmacy", "place_of_worship",
        "police", "post_office", "pub", "restaurant", "school", "social_facility",
        "theatre", "toilets", "townhall", "university",
    ],
    "barrier": ["fence", "gate", "hedge", "wall"],
    "boundary": ["administrative", "national_park", "protected_area"],
    "building": ["apartments", "commercial", "house", "industrial", "residential", "retail", "yes"],
    "craft": ["carpenter", "electrician", "plumber", "tailor"],
    "emergency": ["ambulance_station", "defibrillator", "fire_hydrant"],
    "geological": ["outcrop", "palaeontological_site"],
    "healthcare": ["clinic", "dentist", "doctor", "hospital", "laboratory", "pharmacy"],
    "highway": [
        "bus_stop", "footway", "motorway", "primary", "residential", "secondary",
        "service", "tertiary", "track", "trunk", "unclassified",
    ],
    "historic": ["archaeological_site", "castle", "memorial", "monument", "ruins"],
    "landuse": ["commercial", "farmland", "forest", "grass", "industrial", "residential", "retail"],
    "leisure": ["garden", "park", "pitch", "playground", "sports_centre", "stadium", "swimming_pool"],
    "man_made": ["lighthouse", "pier", "tower", "water_tower", "works"],
    "military": ["airfield", "barracks", "base"],
    "natural": ["beach", "coastline", "grassland", "peak", "scrub", "water", "wetland", "wood"],
    "office": ["company", "government", "ngo"],
    "place": ["city", "hamlet", "neighbourhood", "suburb", "town", "village"],
    "power": ["generator", "line", "plant", "substation", "tower"],
    "public_transport": ["platform", "station", "stop_position"],
    "railway": ["halt", "platform", "rail", "station", "subway", "tram"],
    "route": ["bicycle", "bus", "ferry", "hiking", "road", "train"],
    "shop": [
        "bakery", "butcher", "car", "clothes", "convenience", "department_store",
        "electronics", "greengrocer", "hairdresser", "mall", "supermarket",
    ],
    "sport": ["athletics", "basketball", "soccer", "swimming", "tennis"],
    "telecom": ["data_center", "exchange"],
    "tourism": ["attraction", "camp_site", "guest_house", "hostel", "hotel", "museum", "viewpoint"],
    "water": ["lake", "pond", "reservoir", "river"],
    "waterway": ["canal", "dam", "ditch", "drain", "river", "stream"],
    "name": [],
    "website": [],
}

# Closed ways carrying one of these keys are lines unless tagged area=yes.
LINEAR_KEYS = ("highway", "barrier", "railway", "waterway", "power", "route", "aerialway")

AREA_RELATION_TYPES = ("multipolygon", "boundary")

DEFAULT_STYLE_VALUES = {
    "points": {"fill_color": "#e41a1c", "stroke_color": "#7f0000", "opacity": 0.9, "stroke_width": 0.5, "marker_size": 25},
    "lines": {"fill_color": "none", "stroke_color": "#377eb8", "opacity": 0.9, "stroke_width": 1.5, "marker_size": 0},
    "polygons": {"fill_color": "#4daf4a", "stroke_color": "#1b5e20", "opacity": 0.5, "stroke_width": 1.0, "marker_size": 0},
    "multipolygons": {"fill_color": "#984ea3", "stroke_color": "#4a148c", "opacity": 0.5, "stroke_width": 1.0, "marker_size": 0},
}
