"""
Interactive (Leaflet) maps of query results.
"""

import geopandas as gpd

from osmpoi.config import DEFAULT_CRS
from osmpoi.constants import GEOMETRY_KINDS
from osmpoi.viz.render import resolve_styles


def render_interactive(collection, style=None, tiles="CartoDB positron", zoom_start=12):
    """
    Create a folium map with one layer per non-empty geometry kind.

    Parameters

    collection : GeometryCollection
        Query result in 'sf' format
    style : MapStyle or dict, optional
        Style for every kind, or per kind
    tiles : str, optional
        folium tile layer name
    zoom_start : int, optional
        Initial zoom level

    Returns

    folium.Map
        Interactive map object (use .save('filename.html') to export)
    """
    try:
        import folium
    except ImportError:
        raise ImportError("folium is required. Install with: pip install osmpoi[interactive]")

    if collection.format != "sf":
        raise ValueError("Only 'sf' collections can be rendered; execute the query with format='sf'.")

    styles = resolve_styles(style)
    bbox_poly = collection.bbox.to_polygon()
    center = [bbox_poly.centroid.y, bbox_poly.centroid.x]
    m = folium.Map(location=center, zoom_start=zoom_start, tiles=tiles)

    folium.GeoJson(
        data=gpd.GeoSeries([bbox_poly], crs=DEFAULT_CRS).__geo_interface__,
        name="Query bounding box",
        style_function=lambda x: {"fillOpacity": 0, "color": "black", "weight": 2, "dashArray": "5, 5"},
    ).add_to(m)

    for kind in GEOMETRY_KINDS:
        gdf = collection.to_geodataframe(kind)
        if gdf.empty:
            continue
        s = styles[kind]
        fields = ["osm_id"] + (["name"] if "name" in gdf.columns else [])
        layer_style = {
            "color": s.stroke_color,
            "weight": s.stroke_width,
            "fillColor": s.fill_color,
            "fillOpacity": s.opacity,
        }
        folium.GeoJson(
            gdf[fields + ["geometry"]],
            name=kind.title(),
            style_function=lambda x, layer_style=layer_style: layer_style,
            marker=folium.CircleMarker(radius=5, fill=True) if kind == "points" else None,
            tooltip=folium.GeoJsonTooltip(fields=fields),
        ).add_to(m)

    folium.LayerControl().add_to(m)
    m.fit_bounds([[collection.bbox.south, collection.bbox.west], [collection.bbox.north, collection.bbox.east]])
    return m
