"""
Static map rendering of query results.
"""

import warnings
from collections.abc import Mapping
from dataclasses import dataclass

import contextily as ctx
import geopandas as gpd
import matplotlib.pyplot as plt

from osmpoi.config import DEFAULT_CRS
from osmpoi.constants import DEFAULT_STYLE_VALUES, GEOMETRY_KINDS


@dataclass(frozen=True)
class MapStyle:
    fill_color: str = "#e41a1c"
    stroke_color: str = "#000000"
    opacity: float = 0.6
    stroke_width: float = 1.0
    marker_size: float = 20


DEFAULT_STYLES = {kind: MapStyle(**values) for kind, values in DEFAULT_STYLE_VALUES.items()}


def resolve_styles(style=None):
    """
    Expand a style argument into one MapStyle per geometry kind.

    Args:
        style (MapStyle or dict, optional): A single style for every kind, or a
            mapping of kind -> MapStyle. Kinds left out use DEFAULT_STYLES.

    Returns:
        dict: kind -> MapStyle
    """
    if style is None:
        return dict(DEFAULT_STYLES)
    if isinstance(style, MapStyle):
        return {kind: style for kind in GEOMETRY_KINDS}
    if isinstance(style, Mapping):
        unknown = set(style) - set(GEOMETRY_KINDS)
        if unknown:
            raise ValueError(f"Unknown geometry kinds in style: {sorted(unknown)}")
        return {kind: style.get(kind, DEFAULT_STYLES[kind]) for kind in GEOMETRY_KINDS}
    raise TypeError(f"style must be a MapStyle or a mapping of MapStyle, got {type(style).__name__}")


def resolve_tile_provider(base_map):
    """Look up a contextily tile provider by name, e.g. 'CartoDB.Positron'."""
    if isinstance(base_map, str):
        return ctx.providers.query_name(base_map)
    return base_map


def render(base_map, collection, style=None, ax=None, figsize=(9, 9), title=None):
    """
    Draw a GeometryCollection over an optional tile base map.

    Parameters

    base_map : str, TileProvider or None
        Tile source passed to contextily, or None for no tiles
    collection : GeometryCollection
        Query result in 'sf' format
    style : MapStyle or dict, optional
        Style for every kind, or per kind (see resolve_styles)
    ax : matplotlib.axes.Axes, optional
        Axes to draw on; a new figure is created when omitted
    figsize : tuple, optional
        Figure size when a new figure is created
    title : str, optional
        Axes title

    Returns

    tuple
        (fig, ax) matplotlib figure and axes objects
    """
    if collection.format != "sf":
        raise ValueError("Only 'sf' collections can be rendered; execute the query with format='sf'.")

    styles = resolve_styles(style)

    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.figure

    if collection.is_empty:
        warnings.warn("Collection has no features; only the bounding box is drawn.")

    outline = gpd.GeoSeries([collection.bbox.to_polygon()], crs=DEFAULT_CRS)
    outline.boundary.plot(ax=ax, linewidth=1, color="black", linestyle="--")

    for kind in GEOMETRY_KINDS:
        gdf = collection.to_geodataframe(kind)
        if gdf.empty:
            continue
        s = styles[kind]
        if kind == "points":
            gdf.plot(ax=ax, color=s.fill_color, edgecolor=s.stroke_color, linewidth=s.stroke_width,
                     markersize=s.marker_size, alpha=s.opacity, label=kind)
        elif kind == "lines":
            gdf.plot(ax=ax, color=s.stroke_color, linewidth=s.stroke_width, alpha=s.opacity, label=kind)
        else:
            gdf.plot(ax=ax, facecolor=s.fill_color, edgecolor=s.stroke_color, linewidth=s.stroke_width,
                     alpha=s.opacity, label=kind)

    west, south, east, north = collection.bbox.to_wsen()
    ax.set_xlim(west, east)
    ax.set_ylim(south, north)
    ax.set_axis_off()
    if title:
        ax.set_title(title)

    if base_map is not None:
        ctx.add_basemap(ax, crs=DEFAULT_CRS, source=resolve_tile_provider(base_map))

    return fig, ax
