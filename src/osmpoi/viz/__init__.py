"""
Visualization of osmpoi query results.
"""

from .render import MapStyle, DEFAULT_STYLES, render, resolve_styles
from .interactive import render_interactive

__all__ = [
    'MapStyle',
    'DEFAULT_STYLES',
    'render',
    'resolve_styles',
    'render_interactive',
]
