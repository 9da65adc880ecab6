"""Heatmap tile generation for slippy maps.

This package selects the weighted points that contribute to a map tile and
hands them to a pluggable rasterizer that draws the heatmap image.
"""

from . import config
from .errors import HeatTilesError, InvalidPointError, RasterizerError, UseAfterDestroyError
from .generator import TileGenerator
from .models import RasterizerOptions, WeightedPoint
from .projection import Projection, WebMercatorProjection
from .rasterizer import Rasterizer, RasterizerFactory

__all__ = [
    "HeatTilesError",
    "InvalidPointError",
    "Projection",
    "Rasterizer",
    "RasterizerError",
    "RasterizerFactory",
    "RasterizerOptions",
    "TileGenerator",
    "UseAfterDestroyError",
    "WebMercatorProjection",
    "WeightedPoint",
]
