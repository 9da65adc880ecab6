"""Projections between geographic coordinates and global pixel space.

A projection maps geographic coordinates onto the "global pixel" plane of
a slippy map: at zoom ``z`` the whole world spans ``tile_size * 2**z``
pixels, with the origin at the north-west corner.
"""
import math
from typing import Protocol, Sequence, Tuple

from .utils import lonlat_to_webmercator, webmercator_to_lonlat

WEBMERCATOR_RADIUS = 6378137.0
TILE_SIZE = 256

# Half the Web Mercator world width in meters
WEBMERCATOR_HALF_EXTENT = math.pi * WEBMERCATOR_RADIUS

# Latitude at which the Mercator world becomes square, in degrees
WEBMERCATOR_MAX_LATITUDE = 85.0511287798066


class Projection(Protocol):
    """Interface required from a map projection."""

    def to_global_pixels(self, coordinates: Sequence[float], zoom: int) -> Tuple[float, float]:
        """Return global pixel coordinates for geographic ``coordinates``."""

    def from_global_pixels(self, pixels: Sequence[float], zoom: int) -> Tuple[float, float]:
        """Return geographic coordinates for global ``pixels``."""


class WebMercatorProjection:
    """Spherical Web Mercator (EPSG:3857) projection.

    Geographic coordinates are ``(lon, lat)`` in degrees. Latitudes beyond
    ``WEBMERCATOR_MAX_LATITUDE`` fall outside the square world and are
    rejected with ``ValueError``.

    Parameters
    ----------
    tile_size : int or tuple of int, optional
        Tile edge in pixels, by default 256.
    """

    def __init__(self, tile_size=TILE_SIZE):
        if isinstance(tile_size, (tuple, list)):
            self.tile_width, self.tile_height = (float(v) for v in tile_size)
        else:
            self.tile_width = self.tile_height = float(tile_size)

    def _world_size(self, zoom):
        scale = 2.0 ** zoom
        return self.tile_width * scale, self.tile_height * scale

    def to_global_pixels(self, coordinates, zoom):
        lon, lat = float(coordinates[0]), float(coordinates[1])
        if not abs(lat) <= WEBMERCATOR_MAX_LATITUDE:
            raise ValueError(f"latitude {lat} is outside the Web Mercator range")
        x, y = lonlat_to_webmercator(lon, lat)
        if not (math.isfinite(float(x)) and math.isfinite(float(y))):
            raise ValueError(f"({lon}, {lat}) has no finite Web Mercator position")
        width, height = self._world_size(zoom)
        span = 2 * WEBMERCATOR_HALF_EXTENT
        px = (float(x) + WEBMERCATOR_HALF_EXTENT) / span * width
        py = (WEBMERCATOR_HALF_EXTENT - float(y)) / span * height
        return px, py

    def from_global_pixels(self, pixels, zoom):
        px, py = pixels
        width, height = self._world_size(zoom)
        span = 2 * WEBMERCATOR_HALF_EXTENT
        x = float(px) / width * span - WEBMERCATOR_HALF_EXTENT
        y = WEBMERCATOR_HALF_EXTENT - float(py) / height * span
        lon, lat = webmercator_to_lonlat(x, y)
        return float(lon), float(lat)
