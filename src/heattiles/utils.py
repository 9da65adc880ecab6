"""Utility functions for tile generation.

This module provides the Web Mercator transforms and the bounds filtering
used when selecting points for a tile.
"""
import numpy as np
from typing import Tuple
from pyproj import Transformer

from . import config

settings = config.settings


# Web Mercator transformers (lon/lat <-> x/y meters)
_transformer_to_webmerc = Transformer.from_crs(
    "EPSG:4326", "EPSG:3857", always_xy=True
)
_transformer_from_webmerc = Transformer.from_crs(
    "EPSG:3857", "EPSG:4326", always_xy=True
)


def vprint(text):
    """Print text if the ``verbose`` setting is enabled.

    Parameters
    ----------
    text : str
        Text to print.
    """
    if settings.get("verbose", False):
        print(text)


def lonlat_to_webmercator(lons: np.ndarray, lats: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Transform longitude/latitude arrays to Web Mercator coordinates.

    Parameters
    ----------
    lons : numpy.ndarray
        Longitude values in degrees.
    lats : numpy.ndarray
        Latitude values in degrees.

    Returns
    -------
    tuple of numpy.ndarray
        (x, y) coordinates in Web Mercator meters.
    """
    x, y = _transformer_to_webmerc.transform(lons, lats)
    return np.asarray(x, dtype=np.float64), np.asarray(y, dtype=np.float64)


def webmercator_to_lonlat(x: np.ndarray, y: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Transform Web Mercator coordinates back to longitude/latitude.

    Parameters
    ----------
    x : numpy.ndarray
        Easting in Web Mercator meters.
    y : numpy.ndarray
        Northing in Web Mercator meters.

    Returns
    -------
    tuple of numpy.ndarray
        (lon, lat) in degrees.
    """
    lons, lats = _transformer_from_webmerc.transform(x, y)
    return np.asarray(lons, dtype=np.float64), np.asarray(lats, dtype=np.float64)


def points_in_bounds_mask(coords: np.ndarray, bounds, margin: float = 0.0) -> np.ndarray:
    """Return a boolean mask of points inside (inclusive) expanded bounds.

    Parameters
    ----------
    coords : numpy.ndarray
        Array of shape (N, 2) with pixel coordinates.
    bounds : sequence
        ``((x0, y0), (x1, y1))`` rectangle.
    margin : float, optional
        Amount to grow the rectangle by on every side, by default 0.

    Returns
    -------
    numpy.ndarray
        Boolean array of shape (N,).
    """
    (x0, y0), (x1, y1) = bounds
    x = coords[:, 0]
    y = coords[:, 1]
    return (
        (x >= x0 - margin) & (x <= x1 + margin) &
        (y >= y0 - margin) & (y <= y1 + margin)
    )
