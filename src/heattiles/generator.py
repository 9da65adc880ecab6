"""Heatmap tile generator.

This module selects, for a single map tile, the weighted points whose paint
can reach the tile and hands them to a rasterizer. Points are stored once in
global pixel space at zoom 0 and scaled per request, so one point set serves
every zoom level.
"""
import logging
from typing import Iterable, Iterator, List, Mapping, Optional, Tuple

import mercantile
import numpy as np

from . import config
from .errors import InvalidPointError, UseAfterDestroyError
from .models import RasterizerOptions, WeightedPoint
from .utils import points_in_bounds_mask, vprint

logger = logging.getLogger(__name__)

# Zoom level at which points are stored
REFERENCE_ZOOM = 0


def _normalize_tile_size(tile_size) -> Tuple[int, int]:
    if isinstance(tile_size, (tuple, list)):
        width, height = tile_size
        return int(width), int(height)
    return int(tile_size), int(tile_size)


class TileGenerator:
    """Produce heatmap tiles for a weighted point set.

    Parameters
    ----------
    layer : object
        Map layer whose ``options`` mapping provides the ``"projection"``
        used to convert geographic coordinates to global pixels.
    points : iterable, optional
        Initial points, passed to :meth:`set_points`.
    rasterizer_factory : callable
        Called as ``rasterizer_factory(tile_size, options)`` to build the
        rasterizer this generator owns.
    options : RasterizerOptions or mapping, optional
        Rasterizer options. ``max_weight`` is owned by the generator: it is
        reset to 1 here and recomputed by :meth:`set_points`.
    tile_size : int or tuple of int, optional
        Tile size in pixels. If None, uses settings (default 256x256).

    Attributes
    ----------
    tile_size : tuple of int
        ``(width, height)`` of a tile in pixels.
    options : RasterizerOptions
        Options shared with the rasterizer.
    """

    def __init__(self, layer, points: Optional[Iterable] = None, *,
                 rasterizer_factory, options=None, tile_size=None):
        if tile_size is None:
            self.tile_size = config.tile_size()
        else:
            self.tile_size = _normalize_tile_size(tile_size)

        if options is None:
            options = RasterizerOptions()
        elif isinstance(options, Mapping):
            options = RasterizerOptions.from_mapping(options)
        self.options = options

        projection = layer.options.get("projection")
        if projection is None:
            raise ValueError("layer options do not define a projection")

        self._rasterizer = rasterizer_factory(self.tile_size, self.options)
        self._layer = layer
        self._projection = projection
        self._destroyed = False

        self._coords = np.empty((0, 2), dtype=np.float64)
        self._weights = np.empty(0, dtype=np.float64)
        self.options.set("max_weight", 1.0)
        if points is not None:
            self.set_points(points)

    def __len__(self):
        self._check_alive()
        return len(self._weights)

    @property
    def max_weight(self) -> float:
        """float : Largest point weight, never below 1."""
        self._check_alive()
        return self.options.max_weight

    def set_points(self, points: Iterable) -> "TileGenerator":
        """Replace the point set.

        Parameters
        ----------
        points : iterable
            Points in geographic coordinates. Each item may be a
            ``WeightedPoint``, a mapping with ``coordinates`` and ``weight``
            keys, or a GeoJSON Point feature.

        Returns
        -------
        TileGenerator
            ``self``, for chaining.

        Raises
        ------
        InvalidPointError
            If any point cannot be converted. The previous point set is
            kept in that case.
        TypeError
            If ``points`` is not iterable (e.g. None).
        """
        self._check_alive()
        try:
            points = list(points)
        except TypeError as err:
            raise TypeError(f"points must be an iterable of points, "
                            f"got {type(points).__name__}") from err
        coords = np.empty((len(points), 2), dtype=np.float64)
        weights = np.empty(len(points), dtype=np.float64)
        max_weight = 1.0

        for i, value in enumerate(points):
            try:
                point = WeightedPoint.from_any(value)
                pixel = self._projection.to_global_pixels(point.coordinates, REFERENCE_ZOOM)
                coords[i] = pixel
            except Exception as err:
                logger.warning(f"Rejecting point {i}: {err}")
                raise InvalidPointError(i, str(err)) from err
            if not np.all(np.isfinite(coords[i])):
                logger.warning(f"Rejecting point {i}: non-finite pixel coordinates")
                raise InvalidPointError(i, "projection returned non-finite pixel coordinates")
            weights[i] = point.weight
            max_weight = max(max_weight, point.weight)

        self._coords = coords
        self._weights = weights
        self.options.set("max_weight", max_weight)
        logger.debug(f"Stored {len(weights)} points, max weight {max_weight}")
        return self

    def get_points(self) -> List[WeightedPoint]:
        """Return the stored points in geographic coordinates.

        The internal point set is left untouched.
        """
        self._check_alive()
        return [
            WeightedPoint(tuple(self._projection.from_global_pixels((x, y), REFERENCE_ZOOM)), w)
            for (x, y), w in zip(self._coords.tolist(), self._weights.tolist())
        ]

    def tile_bounds(self, tile_number):
        """Return ``((x0, y0), (x1, y1))`` pixel bounds of a tile.

        The bounds are in the pixel space of the tile's own zoom level.
        """
        self._check_alive()
        width, height = self.tile_size
        x, y = int(tile_number[0]), int(tile_number[1])
        return (x * width, y * height), ((x + 1) * width, (y + 1) * height)

    def get_tile_points(self, tile_number, zoom: Optional[int] = None) -> List[WeightedPoint]:
        """Select the points that can paint into a tile.

        Parameters
        ----------
        tile_number : sequence of int or mercantile.Tile
            Tile ``(x, y)`` number.
        zoom : int, optional
            Zoom level. May be omitted when ``tile_number`` is a
            ``mercantile.Tile``.

        Returns
        -------
        list of WeightedPoint
            Points in tile-local pixel coordinates, in storage order.
        """
        self._check_alive()
        zoom = self._resolve_zoom(tile_number, zoom)
        bounds = self.tile_bounds(tile_number)
        tile_margin = self._rasterizer.get_brush_radius()
        zoom_factor = 2.0 ** zoom

        scaled = self._coords * zoom_factor
        mask = points_in_bounds_mask(scaled, bounds, tile_margin)
        local = scaled[mask] - np.asarray(bounds[0], dtype=np.float64)
        weights = self._weights[mask]

        logger.debug(
            f"Tile {zoom}/{tile_number[0]}/{tile_number[1]}: "
            f"{len(weights)} of {len(self._weights)} points"
        )
        return [
            WeightedPoint((x, y), w)
            for (x, y), w in zip(local.tolist(), weights.tolist())
        ]

    def get_tile_url(self, tile_number, zoom: Optional[int] = None):
        """Render a tile.

        Parameters
        ----------
        tile_number : sequence of int or mercantile.Tile
            Tile ``(x, y)`` number.
        zoom : int, optional
            Zoom level. May be omitted when ``tile_number`` is a
            ``mercantile.Tile``.

        Returns
        -------
        object
            Whatever the rasterizer's ``generate_image`` returns, typically
            a data URL or encoded bytes.
        """
        points = self.get_tile_points(tile_number, zoom)
        try:
            return self._rasterizer.generate_image(points)
        except Exception:
            logger.error(f"Rasterizer failed on tile {tile_number} ({len(points)} points)")
            raise

    def get_tiles(self, zoom: int) -> List[mercantile.Tile]:
        """Get all tiles at ``zoom`` that receive at least one point.

        A point counts for a tile when it lies within the tile bounds
        expanded by the rasterizer's brush radius.

        Parameters
        ----------
        zoom : int
            Zoom level for tile calculation.

        Returns
        -------
        list of mercantile.Tile
            Tiles sorted by ``(x, y)``.
        """
        self._check_alive()
        zoom = self._resolve_zoom(None, zoom)
        if len(self._weights) == 0:
            return []

        size = np.asarray(self.tile_size, dtype=np.float64)
        margin = self._rasterizer.get_brush_radius()
        last = 2 ** zoom - 1
        scaled = self._coords * (2.0 ** zoom)

        lo = np.maximum(np.ceil((scaled - margin) / size - 1), 0).astype(np.int64)
        hi = np.minimum(np.floor((scaled + margin) / size), last).astype(np.int64)
        ranges = np.unique(np.hstack([lo, hi]), axis=0)

        tiles = set()
        for x0, y0, x1, y1 in ranges.tolist():
            for x in range(x0, x1 + 1):
                for y in range(y0, y1 + 1):
                    tiles.add((x, y))
        return [mercantile.Tile(x, y, zoom) for x, y in sorted(tiles)]

    def render_tiles(self, zoom_levels: Iterable[int]) -> Iterator[Tuple[mercantile.Tile, object]]:
        """Render every non-empty tile for the given zoom levels.

        Yields
        ------
        tuple
            ``(mercantile.Tile, image)`` pairs.
        """
        for zoom in zoom_levels:
            tiles = self.get_tiles(zoom)
            vprint(f"Rendering {len(tiles)} tiles for zoom level {zoom}")
            for tile in tiles:
                yield tile, self.get_tile_url(tile, zoom)

    def destroy(self):
        """Release the rasterizer and drop references to layer and projection."""
        self._check_alive()
        self._rasterizer.destroy()
        self._rasterizer = None
        self._projection = None
        self._layer = None
        self._coords = None
        self._weights = None
        self._destroyed = True
        logger.debug("Tile generator destroyed")

    def _check_alive(self):
        if self._destroyed:
            raise UseAfterDestroyError("TileGenerator has been destroyed")

    @staticmethod
    def _resolve_zoom(tile_number, zoom):
        if zoom is None:
            zoom = getattr(tile_number, "z", None)
            if zoom is None:
                raise ValueError("zoom is required unless a mercantile.Tile is given")
        zoom = int(zoom)
        if zoom < 0:
            raise ValueError(f"zoom must be >= 0, got {zoom}")
        return zoom

    @staticmethod
    def _is_point_in_bounds(point, bounds, margin=0.0) -> bool:
        """Check whether a point lies within bounds grown by ``margin``.

        Scalar form of :func:`heattiles.utils.points_in_bounds_mask`, which
        the tile filter uses; the two must agree on every point.
        """
        (x0, y0), (x1, y1) = bounds
        return (x0 - margin <= point[0] <= x1 + margin and
                y0 - margin <= point[1] <= y1 + margin)
