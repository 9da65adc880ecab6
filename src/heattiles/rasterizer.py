"""Protocol definitions for heatmap rasterizers.

A rasterizer turns tile-local weighted points into an encoded image for
one tile. The tile generator owns exactly one rasterizer, built through a
factory so that any implementation can be plugged in.
"""
from typing import Any, Callable, List, Protocol, Tuple

from .models import RasterizerOptions, WeightedPoint


class Rasterizer(Protocol):
    """Interface for components that draw heatmap tiles.

    Implementations read ``options.max_weight`` to normalise weights and
    should raise :class:`heattiles.errors.RasterizerError` on failure.
    """

    def get_brush_radius(self) -> float:
        """Return how far (in pixels) a point's paint reaches, ``>= 0``."""

    def generate_image(self, points: List[WeightedPoint]) -> Any:
        """Return the encoded image for ``points`` (possibly empty)."""

    def destroy(self) -> None:
        """Release any resources held by the rasterizer."""


RasterizerFactory = Callable[[Tuple[int, int], RasterizerOptions], Rasterizer]
