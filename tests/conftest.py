"""Shared pytest fixtures for heattiles tests."""

from types import SimpleNamespace

import pytest

from heattiles import RasterizerOptions, TileGenerator


class PixelProjection:
    """Projection whose geographic coordinates already are zoom-0 pixels."""

    def __init__(self):
        self.to_calls = []
        self.from_calls = []

    def to_global_pixels(self, coordinates, zoom):
        self.to_calls.append((tuple(coordinates), zoom))
        scale = 2 ** zoom
        return coordinates[0] * scale, coordinates[1] * scale

    def from_global_pixels(self, pixels, zoom):
        self.from_calls.append((tuple(pixels), zoom))
        scale = 2 ** zoom
        return pixels[0] / scale, pixels[1] / scale


class RecordingRasterizer:
    """Rasterizer stub that remembers the points it was asked to draw."""

    def __init__(self, tile_size, options):
        self.tile_size = tile_size
        self.options = options
        self.calls = []
        self.destroyed = False

    def get_brush_radius(self):
        return self.options.get("radius", 0)

    def generate_image(self, points):
        self.calls.append(list(points))
        coords = tuple(p.coordinates for p in points)
        return f"data:{self.options.max_weight}:{coords}"

    def destroy(self):
        self.destroyed = True


@pytest.fixture
def projection():
    """Provide a pass-through pixel projection."""
    return PixelProjection()


@pytest.fixture
def layer(projection):
    """Provide a layer-like object exposing the projection option."""
    return SimpleNamespace(options={"projection": projection})


@pytest.fixture
def rasterizers():
    """Collect every rasterizer built by the factory fixture."""
    return []


@pytest.fixture
def rasterizer_factory(rasterizers):
    """Provide a factory building RecordingRasterizer instances."""
    def factory(tile_size, options):
        rasterizer = RecordingRasterizer(tile_size, options)
        rasterizers.append(rasterizer)
        return rasterizer
    return factory


@pytest.fixture
def make_generator(layer, rasterizer_factory):
    """Provide a helper building a 256x256 TileGenerator with a given margin."""
    def make(points=None, radius=0):
        options = RasterizerOptions(values={"radius": radius})
        return TileGenerator(layer, points, rasterizer_factory=rasterizer_factory,
                             options=options, tile_size=256)
    return make


@pytest.fixture
def sample_points():
    """Provide weighted points spread over the zoom-0 world tile."""
    return [
        {"coordinates": [10.0, 10.0], "weight": 3},
        {"coordinates": [128.0, 64.0], "weight": 7},
        {"coordinates": [250.0, 200.0], "weight": 2},
    ]
