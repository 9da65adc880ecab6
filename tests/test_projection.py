"""Tests for the heattiles.projection module."""

from types import SimpleNamespace

import pytest

from heattiles import InvalidPointError, TileGenerator, WebMercatorProjection
from heattiles.projection import WEBMERCATOR_MAX_LATITUDE


class TestWebMercatorProjection:
    """Tests for WebMercatorProjection."""

    def test_origin_maps_to_world_centre(self):
        """(0, 0) should land in the middle of the zoom-0 world tile."""
        projection = WebMercatorProjection()

        assert projection.to_global_pixels((0.0, 0.0), 0) == pytest.approx((128.0, 128.0))

    def test_north_west_corner(self):
        """The north-west corner of the Mercator world should be pixel (0, 0)."""
        projection = WebMercatorProjection()

        px, py = projection.to_global_pixels((-180.0, 85.0511287798066), 0)

        assert px == pytest.approx(0.0, abs=1e-6)
        assert py == pytest.approx(0.0, abs=1e-6)

    def test_zoom_doubles_pixels(self):
        """Each zoom level should double global pixel coordinates."""
        projection = WebMercatorProjection()
        coords = (24.94, 60.17)

        px0, py0 = projection.to_global_pixels(coords, 0)
        px2, py2 = projection.to_global_pixels(coords, 2)

        assert px2 == pytest.approx(4 * px0)
        assert py2 == pytest.approx(4 * py0)

    def test_y_grows_southward(self):
        """Northern points should have smaller y pixel values."""
        projection = WebMercatorProjection()

        _, north = projection.to_global_pixels((0.0, 50.0), 0)
        _, south = projection.to_global_pixels((0.0, -50.0), 0)

        assert north < 128 < south

    @pytest.mark.parametrize("coords", [
        (0.0, 0.0),
        (24.94, 60.17),
        (-74.006, 40.7128),
        (151.2093, -33.8688),
    ])
    def test_round_trip(self, coords):
        """from_global_pixels should invert to_global_pixels."""
        projection = WebMercatorProjection()

        pixels = projection.to_global_pixels(coords, 0)

        assert projection.from_global_pixels(pixels, 0) == pytest.approx(coords, abs=1e-7)

    @pytest.mark.parametrize("lat", [89.0, -89.0, 90.0, -90.0, 85.06, float("nan")])
    def test_rejects_latitude_beyond_mercator_limit(self, lat):
        """Latitudes past the square-world limit should raise ValueError."""
        projection = WebMercatorProjection()

        with pytest.raises(ValueError):
            projection.to_global_pixels((0.0, lat), 0)

    def test_limit_latitude_stays_inside_world(self):
        """Latitudes up to the limit should map inside the world square."""
        projection = WebMercatorProjection()

        _, north = projection.to_global_pixels((0.0, WEBMERCATOR_MAX_LATITUDE), 0)
        _, south = projection.to_global_pixels((0.0, -WEBMERCATOR_MAX_LATITUDE), 0)

        assert north == pytest.approx(0.0, abs=1e-6)
        assert south == pytest.approx(256.0, abs=1e-6)

    def test_custom_tile_size(self):
        """A larger tile size should scale the world accordingly."""
        projection = WebMercatorProjection(tile_size=512)

        assert projection.to_global_pixels((0.0, 0.0), 0) == pytest.approx((256.0, 256.0))


class TestGeneratorWithWebMercator:
    """Tests combining TileGenerator with the Web Mercator projection."""

    @pytest.fixture
    def mercator_layer(self):
        return SimpleNamespace(options={"projection": WebMercatorProjection()})

    def test_get_points_round_trip(self, mercator_layer, rasterizer_factory):
        """Geographic points should survive storage in pixel space."""
        points = [
            {"coordinates": [24.94, 60.17], "weight": 2},
            {"coordinates": [-3.70, 40.42], "weight": 5},
        ]
        generator = TileGenerator(mercator_layer, points, rasterizer_factory=rasterizer_factory)

        result = generator.get_points()

        for point, original in zip(result, points):
            assert point.coordinates == pytest.approx(tuple(original["coordinates"]), abs=1e-7)
            assert point.weight == original["weight"]

    @pytest.mark.parametrize("lat", [89.0, 90.0, -90.0])
    def test_polar_latitude_is_invalid_point(self, mercator_layer, rasterizer_factory, lat):
        """Latitudes outside the Mercator domain should reject the whole call."""
        generator = TileGenerator(mercator_layer, [{"coordinates": [10.0, 50.0], "weight": 3}],
                                  rasterizer_factory=rasterizer_factory)

        with pytest.raises(InvalidPointError) as excinfo:
            generator.set_points([
                {"coordinates": [0.0, 10.0], "weight": 8},
                {"coordinates": [0.0, lat], "weight": 1},
            ])

        assert excinfo.value.index == 1
        assert len(generator) == 1
        assert generator.max_weight == 3

    def test_point_lands_in_expected_tile(self, mercator_layer, rasterizer_factory):
        """A point should be selected for the slippy tile mercantile assigns it."""
        import mercantile

        generator = TileGenerator(mercator_layer, [{"coordinates": [24.94, 60.17], "weight": 1}],
                                  rasterizer_factory=rasterizer_factory)
        tile = mercantile.tile(24.94, 60.17, 8)

        assert len(generator.get_tile_points(tile)) == 1
        assert generator.get_tiles(8) == [tile]
