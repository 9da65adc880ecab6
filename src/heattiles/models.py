"""Data types shared by the tile generator, projections and rasterizers."""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Tuple

DEFAULT_WEIGHT = 1.0


@dataclass(frozen=True)
class WeightedPoint:
    """A point with an associated weight.

    The same type carries geographic coordinates (what callers pass in and
    get back) and pixel coordinates (what rasterizers receive).
    """

    coordinates: Tuple[float, float]
    weight: float = DEFAULT_WEIGHT

    @classmethod
    def from_any(cls, value) -> "WeightedPoint":
        """Build a point from a supported input representation.

        Parameters
        ----------
        value : WeightedPoint or mapping
            Either a ``WeightedPoint``, a mapping with ``coordinates`` and
            an optional ``weight`` key, or a GeoJSON ``Point`` feature whose
            weight lives in ``properties.weight``.

        Returns
        -------
        WeightedPoint
            Point with float coordinates. A missing weight becomes 1.

        Raises
        ------
        ValueError
            If coordinates are missing or not a numeric pair.
        """
        if isinstance(value, cls):
            coords, weight = value.coordinates, value.weight
        elif isinstance(value, Mapping) and value.get("type") == "Feature":
            geometry = value.get("geometry") or {}
            if geometry.get("type") != "Point":
                raise ValueError(f"unsupported geometry type {geometry.get('type')!r}")
            coords = geometry.get("coordinates")
            weight = (value.get("properties") or {}).get("weight")
        elif isinstance(value, Mapping):
            coords = value.get("coordinates")
            weight = value.get("weight")
        else:
            raise ValueError(f"unsupported point type {type(value).__name__}")

        if coords is None or len(coords) < 2:
            raise ValueError("coordinates must be an (x, y) pair")
        x, y = float(coords[0]), float(coords[1])
        weight = DEFAULT_WEIGHT if weight is None else float(weight)
        return cls((x, y), weight)


@dataclass
class RasterizerOptions:
    """Options shared between a TileGenerator and the rasterizer it owns.

    ``max_weight`` is derived from the point set and maintained by the
    generator; callers cannot supply it. Everything else (``radius``,
    ``blur``, ``opacity`` and so on) is rasterizer specific and kept in
    ``values``.
    """

    max_weight: float = 1.0
    values: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "RasterizerOptions":
        """Build options from a mapping of rasterizer-specific values.

        Raises
        ------
        ValueError
            If the mapping contains ``max_weight``.
        """
        if "max_weight" in mapping:
            raise ValueError("max_weight is derived from the points and cannot be set")
        return cls(values=dict(mapping))

    def get(self, key: str, default: Any = None) -> Any:
        if key == "max_weight":
            return self.max_weight
        return self.values.get(key, default)

    def set(self, key: str, value: Any) -> None:
        if key == "max_weight":
            self.max_weight = float(value)
        else:
            self.values[key] = value
