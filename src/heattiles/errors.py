"""Exception types raised by heattiles."""


class HeatTilesError(Exception):
    """Base class for all heattiles errors."""


class InvalidPointError(HeatTilesError, ValueError):
    """A supplied point could not be converted to global pixel space.

    Parameters
    ----------
    index : int
        Position of the offending point in the input sequence.
    message : str
        Description of the failure.
    """

    def __init__(self, index, message):
        super().__init__(f"Invalid point at index {index}: {message}")
        self.index = index


class UseAfterDestroyError(HeatTilesError, RuntimeError):
    """A TileGenerator method was called after ``destroy()``."""


class RasterizerError(HeatTilesError):
    """Raised by rasterizers when image generation fails."""
