"""Exceptions raised by the terrain generator."""


class TerrainGenerationError(Exception):
    """Base class for fatal generation failures."""


class InvalidDimensionsError(TerrainGenerationError, ValueError):
    """Grid width or height is not a positive integer."""

    def __init__(self, width, height):
        self.width = width
        self.height = height
        super().__init__(
            f"Grid dimensions must be positive integers, got {width}x{height}"
        )
