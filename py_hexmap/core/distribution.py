"""Single-noise tile classification from relative tile frequencies."""

from dataclasses import dataclass
from typing import List

from .tiles import TileType

# Band order, lowest noise first
BAND_ORDER = (
    TileType.DEEP_WATER,
    TileType.SHALLOW_WATER,
    TileType.PLAIN,
    TileType.FOREST,
    TileType.DESERT,
    TileType.MOUNTAIN,
)


@dataclass
class TileDistribution:
    """
    Relative weight of each tile type.

    Weights are normalized into cumulative thresholds over [0, 1); a noise
    value falls into the first band whose threshold exceeds it. All-zero
    weights mean a uniform split.
    """

    deep_water: float = 0.15
    shallow_water: float = 0.15
    plain: float = 0.2
    forest: float = 0.2
    desert: float = 0.15
    mountain: float = 0.15

    def __post_init__(self):
        for name, value in self._weights_by_name():
            if value < 0:
                raise ValueError(f"{name} weight cannot be negative")

    def _weights_by_name(self):
        return [
            ("deep_water", self.deep_water),
            ("shallow_water", self.shallow_water),
            ("plain", self.plain),
            ("forest", self.forest),
            ("desert", self.desert),
            ("mountain", self.mountain),
        ]

    def thresholds(self) -> List[float]:
        weights = [value for _, value in self._weights_by_name()]
        total = sum(weights)
        if total <= 0:
            weights = [1.0] * len(weights)
            total = float(len(weights))

        result = []
        cumulative = 0.0
        for weight in weights:
            cumulative += weight / total
            result.append(cumulative)
        result[-1] = 1.0
        return result

    def classify(self, noise_value: float) -> TileType:
        for tile, threshold in zip(BAND_ORDER, self.thresholds()):
            if noise_value < threshold:
                return tile
        return BAND_ORDER[-1]
