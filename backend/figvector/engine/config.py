"""Conversion configuration — tunables for re-projection and emission."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from figvector.config import Settings

# Leaf fill regions must cover at least 4x the shape's largest side after
# rotation, otherwise a rotated corner shows through the clip.
MIN_COVERAGE_FACTOR = 4.0


@dataclass(frozen=True)
class ConversionConfig:
    """Controls re-projection geometry and output formatting."""

    # Rendered side of every leaf fill region, in multiples of max(width, height)
    coverage_factor: float = 6.0

    # Floor substituted for zero/near-zero scales before dividing
    min_scale: float = 1e-3

    # Target sweep starts at three o'clock, source angular at twelve
    sweep_angle_offset: float = -90.0

    # Diamond is drawn as a radial rotated by this much
    diamond_rotation: float = 45.0

    # None = target sweep accepts any number of stops
    sweep_max_stops: int | None = None

    # Blurred shadows are alpha-reduced by this factor
    shadow_blur_alpha: float = 0.4
    # Concentric copies per blurred shadow (1 = single flat copy)
    shadow_blur_layers: int = 1

    # Stops at or below this alpha count as "transparent" for the color-bleed fix
    transparent_alpha: float = 1 / 255

    # Output precision
    decimal_places: int = 4

    @property
    def effective_coverage(self) -> float:
        return max(self.coverage_factor, MIN_COVERAGE_FACTOR)

    @classmethod
    def from_settings(cls, settings: Settings) -> ConversionConfig:
        return cls(
            coverage_factor=settings.figvector_coverage_factor,
            decimal_places=settings.figvector_decimal_places,
            sweep_max_stops=settings.figvector_sweep_max_stops,
        )
