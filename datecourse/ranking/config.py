from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ImageScoringConfig:
    resolution_divisor: float = 500_000
    resolution_cap: float = 6.0

    ratio_target: float = 16 / 9
    unknown_ratio_diff: float = 999.0

    landscape_min: float = 1.4
    landscape_max: float = 2.2
    landscape_bonus: float = 3.0

    close_ratio_diff: float = 0.25
    close_ratio_bonus: float = 3.0
    near_ratio_diff: float = 0.5
    near_ratio_bonus: float = 1.0

    small_width: int = 700
    small_height: int = 450
    small_penalty: float = 4.0
    tiny_width: int = 500
    tiny_height: int = 320
    tiny_penalty: float = 8.0

    https_bonus: float = 0.5


DEFAULT_SCORING_CONFIG = ImageScoringConfig()
