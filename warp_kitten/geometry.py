import math
from dataclasses import dataclass
from typing import Tuple


def clamp(v: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, v))


def distance(ax: float, ay: float, bx: float, by: float) -> float:
    return math.hypot(ax - bx, ay - by)


def normalize(vx: float, vy: float) -> Tuple[float, float]:
    """Unit vector along (vx, vy); the zero vector stays zero."""
    length = math.hypot(vx, vy)
    if length == 0:
        return 0.0, 0.0
    return vx / length, vy / length


@dataclass
class Viewport:
    """Current window size; the kitten lives in percent, treats in pixels."""
    width: float
    height: float

    def resize(self, width: float, height: float):
        self.width = width
        self.height = height

    def to_pixels(self, x_pct: float, y_pct: float) -> Tuple[float, float]:
        return x_pct / 100.0 * self.width, y_pct / 100.0 * self.height

    def to_percent(self, x_px: float, y_px: float) -> Tuple[float, float]:
        # Zero-sized axis (minimised window) maps everything to the origin
        x_pct = x_px / self.width * 100.0 if self.width > 0 else 0.0
        y_pct = y_px / self.height * 100.0 if self.height > 0 else 0.0
        return x_pct, y_pct
