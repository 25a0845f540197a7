# gvg_renderer/glow.py
"""
Glow effect: expands one shape draw into several width/brightness passes.

Inside a glow scope a line is drawn three times, widest and dimmest first,
so the narrow bright core lands on top. Only lines get the multi-pass
treatment; every other shape is drawn once at normal width whether or not a
glow scope is active. Nesting depth only matters through its sign: nested
glow scopes do not intensify the effect.
"""
from dataclasses import dataclass
from typing import List, Tuple

from .color import RGBA, brighten
from .core import Command, Line


@dataclass(frozen=True)
class GlowPass:
    width: float
    multiplier: float


NORMAL_WIDTH = 1.0
LINE_GLOW_PASSES = (
    GlowPass(3.0, 0.1),
    GlowPass(2.0, 0.6),
    GlowPass(0.5, 1.3),
)
# TODO pick pass widths for closed outlines and add Rect, Circle, Ellipse, Polygon here.
GLOWING_SHAPES = (Line,)


class GlowEffect:
    """
    Decides the stroke passes for a shape given the current glow depth.

    Attributes:
        legacy_saturation (bool): Brighten with the scaled value as saturation

    Examples:
        >>> GlowEffect().passes(Line(0, 0, 1, 1), (255, 0, 0, 255), depth=0)
        [(1.0, (255, 0, 0, 255))]
    """

    def __init__(self, legacy_saturation: bool = False):
        self.legacy_saturation = legacy_saturation

    @staticmethod
    def is_active(depth: int) -> bool:
        return depth > 0

    def passes(self, command: Command, rgba: RGBA, depth: int) -> List[Tuple[float, RGBA]]:
        """Returns (stroke width, color) for every pass, in drawing order."""
        if not (self.is_active(depth) and isinstance(command, GLOWING_SHAPES)):
            return [(NORMAL_WIDTH, tuple(rgba))]
        return [
            (glow_pass.width, brighten(glow_pass.multiplier, *rgba,
                                       saturation_from_value=self.legacy_saturation))
            for glow_pass in LINE_GLOW_PASSES
        ]
