# gvg_renderer/compilers/shape.py
"""
Shape compiler turning GVG programs into immediate-mode draw operations.

Every shape command becomes one or more self-contained DrawOperation values
(stroke width, flat color, topology, vertices), emitted in program order.
Glow scopes are flattened into the same linear sequence; lines inside them
are expanded into the three glow passes.

Example:
    >>> compiler = ShapeCompiler(circle_segments=64)
    >>> ops = compiler.compile(Program([Rect(0, 0, 10, 5, 0xFF0000FF)]))
    >>> ops[0].topology, ops[0].color
    ('lines', (255, 0, 0, 255))
"""
import logging
from typing import Iterable, List, Sequence, Union

import numpy as np

from ..color import decompose
from ..core import (
    LINE_LOOP, LINES, Circle, Command, DrawOperation, Ellipse, InvalidConfiguration,
    Line, Polygon, Program, Rect, draw_operations,
)
from ..geometry import ellipse_vertices, line_vertices, polygon_vertices, rect_vertices
from ..glow import GlowEffect
from .base import BaseCompiler

logger = logging.getLogger(__name__)

DEFAULT_SEGMENTS = 40


def _check_segments(name: str, value) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)) or value < 1:
        raise InvalidConfiguration(f"{name} must be a positive integer, got {value!r}")
    return int(value)


class Drawer:
    """
    A compiled program, ready to be issued against a Cairo context.

    Attributes:
        operations (list): DrawOperation values in drawing order
    """
    def __init__(self, operations: Sequence[DrawOperation]):
        self.operations = list(operations)

    def draw(self, ctx, width_scale: float = 1.0):
        """Issues every operation against `ctx` in the context's own coordinates."""
        draw_operations(ctx, self.operations, width_scale=width_scale)

    def __len__(self):
        return len(self.operations)


class ShapeCompiler(BaseCompiler):
    """
    Compiles GVG shape commands into DrawOperation sequences.

    Shapes are tessellated into line segments: rectangles and polygons as
    independent segments, circles as regular polygons with `circle_segments`
    sides, ellipses as a closed loop of `ellipse_segments` segments.

    Configuration is validated on assignment, so a compiler can never hold a
    segment count that leaves tessellation undefined.

    Args:
        circle_segments: Sides of the polygon approximating a circle
        ellipse_segments: Segments of the loop approximating an ellipse
        legacy_saturation: Brighten glow passes the way earlier GVG renderers did

    Raises:
        InvalidConfiguration: If a segment count is not a positive integer
    """
    def __init__(self, circle_segments: int = DEFAULT_SEGMENTS,
                 ellipse_segments: int = DEFAULT_SEGMENTS,
                 legacy_saturation: bool = False):
        self.circle_segments = circle_segments
        self.ellipse_segments = ellipse_segments
        self.glow = GlowEffect(legacy_saturation=legacy_saturation)
        super().__init__()

    @property
    def circle_segments(self) -> int:
        return self._circle_segments

    @circle_segments.setter
    def circle_segments(self, value: int):
        self._circle_segments = _check_segments("circle_segments", value)

    @property
    def ellipse_segments(self) -> int:
        return self._ellipse_segments

    @ellipse_segments.setter
    def ellipse_segments(self, value: int):
        self._ellipse_segments = _check_segments("ellipse_segments", value)

    def _register_shapes(self):
        self.handlers.update({
            Line: self._compile_line,
            Rect: self._compile_rect,
            Polygon: self._compile_polygon,
            Circle: self._compile_circle,
            Ellipse: self._compile_ellipse,
        })

    def compile(self, program: Union[Program, Iterable[Command]]) -> List[DrawOperation]:
        """
        Compiles a program into draw operations.

        Args:
            program: Program root, or an ordered iterable of commands

        Returns:
            List of DrawOperation in program order

        Raises:
            InvalidGeometry: If a polygon has no vertices
        """
        commands = program.commands if isinstance(program, Program) else program
        operations = self._compile_commands(commands, depth=0)
        logger.debug("Compiled %d draw operations", len(operations))
        return operations

    def make_drawer(self, program: Union[Program, Iterable[Command]]) -> Drawer:
        """Compiles `program` and wraps the result in a Drawer."""
        return Drawer(self.compile(program))

    # --- Shape handlers ---
    def _emit(self, command: Command, topology: str, vertices: np.ndarray,
              depth: int) -> List[DrawOperation]:
        rgba = decompose(command.color)
        return [
            DrawOperation(width, color, topology, vertices)
            for width, color in self.glow.passes(command, rgba, depth)
        ]

    def _compile_line(self, cmd: Line, depth: int) -> List[DrawOperation]:
        vertices = line_vertices(cmd.x1, cmd.y1, cmd.x2, cmd.y2)
        return self._emit(cmd, LINES, vertices, depth)

    def _compile_rect(self, cmd: Rect, depth: int) -> List[DrawOperation]:
        vertices = rect_vertices(cmd.x, cmd.y, cmd.width, cmd.height)
        return self._emit(cmd, LINES, vertices, depth)

    def _compile_polygon(self, cmd: Polygon, depth: int) -> List[DrawOperation]:
        return self._emit(cmd, LINES, polygon_vertices(cmd.coords), depth)

    def _compile_circle(self, cmd: Circle, depth: int) -> List[DrawOperation]:
        poly = Polygon.regular(cmd.cx, cmd.cy, cmd.r, self.circle_segments,
                               rotate=0.0, color=cmd.color)
        return self._compile_polygon(poly, depth)

    def _compile_ellipse(self, cmd: Ellipse, depth: int) -> List[DrawOperation]:
        vertices = ellipse_vertices(cmd.cx, cmd.cy, cmd.rx, cmd.ry, self.ellipse_segments)
        return self._emit(cmd, LINE_LOOP, vertices, depth)
