# gvg_renderer/core.py
"""
Core data model for the GVG shape compiler.

This module provides the foundational components shared by every part of the
compiler. It includes:
- AST command classes consumed from the upstream scene front end
- The DrawOperation value type the compiler emits
- The package error hierarchy
- Replay of draw operations onto a Cairo context, image export and CSV batch
  processing for previewing compiled scenes

The compiler itself lives in `gvg_renderer.compilers`; it only reads the AST
classes defined here and only produces DrawOperation instances.
"""
import json
import logging
import os
from dataclasses import dataclass, field
from typing import Callable, Iterator, List, Optional, Sequence, Tuple

import cairo
import imageio
import numpy as np
import pandas as pd
from tqdm import tqdm

logger = logging.getLogger(__name__)


## --- Core Constants ---
XYLIM = 1.0  # Logical coordinate bounds for previews (-XYLIM to +XYLIM)
CANVAS_WIDTH_HEIGHT = 512  # Preview image dimensions in pixels
DEFAULT_COLOR = 0xFFFFFFFF  # Opaque white, packed as 0xRRGGBBAA

# Primitive topologies understood by the rendering collaborator
LINES = "lines"  # independent segments, vertices consumed in pairs
LINE_LOOP = "line_loop"  # closed polyline through every vertex
TOPOLOGIES = (LINES, LINE_LOOP)


## --- Errors ---
class GvgError(Exception):
    """Base error for the package."""


class InvalidConfiguration(GvgError, ValueError):
    """A compiler knob has a value that makes tessellation undefined."""


class InvalidGeometry(GvgError, ValueError):
    """A shape command carries parameters that cannot be drawn."""


class SceneError(GvgError, ValueError):
    """Scene data could not be turned into AST commands."""


## --- AST Representation ---
class Command:
    """
    Base class for every node of a parsed GVG program.

    Commands are immutable once produced by the front end. The compiler
    dispatches on the concrete subclass.
    """
    __slots__ = ()


@dataclass(frozen=True)
class Line(Command):
    x1: float
    y1: float
    x2: float
    y2: float
    color: int = DEFAULT_COLOR


@dataclass(frozen=True)
class Rect(Command):
    """Axis-aligned rectangle with its origin corner at (x, y)."""
    x: float
    y: float
    width: float
    height: float
    color: int = DEFAULT_COLOR


@dataclass(frozen=True)
class Circle(Command):
    cx: float
    cy: float
    r: float
    color: int = DEFAULT_COLOR


@dataclass(frozen=True)
class Ellipse(Command):
    cx: float
    cy: float
    rx: float
    ry: float
    color: int = DEFAULT_COLOR


@dataclass(frozen=True)
class Polygon(Command):
    """
    Closed outline through an explicit, ordered list of (x, y) vertices.

    Regular polygons (centre, radius, side count, rotation) are built with
    `Polygon.regular`, which computes the vertex list up front.

    Examples:
        Polygon(((0.0, 0.0), (1.0, 0.0), (0.0, 1.0)), 0xFF0000FF) is a red triangle;
        Polygon.regular(0.0, 0.0, 0.5, 6, rotate=30.0) is a hexagon with a vertex at 30 degrees.
    """
    coords: Tuple[Tuple[float, float], ...]
    color: int = DEFAULT_COLOR

    def __post_init__(self):
        object.__setattr__(self, "coords", tuple(tuple(c) for c in self.coords))

    @classmethod
    def regular(cls, cx: float, cy: float, r: float, sides: int,
                rotate: float = 0.0, color: int = DEFAULT_COLOR) -> "Polygon":
        """
        Builds a regular polygon inscribed in the circle of radius r at (cx, cy).

        Args:
            cx, cy: Centre of the circumscribed circle
            r: Circumradius
            sides: Number of vertices (must be positive)
            rotate: Rotation of the first vertex in degrees, counter-clockwise from +X
            color: Packed 0xRRGGBBAA color

        Raises:
            InvalidGeometry: If sides is not a positive integer
        """
        from .geometry import regular_polygon_coords
        return cls(regular_polygon_coords(cx, cy, r, sides, rotate), color)


@dataclass(frozen=True)
class Glow(Command):
    """A scope requesting the glow treatment for every shape inside it."""
    commands: Tuple[Command, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "commands", tuple(self.commands))


@dataclass(frozen=True)
class Program:
    """Root of a parsed GVG program: the top-level command list."""
    commands: Tuple[Command, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "commands", tuple(self.commands))


## --- Compiler Output ---
@dataclass(frozen=True, eq=False)
class DrawOperation:
    """
    One self-contained primitive submission for the rendering collaborator.

    Each operation carries its own stroke width and flat color, so operations
    can be issued one after another without any shared rendering state.

    Attributes:
        width (float): Stroke width, strictly positive
        color (tuple): (r, g, b, a) channels, each an int in [0, 255]
        topology (str): LINES or LINE_LOOP
        vertices (np.ndarray): Read-only float64 array of shape (N, 2)
    """
    width: float
    color: Tuple[int, int, int, int]
    topology: str
    vertices: np.ndarray = field(repr=False)

    def __post_init__(self):
        if not self.width > 0:
            raise ValueError(f"Stroke width must be positive, got {self.width!r}")
        if self.topology not in TOPOLOGIES:
            raise ValueError(f"Unknown topology: {self.topology!r}")
        vertices = np.array(self.vertices, dtype=np.float64).reshape(-1, 2)
        if self.topology == LINES and vertices.shape[0] % 2:
            raise ValueError("LINES operations need an even number of vertices")
        vertices.setflags(write=False)
        object.__setattr__(self, "width", float(self.width))
        object.__setattr__(self, "color", tuple(int(c) for c in self.color))
        object.__setattr__(self, "vertices", vertices)

    def __eq__(self, other):
        if not isinstance(other, DrawOperation):
            return NotImplemented
        return (self.width == other.width and self.color == other.color
                and self.topology == other.topology
                and np.array_equal(self.vertices, other.vertices))

    def segments(self) -> Iterator[Tuple[np.ndarray, np.ndarray]]:
        """Yields the (start, end) point pairs this operation draws."""
        if self.topology == LINES:
            for i in range(0, len(self.vertices), 2):
                yield self.vertices[i], self.vertices[i + 1]
        else:
            count = len(self.vertices)
            for i in range(count):
                yield self.vertices[i], self.vertices[(i + 1) % count]


## --- Cairo Replay ---
PointTransform = Callable[[np.ndarray], np.ndarray]


def draw_operations(ctx: "cairo.Context", operations: Sequence[DrawOperation],
                    transform: Optional[PointTransform] = None, width_scale: float = 1.0):
    """
    Issues draw operations against a Cairo context in order.

    LINES operations stroke each vertex pair as its own segment; LINE_LOOP
    operations stroke one closed path. Width and color are set per operation.

    Args:
        ctx: Target cairo.Context
        operations: Operations as produced by a compiler
        transform: Optional mapping from logical (N, 2) points to device points
        width_scale: Multiplier applied to every stroke width
    """
    for op in operations:
        if len(op.vertices) == 0:
            continue
        points = op.vertices if transform is None else transform(op.vertices)
        r, g, b, a = op.color
        ctx.set_line_width(op.width * width_scale)
        ctx.set_source_rgba(r / 255.0, g / 255.0, b / 255.0, a / 255.0)
        if op.topology == LINE_LOOP:
            ctx.move_to(points[0, 0], points[0, 1])
            for point in points[1:]:
                ctx.line_to(point[0], point[1])
            ctx.close_path()
        else:
            for i in range(0, len(points), 2):
                ctx.move_to(points[i, 0], points[i, 1])
                ctx.line_to(points[i + 1, 0], points[i + 1, 1])
        ctx.stroke()


def render_operations_to_image(
    operations: Sequence[DrawOperation],
    canvas_dim: int = CANVAS_WIDTH_HEIGHT,
    coord_bound: float = XYLIM,
    width_scale: float = 2.0,
    background: Tuple[float, float, float] = (0.0, 0.0, 0.0),
) -> np.ndarray:
    """
    Renders compiled draw operations to a raster image using Cairo graphics.

    Logical coordinates follow the OpenGL convention: both axes span
    [-coord_bound, coord_bound] and y grows upwards.

    Args:
        operations: Draw operations to replay
        canvas_dim: Output image size in pixels (square canvas)
        coord_bound: Logical coordinate bounds
        width_scale: Pixels per unit of stroke width
        background: RGB background color with values in [0, 1]

    Returns:
        numpy array of shape (canvas_dim, canvas_dim, 3) with RGB values [0,1]

    Examples:
        Rendering ShapeCompiler().compile(Program([Line(-0.5, 0, 0.5, 0)])) with the
        defaults returns an array of shape (512, 512, 3).
    """
    scale = canvas_dim / (2 * coord_bound)
    surface = cairo.ImageSurface(cairo.FORMAT_ARGB32, canvas_dim, canvas_dim)
    ctx = cairo.Context(surface)

    # --- Configure Canvas ---
    ctx.set_source_rgb(*background)
    ctx.paint()
    ctx.set_line_cap(cairo.LINE_CAP_ROUND)
    ctx.set_line_join(cairo.LINE_JOIN_ROUND)

    def to_canvas(points: np.ndarray) -> np.ndarray:
        x = (points[:, 0] + coord_bound) * scale
        y = (coord_bound - points[:, 1]) * scale
        return np.stack([x, y], axis=1)

    draw_operations(ctx, operations, transform=to_canvas, width_scale=width_scale)

    # --- Extract Buffer ---
    surface.flush()
    buf = surface.get_data()
    img_array = np.ndarray(shape=(canvas_dim, canvas_dim, 4), dtype=np.uint8, buffer=buf)
    img_array = img_array[:, :, [2, 1, 0]].astype(np.float32) / 255.0  # Reverse BGRA to RGB
    return img_array


def export_image(image_array: np.ndarray, export_path: str):
    """
    Exports a rendered image array to a PNG file, creating the directory if needed.

    Args:
        image_array: RGB image as numpy array with values in [0,1] range
        export_path: File path where the PNG should be saved
    """
    output_dir = os.path.dirname(export_path)
    if output_dir:
        os.makedirs(output_dir, exist_ok=True)
    imageio.imwrite(export_path, (image_array * 255).astype(np.uint8))


## --- CSV Processing Utility ---
def render_from_csv(compiler, name: str, scene_col: str = "scene_json",
                    output_root: str = "output") -> pd.DataFrame:
    """
    Batch compiles JSON scenes from a CSV file and renders them to images.

    Each row's scene is compiled and rasterised; failures are logged and the
    row gets an empty render path, so one bad scene does not stop the batch.

    Args:
        compiler: A compiler instance (must implement compile())
        name: Base name for input CSV file and output directory
        scene_col: Column name containing JSON scene documents
        output_root: Directory holding the input CSV and receiving outputs

    Input:
        - Reads from: {output_root}/{name}.csv

    Output:
        - Images saved to: {output_root}/{name}/images/{row_index}.png
        - Updated CSV saved to: {output_root}/{name}/rendered.csv

    Raises:
        FileNotFoundError: If the input CSV file doesn't exist
        KeyError: If the specified scene column isn't found in the CSV
    """
    from .scene import program_from_dict

    input_csv_path = os.path.join(output_root, f"{name}.csv")
    if not os.path.exists(input_csv_path):
        raise FileNotFoundError(f"Input CSV not found: {input_csv_path}")

    df = pd.read_csv(input_csv_path)
    if scene_col not in df.columns:
        raise KeyError(f"Column '{scene_col}' not found in {input_csv_path}")

    image_output_dir = os.path.join(output_root, name, "images")
    os.makedirs(image_output_dir, exist_ok=True)

    render_filepaths: List[str] = []
    for i, row in tqdm(df.iterrows(), desc="Rendering scenes", unit="scene", leave=False, total=len(df)):
        scene_text = str(row[scene_col])
        output_path = os.path.join(image_output_dir, f"{i}.png")
        try:
            program = program_from_dict(json.loads(scene_text))
            image_array = render_operations_to_image(compiler.compile(program))
            export_image(image_array, output_path)
            render_filepaths.append(output_path)
        except (GvgError, ValueError) as e:
            logger.error("Error processing row %s ('%s...'): %s", i, scene_text[:50], e)
            render_filepaths.append("")

    df["render_filepath"] = render_filepaths
    rendered_csv_path = os.path.join(output_root, name, "rendered.csv")
    df.to_csv(rendered_csv_path, index=False)
    logger.info("Wrote updated CSV with filepaths to: %s", rendered_csv_path)
    return df
