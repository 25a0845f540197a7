"""Tests for the shape compiler's dispatch, output ordering and configuration."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np
import pytest

from gvg_renderer.color import brighten
from gvg_renderer.compilers.shape import Drawer, ShapeCompiler
from gvg_renderer.core import (
    LINE_LOOP,
    LINES,
    Circle,
    Command,
    DrawOperation,
    Ellipse,
    Glow,
    InvalidConfiguration,
    InvalidGeometry,
    Line,
    Polygon,
    Program,
    Rect,
)


@dataclass(frozen=True)
class Triangle(Command):
    size: float


def test_rect_compiles_to_one_closed_segment_list() -> None:
    ops = ShapeCompiler().compile(Program([Rect(0, 0, 10, 5, 0xFF0000FF)]))

    assert len(ops) == 1
    op = ops[0]
    assert op.width == 1.0
    assert op.color == (255, 0, 0, 255)
    assert op.topology == LINES
    np.testing.assert_array_equal(
        op.vertices,
        [[0, 0], [10, 0], [10, 0], [10, 5], [10, 5], [0, 5], [0, 5], [0, 0]],
    )


@pytest.mark.parametrize("segments", [3, 12, 40])
def test_circle_compiles_to_regular_polygon(segments) -> None:
    compiler = ShapeCompiler(circle_segments=segments)
    (op,) = compiler.compile([Circle(1.0, -2.0, 0.75, 0x00FF00FF)])

    assert op.topology == LINES
    assert op.vertices.shape == (2 * segments, 2)
    corners = op.vertices[0::2]
    assert len(np.unique(corners, axis=0)) == segments
    distances = np.hypot(corners[:, 0] - 1.0, corners[:, 1] + 2.0)
    np.testing.assert_allclose(distances, 0.75, rtol=0.0, atol=1e-12)
    # each segment ends where the next one starts
    np.testing.assert_array_equal(op.vertices[1::2], np.roll(corners, -1, axis=0))


def test_ellipse_compiles_to_line_loop() -> None:
    compiler = ShapeCompiler(ellipse_segments=24)
    (op,) = compiler.compile([Ellipse(0, 0, 2, 1, 0x0000FFFF)])

    assert op.topology == LINE_LOOP
    assert op.vertices.shape == (25, 2)
    assert op.color == (0, 0, 255, 255)
    np.testing.assert_allclose(op.vertices[-1], op.vertices[0], rtol=0.0, atol=1e-9)


def test_line_compiles_to_single_segment() -> None:
    (op,) = ShapeCompiler().compile([Line(-1, -1, 1, 1, 0x80808080)])
    assert op == DrawOperation(1.0, (128, 128, 128, 128), LINES, [(-1, -1), (1, 1)])


def test_glow_line_yields_three_passes() -> None:
    ops = ShapeCompiler().compile([Glow([Line(0, 0, 1, 0, 0xFF0000FF)])])

    assert [op.width for op in ops] == [3.0, 2.0, 0.5]
    for op in ops:
        assert op.topology == LINES
        np.testing.assert_array_equal(op.vertices, [[0, 0], [1, 0]])
    assert [op.color for op in ops] == [
        brighten(0.1, 255, 0, 0, 255),
        brighten(0.6, 255, 0, 0, 255),
        (255, 0, 0, 255),
    ]


@pytest.mark.parametrize(
    "shape",
    [
        Rect(0, 0, 1, 1, 0x11223344),
        Circle(0, 0, 1, 0x11223344),
        Ellipse(0, 0, 1, 2, 0x11223344),
        Polygon(((0, 0), (1, 0), (0, 1)), 0x11223344),
    ],
)
def test_glow_passes_non_line_shapes_through(shape) -> None:
    compiler = ShapeCompiler()
    assert compiler.compile([Glow([shape])]) == compiler.compile([shape])


def test_glow_scope_flattens_in_program_order() -> None:
    program = Program([
        Line(0, 0, 1, 0),
        Glow([Rect(0, 0, 1, 1), Glow([Line(0, 0, 0, 1)])]),
        Line(0, 0, -1, 0),
    ])
    ops = ShapeCompiler().compile(program)

    assert [op.width for op in ops] == [1.0, 1.0, 3.0, 2.0, 0.5, 1.0]
    np.testing.assert_array_equal(ops[-1].vertices, [[0, 0], [-1, 0]])


def test_glow_scope_is_balanced_across_compiles() -> None:
    """After a glow scope closes, later and repeated compiles draw normally."""
    compiler = ShapeCompiler()
    nested = Program([Glow([Glow([Line(0, 0, 1, 1)])])])
    first = compiler.compile(nested)
    assert len(first) == 3
    assert compiler.compile(nested) == first
    assert [op.width for op in compiler.compile([Line(0, 0, 1, 1)])] == [1.0]


def test_nested_glow_does_not_compound() -> None:
    compiler = ShapeCompiler()
    line = Line(0, 0, 1, 1, 0x33CCFFFF)
    assert compiler.compile([Glow([Glow([line])])]) == compiler.compile([Glow([line])])


def test_unknown_entries_are_skipped_with_warning(caplog) -> None:
    compiler = ShapeCompiler()
    with caplog.at_level(logging.WARNING):
        ops = compiler.compile([Line(0, 0, 1, 1), "bogus", Triangle(1.0), Rect(0, 0, 1, 1)])

    assert len(ops) == 2
    messages = [r.getMessage() for r in caplog.records]
    assert any("bogus" in m for m in messages)
    assert any("Triangle" in m for m in messages)


def test_polygon_without_vertices_is_invalid() -> None:
    with pytest.raises(InvalidGeometry):
        ShapeCompiler().compile([Polygon(())])


def test_single_vertex_polygon_is_degenerate_segment() -> None:
    (op,) = ShapeCompiler().compile([Polygon(((0.5, 0.5),))])
    np.testing.assert_array_equal(op.vertices, [[0.5, 0.5], [0.5, 0.5]])


@pytest.mark.parametrize("bad", [0, -1, 2.5, 40.0, True, "40", None])
def test_invalid_segment_counts_fail_fast(bad) -> None:
    with pytest.raises(InvalidConfiguration):
        ShapeCompiler(circle_segments=bad)
    with pytest.raises(InvalidConfiguration):
        ShapeCompiler(ellipse_segments=bad)

    compiler = ShapeCompiler()
    with pytest.raises(ValueError):
        compiler.circle_segments = bad
    assert compiler.circle_segments == 40


def test_defaults_are_forty_segments() -> None:
    compiler = ShapeCompiler()
    assert compiler.circle_segments == 40
    assert compiler.ellipse_segments == 40
    (circle,) = compiler.compile([Circle(0, 0, 1)])
    (ellipse,) = compiler.compile([Ellipse(0, 0, 1, 1)])
    assert len(circle.vertices) == 80
    assert len(ellipse.vertices) == 41


def test_make_drawer_wraps_compiled_operations() -> None:
    program = Program([Line(0, 0, 1, 1), Rect(0, 0, 1, 1)])
    drawer = ShapeCompiler().make_drawer(program)
    assert isinstance(drawer, Drawer)
    assert len(drawer) == 2
    assert drawer.operations == ShapeCompiler().compile(program)


def test_draw_operation_segments_cover_both_topologies() -> None:
    lines = DrawOperation(1.0, (0, 0, 0, 255), LINES, [(0, 0), (1, 0), (1, 0), (1, 1)])
    loop = DrawOperation(1.0, (0, 0, 0, 255), LINE_LOOP, [(0, 0), (1, 0), (1, 1)])

    assert [(tuple(a), tuple(b)) for a, b in lines.segments()] == [((0, 0), (1, 0)), ((1, 0), (1, 1))]
    assert len(list(loop.segments())) == 3
    assert tuple(list(loop.segments())[-1][1]) == (0, 0)


def test_draw_operation_is_read_only_and_validated() -> None:
    op = DrawOperation(2, (1, 2, 3, 4), LINES, [(0, 0), (1, 1)])
    with pytest.raises(ValueError):
        op.vertices[0, 0] = 5.0
    with pytest.raises(ValueError):
        DrawOperation(0.0, (1, 2, 3, 4), LINES, [(0, 0), (1, 1)])
    with pytest.raises(ValueError):
        DrawOperation(1.0, (1, 2, 3, 4), "triangles", [(0, 0), (1, 1)])
    with pytest.raises(ValueError):
        DrawOperation(1.0, (1, 2, 3, 4), LINES, [(0, 0)])
