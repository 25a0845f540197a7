"""Tests for replaying draw operations with Cairo and the batch/CLI surfaces."""

from __future__ import annotations

import json
import os

import cairo
import numpy as np
import pandas as pd
import pytest

from gvg_renderer.compilers.shape import ShapeCompiler
from gvg_renderer.core import Line, Program, Rect, render_from_csv, render_operations_to_image
from gvg_renderer.render import main

SCENE = {"commands": [{"type": "line", "x1": -0.5, "y1": 0, "x2": 0.5, "y2": 0, "color": "#FF0000FF"}]}


def test_render_operations_to_image_draws_with_y_up() -> None:
    ops = ShapeCompiler().compile(Program([Line(-0.5, 0.5, 0.5, 0.5, 0xFF0000FF)]))
    image = render_operations_to_image(ops, canvas_dim=64)

    assert image.shape == (64, 64, 3)
    # y = 0.5 maps to a quarter of the way down the canvas
    band = image[14:18, 32]
    assert band[:, 0].max() > 0.9
    assert band[:, 2].max() < 0.1
    assert image[48, 32].max() == 0.0
    assert image[0, 0].max() == 0.0


def test_drawer_draws_in_context_coordinates() -> None:
    surface = cairo.ImageSurface(cairo.FORMAT_ARGB32, 32, 32)
    ctx = cairo.Context(surface)
    drawer = ShapeCompiler().make_drawer([Rect(4, 4, 24, 24, 0xFFFFFFFF)])
    drawer.draw(ctx, width_scale=2.0)
    surface.flush()

    pixels = np.ndarray(shape=(32, 32, 4), dtype=np.uint8, buffer=surface.get_data())
    assert pixels[4, 16, 3] == 255  # top edge
    assert pixels[16, 16, 3] == 0  # interior untouched


def test_render_from_csv_continues_past_bad_rows(tmp_path) -> None:
    unhashable_type = json.dumps({"commands": [{"type": ["line"]}]})
    pd.DataFrame({"scene_json": [json.dumps(SCENE), "{not json", unhashable_type]}).to_csv(
        tmp_path / "batch.csv", index=False
    )

    df = render_from_csv(ShapeCompiler(), "batch", output_root=str(tmp_path))

    first, second, third = df["render_filepath"].tolist()
    assert os.path.exists(first)
    assert second == ""
    assert third == ""
    assert (tmp_path / "batch" / "rendered.csv").exists()


def test_cli_single_writes_png(tmp_path) -> None:
    scene_path = tmp_path / "scene.json"
    scene_path.write_text(json.dumps(SCENE), encoding="utf-8")
    output = tmp_path / "out" / "scene.png"

    main(["--circle-segments", "12", "single", str(scene_path), str(output), "--size", "64"])

    assert output.exists()


def test_cli_rejects_invalid_segment_count(tmp_path, capsys) -> None:
    scene_path = tmp_path / "scene.json"
    scene_path.write_text(json.dumps(SCENE), encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        main(["--circle-segments", "0", "single", str(scene_path), str(tmp_path / "out.png")])

    assert excinfo.value.code == 2
    assert "circle_segments must be a positive integer" in capsys.readouterr().err
    assert not (tmp_path / "out.png").exists()
