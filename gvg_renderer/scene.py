# gvg_renderer/scene.py
"""
Builds GVG ASTs from plain data, e.g. a decoded JSON document.

A scene is a mapping with a `commands` list; every command is a mapping with
a `type` key naming the shape and the shape's fields:

    {"commands": [
        {"type": "line", "x1": -0.5, "y1": 0, "x2": 0.5, "y2": 0, "color": "#00FF00FF"},
        {"type": "glow", "commands": [
            {"type": "circle", "cx": 0, "cy": 0, "r": 0.25, "color": 4294902015}
        ]},
        {"type": "polygon", "cx": 0, "cy": 0, "r": 0.8, "sides": 6, "rotate": 30}
    ]}

Polygons are given either as explicit `coords` or in regular form
(`cx`, `cy`, `r`, `sides` and optional `rotate` in degrees).
"""
import json
from typing import Any, Callable, Dict, Mapping

from .color import parse_color
from .core import (
    DEFAULT_COLOR, Circle, Command, Ellipse, Glow, Line, Polygon, Program, Rect, SceneError,
)


def _number(data: Mapping[str, Any], key: str) -> float:
    if key not in data:
        raise SceneError(f"'{data.get('type')}' command is missing '{key}'")
    value = data[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SceneError(f"'{key}' must be a number, got {value!r}")
    return float(value)


def _color(data: Mapping[str, Any]) -> int:
    try:
        return parse_color(data.get("color", DEFAULT_COLOR))
    except ValueError as exc:
        raise SceneError(str(exc)) from exc


def _line(data):
    return Line(*(_number(data, k) for k in ("x1", "y1", "x2", "y2")), color=_color(data))


def _rect(data):
    return Rect(*(_number(data, k) for k in ("x", "y", "width", "height")), color=_color(data))


def _circle(data):
    return Circle(*(_number(data, k) for k in ("cx", "cy", "r")), color=_color(data))


def _ellipse(data):
    return Ellipse(*(_number(data, k) for k in ("cx", "cy", "rx", "ry")), color=_color(data))


def _polygon(data):
    if "coords" in data:
        try:
            coords = tuple((float(x), float(y)) for x, y in data["coords"])
        except (TypeError, ValueError) as exc:
            raise SceneError(f"Polygon coords must be [x, y] pairs: {data['coords']!r}") from exc
        return Polygon(coords, _color(data))
    sides = data.get("sides")
    if isinstance(sides, bool) or not isinstance(sides, int):
        raise SceneError(f"Polygon 'sides' must be an integer, got {sides!r}")
    rotate = _number(data, "rotate") if "rotate" in data else 0.0
    return Polygon.regular(_number(data, "cx"), _number(data, "cy"), _number(data, "r"),
                           sides, rotate=rotate, color=_color(data))


def _glow(data):
    return Glow(_commands(data))


_BUILDERS: Dict[str, Callable[[Mapping[str, Any]], Command]] = {
    "line": _line,
    "rect": _rect,
    "circle": _circle,
    "ellipse": _ellipse,
    "polygon": _polygon,
    "glow": _glow,
}


def _commands(data: Mapping[str, Any]):
    commands = data.get("commands", [])
    if not isinstance(commands, list):
        raise SceneError("'commands' must be a list")
    return tuple(command_from_dict(c) for c in commands)


def command_from_dict(data: Mapping[str, Any]) -> Command:
    """
    Builds one AST command from a mapping with a `type` key.

    Raises:
        SceneError: If the type is unknown or a field is missing or malformed
    """
    if not isinstance(data, Mapping):
        raise SceneError(f"Command must be a mapping, got {data!r}")
    kind = data.get("type")
    if not isinstance(kind, str) or kind not in _BUILDERS:
        raise SceneError(f"Unknown command type: {kind!r}")
    return _BUILDERS[kind](data)


def program_from_dict(data: Mapping[str, Any]) -> Program:
    """Builds a Program from a mapping with a `commands` list."""
    if not isinstance(data, Mapping):
        raise SceneError(f"Scene must be a mapping, got {type(data).__name__}")
    return Program(_commands(data))


def load_program(path: str) -> Program:
    """Reads a JSON scene file into a Program."""
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as exc:
            raise SceneError(f"{path} is not valid JSON: {exc}") from exc
    return program_from_dict(data)
