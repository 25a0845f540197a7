# gvg_renderer/render.py
import argparse
import logging

from .core import InvalidConfiguration, render_operations_to_image, export_image, render_from_csv
from .compilers.shape import DEFAULT_SEGMENTS, ShapeCompiler
from .scene import load_program


def main(argv=None):
    """Main execution function with command-line parsing."""
    parser = argparse.ArgumentParser(
        description="Compile GVG scenes to draw operations and preview them as PNG images.",
        formatter_class=argparse.RawTextHelpFormatter
    )
    parser.add_argument("--circle-segments", type=int, default=DEFAULT_SEGMENTS, help="Sides used to approximate circles.")
    parser.add_argument("--ellipse-segments", type=int, default=DEFAULT_SEGMENTS, help="Segments used to approximate ellipses.")
    parser.add_argument("--legacy-saturation", action="store_true", help="Brighten glow passes like earlier GVG renderers.")
    parser.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Logging verbosity.")
    subparsers = parser.add_subparsers(dest="command", required=True, help="Available commands")

    # --- Parser for rendering a single scene ---
    parser_single = subparsers.add_parser("single", help="Render a single JSON scene file.")
    parser_single.add_argument("scene", type=str, help="Path to the JSON scene.")
    parser_single.add_argument("output", type=str, help="The path to save the output PNG image.")
    parser_single.add_argument("--size", type=int, default=512, help="Canvas size in pixels.")

    # --- Parser for rendering from a CSV file ---
    parser_csv = subparsers.add_parser("csv", help="Render all scenes from a CSV file.")
    parser_csv.add_argument("name", type=str, help="Base name of the CSV in 'output/' (e.g., 'badges').")
    parser_csv.add_argument("--col", type=str, default="scene_json", help="Column with JSON scenes.")

    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(levelname)s %(name)s: %(message)s")

    try:
        compiler = ShapeCompiler(
            circle_segments=args.circle_segments,
            ellipse_segments=args.ellipse_segments,
            legacy_saturation=args.legacy_saturation,
        )
    except InvalidConfiguration as exc:
        parser.error(str(exc))

    # --- Execute the chosen command ---
    if args.command == "single":
        print(f"Rendering scene '{args.scene}'...")
        operations = compiler.compile(load_program(args.scene))
        image_array = render_operations_to_image(operations, canvas_dim=args.size)
        export_image(image_array, args.output)
        print(f"✅ Wrote {len(operations)} draw operations to: {args.output}")

    elif args.command == "csv":
        print(f"Rendering CSV '{args.name}.csv'...")
        render_from_csv(compiler, args.name, scene_col=args.col)


if __name__ == "__main__":
    main()
