"""
Command-line interface for splinedraw.

Renders JSON scenes (point lists or graphs) to SVG and writes default
configuration files.
"""

import argparse
import sys

from splinedraw.config import load_config, save_default_config
from splinedraw.tracer import LEVELS, configure_tracer, get_tracer


STYLE_CHOICES = ["linear", "catmull_rom", "bspline", "fillet"]


def main(argv=None):
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="splinedraw: render smooth curves from points or vertex/edge graphs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    render_parser = subparsers.add_parser("render", help="Render a scene to SVG")
    render_parser.add_argument(
        "--scene", "-s",
        required=True,
        help="Path to scene JSON (points + closed flag, or graph)",
    )
    render_parser.add_argument(
        "--out", "-o",
        required=True,
        help="Output SVG path",
    )
    render_parser.add_argument(
        "--json",
        default=None,
        help="Also write the rendered polylines to this JSON path",
    )
    render_parser.add_argument(
        "--config", "-c",
        default=None,
        help="Path to YAML configuration file",
    )
    render_parser.add_argument(
        "--style",
        default=None,
        choices=STYLE_CHOICES,
        help="Override the configured curve style kind",
    )
    render_parser.add_argument(
        "--fill",
        action="store_true",
        help="Fill boundary and interior faces",
    )
    tracing = render_parser.add_argument_group("tracing")
    tracing.add_argument("--trace", action="store_true", help="Print nested timing spans to stderr")
    tracing.add_argument("--trace-level", default="INFO", choices=list(LEVELS), help="Most verbose level shown")
    tracing.add_argument("--trace-file", default=None, help="Copy trace lines to this file")
    tracing.add_argument("--trace-json", action="store_true", help="Follow each trace line with a JSON record")

    init_parser = subparsers.add_parser("init-config", help="Write a YAML file with every default setting")
    init_parser.add_argument("--out", "-o", default="splinedraw_config.yaml", help="Where to write the YAML file")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "render":
        return handle_render(args)
    elif args.command == "init-config":
        return handle_init_config(args)

    return 0


def handle_render(args):
    """Handle the render command."""
    config = load_config(args.config)
    configure_tracer(
        enabled=args.trace or config.tracing.enabled,
        level=args.trace_level if args.trace else config.tracing.level,
        file_path=args.trace_file or config.tracing.file_path,
        json_output=args.trace_json or config.tracing.json_output,
    )

    tracer = get_tracer()

    try:
        from splinedraw.export.svg_emit import emit_render_svg
        from splinedraw.io.scene import curves_to_json, load_scene, save_json, save_svg
        from splinedraw.render import RenderResult, render_graph, render_points

        if args.style:
            config.style.kind = args.style
        if args.fill:
            config.export.fill_faces = True

        with tracer.span("cli_render", module="cli"):
            scene = load_scene(args.scene)
            style = None if args.style else scene.style

            if scene.graph is not None:
                result = render_graph(scene.graph, style=style, config=config)
            else:
                curve = render_points(scene.points, closed=scene.closed, style=style, config=config)
                result = RenderResult(curves=[curve])

            save_svg(emit_render_svg(result, config.export), args.out)
            if args.json:
                save_json(curves_to_json(result), args.json)

        print(f"Rendered {len(result.curves)} curves to {args.out}")
        return 0

    except Exception as e:
        tracer.event(f"Render failed: {str(e)}", level="ERROR")
        print(f"\nError: {str(e)}", file=sys.stderr)
        return 1

    finally:
        tracer.config.close()


def handle_init_config(args):
    """Handle the init-config command."""
    save_default_config(args.out)
    print(f"Default configuration saved to: {args.out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
