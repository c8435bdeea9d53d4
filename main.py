"""
Hexagon Geometry Tool

A command-line front end for the ``hexagons`` module. Converts between axial
hex coordinates and world positions, lists vertices, neighbours and rings, and
can draw a preview PNG of the triangle-fan tables via Pillow.

Usage:
    python main.py --to_world 2,-1 --radius 1.5
    python main.py --to_axial 1.1547,0 --debug
    python main.py --preview preview.png --layers 3 --scale 48
    python main.py --import_settings settings.json
    python main.py --export_settings settings.json
"""

import argparse
import json
import os
import re
import sys
from typing import Callable, Dict, List, Optional, Tuple

from PIL import Image, ImageColor, ImageDraw

import hexagons
from hexagons import Vector2, Vector2Int


# ---------------------------------------------------------------------------
# Coordinate parsing
# ---------------------------------------------------------------------------
def parse_pair(text: str, cast: Callable[[str], float]) -> Tuple:
    """Parse an 'a,b' string into a pair of numbers.

    Args:
        text: Comma-separated pair, e.g. '2,-1' or '1.5,0'.
        cast: Conversion applied to each component (int or float).

    Returns:
        An (a, b) tuple.

    Raises:
        ValueError: If the string does not hold exactly two valid numbers.
    """
    parts = [p.strip() for p in text.split(",")]
    if len(parts) != 2:
        raise ValueError(f"Expected two comma-separated values, got '{text}'")
    try:
        return cast(parts[0]), cast(parts[1])
    except ValueError:
        raise ValueError(f"Invalid {cast.__name__} pair: '{text}'")


def format_vector(v) -> str:
    """Format a Vector2 or Vector2Int for display."""
    if isinstance(v, Vector2Int):
        return f"({v.x}, {v.y})"
    return f"({v.x:.6f}, {v.y:.6f})"


# ---------------------------------------------------------------------------
# ColorParser
# ---------------------------------------------------------------------------
class ColorParser:
    """Turns colour strings into RGB tuples for the preview image.

    Accepts 'R,G,B' triples and anything Pillow's ImageColor understands
    (CSS names, #RGB and #RRGGBB codes).
    """

    def parse(self, color_str: str) -> Tuple[int, int, int]:
        """Parse a colour string.

        Args:
            color_str: The colour specification.

        Returns:
            An (R, G, B) tuple with components in [0, 255].

        Raises:
            ValueError: If the string is not a recognised colour.
        """
        s = color_str.strip()
        if "," in s:
            return self._parse_triple(s)
        try:
            rgb = ImageColor.getrgb(s)
        except (ValueError, AttributeError):
            raise ValueError(f"Invalid color specification: '{color_str}'")
        return (rgb[0], rgb[1], rgb[2])

    def _parse_triple(self, s: str) -> Tuple[int, int, int]:
        parts = s.split(",")
        if len(parts) != 3:
            raise ValueError(f"RGB color needs 3 components, got {len(parts)}: '{s}'")
        try:
            r, g, b = (int(p) for p in parts)
        except ValueError:
            raise ValueError(f"RGB components must be integers: '{s}'")
        for v in (r, g, b):
            if not 0 <= v <= 255:
                raise ValueError(f"RGB values must be in [0, 255], got {v}: '{s}'")
        return (r, g, b)


# ---------------------------------------------------------------------------
# PreviewRenderer
# ---------------------------------------------------------------------------
class PreviewRenderer:
    """Draws concentric rings of hexagons from the geometry tables.

    Cell centres come from ``hexagons.to_world`` and each hexagon is filled
    triangle by triangle from ``hexagons.TRIANGLES`` over the output of
    ``hexagons.get_vertices``. World y points up; image y points down.
    """

    _AA_SCALES: Dict[str, int] = {
        "off": 1,
        "low": 2,
        "medium": 4,
        "high": 8,
    }

    def render(
        self,
        width: int,
        height: int,
        radius: float,
        scale: float,
        margin: float,
        line_width: int,
        layers: int,
        color_fill: Tuple[int, int, int],
        color_line: Tuple[int, int, int],
        color_background: Tuple[int, int, int],
        antialias: str,
    ) -> Tuple[Image.Image, int]:
        """Render a preview image.

        Args:
            width: Image width in pixels.
            height: Image height in pixels.
            radius: Hexagon circumradius in world units.
            scale: Pixels per world unit.
            margin: Gap between neighbouring hexagons in pixels.
            line_width: Outline width in pixels (0 = no outline).
            layers: Number of concentric rings, 1 = centre cell only.
            color_fill: Fill colour.
            color_line: Outline colour.
            color_background: Background colour.
            antialias: Supersampling level ('off', 'low', 'medium', 'high').

        Returns:
            A tuple of (image at the requested size, triangles drawn).
        """
        k = self._AA_SCALES.get(antialias, 1)
        sw, sh = width * k, height * k
        px_per_unit = scale * k

        # Circumradius of a drawn cell in supersampled pixels.
        cell_r = radius * px_per_unit - margin * k / 2.0
        s_lw = line_width * k

        img = Image.new("RGB", (sw, sh), color_background)
        draw = ImageDraw.Draw(img)

        origin = Vector2(sw / 2.0, sh / 2.0)
        centres: List[Vector2] = []
        for cell in hexagons.spiral(Vector2Int(0, 0), layers):
            w = hexagons.to_world(cell, radius)
            centres.append(origin + Vector2(w.x, -w.y) * px_per_unit)

        triangle_count = 0
        if s_lw > 0:
            triangle_count += self._fill_cells(draw, centres, cell_r + s_lw / 2.0, color_line)
            inner_r = cell_r - s_lw / 2.0
            if inner_r > 0:
                triangle_count += self._fill_cells(draw, centres, inner_r, color_fill)
        elif cell_r > 0:
            triangle_count += self._fill_cells(draw, centres, cell_r, color_fill)

        if k > 1:
            img = img.resize((width, height), Image.LANCZOS)

        return img, triangle_count

    def _fill_cells(
        self,
        draw: ImageDraw.ImageDraw,
        centres: List[Vector2],
        circumradius: float,
        color: Tuple[int, int, int],
    ) -> int:
        # The unit vertex table has circumradius OUTER_RADIUS, so scale it up.
        size = circumradius / hexagons.OUTER_RADIUS
        count = 0
        vertices = [Vector2()] * hexagons.VERTEX_COUNT
        for centre in centres:
            hexagons.fill_vertices(vertices, centre, size)
            for a, b, c in hexagons.iter_triangles():
                draw.polygon(
                    [tuple(vertices[a]), tuple(vertices[b]), tuple(vertices[c])],
                    fill=color,
                )
                count += 1
        return count


# ---------------------------------------------------------------------------
# SettingsManager
# ---------------------------------------------------------------------------
class SettingsManager:
    """JSON import/export of tool parameters.

    Precedence when importing: argparse defaults < JSON values < flags given
    explicitly on the command line.
    """

    _PERSISTED_KEYS: List[str] = [
        "radius", "layers", "width", "height", "scale", "margin",
        "line_width", "color_fill", "color_line", "color_background",
        "antialias", "preview", "debug",
    ]

    def export_settings(self, params: argparse.Namespace, path: str) -> None:
        """Write the persisted parameters to a JSON file.

        Raises:
            OSError: If the file cannot be written.
        """
        data = {key: getattr(params, key, None) for key in self._PERSISTED_KEYS}
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)

    def import_settings(self, path: str) -> Dict:
        """Load a JSON settings file.

        Raises:
            FileNotFoundError: If the file does not exist.
            json.JSONDecodeError: If the file is not valid JSON.
        """
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)

    def merge_settings(
        self,
        args: argparse.Namespace,
        json_settings: Dict,
        explicit_keys: set,
    ) -> argparse.Namespace:
        """Apply JSON values to ``args`` except where a flag was given explicitly."""
        for key in self._PERSISTED_KEYS:
            if key in json_settings and key not in explicit_keys:
                setattr(args, key, json_settings[key])
        return args


def with_extension(path: str, ext: str) -> str:
    """Append ``ext`` to ``path`` unless it already ends with it (case-insensitive)."""
    if not path.lower().endswith(ext):
        path += ext
    return path


# ---------------------------------------------------------------------------
# Version helper
# ---------------------------------------------------------------------------
def _changelog_version(fallback: str = "0.0.0") -> str:
    """Return the newest ``## [X.Y.Z]`` version in CHANGELOG.md, or *fallback*."""
    changelog = os.path.join(os.path.dirname(os.path.abspath(__file__)), "CHANGELOG.md")
    try:
        with open(changelog, "r", encoding="utf-8") as fh:
            for line in fh:
                m = re.match(r"^##\s+\[(\d+\.\d+\.\d+)\]", line)
                if m:
                    return m.group(1)
    except OSError:
        pass
    return fallback


# ---------------------------------------------------------------------------
# Application
# ---------------------------------------------------------------------------
class Application:
    """Top-level entry point for the Hexagon Geometry Tool.

    Parses arguments, applies imported settings, answers coordinate queries,
    optionally writes a preview PNG, and prints a debug report.
    """

    VERSION:      str = _changelog_version("1.0.0")
    TITLE:        str = "Hexagon Geometry Tool"
    BANNER_WIDTH: int = 60

    def run(self) -> None:
        """Execute the tool. Exits with status 1 on any user error."""
        args, explicit_keys = self._parse_args()

        manager = SettingsManager()
        if args.import_settings:
            path = with_extension(args.import_settings, ".json")
            try:
                args = manager.merge_settings(args, manager.import_settings(path), explicit_keys)
            except FileNotFoundError:
                self._fail(f"Settings file not found: '{path}'")
            except json.JSONDecodeError as e:
                self._fail(f"Malformed JSON in settings file: {e}")

        export_path = None
        if args.export_settings:
            export_path = with_extension(args.export_settings, ".json")
            try:
                manager.export_settings(args, export_path)
            except OSError as e:
                self._fail(f"Cannot write settings file: {e}")

        try:
            results = self._run_queries(args)
        except ValueError as e:
            self._fail(str(e))
        except ZeroDivisionError:
            self._fail("Radius must be non-zero for world-to-axial conversion")
        except OverflowError:
            self._fail("World position is not finite at this radius")

        preview_file = None
        triangle_count = 0
        if args.preview:
            preview_file, triangle_count = self._write_preview(args)

        self._print_banner()
        for line in results:
            print(f"  {line}")
        if preview_file:
            size_str = self._format_file_size(os.path.getsize(preview_file))
            print(f"  Saved: {preview_file} ({size_str})")
        if export_path:
            size_str = self._format_file_size(os.path.getsize(export_path))
            print(f"  Saved: {export_path} ({size_str})")
        if not results and not preview_file and not export_path:
            print("  Nothing to do: pass a query flag or --preview.")

        if args.debug:
            self._print_debug(args, triangle_count)
        print()

    def _run_queries(self, args: argparse.Namespace) -> List[str]:
        """Answer every query flag that was given, in a fixed order.

        Raises:
            ValueError: If a coordinate pair is malformed.
            ZeroDivisionError: If --to_axial is used with a zero radius.
            OverflowError: If --to_axial produces an infinite coordinate.
        """
        radius = args.radius
        lines: List[str] = []

        if args.to_world:
            axial = Vector2Int(*parse_pair(args.to_world, int))
            world = hexagons.to_world(axial, radius)
            lines.append(f"to_world {format_vector(axial)} -> {format_vector(world)}")

        if args.to_axial:
            world = Vector2(*parse_pair(args.to_axial, float))
            axial = hexagons.to_axial(world, radius)
            lines.append(f"to_axial {format_vector(world)} -> {format_vector(axial)}")

        if args.vertices:
            centre = Vector2(*parse_pair(args.vertices, float))
            for i, v in enumerate(hexagons.get_vertices(centre, radius)):
                lines.append(f"vertex[{i}] {format_vector(v)}")

        if args.neighbors:
            axial = Vector2Int(*parse_pair(args.neighbors, int))
            for direction, cell in zip(hexagons.Direction, hexagons.neighbors(axial)):
                lines.append(f"neighbor {direction.name:<2} {format_vector(cell)}")

        if args.ring:
            centre = Vector2Int(*parse_pair(args.ring, int))
            cells = hexagons.ring(centre, max(args.layers - 1, 0))
            lines.append("ring " + " ".join(format_vector(c) for c in cells))

        return lines

    def _write_preview(self, args: argparse.Namespace) -> Tuple[str, int]:
        """Render and save the preview PNG. Returns (path, triangles drawn)."""
        valid_aa = {"off", "low", "medium", "high"}
        if args.antialias not in valid_aa:
            self._fail(f"Invalid antialias level '{args.antialias}'. "
                       f"Must be one of: {', '.join(sorted(valid_aa))}")
        if args.layers < 1:
            self._fail(f"Layers must be >= 1, got {args.layers}")

        parser = ColorParser()
        try:
            color_fill = parser.parse(args.color_fill)
            color_line = parser.parse(args.color_line)
            color_background = parser.parse(args.color_background)
        except ValueError as e:
            self._fail(str(e))

        img, triangle_count = PreviewRenderer().render(
            width=args.width,
            height=args.height,
            radius=args.radius,
            scale=args.scale,
            margin=args.margin,
            line_width=args.line_width,
            layers=args.layers,
            color_fill=color_fill,
            color_line=color_line,
            color_background=color_background,
            antialias=args.antialias,
        )

        out_file = with_extension(args.preview, ".png")
        try:
            img.save(out_file, "PNG")
        except OSError as e:
            self._fail(f"Cannot write preview image: {e}")
        return out_file, triangle_count

    def _fail(self, message: str) -> None:
        print(f"Error: {message}", file=sys.stderr)
        sys.exit(1)

    def _parse_args(self, argv: Optional[List[str]] = None) -> Tuple[argparse.Namespace, set]:
        """Parse arguments and collect the names of flags given explicitly."""
        args = self._build_parser().parse_args(argv)
        explicit = self._build_parser(suppress_defaults=True).parse_args(argv)
        return args, set(vars(explicit).keys())

    def _build_parser(self, suppress_defaults: bool = False) -> argparse.ArgumentParser:
        """Build the ArgumentParser.

        Args:
            suppress_defaults: If True every default is argparse.SUPPRESS, so
                the parsed namespace only holds flags given on the command line.
        """
        def default(value):
            return argparse.SUPPRESS if suppress_defaults else value

        banner = self._banner_text()

        class _BannerParser(argparse.ArgumentParser):
            def print_help(self, file=None):
                if file is None:
                    file = sys.stdout
                file.write(banner + "\n\n")
                super().print_help(file)

        parser = _BannerParser(
            description="Hexagon Geometry Tool: axial/world conversion and hexagon previews.",
        )

        # Queries
        parser.add_argument("--to_world", type=str, default=default(None), metavar="Q,R",
                            help="Convert an axial coordinate to a world position")
        parser.add_argument("--to_axial", type=str, default=default(None), metavar="X,Y",
                            help="Convert a world position to the nearest axial coordinate")
        parser.add_argument("--vertices", type=str, default=default(None), metavar="X,Y",
                            help="List the six vertices of a hexagon centred at X,Y")
        parser.add_argument("--neighbors", type=str, default=default(None), metavar="Q,R",
                            help="List the six neighbours of an axial coordinate")
        parser.add_argument("--ring", type=str, default=default(None), metavar="Q,R",
                            help="List the outermost ring of --layers around Q,R")
        parser.add_argument("--radius", type=float, default=default(1.0),
                            help="Hexagon circumradius in world units (default: 1)")
        parser.add_argument("--layers", type=int, default=default(3),
                            help="Concentric layers for --ring and --preview (default: 3)")

        # Preview
        parser.add_argument("--preview", type=str, default=default(None), metavar="FILE",
                            help="Write a preview PNG of the hexagon tables")
        parser.add_argument("--width", type=int, default=default(512),
                            help="Preview width in pixels (default: 512)")
        parser.add_argument("--height", type=int, default=default(512),
                            help="Preview height in pixels (default: 512)")
        parser.add_argument("--scale", type=float, default=default(48.0),
                            help="Preview pixels per world unit (default: 48)")
        parser.add_argument("--margin", type=float, default=default(4.0),
                            help="Gap between preview hexagons in pixels (default: 4)")
        parser.add_argument("--line_width", type=int, default=default(2),
                            help="Preview outline width in pixels, 0 = none (default: 2)")
        parser.add_argument("--color_fill", type=str, default=default("grey"),
                            help="Preview fill colour (default: grey)")
        parser.add_argument("--color_line", type=str, default=default("black"),
                            help="Preview outline colour (default: black)")
        parser.add_argument("--color_background", type=str, default=default("white"),
                            help="Preview background colour (default: white)")
        parser.add_argument("--antialias", type=str, default=default("medium"),
                            help="Preview anti-alias level: off, low, medium, high (default: medium)")

        # Settings and diagnostics
        parser.add_argument("--debug", nargs="?", const=True, default=default(False),
                            type=self._parse_bool_flag, help="Enable debug output")
        parser.add_argument("--export_settings", type=str, default=None,
                            help="Export parameters to a JSON file")
        parser.add_argument("--import_settings", type=str, default=None,
                            help="Import parameters from a JSON file")

        return parser

    def _parse_bool_flag(self, value: str) -> bool:
        """Interpret 'true'/'false' style flag values."""
        if isinstance(value, bool):
            return value
        if value.lower() in ("true", "1", "yes"):
            return True
        if value.lower() in ("false", "0", "no"):
            return False
        raise argparse.ArgumentTypeError(f"Boolean value expected, got '{value}'")

    def _banner_text(self) -> str:
        inner = self.BANNER_WIDTH - 2
        lines = [
            "┌" + "─" * inner + "┐",
            f"│{'  Program:    ' + self.TITLE:<{inner}}│",
            f"│{'  Version:    ' + self.VERSION:<{inner}}│",
            "└" + "─" * inner + "┘",
        ]
        return "\n".join(lines)

    def _print_banner(self) -> None:
        print(self._banner_text())

    def _print_debug(self, args: argparse.Namespace, triangle_count: int) -> None:
        """Print resolved parameters and the geometry constants."""
        print(f"\n  Radius:           {args.radius}")
        print(f"  Layers:           {args.layers}")
        print(f"  Inner->outer:     {hexagons.INNER_TO_OUTER_RADIUS!r}")
        print(f"  Outer->inner:     {hexagons.OUTER_TO_INNER_RADIUS!r}")
        print(f"  Unit outer r:     {hexagons.OUTER_RADIUS!r}")
        print(f"  Triangles table:  {list(hexagons.TRIANGLES)}")
        if args.preview:
            print(f"  Preview size:     {args.width} x {args.height}")
            print(f"  Scale:            {args.scale} px/unit")
            print(f"  Margin:           {args.margin}")
            print(f"  Line width:       {args.line_width}")
            print(f"  Anti-alias:       {args.antialias}")
            print(f"  Triangles drawn:  {triangle_count}")

    def _format_file_size(self, size_bytes: int) -> str:
        if size_bytes < 1024:
            return f"{size_bytes} B"
        elif size_bytes < 1024 * 1024:
            return f"{size_bytes / 1024:.2f} KB"
        else:
            return f"{size_bytes / (1024 * 1024):.2f} MB"


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------
def main() -> None:
    """Main entry point for the Hexagon Geometry Tool."""
    if sys.stdout and hasattr(sys.stdout, "reconfigure"):
        sys.stdout.reconfigure(encoding="utf-8", errors="replace")
    Application().run()


if __name__ == "__main__":
    main()
