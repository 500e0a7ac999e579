"""
1) Load people from a GEDCOM (.ged) or JSON (.json) file.
2) Validate their relationships and report anything suspicious.
3) Lay out the genogram.
4) Route marriage and parent-child connectors.
5) Plot the result, and optionally export a pinned DOT file.
"""

import argparse
import logging
import sys
from pathlib import Path

from config import DEFAULT_BOX_SIZE, DEFAULT_RUN_SPACING, DEFAULT_SPACING, LayoutConfig
from layout import GenogramLayout
from logging_config import setup_logging
from models import Orientation, Person, PersonRecordSchema, Size
from parsing import load_gedcom, load_json
from plotting import plot_genogram, write_dot
from routing import ConnectionRouter
from validation import validate_persons


def load_people(path: Path) -> list[Person]:
    suffix = path.suffix.lower()
    if suffix in (".ged", ".gedcom"):
        return load_gedcom(path)
    if suffix == ".json":
        return load_json(path)
    raise ValueError(f"Unsupported input format: {path.suffix or path.name}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Lay out a genogram and render it to an image.")
    parser.add_argument("input", type=Path, help="GEDCOM (.ged) or JSON (.json) file.")
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=Path("genogram.png"),
        help="Image to write; format from the extension (default: genogram.png).",
    )
    parser.add_argument("--dot", type=Path, help="Also write a DOT file with pinned positions.")
    parser.add_argument(
        "--orientation",
        choices=[o.value for o in Orientation],
        default=Orientation.TOP_TO_BOTTOM.value,
    )
    parser.add_argument("--box-width", type=float, default=DEFAULT_BOX_SIZE.width)
    parser.add_argument("--box-height", type=float, default=DEFAULT_BOX_SIZE.height)
    parser.add_argument("--spacing", type=float, default=DEFAULT_SPACING, help="Gap within a generation.")
    parser.add_argument("--run-spacing", type=float, default=DEFAULT_RUN_SPACING, help="Gap between generations.")
    parser.add_argument(
        "--exact-anchors",
        action="store_true",
        help="Attach marriage lines to the sides of each box instead of the bottom center.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log layout details.")
    parser.add_argument("--log-file", help="Also write the log to this file.")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.WARNING, args.log_file)

    print(f"Loading people from: {args.input}")
    try:
        people = load_people(args.input)
    except (OSError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    print(f"  Found {len(people)} people")

    schema = PersonRecordSchema()

    print("Validating relationships...")
    warnings = validate_persons(people, schema)
    if warnings:
        print(f"  Found {len(warnings)} validation warnings:")
        for w in warnings[:10]:  # Show first 10 warnings
            print(f"    - {w}")
        if len(warnings) > 10:
            print(f"    ... and {len(warnings) - 10} more")
    else:
        print("  No validation issues found")

    print("Computing layout...")
    config = LayoutConfig(
        box_size=Size(args.box_width, args.box_height),
        spacing=args.spacing,
        run_spacing=args.run_spacing,
        orientation=Orientation(args.orientation),
    )
    layout = GenogramLayout(people, schema, config)
    router = ConnectionRouter(layout, marriage_status=schema.marriage_status, exact_anchors=args.exact_anchors)
    requests = router.route()
    size = layout.get_size()
    print(f"  {len(router.marriages)} marriages, {len(requests)} connectors, {size.width:.0f}x{size.height:.0f}")

    print(f"Plotting genogram to: {args.output}")
    plot_genogram(layout, requests, args.output, label_provider=lambda p: p.name)

    if args.dot:
        print(f"Writing DOT file to: {args.dot}")
        write_dot(layout, requests, args.dot, label_provider=lambda p: p.name)

    print("Done!")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
