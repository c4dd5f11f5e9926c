"""Command line entry point: transform one TypeScript file."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from model_schema.errors import SchemaTransformError
from model_schema.options import DEFAULT_MODULE, TransformOptions
from model_schema.transform import transform_source

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s - %(message)s",
        stream=sys.stderr,
    )


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    arg_parser = argparse.ArgumentParser(
        description="Generate static schemas for model classes in a TypeScript file"
    )
    arg_parser.add_argument(
        "file",
        type=Path,
        help="TypeScript source file to transform",
    )
    arg_parser.add_argument(
        "-o", "--output",
        type=Path,
        help="Write the result to this file instead of stdout",
    )
    arg_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the extracted schemas as JSON instead of the transformed source",
    )
    arg_parser.add_argument(
        "-m", "--module",
        action="append",
        dest="modules",
        metavar="NAME",
        help=f"Module whose exports are recognized (repeatable, default: {DEFAULT_MODULE})",
    )
    arg_parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log debug output",
    )

    args = arg_parser.parse_args(argv)
    configure_logging(args.verbose)

    if not args.file.exists():
        print(f"Error: File not found: {args.file}", file=sys.stderr)
        return 1

    options = TransformOptions(modules=tuple(args.modules)) if args.modules else TransformOptions()
    try:
        result = transform_source(args.file.read_text(encoding="utf-8"), options)
    except (SyntaxError, SchemaTransformError) as e:
        print(f"Error: {args.file}: {e}", file=sys.stderr)
        return 1

    if args.json:
        output = json.dumps([s.to_dict() for s in result.schemas], indent=2) + "\n"
    else:
        output = result.code

    if args.output:
        args.output.write_text(output, encoding="utf-8")
        logger.info("Wrote %s", args.output)
    else:
        sys.stdout.write(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
