"""Transform an image file from the command line.

Usage: resize-image INPUT OUTPUT --width 4 --height 6 --unit in [options]
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from resize_backend.app_logging import configure_logging
from resize_backend.application.commands.transform_image import TransformImageCommand
from resize_backend.application.dependencies import get_transform_runner
from resize_backend.application.dto.transform_options import TransformOptions
from resize_backend.domain.exceptions import TransformException


def _parse_crop(value: str) -> Dict[str, Any]:
    """``x,y,w,h`` for pixels or ``x,y,w,h%`` for percentages."""
    unit = "px"
    if value.endswith("%"):
        unit, value = "%", value[:-1]
    parts = value.split(",")
    if len(parts) != 4:
        raise argparse.ArgumentTypeError(f"invalid crop {value!r} (expected x,y,w,h or x,y,w,h%)")
    x, y, width, height = parts
    return {"unit": unit, "x": x.strip(), "y": y.strip(), "width": width.strip(), "height": height.strip()}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="resize-image", description=__doc__.splitlines()[0])
    parser.add_argument("input", type=Path, help="source JPG, PNG or WEBP")
    parser.add_argument("output", type=Path, help="where to write the result; a directory gets a generated name")
    parser.add_argument("--width", required=True)
    parser.add_argument("--height", required=True)
    parser.add_argument("--unit", default="px", help="px, in, cm or mm (long forms accepted)")
    parser.add_argument("--mode", default="stretch", help="stretch, fill, contain, cover, color or blur")
    parser.add_argument("--format", dest="format", default="jpeg", help="jpeg, png, webp or pdf")
    parser.add_argument("--background", dest="backgroundColor", default="#FFFFFF")
    parser.add_argument("--quality", type=int, default=90)
    parser.add_argument("--max-size-kb", dest="maxSizeKB", type=float)
    parser.add_argument("--preview", dest="isPreview", action="store_true")
    parser.add_argument("--resolution-mode", dest="resolutionMode", default="auto", choices=("auto", "fixed"))
    parser.add_argument("--dpi", type=int)
    parser.add_argument("--rotate", type=float, default=0.0)
    parser.add_argument("--crop", type=_parse_crop)
    parser.add_argument("--json-logs", action="store_true", help="emit structured JSON logs")
    parser.add_argument("--log-level", help="overrides LOG_LEVEL")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(structured=args.json_logs, level=args.log_level, stream=sys.stderr)

    if not args.input.is_file():
        print(f"File not found: {args.input}", file=sys.stderr)
        return 1

    options = {key: value for key, value in vars(args).items() if key not in {"input", "output", "json_logs", "log_level"}}
    try:
        request = TransformOptions.parse(options).to_request()
        command = TransformImageCommand(
            source=args.input.read_bytes(),
            request=request,
            filename=args.input.name,
        )
        artifact = get_transform_runner().run(command)
    except TransformException as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    output = args.output
    if output.is_dir():
        output = output / artifact.suggested_filename()
    output.write_bytes(artifact.data)
    print(f"{output} {artifact.mime_type} {artifact.size} bytes")
    return 0


if __name__ == "__main__":
    sys.exit(main())
