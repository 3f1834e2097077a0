"""
Command-line processor for STL files.

Usage::

    steel info [STL file]
    steel scale -x 2.5 -o big.stl [STL file]
    steel slice -z 10 -o section.svg [STL file]
    steel cut -x 5 -o part.stl [STL file]
    steel serve --port 8000

Commands read stdin when no STL file is given.  Scale and slice write to
stdout unless ``--output`` is given; cut always needs ``--output`` and
writes two files derived from it.  Errors are reported on stderr with a
non-zero exit status.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from .config import PlaneOptions
from .errors import SteelError
from .services.commands import open_input, run_cut, run_info, run_scale, run_slice
from .services.planes import plane_from_options

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _add_plane_flags(parser: argparse.ArgumentParser, verb: str) -> None:
    parser.add_argument("-x", "--x", type=float, default=0.0, help=f"If specified, {verb} with YZ plane at specified x.")
    parser.add_argument("-y", "--y", type=float, default=0.0, help=f"If specified, {verb} with XZ plane at specified y.")
    parser.add_argument("-z", "--z", type=float, default=0.0, help=f"If specified, {verb} with XY plane at specified z.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="steel", description="Steel -- a tool to tinker with STL files.")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging on stderr.")
    sub = parser.add_subparsers(dest="command")

    info = sub.add_parser("info", help="STL file info", description="Display the number of triangles and the bounding box.")
    info.add_argument("files", nargs="*", metavar="STL file")

    scale = sub.add_parser("scale", help="Scale mesh", description="Multiply all mesh vertex coordinates by a factor.")
    scale.add_argument("files", nargs="*", metavar="STL file")
    scale.add_argument("-x", "--x", dest="factor", type=float, default=1.0, help="Scale factor")
    scale.add_argument("-o", "--output", default="", help="Output STL file. By default, it's stdout.")

    slc = sub.add_parser("slice", help="Slice mesh by a plane to SVG", description="Slice a mesh by a plane and render it to SVG.")
    slc.add_argument("files", nargs="*", metavar="STL file")
    slc.add_argument("-o", "--output", default="", help="Output SVG file. By default, it's stdout.")
    slc.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="If verbose, skipped triangles will leave comments in the output SVG file.",
    )
    _add_plane_flags(slc, "slice")

    cut = sub.add_parser("cut", help="Cut mesh by a plane into two parts", description="Cut a mesh by a plane into two STL parts.")
    cut.add_argument("files", nargs="*", metavar="STL file")
    cut.add_argument(
        "-o",
        "--output",
        default="",
        help="The base for output STL files. For example, part.stl results in part000.stl and part001.stl.",
    )
    _add_plane_flags(cut, "cut")

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default="0.0.0.0")
    serve.add_argument("--port", type=int, default=8000)
    return parser


def _dispatch(args: argparse.Namespace) -> None:
    if args.command == "info":
        with open_input(args.files) as (name, stream):
            summary = run_info(stream, name)
        print("\n".join(summary.lines()))
    elif args.command == "scale":
        with open_input(args.files) as (name, stream):
            run_scale(stream, args.output, args.factor, name)
    elif args.command == "slice":
        options = PlaneOptions(x=args.x, y=args.y, z=args.z, verbose=args.verbose)
        plane_from_options(options)
        with open_input(args.files) as (name, stream):
            run_slice(stream, args.output, options, name)
    elif args.command == "cut":
        options = PlaneOptions(x=args.x, y=args.y, z=args.z)
        plane_from_options(options)
        with open_input(args.files) as (name, stream):
            run_cut(stream, args.output, options, name)
    elif args.command == "serve":
        import uvicorn

        from .main import app

        uvicorn.run(app, host=args.host, port=args.port)


def main(argv: Optional[List[str]] = None) -> int:
    """Run the command line and return the process exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )
    if args.command is None:
        parser.print_help()
        return 0
    try:
        _dispatch(args)
    except (SteelError, OSError) as exc:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(exc, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
