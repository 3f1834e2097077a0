"""
Command drivers: info, scale, slice and cut.

Each driver reads one mesh, computes its bounding box, runs the engine
and writes the result.  The plane selection is validated before any
input is read so that an invalid request never consumes the input
stream.  Both the command-line front end and the HTTP routes call into
this module; neither holds any state between invocations.
"""

from __future__ import annotations

import logging
import os
import sys
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Iterator, Optional, Sequence, Tuple

from ..config import CUT_THRESHOLD, SLICE_THRESHOLD, PlaneOptions
from ..errors import OutputError, SteelError, StlFormatError
from .clipping import CutResult, partition_mesh
from .geometry import Mesh, Point, bounding_box, scale_mesh
from .planes import plane_epsilon, plane_from_options
from .slicing import SliceDrawing, slice_mesh
from .stl_io import read_stl, write_stl_ascii, write_stl_binary
from .svg import write_svg

logger = logging.getLogger(__name__)

STDIN_NAME = "<stdin>"


@dataclass(frozen=True)
class MeshInfo:
    """Summary metrics reported by the info command."""

    name: str
    triangles: int
    bbox_min: Point
    bbox_max: Point

    def lines(self) -> list[str]:
        return [
            f"File: {self.name}",
            f"Triangles: {self.triangles}",
            "Bounding box: [%g %g %g] - [%g %g %g]" % (*self.bbox_min, *self.bbox_max),
        ]


@contextmanager
def open_input(files: Sequence[str]) -> Iterator[Tuple[str, BinaryIO]]:
    """Open the single input file, or stdin when none (or ``-``) is given.

    Raises:
        SteelError: If more than one input file is given.
        OSError: If the file cannot be opened.
    """
    if len(files) > 1:
        raise SteelError("multiple input files are not supported yet")
    if not files or files[0] == "-":
        yield STDIN_NAME, sys.stdin.buffer
        return
    with open(files[0], "rb") as fh:
        yield files[0], fh


@contextmanager
def open_output(path: Optional[str]) -> Iterator[BinaryIO]:
    """Open ``path`` for writing, or stdout when no path is given.

    Failures while opening, writing or closing the file are raised as
    :class:`OutputError` with the original exception as the cause.
    """
    if not path:
        yield sys.stdout.buffer
        sys.stdout.buffer.flush()
        return
    try:
        fh = open(path, "wb")
    except OSError as exc:
        raise OutputError(f"Failed to open output file {path}: {exc}") from exc
    try:
        yield fh
    except OSError as exc:
        fh.close()
        raise OutputError(f"Failed to write output file {path}: {exc}") from exc
    except BaseException:
        fh.close()
        raise
    try:
        fh.close()
    except OSError as exc:
        raise OutputError(f"Failed to close output file {path}: {exc}") from exc


def load_mesh(stream: BinaryIO, name: str = STDIN_NAME) -> Mesh:
    """Read a mesh and attach the source name to any format error."""
    try:
        mesh = read_stl(stream)
    except StlFormatError as exc:
        raise StlFormatError(f"Failed to read STL file {name!r}: {exc}") from exc
    logger.info("Loaded %d triangles from %s", len(mesh), name)
    return mesh


def mesh_info(mesh: Mesh, name: str) -> MeshInfo:
    bbox_min, bbox_max = bounding_box(mesh)
    return MeshInfo(name=name, triangles=len(mesh), bbox_min=bbox_min, bbox_max=bbox_max)


def run_info(stream: BinaryIO, name: str = STDIN_NAME) -> MeshInfo:
    """Read a mesh and return its triangle count and bounding box."""
    return mesh_info(load_mesh(stream, name), name)


def run_scale(stream: BinaryIO, output: Optional[str], factor: float, name: str = STDIN_NAME) -> Mesh:
    """Scale a mesh uniformly and write it as binary STL.

    The output (a file path, or stdout when empty) is opened only after
    the input has been read, so a malformed input leaves it untouched.
    """
    scaled = scale_mesh(load_mesh(stream, name), factor)
    with open_output(output) as out:
        write_stl_binary(out, scaled)
    return scaled


def make_slice(mesh: Mesh, options: PlaneOptions) -> SliceDrawing:
    """Slice an in-memory mesh with the plane selected by ``options``."""
    plane = plane_from_options(options)
    return slice_mesh(mesh, plane, SLICE_THRESHOLD)


def run_slice(
    stream: BinaryIO, output: Optional[str], options: PlaneOptions, name: str = STDIN_NAME
) -> SliceDrawing:
    """Slice a mesh and write the cross-section as SVG.

    As with :func:`run_scale`, the output is opened after the input has
    been read and sliced.
    """
    plane = plane_from_options(options)
    drawing = slice_mesh(load_mesh(stream, name), plane, SLICE_THRESHOLD)
    with open_output(output) as out:
        write_svg(out, drawing, verbose=options.verbose)
    logger.info(
        "Sliced %s with the %s plane at %s: %d segments, %d outlines",
        name,
        plane.plane_type,
        plane.offset,
        len(drawing.segments),
        len(drawing.outlines),
    )
    return drawing


def make_cut(mesh: Mesh, options: PlaneOptions) -> CutResult:
    """Split an in-memory mesh with the plane selected by ``options``."""
    plane = plane_from_options(options)
    bbox_min, bbox_max = bounding_box(mesh)
    return partition_mesh(mesh, plane, plane_epsilon(bbox_min, bbox_max, plane, CUT_THRESHOLD))


def cut_output_paths(output: str) -> Tuple[str, str]:
    """Derive the two part file names from an output base.

    ``/home/user/part.stl`` becomes ``/home/user/part000.stl`` and
    ``/home/user/part001.stl``.
    """
    base, ext = os.path.splitext(output)
    return f"{base}000{ext}", f"{base}001{ext}"


def run_cut(stream: BinaryIO, output: str, options: PlaneOptions, name: str = STDIN_NAME) -> Tuple[str, str]:
    """Cut a mesh in two and write both parts as ASCII STL.

    The lower part goes to the ``000`` file and the upper part to the
    ``001`` file.  Each file is closed before the next one is opened, so a
    failure on the second part surfaces even though the first succeeded.

    Returns:
        The paths of the lower and upper parts.

    Raises:
        SteelError: If no output path is given.
        InvalidPlaneError: If more than one plane coordinate is set.
        OutputError: If either part cannot be written.
    """
    if not output:
        raise SteelError("--output is not specified")
    plane_from_options(options)
    result = make_cut(load_mesh(stream, name), options)
    paths = cut_output_paths(output)
    for path, part in zip(paths, (result.below, result.above)):
        with open_output(path) as fh:
            write_stl_ascii(fh, part)
        logger.info("Wrote %d triangles to %s", len(part), Path(path).name)
    return paths
