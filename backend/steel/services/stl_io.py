"""
STL serialization on top of numpy-stl.

``read_stl`` decides between binary and ASCII itself: binary when the
stream length matches the facet count stored in the header, ASCII when
the data starts with ``solid``.  The chosen mode is then handed to
:class:`stl.mesh.Mesh` explicitly, so a binary file whose header
happens to start with ``solid`` is never misread.  Facet normals are
taken as stored; numpy-stl is told not to recompute them on load or
save.

numpy-stl stops quietly at the end of ASCII data, so a file cut short
before ``endsolid`` or with fewer decoded facets than ``endfacet`` lines
is rejected here.

Functions defined here:

- ``read_stl(stream)`` – decode binary or ASCII STL into a :class:`Mesh`.
- ``write_stl_binary(stream, mesh)`` – encode binary STL.
- ``write_stl_ascii(stream, mesh)`` – encode ASCII STL.
"""

from __future__ import annotations

import io
import logging
import struct
from typing import BinaryIO

import numpy as np
import stl
from stl import mesh as stl_mesh

from ..config import STL_DEFAULT_SOLID_NAME
from ..errors import StlFormatError
from .geometry import Mesh, Triangle

logger = logging.getLogger(__name__)

HEADER_SIZE = 80
COUNT_SIZE = 4

# Everything numpy-stl raises for malformed data.
_LOAD_ERRORS = (RuntimeError, AssertionError, ValueError, TypeError, IndexError, struct.error)


def _detect_mode(data: bytes) -> stl.Mode:
    count = -1
    if len(data) >= HEADER_SIZE + COUNT_SIZE:
        count = struct.unpack_from("<I", data, HEADER_SIZE)[0]
        if len(data) == HEADER_SIZE + COUNT_SIZE + count * stl_mesh.Mesh.dtype.itemsize:
            return stl.Mode.BINARY
    if data.lstrip()[:5].lower() == b"solid":
        return stl.Mode.ASCII
    if count < 0:
        raise StlFormatError(f"STL data truncated: {len(data)} bytes")
    raise StlFormatError(
        f"Binary STL size mismatch: header declares {count} facets "
        f"but {len(data) - HEADER_SIZE - COUNT_SIZE} bytes of facet data follow"
    )


def _check_ascii_complete(data: bytes, decoded: int) -> None:
    lines = [line.strip().lower() for line in data.splitlines() if line.strip()]
    if not lines or not lines[-1].startswith(b"endsolid"):
        raise StlFormatError("ASCII STL ended before 'endsolid'")
    facets = sum(1 for line in lines if line.startswith(b"endfacet"))
    if facets != decoded:
        raise StlFormatError(f"ASCII STL has {facets} facets but only {decoded} could be decoded")


def _solid_name(name) -> str:
    if isinstance(name, bytes):
        name = name.decode("ascii", errors="replace")
    return (name or "").strip()


def read_stl(stream: BinaryIO) -> Mesh:
    """Read a binary or ASCII STL mesh from a byte stream.

    Args:
        stream: Readable binary stream positioned at the start of the file.

    Returns:
        The decoded :class:`Mesh`.  Only ASCII files carry a solid name.

    Raises:
        StlFormatError: If the data is neither a complete binary STL nor a
            well-formed ASCII STL.
    """
    data = stream.read()
    mode = _detect_mode(data)
    if mode is stl.Mode.BINARY and len(data) == HEADER_SIZE + COUNT_SIZE:
        return Mesh()
    try:
        loaded = stl_mesh.Mesh.from_file(
            "<stream>",
            calculate_normals=False,
            fh=io.BytesIO(data),
            mode=mode,
            speedups=False,
        )
    except _LOAD_ERRORS as exc:
        raise StlFormatError(f"Malformed {mode.name.lower()} STL: {exc}") from exc

    normals = loaded.normals.astype(np.float64).tolist()
    vectors = loaded.vectors.astype(np.float64).tolist()
    if mode is stl.Mode.ASCII:
        _check_ascii_complete(data, len(vectors))
    triangles = [
        Triangle(normal=tuple(n), vertices=(tuple(v[0]), tuple(v[1]), tuple(v[2])))  # type: ignore[arg-type]
        for n, v in zip(normals, vectors)
    ]
    name = _solid_name(loaded.name) if mode is stl.Mode.ASCII else ""
    logger.debug("read_stl: decoded %d %s facets", len(triangles), mode.name.lower())
    return Mesh(triangles=triangles, name=name)


def _to_stl_mesh(mesh: Mesh) -> stl_mesh.Mesh:
    data = np.zeros(len(mesh.triangles), dtype=stl_mesh.Mesh.dtype)
    if mesh.triangles:
        data["normals"] = [tr.normal for tr in mesh.triangles]
        data["vectors"] = [tr.vertices for tr in mesh.triangles]
        if not (np.isfinite(data["normals"]).all() and np.isfinite(data["vectors"]).all()):
            raise ValueError("Cannot write non-finite coordinates to STL")
    return stl_mesh.Mesh(data, calculate_normals=False, name=mesh.name or STL_DEFAULT_SOLID_NAME)


def write_stl_binary(stream: BinaryIO, mesh: Mesh) -> None:
    """Write a mesh as binary STL.

    Coordinates are stored as 32-bit floats.
    """
    _to_stl_mesh(mesh).save(
        mesh.name or STL_DEFAULT_SOLID_NAME, fh=stream, mode=stl.Mode.BINARY, update_normals=False
    )


def write_stl_ascii(stream: BinaryIO, mesh: Mesh) -> None:
    """Write a mesh as ASCII STL under its solid name."""
    _to_stl_mesh(mesh).save(
        mesh.name or STL_DEFAULT_SOLID_NAME, fh=stream, mode=stl.Mode.ASCII, update_normals=False
    )
