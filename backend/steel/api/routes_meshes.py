"""
Routes for mesh inspection, scaling, slicing and cutting.

Every endpoint accepts an uploaded STL file and processes it in memory;
nothing is stored between requests.  Plane coordinates are passed as
query parameters following the command-line convention: at most one of
``x``, ``y`` and ``z`` may be non-zero, and with all of them zero the
mesh is sliced or cut by the XY plane at ``z = 0``.
"""

from __future__ import annotations

import io
import logging

from fastapi import APIRouter, File, HTTPException, Query, UploadFile
from fastapi.responses import Response

from .models import CutPart, CutResponse, MeshBBox, MeshInfoResponse
from ..config import PlaneOptions
from ..errors import InvalidPlaneError, StlFormatError
from ..services.commands import load_mesh, make_cut, make_slice, mesh_info
from ..services.geometry import Mesh, scale_mesh
from ..services.planes import plane_from_options
from ..services.stl_io import write_stl_ascii, write_stl_binary
from ..services.svg import write_svg

logger = logging.getLogger(__name__)

router = APIRouter()


def _read_upload(file: UploadFile) -> Mesh:
    name = file.filename or "<upload>"
    try:
        return load_mesh(file.file, name)
    except StlFormatError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


def _plane_options(x: float, y: float, z: float, verbose: bool = False) -> PlaneOptions:
    options = PlaneOptions(x=x, y=y, z=z, verbose=verbose)
    try:
        plane_from_options(options)
    except InvalidPlaneError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return options


def _ascii_stl(mesh: Mesh) -> str:
    buf = io.BytesIO()
    write_stl_ascii(buf, mesh)
    return buf.getvalue().decode("ascii")


@router.post("/meshes/info", response_model=MeshInfoResponse)
async def info(file: UploadFile = File(...)) -> MeshInfoResponse:
    """Return the triangle count and bounding box of an uploaded STL."""
    mesh = _read_upload(file)
    summary = mesh_info(mesh, file.filename or "")
    return MeshInfoResponse(
        filename=summary.name,
        triangles=summary.triangles,
        bbox=MeshBBox(min=list(summary.bbox_min), max=list(summary.bbox_max)),
    )


@router.post("/meshes/scale")
async def scale(
    file: UploadFile = File(...),
    factor: float = Query(1.0, description="Uniform scale factor"),
) -> Response:
    """Scale an uploaded STL and return it as binary STL."""
    mesh = scale_mesh(_read_upload(file), factor)
    buf = io.BytesIO()
    write_stl_binary(buf, mesh)
    return Response(content=buf.getvalue(), media_type="model/stl")


@router.post("/meshes/slice")
async def slice_mesh(
    file: UploadFile = File(...),
    x: float = Query(0.0, description="Slice with the YZ plane at this x"),
    y: float = Query(0.0, description="Slice with the XZ plane at this y"),
    z: float = Query(0.0, description="Slice with the XY plane at this z"),
    verbose: bool = Query(False, description="Annotate skipped triangles with comments"),
) -> Response:
    """Slice an uploaded STL by a plane and return the section as SVG."""
    options = _plane_options(x, y, z, verbose)
    drawing = make_slice(_read_upload(file), options)
    buf = io.BytesIO()
    write_svg(buf, drawing, verbose=options.verbose)
    return Response(content=buf.getvalue(), media_type="image/svg+xml")


@router.post("/meshes/cut", response_model=CutResponse)
async def cut(
    file: UploadFile = File(...),
    x: float = Query(0.0, description="Cut with the YZ plane at this x"),
    y: float = Query(0.0, description="Cut with the XZ plane at this y"),
    z: float = Query(0.0, description="Cut with the XY plane at this z"),
) -> CutResponse:
    """Cut an uploaded STL into the parts below and above a plane."""
    options = _plane_options(x, y, z)
    plane = plane_from_options(options)
    result = make_cut(_read_upload(file), options)
    logger.info(
        "Cut %s: below=%d above=%d triangles",
        file.filename,
        len(result.below),
        len(result.above),
    )
    return CutResponse(
        plane=plane.plane_type,
        offset=plane.offset,
        below=CutPart(triangles=len(result.below), stl=_ascii_stl(result.below)),
        above=CutPart(triangles=len(result.above), stl=_ascii_stl(result.above)),
    )
