"""
Pydantic data models for the steel HTTP API.

These models define the JSON responses returned by the mesh endpoints.
Binary STL and SVG results are returned as raw response bodies and have
no schema here.
"""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field


class MeshBBox(BaseModel):
    """Axis‑aligned bounding box for a mesh."""

    min: List[float] = Field(..., description="Minimum x, y, z coordinates of the mesh")
    max: List[float] = Field(..., description="Maximum x, y, z coordinates of the mesh")


class MeshInfoResponse(BaseModel):
    """Metrics returned by the info endpoint."""

    filename: str = Field(..., description="Original filename provided by the client")
    triangles: int = Field(..., description="Number of triangles in the mesh")
    bbox: MeshBBox = Field(..., description="Bounding box around the mesh")


class CutPart(BaseModel):
    """One half of a cut mesh."""

    triangles: int = Field(..., description="Number of triangles in this part")
    stl: str = Field(..., description="The part encoded as ASCII STL")


class CutResponse(BaseModel):
    """Response returned by the cut endpoint."""

    plane: str = Field(..., description="Cutting plane ('xy', 'xz' or 'yz')")
    offset: float = Field(..., description="Plane position along its orthogonal axis")
    below: CutPart = Field(..., description="Part not above the plane")
    above: CutPart = Field(..., description="Part not below the plane")
