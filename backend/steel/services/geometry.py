"""
Geometry primitives for the steel toolkit.

Meshes are handled as plain value objects: a ``Point`` is a tuple of
three floats, a :class:`Triangle` bundles a facet normal with three
vertices, and a :class:`Mesh` is an ordered list of triangles.  There is
no adjacency or shared-vertex structure, matching what the STL format
itself stores.

Functions defined here:

- ``bounding_box(mesh)`` – axis-aligned bounding box of all vertices.
- ``scale_mesh(mesh, factor)`` – uniform scaling returning a new mesh.
- ``scale(a, s)`` – scale a tuple vector.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Tuple

logger = logging.getLogger(__name__)

Point = Tuple[float, float, float]

ORIGIN: Point = (0.0, 0.0, 0.0)


@dataclass(frozen=True)
class Triangle:
    """A single mesh facet.

    Attributes:
        normal: Facet normal as stored in the source file.  Clipping copies
            it unchanged to every derived triangle; it is never recomputed.
        vertices: The three corners in winding order.
    """

    normal: Point
    vertices: Tuple[Point, Point, Point]


@dataclass
class Mesh:
    """An ordered sequence of independent triangles.

    Attributes:
        triangles: Facets in file order.
        name: Solid name from an ASCII STL header, empty otherwise.
    """

    triangles: List[Triangle] = field(default_factory=list)
    name: str = ""

    def __len__(self) -> int:
        return len(self.triangles)


def scale(a: Point, s: float) -> Point:
    """Scale a 3D vector by ``s``."""
    return (a[0] * s, a[1] * s, a[2] * s)


def bounding_box(mesh: Mesh) -> Tuple[Point, Point]:
    """Compute the axis-aligned bounding box of a mesh.

    Args:
        mesh: The mesh to measure.

    Returns:
        A ``(min, max)`` pair of points.  An empty mesh yields two zero
        vectors so that downstream tolerances collapse to zero rather
        than failing.
    """
    if not mesh.triangles:
        return ORIGIN, ORIGIN
    xs = [v[0] for tr in mesh.triangles for v in tr.vertices]
    ys = [v[1] for tr in mesh.triangles for v in tr.vertices]
    zs = [v[2] for tr in mesh.triangles for v in tr.vertices]
    return (min(xs), min(ys), min(zs)), (max(xs), max(ys), max(zs))


def scale_mesh(mesh: Mesh, factor: float) -> Mesh:
    """Multiply every vertex coordinate by ``factor``.

    Normals are left as they are; a uniform positive scale does not
    change their direction.

    Args:
        mesh: Source mesh.  It is not modified.
        factor: Uniform scale factor.

    Returns:
        A new :class:`Mesh` with scaled vertices.
    """
    scaled = [
        Triangle(
            normal=tr.normal,
            vertices=(
                scale(tr.vertices[0], factor),
                scale(tr.vertices[1], factor),
                scale(tr.vertices[2], factor),
            ),
        )
        for tr in mesh.triangles
    ]
    logger.debug("scale_mesh: scaled %d triangles by %s", len(scaled), factor)
    return Mesh(triangles=scaled, name=mesh.name)
