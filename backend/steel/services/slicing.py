"""
Cross-sections of a mesh with an axis-aligned plane.

Each triangle is examined on its own and contributes at most one
drawing primitive:

- a :class:`SliceOutline` when the whole triangle lies in the ON band,
- a :class:`SliceSegment` when the plane crosses it,
- a :class:`SkippedTriangle` or :class:`TouchPoint` diagnostic when it
  contributes nothing drawable.  Diagnostics are only rendered in
  verbose output.

A triangle with one vertex ON and the other two strictly on opposite
sides yields a segment from that vertex to the crossing of the opposite
edge.  This deliberately differs from the reference Go tool, which
reported such a triangle as a dot and drew nothing for it.

``slice_mesh`` collects the primitives of a whole mesh into a
:class:`SliceDrawing`, in input order, together with the bounding box
used to size and offset the SVG document.  Debug logging of the
per-triangle decisions can be enabled via the ``STEEL_DEBUG``
environment variable.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

from ..config import SLICE_THRESHOLD, debug_enabled
from .geometry import Mesh, Point, Triangle, bounding_box
from .planes import Side, SlicePlane, classify, intersect_edge, plane_epsilon

logger = logging.getLogger(__name__)

__all__ = [
    "SliceSegment",
    "SliceOutline",
    "SkippedTriangle",
    "TouchPoint",
    "SliceDrawing",
    "project_triangle",
    "slice_mesh",
]


@dataclass(frozen=True)
class SliceSegment:
    """A line segment where a triangle crosses the slice plane.

    Both endpoints lie on the plane and are expressed as 3D tuples.
    """

    p1: Point
    p2: Point


@dataclass(frozen=True)
class SliceOutline:
    """A triangle lying entirely in the slice plane, drawn filled."""

    points: Tuple[Point, Point, Point]


@dataclass(frozen=True)
class SkippedTriangle:
    """A triangle entirely on one side of the plane."""

    triangle: Triangle
    side: Side


@dataclass(frozen=True)
class TouchPoint:
    """A triangle that meets the plane only at a single vertex."""

    triangle: Triangle


SlicePrimitive = Union[SliceSegment, SliceOutline, SkippedTriangle, TouchPoint]


@dataclass
class SliceDrawing:
    """All primitives of a slice plus the frame needed to render them."""

    plane: SlicePlane
    bbox_min: Point
    bbox_max: Point
    primitives: List[SlicePrimitive] = field(default_factory=list)

    @property
    def segments(self) -> List[SliceSegment]:
        return [p for p in self.primitives if isinstance(p, SliceSegment)]

    @property
    def outlines(self) -> List[SliceOutline]:
        return [p for p in self.primitives if isinstance(p, SliceOutline)]


def project_triangle(tr: Triangle, plane: SlicePlane, eps: float) -> Optional[SlicePrimitive]:
    """Determine what a single triangle contributes to a slice.

    Args:
        tr: The triangle.
        plane: The slice plane.
        eps: Half-width of the ON band.

    Returns:
        A drawable :class:`SliceSegment` or :class:`SliceOutline`, or a
        :class:`SkippedTriangle`/:class:`TouchPoint` diagnostic.
    """
    v = tr.vertices
    sides = [classify(p, plane, eps) for p in v]

    for side in (Side.BELOW, Side.ABOVE):
        if all(s == side for s in sides):
            return SkippedTriangle(triangle=tr, side=side)

    if all(s == Side.ON for s in sides):
        return SliceOutline(points=v)

    for i in range(3):
        j = (i + 1) % 3
        k = (i + 2) % 3
        si, sj, sk = sides[i], sides[j], sides[k]
        # The triangle has a side lying in the plane.
        if si == Side.ON and sj == Side.ON:
            return SliceSegment(p1=v[i], p2=v[j])
        # Vertex k is alone on the far side; the cut runs across its two edges.
        if si == sj != Side.ON and sk == si.opposite:
            return SliceSegment(p1=intersect_edge(v[i], v[k], plane), p2=intersect_edge(v[j], v[k], plane))

    # One vertex ON with the other two on strictly opposite sides: the cut
    # runs from that vertex across the opposite edge.
    for i in range(3):
        j = (i + 1) % 3
        k = (i + 2) % 3
        if sides[i] == Side.ON and sides[j] == sides[k].opposite != Side.ON:
            return SliceSegment(p1=v[i], p2=intersect_edge(v[j], v[k], plane))

    return TouchPoint(triangle=tr)


def slice_mesh(mesh: Mesh, plane: SlicePlane, fraction: float = SLICE_THRESHOLD) -> SliceDrawing:
    """Intersect an entire mesh with a plane.

    The tolerance is ``fraction`` of the mesh extent along the plane
    axis.  Primitives are returned in triangle order.
    """
    bbox_min, bbox_max = bounding_box(mesh)
    eps = plane_epsilon(bbox_min, bbox_max, plane, fraction)
    drawing = SliceDrawing(plane=plane, bbox_min=bbox_min, bbox_max=bbox_max)
    for tr in mesh.triangles:
        prim = project_triangle(tr, plane, eps)
        if prim is not None:
            drawing.primitives.append(prim)
    if debug_enabled():
        logger.debug(
            "slice_mesh: inspected=%d triangles, segments=%d, outlines=%d, eps=%g",
            len(mesh.triangles),
            len(drawing.segments),
            len(drawing.outlines),
            eps,
        )
    return drawing
