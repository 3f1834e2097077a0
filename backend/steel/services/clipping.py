"""
Half-space clipping of triangles and meshes.

``clip_triangle`` keeps the part of a triangle lying on one side of an
axis-aligned plane (the side itself plus the ON band).  It walks the
three directed edges, emits the vertices and edge crossings that
survive, removes duplicates introduced by ON vertices and re-triangulates
the resulting convex polygon: three vertices give one triangle, four
give a fan of two.  ``partition_mesh`` drives it across a whole mesh to
build the two halves produced by the cut command.

Every derived triangle carries the normal of its source triangle.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Sequence

from ..config import debug_enabled
from ..errors import ClipInvariantError
from .geometry import Mesh, Point, Triangle
from .planes import Side, SlicePlane, classify, intersect_edge

logger = logging.getLogger(__name__)


def clip_edge(
    cur: Point,
    nxt: Point,
    cur_side: Side,
    next_side: Side,
    keep: Side,
    plane: SlicePlane,
) -> List[Point]:
    """Return the vertices contributed by the directed edge ``cur -> nxt``.

    ``keep`` is the half-space being retained (``Side.BELOW`` or
    ``Side.ABOVE``); a vertex is excluded when it lies strictly on the
    opposite side.  ON vertices are always retained and are never
    interpolated.
    """
    excluded = keep.opposite
    cur_out = cur_side == excluded
    next_out = next_side == excluded
    if not cur_out and not next_out:
        return [cur, nxt]
    if cur_out and next_out:
        return []
    if cur_side == Side.ON:
        return [cur]
    if next_side == Side.ON:
        return [nxt]
    # One vertex strictly kept, the other strictly excluded.
    if next_out:
        return [cur, intersect_edge(cur, nxt, plane)]
    return [intersect_edge(cur, nxt, plane), nxt]


def uniq_vertices(vertices: Sequence[Point]) -> List[Point]:
    """Drop vertices equal to their predecessor, then a closing duplicate."""
    res: List[Point] = []
    for v in vertices:
        if res and v == res[-1]:
            continue
        res.append(v)
    if len(res) > 1 and res[0] == res[-1]:
        res.pop()
    return res


def clip_triangle(tr: Triangle, plane: SlicePlane, eps: float, keep: Side = Side.BELOW) -> List[Triangle]:
    """Clip a triangle against the half-space ``keep`` of ``plane``.

    Args:
        tr: Triangle to clip.
        plane: Cutting plane.
        eps: Half-width of the ON band.
        keep: ``Side.BELOW`` keeps everything not strictly above the
            plane, ``Side.ABOVE`` everything not strictly below.

    Returns:
        Zero, one or two triangles covering the kept part, all with the
        normal of ``tr``.

    Raises:
        ClipInvariantError: If the clipped polygon does not have 0-3 or 4
            vertices.
    """
    if keep == Side.ON:
        raise ValueError("keep must be Side.BELOW or Side.ABOVE")
    sides = [classify(v, plane, eps) for v in tr.vertices]
    v: List[Point] = []
    for i in range(3):
        j = (i + 1) % 3
        v.extend(clip_edge(tr.vertices[i], tr.vertices[j], sides[i], sides[j], keep, plane))
    v = uniq_vertices(v)

    if len(v) < 3:
        return []
    if len(v) == 3:
        return [Triangle(normal=tr.normal, vertices=(v[0], v[1], v[2]))]
    if len(v) == 4:
        return [
            Triangle(normal=tr.normal, vertices=(v[0], v[1], v[2])),
            Triangle(normal=tr.normal, vertices=(v[2], v[3], v[0])),
        ]
    raise ClipInvariantError(
        f"Clipping {tr.vertices} against the {plane.plane_type} plane at {plane.offset} "
        f"produced {len(v)} vertices"
    )


@dataclass
class CutResult:
    """The two halves of a mesh split by a plane."""

    below: Mesh = field(default_factory=Mesh)
    above: Mesh = field(default_factory=Mesh)


def partition_mesh(mesh: Mesh, plane: SlicePlane, eps: float) -> CutResult:
    """Split a mesh into the parts below and above a plane.

    A triangle with no vertex strictly above the plane goes to the lower
    part unchanged, one with no vertex strictly below goes to the upper
    part unchanged, and a triangle lying entirely in the ON band goes to
    both.  Every other triangle is clipped once per side.  Triangle order
    from the input is preserved within each part.
    """
    below: List[Triangle] = []
    above: List[Triangle] = []
    split = 0
    for tr in mesh.triangles:
        sides = [classify(p, plane, eps) for p in tr.vertices]
        simple = False
        if Side.ABOVE not in sides:
            below.append(tr)
            simple = True
        if Side.BELOW not in sides:
            above.append(tr)
            simple = True
        if simple:
            continue
        split += 1
        below.extend(clip_triangle(tr, plane, eps, keep=Side.BELOW))
        above.extend(clip_triangle(tr, plane, eps, keep=Side.ABOVE))
    if debug_enabled():
        logger.debug(
            "partition_mesh: inspected=%d triangles, split=%d, below=%d, above=%d",
            len(mesh.triangles),
            split,
            len(below),
            len(above),
        )
    return CutResult(below=Mesh(triangles=below, name=mesh.name), above=Mesh(triangles=above, name=mesh.name))
