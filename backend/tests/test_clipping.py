"""
Tests for half-space clipping of triangles and mesh partitioning.

Areas are compared with a small cross-product helper so that the two
halves of a cut can be checked against the source triangle without
depending on vertex order.
"""

from __future__ import annotations

import sys
from pathlib import Path
import math
import pytest

# Make the backend package importable when running tests directly via pytest
sys.path.append(str(Path(__file__).resolve().parents[1]))

from steel.services.clipping import clip_edge, clip_triangle, partition_mesh, uniq_vertices
from steel.services.geometry import Mesh, Triangle
from steel.services.planes import Side, make_slice_plane

NORMAL = (0.0, 0.0, 1.0)


def tri(a, b, c, normal=NORMAL) -> Triangle:
    return Triangle(normal=normal, vertices=(a, b, c))


def area(t: Triangle) -> float:
    a, b, c = t.vertices
    ab = (b[0] - a[0], b[1] - a[1], b[2] - a[2])
    ac = (c[0] - a[0], c[1] - a[1], c[2] - a[2])
    cross = (
        ab[1] * ac[2] - ab[2] * ac[1],
        ab[2] * ac[0] - ab[0] * ac[2],
        ab[0] * ac[1] - ab[1] * ac[0],
    )
    return 0.5 * math.sqrt(cross[0] ** 2 + cross[1] ** 2 + cross[2] ** 2)


def test_plane_outside_triangle_keeps_or_drops_it_whole() -> None:
    t = tri((0.0, 0.0, 0.0), (1.0, 0.0, 0.5), (0.0, 1.0, 1.0))
    plane = make_slice_plane("z", 5.0)
    kept = clip_triangle(t, plane, 0.0, keep=Side.BELOW)
    assert kept == [t]
    assert kept[0].vertices == t.vertices
    assert clip_triangle(t, plane, 0.0, keep=Side.ABOVE) == []


def test_unit_triangle_cut_at_x_equals_one() -> None:
    t = tri((0.0, 0.0, 0.0), (2.0, 0.0, 0.0), (0.0, 2.0, 0.0))
    plane = make_slice_plane("x", 1.0)
    below = clip_triangle(t, plane, 1e-9, keep=Side.BELOW)
    assert len(below) == 2
    vertices = {p for part in below for p in part.vertices}
    assert vertices == {(0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (1.0, 1.0, 0.0), (0.0, 2.0, 0.0)}
    assert math.isclose(sum(area(p) for p in below), 1.5)
    # The fan shares the diagonal from the first polygon vertex.
    assert below[0].vertices[0] == below[1].vertices[2]
    assert below[0].vertices[2] == below[1].vertices[0]
    assert all(p.normal == NORMAL for p in below)

    above = clip_triangle(t, plane, 1e-9, keep=Side.ABOVE)
    assert len(above) == 1
    assert set(above[0].vertices) == {(1.0, 0.0, 0.0), (2.0, 0.0, 0.0), (1.0, 1.0, 0.0)}
    assert math.isclose(area(above[0]), 0.5)


@pytest.mark.parametrize(
    "triangle, axis, offset",
    [
        (((0.0, 0.0, 0.0), (2.0, 0.0, 0.0), (0.0, 2.0, 0.0)), "x", 1.0),
        (((0.0, 0.0, -1.0), (3.0, 1.0, 2.0), (-1.0, 2.0, 0.5)), "z", 0.25),
        (((1.0, -2.0, 0.0), (0.0, 3.0, 1.0), (2.0, 0.5, 4.0)), "y", 0.0),
        (((0.0, 0.0, 0.0), (1.0, 0.0, -1.0), (0.0, 1.0, 1.0)), "z", 0.0),
    ],
)
def test_partition_preserves_triangle_area(triangle, axis: str, offset: float) -> None:
    t = tri(*triangle)
    plane = make_slice_plane(axis, offset)
    result = partition_mesh(Mesh(triangles=[t]), plane, 1e-9)
    total = sum(area(p) for p in result.below) + sum(area(p) for p in result.above)
    assert math.isclose(total, area(t), rel_tol=1e-9)
    for part in result.below:
        assert all(v[plane.axis] <= offset + 1e-9 for v in part.vertices)
    for part in result.above:
        assert all(v[plane.axis] >= offset - 1e-9 for v in part.vertices)


def test_on_vertex_is_kept_without_interpolation() -> None:
    on = (0.1, 0.2, 0.0)
    t = tri(on, (1.0, 0.0, 1.0), (0.0, 1.0, 1.0))
    plane = make_slice_plane("z", 0.0)
    assert clip_triangle(t, plane, 1e-6, keep=Side.BELOW) == []
    kept = clip_triangle(t, plane, 1e-6, keep=Side.ABOVE)
    assert kept == [t]
    assert kept[0].vertices[0] is on


def test_on_vertex_with_opposite_neighbours_yields_single_triangle() -> None:
    t = tri((0.0, 0.0, 0.0), (1.0, 0.0, -1.0), (0.0, 1.0, 1.0))
    plane = make_slice_plane("z", 0.0)
    below = clip_triangle(t, plane, 0.0, keep=Side.BELOW)
    assert below == [tri((0.0, 0.0, 0.0), (1.0, 0.0, -1.0), (0.5, 0.5, 0.0))]
    above = clip_triangle(t, plane, 0.0, keep=Side.ABOVE)
    assert above == [tri((0.0, 0.0, 0.0), (0.5, 0.5, 0.0), (0.0, 1.0, 1.0))]


@pytest.mark.parametrize(
    "cur_side, next_side, expected",
    [
        (Side.BELOW, Side.ON, ["cur", "next"]),
        (Side.ABOVE, Side.ABOVE, []),
        (Side.ON, Side.ABOVE, ["cur"]),
        (Side.ABOVE, Side.ON, ["next"]),
        (Side.BELOW, Side.ABOVE, ["cur", "hit"]),
        (Side.ABOVE, Side.BELOW, ["hit", "next"]),
    ],
)
def test_clip_edge_case_analysis(cur_side: Side, next_side: Side, expected: list) -> None:
    plane = make_slice_plane("z", 0.0)
    cur = (0.0, 0.0, -1.0 if cur_side == Side.BELOW else (1.0 if cur_side == Side.ABOVE else 0.0))
    nxt = (2.0, 0.0, -1.0 if next_side == Side.BELOW else (1.0 if next_side == Side.ABOVE else 0.0))
    names = {"cur": cur, "next": nxt, "hit": (1.0, 0.0, 0.0)}
    assert clip_edge(cur, nxt, cur_side, next_side, Side.BELOW, plane) == [names[n] for n in expected]


def test_uniq_vertices_drops_adjacent_and_closing_duplicates() -> None:
    a, b, c = (0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 1.0, 0.0)
    assert uniq_vertices([a, a, b, b, c, a]) == [a, b, c]
    assert uniq_vertices([]) == []


def test_partition_puts_coincident_triangle_in_both_parts() -> None:
    t = tri((0.0, 0.0, 2.0), (1.0, 0.0, 2.0), (0.0, 1.0, 2.0))
    result = partition_mesh(Mesh(triangles=[t]), make_slice_plane("z", 2.0), 1e-6)
    assert result.below.triangles == [t]
    assert result.above.triangles == [t]


def test_partition_preserves_input_order() -> None:
    low1 = tri((0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 1.0, 0.0))
    high = tri((0.0, 0.0, 5.0), (1.0, 0.0, 5.0), (0.0, 1.0, 5.0))
    low2 = tri((0.0, 0.0, 1.0), (1.0, 0.0, 1.0), (0.0, 1.0, 1.0))
    result = partition_mesh(Mesh(triangles=[low1, high, low2]), make_slice_plane("z", 3.0), 0.0)
    assert result.below.triangles == [low1, low2]
    assert result.above.triangles == [high]


def test_clip_rejects_on_as_kept_side() -> None:
    t = tri((0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 1.0, 0.0))
    with pytest.raises(ValueError):
        clip_triangle(t, make_slice_plane("z", 0.0), 0.0, keep=Side.ON)

