"""
Axis-aligned planes, point classification and edge intersection.

A :class:`SlicePlane` is restricted to the three principal orientations:
it stores the index of the axis it is orthogonal to and the offset along
that axis.  Points are classified against a plane with a tolerance band
of half-width ``eps`` so that vertices lying numerically on the plane
are treated as ON rather than being pushed to one side by rounding
noise.

The plane coordinates accepted by the commands follow the convention of
the command-line flags: at most one of ``x``, ``y`` and ``z`` may be
non-zero and selects the axis; when all are zero the XY plane at
``z = 0`` is used.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import IntEnum
from typing import Tuple

from ..config import PlaneOptions, debug_enabled
from ..errors import ClipInvariantError, InvalidPlaneError
from .geometry import Point

logger = logging.getLogger(__name__)

AXIS_NAMES = ("x", "y", "z")

# Name of the principal plane orthogonal to each axis.
PLANE_NAMES = ("yz", "xz", "xy")


class Side(IntEnum):
    """Position of a point relative to a plane."""

    BELOW = -1
    ON = 0
    ABOVE = 1

    @property
    def opposite(self) -> "Side":
        return Side(-self.value)


@dataclass(frozen=True)
class SlicePlane:
    """Immutable axis-aligned plane.

    Attributes:
        axis: Index of the axis orthogonal to the plane (0, 1 or 2).
        offset: Constant coordinate along ``axis``.  For example
            ``SlicePlane(axis=2, offset=0.5)`` contains every point with
            ``z = 0.5``.
    """

    axis: int
    offset: float

    @property
    def plane_type(self) -> str:
        return PLANE_NAMES[self.axis]

    @property
    def uv_axes(self) -> Tuple[int, int]:
        """The two in-plane axes forming the projected drawing frame."""
        return (self.axis + 1) % 3, (self.axis + 2) % 3


def make_slice_plane(axis: int | str, offset: float) -> SlicePlane:
    """Construct a :class:`SlicePlane` from an axis and an offset.

    Args:
        axis: Axis index or one of ``"x"``, ``"y"``, ``"z"`` (case
            insensitive).
        offset: Plane position along the axis.

    Raises:
        InvalidPlaneError: If the axis is not recognised.
    """
    if isinstance(axis, str):
        name = axis.strip().lower()
        if name not in AXIS_NAMES:
            raise InvalidPlaneError(f"Unknown axis {axis!r}. Must be one of x, y or z.")
        axis = AXIS_NAMES.index(name)
    if axis not in (0, 1, 2):
        raise InvalidPlaneError(f"Axis index must be 0, 1 or 2, got {axis}")
    plane = SlicePlane(axis=axis, offset=float(offset))
    if debug_enabled():
        logger.debug("SlicePlane created: plane_type=%s offset=%s", plane.plane_type, plane.offset)
    return plane


def plane_from_options(options: PlaneOptions) -> SlicePlane:
    """Select the cutting plane from the x/y/z coordinates of ``options``.

    Raises:
        InvalidPlaneError: If more than one coordinate is non-zero.
    """
    coords = (options.x, options.y, options.z)
    chosen = [i for i, v in enumerate(coords) if v != 0]
    if len(chosen) > 1:
        raise InvalidPlaneError(
            "More than one coord is specified: x: %f, y: %f, z: %f" % coords
        )
    if not chosen:
        return make_slice_plane(2, 0.0)
    return make_slice_plane(chosen[0], coords[chosen[0]])


def plane_epsilon(bbox_min: Point, bbox_max: Point, plane: SlicePlane, fraction: float) -> float:
    """Scale the mesh extent along the plane axis into a tolerance."""
    return (bbox_max[plane.axis] - bbox_min[plane.axis]) * fraction


def classify(p: Point, plane: SlicePlane, eps: float) -> Side:
    """Classify a point as BELOW, ON or ABOVE a plane.

    The ON band is closed: a coordinate exactly ``eps`` away from the
    offset is still ON.
    """
    c = p[plane.axis]
    if c < plane.offset - eps:
        return Side.BELOW
    if c > plane.offset + eps:
        return Side.ABOVE
    return Side.ON


def intersect_edge(p0: Point, p1: Point, plane: SlicePlane) -> Point:
    """Return the point where the segment ``p0 -> p1`` meets the plane.

    The caller guarantees that the endpoints were classified on opposite
    strict sides.  The interpolation parameter is measured from ``p0``,
    so the result depends on the edge direction only through rounding.

    Raises:
        ClipInvariantError: If the endpoints share the plane coordinate or
            the interpolated point is not finite.
    """
    a = plane.axis
    denom = p1[a] - p0[a]
    if denom == 0:
        raise ClipInvariantError(
            f"Edge {p0} -> {p1} is parallel to the {plane.plane_type} plane at {plane.offset}"
        )
    alpha = (plane.offset - p0[a]) / denom
    res = (
        p0[0] + alpha * (p1[0] - p0[0]),
        p0[1] + alpha * (p1[1] - p0[1]),
        p0[2] + alpha * (p1[2] - p0[2]),
    )
    if not all(math.isfinite(c) for c in res):
        raise ClipInvariantError(f"Non-finite intersection {res} for edge {p0} -> {p1}")
    return res


def project_point_to_plane_uv(p: Point, plane: SlicePlane) -> Tuple[float, float]:
    """Project a 3D point onto the 2D frame of the plane.

    The frame for a plane on axis ``i`` is ``((i + 1) % 3, (i + 2) % 3)``:
    an X cut keeps (y, z), a Y cut keeps (z, x) and a Z cut keeps (x, y).
    """
    u, v = plane.uv_axes
    return (p[u], p[v])
