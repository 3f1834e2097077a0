"""
SVG rendering of slice drawings.

The document is sized in millimetres and uses a viewBox in hundredths of
a millimetre.  Every coordinate is offset by the bounding-box minimum of
the projected axes, so the drawing origin sits on the mesh's minimum
corner.  Outlines of coincident triangles are drawn as filled paths and
crossing segments as stroked lines, all inside a single group.
"""

from __future__ import annotations

from typing import BinaryIO, List

from ..config import SVG_FILL, SVG_STROKE, SVG_STROKE_WIDTH, SVG_UNITS_PER_MM
from .geometry import Point, Triangle
from .planes import Side, project_point_to_plane_uv
from .slicing import SkippedTriangle, SliceDrawing, SliceOutline, SliceSegment, TouchPoint

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8" standalone="no"?>'
SVG_DOCTYPE = (
    '<!DOCTYPE svg PUBLIC "-//W3C//DTD SVG 1.1//EN" '
    '"http://www.w3.org/Graphics/SVG/1.1/DTD/svg11.dtd">'
)


def to_units(v: float) -> int:
    """Convert millimetres to drawing units, truncating toward zero."""
    return int(v * SVG_UNITS_PER_MM)


def _fmt_point(p: Point) -> str:
    return "[%g %g %g]" % p


def _fmt_triangle(tr: Triangle) -> str:
    return "[%s]" % " ".join(_fmt_point(p) for p in tr.vertices)


class SvgCanvas:
    """Maps 3D points on the slice plane to integer drawing coordinates."""

    def __init__(self, drawing: SliceDrawing) -> None:
        self.plane = drawing.plane
        self.min_u, self.min_v = project_point_to_plane_uv(drawing.bbox_min, self.plane)
        max_u, max_v = project_point_to_plane_uv(drawing.bbox_max, self.plane)
        self.width = to_units(max_u - self.min_u)
        self.height = to_units(max_v - self.min_v)

    def xy(self, p: Point) -> str:
        u, v = project_point_to_plane_uv(p, self.plane)
        return "%d,%d" % (to_units(u - self.min_u), to_units(v - self.min_v))


def render_svg_lines(drawing: SliceDrawing, verbose: bool = False) -> List[str]:
    """Render a slice drawing as a list of SVG lines.

    Args:
        drawing: Primitives produced by :func:`slice_mesh`.
        verbose: Emit XML comments for skipped triangles and triangles
            that only touch the plane at a point.
    """
    canvas = SvgCanvas(drawing)
    w, h = canvas.width, canvas.height
    lines = [
        XML_DECLARATION,
        SVG_DOCTYPE,
        '<svg width="%fmm" height="%fmm" version="1.1" viewBox="0 0 %d %d" '
        'xmlns="http://www.w3.org/2000/svg">' % (w / SVG_UNITS_PER_MM, h / SVG_UNITS_PER_MM, w, h),
        '<g fill="%s" stroke="%s" stroke-width="%d">' % (SVG_FILL, SVG_STROKE, SVG_STROKE_WIDTH),
    ]
    for prim in drawing.primitives:
        if isinstance(prim, SliceOutline):
            a, b, c = (canvas.xy(p) for p in prim.points)
            lines.append('<path d="M%s L%s L%s L%s"/>' % (a, b, c, a))
        elif isinstance(prim, SliceSegment):
            lines.append("<path d='M%s L%s' />" % (canvas.xy(prim.p1), canvas.xy(prim.p2)))
        elif not verbose:
            continue
        elif isinstance(prim, SkippedTriangle):
            where = "below" if prim.side == Side.BELOW else "above"
            lines.append("<!-- skip a triangle; it's %s: %s -->" % (where, _fmt_triangle(prim.triangle)))
        elif isinstance(prim, TouchPoint):
            lines.append(
                "<!-- it's just a dot: normal %s %s -->"
                % (_fmt_point(prim.triangle.normal), _fmt_triangle(prim.triangle))
            )
    lines.append("</g>")
    lines.append("</svg>")
    return lines


def write_svg(stream: BinaryIO, drawing: SliceDrawing, verbose: bool = False) -> None:
    """Write a slice drawing as a UTF-8 encoded SVG document."""
    stream.write(("\n".join(render_svg_lines(drawing, verbose=verbose)) + "\n").encode("utf-8"))
