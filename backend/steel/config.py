"""
Configuration for the steel toolkit.

Tolerances and output units are module-level constants.  Per-command
options (the plane coordinates and the verbosity flag) travel in an
explicit :class:`PlaneOptions` value that is passed into the services;
nothing here is mutated at runtime.

Debug tracing of per-triangle decisions is enabled by setting the
``STEEL_DEBUG`` environment variable, mirroring how the slicing helpers
check it with ``os.getenv`` at call time.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

# Fraction of the bounding-box extent along the cutting axis used as the
# half-width of the ON band.
SLICE_THRESHOLD: float = 0.001
CUT_THRESHOLD: float = 0.0001

# Input meshes are treated as millimetres; SVG drawings use hundredths
# of a millimetre.
SVG_UNITS_PER_MM: int = 100

# Fill and stroke applied to the single SVG group holding all paths.
SVG_FILL: str = "gray"
SVG_STROKE: str = "black"
SVG_STROKE_WIDTH: int = 10

# Solid name written to STL output when the mesh carries none.
STL_DEFAULT_SOLID_NAME: str = "steel"


def debug_enabled() -> bool:
    """Return ``True`` when ``STEEL_DEBUG`` is set to a truthy value."""
    return os.getenv("STEEL_DEBUG", "").strip().lower() not in {"", "0", "false", "no"}


@dataclass(frozen=True)
class PlaneOptions:
    """Plane selection and output flags for the slice and cut commands.

    Attributes:
        x: Offset of a YZ cutting plane, or ``0.0`` when unused.
        y: Offset of an XZ cutting plane, or ``0.0`` when unused.
        z: Offset of an XY cutting plane, or ``0.0`` when unused.
        verbose: Annotate skipped triangles and single-point contacts in
            the SVG output.
    """

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    verbose: bool = False
