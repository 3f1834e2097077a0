"""
Exception hierarchy for the steel toolkit.

All errors raised deliberately by the services derive from
``SteelError`` so that the command-line front end and the HTTP routes
can report them uniformly.  Each subclass also derives from the closest
built-in exception so callers that only know about ``ValueError`` or
``OSError`` still catch them.
"""

from __future__ import annotations


class SteelError(Exception):
    """Base class for all steel errors."""


class StlFormatError(SteelError, ValueError):
    """The input stream is not a readable STL mesh."""


class InvalidPlaneError(SteelError, ValueError):
    """More than one plane coordinate was supplied."""


class ClipInvariantError(SteelError, RuntimeError):
    """The clipping engine produced a result that its own rules forbid.

    This signals a defect in classification or clipping, never bad input,
    and must not be swallowed.
    """


class OutputError(SteelError, OSError):
    """Writing or closing an output stream failed."""
