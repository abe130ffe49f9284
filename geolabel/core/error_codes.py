"""
Structured error codes and the fatal error taxonomy for diagram renders.
Fatal errors abort the render; soft conditions are skipped by the callers.
Map keys to user-facing messages with user_message().
"""

from __future__ import annotations

# Known error keys (carried on DiagramError.error_key)
DEGENERATE_AXIS = "degenerate_axis"
INSUFFICIENT_POINTS = "insufficient_points"
MISSING_CORE_POINT = "missing_core_point"
INVALID_DIAGRAM = "invalid_diagram"
RUN_FAILED = "run_failed"

# User-facing messages (short, actionable)
USER_MESSAGES: dict[str, str] = {
    DEGENERATE_AXIS: "Reflection line has zero length. Give the line two distinct points.",
    INSUFFICIENT_POINTS: "A triangle needs at least three points.",
    MISSING_CORE_POINT: "One of the three triangle vertices is missing. Check the point list.",
    INVALID_DIAGRAM: "Diagram description is invalid. Check the field named in the error.",
    RUN_FAILED: "Run failed. Check the diagram description and inputs.",
}


def user_message(error_key: str | None, fallback: str = "Something went wrong.") -> str:
    """Return a user-facing message for the given error key."""
    if not error_key:
        return fallback
    return USER_MESSAGES.get(error_key, fallback)


class DiagramError(ValueError):
    """Base class for fatal diagram errors."""
    error_key: str = RUN_FAILED


class DegenerateAxisError(DiagramError):
    """Reflection line endpoints coincide."""
    error_key = DEGENERATE_AXIS


class InsufficientPointsError(DiagramError):
    """Fewer than three points for a triangle construction."""
    error_key = INSUFFICIENT_POINTS


class MissingCorePointError(DiagramError):
    """A core triangle vertex cannot be resolved."""
    error_key = MISSING_CORE_POINT


class InvalidDiagramError(DiagramError):
    """Description failed validation."""
    error_key = INVALID_DIAGRAM
