"""
Error Taxonomy for Geometry Operations.

Hard errors are raised. ``ToleranceTooLowError`` is soft: densification
returns it alongside a usable (if coarser than requested) result.
"""

from typing import Optional

import numpy as np

from geocommon.cancellation import OperationCancelledError


class GeodesyError(Exception):
    """Base class of all geometry errors."""


class InvalidArgumentError(GeodesyError, ValueError):
    """An argument is outside its valid domain."""


class InvalidToleranceError(InvalidArgumentError):
    """Densification tolerance is not a positive distance."""

    def __init__(self, tolerance: float):
        super().__init__(f"Invalid value for tolerance {tolerance} - must be positive")
        self.tolerance = tolerance


class InvalidGeometryError(InvalidArgumentError):
    """Geometry is structurally unusable (e.g. a ring with one point)."""


class InternalError(GeodesyError):
    """An internal invariant was violated."""


class ToleranceTooLowError(GeodesyError):
    """Some sub-segments are still above tolerance after densification.

    Raised by ``DensifyResult.raise_for_tolerance``; otherwise returned next
    to a usable result. A sub-segment fails when the recursion ceiling is
    reached, or when an iterative solver gives no converged solution for it.

    Attributes
    ----------
    failed_segments : int
        Number of sub-segments left above tolerance, unconverged ones
        included.
    worst_error : float
        Largest known remaining deviation in meters; NaN when every failed
        sub-segment is unconverged.
    unconverged_segments : int
        Number of sub-segments kept unsplit because their deviation is NaN.
    """

    def __init__(self, failed_segments: int = 1, worst_error: float = 0.0, unconverged_segments: int = 0):
        message = (
            f"Tolerance too low: {failed_segments} segment(s) above tolerance, "
            f"worst deviation {worst_error:.3f} m"
        )
        if unconverged_segments:
            message += f", {unconverged_segments} without a converged solution"
        super().__init__(message)
        self.failed_segments = failed_segments
        self.worst_error = worst_error
        self.unconverged_segments = unconverged_segments

    @classmethod
    def combine(
        cls,
        first: Optional['ToleranceTooLowError'],
        second: Optional['ToleranceTooLowError']
    ) -> Optional['ToleranceTooLowError']:
        """Union of two signals; either may be None.

        The worst error ignores NaN unless both sides are NaN.
        """
        if first is None:
            return second
        if second is None:
            return first
        return cls(
            first.failed_segments + second.failed_segments,
            float(np.fmax(first.worst_error, second.worst_error)),
            first.unconverged_segments + second.unconverged_segments
        )


__all__ = [
    "GeodesyError",
    "InvalidArgumentError",
    "InvalidToleranceError",
    "InvalidGeometryError",
    "InternalError",
    "ToleranceTooLowError",
    "OperationCancelledError",
]
