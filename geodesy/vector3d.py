"""
Three-Dimensional Vectors.

Used for n-vector style spherical computations (midpoints, rotations) and as
the base of ECEF ``Cartesian`` coordinates.
"""

from dataclasses import dataclass
from typing import Optional
import numpy as np
from numpy.typing import NDArray


@dataclass(frozen=True)
class Vector3D:
    """An immutable 3D vector.

    Attributes
    ----------
    x, y, z : float
        Components.
    """
    x: float
    y: float
    z: float

    @classmethod
    def from_array(cls, values: NDArray[np.float64]) -> 'Vector3D':
        return cls(float(values[0]), float(values[1]), float(values[2]))

    def to_array(self) -> NDArray[np.float64]:
        return np.array([self.x, self.y, self.z], dtype=np.float64)

    @property
    def length(self) -> float:
        return float(np.sqrt(self.x * self.x + self.y * self.y + self.z * self.z))

    def plus(self, other: 'Vector3D') -> 'Vector3D':
        return type(self)(self.x + other.x, self.y + other.y, self.z + other.z)

    def minus(self, other: 'Vector3D') -> 'Vector3D':
        return type(self)(self.x - other.x, self.y - other.y, self.z - other.z)

    def times(self, factor: float) -> 'Vector3D':
        return type(self)(self.x * factor, self.y * factor, self.z * factor)

    def divided_by(self, divisor: float) -> 'Vector3D':
        return type(self)(self.x / divisor, self.y / divisor, self.z / divisor)

    def dot(self, other: 'Vector3D') -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: 'Vector3D') -> 'Vector3D':
        return type(self)(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def negate(self) -> 'Vector3D':
        return type(self)(-self.x, -self.y, -self.z)

    def unit(self) -> 'Vector3D':
        """Normalise to length 1; zero and unit vectors are returned as is."""
        norm = self.length
        if norm == 1.0 or norm == 0.0:
            return self
        return self.divided_by(norm)

    def angle_to(self, other: 'Vector3D', n: Optional['Vector3D'] = None) -> float:
        """Angle to another vector in radians.

        Parameters
        ----------
        other : Vector3D
            Vector to measure the angle to.
        n : Vector3D, optional
            Plane normal. When given, the angle is signed: positive if
            ``other`` is clockwise looking along ``n``, negative otherwise.
            Without it the angle is always in [0, pi].

        Returns
        -------
        float
            Angle in radians, in [-pi, pi].
        """
        cross = self.cross(other)
        sign = 1.0
        if n is not None and cross.dot(n) < 0:
            sign = -1.0
        sin_theta = cross.length * sign
        cos_theta = self.dot(other)
        return float(np.arctan2(sin_theta, cos_theta))

    def rotate_around(self, axis: 'Vector3D', angle_deg: float) -> 'Vector3D':
        """Rotate the (normalised) vector around an axis.

        Parameters
        ----------
        axis : Vector3D
            Rotation axis.
        angle_deg : float
            Rotation angle in degrees, right-handed about ``axis``.

        Returns
        -------
        Vector3D
            Rotated unit vector.

        Notes
        -----
        Uses the axis-angle rotation matrix
        R = cos(θ) I + sin(θ) [a]x + (1 - cos(θ)) a aᵀ.
        """
        theta = np.radians(angle_deg)
        p = self.unit().to_array()
        a = axis.unit().to_array()

        s = np.sin(theta)
        c = np.cos(theta)
        skew = np.array([
            [0.0, -a[2], a[1]],
            [a[2], 0.0, -a[0]],
            [-a[1], a[0], 0.0],
        ])
        rotation = c * np.eye(3) + s * skew + (1.0 - c) * np.outer(a, a)

        return Vector3D.from_array(rotation @ p)

    __add__ = plus
    __sub__ = minus
    __mul__ = times
    __truediv__ = divided_by
    __neg__ = negate

    def __str__(self) -> str:
        return f"[{self.x:.3f},{self.y:.3f},{self.z:.3f}]"
