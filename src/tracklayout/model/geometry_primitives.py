"""
Geometric Primitives for the track layout.

World space is a right-handed XY plane in centimeters with Y pointing up.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Union, TYPE_CHECKING
import math

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt


@dataclass(frozen=True)
class Vector:
    """
    A vector in the plane representing direction and magnitude.
    """
    x: float
    y: float

    def __add__(self, other: Vector) -> Vector:
        return Vector(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vector) -> Vector:
        return Vector(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> Vector:
        return Vector(self.x * scalar, self.y * scalar)

    def __neg__(self) -> Vector:
        return Vector(-self.x, -self.y)

    @property
    def magnitude(self) -> float:
        return math.hypot(self.x, self.y)

    def dot(self, other: Vector) -> float:
        return self.x * other.x + self.y * other.y

    def rotate(self, angle_rad: float) -> Vector:
        """Rotate vector counter-clockwise around the origin."""
        cos_a = math.cos(angle_rad)
        sin_a = math.sin(angle_rad)
        return Vector(
            self.x * cos_a - self.y * sin_a,
            self.x * sin_a + self.y * cos_a,
        )

    @staticmethod
    def from_angle(angle_rad: float, length: float = 1.0) -> Vector:
        return Vector(length * math.cos(angle_rad), length * math.sin(angle_rad))

    def to_array(self) -> npt.NDArray[np.float64]:
        return np.array([self.x, self.y])


@dataclass(frozen=True)
class Point:
    """A location in world space (cm)."""
    x: float
    y: float

    def __add__(self, other: Vector) -> Point:
        # Point + Vector = Point (Translation)
        if isinstance(other, Vector):
            return Point(self.x + other.x, self.y + other.y)
        raise TypeError("Can only add a Vector to a Point.")

    def __sub__(self, other: Union[Vector, Point]) -> Union[Vector, Point]:
        # Point - Point = Vector (Direction)
        if isinstance(other, Point):
            return Vector(self.x - other.x, self.y - other.y)
        # Point - Vector = Point (Inverse translation)
        if isinstance(other, Vector):
            return Point(self.x - other.x, self.y - other.y)
        raise TypeError("Can only subtract a Vector or Point from a Point.")

    def distance_to(self, other: Point) -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def to_array(self) -> npt.NDArray[np.float64]:
        return np.array([self.x, self.y])

    @staticmethod
    def from_array(values: npt.ArrayLike) -> Point:
        x, y = np.asarray(values, dtype=float)[:2]
        return Point(float(x), float(y))


ORIGIN = Point(0.0, 0.0)


@dataclass(frozen=True)
class StraightFootprint:
    """
    Rectangle covered by a straight piece: the centerline from `start` to
    `end`, widened by `width` symmetrically.
    """
    start: Point
    end: Point
    width: float

    @property
    def length(self) -> float:
        return self.start.distance_to(self.end)

    def corners(self) -> npt.NDArray[np.float64]:
        """The four corners, counter-clockwise, as an (4, 2) array."""
        direction = self.end - self.start
        length = direction.magnitude
        if length == 0.0:
            # Zero-length straight: collapse to the start point
            return np.repeat(self.start.to_array()[None, :], 4, axis=0)

        half = self.width / 2.0
        normal = Vector(-direction.y / length, direction.x / length) * half
        return np.array([
            (self.start - normal).to_array(),
            (self.end - normal).to_array(),
            (self.end + normal).to_array(),
            (self.start + normal).to_array(),
        ])

    def outline(self, n_segments: int = 4) -> npt.NDArray[np.float64]:
        """Closed polyline of the rectangle (the segment count is fixed)."""
        pts = self.corners()
        return np.vstack((pts, pts[0]))

    def contains(self, point: Point, eps: float = 1e-9) -> bool:
        direction = self.end - self.start
        length = direction.magnitude
        offset = point - self.start
        if length == 0.0:
            return offset.magnitude <= self.width / 2.0 + eps

        along = offset.dot(direction) / length
        across = abs(offset.x * direction.y - offset.y * direction.x) / length
        return -eps <= along <= length + eps and across <= self.width / 2.0 + eps


@dataclass(frozen=True)
class SectorFootprint:
    """
    Annular sector covered by a curve piece.

    The sector sweeps `sweep_deg` (signed, positive = counter-clockwise)
    starting at polar angle `start_deg` measured from `center`.
    """
    center: Point
    inner_radius: float
    outer_radius: float
    start_deg: float
    sweep_deg: float

    @property
    def area(self) -> float:
        return 0.5 * math.radians(abs(self.sweep_deg)) * (self.outer_radius ** 2 - self.inner_radius ** 2)

    def outline(self, n_segments: int = 32) -> npt.NDArray[np.float64]:
        """
        Discretize the sector boundary into a closed (N, 2) polyline:
        outer arc forward, inner arc backward.
        """
        n = max(2, n_segments)
        start = math.radians(self.start_deg)
        theta = np.linspace(start, start + math.radians(self.sweep_deg), n)
        cx, cy = self.center.x, self.center.y
        outer = np.c_[cx + self.outer_radius * np.cos(theta), cy + self.outer_radius * np.sin(theta)]
        inner = np.c_[cx + self.inner_radius * np.cos(theta), cy + self.inner_radius * np.sin(theta)][::-1]
        pts = np.vstack((outer, inner))
        return np.vstack((pts, pts[0]))

    def contains(self, point: Point, eps: float = 1e-9) -> bool:
        offset = point - self.center
        distance = offset.magnitude
        if distance < self.inner_radius - eps or distance > self.outer_radius + eps:
            return False
        if distance == 0.0:
            return self.inner_radius <= eps

        # Angle of the point relative to the sector start, in the sweep direction
        angle = math.degrees(math.atan2(offset.y, offset.x)) - self.start_deg
        if self.sweep_deg < 0:
            angle = -angle
        angle %= 360.0
        return angle <= abs(self.sweep_deg) + eps or abs(self.sweep_deg) >= 360.0


Footprint = Union[StraightFootprint, SectorFootprint]
