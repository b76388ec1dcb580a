"""Three component vector type used for points, directions and colors.

Vec3 is an immutable value type with the arithmetic a ray tracer needs:
addition, scaling, componentwise products (used to attenuate colors),
dot and cross products, and axis indexing for the BVH and slab tests.

Example:
    >>> a = Vec3(1.0, 2.0, 3.0)
    >>> b = Vec3(0.5, 0.5, 0.5)
    >>> a + b
    Vec3(1.5, 2.5, 3.5)
    >>> a * b  # componentwise
    Vec3(0.5, 1.0, 1.5)
    >>> a.dot(b)
    3.0
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Iterator


class Vec3:
    """An immutable 3D vector of floats.

    Attributes:
        x: First component.
        y: Second component.
        z: Third component.
    """

    __slots__ = ("x", "y", "z")

    def __init__(self, x: float = 0.0, y: float = 0.0, z: float = 0.0) -> None:
        self.x = float(x)
        self.y = float(y)
        self.z = float(z)

    @classmethod
    def from_iterable(cls, values: Iterable[float]) -> Vec3:
        """Build a vector from exactly three numbers.

        Raises:
            ValueError: If the iterable does not hold three values.
        """
        items = list(values)
        if len(items) != 3:
            raise ValueError(f"Expected 3 components, got {len(items)}: {items!r}")
        return cls(items[0], items[1], items[2])

    @classmethod
    def axis(cls, index: int) -> Vec3:
        """Unit vector along axis 0 (x), 1 (y) or 2 (z)."""
        return (cls(1.0, 0.0, 0.0), cls(0.0, 1.0, 0.0), cls(0.0, 0.0, 1.0))[index]

    # -------------------------------------------------------------------------
    # Arithmetic
    # -------------------------------------------------------------------------

    def __add__(self, other: Vec3) -> Vec3:
        return Vec3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vec3) -> Vec3:
        return Vec3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __neg__(self) -> Vec3:
        return Vec3(-self.x, -self.y, -self.z)

    def __mul__(self, other: Vec3 | float) -> Vec3:
        if isinstance(other, Vec3):
            return Vec3(self.x * other.x, self.y * other.y, self.z * other.z)
        return Vec3(self.x * other, self.y * other, self.z * other)

    def __rmul__(self, other: float) -> Vec3:
        return Vec3(self.x * other, self.y * other, self.z * other)

    def __truediv__(self, scalar: float) -> Vec3:
        inv = 1.0 / scalar
        return Vec3(self.x * inv, self.y * inv, self.z * inv)

    # -------------------------------------------------------------------------
    # Container protocol
    # -------------------------------------------------------------------------

    def __getitem__(self, index: int) -> float:
        if index == 0:
            return self.x
        if index == 1:
            return self.y
        if index == 2:
            return self.z
        raise IndexError(f"Vec3 index out of range: {index}")

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def __len__(self) -> int:
        return 3

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vec3):
            return NotImplemented
        return self.x == other.x and self.y == other.y and self.z == other.z

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Vec3({self.x!r}, {self.y!r}, {self.z!r})"

    # -------------------------------------------------------------------------
    # Geometry
    # -------------------------------------------------------------------------

    def dot(self, other: Vec3) -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Vec3) -> Vec3:
        return Vec3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def length_squared(self) -> float:
        return self.x * self.x + self.y * self.y + self.z * self.z

    def length(self) -> float:
        return math.sqrt(self.length_squared())

    def normalized(self) -> Vec3:
        """Return the unit vector in the same direction.

        A zero vector is returned unchanged rather than producing NaNs.
        """
        length = self.length()
        if length == 0.0:
            return Vec3(0.0, 0.0, 0.0)
        return self / length

    def near_zero(self, eps: float = 1e-8) -> bool:
        return abs(self.x) < eps and abs(self.y) < eps and abs(self.z) < eps

    def is_nan(self) -> bool:
        return math.isnan(self.x) or math.isnan(self.y) or math.isnan(self.z)

    def min(self, other: Vec3) -> Vec3:
        """Componentwise minimum."""
        return Vec3(min(self.x, other.x), min(self.y, other.y), min(self.z, other.z))

    def max(self, other: Vec3) -> Vec3:
        """Componentwise maximum."""
        return Vec3(max(self.x, other.x), max(self.y, other.y), max(self.z, other.z))

    def to_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)


# Colors share the vector type; channels are (r, g, b) = (x, y, z).
Color = Vec3

BLACK = Vec3(0.0, 0.0, 0.0)
WHITE = Vec3(1.0, 1.0, 1.0)
