"""
Geometry Predicates

Pure spatial predicates classifying grid coordinates. Each geometry
answers ``contains((x, y))`` for a single coordinate and ``mask(xs, ys)``
for whole coordinate arrays; both evaluate the same expression.
"""

import numpy as np


class Geometry:
    """Base class of the geometry variants."""

    def mask(self, xs, ys):
        """
        Boolean containment mask for coordinate arrays.

        Parameters
        ----------
        xs, ys : ndarray
            Coordinates to classify

        Returns
        -------
        mask : ndarray
            True where the coordinate lies inside the geometry
        """
        raise NotImplementedError

    def contains(self, coord):
        x, y = coord
        return bool(self.mask(np.asarray(x), np.asarray(y)))


class Circle(Geometry):
    """
    Disk with `center` (xc, yc) and `radius`.

    Points at exactly `radius` from the center are outside.
    """

    def __init__(self, center, radius):
        self.center = (float(center[0]), float(center[1]))
        self.radius = float(radius)

    @classmethod
    def in_channel(cls, width, height):
        """Obstacle placed like the classic channel benchmark: upstream, centered."""
        return cls((width / 2.0 - 0.2 * width, height / 2.0), 0.125 * height)

    def mask(self, xs, ys):
        xc, yc = self.center
        distance = np.sqrt((xc - xs)**2 + (yc - ys)**2)
        return distance - self.radius < 0.0

    def __repr__(self):
        return f"Circle(center={self.center}, radius={self.radius})"


class HalfPlane(Geometry):
    """
    Closed half-plane bounded by an axis-aligned line through `point`.

    Supported normals:
    - (1, 0): the columns x <= px
    - (0, 1): the rows y <= py
    - (0, -1): the rows y >= py

    Any other non-zero normal raises NotImplementedError when evaluated.
    """

    def __init__(self, normal, point):
        if normal[0] == 0 and normal[1] == 0:
            raise ValueError("half-plane normal must be non-zero")
        self.normal = (normal[0], normal[1])
        self.point = (point[0], point[1])

    def mask(self, xs, ys):
        px, py = self.point
        if self.normal == (1, 0):
            return xs <= px
        if self.normal == (0, 1):
            return ys <= py
        if self.normal == (0, -1):
            return ys >= py
        raise NotImplementedError(f"half-plane normal {self.normal} is not supported")

    def __repr__(self):
        return f"HalfPlane(normal={self.normal}, point={self.point})"

class Rectangle(Geometry):
    """
    Axis-aligned rectangle given by `center` and side `lengths`.

    Containment is not implemented; evaluating it raises
    NotImplementedError.
    """

    def __init__(self, center, lengths):
        self.center = (float(center[0]), float(center[1]))
        self.lengths = (float(lengths[0]), float(lengths[1]))

    def mask(self, xs, ys):
        raise NotImplementedError("Rectangle containment is not implemented")

    def __repr__(self):
        return f"Rectangle(center={self.center}, lengths={self.lengths})"
