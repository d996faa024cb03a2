# matrix2.py

import math

from glmath.errors import NotInvertibleError
from glmath.kernels import det2, inv2
from glmath.matrix import SquareMatrix
from glmath.vector import Vector2


class Matrix2(SquareMatrix):
    """A 2x2 column-major matrix (GLSL ``mat2``)."""
    __slots__ = ()

    ROWS = 2
    COLUMNS = 2

    def __init__(self, *elements: float):
        super().__init__(*elements)

    def determinant(self) -> float:
        return float(det2(self._elements))

    def invert(self, *, inplace: bool = True) -> "Matrix2":
        target = self._target(inplace)
        if inv2(self._elements, target._elements) == 0.0:
            raise NotInvertibleError("Matrix2 is singular (determinant 0)")
        return target

    @staticmethod
    def get_inverse(m: "Matrix2") -> "Matrix2":
        """GLSL ``inverse(m)``: a new matrix, ``m`` is untouched."""
        return m.invert(inplace=False)

    def transform_vector(self, v: Vector2) -> Vector2:
        self._check_vector_size(v, 2, "transform_vector")
        e = self._elements
        x, y = v.elements.tolist()
        return Vector2(e[0] * x + e[2] * y,
                       e[1] * x + e[3] * y)

    def make_rotation(self, theta: float) -> "Matrix2":
        """Counter-clockwise rotation by ``theta`` radians."""
        c = math.cos(theta)
        s = math.sin(theta)
        e = self._elements
        e[0], e[1] = c, s
        e[2], e[3] = -s, c
        return self

    def make_scale(self, x: float, y: float) -> "Matrix2":
        self.make_identity()
        e = self._elements
        e[0] = x
        e[3] = y
        return self
