# matrix3.py

import math

from glmath.errors import DivideByZeroError, NotInvertibleError
from glmath.kernels import det3, inv3, mat3_multiply
from glmath.matrix import Matrix, SquareMatrix
from glmath.vector import Vector2, Vector3


class Matrix3(SquareMatrix):
    """
    A 3x3 column-major matrix (GLSL ``mat3``).

    Doubles as a 2D affine transform: the third column holds the
    translation and points are ``(x, y, 1)``.
    """
    __slots__ = ()

    ROWS = 3
    COLUMNS = 3

    def __init__(self, *elements: float):
        super().__init__(*elements)

    def multiply_matrices(self, a: Matrix, b: Matrix) -> "Matrix3":
        if a.ROWS == a.COLUMNS == b.ROWS == b.COLUMNS == 3:
            mat3_multiply(a._elements, b._elements, self._elements)
            return self
        return super().multiply_matrices(a, b)

    def determinant(self) -> float:
        return float(det3(self._elements))

    def invert(self, *, inplace: bool = True) -> "Matrix3":
        target = self._target(inplace)
        if inv3(self._elements, target._elements) == 0.0:
            raise NotInvertibleError("Matrix3 is singular (determinant 0)")
        return target

    @staticmethod
    def get_inverse(m: "Matrix3") -> "Matrix3":
        """GLSL ``inverse(m)``: a new matrix, ``m`` is untouched."""
        return m.invert(inplace=False)

    #########
    # Transforms
    #

    def transform_point(self, v: Vector2) -> Vector2:
        """Transform ``(x, y, 1)`` and divide by the resulting ``w``."""
        self._check_vector_size(v, 2, "transform_point")
        e = self._elements
        x, y = v.elements.tolist()
        w = e[2] * x + e[5] * y + e[8]
        if w == 0.0:
            raise DivideByZeroError("transform_point: homogeneous w is 0")
        return Vector2((e[0] * x + e[3] * y + e[6]) / w,
                       (e[1] * x + e[4] * y + e[7]) / w)

    def transform_direction(self, v: Vector2) -> Vector2:
        """Apply the upper-left 2x2 only (no translation)."""
        self._check_vector_size(v, 2, "transform_direction")
        e = self._elements
        x, y = v.elements.tolist()
        return Vector2(e[0] * x + e[3] * y,
                       e[1] * x + e[4] * y)

    def transform_vector(self, v: Vector3) -> Vector3:
        self._check_vector_size(v, 3, "transform_vector")
        e = self._elements
        x, y, z = v.elements.tolist()
        return Vector3(e[0] * x + e[3] * y + e[6] * z,
                       e[1] * x + e[4] * y + e[7] * z,
                       e[2] * x + e[5] * y + e[8] * z)

    #########
    # Builders (each resets to identity first)
    #

    def make_translation(self, x: float, y: float) -> "Matrix3":
        self.make_identity()
        e = self._elements
        e[6] = x
        e[7] = y
        return self

    def make_rotation_z(self, theta: float) -> "Matrix3":
        """Counter-clockwise rotation of the xy plane by ``theta`` radians."""
        c = math.cos(theta)
        s = math.sin(theta)
        self.make_identity()
        e = self._elements
        e[0], e[1] = c, s
        e[3], e[4] = -s, c
        return self

    def make_scale(self, x: float, y: float) -> "Matrix3":
        self.make_identity()
        e = self._elements
        e[0] = x
        e[4] = y
        return self
