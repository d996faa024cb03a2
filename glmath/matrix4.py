# matrix4.py

"""
The 4x4 matrix used for model, view and projection transforms.

Products, determinants and inverses go through the unrolled kernels in
:mod:`glmath.kernels`; the generic paths of :class:`SquareMatrix` are only
used when the other operand of a product is not 4x4.
"""

import math

from glmath.errors import DivideByZeroError, NotInvertibleError
from glmath.kernels import det4, inv4, mat4_multiply
from glmath.matrix import Matrix, SquareMatrix
from glmath.vector import Vector3, Vector4


class Matrix4(SquareMatrix):
    """
    A 4x4 column-major matrix (GLSL ``mat4``).

    Rotation builders follow the right-handed, column-vector convention:
    a positive angle turns counter-clockwise when looking down the axis
    toward the origin, and ``m @ v`` applies ``m`` to ``v``.
    """
    __slots__ = ()

    ROWS = 4
    COLUMNS = 4

    def __init__(self, *elements: float):
        super().__init__(*elements)

    def multiply_matrices(self, a: Matrix, b: Matrix) -> "Matrix4":
        if a.ROWS == a.COLUMNS == b.ROWS == b.COLUMNS == 4:
            mat4_multiply(a._elements, b._elements, self._elements)
            return self
        return super().multiply_matrices(a, b)

    def determinant(self) -> float:
        return float(det4(self._elements))

    def invert(self, *, inplace: bool = True) -> "Matrix4":
        """
        Replace with the inverse.

        Raises:
            NotInvertibleError: if the determinant is exactly zero. The
                matrix is left unchanged.
        """
        target = self._target(inplace)
        if inv4(self._elements, target._elements) == 0.0:
            raise NotInvertibleError("Matrix4 is singular (determinant 0)")
        return target

    @staticmethod
    def get_inverse(m: "Matrix4") -> "Matrix4":
        """GLSL ``inverse(m)``: a new matrix, ``m`` is untouched."""
        return m.invert(inplace=False)

    #########
    # Transforms
    #

    def transform_point(self, v: Vector3) -> Vector3:
        """
        Transform ``(x, y, z, 1)`` and apply the perspective divide.

        Raises:
            DivideByZeroError: if the transformed ``w`` is exactly 0 (the
                point lies on the camera plane of a projection).
        """
        self._check_vector_size(v, 3, "transform_point")
        e = self._elements
        x, y, z = v.elements.tolist()
        w = e[3] * x + e[7] * y + e[11] * z + e[15]
        if w == 0.0:
            raise DivideByZeroError("transform_point: homogeneous w is 0")
        return Vector3((e[0] * x + e[4] * y + e[8] * z + e[12]) / w,
                       (e[1] * x + e[5] * y + e[9] * z + e[13]) / w,
                       (e[2] * x + e[6] * y + e[10] * z + e[14]) / w)

    def transform_direction(self, v: Vector3) -> Vector3:
        """
        Apply the upper-left 3x3 only (no translation, no divide).

        Not suitable for normals under non-uniform scale; use the inverse
        transpose for those.
        """
        self._check_vector_size(v, 3, "transform_direction")
        e = self._elements
        x, y, z = v.elements.tolist()
        return Vector3(e[0] * x + e[4] * y + e[8] * z,
                       e[1] * x + e[5] * y + e[9] * z,
                       e[2] * x + e[6] * y + e[10] * z)

    def transform_vector(self, v: Vector4) -> Vector4:
        self._check_vector_size(v, 4, "transform_vector")
        return Vector4._from_unchecked(self._as_grid() @ v.elements)

    def get_translation(self) -> Vector3:
        return Vector3._from_unchecked(self._elements[12:15].copy())

    #########
    # Builders (each resets to identity first)
    #

    def make_translation(self, x: float, y: float, z: float) -> "Matrix4":
        self.make_identity()
        e = self._elements
        e[12] = x
        e[13] = y
        e[14] = z
        return self

    def make_rotation_x(self, theta: float) -> "Matrix4":
        c = math.cos(theta)
        s = math.sin(theta)
        self.make_identity()
        e = self._elements
        e[5], e[6] = c, s
        e[9], e[10] = -s, c
        return self

    def make_rotation_y(self, theta: float) -> "Matrix4":
        c = math.cos(theta)
        s = math.sin(theta)
        self.make_identity()
        e = self._elements
        e[0], e[2] = c, -s
        e[8], e[10] = s, c
        return self

    def make_rotation_z(self, theta: float) -> "Matrix4":
        c = math.cos(theta)
        s = math.sin(theta)
        self.make_identity()
        e = self._elements
        e[0], e[1] = c, s
        e[4], e[5] = -s, c
        return self

    def make_scale(self, x: float, y: float, z: float) -> "Matrix4":
        self.make_identity()
        e = self._elements
        e[0] = x
        e[5] = y
        e[10] = z
        return self
