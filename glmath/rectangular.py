# rectangular.py

"""
Non-square matrices, named like GLSL: ``MatrixCxR`` has C columns and R rows.

Each pair declares the other as its transpose type once both exist, and each
class lists the classes of its products by column count.
"""

from glmath.matrix import Matrix
from glmath.matrix2 import Matrix2
from glmath.matrix3 import Matrix3
from glmath.matrix4 import Matrix4


class Matrix2x3(Matrix):
    """2 columns, 3 rows (GLSL ``mat2x3``)."""
    __slots__ = ()
    COLUMNS = 2
    ROWS = 3


class Matrix3x2(Matrix):
    """3 columns, 2 rows (GLSL ``mat3x2``)."""
    __slots__ = ()
    COLUMNS = 3
    ROWS = 2


class Matrix2x4(Matrix):
    """2 columns, 4 rows (GLSL ``mat2x4``)."""
    __slots__ = ()
    COLUMNS = 2
    ROWS = 4


class Matrix4x2(Matrix):
    """4 columns, 2 rows (GLSL ``mat4x2``)."""
    __slots__ = ()
    COLUMNS = 4
    ROWS = 2


class Matrix3x4(Matrix):
    """3 columns, 4 rows (GLSL ``mat3x4``)."""
    __slots__ = ()
    COLUMNS = 3
    ROWS = 4


class Matrix4x3(Matrix):
    """4 columns, 3 rows (GLSL ``mat4x3``)."""
    __slots__ = ()
    COLUMNS = 4
    ROWS = 3


Matrix2x3.TRANSPOSE_TYPE = Matrix3x2
Matrix3x2.TRANSPOSE_TYPE = Matrix2x3
Matrix2x4.TRANSPOSE_TYPE = Matrix4x2
Matrix4x2.TRANSPOSE_TYPE = Matrix2x4
Matrix3x4.TRANSPOSE_TYPE = Matrix4x3
Matrix4x3.TRANSPOSE_TYPE = Matrix3x4

_TWO_ROWS = {2: Matrix2, 3: Matrix3x2, 4: Matrix4x2}
_THREE_ROWS = {2: Matrix2x3, 3: Matrix3, 4: Matrix4x3}
_FOUR_ROWS = {2: Matrix2x4, 3: Matrix3x4, 4: Matrix4}

Matrix3x2.PRODUCT_TYPES = Matrix4x2.PRODUCT_TYPES = _TWO_ROWS
Matrix2x3.PRODUCT_TYPES = Matrix4x3.PRODUCT_TYPES = _THREE_ROWS
Matrix2x4.PRODUCT_TYPES = Matrix3x4.PRODUCT_TYPES = _FOUR_ROWS
