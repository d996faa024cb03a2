"""
glmath: vectors, matrices and quaternions laid out for OpenGL, backed by numpy float64 buffers
with numba-compiled kernels for the 3x3 and 4x4 fast paths.

Matrices are column-major, so ``to_flat_array(dtype=np.float32)`` can be uploaded with
``glUniformMatrix*fv(..., transpose=GL_FALSE, ...)`` directly.
"""

__version__ = version = "0.1.0"

# exposing the public API of the package
from glmath.errors import (
    CannotInvertZeroError,
    DivideByZeroError,
    GLMathError,
    IncompatibleDimensionsError,
    IndexOutOfBoundsError,
    InvalidEpsilonError,
    NonFiniteValueError,
    NonSquareMatrixError,
    NotInvertibleError,
    ResultSizeMismatchError,
    SizeMismatchError,
    TransposeTypeError,
)
from glmath.vector import Vector, Vector2, Vector3, Vector4
from glmath.matrix import Matrix, SquareMatrix
from glmath.matrix2 import Matrix2
from glmath.matrix3 import Matrix3
from glmath.matrix4 import Matrix4
from glmath.rectangular import (
    Matrix2x3,
    Matrix2x4,
    Matrix3x2,
    Matrix3x4,
    Matrix4x2,
    Matrix4x3,
)
from glmath.quaternion import Quaternion

__all__ = [
    "Vector",
    "Vector2",
    "Vector3",
    "Vector4",
    "Matrix",
    "SquareMatrix",
    "Matrix2",
    "Matrix3",
    "Matrix4",
    "Matrix2x3",
    "Matrix2x4",
    "Matrix3x2",
    "Matrix3x4",
    "Matrix4x2",
    "Matrix4x3",
    "Quaternion",
    "GLMathError",
    "SizeMismatchError",
    "IndexOutOfBoundsError",
    "IncompatibleDimensionsError",
    "ResultSizeMismatchError",
    "DivideByZeroError",
    "NonSquareMatrixError",
    "NotInvertibleError",
    "NonFiniteValueError",
    "InvalidEpsilonError",
    "CannotInvertZeroError",
    "TransposeTypeError",
]
