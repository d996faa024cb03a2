# matrix.py

"""
Column-major matrices of a fixed shape.

Every concrete matrix class declares ``ROWS`` and ``COLUMNS``. Element
(column c, row r) lives at ``elements[c * ROWS + r]``, which is the layout
OpenGL expects for ``glUniformMatrix*fv`` with ``transpose=GL_FALSE``.
"""

from typing import Dict, Iterator, Optional, Sequence, Type, TypeVar, Union

import numpy as np
from numpy import array as np_array
from numpy import asarray as np_asarray
from numpy import float64 as np_float64
from numpy import ndarray
from numpy import zeros as np_zeros

from glmath.base import IntegralConvertible
from glmath.constants import DEFAULT_EPSILON
from glmath.errors import (
    IncompatibleDimensionsError,
    IndexOutOfBoundsError,
    NonSquareMatrixError,
    NotInvertibleError,
    ResultSizeMismatchError,
    SizeMismatchError,
    TransposeTypeError,
)
from glmath.vector import Vector, Vector2, Vector3, Vector4

M = TypeVar("M", bound="Matrix")

_VECTOR_TYPES: Dict[int, Type[Vector]] = {2: Vector2, 3: Vector3, 4: Vector4}


class Matrix(IntegralConvertible):
    """
    A ``ROWS`` x ``COLUMNS`` matrix of float64 values in column-major order.

    Constructing with no arguments yields the identity (ones on the main
    diagonal of non-square shapes). Otherwise exactly ``ROWS * COLUMNS``
    values are expected, in column-major order.

    ``TRANSPOSE_TYPE`` names the class :meth:`transpose` instantiates.
    Square classes declare themselves automatically.
    """
    __slots__ = ()

    _KIND = "matrix"
    ROWS: Optional[int] = None
    COLUMNS: Optional[int] = None
    TRANSPOSE_TYPE: Optional[Type["Matrix"]] = None

    # column count -> class of a ``ROWS``-row product, for shapes ``@`` cannot
    # take from its operands
    PRODUCT_TYPES: Optional[Dict[int, Type["Matrix"]]] = None

    def __init__(self, *elements: float):
        cls = self.__class__
        if cls.ROWS is None or cls.COLUMNS is None:
            raise TypeError(f"{cls.__name__} does not declare ROWS and COLUMNS")
        size = cls.ROWS * cls.COLUMNS
        if not elements:
            self._elements = np_zeros(size, dtype=np_float64)
            self.make_identity()
            return
        buffer = np_array(elements, dtype=np_float64)
        if buffer.ndim != 1 or buffer.shape[0] != size:
            raise SizeMismatchError(
                f"{cls.__name__} expects {size} elements ({cls.ROWS} rows x {cls.COLUMNS} columns), "
                f"got {buffer.size}")
        self._elements = buffer

    @classmethod
    def transpose_type(cls) -> Type["Matrix"]:
        if cls.TRANSPOSE_TYPE is None:
            raise TransposeTypeError(f"{cls.__name__} does not declare a transpose type")
        return cls.TRANSPOSE_TYPE

    @classmethod
    def from_flat_array(cls: Type[M], array: Union[Sequence[float], ndarray], offset: int = 0) -> M:
        """Read ``ROWS * COLUMNS`` column-major values starting at ``offset``."""
        flat = np_asarray(array, dtype=np_float64).ravel()
        size = cls.ROWS * cls.COLUMNS
        if offset < 0 or offset + size > flat.shape[0]:
            raise SizeMismatchError(
                f"{cls.__name__}.from_flat_array: need {size} values from offset {offset}, "
                f"array has {flat.shape[0]}")
        return cls._from_unchecked(flat[offset:offset + size].copy())

    @classmethod
    def zero(cls: Type[M]) -> M:
        return cls._from_unchecked(np_zeros(cls.ROWS * cls.COLUMNS, dtype=np_float64))

    @classmethod
    def identity(cls: Type[M]) -> M:
        return cls.zero().make_identity()

    #########
    # Shape and element access
    #

    @property
    def rows(self) -> int:
        return self.ROWS

    @property
    def columns(self) -> int:
        return self.COLUMNS

    @property
    def size(self) -> int:
        return self._elements.shape[0]

    def _as_grid(self) -> ndarray:
        """A (rows, columns) view of the buffer."""
        return self._elements.reshape(self.COLUMNS, self.ROWS).T

    def _store_grid(self, grid: ndarray) -> None:
        self._elements[:] = grid.T.ravel()

    def _validate_position(self, col: int, row: int) -> None:
        if col < 0 or col >= self.COLUMNS or row < 0 or row >= self.ROWS:
            raise IndexOutOfBoundsError(
                f"Position (column {col}, row {row}) out of bounds for "
                f"{self.__class__.__name__} ({self.ROWS} rows x {self.COLUMNS} columns)")

    def _validate_same_shape(self, other: "Matrix") -> None:
        if self.ROWS != other.ROWS or self.COLUMNS != other.COLUMNS:
            raise SizeMismatchError(
                f"Matrices must have the same shape: {self.ROWS}x{self.COLUMNS} "
                f"and {other.ROWS}x{other.COLUMNS}")

    def get(self, col: int, row: int) -> float:
        self._validate_position(col, row)
        return float(self._elements[col * self.ROWS + row])

    def set(self: M, col: int, row: int, value: float) -> M:
        self._validate_position(col, row)
        self._elements[col * self.ROWS + row] = value
        return self

    def copy(self: M, other: "Matrix") -> M:
        """Overwrite this matrix's elements with ``other``'s."""
        self._validate_same_shape(other)
        self._elements[:] = other._elements
        return self

    def make_identity(self: M) -> M:
        e = self._elements
        e.fill(0.0)
        rows = self.ROWS
        for i in range(min(rows, self.COLUMNS)):
            e[i * rows + i] = 1.0
        return self

    #########
    # Arithmetic
    #

    def add(self: M, other: "Matrix", *, inplace: bool = True) -> M:
        self._validate_same_shape(other)
        target = self._target(inplace)
        target._elements += other._elements
        return target

    def subtract(self: M, other: "Matrix", *, inplace: bool = True) -> M:
        self._validate_same_shape(other)
        target = self._target(inplace)
        target._elements -= other._elements
        return target

    def _validate_product(self, a: "Matrix", b: "Matrix") -> None:
        if a.COLUMNS != b.ROWS:
            raise IncompatibleDimensionsError(
                f"Cannot multiply {a.ROWS}x{a.COLUMNS} by {b.ROWS}x{b.COLUMNS}: "
                f"left columns must equal right rows")
        if self.ROWS != a.ROWS or self.COLUMNS != b.COLUMNS:
            raise ResultSizeMismatchError(
                f"Product of {a.ROWS}x{a.COLUMNS} and {b.ROWS}x{b.COLUMNS} does not fit "
                f"a {self.ROWS}x{self.COLUMNS} {self.__class__.__name__}")

    def _product_type(self, other: "Matrix") -> Type["Matrix"]:
        """Class of ``self @ other``: an operand of the result shape, else ``PRODUCT_TYPES``."""
        if self.COLUMNS != other.ROWS:
            raise IncompatibleDimensionsError(
                f"Cannot multiply {self.ROWS}x{self.COLUMNS} by {other.ROWS}x{other.COLUMNS}: "
                f"left columns must equal right rows")
        if other.COLUMNS == self.COLUMNS:
            return self.__class__
        if other.ROWS == self.ROWS:
            return other.__class__
        result_type = (self.PRODUCT_TYPES or {}).get(other.COLUMNS)
        if result_type is None:
            raise ResultSizeMismatchError(
                f"{self.__class__.__name__} declares no product type with {self.ROWS} rows "
                f"and {other.COLUMNS} columns")
        return result_type

    def multiply_matrices(self: M, a: "Matrix", b: "Matrix") -> M:
        """
        Set this matrix to ``a @ b``.

        The product is built in a scratch buffer before it is stored, so the
        receiver may be ``a``, ``b`` or both.
        """
        self._validate_product(a, b)
        self._store_grid(a._as_grid() @ b._as_grid())
        return self

    def multiply(self: M, m: "Matrix", *, inplace: bool = True) -> M:
        """Post-multiply: ``self = self @ m``."""
        target = self._target(inplace)
        return target.multiply_matrices(self, m)

    def transpose(self, *, inplace: bool = False) -> "Matrix":
        """
        Return the transpose as a new instance of ``transpose_type()``.

        Only square matrices can be transposed in place.
        """
        if inplace:
            raise NonSquareMatrixError(
                f"{self.__class__.__name__} ({self.ROWS}x{self.COLUMNS}) cannot be transposed in place")
        result = self.transpose_type()._from_unchecked(self._as_grid().flatten())
        if result.ROWS != self.COLUMNS or result.COLUMNS != self.ROWS:
            raise ResultSizeMismatchError(
                f"Transpose of {self.ROWS}x{self.COLUMNS} produced a "
                f"{result.ROWS}x{result.COLUMNS} {result.__class__.__name__}")
        return result

    def _check_vector_size(self, v: Vector, size: int, method: str) -> None:
        if v.size != size:
            raise SizeMismatchError(
                f"{self.__class__.__name__}.{method} expects a vector of size {size}, "
                f"got {v.__class__.__name__} (size {v.size})")

    def transform(self, v: Vector) -> Vector:
        """``self @ v`` for a column vector with ``COLUMNS`` components."""
        self._check_vector_size(v, self.COLUMNS, "transform")
        vector_type = _VECTOR_TYPES.get(self.ROWS, Vector)
        return vector_type._from_unchecked(self._as_grid() @ v.elements)

    #########
    # Comparison
    #

    def equals(self, other: "Matrix") -> bool:
        """Exact element equality. NaN never equals anything."""
        if self.ROWS != other.ROWS or self.COLUMNS != other.COLUMNS:
            return False
        return bool(np.array_equal(self._elements, other._elements))

    def equals_epsilon(self, other: "Matrix", epsilon: float = DEFAULT_EPSILON) -> bool:
        if self.ROWS != other.ROWS or self.COLUMNS != other.COLUMNS:
            self._check_epsilon(epsilon)
            return False
        return self._equals_epsilon(other._elements, epsilon)

    #########
    # Dunder methods
    #

    def __len__(self) -> int:
        return self.size

    def __iter__(self) -> Iterator[float]:
        return iter(self._elements.tolist())

    def __add__(self: M, other: "Matrix") -> M:
        return self.add(other, inplace=False)

    def __sub__(self: M, other: "Matrix") -> M:
        return self.subtract(other, inplace=False)

    def __mul__(self: M, scalar: float) -> M:
        return self.multiply_scalar(scalar, inplace=False)

    __rmul__ = __mul__

    def __neg__(self: M) -> M:
        return self.multiply_scalar(-1.0, inplace=False)

    def __matmul__(self, other):
        if isinstance(other, Vector):
            return self.transform(other)
        if not isinstance(other, Matrix):
            return NotImplemented
        return self._product_type(other).zero().multiply_matrices(self, other)

    def __eq__(self, other) -> bool:
        return isinstance(other, Matrix) and self.equals(other)

    __hash__ = None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({', '.join(repr(e) for e in self._elements.tolist())})"

    def __str__(self) -> str:
        return f"{self.__class__.__name__}(\n{self._as_grid()}\n)"


def _cofactor_determinant(grid: ndarray) -> float:
    n = grid.shape[0]
    if n == 0:
        return 1.0
    if n == 1:
        return float(grid[0, 0])
    if n == 2:
        return float(grid[0, 0] * grid[1, 1] - grid[0, 1] * grid[1, 0])
    minors = grid[1:]
    total = 0.0
    for col in range(n):
        minor = np.delete(minors, col, axis=1)
        sign = -1.0 if col % 2 else 1.0
        total += sign * float(grid[0, col]) * _cofactor_determinant(minor)
    return total


class SquareMatrix(Matrix):
    """
    Matrix with ``ROWS == COLUMNS``.

    :meth:`determinant` and :meth:`invert` here are reference
    implementations: cofactor expansion is O(n!). ``Matrix2``, ``Matrix3``
    and ``Matrix4`` override them with closed forms.
    """
    __slots__ = ()

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        if "TRANSPOSE_TYPE" not in cls.__dict__:
            cls.TRANSPOSE_TYPE = cls

    @property
    def dimension(self) -> int:
        if self.ROWS != self.COLUMNS:
            raise NonSquareMatrixError(
                f"{self.__class__.__name__} is {self.ROWS}x{self.COLUMNS}, not square")
        return self.ROWS

    def trace(self) -> float:
        n = self.dimension
        return float(self._elements[::n + 1].sum())

    def determinant(self) -> float:
        if self.dimension == 0:
            return 1.0
        return _cofactor_determinant(self._as_grid())

    def invert(self: M, *, inplace: bool = True) -> M:
        """
        Replace with the inverse (adjugate divided by the determinant).

        Raises:
            NotInvertibleError: if the determinant is exactly zero.
        """
        n = self.dimension
        grid = self._as_grid()
        det = _cofactor_determinant(grid)
        if det == 0.0:
            raise NotInvertibleError(f"{self.__class__.__name__} is singular (determinant 0)")
        cofactors = np.empty((n, n), dtype=np_float64)
        for row in range(n):
            without_row = np.delete(grid, row, axis=0)
            for col in range(n):
                sign = -1.0 if (row + col) % 2 else 1.0
                cofactors[row, col] = sign * _cofactor_determinant(np.delete(without_row, col, axis=1))
        target = self._target(inplace)
        target._store_grid(cofactors.T / det)
        return target

    def transpose(self, *, inplace: bool = False) -> "Matrix":
        if not inplace:
            return super().transpose()
        n = self.dimension
        e = self._elements
        e[:] = e.reshape(n, n).T.flatten()
        return self
