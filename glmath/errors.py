# errors.py

"""
Exceptions raised by glmath.

Every error derives from :class:`GLMathError` and from the builtin exception
closest in meaning, so callers can catch either ``GLMathError`` or e.g.
``ZeroDivisionError``.
"""


class GLMathError(Exception):
    """Base class for all glmath errors."""


class SizeMismatchError(GLMathError, ValueError):
    """Operands (or a constructor buffer) do not have the required size."""


class IndexOutOfBoundsError(GLMathError, IndexError):
    """A component or (column, row) index lies outside the declared shape."""


class IncompatibleDimensionsError(GLMathError, ValueError):
    """Left operand columns do not match right operand rows in a product."""


class ResultSizeMismatchError(GLMathError, ValueError):
    """The receiver of a product or transpose has the wrong shape."""


class DivideByZeroError(GLMathError, ZeroDivisionError):
    """Division by an exact zero scalar."""


class NonSquareMatrixError(GLMathError, ValueError):
    """A square-only operation was requested on a non-square shape."""


class NotInvertibleError(GLMathError, ZeroDivisionError):
    """The determinant is exactly zero."""


class NonFiniteValueError(GLMathError, ValueError):
    """A rounding or integer conversion met NaN or infinity."""


class InvalidEpsilonError(GLMathError, ValueError):
    """A comparison tolerance was negative."""


class CannotInvertZeroError(GLMathError, ZeroDivisionError):
    """The zero quaternion has no inverse."""


class TransposeTypeError(GLMathError, TypeError):
    """A matrix class never declared which class its transpose produces."""
