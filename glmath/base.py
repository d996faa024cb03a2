# base.py

"""
Shared storage for every glmath value type.

A value owns exactly one flat float64 numpy array. Nothing here knows about
shapes; vectors, matrices and quaternions layer their own validation on top.
"""

from typing import List, Type, TypeVar
import math

import numpy as np
from numpy import float64 as np_float64
from numpy import ndarray

from glmath.errors import InvalidEpsilonError, NonFiniteValueError, SizeMismatchError

B = TypeVar("B", bound="FloatBuffer")


class FloatBuffer:
    """A value type backed by one exclusively owned float64 array."""
    __slots__ = ("_elements",)

    # used in error messages ("vector", "matrix", ...)
    _KIND = "value"

    @classmethod
    def _from_unchecked(cls: Type[B], elements: ndarray) -> B:
        """Wrap a float64 array without validation. The array is not copied."""
        instance = object.__new__(cls)
        instance._elements = elements
        return instance

    @property
    def elements(self) -> ndarray:
        """The backing float64 array (not a copy)."""
        return self._elements

    def clone(self: B) -> B:
        return self._from_unchecked(self._elements.copy())

    def _target(self: B, inplace: bool) -> B:
        return self if inplace else self.clone()

    def multiply_scalar(self: B, scalar: float, *, inplace: bool = True) -> B:
        target = self._target(inplace)
        target._elements *= scalar
        return target

    @staticmethod
    def _check_epsilon(epsilon: float) -> None:
        if epsilon < 0:
            raise InvalidEpsilonError(
                f"equals_epsilon: epsilon must be non-negative, got {epsilon}")

    def _equals_epsilon(self, other_elements: ndarray, epsilon: float) -> bool:
        self._check_epsilon(epsilon)
        a = self._elements
        if np.isnan(a).any() or np.isnan(other_elements).any():
            return False
        return bool(np.all(np.abs(a - other_elements) <= epsilon))

    #########
    # Flat-array export
    #

    def to_list(self) -> List[float]:
        return self._elements.tolist()

    def to_flat_array(self, dtype=np_float64) -> ndarray:
        """A copy of the flat buffer, e.g. ``dtype=np.float32`` for upload."""
        return self._elements.astype(dtype)

    def write_to(self, out, offset: int = 0):
        """
        Write the flat buffer into ``out`` starting at ``offset``.

        Returns:
            ``out``, so packed buffers can be filled in one expression.
        """
        size = self._elements.shape[0]
        if offset < 0 or offset + size > len(out):
            raise SizeMismatchError(
                f"write_to: {size} values at offset {offset} do not fit in {len(out)}")
        for i, value in enumerate(self._elements.tolist()):
            out[offset + i] = value
        return out

    #########
    # Dunder methods
    #

    __hash__ = None

    def __copy__(self: B) -> B:
        return self.clone()

    def __deepcopy__(self: B, memo) -> B:
        return self.clone()

    def __reduce__(self):
        return (self.__class__, tuple(self._elements.tolist()))


class IntegralConvertible(FloatBuffer):
    """
    Element-wise rounding and clamping for integer uniform upload.

    Every conversion refuses to run on NaN or infinite elements.
    """
    __slots__ = ()

    def is_finite(self) -> bool:
        return bool(np.isfinite(self._elements).all())

    def is_integer(self) -> bool:
        e = self._elements
        return self.is_finite() and bool(np.all(e == np.floor(e)))

    def is_unsigned_integer(self) -> bool:
        return self.is_integer() and bool(np.all(self._elements >= 0))

    def _validate_finite(self, method_name: str) -> None:
        if not self.is_finite():
            bad = [str(e) for e in self._elements.tolist() if not math.isfinite(e)]
            raise NonFiniteValueError(
                f"{method_name}(): {self._KIND} contains non-finite values ({', '.join(bad)})")

    def truncate(self: B, *, inplace: bool = True) -> B:
        self._validate_finite("truncate")
        target = self._target(inplace)
        np.trunc(target._elements, out=target._elements)
        return target

    def floor(self: B, *, inplace: bool = True) -> B:
        self._validate_finite("floor")
        target = self._target(inplace)
        np.floor(target._elements, out=target._elements)
        return target

    def ceil(self: B, *, inplace: bool = True) -> B:
        self._validate_finite("ceil")
        target = self._target(inplace)
        np.ceil(target._elements, out=target._elements)
        return target

    def round(self: B, *, inplace: bool = True) -> B:
        """Round to the nearest integer, halves toward +infinity (GLSL/JS style)."""
        self._validate_finite("round")
        target = self._target(inplace)
        e = target._elements
        f = np.floor(e)
        e[:] = f + (e - f >= 0.5)
        return target

    def expand(self: B, *, inplace: bool = True) -> B:
        """Round away from zero."""
        self._validate_finite("expand")
        target = self._target(inplace)
        e = target._elements
        e[:] = np.where(e >= 0, np.ceil(e), np.floor(e))
        return target

    def clamp_non_negative(self: B, *, inplace: bool = True) -> B:
        self._validate_finite("clamp_non_negative")
        target = self._target(inplace)
        np.maximum(target._elements, 0.0, out=target._elements)
        return target

    def to_int(self: B, *, inplace: bool = True) -> B:
        return self.truncate(inplace=inplace)

    def to_uint(self: B, *, inplace: bool = True) -> B:
        self._validate_finite("to_uint")
        return self.clamp_non_negative(inplace=inplace).truncate()


def component_property(index: int, doc: str) -> property:
    """Build a read/write property for one element of the backing array."""
    def getter(self) -> float:
        return float(self._elements[index])

    def setter(self, value: float) -> None:
        self._elements[index] = value

    return property(getter, setter, doc=doc)
