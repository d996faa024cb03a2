# vector.py

from typing import Iterator, List, Optional, Sequence, Type, TypeVar, Union
import math

import numpy as np
from numpy import array as np_array
from numpy import asarray as np_asarray
from numpy import float64 as np_float64
from numpy import ndarray

from glmath.base import IntegralConvertible, component_property
from glmath.constants import DEFAULT_EPSILON
from glmath.errors import DivideByZeroError, IndexOutOfBoundsError, SizeMismatchError

V = TypeVar("V", bound="Vector")


class Vector(IntegralConvertible):
    """
    An ordered tuple of N float scalars.

    ``Vector`` accepts any number of components; the subclasses
    :class:`Vector2`, :class:`Vector3` and :class:`Vector4` fix N.

    Every arithmetic method mutates the receiver and returns it so calls can
    be chained. Pass ``inplace=False`` to leave the receiver alone and get a
    new instance of the same concrete type instead. The arithmetic operators
    (``+``, ``-``, ``*``, ``/``) never mutate.
    """
    __slots__ = ()

    _KIND = "vector"
    SIZE: Optional[int] = None

    def __init__(self, *components: float):
        elements = np_array(components, dtype=np_float64)
        if elements.ndim != 1:
            raise SizeMismatchError(
                f"{self.__class__.__name__} components must be scalars, got shape {elements.shape}")
        if self.SIZE is not None and elements.shape[0] != self.SIZE:
            raise SizeMismatchError(
                f"{self.__class__.__name__} expects {self.SIZE} components, got {elements.shape[0]}")
        self._elements = elements

    @classmethod
    def from_flat_array(cls: Type[V], array: Union[Sequence[float], ndarray], offset: int = 0) -> V:
        """
        Read a vector from a flat sequence of scalars.

        Args:
            array: the source values.
            offset: index of the first component in ``array``.

        Returns:
            A new vector. The generic ``Vector`` consumes everything after
            ``offset``; sized subclasses consume exactly ``SIZE`` values.
        """
        flat = np_asarray(array, dtype=np_float64).ravel()
        size = cls.SIZE if cls.SIZE is not None else flat.shape[0] - offset
        if offset < 0 or size < 0 or offset + size > flat.shape[0]:
            raise SizeMismatchError(
                f"{cls.__name__}.from_flat_array: need {size} values from offset {offset}, "
                f"array has {flat.shape[0]}")
        return cls._from_unchecked(flat[offset:offset + size].copy())

    #########
    # Element access
    #

    @property
    def size(self) -> int:
        return self._elements.shape[0]

    @property
    def components(self) -> List[float]:
        """A list copy of the components."""
        return self._elements.tolist()

    def get(self, index: int) -> float:
        self._validate_index(index)
        return float(self._elements[index])

    def set(self, index: int, value: float) -> "Vector":
        self._validate_index(index)
        self._elements[index] = value
        return self

    def _validate_index(self, index: int) -> None:
        if index < 0 or index >= self.size:
            raise IndexOutOfBoundsError(
                f"Index {index} out of bounds for {self.__class__.__name__} of size {self.size}")

    def _validate_same_size(self, other: "Vector") -> None:
        if self.size != other.size:
            raise SizeMismatchError(
                f"Vectors must have the same size: {self.__class__.__name__} (size {self.size}) "
                f"and {other.__class__.__name__} (size {other.size})")

    def copy(self: V, other: "Vector") -> V:
        """Overwrite this vector's components with ``other``'s."""
        self._validate_same_size(other)
        self._elements[:] = other._elements
        return self

    #########
    # Arithmetic
    #

    def add(self: V, other: "Vector", *, inplace: bool = True) -> V:
        self._validate_same_size(other)
        target = self._target(inplace)
        target._elements += other._elements
        return target

    def subtract(self: V, other: "Vector", *, inplace: bool = True) -> V:
        self._validate_same_size(other)
        target = self._target(inplace)
        target._elements -= other._elements
        return target

    def divide_scalar(self: V, scalar: float, *, inplace: bool = True) -> V:
        if scalar == 0:
            raise DivideByZeroError(
                f"Cannot divide {self.__class__.__name__} by zero")
        return self.multiply_scalar(1.0 / scalar, inplace=inplace)

    def length_squared(self) -> float:
        e = self._elements
        return float(np.dot(e, e))

    def length(self) -> float:
        return math.sqrt(self.length_squared())

    def normalize(self: V, *, inplace: bool = True) -> V:
        """
        Scale to unit length.

        A zero-length vector is left unchanged rather than turned into NaNs.
        """
        length = self.length()
        if length == 0:
            return self._target(inplace)
        return self.divide_scalar(length, inplace=inplace)

    def lerp(self: V, target: "Vector", t: float, *, inplace: bool = True) -> V:
        """Component-wise ``(1 - t) * self + t * target``. ``t`` is not clamped."""
        self._validate_same_size(target)
        result = self._target(inplace)
        result._elements[:] = (1.0 - t) * result._elements + t * target._elements
        return result

    def dot(self, other: "Vector") -> float:
        self._validate_same_size(other)
        return float(np.dot(self._elements, other._elements))

    #########
    # Comparison
    #

    def equals(self, other: "Vector") -> bool:
        """Exact component equality. NaN never equals anything."""
        if self.size != other.size:
            return False
        return bool(np.array_equal(self._elements, other._elements))

    def equals_epsilon(self, other: "Vector", epsilon: float = DEFAULT_EPSILON) -> bool:
        if self.size != other.size:
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

    def __add__(self: V, other: "Vector") -> V:
        return self.add(other, inplace=False)

    def __sub__(self: V, other: "Vector") -> V:
        return self.subtract(other, inplace=False)

    def __mul__(self: V, scalar: float) -> V:
        return self.multiply_scalar(scalar, inplace=False)

    __rmul__ = __mul__

    def __truediv__(self: V, scalar: float) -> V:
        return self.divide_scalar(scalar, inplace=False)

    def __neg__(self: V) -> V:
        return self.multiply_scalar(-1.0, inplace=False)

    def __eq__(self, other) -> bool:
        return isinstance(other, Vector) and self.equals(other)

    __hash__ = None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({', '.join(repr(c) for c in self._elements.tolist())})"


class Vector2(Vector):
    """A 2-component vector (x, y)."""
    __slots__ = ()

    SIZE = 2

    def __init__(self, x: float = 0.0, y: float = 0.0):
        super().__init__(x, y)

    x = component_property(0, "First component.")
    y = component_property(1, "Second component.")
    r = component_property(0, "Alias of x for colors.")
    g = component_property(1, "Alias of y for colors.")
    s = component_property(0, "Alias of x for texture coordinates.")
    t = component_property(1, "Alias of y for texture coordinates.")

    @staticmethod
    def cross(a: "Vector2", b: "Vector2") -> float:
        """z component of the 3D cross product of (a, 0) and (b, 0)."""
        a._validate_same_size(b)
        return a.x * b.y - a.y * b.x


class Vector3(Vector):
    """A 3-component vector (x, y, z)."""
    __slots__ = ()

    SIZE = 3

    def __init__(self, x: float = 0.0, y: float = 0.0, z: float = 0.0):
        super().__init__(x, y, z)

    x = component_property(0, "First component.")
    y = component_property(1, "Second component.")
    z = component_property(2, "Third component.")
    r = component_property(0, "Alias of x for colors.")
    g = component_property(1, "Alias of y for colors.")
    b = component_property(2, "Alias of z for colors.")
    s = component_property(0, "Alias of x for texture coordinates.")
    t = component_property(1, "Alias of y for texture coordinates.")
    p = component_property(2, "Alias of z for texture coordinates.")

    def cross(self, other: "Vector3", *, inplace: bool = True) -> "Vector3":
        """Right-handed cross product ``self x other``."""
        self._validate_same_size(other)
        ax, ay, az = self._elements.tolist()
        bx, by, bz = other._elements.tolist()
        target = self._target(inplace)
        e = target._elements
        e[0] = ay * bz - az * by
        e[1] = az * bx - ax * bz
        e[2] = ax * by - ay * bx
        return target


class Vector4(Vector):
    """A 4-component vector (x, y, z, w), also used for homogeneous points."""
    __slots__ = ()

    SIZE = 4

    def __init__(self, x: float = 0.0, y: float = 0.0, z: float = 0.0, w: float = 0.0):
        super().__init__(x, y, z, w)

    x = component_property(0, "First component.")
    y = component_property(1, "Second component.")
    z = component_property(2, "Third component.")
    w = component_property(3, "Fourth (homogeneous) component.")
    r = component_property(0, "Alias of x for colors.")
    g = component_property(1, "Alias of y for colors.")
    b = component_property(2, "Alias of z for colors.")
    a = component_property(3, "Alias of w for colors.")
    s = component_property(0, "Alias of x for texture coordinates.")
    t = component_property(1, "Alias of y for texture coordinates.")
    p = component_property(2, "Alias of z for texture coordinates.")
    q = component_property(3, "Alias of w for texture coordinates.")
