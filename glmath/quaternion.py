# quaternion.py

"""
Rotation quaternions stored as ``[x, y, z, w]`` (scalar last).

Like the vector and matrix types, every mutator returns ``self`` and takes
``inplace=False`` to produce a new quaternion instead.
"""

from typing import Optional, Sequence, Tuple, Type, TypeVar, Union
import logging
import math
from numbers import Real

import numpy as np
from numpy import array as np_array
from numpy import asarray as np_asarray
from numpy import concatenate as np_concatenate
from numpy import cross as np_cross
from numpy import float64 as np_float64
from numpy import ndarray

from glmath.base import FloatBuffer, component_property
from glmath.constants import (
    ANGLE_DOT_EPSILON,
    AXIS_ANGLE_EPSILON,
    DEGENERATE_AXIS_EPSILON,
    PARALLEL_DOT_THRESHOLD,
    QUATERNION_EPSILON,
)
from glmath.errors import CannotInvertZeroError, SizeMismatchError
from glmath.kernels import (
    euler_to_quaternion,
    quaternion_multiply,
    quaternion_slerp,
    quaternion_to_euler,
    quaternion_to_rotation,
    rotate_vector,
    rotation_to_quaternion,
)
from glmath.matrix import Matrix
from glmath.matrix3 import Matrix3
from glmath.matrix4 import Matrix4
from glmath.vector import Vector, Vector3

_LOG = logging.getLogger(__name__)

Q = TypeVar("Q", bound="Quaternion")

VectorLike = Union[Vector, Sequence[float], ndarray]

_X_AXIS = np_array((1.0, 0.0, 0.0))
_Y_AXIS = np_array((0.0, 1.0, 0.0))
_Z_AXIS = np_array((0.0, 0.0, 1.0))


def _as_xyz(v: VectorLike) -> ndarray:
    """Three float64 components of a Vector3 or any length-3 sequence."""
    xyz = v.elements if isinstance(v, Vector) else np_asarray(v, dtype=np_float64)
    if xyz.shape != (3,):
        raise SizeMismatchError(f"Expected 3 components, got shape {xyz.shape}")
    return xyz


def _normalized(v: ndarray) -> Optional[ndarray]:
    length = math.sqrt(float(np.dot(v, v)))
    if length == 0.0:
        return None
    return v / length


class Quaternion(FloatBuffer):
    """
    A quaternion ``x*i + y*j + z*k + w``.

    Constructed with no arguments it is the identity rotation ``(0, 0, 0, 1)``.
    Rotation methods assume unit length; call :meth:`normalize` after
    accumulating many products.
    """
    __slots__ = ()

    _KIND = "quaternion"

    def __init__(self, x: float = 0.0, y: float = 0.0, z: float = 0.0, w: float = 1.0):
        self._elements = np_array((x, y, z, w), dtype=np_float64)

    x = component_property(0, "First imaginary component.")
    y = component_property(1, "Second imaginary component.")
    z = component_property(2, "Third imaginary component.")
    w = component_property(3, "Real (scalar) component.")

    @classmethod
    def from_flat_array(cls: Type[Q], array: Union[Sequence[float], ndarray], offset: int = 0) -> Q:
        """Read ``[x, y, z, w]`` from ``array`` starting at ``offset``."""
        flat = np_asarray(array, dtype=np_float64).ravel()
        if offset < 0 or offset + 4 > flat.shape[0]:
            raise SizeMismatchError(
                f"{cls.__name__}.from_flat_array: need 4 values from offset {offset}, "
                f"array has {flat.shape[0]}")
        return cls._from_unchecked(flat[offset:offset + 4].copy())

    @classmethod
    def identity(cls: Type[Q]) -> Q:
        return cls()

    @classmethod
    def zero(cls: Type[Q]) -> Q:
        return cls(0.0, 0.0, 0.0, 0.0)

    def set(self: Q, x: float, y: float, z: float, w: float) -> Q:
        e = self._elements
        e[0], e[1], e[2], e[3] = x, y, z, w
        return self

    def set_identity(self: Q) -> Q:
        return self.set(0.0, 0.0, 0.0, 1.0)

    def set_zero(self: Q) -> Q:
        return self.set(0.0, 0.0, 0.0, 0.0)

    def copy(self: Q, other: "Quaternion") -> Q:
        self._elements[:] = other._elements
        return self

    #########
    # Algebra
    #

    def length_squared(self) -> float:
        e = self._elements
        return float(np.dot(e, e))

    def length(self) -> float:
        return math.sqrt(self.length_squared())

    def normalize(self: Q, *, inplace: bool = True) -> Q:
        """Scale to unit length. The zero quaternion stays zero."""
        target = self._target(inplace)
        length = self.length()
        if length > 0.0:
            target._elements /= length
        return target

    def conjugate(self: Q, *, inplace: bool = True) -> Q:
        target = self._target(inplace)
        target._elements[:3] *= -1.0
        return target

    def invert(self: Q, *, inplace: bool = True) -> Q:
        """
        Replace with the multiplicative inverse ``conjugate / |q|^2``.

        Raises:
            CannotInvertZeroError: for the zero quaternion.
        """
        n = self.length_squared()
        if n == 0.0:
            raise CannotInvertZeroError("Cannot invert the zero quaternion")
        target = self.conjugate(inplace=inplace)
        target._elements /= n
        return target

    def dot(self, other: "Quaternion") -> float:
        return float(np.dot(self._elements, other._elements))

    def add(self: Q, other: "Quaternion", *, inplace: bool = True) -> Q:
        target = self._target(inplace)
        target._elements += other._elements
        return target

    def subtract(self: Q, other: "Quaternion", *, inplace: bool = True) -> Q:
        target = self._target(inplace)
        target._elements -= other._elements
        return target

    def multiply(self: Q, q: "Quaternion", *, inplace: bool = True) -> Q:
        """Hamilton product ``self * q``: apply ``q`` first, then ``self``."""
        target = self._target(inplace)
        quaternion_multiply(self._elements, q._elements, target._elements)
        return target

    def premultiply(self: Q, q: "Quaternion", *, inplace: bool = True) -> Q:
        """Hamilton product ``q * self``."""
        target = self._target(inplace)
        quaternion_multiply(q._elements, self._elements, target._elements)
        return target

    #########
    # Axis-angle
    #

    def set_from_axis_angle(self: Q, axis: VectorLike, angle: float) -> Q:
        """Rotation of ``angle`` radians about ``axis`` (normalized here)."""
        unit = _normalized(_as_xyz(axis))
        if unit is None:
            _LOG.debug("set_from_axis_angle: zero-length axis, using identity")
            return self.set_identity()
        s = math.sin(angle * 0.5)
        return self.set(unit[0] * s, unit[1] * s, unit[2] * s, math.cos(angle * 0.5))

    @classmethod
    def from_axis_angle(cls: Type[Q], axis: VectorLike, angle: float) -> Q:
        return cls().set_from_axis_angle(axis, angle)

    def to_axis_angle(self) -> Tuple[Vector3, float]:
        """
        Decompose into ``(axis, angle)`` with ``angle`` in ``[0, pi]``.

        ``q`` and ``-q`` give the same result. When the rotation is too small
        for the axis to mean anything the axis is ``(1, 0, 0)``.
        """
        n = self.length()
        if n == 0.0:
            return Vector3(1.0, 0.0, 0.0), 0.0
        x, y, z, w = (self._elements / n).tolist()
        if w < 0.0:
            x, y, z, w = -x, -y, -z, -w
        w = min(w, 1.0)
        angle = 2.0 * math.acos(w)
        s = math.sqrt(1.0 - w * w)
        if s <= AXIS_ANGLE_EPSILON:
            return Vector3(1.0, 0.0, 0.0), angle
        return Vector3(x / s, y / s, z / s), angle

    #########
    # Euler angles
    #

    def set_from_euler_angles(self: Q, pitch: float, yaw: float, roll: float, *,
                              degrees: bool = False) -> Q:
        """
        Pitch about Y, yaw about Z, roll about X, applied roll first.

        Equivalent to ``q_yaw * q_pitch * q_roll``.
        """
        euler_to_quaternion(float(pitch), float(yaw), float(roll), degrees, self._elements)
        return self

    @classmethod
    def from_euler_angles(cls: Type[Q], pitch: float, yaw: float, roll: float, *,
                          degrees: bool = False) -> Q:
        return cls().set_from_euler_angles(pitch, yaw, roll, degrees=degrees)

    def to_euler_angles(self, *, degrees: bool = False) -> Tuple[float, float, float]:
        """
        Returns:
            ``(pitch, yaw, roll)``. At gimbal lock pitch is exactly +/- pi/2
            and yaw/roll share the remaining rotation.
        """
        x, y, z, w = self._elements.tolist()
        if abs(2.0 * (w * y - z * x)) >= 1.0:
            _LOG.debug("to_euler_angles: gimbal lock, pitch clamped to +/- pi/2")
        return quaternion_to_euler(self._elements, degrees)

    #########
    # Rotation matrices
    #

    def set_from_rotation_matrix(self: Q, m: Matrix) -> Q:
        """
        Read the rotation in the upper-left 3x3 of a Matrix3 or Matrix4.

        An all-zero block gives the identity.
        """
        if m.ROWS != m.COLUMNS or m.ROWS not in (3, 4):
            raise SizeMismatchError(
                f"Expected a 3x3 or 4x4 rotation matrix, got {m.ROWS}x{m.COLUMNS}")
        if not np.any(m._as_grid()[:3, :3]):
            _LOG.debug("set_from_rotation_matrix: all-zero rotation block, using identity")
        self._elements[:] = rotation_to_quaternion(m.elements, m.ROWS)
        return self

    @classmethod
    def from_rotation_matrix3(cls: Type[Q], m: Matrix3) -> Q:
        return cls().set_from_rotation_matrix(m)

    @classmethod
    def from_rotation_matrix4(cls: Type[Q], m: Matrix4) -> Q:
        return cls().set_from_rotation_matrix(m)

    def to_rotation_matrix3(self) -> Matrix3:
        out = Matrix3.zero()
        quaternion_to_rotation(self._elements, out.elements, 3)
        return out

    def to_rotation_matrix4(self) -> Matrix4:
        """The rotation as a Matrix4 with zero translation."""
        out = Matrix4.zero()
        quaternion_to_rotation(self._elements, out.elements, 4)
        return out

    #########
    # Interpolation
    #

    def slerp(self: Q, target: "Quaternion", t: float, *, inplace: bool = True) -> Q:
        """Spherical interpolation along the shorter arc. ``t`` is not clamped."""
        result = self._target(inplace)
        quaternion_slerp(self._elements, target._elements, float(t), result._elements)
        return result

    def lerp(self: Q, target: "Quaternion", t: float, *, inplace: bool = True) -> Q:
        """Component-wise interpolation with no normalization."""
        result = self._target(inplace)
        result._elements[:] = (1.0 - t) * result._elements + t * target._elements
        return result

    def nlerp(self: Q, target: "Quaternion", t: float, *, inplace: bool = True) -> Q:
        return self.lerp(target, t, inplace=inplace).normalize()

    @staticmethod
    def squad(q0: "Quaternion", q1: "Quaternion", q2: "Quaternion", q3: "Quaternion",
              t: float) -> "Quaternion":
        """
        Spherical quadrangle interpolation between ``q0`` and ``q3``.

        ``q1`` and ``q2`` are the inner control points.
        """
        outer = q0.slerp(q3, t, inplace=False)
        inner = q1.slerp(q2, t, inplace=False)
        return outer.slerp(inner, 2.0 * t * (1.0 - t))

    #########
    # Rotating and orienting
    #

    def rotate_vector(self, v: VectorLike) -> Vector3:
        """
        Returns ``q * (v, 0) * q^-1`` as a new Vector3.

        Raises:
            CannotInvertZeroError: for the zero quaternion.
        """
        if self.length_squared() == 0.0:
            raise CannotInvertZeroError("Cannot rotate by the zero quaternion")
        return Vector3._from_unchecked(rotate_vector(self._elements, _as_xyz(v)))

    def set_from_rotation_between_vectors(self: Q, a: VectorLike, b: VectorLike) -> Q:
        """The shortest rotation taking direction ``a`` to direction ``b``."""
        ua = _normalized(_as_xyz(a))
        ub = _normalized(_as_xyz(b))
        if ua is None or ub is None:
            _LOG.debug("set_from_rotation_between_vectors: zero-length input, using identity")
            return self.set_identity()

        d = float(np.dot(ua, ub))
        if d > PARALLEL_DOT_THRESHOLD:
            return self.set_identity()
        if d < -PARALLEL_DOT_THRESHOLD:
            # opposite: half turn about any axis perpendicular to a
            axis = np_cross(_X_AXIS, ua)
            if float(np.dot(axis, axis)) < DEGENERATE_AXIS_EPSILON:
                axis = np_cross(_Y_AXIS, ua)
            return self.set_from_axis_angle(axis, math.pi)
        return self.set_from_axis_angle(np_cross(ua, ub), math.acos(d))

    @classmethod
    def from_rotation_between_vectors(cls: Type[Q], a: VectorLike, b: VectorLike) -> Q:
        return cls().set_from_rotation_between_vectors(a, b)

    def look_at(self: Q, eye: VectorLike, target: VectorLike,
                up: Optional[VectorLike] = None) -> Q:
        """
        Orientation whose local -Z points from ``eye`` to ``target``.

        Local +Y is ``up`` made perpendicular to the view direction. If
        ``up`` is missing, zero or parallel to the view direction, world
        +Y and then world +Z are tried instead.
        """
        forward = _normalized(_as_xyz(target) - _as_xyz(eye))
        if forward is None:
            _LOG.debug("look_at: eye and target coincide, using identity")
            return self.set_identity()

        candidates = [_Y_AXIS, _Z_AXIS] if up is None else [_as_xyz(up), _Y_AXIS, _Z_AXIS]
        for candidate in candidates:
            right = np_cross(forward, candidate)
            if float(np.dot(right, right)) >= DEGENERATE_AXIS_EPSILON:
                break
            _LOG.debug("look_at: up %s is degenerate for forward %s", candidate, forward)
        right = right / math.sqrt(float(np.dot(right, right)))
        true_up = np_cross(right, forward)

        # columns (right, up, -forward) are already column-major
        rotation = np_concatenate((right, true_up, -forward))
        self._elements[:] = rotation_to_quaternion(rotation, 3)
        return self

    @classmethod
    def from_look_at(cls: Type[Q], eye: VectorLike, target: VectorLike,
                     up: Optional[VectorLike] = None) -> Q:
        return cls().look_at(eye, target, up)

    def angle_to(self, q: "Quaternion") -> float:
        """Smallest rotation angle (radians) between two unit quaternions."""
        d = min(1.0, abs(self.dot(q)))
        if d >= 1.0 - ANGLE_DOT_EPSILON:
            return 0.0
        return 2.0 * math.acos(d)

    def rotate_towards(self: Q, target: "Quaternion", max_radians: float, *,
                       inplace: bool = True) -> Q:
        """Turn toward ``target`` by at most ``max_radians``."""
        result = self._target(inplace)
        angle = self.angle_to(target)
        if angle == 0.0:
            return result
        if angle <= max_radians:
            return result.copy(target)
        return result.slerp(target, max_radians / angle)

    #########
    # Comparison
    #

    def equals(self, other: "Quaternion") -> bool:
        """Exact component equality. ``q`` and ``-q`` are not equal here."""
        return bool(np.array_equal(self._elements, other._elements))

    def equals_epsilon(self, other: "Quaternion", epsilon: float = QUATERNION_EPSILON) -> bool:
        return self._equals_epsilon(other._elements, epsilon)

    #########
    # Dunder methods
    #

    def __iter__(self):
        return iter(self._elements.tolist())

    def __len__(self) -> int:
        return 4

    def __mul__(self, other):
        if isinstance(other, Quaternion):
            return self.multiply(other, inplace=False)
        if isinstance(other, Real):
            return self.multiply_scalar(other, inplace=False)
        return NotImplemented

    def __rmul__(self, other):
        if isinstance(other, Real):
            return self.multiply_scalar(other, inplace=False)
        return NotImplemented

    def __add__(self: Q, other: "Quaternion") -> Q:
        return self.add(other, inplace=False)

    def __sub__(self: Q, other: "Quaternion") -> Q:
        return self.subtract(other, inplace=False)

    def __neg__(self: Q) -> Q:
        return self.multiply_scalar(-1.0, inplace=False)

    def __eq__(self, other) -> bool:
        return isinstance(other, Quaternion) and self.equals(other)

    __hash__ = None

    def __repr__(self) -> str:
        x, y, z, w = self._elements.tolist()
        return f"{self.__class__.__name__}(x={x!r}, y={y!r}, z={z!r}, w={w!r})"
