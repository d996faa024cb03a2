# constants.py

"""
Tolerances and fixed thresholds shared across glmath.

These are module-level constants rather than runtime settings: every
threshold is part of the documented numerical behaviour of an operation.
"""

from typing import Final

# default tolerance for Vector/Matrix equals_epsilon
DEFAULT_EPSILON: Final[float] = 1e-5

# default tolerance for Quaternion.equals_epsilon
QUATERNION_EPSILON: Final[float] = 1e-6

# slerp falls back to nlerp above this |dot| (sin(omega) too small)
SLERP_DOT_THRESHOLD: Final[float] = 0.9995

# rotation-between-vectors treats |dot| above this as (anti)parallel
PARALLEL_DOT_THRESHOLD: Final[float] = 0.999999

# below this sin(theta/2) the axis of a rotation is meaningless
AXIS_ANGLE_EPSILON: Final[float] = 1e-6

# angle_to reports 0 once the clamped |dot| is this close to 1
ANGLE_DOT_EPSILON: Final[float] = 1e-6

# squared-length floor for cross products used to pick fallback axes
DEGENERATE_AXIS_EPSILON: Final[float] = 1e-6
