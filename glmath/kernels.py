# kernels.py

"""
Closed-form numeric kernels compiled with numba.

Every kernel works on flat column-major float64 buffers: element
(column c, row r) of an n-row matrix lives at ``c*n + r``. Kernels load
their operands into locals before the first store, so ``out`` may alias an
input buffer.
"""

import math
import warnings

import numpy as np
from numpy import float64 as np_float64
from numba import njit
from numba.core.errors import NumbaPerformanceWarning

from glmath.constants import SLERP_DOT_THRESHOLD

warnings.filterwarnings("ignore", category=NumbaPerformanceWarning)


# -------------------------------------------------------------------------
# 2x2
# -------------------------------------------------------------------------
@njit(cache=True)
def det2(m):
    """Determinant of a column-major 2x2."""
    return m[0] * m[3] - m[2] * m[1]


@njit(cache=True)
def inv2(m, out):
    """
    Analytic inverse of a column-major 2x2 written into ``out``.

    Returns the determinant. When it is exactly zero ``out`` is left
    untouched.
    """
    a00, a10, a01, a11 = m[0], m[1], m[2], m[3]
    det = a00 * a11 - a01 * a10
    if det == 0.0:
        return det
    inv_det = 1.0 / det
    out[0] = a11 * inv_det
    out[1] = -a10 * inv_det
    out[2] = -a01 * inv_det
    out[3] = a00 * inv_det
    return det


# -------------------------------------------------------------------------
# 3x3
# -------------------------------------------------------------------------
@njit(cache=True)
def det3(m):
    """Determinant of a column-major 3x3 (faster than the generic recursion)."""
    a00, a10, a20 = m[0], m[1], m[2]
    a01, a11, a21 = m[3], m[4], m[5]
    a02, a12, a22 = m[6], m[7], m[8]
    return (
        a00 * (a11 * a22 - a12 * a21)
        - a01 * (a10 * a22 - a12 * a20)
        + a02 * (a10 * a21 - a11 * a20)
    )


@njit(cache=True)
def inv3(m, out):
    """
    Analytic inverse of a column-major 3x3 written into ``out``.

    Returns the determinant. When it is exactly zero ``out`` is left
    untouched.
    """
    a00, a10, a20 = m[0], m[1], m[2]
    a01, a11, a21 = m[3], m[4], m[5]
    a02, a12, a22 = m[6], m[7], m[8]

    c00 = a11 * a22 - a12 * a21
    c01 = -(a10 * a22 - a12 * a20)
    c02 = a10 * a21 - a11 * a20

    det = a00 * c00 + a01 * c01 + a02 * c02
    if det == 0.0:
        return det
    inv_det = 1.0 / det

    # adjugate: inverse[r][c] = cofactor[c][r] / det
    out[0] = c00 * inv_det
    out[1] = c01 * inv_det
    out[2] = c02 * inv_det
    out[3] = -(a01 * a22 - a02 * a21) * inv_det
    out[4] = (a00 * a22 - a02 * a20) * inv_det
    out[5] = -(a00 * a21 - a01 * a20) * inv_det
    out[6] = (a01 * a12 - a02 * a11) * inv_det
    out[7] = -(a00 * a12 - a02 * a10) * inv_det
    out[8] = (a00 * a11 - a01 * a10) * inv_det
    return det


@njit(cache=True)
def mat3_multiply(a, b, out):
    """out = a @ b for column-major 3x3 buffers."""
    a11, a12, a13 = a[0], a[3], a[6]
    a21, a22, a23 = a[1], a[4], a[7]
    a31, a32, a33 = a[2], a[5], a[8]

    b11, b12, b13 = b[0], b[3], b[6]
    b21, b22, b23 = b[1], b[4], b[7]
    b31, b32, b33 = b[2], b[5], b[8]

    out[0] = a11 * b11 + a12 * b21 + a13 * b31
    out[3] = a11 * b12 + a12 * b22 + a13 * b32
    out[6] = a11 * b13 + a12 * b23 + a13 * b33

    out[1] = a21 * b11 + a22 * b21 + a23 * b31
    out[4] = a21 * b12 + a22 * b22 + a23 * b32
    out[7] = a21 * b13 + a22 * b23 + a23 * b33

    out[2] = a31 * b11 + a32 * b21 + a33 * b31
    out[5] = a31 * b12 + a32 * b22 + a33 * b32
    out[8] = a31 * b13 + a32 * b23 + a33 * b33


# -------------------------------------------------------------------------
# 4x4
# -------------------------------------------------------------------------
@njit(cache=True)
def mat4_multiply(a, b, out):
    """
    out = a @ b for column-major 4x4 buffers.

    Fully unrolled: 64 multiplies and 48 adds, no index arithmetic.
    """
    a11, a12, a13, a14 = a[0], a[4], a[8], a[12]
    a21, a22, a23, a24 = a[1], a[5], a[9], a[13]
    a31, a32, a33, a34 = a[2], a[6], a[10], a[14]
    a41, a42, a43, a44 = a[3], a[7], a[11], a[15]

    b11, b12, b13, b14 = b[0], b[4], b[8], b[12]
    b21, b22, b23, b24 = b[1], b[5], b[9], b[13]
    b31, b32, b33, b34 = b[2], b[6], b[10], b[14]
    b41, b42, b43, b44 = b[3], b[7], b[11], b[15]

    out[0] = a11 * b11 + a12 * b21 + a13 * b31 + a14 * b41
    out[4] = a11 * b12 + a12 * b22 + a13 * b32 + a14 * b42
    out[8] = a11 * b13 + a12 * b23 + a13 * b33 + a14 * b43
    out[12] = a11 * b14 + a12 * b24 + a13 * b34 + a14 * b44

    out[1] = a21 * b11 + a22 * b21 + a23 * b31 + a24 * b41
    out[5] = a21 * b12 + a22 * b22 + a23 * b32 + a24 * b42
    out[9] = a21 * b13 + a22 * b23 + a23 * b33 + a24 * b43
    out[13] = a21 * b14 + a22 * b24 + a23 * b34 + a24 * b44

    out[2] = a31 * b11 + a32 * b21 + a33 * b31 + a34 * b41
    out[6] = a31 * b12 + a32 * b22 + a33 * b32 + a34 * b42
    out[10] = a31 * b13 + a32 * b23 + a33 * b33 + a34 * b43
    out[14] = a31 * b14 + a32 * b24 + a33 * b34 + a34 * b44

    out[3] = a41 * b11 + a42 * b21 + a43 * b31 + a44 * b41
    out[7] = a41 * b12 + a42 * b22 + a43 * b32 + a44 * b42
    out[11] = a41 * b13 + a42 * b23 + a43 * b33 + a44 * b43
    out[15] = a41 * b14 + a42 * b24 + a43 * b34 + a44 * b44


@njit(cache=True)
def det4(m):
    """
    Determinant of a column-major 4x4, expanded along the last row.

    Parameters
    ----------
    m : (16,) float64 array, column-major

    Returns
    -------
    float64
        det(m)
    """
    n11, n12, n13, n14 = m[0], m[4], m[8], m[12]
    n21, n22, n23, n24 = m[1], m[5], m[9], m[13]
    n31, n32, n33, n34 = m[2], m[6], m[10], m[14]
    n41, n42, n43, n44 = m[3], m[7], m[11], m[15]

    return (
        n41 * (
            n14 * n23 * n32
            - n13 * n24 * n32
            - n14 * n22 * n33
            + n12 * n24 * n33
            + n13 * n22 * n34
            - n12 * n23 * n34
        )
        - n42 * (
            n14 * n23 * n31
            - n13 * n24 * n31
            - n14 * n21 * n33
            + n11 * n24 * n33
            + n13 * n21 * n34
            - n11 * n23 * n34
        )
        + n43 * (
            n14 * n22 * n31
            - n12 * n24 * n31
            - n14 * n21 * n32
            + n11 * n24 * n32
            + n12 * n21 * n34
            - n11 * n22 * n34
        )
        - n44 * (
            n13 * n22 * n31
            - n12 * n23 * n31
            - n13 * n21 * n32
            + n11 * n23 * n32
            + n12 * n21 * n33
            - n11 * n22 * n33
        )
    )


@njit(cache=True)
def inv4(m, out):
    """
    Analytic inverse of a column-major 4x4 written into ``out``.

    Returns the determinant. When it is exactly zero ``out`` is left
    untouched and the caller decides how to fail.
    """
    n11, n12, n13, n14 = m[0], m[4], m[8], m[12]
    n21, n22, n23, n24 = m[1], m[5], m[9], m[13]
    n31, n32, n33, n34 = m[2], m[6], m[10], m[14]
    n41, n42, n43, n44 = m[3], m[7], m[11], m[15]

    # ---- step 1: first-row cofactors ------------------------------------
    t11 = (n23 * n34 * n42 - n24 * n33 * n42 + n24 * n32 * n43
           - n22 * n34 * n43 - n23 * n32 * n44 + n22 * n33 * n44)
    t12 = (n14 * n33 * n42 - n13 * n34 * n42 - n14 * n32 * n43
           + n12 * n34 * n43 + n13 * n32 * n44 - n12 * n33 * n44)
    t13 = (n13 * n24 * n42 - n14 * n23 * n42 + n14 * n22 * n43
           - n12 * n24 * n43 - n13 * n22 * n44 + n12 * n23 * n44)
    t14 = (n14 * n23 * n32 - n13 * n24 * n32 - n14 * n22 * n33
           + n12 * n24 * n33 + n13 * n22 * n34 - n12 * n23 * n34)

    # ---- step 2: determinant & reciprocal -------------------------------
    det = n11 * t11 + n21 * t12 + n31 * t13 + n41 * t14
    if det == 0.0:
        return det
    inv_det = 1.0 / det

    # ---- step 3: remaining adjugate entries -----------------------------
    r1 = (n24 * n33 * n41 - n23 * n34 * n41 - n24 * n31 * n43
          + n21 * n34 * n43 + n23 * n31 * n44 - n21 * n33 * n44)
    r2 = (n22 * n34 * n41 - n24 * n32 * n41 + n24 * n31 * n42
          - n21 * n34 * n42 - n22 * n31 * n44 + n21 * n32 * n44)
    r3 = (n23 * n32 * n41 - n22 * n33 * n41 - n23 * n31 * n42
          + n21 * n33 * n42 + n22 * n31 * n43 - n21 * n32 * n43)

    r5 = (n13 * n34 * n41 - n14 * n33 * n41 + n14 * n31 * n43
          - n11 * n34 * n43 - n13 * n31 * n44 + n11 * n33 * n44)
    r6 = (n14 * n32 * n41 - n12 * n34 * n41 - n14 * n31 * n42
          + n11 * n34 * n42 + n12 * n31 * n44 - n11 * n32 * n44)
    r7 = (n12 * n33 * n41 - n13 * n32 * n41 + n13 * n31 * n42
          - n11 * n33 * n42 - n12 * n31 * n43 + n11 * n32 * n43)

    r9 = (n14 * n23 * n41 - n13 * n24 * n41 - n14 * n21 * n43
          + n11 * n24 * n43 + n13 * n21 * n44 - n11 * n23 * n44)
    r10 = (n12 * n24 * n41 - n14 * n22 * n41 + n14 * n21 * n42
           - n11 * n24 * n42 - n12 * n21 * n44 + n11 * n22 * n44)
    r11 = (n13 * n22 * n41 - n12 * n23 * n41 - n13 * n21 * n42
           + n11 * n23 * n42 + n12 * n21 * n43 - n11 * n22 * n43)

    r13 = (n13 * n24 * n31 - n14 * n23 * n31 + n14 * n21 * n33
           - n11 * n24 * n33 - n13 * n21 * n34 + n11 * n23 * n34)
    r14 = (n14 * n22 * n31 - n12 * n24 * n31 - n14 * n21 * n32
           + n11 * n24 * n32 + n12 * n21 * n34 - n11 * n22 * n34)
    r15 = (n12 * n23 * n31 - n13 * n22 * n31 + n13 * n21 * n32
           - n11 * n23 * n32 - n12 * n21 * n33 + n11 * n22 * n33)

    out[0] = t11 * inv_det
    out[1] = r1 * inv_det
    out[2] = r2 * inv_det
    out[3] = r3 * inv_det
    out[4] = t12 * inv_det
    out[5] = r5 * inv_det
    out[6] = r6 * inv_det
    out[7] = r7 * inv_det
    out[8] = t13 * inv_det
    out[9] = r9 * inv_det
    out[10] = r10 * inv_det
    out[11] = r11 * inv_det
    out[12] = t14 * inv_det
    out[13] = r13 * inv_det
    out[14] = r14 * inv_det
    out[15] = r15 * inv_det
    return det


# -------------------------------------------------------------------------
# quaternions ([x, y, z, w] order throughout)
# -------------------------------------------------------------------------
@njit(cache=True)
def quaternion_multiply(a, b, out):
    """Hamilton product out = a * b."""
    ax, ay, az, aw = a[0], a[1], a[2], a[3]
    bx, by, bz, bw = b[0], b[1], b[2], b[3]
    out[0] = aw * bx + ax * bw + ay * bz - az * by
    out[1] = aw * by - ax * bz + ay * bw + az * bx
    out[2] = aw * bz + ax * by - ay * bx + az * bw
    out[3] = aw * bw - ax * bx - ay * by - az * bz


@njit(cache=True)
def quaternion_to_rotation(q, out, rows):
    """
    Write the rotation matrix of ``q`` into the column-major buffer ``out``.

    ``rows`` is 3 or 4. For 4 the translation column and perspective row
    are the identity's. A zero quaternion produces the identity matrix.
    The quaternion does not need to be unit length; it is scaled by
    ``2 / |q|^2``.
    """
    x, y, z, w = q[0], q[1], q[2], q[3]

    for i in range(rows * rows):
        out[i] = 0.0
    for i in range(rows):
        out[i * rows + i] = 1.0

    n = x*x + y*y + z*z + w*w
    if n == 0.0:
        return

    # precompute products
    s = 2.0 / n
    xx = x*x*s
    yy = y*y*s
    zz = z*z*s
    xy = x*y*s
    xz = x*z*s
    yz = y*z*s
    wx = w*x*s
    wy = w*y*s
    wz = w*z*s

    # column 0
    out[0] = 1.0 - (yy + zz)
    out[1] = xy + wz
    out[2] = xz - wy
    # column 1
    out[rows] = xy - wz
    out[rows + 1] = 1.0 - (xx + zz)
    out[rows + 2] = yz + wx
    # column 2
    out[2 * rows] = xz + wy
    out[2 * rows + 1] = yz - wx
    out[2 * rows + 2] = 1.0 - (xx + yy)


@njit(cache=True)
def rotation_to_quaternion(m, rows):
    """
    Convert the upper-left 3x3 of a column-major matrix to a unit quaternion.

    Uses the four-branch trace method: when the trace is positive the
    w-dominant formula is used, otherwise the formula of the largest
    diagonal element. An all-zero block (or one that makes every branch
    degenerate) yields the identity.

    Returns
    -------
    (4,) float64 array
        [x, y, z, w]
    """
    # unpack to locals (avoids repeated indexing)
    a00, a10, a20 = m[0], m[1], m[2]
    a01, a11, a21 = m[rows], m[rows + 1], m[rows + 2]
    a02, a12, a22 = m[2 * rows], m[2 * rows + 1], m[2 * rows + 2]

    out = np.empty(4, dtype=np_float64)
    out[0], out[1], out[2], out[3] = 0.0, 0.0, 0.0, 1.0

    if (a00 == 0.0 and a01 == 0.0 and a02 == 0.0 and
            a10 == 0.0 and a11 == 0.0 and a12 == 0.0 and
            a20 == 0.0 and a21 == 0.0 and a22 == 0.0):
        return out

    tr = a00 + a11 + a22

    if tr > 0.0:
        S = math.sqrt(tr + 1.0) * 2.0
        qw = 0.25 * S
        qx = (a21 - a12) / S
        qy = (a02 - a20) / S
        qz = (a10 - a01) / S
    else:
        # pick largest diagonal element
        if a00 > a11 and a00 > a22:
            t = 1.0 + a00 - a11 - a22
            if not t > 0.0:
                return out
            S = math.sqrt(t) * 2.0
            qw = (a21 - a12) / S
            qx = 0.25 * S
            qy = (a01 + a10) / S
            qz = (a02 + a20) / S
        elif a11 > a22:
            t = 1.0 + a11 - a00 - a22
            if not t > 0.0:
                return out
            S = math.sqrt(t) * 2.0
            qw = (a02 - a20) / S
            qx = (a01 + a10) / S
            qy = 0.25 * S
            qz = (a12 + a21) / S
        else:
            t = 1.0 + a22 - a00 - a11
            if not t > 0.0:
                return out
            S = math.sqrt(t) * 2.0
            qw = (a10 - a01) / S
            qx = (a02 + a20) / S
            qy = (a12 + a21) / S
            qz = 0.25 * S

    # normalize (guards against numerical drift)
    norm = math.sqrt(qx*qx + qy*qy + qz*qz + qw*qw)
    out[0] = qx / norm
    out[1] = qy / norm
    out[2] = qz / norm
    out[3] = qw / norm
    return out


@njit(cache=True)
def rotate_vector(q, v):
    """
    Apply q * (v, 0) * q^-1 without forming the two quaternion products.

    Uses v' = ((w^2 - u.u) v + 2 (u.v) u + 2 w (u x v)) / |q|^2 with
    u = (x, y, z). The caller guarantees |q| != 0.
    """
    x, y, z, w = q[0], q[1], q[2], q[3]
    vx, vy, vz = v[0], v[1], v[2]

    n = x*x + y*y + z*z + w*w
    uu = x*x + y*y + z*z
    uv = x*vx + y*vy + z*vz
    a = w*w - uu

    # u x v
    cx = y*vz - z*vy
    cy = z*vx - x*vz
    cz = x*vy - y*vx

    out = np.empty(3, dtype=np_float64)
    out[0] = (a*vx + 2.0*uv*x + 2.0*w*cx) / n
    out[1] = (a*vy + 2.0*uv*y + 2.0*w*cy) / n
    out[2] = (a*vz + 2.0*uv*z + 2.0*w*cz) / n
    return out


@njit(cache=True)
def euler_to_quaternion(pitch, yaw, roll, degrees, out):
    """
    Write the quaternion of R = Rz(yaw) @ Ry(pitch) @ Rx(roll) into ``out``.

    Pitch turns about Y, yaw about Z and roll about X, so
    q = q_yaw * q_pitch * q_roll.
    """
    if degrees:
        pitch *= math.pi / 180.0
        yaw *= math.pi / 180.0
        roll *= math.pi / 180.0

    hr, hp, hy = roll * 0.5, pitch * 0.5, yaw * 0.5
    sr, cr = math.sin(hr), math.cos(hr)
    sp, cp = math.sin(hp), math.cos(hp)
    sy, cy = math.sin(hy), math.cos(hy)

    out[0] = sr*cp*cy - cr*sp*sy
    out[1] = cr*sp*cy + sr*cp*sy
    out[2] = cr*cp*sy - sr*sp*cy
    out[3] = cr*cp*cy + sr*sp*sy


@njit(cache=True)
def quaternion_to_euler(q, degrees):
    """
    Inverse of :func:`euler_to_quaternion`.

    Returns
    -------
    (pitch, yaw, roll)
        When |sin(pitch)| reaches 1 (gimbal lock) pitch is clamped to
        +/- pi/2 by its sign.
    """
    x, y, z, w = q[0], q[1], q[2], q[3]

    roll = math.atan2(2.0 * (w*x + y*z), 1.0 - 2.0 * (x*x + y*y))

    sinp = 2.0 * (w*y - z*x)
    if abs(sinp) >= 1.0:
        pitch = math.copysign(math.pi / 2.0, sinp)
    else:
        pitch = math.asin(sinp)

    yaw = math.atan2(2.0 * (w*z + x*y), 1.0 - 2.0 * (y*y + z*z))

    if degrees:
        k = 180.0 / math.pi
        return pitch * k, yaw * k, roll * k
    return pitch, yaw, roll


@njit(cache=True)
def quaternion_slerp(a, b, t, out):
    """
    Spherical interpolation from ``a`` to ``b`` along the shorter arc.

    Nearly parallel inputs (dot above SLERP_DOT_THRESHOLD) are lerped
    instead. The result is normalized in both cases.
    """
    ax, ay, az, aw = a[0], a[1], a[2], a[3]
    bx, by, bz, bw = b[0], b[1], b[2], b[3]

    cos_half = ax*bx + ay*by + az*bz + aw*bw
    if cos_half < 0.0:
        bx, by, bz, bw = -bx, -by, -bz, -bw
        cos_half = -cos_half

    if cos_half > SLERP_DOT_THRESHOLD:
        rx = ax + t * (bx - ax)
        ry = ay + t * (by - ay)
        rz = az + t * (bz - az)
        rw = aw + t * (bw - aw)
    else:
        theta0 = math.acos(cos_half)
        sin0 = math.sin(theta0)
        s0 = math.sin((1.0 - t) * theta0) / sin0
        s1 = math.sin(t * theta0) / sin0
        rx = s0 * ax + s1 * bx
        ry = s0 * ay + s1 * by
        rz = s0 * az + s1 * bz
        rw = s0 * aw + s1 * bw

    n = math.sqrt(rx*rx + ry*ry + rz*rz + rw*rw)
    if n > 0.0:
        rx, ry, rz, rw = rx / n, ry / n, rz / n, rw / n
    out[0] = rx
    out[1] = ry
    out[2] = rz
    out[3] = rw
