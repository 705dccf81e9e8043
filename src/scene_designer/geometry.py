"""Vector and quaternion helpers.

Conventions follow the host editor: Y-up, left-handed, +Z forward.
Quaternions are (x, y, z, w) tuples. Euler angles are in degrees and are
applied Z first, then X, then Y.
"""
from __future__ import annotations

import math

from .models import IDENTITY_ROTATION, Quaternion, Vector3

_EPS = 1e-9


def quat_multiply(a: Quaternion, b: Quaternion) -> Quaternion:
    ax, ay, az, aw = a
    bx, by, bz, bw = b
    return (
        aw * bx + ax * bw + ay * bz - az * by,
        aw * by - ax * bz + ay * bw + az * bx,
        aw * bz + ax * by - ay * bx + az * bw,
        aw * bw - ax * bx - ay * by - az * bz,
    )


def euler_to_quat(x_deg: float, y_deg: float, z_deg: float) -> Quaternion:
    """Rotation of x_deg about X, y_deg about Y and z_deg about Z (order Z, X, Y)."""
    hx, hy, hz = (math.radians(d) * 0.5 for d in (x_deg, y_deg, z_deg))
    qx = (math.sin(hx), 0.0, 0.0, math.cos(hx))
    qy = (0.0, math.sin(hy), 0.0, math.cos(hy))
    qz = (0.0, 0.0, math.sin(hz), math.cos(hz))
    return quat_multiply(quat_multiply(qy, qx), qz)


def sub(a: Vector3, b: Vector3) -> Vector3:
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def cross(a: Vector3, b: Vector3) -> Vector3:
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def length(v: Vector3) -> float:
    return math.sqrt(v[0] * v[0] + v[1] * v[1] + v[2] * v[2])


def normalize(v: Vector3) -> Vector3:
    n = length(v)
    if n < _EPS:
        return (0.0, 0.0, 0.0)
    return (v[0] / n, v[1] / n, v[2] / n)


def look_rotation(forward: Vector3, up: Vector3 = (0.0, 1.0, 0.0)) -> Quaternion:
    """Rotation whose +Z axis points along `forward` and +Y leans toward `up`."""
    f = normalize(forward)
    if f == (0.0, 0.0, 0.0):
        return IDENTITY_ROTATION
    r = normalize(cross(up, f))
    if r == (0.0, 0.0, 0.0):
        # forward is parallel to up; any perpendicular reference works
        r = normalize(cross((0.0, 0.0, 1.0), f))
    u = cross(f, r)

    m00, m01, m02 = r[0], u[0], f[0]
    m10, m11, m12 = r[1], u[1], f[1]
    m20, m21, m22 = r[2], u[2], f[2]
    trace = m00 + m11 + m22
    if trace > 0:
        s = math.sqrt(trace + 1.0) * 2.0
        return ((m21 - m12) / s, (m02 - m20) / s, (m10 - m01) / s, 0.25 * s)
    if m00 > m11 and m00 > m22:
        s = math.sqrt(1.0 + m00 - m11 - m22) * 2.0
        return (0.25 * s, (m01 + m10) / s, (m02 + m20) / s, (m21 - m12) / s)
    if m11 > m22:
        s = math.sqrt(1.0 + m11 - m00 - m22) * 2.0
        return ((m01 + m10) / s, 0.25 * s, (m12 + m21) / s, (m02 - m20) / s)
    s = math.sqrt(1.0 + m22 - m00 - m11) * 2.0
    return ((m02 + m20) / s, (m12 + m21) / s, 0.25 * s, (m10 - m01) / s)


def look_at(eye: Vector3, target: Vector3) -> Quaternion:
    return look_rotation(sub(target, eye))


def rotate_vector(q: Quaternion, v: Vector3) -> Vector3:
    """Apply rotation q to vector v."""
    qv = (v[0], v[1], v[2], 0.0)
    conj = (-q[0], -q[1], -q[2], q[3])
    x, y, z, _ = quat_multiply(quat_multiply(q, qv), conj)
    return (x, y, z)
