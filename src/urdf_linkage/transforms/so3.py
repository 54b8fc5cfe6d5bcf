"""SO(3) rotation helpers in JAX.

Rotation matrices for the pose slots of the scene tree: Euler angles in a
chosen application order (the viewer's sliders use ``"XYZ"``, URDF origins
use roll-pitch-yaw, i.e. ``"ZYX"``) and axis-angle rotations about an
arbitrary joint axis.
"""

import jax
import jax.numpy as jnp
from typing import Sequence

Array = jax.Array


def skew_symmetric(v: Array) -> Array:
    """
    Convert 3D vector to skew-symmetric matrix.

    Args:
        v: (..., 3) vector

    Returns:
        (..., 3, 3) skew-symmetric matrix
    """
    zeros = jnp.zeros(v.shape[:-1], dtype=v.dtype)

    return jnp.stack([
        jnp.stack([zeros, -v[..., 2], v[..., 1]], axis=-1),
        jnp.stack([v[..., 2], zeros, -v[..., 0]], axis=-1),
        jnp.stack([-v[..., 1], v[..., 0], zeros], axis=-1)
    ], axis=-2)


def exp(log_r: Array) -> Array:
    """
    Convert an axis-angle vector to a rotation matrix (Rodrigues' formula).

    Args:
        log_r: (3,) axis-angle vector; its norm is the angle in radians

    Returns:
        (3, 3) rotation matrix
    """
    log_r = jnp.asarray(log_r, dtype=jnp.float64)
    angle = jnp.linalg.norm(log_r)

    # Near-zero angles fall back to the identity
    if angle < 1e-12:
        return jnp.eye(3, dtype=log_r.dtype)

    K = skew_symmetric(log_r / angle)
    return jnp.eye(3, dtype=log_r.dtype) + jnp.sin(angle) * K + (1.0 - jnp.cos(angle)) * (K @ K)


def from_axis_angle(axis: Sequence[float], angle: float) -> Array:
    """Rotation of ``angle`` radians about ``axis`` (normalized here)."""
    axis = jnp.asarray(axis, dtype=jnp.float64)
    norm = jnp.linalg.norm(axis)
    if norm < 1e-12:
        raise ValueError(f"rotation axis must be non-zero, got {axis}")
    return exp(axis / norm * angle)


def rot_x(angle: float) -> Array:
    c, s = jnp.cos(angle), jnp.sin(angle)
    return jnp.array([[1.0, 0.0, 0.0], [0.0, c, -s], [0.0, s, c]])


def rot_y(angle: float) -> Array:
    c, s = jnp.cos(angle), jnp.sin(angle)
    return jnp.array([[c, 0.0, s], [0.0, 1.0, 0.0], [-s, 0.0, c]])


def rot_z(angle: float) -> Array:
    c, s = jnp.cos(angle), jnp.sin(angle)
    return jnp.array([[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]])


_AXIS_ROTATIONS = {"X": rot_x, "Y": rot_y, "Z": rot_z}


def from_euler(angles: Sequence[float], order: str = "XYZ") -> Array:
    """
    Convert Euler angles to a rotation matrix.

    ``angles`` are always given as (x, y, z). ``order`` names the matrix
    product from left to right, so ``"XYZ"`` gives ``Rx @ Ry @ Rz`` and
    ``"ZYX"`` gives ``Rz @ Ry @ Rx``.

    Args:
        angles: (x, y, z) angles in radians
        order: permutation of ``"XYZ"``

    Returns:
        (3, 3) rotation matrix
    """
    order = order.upper()
    if sorted(order) != ["X", "Y", "Z"]:
        raise ValueError(f"order must be a permutation of 'XYZ', got {order!r}")

    x, y, z = (float(a) for a in angles)
    by_axis = {"X": x, "Y": y, "Z": z}

    R = jnp.eye(3, dtype=jnp.float64)
    for axis in order:
        R = R @ _AXIS_ROTATIONS[axis](by_axis[axis])
    return R


def from_rpy(rpy: Sequence[float]) -> Array:
    """Convert URDF roll-pitch-yaw to a rotation matrix: R = Rz(yaw) Ry(pitch) Rx(roll)."""
    return from_euler(rpy, order="ZYX")
