"""SE(3) homogeneous transforms in JAX."""

import jax
import jax.numpy as jnp

Array = jax.Array


def from_position_and_rotation(p: Array, R: Array) -> Array:
    """
    Construct SE(3) transform from position and rotation.

    Args:
        p: (3,) position vector
        R: (3, 3) rotation matrix

    Returns:
        (4, 4) homogeneous transformation matrix
    """
    p = jnp.asarray(p, dtype=jnp.float64)
    R = jnp.asarray(R, dtype=jnp.float64)

    T = jnp.eye(4, dtype=p.dtype)
    T = T.at[:3, :3].set(R)
    T = T.at[:3, 3].set(p)
    return T
