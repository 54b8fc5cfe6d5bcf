"""
URDF Linkage: robot-description parsing and link hierarchy construction.

Reads the box/cylinder subset of URDF used by the robot-arm viewer, builds
one transform node per link and nests them by joint parent/child edges.
"""

import jax
jax.config.update("jax_enable_x64", True)

# Import core modules
from . import transforms
from . import core
from . import io
from . import hierarchy
from . import control

__version__ = "0.1.0"
__all__ = ["transforms", "core", "io", "hierarchy", "control"]
