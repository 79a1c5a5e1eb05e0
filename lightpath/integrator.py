"""
Path tracing integrator.

Traces a single light path per call. Each bounce multiplies the running
attenuation by the material's per-channel attenuation; the path ends when
it escapes to the environment, gets absorbed, or runs out of bounces.
Paths cut off by the depth budget contribute nothing, so the estimate is
slightly biased dark for small budgets.
"""

from __future__ import annotations
import math
from typing import Optional

import numpy as np

from .vec3 import Color
from .ray import Ray
from .scene import Scene

# Lower bound of the hit interval. Keeps a scattered ray from re-hitting
# the surface it just left because of floating point error (shadow acne).
T_MIN = 0.001

BLACK = Color(0.0, 0.0, 0.0)
WHITE = Color(1.0, 1.0, 1.0)
SKY_BLUE = Color(0.5, 0.7, 1.0)


def sky_color(ray: Ray) -> Color:
    """Vertical white-to-blue gradient used as the default environment."""
    unit_direction = ray.direction.normalize()
    t = 0.5 * (unit_direction.y + 1.0)
    return WHITE * (1.0 - t) + SKY_BLUE * t


def ray_color(
    ray: Ray,
    scene: Scene,
    depth: int,
    rng: np.random.Generator,
    background: Optional[Color] = None
) -> Color:
    """Compute the color carried back along a ray.

    Args:
        ray: The ray to trace
        scene: The scene to trace against
        depth: Maximum number of bounces; 0 returns black immediately
        rng: Random stream for material sampling
        background: Constant environment color, or None for the sky gradient

    Returns:
        Linear radiance estimate for this ray
    """
    attenuation = WHITE

    for _ in range(depth):
        found = scene.hit(ray, T_MIN, math.inf)

        if found is None:
            environment = sky_color(ray) if background is None else background
            return attenuation * environment

        obj, hit_record = found
        scatter_result = obj.material.scatter(ray, hit_record, rng)
        if scatter_result is None:
            return BLACK

        attenuation = attenuation * scatter_result.attenuation
        ray = scatter_result.scattered_ray

    return BLACK
