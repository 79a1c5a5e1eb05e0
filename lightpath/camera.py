"""
Camera module for generating primary rays.

A fixed pinhole camera looking down the -Z axis. The viewport is a
rectangle `focal_length` in front of the eye; (u, v) in [0, 1]² address it
from the bottom-left corner.
"""

from __future__ import annotations
import math
from typing import Optional
from .vec3 import Vec3, Point3
from .ray import Ray


class Camera:
    """A pinhole camera with a fixed viewport."""

    __slots__ = (
        'aspect_ratio', 'viewport_height', 'viewport_width', 'focal_length',
        'origin', 'horizontal', 'vertical', 'lower_left_corner',
    )

    def __init__(
        self,
        aspect_ratio: float = 16.0 / 9.0,
        viewport_height: float = 2.0,
        focal_length: float = 1.0,
        origin: Optional[Point3] = None
    ):
        """Create a camera.

        Args:
            aspect_ratio: Width / Height ratio
            viewport_height: Height of the virtual viewport in world units,
                a proxy for the vertical field of view
            focal_length: Distance from the eye to the viewport
            origin: Eye position (defaults to the world origin)
        """
        self.aspect_ratio = aspect_ratio
        self.viewport_height = viewport_height
        self.viewport_width = aspect_ratio * viewport_height
        self.focal_length = focal_length

        self.origin = origin if origin is not None else Point3(0, 0, 0)
        self.horizontal = Vec3(self.viewport_width, 0, 0)
        self.vertical = Vec3(0, viewport_height, 0)
        self.lower_left_corner = (
            self.origin
            - self.horizontal / 2
            - self.vertical / 2
            - Vec3(0, 0, focal_length)
        )

    @classmethod
    def from_vfov(
        cls,
        vfov: float,
        aspect_ratio: float = 16.0 / 9.0,
        focal_length: float = 1.0,
        origin: Optional[Point3] = None
    ) -> Camera:
        """Create a camera from a vertical field of view in degrees."""
        h = math.tan(math.radians(vfov) / 2)
        return cls(
            aspect_ratio=aspect_ratio,
            viewport_height=2.0 * h * focal_length,
            focal_length=focal_length,
            origin=origin
        )

    def get_ray(self, u: float, v: float) -> Ray:
        """Generate a ray for the given UV coordinates on the image plane.

        Args:
            u: Horizontal coordinate [0, 1] (0 = left, 1 = right)
            v: Vertical coordinate [0, 1] (0 = bottom, 1 = top)

        Returns:
            A ray from the eye through the viewport point (not normalized)
        """
        direction = (
            self.lower_left_corner
            + self.horizontal * u
            + self.vertical * v
            - self.origin
        )
        return Ray(self.origin, direction)

    def __repr__(self) -> str:
        return (
            f"Camera(origin={self.origin}, viewport={self.viewport_width:.3f}x"
            f"{self.viewport_height:.3f}, focal_length={self.focal_length})"
        )
