"""
Geometric shapes for the path tracer.

Each shape implements the Hittable capability with a `hit` method. Shapes
carry no material; pairing geometry with a material is the scene's job.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional
import math

from .vec3 import Vec3, Point3
from .ray import Ray


@dataclass
class HitRecord:
    """Stores information about a ray-object intersection.

    Attributes:
        point: The intersection point in world space
        normal: The surface normal at the intersection (always points against ray)
        t: The ray parameter at intersection
        front_face: True if the geometric normal already opposed the ray
    """
    point: Point3
    normal: Vec3
    t: float
    front_face: bool

    @classmethod
    def from_outward_normal(cls, ray: Ray, point: Point3, t: float, outward_normal: Vec3) -> HitRecord:
        """Build a record whose normal always points against the ray direction.

        Args:
            ray: The incoming ray
            point: Intersection point
            t: Ray parameter of the intersection
            outward_normal: The geometric normal pointing outward from surface
        """
        front_face = ray.direction.dot(outward_normal) < 0
        normal = outward_normal if front_face else -outward_normal
        return cls(point=point, normal=normal, t=t, front_face=front_face)

    @property
    def outward_normal(self) -> Vec3:
        """The geometric normal as the shape defines it."""
        return self.normal if self.front_face else -self.normal


class Hittable(ABC):
    """Abstract base class for all geometry that can be hit by rays."""

    @abstractmethod
    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        """Test if ray intersects this object.

        Args:
            ray: The ray to test
            t_min: Lower bound of the open parameter interval
            t_max: Upper bound of the open parameter interval

        Returns:
            HitRecord for the nearest root strictly inside (t_min, t_max),
            None otherwise
        """
        pass


class Sphere(Hittable):
    """A sphere defined by center and radius.

    A negative radius keeps the same surface but flips its outward normal
    to point inward. Nested inside a regular dielectric sphere this makes
    a hollow glass shell ("bubble").
    """

    def __init__(self, center: Point3, radius: float):
        self.center = center
        self.radius = radius

    @property
    def is_hollow(self) -> bool:
        return self.radius < 0

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        """Test ray-sphere intersection using the quadratic formula.

        The equation (P-C)·(P-C) = r² where P = ray.at(t)
        expands to: t²(d·d) + 2t(d·(O-C)) + (O-C)·(O-C) - r² = 0
        which is solved with the half-b form of the quadratic formula.
        """
        oc = ray.origin - self.center
        a = ray.direction.length_squared()
        half_b = oc.dot(ray.direction)
        c = oc.length_squared() - self.radius * self.radius

        discriminant = half_b * half_b - a * c
        if discriminant < 0:
            return None

        sqrtd = math.sqrt(discriminant)

        # Find the nearest root in the acceptable range
        root = (-half_b - sqrtd) / a
        if root <= t_min or root >= t_max:
            root = (-half_b + sqrtd) / a
            if root <= t_min or root >= t_max:
                return None

        point = ray.at(root)
        outward_normal = (point - self.center) / self.radius
        return HitRecord.from_outward_normal(ray, point, root, outward_normal)

    def __repr__(self) -> str:
        return f"Sphere(center={self.center}, radius={self.radius})"
