"""
Materials system.

Implements:
- Lambertian diffuse
- Metal (specular reflection with fuzz)
- Dielectric (glass, water - with refraction)

A material decides whether an incoming ray continues after a hit and how
much of each color channel survives. Returning None absorbs the ray.
Parameters such as fuzz and the refractive index are not validated;
callers are expected to pass physically sensible values.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional
import math

import numpy as np

from .vec3 import Vec3, Color
from .ray import Ray
from .shapes import HitRecord


@dataclass
class ScatterResult:
    """Result of a material scatter operation."""
    scattered_ray: Ray
    attenuation: Color


class Material(ABC):
    """Abstract base class for materials."""

    @abstractmethod
    def scatter(self, ray_in: Ray, hit: HitRecord, rng: np.random.Generator) -> Optional[ScatterResult]:
        """Compute the scattered ray and attenuation.

        Args:
            ray_in: The incoming ray
            hit: Intersection record (normal opposes ray_in)
            rng: Random stream owned by the calling worker

        Returns:
            ScatterResult if ray scatters, None if absorbed
        """
        pass


class Lambertian(Material):
    """Diffuse material with Lambertian (ideal matte) scattering."""

    def __init__(self, albedo: Color, hemisphere: bool = False):
        """Create a Lambertian material.

        Args:
            albedo: The base color (RGB, each component 0-1)
            hemisphere: Offset the normal by a unit vector drawn from its own
                hemisphere instead of from the whole sphere, which keeps
                every bounce within 45 degrees of the normal
        """
        self.albedo = albedo
        self.hemisphere = hemisphere

    def scatter(self, ray_in: Ray, hit: HitRecord, rng: np.random.Generator) -> Optional[ScatterResult]:
        if self.hemisphere:
            scatter_direction = hit.normal + Vec3.random_in_hemisphere(rng, hit.normal)
        else:
            scatter_direction = hit.normal + Vec3.random_unit_vector(rng)

        # Catch degenerate scatter direction
        if scatter_direction.near_zero():
            scatter_direction = hit.normal

        return ScatterResult(
            scattered_ray=Ray(hit.point, scatter_direction),
            attenuation=self.albedo
        )

    def __repr__(self) -> str:
        return f"Lambertian(albedo={self.albedo})"


class Metal(Material):
    """Metallic material with specular reflection."""

    def __init__(self, albedo: Color, fuzz: float = 0.0):
        """Create a metal material.

        Args:
            albedo: The reflection color
            fuzz: Radius of the random perturbation added to the mirror
                direction (0 = perfect mirror)
        """
        self.albedo = albedo
        self.fuzz = fuzz

    def scatter(self, ray_in: Ray, hit: HitRecord, rng: np.random.Generator) -> Optional[ScatterResult]:
        reflected = ray_in.direction.normalize().reflect(hit.normal)
        if self.fuzz != 0:
            reflected = reflected + Vec3.random_in_unit_sphere(rng) * self.fuzz

        # Fuzz can push the reflection below the surface; absorb those
        if reflected.dot(hit.normal) <= 0:
            return None
        return ScatterResult(
            scattered_ray=Ray(hit.point, reflected),
            attenuation=self.albedo
        )

    def __repr__(self) -> str:
        return f"Metal(albedo={self.albedo}, fuzz={self.fuzz})"


class Dielectric(Material):
    """Dielectric (glass-like) material with refraction."""

    def __init__(self, ir: float = 1.5):
        """Create a dielectric material.

        Args:
            ir: Index of refraction (1.0 = air, 1.5 = glass, 2.4 = diamond)
        """
        self.ir = ir

    def scatter(self, ray_in: Ray, hit: HitRecord, rng: np.random.Generator) -> Optional[ScatterResult]:
        # Entering the surface from outside, or leaving it
        refraction_ratio = 1.0 / self.ir if hit.front_face else self.ir

        unit_direction = ray_in.direction.normalize()
        cos_theta = min(-unit_direction.dot(hit.normal), 1.0)
        sin_theta = math.sqrt(1.0 - cos_theta * cos_theta)

        cannot_refract = refraction_ratio * sin_theta > 1.0
        if cannot_refract or schlick_reflectance(cos_theta, refraction_ratio) > rng.random():
            direction = unit_direction.reflect(hit.normal)
        else:
            direction = unit_direction.refract(hit.normal, refraction_ratio)

        return ScatterResult(
            scattered_ray=Ray(hit.point, direction),
            attenuation=Color(1.0, 1.0, 1.0)
        )

    def __repr__(self) -> str:
        return f"Dielectric(ir={self.ir})"


def schlick_reflectance(cosine: float, ref_idx: float) -> float:
    """Schlick's approximation for Fresnel reflectance.

    Args:
        cosine: Cosine of the angle between the incoming ray and the normal
        ref_idx: Ratio of refractive indices across the surface

    Returns:
        Probability of reflection, approaching 1 at grazing incidence
    """
    r0 = (1 - ref_idx) / (1 + ref_idx)
    r0 = r0 * r0
    return r0 + (1 - r0) * pow(1 - cosine, 5)
