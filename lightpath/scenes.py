"""Built-in scenes used by the command line renderer."""

from __future__ import annotations
from typing import Callable, Dict

from .vec3 import Color, Point3
from .shapes import Sphere
from .materials import Lambertian, Metal, Dielectric
from .scene import Scene


def single_sphere_scene() -> Scene:
    """One diffuse sphere straight ahead of the default camera."""
    world = Scene()
    world.add(Sphere(Point3(0, 0, -1), 0.5), Lambertian(Color(0.5, 0.5, 0.5)))
    return world


def default_scene() -> Scene:
    """Diffuse, glass and metal spheres resting on a large ground sphere."""
    world = Scene()

    ground = Lambertian(Color(0.8, 0.8, 0.0))
    center = Lambertian(Color(0.1, 0.2, 0.5))
    glass = Dielectric(1.5)
    metal = Metal(Color(0.8, 0.6, 0.2), 0.0)

    world.add(Sphere(Point3(0, -100.5, -1), 100), ground)
    world.add(Sphere(Point3(0, 0, -1), 0.5), center)
    world.add(Sphere(Point3(-1, 0, -1), 0.5), glass)
    # Negative radius: inner surface of a hollow glass shell
    world.add(Sphere(Point3(-1, 0, -1), -0.4), Dielectric(1.5))
    world.add(Sphere(Point3(1, 0, -1), 0.5), metal)

    return world


def glass_bubble_scene() -> Scene:
    """A hollow glass sphere resting on a diffuse ground."""
    world = Scene()
    world.add(Sphere(Point3(0, -100.5, -1), 100), Lambertian(Color(0.5, 0.5, 0.5)))
    world.add(Sphere(Point3(0, 0, -1), 0.5), Dielectric(1.5))
    world.add(Sphere(Point3(0, 0, -1), -0.45), Dielectric(1.5))
    return world


SCENES: Dict[str, Callable[[], Scene]] = {
    'default': default_scene,
    'single': single_sphere_scene,
    'bubble': glass_bubble_scene,
}
