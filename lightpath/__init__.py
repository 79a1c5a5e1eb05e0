"""
lightpath - A Python CPU Path Tracer

Renders static scenes of spheres with stochastic ray sampling:
- Lambertian, metal and dielectric (glass) materials
- Recursive light transport with a bounded bounce budget
- Jittered multi-sample anti-aliasing
- Multi-threaded tile rendering with reproducible per-tile random streams
- Gamma-corrected 8-bit output
"""

__version__ = "0.1.0"

from .vec3 import Vec3, Point3, Color
from .ray import Ray
from .shapes import HitRecord, Hittable, Sphere
from .materials import Material, ScatterResult, Lambertian, Metal, Dielectric, schlick_reflectance
from .scene import Scene, SceneObject, hit_list
from .camera import Camera
from .integrator import ray_color, sky_color, T_MIN
from .renderer import Renderer, RenderSettings, to_ldr, save_image
from .scenes import SCENES, default_scene, single_sphere_scene, glass_bubble_scene
from .scene_parser import SceneParser, SceneParseError, load_scene, parse_scene
