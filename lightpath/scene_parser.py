"""
Scene description parser.

Supports JSON and YAML scene descriptions with:
- Camera configuration
- Render settings
- Materials library
- Objects (spheres with materials)

Example scene file:
```yaml
camera:
  aspect_ratio: 1.7778
  vfov: 90
  focal_length: 1.0

render:
  width: 400
  height: 225
  samples: 100
  max_depth: 50
  seed: 7

materials:
  ground:
    type: lambertian
    albedo: [0.8, 0.8, 0.0]

  glass:
    type: dielectric
    ir: 1.5

objects:
  - type: sphere
    center: [0, -100.5, -1]
    radius: 100
    material: ground

  - type: sphere
    center: [0, 0, -1]
    radius: 0.5
    material: glass

  - type: sphere
    center: [0, 0, -1]
    radius: -0.4        # hollow shell
    material: glass
```
"""

from __future__ import annotations
from pathlib import Path
from typing import Dict, Any, Tuple
import json

import yaml

from .vec3 import Vec3, Color
from .camera import Camera
from .shapes import Sphere
from .materials import Material, Lambertian, Metal, Dielectric
from .scene import Scene
from .renderer import RenderSettings


class SceneParseError(Exception):
    """Error during scene parsing."""
    pass


class SceneParser:
    """Parser for scene description files."""

    def __init__(self):
        self.materials: Dict[str, Dict[str, Any]] = {}
        self.scene: Scene = Scene()

    def parse_file(self, filepath: str) -> Tuple[Scene, Camera, RenderSettings]:
        """Parse a scene file.

        Args:
            filepath: Path to the scene file (YAML or JSON)

        Returns:
            Tuple of (scene, camera, settings)
        """
        path = Path(filepath)
        if not path.exists():
            raise SceneParseError(f"Scene file not found: {filepath}")

        content = path.read_text()

        try:
            if path.suffix == '.json':
                data = json.loads(content)
            else:
                # YAML is a superset of JSON, so it covers other suffixes too
                data = yaml.safe_load(content)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise SceneParseError(f"Cannot read scene file {filepath}: {e}") from e

        if not isinstance(data, dict):
            raise SceneParseError(f"Scene file must contain a mapping: {filepath}")

        return self.parse_dict(data)

    def parse_dict(self, data: Dict[str, Any]) -> Tuple[Scene, Camera, RenderSettings]:
        """Parse a scene from a dictionary.

        Args:
            data: Scene description dictionary

        Returns:
            Tuple of (scene, camera, settings)
        """
        # Parse materials first (objects reference them)
        if 'materials' in data:
            self._parse_materials(self._require_mapping(data['materials'], "materials section"))

        if 'objects' in data:
            objects = data['objects']
            if not isinstance(objects, list):
                raise SceneParseError(f"objects section must be a list, got: {objects!r}")
            self._parse_objects(objects)

        settings = self._parse_settings(self._require_mapping(data.get('render') or {}, "render section"))
        camera = self._parse_camera(self._require_mapping(data.get('camera') or {}, "camera section"), settings)

        return self.scene, camera, settings

    def _require_mapping(self, data: Any, what: str) -> Dict[str, Any]:
        if not isinstance(data, dict):
            raise SceneParseError(f"{what} must be a mapping, got: {data!r}")
        return data

    def _type_of(self, data: Dict[str, Any], default: str) -> str:
        """Lowercased 'type' field of an entry."""
        entry_type = data.get('type', default)
        if not isinstance(entry_type, str):
            raise SceneParseError(f"type must be a string, got: {entry_type!r}")
        return entry_type.lower()

    def _parse_float(self, value: Any, field: str) -> float:
        try:
            return float(value)
        except (TypeError, ValueError) as e:
            raise SceneParseError(f"{field} must be a number, got: {value!r}") from e

    def _parse_vec3(self, data: Any) -> Vec3:
        """Parse a Vec3 from a list or an x/y/z mapping."""
        if isinstance(data, (list, tuple)):
            if len(data) != 3:
                raise SceneParseError(f"Vec3 must have 3 components, got {len(data)}")
            return Vec3(*(self._parse_float(c, "Vec3 component") for c in data))
        elif isinstance(data, dict):
            return Vec3(
                self._parse_float(data.get('x', 0), "x"),
                self._parse_float(data.get('y', 0), "y"),
                self._parse_float(data.get('z', 0), "z")
            )
        else:
            raise SceneParseError(f"Cannot parse Vec3 from: {data}")

    def _parse_color(self, data: Any) -> Color:
        """Parse a Color from a list, an r/g/b mapping or a hex string."""
        if isinstance(data, (list, tuple)):
            if len(data) != 3:
                raise SceneParseError(f"Color must have 3 components, got {len(data)}")
            return Color(*(self._parse_float(c, "Color component") for c in data))
        elif isinstance(data, dict):
            return Color(
                self._parse_float(data.get('r', 0), "r"),
                self._parse_float(data.get('g', 0), "g"),
                self._parse_float(data.get('b', 0), "b")
            )
        elif isinstance(data, str):
            if data.startswith('#') and len(data) == 7:
                hex_color = data[1:]
                try:
                    r = int(hex_color[0:2], 16) / 255.0
                    g = int(hex_color[2:4], 16) / 255.0
                    b = int(hex_color[4:6], 16) / 255.0
                except ValueError as e:
                    raise SceneParseError(f"Cannot parse color from string: {data}") from e
                return Color(r, g, b)
            raise SceneParseError(f"Cannot parse color from string: {data}")
        else:
            raise SceneParseError(f"Cannot parse Color from: {data}")

    def _parse_material(self, mat_data: Any) -> Material:
        """Build one material from its description."""
        mat_data = self._require_mapping(mat_data, "Material")
        mat_type = self._type_of(mat_data, 'lambertian')

        if mat_type == 'lambertian':
            albedo = self._parse_color(mat_data.get('albedo', [0.5, 0.5, 0.5]))
            sampling = mat_data.get('sampling', 'cosine')
            if sampling not in ('cosine', 'hemisphere'):
                raise SceneParseError(f"Unknown diffuse sampling: {sampling}")
            return Lambertian(albedo, hemisphere=sampling == 'hemisphere')

        elif mat_type == 'metal':
            albedo = self._parse_color(mat_data.get('albedo', [0.8, 0.8, 0.8]))
            fuzz = self._parse_float(mat_data.get('fuzz', 0.0), "fuzz")
            return Metal(albedo, fuzz)

        elif mat_type == 'dielectric':
            return Dielectric(self._parse_float(mat_data.get('ir', 1.5), "ir"))

        raise SceneParseError(f"Unknown material type: {mat_type}")

    def _parse_materials(self, materials_data: Dict[str, Any]) -> None:
        """Parse materials section.

        Definitions are checked here and kept; every object that names one
        gets its own instance built from the definition.
        """
        for name, mat_data in materials_data.items():
            self._parse_material(mat_data)
            self.materials[name] = mat_data

    def _get_material(self, mat_ref: Any) -> Material:
        """Build a material from a name or an inline definition."""
        if mat_ref is None:
            raise SceneParseError("Object has no material")
        if isinstance(mat_ref, str):
            if mat_ref not in self.materials:
                raise SceneParseError(f"Unknown material: {mat_ref}")
            return self._parse_material(self.materials[mat_ref])
        elif isinstance(mat_ref, dict):
            return self._parse_material(mat_ref)
        else:
            raise SceneParseError(f"Invalid material reference: {mat_ref}")

    def _parse_objects(self, objects_data: list) -> None:
        """Parse objects section."""
        for obj_data in objects_data:
            obj_data = self._require_mapping(obj_data, "Object")
            obj_type = self._type_of(obj_data, 'sphere')
            material = self._get_material(obj_data.get('material'))

            if obj_type == 'sphere':
                center = self._parse_vec3(obj_data.get('center', [0, 0, 0]))
                radius = self._parse_float(obj_data.get('radius', 1.0), "radius")
                self.scene.add(Sphere(center, radius), material)
            else:
                raise SceneParseError(f"Unknown object type: {obj_type}")

    def _parse_camera(self, camera_data: Dict[str, Any], settings: RenderSettings) -> Camera:
        """Parse camera section; aspect ratio defaults to the image's."""
        aspect_ratio = self._parse_float(
            camera_data.get('aspect_ratio', settings.width / settings.height), "aspect_ratio"
        )
        focal_length = self._parse_float(camera_data.get('focal_length', 1.0), "focal_length")
        origin = self._parse_vec3(camera_data.get('origin', [0, 0, 0]))

        if 'vfov' in camera_data:
            return Camera.from_vfov(
                self._parse_float(camera_data['vfov'], "vfov"),
                aspect_ratio=aspect_ratio,
                focal_length=focal_length,
                origin=origin
            )
        return Camera(
            aspect_ratio=aspect_ratio,
            viewport_height=self._parse_float(camera_data.get('viewport_height', 2.0), "viewport_height"),
            focal_length=focal_length,
            origin=origin
        )

    def _parse_settings(self, settings_data: Dict[str, Any]) -> RenderSettings:
        """Parse render settings section."""
        seed = settings_data.get('seed')
        background = settings_data.get('background')
        try:
            return RenderSettings(
                width=int(settings_data.get('width', 400)),
                height=int(settings_data.get('height', 225)),
                samples_per_pixel=int(settings_data.get('samples', 100)),
                max_depth=int(settings_data.get('max_depth', 50)),
                tile_size=int(settings_data.get('tile_size', 16)),
                num_threads=int(settings_data.get('threads', 0)),
                seed=int(seed) if seed is not None else None,
                background=self._parse_color(background) if background is not None else None
            )
        except (TypeError, ValueError) as e:
            raise SceneParseError(f"Invalid render settings: {e}") from e




def load_scene(filepath: str) -> Tuple[Scene, Camera, RenderSettings]:
    """Convenience function to load a scene file.

    Args:
        filepath: Path to the scene file

    Returns:
        Tuple of (scene, camera, settings)
    """
    parser = SceneParser()
    return parser.parse_file(filepath)


def parse_scene(data: Dict[str, Any]) -> Tuple[Scene, Camera, RenderSettings]:
    """Convenience function to parse a scene from a dictionary.

    Args:
        data: Scene description dictionary

    Returns:
        Tuple of (scene, camera, settings)
    """
    parser = SceneParser()
    return parser.parse_dict(data)
