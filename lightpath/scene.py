"""
Scene container and nearest-hit resolution.

A scene is an ordered list of objects, each pairing one geometry with one
material. Order never changes which surface is visible, except when two
surfaces sit at exactly the same distance: the earlier object wins.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Tuple

from .ray import Ray
from .shapes import Hittable, HitRecord
from .materials import Material


@dataclass(frozen=True)
class SceneObject:
    """A geometry paired with the material used to shade it."""
    geometry: Hittable
    material: Material

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        return self.geometry.hit(ray, t_min, t_max)


def hit_list(
    ray: Ray,
    objects: Iterable[SceneObject],
    t_min: float,
    t_max: float
) -> Optional[Tuple[SceneObject, HitRecord]]:
    """Find the closest intersection among all objects.

    The search interval shrinks to the closest hit found so far, so a later
    object only replaces the current best when it is strictly closer.

    Returns:
        (object, hit record) for the nearest hit, or None if nothing is hit
    """
    closest: Optional[Tuple[SceneObject, HitRecord]] = None
    closest_t = t_max

    for obj in objects:
        hit_record = obj.hit(ray, t_min, closest_t)
        if hit_record is not None:
            closest = (obj, hit_record)
            closest_t = hit_record.t

    return closest


class Scene:
    """An ordered collection of scene objects.

    Scenes are built before rendering and only read afterwards, so worker
    threads can share one instance without locking.
    """

    def __init__(self, objects: Optional[list[SceneObject]] = None):
        self.objects: list[SceneObject] = objects if objects is not None else []

    def add(self, geometry: Hittable, material: Material) -> SceneObject:
        """Pair a geometry with a material and append it."""
        obj = SceneObject(geometry, material)
        self.objects.append(obj)
        return obj

    def add_object(self, obj: SceneObject) -> None:
        self.objects.append(obj)

    def clear(self) -> None:
        """Remove all objects."""
        self.objects.clear()

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[Tuple[SceneObject, HitRecord]]:
        return hit_list(ray, self.objects, t_min, t_max)

    def __len__(self) -> int:
        return len(self.objects)

    def __iter__(self) -> Iterator[SceneObject]:
        return iter(self.objects)
