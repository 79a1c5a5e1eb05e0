"""Tests for material system."""

import pytest
import math
import numpy as np
from lightpath.vec3 import Vec3, Point3, Color
from lightpath.ray import Ray
from lightpath.shapes import HitRecord
from lightpath.materials import Lambertian, Metal, Dielectric, schlick_reflectance


@pytest.fixture
def rng():
    return np.random.default_rng(2024)


def make_hit(ray: Ray, point: Point3, outward_normal: Vec3) -> HitRecord:
    return HitRecord.from_outward_normal(ray, point, 1.0, outward_normal)


class TestLambertian:
    """Test Lambertian diffuse material."""

    def test_scatter_always_succeeds(self, rng):
        mat = Lambertian(Color(0.5, 0.5, 0.5))
        ray_in = Ray(Point3(0, 0, 0), Vec3(0, 0, -1))
        hit = make_hit(ray_in, Point3(0, 0, -1), Vec3(0, 0, 1))

        for _ in range(100):
            assert mat.scatter(ray_in, hit, rng) is not None

    def test_scattered_in_hemisphere(self, rng):
        mat = Lambertian(Color(0.5, 0.5, 0.5))
        ray_in = Ray(Point3(0, 1, 0), Vec3(0, -1, 0))
        hit = make_hit(ray_in, Point3(0, 0, 0), Vec3(0, 1, 0))

        for _ in range(200):
            result = mat.scatter(ray_in, hit, rng)
            assert result.scattered_ray.direction.dot(hit.normal) >= 0
            assert not result.scattered_ray.direction.near_zero()

    def test_hemisphere_sampling_stays_above_surface(self, rng):
        mat = Lambertian(Color(0.5, 0.5, 0.5), hemisphere=True)
        ray_in = Ray(Point3(0, 1, 0), Vec3(0, -1, 0))
        hit = make_hit(ray_in, Point3(0, 0, 0), Vec3(0, 1, 0))

        for _ in range(200):
            result = mat.scatter(ray_in, hit, rng)
            assert result.scattered_ray.direction.dot(hit.normal) >= 0

    def test_hemisphere_sampling_offsets_the_normal(self, rng):
        """normal + a same-side unit vector stays within 45 degrees of the normal."""
        mat = Lambertian(Color(0.5, 0.5, 0.5), hemisphere=True)
        normal = Vec3(0, 0, 1)
        ray_in = Ray(Point3(0, 0, 1), Vec3(0, 0, -1))
        hit = make_hit(ray_in, Point3(0, 0, 0), normal)

        for _ in range(2000):
            direction = mat.scatter(ray_in, hit, rng).scattered_ray.direction
            assert direction.normalize().dot(normal) >= 1.0 / math.sqrt(2.0) - 1e-12

    def test_scattered_ray_starts_at_hit_point(self, rng):
        mat = Lambertian(Color(0.5, 0.5, 0.5))
        ray_in = Ray(Point3(0, 1, 0), Vec3(0, -1, 0))
        hit = make_hit(ray_in, Point3(3, 0, 2), Vec3(0, 1, 0))

        result = mat.scatter(ray_in, hit, rng)
        assert result.scattered_ray.origin == Point3(3, 0, 2)

    def test_attenuation_matches_albedo(self, rng):
        albedo = Color(0.8, 0.2, 0.3)
        mat = Lambertian(albedo)
        ray_in = Ray(Point3(0, 1, 0), Vec3(0, -1, 0))
        hit = make_hit(ray_in, Point3(0, 0, 0), Vec3(0, 1, 0))

        assert mat.scatter(ray_in, hit, rng).attenuation == albedo


class TestMetal:
    """Test Metal material."""

    def test_perfect_reflection(self, rng):
        mat = Metal(Color(1, 1, 1), fuzz=0.0)
        ray_in = Ray(Point3(0, 1, 0), Vec3(1, -1, 0))
        hit = make_hit(ray_in, Point3(1, 0, 0), Vec3(0, 1, 0))

        result = mat.scatter(ray_in, hit, rng)
        assert result is not None

        # Incoming (1, -1, 0) reflects to (1, 1, 0)
        expected = Vec3(1, 1, 0).normalize()
        assert result.scattered_ray.direction.normalize() == expected

    def test_normal_incidence_reflects_straight_back(self, rng):
        mat = Metal(Color(0.9, 0.9, 0.9), fuzz=0.0)
        ray_in = Ray(Point3(0, 0, 0), Vec3(0, 0, -1))
        hit = make_hit(ray_in, Point3(0, 0, -1), Vec3(0, 0, 1))

        result = mat.scatter(ray_in, hit, rng)
        assert result.scattered_ray.direction == -ray_in.direction

    def test_attenuation_matches_albedo(self, rng):
        albedo = Color(0.8, 0.6, 0.2)
        mat = Metal(albedo, 0.0)
        ray_in = Ray(Point3(0, 0, 0), Vec3(0, 0, -1))
        hit = make_hit(ray_in, Point3(0, 0, -1), Vec3(0, 0, 1))

        assert mat.scatter(ray_in, hit, rng).attenuation == albedo

    def test_fuzz_is_not_clamped(self):
        assert Metal(Color(1, 1, 1), 2.5).fuzz == 2.5

    def test_negative_fuzz_is_used_as_given(self, rng):
        mat = Metal(Color(1, 1, 1), fuzz=-0.3)
        ray_in = Ray(Point3(0, 1, 0), Vec3(0, -1, 0))
        hit = make_hit(ray_in, Point3(0, 0, 0), Vec3(0, 1, 0))

        directions = [mat.scatter(ray_in, hit, rng).scattered_ray.direction for _ in range(20)]
        # A perfect mirror would send every ray straight back up
        assert any(d != Vec3(0, 1, 0) for d in directions)

    def test_fuzz_perturbs_direction(self, rng):
        mat = Metal(Color(1, 1, 1), fuzz=0.5)
        ray_in = Ray(Point3(0, 1, 0), Vec3(0, -1, 0))
        hit = make_hit(ray_in, Point3(0, 0, 0), Vec3(0, 1, 0))

        directions = []
        for _ in range(100):
            result = mat.scatter(ray_in, hit, rng)
            if result:
                directions.append(result.scattered_ray.direction.normalize())

        assert len(directions) > 1
        first = directions[0]
        assert any(abs(d.dot(first) - 1.0) > 0.01 for d in directions[1:])

    def test_no_scatter_below_surface(self, rng):
        """Fuzz at a grazing angle sends some reflections into the surface."""
        mat = Metal(Color(1, 1, 1), fuzz=1.0)
        ray_in = Ray(Point3(-1, 0.1, 0), Vec3(1, -0.1, 0))
        hit = make_hit(ray_in, Point3(0, 0, 0), Vec3(0, 1, 0))

        successes = 0
        absorbed = 0
        for _ in range(300):
            result = mat.scatter(ray_in, hit, rng)
            if result:
                successes += 1
                assert result.scattered_ray.direction.dot(hit.normal) > 0
            else:
                absorbed += 1

        assert successes > 0
        assert absorbed > 0


class TestDielectric:
    """Test Dielectric (glass) material."""

    def test_always_scatters(self, rng):
        mat = Dielectric(1.5)
        ray_in = Ray(Point3(0, 1, 0), Vec3(0, -1, 0))
        hit = make_hit(ray_in, Point3(0, 0, 0), Vec3(0, 1, 0))

        for _ in range(100):
            assert mat.scatter(ray_in, hit, rng) is not None

    def test_attenuation_is_white(self, rng):
        mat = Dielectric(1.5)
        ray_in = Ray(Point3(0, 1, 0), Vec3(0, -1, 0))
        hit = make_hit(ray_in, Point3(0, 0, 0), Vec3(0, 1, 0))

        assert mat.scatter(ray_in, hit, rng).attenuation == Color(1, 1, 1)

    def test_refraction_bends_toward_normal(self, rng):
        """Entering a denser medium, the ray bends toward the normal."""
        mat = Dielectric(1.5)
        ray_in = Ray(Point3(-1, 1, 0), Vec3(1, -1, 0))
        hit = make_hit(ray_in, Point3(0, 0, 0), Vec3(0, 1, 0))

        refractions = []
        for _ in range(100):
            direction = mat.scatter(ray_in, hit, rng).scattered_ray.direction
            if direction.y < 0:
                refractions.append(direction)

        assert len(refractions) > 0
        incoming_sin = math.sqrt(0.5)
        for d in refractions:
            # Snell: sin(theta_t) = sin(theta_i) / 1.5
            assert abs(d.normalize().x - incoming_sin / 1.5) < 1e-9

    def test_matched_index_never_bends(self, rng):
        mat = Dielectric(1.0)
        normal = Vec3(0, 1, 0)
        for angle in (0.0, 20.0, 45.0, 70.0, 85.0):
            theta = math.radians(angle)
            direction = Vec3(math.sin(theta), -math.cos(theta), 0)
            ray_in = Ray(Point3(0, 1, 0), direction)
            hit = make_hit(ray_in, Point3(0, 0, 0), normal)

            for _ in range(50):
                out = mat.scatter(ray_in, hit, rng).scattered_ray.direction
                # Transmitted rays keep going the same way; the only other
                # outcome is a Fresnel reflection, never a bent ray
                if out.y < 0:
                    assert out == direction
                else:
                    assert out == direction.reflect(normal)

    def test_matched_index_normal_incidence_always_transmits(self, rng):
        mat = Dielectric(1.0)
        ray_in = Ray(Point3(0, 1, 0), Vec3(0, -1, 0))
        hit = make_hit(ray_in, Point3(0, 0, 0), Vec3(0, 1, 0))

        for _ in range(100):
            assert mat.scatter(ray_in, hit, rng).scattered_ray.direction == Vec3(0, -1, 0)

    def test_total_internal_reflection(self, rng):
        """Leaving glass at a steep angle can only reflect."""
        mat = Dielectric(1.5)
        direction = Vec3(0.9, 0.1, 0).normalize()
        ray_in = Ray(Point3(-0.9, -0.1, 0), direction)
        # Ray travels along +y toward a surface whose outward normal is +y
        hit = make_hit(ray_in, Point3(0, 0, 0), Vec3(0, 1, 0))
        assert hit.front_face is False

        for _ in range(50):
            out = mat.scatter(ray_in, hit, rng).scattered_ray.direction
            assert out.y < 0
            assert out == direction.reflect(hit.normal)


class TestSchlickReflectance:
    """Test Schlick's Fresnel approximation."""

    def test_normal_incidence_equals_r0(self):
        r0 = ((1 - 1.5) / (1 + 1.5)) ** 2
        assert abs(schlick_reflectance(1.0, 1.5) - r0) < 1e-12

    def test_grazing_incidence_approaches_one(self):
        for ref_idx in (1.0 / 1.5, 1.33, 1.5, 2.4):
            assert schlick_reflectance(0.0, ref_idx) == pytest.approx(1.0)
            assert schlick_reflectance(1e-4, ref_idx) > 0.99

    def test_increases_toward_grazing(self):
        values = [schlick_reflectance(c, 1 / 1.5) for c in (1.0, 0.8, 0.5, 0.2, 0.0)]
        assert values == sorted(values)
