"""Unit tests for materials.

Tests cover:
- Lambertian scattering through a cosine PDF
- Metal mirror reflection and roughness
- Dielectric refraction, total internal reflection and Fresnel choice
- Emission radiance and validation
- Phong lobe selection
- Scatter result validation
"""

import math

import pytest


def _hit(material, normal=(0.0, 1.0, 0.0), front_facing=True):
    from lumen.core.vec3 import Vec3
    from lumen.geometry.hit import Hit

    return Hit(Vec3(0.0, 0.0, 0.0), Vec3(*normal), 1.0, front_facing, material, 0.5, 0.5)


def _incoming(x, y, z):
    from lumen.core.ray import Ray
    from lumen.core.vec3 import Vec3

    return Ray(Vec3(-x, -y, -z), Vec3(x, y, z))


class TestLambertian:
    """Tests for the diffuse material."""

    def test_scatter_returns_cosine_pdf(self, grey, rng):
        """Test diffuse scattering hands a cosine PDF to the integrator."""
        from lumen.core.pdf import CosinePDF
        from lumen.core.vec3 import Vec3

        scatter = grey.scatter(_incoming(0.0, -1.0, 0.0), _hit(grey), rng)
        assert not scatter.is_specular
        assert isinstance(scatter.pdf, CosinePDF)
        assert scatter.attenuation == Vec3(0.5, 0.5, 0.5)
        assert scatter.pdf.value(Vec3(0.0, 1.0, 0.0)) > 0.0

    def test_albedo_out_of_range(self):
        """Test that albedo components must lie in [0, 1]."""
        from lumen.core.vec3 import Vec3
        from lumen.materials import Lambertian

        with pytest.raises(ValueError, match="energy conservation"):
            Lambertian.solid(Vec3(1.2, 0.5, 0.5))
        with pytest.raises(ValueError, match="outside"):
            Lambertian.solid(Vec3(0.5, -0.1, 0.5))

    def test_textured_albedo(self, rng):
        """Test the attenuation is read from the texture at the hit."""
        from lumen.core.vec3 import Vec3
        from lumen.materials import CheckerTexture, Lambertian, SolidTexture

        red = SolidTexture(Vec3(1.0, 0.0, 0.0))
        blue = SolidTexture(Vec3(0.0, 0.0, 1.0))
        material = Lambertian(CheckerTexture(odd=red, even=blue))
        scatter = material.scatter(_incoming(0.0, -1.0, 0.0), _hit(material), rng)
        # sin(0) == 0 at the origin, so the even texture is used
        assert scatter.attenuation == Vec3(0.0, 0.0, 1.0)

    def test_emits_nothing(self, grey):
        """Test that diffuse surfaces are not lights."""
        from lumen.core.vec3 import BLACK

        assert grey.emitted(_hit(grey)) == BLACK


class TestMetal:
    """Tests for the reflective material."""

    def test_mirror_reflection(self, rng):
        """Test a perfect mirror reflects about the normal."""
        from lumen.core.vec3 import Vec3
        from lumen.materials import Metal

        metal = Metal(Vec3(0.9, 0.9, 0.9))
        scatter = metal.scatter(_incoming(1.0, -1.0, 0.0), _hit(metal), rng)
        assert scatter.is_specular
        d = scatter.specular.direction
        inv_sqrt2 = 1.0 / math.sqrt(2.0)
        assert abs(d.x - inv_sqrt2) < 1e-12
        assert abs(d.y - inv_sqrt2) < 1e-12
        assert abs(d.z) < 1e-12
        assert scatter.attenuation == Vec3(0.9, 0.9, 0.9)

    def test_roughness_perturbs_within_radius(self, rng):
        """Test fuzzed reflections stay within roughness of the mirror direction."""
        from lumen.core.vec3 import Vec3
        from lumen.materials import Metal

        metal = Metal(Vec3(0.8, 0.8, 0.8), roughness=0.3)
        mirror = Vec3(1.0, 1.0, 0.0).normalized()
        for _ in range(200):
            scatter = metal.scatter(_incoming(1.0, -1.0, 0.0), _hit(metal), rng)
            assert (scatter.specular.direction - mirror).length() <= 0.3 + 1e-12

    def test_validation(self):
        """Test albedo and roughness ranges."""
        from lumen.core.vec3 import Vec3
        from lumen.materials import Metal

        with pytest.raises(ValueError, match="Albedo"):
            Metal(Vec3(1.5, 0.5, 0.5))
        with pytest.raises(ValueError, match="Roughness"):
            Metal(Vec3(0.5, 0.5, 0.5), roughness=1.5)
        with pytest.raises(ValueError, match="Roughness"):
            Metal(Vec3(0.5, 0.5, 0.5), roughness=-0.1)


class TestDielectric:
    """Tests for the glass material."""

    def test_normal_incidence_refracts_straight(self):
        """Test a ray entering head-on continues without bending."""
        from lumen.core.vec3 import Vec3
        from lumen.materials.dielectric import scatter_direction

        d = scatter_direction(Vec3(0.0, -1.0, 0.0), Vec3(0.0, 1.0, 0.0), True, 1.5, 0.5)
        assert abs(d.x) < 1e-12
        assert abs(d.y + 1.0) < 1e-12

    def test_snells_law(self):
        """Test sin(theta2) = sin(theta1) / ior entering glass."""
        from lumen.core.vec3 import Vec3
        from lumen.materials.dielectric import scatter_direction

        inv_sqrt2 = 1.0 / math.sqrt(2.0)
        d = scatter_direction(
            Vec3(inv_sqrt2, -inv_sqrt2, 0.0), Vec3(0.0, 1.0, 0.0), True, 1.5, 0.99
        )
        d = d.normalized()
        assert d.y < 0.0
        assert abs(d.x - inv_sqrt2 / 1.5) < 1e-9

    def test_total_internal_reflection(self):
        """Test that leaving glass past the critical angle reflects."""
        from lumen.core.vec3 import Vec3
        from lumen.materials.dielectric import scatter_direction

        inv_sqrt2 = 1.0 / math.sqrt(2.0)
        # Leaving glass at 45 degrees: 1.5 * sin(45) > 1
        d = scatter_direction(
            Vec3(inv_sqrt2, -inv_sqrt2, 0.0), Vec3(0.0, 1.0, 0.0), False, 1.5, 0.99
        )
        assert abs(d.x - inv_sqrt2) < 1e-12
        assert abs(d.y - inv_sqrt2) < 1e-12

    def test_fresnel_sample_selects_reflection(self):
        """Test a sample below the Schlick reflectance reflects."""
        from lumen.core.ray import schlick_fresnel
        from lumen.core.vec3 import Vec3
        from lumen.materials.dielectric import scatter_direction

        r0 = schlick_fresnel(1.0, 1.5)
        assert abs(r0 - 0.04) < 1e-12
        d = scatter_direction(Vec3(0.0, -1.0, 0.0), Vec3(0.0, 1.0, 0.0), True, 1.5, r0 / 2.0)
        assert abs(d.y - 1.0) < 1e-12

    def test_reflect_fraction_at_normal_incidence(self, rng):
        """Test that about 4% of head-on rays reflect off glass."""
        from lumen.materials import Dielectric

        glass = Dielectric(1.5)
        n = 20000
        reflected = 0
        for _ in range(n):
            scatter = glass.scatter(_incoming(0.0, -1.0, 0.0), _hit(glass), rng)
            if scatter.specular.direction.y > 0.0:
                reflected += 1
        assert abs(reflected / n - 0.04) < 0.01

    def test_attenuation_is_white(self, rng):
        """Test that clear glass absorbs nothing."""
        from lumen.core.vec3 import WHITE
        from lumen.materials import Dielectric

        glass = Dielectric(1.5)
        scatter = glass.scatter(_incoming(0.3, -1.0, 0.0), _hit(glass), rng)
        assert scatter.attenuation == WHITE

    def test_ior_must_be_positive(self):
        """Test IOR validation."""
        from lumen.materials import Dielectric

        with pytest.raises(ValueError, match="positive"):
            Dielectric(0.0)


class TestEmission:
    """Tests for emitters."""

    def test_no_scatter(self, rng):
        """Test that emitters absorb and only emit."""
        from lumen.core.vec3 import Vec3
        from lumen.materials import Emission

        light = Emission.solid(Vec3(15.0, 15.0, 15.0))
        assert light.scatter(_incoming(0.0, -1.0, 0.0), _hit(light), rng) is None
        assert light.emitted(_hit(light)) == Vec3(15.0, 15.0, 15.0)

    def test_emits_from_back_face(self):
        """Test a ray arriving from behind still sees the radiance."""
        from lumen.core.vec3 import Vec3
        from lumen.materials import Emission

        light = Emission.solid(Vec3(4.0, 2.0, 1.0))
        assert light.emitted(_hit(light, front_facing=False)) == Vec3(4.0, 2.0, 1.0)

    def test_negative_radiance(self):
        """Test that radiance must not be negative."""
        from lumen.core.vec3 import Vec3
        from lumen.materials import Emission

        with pytest.raises(ValueError, match="negative"):
            Emission.solid(Vec3(1.0, -1.0, 1.0))


class TestPhong:
    """Tests for the diffuse plus glossy material."""

    def _phong(self, kd):
        from lumen.core.vec3 import Vec3
        from lumen.materials import Phong, SolidTexture

        return Phong(
            kd,
            SolidTexture(Vec3(0.8, 0.1, 0.1)),
            SolidTexture(Vec3(0.9, 0.9, 0.9)),
            50.0,
        )

    def test_pure_diffuse(self, rng):
        """Test kd = 1 always picks the diffuse lobe."""
        from lumen.core.pdf import CosinePDF
        from lumen.core.vec3 import Vec3

        phong = self._phong(1.0)
        for _ in range(50):
            scatter = phong.scatter(_incoming(0.0, -1.0, 0.0), _hit(phong), rng)
            assert isinstance(scatter.pdf, CosinePDF)
            assert scatter.attenuation == Vec3(0.8, 0.1, 0.1)

    def test_pure_glossy(self, rng):
        """Test kd = 0 always picks a lobe around the mirror direction."""
        from lumen.core.pdf import PhongPDF
        from lumen.core.vec3 import Vec3

        phong = self._phong(0.0)
        scatter = phong.scatter(_incoming(1.0, -1.0, 0.0), _hit(phong), rng)
        assert isinstance(scatter.pdf, PhongPDF)
        mirror = Vec3(1.0, 1.0, 0.0)
        assert abs(scatter.pdf.value(mirror) - 51.0 / (2.0 * math.pi)) < 1e-9
        assert scatter.attenuation == Vec3(0.9, 0.9, 0.9)

    def test_lobe_frequency(self, rng):
        """Test the diffuse lobe is chosen with probability kd."""
        from lumen.core.pdf import CosinePDF

        phong = self._phong(0.3)
        n = 5000
        diffuse = sum(
            isinstance(phong.scatter(_incoming(0.0, -1.0, 0.0), _hit(phong), rng).pdf, CosinePDF)
            for _ in range(n)
        )
        assert abs(diffuse / n - 0.3) < 0.03

    def test_validation(self):
        """Test kd and shininess ranges."""
        with pytest.raises(ValueError, match="kd"):
            self._phong(1.5)
        from lumen.core.vec3 import Vec3
        from lumen.materials import Phong, SolidTexture

        grey = SolidTexture(Vec3(0.5, 0.5, 0.5))
        with pytest.raises(ValueError, match="Shininess"):
            Phong(0.5, grey, grey, -1.0)


class TestScatter:
    """Tests for the Scatter result."""

    def test_needs_exactly_one_outcome(self):
        """Test that a scatter is either specular or PDF driven."""
        from lumen.core.pdf import CosinePDF
        from lumen.core.ray import Ray
        from lumen.core.vec3 import Vec3
        from lumen.materials import Scatter

        ray = Ray(Vec3(0.0, 0.0, 0.0), Vec3(0.0, 1.0, 0.0))
        pdf = CosinePDF.around(Vec3(0.0, 1.0, 0.0))
        with pytest.raises(ValueError, match="exactly one"):
            Scatter(attenuation=Vec3(1.0, 1.0, 1.0))
        with pytest.raises(ValueError, match="exactly one"):
            Scatter(attenuation=Vec3(1.0, 1.0, 1.0), specular=ray, pdf=pdf)
        assert Scatter(attenuation=Vec3(1.0, 1.0, 1.0), specular=ray).is_specular
