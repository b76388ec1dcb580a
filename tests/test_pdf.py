"""Unit tests for direction densities.

Tests cover:
- Cosine PDF normalization and sampling
- Phong lobe normalization and sampling
- Mixture identity and validation
- Densities toward primitives
"""

import math

import pytest


def _integrate_over_sphere(pdf, rng, n):
    """Monte Carlo estimate of the integral of ``pdf`` over all directions."""
    from lumen.core.ray import random_unit_vector

    total = 0.0
    for _ in range(n):
        total += pdf.value(random_unit_vector(rng))
    return total * 4.0 * math.pi / n


class TestCosinePDF:
    """Tests for the cosine-weighted hemisphere density."""

    def test_normalization(self, rng):
        """Test that the density integrates to 1 over the sphere."""
        from lumen.core.pdf import CosinePDF
        from lumen.core.vec3 import Vec3

        pdf = CosinePDF.around(Vec3(0.2, 0.9, -0.3))
        assert abs(_integrate_over_sphere(pdf, rng, 20000) - 1.0) < 0.05

    def test_value(self):
        """Test cos(theta) / pi along and against the normal."""
        from lumen.core.pdf import CosinePDF
        from lumen.core.vec3 import Vec3

        pdf = CosinePDF.around(Vec3(0.0, 1.0, 0.0))
        assert abs(pdf.value(Vec3(0.0, 2.0, 0.0)) - 1.0 / math.pi) < 1e-12
        assert pdf.value(Vec3(0.0, -1.0, 0.0)) == 0.0
        assert abs(pdf.value(Vec3(1.0, 1.0, 0.0)) - math.cos(math.pi / 4) / math.pi) < 1e-12

    def test_generate_in_hemisphere(self, rng):
        """Test generated directions have positive density."""
        from lumen.core.pdf import CosinePDF
        from lumen.core.vec3 import Vec3

        normal = Vec3(-1.0, 0.5, 0.25).normalized()
        pdf = CosinePDF.around(normal)
        for _ in range(1000):
            d = pdf.generate(rng)
            assert d.dot(normal) >= 0.0
            assert abs(d.length() - 1.0) < 1e-9


class TestPhongPDF:
    """Tests for the Phong lobe density."""

    def test_normalization(self, rng):
        """Test that the lobe integrates to 1."""
        from lumen.core.pdf import PhongPDF
        from lumen.core.vec3 import Vec3

        pdf = PhongPDF.around(Vec3(0.0, 0.0, 1.0), 10.0)
        assert abs(_integrate_over_sphere(pdf, rng, 50000) - 1.0) < 0.08

    def test_peak_value(self):
        """Test (n + 1) / (2 pi) along the reflected direction."""
        from lumen.core.pdf import PhongPDF
        from lumen.core.vec3 import Vec3

        pdf = PhongPDF.around(Vec3(1.0, 0.0, 0.0), 20.0)
        assert abs(pdf.value(Vec3(1.0, 0.0, 0.0)) - 21.0 / (2.0 * math.pi)) < 1e-12
        assert pdf.value(Vec3(-1.0, 0.0, 0.0)) == 0.0

    def test_generate_concentrates_with_exponent(self, rng):
        """Test that a larger exponent keeps samples closer to the axis."""
        from lumen.core.pdf import PhongPDF
        from lumen.core.vec3 import Vec3

        axis = Vec3(0.0, 1.0, 0.0)

        def mean_cos(exponent):
            pdf = PhongPDF.around(axis, exponent)
            return sum(pdf.generate(rng).dot(axis) for _ in range(2000)) / 2000

        # E[cos] = (n + 1) / (n + 2)
        assert abs(mean_cos(1.0) - 2.0 / 3.0) < 0.02
        assert abs(mean_cos(100.0) - 101.0 / 102.0) < 0.005


class TestMixPDF:
    """Tests for the mixture density."""

    def test_identity(self, rng):
        """Test mix.value == bias * a.value + (1 - bias) * b.value exactly."""
        from lumen.core.pdf import CosinePDF, MixPDF, PhongPDF
        from lumen.core.ray import random_unit_vector
        from lumen.core.vec3 import Vec3

        a = CosinePDF.around(Vec3(0.0, 1.0, 0.0))
        b = PhongPDF.around(Vec3(0.3, 1.0, 0.0), 8.0)
        mix = MixPDF(0.75, a, b)
        for _ in range(200):
            d = random_unit_vector(rng)
            assert mix.value(d) == 0.75 * a.value(d) + (1.0 - 0.75) * b.value(d)

    def test_bias_validation(self):
        """Test that bias must lie in [0, 1]."""
        from lumen.core.pdf import CosinePDF, MixPDF
        from lumen.core.vec3 import Vec3

        a = CosinePDF.around(Vec3(0.0, 1.0, 0.0))
        with pytest.raises(ValueError, match="outside"):
            MixPDF(1.5, a, a)

    def test_generate_picks_components(self, rng):
        """Test that bias 1 always draws from the first density."""
        from lumen.core.pdf import CosinePDF, MixPDF
        from lumen.core.vec3 import Vec3

        up = CosinePDF.around(Vec3(0.0, 1.0, 0.0))
        down = CosinePDF.around(Vec3(0.0, -1.0, 0.0))
        mix = MixPDF(1.0, up, down)
        for _ in range(200):
            assert mix.generate(rng).y >= 0.0


class TestHittablePDF:
    """Tests for densities toward a primitive."""

    def test_value_matches_primitive(self, grey):
        """Test that the density delegates to the primitive's pdf."""
        from lumen.core.pdf import HittablePDF
        from lumen.core.ray import Ray
        from lumen.core.vec3 import Vec3
        from lumen.geometry import Sphere

        sphere = Sphere(Vec3(0.0, 5.0, 0.0), 1.0, grey)
        origin = Vec3(0.0, 0.0, 0.0)
        pdf = HittablePDF(origin, sphere)
        d = Vec3(0.0, 1.0, 0.0)
        assert pdf.value(d) == sphere.pdf(Ray(origin, d))

    def test_generate_toward_target(self, rng, grey):
        """Test that generated directions point at the target."""
        from lumen.core.pdf import HittablePDF
        from lumen.core.vec3 import Vec3
        from lumen.geometry import Sphere

        sphere = Sphere(Vec3(0.0, 5.0, 0.0), 1.0, grey)
        pdf = HittablePDF(Vec3(0.0, 0.0, 0.0), sphere)
        for _ in range(200):
            d = pdf.generate(rng)
            assert pdf.value(d) > 0.0
