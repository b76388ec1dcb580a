"""Monte Carlo path tracer with BVH acceleration and light importance sampling.

This package renders static 3D scenes on the CPU, with support for:
- Path tracing with multiple importance sampling toward light primitives
- Various material models (Lambertian, metal, dielectric, emission, Phong)
- Geometric primitives (spheres, axis-aligned rects, blocks, transforms)
- Parallel rendering into a shared, lock-protected framebuffer

Subpackages:
    core: Vectors, rays, sampling, PDFs, the path integrator and render driver
    geometry: Shape primitives, bounding boxes and the BVH
    materials: Textures and scattering models
    scene: Scene assembly, YAML loading and procedural presets
    camera: Thin lens camera with ray generation
    preview: PNG export and preview windows
"""

__version__ = "0.1.0"
