"""Tests for the YAML scene loader.

Tests cover:
- Building scenes from parsed documents
- Texture references in any order, undefined names and cycles
- Field validation with the offending location in the message
- Loading files, including the shipped example scenes
"""

from pathlib import Path

import numpy as np
import pytest

SCENES_DIR = Path(__file__).resolve().parent.parent / "scenes"


def _document(**overrides):
    doc = {
        "background": [0.1, 0.2, 0.3],
        "camera": {"from": [0.0, 1.0, 5.0], "at": [0.0, 1.0, 0.0], "vfov": 45.0},
        "textures": {
            "grey": {"kind": "solid", "color": [0.5, 0.5, 0.5]},
            "bright": {"kind": "solid", "color": [8.0, 8.0, 8.0]},
        },
        "materials": {
            "matte": {"kind": "lambertian", "texture": "grey"},
            "lamp": {"kind": "emission", "texture": "bright"},
        },
        "objects": [
            {"kind": "sphere", "material": "matte", "center": [0.0, 1.0, 0.0], "radius": 1.0},
            {
                "kind": "rect",
                "material": "lamp",
                "axis": "xz",
                "start": [-1.0, -1.0],
                "end": [1.0, 1.0],
                "k": 4.0,
                "flip": True,
            },
        ],
    }
    doc.update(overrides)
    return doc


def _sphere_material(scene):
    """Material of the sphere at (0, 1, 0), found by shooting a ray at it."""
    from lumen.core.ray import Ray
    from lumen.core.vec3 import Vec3

    hit = scene.hit(Ray(Vec3(0.0, 1.0, 5.0), Vec3(0.0, 0.0, -1.0)), 1e-4, float("inf"))
    return hit.material


class TestParseScene:
    """Tests for parse_scene on in-memory documents."""

    def test_minimal_document(self):
        """Test a small scene builds with its lights and camera."""
        from lumen.core.vec3 import Vec3
        from lumen.scene import parse_scene

        scene, camera, render = parse_scene(_document(), aspect_ratio=2.0)
        assert len(scene.lights) == 1
        assert scene.background == Vec3(0.1, 0.2, 0.3)
        assert camera.aspect_ratio == 2.0
        assert camera.vfov == 45.0
        assert render == {}

    def test_focus_distance_defaults_to_look_distance(self):
        """Test an omitted focus distance is |from - at|."""
        from lumen.scene import parse_scene

        _, camera, _ = parse_scene(_document())
        assert abs(camera.focus_distance - 5.0) < 1e-12

    def test_aspect_ratio_from_render_section(self):
        """Test the camera follows the render size when no ratio is given."""
        from lumen.scene import parse_scene

        doc = _document(render={"width": 400, "height": 100, "samples": 4})
        _, camera, render = parse_scene(doc)
        assert camera.aspect_ratio == 4.0
        assert render["samples"] == 4

    def test_bad_render_section(self):
        """Test unknown render keys are reported as scene errors."""
        from lumen.scene import SceneError, parse_scene

        with pytest.raises(SceneError, match="render: Unknown render settings"):
            parse_scene(_document(render={"spp": 4}))

    def test_gradient_background(self):
        """Test a bottom/top mapping makes a sky gradient."""
        from lumen.core.vec3 import Vec3
        from lumen.scene import SkyGradient, parse_scene

        doc = _document(background={"bottom": [1, 1, 1], "top": [0.5, 0.7, 1.0]})
        scene, _, _ = parse_scene(doc)
        assert isinstance(scene.background, SkyGradient)
        assert scene.background.top == Vec3(0.5, 0.7, 1.0)

    def test_forward_texture_reference(self):
        """Test a checker may reference textures defined after it."""
        from lumen.materials import CheckerTexture
        from lumen.scene import parse_scene

        doc = _document()
        doc["textures"] = {
            "floor": {"kind": "checker", "odd": "dark", "even": "light", "scale": 2},
            "dark": {"kind": "solid", "color": [0.1, 0.1, 0.1]},
            "light": {"kind": "solid", "color": [0.9, 0.9, 0.9]},
            "bright": {"kind": "solid", "color": [8.0, 8.0, 8.0]},
        }
        doc["materials"]["matte"] = {"kind": "lambertian", "texture": "floor"}
        scene, _, _ = parse_scene(doc)
        material = _sphere_material(scene)
        assert isinstance(material.texture, CheckerTexture)
        assert material.texture.scale == 2.0

    def test_texture_cycle(self):
        """Test that mutually referencing checkers are rejected."""
        from lumen.scene import SceneError, parse_scene

        doc = _document()
        doc["textures"]["a"] = {"kind": "checker", "odd": "b", "even": "grey"}
        doc["textures"]["b"] = {"kind": "checker", "odd": "grey", "even": "a"}
        doc["materials"]["matte"] = {"kind": "lambertian", "texture": "a"}
        with pytest.raises(SceneError, match="cycle: a -> b -> a"):
            parse_scene(doc)

    def test_undefined_texture(self):
        """Test a material naming a missing texture."""
        from lumen.scene import SceneError, parse_scene

        doc = _document()
        doc["materials"]["matte"] = {"kind": "lambertian", "texture": "nope"}
        with pytest.raises(SceneError, match="material 'matte': undefined texture 'nope'"):
            parse_scene(doc)

    def test_undefined_material(self):
        """Test an object naming a missing material."""
        from lumen.scene import SceneError, parse_scene

        doc = _document()
        doc["objects"][0]["material"] = "chrome"
        with pytest.raises(SceneError, match="object #0: undefined material 'chrome'"):
            parse_scene(doc)

    @pytest.mark.parametrize(
        "obj, match",
        [
            ({"kind": "torus", "material": "matte"}, "unknown kind 'torus'"),
            ({"kind": "sphere", "material": "matte", "center": [0, 0], "radius": 1},
             "expected a list of 3 numbers"),
            ({"kind": "sphere", "material": "matte", "center": [0, 0, 0], "radius": "big"},
             "expected a number"),
            ({"kind": "sphere", "material": "matte", "center": [0, 0, 0]},
             "missing required key 'radius'"),
            ({"kind": "sphere", "material": "matte", "center": [0, 0, 0], "radius": -1},
             "radius"),
            ({"kind": "rect", "material": "matte", "axis": "xw", "start": [0, 0],
              "end": [1, 1], "k": 0}, "unknown rect axis"),
        ],
    )
    def test_bad_object(self, obj, match):
        """Test malformed objects raise with a located message."""
        from lumen.scene import SceneError, parse_scene

        doc = _document()
        doc["objects"] = [obj]
        with pytest.raises(SceneError, match=match):
            parse_scene(doc)

    def test_bad_material_values(self):
        """Test constructor validation is reported as a scene error."""
        from lumen.scene import SceneError, parse_scene

        doc = _document()
        doc["materials"]["chrome"] = {"kind": "metal", "color": [1, 1, 1], "roughness": 2.0}
        with pytest.raises(SceneError, match="material 'chrome': Roughness"):
            parse_scene(doc)

    def test_booleans_are_not_numbers(self):
        """Test YAML booleans are not accepted as numbers."""
        from lumen.scene import SceneError, parse_scene

        doc = _document()
        doc["materials"]["glass"] = {"kind": "dielectric", "ior": True}
        with pytest.raises(SceneError, match="expected a number"):
            parse_scene(doc)

    def test_empty_objects(self):
        """Test that a scene needs at least one object."""
        from lumen.scene import SceneError, parse_scene

        with pytest.raises(SceneError, match="non-empty list"):
            parse_scene(_document(objects=[]))

    def test_bad_camera(self):
        """Test camera validation is reported as a scene error."""
        from lumen.scene import SceneError, parse_scene

        doc = _document(camera={"from": [0, 0, 0], "at": [0, 0, -1], "vfov": 200})
        with pytest.raises(SceneError, match="camera: vfov"):
            parse_scene(doc)

    def test_transforms_applied(self):
        """Test rotate is applied before translate."""
        from lumen.core.ray import Ray
        from lumen.core.vec3 import Vec3
        from lumen.geometry import Rotate, Translate
        from lumen.scene import parse_scene

        doc = _document()
        doc["objects"] = [
            {
                "kind": "block",
                "material": "matte",
                "start": [0, 0, 0],
                "end": [1, 1, 1],
                "rotate": [0, 90, 0],
                "translate": [5, 0, 0],
            }
        ]
        scene, _, _ = parse_scene(doc)
        placed = scene.root.left
        assert isinstance(placed, Translate)
        assert isinstance(placed.primitive, Rotate)
        hit = scene.hit(Ray(Vec3(5.5, 0.5, 5.0), Vec3(0.0, 0.0, -1.0)), 1e-4, float("inf"))
        assert hit is not None
        assert abs(hit.point.z) < 1e-9

    def test_not_a_mapping(self):
        """Test a document that is not a mapping."""
        from lumen.scene import SceneError, parse_scene

        with pytest.raises(SceneError, match="expected a mapping"):
            parse_scene([1, 2, 3])


class TestLoadScene:
    """Tests for load_scene on files."""

    def test_missing_file(self, tmp_path):
        """Test a missing file raises FileNotFoundError."""
        from lumen.scene import load_scene

        with pytest.raises(FileNotFoundError, match="not found"):
            load_scene(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        """Test a syntax error is a scene error."""
        from lumen.scene import SceneError, load_scene

        path = tmp_path / "broken.yaml"
        path.write_text("objects: [unclosed\n", encoding="utf-8")
        with pytest.raises(SceneError, match="invalid YAML"):
            load_scene(path)

    def test_image_texture_relative_to_file(self, tmp_path):
        """Test image paths resolve against the scene file's directory."""
        import yaml
        from PIL import Image

        from lumen.materials import ImageTexture
        from lumen.scene import load_scene

        (tmp_path / "maps").mkdir()
        Image.fromarray(np.full((2, 2, 3), 200, dtype=np.uint8)).save(tmp_path / "maps" / "wood.png")
        doc = _document()
        doc["textures"]["wood"] = {"kind": "image", "path": "maps/wood.png"}
        doc["materials"]["matte"] = {"kind": "lambertian", "texture": "wood"}
        path = tmp_path / "scene.yaml"
        path.write_text(yaml.safe_dump(doc), encoding="utf-8")

        scene, _, _ = load_scene(path)
        texture = _sphere_material(scene).texture
        assert isinstance(texture, ImageTexture)
        assert abs(texture.pixels[0, 0, 0] - 200.0 / 255.0) < 1e-12

    def test_missing_image(self, tmp_path):
        """Test an unreadable image is a scene error."""
        from lumen.scene import SceneError, parse_scene

        doc = _document()
        doc["textures"]["wood"] = {"kind": "image", "path": "nowhere.png"}
        doc["materials"]["matte"] = {"kind": "lambertian", "texture": "wood"}
        with pytest.raises(SceneError, match="cannot load image"):
            parse_scene(doc, base_dir=tmp_path)

    def test_shipped_cornell_scene(self):
        """Test the example Cornell box file."""
        from lumen.config import RenderSettings
        from lumen.scene import load_scene

        scene, camera, render = load_scene(SCENES_DIR / "cornell.yaml")
        settings = RenderSettings.from_mapping(render)
        assert (settings.width, settings.height) == (300, 300)
        assert len(scene.lights) == 1
        assert camera.aspect_ratio == 1.0
        assert scene.lights[0].outward_normal.y == -1.0

    def test_shipped_showcase_scene(self):
        """Test the example showcase file."""
        from lumen.config import RenderSettings
        from lumen.scene import load_scene

        scene, camera, render = load_scene(SCENES_DIR / "showcase.yaml")
        settings = RenderSettings.from_mapping(render)
        assert settings.tone_map == "reinhard"
        assert len(scene.lights) >= 1
        assert abs(camera.aspect_ratio - settings.aspect_ratio) < 1e-12
