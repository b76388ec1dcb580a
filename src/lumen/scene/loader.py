"""YAML scene description loader.

A scene file has the following top-level keys:

    background: [r, g, b]  or  {bottom: [r, g, b], top: [r, g, b]}
    camera: {from, at, up, vfov, aperture, focus_distance}
    textures: {name: {kind: solid | checker | image, ...}}
    materials: {name: {kind: lambertian | metal | dielectric | emission | phong, ...}}
    objects: [{kind: sphere | rect | block, material: name, rotate?, translate?, ...}]
    render: {width, height, samples, ...}        (optional RenderSettings values)

Textures may reference each other in any order; reference cycles and
references to undefined names are errors. Image texture paths are resolved
relative to the scene file. An object's ``rotate`` (degrees about x, y, z)
is applied before its ``translate``.

Example:
    >>> scene, camera, render = load_scene("scenes/cornell.yaml")
    >>> settings = RenderSettings.from_mapping(render)
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from lumen.camera.thin_lens import ThinLensCamera
from lumen.config import RenderSettings
from lumen.core.vec3 import Vec3
from lumen.geometry import Block, Primitive, Rect, RectAxis, Rotate, Sphere, Translate
from lumen.materials import (
    CheckerTexture,
    Dielectric,
    Emission,
    ImageTexture,
    Lambertian,
    Material,
    Metal,
    Phong,
    SolidTexture,
    Texture,
)
from lumen.scene.scene import Background, Scene, SkyGradient

logger = logging.getLogger(__name__)

RECT_AXES = {"yz": RectAxis.YZ, "xz": RectAxis.XZ, "xy": RectAxis.XY}


class SceneError(ValueError):
    """Raised when a scene description is malformed."""


# =============================================================================
# Field helpers
# =============================================================================


def _require(entry: Mapping[str, Any], key: str, where: str) -> Any:
    if key not in entry:
        raise SceneError(f"{where}: missing required key '{key}'")
    return entry[key]


def _mapping(value: Any, where: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise SceneError(f"{where}: expected a mapping, got {type(value).__name__}")
    return value


def _number(value: Any, where: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SceneError(f"{where}: expected a number, got {value!r}")
    return float(value)


def _numbers(value: Any, count: int, where: str) -> tuple[float, ...]:
    if not isinstance(value, (list, tuple)) or len(value) != count:
        raise SceneError(f"{where}: expected a list of {count} numbers, got {value!r}")
    return tuple(_number(v, where) for v in value)


def _vector(value: Any, where: str) -> Vec3:
    return Vec3(*_numbers(value, 3, where))


def _kind(entry: Mapping[str, Any], where: str, kinds: tuple[str, ...]) -> str:
    kind = _require(entry, "kind", where)
    if kind not in kinds:
        raise SceneError(f"{where}: unknown kind '{kind}', expected one of {', '.join(kinds)}")
    return kind


# =============================================================================
# Sections
# =============================================================================


class _TextureResolver:
    """Builds named textures on demand so references may appear in any order."""

    KINDS = ("solid", "checker", "image")

    def __init__(self, specs: Mapping[str, Any], base_dir: Path) -> None:
        self._specs = specs
        self._base_dir = base_dir
        self._built: dict[str, Texture] = {}
        self._resolving: list[str] = []

    def get(self, name: Any, where: str) -> Texture:
        if not isinstance(name, str) or name not in self._specs:
            raise SceneError(f"{where}: undefined texture '{name}'")
        if name in self._built:
            return self._built[name]
        if name in self._resolving:
            cycle = " -> ".join([*self._resolving, name])
            raise SceneError(f"Texture reference cycle: {cycle}")

        self._resolving.append(name)
        try:
            texture = self._build(name, _mapping(self._specs[name], f"texture '{name}'"))
        finally:
            self._resolving.pop()
        self._built[name] = texture
        return texture

    def _build(self, name: str, entry: Mapping[str, Any]) -> Texture:
        where = f"texture '{name}'"
        kind = _kind(entry, where, self.KINDS)
        if kind == "solid":
            return SolidTexture(_vector(_require(entry, "color", where), where))
        if kind == "checker":
            odd = self.get(_require(entry, "odd", where), where)
            even = self.get(_require(entry, "even", where), where)
            scale = _number(entry.get("scale", 10.0), where)
            return CheckerTexture(odd, even, scale)

        path = self._base_dir / str(_require(entry, "path", where))
        try:
            return ImageTexture.from_file(path)
        except OSError as exc:
            raise SceneError(f"{where}: cannot load image {path}: {exc}") from exc


def _parse_materials(
    specs: Mapping[str, Any], textures: _TextureResolver
) -> dict[str, Material]:
    materials: dict[str, Material] = {}
    kinds = ("lambertian", "metal", "dielectric", "emission", "phong")
    for name, raw in specs.items():
        where = f"material '{name}'"
        entry = _mapping(raw, where)
        kind = _kind(entry, where, kinds)
        try:
            if kind == "lambertian":
                texture = textures.get(_require(entry, "texture", where), where)
                material: Material = Lambertian(texture)
            elif kind == "metal":
                material = Metal(
                    _vector(_require(entry, "color", where), where),
                    _number(entry.get("roughness", 0.0), where),
                )
            elif kind == "dielectric":
                material = Dielectric(_number(_require(entry, "ior", where), where))
            elif kind == "emission":
                material = Emission(textures.get(_require(entry, "texture", where), where))
            else:
                material = Phong(
                    _number(_require(entry, "kd", where), where),
                    textures.get(_require(entry, "diffuse", where), where),
                    textures.get(_require(entry, "specular", where), where),
                    _number(_require(entry, "shininess", where), where),
                )
        except SceneError:
            raise
        except ValueError as exc:
            raise SceneError(f"{where}: {exc}") from exc
        materials[name] = material
    return materials


def _parse_object(
    index: int, entry: Mapping[str, Any], materials: Mapping[str, Material]
) -> Primitive:
    where = f"object #{index}"
    kind = _kind(entry, where, ("sphere", "rect", "block"))
    material_name = _require(entry, "material", where)
    if not isinstance(material_name, str) or material_name not in materials:
        raise SceneError(f"{where}: undefined material '{material_name}'")
    material = materials[material_name]

    try:
        if kind == "sphere":
            primitive: Primitive = Sphere(
                _vector(_require(entry, "center", where), where),
                _number(_require(entry, "radius", where), where),
                material,
            )
        elif kind == "rect":
            axis_name = str(_require(entry, "axis", where)).lower()
            if axis_name not in RECT_AXES:
                raise SceneError(f"{where}: unknown rect axis '{axis_name}'")
            start = _numbers(_require(entry, "start", where), 2, where)
            end = _numbers(_require(entry, "end", where), 2, where)
            primitive = Rect.from_bounds(
                material,
                RECT_AXES[axis_name],
                (start[0], start[1]),
                (end[0], end[1]),
                _number(_require(entry, "k", where), where),
                flipped=bool(entry.get("flip", False)),
            )
        else:
            primitive = Block(
                _vector(_require(entry, "start", where), where),
                _vector(_require(entry, "end", where), where),
                material,
            )
    except SceneError:
        raise
    except ValueError as exc:
        raise SceneError(f"{where}: {exc}") from exc

    if "rotate" in entry:
        primitive = Rotate(primitive, _vector(entry["rotate"], f"{where} rotate"))
    if "translate" in entry:
        primitive = Translate(primitive, _vector(entry["translate"], f"{where} translate"))
    return primitive


def _parse_background(value: Any) -> Background:
    if isinstance(value, Mapping):
        return SkyGradient(
            bottom=_vector(_require(value, "bottom", "background"), "background"),
            top=_vector(_require(value, "top", "background"), "background"),
        )
    return _vector(value, "background")


def _parse_camera(entry: Mapping[str, Any], aspect_ratio: float) -> ThinLensCamera:
    where = "camera"
    look_from = _vector(_require(entry, "from", where), where)
    look_at = _vector(_require(entry, "at", where), where)
    vup = _vector(entry.get("up", [0.0, 1.0, 0.0]), where)
    if "focus_distance" in entry:
        focus_distance = _number(entry["focus_distance"], where)
    else:
        focus_distance = (look_from - look_at).length()
    try:
        return ThinLensCamera(
            look_from=look_from.to_tuple(),
            look_at=look_at.to_tuple(),
            vup=vup.to_tuple(),
            vfov=_number(entry.get("vfov", 40.0), where),
            aspect_ratio=aspect_ratio,
            aperture=_number(entry.get("aperture", 0.0), where),
            focus_distance=focus_distance,
        )
    except ValueError as exc:
        raise SceneError(f"{where}: {exc}") from exc


# =============================================================================
# Entry points
# =============================================================================


def parse_scene(
    data: Any,
    base_dir: str | Path = ".",
    aspect_ratio: float | None = None,
) -> tuple[Scene, ThinLensCamera, dict[str, Any]]:
    """Build a scene from an already parsed YAML document.

    Args:
        data: The document, a mapping with the keys described above.
        base_dir: Directory that image texture paths are relative to.
        aspect_ratio: Camera aspect ratio. If None, it is taken from the
            document's ``render`` section (or the RenderSettings defaults).

    Returns:
        A tuple of (Scene, ThinLensCamera, render section as a dict).

    Raises:
        SceneError: If the document is malformed.
    """
    doc = _mapping(data, "scene")
    render = dict(_mapping(doc.get("render", {}), "render"))
    if aspect_ratio is None:
        try:
            aspect_ratio = RenderSettings.from_mapping(render).aspect_ratio
        except ValueError as exc:
            raise SceneError(f"render: {exc}") from exc

    textures = _TextureResolver(_mapping(doc.get("textures", {}), "textures"), Path(base_dir))
    materials = _parse_materials(_mapping(doc.get("materials", {}), "materials"), textures)

    objects = _require(doc, "objects", "scene")
    if not isinstance(objects, list) or not objects:
        raise SceneError("scene: 'objects' must be a non-empty list")
    primitives = [
        _parse_object(i, _mapping(entry, f"object #{i}"), materials)
        for i, entry in enumerate(objects)
    ]

    background = _parse_background(_require(doc, "background", "scene"))
    camera = _parse_camera(_mapping(_require(doc, "camera", "scene"), "camera"), aspect_ratio)
    return Scene.from_primitives(background, primitives), camera, render


def load_scene(
    path: str | Path,
    aspect_ratio: float | None = None,
) -> tuple[Scene, ThinLensCamera, dict[str, Any]]:
    """Load and validate a scene from a YAML file.

    Raises:
        FileNotFoundError: If the scene file does not exist.
        SceneError: If the file is not valid YAML or the scene is malformed.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Scene file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise SceneError(f"{path}: invalid YAML: {exc}") from exc

    logger.info("Loading scene from: %s", path)
    return parse_scene(data, path.parent, aspect_ratio)
