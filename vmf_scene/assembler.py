"""
Assembler: turns a parsed map tree into scene objects.

Runs in a fixed order because later steps depend on earlier side effects:
group placeholders → solids → lights → pruning of degenerate groups.
"""
import re
import warnings
from dataclasses import dataclass, field
from typing import Callable, Dict, List

import numpy as np

from vmf_scene.data_model import (
    ImportSettings, LightType, BRIGHTNESS_DIVISOR, COLOR_DIVISOR, LIGHT_RANGE,
    MIN_GROUP_TRANSFORMS, LIGHT_CLASS_PREFIX, LIGHT_CLASS_MAP,
)
from vmf_scene.geometry import build_solid_mesh, recenter_mesh, GeometryError
from vmf_scene.nodes import Node, World, Entity, Solid, Group, Editor
from vmf_scene.parser import ParseError
from vmf_scene.scene import (
    Scene, SceneObject, MeshFilter, MeshRenderer, MeshCollider, Light,
    DEFAULT_MATERIAL,
)


@dataclass
class SceneAssembly:
    groups: Dict[Group, SceneObject] = field(default_factory=dict)
    solids: List[SceneObject] = field(default_factory=list)
    lights: List[SceneObject] = field(default_factory=list)


def find_world(root):
    """Return the first World block under the root."""
    world = root.first_child_of_type(World)
    if world is None:
        raise ParseError("Document has no 'world' block")
    return world


def select_solids(root, world, settings):
    """World solids and/or detail solids of root-level entities, per settings."""
    solids = []
    if settings.import_world_brushes:
        solids.extend(world.children_of_type(Solid))
    if settings.import_detail_brushes:
        for entity in root.children_of_type(Entity):
            solids.extend(entity.children_of_type(Solid))
    return solids


def group_identifier(solid):
    """Group id declared by the Editor block of the solid or, failing that, of its parent."""
    for owner in (solid, solid.parent):
        if owner is None:
            continue
        editor = owner.first_child_of_type(Editor)
        if editor is not None and editor.group_identifier is not None:
            return editor.group_identifier
    return None


def find_group(groups, identifier):
    """First group placeholder whose Group has `identifier`, or None."""
    for group, obj in groups.items():
        if group.identifier == identifier:
            return obj
    return None


def decode_light(entity):
    """
    Decode an entity's `_light` property.

    `_light` is "R G B brightness" with 8-bit channels; runs of whitespace
    count as one separator.

    Returns:
        (color, intensity): color channels in [0, 1], intensity scaled by
        BRIGHTNESS_DIVISOR
    """
    parts = re.sub(r'\s+', ' ', entity['_light'].strip()).split(' ')
    if len(parts) < 4:
        raise ValueError(f"_light needs 4 components, got '{entity['_light']}'")
    color = tuple(float(v) / COLOR_DIVISOR for v in parts[:3])
    intensity = float(parts[3]) / BRIGHTNESS_DIVISOR
    return color, intensity


# ── Steps ─────────────────────────────────────────────────────────────

def _build_solid(solid, scene, material, mesh_builder):
    # Mesh vertices arrive in world coordinates: centre them and move the
    # object to where the mesh used to be. Both happen before the object
    # exists so a failing solid leaves nothing in the scene.
    mesh = mesh_builder(solid)
    center = recenter_mesh(mesh)

    obj = scene.create_object(f"Solid {solid.identifier}")
    obj.add_component(MeshRenderer(material=material))
    obj.add_component(MeshFilter(mesh=mesh))
    obj.transform.position = center

    # Static objects take part in lightmap baking.
    obj.is_static = True
    obj.add_component(MeshCollider(mesh=mesh, convex=True))
    return obj


def _build_light(entity, scene):
    color, intensity = decode_light(entity)
    kind = LIGHT_CLASS_MAP.get(entity.class_name)
    spot_angle = int(entity['_cone']) if kind == LightType.SPOT else None

    obj = scene.create_object(f"Light {entity.identifier}")
    obj.transform.position = np.array(entity.origin, dtype=np.float64)
    obj.transform.rotation = np.array(entity.angles, dtype=np.float64)

    light = obj.add_component(Light())
    light.intensity = intensity
    light.color = color
    light.range = LIGHT_RANGE
    if kind is not None:
        light.kind = kind
    if spot_angle is not None:
        light.spot_angle = spot_angle
    return obj


def _prune_groups(groups, scene):
    for group, obj in list(groups.items()):
        if obj.transform.descendant_count() >= MIN_GROUP_TRANSFORMS:
            continue
        for child in list(obj.transform.children):
            child.set_parent(obj.transform.parent)
        if group.children:
            group.children[0].parent = group.parent
        scene.destroy(obj)
        del groups[group]


def assemble_scene(root: Node, scene: Scene, settings: ImportSettings = None,
                   assets=None, mesh_builder: Callable = None):
    """
    Create group placeholders, solids and lights for a parsed tree.

    Args:
        root: root Node returned by the parser
        scene: Scene receiving the objects
        settings: ImportSettings (defaults import everything)
        assets: material repository with `load_material(path)`
        mesh_builder: Solid → Mesh callable (default: build_solid_mesh).
            Any exception it raises skips that solid with a warning.

    Returns:
        SceneAssembly
    """
    if settings is None:
        settings = ImportSettings()
    if mesh_builder is None:
        mesh_builder = build_solid_mesh
    world = find_world(root)
    result = SceneAssembly()

    # ── 1. Group placeholders ─────────────────────────────────────────
    for group in world.children_of_type(Group):
        result.groups[group] = scene.create_object(f"Group {group.identifier}")

    # ── 2. Solids ─────────────────────────────────────────────────────
    if settings.import_brushes:
        material = assets.load_material(settings.material_path) if assets is not None else None
        if material is None:
            warnings.warn(f"Material '{settings.material_path}' not found, "
                          f"using '{DEFAULT_MATERIAL.name}'")
            material = DEFAULT_MATERIAL

        for solid in select_solids(root, world, settings):
            try:
                obj = _build_solid(solid, scene, material, mesh_builder)
            except GeometryError as e:
                warnings.warn(f"Skipping solid {solid.identifier}: {e}")
                continue
            except Exception as e:
                # mesh_builder is injected; any failure stays with its solid
                warnings.warn(f"Skipping solid {solid.identifier}: {e!r}")
                continue
            result.solids.append(obj)

            gid = group_identifier(solid)
            if gid is not None:
                placeholder = find_group(result.groups, gid)
                if placeholder is not None:
                    obj.transform.set_parent(placeholder.transform)

    # ── 3. Lights ─────────────────────────────────────────────────────
    if settings.import_lights:
        for entity in root.children_of_type(Entity):
            if not entity.class_name.startswith(LIGHT_CLASS_PREFIX):
                continue
            try:
                result.lights.append(_build_light(entity, scene))
            except (KeyError, ValueError) as e:
                warnings.warn(f"Skipping light {entity.identifier}: {e!r}")

    # ── 4. Drop groups with fewer than two members ────────────────────
    _prune_groups(result.groups, scene)

    return result
