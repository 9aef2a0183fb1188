"""
In-memory host scene: objects with a transform hierarchy and components.

This is the object system the assembler talks to. It mirrors what a 3D engine
offers (create/destroy objects, attach renderer/mesh/collider/light components,
reparent transforms) without any rendering.
"""
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import numpy as np

from vmf_scene.data_model import LightType, LIGHT_RANGE, PLACEHOLDER_MATERIAL
from vmf_scene.geometry import Mesh


# ── Assets ────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Material:
    name: str
    path: Optional[str] = None


DEFAULT_MATERIAL = Material(name='default')


class MaterialLibrary:
    """Path → Material repository. Misses return None."""

    def __init__(self, materials=None):
        self._materials: Dict[str, Material] = dict(materials or {})

    @classmethod
    def with_placeholder(cls):
        lib = cls()
        lib.add(Material(name='dev_measuregeneric01b', path=PLACEHOLDER_MATERIAL))
        return lib

    def add(self, material):
        self._materials[material.path] = material

    def load_material(self, path):
        return self._materials.get(path)

    def __contains__(self, path):
        return path in self._materials


# ── Components ────────────────────────────────────────────────────────

@dataclass
class MeshFilter:
    mesh: Mesh


@dataclass
class MeshRenderer:
    material: Optional[Material] = None


@dataclass
class MeshCollider:
    mesh: Mesh
    convex: bool = False


@dataclass
class Light:
    kind: LightType = LightType.POINT
    intensity: float = 1.0
    color: Tuple[float, float, float] = (1.0, 1.0, 1.0)
    range: float = LIGHT_RANGE
    spot_angle: float = 30.0


# ── Transform hierarchy ───────────────────────────────────────────────

class Transform:
    def __init__(self, owner):
        self.owner = owner
        self.position = np.zeros(3)
        self.rotation = np.zeros(3)     # Euler angles, degrees
        self.parent: Optional['Transform'] = None
        self.children: List['Transform'] = []

    def set_parent(self, parent):
        """Move under `parent` (None = scene root), keeping world position."""
        if parent is self or (parent is not None and self in parent.iter_ancestors()):
            raise ValueError(f"Cannot parent '{self.owner.name}' under its own subtree")
        world = self.world_position()
        if self.parent is not None:
            self.parent.children.remove(self)
        self.parent = parent
        if parent is not None:
            parent.children.append(self)
            self.position = world - parent.world_position()
        else:
            self.position = world

    def world_position(self):
        if self.parent is None:
            return self.position.copy()
        return self.parent.world_position() + self.position

    def iter_ancestors(self):
        node = self.parent
        while node is not None:
            yield node
            node = node.parent

    def iter_descendants(self):
        """Self first, then every descendant transform (pre-order)."""
        yield self
        for c in self.children:
            yield from c.iter_descendants()

    def descendant_count(self):
        return sum(1 for _ in self.iter_descendants())


class SceneObject:
    def __init__(self, name):
        self.name = name
        self.transform = Transform(self)
        self.is_static = False
        self.destroyed = False
        self._components: Dict[type, object] = {}

    def add_component(self, component):
        self._components[type(component)] = component
        return component

    def get_component(self, cls):
        return self._components.get(cls)

    @property
    def components(self):
        return list(self._components.values())

    def __repr__(self):
        return f"SceneObject({self.name!r})"


# ── Scene ─────────────────────────────────────────────────────────────

class Scene:
    def __init__(self):
        self.objects: List[SceneObject] = []

    def create_object(self, name):
        obj = SceneObject(name)
        self.objects.append(obj)
        return obj

    def destroy(self, obj):
        """Remove `obj` and its whole subtree from the scene."""
        for t in list(obj.transform.iter_descendants()):
            t.owner.destroyed = True
            self.objects.remove(t.owner)
        if obj.transform.parent is not None:
            obj.transform.parent.children.remove(obj.transform)
            obj.transform.parent = None

    def roots(self):
        return [o for o in self.objects if o.transform.parent is None]

    def find(self, name):
        """First object with `name` in creation order, or None."""
        for o in self.objects:
            if o.name == name:
                return o
        return None

    def objects_with(self, cls):
        return [o for o in self.objects if o.get_component(cls) is not None]
