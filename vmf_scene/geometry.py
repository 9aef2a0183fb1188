"""
Mesh data and the default solid → mesh builder.

Solids are convex volumes bounded by the planes of their sides. The builder
intersects every triple of planes, keeps the points lying inside all planes,
and emits one fan-triangulated polygon per side, in world coordinates.
"""
import itertools
from dataclasses import dataclass, field

import numpy as np

from vmf_scene.data_model import PLANE_EPSILON, DETERMINANT_EPSILON


class GeometryError(ValueError):
    """Raised when a solid does not describe a closed convex volume."""


@dataclass(eq=False)
class Mesh:
    vertices: np.ndarray                 # [n_vertices, 3] float64
    triangles: np.ndarray                # [n_triangles, 3] int32
    bounds_min: np.ndarray = field(default_factory=lambda: np.zeros(3))
    bounds_max: np.ndarray = field(default_factory=lambda: np.zeros(3))

    def __post_init__(self):
        self.vertices = np.asarray(self.vertices, dtype=np.float64).reshape(-1, 3)
        self.triangles = np.asarray(self.triangles, dtype=np.int32).reshape(-1, 3)
        self.recalculate_bounds()

    def recalculate_bounds(self):
        if len(self.vertices):
            self.bounds_min = self.vertices.min(axis=0)
            self.bounds_max = self.vertices.max(axis=0)
        else:
            self.bounds_min = np.zeros(3)
            self.bounds_max = np.zeros(3)

    def center(self):
        """Arithmetic mean of all vertices."""
        return self.vertices.mean(axis=0)

    def copy(self):
        return Mesh(self.vertices.copy(), self.triangles.copy())


def recenter_mesh(mesh):
    """Move the mesh so its vertex mean sits at the origin.

    Returns:
        [3] float64: the former mean, i.e. where the object must be placed
        to keep the mesh at its original world position
    """
    if len(mesh.vertices) == 0:
        raise GeometryError("Cannot recenter an empty mesh")
    center = mesh.center()
    mesh.vertices = mesh.vertices - center
    mesh.recalculate_bounds()
    return center


# ── Plane maths ───────────────────────────────────────────────────────

def plane_from_points(p1, p2, p3):
    """Outward (normal, dist) of a side plane given as three clockwise points."""
    p1, p2, p3 = (np.asarray(p, dtype=np.float64) for p in (p1, p2, p3))
    normal = np.cross(p3 - p1, p2 - p1)
    length = np.linalg.norm(normal)
    if length < DETERMINANT_EPSILON:
        raise GeometryError(f"Degenerate plane points {p1}, {p2}, {p3}")
    normal = normal / length
    return normal, float(normal @ p1)


def _intersect(normals, dists):
    """Intersection point of three planes, or None if any two are parallel."""
    if abs(np.linalg.det(normals)) < DETERMINANT_EPSILON:
        return None
    return np.linalg.solve(normals, dists)


def _sort_ccw(points, normal):
    """Order coplanar points counter-clockwise around `normal`."""
    center = points.mean(axis=0)
    axis = np.array([1.0, 0.0, 0.0]) if abs(normal[2]) > 0.9 else np.array([0.0, 0.0, 1.0])
    right = axis - normal * (axis @ normal)
    right = right / np.linalg.norm(right)
    up = np.cross(normal, right)
    rel = points - center
    angles = np.arctan2(rel @ up, rel @ right)
    return points[np.argsort(angles, kind='stable')]


def _dedupe(points, eps=PLANE_EPSILON):
    unique = []
    for p in points:
        if not any(np.all(np.abs(p - q) < eps) for q in unique):
            unique.append(p)
    return unique


# ── Solid → mesh ──────────────────────────────────────────────────────

def build_solid_mesh(solid, eps=PLANE_EPSILON):
    """
    Build a world-space mesh for a Solid node.

    Args:
        solid: Solid node whose Side children carry planes
        eps: tolerance for point-inside-plane tests

    Returns:
        Mesh with one vertex ring per side (flat-shaded, vertices not shared)
    """
    sides = [s for s in solid.sides if s.plane is not None]
    if len(sides) < 4:
        raise GeometryError(
            f"Solid {solid.identifier} has {len(sides)} planes, need at least 4")

    planes = [plane_from_points(*s.plane) for s in sides]
    normals = np.array([n for n, _ in planes])
    dists = np.array([d for _, d in planes])

    corners = []
    for i, j, k in itertools.combinations(range(len(planes)), 3):
        point = _intersect(normals[[i, j, k]], dists[[i, j, k]])
        if point is None:
            continue
        if np.all(normals @ point - dists <= eps):
            corners.append(point)
    corners = _dedupe(corners, eps)
    if len(corners) < 4:
        raise GeometryError(f"Solid {solid.identifier} encloses no volume")
    corners = np.array(corners)

    vertices = []
    triangles = []
    for normal, dist in planes:
        on_plane = corners[np.abs(corners @ normal - dist) <= eps]
        if len(on_plane) < 3:
            continue
        ring = _sort_ccw(on_plane, normal)
        base = len(vertices)
        vertices.extend(ring)
        for t in range(1, len(ring) - 1):
            triangles.append((base, base + t, base + t + 1))

    return Mesh(np.array(vertices), np.array(triangles))
