import numpy as np
import pytest

from vmf_scene.geometry import (
    Mesh, GeometryError, build_solid_mesh, recenter_mesh, plane_from_points,
)
from vmf_scene.nodes import Solid, Side
from vmf_scene.parser import parse_vmf_text
from conftest import box_planes, solid_block, world_block


def _box_solid(mins, maxs, n_sides=6):
    root = parse_vmf_text(world_block(solid_block(2, mins, maxs)))
    solid = root.children[0].children[0]
    for side in solid.sides[n_sides:]:
        side.parent = None
    return solid


def test_plane_normal_points_outward():
    top = box_planes((0, 0, 0), (64, 64, 64))[0]
    side = Side('side')
    side.parse('plane', top)
    normal, dist = plane_from_points(*side.plane)
    np.testing.assert_allclose(normal, [0, 0, 1])
    assert dist == pytest.approx(64.0)


def test_box_mesh():
    mesh = build_solid_mesh(_box_solid((0, 0, 0), (64, 32, 16)))
    # 6 quads, unshared vertices, 2 triangles each
    assert mesh.vertices.shape == (24, 3)
    assert mesh.triangles.shape == (12, 3)
    np.testing.assert_allclose(mesh.bounds_min, [0, 0, 0], atol=1e-9)
    np.testing.assert_allclose(mesh.bounds_max, [64, 32, 16], atol=1e-9)
    np.testing.assert_allclose(mesh.center(), [32, 16, 8], atol=1e-9)


def test_box_mesh_is_deterministic():
    solid = _box_solid((-8, -8, -8), (8, 8, 8))
    a = build_solid_mesh(solid)
    b = build_solid_mesh(solid)
    np.testing.assert_array_equal(a.vertices, b.vertices)
    np.testing.assert_array_equal(a.triangles, b.triangles)


def test_too_few_planes():
    with pytest.raises(GeometryError):
        build_solid_mesh(_box_solid((0, 0, 0), (8, 8, 8), n_sides=3))


def test_open_solid_has_no_volume():
    # Without the y planes every plane triple holds a parallel pair.
    solid = Solid('solid')
    for plane in box_planes((0, 0, 0), (8, 8, 8))[:4]:
        side = Side('side')
        side.parse('plane', plane)
        side.parent = solid
    with pytest.raises(GeometryError):
        build_solid_mesh(solid)


def test_recenter_mesh():
    mesh = Mesh(np.array([[10, 0, 0], [12, 0, 0], [10, 2, 0], [12, 2, 4]]),
                np.array([[0, 1, 2], [1, 3, 2]]))
    center = recenter_mesh(mesh)
    np.testing.assert_allclose(center, [11, 1, 1])
    np.testing.assert_allclose(mesh.vertices.mean(axis=0), [0, 0, 0], atol=1e-12)
    np.testing.assert_allclose(mesh.bounds_min, [-1, -1, -1])
    np.testing.assert_allclose(mesh.bounds_max, [1, 1, 3])


def test_recenter_is_idempotent():
    mesh = build_solid_mesh(_box_solid((100, 200, 300), (164, 232, 316)))
    recenter_mesh(mesh)
    before = mesh.vertices.copy()
    pivot = recenter_mesh(mesh)
    np.testing.assert_allclose(pivot, [0, 0, 0], atol=1e-9)
    np.testing.assert_allclose(mesh.vertices, before, atol=1e-9)


def test_recenter_empty_mesh_is_error():
    mesh = Mesh(np.zeros((0, 3)), np.zeros((0, 3)))
    with pytest.raises(GeometryError):
        recenter_mesh(mesh)
