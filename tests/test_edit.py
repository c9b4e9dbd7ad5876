import numpy as np
import pytest

from brepedit import shapes, traits
from brepedit.edit import (EditError, delete_vertex_pair,
                           delete_vertex_pair_rebuild, find_companion,
                           selectable_vertices)


def _coords(mesh, vertices):
    return sorted(tuple(mesh.points[int(v)]) for v in vertices)


def _assert_closed_solid(mesh):
    mesh._check()

    assert not any(h.boundary for h in mesh.halfedges)

    nv, ne, nf = mesh.size
    assert nv - ne + nf == 2

    for f in mesh:
        assert len(f) >= 3

        h = f.halfedge
        for _ in range(len(f)):
            h = h.next
        assert h is f.halfedge


def _assert_outward(mesh):
    center = np.mean(mesh.points, axis=0)

    for f in mesh:
        assert traits.face_normal(f).dot(f.barycenter - center) > 0.0


def _volume(mesh):
    total = 0.0
    for f in mesh:
        points = mesh.points[[int(v) for v in f]]
        total += points[0].dot(traits.newell(points))
    return total / 6.0


def test_selectable_vertices(cube, hexagon):
    assert [v.index for v in selectable_vertices(cube)] == [4, 5, 6, 7]
    assert [v.index for v in selectable_vertices(hexagon)] == list(range(6, 12))


def test_find_companion(cube):
    assert find_companion(cube, 4).index == 0
    assert find_companion(cube, 6).index == 2
    assert find_companion(cube, 0) is None


def test_delete_cube_corner(cube):
    result = delete_vertex_pair(cube, 4)

    _assert_closed_solid(result)
    _assert_outward(result)

    assert result.size == (6, 9, 5)

    cap = result.faces[-1]
    assert len(cap) == 4
    assert _coords(result, cap) == _coords(cube, [1, 3, 5, 7])

    # Top and bottom faces lost one vertex each.
    degrees = sorted(len(f) for f in result)
    assert degrees == [3, 3, 4, 4, 4]


def test_delete_leaves_input_unchanged(cube):
    points = cube.points.copy()
    cells = cube.cells

    delete_vertex_pair(cube, 5)

    cube._check()
    assert cube.size == (8, 12, 6)
    assert cube.cells == cells
    assert np.array_equal(cube.points, points)


def test_delete_lowest_vertex_fails(cube):
    with pytest.raises(EditError):
        delete_vertex_pair(cube, 0)

    assert cube.size == (8, 12, 6)


def test_delete_invalid_vertex(cube):
    with pytest.raises(EditError):
        delete_vertex_pair(cube, 42)


def test_delete_prism_vertex_twice(hexagon):
    target = tuple(hexagon.points[9])

    first = delete_vertex_pair(hexagon, 6)

    _assert_closed_solid(first)
    _assert_outward(first)

    assert first.size == (10, 15, 7)
    assert len(first.faces[-1]) == 4
    assert len(first.faces[0]) == len(first.faces[1]) == 5

    index = next(v.index for v in first.vertices
                 if tuple(first.points[v]) == target)
    second = delete_vertex_pair(first, index)

    _assert_closed_solid(second)
    _assert_outward(second)

    assert second.size == (8, 12, 6)
    assert len(second.faces[0]) == len(second.faces[1]) == 4


def test_face_count_formula(hexagon):
    v1 = 7
    v2 = find_companion(hexagon, v1).index

    incident = {f.index for v in (v1, v2) for f in hexagon.vertices[v].faces}
    result = delete_vertex_pair(hexagon, v1)

    # Top and bottom survive, all other incident faces are replaced by the
    # closing face.
    assert result.size[2] == hexagon.size[2] - (len(incident) - 2) + 1
    assert result.size[0] == hexagon.size[0] - 2


def test_rebuild_variant_agrees(cube, hexagon):
    for mesh, v in ((cube, 4), (cube, 6), (hexagon, 8)):
        incremental = delete_vertex_pair(mesh, v)
        rebuilt = delete_vertex_pair_rebuild(mesh, v)

        _assert_closed_solid(rebuilt)
        _assert_outward(rebuilt)

        assert rebuilt.size == incremental.size
        assert _coords(rebuilt, range(len(rebuilt.points))) == \
            _coords(incremental, range(len(incremental.points)))
        assert _coords(rebuilt, rebuilt.faces[-1]) == \
            _coords(incremental, incremental.faces[-1])


def test_rebuild_variant_without_vertex_below(cube):
    with pytest.raises(EditError):
        delete_vertex_pair_rebuild(cube, 1)


@pytest.mark.parametrize('delete', [delete_vertex_pair,
                                    delete_vertex_pair_rebuild])
def test_delete_triangular_prism_fails(delete):
    mesh = shapes.extrude([(0.0, 0.0), (1.0, 0.0), (0.0, 1.0)], 1.0)
    cells = mesh.cells

    # Top and bottom would degenerate to two-gons and the closing face
    # would coincide with the remaining side face.
    with pytest.raises(EditError):
        delete(mesh, 3)

    mesh._check()
    assert mesh.size == (6, 9, 5)
    assert mesh.cells == cells


@pytest.mark.parametrize('base, v, before, after', [
    ([(-3, 8), (2, 5), (1, 11), (-3, 10), (-7, 8)], 5, 21.5, 27.5),
    ([(0, 0), (2, 0), (2, 1), (1, 1), (1, 2), (0, 2)], 9, 3.0, 3.5),
])
def test_delete_reflex_corner(base, v, before, after):
    mesh = shapes.extrude(base, 5.0)
    n = len(base)

    assert np.isclose(_volume(mesh), 5.0 * before)

    incremental = delete_vertex_pair(mesh, v)
    rebuilt = delete_vertex_pair_rebuild(mesh, v)

    for result in (incremental, rebuilt):
        _assert_closed_solid(result)

        # The reflex corner is cut off, the remaining prism is convex.
        _assert_outward(result)

        assert result.size == (2 * n - 2, 3 * n - 3, n + 1)
        assert len(result.faces[-1]) == 4
        assert np.isclose(_volume(result), 5.0 * after)

    assert _coords(rebuilt, rebuilt.faces[-1]) == \
        _coords(incremental, incremental.faces[-1])
