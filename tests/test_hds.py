import logging

import numpy as np
import pytest

from brepedit.hds import Mesh, NonManifoldError


SQUARE = [[0, 0, 0], [1, 0, 0], [1, 0, 1], [0, 0, 1]]


def _walk(face):
    """ Number of next steps needed to return to the face halfedge. """
    h = face.halfedge
    steps = 0

    while True:
        h = h.next
        steps += 1

        if h is face.halfedge or steps > 100:
            return steps


def test_cube_combinatorics(cube):
    cube._check()

    assert cube.size == (8, 12, 6)
    assert len(cube.halfedges) == 24

    for h in cube.halfedges:
        assert h.flip.flip is h
        assert h.next.origin is h.target
        assert h.next.prev is h
        assert not h.boundary

    for f in cube:
        assert len(f) == 4
        assert _walk(f) == 4


def test_cells_round_trip(cube):
    cells = cube.cells
    rebuilt = Mesh(cube.points, cells)

    assert rebuilt.cells == cells
    assert rebuilt.size == cube.size


def test_find_edge_and_halfedge(cube):
    e = cube.find_edge(0, 1)

    assert e is cube.find_edge(1, 0)
    assert {int(v) for v in e} == {0, 1}

    h = cube.find_halfedge(0, 1)

    assert h.origin.index == 0 and h.target.index == 1
    assert h.flip is cube.find_halfedge(1, 0)
    assert h.edge is e

    assert cube.find_edge(0, 6) is None
    assert cube.find_halfedge(0, 6) is None


def test_vertex_queries(cube):
    v = cube.vertices[0]

    assert v.degree == 3
    assert {w.index for w in v.neighbors} == {1, 3, 4}
    assert len(v.faces) == 3
    assert not v.boundary
    assert np.allclose(np.asarray(v), [0, 0, 0])


def test_face_queries(cube):
    bottom = cube.faces[0]

    assert 0 in bottom and 4 not in bottom
    assert [v.index for v in bottom] == [0, 1, 2, 3]
    assert np.allclose(bottom.barycenter, [0.5, 0.0, 0.5])
    assert np.asarray(bottom).shape == (4, 3)
    assert len(bottom.halfedges) == bottom.degree == 4


def test_open_mesh_boundary_loop():
    mesh = Mesh(SQUARE, [[0, 1, 2, 3]])
    mesh._check()

    assert mesh.size == (4, 4, 1)

    boundary = [h for h in mesh.halfedges if h.boundary]

    assert len(boundary) == 4
    assert all(v.boundary for v in mesh.vertices)

    h = boundary[0]
    loop = [h]

    while loop[-1].next is not h:
        loop.append(loop[-1].next)

    assert len(loop) == 4


def test_constructor_without_points():
    with pytest.raises(ValueError):
        Mesh(cells=[[0, 1, 2]])


def test_set_positions_shape():
    mesh = Mesh()

    with pytest.raises(ValueError):
        mesh.set_positions([[0, 0], [1, 0]])


def test_process_rejects_invalid_cells():
    with pytest.raises(ValueError):
        Mesh(SQUARE, [[0, 1, 1, 2]])

    with pytest.raises(ValueError):
        Mesh(SQUARE, [[0, 1]])

    with pytest.raises(IndexError):
        Mesh(SQUARE, [[0, 1, 4]])


def test_process_rejects_non_manifold_edges():
    # Directed edge (0, 1) used twice.
    with pytest.raises(NonManifoldError):
        Mesh(SQUARE, [[0, 1, 2], [0, 1, 3]])


def test_process_rejects_non_manifold_vertex():
    # Two triangles touching in vertex 0 only.
    points = [[0, 0, 0], [1, 0, 0], [1, 0, 1], [-1, 0, 0], [-1, 0, -1]]

    with pytest.raises(NonManifoldError):
        Mesh(points, [[0, 1, 2], [0, 3, 4]])


def test_isolated_vertex_warning(caplog):
    with caplog.at_level(logging.WARNING, logger='brepedit'):
        mesh = Mesh(SQUARE, [[0, 1, 2]])

    assert mesh.size == (4, 3, 1)
    assert mesh.vertices[3].isolated
    assert 'isolated' in caplog.text


def test_copy_is_independent(cube):
    other = cube.copy()
    other.points[0] = [9.0, 9.0, 9.0]
    other.delete_face(0)
    other.clean()

    assert other.size == (8, 12, 5)
    assert cube.size == (8, 12, 6)
    assert np.allclose(cube.points[0], [0, 0, 0])

    cube._check()
    other._check()

    for f in other:
        assert f._mesh is other


def test_delete_and_add_face(cube):
    cube.delete_face(cube.faces[0])
    cube.clean()
    cube._check()

    assert cube.size == (8, 12, 5)
    assert sum(h.boundary for h in cube.halfedges) == 4

    f = cube.add_face([0, 1, 2, 3])
    cube.clean()
    cube._check()

    assert cube.size == (8, 12, 6)
    assert f.index == 5
    assert not any(h.boundary for h in cube.halfedges)


def test_add_face_rejects_used_halfedge(cube):
    with pytest.raises(NonManifoldError):
        cube.add_face([0, 1, 5])

    assert cube.size == (8, 12, 6)


def test_delete_edge_with_face(cube):
    with pytest.raises(NonManifoldError):
        cube.delete_edge(cube.find_edge(0, 1))


def test_delete_vertex_requires_isolated(cube):
    with pytest.raises(NonManifoldError):
        cube.delete_vertex(0)

    v = cube.add_vertex([2.0, 2.0, 2.0])

    assert v.index == 8 and v.isolated

    cube.delete_vertex(v)
    cube.clean()

    assert len(cube.points) == 8
    cube._check()


def test_splice_vertex(cube):
    h = cube.splice_vertex(0, 0)

    assert h.origin.index == 3 and h.target.index == 1
    assert h.flip.boundary

    cube.clean()
    cube._check()

    bottom = cube.faces[0]

    assert sorted(v.index for v in bottom) == [1, 2, 3]
    assert cube.size == (8, 13, 6)
    assert cube.vertices[0].boundary


def test_splice_vertex_errors(cube):
    with pytest.raises(ValueError):
        cube.splice_vertex(0, 5)

    triangle = Mesh(SQUARE, [[0, 1, 2]])

    with pytest.raises(ValueError):
        triangle.splice_vertex(0, 0)


def test_clean_renumbers_densely(cube):
    cube.delete_face(1)
    cube.delete_face(2)
    cube.clean()
    cube._check()

    assert [f.index for f in cube.faces] == list(range(4))
    assert [h.index for h in cube.halfedges] == list(range(len(cube.halfedges)))
    assert [e.index for e in cube.edges] == list(range(len(cube.edges)))
