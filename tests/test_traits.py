import math

import numpy as np

from brepedit import traits


def test_face_normals_point_outward(cube):
    center = np.mean(cube.points, axis=0)

    for f in cube:
        n = traits.face_normal(f)

        assert np.isclose(np.linalg.norm(n), 1.0)
        assert n.dot(f.barycenter - center) > 0.0

    assert np.allclose(traits.face_normal(cube.faces[0]), [0, -1, 0])
    assert np.allclose(traits.face_normal(cube.faces[1]), [0, 1, 0])


def test_face_normals_array(cube):
    normals = traits.face_normals(cube)

    assert normals.shape == (6, 3)
    assert np.allclose(np.abs(normals).sum(axis=1), 1.0)


def test_face_area(cube, hexagon):
    assert all(math.isclose(traits.face_area(f), 1.0) for f in cube)

    # Regular hexagon with circumradius 5.
    assert math.isclose(traits.face_area(hexagon.faces[0]),
                        1.5 * math.sqrt(3.0) * 25.0)


def test_vertex_normals(cube):
    normals = traits.vertex_normals(cube)

    assert np.allclose(normals[0], -np.ones(3) / math.sqrt(3.0))
    assert np.allclose(normals[6], np.ones(3) / math.sqrt(3.0))


def test_newell_degenerate():
    assert np.allclose(traits.newell([[0, 0, 0], [1, 0, 0]]), 0.0)
    assert np.allclose(traits.newell([[0, 0, 0], [1, 1, 1], [2, 2, 2]]), 0.0)


def test_bounds_and_edge_length(cube):
    a, b = traits.bounds(cube.points)

    assert np.allclose(a, 0.0) and np.allclose(b, 1.0)
    assert traits.edge_length(cube) == (1.0, 1.0, 1.0)
