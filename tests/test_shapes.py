import numpy as np
import pytest

from brepedit import shapes, traits


PENTAGON = [[-3, 8], [2, 5], [1, 11], [-3, 10], [-7, 8]]


def test_box(cube):
    cube._check()

    assert cube.size == (8, 12, 6)
    assert np.allclose(cube.points[:4, 1], 0.0)
    assert np.allclose(cube.points[4:, 1], 1.0)
    assert np.allclose(cube.points[4:, [0, 2]], cube.points[:4, [0, 2]])


def test_box_corners():
    mesh = shapes.box((1, 2, 3), (4, 6, 8))
    a, b = traits.bounds(mesh.points)

    assert np.allclose(a, [1, 2, 3])
    assert np.allclose(b, [4, 6, 8])


@pytest.mark.parametrize('reverse', [False, True])
def test_extrude_orientation(reverse):
    base = PENTAGON[::-1] if reverse else PENTAGON
    mesh = shapes.extrude(base, 5)
    mesh._check()

    assert mesh.size == (10, 15, 7)
    assert np.allclose(traits.face_normal(mesh.faces[0]), [0, -1, 0])
    assert np.allclose(traits.face_normal(mesh.faces[1]), [0, 1, 0])

    # Vertex i is the i-th base point in either orientation.
    assert np.allclose(mesh.points[:5, [0, 2]], base)


def test_extrude_convex_prism_is_outward(hexagon):
    center = np.mean(hexagon.points, axis=0)

    for f in hexagon:
        assert traits.face_normal(f).dot(f.barycenter - center) > 0.0


def test_extrude_elevation():
    mesh = shapes.extrude(PENTAGON, 2.0, elevation=-1.0)

    assert np.allclose(mesh.points[:5, 1], -1.0)
    assert np.allclose(mesh.points[5:, 1], 1.0)


def test_extrude_invalid_input():
    with pytest.raises(ValueError):
        shapes.extrude([[0, 0], [1, 0]], 1.0)

    with pytest.raises(ValueError):
        shapes.extrude(PENTAGON, 0.0)


def test_examples():
    meshes = shapes.examples()

    assert [m.name for m in meshes] == ['square', 'pentagon', 'hexagon',
                                        'octagon']
    assert [m.size for m in meshes] == [(8, 12, 6), (10, 15, 7),
                                        (12, 18, 8), (16, 24, 10)]

    for mesh in meshes:
        mesh._check()

        assert np.allclose(traits.face_normal(mesh.faces[0]), [0, -1, 0])
        assert np.allclose(traits.face_normal(mesh.faces[1]), [0, 1, 0])
        assert np.allclose(mesh.points[:, 1].max(), 5.0)

    # The octagon does not overlap the hexagon.
    assert traits.bounds(meshes[3].points)[0][0] > \
        traits.bounds(meshes[2].points)[1][0]
