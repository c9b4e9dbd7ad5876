import itertools
import random

import numpy as np

from brepedit import geometry


def _plane_points(normal, count, seed=0):
    rng = np.random.default_rng(seed)
    normal = np.asarray(normal, dtype=float)
    normal /= np.linalg.norm(normal)

    # Two directions spanning the plane.
    a = np.cross(normal, [1.0, 0.0, 0.0])
    if np.linalg.norm(a) < 0.1:
        a = np.cross(normal, [0.0, 1.0, 0.0])
    a /= np.linalg.norm(a)
    b = np.cross(normal, a)

    st = rng.uniform(-5.0, 5.0, size=(count, 2))
    return 2.0 * normal + st[:, :1] * a + st[:, 1:] * b, normal


def test_plane_normal_orthogonal_to_edges():
    for seed, normal in enumerate([(0, 1, 0), (1, 2, 3), (-1, 0, 1)]):
        points, n = _plane_points(normal, 7, seed)
        result = geometry.plane_normal(points)

        assert np.isclose(np.linalg.norm(result), 1.0)
        assert np.isclose(abs(result.dot(n)), 1.0)

        for p, q in itertools.combinations(points, 2):
            assert abs(result.dot(q - p)) < 1e-6


def test_plane_normal_skips_duplicate_leading_points():
    points = [[0, 0, 0], [0, 0, 0], [1, 0, 0], [1, 0, 1]]
    assert np.allclose(geometry.plane_normal(points), [0, -1, 0])


def test_plane_normal_degenerate_input():
    up = [0.0, 1.0, 0.0]

    assert np.allclose(geometry.plane_normal([]), up)
    assert np.allclose(geometry.plane_normal([[0, 0, 0], [1, 0, 0]]), up)
    assert np.allclose(geometry.plane_normal([[0, 0, 0], [1, 1, 1],
                                              [2, 2, 2], [3, 3, 3]]), up)
    assert np.allclose(geometry.plane_normal([[1, 2, 3]] * 4), up)


def test_order_by_angle_is_permutation():
    points, _ = _plane_points((1, 1, 0), 9, seed=3)
    indices = list(range(9))
    random.Random(1).shuffle(indices)

    result = geometry.order_by_angle(indices, points)

    assert sorted(result) == list(range(9))


def test_order_by_angle_restores_convex_polygon():
    k = np.arange(8)
    points = np.stack([np.cos(k * np.pi / 4), np.zeros(8),
                       np.sin(k * np.pi / 4)], axis=1)

    for seed in range(5):
        indices = list(range(8))
        random.Random(seed).shuffle(indices)

        result = geometry.order_by_angle(indices, points)
        edges = {frozenset(e) for e in zip(result, result[1:] + result[:1])}

        assert edges == {frozenset((i, (i + 1) % 8)) for i in range(8)}


def test_order_by_angle_short_input_unchanged():
    points = np.eye(3)

    assert geometry.order_by_angle([2, 0], points) == [2, 0]
    assert geometry.order_by_angle([], points) == []


def test_projection_axes():
    horizontal = [[0, 0, 0], [1, 0, 0], [1, 0, 1]]
    front = [[0, 0, 0], [1, 0, 0], [1, 1, 0]]
    side = [[0, 0, 0], [0, 1, 0], [0, 1, 1]]

    assert geometry.projection_axes(horizontal) == (0, 2)
    assert geometry.projection_axes(front) == (0, 1)
    assert geometry.projection_axes(side) == (1, 2)


def test_projection_axes_degenerate_defaults_to_xz():
    assert geometry.projection_axes([[0, 0, 0], [1, 1, 1]]) == (0, 2)
    assert geometry.projection_axes([[0, 0, 0], [1, 1, 1],
                                     [2, 2, 2]]) == (0, 2)


def test_polygon_area_and_centroid():
    square = [[0, 0], [1, 0], [1, 1], [0, 1]]

    assert np.isclose(geometry.polygon_area(square), 1.0)
    assert np.isclose(geometry.polygon_area(square[::-1]), -1.0)
    assert geometry.polygon_area(square[:2]) == 0.0

    assert np.allclose(geometry.centroid([[0, 0, 0], [2, 4, 6]]), [1, 2, 3])
