import math

import numpy as np

from brepedit import linalg


def test_cross_right_handed():
    assert np.allclose(linalg.cross([1, 0, 0], [0, 1, 0]), [0, 0, 1])
    assert np.allclose(linalg.cross([0, 1, 0], [1, 0, 0]), [0, 0, -1])


def test_norm_and_unit():
    assert math.isclose(linalg.norm([3.0, 4.0, 0.0]), 5.0)

    u = np.array([0.0, 3.0, 4.0])
    v = linalg.unit(u)

    assert np.allclose(v, [0.0, 0.6, 0.8])
    assert np.allclose(u, [0.0, 3.0, 4.0])


def test_unit_inplace_modifies_argument():
    u = np.array([2.0, 0.0, 0.0])
    v = linalg.unit_inplace(u)

    assert v is u
    assert np.allclose(u, [1.0, 0.0, 0.0])


def test_dot():
    assert linalg.dot([1, 2, 3], [4, 5, 6]) == 32
