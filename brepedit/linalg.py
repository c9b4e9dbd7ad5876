# Copyright 2024, m3shware
#
# Permission is hereby granted, free of charge, to any person obtaining a
# copy of this software and associated documentation files (the "Software"),
# to deal in the Software without restriction, including without limitation
# the rights to use, copy, modify, merge, publish, distribute, sublicense,
# and/or sell copies of the Software, and to permit persons to whom the
# Software is furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in
# all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING
# FROM, OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS
# IN THE SOFTWARE.

""" Basic vector math.

Scalar helpers for single 3-vectors. For the handful of points touched per
face or per vertex they beat NumPy's vectorized routines, which only pay
off on whole coordinate arrays.
"""

import math
import numpy as np


def cross(u, v):
    r""" Cross product of two 3-vectors.

    Parameters
    ----------
    u, v : array_like, shape (3, )
        Input vectors.

    Returns
    -------
    ~numpy.ndarray, shape (3, )
        The vector :math:`\mathbf{u} \times \mathbf{v}`.
    """
    # Unpacking fails loudly for inputs of the wrong length.
    u0, u1, u2 = u
    v0, v1, v2 = v

    return np.array([u1*v2 - u2*v1,
                     u2*v0 - u0*v2,
                     u0*v1 - u1*v0], dtype=float)


def dot(u, v):
    """ Scalar product of two 3-vectors.
    """
    return u[0]*v[0] + u[1]*v[1] + u[2]*v[2]


def norm(u):
    r""" Euclidean length.

    Parameters
    ----------
    u : array_like, shape (n, )
        Input vector of any dimension.

    Returns
    -------
    float
        The length :math:`\|\mathbf{u}\|`.
    """
    u = np.asarray(u, dtype=float)
    return math.sqrt(u.dot(u))


def unit_inplace(u):
    """ Normalize a vector in place.

    Parameters
    ----------
    u : ~numpy.ndarray, shape (3, )
        Float vector, overwritten with its normalized version.

    Returns
    -------
    ~numpy.ndarray, shape (3, )
        The argument `u` itself.

    Note
    ----
    Zero vectors are not caught, the result then contains NaN entries.
    """
    u /= norm(u)
    return u


def unit(u):
    """ Normalized copy of a vector.

    Parameters
    ----------
    u : array_like, shape (3, )
        Input vector, left untouched.

    Returns
    -------
    ~numpy.ndarray, shape (3, )
        Unit vector pointing in the direction of `u`.
    """
    u = np.asarray(u, dtype=float)
    return u / norm(u)
