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

""" Solid primitives.

Builders for the closed, Y-extruded solids the vertex deletion operator is
designed for. All faces are oriented counter-clockwise when seen from the
outside of the solid.
"""

import numpy as np

from brepedit.geometry import polygon_area
from brepedit.hds import Mesh


def _prism_cells(n):
    """ Face definitions of an n-sided prism.

    Vertices ``0..n-1`` form the bottom loop (normal pointing down),
    vertices ``n..2n-1`` the top loop directly above them.
    """
    bottom = list(range(n))
    top = [i + n for i in reversed(bottom)]

    sides = [[(i + 1) % n, i, i + n, (i + 1) % n + n] for i in range(n)]

    return [bottom, top] + sides


def box(a=(0.0, 0.0, 0.0), b=(1.0, 1.0, 1.0), *, name='box'):
    """ Axis-aligned box.

    Parameters
    ----------
    a : array_like, shape (3, )
        Minimum corner.
    b : array_like, shape (3, )
        Maximum corner.
    name : str, optional
        Name tag of the returned mesh.

    Returns
    -------
    Mesh
        Box with 8 vertices, 12 edges and 6 quadrilateral faces. Vertices
        ``0..3`` lie on the bottom (``y = a[1]``), vertices ``4..7``
        directly above them.
    """
    x0, y0, z0 = map(float, a)
    x1, y1, z1 = map(float, b)

    base = [(x0, z0), (x1, z0), (x1, z1), (x0, z1)]

    return extrude(base, y1 - y0, elevation=y0, name=name)


def extrude(base, height=5.0, *, elevation=0.0, name='prism'):
    """ Prism over a planar base polygon.

    The base polygon lives in the XZ-plane. Its points are placed at
    ``y = elevation`` and copied to ``y = elevation + height``. The
    resulting solid has one bottom face, one top face and one
    quadrilateral side face per base edge.

    Parameters
    ----------
    base : array_like, shape (n, 2)
        Simple polygon given by ``(x, z)`` coordinates, either
        orientation.
    height : float, optional
        Extrusion height, has to be positive.
    elevation : float, optional
        Y coordinate of the bottom face.
    name : str, optional
        Name tag of the returned mesh.

    Raises
    ------
    ValueError
        If the base polygon has less than three points or the height is
        not positive.

    Returns
    -------
    Mesh
        Closed prism. Vertex ``i`` is the i-th base point, vertex
        ``i + n`` the point above it.
    """
    base = np.asarray(base, dtype=float)

    if base.ndim != 2 or base.shape[1] != 2 or len(base) < 3:
        raise ValueError('base polygon needs at least three (x, z) points')

    if not height > 0.0:
        raise ValueError(f'height must be positive, got {height}')

    n = len(base)
    cells = _prism_cells(n)

    # The Y component of the bottom loop normal is minus twice the signed
    # area in the (x, z) plane. The bottom normal has to point down,
    # otherwise all faces are flipped.
    if polygon_area(base) < 0.0:
        cells = [c[::-1] for c in cells]

    points = np.zeros((2 * n, 3), dtype=float)

    points[:n, 0] = points[n:, 0] = base[:, 0]
    points[:n, 2] = points[n:, 2] = base[:, 1]
    points[:n, 1] = elevation
    points[n:, 1] = elevation + height

    return Mesh(points, cells, name=name)


def examples(height=5.0):
    """ Demo solids.

    Four prisms over a square, a non-convex pentagon, a regular hexagon and
    a regular octagon. The octagon is moved along X so that it does not
    overlap the hexagon.

    Parameters
    ----------
    height : float, optional
        Extrusion height of all prisms.

    Returns
    -------
    list[Mesh]
        Square, pentagon, hexagon and octagon prism, in that order.
    """
    square = [(5, -5), (10, -5), (9, -10), (4, -10)]
    pentagon = [(-3, 8), (2, 5), (1, 11), (-3, 10), (-7, 8)]

    k = np.arange(6)
    hexagon = 5.0 * np.stack([np.cos(k * np.pi / 3), np.sin(k * np.pi / 3)],
                             axis=1)

    k = np.arange(8)
    octagon = 5.0 * np.stack([np.cos(k * np.pi / 4), np.sin(k * np.pi / 4)],
                             axis=1) + [15.0, 0.0]

    return [extrude(square, height, name='square'),
            extrude(pentagon, height, name='pentagon'),
            extrude(hexagon, height, name='hexagon'),
            extrude(octagon, height, name='octagon')]
