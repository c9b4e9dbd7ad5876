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

""" Polygon geometry helpers.

Pure functions on point sets that are expected to lie near a common plane:
plane estimation, cyclic ordering of an unordered polygon boundary and the
choice of a coordinate plane to project a face onto. None of these raise
on degenerate input; they fall back to well defined values instead and
callers have to tolerate approximate results.
"""

import math
import numpy as np

import brepedit.linalg as linalg

from brepedit.constants import EPS_GEOM, EPS_DEGENERATE, UP


def centroid(points):
    """ Arithmetic mean of points.

    Parameters
    ----------
    points : array_like, shape (n, 3)
        Point coordinates, one point per row.

    Returns
    -------
    ~numpy.ndarray, shape (3, )
        Centroid of the point set.
    """
    return np.mean(np.asarray(points, dtype=float), axis=0)


def plane_normal(points, eps=EPS_GEOM):
    r""" Normal of a near-planar point set.

    The first point :math:`\mathbf{p}_0`, the first point farther than
    `eps` from it, :math:`\mathbf{p}_1`, and the first point
    :math:`\mathbf{p}_k` for which
    :math:`\|(\mathbf{p}_1 - \mathbf{p}_0) \times (\mathbf{p}_k - \mathbf{p}_0)\|`
    exceeds `eps` span the plane.

    Parameters
    ----------
    points : array_like, shape (n, 3)
        Point coordinates.
    eps : float, optional
        Distance and cross product length threshold.

    Returns
    -------
    ~numpy.ndarray, shape (3, )
        Unit normal vector. The up vector (0, 1, 0) if there are less than
        three points or all points are (nearly) collinear.

    Note
    ----
    The orientation of the normal depends on the order of the points.
    """
    points = np.asarray(points, dtype=float)

    if len(points) < 3:
        return np.array(UP)

    p0 = points[0]
    p1 = None

    for p in points[1:]:
        if linalg.norm(p - p0) > eps:
            p1 = p
            break

    if p1 is None:
        return np.array(UP)

    u = p1 - p0

    for p in points[1:]:
        n = linalg.cross(u, p - p0)

        if linalg.norm(n) > eps:
            return linalg.unit_inplace(n)

    return np.array(UP)


def order_by_angle(indices, points, eps=EPS_GEOM):
    """ Cyclic order of polygon vertices.

    Sorts vertex indices by the polar angle of their positions about the
    centroid, measured in the plane estimated by :func:`plane_normal`. The
    reference direction points from the centroid to the first vertex.

    Parameters
    ----------
    indices : sequence of int
        Vertex indices, no particular order.
    points : array_like, shape (m, 3)
        Coordinate array indexed by `indices`.
    eps : float, optional
        Tolerance passed on to :func:`plane_normal`.

    Returns
    -------
    list[int]
        Permutation of `indices` in counter-clockwise order with respect
        to the estimated plane normal.

    Note
    ----
    The result reconstructs the boundary of a convex (or star-shaped with
    respect to the centroid) polygon. Less than three indices are returned
    unchanged.
    """
    indices = [int(i) for i in indices]

    if len(indices) < 3:
        return indices

    coords = np.asarray(points, dtype=float)[indices]
    normal = plane_normal(coords, eps)
    center = centroid(coords)

    offsets = coords - center

    # The reference direction has to be a proper vector. Skip points that
    # coincide with the centroid.
    for d in offsets:
        if linalg.norm(d) > EPS_DEGENERATE:
            x_axis = linalg.unit(d)
            break
    else:
        return indices

    y_axis = linalg.cross(normal, x_axis)

    angles = [math.atan2(linalg.dot(d, y_axis), linalg.dot(d, x_axis))
              for d in offsets]
    order = sorted(range(len(indices)), key=lambda k: angles[k])

    return [indices[k] for k in order]


def projection_axes(points):
    """ Dominant projection plane.

    Chooses the coordinate plane onto which a polygon is projected for
    triangulation. The normal estimate is the cross product of the first
    two edge vectors; the coordinate axis with the largest normal component
    is dropped.

    Parameters
    ----------
    points : array_like, shape (n, 3)
        Ordered polygon vertex coordinates.

    Returns
    -------
    tuple(int, int)
        Kept coordinate indices: (0, 2) for XZ, (0, 1) for XY and (1, 2)
        for YZ. Degenerate input results in XZ.
    """
    points = np.asarray(points, dtype=float)

    if len(points) < 3:
        return 0, 2

    n = linalg.cross(points[1] - points[0], points[2] - points[0])
    length = linalg.norm(n)

    if length < EPS_DEGENERATE:
        return 0, 2

    nx, ny, nz = np.abs(n / length)

    if ny >= nx and ny >= nz:
        return 0, 2
    elif nz >= nx:
        return 0, 1

    return 1, 2


def polygon_area(points):
    """ Signed area of a planar polygon.

    Parameters
    ----------
    points : array_like, shape (n, 2)
        Polygon vertices in 2D.

    Returns
    -------
    float
        Signed area, positive for counter-clockwise vertex order.
    """
    p = np.asarray(points, dtype=float)

    if len(p) < 3:
        return 0.0

    x = p[:, 0]
    y = p[:, 1]

    return 0.5 * float(np.dot(x, np.roll(y, -1)) - np.dot(y, np.roll(x, -1)))
