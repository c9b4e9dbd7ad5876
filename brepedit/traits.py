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

""" Geometric mesh traits.

Normals, areas and extents of boundary meshes. Polygon faces of any degree
are supported, non-planar faces are handled via their Newell vector.
"""

import numpy as np

import brepedit.linalg as linalg

from brepedit.constants import EPS_DEGENERATE


def newell(points):
    r""" Newell vector of a closed polygon.

    The vector :math:`\sum_i p_i \times p_{i+1}` is orthogonal to the best
    fitting plane of the polygon and its length is twice the area of the
    polygon's projection onto that plane.

    Parameters
    ----------
    points : array_like, shape (n, 3)
        Polygon vertex coordinates in traversal order.

    Returns
    -------
    ~numpy.ndarray, shape (3, )
        Unnormalized Newell vector.
    """
    points = np.asarray(points, dtype=float)

    if len(points) < 3:
        return np.zeros(3, dtype=float)

    return np.sum(np.cross(points, np.roll(points, -1, axis=0)), axis=0)


def bounds(points):
    r""" Bounding box vertices.

    Corner vertices of the axis-aligned bounding box.

    Parameters
    ----------
    points : array_like, shape (n, k)
        Coordinates of :math:`n` points in :math:`\mathbb{R}^k`,
        one point per row.

    Returns
    -------
    a : ~numpy.ndarray
        Holds the minimum value for each dimension.
    b : ~numpy.ndarray
        Holds the maximum value for each dimension.
    """
    return np.min(points, axis=0), np.max(points, axis=0)


def face_normal(face):
    """ Face normal.

    Compute face normal as normalized Newell vector of the face loop.

    Parameters
    ----------
    face : Face
        Face of a mesh.

    Returns
    -------
    ~numpy.ndarray, shape (3, )
        Unit normal vector, the zero vector for degenerate faces.

    Note
    ----
    For a counter-clockwise face loop (seen from outside) the normal
    points to the outside of the solid, also for non-convex faces.
    """
    vector = newell(np.asarray(face))
    length = linalg.norm(vector)

    if length < EPS_DEGENERATE:
        return np.zeros(3, dtype=float)

    return vector / length


def face_normals(mesh):
    """ Face normals.

    Parameters
    ----------
    mesh : Mesh
        Mesh with polygonal faces.

    Returns
    -------
    ~numpy.ndarray
        Array of face normal vectors, one row per face not marked as
        deleted.
    """
    return np.array([face_normal(f) for f in mesh]).reshape(-1, 3)


def face_area(face):
    """ Face area.

    Area of a planar polygon face of any degree. Non-planar faces yield
    the area of their projection onto the plane orthogonal to the Newell
    vector.

    Parameters
    ----------
    face : Face
        A face of a mesh.

    Returns
    -------
    float
        Face area.
    """
    return 0.5 * linalg.norm(newell(np.asarray(face)))


def vertex_normals(mesh):
    """ Vertex normals.

    Compute vertex normals as area weighted average of incident face
    normals.

    Parameters
    ----------
    mesh : Mesh
        Mesh with polygonal faces.

    Returns
    -------
    ~numpy.ndarray
        Array of unit vertex normals.

    Note
    ----
    Vertex normals are not well defined for isolated vertices, they are
    set to :obj:`~numpy.nan`.
    """
    normals = np.zeros_like(mesh.points)

    for f in mesh:
        # Twice the area times the unit normal.
        n = newell(np.asarray(f))

        for v in f:
            normals[v, ...] += n

    with np.errstate(invalid='ignore', divide='ignore'):
        normals /= np.linalg.norm(normals, axis=-1)[:, None]

    return normals


def edge_length(mesh):
    """ Edge length statistics.

    Minimal, maximal, and average edge length.

    Parameters
    ----------
    mesh : Mesh
        A mesh with at least one edge.

    Returns
    -------
    min : float
        Minimal edge length.
    max : float
        Maximal edge length.
    avg : float
        Average edge length.
    """
    lengths = [e.length for e in mesh.edges if not e.deleted]
    return min(lengths), max(lengths), sum(lengths) / len(lengths)
