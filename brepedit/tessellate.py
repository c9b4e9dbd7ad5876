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

""" Face tessellation.

Converts the polygon faces of a boundary mesh into a flat shaded triangle
soup suitable for GPU rendering. Every face gets its own copy of its
vertices so that per-vertex normals follow the face they belong to.
"""

import logging

import mapbox_earcut
import numpy as np

from brepedit.geometry import projection_axes
from brepedit.traits import newell


logger = logging.getLogger(__name__)


class TessellationError(Exception):
    """ Raised if a mesh does not yield any renderable triangles.
    """

    pass


class Geometry:
    """ Renderer-agnostic triangle geometry.

    All buffers are flat arrays in the layout expected by vertex buffer
    objects.

    Parameters
    ----------
    positions : ~numpy.ndarray
        Vertex coordinates, stride 3.
    uvs : ~numpy.ndarray
        Texture coordinates, stride 2. Currently all zero.
    indices : ~numpy.ndarray
        Triangle vertex indices into the position buffer, stride 3.
    normals : ~numpy.ndarray
        Unit vertex normals, stride 3.
    face_facets : dict
        Maps face indices to the list of triangle indices the face was
        split into.
    """

    def __init__(self, positions, uvs, indices, normals, face_facets):
        self.positions = positions
        self.uvs = uvs
        self.indices = indices
        self.normals = normals
        self.face_facets = face_facets

    def __repr__(self):
        return (f'Geometry({len(self.positions) // 3} vertices, '
                f'{self.triangle_count} triangles)')

    @property
    def triangle_count(self):
        """ Number of triangles.

        :type: int
        """
        return len(self.indices) // 3

    @property
    def points(self):
        """ Position buffer as (n, 3) array view.

        :type: ~numpy.ndarray
        """
        return self.positions.reshape(-1, 3)

    @property
    def triangles(self):
        """ Index buffer as (m, 3) array view.

        :type: ~numpy.ndarray
        """
        return self.indices.reshape(-1, 3)

    def area(self, face=None):
        """ Triangulated surface area.

        Parameters
        ----------
        face : Face or int, optional
            Restrict to the triangles of a single face.

        Returns
        -------
        float
            Sum of triangle areas.
        """
        tris = self.triangles

        if face is not None:
            tris = tris[self.face_facets[int(face)]]

        p = self.points
        a, b, c = p[tris[:, 0]], p[tris[:, 1]], p[tris[:, 2]]

        return 0.5 * float(np.linalg.norm(np.cross(b - a, c - a),
                                          axis=-1).sum())


class Tessellator:
    """ Polygon face triangulator.

    Faces are projected onto the coordinate plane most aligned with them
    and split into triangles by ear clipping. The tessellator keeps no
    state between calls, a single instance can be reused for any number
    of meshes.
    """

    def tessellate(self, mesh):
        """ Tessellate all faces of a mesh.

        Parameters
        ----------
        mesh : Mesh
            Boundary mesh.

        Raises
        ------
        TessellationError
            If `mesh` is :obj:`None` or produces no triangles.

        Returns
        -------
        Geometry
            Triangulated geometry of the mesh.
        """
        if mesh is None:
            raise TessellationError('no mesh present')

        positions = []
        triangles = []
        face_facets = dict()

        offset = 0
        count = 0

        for f in mesh:
            coords = np.asarray(f, dtype=float)
            local = self._triangulate(f.index, coords)

            positions.append(coords)
            triangles.append(local + offset)

            face_facets[f.index] = list(range(count, count + len(local)))

            offset += len(coords)
            count += len(local)

        if count == 0:
            raise TessellationError(f'mesh {mesh.name!r} has no triangles')

        points = np.concatenate(positions)
        tris = np.concatenate(triangles).astype(np.uint32)

        return Geometry(positions=points.ravel(),
                        uvs=np.zeros(2 * len(points), dtype=float),
                        indices=tris.ravel(),
                        normals=_vertex_normals(points, tris).ravel(),
                        face_facets=face_facets)

    def _triangulate(self, index, coords):
        """ Triangulate a single face.

        Parameters
        ----------
        index : int
            Face index, used in diagnostics.
        coords : ~numpy.ndarray, shape (n, 3)
            Face vertex coordinates in loop order.

        Returns
        -------
        ~numpy.ndarray, shape (m, 3)
            Local triangle indices, wound like the face.
        """
        n = len(coords)

        if n < 3:
            return np.empty((0, 3), dtype=np.int64)

        if not np.all(np.isfinite(coords)):
            logger.warning('face #%d has invalid vertex data, '
                           'using triangle fan', index)
            return _fan(n)

        i, j = projection_axes(coords)
        rings = np.array([n], dtype=np.uint32)

        try:
            result = mapbox_earcut.triangulate_float64(
                np.ascontiguousarray(coords[:, [i, j]]), rings)
        except (ValueError, TypeError, RuntimeError) as err:
            logger.warning('triangulation of face #%d failed (%s), '
                           'using triangle fan', index, err)
            return _fan(n)

        tris = np.asarray(result, dtype=np.int64).reshape(-1, 3)

        if len(tris) == 0:
            logger.warning('triangulation of face #%d produced no '
                           'triangles, using triangle fan', index)
            return _fan(n)

        valid = np.all(tris < n, axis=1)

        if not np.all(valid):
            logger.warning('dropping %d invalid triangles of face #%d',
                           np.count_nonzero(~valid), index)
            tris = tris[valid]

        # Ear clipping in the projection plane may flip the orientation.
        a, b, c = coords[tris[:, 0]], coords[tris[:, 1]], coords[tris[:, 2]]
        flip = np.cross(b - a, c - a) @ newell(coords) < 0.0

        tris[flip] = tris[flip][:, ::-1]

        return tris


def _fan(n):
    """ Triangle fan anchored at the first polygon vertex.
    """
    k = np.arange(1, n - 1)
    return np.stack([np.zeros_like(k), k, k + 1], axis=1)


def _vertex_normals(points, tris):
    """ Area weighted vertex normals of a triangle soup.
    """
    tris = tris.astype(np.int64)

    a, b, c = points[tris[:, 0]], points[tris[:, 1]], points[tris[:, 2]]
    n = np.cross(b - a, c - a)

    normals = np.zeros_like(points)

    for k in range(3):
        np.add.at(normals, tris[:, k], n)

    length = np.linalg.norm(normals, axis=-1)
    length[length == 0.0] = 1.0

    return normals / length[:, None]


def tessellate(mesh):
    """ Tessellate mesh.

    Shorthand for ``Tessellator().tessellate(mesh)``.

    Parameters
    ----------
    mesh : Mesh
        Boundary mesh.

    Returns
    -------
    Geometry
        Triangulated geometry.
    """
    return Tessellator().tessellate(mesh)
