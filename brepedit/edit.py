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

""" Vertex pair deletion.

Removes a vertex of a Y-extruded solid together with its companion vertex
below it and closes the resulting hole with a single new face. Two
implementations are provided:

    - :func:`delete_vertex_pair` relinks the halfedge structure
      incrementally and is the one used by :class:`~brepedit.session.EditSession`,
    - :func:`delete_vertex_pair_rebuild` filters positions and cells and
      rebuilds the mesh from scratch. It serves as reference in tests.

Both operate on a copy, the input mesh is never modified.
"""

import logging

import numpy as np

from brepedit.constants import EPS_GEOM
from brepedit.geometry import order_by_angle
from brepedit.hds import Mesh, NonManifoldError


logger = logging.getLogger(__name__)


class EditError(Exception):
    """ Raised if a topological edit cannot be carried out.

    The mesh passed to the failing operation is left unchanged.
    """

    pass


def selectable_vertices(mesh, tol=EPS_GEOM):
    """ Vertices on top of a solid.

    Parameters
    ----------
    mesh : Mesh
        A non-empty mesh.
    tol : float, optional
        Tolerance for the comparison of Y coordinates.

    Returns
    -------
    list[Vertex]
        Vertices whose Y coordinate is within `tol` of the maximum Y
        coordinate.
    """
    verts = [v for v in mesh._viter() if not v.isolated]

    if not verts:
        return []

    ymax = max(v.point[1] for v in verts)
    return [v for v in verts if v.point[1] >= ymax - tol]


def find_companion(mesh, vertex, tol=EPS_GEOM):
    """ Companion vertex lookup.

    Among the neighbors of `vertex` find the one with the lowest Y
    coordinate that is strictly below `vertex`.

    Parameters
    ----------
    mesh : Mesh
        Mesh containing `vertex`.
    vertex : Vertex or int
        The selected vertex.
    tol : float, optional
        Minimal height difference of a companion vertex.

    Returns
    -------
    Vertex
        The companion vertex or :obj:`None`.
    """
    v = mesh.vertices[vertex]
    y = v.point[1]

    below = [w for w in v.neighbors if w.point[1] < y - tol]

    # Ties are broken by the smaller vertex index.
    return min(below, key=lambda w: (w.point[1], w.index), default=None)


def delete_vertex_pair(mesh, vertex, tol=EPS_GEOM):
    """ Delete vertex and its companion.

    The faces incident with the selected vertex `v1` or its companion `v2`
    (see :func:`find_companion`) are removed, except for a top face
    (all vertices at the height of `v1`) and a bottom face (all vertices
    at the height of `v2`). These two faces lose one vertex each. The
    resulting hole is closed by a single new face whose vertices are
    ordered by angle about their centroid.

    Parameters
    ----------
    mesh : Mesh
        Closed mesh, not modified.
    vertex : Vertex or int
        The selected vertex `v1`.
    tol : float, optional
        Tolerance for comparisons of Y coordinates.

    Raises
    ------
    EditError
        If there is no companion vertex, a top or bottom face is a
        triangle or cannot be updated, or the hole cannot be closed by a
        single face that differs from all remaining faces.

    Returns
    -------
    Mesh
        New mesh with two vertices less. The closing face is the last
        face of the new mesh.
    """
    v1 = int(vertex)

    if not 0 <= v1 < len(mesh.vertices) or mesh.vertices[v1].deleted:
        raise EditError(f'vertex #{v1} does not exist')

    companion = find_companion(mesh, v1, tol)

    if companion is None:
        raise EditError(f'vertex #{v1} has no companion vertex below it')

    v2 = int(companion)
    work = mesh.copy()

    logger.debug('deleting vertex pair (%d, %d)', v1, v2)

    ytop = max(work.points[v1, 1], work.points[v2, 1])
    ybot = min(work.points[v1, 1], work.points[v2, 1])

    def level(f, y):
        return all(abs(work.points[w, 1] - y) <= tol for w in f)

    # Boundary placeholders present before the edit. Closed meshes have
    # none.
    pre = {h._idx for h in work._hiter() if h._face is None}

    faces = sorted({work.halfedges[h]._face
                    for v in (v1, v2) for h in work._vhout[v]} - {None})

    splice = []

    for i in faces:
        f = work.faces[i]

        if level(f, ytop) or level(f, ybot):
            # Top and bottom faces are updated, a triangle would vanish.
            if len(f) <= 3:
                raise EditError(f'face #{i} has too few vertices to lose one')

            splice.append(f)
        else:
            work.delete_face(f)

    logger.debug('deleted %d faces, updating %s',
                 len(faces) - len(splice), splice)

    try:
        for f in splice:
            # Incident faces on a single level contain exactly one of the
            # two vertices.
            work.splice_vertex(f, v1 if v1 in f else v2)
    except (ValueError, NonManifoldError) as err:
        raise EditError(f'cannot update face: {err}') from err

    for v in (v1, v2):
        for i in list(work._vhout[v]):
            h = work.halfedges[i]

            if h.deleted:
                continue

            if h._face is not None or h.flip._face is not None:
                raise EditError(f'vertex #{v} is still attached to a face')

            work.delete_edge(h._edge)

        work.delete_vertex(v)

    for v in work._viter():
        if v.isolated:
            logger.debug('deleting isolated vertex #%d', v.index)
            work.delete_vertex(v)

    gap = [h for h in work._hiter() if h._face is None and h._idx not in pre]
    loop = order_by_angle(sorted({h._origin for h in gap}), work.points, tol)

    if len(loop) < 3:
        raise EditError(f'hole boundary has only {len(loop)} vertices')

    if any({int(v) for v in f} == set(loop) for f in work):
        raise EditError(f'closing face {loop} would coincide with a face')

    # The new face has to claim the placeholders around the hole. Choose
    # the orientation that matches most of them.
    directed = {(h._origin, h._target) for h in gap}
    pairs = list(zip(loop, loop[1:] + loop[:1]))

    forward = sum(1 for p in pairs if p in directed)
    backward = sum(1 for v, w in pairs if (w, v) in directed)

    if backward > forward:
        loop.reverse()

    try:
        work.add_face(loop)
    except (ValueError, NonManifoldError) as err:
        raise EditError(f'cannot close hole: {err}') from err

    left = [h for h in work._hiter() if h._face is None and h._idx not in pre]

    if left:
        raise EditError(f'hole not closed by face {loop}, '
                        f'{len(left)} open halfedges left')

    try:
        work.clean()
    except NonManifoldError as err:
        raise EditError(f'invalid result: {err}') from err

    logger.debug('closed hole with face %s', work.cells[-1])

    return work


def delete_vertex_pair_rebuild(mesh, vertex, tol=EPS_GEOM):
    """ Delete vertex and its companion, filter and rebuild.

    The companion is the highest vertex directly below `vertex` (same X
    and Z coordinates within `tol`). Removed vertices are filtered from
    all cells, cells with less than three remaining vertices are dropped,
    and a new cell through all former neighbors of the removed vertices
    closes the hole. The mesh is rebuilt from the filtered positions and
    cells.

    Parameters
    ----------
    mesh : Mesh
        Closed mesh, not modified.
    vertex : Vertex or int
        The selected vertex.
    tol : float, optional
        Coordinate comparison tolerance.

    Raises
    ------
    EditError
        If there is no companion vertex, the closing cell coincides with a
        remaining cell, or the rebuilt mesh is invalid.

    Returns
    -------
    Mesh
        New mesh, the closing cell is the last face.
    """
    points = mesh.points
    cells = mesh.cells

    v1 = int(vertex)
    p = points[v1]

    d = np.abs(points[:, [0, 2]] - p[[0, 2]]).max(axis=1)
    below = [i for i in range(len(points))
             if i != v1 and d[i] <= tol and points[i, 1] < p[1] - tol
             and not mesh.vertices[i].deleted]

    if not below:
        raise EditError(f'vertex #{v1} has no vertex directly below it')

    v2 = max(below, key=lambda i: points[i, 1])
    removed = {v1, v2}

    boundary = set()
    filtered = []
    keys = set()

    for c in cells:
        n = len(c)

        for k, v in enumerate(c):
            if v in removed:
                boundary.update(w for w in (c[k - 1], c[(k + 1) % n])
                                if w not in removed)

        c = [v for v in c if v not in removed]
        key = tuple(sorted(c))

        if len(c) >= 3 and key not in keys:
            keys.add(key)
            filtered.append(c)

    loop = order_by_angle(sorted(boundary), points, tol)

    if len(loop) < 3:
        raise EditError(f'hole boundary has only {len(loop)} vertices')

    if any(set(c) == set(loop) for c in filtered):
        raise EditError(f'closing cell {loop} would coincide with a cell')

    used = {(c[k], c[(k + 1) % len(c)]) for c in filtered
            for k in range(len(c))}

    if any((v, w) in used for v, w in zip(loop, loop[1:] + loop[:1])):
        loop.reverse()

    filtered.append(loop)

    keep = [i for i in range(len(points))
            if i not in removed and not mesh.vertices[i].deleted]
    remap = {old: new for new, old in enumerate(keep)}

    try:
        return Mesh(points[keep],
                    [[remap[v] for v in c] for c in filtered],
                    name=mesh.name)
    except (ValueError, IndexError, KeyError, NonManifoldError) as err:
        raise EditError(f'cannot rebuild mesh: {err}') from err
