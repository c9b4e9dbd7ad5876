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

""" Interactive edit session.

An :class:`EditSession` owns one mesh together with its current
tessellation. Edits are staged on copies and committed only if both the
topological operation and the subsequent tessellation succeed. The
previously committed state stays in place otherwise.
"""

import logging

from brepedit.constants import EPS_GEOM
from brepedit.edit import EditError, delete_vertex_pair, selectable_vertices
from brepedit.tessellate import TessellationError, Tessellator


logger = logging.getLogger(__name__)


class EditSession:
    """ Edit session.

    Parameters
    ----------
    mesh : Mesh
        The mesh to be edited. The session takes ownership, callers should
        not modify it afterwards.
    tessellator : Tessellator, optional
        Tessellator used to rebuild the geometry after each edit.
    tol : float, optional
        Tolerance for Y coordinate comparisons.

    Raises
    ------
    TessellationError
        If the initial mesh cannot be tessellated.
    """

    def __init__(self, mesh, tessellator=None, tol=EPS_GEOM):
        self._tessellator = tessellator or Tessellator()
        self._tol = tol
        self._history = 0

        self._mesh = mesh
        self._geometry = self._tessellator.tessellate(mesh)

    @property
    def mesh(self):
        """ Currently committed mesh.

        :type: Mesh
        """
        return self._mesh

    @property
    def geometry(self):
        """ Tessellation of the committed mesh.

        :type: Geometry
        """
        return self._geometry

    @property
    def history(self):
        """ Number of committed edits.

        :type: int
        """
        return self._history

    def selectable_vertices(self):
        """ Vertices that can be picked for deletion.

        Returns
        -------
        list[Vertex]
            Vertices at the top of the solid.
        """
        return selectable_vertices(self._mesh, self._tol)

    def delete(self, vertex):
        """ Delete vertex pair.

        Parameters
        ----------
        vertex : Vertex or int
            Selected vertex of the committed mesh.

        Returns
        -------
        bool
            :obj:`True` if the edit was committed, :obj:`False` if it
            failed and the session state is unchanged.
        """
        index = int(vertex)

        try:
            mesh = delete_vertex_pair(self._mesh, index, self._tol)
            geometry = self._tessellator.tessellate(mesh)
        except (EditError, TessellationError) as err:
            logger.error('deleting vertex #%d failed: %s', index, err)
            return False

        self._mesh = mesh
        self._geometry = geometry
        self._history += 1

        logger.info('deleted vertex #%d, mesh size %s', index, mesh.size)

        return True

    def rebuild(self):
        """ Re-tessellate the committed mesh.

        Raises
        ------
        TessellationError
            If the mesh yields no triangles. The previous geometry is kept.

        Returns
        -------
        Geometry
            The new geometry.
        """
        self._geometry = self._tessellator.tessellate(self._mesh)
        return self._geometry
