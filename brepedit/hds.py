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

""" Halfedge boundary representation.

A closed, oriented polygonal surface (the boundary of a solid) is described
by four item containers owned by a :class:`Mesh`:

    - a list of :class:`Vertex` objects (rows of the coordinate array),
    - a list of :class:`Edge` objects,
    - a list of :class:`Halfedge` objects,
    - and a list of :class:`Face` objects.

Items never hold references to each other. All relations (origin vertex,
successor halfedge, flip halfedge, incident face, ...) are stored as dense
integer indices into the containers of the owning mesh and are resolved on
access. Each item keeps a back reference to its mesh for that purpose.

Topological modifications only mark items as deleted. A call to
:meth:`Mesh.clean` compacts all containers, renumbers the surviving items
and rebuilds the lookup tables.

Note
----
To ease debugging, this module relies on assertions which can slow down
script execution. You can disable assertions by running in optimized mode
via the "-O" command line argument.
"""

import logging

from copy import copy

import numpy as np


logger = logging.getLogger(__name__)


class Mesh:
    """ Boundary mesh kernel.

    The combinatorics of a mesh are built from a vertex coordinate array
    and a list of face definitions (cells), each a loop of vertex indices
    in counter-clockwise order when looking at the outside of the solid.

    Parameters
    ----------
    points : array_like, shape (n, 3), optional
        Vertex coordinates.
    cells : list[list[int]], optional
        Face definitions, 0-based vertex indexing.
    name : str, optional
        Name tag.

    Raises
    ------
    NonManifoldError
        When trying to initialize a mesh from non-manifold data.
    ValueError
        If a cell is degenerate or `cells` is given without `points`.


    A unit cube can be created with

    .. code-block:: python
       :linenos:

        points = [[0, 0, 0], [1, 0, 0], [1, 0, 1], [0, 0, 1],
                  [0, 1, 0], [1, 1, 0], [1, 1, 1], [0, 1, 1]]

        cells = [[0, 1, 2, 3], [4, 7, 6, 5], [0, 4, 5, 1],
                 [1, 5, 6, 2], [2, 6, 7, 3], [3, 7, 4, 0]]

        mesh = Mesh(points, cells)

    which is the same as calling :meth:`set_positions`, :meth:`set_cells`,
    and :meth:`process` on an empty mesh.
    """

    def __init__(self, points=None, cells=None, *, name=None):
        if points is None and cells is not None:
            msg = "face definitions require 'points' argument != None"
            raise ValueError(msg)

        self._points = np.empty((0, 3), dtype=float)

        self._verts = []
        self._edges = []
        self._halfs = []
        self._faces = []

        # Lookup tables. Map ordered vertex index pairs to halfedges and
        # unordered pairs (smaller index first) to edges. The set of
        # outgoing halfedges is stored per vertex.
        self._hmap = dict()
        self._emap = dict()
        self._vhout = []

        # Face definitions waiting for process().
        self._cells = []

        self.name = name

        if points is not None:
            self.set_positions(points)

        if cells is not None:
            self.set_cells(cells)
            self.process()

    def __iter__(self):
        """ Face iterator.

        Visits all faces **not** marked as deleted in order of ascending
        face indices.

        Yields
        ------
        Face
            Next face in insertion order traversal.
        """
        return (f for f in self._faces if not f._deleted)

    def __bool__(self):
        return True

    @property
    def points(self):
        """ Vertex coordinate array.

        Direct read and write access to vertex coordinates. Row `i` holds
        the coordinates of vertex `i`.

        :type: ~numpy.ndarray, shape (n, 3)

        Note
        ----
        The coordinate array contains rows of deleted vertices until
        :meth:`clean` is called.
        """
        return self._points

    @property
    def vertices(self):
        """ Vertex list.

        Read access to the vertex list. This list should not be modified
        directly.

        :type: list[Vertex]
        """
        return self._verts

    @property
    def edges(self):
        """ Edge list.

        :type: list[Edge]
        """
        return self._edges

    @property
    def halfedges(self):
        """ Halfedge list.

        Every edge contributes two halfedges of opposite direction. A
        halfedge without face (see :attr:`Halfedge.boundary`) is a boundary
        placeholder waiting for a face to claim it.

        :type: list[Halfedge]
        """
        return self._halfs

    @property
    def faces(self):
        """ Face list.

        :type: list[Face]

        Note
        ----
        The face list may contain deleted faces. A call to :meth:`clean`
        will remove such entries.
        """
        return self._faces

    @property
    def cells(self):
        """ Face definitions.

        Vertex index loops of all faces not marked as deleted. Before
        :meth:`process` was called these are the cells passed to
        :meth:`set_cells`.

        :type: list[list[int]]
        """
        if not self._faces:
            return [list(c) for c in self._cells]

        return [[int(v) for v in f] for f in self]

    @property
    def size(self):
        """ Mesh size.

        Number of vertices, edges and faces **not** marked as deleted.

        :type: (int, int, int)
        """
        return (sum(1 for v in self._verts if not v._deleted),
                sum(1 for e in self._edges if not e._deleted),
                sum(1 for f in self._faces if not f._deleted))

    @property
    def name(self):
        """ Name tag.

        :type: str
        """
        return self._name

    @name.setter
    def name(self, value):
        self._name = value

    def set_positions(self, points):
        """ Assign vertex coordinates.

        Replaces the coordinate array and creates one vertex per row. Any
        existing combinatorics are discarded.

        Parameters
        ----------
        points : array_like, shape (n, 3)
            Vertex coordinates.

        Raises
        ------
        ValueError
            If `points` is not a 2-dimensional array with three columns.
        """
        points = np.array(points, dtype=float)

        if points.size == 0:
            points = points.reshape(0, 3)

        if points.ndim != 2 or points.shape[1] != 3:
            msg = f'points need shape (n, 3), got {points.shape}'
            raise ValueError(msg)

        self._points = points
        self._verts = [Vertex(i, parent=self) for i in range(len(points))]
        self._clear_topology()

    def set_cells(self, cells):
        """ Assign face definitions.

        The combinatorics are built by a subsequent call to :meth:`process`.

        Parameters
        ----------
        cells : list[list[int]]
            Consistently oriented vertex index loops, one per face.
        """
        self._cells = [[int(v) for v in c] for c in cells]

    def process(self):
        """ Build the halfedge structure.

        Creates edges, halfedges and faces from the current positions and
        cells, pairs opposite halfedges, adds boundary placeholders for
        unpaired halfedges and links boundary loops.

        Raises
        ------
        NonManifoldError
            If an edge is used twice in the same direction or a vertex fan
            is not a single disk (or half disk).
        ValueError
            If a cell has duplicate or less than three vertices.
        IndexError
            If a cell refers to a vertex that does not exist.

        Returns
        -------
        Mesh
            The mesh itself.
        """
        self._clear_topology()

        for cell in self._cells:
            self.add_face(cell)

        self._link_boundary()

        for v in self._verts:
            if not v._manifold:
                raise NonManifoldError(f'vertex #{v._idx} is non-manifold')

        # Typically one does not expect isolated vertices in a mesh.
        isolated = [v._idx for v in self._verts if v.isolated]

        if isolated:
            logger.warning('%d isolated vertices in mesh %r: %s',
                           len(isolated), self._name, isolated[:10])

        return self

    def find_halfedge(self, v, w):
        """ Halfedge lookup.

        Parameters
        ----------
        v, w : Vertex or int
            Origin and target vertex.

        Returns
        -------
        Halfedge
            The halfedge pointing from `v` to `w` or :obj:`None`.
        """
        h = self._hmap.get((int(v), int(w)))
        return None if h is None else self._halfs[h]

    def find_edge(self, v, w):
        """ Edge lookup.

        Parameters
        ----------
        v, w : Vertex or int
            Edge end points in any order.

        Returns
        -------
        Edge
            The edge joining `v` and `w` or :obj:`None` if the vertices
            are not adjacent.
        """
        e = self._emap.get(_edge_key(v, w))
        return None if e is None else self._edges[e]

    def add_vertex(self, point):
        """ Create and add new vertex.

        Parameters
        ----------
        point : array_like, shape (3, )
            Vertex coordinates.

        Returns
        -------
        Vertex
            The newly created, isolated :class:`Vertex` instance.
        """
        point = np.asarray(point, dtype=float).reshape(1, 3)
        self._points = np.vstack([self._points, point])

        v = Vertex(len(self._verts), parent=self)

        self._verts.append(v)
        self._vhout.append(set())

        return v

    def add_face(self, face, *args):
        """ Create and add new face.

        Halfedges of the new face are created as needed. Boundary
        placeholders with matching direction are claimed by the face,
        existing edges are reused. Missing flip halfedges are created as
        boundary placeholders.

        Parameters
        ----------
        face : list[int] or list[Vertex]
            Combinatorial face definition.
        *args
            Variable number of :class:`Vertex` or :class:`int` arguments.

        Raises
        ------
        NonManifoldError
            If one of the directed edges already belongs to a face.
        IndexError
            If the given vertex indices are out of bounds.
        ValueError
            If the given arguments do not define a valid face.

        Returns
        -------
        Face
            The newly created :class:`Face` instance.

        Note
        ----
        Boundary loops are not linked by this method, see :meth:`clean`.
        """
        face = [face, *args] if len(args) else face
        face = [int(v) for v in face]
        n = len(face)

        # Check for degeneracies: All vertices have to be topologically
        # different. If this test is passed there still need to be at
        # least three vertices. Duplicate coordinates are not a problem.
        if len(set(face)) != n:
            raise ValueError('face contains duplicate vertices')

        if n < 3:
            raise ValueError('face has less than three vertices')

        for v in face:
            if not 0 <= v < len(self._verts):
                raise IndexError(f'vertex index {v} out of range')

            if self._verts[v]._deleted:
                raise ValueError(f'vertex #{v} is deleted')

        # Dry run. Nothing is modified if the face cannot be added.
        for k in range(n):
            h = self._hmap.get((face[k], face[(k + 1) % n]))

            if h is not None and self._halfs[h]._face is not None:
                msg = f'edge ({face[k]}, {face[(k + 1) % n]}) is non-manifold'
                raise NonManifoldError(msg)

        f = Face(len(self._faces), parent=self)
        edge_loop = [self._add_halfedge(face[k], face[(k + 1) % n])
                     for k in range(n)]

        for h in edge_loop:
            h._face = f._idx
            self._verts[h._origin]._halfedge = h._idx

            # A halfedge should always have a flip. Create a boundary
            # placeholder if the flip does not exist yet.
            if h._flip is None:
                self._add_halfedge(h._target, h._origin)

        for i in range(n):
            j = (i + 1) % n

            edge_loop[i]._next = edge_loop[j]._idx
            edge_loop[j]._prev = edge_loop[i]._idx

        f._halfedge = edge_loop[0]._idx
        self._faces.append(f)

        return f

    def delete_face(self, face):
        """ Delete face.

        The halfedges of the face become boundary placeholders. Edges that
        end up without any incident face are deleted.

        Parameters
        ----------
        face : Face or int
            Face identifier.

        Note
        ----
        The deleted face is not removed from the face container immediately.
        It is marked as deleted and removed when calling :meth:`clean`.
        """
        f = self._faces[face]
        assert not f._deleted

        edge_loop = list(f._hiter())

        for h in edge_loop:
            h._face = None

        for h in edge_loop:
            if not h._deleted and self._halfs[h._flip]._face is None:
                self.delete_edge(h._edge)

        f._deleted = True

    def delete_edge(self, edge):
        """ Delete edge.

        Both halfedges of the edge are removed from the lookup tables and
        marked as deleted.

        Parameters
        ----------
        edge : Edge or int
            Edge identifier.

        Raises
        ------
        NonManifoldError
            If a face is still attached to the edge.
        """
        e = self._edges[edge]
        assert not e._deleted

        h = self._halfs[e._halfedge]
        pair = self._halfs[h._flip]

        if h._face is not None or pair._face is not None:
            raise NonManifoldError(f'edge #{e._idx} still has a face')

        self._pop_halfedge(h)
        self._pop_halfedge(pair)

        del self._emap[_edge_key(h._origin, h._target)]
        e._deleted = True

    def delete_vertex(self, vertex):
        """ Delete isolated vertex.

        Parameters
        ----------
        vertex : Vertex or int
            Vertex identifier.

        Raises
        ------
        NonManifoldError
            If the vertex is still connected to an edge.
        """
        v = self._verts[vertex]
        assert not v._deleted

        if self._vhout[v._idx]:
            raise NonManifoldError(f'vertex #{v._idx} is not isolated')

        v._halfedge = None
        v._deleted = True

    def splice_vertex(self, face, vertex):
        """ Remove vertex from a face loop.

        The two halfedges of `face` incident with `vertex` are replaced by
        a single halfedge joining the adjacent vertices. Its flip becomes a
        boundary placeholder unless the edge already existed. Edges of the
        removed halfedges that end up without any face are deleted.

        Parameters
        ----------
        face : Face or int
            Face identifier.
        vertex : Vertex or int
            Vertex of `face`.

        Raises
        ------
        ValueError
            If `vertex` is not a vertex of `face` or the face would
            degenerate to less than three vertices.
        NonManifoldError
            If the new edge already belongs to another face in the same
            direction.

        Returns
        -------
        Halfedge
            The new halfedge of `face`.
        """
        f = self._faces[face]
        v = int(vertex)

        assert not f._deleted

        h_in = next((h for h in f._hiter() if h._target == v), None)

        if h_in is None:
            raise ValueError(f'vertex #{v} is not part of face #{f._idx}')

        if len(f) <= 3:
            raise ValueError(f'face #{f._idx} would degenerate')

        h_out = self._halfs[h_in._next]

        a = h_in._origin
        b = h_out._target

        prev_h = self._halfs[h_in._prev]
        next_h = self._halfs[h_out._next]

        g = self._hmap.get((a, b))

        if g is not None and self._halfs[g]._face is not None:
            raise NonManifoldError(f'edge ({a}, {b}) is non-manifold')

        h = self._add_halfedge(a, b)

        if h._flip is None:
            self._add_halfedge(b, a)

        h._face = f._idx

        prev_h._next = h._idx
        h._prev = prev_h._idx
        h._next = next_h._idx
        next_h._prev = h._idx

        if f._halfedge in (h_in._idx, h_out._idx):
            f._halfedge = h._idx

        self._verts[a]._halfedge = h._idx

        for x in (h_in, h_out):
            x._face = None

        for x in (h_in, h_out):
            if not x._deleted and self._halfs[x._flip]._face is None:
                self.delete_edge(x._edge)

        return h

    def clean(self):
        """ Garbage collection.

        Removes all deleted mesh items from their containers and drops the
        coordinate rows of deleted vertices. Surviving items are renumbered
        to a dense index range (keeping their relative order), all stored
        references are remapped, lookup tables are rebuilt and boundary
        loops are re-linked. Previously obtained indices may become invalid.

        Raises
        ------
        NonManifoldError
            If boundary loops cannot be linked.
        """
        assert len(self._points) == len(self._verts)

        vidx = [i for i, v in enumerate(self._verts) if not v._deleted]
        self._points = self._points[vidx].reshape(len(vidx), 3)

        vmap = _renumber(self._verts)
        emap = _renumber(self._edges)
        hmap = _renumber(self._halfs)
        fmap = _renumber(self._faces)

        for h in self._halfs:
            h._origin = vmap[h._origin]
            h._target = vmap[h._target]
            h._edge = emap[h._edge]
            h._flip = hmap[h._flip]
            h._face = None if h._face is None else fmap[h._face]

            # Links of boundary placeholders may refer to deleted items.
            # Those are restored by _link_boundary() below.
            h._next = hmap.get(h._next)
            h._prev = hmap.get(h._prev)

        for e in self._edges:
            e._halfedge = hmap[e._halfedge]

        for f in self._faces:
            f._halfedge = hmap[f._halfedge]

        for v in self._verts:
            v._halfedge = hmap.get(v._halfedge)

        self._rebuild_maps()
        self._link_boundary()

    def copy(self):
        """ Return mesh copy.

        Duplicates combinatorics and vertex coordinates. The copy shares no
        mutable state with the original mesh.

        Returns
        -------
        Mesh
            Copy of the mesh.
        """
        return self.__class__().clone(self)

    def clone(self, mesh):
        """ In-place mesh copy.

        Implements assignment operator like behavior. Performs the same
        operation as :meth:`copy` but assigns the result to the mesh
        instance `self`.

        Parameters
        ----------
        mesh : Mesh
            Source mesh.

        Returns
        -------
        Mesh
            The mesh itself.
        """
        if self is mesh:
            return self

        def items(container):
            # Items only hold integers, a shallow copy suffices.
            result = [copy(x) for x in container]

            for x in result:
                x._mesh = self

            return result

        self._points = mesh._points.copy()

        self._verts = items(mesh._verts)
        self._edges = items(mesh._edges)
        self._halfs = items(mesh._halfs)
        self._faces = items(mesh._faces)

        self._hmap = dict(mesh._hmap)
        self._emap = dict(mesh._emap)
        self._vhout = [set(s) for s in mesh._vhout]
        self._cells = [list(c) for c in mesh._cells]

        self._name = mesh._name

        return self

    def _clear_topology(self):
        """ Discard edges, halfedges and faces.
        """
        self._edges = []
        self._halfs = []
        self._faces = []

        self._hmap.clear()
        self._emap.clear()
        self._vhout = [set() for _ in self._verts]

        for v in self._verts:
            v._halfedge = None

    def _add_edge(self, v, w):
        """ Create and add new edge.
        """
        e = Edge(len(self._edges), parent=self)

        self._edges.append(e)
        self._emap[_edge_key(v, w)] = e._idx

        return e

    def _add_halfedge(self, v, w):
        """ Create and add new halfedge.

        Returns the mapped halfedge from `v` to `w` if it exists. Otherwise
        a new halfedge is created. If its flip is already mapped, both are
        paired and share an edge, else a new edge is created.

        Parameters
        ----------
        v : int
            Origin vertex index.
        w : int
            Target vertex index.

        Raises
        ------
        NonManifoldError
            If `v` equals `w` or the halfedge already has a face.

        Returns
        -------
        Halfedge
            Halfedge pointing from `v` to `w`.

        Note
        ----
        The :attr:`~Halfedge.next`, :attr:`~Halfedge.prev`, and
        :attr:`~Halfedge.face` attributes of new halfedges are not set.
        """
        # This edge is topologically degenerate if the origin and target
        # vertex coincide. Not to be confused with geometrically degenerate
        # if the vertex locations coincide.
        if v == w:
            msg = f'topologically degenerate edge ({v}, {w})'
            raise NonManifoldError(msg)

        g = self._hmap.get((v, w))

        if g is not None:
            h = self._halfs[g]

            if h._face is not None:
                raise NonManifoldError(f'edge ({v}, {w}) is non-manifold')

            return h

        h = Halfedge(len(self._halfs), v, w, parent=self)
        self._halfs.append(h)

        self._hmap[v, w] = h._idx
        self._vhout[v].add(h._idx)

        g = self._hmap.get((w, v))

        if g is not None:
            pair = self._halfs[g]
            pair._flip = h._idx

            h._flip = pair._idx
            h._edge = pair._edge
        else:
            e = self._add_edge(v, w)
            e._halfedge = h._idx
            h._edge = e._idx

        return h

    def _pop_halfedge(self, h):
        """ Remove halfedge from the lookup tables.

        Parameters
        ----------
        h : Halfedge
            The halfedge to be removed.

        Raises
        ------
        KeyError
            If the halfedge could not be removed. This indicates a corrupted
            halfedge data structure or erroneous code, e.g. trying to remove
            a halfedge twice.
        """
        assert not h._deleted

        h._deleted = True

        del self._hmap[h._origin, h._target]
        self._vhout[h._origin].remove(h._idx)

    def _rebuild_maps(self):
        """ Rebuild lookup tables from the item containers.
        """
        self._hmap = {(h._origin, h._target): h._idx for h in self._halfs}
        self._emap = dict()
        self._vhout = [set() for _ in self._verts]

        for e in self._edges:
            h = self._halfs[e._halfedge]
            self._emap[_edge_key(h._origin, h._target)] = e._idx

        for h in self._halfs:
            self._vhout[h._origin].add(h._idx)

        # Prefer an outgoing halfedge with face as the vertex halfedge.
        for v in self._verts:
            halfs = self._vhout[v._idx]

            if v._halfedge is None or v._halfedge not in halfs:
                v._halfedge = min(halfs, default=None,
                                  key=lambda i: self._halfs[i]._face is None)

    def _link_boundary(self):
        """ Link boundary placeholders to loops.

        The successor of a boundary placeholder is the unique boundary
        placeholder starting at its target vertex.

        Raises
        ------
        NonManifoldError
            If a vertex has more than one outgoing boundary placeholder.
        """
        out = dict()

        for h in self._halfs:
            if h._deleted or h._face is not None:
                continue

            if h._origin in out:
                raise NonManifoldError(f'vertex #{h._origin} is non-manifold')

            out[h._origin] = h

        for h in out.values():
            # Every vertex with an incoming placeholder has an outgoing one
            # since placeholders are flips of face halfedges.
            g = out.get(h._target)

            if g is None:
                raise NonManifoldError(f"vertex #{h._target} is non-manifold")

            h._next = g._idx
            g._prev = h._idx

    def _check(self):
        """ Perform sanity checks.

        Verifies all invariants of a clean mesh: dense indices, paired
        halfedges, closed face and boundary loops, and consistent lookup
        tables.
        """
        assert len(self._points) == len(self._verts)
        assert len(self._vhout) == len(self._verts)

        for container in (self._verts, self._edges, self._halfs, self._faces):
            for i, x in enumerate(container):
                assert x._idx == i
                assert not x._deleted
                x._check()

        assert len(self._hmap) == len(self._halfs)
        assert len(self._emap) == len(self._edges)
        assert 2 * len(self._edges) == len(self._halfs)

        for (v, w), i in self._hmap.items():
            h = self._halfs[i]

            assert h._origin == v and h._target == w
            assert i in self._vhout[v]

        for key, i in self._emap.items():
            h = self._halfs[self._edges[i]._halfedge]
            assert _edge_key(h._origin, h._target) == key

    def _viter(self):
        """ Generator expression skipping deleted vertices.
        """
        return (v for v in self._verts if not v._deleted)

    def _hiter(self):
        """ Generator expression skipping deleted halfedges.
        """
        return (h for h in self._halfs if not h._deleted)


class Vertex:
    """ Vertex class.

    Vertices are abstract topological entities. Their coordinates are the
    row of the parent mesh's coordinate array selected by :attr:`index`.

    Parameters
    ----------
    index : int
        Vertex index.
    parent : Mesh, optional
        The parent mesh object.

    Note
    ----
    In addition to :attr:`index`, implementations of the special functions
    :meth:`~object.__int__` and :meth:`~object.__index__` are provided.
    The latter makes it possible to use vertex instances as list indices.
    """

    def __init__(self, index, parent=None):
        self._idx = index
        self._mesh = parent
        self._halfedge = None

        self._deleted = False

    def __repr__(self):
        return f'Vertex({self._idx})'

    def __str__(self):
        try:
            point = self.point
        except AttributeError:
            point = '[None]'

        return f'v {self._idx} {point}'

    def __index__(self):
        """ Vertex index.

        Vertices can be used directly as list and array indices, i.e.,
        one can write ``some_list[v]`` instead of the slightly longer
        ``some_list[v.index]`` expression.

        Returns
        -------
        int
            Vertex index.
        """
        return self._idx

    def __int__(self):
        return self._idx

    def __bool__(self):
        return True

    def __array__(self, dtype=None, copy=None):
        """ NumPy support.

        Returns
        -------
        ~numpy.ndarray
            Array of vertex coordinates.
        """
        return np.array(self._mesh._points[self._idx, ...],
                        dtype=dtype, copy=copy)

    @property
    def index(self):
        """ Vertex index.

        Position of the vertex in the list :attr:`~Mesh.vertices` of all
        mesh vertices. Same as ``int(self)``.

        :type: int
        """
        return self._idx

    @property
    def point(self):
        """ Vertex coordinates.

        View of the corresponding row of the parent mesh's coordinate array.

        :type: ~numpy.ndarray
        """
        return self._mesh._points[self._idx, ...]

    @point.setter
    def point(self, value):
        self._mesh._points[self._idx, ...] = value

    @property
    def halfedge(self):
        """ Outgoing halfedge.

        A halfedge that starts at the vertex or :obj:`None` for isolated
        vertices.

        :type: Halfedge
        """
        assert not self._deleted
        return None if self._halfedge is None else \
            self._mesh._halfs[self._halfedge]

    @property
    def neighbors(self):
        """ Adjacent vertices.

        Vertices reachable along one halfedge, in order of rotation about
        the vertex.

        :type: list[Vertex]
        """
        return list(self._viter())

    @property
    def faces(self):
        """ Incident faces.

        :type: list[Face]
        """
        return list(self._fiter())

    @property
    def degree(self):
        """ Vertex degree.

        The number of adjacent vertices, equivalent to the number of
        incident edges.

        :type: int
        """
        assert not self._deleted
        return len(self._mesh._vhout[self._idx])

    @property
    def deleted(self):
        """ Internal state.

        :type: bool
        """
        return self._deleted

    @property
    def boundary(self):
        """ Topological state.

        A vertex is a boundary vertex if it is the origin of a boundary
        placeholder.

        :type: bool
        """
        assert not self._deleted
        mesh = self._mesh

        return any(mesh._halfs[i]._face is None
                   for i in mesh._vhout[self._idx])

    @property
    def isolated(self):
        """ Topological state.

        A vertex is isolated if it is not connected to any edge.

        :type: bool
        """
        assert not self._deleted
        return not self._mesh._vhout[self._idx]

    @property
    def _manifold(self):
        """ Topological state.

        Isolated vertices are considered manifold vertices as they
        don't break the halfedge structure.

        :type: bool
        """
        assert not self._deleted

        mesh = self._mesh
        halfs = [mesh._halfs[i] for i in mesh._vhout[self._idx]]

        if not halfs:
            return True

        # There should be either one closed fan or one open fan of faces
        # attached. There can never be more than two None faces in such a
        # fan (in case of a boundary vertex).
        faces = ([h._face for h in halfs] +
                 [mesh._halfs[h._flip]._face for h in halfs])
        count = faces.count(None)

        if count == 0 or count == 2:
            fmap = {h._face: mesh._halfs[h._flip]._face for h in halfs}
            loop = [faces[0]] if count == 0 else [None]

            while fmap:
                face = fmap.pop(loop[-1], False)

                if face is False:
                    return False

                loop.append(face)

                if loop[0] == loop[-1]:
                    break

            if loop[0] == loop[-1] and not fmap:
                return True

        return False

    def _check(self):
        """ Perform sanity checks.
        """
        if self._halfedge is not None:
            h = self._mesh._halfs[self._halfedge]

            assert not h._deleted
            assert h._origin == self._idx
        else:
            assert not self._mesh._vhout[self._idx]

    def _invalidate(self):
        """ Reset all combinatorial attributes.

        Called during garbage collection when the vertex is removed from
        its container. This should make it easier to find bugs originating
        from using references to deleted objects.
        """
        assert self._deleted

        self._idx = None
        self._mesh = None
        self._halfedge = None

    def _hiter(self):
        """ Outgoing halfedge iterator.

        Rotates about the vertex via ``h.prev.flip``. Requires linked
        boundary loops.
        """
        assert not self._deleted

        if self._halfedge is None:
            return

        halfs = self._mesh._halfs
        h = halfs[self._halfedge]

        while True:
            yield h
            h = halfs[halfs[h._prev]._flip]

            if h._idx == self._halfedge:
                return

    def _viter(self):
        """ Adjacent vertex iterator.
        """
        verts = self._mesh._verts
        return (verts[h._target] for h in self._hiter())

    def _fiter(self):
        """ Incident face iterator.
        """
        faces = self._mesh._faces
        return (faces[h._face] for h in self._hiter() if h._face is not None)


class Edge:
    """ Edge class.

    An edge joins two vertices and is represented by two halfedges of
    opposite direction. It stores one of them, which one is arbitrary.

    Parameters
    ----------
    index : int
        Edge index.
    parent : Mesh, optional
        The parent mesh object.
    """

    def __init__(self, index, parent=None):
        self._idx = index
        self._mesh = parent
        self._halfedge = None

        self._deleted = False

    def __repr__(self):
        return f'Edge({self._idx})'

    def __index__(self):
        return self._idx

    def __int__(self):
        return self._idx

    def __bool__(self):
        return True

    def __iter__(self):
        """ Vertex iterator.

        Yields
        ------
        Vertex
            The two end points of the edge.
        """
        h = self.halfedge

        yield h.origin
        yield h.target

    @property
    def index(self):
        """ Edge index.

        :type: int
        """
        return self._idx

    @property
    def halfedge(self):
        """ One of the two halfedges of the edge.

        :type: Halfedge
        """
        assert not self._deleted
        return self._mesh._halfs[self._halfedge]

    @property
    def deleted(self):
        """ Internal state.

        :type: bool
        """
        return self._deleted

    @property
    def length(self):
        """ Edge length.

        :type: float
        """
        return float(np.linalg.norm(self.halfedge.vector))

    def _check(self):
        """ Perform sanity checks.
        """
        h = self._mesh._halfs[self._halfedge]

        assert h._edge == self._idx
        assert self._mesh._halfs[h._flip]._edge == self._idx

    def _invalidate(self):
        """ Reset all combinatorial attributes.
        """
        assert self._deleted

        self._idx = None
        self._mesh = None
        self._halfedge = None


class Halfedge:
    """ Halfedge class.

    Halfedges store the indices of their vertices, their edge, the successor,
    predecessor and flip halfedge as well as the incident face, the face to
    its left. A closed loop of halfedges defines a face and its orientation.

    Parameters
    ----------
    index : int
        Halfedge index.
    origin : int
        Origin vertex index.
    target : int
        Target vertex index.
    parent : Mesh, optional
        The parent mesh object.
    """

    def __init__(self, index, origin, target, parent=None):
        self._idx = index
        self._mesh = parent

        self._origin = origin
        self._target = target

        self._edge = None
        self._next = None
        self._prev = None
        self._flip = None
        self._face = None

        self._deleted = False

    def __repr__(self):
        return f'Halfedge({self._origin}, {self._target})'

    def __str__(self):
        return f'h {self._idx} ({self._origin}, {self._target})'

    def __index__(self):
        return self._idx

    def __int__(self):
        return self._idx

    def __bool__(self):
        return True

    def __contains__(self, vertex):
        """ Incidence test.

        Parameters
        ----------
        vertex : Vertex or int
            Vertex to be tested.

        Returns
        -------
        bool
            :obj:`True` if `vertex` is one of the halfedge's vertices.
        """
        assert not self._deleted
        return int(vertex) in (self._origin, self._target)

    def __iter__(self):
        """ Vertex iterator.

        Produces the origin and target vertex of a halfedge.
        """
        yield self.origin
        yield self.target

    @property
    def index(self):
        """ Halfedge index.

        :type: int
        """
        return self._idx

    @property
    def origin(self):
        """ Halfedge origin vertex.

        :type: Vertex
        """
        assert not self._deleted
        return self._mesh._verts[self._origin]

    @property
    def target(self):
        """ Halfedge target vertex.

        :type: Vertex
        """
        assert not self._deleted
        return self._mesh._verts[self._target]

    @property
    def vector(self):
        """ Halfedge direction vector.

        The vector ``self.target.point - self.origin.point``.

        :type: ~numpy.ndarray
        """
        points = self._mesh._points
        return points[self._target] - points[self._origin]

    @property
    def edge(self):
        """ Edge the halfedge belongs to.

        :type: Edge
        """
        assert not self._deleted
        return self._mesh._edges[self._edge]

    @property
    def next(self):
        """ Successor halfedge.

        Next halfedge in a face or boundary loop.

        :type: Halfedge
        """
        assert not self._deleted
        return self._mesh._halfs[self._next]

    @property
    def prev(self):
        """ Predecessor halfedge.

        :type: Halfedge
        """
        assert not self._deleted
        return self._mesh._halfs[self._prev]

    @property
    def flip(self):
        """ Opposite halfedge.

        Halfedge of the same edge pointing in the opposite direction.

        :type: Halfedge
        """
        assert not self._deleted
        return self._mesh._halfs[self._flip]

    @property
    def face(self):
        """ Incident face.

        The face to the left of the halfedge or :obj:`None` in case of a
        boundary placeholder.

        :type: Face
        """
        assert not self._deleted
        return None if self._face is None else self._mesh._faces[self._face]

    @property
    def deleted(self):
        """ Internal state.

        :type: bool
        """
        return self._deleted

    @property
    def boundary(self):
        """ Topological state.

        A halfedge is a boundary placeholder if it has no face.

        :type: bool
        """
        assert not self._deleted
        return self._face is None

    def _loop_len(self):
        """ Length of the closed halfedge loop starting at ``self``.
        """
        halfs = self._mesh._halfs
        loop_len = 0
        h = self

        while True:
            loop_len += 1
            h = halfs[h._next]

            if h is self:
                return loop_len

            # Guard against broken loops that never return.
            assert loop_len <= len(halfs)

    def _check(self):
        """ Perform sanity checks.
        """
        halfs = self._mesh._halfs
        flip = halfs[self._flip]

        assert flip._flip == self._idx
        assert flip._origin == self._target
        assert flip._target == self._origin
        assert flip._edge == self._edge

        assert halfs[self._next]._prev == self._idx
        assert halfs[self._next]._origin == self._target
        assert halfs[self._prev]._next == self._idx
        assert halfs[self._prev]._target == self._origin

        assert self._origin != self._target
        assert not (self._face is None and flip._face is None)

        if self._face is not None:
            assert halfs[self._next]._face == self._face

        self._loop_len()

    def _invalidate(self):
        """ Reset all combinatorial attributes.
        """
        assert self._deleted

        self._idx = None
        self._mesh = None

        self._origin = None
        self._target = None
        self._edge = None
        self._next = None
        self._prev = None
        self._flip = None
        self._face = None


class Face:
    """ Face class.

    A face is defined by the closed loop of halfedges starting at its
    :attr:`halfedge` attribute.

    Parameters
    ----------
    index : int
        Face index.
    parent : Mesh, optional
        The parent mesh object.


    The vertices of a face are visited with

    .. code-block:: python
       :linenos:

        for v in f:
            print(v)

    while ``len(f)`` is the number of vertices (the face degree).
    """

    def __init__(self, index, parent=None):
        self._idx = index
        self._mesh = parent
        self._halfedge = None

        self._deleted = False

    def __repr__(self):
        return f'Face({self._idx})'

    def __str__(self):
        face = '[None]' if self._deleted else str([int(v) for v in self])
        return f'f {self._idx} {face}'

    def __index__(self):
        return self._idx

    def __int__(self):
        return self._idx

    def __len__(self):
        """ Face degree.

        The number of incident vertices.

        Returns
        -------
        int
            Number of vertices.
        """
        return sum(1 for _ in self._hiter())

    def __bool__(self):
        return True

    def __array__(self, dtype=None, copy=None):
        """ NumPy support.

        Returns
        -------
        ~numpy.ndarray
            Array of vertex coordinates, one row per face vertex.
        """
        points = self._mesh._points
        return np.array([points[h._origin] for h in self._hiter()],
                        dtype=dtype, copy=copy)

    def __contains__(self, item):
        """ Vertex containment test.

        Parameters
        ----------
        item : Vertex or int
            Vertex to be tested for incidence with the face.

        Returns
        -------
        bool
            :obj:`True` if the given vertex belongs to the face.
        """
        return any(h._origin == int(item) for h in self._hiter())

    def __iter__(self):
        """ Vertex iterator.

        The returned :term:`iterator` visits the vertices of ``self``
        starting with the ``self.halfedge.origin`` vertex.

        Yields
        ------
        Vertex
            Next vertex in counter-clockwise traversal.
        """
        verts = self._mesh._verts
        return (verts[h._origin] for h in self._hiter())

    @property
    def index(self):
        """ Face index.

        :type: int
        """
        return self._idx

    @property
    def halfedge(self):
        """ Incident halfedge.

        :type: Halfedge
        """
        assert not self._deleted
        return self._mesh._halfs[self._halfedge]

    @property
    def halfedges(self):
        """ Halfedge loop.

        :type: list[Halfedge]
        """
        return list(self._hiter())

    @property
    def degree(self):
        """ Face degree. Same as ``len(self)``.

        :type: int
        """
        return len(self)

    @property
    def deleted(self):
        """ Internal state.

        :type: bool
        """
        return self._deleted

    @property
    def barycenter(self):
        """ Face barycenter.

        Arithmetic mean of vertex coordinates.

        :type: ~numpy.ndarray
        """
        return np.mean(np.asarray(self), axis=0)

    def _check(self):
        """ Perform sanity checks.
        """
        h = self._mesh._halfs[self._halfedge]

        assert h._face == self._idx
        assert h._loop_len() >= 3

    def _invalidate(self):
        """ Reset all combinatorial attributes.
        """
        assert self._deleted

        self._idx = None
        self._mesh = None
        self._halfedge = None

    def _hiter(self):
        """ Incident halfedge iterator.
        """
        assert not self._deleted
        assert self._halfedge is not None

        halfs = self._mesh._halfs
        h = halfs[self._halfedge]

        while True:
            yield h
            h = halfs[h._next]

            if h._idx == self._halfedge:
                return


class NonManifoldError(Exception):
    """ Manifold exception base class.

    Raised if an operation results in a topological configuration that
    violates the manifold condition.
    """

    pass


def _edge_key(v, w):
    """ Unordered vertex pair, smaller index first.
    """
    v = int(v)
    w = int(w)

    return (v, w) if v < w else (w, v)


def _renumber(items):
    """ Compact item container.

    Drops deleted items, invalidates them and assigns dense indices to the
    survivors.

    Returns
    -------
    dict
        Maps old indices of surviving items to new indices.
    """
    alive = [x for x in items if not x._deleted]
    remap = {x._idx: i for i, x in enumerate(alive)}

    for x in items:
        if x._deleted:
            x._invalidate()

    items[:] = alive

    for i, x in enumerate(items):
        x._idx = i

    return remap
