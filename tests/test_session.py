import logging

from brepedit import shapes
from brepedit.session import EditSession
from brepedit.tessellate import TessellationError, Tessellator


class FlakyTessellator(Tessellator):
    """ Fails on every call after the first one. """

    def __init__(self):
        self.calls = 0

    def tessellate(self, mesh):
        self.calls += 1

        if self.calls > 1:
            raise TessellationError('no geometry')

        return super().tessellate(mesh)


def test_initial_state(cube):
    session = EditSession(cube)

    assert session.mesh is cube
    assert session.geometry.triangle_count == 12
    assert session.history == 0
    assert [v.index for v in session.selectable_vertices()] == [4, 5, 6, 7]


def test_delete_commits(cube, caplog):
    session = EditSession(cube)

    with caplog.at_level(logging.INFO, logger='brepedit'):
        assert session.delete(4)

    assert session.history == 1
    assert session.mesh is not cube
    assert session.mesh.size == (6, 9, 5)
    assert session.geometry.triangle_count == 8
    assert 'deleted vertex #4' in caplog.text

    # The committed mesh has three vertices left on top.
    assert len(session.selectable_vertices()) == 3
    assert cube.size == (8, 12, 6)


def test_failed_delete_keeps_state(cube, caplog):
    session = EditSession(cube)
    mesh, geometry = session.mesh, session.geometry

    with caplog.at_level(logging.ERROR, logger='brepedit'):
        assert not session.delete(0)

    assert session.mesh is mesh
    assert session.geometry is geometry
    assert session.history == 0
    assert mesh.size == (8, 12, 6)
    assert 'failed' in caplog.text


def test_failed_tessellation_keeps_state(cube):
    session = EditSession(cube, tessellator=FlakyTessellator())
    geometry = session.geometry

    assert not session.delete(4)

    assert session.mesh is cube
    assert session.geometry is geometry
    assert session.history == 0


def test_repeated_edits(hexagon):
    session = EditSession(hexagon)

    assert session.delete(6)

    top = session.selectable_vertices()
    assert len(top) == 5
    assert session.delete(top[2])

    assert session.history == 2
    assert session.mesh.size == (8, 12, 6)
    session.mesh._check()


def test_delete_on_triangular_top_is_rejected():
    session = EditSession(shapes.box())
    assert session.delete(4)

    mesh, geometry = session.mesh, session.geometry
    cells = mesh.cells

    # Every top vertex now lies on the triangular top face.
    top = session.selectable_vertices()
    assert len(top) == 3

    for v in top:
        assert not session.delete(v)

    assert session.mesh is mesh
    assert session.geometry is geometry
    assert session.history == 1
    assert mesh.size == (6, 9, 5)
    assert mesh.cells == cells
    mesh._check()


def test_rebuild(cube):
    session = EditSession(cube)
    before = session.geometry
    after = session.rebuild()

    assert after is session.geometry
    assert after is not before
    assert (after.indices == before.indices).all()
