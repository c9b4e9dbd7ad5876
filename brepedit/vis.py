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

""" Visualization using VTK.

Converts tessellated geometry and boundary meshes to `VTK
<https://vtk.org/doc/nightly/html>`_ poly data and displays them. This is
not meant as a full featured viewer but should serve as a quick way to
inspect edit results:

>>> from brepedit import shapes, vis
>>> vis.show(shapes.box())

opens a graphics window and displays a unit box.
"""

import numpy as np
import vtk

from vtk.util import colors
from vtk.util.numpy_support import numpy_to_vtk

from brepedit.hds import Mesh
from brepedit.tessellate import Geometry, tessellate


def _cell_array(cells):
    """ Build cell array from vertex index loops.
    """
    cell_array = vtk.vtkCellArray()

    for c in cells:
        cell = vtk.vtkIdList()

        for v in c:
            cell.InsertNextId(int(v))

        cell_array.InsertNextCell(cell)

    return cell_array


def _points(points):
    point_array = vtk.vtkPoints()
    point_array.SetData(numpy_to_vtk(np.ascontiguousarray(points,
                                                          dtype=float),
                                     deep=True))
    return point_array


def polydata(geometry):
    """ Triangle soup poly data.

    Parameters
    ----------
    geometry : Geometry
        Tessellated geometry.

    Returns
    -------
    vtkPolyData
        One point per geometry vertex with point normals and one triangle
        cell per geometry triangle.
    """
    data = vtk.vtkPolyData()
    data.SetPoints(_points(geometry.points))
    data.SetPolys(_cell_array(geometry.triangles))

    normals = numpy_to_vtk(np.ascontiguousarray(
        geometry.normals.reshape(-1, 3)), deep=True)
    normals.SetName('Normals')

    data.GetPointData().SetNormals(normals)

    return data


def mesh_polydata(mesh):
    """ Polygon mesh poly data.

    Parameters
    ----------
    mesh : Mesh
        Boundary mesh without deleted items, see :meth:`Mesh.clean`.

    Returns
    -------
    vtkPolyData
        One point per mesh vertex and one polygon cell per face.
    """
    data = vtk.vtkPolyData()
    data.SetPoints(_points(mesh.points))
    data.SetPolys(_cell_array(mesh.cells))

    return data


def actor(obj, color=colors.snow, edges=True):
    """ Renderable actor.

    Parameters
    ----------
    obj : Geometry or Mesh or vtkPolyData
        The object to render. Meshes are tessellated first.
    color : array_like, shape (3, ), optional
        RGB color triple.
    edges : bool, optional
        Render polygon edges. Meshes are rendered with their face
        boundaries, tessellations with triangle edges.

    Returns
    -------
    vtkActor
        Actor with the given appearance.
    """
    if isinstance(obj, Mesh):
        edges_data = mesh_polydata(obj)
        obj = tessellate(obj)
    else:
        edges_data = None

    if isinstance(obj, Geometry):
        obj = polydata(obj)

    mapper = vtk.vtkPolyDataMapper()
    mapper.SetInputData(obj)

    surface = vtk.vtkActor()
    surface.SetMapper(mapper)
    surface.GetProperty().SetColor(*color)

    if edges and edges_data is None:
        surface.GetProperty().EdgeVisibilityOn()

    if edges and edges_data is not None:
        # Face boundaries only, triangulation edges are hidden.
        extract = vtk.vtkExtractEdges()
        extract.SetInputData(edges_data)

        edge_mapper = vtk.vtkPolyDataMapper()
        edge_mapper.SetInputConnection(extract.GetOutputPort())

        wire = vtk.vtkActor()
        wire.SetMapper(edge_mapper)
        wire.GetProperty().SetColor(*colors.black)

        assembly = vtk.vtkAssembly()
        assembly.AddPart(surface)
        assembly.AddPart(wire)

        return assembly

    return surface


def show(*objects, width=1200, height=600, title=None, color=colors.white):
    """ Display objects.

    Opens a render window and starts the VTK event loop.

    Parameters
    ----------
    *objects
        Variable number of :class:`Geometry`, :class:`Mesh`, or vtkProp
        instances.
    width : int, optional
        Window width in pixels.
    height : int, optional
        Window height in pixels.
    title : str, optional
        Window title.
    color : array_like, shape (3, ), optional
        Background color.

    Note
    ----
    This is a blocking function, a script will not advance beyond it until
    the window is closed.
    """
    renderer = vtk.vtkRenderer()
    renderer.SetBackground(*color)

    for obj in objects:
        if not isinstance(obj, vtk.vtkProp):
            obj = actor(obj)

        renderer.AddActor(obj)

    renderer.ResetCamera()

    window = vtk.vtkRenderWindow()
    window.AddRenderer(renderer)
    window.SetSize(width, height)
    window.SetWindowName(title or 'brepedit')

    interactor = vtk.vtkRenderWindowInteractor()
    interactor.SetRenderWindow(window)
    interactor.SetInteractorStyle(vtk.vtkInteractorStyleTrackballCamera())

    window.Render()
    interactor.Start()
