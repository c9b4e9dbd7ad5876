import math

import pytest

from brepedit import shapes


@pytest.fixture
def cube():
    """ Unit cube, vertices 0..3 at y = 0 and 4..7 directly above. """
    return shapes.box((0.0, 0.0, 0.0), (1.0, 1.0, 1.0))


@pytest.fixture
def hexagon():
    """ Regular hexagonal prism of height 5. """
    base = [(5.0 * math.cos(k * math.pi / 3.0),
             5.0 * math.sin(k * math.pi / 3.0)) for k in range(6)]
    return shapes.extrude(base, 5.0)
