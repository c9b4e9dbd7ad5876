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

""" Numerical tolerances.

Central place for the small constants used by the geometry, editing and
tessellation code. Every function that compares coordinates accepts an
explicit tolerance argument defaulting to the values defined here.
"""

EPS_GEOM = 1e-3
""" Absolute coordinate tolerance.

Used to compare vertex heights (top/bottom faces, companion vertices), to
match X/Z coordinates of stacked vertices and to pick non-degenerate point
triples for plane estimation."""

EPS_DEGENERATE = 1e-10
""" Length below which a cross product counts as the zero vector. """

UP = (0.0, 1.0, 0.0)
""" Fallback normal for degenerate point sets. """
