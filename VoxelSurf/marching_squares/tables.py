"""
Marching Squares Lookup Tables
==============================

Static case tables for the marching squares algorithm.

The four corners of a square are addressed as ``values[u][v]``::

    (0,1) ─── (1,1)        2 ─── 3
      |         |          |     |
    (0,0) ─── (1,0)        0 ─── 1

The case index has bit 8 set when ``values[0][0]`` lies above the level,
bit 4 for ``values[0][1]``, bit 2 for ``values[1][0]`` and bit 1 for
``values[1][1]``.
"""

#: (u, v) position of the four square corners, slots 0-3 of the vertex buffer
CORNER_POSITIONS = (
    (0.0, 0.0),
    (1.0, 0.0),
    (0.0, 1.0),
    (1.0, 1.0),
)

#: Crossing segments per case. Every group of 8 numbers describes one segment
#: as two edges ``(ax, ay, bx, by, cx, cy, dx, dy)``: the first crossing lies
#: on the edge from corner (ax, ay) to (bx, by), the second on the edge from
#: (cx, cy) to (dx, dy). The first corner of each edge is the one below the
#: level. Cases 6 and 9 (saddles) hold two segments.
SEGMENT_TABLE = (
    (),
    (0, 1, 1, 1, 1, 0, 1, 1),
    (1, 1, 1, 0, 0, 0, 1, 0),
    (0, 1, 1, 1, 0, 0, 1, 0),
    (0, 0, 0, 1, 1, 1, 0, 1),
    (0, 0, 0, 1, 1, 0, 1, 1),
    (0, 0, 0, 1, 0, 0, 1, 0, 1, 1, 1, 0, 1, 1, 0, 1),
    (0, 0, 0, 1, 0, 0, 1, 0),
    (1, 0, 0, 0, 0, 1, 0, 0),
    (1, 0, 0, 0, 1, 0, 1, 1, 0, 1, 1, 1, 0, 1, 0, 0),
    (1, 1, 1, 0, 0, 1, 0, 0),
    (0, 1, 1, 1, 0, 1, 0, 0),
    (1, 0, 0, 0, 1, 1, 0, 1),
    (1, 0, 0, 0, 1, 0, 1, 1),
    (1, 1, 1, 0, 1, 1, 0, 1),
    (),
)

#: Triangles covering the area above the level, as indices into the 8-slot
#: vertex buffer. Slots 0-3 are the static corners, slots 4-7 the crossing
#: points computed from ``SEGMENT_TABLE`` in order.
TRIANGLE_TABLE = (
    (),
    (4, 3, 5),
    (4, 1, 5),
    (4, 3, 1, 4, 1, 5),
    (4, 2, 5),
    (4, 2, 5, 2, 3, 5),
    (4, 2, 7, 4, 7, 6, 5, 4, 6, 5, 6, 1),
    (4, 2, 3, 4, 3, 5, 3, 1, 5),
    (4, 0, 5),
    (4, 6, 5, 5, 6, 3, 4, 7, 6, 4, 0, 7),
    (4, 1, 5, 1, 0, 5),
    (5, 1, 0, 5, 3, 1, 5, 4, 3),
    (4, 0, 2, 2, 5, 4),
    (4, 0, 2, 4, 2, 5, 5, 2, 3),
    (4, 1, 0, 4, 0, 5, 0, 2, 5),
    (0, 2, 1, 2, 3, 1),
)
