"""
Hexagon Geometry

Coordinate math for hexagonal grids addressed by axial coordinates (q, r).
Provides the fixed vertex, triangle-fan and neighbour-translation tables, a
vertex generator, and conversions between axial coordinates and world-space
positions.

Every function is pure and every table is an immutable module-level tuple, so
the module is safe to share between threads without coordination.

Usage:
    from hexagons import Direction, Vector2, Vector2Int, to_axial, to_world

    centre = to_world(Vector2Int(2, -1), 1.0)
    cell = to_axial(centre, 1.0)
"""

import math
import struct
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterator, List, MutableSequence, Tuple


def to_f32(value: float) -> float:
    """Round a Python float to the nearest IEEE-754 single-precision value."""
    return struct.unpack("<f", struct.pack("<f", value))[0]


# ---------------------------------------------------------------------------
# Vector2
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Vector2:
    """Immutable world-space position (x, y).

    Attributes:
        x: Horizontal component.
        y: Vertical component.
    """

    x: float = 0.0
    y: float = 0.0

    def __getitem__(self, index: int) -> float:
        if index == 0:
            return self.x
        if index == 1:
            return self.y
        raise IndexError(f"Invalid Vector2 index {index}")

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    def __add__(self, other: "Vector2") -> "Vector2":
        return Vector2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Vector2") -> "Vector2":
        return Vector2(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> "Vector2":
        return Vector2(self.x * scalar, self.y * scalar)

    __rmul__ = __mul__

    def __neg__(self) -> "Vector2":
        return Vector2(-self.x, -self.y)


# ---------------------------------------------------------------------------
# Vector2Int
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Vector2Int:
    """Immutable integer pair, used as an axial hex coordinate (q, r).

    Axial coordinates are cube coordinates with the third axis elided; the
    implicit third component is ``-q - r``. Any integer pair is valid.

    Attributes:
        x: Axial q component.
        y: Axial r component.
    """

    x: int = 0
    y: int = 0

    @property
    def q(self) -> int:
        """Return the axial q component (alias of x)."""
        return self.x

    @property
    def r(self) -> int:
        """Return the axial r component (alias of y)."""
        return self.y

    def __getitem__(self, index: int) -> int:
        if index == 0:
            return self.x
        if index == 1:
            return self.y
        raise IndexError(f"Invalid Vector2Int index {index}")

    def __iter__(self) -> Iterator[int]:
        yield self.x
        yield self.y

    def __add__(self, other: "Vector2Int") -> "Vector2Int":
        return Vector2Int(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Vector2Int") -> "Vector2Int":
        return Vector2Int(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: int) -> "Vector2Int":
        return Vector2Int(self.x * scalar, self.y * scalar)

    __rmul__ = __mul__

    def __neg__(self) -> "Vector2Int":
        return Vector2Int(-self.x, -self.y)


# ---------------------------------------------------------------------------
# Bool3
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Bool3:
    """Immutable triple of booleans with indexed component access."""

    x: bool = False
    y: bool = False
    z: bool = False

    @classmethod
    def uniform(cls, value: bool) -> "Bool3":
        """Build a Bool3 with all three components set to ``value``."""
        return cls(value, value, value)

    def __getitem__(self, index: int) -> bool:
        if index == 0:
            return self.x
        if index == 1:
            return self.y
        if index == 2:
            return self.z
        raise IndexError(f"Invalid Bool3 index {index}")

    def with_component(self, index: int, value: bool) -> "Bool3":
        """Return a copy with the component at ``index`` replaced.

        Args:
            index: Component index, 0 (x), 1 (y) or 2 (z).
            value: New value for that component.

        Returns:
            A new Bool3.

        Raises:
            IndexError: If index is not 0, 1 or 2.
        """
        if index == 0:
            return Bool3(value, self.y, self.z)
        if index == 1:
            return Bool3(self.x, value, self.z)
        if index == 2:
            return Bool3(self.x, self.y, value)
        raise IndexError(f"Invalid Bool3 index {index}")

    def __str__(self) -> str:
        return f"[{self.x}, {self.y}, {self.z}]"


# ---------------------------------------------------------------------------
# Geometry table
# ---------------------------------------------------------------------------
class FixedTable(tuple):
    """Immutable lookup table whose integer indexer rejects out-of-range values.

    Unlike a plain tuple, negative indices do not wrap around: any integer
    outside ``0..len-1`` raises IndexError. Slices behave as for tuple.
    """

    def __getitem__(self, index):
        if isinstance(index, int) and not 0 <= index < len(self):
            raise IndexError(f"Table index {index} out of range 0..{len(self) - 1}")
        return super().__getitem__(index)


class Direction(IntEnum):
    """Neighbour directions, in the order of ``TRANSLATIONS``.

    COUNT is a sentinel holding the number of real directions; it is not a
    valid table index.
    """

    NE = 0
    E = 1
    SE = 2
    SW = 3
    W = 4
    NW = 5
    COUNT = 6


VERTEX_COUNT: int = 6

# Single-precision values, bit-identical to the float32 constants.
ROOT_3: float = to_f32(math.sqrt(3.0))
INNER_TO_OUTER_RADIUS: float = to_f32(2.0 / ROOT_3)
OUTER_TO_INNER_RADIUS: float = to_f32(ROOT_3 / 2.0)

INNER_RADIUS: float = 0.5
OUTER_RADIUS: float = to_f32(INNER_RADIUS * INNER_TO_OUTER_RADIUS)

# Top vertex first, then clockwise.
VERTICES: FixedTable = FixedTable((
    Vector2(0.0, OUTER_RADIUS),
    Vector2(INNER_RADIUS, OUTER_RADIUS * 0.5),
    Vector2(INNER_RADIUS, -OUTER_RADIUS * 0.5),
    Vector2(0.0, -OUTER_RADIUS),
    Vector2(-INNER_RADIUS, -OUTER_RADIUS * 0.5),
    Vector2(-INNER_RADIUS, OUTER_RADIUS * 0.5),
))

# Triangle fan over VERTICES; -1 terminates the list and is never a vertex index.
TRIANGLES: FixedTable = FixedTable((
    0, 1, 2,
    0, 2, 3,
    0, 3, 4,
    0, 4, 5,
    -1,
))

TRANSLATIONS: FixedTable = FixedTable((
    Vector2Int(0, 1),    # NE
    Vector2Int(1, 0),    # E
    Vector2Int(1, -1),   # SE
    Vector2Int(0, -1),   # SW
    Vector2Int(-1, 0),   # W
    Vector2Int(-1, 1),   # NW
))


def iter_triangles(indices: Tuple[int, ...] = TRIANGLES) -> Iterator[Tuple[int, int, int]]:
    """Yield index triples from a sentinel-terminated triangle list.

    Args:
        indices: Flat vertex-index list terminated by -1.

    Yields:
        (a, b, c) vertex-index triples, stopping at the first -1.
    """
    for i in range(0, len(indices), 3):
        if indices[i] == -1:
            return
        yield indices[i], indices[i + 1], indices[i + 2]


# ---------------------------------------------------------------------------
# Vertex generator
# ---------------------------------------------------------------------------
def fill_vertices(target: MutableSequence[Vector2], center: Vector2, radius: float) -> None:
    """Write the vertices of a hexagon into a caller-supplied buffer.

    Slot ``i`` receives ``center + VERTICES[i] * radius``. The radius is a
    pure scale factor: zero collapses every vertex onto the centre and a
    negative value reflects the hexagon through it.

    Args:
        target: Mutable sequence, normally of length VERTEX_COUNT.
        center: Hexagon centre.
        radius: Scale applied to the unit vertex offsets.

    Raises:
        IndexError: If target holds more than VERTEX_COUNT slots.
    """
    for i in range(len(target)):
        target[i] = center + VERTICES[i] * radius


def get_vertices(center: Vector2, radius: float) -> List[Vector2]:
    """Return the six vertices of a hexagon centred at ``center``."""
    vertices = [center] * VERTEX_COUNT
    fill_vertices(vertices, center, radius)
    return vertices


# ---------------------------------------------------------------------------
# Axial <-> world conversion
# ---------------------------------------------------------------------------
def to_world(axial: Vector2Int, radius: float) -> Vector2:
    """Convert an axial coordinate to the world position of the cell centre.

    Args:
        axial: Axial coordinate (q, r).
        radius: Hexagon circumradius shared by the whole grid.

    Returns:
        The world-space centre of the cell.
    """
    q, r = axial
    x = (q + r * 0.5) * radius * 2.0 * OUTER_TO_INNER_RADIUS
    y = r * radius * 1.5
    return Vector2(x, y)


def cube_round(x: float, y: float) -> Tuple[int, int, int]:
    """Round fractional cube coordinates (x, y, -x-y) to integers.

    Each component is rounded independently (half to even). If the results
    do not sum to zero, the x component is recomputed when its rounding
    error is strictly the largest, otherwise the z component is recomputed
    when its error strictly exceeds y's. When y carries the largest error
    (or ties with z) nothing is corrected and the sum stays nonzero; picking
    code downstream depends on this behaviour, so it is kept as is.

    Args:
        x: Fractional cube x.
        y: Fractional cube y.

    Returns:
        The (ix, iy, iz) integer triple.

    Raises:
        OverflowError: If a coordinate is infinite.
        ValueError: If a coordinate is NaN.
    """
    z = -x - y

    ix = int(round(x))
    iy = int(round(y))
    iz = int(round(z))

    if ix + iy + iz != 0:
        dx = abs(x - ix)
        dy = abs(y - iy)
        dz = abs(z - iz)

        if dx > dy and dx > dz:
            ix = -iy - iz
        elif dz > dy:
            iz = -ix - iy

    return ix, iy, iz


def to_axial(world: Vector2, radius: float) -> Vector2Int:
    """Convert a world position to the axial coordinate of the nearest cell.

    Args:
        world: World-space position.
        radius: Hexagon circumradius shared by the whole grid.

    Returns:
        The axial coordinate (cube x, cube z).

    Raises:
        ZeroDivisionError: If radius is zero.
        OverflowError: If a fractional coordinate is infinite, e.g. when a
            tiny radius overflows the division.
        ValueError: If a fractional coordinate is NaN.
    """
    x = world.x / (radius * OUTER_TO_INNER_RADIUS * 2.0)
    y = -x

    offset = world.y / (radius * 3.0)
    x -= offset
    y -= offset

    ix, _, iz = cube_round(x, y)
    return Vector2Int(ix, iz)


# ---------------------------------------------------------------------------
# Grid traversal
# ---------------------------------------------------------------------------
def _check_direction(direction: int) -> Direction:
    if not 0 <= direction < Direction.COUNT:
        raise IndexError(f"Invalid direction {direction}")
    return Direction(direction)


def opposite(direction: Direction) -> Direction:
    """Return the direction pointing the other way (NE/SW, E/W, SE/NW)."""
    d = _check_direction(direction)
    return Direction((d + 3) % Direction.COUNT)


def neighbor(axial: Vector2Int, direction: Direction) -> Vector2Int:
    """Return the adjacent cell of ``axial`` in ``direction``."""
    return axial + TRANSLATIONS[_check_direction(direction)]


def neighbors(axial: Vector2Int) -> List[Vector2Int]:
    """Return all six adjacent cells, in Direction order."""
    return [axial + t for t in TRANSLATIONS]


def distance(a: Vector2Int, b: Vector2Int) -> int:
    """Return the hex distance (number of steps) between two cells."""
    dq = a.x - b.x
    dr = a.y - b.y
    return (abs(dq) + abs(dq + dr) + abs(dr)) // 2


# Walk order for ring(): starting on the W side, each leg follows one direction.
_RING_WALK: Tuple[Direction, ...] = (
    Direction.SE, Direction.E, Direction.NE,
    Direction.NW, Direction.W, Direction.SW,
)


def ring(center: Vector2Int, radius: int) -> List[Vector2Int]:
    """Return all cells at exactly hex distance ``radius`` from ``center``.

    For radius 0 returns only the centre. For radius >= 1 returns 6*radius
    cells starting at ``center + W * radius`` and walking the ring once.

    Args:
        center: Centre cell.
        radius: Ring distance, in cells.

    Returns:
        A list of axial coordinates.

    Raises:
        ValueError: If radius is negative.
    """
    if radius < 0:
        raise ValueError(f"Ring radius must be >= 0, got {radius}")
    if radius == 0:
        return [center]
    cells: List[Vector2Int] = []
    cell = center + TRANSLATIONS[Direction.W] * radius
    for direction in _RING_WALK:
        step = TRANSLATIONS[direction]
        for _ in range(radius):
            cells.append(cell)
            cell = cell + step
    return cells


def spiral(center: Vector2Int, layers: int) -> List[Vector2Int]:
    """Return the cells of ``layers`` concentric rings, innermost first.

    Layer 1 is the centre alone; total cell count is 1 + 3*L*(L-1).
    """
    cells: List[Vector2Int] = []
    for d in range(layers):
        cells.extend(ring(center, d))
    return cells
