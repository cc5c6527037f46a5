from __future__ import annotations
from typing import List, Tuple

from .model import Shape


def rotate_clockwise(shape: Shape) -> Shape:
    """R x C in, C x R out, with out[c][R-1-r] = in[r][c]."""
    rows, cols = shape.rows, shape.cols
    out = [[0] * rows for _ in range(cols)]
    for r in range(rows):
        for c in range(cols):
            out[c][rows - 1 - r] = shape.cells[r][c]
    return Shape(tuple(tuple(row) for row in out))


def flip_horizontal(shape: Shape) -> Shape:
    return Shape(tuple(tuple(reversed(row)) for row in shape.cells))


def flip_vertical(shape: Shape) -> Shape:
    return Shape(tuple(reversed(shape.cells)))


ORIENTATION_LABELS = (
    "original",
    "rotate-90",
    "rotate-180",
    "rotate-270",
    "flip-h",
    "flip-h rotate-90",
    "flip-h rotate-180",
    "flip-h rotate-270",
    "flip-v",
)


def orientation_sequence(shape: Shape) -> List[Tuple[str, Shape]]:
    """
    The order placement tries a shape in: four rotations of the original,
    four rotations of its horizontal mirror, then the vertical mirror alone.
    Vertical-mirror rotations are never tried, so this does not cover the
    whole dihedral group for every shape.
    """
    out: List[Shape] = []
    current = shape
    for _ in range(4):
        out.append(current)
        current = rotate_clockwise(current)
    current = flip_horizontal(shape)
    for _ in range(4):
        out.append(current)
        current = rotate_clockwise(current)
    out.append(flip_vertical(shape))
    return list(zip(ORIENTATION_LABELS, out))
