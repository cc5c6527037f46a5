from __future__ import annotations
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Dict, Iterable, List, Optional, Sequence, Set, Union

from .connectivity import DIRECTIONS
from .geometry import orientation_sequence
from .model import Board, CellType, PlacedShape, Point, Shape

ShapeLike = Union[Shape, Sequence[Sequence[int]]]


class AnchorCheck(IntEnum):
    # ordered by how far the legality test got before failing
    OUT_OF_BOUNDS = 0
    BLOCKED_CELL = 1
    NOT_ADJACENT = 2
    WALL_BETWEEN = 3
    OK = 4


class PlacementFailure(str, Enum):
    NO_ENTRANCE = "no_entrance"
    NO_FIT = "no_fit"
    ENTRANCE_NOT_REACHED = "entrance_not_reached"
    NO_ADJACENCY = "no_adjacency"
    BLOCKED_BY_WALLS = "blocked_by_walls"


FAILURE_MESSAGES: Dict[PlacementFailure, str] = {
    PlacementFailure.NO_ENTRANCE: "The board has no entrance.",
    PlacementFailure.NO_FIT: "No position on the board fits this shape.",
    PlacementFailure.ENTRANCE_NOT_REACHED: "The first shape cannot be laid over the entrance.",
    PlacementFailure.NO_ADJACENCY: "The shape fits, but never next to the explored area.",
    PlacementFailure.BLOCKED_BY_WALLS: "Every fitting position is split by a wall.",
}


@dataclass(frozen=True)
class PlacementResult:
    shape: Shape
    row: int
    col: int
    orientation: str = "original"


def _coerce_shape(shape: ShapeLike) -> Shape:
    if isinstance(shape, Shape):
        return shape
    return Shape(tuple(tuple(row) for row in shape))


def covered_cells(placed_shapes: Iterable[PlacedShape]) -> Set[Point]:
    out: Set[Point] = set()
    for ps in placed_shapes:
        out.update(ps.covered())
    return out


# ---------- legality ----------

def check_anchor(
    board: Board,
    shape: Shape,
    row: int,
    col: int,
    covered: Set[Point],
    require_adjacent: bool = False,
) -> AnchorCheck:
    if row < 0 or col < 0 or row + shape.rows > board.rows or col + shape.cols > board.cols:
        return AnchorCheck.OUT_OF_BOUNDS

    filled = shape.filled()
    for r, c in filled:
        pos = (row + r, col + c)
        if pos in covered or board.cells[pos[0]][pos[1]].type == CellType.WALL:
            return AnchorCheck.BLOCKED_CELL

    if require_adjacent:
        touching = False
        for r, c in filled:
            for dr, dc in DIRECTIONS:
                if (row + r + dr, col + c + dc) in covered:
                    touching = True
                    break
            if touching:
                break
        if not touching:
            return AnchorCheck.NOT_ADJACENT

    occupied = set(filled)
    for r, c in filled:
        here = board.cells[row + r][col + c]
        if (r, c + 1) in occupied:
            east = board.cells[row + r][col + c + 1]
            if here.walls.right or east.walls.left:
                return AnchorCheck.WALL_BETWEEN
        if (r + 1, c) in occupied:
            south = board.cells[row + r + 1][col + c]
            if here.walls.bottom or south.walls.top:
                return AnchorCheck.WALL_BETWEEN
    return AnchorCheck.OK


def _entrance_anchors(shape: Shape, entrance: Point) -> List[Point]:
    er, ec = entrance
    return [(er - r, ec - c) for r, c in shape.filled()]


def _frontier_anchors(board: Board, placed_shapes: Sequence[PlacedShape], covered: Set[Point]) -> List[Point]:
    seen: Set[Point] = set()
    out: List[Point] = []
    for ps in placed_shapes:
        for r, c in ps.covered():
            for dr, dc in DIRECTIONS:
                cand = (r + dr, c + dc)
                if cand in covered or cand in seen or not board.in_bounds(*cand):
                    continue
                seen.add(cand)
                out.append(cand)
    return out


def _candidates(board: Board, shape: Shape, placed_shapes: Sequence[PlacedShape], entrance: Point, covered: Set[Point]) -> List[Point]:
    if not placed_shapes:
        return _entrance_anchors(shape, entrance)
    return _frontier_anchors(board, placed_shapes, covered)


# ---------- search ----------

def find_placement(board: Board, shape: ShapeLike, placed_shapes: Sequence[PlacedShape] = ()) -> Optional[Point]:
    """
    First legal top-left anchor for `shape` in its given orientation.

    With nothing placed yet the shape must cover the entrance; afterwards
    the anchor is drawn from cells bordering the covered area and the shape
    must touch that area. Never mutates the board.
    """
    shape = _coerce_shape(shape)
    entrance = board.find_entrance()
    if entrance is None:
        return None
    covered = covered_cells(placed_shapes)
    require_adjacent = bool(placed_shapes)
    for row, col in _candidates(board, shape, placed_shapes, entrance, covered):
        if check_anchor(board, shape, row, col, covered, require_adjacent) == AnchorCheck.OK:
            return (row, col)
    return None


def search_placement(board: Board, shape: ShapeLike, placed_shapes: Sequence[PlacedShape] = ()) -> Optional[PlacementResult]:
    """Try the canonical orientation sequence, stopping at the first that fits."""
    shape = _coerce_shape(shape)
    for label, oriented in orientation_sequence(shape):
        anchor = find_placement(board, oriented, placed_shapes)
        if anchor is not None:
            return PlacementResult(shape=oriented, row=anchor[0], col=anchor[1], orientation=label)
    return None


def diagnose_placement(board: Board, shape: ShapeLike, placed_shapes: Sequence[PlacedShape] = ()) -> Optional[PlacementFailure]:
    """
    Explain why `search_placement` finds nothing. Returns None when a
    placement exists. Best effort: reports the furthest legality stage any
    orientation/anchor reached.
    """
    shape = _coerce_shape(shape)
    entrance = board.find_entrance()
    if entrance is None:
        return PlacementFailure.NO_ENTRANCE

    covered = covered_cells(placed_shapes)
    require_adjacent = bool(placed_shapes)
    best = AnchorCheck.OUT_OF_BOUNDS
    for _, oriented in orientation_sequence(shape):
        for row, col in _candidates(board, oriented, placed_shapes, entrance, covered):
            result = check_anchor(board, oriented, row, col, covered, require_adjacent)
            if result == AnchorCheck.OK:
                return None
            best = max(best, result)

    if best == AnchorCheck.WALL_BETWEEN:
        return PlacementFailure.BLOCKED_BY_WALLS
    if not placed_shapes:
        return PlacementFailure.ENTRANCE_NOT_REACHED
    if best == AnchorCheck.NOT_ADJACENT:
        return PlacementFailure.NO_ADJACENCY
    return PlacementFailure.NO_FIT


# ---------- committing ----------

def place_shape_on_board(board: Board, shape: ShapeLike, row: int, col: int) -> Board:
    """Copy of `board` with every cell under the shape marked traversed."""
    shape = _coerce_shape(shape)
    if row < 0 or col < 0 or row + shape.rows > board.rows or col + shape.cols > board.cols:
        raise ValueError(f"Shape {shape.rows}x{shape.cols} at ({row},{col}) leaves the {board.rows}x{board.cols} board.")
    out = board.copy()
    for r, c in shape.filled():
        out.cells[row + r][col + c].traversed = True
    return out


def clear_traversed(board: Board) -> Board:
    out = board.copy()
    for _, _, cell in out.iter_cells():
        cell.traversed = False
    return out


def uncovered_cell_count(board: Board, placed_shapes: Iterable[PlacedShape]) -> int:
    open_cells = sum(1 for _, _, cell in board.iter_cells() if cell.type != CellType.WALL)
    return open_cells - len(covered_cells(placed_shapes))
