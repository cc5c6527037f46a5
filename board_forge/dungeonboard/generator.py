from __future__ import annotations
from typing import Dict, List, Optional, Tuple
import math
import random

from .connectivity import DistanceMap, distance_map, max_finite_distance, neighbors4
from .model import (
    WALL_SIDES, Board, CellType, ColorRequirement, InvalidBoardError,
    Point, RandomBoardOptions,
)

# Default preset (used when no options are given)
DEFAULT_WALL_RATIO = 0.15
DEFAULT_EDGE_WALL_RATIO = 0.2
DEFAULT_FEATURE_COUNTS: List[Tuple[CellType, int]] = [
    (CellType.KEY, 3),
    (CellType.LOCK, 3),
    (CellType.SUPPLIES, 3),
    (CellType.MANA, 3),
]
DEFAULT_LATE_FEATURE_COUNTS: List[Tuple[CellType, int]] = [
    (CellType.ENCOUNTER, 4),
    (CellType.TREASURE, 4),
    (CellType.RELIC, 6),
]
DEFAULT_COLOR_COUNT = 2

# Share of the wall percentage that is also scattered as single wall bits
EDGE_WALL_SHARE = 0.2

# Maze generator
MAZE_OPEN_RATIO = 0.3
MAZE_DEFAULT_COUNTS: Dict[CellType, int] = {
    CellType.KEY: 3,
    CellType.LOCK: 3,
    CellType.SUPPLIES: 3,
    CellType.MANA: 3,
    CellType.ENCOUNTER: 4,
    CellType.TREASURE: 4,
    CellType.RELIC: 6,
}
TREASURE_SECTOR_SHARES = (0.2, 0.3, 0.5)

PLAYABLE_COLORS = [c for c in ColorRequirement if c != ColorRequirement.NONE]


def _rng_or_default(rng: Optional[random.Random]) -> random.Random:
    return rng if rng is not None else random.Random()


def default_entrance(size: int) -> Point:
    return (size - 1, size // 2)


def new_board(size: int) -> Board:
    """Empty size x size board with the entrance at the bottom middle."""
    if size < 1:
        raise InvalidBoardError(f"Board size must be positive, got {size}.")
    board = Board.empty(size)
    r, c = default_entrance(size)
    board.cells[r][c].type = CellType.ENTRANCE
    return board


def resize_board(board: Board, new_size: int) -> Board:
    """Copy the overlapping top-left region into a fresh board; keep an entrance."""
    out = Board.empty(new_size)
    for r in range(min(board.rows, new_size)):
        for c in range(min(board.cols, new_size)):
            out.cells[r][c] = board.cells[r][c].copy()
    if out.find_entrance() is None:
        r, c = default_entrance(new_size)
        out.cells[r][c].type = CellType.ENTRANCE
    return out


# ---------- rejection samplers ----------

def _max_attempts(board: Board) -> int:
    return board.rows * board.cols * 2


def add_random_cells(board: Board, rng: random.Random, cell_type: CellType, count: int) -> int:
    """Turn up to `count` random Empty cells into `cell_type`; returns how many were placed."""
    added = 0
    attempts = 0
    limit = _max_attempts(board)
    while added < count and attempts < limit:
        attempts += 1
        cell = board.cells[rng.randrange(board.rows)][rng.randrange(board.cols)]
        if cell.type != CellType.EMPTY:
            continue
        cell.type = cell_type
        added += 1
    return added


def add_random_colors(board: Board, rng: random.Random, color: ColorRequirement, count: int) -> int:
    """Tag up to `count` random untagged cells (any type) with `color`."""
    added = 0
    attempts = 0
    limit = _max_attempts(board)
    while added < count and attempts < limit:
        attempts += 1
        cell = board.cells[rng.randrange(board.rows)][rng.randrange(board.cols)]
        if cell.color_requirement != ColorRequirement.NONE:
            continue
        cell.color_requirement = color
        added += 1
    return added


def scatter_edge_walls(board: Board, rng: random.Random, count: int) -> None:
    for _ in range(count):
        cell = board.cells[rng.randrange(board.rows)][rng.randrange(board.cols)]
        cell.walls.set(rng.choice(WALL_SIDES), True)


# ---------- random generator ----------

def _apply_default_preset(board: Board, rng: random.Random) -> None:
    area = board.rows * board.cols
    add_random_cells(board, rng, CellType.WALL, math.floor(area * DEFAULT_WALL_RATIO))
    for cell_type, count in DEFAULT_FEATURE_COUNTS:
        add_random_cells(board, rng, cell_type, count)
    for color in PLAYABLE_COLORS:
        add_random_colors(board, rng, color, DEFAULT_COLOR_COUNT)
    for cell_type, count in DEFAULT_LATE_FEATURE_COUNTS:
        add_random_cells(board, rng, cell_type, count)
    scatter_edge_walls(board, rng, math.floor(area * DEFAULT_EDGE_WALL_RATIO))


def _apply_options(board: Board, rng: random.Random, options: RandomBoardOptions) -> None:
    for cell_type, count in options.cell_type_counts.items():
        if cell_type in (CellType.EMPTY, CellType.ENTRANCE):
            continue
        add_random_cells(board, rng, cell_type, count)

    for color, count in options.color_requirement_counts.items():
        if color == ColorRequirement.NONE:
            continue
        add_random_colors(board, rng, color, count)

    if options.wall_percentage > 0:
        area = board.rows * board.cols
        occupied = sum(1 for _, _, cell in board.iter_cells() if cell.type != CellType.EMPTY)
        wall_count = math.floor((area - occupied) * options.wall_percentage / 100)
        add_random_cells(board, rng, CellType.WALL, wall_count)
        scatter_edge_walls(board, rng, math.floor(area * options.wall_percentage / 100 * EDGE_WALL_SHARE))


def generate_random_board(size: int, options: Optional[RandomBoardOptions] = None, rng: Optional[random.Random] = None) -> Board:
    rng = _rng_or_default(rng)
    board = new_board(size)
    if options is None:
        _apply_default_preset(board, rng)
    else:
        _apply_options(board, rng, options)
    return board


# ---------- maze generator ----------

def _grow_maze(board: Board, entrance: Point, rng: random.Random) -> None:
    for _, _, cell in board.iter_cells():
        if cell.type == CellType.EMPTY:
            cell.type = CellType.WALL

    visited = {entrance}
    frontier: List[Point] = [
        p for p in neighbors4(board, *entrance) if board[p].type == CellType.WALL
    ]
    while frontier:
        current = frontier.pop(rng.randrange(len(frontier)))
        if current in visited:
            continue
        if not any(n in visited for n in neighbors4(board, *current)):
            continue
        board[current].type = CellType.EMPTY
        visited.add(current)
        for n in neighbors4(board, *current):
            if board[n].type == CellType.WALL and n not in visited:
                frontier.append(n)


def _relax_walls(board: Board, entrance: Point, rng: random.Random, open_ratio: float = MAZE_OPEN_RATIO) -> None:
    for r, c, cell in board.iter_cells():
        if (r, c) == entrance or cell.type != CellType.WALL:
            continue
        if rng.random() >= open_ratio:
            continue
        if any(board[n].type == CellType.EMPTY for n in neighbors4(board, r, c)):
            cell.type = CellType.EMPTY


def _eligible(board: Board, dist: DistanceMap, lo: float, hi: float, hi_inclusive: bool = True) -> List[Point]:
    out = []
    for r, c, cell in board.iter_cells():
        d = dist[r][c]
        if cell.type != CellType.EMPTY or d == math.inf or d < lo:
            continue
        if d < hi or (hi_inclusive and d == hi):
            out.append((r, c))
    return out


def place_in_band(board: Board, dist: DistanceMap, rng: random.Random, cell_type: CellType, count: int, lo: float, hi: float) -> int:
    cells = _eligible(board, dist, lo, hi)
    rng.shuffle(cells)
    for r, c in cells[:count]:
        board.cells[r][c].type = cell_type
    return min(count, len(cells))


def treasure_sector_counts(total: int) -> List[int]:
    counts = [math.floor(total * share) for share in TREASURE_SECTOR_SHARES]
    counts[-1] += total - sum(counts)
    return counts


def place_treasures(board: Board, dist: DistanceMap, rng: random.Random, count: int, max_distance: int) -> int:
    sector_size = max_distance / 3
    placed = 0
    sectors = treasure_sector_counts(count)
    for i, sector_count in enumerate(sectors):
        lo = i * sector_size
        last = i == len(sectors) - 1
        hi = max_distance if last else (i + 1) * sector_size
        cells = _eligible(board, dist, lo, hi, hi_inclusive=last)
        rng.shuffle(cells)
        for r, c in cells[:sector_count]:
            board.cells[r][c].type = CellType.TREASURE
        placed += min(sector_count, len(cells))
    return placed


def _maze_count(options: Optional[RandomBoardOptions], cell_type: CellType) -> int:
    # a configured 0 counts as unset and falls back to the default
    configured = options.cell_type_counts.get(cell_type) if options is not None else None
    return configured or MAZE_DEFAULT_COUNTS[cell_type]


def generate_maze_board(size: int, options: Optional[RandomBoardOptions] = None, rng: Optional[random.Random] = None) -> Board:
    """
    Frontier-grown open area from the entrance, loosened by a relaxation pass,
    with features stratified by BFS distance: keys near the entrance, locks
    mid-way, relics far away, treasure weighted toward the far end.
    """
    rng = _rng_or_default(rng)
    board = new_board(size)
    entrance = default_entrance(size)

    _grow_maze(board, entrance, rng)
    _relax_walls(board, entrance, rng)

    dist = distance_map(board, entrance)
    max_d = max_finite_distance(dist)

    place_in_band(board, dist, rng, CellType.KEY, _maze_count(options, CellType.KEY), 0, math.floor(max_d * 0.33))
    place_in_band(board, dist, rng, CellType.LOCK, _maze_count(options, CellType.LOCK),
                  math.floor(max_d * 0.25), math.floor(max_d * 0.66))
    place_in_band(board, dist, rng, CellType.RELIC, _maze_count(options, CellType.RELIC), math.floor(max_d * 0.66), max_d)
    place_treasures(board, dist, rng, _maze_count(options, CellType.TREASURE), max_d)
    for cell_type in (CellType.SUPPLIES, CellType.MANA, CellType.ENCOUNTER):
        place_in_band(board, dist, rng, cell_type, _maze_count(options, cell_type), 0, max_d)

    if options is not None:
        for color, count in options.color_requirement_counts.items():
            if color != ColorRequirement.NONE:
                add_random_colors(board, rng, color, count)
    return board
