from __future__ import annotations
from collections import deque
import math
from typing import List, Optional, Set

from .model import Board, CellType, Point

DistanceMap = List[List[float]]  # hop counts, math.inf where unreachable

# up, right, down, left
DIRECTIONS = ((-1, 0), (0, 1), (1, 0), (0, -1))


def neighbors4(board: Board, r: int, c: int) -> List[Point]:
    out = []
    for dr, dc in DIRECTIONS:
        nr, nc = r + dr, c + dc
        if board.in_bounds(nr, nc):
            out.append((nr, nc))
    return out


def distance_map(board: Board, source: Optional[Point] = None) -> Optional[DistanceMap]:
    """
    BFS hop distance from `source` (the entrance when omitted) through
    non-Wall cells. Directional wall bits are not consulted here.
    Returns None when no source is given and the board has no entrance.
    """
    if source is None:
        source = board.find_entrance()
        if source is None:
            return None
    sr, sc = source
    if not board.in_bounds(sr, sc):
        raise ValueError(f"Source {source} lies outside the {board.rows}x{board.cols} board.")

    dist: DistanceMap = [[math.inf for _ in range(board.cols)] for _ in range(board.rows)]
    dist[sr][sc] = 0
    q = deque([(sr, sc)])
    while q:
        r, c = q.popleft()
        for nr, nc in neighbors4(board, r, c):
            if dist[nr][nc] != math.inf:
                continue
            if board.cells[nr][nc].type == CellType.WALL:
                continue
            dist[nr][nc] = dist[r][c] + 1
            q.append((nr, nc))
    return dist


def max_finite_distance(dist: DistanceMap) -> int:
    return int(max((d for row in dist for d in row if d != math.inf), default=0))


def reachable_cells(board: Board, source: Optional[Point] = None) -> Set[Point]:
    dist = distance_map(board, source)
    if dist is None:
        return set()
    return {(r, c) for r, row in enumerate(dist) for c, d in enumerate(row) if d != math.inf}
