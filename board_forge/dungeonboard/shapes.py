from __future__ import annotations
from typing import Dict, List, Sequence

from .model import ActionShape, Shape


def _entry(id: int, value: int, rows, card_values: Sequence[str]) -> ActionShape:
    return ActionShape(id=id, value=value, shape=Shape.from_rows(rows), card_values=tuple(card_values))


DEFAULT_ACTION_SHAPES: List[ActionShape] = [
    # tier 1: two squares
    _entry(1, 1, [[1, 1]], ["2", "3"]),
    _entry(2, 1, [[1], [1]], ["2", "3"]),
    _entry(3, 1, [[1, 0], [1, 1]], ["2", "3"]),
    # tier 2: three squares, plus one four-square S
    _entry(4, 2, [[1, 1, 1]], ["4", "5"]),
    _entry(5, 2, [[1, 1], [1, 0]], ["4", "5"]),
    _entry(6, 2, [[1, 0], [1, 1], [0, 1]], ["4", "5"]),
    # tier 3: four squares
    _entry(7, 3, [[1, 1], [1, 1]], ["6", "7", "8"]),
    _entry(8, 3, [[1, 1, 1, 1]], ["6", "7", "8"]),
    _entry(9, 3, [[1, 1], [0, 1], [0, 1]], ["6", "7", "8"]),
    # tier 4: five squares
    _entry(10, 4, [[1, 1, 1], [1, 0, 1]], ["9", "10"]),
    _entry(11, 4, [[1, 1, 1], [1, 1, 0]], ["9", "10"]),
    _entry(12, 4, [[0, 1, 0], [1, 1, 1], [0, 1, 0]], ["9", "10"]),
    # tier 5: six squares
    _entry(13, 5, [[1, 1, 1], [1, 1, 1]], ["A"]),
    _entry(14, 5, [[1, 1, 1, 1, 1, 1]], ["A"]),
    _entry(15, 5, [[1, 1], [1, 1], [1, 1]], ["A"]),
]


def shapes_for_card(catalog: Sequence[ActionShape], card_value: str) -> List[ActionShape]:
    return [s for s in catalog if card_value in s.card_values]


def shapes_by_tier(catalog: Sequence[ActionShape]) -> Dict[int, List[ActionShape]]:
    out: Dict[int, List[ActionShape]] = {}
    for s in catalog:
        out.setdefault(s.value, []).append(s)
    return dict(sorted(out.items()))
