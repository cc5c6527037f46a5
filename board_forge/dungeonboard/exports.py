# -------------------------
# exports.py
# -------------------------
from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence
import json

from .model import (
    CELL_DESCRIPTORS, COLOR_DESCRIPTORS, ActionShape, Board, CellType,
    ColorRequirement, InvalidBoardError, PlacedShape,
)


@dataclass
class BoardFile:
    name: str
    board: Board
    action_shapes: Optional[List[ActionShape]] = None
    size: Optional[int] = None


def board_file_dict(name: str, board: Board, action_shapes: Sequence[ActionShape], size: int) -> Dict[str, Any]:
    return {
        "name": name,
        "board": board.to_list(),
        "actionShapes": [s.to_dict() for s in action_shapes],
        "size": size,
    }


def parse_board_file(data: Any) -> BoardFile:
    if not isinstance(data, dict) or "board" not in data:
        raise InvalidBoardError("Board file must be an object with a 'board' entry.")
    board = Board.from_list(data["board"])
    shapes = data.get("actionShapes")
    size = data.get("size")
    return BoardFile(
        name=str(data.get("name") or "Untitled Board"),
        board=board,
        action_shapes=[ActionShape.from_dict(s) for s in shapes] if shapes else None,
        size=int(size) if size else None,
    )


def export_board_json(path: Path, name: str, board: Board, action_shapes: Sequence[ActionShape], size: int) -> None:
    payload = board_file_dict(name, board, action_shapes, size)
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")


def import_board_json(path: Path) -> BoardFile:
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise InvalidBoardError(f"Invalid board file {path}: {e}") from e
    return parse_board_file(data)


def board_to_text(board: Board) -> str:
    """Two characters per cell: type symbol, then colour tag (blank for none). Covered Empty cells show 'o'."""
    lines = []
    for row in board.cells:
        parts = []
        for cell in row:
            sym = CELL_DESCRIPTORS[cell.type].symbol
            if cell.type == CellType.EMPTY and cell.traversed:
                sym = "o"
            parts.append(sym + COLOR_DESCRIPTORS[cell.color_requirement].symbol)
        lines.append("".join(parts).rstrip())
    return "\n".join(lines)


def board_key_md(name: str, board: Board, placed_shapes: Sequence[PlacedShape] = (), title: str = "Board Key") -> str:
    lines = []
    lines.append(f"# {title}: {name}")
    lines.append("")
    lines.append(f"- **Size:** {board.rows}×{board.cols}")
    entrance = board.find_entrance()
    lines.append(f"- **Entrance:** {list(entrance) if entrance else '(none)'}")
    lines.append("")
    lines.append("## Cells")
    lines.append("")
    lines.append("| Symbol | Type | Count | Meaning |")
    lines.append("|---|---|---|---|")
    for cell_type, desc in CELL_DESCRIPTORS.items():
        lines.append(f"| `{desc.symbol}` | {desc.label} | {board.count(cell_type)} | {desc.description} |")
    lines.append("")
    lines.append("## Colour tags")
    lines.append("")
    for color, desc in COLOR_DESCRIPTORS.items():
        if color == ColorRequirement.NONE:
            continue
        lines.append(f"- **{desc.label}** (`{desc.symbol}`): {board.count_color(color)}")
    lines.append("")
    lines.append("## Placed shapes")
    lines.append("")
    if not placed_shapes:
        lines.append("- (none)")
    for i, ps in enumerate(placed_shapes, start=1):
        card = f"{ps.card_value} of {ps.card_suit}" if ps.card_value else "manual"
        lines.append(f"- **{i}.** {card}: {ps.shape.size} cells @ [{ps.start_row}, {ps.start_col}]")
    lines.append("")
    lines.append("## Layout")
    lines.append("")
    lines.append("```")
    lines.append(board_to_text(board))
    lines.append("```")
    return "\n".join(lines)


def export_board_key_md(path: Path, name: str, board: Board, placed_shapes: Sequence[PlacedShape] = ()) -> None:
    path.write_text(board_key_md(name, board, placed_shapes), encoding="utf-8")
