import json

import pytest

from board_forge.dungeonboard.exports import (
    board_key_md, board_to_text, export_board_json, export_board_key_md,
    import_board_json, parse_board_file,
)
from board_forge.dungeonboard.model import (
    Board, CellType, ColorRequirement, InvalidBoardError, PlacedShape, Shape,
)
from board_forge.dungeonboard.shapes import DEFAULT_ACTION_SHAPES


def test_json_file_layout(tmp_path, board8):
    board8.cells[0][0].type = CellType.RELIC
    board8.cells[0][0].color_requirement = ColorRequirement.PURPLE
    board8.cells[0][0].walls.right = True
    path = tmp_path / "board.json"
    export_board_json(path, "Crypt", board8, DEFAULT_ACTION_SHAPES, 8)

    data = json.loads(path.read_text(encoding="utf-8"))
    assert set(data) == {"name", "board", "actionShapes", "size"}
    assert data["board"][0][0] == {
        "type": "relic",
        "colorRequirement": "purple",
        "walls": {"top": False, "right": True, "bottom": False, "left": False},
        "traversed": False,
    }
    assert data["actionShapes"][0]["cardValues"] == ["2", "3"]

    bf = import_board_json(path)
    assert bf.name == "Crypt"
    assert bf.size == 8
    assert bf.board.to_list() == board8.to_list()
    assert [s.id for s in bf.action_shapes] == list(range(1, 16))


def test_missing_traversed_and_name_default():
    bf = parse_board_file({"board": [[{"type": "entrance", "colorRequirement": "none",
                                       "walls": {"top": True}}]]})
    assert bf.name == "Untitled Board"
    cell = bf.board.cells[0][0]
    assert cell.traversed is False
    assert cell.walls.top and not cell.walls.left
    assert bf.action_shapes is None


def test_bad_files_raise(tmp_path):
    with pytest.raises(InvalidBoardError):
        parse_board_file({"name": "x"})
    with pytest.raises(InvalidBoardError):
        parse_board_file({"board": [[{"type": "lava"}]]})
    with pytest.raises(InvalidBoardError):
        parse_board_file({"board": [[{}], [{}, {}]]})
    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")
    with pytest.raises(InvalidBoardError):
        import_board_json(bad)


def test_text_rendering():
    board = Board.empty(2, 3)
    board.cells[0][0].type = CellType.WALL
    board.cells[0][2].type = CellType.KEY
    board.cells[0][2].color_requirement = ColorRequirement.RED
    board.cells[1][1].type = CellType.ENTRANCE
    board.cells[1][0].traversed = True
    assert board_to_text(board) == "# . kr\no E ."


def test_key_markdown(tmp_path, board8):
    placed = [PlacedShape(Shape.from_rows([[1, 1]]), 7, 4, "2", "hearts")]
    md = board_key_md("Crypt", board8, placed)
    assert md.startswith("# Board Key: Crypt")
    assert "- **Entrance:** [7, 4]" in md
    assert "| `E` | Entrance | 1 |" in md
    assert "2 of hearts: 2 cells @ [7, 4]" in md

    path = tmp_path / "key.md"
    export_board_key_md(path, "Crypt", board8)
    assert "- (none)" in path.read_text(encoding="utf-8")
