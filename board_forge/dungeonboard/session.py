from __future__ import annotations
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence, Tuple
import random

from board_forge.core.context import ForgeContext

from .cards import Deck, DrawOutcome, DrawOutcomeKind, play_card
from .exports import board_file_dict, board_key_md, board_to_text, export_board_json, import_board_json
from .generator import generate_maze_board, generate_random_board, new_board, resize_board
from .model import (
    ActionShape, Board, CellType, ColorRequirement, PlacedShape, RandomBoardOptions,
)
from .placement import clear_traversed, uncovered_cell_count
from .shapes import DEFAULT_ACTION_SHAPES

if TYPE_CHECKING:
    from board_forge.core.app_settings import AppSettings

MIN_BOARD_SIZE = 8
MAX_BOARD_SIZE = 24
DEFAULT_BOARD_SIZE = 16
DEFAULT_BOARD_NAME = "Untitled Board"
STATE_VERSION = 1
SESSION_FILE = "boards/session.json"


class BoardSession:
    """
    Headless state of the board designer: the current board, its action
    shapes, the running deck round and the saved-board list.
    """

    def __init__(
        self,
        ctx: Optional[ForgeContext] = None,
        size: int = DEFAULT_BOARD_SIZE,
        action_shapes: Optional[Sequence[ActionShape]] = None,
        deck_count: int = 1,
    ):
        self.ctx = ctx or ForgeContext()
        self.name = DEFAULT_BOARD_NAME
        self.size = size
        self.board: Board = new_board(size)
        self.action_shapes: List[ActionShape] = list(action_shapes or DEFAULT_ACTION_SHAPES)
        self.placed_shapes: List[PlacedShape] = []
        self.deck = Deck(deck_count=deck_count)
        self.saved_boards: List[Tuple[str, Board]] = []
        self.last_message = ""

    @classmethod
    def from_settings(cls, ctx: ForgeContext, settings: "AppSettings") -> "BoardSession":
        """Start a session with the board size and deck count the user last chose."""
        return cls(ctx, size=settings.get_board_size(), deck_count=settings.get_deck_count())

    def remember(self, settings: "AppSettings") -> None:
        settings.set_board_size(self.size)
        settings.set_deck_count(self.deck.deck_count)
        settings.set_last_project_dir(self.ctx.project_dir)

    def _log(self, msg: str) -> None:
        self.last_message = msg
        self.ctx.log(msg)

    def _rng(self, kind: str, seed: Optional[int]) -> random.Random:
        if seed is None:
            return self.ctx.rng
        return self.ctx.derive_rng("dungeonboard", kind, self.size, seed)

    def _replace_board(self, board: Board) -> None:
        self.board = board
        self.placed_shapes = []
        self.deck.reset()

    # ---------------- Board ----------------

    def _size_ok(self, size: int) -> bool:
        if MIN_BOARD_SIZE <= size <= MAX_BOARD_SIZE:
            return True
        self._log(f"[dungeonboard] Size {size} outside {MIN_BOARD_SIZE}..{MAX_BOARD_SIZE}; ignored.")
        return False

    def new_board(self, size: Optional[int] = None) -> bool:
        size = self.size if size is None else size
        if not self._size_ok(size):
            return False
        self.size = size
        self._replace_board(new_board(size))
        self._log(f"[dungeonboard] New {size}×{size} board.")
        return True

    def resize(self, new_size: int) -> bool:
        if not self._size_ok(new_size):
            return False
        # placements refer to the old grid, so the deck round starts over
        self._replace_board(clear_traversed(resize_board(self.board, new_size)))
        self.size = new_size
        self._log(f"[dungeonboard] Resized to {new_size}×{new_size}.")
        return True

    def generate_random(self, options: Optional[RandomBoardOptions] = None, seed: Optional[int] = None) -> Board:
        self._replace_board(generate_random_board(self.size, options, self._rng("random", seed)))
        preset = "custom" if options is not None else "default"
        self._log(f"[dungeonboard] Generated random {self.size}×{self.size} board ({preset} preset, seed {seed}).")
        return self.board

    def generate_maze(self, options: Optional[RandomBoardOptions] = None, seed: Optional[int] = None) -> Board:
        self._replace_board(generate_maze_board(self.size, options, self._rng("maze", seed)))
        self._log(f"[dungeonboard] Generated maze {self.size}×{self.size} board (seed {seed}).")
        return self.board

    def paint_cell(self, row: int, col: int, cell_type: CellType, color: ColorRequirement = ColorRequirement.NONE) -> None:
        cell = self.board.cells[row][col]
        cell.type = CellType(cell_type)
        cell.color_requirement = ColorRequirement(color)

    def toggle_wall(self, row: int, col: int, side: str) -> None:
        walls = self.board.cells[row][col].walls
        walls.set(side, not walls.get(side))

    # ---------------- Cards ----------------

    @property
    def uncovered_cells(self) -> int:
        return uncovered_cell_count(self.board, self.placed_shapes)

    def draw_card(self, rng: Optional[random.Random] = None) -> DrawOutcome:
        card = self.deck.draw(rng or self.ctx.rng)
        if card is None:
            outcome = DrawOutcome(DrawOutcomeKind.DECK_EMPTY, "Deck is empty! Reset to continue drawing.", self.board)
            self._log(f"[cards] {outcome.message}")
            return outcome

        outcome = play_card(self.board, self.action_shapes, self.placed_shapes, card)
        if outcome.kind == DrawOutcomeKind.PLACED:
            self.board = outcome.board
            self.placed_shapes.append(outcome.placed)
        self._log(f"[cards] {outcome.message}")
        return outcome

    def reset_deck(self) -> None:
        self.deck.reset()
        self.placed_shapes = []
        self.board = clear_traversed(self.board)
        self._log("[cards] Deck has been reset. All placed shapes have been cleared.")

    def set_deck_count(self, count: int) -> bool:
        if not self.deck.set_deck_count(count):
            return False
        self.reset_deck()
        return True

    # ---------------- Saved boards ----------------

    def save_board(self) -> None:
        snapshot = (self.name, self.board.copy())
        for i, (name, _) in enumerate(self.saved_boards):
            if name == self.name:
                self.saved_boards[i] = snapshot
                break
        else:
            self.saved_boards.append(snapshot)
        self._log(f'[dungeonboard] Board "{self.name}" saved!')

    def load_board(self, index: int) -> None:
        name, board = self.saved_boards[index]
        self.name = name
        self.size = board.rows
        self._replace_board(board.copy())
        self._log(f'[dungeonboard] Loaded "{name}".')

    def delete_board(self, index: int) -> None:
        name, _ = self.saved_boards.pop(index)
        self._log(f'[dungeonboard] Deleted "{name}".')

    # ---------------- Files ----------------

    def export_json(self, path: Optional[Path] = None) -> Path:
        path = Path(path) if path is not None else self.ctx.export_path(self.name, "json", timestamp=False)
        export_board_json(path, self.name, self.board, self.action_shapes, self.size)
        self._log(f"[dungeonboard] Export JSON OK: {path}")
        return path

    def import_json(self, path: Path) -> None:
        bf = import_board_json(path)
        self.name = bf.name
        if bf.action_shapes:
            self.action_shapes = bf.action_shapes
        self.size = bf.size or bf.board.rows
        self._replace_board(bf.board)
        self._log(f"[dungeonboard] Imported {bf.name!r} ({bf.board.rows}×{bf.board.cols}).")

    def export_pack(self) -> Path:
        em = self.ctx.export_manager
        pack_dir = em.create_board_pack(self.name)
        em.write(pack_dir, "board.json", board_file_dict(self.name, self.board, self.action_shapes, self.size))
        em.write(pack_dir, "board_key.md", board_key_md(self.name, self.board, self.placed_shapes))
        em.write(pack_dir, "board.txt", board_to_text(self.board))
        self._log(f"[dungeonboard] Exported board pack: {pack_dir}")
        return pack_dir

    # ---------------- State ----------------

    def serialize_state(self) -> Dict[str, Any]:
        return {
            "version": STATE_VERSION,
            "name": self.name,
            "size": self.size,
            "board": self.board.to_list(),
            "actionShapes": [s.to_dict() for s in self.action_shapes],
            "placedShapes": [ps.to_dict() for ps in self.placed_shapes],
            "deck": self.deck.to_dict(),
            "savedBoards": [{"name": n, "board": b.to_list()} for n, b in self.saved_boards],
        }

    def load_state(self, state: Dict[str, Any]) -> None:
        if not state:
            return
        ver = int(state.get("version", STATE_VERSION))
        if ver != STATE_VERSION:
            self.ctx.log(f"[dungeonboard] Unknown state version: {ver}")
            return

        self.name = str(state.get("name", DEFAULT_BOARD_NAME))
        if state.get("board"):
            self.board = Board.from_list(state["board"])
        self.size = int(state.get("size", self.board.rows))
        if state.get("actionShapes"):
            self.action_shapes = [ActionShape.from_dict(s) for s in state["actionShapes"]]
        self.placed_shapes = [PlacedShape.from_dict(ps) for ps in state.get("placedShapes", [])]
        if state.get("deck"):
            self.deck = Deck.from_dict(state["deck"])
        self.saved_boards = [
            (str(entry["name"]), Board.from_list(entry["board"])) for entry in state.get("savedBoards", [])
        ]

    def save_state(self, relpath: str = SESSION_FILE) -> Path:
        path = self.ctx.save_json(relpath, self.serialize_state())
        self._log(f"[dungeonboard] Session saved to {path}")
        return path

    def restore_state(self, relpath: str = SESSION_FILE) -> bool:
        state = self.ctx.load_json(relpath)
        if not state:
            return False
        self.load_state(state)
        self._log(f'[dungeonboard] Session restored: "{self.name}" ({len(self.saved_boards)} saved boards).')
        return True
