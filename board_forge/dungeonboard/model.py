from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

Point = Tuple[int, int]  # (row, col)


class InvalidShapeError(ValueError):
    pass


class InvalidBoardError(ValueError):
    pass


class CellType(str, Enum):
    EMPTY = "empty"
    WALL = "wall"
    ENTRANCE = "entrance"
    KEY = "key"
    LOCK = "lock"
    SUPPLIES = "supplies"
    MANA = "mana"
    ENCOUNTER = "encounter"
    TREASURE = "treasure"
    RELIC = "relic"


class ColorRequirement(str, Enum):
    NONE = "none"
    RED = "red"
    ORANGE = "orange"
    YELLOW = "yellow"
    GREEN = "green"
    BLUE = "blue"
    PURPLE = "purple"


WALL_SIDES = ("top", "right", "bottom", "left")


@dataclass(frozen=True)
class CellDescriptor:
    label: str
    symbol: str
    description: str


CELL_DESCRIPTORS: Dict[CellType, CellDescriptor] = {
    CellType.EMPTY: CellDescriptor("Empty", ".", "Open floor"),
    CellType.WALL: CellDescriptor("Wall", "#", "Solid rock, never covered"),
    CellType.ENTRANCE: CellDescriptor("Entrance", "E", "Where the party enters; the first shape covers it"),
    CellType.KEY: CellDescriptor("Key", "k", "Pick up a key"),
    CellType.LOCK: CellDescriptor("Lock", "L", "Spend a key to pass"),
    CellType.SUPPLIES: CellDescriptor("Supplies", "s", "Restock supplies"),
    CellType.MANA: CellDescriptor("Mana", "m", "Gain mana"),
    CellType.ENCOUNTER: CellDescriptor("Encounter", "!", "Fight or parley"),
    CellType.TREASURE: CellDescriptor("Treasure", "$", "Loot"),
    CellType.RELIC: CellDescriptor("Relic", "R", "Objective"),
}

COLOR_DESCRIPTORS: Dict[ColorRequirement, CellDescriptor] = {
    ColorRequirement.NONE: CellDescriptor("None", " ", "No colour needed"),
    ColorRequirement.RED: CellDescriptor("Red", "r", "Needs a red die"),
    ColorRequirement.ORANGE: CellDescriptor("Orange", "o", "Needs an orange die"),
    ColorRequirement.YELLOW: CellDescriptor("Yellow", "y", "Needs a yellow die"),
    ColorRequirement.GREEN: CellDescriptor("Green", "g", "Needs a green die"),
    ColorRequirement.BLUE: CellDescriptor("Blue", "b", "Needs a blue die"),
    ColorRequirement.PURPLE: CellDescriptor("Purple", "p", "Needs a purple die"),
}


def parse_cell_type(value: Any) -> CellType:
    try:
        return CellType(value)
    except ValueError:
        raise InvalidBoardError(f"Unknown cell type: {value!r}") from None


def parse_color(value: Any) -> ColorRequirement:
    try:
        return ColorRequirement(value)
    except ValueError:
        raise InvalidBoardError(f"Unknown colour requirement: {value!r}") from None


# ---------- cells / board ----------

@dataclass
class Walls:
    top: bool = False
    right: bool = False
    bottom: bool = False
    left: bool = False

    def get(self, side: str) -> bool:
        if side not in WALL_SIDES:
            raise ValueError(f"Unknown wall side: {side!r}")
        return getattr(self, side)

    def set(self, side: str, value: bool) -> None:
        if side not in WALL_SIDES:
            raise ValueError(f"Unknown wall side: {side!r}")
        setattr(self, side, bool(value))

    def any(self) -> bool:
        return self.top or self.right or self.bottom or self.left

    def to_dict(self) -> Dict[str, bool]:
        return {"top": self.top, "right": self.right, "bottom": self.bottom, "left": self.left}


@dataclass
class Cell:
    type: CellType = CellType.EMPTY
    color_requirement: ColorRequirement = ColorRequirement.NONE
    walls: Walls = field(default_factory=Walls)
    traversed: bool = False

    def copy(self) -> "Cell":
        return Cell(
            type=self.type,
            color_requirement=self.color_requirement,
            walls=Walls(**self.walls.to_dict()),
            traversed=self.traversed,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "colorRequirement": self.color_requirement.value,
            "walls": self.walls.to_dict(),
            "traversed": self.traversed,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Cell":
        if not isinstance(data, dict):
            raise InvalidBoardError(f"Cell must be an object, got {type(data).__name__}")
        walls = data.get("walls") or {}
        return cls(
            type=parse_cell_type(data.get("type", CellType.EMPTY.value)),
            color_requirement=parse_color(data.get("colorRequirement", ColorRequirement.NONE.value)),
            walls=Walls(**{side: bool(walls.get(side, False)) for side in WALL_SIDES}),
            traversed=bool(data.get("traversed", False)),
        )


@dataclass
class Board:
    """Grid of cells indexed [row][col], row 0 at the top."""
    cells: List[List[Cell]]

    def __post_init__(self) -> None:
        if not self.cells or not self.cells[0]:
            raise InvalidBoardError("Board must have at least one row and one column.")
        width = len(self.cells[0])
        for r, row in enumerate(self.cells):
            if len(row) != width:
                raise InvalidBoardError(f"Ragged board: row {r} has {len(row)} cells, expected {width}.")

    @classmethod
    def empty(cls, rows: int, cols: Optional[int] = None) -> "Board":
        cols = rows if cols is None else cols
        if rows < 1 or cols < 1:
            raise InvalidBoardError(f"Board size must be positive, got {rows}x{cols}.")
        return cls([[Cell() for _ in range(cols)] for _ in range(rows)])

    @property
    def rows(self) -> int:
        return len(self.cells)

    @property
    def cols(self) -> int:
        return len(self.cells[0])

    def in_bounds(self, r: int, c: int) -> bool:
        return 0 <= r < self.rows and 0 <= c < self.cols

    def __getitem__(self, pos: Point) -> Cell:
        r, c = pos
        return self.cells[r][c]

    def iter_cells(self) -> Iterable[Tuple[int, int, Cell]]:
        for r, row in enumerate(self.cells):
            for c, cell in enumerate(row):
                yield r, c, cell

    def positions_of(self, cell_type: CellType) -> List[Point]:
        return [(r, c) for r, c, cell in self.iter_cells() if cell.type == cell_type]

    def find_entrance(self) -> Optional[Point]:
        for r, c, cell in self.iter_cells():
            if cell.type == CellType.ENTRANCE:
                return (r, c)
        return None

    def count(self, cell_type: CellType) -> int:
        return sum(1 for _, _, cell in self.iter_cells() if cell.type == cell_type)

    def count_color(self, color: ColorRequirement) -> int:
        return sum(1 for _, _, cell in self.iter_cells() if cell.color_requirement == color)

    def copy(self) -> "Board":
        return Board([[cell.copy() for cell in row] for row in self.cells])

    def to_list(self) -> List[List[Dict[str, Any]]]:
        return [[cell.to_dict() for cell in row] for row in self.cells]

    @classmethod
    def from_list(cls, data: Any) -> "Board":
        if not isinstance(data, list) or not data:
            raise InvalidBoardError("Board must be a non-empty list of rows.")
        rows = []
        for r, row in enumerate(data):
            if not isinstance(row, list):
                raise InvalidBoardError(f"Board row {r} is not a list.")
            rows.append([Cell.from_dict(cell) for cell in row])
        return cls(rows)


# ---------- shapes ----------

@dataclass(frozen=True)
class Shape:
    """Binary occupancy matrix anchored at its own [0][0]."""
    cells: Tuple[Tuple[int, ...], ...]

    def __post_init__(self) -> None:
        if not self.cells or not self.cells[0]:
            raise InvalidShapeError("Shape must have at least one row and one column.")
        width = len(self.cells[0])
        for r, row in enumerate(self.cells):
            if len(row) != width:
                raise InvalidShapeError(f"Ragged shape: row {r} has {len(row)} cells, expected {width}.")
            for v in row:
                if v not in (0, 1):
                    raise InvalidShapeError(f"Shape cells must be 0 or 1, got {v!r}.")

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[int]]) -> "Shape":
        """Build a shape from nested rows, padding short rows with 0."""
        if isinstance(rows, Shape):
            return rows
        if not rows or isinstance(rows, (str, bytes)):
            raise InvalidShapeError("Shape must be a non-empty list of rows.")
        width = max(len(row) for row in rows)
        if width == 0:
            raise InvalidShapeError("Shape must have at least one column.")
        padded = []
        for row in rows:
            values = [1 if v is True else 0 if v is False else v for v in row]
            padded.append(tuple(values) + (0,) * (width - len(values)))
        return cls(tuple(padded))

    @property
    def rows(self) -> int:
        return len(self.cells)

    @property
    def cols(self) -> int:
        return len(self.cells[0])

    def filled(self) -> List[Point]:
        """Occupied offsets in row-major order."""
        return [(r, c) for r, row in enumerate(self.cells) for c, v in enumerate(row) if v == 1]

    @property
    def size(self) -> int:
        return len(self.filled())

    def to_list(self) -> List[List[int]]:
        return [list(row) for row in self.cells]


@dataclass(frozen=True)
class PlacedShape:
    shape: Shape
    start_row: int
    start_col: int
    card_value: str = ""
    card_suit: str = ""

    def covered(self) -> List[Point]:
        return [(self.start_row + r, self.start_col + c) for r, c in self.shape.filled()]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "shape": self.shape.to_list(),
            "startRow": self.start_row,
            "startCol": self.start_col,
            "cardValue": self.card_value,
            "cardSuit": self.card_suit,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlacedShape":
        return cls(
            shape=Shape.from_rows(data["shape"]),
            start_row=int(data["startRow"]),
            start_col=int(data["startCol"]),
            card_value=str(data.get("cardValue", "")),
            card_suit=str(data.get("cardSuit", "")),
        )


@dataclass(frozen=True)
class ActionShape:
    id: int
    value: int  # difficulty tier 1..5
    shape: Shape
    card_values: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "value": self.value,
            "shape": self.shape.to_list(),
            "cardValues": list(self.card_values),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ActionShape":
        return cls(
            id=int(data["id"]),
            value=int(data["value"]),
            shape=Shape.from_rows(data["shape"]),
            card_values=tuple(str(v) for v in data.get("cardValues", [])),
        )


# ---------- generator options ----------

@dataclass
class RandomBoardOptions:
    cell_type_counts: Dict[CellType, int] = field(default_factory=dict)
    color_requirement_counts: Dict[ColorRequirement, int] = field(default_factory=dict)
    wall_percentage: int = 0

    def __post_init__(self) -> None:
        self.cell_type_counts = {parse_cell_type(k): v for k, v in self.cell_type_counts.items()}
        self.color_requirement_counts = {parse_color(k): v for k, v in self.color_requirement_counts.items()}
        for key, count in list(self.cell_type_counts.items()) + list(self.color_requirement_counts.items()):
            if not isinstance(count, int) or count < 0:
                raise ValueError(f"Count for {key.value} must be a non-negative int, got {count!r}.")
        if not 0 <= self.wall_percentage <= 100:
            raise ValueError(f"wall_percentage must be within 0..100, got {self.wall_percentage}.")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cellTypeCounts": {k.value: v for k, v in self.cell_type_counts.items()},
            "colorRequirementCounts": {k.value: v for k, v in self.color_requirement_counts.items()},
            "wallPercentage": self.wall_percentage,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RandomBoardOptions":
        return cls(
            cell_type_counts={k: int(v) for k, v in (data.get("cellTypeCounts") or {}).items()},
            color_requirement_counts={k: int(v) for k, v in (data.get("colorRequirementCounts") or {}).items()},
            wall_percentage=int(data.get("wallPercentage", 0)),
        )
