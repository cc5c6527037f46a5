from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence
import random

from .model import ActionShape, Board, PlacedShape
from .placement import FAILURE_MESSAGES, PlacementFailure, diagnose_placement, place_shape_on_board, search_placement
from .shapes import shapes_for_card

CARD_VALUES = ["2", "3", "4", "5", "6", "7", "8", "9", "10", "J", "Q", "K", "A"]
SUITS = ["hearts", "diamonds", "clubs", "spades"]
FACE_CARDS = {"J", "Q", "K"}
SUIT_SYMBOLS = {"hearts": "♥", "diamonds": "♦", "clubs": "♣", "spades": "♠"}

CARDS_PER_DECK = 52
MIN_DECKS = 1
MAX_DECKS = 3


@dataclass
class CardDraw:
    value: str
    suit: str
    is_placed: bool = False

    @property
    def label(self) -> str:
        return f"{self.value}{SUIT_SYMBOLS.get(self.suit, '')}"

    def to_dict(self) -> Dict[str, Any]:
        return {"value": self.value, "suit": self.suit, "isPlaced": self.is_placed}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CardDraw":
        return cls(value=str(data["value"]), suit=str(data["suit"]), is_placed=bool(data.get("isPlaced", False)))


@dataclass
class Deck:
    """
    Bookkeeping for one deck round. Cards are drawn uniformly with
    replacement; only the remaining count is tracked.
    """
    deck_count: int = 1
    remaining: int = -1
    drawn: List[CardDraw] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not MIN_DECKS <= self.deck_count <= MAX_DECKS:
            raise ValueError(f"deck_count must be within {MIN_DECKS}..{MAX_DECKS}, got {self.deck_count}.")
        if self.remaining < 0:
            self.remaining = CARDS_PER_DECK * self.deck_count

    @property
    def is_empty(self) -> bool:
        return self.remaining <= 0

    def reset(self) -> None:
        self.drawn = []
        self.remaining = CARDS_PER_DECK * self.deck_count

    def set_deck_count(self, count: int) -> bool:
        if not MIN_DECKS <= count <= MAX_DECKS:
            return False
        self.deck_count = count
        self.reset()
        return True

    def draw(self, rng: random.Random) -> Optional[CardDraw]:
        if self.is_empty:
            return None
        card = CardDraw(value=rng.choice(CARD_VALUES), suit=rng.choice(SUITS))
        self.drawn.append(card)
        self.remaining -= 1
        return card

    def to_dict(self) -> Dict[str, Any]:
        return {
            "deckCount": self.deck_count,
            "remaining": self.remaining,
            "drawn": [c.to_dict() for c in self.drawn],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Deck":
        return cls(
            deck_count=int(data.get("deckCount", 1)),
            remaining=int(data.get("remaining", -1)),
            drawn=[CardDraw.from_dict(c) for c in data.get("drawn", [])],
        )


class DrawOutcomeKind(str, Enum):
    PLACED = "placed"
    ENCOUNTER = "encounter"
    NO_SHAPES = "no_shapes"
    NO_PLACEMENT = "no_placement"
    DECK_EMPTY = "deck_empty"


@dataclass
class DrawOutcome:
    kind: DrawOutcomeKind
    message: str
    board: Board
    card: Optional[CardDraw] = None
    placed: Optional[PlacedShape] = None
    action_shape_id: Optional[int] = None
    diagnosis: Optional[PlacementFailure] = None


def play_card(
    board: Board,
    catalog: Sequence[ActionShape],
    placed_shapes: Sequence[PlacedShape],
    card: CardDraw,
) -> DrawOutcome:
    """
    Resolve a drawn card against the board. On success the returned board is
    a copy with the covered cells marked traversed and `card.is_placed` is
    set; otherwise the input board is returned untouched.
    """
    where = f"{card.value} of {card.suit}"
    if card.value in FACE_CARDS:
        return DrawOutcome(DrawOutcomeKind.ENCOUNTER, f"Drew {where} - Automatic encounter!", board, card)

    matching = shapes_for_card(catalog, card.value)
    if not matching:
        return DrawOutcome(DrawOutcomeKind.NO_SHAPES, f"No shapes available for card value {card.value}", board, card)

    for action in matching:
        result = search_placement(board, action.shape, placed_shapes)
        if result is None:
            continue
        placed = PlacedShape(
            shape=result.shape,
            start_row=result.row,
            start_col=result.col,
            card_value=card.value,
            card_suit=card.suit,
        )
        card.is_placed = True
        return DrawOutcome(
            DrawOutcomeKind.PLACED,
            f"Placed shape for {where} at position [{result.row}, {result.col}]",
            place_shape_on_board(board, result.shape, result.row, result.col),
            card,
            placed=placed,
            action_shape_id=action.id,
        )

    diagnosis = diagnose_placement(board, matching[0].shape, placed_shapes)
    msg = f"Drew {where} - No valid placement found!"
    if diagnosis is not None:
        msg += f" {FAILURE_MESSAGES[diagnosis]}"
    return DrawOutcome(DrawOutcomeKind.NO_PLACEMENT, msg, board, card, diagnosis=diagnosis)
