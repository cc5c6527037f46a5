import random

import pytest

from board_forge.dungeonboard.cards import (
    CARDS_PER_DECK, CardDraw, Deck, DrawOutcomeKind, play_card,
)
from board_forge.dungeonboard.model import ActionShape, CellType, Shape
from board_forge.dungeonboard.placement import PlacementFailure
from board_forge.dungeonboard.shapes import DEFAULT_ACTION_SHAPES, shapes_by_tier, shapes_for_card


def test_catalog_layout():
    assert [s.id for s in DEFAULT_ACTION_SHAPES] == list(range(1, 16))
    tiers = shapes_by_tier(DEFAULT_ACTION_SHAPES)
    assert list(tiers) == [1, 2, 3, 4, 5]
    assert [s.id for s in shapes_for_card(DEFAULT_ACTION_SHAPES, "A")] == [13, 14, 15]
    assert shapes_for_card(DEFAULT_ACTION_SHAPES, "J") == []


def test_deck_counts_down_and_empties():
    deck = Deck(deck_count=1)
    rng = random.Random(0)
    assert deck.remaining == CARDS_PER_DECK
    for _ in range(CARDS_PER_DECK):
        assert deck.draw(rng) is not None
    assert deck.is_empty
    assert deck.draw(rng) is None
    assert len(deck.drawn) == CARDS_PER_DECK

    deck.reset()
    assert deck.remaining == CARDS_PER_DECK and deck.drawn == []


def test_deck_count_bounds():
    deck = Deck()
    assert deck.set_deck_count(3)
    assert deck.remaining == 156
    assert not deck.set_deck_count(4)
    assert deck.deck_count == 3
    with pytest.raises(ValueError):
        Deck(deck_count=0)


def test_face_card_is_encounter(board8):
    card = CardDraw("Q", "hearts")
    outcome = play_card(board8, DEFAULT_ACTION_SHAPES, [], card)
    assert outcome.kind == DrawOutcomeKind.ENCOUNTER
    assert outcome.message == "Drew Q of hearts - Automatic encounter!"
    assert outcome.board is board8
    assert not card.is_placed


def test_no_shapes_for_value(board8):
    outcome = play_card(board8, DEFAULT_ACTION_SHAPES[:3], [], CardDraw("9", "clubs"))
    assert outcome.kind == DrawOutcomeKind.NO_SHAPES
    assert outcome.message == "No shapes available for card value 9"


def test_placed_card_marks_board(board8):
    card = CardDraw("2", "diamonds")
    outcome = play_card(board8, DEFAULT_ACTION_SHAPES, [], card)
    assert outcome.kind == DrawOutcomeKind.PLACED
    assert card.is_placed
    assert outcome.action_shape_id == 1
    assert outcome.message == "Placed shape for 2 of diamonds at position [7, 4]"
    assert outcome.board.cells[7][4].traversed and outcome.board.cells[7][5].traversed
    assert not board8.cells[7][4].traversed
    assert outcome.placed.card_value == "2"


def test_falls_through_to_next_matching_shape(board8):
    # a nine-cell bar never fits an 8x8 board in any orientation
    catalog = [
        ActionShape(1, 1, Shape.from_rows([[1, 1, 1, 1, 1, 1, 1, 1, 1]]), ("2",)),
        ActionShape(2, 1, Shape.from_rows([[1]]), ("2",)),
    ]
    outcome = play_card(board8, catalog, [], CardDraw("2", "spades"))
    assert outcome.action_shape_id == 2


def test_no_placement_message(board8):
    for _, _, cell in board8.iter_cells():
        if cell.type == CellType.EMPTY:
            cell.type = CellType.WALL
    outcome = play_card(board8, DEFAULT_ACTION_SHAPES, [], CardDraw("A", "clubs"))
    assert outcome.kind == DrawOutcomeKind.NO_PLACEMENT
    assert outcome.diagnosis == PlacementFailure.ENTRANCE_NOT_REACHED
    assert outcome.message.startswith("Drew A of clubs - No valid placement found!")


def test_card_draw_dict():
    card = CardDraw("10", "spades", is_placed=True)
    assert card.label == "10♠"
    assert CardDraw.from_dict(card.to_dict()) == card
    assert CardDraw.from_dict({"value": "3", "suit": "hearts"}).is_placed is False
