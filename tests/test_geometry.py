from board_forge.dungeonboard.geometry import (
    ORIENTATION_LABELS, flip_horizontal, flip_vertical, orientation_sequence, rotate_clockwise,
)
from board_forge.dungeonboard.model import Shape


L_TRI = Shape.from_rows([[1, 0], [1, 1]])
S_TET = Shape.from_rows([[1, 0], [1, 1], [0, 1]])


def test_rotate_clockwise_dimensions_and_cells():
    bar = Shape.from_rows([[1, 1, 1]])
    turned = rotate_clockwise(bar)
    assert (turned.rows, turned.cols) == (3, 1)

    # [[1,0],[1,1]] -> [[1,1],[1,0]]
    assert rotate_clockwise(L_TRI).to_list() == [[1, 1], [1, 0]]


def test_four_rotations_are_identity():
    s = S_TET
    for _ in range(4):
        s = rotate_clockwise(s)
    assert s == S_TET


def test_double_flips_are_identity():
    assert flip_horizontal(flip_horizontal(S_TET)) == S_TET
    assert flip_vertical(flip_vertical(S_TET)) == S_TET


def test_flips_preserve_size():
    assert flip_horizontal(S_TET).size == S_TET.size
    assert flip_vertical(S_TET).size == S_TET.size
    assert flip_horizontal(S_TET).to_list() == [[0, 1], [1, 1], [1, 0]]


def test_orientation_sequence_order():
    seq = orientation_sequence(L_TRI)
    assert len(seq) == 9
    assert [label for label, _ in seq] == list(ORIENTATION_LABELS)
    assert seq[0][1] == L_TRI
    assert seq[1][1] == rotate_clockwise(L_TRI)
    assert seq[4][1] == flip_horizontal(L_TRI)
    assert seq[8][1] == flip_vertical(L_TRI)


def test_orientation_sequence_keeps_cell_count():
    for _, oriented in orientation_sequence(S_TET):
        assert oriented.size == 4
