from pathlib import Path

import pytest

from board_forge.core.app_settings import AppSettings
from board_forge.dungeonboard.model import CellType, RandomBoardOptions
from board_forge.dungeonboard.session import BoardSession


@pytest.fixture
def settings(tmp_path):
    return AppSettings(path=tmp_path / "settings.ini")


def test_defaults(settings):
    assert settings.get_last_project_dir() is None
    assert settings.get_board_size() == 16
    assert settings.get_deck_count() == 1
    assert settings.get_random_board_options() is None


def test_clamped_values(settings):
    settings.set_board_size(40)
    assert settings.get_board_size() == 24
    settings.set_board_size(2)
    assert settings.get_board_size() == 8
    settings.set_deck_count(9)
    assert settings.get_deck_count() == 3


def test_values_survive_reopen(settings, tmp_path):
    settings.set_last_project_dir(tmp_path / "proj")
    settings.set_random_board_options(
        RandomBoardOptions(cell_type_counts={CellType.KEY: 4}, wall_percentage=25)
    )
    settings.sync()

    again = AppSettings(path=tmp_path / "settings.ini")
    assert again.get_last_project_dir() == Path(tmp_path / "proj")
    opts = again.get_random_board_options()
    assert opts.cell_type_counts == {CellType.KEY: 4}
    assert opts.wall_percentage == 25

    again.set_random_board_options(None)
    assert again.get_random_board_options() is None


def test_session_round_trip_through_settings(settings, ctx):
    settings.set_board_size(12)
    settings.set_deck_count(2)
    session = BoardSession.from_settings(ctx, settings)
    assert session.size == 12
    assert session.board.find_entrance() == (11, 6)
    assert session.deck.remaining == 104

    session.resize(20)
    session.remember(settings)
    assert settings.get_board_size() == 20
    assert settings.get_last_project_dir() == ctx.project_dir
