import random

import pytest

from board_forge.core.context import ForgeContext
from board_forge.dungeonboard.generator import new_board


@pytest.fixture
def rng():
    return random.Random(42)


@pytest.fixture
def board8():
    # entrance at [7, 4]
    return new_board(8)


@pytest.fixture
def ctx(tmp_path):
    messages = []
    c = ForgeContext(project_dir=tmp_path / "proj", log=messages.append)
    c.set_project_dir(c.project_dir)
    c.messages = messages
    return c
