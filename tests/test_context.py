import json

import pytest

from board_forge.core.context import DEFAULT_MASTER_SEED, ForgeContext
from board_forge.core.export_manager import ExportManager, slugify


def test_project_defaults(ctx):
    assert (ctx.project_dir / "exports").is_dir()
    assert (ctx.project_dir / "boards").is_dir()
    assert ctx.project_settings["name"] == "proj"
    assert ctx.master_seed == DEFAULT_MASTER_SEED


def test_bad_project_file_is_logged(tmp_path):
    proj = tmp_path / "broken"
    proj.mkdir()
    (proj / "project.json").write_text("{oops", encoding="utf-8")
    messages = []
    ctx = ForgeContext(log=messages.append)
    ctx.set_project_dir(proj)
    assert ctx.master_seed == DEFAULT_MASTER_SEED
    assert messages and messages[0].startswith("[project]")


def test_derived_rngs_follow_master_seed(ctx):
    a = ctx.derive_rng("maze", 16).random()
    assert ctx.derive_rng("maze", 16).random() == a
    assert ctx.derive_rng("random", 16).random() != a

    ctx.project_settings["master_seed"] = 7
    assert ctx.derive_rng("maze", 16).random() != a


def test_project_json_helpers(ctx):
    ctx.save_json("boards/vault.json", {"name": "Vault"})
    assert ctx.load_json("boards/vault.json") == {"name": "Vault"}
    assert ctx.load_json("boards/missing.json", default=[]) == []
    with pytest.raises(ValueError):
        ctx.save_json("../escape.json", {})


def test_settings_persist(ctx):
    ctx.project_settings["master_seed"] = 99
    ctx.save_project_settings()
    data = json.loads((ctx.project_dir / "project.json").read_text(encoding="utf-8"))
    assert data["master_seed"] == 99


def test_export_paths(ctx):
    path = ctx.export_path("Dragon Lair", "json", timestamp=False, seed=3)
    assert path.name == "dragon-lair_seed3.json"
    ctx.project_settings["export_subdir"] = "boards"
    assert ctx.export_path("x", "md", timestamp=False).parent.name == "boards"


def test_board_pack_writers(tmp_path):
    em = ExportManager(tmp_path)
    pack = em.create_board_pack("!!!")
    assert pack.parent == tmp_path / "exports" / "board_packs"
    assert pack.name.endswith("_board")
    js = em.write(pack, "board.json", {"a": 1})
    assert json.loads(js.read_text(encoding="utf-8")) == {"a": 1}
    assert em.write(pack, "board.txt", "#.").read_text(encoding="utf-8") == "#."


def test_slugify():
    assert slugify("Dragon Lair") == "dragon-lair"
    assert slugify("Untitled_Board") == "untitled_board"
    assert slugify("", fallback="x") == "x"
