from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
import hashlib
import json
import random
from typing import Any, Callable, Dict, Optional

from .export_manager import ExportManager

PROJECT_FILE = "project.json"
BOARDS_DIR = "boards"
DEFAULT_MASTER_SEED = 1337


def seed_from_parts(*parts: Any) -> int:
    """32-bit seed from the sha256 of the parts joined by a unit separator."""
    text = "\x1f".join(str(p) for p in parts)
    return int(hashlib.sha256(text.encode("utf-8")).hexdigest()[:8], 16)


def _project_defaults(project_dir: Path) -> Dict[str, Any]:
    return {"name": project_dir.name, "master_seed": DEFAULT_MASTER_SEED, "export_subdir": ""}


@dataclass
class ForgeContext:
    """
    What a board-designer session needs from its host: a project folder for
    boards and exports, the seed all randomness is derived from, and a sink
    for one-line status messages.
    """

    project_dir: Path = field(default_factory=lambda: Path.cwd() / "projects" / "default_project")
    rng: random.Random = field(default_factory=lambda: random.Random(DEFAULT_MASTER_SEED))
    log: Callable[[str], None] = print
    project_settings: Dict[str, Any] = field(default_factory=dict)

    def set_project_dir(self, new_dir: Path) -> None:
        self.project_dir = Path(new_dir)
        self.ensure_project_dirs()
        self.load_project_settings()
        self.rng = random.Random(self.master_seed)

    @property
    def boards_dir(self) -> Path:
        return self.project_dir / BOARDS_DIR

    def ensure_project_dirs(self) -> None:
        self.boards_dir.mkdir(parents=True, exist_ok=True)
        (self.project_dir / "exports").mkdir(parents=True, exist_ok=True)

    # ---------- project.json ----------

    def load_project_settings(self) -> None:
        settings = _project_defaults(self.project_dir)
        p = self.project_dir / PROJECT_FILE
        if p.exists():
            try:
                data = json.loads(p.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError) as e:
                self.log(f"[project] Unreadable {PROJECT_FILE}, using defaults: {e}")
            else:
                if isinstance(data, dict):
                    settings.update(data)
                else:
                    self.log(f"[project] {PROJECT_FILE} is not an object, using defaults.")
        self.project_settings = settings

    def save_project_settings(self) -> None:
        self._write_json(self.project_dir / PROJECT_FILE, self.project_settings)

    # ---------- seeds ----------

    @property
    def master_seed(self) -> int:
        try:
            return int(self.project_settings.get("master_seed", DEFAULT_MASTER_SEED))
        except (TypeError, ValueError):
            return DEFAULT_MASTER_SEED

    def derive_seed(self, *parts: Any) -> int:
        """Same master seed and parts, same sub-seed."""
        return seed_from_parts(self.master_seed, *parts)

    def derive_rng(self, *parts: Any) -> random.Random:
        return random.Random(self.derive_seed(*parts))

    # ---------- project files ----------

    def _inside_project(self, relpath: str) -> Path:
        root = self.project_dir.resolve()
        p = (root / relpath).resolve()
        if p != root and root not in p.parents:
            raise ValueError(f"{relpath!r} points outside the project directory.")
        return p

    @staticmethod
    def _write_json(path: Path, data: Any) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")

    def save_json(self, relpath: str, data: Any) -> Path:
        p = self._inside_project(relpath)
        self._write_json(p, data)
        return p

    def load_json(self, relpath: str, default: Any = None) -> Any:
        p = self._inside_project(relpath)
        try:
            return json.loads(p.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return default
        except (OSError, json.JSONDecodeError) as e:
            self.log(f"[project] Could not read {relpath}: {e}")
            return default

    # ---------- exports ----------

    @property
    def export_manager(self) -> ExportManager:
        subdir = str(self.project_settings.get("export_subdir") or "").strip()
        return ExportManager(self.project_dir, subdir=subdir)

    def export_path(self, name: str, ext: str, *, timestamp: bool = True, seed: Optional[int] = None) -> Path:
        return self.export_manager.export_path(name, ext, timestamp=timestamp, seed=seed)
