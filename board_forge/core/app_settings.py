from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional
import json

from PySide6.QtCore import QSettings

from board_forge.dungeonboard.model import RandomBoardOptions


MIN_BOARD_SIZE = 8
MAX_BOARD_SIZE = 24
DEFAULT_BOARD_SIZE = 16
MIN_DECKS = 1
MAX_DECKS = 3


def _clamp(v: int, lo: int, hi: int) -> int:
    return max(lo, min(hi, v))


@dataclass
class AppSettings:
    """Thin wrapper around QSettings for Board Forge app-wide prefs.

    Pass `path` to keep the settings in an INI file instead of the
    platform store.
    """

    org: str = "BoardForge"
    app: str = "Board Forge"
    path: Optional[Path] = None

    def __post_init__(self) -> None:
        if self.path is not None:
            self._qs = QSettings(str(self.path), QSettings.IniFormat)
        else:
            self._qs = QSettings(self.org, self.app)

    def _int(self, key: str, default: int) -> int:
        v: Any = self._qs.value(key, default)
        try:
            return int(v)
        except (TypeError, ValueError):
            return default

    def sync(self) -> None:
        self._qs.sync()

    def get_last_project_dir(self) -> Optional[Path]:
        v = self._qs.value("last_project_dir", "")
        v = str(v) if v is not None else ""
        v = v.strip()
        return Path(v) if v else None

    def set_last_project_dir(self, path: Path) -> None:
        self._qs.setValue("last_project_dir", str(Path(path)))

    def get_board_size(self) -> int:
        return _clamp(self._int("board_size", DEFAULT_BOARD_SIZE), MIN_BOARD_SIZE, MAX_BOARD_SIZE)

    def set_board_size(self, size: int) -> None:
        self._qs.setValue("board_size", _clamp(int(size), MIN_BOARD_SIZE, MAX_BOARD_SIZE))

    def get_deck_count(self) -> int:
        return _clamp(self._int("deck_count", MIN_DECKS), MIN_DECKS, MAX_DECKS)

    def set_deck_count(self, count: int) -> None:
        self._qs.setValue("deck_count", _clamp(int(count), MIN_DECKS, MAX_DECKS))

    def get_random_board_options(self) -> Optional[RandomBoardOptions]:
        raw = self._qs.value("random_board_options", "")
        raw = str(raw) if raw is not None else ""
        if not raw.strip():
            return None
        try:
            return RandomBoardOptions.from_dict(json.loads(raw))
        except (json.JSONDecodeError, ValueError, AttributeError):
            return None

    def set_random_board_options(self, options: Optional[RandomBoardOptions]) -> None:
        if options is None:
            self._qs.remove("random_board_options")
        else:
            self._qs.setValue("random_board_options", json.dumps(options.to_dict()))
