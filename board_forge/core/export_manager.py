from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional
import json
import re
import time

STAMP_FORMAT = "%Y%m%d_%H%M%S"


def slugify(text: str, fallback: str = "board") -> str:
    words = re.findall(r"[a-z0-9_\-]+", (text or "").lower())
    return "-".join(words)[:60] or fallback


@dataclass
class ExportManager:
    """Where exported boards land: project_dir/exports, plus an optional subfolder."""

    project_dir: Path
    subdir: str = ""

    @property
    def root(self) -> Path:
        p = self.project_dir / "exports"
        if self.subdir:
            p = p / self.subdir
        p.mkdir(parents=True, exist_ok=True)
        return p

    @staticmethod
    def stem(title: str, *, timestamp: bool = True, seed: Optional[int] = None) -> str:
        parts = [time.strftime(STAMP_FORMAT)] if timestamp else []
        parts.append(slugify(title))
        if seed is not None:
            parts.append(f"seed{seed}")
        return "_".join(parts)

    def export_path(self, title: str, ext: str, *, timestamp: bool = True, seed: Optional[int] = None) -> Path:
        return self.root / f"{self.stem(title, timestamp=timestamp, seed=seed)}.{ext.lstrip('.')}"

    def create_board_pack(self, title: str, *, seed: Optional[int] = None) -> Path:
        path = self.root / "board_packs" / self.stem(title, seed=seed)
        path.mkdir(parents=True, exist_ok=True)
        return path

    def write(self, pack_dir: Path, filename: str, content: Any) -> Path:
        """Strings are written as-is, anything else as indented JSON."""
        if not isinstance(content, str):
            content = json.dumps(content, indent=2, ensure_ascii=False)
        p = pack_dir / filename
        p.write_text(content, encoding="utf-8")
        return p
