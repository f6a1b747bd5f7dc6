import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture
def tmp_tree(tmp_path: Path):
    """Returns a tiny factory to create test files with content and return paths."""
    def _make(rel: str, data: bytes | str = b"x" * 64) -> Path:
        p = tmp_path / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(data, str):
            data = data.encode("utf-8")
        p.write_bytes(data)
        return p
    return _make


@pytest.fixture
def show_dir(tmp_tree, tmp_path):
    """A season folder whose subtitles are named differently from the episodes."""
    for n in (1, 2, 3):
        tmp_tree(f"show/Show.S01E0{n}.mkv", b"video")
    tmp_tree("show/[Group] Show - 01.ass", "sub one")
    tmp_tree("show/[Group] Show - 02.ass", "sub two")
    tmp_tree("show/notes.txt", "notes")
    return tmp_path / "show"
