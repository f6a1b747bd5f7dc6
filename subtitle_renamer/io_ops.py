from dataclasses import dataclass
from pathlib import Path
from typing import Optional
import shutil

from .constants import RENAMED, UNCHANGED, MISSING, EXISTS, ERROR, NO_MATCHES_MESSAGE
from .matching import Match, RenamePlan


class NoMatchesError(ValueError):
    """Raised before any file is touched when a plan has nothing to rename."""

    def __init__(self, message: str = NO_MATCHES_MESSAGE):
        super().__init__(message)


@dataclass(frozen=True)
class RenameResult:
    match: Match
    outcome: str
    dry_run: bool = False
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.outcome in (RENAMED, UNCHANGED)


def list_directory(path: Path) -> list[str]:
    """Names of the regular files directly inside `path` (no recursion), sorted."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"No such directory: {path}")
    if not path.is_dir():
        raise NotADirectoryError(f"Not a directory: {path}")
    return sorted(p.name for p in path.iterdir() if p.is_file())


def move_file(src: Path, dst: Path):
    try:
        shutil.move(str(src), str(dst))
    except shutil.Error:
        shutil.copy2(src, dst)
        src.unlink(missing_ok=True)


def rename_subtitle(directory: Path, match: Match, dry_run: bool = False) -> RenameResult:
    if not match.needs_rename:
        return RenameResult(match, UNCHANGED, dry_run)

    src = directory / match.subtitle_file
    dst = directory / match.target
    if not src.is_file():
        return RenameResult(match, MISSING, dry_run, f"file {match.subtitle_file} could not be read from the directory")
    if dst.exists():
        return RenameResult(
            match, EXISTS, dry_run,
            f'subtitle file "{match.subtitle_file}" was not renamed because the operation '
            f'would overwrite an existing file with the name "{match.target}"',
        )
    if dry_run:
        return RenameResult(match, RENAMED, dry_run)
    try:
        move_file(src, dst)
    except OSError as e:
        return RenameResult(match, ERROR, dry_run, str(e))
    return RenameResult(match, RENAMED, dry_run)


def apply_plan(directory: Path, plan: RenamePlan, dry_run: bool = False) -> list[RenameResult]:
    """
    Rename every matched subtitle, one pair at a time in episode-file order.

    A failing pair is recorded and the rest still run; nothing is rolled back.
    """
    if not plan.matches:
        raise NoMatchesError()
    directory = Path(directory)
    return [rename_subtitle(directory, m, dry_run) for m in plan.matches]
