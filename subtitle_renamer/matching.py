from dataclasses import dataclass, field
from functools import lru_cache
from typing import Iterable, Optional, Sequence
import re

from .constants import EPISODE_GROUP, GROUP_NAME_RE, DIGITS_RE

ClassifiedFile = tuple[Optional[int], str]


@dataclass(frozen=True)
class RenameRequest:
    """Raw inputs of one recomputation: the directory listing plus the four text fields."""
    files: tuple[str, ...] = ()
    episode_extension: str = ""
    subtitle_extension: str = ""
    episode_pattern: str = ""
    subtitle_pattern: str = ""


@dataclass(frozen=True)
class Match:
    episode: int
    episode_file: str
    subtitle_file: str
    target: str

    @property
    def needs_rename(self) -> bool:
        return self.subtitle_file != self.target


@dataclass(frozen=True)
class RenamePlan:
    episode_extension: str
    subtitle_extension: str
    episode_files: list[ClassifiedFile] = field(default_factory=list)
    subtitle_files: list[ClassifiedFile] = field(default_factory=list)
    matches: list[Match] = field(default_factory=list)
    duplicates: dict[int, list[str]] = field(default_factory=dict)


def normalize_extension(value: str) -> str:
    return value.lstrip(".")


def _to_python_regex(pattern: str) -> str:
    """Rewrite JS-style ``(?<name>`` groups and ``\\k<name>`` backrefs to Python syntax."""
    out = []
    i, n = 0, len(pattern)
    in_class = False
    while i < n:
        c = pattern[i]
        if c == "\\":
            if not in_class and pattern.startswith("k<", i + 1):
                m = GROUP_NAME_RE.match(pattern, i + 3)
                if m and pattern.startswith(">", m.end()):
                    out.append(f"(?P={m.group()})")
                    i = m.end() + 1
                    continue
            out.append(pattern[i:i + 2])
            i += 2
            continue
        if in_class:
            if c == "]":
                in_class = False
        elif c == "[":
            in_class = True
            # "]" right after "[" or "[^" is a literal
            j = i + 1
            if pattern.startswith("^", j):
                j += 1
            if pattern.startswith("]", j):
                j += 1
            out.append(pattern[i:j])
            i = j
            continue
        elif pattern.startswith("(?<", i) and GROUP_NAME_RE.match(pattern, i + 3):
            out.append("(?P<")
            i += 3
            continue
        out.append(c)
        i += 1
    return "".join(out)


@lru_cache(maxsize=64)
def compile_pattern(pattern: str) -> Optional[re.Pattern]:
    """Compile a user pattern, or None while it is malformed (e.g. half-typed)."""
    try:
        return re.compile(_to_python_regex(pattern))
    except re.error:
        return None


def extract_episode_number(filename: str, pattern: str) -> Optional[int]:
    """
    Episode number captured by the ``value`` group of `pattern` in `filename`.

    None when the pattern does not compile, does not match, leaves the group
    unset, or captures anything other than decimal digits.
    """
    regex = compile_pattern(pattern)
    if regex is None:
        return None
    m = regex.search(filename)
    if not m:
        return None
    raw = m.groupdict().get(EPISODE_GROUP)
    if raw is None or not DIGITS_RE.fullmatch(raw):
        return None
    return int(raw)


def classify(files: Iterable[str], extension: str, pattern: str) -> list[ClassifiedFile]:
    suffix = f".{extension}"
    return [(extract_episode_number(name, pattern), name) for name in files if name.endswith(suffix)]


def subtitles_by_episode(subtitle_files: Iterable[ClassifiedFile]) -> dict[int, str]:
    # later files overwrite earlier ones sharing an episode number
    return {episode: name for episode, name in subtitle_files if episode is not None}


def find_duplicates(subtitle_files: Iterable[ClassifiedFile]) -> dict[int, list[str]]:
    seen: dict[int, list[str]] = {}
    for episode, name in subtitle_files:
        if episode is not None:
            seen.setdefault(episode, []).append(name)
    return {ep: names for ep, names in seen.items() if len(names) > 1}


def pair(episode_files: Sequence[ClassifiedFile], subtitle_files: Sequence[ClassifiedFile]) -> list[tuple[int, str]]:
    by_episode = subtitles_by_episode(subtitle_files)
    return [(ep, name) for ep, name in episode_files if ep is not None and ep in by_episode]


def derive_subtitle_name(episode_file: str, episode_extension: str, subtitle_extension: str) -> str:
    suffix = f".{episode_extension}"
    if not episode_file.endswith(suffix):
        raise ValueError(f"{episode_file!r} does not end with {suffix!r}")
    return f"{episode_file[:len(episode_file) - len(suffix)]}.{subtitle_extension}"


def build_plan(request: RenameRequest) -> RenamePlan:
    episode_ext = normalize_extension(request.episode_extension)
    subtitle_ext = normalize_extension(request.subtitle_extension)
    episode_files = classify(request.files, episode_ext, request.episode_pattern)
    subtitle_files = classify(request.files, subtitle_ext, request.subtitle_pattern)

    by_episode = subtitles_by_episode(subtitle_files)
    matches = [
        Match(
            episode=ep,
            episode_file=name,
            subtitle_file=by_episode[ep],
            target=derive_subtitle_name(name, episode_ext, subtitle_ext),
        )
        for ep, name in pair(episode_files, subtitle_files)
    ]
    return RenamePlan(
        episode_extension=episode_ext,
        subtitle_extension=subtitle_ext,
        episode_files=episode_files,
        subtitle_files=subtitle_files,
        matches=matches,
        duplicates=find_duplicates(subtitle_files),
    )
