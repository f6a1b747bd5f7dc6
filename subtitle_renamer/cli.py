import argparse
import os
import sys
from pathlib import Path

from .constants import (
    ENV_EPISODE_EXT, ENV_SUBTITLE_EXT, ENV_EPISODE_PATTERN, ENV_SUBTITLE_PATTERN,
    RENAMED, UNCHANGED, MISSING, EXISTS,
)
from .io_ops import NoMatchesError, apply_plan, list_directory
from .matching import RenameRequest, build_plan


def _print_section(title: str, lines: list[str]):
    print(f"{title}:")
    for line in lines:
        print(f"  {line}")


def _report(result):
    m = result.match
    if result.outcome == RENAMED:
        print(f"RENAME: {m.subtitle_file} -> {m.target}")
    elif result.outcome == UNCHANGED:
        print(f"SKIP UNCHANGED: {m.subtitle_file}")
    elif result.outcome == MISSING:
        print(f"SKIP MISSING: {m.subtitle_file}")
    elif result.outcome == EXISTS:
        print(f"SKIP EXISTS: {m.subtitle_file} -> {m.target}")
    else:
        print(f"ERROR: {m.subtitle_file} ({result.message})")


def main():
    ap = argparse.ArgumentParser(description="Rename subtitle files after the episode files they belong to.")
    ap.add_argument("directory")
    ap.add_argument("--episode-ext", default=os.environ.get(ENV_EPISODE_EXT, ""))
    ap.add_argument("--subtitle-ext", default=os.environ.get(ENV_SUBTITLE_EXT, ""))
    # the number is read from the named group "value", e.g. e(?<value>\d+)
    ap.add_argument("--episode-pattern", default=os.environ.get(ENV_EPISODE_PATTERN, ""))
    ap.add_argument("--subtitle-pattern", default=os.environ.get(ENV_SUBTITLE_PATTERN, ""))
    ap.add_argument("--dry-run", action="store_true")
    args = ap.parse_args()

    directory = Path(args.directory).expanduser().resolve()
    try:
        files = list_directory(directory)
    except OSError as e:
        ap.error(str(e))

    plan = build_plan(RenameRequest(
        files=tuple(files),
        episode_extension=args.episode_ext,
        subtitle_extension=args.subtitle_ext,
        episode_pattern=args.episode_pattern,
        subtitle_pattern=args.subtitle_pattern,
    ))

    _print_section("Episode files", [f"{ep}: {name}" for ep, name in plan.episode_files])
    _print_section("Subtitle files", [f"{ep}: {name}" for ep, name in plan.subtitle_files])
    _print_section("Matching files", [f"{m.episode}: {m.episode_file} <- {m.subtitle_file}" for m in plan.matches])
    for ep, names in plan.duplicates.items():
        print(f"WARN DUPLICATE: episode {ep} has {len(names)} subtitles, using {names[-1]}")

    try:
        results = apply_plan(directory, plan, dry_run=args.dry_run)
    except NoMatchesError as e:
        print(e)
        sys.exit(1)

    for result in results:
        _report(result)
    print("Done.")
