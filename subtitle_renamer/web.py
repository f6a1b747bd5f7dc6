"""Web interface for subtitle_renamer."""
import os
from pathlib import Path

from flask import Flask, request, render_template, jsonify

from .constants import (
    ENV_MEDIA_ROOT, ENV_EPISODE_EXT, ENV_SUBTITLE_EXT, ENV_EPISODE_PATTERN, ENV_SUBTITLE_PATTERN,
    RENAMED, UNCHANGED,
)
from .io_ops import NoMatchesError, apply_plan, list_directory
from .matching import RenameRequest, build_plan

app = Flask(
    __name__,
    template_folder=Path(__file__).resolve().parent / "templates",
)

_FIELDS = {
    "episode_extension": ENV_EPISODE_EXT,
    "subtitle_extension": ENV_SUBTITLE_EXT,
    "episode_pattern": ENV_EPISODE_PATTERN,
    "subtitle_pattern": ENV_SUBTITLE_PATTERN,
}


class BadDirectory(Exception):
    pass


def get_media_root() -> Path:
    # Always return resolved (absolute) path so containment checks are meaningful
    return Path(os.environ.get(ENV_MEDIA_ROOT, ".")).expanduser().resolve()


def _safe_directory(media_root: Path, raw: str) -> Path | None:
    """Resolve `raw` under media_root, rejecting path traversal. Returns None if invalid."""
    try:
        resolved = (media_root / raw).resolve()
    except (ValueError, OSError):
        return None
    if resolved == media_root or media_root in resolved.parents:
        return resolved
    return None


def _read_inputs() -> tuple[str, dict[str, str]]:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = request.form
    directory = (data.get("directory") or "").strip()
    inputs = {name: str(data.get(name) or "") for name in _FIELDS}
    return directory, inputs


def _load(directory: str, inputs: dict[str, str]):
    if not directory:
        raise BadDirectory("No directory selected")
    path = _safe_directory(get_media_root(), directory)
    if path is None:
        raise BadDirectory(f"Directory {directory} is outside the media root")
    try:
        files = list_directory(path)
    except OSError as e:
        raise BadDirectory(str(e))
    return path, files, build_plan(RenameRequest(files=tuple(files), **inputs))


@app.errorhandler(BadDirectory)
def handle_bad_directory(e):
    return jsonify({"error": str(e)}), 400


@app.errorhandler(NoMatchesError)
def handle_no_matches(e):
    return jsonify({"error": str(e)}), 422


@app.route("/")
def index():
    defaults = {name: os.environ.get(env, "") for name, env in _FIELDS.items()}
    return render_template("index.html", defaults=defaults, media_root=str(get_media_root()))


@app.route("/preview", methods=["POST"])
def preview():
    directory, inputs = _read_inputs()
    path, files, plan = _load(directory, inputs)
    return jsonify({
        "directory": str(path),
        "files": files,
        "episode_files": [[ep, name] for ep, name in plan.episode_files],
        "subtitle_files": [[ep, name] for ep, name in plan.subtitle_files],
        "matches": [
            {
                "episode": m.episode,
                "episode_file": m.episode_file,
                "subtitle_file": m.subtitle_file,
                "target": m.target,
                "rename": m.needs_rename,
            }
            for m in plan.matches
        ],
        "duplicates": {str(ep): names for ep, names in plan.duplicates.items()},
    })


@app.route("/rename", methods=["POST"])
def rename():
    directory, inputs = _read_inputs()
    path, _files, plan = _load(directory, inputs)
    renamed, skipped, errors = [], [], []
    for result in apply_plan(path, plan):
        m = result.match
        if result.outcome == RENAMED:
            renamed.append({"from": m.subtitle_file, "to": m.target})
        elif result.outcome == UNCHANGED:
            skipped.append({"file": m.subtitle_file, "reason": result.outcome})
        else:
            errors.append({"file": m.subtitle_file, "reason": result.outcome, "message": result.message})
    return jsonify({"renamed": renamed, "skipped": skipped, "errors": errors})


def run_server(host: str = "127.0.0.1", port: int = 6767, debug: bool = False):
    app.run(host=host, port=port, debug=debug)


if __name__ == "__main__":
    run_server()
