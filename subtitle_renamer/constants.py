import re

# name of the capture group carrying the episode number
EPISODE_GROUP = "value"

GROUP_NAME_RE = re.compile(r"[A-Za-z_]\w*")

DIGITS_RE = re.compile(r"\d+", re.ASCII)

ENV_EPISODE_EXT      = "SUBTITLE_RENAMER_EPISODE_EXT"
ENV_SUBTITLE_EXT     = "SUBTITLE_RENAMER_SUBTITLE_EXT"
ENV_EPISODE_PATTERN  = "SUBTITLE_RENAMER_EPISODE_PATTERN"
ENV_SUBTITLE_PATTERN = "SUBTITLE_RENAMER_SUBTITLE_PATTERN"
ENV_MEDIA_ROOT       = "MEDIA_ROOT"

# per-pair outcomes of a rename
RENAMED   = "renamed"
UNCHANGED = "unchanged"
MISSING   = "missing"
EXISTS    = "exists"
ERROR     = "error"

NO_MATCHES_MESSAGE = "No files were matched. Aborting."
