from __future__ import annotations

import re
import secrets
from pathlib import Path

PLACEHOLDER = "symphonic-stack-template"

_APP_NAME_DISALLOWED_RE = re.compile(r"[^a-zA-Z0-9_-]")


def random_suffix(num_bytes: int = 2) -> str:
    return secrets.token_hex(num_bytes)


def sanitize_app_name(raw: str) -> str:
    return _APP_NAME_DISALLOWED_RE.sub("-", raw)


def generate_app_name(root_directory: Path | str, *, suffix: str | None = None) -> str:
    """
    Derive the deployed app name from the project directory.

    The directory name gets a short random hex suffix (collision avoidance between scaffolds, not
    a secret) and anything Fly would reject in an app name becomes `-`.
    """

    dir_name = Path(root_directory).resolve().name
    if suffix is None:
        suffix = random_suffix()
    return sanitize_app_name(f"{dir_name}-{suffix}")
