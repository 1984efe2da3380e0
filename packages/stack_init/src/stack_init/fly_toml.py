from __future__ import annotations

from tomlkit import dumps as toml_dumps
from tomlkit import parse as toml_parse

from stack_init.errors import StackInitError
from stack_init.naming import PLACEHOLDER


class FlyTomlError(StackInitError, RuntimeError):
    pass


def patch_fly_toml(text: str, app_name: str, *, placeholder: str = PLACEHOLDER) -> str:
    try:
        doc = toml_parse(text)
    except Exception as e:
        raise FlyTomlError(f"Failed to parse fly.toml: {e}") from e

    app = doc.get("app")
    if not isinstance(app, str):
        raise FlyTomlError("Missing/invalid `app` in fly.toml (expected string).")

    doc["app"] = str(app).replace(placeholder, app_name, 1)
    return toml_dumps(doc)
