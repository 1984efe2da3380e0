from __future__ import annotations

import json
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from stack_init.errors import StackInitError

PACKAGE_JSON = "package.json"
TYPESCRIPT_ONLY_DEV_DEPENDENCIES: tuple[str, ...] = ("ts-node",)

_INDENT_RE = re.compile(r"^\{\r?\n([ \t]+)\S")


class PackageJsonError(StackInitError, ValueError):
    pass


@dataclass
class PackageJson:
    """A loaded package.json that is written back with its original indentation and line endings."""

    path: Path
    content: dict[str, Any]
    indent: str = "  "
    newline: str = "\n"

    @classmethod
    def load(cls, directory: Path) -> PackageJson:
        path = Path(directory) / PACKAGE_JSON
        try:
            # Bytes, so CRLF survives long enough to be detected.
            text = path.read_bytes().decode("utf-8")
        except FileNotFoundError as e:
            raise PackageJsonError(f"Missing package.json: {path}") from e
        try:
            content = json.loads(text)
        except json.JSONDecodeError as e:
            raise PackageJsonError(f"Failed to parse package.json: {path}: {e}") from e
        if not isinstance(content, dict):
            raise PackageJsonError(f"Unexpected package.json shape (expected object): {path}")

        match = _INDENT_RE.match(text)
        indent = match.group(1) if match else "  "
        newline = "\r\n" if "\r\n" in text else "\n"
        return cls(path=path, content=content, indent=indent, newline=newline)

    def update(self, **fields: Any) -> None:
        self.content.update(fields)

    def dumps(self) -> str:
        text = json.dumps(self.content, indent=self.indent, ensure_ascii=False) + "\n"
        if self.newline != "\n":
            text = text.replace("\n", self.newline)
        return text

    def save(self) -> None:
        self.path.write_text(self.dumps(), encoding="utf-8", newline="")


def _without_keys(mapping: dict[str, Any], keys: tuple[str, ...]) -> dict[str, Any]:
    return {k: v for k, v in mapping.items() if k not in keys}


def update_package_json(pkg: PackageJson, *, app_name: str, is_typescript: bool) -> None:
    """
    Rename the app and, for the JavaScript variant, strip the TypeScript tooling.

    The `typecheck` and `validate` scripts always end up last in `scripts`; in the JavaScript
    variant `typecheck` is dropped and `validate` stops invoking it.
    """

    content = pkg.content
    dev_dependencies = content.get("devDependencies")
    scripts = content.get("scripts")
    if scripts is None:
        scripts = {}
    if not isinstance(scripts, dict):
        raise PackageJsonError("Invalid `scripts` in package.json (expected object).")

    typecheck = scripts.get("typecheck")
    validate = scripts.get("validate")
    new_scripts = _without_keys(scripts, ("typecheck", "validate"))

    fields: dict[str, Any] = {"name": app_name}
    if is_typescript:
        if typecheck is not None:
            new_scripts["typecheck"] = typecheck
        if validate is not None:
            new_scripts["validate"] = validate
    else:
        if isinstance(dev_dependencies, dict):
            fields["devDependencies"] = _without_keys(dev_dependencies, TYPESCRIPT_ONLY_DEV_DEPENDENCIES)
        if isinstance(validate, str):
            new_scripts["validate"] = validate.replace(" typecheck", "", 1)
        elif validate is not None:
            new_scripts["validate"] = validate

    if "scripts" in content:
        fields["scripts"] = new_scripts
    pkg.update(**fields)
