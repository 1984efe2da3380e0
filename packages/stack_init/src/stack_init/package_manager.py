"""
Package-manager profiles for the generated project.

A profile captures the three things the customizer needs to know about the tool managing the
project's dependencies: the alias used for one-off binaries, the lockfile name, and how to build a
`run <script>` command line.
"""

from __future__ import annotations

import os
import shlex
import shutil
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Mapping

from packaging.version import Version

from stack_init.errors import StackInitError

PACKAGE_MANAGERS: tuple[str, ...] = ("npm", "pnpm", "yarn")
DEFAULT_PACKAGE_MANAGER = "npm"

# pnpm changed how `run` forwards arguments in 7.0 and grew `pnpm exec` in 6.13.
_PNPM_NO_DOUBLE_DASH = Version("7.0.0")
_PNPM_EXEC = Version("6.13.0")


def _eprint(*args: object) -> None:
    print(*args, file=sys.stderr)


class PackageManagerError(StackInitError, ValueError):
    pass


@dataclass(frozen=True)
class PackageManagerProfile:
    name: str
    exec: str
    lockfile: str | None
    run_prefix: tuple[str, ...]
    double_dash_before_args: bool = False

    def run(self, script: str, args: str | None = None) -> str:
        """Return the shell command that runs `script` from package.json."""
        parts = [*self.run_prefix, script]
        if args:
            if self.double_dash_before_args:
                parts.append("--")
            parts.append(args)
        return " ".join(parts)


VersionProbe = Callable[[str], str]


def get_package_manager_version(package_manager: str) -> str:
    try:
        cp = subprocess.run(
            _resolve_argv([package_manager, "--version"]),
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=True,
        )
    except FileNotFoundError as exc:
        raise PackageManagerError(f"Command not found: {package_manager!r}") from exc
    return cp.stdout.strip()


def _npm_profile(_probe: VersionProbe) -> PackageManagerProfile:
    return PackageManagerProfile(
        name="npm",
        exec="npx",
        lockfile="package-lock.json",
        run_prefix=("npm", "run"),
        double_dash_before_args=True,
    )


def _pnpm_profile(probe: VersionProbe) -> PackageManagerProfile:
    version = Version(probe("pnpm"))
    return PackageManagerProfile(
        name="pnpm",
        exec="pnpm exec" if version >= _PNPM_EXEC else "pnpx",
        lockfile="pnpm-lock.yaml",
        run_prefix=("pnpm", "run"),
        double_dash_before_args=version < _PNPM_NO_DOUBLE_DASH,
    )


def _yarn_profile(_probe: VersionProbe) -> PackageManagerProfile:
    return PackageManagerProfile(
        name="yarn",
        exec="yarn",
        lockfile="yarn.lock",
        run_prefix=("yarn",),
    )


_PROFILE_BUILDERS: dict[str, Callable[[VersionProbe], PackageManagerProfile]] = {
    "npm": _npm_profile,
    "pnpm": _pnpm_profile,
    "yarn": _yarn_profile,
}


def get_package_manager_profile(
    package_manager: str,
    *,
    version_probe: VersionProbe | None = None,
) -> PackageManagerProfile:
    """
    Resolve the invocation conventions for `package_manager`.

    Parameters
    ----------
    package_manager:
        One of ``PACKAGE_MANAGERS``.
    version_probe:
        Returns the installed version string for a manager; defaults to running `<manager> --version`.
        Only consulted for managers whose command syntax depends on their version (pnpm).

    Raises
    ------
    PackageManagerError
        Unknown manager name, or the manager binary is missing when probed.
    """

    builder = _PROFILE_BUILDERS.get(package_manager)
    if builder is None:
        allowed = ", ".join(PACKAGE_MANAGERS)
        raise PackageManagerError(f"Unsupported package manager: {package_manager!r} (allowed: {allowed}).")
    return builder(version_probe or get_package_manager_version)


def detect_package_manager(env: Mapping[str, str] | None = None) -> str:
    """Pick the manager that launched us from `npm_config_user_agent`, falling back to npm."""
    if env is None:
        env = os.environ
    user_agent = (env.get("npm_config_user_agent") or "").strip()
    if not user_agent:
        return DEFAULT_PACKAGE_MANAGER
    name = user_agent.split(" ", 1)[0].split("/", 1)[0].strip().lower()
    if name in PACKAGE_MANAGERS:
        return name
    return DEFAULT_PACKAGE_MANAGER


def _resolve_argv(argv: list[str]) -> list[str]:
    """Resolve argv[0] via PATH.

    On Windows the package managers are usually `.cmd` shims, which `subprocess.run()` cannot execute
    directly, so they are invoked via `cmd.exe /c`.
    """

    if not argv:
        raise PackageManagerError("Internal error: empty argv")

    cmd = argv[0]
    if any(sep and sep in cmd for sep in ("/", "\\", os.path.sep, os.path.altsep)):
        return argv

    resolved = shutil.which(cmd)
    if resolved is None:
        return argv

    if os.name == "nt":
        suffix = Path(resolved).suffix.lower()
        if suffix in {".cmd", ".bat"}:
            comspec = os.environ.get("ComSpec", "cmd.exe")
            return [comspec, "/d", "/c", resolved, *argv[1:]]

    return [resolved, *argv[1:]]


def run_script(
    profile: PackageManagerProfile,
    script: str,
    args: str | None = None,
    *,
    cwd: Path,
) -> subprocess.CompletedProcess[str]:
    """Run a package.json script in the foreground, inheriting stdio."""
    command = profile.run(script, args)
    argv = shlex.split(command)
    _eprint(f"+ ({cwd}) {command}")
    try:
        cp = subprocess.run(_resolve_argv(argv), cwd=str(cwd), text=True, check=False)
    except FileNotFoundError as exc:
        raise PackageManagerError(f"Command not found: {argv[0]!r}") from exc
    except OSError as exc:
        raise PackageManagerError(f"Failed to execute {argv[0]!r}: {exc}") from exc
    if cp.returncode != 0:
        raise PackageManagerError(f"`{command}` failed with exit code {cp.returncode}.")
    return cp
