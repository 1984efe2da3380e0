"""
Post-clone customization of a freshly generated stack.

Renames the app, drops TypeScript-only tooling for the JavaScript variant, then runs the package
manager's formatter. Meant to run exactly once against a new scaffold: there is no rollback if a
write fails midway, and running it a second time is not guaranteed to be a no-op.
"""

from __future__ import annotations

import asyncio
import shutil
from pathlib import Path
from typing import Any, Awaitable, Callable

from stack_init.deploy_workflow import dump_workflow, load_workflow, remove_typecheck_job
from stack_init.fly_toml import patch_fly_toml
from stack_init.naming import generate_app_name
from stack_init.package_json import PackageJson, update_package_json
from stack_init.package_manager import PackageManagerProfile, get_package_manager_profile, run_script
from stack_init.text_patches import add_lockfile_to_dockerfile, replace_placeholder, use_js_test_setup

FORMAT_SCRIPT = "format"
FORMAT_ARGS = "--loglevel warn"
DEV_SCRIPT = "dev"


def _read_text(path: Path) -> Awaitable[str]:
    return asyncio.to_thread(path.read_text, encoding="utf-8")


def _write_text(path: Path, text: str) -> Awaitable[int]:
    return asyncio.to_thread(path.write_text, text, encoding="utf-8")


async def _read_unless_typescript(
    is_typescript: bool,
    path: Path,
    parse: Callable[[str], Any] | None = None,
) -> Any:
    if is_typescript:
        return None
    text = await _read_text(path)
    return parse(text) if parse is not None else text


def completion_message(profile: PackageManagerProfile) -> str:
    return (
        "Setup is complete. You're now ready to rock and roll 🤘\n"
        "\n"
        f"Start development with `{profile.run(DEV_SCRIPT)}`"
    )


async def customize(
    *,
    is_typescript: bool,
    package_manager: str,
    root_directory: Path | str,
    run_format: bool = True,
) -> str:
    """
    Customize the generated project in `root_directory` and return the new app name.

    Parameters
    ----------
    is_typescript:
        Keep the TypeScript tooling. When false the typecheck job, script and `ts-node` are removed.
    package_manager:
        One of ``stack_init.package_manager.PACKAGE_MANAGERS``.
    root_directory:
        Root of the freshly generated project.
    run_format:
        Run the project's `format` script once the files are rewritten.
    """

    root = Path(root_directory)
    pm = get_package_manager_profile(package_manager)
    file_extension = "ts" if is_typescript else "js"

    readme_path = root / "README.md"
    fly_toml_path = root / "fly.toml"
    deploy_workflow_path = root / ".github" / "workflows" / "deploy.yml"
    dockerfile_path = root / "Dockerfile"
    vitest_config_path = root / f"vitest.config.{file_extension}"

    app_name = generate_app_name(root)

    (
        prod_content,
        readme,
        dockerfile,
        deploy_workflow,
        vitest_config,
        package_json,
    ) = await asyncio.gather(
        _read_text(fly_toml_path),
        _read_text(readme_path),
        _read_text(dockerfile_path),
        _read_unless_typescript(is_typescript, deploy_workflow_path, load_workflow),
        _read_unless_typescript(is_typescript, vitest_config_path),
        asyncio.to_thread(PackageJson.load, root),
    )

    new_prod_content = patch_fly_toml(prod_content, app_name)
    new_readme = replace_placeholder(readme, app_name)
    new_dockerfile = add_lockfile_to_dockerfile(dockerfile, pm.lockfile)
    update_package_json(package_json, app_name=app_name, is_typescript=is_typescript)
    if not is_typescript:
        new_deploy_workflow = dump_workflow(remove_typecheck_job(deploy_workflow))
        new_vitest_config = use_js_test_setup(vitest_config)

    # Nothing below may fail on content: every patch is computed before the first write starts.
    file_operations: list[Awaitable[Any]] = [
        _write_text(fly_toml_path, new_prod_content),
        _write_text(readme_path, new_readme),
        _write_text(dockerfile_path, new_dockerfile),
        asyncio.to_thread(package_json.save),
        asyncio.to_thread(shutil.copyfile, root / "remix.init" / "gitignore", root / ".gitignore"),
        asyncio.to_thread((root / ".github" / "dependabot.yml").unlink),
    ]
    if not is_typescript:
        file_operations.append(_write_text(deploy_workflow_path, new_deploy_workflow))
        file_operations.append(_write_text(vitest_config_path, new_vitest_config))

    await asyncio.gather(*file_operations)

    if run_format:
        run_script(pm, FORMAT_SCRIPT, FORMAT_ARGS, cwd=root)

    print(completion_message(pm))
    return app_name


def run(
    *,
    is_typescript: bool,
    package_manager: str,
    root_directory: Path | str,
    run_format: bool = True,
) -> str:
    return asyncio.run(
        customize(
            is_typescript=is_typescript,
            package_manager=package_manager,
            root_directory=root_directory,
            run_format=run_format,
        )
    )
