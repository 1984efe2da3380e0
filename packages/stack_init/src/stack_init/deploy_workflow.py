"""
Load, edit and dump the GitHub Actions deploy workflow.

PyYAML resolves scalars with YAML 1.1 rules by default, which turns the workflow's `on:` trigger
key into the boolean ``True``. The loader below only treats ``true``/``false`` as booleans so the
document round-trips with its keys intact.
"""

from __future__ import annotations

import re
from typing import Any

import yaml

from stack_init.errors import StackInitError

TYPECHECK_JOB = "typecheck"
DEPLOY_JOB = "deploy"


class WorkflowError(StackInitError, RuntimeError):
    pass


class _WorkflowLoader(yaml.SafeLoader):
    pass


_WorkflowLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != "tag:yaml.org,2002:bool"]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
_WorkflowLoader.add_implicit_resolver(
    "tag:yaml.org,2002:bool",
    re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$"),
    list("tTfF"),
)


class _WorkflowDumper(yaml.SafeDumper):
    pass


# Same scalar rules on the way out, so `on` is emitted bare instead of quoted.
_WorkflowDumper.yaml_implicit_resolvers = _WorkflowLoader.yaml_implicit_resolvers


def _represent_str(dumper: yaml.SafeDumper, value: str) -> yaml.ScalarNode:
    if "\n" in value:
        return dumper.represent_scalar("tag:yaml.org,2002:str", value, style="|")
    return dumper.represent_scalar("tag:yaml.org,2002:str", value)


_WorkflowDumper.add_representer(str, _represent_str)


def load_workflow(text: str) -> dict[str, Any]:
    try:
        doc = yaml.load(text, Loader=_WorkflowLoader)  # noqa: S506 - SafeLoader subclass
    except yaml.YAMLError as e:
        raise WorkflowError(f"Failed to parse deploy workflow: {e}") from e
    if not isinstance(doc, dict):
        raise WorkflowError("Unexpected deploy workflow shape (expected mapping).")
    return doc


def dump_workflow(doc: dict[str, Any]) -> str:
    return yaml.dump(
        doc,
        Dumper=_WorkflowDumper,
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
        width=4096,
    )


def remove_typecheck_job(doc: dict[str, Any]) -> dict[str, Any]:
    """Drop the `typecheck` job and the `deploy` job's dependency on it, in place."""
    jobs = doc.get("jobs")
    if not isinstance(jobs, dict):
        raise WorkflowError("Deploy workflow has no `jobs` mapping.")

    deploy = jobs.get(DEPLOY_JOB)
    if not isinstance(deploy, dict):
        raise WorkflowError(f"Deploy workflow has no `jobs.{DEPLOY_JOB}` job.")

    jobs.pop(TYPECHECK_JOB, None)

    needs = deploy.get("needs")
    if needs is None:
        return doc
    if isinstance(needs, str):
        needs = [needs]
    if not isinstance(needs, list):
        raise WorkflowError(f"Invalid `jobs.{DEPLOY_JOB}.needs` (expected list).")
    deploy["needs"] = [need for need in needs if need != TYPECHECK_JOB]
    return doc
