from __future__ import annotations

from stack_init.naming import PLACEHOLDER

DOCKERFILE_MANIFEST_ADD = "ADD package.json"
TS_TEST_SETUP = "setup-test-env.ts"
JS_TEST_SETUP = "setup-test-env.js"


def replace_placeholder(text: str, app_name: str, *, placeholder: str = PLACEHOLDER) -> str:
    return text.replace(placeholder, app_name)


def add_lockfile_to_dockerfile(text: str, lockfile: str | None) -> str:
    """Copy the lockfile into the image next to package.json so installs are reproducible."""
    if not lockfile:
        return text
    return text.replace(DOCKERFILE_MANIFEST_ADD, f"{DOCKERFILE_MANIFEST_ADD} {lockfile}")


def use_js_test_setup(text: str) -> str:
    return text.replace(TS_TEST_SETUP, JS_TEST_SETUP, 1)
