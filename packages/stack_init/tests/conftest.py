from __future__ import annotations

import json
from pathlib import Path

import pytest

FLY_TOML = """\
app = "symphonic-stack-template"
kill_signal = "SIGINT"
kill_timeout = 5

[[services]]
  internal_port = 8080
  protocol = "tcp"
"""

README = """\
# Symphonic Stack

```sh
fly apps create symphonic-stack-template
fly apps create symphonic-stack-template-staging
```
"""

DOCKERFILE = """\
FROM node:18-bullseye-slim as base
FROM base as deps
WORKDIR /myapp
ADD package.json .npmrc ./
RUN npm install --include=dev
"""

DEPLOY_YML = """\
name: Deploy
on:
  push:
    branches:
      - main
jobs:
  lint:
    runs-on: ubuntu-latest
  typecheck:
    runs-on: ubuntu-latest
  deploy:
    runs-on: ubuntu-latest
    needs: [lint, typecheck]
"""

VITEST_CONFIG = """\
export default defineConfig({
  test: {
    setupFiles: ["./test/setup-test-env.ts"],
  },
});
"""

PACKAGE_JSON = {
    "name": "symphonic-stack-template",
    "private": True,
    "scripts": {
        "dev": "remix dev",
        "format": "prettier --write .",
        "lint": "eslint .",
        "typecheck": "tsc",
        "validate": "run-p \"test -- --run\" lint typecheck",
    },
    "devDependencies": {"prettier": "^2.8.7", "ts-node": "^10.9.1"},
}


def make_stack(root: Path, *, vitest_extension: str) -> Path:
    (root / ".github" / "workflows").mkdir(parents=True)
    (root / "remix.init").mkdir()
    (root / "fly.toml").write_text(FLY_TOML, encoding="utf-8")
    (root / "README.md").write_text(README, encoding="utf-8")
    (root / "Dockerfile").write_text(DOCKERFILE, encoding="utf-8")
    (root / ".github" / "workflows" / "deploy.yml").write_text(DEPLOY_YML, encoding="utf-8")
    (root / ".github" / "dependabot.yml").write_text("version: 2\n", encoding="utf-8")
    (root / f"vitest.config.{vitest_extension}").write_text(VITEST_CONFIG, encoding="utf-8")
    (root / "remix.init" / "gitignore").write_text("node_modules\n/build\n.env\n", encoding="utf-8")
    (root / "package.json").write_text(json.dumps(PACKAGE_JSON, indent=2) + "\n", encoding="utf-8")
    return root


@pytest.fixture
def ts_stack(tmp_path: Path) -> Path:
    root = tmp_path / "my remix.app"
    root.mkdir()
    return make_stack(root, vitest_extension="ts")


@pytest.fixture
def js_stack(tmp_path: Path) -> Path:
    root = tmp_path / "my remix.app"
    root.mkdir()
    return make_stack(root, vitest_extension="js")
