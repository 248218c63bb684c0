from __future__ import annotations

import pytest

from repogrok.config import RepoFile


@pytest.fixture
def module_files() -> list[RepoFile]:
    """Three JavaScript modules: index and app both import utils, app also imports index."""
    return [
        RepoFile(
            path="index.js",
            content='import { helper } from "./utils.js";\nexport const main = () => helper();\n',
        ),
        RepoFile(path="utils.js", content="export function helper() {\n  return 1;\n}\n"),
        RepoFile(
            path="app.js",
            content='import { helper } from "./utils.js";\nimport { main } from "./index.js";\nmain(helper);\n',
        ),
    ]


@pytest.fixture
def precedence_files() -> list[RepoFile]:
    """A manifest, an entry point and a test file of 10 tokens each."""
    body = "x" * 40
    return [
        RepoFile(path="test/big.test.js", content=body),
        RepoFile(path="package.json", content=body),
        RepoFile(path="src/index.js", content=body),
    ]
