"""Shared fixtures for all test modules."""

import json

import pytest

from atomflow.config import Config
from atomflow.logging.logger import EventLogger


@pytest.fixture
def tmp_config(tmp_path):
    """Config pointing to a temp directory -- fresh log dir per test."""
    config = Config(base_dir=tmp_path / ".atomflow")
    config.ensure_dirs()
    return config


@pytest.fixture
def event_logger(tmp_config):
    """EventLogger writing to temp dir."""
    return EventLogger(tmp_config.log_dir)


# -----------------------------------------------------------------------
# Atom fixtures (camelCase JSON, as the upstream extractor emits it)
# -----------------------------------------------------------------------


@pytest.fixture
def project_atoms() -> list[dict]:
    """Three files: app.js calls add() from math.js, which calls format() in fmt.js."""
    return [
        {
            "id": "app.js::main",
            "name": "main",
            "filePath": "app.js",
            "line": 3,
            "isExported": True,
            "imports": [{"source": "./math"}],
            "calls": [
                {
                    "name": "add",
                    "line": 5,
                    "args": [
                        {"type": "Identifier", "name": "x"},
                        {"type": "Identifier", "name": "y"},
                    ],
                },
                {"name": "log", "line": 6},
            ],
            "dataFlow": {
                "inputs": [{"name": "x", "type": "simple", "position": 0}],
                "outputs": [{"type": "side_effect", "target": "console"}],
                "transformations": [],
            },
            "code": "function main(x) {\n  const y = 2;\n  const total = add(x, y);\n  log(total);\n}",
        },
        {
            "id": "math.js::add",
            "name": "add",
            "filePath": "math.js",
            "isExported": True,
            "imports": [{"source": "./fmt"}],
            "calls": [
                {
                    "name": "format",
                    "line": 2,
                    "args": [{"type": "Identifier", "name": "a"}],
                }
            ],
            "dataFlow": {
                "inputs": [
                    {"name": "a", "type": "simple", "position": 0},
                    {"name": "b", "type": "simple", "position": 1},
                ],
                "outputs": [{"type": "return"}],
                "transformations": [
                    {"to": "sum", "from": ["a", "b"], "operation": "binary_operation"}
                ],
            },
        },
        {
            "id": "fmt.js::format",
            "name": "format",
            "filePath": "fmt.js",
            "isExported": True,
            "dataFlow": {
                "inputs": [{"name": "value", "type": "simple", "position": 0}],
                "outputs": [{"type": "return"}],
                "transformations": [
                    {"to": "text", "from": ["value"], "operation": "template_literal"}
                ],
            },
        },
    ]


@pytest.fixture
def atoms_file(tmp_path, project_atoms):
    """project_atoms written to a JSON file."""
    path = tmp_path / "atoms.json"
    path.write_text(json.dumps(project_atoms), encoding="utf-8")
    return path
