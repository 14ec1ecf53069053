"""Tests for the atomflow CLI -- dna, edges, trace and duplicates commands."""

from __future__ import annotations

import json
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from atomflow.cli.main import app

runner = CliRunner()


@pytest.fixture
def invoke(tmp_config):
    """Run the CLI with Config pointed at the temp directory."""

    def _invoke(*args: str):
        with patch("atomflow.config.Config", return_value=tmp_config):
            return runner.invoke(app, list(args))

    return _invoke


def _log_events(tmp_config) -> list[str]:
    events = []
    for log_file in tmp_config.log_dir.glob("*.jsonl"):
        events.extend(json.loads(line)["event_type"] for line in log_file.read_text().splitlines())
    return events


@pytest.fixture
def bracket_atoms_file(tmp_path):
    """Route-style paths whose brackets look like rich markup."""
    atoms = [
        {
            "id": "r/[/x].js::main",
            "name": "main",
            "filePath": "r/[/x].js",
            "calls": [{"name": "f", "line": 1, "args": [{"type": "Identifier", "name": "v"}]}],
            "dataFlow": {"inputs": [{"name": "v"}]},
        },
        {
            "id": "lib/[id].js::f",
            "name": "f",
            "filePath": "lib/[id].js",
            "isExported": True,
            "dataFlow": {"inputs": [{"name": "v"}]},
        },
    ]
    path = tmp_path / "brackets.json"
    path.write_text(json.dumps(atoms), encoding="utf-8")
    return path


# -----------------------------------------------------------------------
# dna
# -----------------------------------------------------------------------


class TestDnaCommand:
    def test_json_output(self, invoke, atoms_file):
        result = invoke("dna", str(atoms_file), "--json")
        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert [d["atomId"] for d in payload] == ["app.js::main", "math.js::add", "fmt.js::format"]
        assert all(d["valid"] for d in payload)
        assert payload[1]["flowType"] == "transform-return"
        assert len(payload[1]["structuralHash"]) == 16

    def test_single_atom(self, invoke, atoms_file):
        result = invoke("dna", str(atoms_file), "--atom", "math.js::add", "--json")
        assert result.exit_code == 0
        assert [d["atomId"] for d in json.loads(result.stdout)] == ["math.js::add"]

    def test_unknown_atom_exits_1(self, invoke, atoms_file):
        result = invoke("dna", str(atoms_file), "--atom", "nope.js::x")
        assert result.exit_code == 1
        assert "Atom not found" in result.output

    def test_table_output_and_event_log(self, invoke, atoms_file, tmp_config):
        result = invoke("dna", str(atoms_file))
        assert result.exit_code == 0
        assert "DNA (3 atoms)" in result.output
        assert _log_events(tmp_config) == ["dna.extract"]

    def test_missing_file_exits_1(self, invoke, tmp_path):
        result = invoke("dna", str(tmp_path / "missing.json"))
        assert result.exit_code == 1
        assert "Could not load atoms" in result.output


# -----------------------------------------------------------------------
# edges
# -----------------------------------------------------------------------


class TestEdgesCommand:
    def test_json_output(self, invoke, atoms_file, tmp_config):
        result = invoke("edges", str(atoms_file), "--json")
        assert result.exit_code == 0
        edges = json.loads(result.stdout)
        assert [(e["callerId"], e["calleeId"]) for e in edges] == [
            ("app.js::main", "math.js::add"),
            ("math.js::add", "fmt.js::format"),
        ]
        assert edges[0]["confidence"] == 1.0
        assert _log_events(tmp_config) == ["edges.resolve"]

    def test_bracketed_paths_render_literally(self, invoke, bracket_atoms_file):
        result = invoke("edges", str(bracket_atoms_file))
        assert result.exit_code == 0
        assert "r/[/x].js::main" in result.output
        assert "lib/[id].js" in result.output

    def test_no_edges_message(self, invoke, tmp_path):
        path = tmp_path / "single.json"
        path.write_text(json.dumps([{"id": "a.js::f", "name": "f", "filePath": "a.js"}]))
        result = invoke("edges", str(path))
        assert result.exit_code == 0
        assert "No cross-file edges found." in result.output


# -----------------------------------------------------------------------
# trace
# -----------------------------------------------------------------------


class TestTraceCommand:
    def test_json_output(self, invoke, atoms_file):
        result = invoke("trace", str(atoms_file), "app.js::main", "x", "--json")
        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["source"] == {"id": "app.js::main", "name": "main", "variable": "x"}
        assert payload["summary"]["totalSteps"] == 2
        assert payload["summary"]["uniqueFiles"] == 2
        assert payload["journey"]["2"] == [
            "add (math.js:2) -> format (fmt.js) as value [UNKNOWN]"
        ]

    def test_max_depth_option(self, invoke, atoms_file):
        result = invoke("trace", str(atoms_file), "app.js::main", "x", "--max-depth", "1", "--json")
        assert json.loads(result.stdout)["summary"]["totalSteps"] == 1

    def test_text_output(self, invoke, atoms_file):
        result = invoke("trace", str(atoms_file), "app.js::main", "x")
        assert result.exit_code == 0
        assert "2 hop(s)" in result.output
        assert "add (math.js) as a" in result.output

    def test_bracketed_paths_in_hops(self, invoke, bracket_atoms_file):
        result = invoke("trace", str(bracket_atoms_file), "r/[/x].js::main", "v")
        assert result.exit_code == 0
        assert "main (r/[/x].js:1) -> f (lib/[id].js) as v [DIRECT_PASS]" in result.output

    def test_unknown_bracketed_atom_message(self, invoke, bracket_atoms_file):
        result = invoke("trace", str(bracket_atoms_file), "r/[/y].js::nope", "v")
        assert result.exit_code == 1
        assert "r/[/y].js::nope" in result.output

    def test_variable_not_present(self, invoke, atoms_file):
        result = invoke("trace", str(atoms_file), "app.js::main", "zzz")
        assert result.exit_code == 0
        assert "not a parameter or call argument" in result.output

    def test_path_qualified_source_atom(self, invoke, atoms_file):
        """A differently rooted path still finds the atom by file and name."""
        result = invoke("trace", str(atoms_file), "/repo/app.js::main", "x", "--json")
        assert result.exit_code == 0
        assert json.loads(result.stdout)["source"]["id"] == "app.js::main"

    def test_unknown_source_atom(self, invoke, atoms_file):
        result = invoke("trace", str(atoms_file), "nope.js::x", "x")
        assert result.exit_code == 1
        assert "Atom not found" in result.output


# -----------------------------------------------------------------------
# duplicates
# -----------------------------------------------------------------------


class TestDuplicatesCommand:
    def test_default_threshold_finds_nothing(self, invoke, atoms_file):
        result = invoke("duplicates", str(atoms_file), "--json")
        assert result.exit_code == 0
        assert json.loads(result.stdout) == []

    def test_lower_threshold(self, invoke, atoms_file, tmp_config):
        result = invoke("duplicates", str(atoms_file), "--threshold", "0.3", "--json")
        candidates = json.loads(result.stdout)
        assert [(c["first_id"], c["second_id"]) for c in candidates] == [
            ("math.js::add", "fmt.js::format")
        ]
        assert candidates[0]["similarity"] == 0.35
        assert _log_events(tmp_config) == ["dna.duplicates"]

    def test_no_candidates_message(self, invoke, atoms_file):
        result = invoke("duplicates", str(atoms_file))
        assert "No duplicate candidates found." in result.output
