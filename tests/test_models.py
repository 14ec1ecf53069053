"""Tests for atom models and load_atoms -- 11 tests."""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from atomflow.exceptions import AtomLoadError
from atomflow.models import (
    Atom,
    CallArgument,
    DataFlow,
    Input,
    InputType,
    ReturnOutput,
    SideEffectOutput,
    ThrowOutput,
    Transformation,
    load_atoms,
)


class TestAtomParsing:
    """camelCase upstream JSON maps onto snake_case fields."""

    def test_camel_case_fields(self, project_atoms):
        atom = Atom.model_validate(project_atoms[0])
        assert atom.file_path == "app.js"
        assert atom.is_exported is True
        assert atom.imports[0].source == "./math"
        assert atom.calls[0].name == "add"
        assert atom.calls[1].args is None
        assert atom.data_flow is not None
        assert atom.data_flow.inputs[0].type == InputType.SIMPLE

    def test_outputs_are_tagged_by_type(self):
        data_flow = DataFlow.model_validate(
            {"outputs": [{"type": "return"}, {"type": "throw"}, {"type": "side_effect"}]}
        )
        assert [type(o) for o in data_flow.outputs] == [
            ReturnOutput,
            ThrowOutput,
            SideEffectOutput,
        ]
        assert data_flow.has_return
        assert data_flow.has_side_effect

    def test_unknown_output_type_rejected(self):
        with pytest.raises(ValidationError):
            DataFlow.model_validate({"outputs": [{"type": "yield"}]})

    def test_transformation_accepts_legacy_shapes(self):
        """"type" stands in for "operation" and a bare string for "from"."""
        t = Transformation.model_validate({"type": "MAP", "from": "raw", "to": "processed"})
        assert t.operation == "MAP"
        assert t.from_ == ["raw"]
        assert t.target == "processed"

    def test_transformation_target_from_output_name(self):
        t = Transformation.model_validate({"operation": "x", "output": {"name": "result"}})
        assert t.target == "result"

    def test_object_purpose_unwrapped(self, tmp_path):
        """{"type": ...} purposes load like plain strings."""
        path = tmp_path / "atoms.json"
        purposes = [{"type": "API_EXPORT"}, "TEST_HELPER", {"reason": "x"}]
        path.write_text(
            json.dumps(
                [
                    {"id": f"a.js::f{i}", "name": f"f{i}", "filePath": "a.js", "purpose": p}
                    for i, p in enumerate(purposes)
                ]
            )
        )
        assert [a.purpose for a in load_atoms(path)] == ["API_EXPORT", "TEST_HELPER", None]

    def test_bare_destructured_input_type(self):
        param = Input.model_validate({"name": "opts", "type": "destructured"})
        assert param.type == InputType.DESTRUCTURED_OBJECT
        assert param.is_destructured


class TestCallArgument:
    def test_estree_nodes_unwrapped(self):
        arg = CallArgument.model_validate(
            {"type": "MemberExpression", "object": {"name": "user"}, "property": {"name": "id"}}
        )
        assert arg.object_name == "user"
        assert arg.property_name == "id"
        assert arg.root_variable == "user"
        assert arg.render() == "user.id"

    def test_render_variants(self):
        assert CallArgument(type="Literal", value=42).render() == "42"
        assert CallArgument(type="CallExpression", callee="getId").render() == "getId()"
        assert CallArgument(type="SpreadElement", argument="rest").render() == "...rest"
        assert CallArgument(type="Identifier", name="x", code="x /* c */").render() == "x /* c */"


class TestLoadAtoms:
    def test_load_list_and_wrapped(self, tmp_path, project_atoms):
        bare = tmp_path / "bare.json"
        bare.write_text(json.dumps(project_atoms))
        wrapped = tmp_path / "wrapped.json"
        wrapped.write_text(json.dumps({"atoms": project_atoms}))

        assert [a.id for a in load_atoms(bare)] == [a.id for a in load_atoms(wrapped)]
        assert len(load_atoms(bare)) == 3

    def test_load_errors(self, tmp_path):
        with pytest.raises(AtomLoadError, match="not found"):
            load_atoms(tmp_path / "missing.json")

        broken = tmp_path / "broken.json"
        broken.write_text("{not json")
        with pytest.raises(AtomLoadError, match="not valid JSON"):
            load_atoms(broken)

        invalid = tmp_path / "invalid.json"
        invalid.write_text(json.dumps([{"name": "no_id"}]))
        with pytest.raises(AtomLoadError, match="Atom #0"):
            load_atoms(invalid)
