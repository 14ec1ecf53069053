"""Pydantic models for atoms produced by the upstream parsing layer.

Upstream producers emit camelCase JSON (``filePath``, ``dataFlow``,
``isExported``). Every model accepts both camelCase and snake_case field
names and dumps back to camelCase with ``by_alias=True``.
"""

from __future__ import annotations

import json
from enum import StrEnum
from pathlib import Path
from typing import Annotated, Any, Literal

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)
from pydantic.alias_generators import to_camel

from atomflow.exceptions import AtomLoadError


class _Model(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


class InputType(StrEnum):
    SIMPLE = "simple"
    DESTRUCTURED_OBJECT = "destructured-object"
    DESTRUCTURED_ARRAY = "destructured-array"
    REST = "rest"


class OutputType(StrEnum):
    RETURN = "return"
    THROW = "throw"
    SIDE_EFFECT = "side_effect"


class InputUsage(_Model):
    type: str
    line: int | None = None


class Input(_Model):
    """One parameter binding, possibly destructured."""

    name: str
    type: InputType = InputType.SIMPLE
    position: int = 0
    has_default: bool = False
    properties: list[str] | None = None
    usages: list[InputUsage] = Field(default_factory=list)
    data_type: str | None = None

    @field_validator("type", mode="before")
    @classmethod
    def _normalize_type(cls, value: Any) -> Any:
        # Older extractors emit a bare "destructured" for object patterns.
        if value == "destructured":
            return InputType.DESTRUCTURED_OBJECT
        return value

    @property
    def is_destructured(self) -> bool:
        return self.type in (InputType.DESTRUCTURED_OBJECT, InputType.DESTRUCTURED_ARRAY)


class ReturnOutput(_Model):
    type: Literal["return"] = "return"
    value: str | None = None
    line: int | None = None


class ThrowOutput(_Model):
    type: Literal["throw"] = "throw"
    error_type: str | None = None
    line: int | None = None


class SideEffectOutput(_Model):
    type: Literal["side_effect"] = "side_effect"
    target: str | None = None
    operation: str | None = None
    line: int | None = None


Output = Annotated[
    ReturnOutput | ThrowOutput | SideEffectOutput,
    Field(discriminator="type"),
]


class TransformationOutput(_Model):
    name: str


class Transformation(_Model):
    """One intermediate data-shaping step inside a function body."""

    to: str | None = None
    from_: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("from", "from_"),
        serialization_alias="from",
    )
    operation: str | None = Field(
        default=None,
        validation_alias=AliasChoices("operation", "type"),
    )
    output: TransformationOutput | None = None
    line: int | None = None

    @field_validator("from_", mode="before")
    @classmethod
    def _coerce_sources(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return value

    @property
    def target(self) -> str | None:
        """Name of the binding this step writes, from ``to`` or ``output.name``."""
        if self.to:
            return self.to
        if self.output is not None:
            return self.output.name
        return None


class DataFlow(_Model):
    inputs: list[Input] = Field(default_factory=list)
    outputs: list[Output] = Field(default_factory=list)
    transformations: list[Transformation] = Field(default_factory=list)

    @property
    def has_return(self) -> bool:
        return any(o.type == OutputType.RETURN for o in self.outputs)

    @property
    def has_side_effect(self) -> bool:
        return any(o.type == OutputType.SIDE_EFFECT for o in self.outputs)


class ImportDecl(_Model):
    source: str
    specifiers: list[str] = Field(default_factory=list)


class ArgumentType(StrEnum):
    IDENTIFIER = "Identifier"
    MEMBER_EXPRESSION = "MemberExpression"
    CALL_EXPRESSION = "CallExpression"
    LITERAL = "Literal"
    SPREAD_ELEMENT = "SpreadElement"


def _node_name(value: Any) -> Any:
    """ESTree-style nodes arrive as {"name": ...}; keep only the name."""
    if isinstance(value, dict):
        return value.get("name")
    return value


class CallArgument(_Model):
    """One argument expression at a call site."""

    type: str
    name: str | None = None
    variable: str | None = None
    code: str | None = None
    object_name: str | None = Field(
        default=None, validation_alias=AliasChoices("object", "objectName", "object_name")
    )
    property_name: str | None = Field(
        default=None, validation_alias=AliasChoices("property", "propertyName", "property_name")
    )
    callee: str | None = None
    value: Any = None
    argument: str | None = None
    data_type: str | None = None

    @field_validator("object_name", "property_name", "callee", "argument", mode="before")
    @classmethod
    def _unwrap_node(cls, value: Any) -> Any:
        return _node_name(value)

    @property
    def is_member(self) -> bool:
        return self.type == ArgumentType.MEMBER_EXPRESSION

    @property
    def is_spread(self) -> bool:
        # Some extractors tag spreads as a lowercase "spread".
        return self.type in (ArgumentType.SPREAD_ELEMENT, "spread")

    @property
    def spread_source(self) -> str | None:
        return self.argument or self.name or self.variable

    @property
    def root_variable(self) -> str | None:
        """The local binding this argument reads from, if any."""
        if self.type == ArgumentType.IDENTIFIER:
            return self.name or self.variable
        if self.is_member:
            if self.object_name:
                return self.object_name.split(".", 1)[0]
            return self.variable
        if self.is_spread:
            return self.spread_source
        return self.variable

    def render(self) -> str:
        """Source-like text for the argument."""
        if self.code:
            return self.code
        if self.is_member:
            return f"{self.object_name or '?'}.{self.property_name or '?'}"
        if self.type == ArgumentType.CALL_EXPRESSION:
            return f"{self.callee or '?'}()"
        if self.type == ArgumentType.LITERAL:
            return json.dumps(self.value, default=str)
        if self.is_spread:
            return f"...{self.spread_source or '?'}"
        return self.name or self.variable or ""


class CallSite(_Model):
    """A call site inside an atom. ``name`` is the identifier as written."""

    name: str
    line: int = 0
    # Raw argument descriptors; parsed lazily by ArgumentMapper.
    args: list[Any] | None = None


class Archetype(_Model):
    type: str | None = None
    severity: int | str | None = None


class SemanticInfo(_Model):
    verb: str | None = None
    domain: str | None = None
    entity: str | None = None


class Atom(_Model):
    """A statically extracted function or method unit."""

    id: str
    name: str
    file_path: str
    line: int = 1
    is_exported: bool = False
    is_async: bool = False
    imports: list[ImportDecl] = Field(default_factory=list)
    calls: list[CallSite] = Field(default_factory=list)
    data_flow: DataFlow | None = None
    archetype: Archetype | None = None
    purpose: str | None = None
    complexity: int = 1
    lines_of_code: int = 0
    is_test_callback: bool = False
    test_callback_type: str | None = None
    class_name: str | None = None
    semantic: SemanticInfo | None = None
    code: str = ""

    @field_validator("purpose", mode="before")
    @classmethod
    def _unwrap_purpose(cls, value: Any) -> Any:
        # Purpose analysis may emit {"type": "API_EXPORT", ...}; keep only the type.
        if isinstance(value, dict):
            return value.get("type")
        return value


def load_atoms(path: str | Path) -> list[Atom]:
    """Load atoms from a JSON file.

    Accepts either a bare list of atom objects or ``{"atoms": [...]}``.

    Raises:
        AtomLoadError: If the file is missing, is not JSON, or an entry
            does not validate.
    """
    file_path = Path(path)
    try:
        raw = json.loads(file_path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        msg = f"Atoms file not found: {file_path}"
        raise AtomLoadError(msg) from exc
    except json.JSONDecodeError as exc:
        msg = f"Atoms file is not valid JSON: {file_path} ({exc})"
        raise AtomLoadError(msg) from exc

    if isinstance(raw, dict):
        raw = raw.get("atoms", [])
    if not isinstance(raw, list):
        msg = f"Expected a list of atoms in {file_path}"
        raise AtomLoadError(msg)

    atoms: list[Atom] = []
    for index, entry in enumerate(raw):
        try:
            atoms.append(Atom.model_validate(entry))
        except ValidationError as exc:
            msg = f"Atom #{index} in {file_path} is invalid: {exc.error_count()} error(s)"
            raise AtomLoadError(msg) from exc
    return atoms
