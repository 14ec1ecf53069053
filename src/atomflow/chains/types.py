"""Internal data types for argument mapping and cross-file resolution.

Transforms are tagged variants: one frozen dataclass per kind, joined in
the ``Transform`` union. ArgumentMapper.detect_transform returns exactly one
of them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, ClassVar


class TransformKind(StrEnum):
    PROPERTY_ACCESS = "PROPERTY_ACCESS"
    DIRECT_PASS = "DIRECT_PASS"
    CALL_RESULT = "CALL_RESULT"
    LITERAL = "LITERAL"
    SPREAD = "SPREAD"
    UNKNOWN = "UNKNOWN"


# ---------------------------------------------------------------------------
# Transform variants
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class PropertyAccess:
    """Argument reads a property off another binding: ``fn(user.id)``."""

    kind: ClassVar[TransformKind] = TransformKind.PROPERTY_ACCESS
    from_: str | None
    property_name: str | None

    @property
    def description(self) -> str:
        return f"Extracts property '{self.property_name}' from '{self.from_}'"

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": str(self.kind),
            "from": self.from_,
            "property": self.property_name,
            "description": self.description,
        }


@dataclass(frozen=True, slots=True)
class DirectPass:
    """Argument and parameter share a name: ``fn(user)`` into ``fn(user)``."""

    kind: ClassVar[TransformKind] = TransformKind.DIRECT_PASS
    variable: str | None

    @property
    def description(self) -> str:
        return f"Passes '{self.variable}' through unchanged"

    def to_dict(self) -> dict[str, Any]:
        return {"type": str(self.kind), "variable": self.variable, "description": self.description}


@dataclass(frozen=True, slots=True)
class CallResult:
    kind: ClassVar[TransformKind] = TransformKind.CALL_RESULT
    call: str | None

    @property
    def description(self) -> str:
        return f"Passes the result of {self.call}()"

    def to_dict(self) -> dict[str, Any]:
        return {"type": str(self.kind), "call": self.call, "description": self.description}


@dataclass(frozen=True, slots=True)
class LiteralValue:
    kind: ClassVar[TransformKind] = TransformKind.LITERAL
    value: Any

    @property
    def description(self) -> str:
        return f"Passes literal {self.value!r}"

    def to_dict(self) -> dict[str, Any]:
        return {"type": str(self.kind), "value": self.value, "description": self.description}


@dataclass(frozen=True, slots=True)
class Spread:
    kind: ClassVar[TransformKind] = TransformKind.SPREAD
    source: str | None

    @property
    def description(self) -> str:
        return f"Spreads '{self.source}' across parameters"

    def to_dict(self) -> dict[str, Any]:
        return {"type": str(self.kind), "source": self.source, "description": self.description}


@dataclass(frozen=True, slots=True)
class UnknownTransform:
    kind: ClassVar[TransformKind] = TransformKind.UNKNOWN
    argument_type: str | None = None

    @property
    def description(self) -> str:
        return f"Unclassified argument ({self.argument_type or 'no type'})"

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": str(self.kind),
            "argumentType": self.argument_type,
            "description": self.description,
        }


Transform = PropertyAccess | DirectPass | CallResult | LiteralValue | Spread | UnknownTransform


# ---------------------------------------------------------------------------
# Argument mapping
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ArgumentInfo:
    code: str
    type: str
    variable: str | None


@dataclass(frozen=True, slots=True)
class ParameterInfo:
    name: str
    type: str
    position: int


@dataclass(frozen=True, slots=True)
class Mapping:
    """One argument bound to one parameter."""

    position: int
    argument: ArgumentInfo
    parameter: ParameterInfo
    transform: Transform
    confidence: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "position": self.position,
            "argument": {
                "code": self.argument.code,
                "type": self.argument.type,
                "variable": self.argument.variable,
            },
            "parameter": {
                "name": self.parameter.name,
                "type": self.parameter.type,
                "position": self.parameter.position,
            },
            "transform": self.transform.to_dict(),
            "confidence": self.confidence,
        }


@dataclass(frozen=True, slots=True)
class ArgumentMapping:
    """All argument/parameter pairs for one call site."""

    caller: str
    callee: str
    call_site: int
    mappings: tuple[Mapping, ...] = ()
    total_args: int = 0
    total_params: int = 0
    has_spread: bool = False
    has_destructuring: bool = False
    error: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "caller": self.caller,
            "callee": self.callee,
            "callSite": self.call_site,
            "mappings": [m.to_dict() for m in self.mappings],
            "totalArgs": self.total_args,
            "totalParams": self.total_params,
            "hasSpread": self.has_spread,
            "hasDestructuring": self.has_destructuring,
            "error": self.error,
        }


@dataclass(frozen=True, slots=True)
class UsageSite:
    line: int
    context: str


@dataclass(frozen=True, slots=True)
class ReturnUsage:
    """Whether and where the caller consumes the callee's return value."""

    is_used: bool
    reason: str | None = None  # no_return | assigned_unused | not_referenced
    usage_type: str | None = None  # assigned | direct
    assigned_to: str | None = None
    usages: tuple[UsageSite, ...] = ()


@dataclass(frozen=True, slots=True)
class ChainLink:
    """Caller-side step that produced an argument, linked to the consuming callee."""

    from_: str  # "<caller>.<operation>"
    to: str  # "<callee>.input"
    via: str  # the binding carrying the value


@dataclass(frozen=True, slots=True)
class AnalysisSummary:
    has_data_transformation: bool
    has_return_usage: bool
    chain_complexity: int


@dataclass(frozen=True, slots=True)
class DataFlowAnalysis:
    mapping: ArgumentMapping
    return_usage: ReturnUsage
    chains: list[ChainLink] = field(default_factory=list)
    summary: AnalysisSummary | None = None


# ---------------------------------------------------------------------------
# Cross-file edges
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class CrossFileEdge:
    """A resolved call whose caller and callee live in different files."""

    caller_id: str
    callee_id: str
    call_site: int
    caller_file: str
    callee_file: str
    callee_name: str
    mapping: ArgumentMapping
    confidence: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "callerId": self.caller_id,
            "calleeId": self.callee_id,
            "callSite": self.call_site,
            "callerFile": self.caller_file,
            "calleeFile": self.callee_file,
            "calleeName": self.callee_name,
            "mapping": self.mapping.to_dict(),
            "confidence": self.confidence,
        }
