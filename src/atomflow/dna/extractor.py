"""DNA extraction -- layered fingerprints from an atom's data-flow sketch."""

from __future__ import annotations

import hashlib
import json
import math
import re

from atomflow.dna.types import DNA, FlowType
from atomflow.heuristics import match_verb, split_identifier
from atomflow.models import Atom, DataFlow, OutputType

HASH_LENGTH = 16
PATTERN_HASH_LENGTH = 12
SENTINEL_HASH = "0" * HASH_LENGTH
SENTINEL_PATTERN_HASH = "0" * PATTERN_HASH_LENGTH
UNKNOWN_FINGERPRINT = "unknown:unknown:unknown"

# ---------------------------------------------------------------------------
# Operation classes used by flow-type classification
# ---------------------------------------------------------------------------

READ_OPERATIONS: frozenset[str] = frozenset(
    {
        "property_access",
        "array_index_access",
        "function_call",
        "await_function_call",
        "instantiation",
    }
)

TRANSFORM_OPERATIONS: frozenset[str] = frozenset(
    {
        "binary_operation",
        "unary_operation",
        "template_literal",
        "conditional",
        "object_literal",
        "array_literal",
    }
)

WRITE_OPERATIONS: frozenset[str] = frozenset(
    {
        "mutation",
        "update",
        "property_assignment",
        "array_mutation",
        "object_mutation",
    }
)

_ACCESSOR_RE = re.compile(r"^(?:get|set|is)[A-Z_]")
_CONSTRUCTOR_NAMES = frozenset({"constructor", "__init__"})
_SETUP_TEARDOWN = frozenset({"beforeEach", "afterEach"})

# Purposes whose domain is not spelled out in their own tokens.
PURPOSE_DOMAINS: dict[str, str] = {
    "PRIVATE_HELPER": "internal",
    "TEST_CALLBACK": "test",
}


def _hash(payload: object, length: int = HASH_LENGTH) -> str:
    """SHA-256 of the canonical JSON form of payload, truncated to length hex chars."""
    canonical = json.dumps(payload, sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:length]


def _purpose_tokens(purpose: str | None) -> list[str]:
    if not purpose:
        return []
    return purpose.lower().replace("-", "_").split("_")


def _operation_names(data_flow: DataFlow) -> list[str]:
    return [t.operation or "transform" for t in data_flow.transformations]


# ---------------------------------------------------------------------------
# Hash layers
# ---------------------------------------------------------------------------


def compute_structural_hash(data_flow: DataFlow) -> str:
    """Hash the data-flow shape. Parameter and binding names are not included."""
    payload = {
        "inputs": [
            {
                "type": str(i.type),
                "usagePattern": sorted({u.type for u in i.usages}),
            }
            for i in data_flow.inputs
        ],
        "transformations": [
            {"operation": t.operation, "arity": len(t.from_)} for t in data_flow.transformations
        ],
        "outputs": [
            {"type": o.type, "hasSideEffect": o.type == OutputType.SIDE_EFFECT}
            for o in data_flow.outputs
        ],
    }
    return _hash(payload)


def compute_contextual_hash(atom: Atom, structural_hash: str) -> str:
    archetype = atom.archetype
    payload = {
        "structural": structural_hash,
        "archetype": archetype.type if archetype else None,
        "severity": archetype.severity if archetype else None,
        "purpose": atom.purpose,
        "isTestCallback": atom.is_test_callback,
        "testCallbackType": atom.test_callback_type,
        "className": atom.class_name,
        "isExported": atom.is_exported,
        "isAsync": atom.is_async,
    }
    return _hash(payload)


def compute_semantic_hash(atom: Atom, contextual_hash: str, fingerprint: str) -> str:
    payload = {
        "contextual": contextual_hash,
        "semanticFingerprint": fingerprint,
        "name": atom.name,
        "complexity": atom.complexity,
        "linesOfCode": atom.lines_of_code,
    }
    return _hash(payload)


def compute_pattern_hash(data_flow: DataFlow) -> str:
    return _hash("->".join(_operation_names(data_flow)), PATTERN_HASH_LENGTH)


def compute_dna_id(semantic_hash: str, pattern_hash: str, fingerprint: str) -> str:
    return _hash([semantic_hash, pattern_hash, fingerprint])


# ---------------------------------------------------------------------------
# Classification and scoring
# ---------------------------------------------------------------------------


def classify_flow_type(data_flow: DataFlow) -> FlowType:
    """Classify a data-flow sketch by which read/transform/write/exit kinds it has.

    Checks run in a fixed order and the first match wins.
    """
    operations = {t.operation for t in data_flow.transformations}
    output_types = {o.type for o in data_flow.outputs}

    has_read = bool(operations & READ_OPERATIONS)
    has_transform = bool(operations & TRANSFORM_OPERATIONS)
    has_write = bool(operations & WRITE_OPERATIONS) or OutputType.SIDE_EFFECT in output_types
    has_return = OutputType.RETURN in output_types
    has_throw_only = OutputType.THROW in output_types and not has_return

    if has_throw_only and not has_write:
        return FlowType.GUARD
    if has_read and has_transform and has_write and has_return:
        return FlowType.READ_TRANSFORM_PERSIST_RETURN
    if has_read and has_transform and has_return:
        return FlowType.READ_TRANSFORM_RETURN
    if has_read and has_write and has_return:
        return FlowType.READ_PERSIST_RETURN
    if has_read and has_write:
        return FlowType.READ_PERSIST
    if has_transform and has_return:
        return FlowType.TRANSFORM_RETURN
    if has_read and has_return:
        return FlowType.READ_RETURN
    if has_write:
        return FlowType.SIDE_EFFECT_ONLY
    if has_return:
        return FlowType.PASSTHROUGH
    return FlowType.UNKNOWN


def build_operation_sequence(data_flow: DataFlow) -> tuple[str, ...]:
    """receive, then each transformation, then emit/return per output, in order."""
    sequence: list[str] = []
    if data_flow.inputs:
        sequence.append("receive")
    sequence.extend(_operation_names(data_flow))
    for output in data_flow.outputs:
        if output.type == OutputType.SIDE_EFFECT:
            sequence.append("emit")
        elif output.type == OutputType.RETURN:
            sequence.append("return")
    return tuple(sequence)


def score_complexity(data_flow: DataFlow) -> int:
    raw = (
        1
        + 0.5 * len(data_flow.inputs)
        + 0.8 * len(data_flow.transformations)
        + 0.5 * len(data_flow.outputs)
    )
    if data_flow.has_side_effect:
        raw += 2
    return max(1, min(10, math.floor(raw + 0.5)))


def _infer_domain(purpose: str | None, flow_type: FlowType) -> str:
    if purpose and purpose.upper() in PURPOSE_DOMAINS:
        return PURPOSE_DOMAINS[purpose.upper()]
    tokens = _purpose_tokens(purpose)
    for domain in ("api", "test", "config", "internal"):
        if domain in tokens:
            return domain
    if "read" in flow_type:
        return "data"
    if "persist" in flow_type:
        return "storage"
    if "transform" in flow_type:
        return "logic"
    return "core"


def build_semantic_fingerprint(atom: Atom, flow_type: FlowType) -> str:
    """verb:domain:entity, preferring an upstream semantic analysis when present."""
    semantic = atom.semantic
    if semantic is not None and semantic.verb and semantic.verb != "unknown":
        return f"{semantic.verb}:{semantic.domain or 'core'}:{semantic.entity or 'unknown'}"

    matched = match_verb(atom.name)
    verb = matched or "process"
    remainder = atom.name[len(matched) :] if matched else atom.name
    tokens = split_identifier(remainder)
    entity = tokens[-1].lower() if tokens else "unknown"
    return f"{verb}:{_infer_domain(atom.purpose, flow_type)}:{entity}"


def score_duplicability(atom: Atom, data_flow: DataFlow) -> int:
    """0-100 estimate of how meaningful a duplicate match on this atom would be.

    Test scaffolding, trivial accessors and pass-through constructors repeat
    legitimately, so they score low. Exported API code and larger bodies
    score high.
    """
    score = 100
    tokens = _purpose_tokens(atom.purpose)

    if atom.is_test_callback:
        score -= 60
        if atom.test_callback_type in _SETUP_TEARDOWN:
            score -= 20
    if atom.class_name and atom.complexity == 1 and atom.lines_of_code <= 5:
        score -= 40
    if _ACCESSOR_RE.match(atom.name) and atom.complexity <= 1 and atom.lines_of_code <= 3:
        score -= 50
    if atom.name in _CONSTRUCTOR_NAMES and atom.complexity <= 2 and atom.lines_of_code <= 5:
        score -= 45
    if "test" in tokens and "helper" in tokens:
        score -= 35

    if atom.is_exported and "api" in tokens:
        score += 15
    if atom.complexity >= 5:
        score += 10
    if atom.lines_of_code > 20:
        score += 15
    if data_flow.has_side_effect:
        score += 10

    return max(0, min(100, score))


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------


def fallback_dna() -> DNA:
    """Deterministic DNA for atoms that carry no data-flow sketch."""
    return DNA(
        structural_hash=SENTINEL_HASH,
        contextual_hash=SENTINEL_HASH,
        semantic_hash=SENTINEL_HASH,
        pattern_hash=SENTINEL_PATTERN_HASH,
        flow_type=FlowType.UNKNOWN,
        operation_sequence=(),
        complexity_score=1,
        input_count=0,
        output_count=0,
        transformation_count=0,
        semantic_fingerprint=UNKNOWN_FINGERPRINT,
        duplicability_score=0,
        id=compute_dna_id(SENTINEL_HASH, SENTINEL_PATTERN_HASH, UNKNOWN_FINGERPRINT),
    )


def extract_dna(atom: Atom) -> DNA:
    """Derive the DNA of one atom. Atoms without ``data_flow`` get fallback_dna()."""
    data_flow = atom.data_flow
    if data_flow is None:
        return fallback_dna()

    flow_type = classify_flow_type(data_flow)
    fingerprint = build_semantic_fingerprint(atom, flow_type)

    structural = compute_structural_hash(data_flow)
    contextual = compute_contextual_hash(atom, structural)
    semantic = compute_semantic_hash(atom, contextual, fingerprint)
    pattern = compute_pattern_hash(data_flow)

    return DNA(
        structural_hash=structural,
        contextual_hash=contextual,
        semantic_hash=semantic,
        pattern_hash=pattern,
        flow_type=flow_type,
        operation_sequence=build_operation_sequence(data_flow),
        complexity_score=score_complexity(data_flow),
        input_count=len(data_flow.inputs),
        output_count=len(data_flow.outputs),
        transformation_count=len(data_flow.transformations),
        semantic_fingerprint=fingerprint,
        duplicability_score=score_duplicability(atom, data_flow),
        id=compute_dna_id(semantic, pattern, fingerprint),
    )
