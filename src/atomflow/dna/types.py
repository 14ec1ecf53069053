"""Value types for DNA fingerprints.

Frozen dataclasses: a DNA is derived from an atom on demand and is never
stored on the atom itself.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


class FlowType(StrEnum):
    GUARD = "guard"
    READ_TRANSFORM_PERSIST_RETURN = "read-transform-persist-return"
    READ_TRANSFORM_RETURN = "read-transform-return"
    READ_PERSIST_RETURN = "read-persist-return"
    READ_PERSIST = "read-persist"
    TRANSFORM_RETURN = "transform-return"
    READ_RETURN = "read-return"
    SIDE_EFFECT_ONLY = "side-effect-only"
    PASSTHROUGH = "passthrough"
    UNKNOWN = "unknown"


@dataclass(frozen=True, slots=True)
class DNA:
    """Layered fingerprint of one atom."""

    structural_hash: str  # data-flow shape only, names ignored
    contextual_hash: str  # + archetype, purpose, test/class/export flags
    semantic_hash: str  # + fingerprint, name, complexity, LOC
    pattern_hash: str  # transformation operation sequence only
    flow_type: FlowType
    operation_sequence: tuple[str, ...]
    complexity_score: int  # 1..10
    input_count: int
    output_count: int
    transformation_count: int
    semantic_fingerprint: str  # verb:domain:entity
    duplicability_score: int  # 0..100
    id: str

    def to_dict(self) -> dict:
        """camelCase dict matching the wire shape used by downstream tools."""
        return {
            "id": self.id,
            "structuralHash": self.structural_hash,
            "contextualHash": self.contextual_hash,
            "semanticHash": self.semantic_hash,
            "patternHash": self.pattern_hash,
            "flowType": str(self.flow_type),
            "operationSequence": list(self.operation_sequence),
            "complexityScore": self.complexity_score,
            "inputCount": self.input_count,
            "outputCount": self.output_count,
            "transformationCount": self.transformation_count,
            "semanticFingerprint": self.semantic_fingerprint,
            "duplicabilityScore": self.duplicability_score,
        }


@dataclass(frozen=True, slots=True)
class DNAValidation:
    """Result of validate_dna."""

    valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class DuplicateCandidate:
    """Two atoms whose DNA is similar enough to flag as possible duplicates."""

    first_id: str
    second_id: str
    similarity: float
    first_duplicability: int
    second_duplicability: int
