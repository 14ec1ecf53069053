"""DNA comparison and validation."""

from __future__ import annotations

import re

from atomflow.dna.extractor import (
    HASH_LENGTH,
    PATTERN_HASH_LENGTH,
    SENTINEL_HASH,
)
from atomflow.dna.types import DNA, DNAValidation, FlowType

STRUCTURAL_WEIGHT = 0.4
STRUCTURAL_FLOW_TYPE_CREDIT = 0.15
PATTERN_WEIGHT = 0.3
PATTERN_LENGTH_CREDIT = 0.1
SEQUENCE_WEIGHT = 0.2
SEQUENCE_LENGTH_CREDIT = 0.1
FINGERPRINT_WEIGHT = 0.1

_HEX_RE = re.compile(r"^[0-9a-f]+$")


def compare_dna(a: DNA, b: DNA) -> float:
    """Weighted similarity in [0, 1], rounded to 2 decimals.

    Full weights sum to 1.0, so ``compare_dna(d, d) == 1.0``.
    """
    score = 0.0

    if a.structural_hash == b.structural_hash:
        score += STRUCTURAL_WEIGHT
    elif a.flow_type == b.flow_type:
        score += STRUCTURAL_FLOW_TYPE_CREDIT

    same_length = len(a.operation_sequence) == len(b.operation_sequence)

    if a.pattern_hash == b.pattern_hash:
        score += PATTERN_WEIGHT
    elif same_length:
        score += PATTERN_LENGTH_CREDIT

    if a.operation_sequence == b.operation_sequence:
        score += SEQUENCE_WEIGHT
    elif same_length:
        score += SEQUENCE_LENGTH_CREDIT

    if a.semantic_fingerprint == b.semantic_fingerprint:
        score += FINGERPRINT_WEIGHT

    return round(min(1.0, score), 2)


def validate_dna(dna: DNA) -> DNAValidation:
    """Check a DNA for internal consistency before it is used for lineage matching."""
    errors: list[str] = []
    warnings: list[str] = []

    for field_name in ("structural_hash", "contextual_hash", "semantic_hash", "id"):
        value = getattr(dna, field_name)
        if not value:
            errors.append(f"missing {field_name}")
        elif len(value) != HASH_LENGTH or not _HEX_RE.match(value):
            errors.append(f"{field_name} must be {HASH_LENGTH} hex chars, got {value!r}")

    if len(dna.pattern_hash) != PATTERN_HASH_LENGTH or not _HEX_RE.match(dna.pattern_hash):
        errors.append(
            f"pattern_hash must be {PATTERN_HASH_LENGTH} hex chars, got {dna.pattern_hash!r}"
        )

    if not 1 <= dna.complexity_score <= 10:
        errors.append(f"complexity_score out of range: {dna.complexity_score}")
    if not 0 <= dna.duplicability_score <= 100:
        errors.append(f"duplicability_score out of range: {dna.duplicability_score}")
    if min(dna.input_count, dna.output_count, dna.transformation_count) < 0:
        errors.append("negative element count")
    if dna.semantic_fingerprint.count(":") != 2:
        errors.append(f"semantic_fingerprint is not verb:domain:entity: {dna.semantic_fingerprint!r}")

    # receive + one step per transformation + at most one step per output
    expected_min = dna.transformation_count + (1 if dna.input_count else 0)
    if not expected_min <= len(dna.operation_sequence) <= expected_min + dna.output_count:
        errors.append("operation_sequence does not match element counts")

    if dna.structural_hash == SENTINEL_HASH:
        warnings.append("fallback DNA: atom has no data-flow sketch")
    elif dna.flow_type == FlowType.UNKNOWN:
        warnings.append("flow type could not be classified")

    return DNAValidation(valid=not errors, errors=errors, warnings=warnings)
