"""DNA fingerprinting -- rename-resistant identity for extracted atoms.

Public API:
    extract_dna(atom) -> DNA
    compare_dna(a, b) -> float
    validate_dna(dna) -> DNAValidation
    find_duplicate_candidates(atoms, threshold=..., min_duplicability=...) -> list[DuplicateCandidate]
    DNACache
"""

from __future__ import annotations

from atomflow.dna.cache import DNACache
from atomflow.dna.compare import compare_dna, validate_dna
from atomflow.dna.duplicates import find_duplicate_candidates
from atomflow.dna.extractor import extract_dna, fallback_dna
from atomflow.dna.types import DNA, DNAValidation, DuplicateCandidate, FlowType

__all__ = [
    "DNA",
    "DNACache",
    "DNAValidation",
    "DuplicateCandidate",
    "FlowType",
    "compare_dna",
    "extract_dna",
    "fallback_dna",
    "find_duplicate_candidates",
    "validate_dna",
]
