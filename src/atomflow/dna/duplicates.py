"""Duplicate-candidate detection filtered by duplicability."""

from __future__ import annotations

from atomflow.dna.cache import DNACache
from atomflow.dna.compare import compare_dna
from atomflow.dna.types import DuplicateCandidate
from atomflow.models import Atom


def find_duplicate_candidates(
    atoms: list[Atom],
    *,
    threshold: float = 0.9,
    min_duplicability: int = 50,
    cache: DNACache | None = None,
) -> list[DuplicateCandidate]:
    """Pair up atoms whose DNA similarity reaches ``threshold``.

    Atoms without a data-flow sketch are skipped, as are pairs where either
    side scores below ``min_duplicability`` (test scaffolding, trivial
    accessors and the like).

    Returns:
        Candidates sorted by similarity, highest first; ties keep input order.
    """
    cache = cache if cache is not None else DNACache()
    eligible = []
    for atom in atoms:
        if atom.data_flow is None:
            continue
        dna = cache.get(atom)
        if dna.duplicability_score >= min_duplicability:
            eligible.append((atom, dna))

    candidates: list[DuplicateCandidate] = []
    for i, (first, first_dna) in enumerate(eligible):
        for second, second_dna in eligible[i + 1 :]:
            similarity = compare_dna(first_dna, second_dna)
            if similarity < threshold:
                continue
            candidates.append(
                DuplicateCandidate(
                    first_id=first.id,
                    second_id=second.id,
                    similarity=similarity,
                    first_duplicability=first_dna.duplicability_score,
                    second_duplicability=second_dna.duplicability_score,
                )
            )

    candidates.sort(key=lambda c: -c.similarity)
    return candidates
