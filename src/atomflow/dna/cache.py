"""Explicit DNA cache, owned by whoever runs an analysis pass."""

from __future__ import annotations

import hashlib
import logging

from atomflow.dna.extractor import extract_dna
from atomflow.dna.types import DNA
from atomflow.models import Atom

logger = logging.getLogger(__name__)


def _atom_digest(atom: Atom) -> str:
    return hashlib.md5(atom.model_dump_json().encode("utf-8")).hexdigest()


class DNACache:
    """Memoize extract_dna per atom id.

    Entries are keyed by atom id and remember a digest of the atom they were
    computed from; a lookup with an edited atom recomputes. Nothing is shared
    between instances.
    """

    def __init__(self) -> None:
        self._entries: dict[str, tuple[str, DNA]] = {}
        self.hits = 0
        self.misses = 0

    def get(self, atom: Atom) -> DNA:
        digest = _atom_digest(atom)
        cached = self._entries.get(atom.id)
        if cached is not None and cached[0] == digest:
            self.hits += 1
            return cached[1]

        self.misses += 1
        if cached is not None:
            logger.debug("Atom %s changed since last extraction, recomputing DNA", atom.id)
        dna = extract_dna(atom)
        self._entries[atom.id] = (digest, dna)
        return dna

    def get_many(self, atoms: list[Atom]) -> dict[str, DNA]:
        return {atom.id: self.get(atom) for atom in atoms}

    def invalidate(self, atom_id: str) -> bool:
        """Drop one entry. Returns True if something was cached for atom_id."""
        return self._entries.pop(atom_id, None) is not None

    def clear(self) -> None:
        self._entries.clear()
        self.hits = 0
        self.misses = 0

    def __contains__(self, atom_id: object) -> bool:
        return atom_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)
