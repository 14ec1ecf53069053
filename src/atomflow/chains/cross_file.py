"""CrossFileResolver -- turn name-based call sites into confidence-scored edges."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from atomflow.chains.argument_mapper import ArgumentMapper
from atomflow.chains.types import ArgumentMapping, CrossFileEdge
from atomflow.exceptions import MappingError
from atomflow.heuristics import import_references_file
from atomflow.models import Atom, CallSite

logger = logging.getLogger(__name__)

BASE_EDGE_CONFIDENCE = 0.5
ARGS_BONUS = 0.2
EXPORTED_BONUS = 0.15
IMPORT_HINT_BONUS = 0.15


class CrossFileResolver:
    """Resolve each atom's calls to same-named atoms in other files.

    Candidate choice, in order:
    - a candidate whose file one of the caller's imports points at
    - the only exported candidate, when exactly one is exported
    - the first candidate in atom enumeration order

    The last rule is order-dependent and carries no semantic evidence; it is
    reflected only in a lower edge confidence.

    Indices are built once in the constructor and never mutated, so
    resolve_edges_from can be called for different atoms independently.
    Duplicate atom ids are resolved by last-one-wins in ``by_id``.
    """

    def __init__(self, atoms: Iterable[Atom]) -> None:
        self.atoms: list[Atom] = list(atoms)
        self.by_id: dict[str, Atom] = {a.id: a for a in self.atoms}
        self.by_name: dict[str, list[Atom]] = {}
        for atom in self.atoms:
            self.by_name.setdefault(atom.name, []).append(atom)

    # ------------------------------------------------------------------
    # Candidate selection
    # ------------------------------------------------------------------

    @staticmethod
    def _imports_reference(caller: Atom, callee: Atom) -> bool:
        return any(import_references_file(imp.source, callee.file_path) for imp in caller.imports)

    def _pick_candidate(self, caller: Atom, candidates: list[Atom]) -> Atom:
        for candidate in candidates:
            if self._imports_reference(caller, candidate):
                return candidate

        exported = [c for c in candidates if c.is_exported]
        if len(exported) == 1:
            return exported[0]

        if len(candidates) > 1:
            logger.debug(
                "Ambiguous call from %s: %d candidates, using %s",
                caller.id,
                len(candidates),
                candidates[0].id,
            )
        return candidates[0]

    # ------------------------------------------------------------------
    # Edge construction
    # ------------------------------------------------------------------

    @staticmethod
    def _build_mapping(caller: Atom, callee: Atom, call: CallSite) -> ArgumentMapping:
        try:
            return ArgumentMapper(caller, callee, call).map()
        except (MappingError, ValueError, TypeError, AttributeError) as exc:
            logger.warning(
                "Argument mapping failed for %s -> %s at line %d: %s",
                caller.id,
                callee.id,
                call.line,
                exc,
            )
            return ArgumentMapping(
                caller=caller.name,
                callee=callee.name,
                call_site=call.line,
                error=True,
            )

    def _edge_confidence(self, caller: Atom, callee: Atom, call: CallSite) -> float:
        confidence = BASE_EDGE_CONFIDENCE
        if call.args:
            confidence += ARGS_BONUS
        if callee.is_exported:
            confidence += EXPORTED_BONUS
        if self._imports_reference(caller, callee):
            confidence += IMPORT_HINT_BONUS
        return min(1.0, round(confidence, 2))

    def resolve_edges_from(self, caller: Atom) -> list[CrossFileEdge]:
        """Edges for every call in ``caller.calls`` that lands in another file.

        Same-file calls and calls with no known target are skipped. Edges
        come out in ``calls`` order.
        """
        edges: list[CrossFileEdge] = []
        for call in caller.calls:
            candidates = [
                c for c in self.by_name.get(call.name, []) if c.file_path != caller.file_path
            ]
            if not candidates:
                continue

            callee = self._pick_candidate(caller, candidates)
            edges.append(
                CrossFileEdge(
                    caller_id=caller.id,
                    callee_id=callee.id,
                    call_site=call.line,
                    caller_file=caller.file_path,
                    callee_file=callee.file_path,
                    callee_name=callee.name,
                    mapping=self._build_mapping(caller, callee, call),
                    confidence=self._edge_confidence(caller, callee, call),
                )
            )
        return edges

    def resolve_all(self) -> list[CrossFileEdge]:
        """All edges, in atom order then call order."""
        edges: list[CrossFileEdge] = []
        for atom in self.atoms:
            edges.extend(self.resolve_edges_from(atom))
        return edges

    def build_edge_map(self) -> dict[str, list[CrossFileEdge]]:
        """atom id -> outgoing edges, for atoms with at least one edge."""
        edge_map: dict[str, list[CrossFileEdge]] = {}
        for atom in self.atoms:
            edges = self.resolve_edges_from(atom)
            if edges:
                edge_map.setdefault(atom.id, []).extend(edges)
        return edge_map
