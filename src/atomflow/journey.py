"""Data journey tracing over the cross-file edge map.

Follows one variable from a source atom through argument -> parameter
bindings, hop by hop, using the mappings attached to each CrossFileEdge.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from atomflow.chains.types import CrossFileEdge, Transform
from atomflow.models import Atom


@dataclass(frozen=True, slots=True)
class JourneyStep:
    """One hop of a traced variable across a file boundary."""

    depth: int
    caller_id: str
    caller_name: str
    caller_file: str
    callee_id: str
    callee_name: str
    callee_file: str
    call_site: int
    variable_in: str  # name in the caller
    parameter_in: str  # name in the callee
    transform: Transform | None
    confidence: float
    path: tuple[str, ...]  # caller ids from the start atom down to this hop's caller


@dataclass(frozen=True, slots=True)
class JourneySummary:
    total_steps: int
    max_depth_reached: int
    unique_files: int
    unique_functions: int
    avg_confidence: float
    by_depth: dict[int, list[str]] = field(default_factory=dict)


def trace_data_journey(
    start_id: str,
    variable: str,
    edge_map: dict[str, list[CrossFileEdge]],
    by_id: dict[str, Atom],
    max_depth: int = 5,
) -> list[JourneyStep]:
    """Depth-first trace of ``variable`` starting at atom ``start_id``.

    At each hop the tracked name becomes the callee's parameter name. Every
    atom is expanded at most once, so cycles terminate.
    """
    steps: list[JourneyStep] = []
    visited: set[str] = set()

    def dfs(atom_id: str, current: str, depth: int, path: tuple[str, ...]) -> None:
        if depth > max_depth or atom_id in visited:
            return
        visited.add(atom_id)

        for edge in edge_map.get(atom_id, []):
            if edge.callee_id not in by_id:
                continue
            matching = [
                m
                for m in edge.mapping.mappings
                if current in (m.argument.variable, m.argument.code)
            ]
            for m in matching:
                caller = by_id.get(edge.caller_id)
                step = JourneyStep(
                    depth=depth,
                    caller_id=edge.caller_id,
                    caller_name=caller.name if caller else edge.caller_id,
                    caller_file=edge.caller_file,
                    callee_id=edge.callee_id,
                    callee_name=edge.callee_name,
                    callee_file=edge.callee_file,
                    call_site=edge.call_site,
                    variable_in=current,
                    parameter_in=m.parameter.name or f"param{m.position}",
                    transform=m.transform,
                    confidence=edge.confidence,
                    path=(*path, edge.caller_id),
                )
                steps.append(step)
                dfs(edge.callee_id, step.parameter_in, depth + 1, step.path)

    dfs(start_id, variable, 1, ())
    return steps


def summarize_journey(steps: list[JourneyStep]) -> JourneySummary:
    if not steps:
        return JourneySummary(
            total_steps=0,
            max_depth_reached=0,
            unique_files=0,
            unique_functions=0,
            avg_confidence=0.0,
        )

    by_depth: dict[int, list[str]] = {}
    for step in steps:
        kind = step.transform.kind if step.transform is not None else "none"
        by_depth.setdefault(step.depth, []).append(
            f"{step.caller_name} ({step.caller_file}:{step.call_site}) -> "
            f"{step.callee_name} ({step.callee_file}) as {step.parameter_in} [{kind}]"
        )

    return JourneySummary(
        total_steps=len(steps),
        max_depth_reached=max(s.depth for s in steps),
        unique_files=len({s.callee_file for s in steps}),
        unique_functions=len({s.callee_id for s in steps}),
        avg_confidence=round(sum(s.confidence for s in steps) / len(steps), 2),
        by_depth=by_depth,
    )


def find_source_atom(atoms: list[Atom], file_path: str, name: str) -> Atom | None:
    """Locate an atom by name, tolerating relative/absolute file path differences."""
    normalized = file_path.replace("\\", "/")
    base_name = normalized.rsplit("/", 1)[-1]
    for atom in atoms:
        if atom.name != name:
            continue
        atom_path = atom.file_path.replace("\\", "/")
        if (
            atom_path == normalized
            or atom_path.endswith("/" + normalized)
            or normalized.endswith("/" + atom_path)
            or atom_path.rsplit("/", 1)[-1] == base_name
        ):
            return atom
    return None


def variable_exists(atom: Atom, variable: str) -> bool:
    """True if ``variable`` is a parameter of ``atom`` or appears in one of its call arguments."""
    if atom.data_flow is not None and any(i.name == variable for i in atom.data_flow.inputs):
        return True
    for call in atom.calls:
        for arg in call.args or []:
            if isinstance(arg, dict) and variable in (arg.get("variable"), arg.get("name")):
                return True
    return False
