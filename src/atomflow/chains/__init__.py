"""Cross-function data-flow chains.

Public API:
    ArgumentMapper(caller, callee, call).map() -> ArgumentMapping
    ArgumentMapper(caller, callee, call).analyze_data_flow() -> DataFlowAnalysis
    CrossFileResolver(atoms).resolve_all() -> list[CrossFileEdge]
    CrossFileResolver(atoms).build_edge_map() -> dict[str, list[CrossFileEdge]]
"""

from __future__ import annotations

from atomflow.chains.argument_mapper import ArgumentMapper
from atomflow.chains.cross_file import CrossFileResolver
from atomflow.chains.types import (
    ArgumentMapping,
    CallResult,
    ChainLink,
    CrossFileEdge,
    DataFlowAnalysis,
    DirectPass,
    LiteralValue,
    Mapping,
    PropertyAccess,
    ReturnUsage,
    Spread,
    Transform,
    TransformKind,
    UnknownTransform,
)

__all__ = [
    "ArgumentMapper",
    "ArgumentMapping",
    "CallResult",
    "ChainLink",
    "CrossFileEdge",
    "CrossFileResolver",
    "DataFlowAnalysis",
    "DirectPass",
    "LiteralValue",
    "Mapping",
    "PropertyAccess",
    "ReturnUsage",
    "Spread",
    "Transform",
    "TransformKind",
    "UnknownTransform",
]
