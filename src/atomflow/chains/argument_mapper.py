"""ArgumentMapper -- bind call-site arguments to callee parameters."""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from atomflow.chains.types import (
    AnalysisSummary,
    ArgumentInfo,
    ArgumentMapping,
    CallResult,
    ChainLink,
    DataFlowAnalysis,
    DirectPass,
    LiteralValue,
    Mapping,
    ParameterInfo,
    PropertyAccess,
    ReturnUsage,
    Spread,
    Transform,
    TransformKind,
    UnknownTransform,
    UsageSite,
)
from atomflow.exceptions import MappingError
from atomflow.heuristics import find_binding_usages, find_result_binding
from atomflow.models import ArgumentType, Atom, CallArgument, CallSite, Input

BASE_CONFIDENCE = 0.5
TYPE_MATCH_BONUS = 0.3
PROPERTY_ACCESS_BONUS = 0.2
NAME_MATCH_BONUS = 0.1
SPREAD_OR_DESTRUCTURE_PENALTY = 0.2


def _parse_argument(raw: Any, position: int) -> CallArgument:
    if isinstance(raw, CallArgument):
        return raw
    if not isinstance(raw, dict):
        msg = f"Argument {position} is {type(raw).__name__}, expected an object"
        raise MappingError(msg)
    try:
        return CallArgument.model_validate(raw)
    except ValidationError as exc:
        msg = f"Argument {position} is malformed: {exc.error_count()} error(s)"
        raise MappingError(msg) from exc


class ArgumentMapper:
    """Map one call site's arguments onto the callee's parameters.

    Usage:
        mapper = ArgumentMapper(caller, callee, call)
        mapping = mapper.map()
        analysis = mapper.analyze_data_flow()

    Only the shape of the atoms is used (``data_flow`` inputs, outputs and
    transformations, plus the caller's source text for return tracking).
    """

    def __init__(self, caller: Atom, callee: Atom, call: CallSite) -> None:
        self.caller = caller
        self.callee = callee
        self.call = call

    @property
    def params(self) -> list[Input]:
        if self.callee.data_flow is None:
            return []
        return self.callee.data_flow.inputs

    def _arguments(self) -> list[CallArgument]:
        return [_parse_argument(raw, i) for i, raw in enumerate(self.call.args or [])]

    # ------------------------------------------------------------------
    # Mapping
    # ------------------------------------------------------------------

    def map(self) -> ArgumentMapping:
        """Pair arguments with parameters by position.

        Positions present on only one side are dropped.

        Raises:
            MappingError: If an argument descriptor is malformed.
        """
        args = self._arguments()
        params = self.params

        mappings: list[Mapping] = []
        for i in range(max(len(args), len(params))):
            if i >= len(args) or i >= len(params):
                continue
            arg, param = args[i], params[i]
            mappings.append(
                Mapping(
                    position=i,
                    argument=ArgumentInfo(
                        code=arg.render(),
                        type=arg.type,
                        variable=arg.root_variable,
                    ),
                    parameter=ParameterInfo(
                        name=param.name,
                        type=str(param.type),
                        position=param.position,
                    ),
                    transform=self.detect_transform(arg, param),
                    confidence=self.calculate_confidence(arg, param),
                )
            )

        return ArgumentMapping(
            caller=self.caller.name,
            callee=self.callee.name,
            call_site=self.call.line,
            mappings=tuple(mappings),
            total_args=len(args),
            total_params=len(params),
            has_spread=any(a.is_spread for a in args),
            has_destructuring=any(p.is_destructured for p in params),
        )

    @staticmethod
    def detect_transform(arg: CallArgument, param: Input) -> Transform:
        """Classify how the argument relates to its parameter.

        Order matters: a member expression is a property access even when
        its text also matches the parameter name.
        """
        if arg.is_member:
            return PropertyAccess(from_=arg.object_name, property_name=arg.property_name)
        if param.name in (arg.name, arg.variable):
            return DirectPass(variable=param.name)
        if arg.type == ArgumentType.CALL_EXPRESSION:
            return CallResult(call=arg.callee)
        if arg.type == ArgumentType.LITERAL:
            return LiteralValue(value=arg.value)
        if arg.is_spread:
            return Spread(source=arg.spread_source)
        return UnknownTransform(argument_type=arg.type)

    @staticmethod
    def calculate_confidence(arg: CallArgument, param: Input) -> float:
        confidence = BASE_CONFIDENCE
        if arg.data_type and param.data_type and arg.data_type == param.data_type:
            confidence += TYPE_MATCH_BONUS
        if arg.is_member:
            confidence += PROPERTY_ACCESS_BONUS
        if arg.name is not None and arg.name == param.name:
            confidence += NAME_MATCH_BONUS
        if arg.is_spread or param.is_destructured:
            confidence -= SPREAD_OR_DESTRUCTURE_PENALTY
        return round(max(0.0, min(1.0, confidence)), 2)

    # ------------------------------------------------------------------
    # Return value tracking
    # ------------------------------------------------------------------

    def track_return_usage(self) -> ReturnUsage:
        """Decide whether the caller consumes the callee's return value.

        Looks for ``const|let|var NAME = callee(`` from the call-site line on and
        collects later lines mentioning NAME. Without such an assignment,
        any mention of the callee name counts as direct usage.
        """
        data_flow = self.callee.data_flow
        if data_flow is None or not data_flow.has_return:
            return ReturnUsage(is_used=False, reason="no_return")

        source = self.caller.code
        call_offset = max(self.call.line - self.caller.line, 0)
        binding = find_result_binding(source, self.callee.name, call_offset)
        if binding is not None:
            usages = tuple(
                UsageSite(line=self.caller.line + offset, context=context)
                for offset, context in find_binding_usages(source, binding, call_offset)
            )
            return ReturnUsage(
                is_used=bool(usages),
                reason=None if usages else "assigned_unused",
                usage_type="assigned",
                assigned_to=binding,
                usages=usages,
            )

        if self.callee.name in source:
            return ReturnUsage(is_used=True, usage_type="direct")
        return ReturnUsage(is_used=False, reason="not_referenced")

    # ------------------------------------------------------------------
    # Chains
    # ------------------------------------------------------------------

    def detect_chained_transforms(self, mapping: ArgumentMapping) -> list[ChainLink]:
        """Link arguments to the caller transformation that produced them."""
        if self.caller.data_flow is None:
            return []
        transformations = self.caller.data_flow.transformations

        chains: list[ChainLink] = []
        for m in mapping.mappings:
            variable = m.argument.variable
            if not variable:
                continue
            source = next((t for t in transformations if t.target == variable), None)
            if source is None:
                continue
            chains.append(
                ChainLink(
                    from_=f"{self.caller.name}.{source.operation or 'transform'}",
                    to=f"{self.callee.name}.input",
                    via=variable,
                )
            )
        return chains

    @staticmethod
    def calculate_chain_complexity(mapping: ArgumentMapping, return_usage: ReturnUsage) -> int:
        complexity = sum(1 for m in mapping.mappings if m.transform.kind != TransformKind.DIRECT_PASS)
        if return_usage.is_used:
            complexity += 1
        return complexity + len(return_usage.usages)

    def analyze_data_flow(self) -> DataFlowAnalysis:
        """Full analysis: mapping, return usage, chains and a summary."""
        mapping = self.map()
        return_usage = self.track_return_usage()
        chains = self.detect_chained_transforms(mapping)

        has_transformation = bool(chains) or any(
            m.transform.kind != TransformKind.DIRECT_PASS for m in mapping.mappings
        )
        return DataFlowAnalysis(
            mapping=mapping,
            return_usage=return_usage,
            chains=chains,
            summary=AnalysisSummary(
                has_data_transformation=has_transformation,
                has_return_usage=return_usage.is_used,
                chain_complexity=self.calculate_chain_complexity(mapping, return_usage),
            ),
        )
