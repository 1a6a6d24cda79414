"""Annotation schema for semantic method classification and API patterns."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


def _require(data: dict[str, Any], key: str) -> Any:
    try:
        return data[key]
    except KeyError:
        raise ValueError(f"missing field {key!r}") from None


def _index(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"invalid parameter index: {value!r}")
    return value


class OwnershipKind(str, Enum):
    """How a receiver treats a parameter's reference."""

    STRONG = "strong"
    WEAK = "weak"
    COPY = "copy"
    UNSAFE_UNRETAINED = "unsafe_unretained"


class BlockInvocationStyle(str, Enum):
    """How an API invokes a block parameter."""

    SYNCHRONOUS = "synchronous"
    ASYNC_COPIED = "async_copied"
    STORED = "stored"


class ThreadingConstraint(str, Enum):
    """Threading constraint for a method."""

    MAIN_THREAD_ONLY = "main_thread_only"
    ANY_THREAD = "any_thread"


class ErrorPattern(str, Enum):
    """Error handling pattern for a method."""

    ERROR_OUT_PARAM = "error_out_param"
    THROWS_EXCEPTION = "throws_exception"
    NIL_ON_FAILURE = "nil_on_failure"


class AnnotationSource(str, Enum):
    """Where an annotation came from."""

    HEURISTIC = "heuristic"
    LLM = "llm"
    HUMAN_REVIEWED = "human_reviewed"


class PatternStereotype(str, Enum):
    """Well-known idiom a multi-method pattern represents."""

    RESOURCE_LIFECYCLE = "resource_lifecycle"
    BUILDER_SEQUENCE = "builder_sequence"
    OBSERVER_PAIR = "observer_pair"
    TRANSACTION_BRACKET = "transaction_bracket"
    ENUMERATION = "enumeration"
    ERROR_OUT = "error_out"
    DELEGATE_PROTOCOL = "delegate_protocol"
    TARGET_ACTION = "target_action"
    PAIRED_STATE = "paired_state"
    FACTORY_CLUSTER = "factory_cluster"


@dataclass
class ParamOwnership:
    """Ownership of the parameter at a zero-based index."""

    param_index: int
    ownership: OwnershipKind

    def to_dict(self) -> dict[str, Any]:
        return {"param_index": self.param_index, "ownership": self.ownership.value}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ParamOwnership:
        return cls(
            param_index=_index(_require(data, "param_index")),
            ownership=OwnershipKind(_require(data, "ownership")),
        )


@dataclass
class BlockParamAnnotation:
    """Invocation style of the block parameter at a zero-based index."""

    param_index: int
    invocation: BlockInvocationStyle

    def to_dict(self) -> dict[str, Any]:
        return {"param_index": self.param_index, "invocation": self.invocation.value}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BlockParamAnnotation:
        return cls(
            param_index=_index(_require(data, "param_index")),
            invocation=BlockInvocationStyle(_require(data, "invocation")),
        )


@dataclass
class MethodAnnotation:
    """Annotations for a single method or property."""

    selector: str
    is_instance: bool
    source: AnnotationSource
    parameter_ownership: list[ParamOwnership] = field(default_factory=list)
    block_parameters: list[BlockParamAnnotation] = field(default_factory=list)
    threading: ThreadingConstraint | None = None
    error_pattern: ErrorPattern | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"selector": self.selector, "is_instance": self.is_instance}
        if self.parameter_ownership:
            out["parameter_ownership"] = [p.to_dict() for p in self.parameter_ownership]
        if self.block_parameters:
            out["block_parameters"] = [b.to_dict() for b in self.block_parameters]
        if self.threading is not None:
            out["threading"] = self.threading.value
        if self.error_pattern is not None:
            out["error_pattern"] = self.error_pattern.value
        out["source"] = self.source.value
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MethodAnnotation:
        threading = data.get("threading")
        error_pattern = data.get("error_pattern")
        return cls(
            selector=_require(data, "selector"),
            is_instance=bool(_require(data, "is_instance")),
            source=AnnotationSource(_require(data, "source")),
            parameter_ownership=[
                ParamOwnership.from_dict(p) for p in data.get("parameter_ownership", [])
            ],
            block_parameters=[
                BlockParamAnnotation.from_dict(b) for b in data.get("block_parameters", [])
            ],
            threading=ThreadingConstraint(threading) if threading is not None else None,
            error_pattern=ErrorPattern(error_pattern) if error_pattern is not None else None,
        )


@dataclass
class ClassAnnotations:
    """Annotations for the methods of one class."""

    class_name: str
    methods: list[MethodAnnotation] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"class_name": self.class_name, "methods": [m.to_dict() for m in self.methods]}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ClassAnnotations:
        return cls(
            class_name=_require(data, "class_name"),
            methods=[MethodAnnotation.from_dict(m) for m in _require(data, "methods")],
        )


@dataclass
class FrameworkAnnotations:
    """Annotations for an entire framework."""

    framework: str
    classes: list[ClassAnnotations] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"framework": self.framework, "classes": [c.to_dict() for c in self.classes]}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FrameworkAnnotations:
        return cls(
            framework=_require(data, "framework"),
            classes=[ClassAnnotations.from_dict(c) for c in _require(data, "classes")],
        )


@dataclass
class AnnotationOverride:
    """A single human override for one field of a method annotation."""

    class_name: str
    selector: str
    field: str
    value: Any
    reason: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "class_name": self.class_name,
            "selector": self.selector,
            "field": self.field,
            "value": self.value,
            "reason": self.reason,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AnnotationOverride:
        return cls(
            class_name=_require(data, "class_name"),
            selector=_require(data, "selector"),
            field=_require(data, "field"),
            value=_require(data, "value"),
            reason=_require(data, "reason"),
        )


@dataclass
class AnnotationOverrides:
    """Human-reviewed overrides for a framework."""

    framework: str = ""
    overrides: list[AnnotationOverride] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"framework": self.framework, "overrides": [o.to_dict() for o in self.overrides]}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AnnotationOverrides:
        return cls(
            framework=_require(data, "framework"),
            overrides=[AnnotationOverride.from_dict(o) for o in _require(data, "overrides")],
        )


@dataclass
class DisagreementResolution:
    """A human decision on which annotation source to trust."""

    trust: str
    reason: str

    def to_dict(self) -> dict[str, Any]:
        return {"trust": self.trust, "reason": self.reason}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DisagreementResolution:
        return cls(trust=_require(data, "trust"), reason=_require(data, "reason"))


@dataclass
class AnnotationDisagreement:
    """A heuristic/LLM disagreement awaiting human review."""

    class_name: str
    selector: str
    heuristic_value: str
    llm_value: str
    field: str
    resolution: DisagreementResolution | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "class_name": self.class_name,
            "selector": self.selector,
            "heuristic_value": self.heuristic_value,
            "llm_value": self.llm_value,
            "field": self.field,
        }
        if self.resolution is not None:
            out["resolution"] = self.resolution.to_dict()
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AnnotationDisagreement:
        resolution = data.get("resolution")
        return cls(
            class_name=_require(data, "class_name"),
            selector=_require(data, "selector"),
            heuristic_value=_require(data, "heuristic_value"),
            llm_value=_require(data, "llm_value"),
            field=_require(data, "field"),
            resolution=(
                DisagreementResolution.from_dict(resolution) if resolution is not None else None
            ),
        )


@dataclass
class PatternConstraint:
    """An ordering, threading or ownership constraint on a pattern."""

    kind: str
    description: str

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "description": self.description}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PatternConstraint:
        return cls(kind=_require(data, "kind"), description=_require(data, "description"))


@dataclass
class ApiPattern:
    """A recognised multi-method behavioural contract."""

    stereotype: PatternStereotype
    name: str
    participants: Any
    source: AnnotationSource
    constraints: list[PatternConstraint] = field(default_factory=list)
    doc_ref: str | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "stereotype": self.stereotype.value,
            "name": self.name,
            "participants": self.participants,
        }
        if self.constraints:
            out["constraints"] = [c.to_dict() for c in self.constraints]
        out["source"] = self.source.value
        if self.doc_ref is not None:
            out["doc_ref"] = self.doc_ref
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ApiPattern:
        return cls(
            stereotype=PatternStereotype(_require(data, "stereotype")),
            name=_require(data, "name"),
            participants=_require(data, "participants"),
            source=AnnotationSource(_require(data, "source")),
            constraints=[PatternConstraint.from_dict(c) for c in data.get("constraints", [])],
            doc_ref=data.get("doc_ref"),
        )