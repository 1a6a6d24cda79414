"""Annotation- and pattern-derived relations of the enriched checkpoint."""

from __future__ import annotations

from dataclasses import dataclass, field
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


@dataclass
class BlockMethodEntry:
    """A method with a block parameter at a zero-based index."""

    class_name: str
    selector: str
    param_index: int

    def to_dict(self) -> dict[str, Any]:
        return {"class": self.class_name, "selector": self.selector, "param_index": self.param_index}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BlockMethodEntry:
        return cls(
            class_name=_require(data, "class"),
            selector=_require(data, "selector"),
            param_index=_index(_require(data, "param_index")),
        )


@dataclass
class ClassSelectorEntry:
    """A (class, selector) pair identifying a method."""

    class_name: str
    selector: str

    def to_dict(self) -> dict[str, Any]:
        return {"class": self.class_name, "selector": self.selector}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ClassSelectorEntry:
        return cls(class_name=_require(data, "class"), selector=_require(data, "selector"))


@dataclass
class ScopedResourceEntry:
    """An open/close selector pair on a class."""

    class_name: str
    open_selector: str
    close_selector: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "class": self.class_name,
            "open_selector": self.open_selector,
            "close_selector": self.close_selector,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ScopedResourceEntry:
        return cls(
            class_name=_require(data, "class"),
            open_selector=_require(data, "open_selector"),
            close_selector=_require(data, "close_selector"),
        )


@dataclass
class EnrichmentData:
    """Relations that emitters need beyond the raw annotations."""

    sync_block_methods: list[BlockMethodEntry] = field(default_factory=list)
    async_block_methods: list[BlockMethodEntry] = field(default_factory=list)
    stored_block_methods: list[BlockMethodEntry] = field(default_factory=list)
    delegate_protocols: list[str] = field(default_factory=list)
    convenience_error_methods: list[ClassSelectorEntry] = field(default_factory=list)
    collection_iterables: list[str] = field(default_factory=list)
    scoped_resources: list[ScopedResourceEntry] = field(default_factory=list)
    main_thread_classes: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        entries: list[tuple[str, list[Any]]] = [
            ("sync_block_methods", [e.to_dict() for e in self.sync_block_methods]),
            ("async_block_methods", [e.to_dict() for e in self.async_block_methods]),
            ("stored_block_methods", [e.to_dict() for e in self.stored_block_methods]),
            ("delegate_protocols", list(self.delegate_protocols)),
            ("convenience_error_methods", [e.to_dict() for e in self.convenience_error_methods]),
            ("collection_iterables", list(self.collection_iterables)),
            ("scoped_resources", [e.to_dict() for e in self.scoped_resources]),
            ("main_thread_classes", list(self.main_thread_classes)),
        ]
        return {key: value for key, value in entries if value}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EnrichmentData:
        return cls(
            sync_block_methods=[
                BlockMethodEntry.from_dict(e) for e in data.get("sync_block_methods", [])
            ],
            async_block_methods=[
                BlockMethodEntry.from_dict(e) for e in data.get("async_block_methods", [])
            ],
            stored_block_methods=[
                BlockMethodEntry.from_dict(e) for e in data.get("stored_block_methods", [])
            ],
            delegate_protocols=list(data.get("delegate_protocols", [])),
            convenience_error_methods=[
                ClassSelectorEntry.from_dict(e) for e in data.get("convenience_error_methods", [])
            ],
            collection_iterables=list(data.get("collection_iterables", [])),
            scoped_resources=[
                ScopedResourceEntry.from_dict(e) for e in data.get("scoped_resources", [])
            ],
            main_thread_classes=list(data.get("main_thread_classes", [])),
        )


@dataclass
class Violation:
    """A single verification rule violation."""

    rule: str
    class_name: str
    selector: str
    description: str
    param_index: int | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "rule": self.rule,
            "class": self.class_name,
            "selector": self.selector,
        }
        if self.param_index is not None:
            out["param_index"] = self.param_index
        out["description"] = self.description
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Violation:
        param_index = data.get("param_index")
        return cls(
            rule=_require(data, "rule"),
            class_name=_require(data, "class"),
            selector=_require(data, "selector"),
            description=_require(data, "description"),
            param_index=_index(param_index) if param_index is not None else None,
        )


@dataclass
class VerificationReport:
    """Outcome of the enrichment completeness checks."""

    passed: bool = False
    violations: list[Violation] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"passed": self.passed}
        if self.violations:
            out["violations"] = [v.to_dict() for v in self.violations]
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> VerificationReport:
        return cls(
            passed=bool(_require(data, "passed")),
            violations=[Violation.from_dict(v) for v in data.get("violations", [])],
        )