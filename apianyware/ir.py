"""Core IR declarations for macOS APIs and their checkpoint JSON form.

Each checkpoint file holds one :class:`Framework`.  Later pipeline phases
add fields (resolved relations, annotations, enrichment) while keeping
everything produced by earlier phases.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from os import PathLike
from pathlib import Path
from typing import Any

from apianyware.annotation import ApiPattern, ClassAnnotations
from apianyware.enrichment import EnrichmentData, VerificationReport
from apianyware.provenance import DeclarationSource, DocRefs, SourceProvenance
from apianyware.type_ref import TypeRef


def _require(data: dict[str, Any], key: str) -> Any:
    try:
        return data[key]
    except KeyError:
        raise ValueError(f"missing field {key!r}") from None


def _items(data: dict[str, Any], key: str, *, null_ok: bool = False) -> list[Any]:
    """A list field that defaults to empty; ``null`` is accepted only when allowed."""
    value = data.get(key, [])
    if value is None:
        if null_ok:
            return []
        raise ValueError(f"field {key!r} must not be null")
    if not isinstance(value, list):
        raise ValueError(f"field {key!r} must be a list, got {type(value).__name__}")
    return value


def _strings(data: dict[str, Any], key: str) -> list[str]:
    return [str(item) for item in _items(data, key)]


def _put_decl_meta(
    out: dict[str, Any],
    source: DeclarationSource | None,
    provenance: SourceProvenance | None,
    doc_refs: DocRefs | None,
) -> None:
    if source is not None:
        out["source"] = source.value
    if provenance is not None:
        out["provenance"] = provenance.to_dict()
    if doc_refs is not None:
        out["doc_refs"] = doc_refs.to_dict()


def _decl_meta(data: dict[str, Any]) -> dict[str, Any]:
    source = data.get("source")
    provenance = data.get("provenance")
    doc_refs = data.get("doc_refs")
    return {
        "source": DeclarationSource(source) if source is not None else None,
        "provenance": SourceProvenance.from_dict(provenance) if provenance is not None else None,
        "doc_refs": DocRefs.from_dict(doc_refs) if doc_refs is not None else None,
    }


@dataclass
class SkippedSymbol:
    """A symbol left out during extraction, with the reason."""

    name: str
    kind: str
    reason: str

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "kind": self.kind, "reason": self.reason}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SkippedSymbol:
        return cls(
            name=_require(data, "name"),
            kind=_require(data, "kind"),
            reason=_require(data, "reason"),
        )


@dataclass
class Param:
    """A named parameter of a method or function."""

    name: str
    param_type: TypeRef

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "type": self.param_type.to_dict()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Param:
        return cls(
            name=_require(data, "name"),
            param_type=TypeRef.from_dict(_require(data, "type")),
        )


@dataclass
class Method:
    """An instance or class method."""

    selector: str
    return_type: TypeRef
    class_method: bool = False
    init_method: bool = False
    params: list[Param] = field(default_factory=list)
    deprecated: bool = False
    variadic: bool = False
    source: DeclarationSource | None = None
    provenance: SourceProvenance | None = None
    doc_refs: DocRefs | None = None
    origin: str | None = None
    category: str | None = None
    overrides: str | None = None
    returns_retained: bool | None = None
    satisfies_protocol: str | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "selector": self.selector,
            "class_method": self.class_method,
            "init_method": self.init_method,
            "params": [p.to_dict() for p in self.params],
            "return_type": self.return_type.to_dict(),
            "deprecated": self.deprecated,
            "variadic": self.variadic,
        }
        _put_decl_meta(out, self.source, self.provenance, self.doc_refs)
        optional = {
            "origin": self.origin,
            "category": self.category,
            "overrides": self.overrides,
            "returns_retained": self.returns_retained,
            "satisfies_protocol": self.satisfies_protocol,
        }
        out.update({key: value for key, value in optional.items() if value is not None})
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Method:
        returns_retained = data.get("returns_retained")
        return cls(
            selector=_require(data, "selector"),
            return_type=TypeRef.from_dict(_require(data, "return_type")),
            class_method=bool(data.get("class_method", False)),
            init_method=bool(data.get("init_method", False)),
            params=[Param.from_dict(p) for p in _items(data, "params")],
            deprecated=bool(data.get("deprecated", False)),
            variadic=bool(data.get("variadic", False)),
            origin=data.get("origin"),
            category=data.get("category"),
            overrides=data.get("overrides"),
            returns_retained=bool(returns_retained) if returns_retained is not None else None,
            satisfies_protocol=data.get("satisfies_protocol"),
            **_decl_meta(data),
        )


@dataclass
class Property:
    """An instance or class property."""

    name: str
    property_type: TypeRef
    readonly: bool = False
    class_property: bool = False
    deprecated: bool = False
    source: DeclarationSource | None = None
    provenance: SourceProvenance | None = None
    doc_refs: DocRefs | None = None
    origin: str | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "name": self.name,
            "type": self.property_type.to_dict(),
            "readonly": self.readonly,
            "class_property": self.class_property,
            "deprecated": self.deprecated,
        }
        _put_decl_meta(out, self.source, self.provenance, self.doc_refs)
        if self.origin is not None:
            out["origin"] = self.origin
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Property:
        return cls(
            name=_require(data, "name"),
            property_type=TypeRef.from_dict(_require(data, "type")),
            readonly=bool(data.get("readonly", False)),
            class_property=bool(data.get("class_property", False)),
            deprecated=bool(data.get("deprecated", False)),
            origin=data.get("origin"),
            **_decl_meta(data),
        )


@dataclass
class CategoryGroup:
    """Methods a category from another framework contributes to a class."""

    category: str
    origin_framework: str
    methods: list[Method] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "category": self.category,
            "origin_framework": self.origin_framework,
            "methods": [m.to_dict() for m in self.methods],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CategoryGroup:
        return cls(
            category=_require(data, "category"),
            origin_framework=_require(data, "origin_framework"),
            methods=[Method.from_dict(m) for m in _items(data, "methods")],
        )


@dataclass
class Class:
    """A class declaration; ``superclass`` is empty when there is none."""

    name: str
    superclass: str = ""
    protocols: list[str] = field(default_factory=list)
    properties: list[Property] = field(default_factory=list)
    methods: list[Method] = field(default_factory=list)
    category_methods: list[CategoryGroup] = field(default_factory=list)
    ancestors: list[str] = field(default_factory=list)
    all_methods: list[Method] = field(default_factory=list)
    all_properties: list[Property] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "name": self.name,
            "super": self.superclass,
            "protocols": list(self.protocols),
            "properties": [p.to_dict() for p in self.properties],
            "methods": [m.to_dict() for m in self.methods],
            "category_methods": [g.to_dict() for g in self.category_methods],
        }
        if self.ancestors:
            out["ancestors"] = list(self.ancestors)
        if self.all_methods:
            out["all_methods"] = [m.to_dict() for m in self.all_methods]
        if self.all_properties:
            out["all_properties"] = [p.to_dict() for p in self.all_properties]
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Class:
        return cls(
            name=_require(data, "name"),
            superclass=data.get("super", "") if "super" in data else "",
            protocols=_strings(data, "protocols"),
            properties=[Property.from_dict(p) for p in _items(data, "properties", null_ok=True)],
            methods=[Method.from_dict(m) for m in _items(data, "methods", null_ok=True)],
            category_methods=[CategoryGroup.from_dict(g) for g in _items(data, "category_methods")],
            ancestors=_strings(data, "ancestors"),
            all_methods=[Method.from_dict(m) for m in _items(data, "all_methods")],
            all_properties=[Property.from_dict(p) for p in _items(data, "all_properties")],
        )


@dataclass
class Protocol:
    """A protocol with its required and optional members."""

    name: str
    inherits: list[str] = field(default_factory=list)
    required_methods: list[Method] = field(default_factory=list)
    optional_methods: list[Method] = field(default_factory=list)
    properties: list[Property] = field(default_factory=list)
    source: DeclarationSource | None = None
    provenance: SourceProvenance | None = None
    doc_refs: DocRefs | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "name": self.name,
            "inherits": list(self.inherits),
            "required_methods": [m.to_dict() for m in self.required_methods],
            "optional_methods": [m.to_dict() for m in self.optional_methods],
            "properties": [p.to_dict() for p in self.properties],
        }
        _put_decl_meta(out, self.source, self.provenance, self.doc_refs)
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Protocol:
        return cls(
            name=_require(data, "name"),
            inherits=_strings(data, "inherits"),
            required_methods=[Method.from_dict(m) for m in _items(data, "required_methods")],
            optional_methods=[Method.from_dict(m) for m in _items(data, "optional_methods")],
            properties=[Property.from_dict(p) for p in _items(data, "properties")],
            **_decl_meta(data),
        )


@dataclass
class EnumValue:
    """A named integer value of an enumeration."""

    name: str
    value: int

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "value": self.value}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EnumValue:
        value = _require(data, "value")
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"invalid enum value: {value!r}")
        if not -(2**63) <= value < 2**63:
            raise ValueError(f"enum value out of 64-bit range: {value}")
        return cls(name=_require(data, "name"), value=value)


@dataclass
class Enum:
    """An enumeration with its underlying type and values."""

    name: str
    enum_type: TypeRef
    values: list[EnumValue] = field(default_factory=list)
    source: DeclarationSource | None = None
    provenance: SourceProvenance | None = None
    doc_refs: DocRefs | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "name": self.name,
            "type": self.enum_type.to_dict(),
            "values": [v.to_dict() for v in self.values],
        }
        _put_decl_meta(out, self.source, self.provenance, self.doc_refs)
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Enum:
        return cls(
            name=_require(data, "name"),
            enum_type=TypeRef.from_dict(_require(data, "type")),
            values=[EnumValue.from_dict(v) for v in _items(data, "values")],
            **_decl_meta(data),
        )


@dataclass
class StructField:
    """A field of a struct."""

    name: str
    field_type: TypeRef

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "type": self.field_type.to_dict()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StructField:
        return cls(
            name=_require(data, "name"),
            field_type=TypeRef.from_dict(_require(data, "type")),
        )


@dataclass
class Struct:
    """A struct declaration."""

    name: str
    fields: list[StructField] = field(default_factory=list)
    source: DeclarationSource | None = None
    provenance: SourceProvenance | None = None
    doc_refs: DocRefs | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "name": self.name,
            "fields": [f.to_dict() for f in self.fields],
        }
        _put_decl_meta(out, self.source, self.provenance, self.doc_refs)
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Struct:
        return cls(
            name=_require(data, "name"),
            fields=[StructField.from_dict(f) for f in _items(data, "fields")],
            **_decl_meta(data),
        )


@dataclass
class Function:
    """A free function declaration."""

    name: str
    return_type: TypeRef
    params: list[Param] = field(default_factory=list)
    inline: bool = False
    variadic: bool = False
    source: DeclarationSource | None = None
    provenance: SourceProvenance | None = None
    doc_refs: DocRefs | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "name": self.name,
            "params": [p.to_dict() for p in self.params],
            "return_type": self.return_type.to_dict(),
            "inline": self.inline,
            "variadic": self.variadic,
        }
        _put_decl_meta(out, self.source, self.provenance, self.doc_refs)
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Function:
        return cls(
            name=_require(data, "name"),
            return_type=TypeRef.from_dict(_require(data, "return_type")),
            params=[Param.from_dict(p) for p in _items(data, "params")],
            inline=bool(data.get("inline", False)),
            variadic=bool(data.get("variadic", False)),
            **_decl_meta(data),
        )


@dataclass
class Constant:
    """A global constant or extern variable."""

    name: str
    constant_type: TypeRef
    source: DeclarationSource | None = None
    provenance: SourceProvenance | None = None
    doc_refs: DocRefs | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"name": self.name, "type": self.constant_type.to_dict()}
        _put_decl_meta(out, self.source, self.provenance, self.doc_refs)
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Constant:
        return cls(
            name=_require(data, "name"),
            constant_type=TypeRef.from_dict(_require(data, "type")),
            **_decl_meta(data),
        )


@dataclass
class Framework:
    """Top-level IR document for one framework.

    ``ir_level`` is read from legacy documents but never written back.
    """

    name: str
    format_version: str = ""
    checkpoint: str = ""
    sdk_version: str | None = None
    collected_at: str | None = None
    depends_on: list[str] = field(default_factory=list)
    skipped_symbols: list[SkippedSymbol] = field(default_factory=list)
    classes: list[Class] = field(default_factory=list)
    protocols: list[Protocol] = field(default_factory=list)
    enums: list[Enum] = field(default_factory=list)
    structs: list[Struct] = field(default_factory=list)
    functions: list[Function] = field(default_factory=list)
    constants: list[Constant] = field(default_factory=list)
    class_annotations: list[ClassAnnotations] = field(default_factory=list)
    api_patterns: list[ApiPattern] = field(default_factory=list)
    enrichment: EnrichmentData | None = None
    verification: VerificationReport | None = None
    ir_level: int | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "format_version": self.format_version,
            "checkpoint": self.checkpoint,
            "framework": self.name,
        }
        if self.sdk_version is not None:
            out["sdk_version"] = self.sdk_version
        if self.collected_at is not None:
            out["collected_at"] = self.collected_at
        out["depends_on"] = list(self.depends_on)
        out["skipped_symbols"] = [s.to_dict() for s in self.skipped_symbols]
        out["classes"] = [c.to_dict() for c in self.classes]
        out["protocols"] = [p.to_dict() for p in self.protocols]
        out["enums"] = [e.to_dict() for e in self.enums]
        out["structs"] = [s.to_dict() for s in self.structs]
        out["functions"] = [f.to_dict() for f in self.functions]
        out["constants"] = [c.to_dict() for c in self.constants]
        if self.class_annotations:
            out["class_annotations"] = [a.to_dict() for a in self.class_annotations]
        if self.api_patterns:
            out["api_patterns"] = [p.to_dict() for p in self.api_patterns]
        if self.enrichment is not None:
            out["enrichment"] = self.enrichment.to_dict()
        if self.verification is not None:
            out["verification"] = self.verification.to_dict()
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Framework:
        if not isinstance(data, dict):
            raise ValueError("framework document must be a JSON object")
        if "format_version" in data and "ir_version" in data:
            raise ValueError("duplicate field 'format_version' (also given as 'ir_version')")
        format_version = data.get("format_version", data.get("ir_version", ""))
        enrichment = data.get("enrichment")
        verification = data.get("verification")
        ir_level = data.get("ir_level")
        if ir_level is not None and (isinstance(ir_level, bool) or not isinstance(ir_level, int)):
            raise ValueError(f"invalid ir_level: {ir_level!r}")
        return cls(
            name=_require(data, "framework"),
            format_version=format_version,
            checkpoint=data.get("checkpoint", ""),
            sdk_version=data.get("sdk_version"),
            collected_at=data.get("collected_at"),
            depends_on=_strings(data, "depends_on"),
            skipped_symbols=[
                SkippedSymbol.from_dict(s) for s in _items(data, "skipped_symbols", null_ok=True)
            ],
            classes=[Class.from_dict(c) for c in _items(data, "classes", null_ok=True)],
            protocols=[Protocol.from_dict(p) for p in _items(data, "protocols", null_ok=True)],
            enums=[Enum.from_dict(e) for e in _items(data, "enums", null_ok=True)],
            structs=[Struct.from_dict(s) for s in _items(data, "structs", null_ok=True)],
            functions=[Function.from_dict(f) for f in _items(data, "functions", null_ok=True)],
            constants=[Constant.from_dict(c) for c in _items(data, "constants", null_ok=True)],
            class_annotations=[
                ClassAnnotations.from_dict(a) for a in _items(data, "class_annotations")
            ],
            api_patterns=[ApiPattern.from_dict(p) for p in _items(data, "api_patterns")],
            enrichment=EnrichmentData.from_dict(enrichment) if enrichment is not None else None,
            verification=(
                VerificationReport.from_dict(verification) if verification is not None else None
            ),
            ir_level=ir_level,
        )

    def to_json(self, indent: int | None = 2) -> str:
        """Serialise to checkpoint JSON text."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_json(cls, text: str) -> Framework:
        """Parse checkpoint JSON text."""
        return cls.from_dict(json.loads(text))


def load_framework(path: str | PathLike[str]) -> Framework:
    """Read and parse a checkpoint file."""
    file_path = Path(path)
    text = file_path.read_text(encoding="utf-8")
    try:
        return Framework.from_json(text)
    except ValueError as exc:
        raise ValueError(f"failed to parse {file_path}: {exc}") from exc