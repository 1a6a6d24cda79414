"""Type references used in method signatures, properties and functions.

A :class:`TypeRef` is a tagged union keyed by :class:`TypeKind`, with a
``nullable`` flag that applies to any kind.  Its dictionary form puts the
flag and the ``kind`` tag side by side with the kind-specific fields.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class TypeKind(str, Enum):
    """The kinds of type a :class:`TypeRef` can describe."""

    ALIAS = "alias"
    BLOCK = "block"
    CLASS = "class"
    CLASS_REF = "class_ref"
    ID = "id"
    INSTANCETYPE = "instancetype"
    POINTER = "pointer"
    PRIMITIVE = "primitive"
    SELECTOR = "selector"
    STRUCT = "struct"


_NAMED_KINDS = frozenset({TypeKind.ALIAS, TypeKind.CLASS, TypeKind.PRIMITIVE, TypeKind.STRUCT})
_FRAMEWORK_KINDS = frozenset({TypeKind.ALIAS, TypeKind.CLASS})
_PARAM_KINDS = frozenset({TypeKind.BLOCK, TypeKind.CLASS})


@dataclass
class TypeRef:
    """A reference to an Objective-C, C or Swift type."""

    kind: TypeKind
    name: str | None = None
    framework: str | None = None
    params: list[TypeRef] = field(default_factory=list)
    return_type: TypeRef | None = None
    nullable: bool = False

    def __post_init__(self) -> None:
        self.kind = TypeKind(self.kind)
        kind = self.kind
        if kind in _NAMED_KINDS:
            if self.name is None:
                raise ValueError(f"type kind {kind.value!r} requires a name")
        elif self.name is not None:
            raise ValueError(f"type kind {kind.value!r} takes no name")
        if self.framework is not None and kind not in _FRAMEWORK_KINDS:
            raise ValueError(f"type kind {kind.value!r} takes no framework")
        if self.params and kind not in _PARAM_KINDS:
            raise ValueError(f"type kind {kind.value!r} takes no params")
        if kind is TypeKind.BLOCK:
            if self.return_type is None:
                raise ValueError("block type requires a return_type")
        elif self.return_type is not None:
            raise ValueError(f"type kind {kind.value!r} takes no return_type")

    @classmethod
    def void(cls) -> TypeRef:
        """The non-nullable ``void`` primitive."""
        return cls(TypeKind.PRIMITIVE, name="void")

    @classmethod
    def primitive(cls, name: str, nullable: bool = False) -> TypeRef:
        """A C primitive type such as ``int64`` or ``double``."""
        return cls(TypeKind.PRIMITIVE, name=name, nullable=nullable)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"nullable": self.nullable, "kind": self.kind.value}
        if self.kind in _NAMED_KINDS:
            out["name"] = self.name
        if self.kind in _FRAMEWORK_KINDS and self.framework is not None:
            out["framework"] = self.framework
        if self.kind is TypeKind.BLOCK:
            out["params"] = [p.to_dict() for p in self.params]
            assert self.return_type is not None
            out["return_type"] = self.return_type.to_dict()
        elif self.kind is TypeKind.CLASS and self.params:
            out["params"] = [p.to_dict() for p in self.params]
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TypeRef:
        if "kind" not in data:
            raise ValueError("missing field 'kind'")
        kind = TypeKind(data["kind"])
        nullable = bool(data.get("nullable", False))
        name = None
        if kind in _NAMED_KINDS:
            if "name" not in data:
                raise ValueError(f"missing field 'name' for type kind {kind.value!r}")
            name = data["name"]
        framework = data.get("framework") if kind in _FRAMEWORK_KINDS else None
        params: list[TypeRef] = []
        if kind in _PARAM_KINDS:
            params = [cls.from_dict(p) for p in data.get("params") or []]
        return_type = None
        if kind is TypeKind.BLOCK:
            if "return_type" not in data:
                raise ValueError("missing field 'return_type' for block type")
            return_type = cls.from_dict(data["return_type"])
        return cls(
            kind,
            name=name,
            framework=framework,
            params=params,
            return_type=return_type,
            nullable=nullable,
        )