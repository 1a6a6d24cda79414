"""Model of the JSON tree written by ``swift-api-digester -dump-sdk``.

The document holds a single ``ABIRoot`` node.  Every element of the tree
(imports, type declarations, functions, properties, conformances, type
references) is an :class:`AbiNode` with a ``kind`` discriminator, optional
declaration metadata and a list of child nodes.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any


def _str(data: dict[str, Any], key: str) -> str:
    value = data.get(key, "")
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"field {key!r} must be a string, got {type(value).__name__}")
    return value


def _opt_str(data: dict[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise ValueError(f"field {key!r} must be a string, got {type(value).__name__}")
    return value


def _flag(data: dict[str, Any], key: str) -> bool:
    value = data.get(key, False)
    if not isinstance(value, bool):
        raise ValueError(f"field {key!r} must be a boolean, got {type(value).__name__}")
    return value


def _list(data: dict[str, Any], key: str) -> list[Any]:
    value = data.get(key, [])
    if not isinstance(value, list):
        raise ValueError(f"field {key!r} must be a list, got {type(value).__name__}")
    return value


def _strs(data: dict[str, Any], key: str) -> list[str]:
    items = _list(data, key)
    if not all(isinstance(item, str) for item in items):
        raise ValueError(f"field {key!r} must be a list of strings")
    return list(items)


def _nodes(data: dict[str, Any], key: str) -> list[AbiNode]:
    return [AbiNode.from_dict(item) for item in _list(data, key)]


@dataclass
class AbiNode:
    """One node of the ABI tree: a declaration, conformance or type reference."""

    kind: str
    name: str = ""
    printed_name: str = ""
    children: list[AbiNode] = field(default_factory=list)

    decl_kind: str | None = None
    usr: str | None = None
    mangled_name: str | None = None
    module_name: str | None = None

    intro_macos: str | None = None
    intro_ios: str | None = None
    intro_tvos: str | None = None
    intro_watchos: str | None = None
    intro_swift: str | None = None

    decl_attributes: list[str] = field(default_factory=list)

    superclass_usr: str | None = None
    superclass_names: list[str] = field(default_factory=list)
    conformances: list[AbiNode] = field(default_factory=list)
    generic_sig: str | None = None

    is_static: bool = False
    func_self_kind: str | None = None
    throwing: bool = False
    is_async: bool = False
    init_kind: str | None = None
    protocol_req: bool = False

    accessors: list[AbiNode] = field(default_factory=list)
    accessor_kind: str | None = None
    is_let: bool = False
    has_storage: bool = False
    is_from_extension: bool = False
    req_new_witness_table_entry: bool = False

    enum_raw_type_name: str | None = None
    is_enum_exhaustive: bool = False

    overriding: bool = False
    implicit: bool = False
    has_default_arg: bool = False

    param_value_ownership: str | None = None
    type_attributes: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AbiNode:
        """Build a node (and its subtree) from its JSON object."""
        if not isinstance(data, dict):
            raise ValueError(f"ABI node must be a JSON object, got {type(data).__name__}")
        kind = data.get("kind")
        if kind is None:
            raise ValueError("missing field 'kind'")
        if not isinstance(kind, str):
            raise ValueError("field 'kind' must be a string")
        return cls(
            kind=kind,
            name=_str(data, "name"),
            printed_name=_str(data, "printedName"),
            children=_nodes(data, "children"),
            decl_kind=_opt_str(data, "declKind"),
            usr=_opt_str(data, "usr"),
            mangled_name=_opt_str(data, "mangledName"),
            module_name=_opt_str(data, "moduleName"),
            intro_macos=_opt_str(data, "intro_Macosx"),
            intro_ios=_opt_str(data, "intro_iOS"),
            intro_tvos=_opt_str(data, "intro_tvOS"),
            intro_watchos=_opt_str(data, "intro_watchOS"),
            intro_swift=_opt_str(data, "intro_swift"),
            decl_attributes=_strs(data, "declAttributes"),
            superclass_usr=_opt_str(data, "superclassUsr"),
            superclass_names=_strs(data, "superclassNames"),
            conformances=_nodes(data, "conformances"),
            generic_sig=_opt_str(data, "genericSig"),
            is_static=_flag(data, "static"),
            func_self_kind=_opt_str(data, "funcSelfKind"),
            throwing=_flag(data, "throwing"),
            is_async=_flag(data, "async"),
            init_kind=_opt_str(data, "init_kind"),
            protocol_req=_flag(data, "protocolReq"),
            accessors=_nodes(data, "accessors"),
            accessor_kind=_opt_str(data, "accessorKind"),
            is_let=_flag(data, "isLet"),
            has_storage=_flag(data, "hasStorage"),
            is_from_extension=_flag(data, "isFromExtension"),
            req_new_witness_table_entry=_flag(data, "reqNewWitnessTableEntry"),
            enum_raw_type_name=_opt_str(data, "enumRawTypeName"),
            is_enum_exhaustive=_flag(data, "isEnumExhaustive"),
            overriding=_flag(data, "overriding"),
            implicit=_flag(data, "implicit"),
            has_default_arg=_flag(data, "hasDefaultArg"),
            param_value_ownership=_opt_str(data, "paramValueOwnership"),
            type_attributes=_strs(data, "typeAttributes"),
        )


@dataclass
class AbiDocument:
    """A whole digester dump: the tree under the ``ABIRoot`` key."""

    root: AbiNode

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AbiDocument:
        if not isinstance(data, dict):
            raise ValueError("ABI document must be a JSON object")
        if "ABIRoot" not in data:
            raise ValueError("missing field 'ABIRoot'")
        return cls(root=AbiNode.from_dict(data["ABIRoot"]))

    @classmethod
    def from_json(cls, text: str) -> AbiDocument:
        """Parse the digester's JSON output."""
        return cls.from_dict(json.loads(text))