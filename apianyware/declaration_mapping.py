"""Map digester ABI declarations to IR declarations.

Walks the ABI tree and converts Swift classes, structs, enums, protocols,
functions and properties into IR types whose source is the Swift interface.
"""

from __future__ import annotations

from datetime import datetime, timezone

from apianyware.abi_types import AbiDocument, AbiNode
from apianyware.ir import (
    Class,
    Constant,
    Enum,
    EnumValue,
    Framework,
    Function,
    Method,
    Param,
    Property,
    Protocol,
    Struct,
    StructField,
)
from apianyware.provenance import Availability, DeclarationSource, DocRefs, SourceProvenance
from apianyware.type_mapping import map_swift_type
from apianyware.type_ref import TypeRef

_STDLIB_CONFORMANCES = frozenset(
    {"Copyable", "Escapable", "Sendable", "SendableMetatype", "BitwiseCopyable"}
)

_SWIFT = DeclarationSource.SWIFT_INTERFACE


def map_abi_to_framework(doc: AbiDocument, sdk_version: str) -> Framework:
    """Map a whole digester document to a collected IR framework."""
    root = doc.root
    framework = Framework(
        name=root.name,
        format_version="1.0",
        checkpoint="collected",
        sdk_version=sdk_version,
        collected_at=datetime.now(timezone.utc).isoformat(),
        depends_on=_extract_imports(root.children),
    )

    for child in root.children:
        decl_kind = child.decl_kind or ""
        if decl_kind == "Class":
            framework.classes.append(_map_class(child))
        elif decl_kind == "Struct":
            framework.structs.append(_map_struct(child))
        elif decl_kind == "Enum":
            framework.enums.append(_map_enum(child))
        elif decl_kind == "Protocol":
            framework.protocols.append(_map_protocol(child))
        elif decl_kind == "Func" and child.kind == "Function":
            function = _map_top_level_function(child)
            if function is not None:
                framework.functions.append(function)
        elif decl_kind == "Var" and child.kind == "Var" and child.children:
            framework.constants.append(_map_top_level_constant(child))

    return framework


def _conformance_names(node: AbiNode) -> list[str]:
    return [c.name for c in node.conformances if c.name not in _STDLIB_CONFORMANCES]


def _map_class(node: AbiNode) -> Class:
    superclass = _extract_simple_name(node.superclass_names[0]) if node.superclass_names else ""
    methods: list[Method] = []
    properties: list[Property] = []

    for child in node.children:
        if child.decl_kind == "Constructor":
            method = _map_constructor(child)
            if method is not None:
                methods.append(method)
        elif child.decl_kind == "Func":
            method = _map_method(child)
            if method is not None:
                methods.append(method)
        elif child.decl_kind == "Var":
            prop = _map_property(child)
            if prop is not None:
                properties.append(prop)

    return Class(
        name=node.name,
        superclass=superclass,
        protocols=_conformance_names(node),
        properties=properties,
        methods=methods,
    )


def _map_protocol(node: AbiNode) -> Protocol:
    required: list[Method] = []
    optional: list[Method] = []
    properties: list[Property] = []

    for child in node.children:
        if child.decl_kind == "Func":
            method = _map_method(child)
            if method is not None:
                (required if child.protocol_req else optional).append(method)
        elif child.decl_kind == "Constructor":
            method = _map_constructor(child)
            if method is not None:
                required.append(method)
        elif child.decl_kind == "Var":
            prop = _map_property(child)
            if prop is not None:
                properties.append(prop)

    return Protocol(
        name=node.name,
        inherits=_conformance_names(node),
        required_methods=required,
        optional_methods=optional,
        properties=properties,
        source=_SWIFT,
        provenance=_build_provenance(node),
        doc_refs=_build_doc_refs(node),
    )


def _map_enum(node: AbiNode) -> Enum:
    # Swift cases carry no integer raw value here; the child position is used as an ordinal.
    values = [
        EnumValue(name=child.name, value=index)
        for index, child in enumerate(node.children)
        if child.decl_kind == "EnumElement"
    ]
    return Enum(
        name=node.name,
        enum_type=TypeRef.primitive("swift_enum"),
        values=values,
        source=_SWIFT,
        provenance=_build_provenance(node),
        doc_refs=_build_doc_refs(node),
    )


def _map_struct(node: AbiNode) -> Struct:
    fields = [
        StructField(name=child.name, field_type=map_swift_type(child.children[0]))
        for child in node.children
        if child.decl_kind == "Var" and child.children
    ]
    return Struct(
        name=node.name,
        fields=fields,
        source=_SWIFT,
        provenance=_build_provenance(node),
        doc_refs=_build_doc_refs(node),
    )


def _map_params(node: AbiNode) -> list[Param]:
    """Child 0 is the result type; the rest are parameter types named from the printed name."""
    names = _extract_param_names(node.printed_name)
    return [
        Param(
            name=names[i] if i < len(names) else f"param{i}",
            param_type=map_swift_type(type_node),
        )
        for i, type_node in enumerate(node.children[1:])
    ]


def _map_callable(node: AbiNode, *, init_method: bool) -> Method | None:
    if not node.children:
        return None
    return Method(
        selector=swift_name_to_selector(node.printed_name),
        return_type=map_swift_type(node.children[0]),
        class_method=False if init_method else node.is_static,
        init_method=init_method,
        params=_map_params(node),
        source=_SWIFT,
        provenance=_build_provenance(node),
        doc_refs=_build_doc_refs(node),
    )


def _map_method(node: AbiNode) -> Method | None:
    return _map_callable(node, init_method=False)


def _map_constructor(node: AbiNode) -> Method | None:
    return _map_callable(node, init_method=True)


def _map_property(node: AbiNode) -> Property | None:
    if not node.children:
        return None
    has_setter = any(a.accessor_kind == "set" for a in node.accessors)
    return Property(
        name=node.name,
        property_type=map_swift_type(node.children[0]),
        readonly=node.is_let or not has_setter,
        class_property=node.is_static,
        source=_SWIFT,
        provenance=_build_provenance(node),
        doc_refs=_build_doc_refs(node),
    )


def _map_top_level_function(node: AbiNode) -> Function | None:
    if not node.children:
        return None
    return Function(
        name=node.name,
        return_type=map_swift_type(node.children[0]),
        params=_map_params(node),
        source=_SWIFT,
        provenance=_build_provenance(node),
        doc_refs=_build_doc_refs(node),
    )


def _map_top_level_constant(node: AbiNode) -> Constant:
    return Constant(
        name=node.name,
        constant_type=map_swift_type(node.children[0]),
        source=_SWIFT,
        provenance=_build_provenance(node),
        doc_refs=_build_doc_refs(node),
    )


def _build_provenance(node: AbiNode) -> SourceProvenance | None:
    if node.intro_macos is None:
        return None
    return SourceProvenance(availability=Availability(introduced=node.intro_macos))


def _build_doc_refs(node: AbiNode) -> DocRefs | None:
    if node.usr is None:
        return None
    return DocRefs(usr=node.usr)


def _extract_imports(children: list[AbiNode]) -> list[str]:
    return [
        n.name
        for n in children
        if n.decl_kind == "Import" and not n.name.startswith("_")
    ]


def _split_labels(printed_name: str) -> tuple[str, list[str]] | None:
    base, paren, rest = printed_name.partition("(")
    if not paren:
        return None
    params_part = rest.rstrip(")")
    return base, [label for label in params_part.split(":") if label]


def swift_name_to_selector(printed_name: str) -> str:
    """Turn ``"process(input:count:)"`` into a selector-like identifier.

    Names without parentheses are returned unchanged; ``"doWork()"`` becomes
    ``"doWork"``.
    """
    split = _split_labels(printed_name)
    if split is None:
        return printed_name
    base, labels = split
    if not printed_name.partition("(")[2].rstrip(")"):
        return base
    return f"{base}({''.join(f'{label}:' for label in labels)})"


def _extract_param_names(printed_name: str) -> list[str]:
    split = _split_labels(printed_name)
    return [] if split is None else split[1]


def _extract_simple_name(qualified: str) -> str:
    return qualified.rsplit(".", 1)[-1]