"""Convert digester type nodes into IR :class:`TypeRef` values."""

from __future__ import annotations

from apianyware.abi_types import AbiNode
from apianyware.type_ref import TypeKind, TypeRef

_SWIFT_PRIMITIVES = {
    "Bool": "bool",
    "Int": "int64",
    "UInt": "uint64",
    "Int8": "int8",
    "Int16": "int16",
    "Int32": "int32",
    "Int64": "int64",
    "UInt8": "uint8",
    "UInt16": "uint16",
    "UInt32": "uint32",
    "UInt64": "uint64",
    "Float": "float",
    "Double": "double",
    "Float32": "float",
    "Float64": "double",
}

_FOUNDATION_BRIDGED = {
    "String": "NSString",
    "Data": "NSData",
    "Date": "NSDate",
    "URL": "NSURL",
    "UUID": "NSUUID",
    "IndexSet": "NSIndexSet",
    "Locale": "NSLocale",
    "TimeZone": "NSTimeZone",
    "Calendar": "NSCalendar",
    "DateInterval": "NSDateInterval",
    "Decimal": "NSDecimalNumber",
    "Measurement": "NSMeasurement",
    "URLRequest": "NSURLRequest",
    "URLComponents": "NSURLComponents",
    "CharacterSet": "NSCharacterSet",
    "Notification": "NSNotification",
}

_COLLECTIONS = {"Array": "NSArray", "Dictionary": "NSDictionary", "Set": "NSSet"}

_OBJC_CLASS_PREFIX = "c:objc(cs)"
_OBJC_PROTOCOL_PREFIX = "c:objc(pl)"


def map_swift_type(node: AbiNode) -> TypeRef:
    """Map a type node to a :class:`TypeRef`, best effort.

    Unknown node kinds become a primitive named by the node's printed name.
    """
    if node.kind == "TypeNominal":
        return _map_type_nominal(node)
    if node.kind == "TypeFunc":
        return _map_type_func(node)
    return TypeRef.primitive(node.printed_name)


def _map_type_nominal(node: AbiNode) -> TypeRef:
    name = node.name
    usr = node.usr or ""

    if name == "Optional" and node.children:
        inner = map_swift_type(node.children[0])
        inner.nullable = True
        return inner

    if name == "Void":
        return TypeRef.void()

    primitive = _SWIFT_PRIMITIVES.get(name)
    if primitive is not None:
        return TypeRef.primitive(primitive)

    collection = _COLLECTIONS.get(name)
    if collection is not None:
        return TypeRef(
            TypeKind.CLASS,
            name=collection,
            framework="Foundation",
            params=[map_swift_type(c) for c in node.children],
        )

    if usr.startswith(_OBJC_CLASS_PREFIX):
        return TypeRef(
            TypeKind.CLASS,
            name=usr[len(_OBJC_CLASS_PREFIX):],
            framework=_framework_from_printed_name(node.printed_name),
            params=[map_swift_type(c) for c in node.children],
        )

    if usr.startswith(_OBJC_PROTOCOL_PREFIX) or name == "GenericTypeParam":
        return TypeRef(TypeKind.ID)

    if name == "Metatype":
        return TypeRef(TypeKind.CLASS_REF)

    bridged = _FOUNDATION_BRIDGED.get(name)
    if bridged is not None:
        return TypeRef(TypeKind.CLASS, name=bridged, framework="Foundation")

    return TypeRef(
        TypeKind.CLASS,
        name=name,
        framework=_framework_from_printed_name(node.printed_name),
        params=[map_swift_type(c) for c in node.children if c.kind == "TypeNominal"],
    )


def _map_type_func(node: AbiNode) -> TypeRef:
    """Closures become blocks: child 0 is the result, child 1 the parameters."""
    if len(node.children) < 2:
        return TypeRef.primitive(node.printed_name)
    return_type = map_swift_type(node.children[0])
    param_node = node.children[1]
    if param_node.name == "Void":
        params: list[TypeRef] = []
    elif param_node.kind == "TypeNominal" and param_node.name == "Tuple":
        params = [map_swift_type(c) for c in param_node.children]
    else:
        params = [map_swift_type(param_node)]
    return TypeRef(TypeKind.BLOCK, params=params, return_type=return_type)


def _framework_from_printed_name(printed_name: str) -> str | None:
    """``"Foundation.URL"`` gives ``"Foundation"``; the prefix must start upper-case."""
    prefix, dot, _ = printed_name.partition(".")
    if dot and prefix[:1].isascii() and prefix[:1].isupper():
        return prefix
    return None