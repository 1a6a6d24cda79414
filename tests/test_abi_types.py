import json

import pytest

from apianyware.abi_types import AbiDocument, AbiNode


def _nominal(name, printed, usr=None, children=None):
    node = {"kind": "TypeNominal", "name": name, "printedName": printed}
    if usr is not None:
        node["usr"] = usr
    if children:
        node["children"] = children
    return node


TEST_FRAMEWORK = {
    "ABIRoot": {
        "kind": "Root",
        "name": "TestFramework",
        "printedName": "TestFramework",
        "children": [
            {
                "kind": "Import",
                "name": "Foundation",
                "printedName": "Foundation",
                "declKind": "Import",
                "moduleName": "TestFramework",
            },
            {
                "kind": "TypeDecl",
                "name": "SomeProtocol",
                "printedName": "SomeProtocol",
                "declKind": "Protocol",
                "usr": "s:13TestFramework12SomeProtocolP",
                "intro_Macosx": "14.0",
                "children": [
                    {
                        "kind": "Function",
                        "name": "doWork",
                        "printedName": "doWork()",
                        "declKind": "Func",
                        "protocolReq": True,
                        "reqNewWitnessTableEntry": True,
                        "children": [_nominal("Void", "()")],
                    }
                ],
            },
            {
                "kind": "TypeDecl",
                "name": "Widget",
                "printedName": "Widget",
                "declKind": "Class",
                "intro_Macosx": "14.0",
                "superclassUsr": "s:13TestFramework4BaseC",
                "superclassNames": ["TestFramework.Base"],
                "conformances": [
                    {"kind": "Conformance", "name": "SomeProtocol", "printedName": "SomeProtocol"},
                    {"kind": "Conformance", "name": "Sendable", "printedName": "Sendable"},
                ],
                "children": [
                    {
                        "kind": "Constructor",
                        "name": "init",
                        "printedName": "init(name:)",
                        "declKind": "Constructor",
                        "init_kind": "Designated",
                        "children": [
                            _nominal("Widget", "TestFramework.Widget"),
                            _nominal("String", "Swift.String", "s:SS"),
                        ],
                    },
                    {
                        "kind": "Function",
                        "name": "process",
                        "printedName": "process(input:)",
                        "declKind": "Func",
                        "throwing": True,
                        "children": [
                            _nominal("Bool", "Swift.Bool", "s:Sb"),
                            _nominal("String", "Swift.String", "s:SS"),
                        ],
                    },
                    {
                        "kind": "Function",
                        "name": "defaultWidget",
                        "printedName": "defaultWidget()",
                        "declKind": "Func",
                        "static": True,
                        "children": [_nominal("Widget", "TestFramework.Widget")],
                    },
                    {
                        "kind": "Var",
                        "name": "title",
                        "printedName": "title",
                        "declKind": "Var",
                        "hasStorage": True,
                        "children": [_nominal("String", "Swift.String", "s:SS")],
                        "accessors": [
                            {"kind": "Accessor", "name": "Get", "printedName": "Get()",
                             "declKind": "Accessor", "accessorKind": "get"},
                            {"kind": "Accessor", "name": "Set", "printedName": "Set()",
                             "declKind": "Accessor", "accessorKind": "set"},
                        ],
                    },
                    {
                        "kind": "Var",
                        "name": "identifier",
                        "printedName": "identifier",
                        "declKind": "Var",
                        "isLet": True,
                        "children": [
                            _nominal("Optional", "Swift.String?", "s:Sq",
                                     [_nominal("String", "Swift.String", "s:SS")])
                        ],
                        "accessors": [
                            {"kind": "Accessor", "name": "Get", "printedName": "Get()",
                             "declKind": "Accessor", "accessorKind": "get"},
                        ],
                    },
                ],
            },
            {
                "kind": "TypeDecl",
                "name": "Priority",
                "printedName": "Priority",
                "declKind": "Enum",
                "isEnumExhaustive": True,
                "enumRawTypeName": "Int",
                "children": [
                    {"kind": "Var", "name": "low", "printedName": "low", "declKind": "EnumElement"},
                    {"kind": "Var", "name": "medium", "printedName": "medium",
                     "declKind": "EnumElement"},
                    {"kind": "Var", "name": "high", "printedName": "high",
                     "declKind": "EnumElement"},
                ],
            },
            {
                "kind": "TypeDecl",
                "name": "Config",
                "printedName": "Config",
                "declKind": "Struct",
                "children": [
                    {"kind": "Var", "name": "maxRetries", "printedName": "maxRetries",
                     "declKind": "Var", "isLet": True,
                     "children": [_nominal("Int", "Swift.Int", "s:Si")]},
                    {"kind": "Var", "name": "name", "printedName": "name", "declKind": "Var",
                     "children": [_nominal("String", "Swift.String", "s:SS")]},
                ],
            },
            {
                "kind": "Function",
                "name": "createDefaultWidget",
                "printedName": "createDefaultWidget(name:)",
                "declKind": "Func",
                "children": [
                    _nominal("Widget", "TestFramework.Widget"),
                    _nominal("String", "Swift.String", "s:SS"),
                ],
            },
        ],
    }
}


OBSERVATION = {
    "ABIRoot": {
        "kind": "Root",
        "name": "Observation",
        "printedName": "Observation",
        "children": [
            {"kind": "TypeDecl", "name": "Observable", "printedName": "Observable",
             "declKind": "Protocol", "intro_Macosx": "14.0"},
            {
                "kind": "TypeDecl",
                "name": "ObservationRegistrar",
                "printedName": "ObservationRegistrar",
                "declKind": "Struct",
                "children": [
                    {"kind": "Function", "name": "access", "printedName": "access(_:keyPath:)",
                     "declKind": "Func", "children": [_nominal("Void", "()")]},
                    {"kind": "Function", "name": "willSet", "printedName": "willSet(_:keyPath:)",
                     "declKind": "Func", "children": [_nominal("Void", "()")]},
                    {"kind": "Function", "name": "didSet", "printedName": "didSet(_:keyPath:)",
                     "declKind": "Func", "children": [_nominal("Void", "()")]},
                ],
            },
        ],
    }
}


@pytest.fixture
def framework_doc():
    return AbiDocument.from_json(json.dumps(TEST_FRAMEWORK))


def test_parse_test_framework_fixture(framework_doc):
    doc = framework_doc
    assert doc.root.name == "TestFramework"
    assert doc.root.kind == "Root"

    children = doc.root.children
    assert len(children) == 6

    imp = children[0]
    assert imp.decl_kind == "Import"
    assert imp.name == "Foundation"

    protocol = children[1]
    assert protocol.decl_kind == "Protocol"
    assert protocol.name == "SomeProtocol"
    assert protocol.intro_macos == "14.0"
    assert len(protocol.children) == 1
    proto_method = protocol.children[0]
    assert proto_method.name == "doWork"
    assert proto_method.protocol_req

    cls = children[2]
    assert cls.decl_kind == "Class"
    assert cls.name == "Widget"
    assert cls.intro_macos == "14.0"
    assert cls.superclass_names == ["TestFramework.Base"]
    assert cls.conformances
    assert cls.conformances[0].name == "SomeProtocol"

    assert len(cls.children) == 5
    constructor = cls.children[0]
    assert constructor.decl_kind == "Constructor"
    assert constructor.init_kind == "Designated"

    instance_method = cls.children[1]
    assert instance_method.name == "process"
    assert not instance_method.is_static

    static_method = cls.children[2]
    assert static_method.name == "defaultWidget"
    assert static_method.is_static

    rw_prop = cls.children[3]
    assert rw_prop.name == "title"
    assert rw_prop.decl_kind == "Var"
    assert len(rw_prop.accessors) == 2

    ro_prop = cls.children[4]
    assert ro_prop.name == "identifier"
    assert ro_prop.is_let
    assert len(ro_prop.accessors) == 1

    enum_decl = children[3]
    assert enum_decl.decl_kind == "Enum"
    assert enum_decl.name == "Priority"
    assert [c.name for c in enum_decl.children] == ["low", "medium", "high"]

    struct_decl = children[4]
    assert struct_decl.decl_kind == "Struct"
    assert struct_decl.name == "Config"
    assert len(struct_decl.children) == 2
    field_node = struct_decl.children[0]
    assert field_node.name == "maxRetries"
    assert field_node.is_let

    func = children[5]
    assert func.decl_kind == "Func"
    assert func.name == "createDefaultWidget"


def test_parse_observation_framework():
    doc = AbiDocument.from_json(json.dumps(OBSERVATION))
    assert doc.root.name == "Observation"

    observable = next(
        n for n in doc.root.children if n.name == "Observable" and n.decl_kind == "Protocol"
    )
    assert observable.intro_macos == "14.0"

    registrar = next(
        n
        for n in doc.root.children
        if n.name == "ObservationRegistrar" and n.decl_kind == "Struct"
    )
    method_names = [n.name for n in registrar.children if n.decl_kind == "Func"]
    assert "access" in method_names
    assert "willSet" in method_names


def test_renamed_keys_are_read(framework_doc):
    process = framework_doc.root.children[2].children[1]
    assert process.throwing is True
    assert process.printed_name == "process(input:)"
    title = framework_doc.root.children[2].children[3]
    assert title.has_storage is True
    assert [a.accessor_kind for a in title.accessors] == ["get", "set"]
    priority = framework_doc.root.children[3]
    assert priority.enum_raw_type_name == "Int"
    assert priority.is_enum_exhaustive is True
    assert framework_doc.root.children[2].superclass_usr == "s:13TestFramework4BaseC"


def test_defaults_for_missing_fields():
    node = AbiNode.from_dict({"kind": "TypeNominal"})
    assert node.name == ""
    assert node.printed_name == ""
    assert node.children == []
    assert node.decl_kind is None
    assert node.usr is None
    assert node.is_static is False
    assert node.is_async is False
    assert node.type_attributes == []


def test_more_keys_mapped():
    node = AbiNode.from_dict(
        {
            "kind": "Function",
            "async": True,
            "static": True,
            "intro_iOS": "17.0",
            "intro_tvOS": "17.0",
            "intro_watchOS": "10.0",
            "intro_swift": "5.9",
            "declAttributes": ["Available"],
            "typeAttributes": ["noescape"],
            "paramValueOwnership": "InOut",
            "genericSig": "<T>",
            "funcSelfKind": "Mutating",
            "mangledName": "$s4mangled",
            "hasDefaultArg": True,
            "implicit": True,
            "overriding": True,
            "isFromExtension": True,
        }
    )
    assert node.is_async and node.is_static
    assert (node.intro_ios, node.intro_tvos, node.intro_watchos, node.intro_swift) == (
        "17.0",
        "17.0",
        "10.0",
        "5.9",
    )
    assert node.decl_attributes == ["Available"]
    assert node.type_attributes == ["noescape"]
    assert node.param_value_ownership == "InOut"
    assert node.generic_sig == "<T>"
    assert node.func_self_kind == "Mutating"
    assert node.mangled_name == "$s4mangled"
    assert node.has_default_arg and node.implicit and node.overriding and node.is_from_extension


def test_unknown_keys_ignored():
    node = AbiNode.from_dict({"kind": "Root", "name": "X", "somethingNew": 42})
    assert node.name == "X"


def test_missing_kind_raises():
    with pytest.raises(ValueError, match="kind"):
        AbiNode.from_dict({"name": "X"})


def test_missing_abiroot_raises():
    with pytest.raises(ValueError, match="ABIRoot"):
        AbiDocument.from_json('{"Root": {"kind": "Root"}}')


def test_wrong_flag_type_raises():
    with pytest.raises(ValueError, match="static"):
        AbiNode.from_dict({"kind": "Function", "static": "yes"})


def test_invalid_json_raises():
    with pytest.raises(ValueError):
        AbiDocument.from_json("{not json")