# apianyware

This package describes macOS SDK APIs in a neutral intermediate
representation (IR) and extracts that IR from Swift modules. The IR is
stored as JSON checkpoint files.

## What it provides

- **IR types**
  - `apianyware.ir` defines `Framework`, `Class`, `Protocol`, `Enum`,
    `Struct`, `Function`, `Constant`, `Method`, `Property` and related types.
  - `apianyware.type_ref` defines `TypeRef` and `TypeKind`.
  - `apianyware.provenance` defines `DeclarationSource`, `SourceProvenance`,
    `Availability` and `DocRefs`.

  Every type has `to_dict` / `from_dict`. `Framework` also has
  `to_json(indent)` and `from_json(text)`. `load_framework(path)` reads a
  checkpoint file.

  On reading, older checkpoints are accepted:
  - `ir_version` is read as `format_version`.
  - `null` lists of declarations count as empty lists.
  - `ir_level` is read but never written back.

  Input that does not fit the format raises `ValueError`.

- **Annotations and enrichment**
  - `apianyware.annotation` covers method-level semantics: parameter
    ownership, block invocation style, threading, error patterns,
    overrides, disagreements and API patterns.
  - `apianyware.enrichment` holds the derived relations and the
    verification report.

- **Swift extraction**
  - `apianyware.abi_types` parses `swift-api-digester -dump-sdk` JSON into
    `AbiDocument` / `AbiNode` trees.
  - `apianyware.type_mapping.map_swift_type` maps a type node to a
    `TypeRef`:
    - Swift primitives map to C primitives.
    - `Optional` maps to a nullable type.
    - `Array`, `Dictionary` and `Set` map to `NSArray`, `NSDictionary` and
      `NSSet`.
    - Types bridged to Foundation map to their `NS` classes.
    - Closures map to blocks.
  - `apianyware.declaration_mapping.map_abi_to_framework(doc, sdk_version)`
    turns a whole document into a `Framework` at the `collected`
    checkpoint.
  - `swift_name_to_selector` turns a Swift printed name such as
    `process(input:count:)` into the selector-like identifier the IR uses.

- **Merging**
  - `apianyware.merge.merge_swift_into_objc(objc, swift)` merges Swift
    declarations into a framework extracted from Objective-C headers, in
    place.
  - Where a name exists in both, the Objective-C declaration is kept.
  - Swift members and conformances of matching classes are appended.

- **Digester driver** (needs macOS with Xcode and `xcrun`)
  - `apianyware.digester.discover_swift_modules(sdk_path)` lists the
    frameworks that ship a `.swiftmodule`, sorted by name.
  - `find_swift_api_digester()` locates the tool.
  - `run_swift_api_digester(module_name, sdk_path)` returns the raw JSON
    dump.
  - Failures raise `DigesterError`.
  - `apianyware.extract.extract_swift_framework(module, sdk_path,
    sdk_version)` runs the digester, parses the dump and maps it in one
    step.

## Example

```python
from pathlib import Path

from apianyware.abi_types import AbiDocument
from apianyware.declaration_mapping import map_abi_to_framework

doc = AbiDocument.from_json(Path("Observation_abi.json").read_text())
framework = map_abi_to_framework(doc, "15.4")
print(framework.name, len(framework.protocols), len(framework.structs))
Path("Observation.json").write_text(framework.to_json(indent=2))
```

To extract straight from an installed SDK:

```python
from pathlib import Path

from apianyware.digester import discover_swift_modules
from apianyware.extract import extract_swift_framework

sdk = Path("/Applications/Xcode.app/Contents/Developer/Platforms/"
           "MacOSX.platform/Developer/SDKs/MacOSX.sdk")
for module in discover_swift_modules(sdk):
    fw = extract_swift_framework(module, sdk, "15.4")
    print(module.name, len(fw.classes))
```

## What it does not do

- There is no command-line tool. Everything is used from Python.
- It does not extract declarations from Objective-C headers. It works only
  with frameworks that such an extraction has already produced, for
  example when merging.
- It does not resolve inheritance, annotate or enrich frameworks. It only
  carries the fields those steps fill in.
- It does not generate language bindings.

## Installing and testing

```
pip install .
pip install ".[test]"
pytest
```