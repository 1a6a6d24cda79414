"""Extract Swift API metadata for one framework into collected IR."""

from __future__ import annotations

from os import PathLike

from apianyware.abi_types import AbiDocument
from apianyware.declaration_mapping import map_abi_to_framework
from apianyware.digester import SwiftModuleInfo, run_swift_api_digester
from apianyware.ir import Framework


def extract_swift_framework(
    module: SwiftModuleInfo, sdk_path: str | PathLike[str], sdk_version: str
) -> Framework:
    """Run the digester on ``module``, parse its dump and map it to IR."""
    abi_json = run_swift_api_digester(module.name, sdk_path)
    doc = AbiDocument.from_json(abi_json)
    return map_abi_to_framework(doc, sdk_version)