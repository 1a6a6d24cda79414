"""Discover Swift modules in an SDK and run ``swift-api-digester`` on them."""

from __future__ import annotations

import contextlib
import subprocess
import tempfile
from dataclasses import dataclass
from os import PathLike
from pathlib import Path

_TARGET = "arm64-apple-macos14.0"


class DigesterError(RuntimeError):
    """Raised when module discovery or the digester tool fails."""


@dataclass
class SwiftModuleInfo:
    """A framework that ships a ``.swiftmodule`` directory."""

    name: str
    swiftmodule_dir: Path
    framework_dir: Path


def discover_swift_modules(sdk_path: str | PathLike[str]) -> list[SwiftModuleInfo]:
    """Find frameworks under the SDK that have ``Modules/<Name>.swiftmodule``.

    The result is sorted by module name.
    """
    frameworks_dir = Path(sdk_path) / "System" / "Library" / "Frameworks"
    if not frameworks_dir.exists():
        raise DigesterError(f"frameworks directory not found: {frameworks_dir}")

    try:
        entries = list(frameworks_dir.iterdir())
    except OSError as exc:
        raise DigesterError(f"failed to read {frameworks_dir}: {exc}") from exc

    modules = []
    for path in entries:
        if not path.is_dir() or not path.name.endswith(".framework"):
            continue
        framework_name = path.name[: -len(".framework")]
        swiftmodule_dir = path / "Modules" / f"{framework_name}.swiftmodule"
        if swiftmodule_dir.is_dir():
            modules.append(
                SwiftModuleInfo(
                    name=framework_name,
                    swiftmodule_dir=swiftmodule_dir,
                    framework_dir=path,
                )
            )

    modules.sort(key=lambda m: m.name)
    return modules


def _run(args: list[str], description: str) -> subprocess.CompletedProcess[bytes]:
    try:
        return subprocess.run(args, capture_output=True, check=False)
    except OSError as exc:
        raise DigesterError(f"failed to execute {description}: {exc}") from exc


def find_swift_api_digester() -> Path:
    """Locate the ``swift-api-digester`` binary through ``xcrun``."""
    description = "xcrun --find swift-api-digester"
    result = _run(["xcrun", "--find", "swift-api-digester"], description)
    if result.returncode != 0:
        stderr = result.stderr.decode("utf-8", errors="replace")
        raise DigesterError(f"{description} failed: {stderr}")
    try:
        path = result.stdout.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise DigesterError("xcrun output is not valid UTF-8") from exc
    return Path(path.strip())


def run_swift_api_digester(module_name: str, sdk_path: str | PathLike[str]) -> str:
    """Dump the ABI of one module and return the raw JSON text."""
    output_path = Path(tempfile.gettempdir()) / f"swift_abi_{module_name}.json"
    args = [
        "xcrun",
        "swift-api-digester",
        "-dump-sdk",
        "-module",
        module_name,
        "-sdk",
        str(sdk_path),
        "-target",
        _TARGET,
        "-o",
        str(output_path),
    ]
    result = _run(args, f"swift-api-digester for module {module_name}")
    if result.returncode != 0:
        stderr = result.stderr.decode("utf-8", errors="replace")
        raise DigesterError(f"swift-api-digester failed for module {module_name}: {stderr}")

    try:
        text = output_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise DigesterError(
            f"failed to read swift-api-digester output: {output_path}: {exc}"
        ) from exc

    with contextlib.suppress(OSError):
        output_path.unlink()
    return text