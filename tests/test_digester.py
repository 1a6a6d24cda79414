import subprocess
from pathlib import Path
from unittest import mock

import pytest

from apianyware.digester import (
    DigesterError,
    SwiftModuleInfo,
    discover_swift_modules,
    find_swift_api_digester,
    run_swift_api_digester,
)


def make_framework(sdk, name, swift=True):
    fw = sdk / "System" / "Library" / "Frameworks" / f"{name}.framework"
    fw.mkdir(parents=True)
    if swift:
        (fw / "Modules" / f"{name}.swiftmodule").mkdir(parents=True)
    return fw


def completed(args, returncode=0, stdout=b"", stderr=b""):
    return subprocess.CompletedProcess(args, returncode, stdout=stdout, stderr=stderr)


def test_discover_swift_modules_sorted(tmp_path):
    for name in ["SwiftData", "Foundation", "AppKit"]:
        make_framework(tmp_path, name)
    make_framework(tmp_path, "CoreAudio", swift=False)

    modules = discover_swift_modules(tmp_path)

    names = [m.name for m in modules]
    assert names == sorted(names)
    assert "Foundation" in names
    assert "SwiftData" in names
    assert "CoreAudio" not in names


def test_discover_module_paths(tmp_path):
    fw = make_framework(tmp_path, "Foundation")

    modules = discover_swift_modules(str(tmp_path))

    assert modules == [
        SwiftModuleInfo(
            name="Foundation",
            swiftmodule_dir=fw / "Modules" / "Foundation.swiftmodule",
            framework_dir=fw,
        )
    ]


def test_discover_skips_files_and_other_dirs(tmp_path):
    frameworks = tmp_path / "System" / "Library" / "Frameworks"
    frameworks.mkdir(parents=True)
    (frameworks / "Stray.framework").write_text("not a directory")
    (frameworks / "Other" / "Modules" / "Other.swiftmodule").mkdir(parents=True)

    assert discover_swift_modules(tmp_path) == []


def test_discover_missing_frameworks_dir(tmp_path):
    with pytest.raises(DigesterError, match="frameworks directory not found"):
        discover_swift_modules(tmp_path)


def test_find_swift_api_digester_binary():
    stdout = b"/usr/bin/swift-api-digester\n"
    with mock.patch("apianyware.digester.subprocess.run", return_value=completed([], stdout=stdout)) as run:
        path = find_swift_api_digester()
    assert path == Path("/usr/bin/swift-api-digester")
    assert "swift-api-digester" in str(path)
    assert run.call_args[0][0] == ["xcrun", "--find", "swift-api-digester"]


def test_find_swift_api_digester_failure():
    result = completed([], returncode=1, stderr=b"unable to find utility")
    with mock.patch("apianyware.digester.subprocess.run", return_value=result):
        with pytest.raises(DigesterError, match="unable to find utility"):
            find_swift_api_digester()


def test_find_swift_api_digester_without_xcrun():
    with mock.patch("apianyware.digester.subprocess.run", side_effect=FileNotFoundError("xcrun")):
        with pytest.raises(DigesterError, match="failed to execute"):
            find_swift_api_digester()


def test_run_digester_on_observation(tmp_path):
    payload = '{"ABIRoot": {"kind": "Root", "name": "Observation"}}'
    seen = {}

    def fake_run(args, **kwargs):
        out = Path(args[args.index("-o") + 1])
        seen["out"] = out
        seen["args"] = args
        out.write_text(payload, encoding="utf-8")
        return completed(args)

    with mock.patch("apianyware.digester.subprocess.run", side_effect=fake_run):
        text = run_swift_api_digester("Observation", tmp_path)

    assert text == payload
    args = seen["args"]
    assert args[:3] == ["xcrun", "swift-api-digester", "-dump-sdk"]
    assert args[args.index("-module") + 1] == "Observation"
    assert args[args.index("-sdk") + 1] == str(tmp_path)
    assert args[args.index("-target") + 1] == "arm64-apple-macos14.0"
    assert seen["out"].name == "swift_abi_Observation.json"
    assert not seen["out"].exists()


def test_run_digester_failure(tmp_path):
    result = completed([], returncode=1, stderr=b"no such module")
    with mock.patch("apianyware.digester.subprocess.run", return_value=result):
        with pytest.raises(DigesterError, match="failed for module Nope: no such module"):
            run_swift_api_digester("Nope", tmp_path)


def test_run_digester_missing_output(tmp_path):
    module = "NoOutputModuleForTest"
    with mock.patch("apianyware.digester.subprocess.run", return_value=completed([])):
        with pytest.raises(DigesterError, match="failed to read swift-api-digester output"):
            run_swift_api_digester(module, tmp_path)