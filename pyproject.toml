[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "apianyware"
version = "0.1.0"
description = "IR data model and Swift API extraction for describing macOS SDK APIs"
requires-python = ">=3.10"
dependencies = []
keywords = ["macos", "swift", "objective-c", "ir", "bindings", "api-digester"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Code Generators",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["apianyware"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
