[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tomlbits"
version = "0.1.0"
description = "Building blocks for TOML tooling: scalar parsing, local date and time types, contextual error reports and tagged-JSON conversion."
requires-python = ">=3.10"
dependencies = []
keywords = ["toml", "parser", "datetime", "configuration", "toml-test"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Topic :: File Formats",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["tomlbits"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
