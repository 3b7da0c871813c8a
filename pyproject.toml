[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "rosedb"
version = "0.1.0"
description = "Storage building blocks of a log-structured key-value store: log entries, log files, memory maps and helpers"
requires-python = ">=3.10"
dependencies = []
keywords = ["database", "key-value", "log-structured", "storage", "mmap", "crc32", "murmur3"]
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
    "Topic :: Database :: Database Engines/Servers",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["rosedb"]

[tool.hatch.build.targets.sdist]
include = ["rosedb", "tests", "README.md", "pyproject.toml"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
