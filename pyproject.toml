[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tidestate"
version = "0.1.0"
description = "Building blocks for unidirectional-data-flow applications: derived value types, JSON serialization, dependency bags and a time-travel debugger."
requires-python = ">=3.10"
dependencies = []
keywords = ["state", "reducer", "functional", "dependencies", "serialization", "time-travel", "undo"]
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
    "Topic :: Software Development :: Libraries :: Application Frameworks",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["tidestate"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
