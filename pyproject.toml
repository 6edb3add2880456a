[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "zerg"
version = "0.1.0"
description = "Utilities for trading research: binary checkpoints, INI config, trading clocks, business-day calendars and columnar CSV input."
requires-python = ">=3.10"
dependencies = []
keywords = ["checkpoint", "serialization", "ini", "trading-calendar", "business-days", "clock", "csv"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Financial and Insurance Industry",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries",
    "Topic :: Office/Business :: Financial :: Investment",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["zerg"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
