[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "chnative"
version = "0.1.0"
description = "Building blocks for the ClickHouse native TCP protocol: wire encoding, packet parsing, errors and connection helpers."
requires-python = ">=3.10"
dependencies = []
keywords = ["clickhouse", "database", "native protocol", "binary protocol", "varint"]
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
    "Topic :: Database :: Front-Ends",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest", "pytest-asyncio"]

[tool.hatch.build.targets.wheel]
packages = ["chnative"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
strict = true
