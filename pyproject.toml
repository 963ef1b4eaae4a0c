[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "simplebank"
version = "0.1.0"
description = "A small bank ledger of accounts, entries and transfers on SQLite, with a migration tool"
requires-python = ">=3.10"
keywords = ["bank", "ledger", "accounts", "transfers", "sqlite", "migrations"]
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
    "Topic :: Office/Business :: Financial :: Accounting",
    "Topic :: Database",
]
dependencies = [
    "python-dotenv",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
simplebank-migrate = "simplebank.migrate:main"

[tool.hatch.build.targets.wheel]
packages = ["simplebank"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
