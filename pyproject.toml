[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ledgerlsp"
version = "0.1.0"
description = "Analysis, diagnostics and formatting for hledger journals, built for editor language servers"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "hledger",
    "ledger",
    "plain-text-accounting",
    "journal",
    "language-server",
    "lsp",
    "formatter",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business :: Financial :: Accounting",
    "Topic :: Text Editors :: Integrated Development Environments (IDE)",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["ledgerlsp"]

[tool.hatch.build.targets.sdist]
include = ["ledgerlsp", "tests", "pyproject.toml"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
