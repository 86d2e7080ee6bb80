[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "csvforge"
version = "0.1.0"
description = "Command-line toolkit for filtering, joining, renaming and inspecting CSV/TSV files"
requires-python = ">=3.10"
dependencies = []
keywords = ["csv", "tsv", "grep", "join", "table", "command-line"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Text Processing :: Filters",
    "Topic :: Utilities",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
csvforge = "csvforge.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["csvforge"]

[tool.pytest.ini_options]
addopts = "-ra"
