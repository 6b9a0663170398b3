[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pestle"
version = "0.1.0"
description = "Parsing building blocks: input positions, spans, a rewindable stack, tokens, Pratt parsing and precedence climbing"
requires-python = ">=3.10"
dependencies = []
keywords = ["parser", "parsing", "pratt", "precedence-climbing", "span", "position"]
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
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["pestle"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
