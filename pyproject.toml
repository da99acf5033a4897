[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "slrgram"
version = "0.1.0"
description = "Grammar-file driven tokenizer and SLR(1) parser that builds parse tables, concrete and abstract syntax trees"
requires-python = ">=3.10"
dependencies = []
keywords = ["parser", "slr", "grammar", "lr0", "tokenizer", "ast", "compiler"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Software Development :: Compilers",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
slrgram = "slrgram.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["slrgram"]

[tool.pytest.ini_options]
addopts = "-ra"
