[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "molkit"
version = "0.1.0"
description = "Schema model, default encodings and C header generation for the Molecule binary serialization format"
requires-python = ">=3.10"
dependencies = []
keywords = ["molecule", "serialization", "schema", "codegen", "binary", "c-header"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Code Generators",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["molkit"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
