[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pgoperator"
version = "0.1.0"
description = "Resource model, event logging, status tracking and naming rules for a PostgreSQL cluster operator"
requires-python = ">=3.10"
dependencies = []
keywords = ["postgresql", "operator", "kubernetes", "replication", "custom-resource", "cluster"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Clustering",
    "Topic :: Database",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["pgoperator"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
strict_optional = true
warn_unused_ignores = true
