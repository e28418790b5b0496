[build-system]
requires = ["setuptools>=64"]
build-backend = "setuptools.build_meta"

[project]
name = "junoindex"
version = "0.1.0"
description = "Database rows, SQLite validator storage and an HTTP actions endpoint for indexing a proof-of-stake blockchain"
requires-python = ">=3.10"
keywords = ["blockchain", "indexer", "validators", "staking", "database", "sqlite", "actions"]
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
    "Topic :: Database",
]
dependencies = [
    "pyyaml",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.setuptools.packages.find]
include = ["junoindex*"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
