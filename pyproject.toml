[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "fennel"
version = "0.1.0"
description = "In-memory state machines for identity, certificate, keystore and submission-review ledgers with benchmarked call weights."
requires-python = ">=3.10"
dependencies = []
keywords = ["ledger", "identity", "certificates", "keystore", "state-machine"]
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
    "Topic :: System :: Distributed Computing",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["fennel"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
