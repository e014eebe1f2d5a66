[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "computechain"
version = "0.1.0"
description = "In-memory state machines for a compute network: attestations, burn-mint settlement, jobs, models, nonces, price oracle, PoUW rewards and operator stake."
requires-python = ">=3.10"
dependencies = []
keywords = ["state-machine", "ledger", "staking", "oracle", "attestation", "inference"]
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
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["computechain"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
