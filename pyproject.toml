[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "txbot"
version = "0.1.0"
description = "Building blocks for a Cosmos transactions notification bot: amounts, reports, metrics, price fetchers and a chain REST API client."
requires-python = ">=3.10"
dependencies = [
    "requests",
]
keywords = ["cosmos", "tendermint", "blockchain", "notifications", "metrics", "coingecko"]
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
    "Topic :: Communications :: Chat",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[tool.hatch.build.targets.wheel]
packages = ["txbot"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
