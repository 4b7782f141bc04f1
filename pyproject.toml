[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "miningcompanion"
version = "7.1.2"
description = "Companion library for an Alephium mining node: wallet setup, miner addresses, fund sweeping and balance metrics"
requires-python = ">=3.10"
dependencies = [
    "requests",
]
keywords = ["alephium", "mining", "wallet", "prometheus", "metrics"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Monitoring",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[tool.hatch.build.targets.wheel]
packages = ["miningcompanion"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
