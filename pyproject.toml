[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "moeminers"
version = "0.1.0"
description = "Game rules for a miner-and-land collecting game: lootboxes, progression, equipment, token economy and marketplace"
requires-python = ">=3.10"
dependencies = []
keywords = ["game", "simulation", "lootbox", "marketplace", "progression", "economy"]
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
    "Topic :: Games/Entertainment",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["moeminers"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
