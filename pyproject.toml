[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "kitolib"
version = "0.1.0"
description = "Game-development toolkit: vector math, collision checks, navmesh pathfinding, skeletal animation, behavior trees, input collection, metrics and simple JSON networking."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "gamedev",
    "collision",
    "pathfinding",
    "navmesh",
    "animation",
    "behavior-tree",
    "spatial-partition",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Games/Entertainment",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["kitolib"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
