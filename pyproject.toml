[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "rescuegrid"
version = "0.1.0"
description = "Grid-world search and rescue mission driven by an external model-checking planner"
requires-python = ">=3.10"
dependencies = []
keywords = ["search-and-rescue", "grid-world", "planning", "simulation", "model-checking"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
rescuegrid = "rescuegrid.mission:main"

[tool.hatch.build.targets.wheel]
packages = ["rescuegrid"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
