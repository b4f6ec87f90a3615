[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "grovecrawl"
version = "0.1.0"
description = "A small top-down roguelike with procedural forest maps and a sparse-set entity registry"
requires-python = ">=3.10"
keywords = ["roguelike", "game", "ecs", "entity-component-system", "procedural-generation", "pyglet"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Role-Playing",
]
dependencies = [
    "pyglet",
    "pillow",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
grovecrawl = "grovecrawl.game_loop:main"

[tool.hatch.build.targets.wheel]
packages = ["grovecrawl"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
