[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cadetpinball"
version = "0.1.0"
description = "Core logic of a 3D space-themed pinball table: geometry, projection, bitmaps, MIDS-to-MIDI conversion, settings and high scores"
requires-python = ">=3.10"
dependencies = []
keywords = ["pinball", "game", "midi", "bitmap", "geometry", "high-score"]
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
    "Topic :: Games/Entertainment :: Arcade",
    "Topic :: Multimedia :: Sound/Audio :: MIDI",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["cadetpinball"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
