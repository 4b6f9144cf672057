[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "spacewar"
version = "1.3.0"
description = "Terminal arcade game: dodge arrows and red zones alone or against another pilot over the network"
requires-python = ">=3.10"
dependencies = []
keywords = ["game", "arcade", "terminal", "curses", "multiplayer"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console :: Curses",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Arcade",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
spacewar = "spacewar.menu:main"
spacewar-single = "spacewar.single_play:main"
spacewar-server = "spacewar.server:main"
spacewar-client = "spacewar.client:main"

[tool.hatch.build.targets.wheel]
packages = ["spacewar"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
