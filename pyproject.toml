[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ansioverlay"
version = "1.0.0"
description = "Show the contents of a text file with ANSI colours in an always-on-top overlay window"
requires-python = ">=3.10"
dependencies = []
keywords = ["overlay", "ansi", "desktop", "text", "colors", "tkinter"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: X11 Applications",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Desktop Environment",
    "Topic :: Utilities",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
ansioverlay = "ansioverlay.overlay:main"

[tool.hatch.build.targets.wheel]
packages = ["ansioverlay"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
