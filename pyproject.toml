[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "homehelper"
version = "0.1.0"
description = "A helper daemon for Hyprland: submap bind panels and workspace feeds for eww bars"
requires-python = ">=3.10"
dependencies = [
    "cbor2",
]
keywords = ["hyprland", "wayland", "eww", "daemon", "submap", "workspaces"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Desktop Environment :: Window Managers",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
homehelper = "homehelper.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["homehelper"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
