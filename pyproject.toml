[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "jsfxkit"
version = "0.1.0"
description = "Tools for JSFX effect files: section and header parsing, sliders, popup menus, MIDI buffers, WAV reading and RPL preset banks"
requires-python = ">=3.10"
dependencies = []
keywords = ["jsfx", "audio", "midi", "presets", "wav", "parser"]
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
    "Topic :: Multimedia :: Sound/Audio",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
jsfx-parse-menu = "jsfxkit.menu:main"

[tool.hatch.build.targets.wheel]
packages = ["jsfxkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
