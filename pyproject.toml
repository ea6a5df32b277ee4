[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "crosssocket"
version = "1.1.0"
description = "IPv4 TCP socket wrapper with a select-based event loop manager"
requires-python = ">=3.10"
dependencies = []
keywords = ["socket", "tcp", "select", "event loop", "networking"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["crosssocket"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
