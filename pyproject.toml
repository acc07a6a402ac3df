[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sumnet"
version = "0.1.0"
description = "A small client and server that add two integers over TCP or UDP using JSON messages"
requires-python = ">=3.10"
dependencies = []
keywords = ["tcp", "udp", "json", "client", "server", "sum", "socket"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
sumnet-server = "sumnet.server:main"
sumnet-client = "sumnet.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["sumnet"]

[tool.pytest.ini_options]
addopts = "-ra"
