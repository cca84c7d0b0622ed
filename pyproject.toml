[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "paroliere"
version = "0.1.0"
description = "Networked Boggle-style word game: wire protocol, terminal client and server argument parsing"
requires-python = ">=3.10"
dependencies = []
keywords = ["boggle", "paroliere", "word game", "puzzle", "client", "tcp"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Puzzle Games",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
paroliere-client = "paroliere.client_cli:main"

[tool.hatch.build.targets.wheel]
packages = ["paroliere"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
