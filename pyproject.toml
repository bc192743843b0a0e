[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "punchchat"
version = "0.1.0"
description = "UDP hole-punching chat with a rendezvous server and peer-to-peer Gomoku"
requires-python = ">=3.10"
dependencies = []
keywords = ["udp", "hole-punching", "nat", "p2p", "chat", "gomoku"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications :: Chat",
    "Topic :: Games/Entertainment :: Board Games",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
punchchat-server = "punchchat.server:main"
punchchat-client = "punchchat.client:main"

[tool.hatch.build.targets.wheel]
packages = ["punchchat"]

[tool.pytest.ini_options]
addopts = "-ra"
