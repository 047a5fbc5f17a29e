[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "heimdall"
version = "0.1.0"
description = "Price-time priority limit order book matching engine fed by NASDAQ TotalView-ITCH 5.0 files"
requires-python = ">=3.10"
dependencies = []
keywords = ["itch", "nasdaq", "order-book", "matching-engine", "market-data"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: Financial and Insurance Industry",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business :: Financial :: Investment",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
heimdall = "heimdall.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["heimdall"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
