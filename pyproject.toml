[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "crosslink"
version = "0.1.0"
description = "Typed, asynchronous two-way message links between asyncio components, managed by a central router"
requires-python = ">=3.10"
dependencies = []
keywords = ["asyncio", "channels", "messaging", "router", "mpsc"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Framework :: AsyncIO",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[project.scripts]
crosslink-ping-pong = "crosslink.ping_pong:main"

[tool.hatch.build.targets.wheel]
packages = ["crosslink"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
strict = true
