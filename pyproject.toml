[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ranacore"
version = "0.1.0"
description = "Core utilities for remote desktop services: thread-safe queues, index pools, UTF conversion, timers, structured logging and input event handling."
requires-python = ">=3.10"
keywords = ["utilities", "logging", "utf-16", "input-events", "remote-desktop"]
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
    "Topic :: Software Development :: Libraries :: Python Modules",
]
dependencies = []

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["ranacore"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"
