[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gattlink"
version = "0.1.0"
description = "Bluetooth Low Energy GATT object model: local and remote services, characteristics, descriptors and devices over a pluggable host stack"
requires-python = ">=3.10"
dependencies = []
keywords = ["bluetooth", "ble", "gatt", "gap", "att", "peripheral", "central", "embedded"]
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
    "Topic :: Software Development :: Embedded Systems",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["gattlink"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
