[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "kindkit"
version = "0.11.0a0"
description = "Building blocks for a tool that manages local Kubernetes clusters: cluster config, terminal logging, spinners, process running and error helpers"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "kubernetes",
    "cluster",
    "cli",
    "logging",
    "spinner",
    "subprocess",
    "configuration",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Systems Administration",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
kindkit = "kindkit.app:main"

[tool.hatch.build.targets.wheel]
packages = ["kindkit"]

[tool.hatch.build.targets.sdist]
include = ["kindkit", "tests", "README.md", "pyproject.toml"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
