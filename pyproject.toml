[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "agentcom"
version = "0.1.0"
description = "Local coordination store for AI coding agents: agent registry, messages, tasks and skill files"
requires-python = ">=3.10"
dependencies = []
keywords = ["agents", "ai", "coordination", "sqlite", "tasks", "skills", "cli"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
agentcom = "agentcom.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["agentcom"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
