[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sendword"
version = "0.0.2"
description = "Retry policy with backoff for webhook-triggered command executions."
requires-python = ">=3.10"
dependencies = []
keywords = ["webhook", "retry", "backoff", "executor", "asyncio"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Framework :: AsyncIO",
    "Topic :: Internet :: WWW/HTTP",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[tool.hatch.build.targets.wheel]
packages = ["sendword"]

[tool.pytest.ini_options]
addopts = "-ra"
