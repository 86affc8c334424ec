[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tcpecho"
version = "0.1.0"
description = "Asyncio TCP echo server, interactive client and concurrent latency benchmark"
requires-python = ">=3.11"
dependencies = []
keywords = ["tcp", "echo", "asyncio", "benchmark", "networking"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Framework :: AsyncIO",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest", "pytest-asyncio"]

[project.scripts]
tcpecho-server = "tcpecho.server:main"
tcpecho-client = "tcpecho.client:main"

[tool.hatch.build.targets.wheel]
packages = ["tcpecho"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py311"

[tool.mypy]
python_version = "3.11"
warn_unused_ignores = true
