[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "l3chat"
version = "0.1.0"
description = "Building blocks for a chat web app: OAuth login, auth errors, password checks, markdown rendering, a dark-mode cookie and collaborative drawing events"
requires-python = ">=3.10"
keywords = ["chat", "oauth", "markdown", "argon2", "drawing", "cookies"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Internet :: WWW/HTTP :: Dynamic Content",
]
dependencies = [
    "markdown-it-py>=3.0",
    "httpx>=0.25",
    "cryptography>=44.0",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
]

[tool.hatch.build.targets.wheel]
packages = ["l3chat"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
ignore_missing_imports = true
