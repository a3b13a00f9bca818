[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "otelbuild"
version = "0.1.0"
description = "Build tools for Go module repositories: changelog generation, API checks and component file checks"
requires-python = ">=3.10"
keywords = ["changelog", "build-tools", "api-check", "go", "yaml"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Build Tools",
]
dependencies = [
    "pyyaml>=6.0",
    "jinja2>=3.1",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
]

[project.scripts]
chloggen = "otelbuild.chloggen.cli:main"
checkapi = "otelbuild.checkapi.cli:main"
checkfile = "otelbuild.checkfile:main"

[tool.hatch.build.targets.wheel]
packages = ["otelbuild"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
ignore_missing_imports = true
