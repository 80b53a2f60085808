[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sclib"
version = "2.0.0"
description = "Small utilities: byte sizes, RC4 random stream, option matching, ring queue and signal handling"
requires-python = ">=3.10"
dependencies = []
keywords = ["utilities", "queue", "ring-buffer", "deque", "options", "signals", "rc4", "sizes"]
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
    "Topic :: Software Development :: Libraries",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["sclib"]

[tool.pytest.ini_options]
addopts = "-ra"
