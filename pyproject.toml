[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "arsradar"
version = "0.9.0"
description = "Decoder, receiver and configuration tool for the ARS548 automotive radar UDP protocol"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "radar",
    "ars548",
    "automotive",
    "udp",
    "multicast",
    "point-cloud",
    "sensor",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Interface Engine/Protocol Translator",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
ars548-driver = "arsradar.driver:main"
ars548-setup = "arsradar.radar_setup:main"

[tool.hatch.build.targets.wheel]
packages = ["arsradar"]

[tool.hatch.build.targets.sdist]
include = ["arsradar", "tests"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
