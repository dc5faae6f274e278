[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "neolink"
version = "0.1.0"
description = "Building blocks for Reolink-family IP cameras: UDP packet framing, discovery payload crypto, ADPCM audio decoding and configuration handling"
requires-python = ">=3.11"
dependencies = []
keywords = ["reolink", "camera", "udp", "adpcm", "ip-camera", "configuration"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Video",
    "Topic :: Multimedia :: Sound/Audio :: Conversion",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = [
    "pytest",
    "hypothesis",
]

[tool.hatch.build.targets.wheel]
packages = ["neolink"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py311"

[tool.mypy]
python_version = "3.11"
