[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "dezoomify"
version = "0.1.0"
description = "Read the metadata of zoomable images (Zoomify, krpano, IIPImage, NYPL, PFF, IIIF info.json) and compute the tiles of each zoom level"
requires-python = ">=3.10"
keywords = ["zoomable image", "tiles", "iiif", "zoomify", "krpano", "iipimage", "pff", "nypl"]
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
    "Topic :: Multimedia :: Graphics",
]
dependencies = [
    "pillow",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["dezoomify"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
