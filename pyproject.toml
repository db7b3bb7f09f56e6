[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cgl"
version = "0.1.0"
description = "Graphics building blocks: vectors, matrices, colours, timing, a renderer base class and a small XML DOM"
requires-python = ">=3.10"
dependencies = []
keywords = ["graphics", "linear-algebra", "vector", "matrix", "color", "xml", "base64"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Multimedia :: Graphics",
    "Topic :: Scientific/Engineering :: Mathematics",
    "Topic :: Text Processing :: Markup :: XML",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["cgl"]

[tool.pytest.ini_options]
addopts = "-ra"
