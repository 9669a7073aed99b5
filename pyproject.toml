[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "usm2"
version = "0.1.0"
description = "Unsharp mask sharpening with gamma-aware IIR blur and noise-dependent amounts"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = ["unsharp mask", "sharpen", "image processing", "iir", "gaussian blur"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Multimedia :: Graphics :: Editors :: Raster-Based",
    "Topic :: Scientific/Engineering :: Image Processing",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["usm2"]

[tool.pytest.ini_options]
addopts = "-ra"
