[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "splatforge"
version = "0.1.0"
description = "Gaussian splat training helpers: COLMAP readers, scene bounds, scaled Adam, image samples, refinement statistics and shader-name demangling"
requires-python = ">=3.10"
keywords = ["gaussian-splatting", "colmap", "3d", "rendering", "adam", "wgsl"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Multimedia :: Graphics :: 3D Rendering",
    "Topic :: Scientific/Engineering :: Image Processing",
]
dependencies = [
    "numpy",
    "pillow",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["splatforge"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
