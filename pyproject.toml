[build-system]
requires = ["setuptools>=61.0"]
build-backend = "setuptools.build_meta"

[project]
name = "triplclust"
version = "0.1.0"
description = "Point cloud clustering helpers: hierarchical linkage, k-d tree search, MST gap splitting and triplet cluster handling"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "clustering",
    "hierarchical-clustering",
    "linkage",
    "kdtree",
    "nearest-neighbour",
    "point-cloud",
    "minimum-spanning-tree",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Physics",
    "Topic :: Scientific/Engineering :: Information Analysis",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.setuptools.packages.find]
include = ["triplclust*"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
