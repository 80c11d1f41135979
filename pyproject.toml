[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "eposkit"
version = "0.1.0"
description = "FAT on-disk structures, sector devices, bitmaps, memory allocators and a keyboard scan-code decoder in pure Python"
requires-python = ">=3.10"
dependencies = []
keywords = ["fat", "fat32", "filesystem", "disk-image", "bitmap", "allocator", "scan-code"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Filesystems",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["eposkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
