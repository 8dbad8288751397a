[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "seriesdl"
version = "0.1.0"
description = "Search, download and keep track of anime series episodes from the command line"
requires-python = ">=3.10"
keywords = ["anime", "downloader", "video", "episodes", "cli", "watch-history"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Video",
]
dependencies = [
    "requests>=2.28",
    "beautifulsoup4>=4.11",
    "python-dotenv>=1.0",
]

[project.optional-dependencies]
test = [
    "pytest>=7",
    "responses>=0.23",
]

[project.scripts]
seriesdl = "seriesdl.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["seriesdl"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
