[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "plotcalc"
version = "0.1.0"
description = "An interactive function plotter with an expression parser and evaluator"
requires-python = ">=3.10"
keywords = ["graphing", "calculator", "plotting", "expression", "parser"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: X11 Applications",
    "Intended Audience :: Education",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Mathematics",
]
dependencies = [
    "pygame",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
plotcalc = "plotcalc.app:main"

[tool.hatch.build.targets.wheel]
packages = ["plotcalc"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
