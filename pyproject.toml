[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gremlinstore"
version = "0.1.0"
description = "Gremlin graph store helpers for dimensional datasets: observation batches, filtered CSV row streaming, hierarchy reads and retries"
requires-python = ">=3.10"
dependencies = []
keywords = ["gremlin", "graph", "neptune", "observations", "hierarchy", "csv", "retry"]
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
    "Topic :: Database :: Front-Ends",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["gremlinstore"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
