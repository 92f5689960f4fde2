[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "metrics_util"
version = "0.1.0"
description = "Helper types for collecting metrics: registries, buckets, histograms, summaries and recorder layers."
requires-python = ">=3.10"
dependencies = []
keywords = ["metrics", "telemetry", "histogram", "registry", "quantile", "recorder"]
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
    "Topic :: Software Development :: Libraries",
    "Topic :: System :: Monitoring",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["metrics_util"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
