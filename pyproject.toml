[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ircodec"
version = "0.1.0"
description = "Encode and decode infrared remote control protocols (NEC, Samsung, Sony, RC5, RC6 and more) as mark/space timings"
requires-python = ">=3.10"
dependencies = []
keywords = ["infrared", "ir", "remote control", "nec", "samsung", "sony", "rc5", "rc6", "protocol"]
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
    "Topic :: Home Automation",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["ircodec"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
