[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "linebot"
version = "0.1.0"
description = "Control logic for a line-following robot with obstacle avoidance and a serial calibration console."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "robotics",
    "line-follower",
    "obstacle-avoidance",
    "sensor-calibration",
    "state-machine",
    "ultrasonic",
    "color-sensor",
]
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
    "Topic :: Scientific/Engineering :: Human Machine Interfaces",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["linebot"]

[tool.hatch.build.targets.sdist]
include = ["linebot", "tests"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]
