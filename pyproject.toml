[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "hapticbridge"
version = "0.1.0"
description = "Bilateral teleoperation logic between a haptic stylus and a robot arm: pose mapping, workspace and force limits, gripper control and wrench filtering."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "haptics",
    "teleoperation",
    "force feedback",
    "robotics",
    "franka",
    "gripper",
    "iir filter",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Human Machine Interfaces",
    "Topic :: Scientific/Engineering",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["hapticbridge"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
strict = true
