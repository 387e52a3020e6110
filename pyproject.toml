[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ambientmqtt"
version = "0.1.0"
description = "Publish and collect ambient readings (temperature, pressure, humidity) over MQTT"
requires-python = ">=3.10"
keywords = ["mqtt", "ambient", "temperature", "humidity", "pressure", "iot"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications",
    "Topic :: Home Automation",
]
dependencies = [
    "paho-mqtt>=1.6",
]

[project.optional-dependencies]
test = [
    "pytest>=7",
]

[project.scripts]
ambientmqtt-pub = "ambientmqtt.publisher:main"
ambientmqtt-sub = "ambientmqtt.subscriber:main"

[tool.hatch.build.targets.wheel]
packages = ["ambientmqtt"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
