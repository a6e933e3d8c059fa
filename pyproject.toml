[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mqttpacket"
version = "1.0.0"
description = "Serialize and deserialize MQTT 3.1 and 3.1.1 control packets"
requires-python = ">=3.10"
dependencies = []
keywords = ["mqtt", "packet", "serialization", "iot", "protocol", "messaging"]
classifiers = [
    "Development Status :: 5 - Production/Stable",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications",
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Topic :: Internet",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["mqttpacket"]

[tool.hatch.build.targets.sdist]
include = ["mqttpacket", "tests"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
