[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "dhcpv4tools"
version = "0.1.0"
description = "DHCPv4 option encoding and decoding, raw UDP framing and zero-touch provisioning helpers"
requires-python = ">=3.10"
dependencies = []
keywords = ["dhcp", "dhcpv4", "networking", "ztp", "options", "udp", "circuit-id"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["dhcpv4tools"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
