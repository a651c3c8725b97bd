[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ethlibs"
version = "0.1.0"
description = "Helpers for talking to Ethereum nodes: JSON-RPC messages, RLP encoding and asyncio node clients."
requires-python = ">=3.10"
keywords = ["ethereum", "json-rpc", "rlp", "keccak", "websocket", "ipc", "asyncio"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Framework :: AsyncIO",
    "Topic :: Software Development :: Libraries :: Python Modules",
]
dependencies = [
    "pycryptodome",
    "httpx",
    "websockets",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[tool.hatch.build.targets.wheel]
packages = ["ethlibs"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
