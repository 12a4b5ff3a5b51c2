[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "roughenough"
version = "2.0.0"
description = "Roughtime Merkle trees, Ed25519 identity seeds and AES-GCM envelope encryption of seeds"
requires-python = ">=3.10"
keywords = ["roughtime", "merkle", "ed25519", "seed", "envelope-encryption"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security :: Cryptography",
]
dependencies = [
    "cryptography",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
roughenough-keys = "roughenough.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["roughenough"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
