[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "secretstream"
version = "0.1.0"
description = "XChaCha20-Poly1305 secret stream encryption in the libsodium secretstream wire format"
requires-python = ">=3.10"
dependencies = [
    "cryptography",
]
keywords = ["xchacha20", "poly1305", "hchacha20", "secretstream", "encryption", "aead", "stream"]
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
    "Topic :: Security :: Cryptography",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["secretstream"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
