[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mlkem"
version = "0.1.0"
description = "Pure-Python ML-KEM (FIPS 203) key encapsulation with SHA-3 and SHAKE primitives"
requires-python = ">=3.10"
dependencies = []
keywords = ["ml-kem", "kyber", "fips203", "post-quantum", "kem", "sha3", "shake", "keccak"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security :: Cryptography",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
mlkem = "mlkem.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["mlkem"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
