[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cfmm_router"
version = "0.1.0"
description = "Arbitrage subproblems for constant function market makers and L-BFGS minimisation over positive prices"
requires-python = ">=3.10"
keywords = ["cfmm", "amm", "arbitrage", "optimization", "dual", "lbfgs"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Financial and Insurance Industry",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business :: Financial :: Investment",
    "Topic :: Scientific/Engineering :: Mathematics",
]
dependencies = [
    "numpy",
    "scipy",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["cfmm_router"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
