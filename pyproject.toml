[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "scaletest"
version = "0.1.0"
description = "Compose and run Kubernetes scale-test scenarios with clusterloader2 and kube-burner"
requires-python = ">=3.10"
keywords = [
    "kubernetes",
    "scale-testing",
    "load-testing",
    "clusterloader2",
    "kube-burner",
    "cilium",
    "aks",
    "workflow",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Testing :: Traffic Generation",
    "Topic :: System :: Benchmark",
    "Topic :: System :: Clustering",
]
dependencies = [
    "pyyaml>=6.0",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
]

[tool.hatch.build.targets.wheel]
packages = ["scaletest"]

[tool.hatch.build.targets.sdist]
include = [
    "scaletest",
    "tests",
    "pyproject.toml",
]

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
ignore_missing_imports = true
