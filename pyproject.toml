[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "slotter"
version = "0.1.0"
description = "SQLAlchemy repositories for companies, WMS tenants, warehouses, roles and permissions, with a permission seeder."
requires-python = ">=3.10"
keywords = ["repository", "sqlalchemy", "permissions", "roles", "warehouse", "soft-delete"]
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
    "Topic :: Database :: Front-Ends",
]
dependencies = [
    "sqlalchemy>=2.0",
]

[project.optional-dependencies]
test = [
    "pytest>=7",
]

[tool.hatch.build.targets.wheel]
packages = ["slotter"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
