#!/usr/bin/env python3
"""
Setup script for mcd for environments that still install via setuptools.

All metadata lives in the [tool.poetry] table of pyproject.toml.
"""

import sys
import tomllib

from setuptools import find_namespace_packages, setup

try:
    with open("pyproject.toml", "rb") as f:
        poetry = tomllib.load(f)["tool"]["poetry"]
except (OSError, KeyError, tomllib.TOMLDecodeError) as e:
    print(f"Error reading pyproject.toml: {e}")
    sys.exit(1)

install_requires = []
for dep, version_spec in poetry["dependencies"].items():
    if dep == "python":
        continue
    if isinstance(version_spec, str):
        install_requires.append(f"{dep}{version_spec}")
    elif not version_spec.get("optional", False):
        install_requires.append(f"{dep}{version_spec.get('version', '')}")

extras_require = {
    extra: [
        f"{dep}{poetry['dependencies'][dep].get('version', '')}" for dep in deps
    ]
    for extra, deps in poetry.get("extras", {}).items()
}

authors = poetry["authors"]

setup(
    name=poetry["name"],
    version=poetry["version"],
    description=poetry["description"],
    author=authors[0] if isinstance(authors, list) else authors,
    license=poetry["license"],
    packages=find_namespace_packages(where="src", include=["mcd", "mcd.*"]),
    package_dir={"": "src"},
    install_requires=install_requires,
    extras_require=extras_require,
    entry_points={
        "console_scripts": [f"{name}={target}" for name, target in poetry["scripts"].items()]
    },
    python_requires=">=3.11,<4.0",
    include_package_data=True,
    zip_safe=False,
)
