#!/usr/bin/env python3
"""
Setup script for the dbregistry package.
"""

from setuptools import setup, find_packages

setup(
    name="dbregistry",
    version="0.3.0",
    description="Registry of local and remote analysis databases with a watched JSON config",
    author="dbregistry Team",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.10",
    install_requires=[
        "pydantic>=2.0",
        "jsonschema>=4.0",
        "watchdog>=3.0",
        "typer>=0.9",
        "rich>=13.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "dbregistry=dbregistry.cli.main:app",
        ],
    },
)
