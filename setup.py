#!/usr/bin/env python
"""
gold-analytics packaging

    pip install -e ".[dev]"
"""

import re
from pathlib import Path

from setuptools import find_packages, setup

HERE = Path(__file__).parent


def read_version() -> str:
    init = (HERE / "gold_analytics" / "__init__.py").read_text(encoding="utf-8")
    return re.search(r'^__version__ = "([^"]+)"', init, re.M).group(1)


def read_requirements() -> list:
    lines = (HERE / "requirements.txt").read_text(encoding="utf-8").splitlines()
    return [line.strip() for line in lines if line.strip() and not line.startswith("#")]


TEST_REQUIREMENTS = [
    "pytest>=7.4.0",
    "pytest-cov>=4.1.0",
    "pytest-asyncio>=0.23.0",
    "httpx>=0.26.0",
]

setup(
    name="gold-analytics",
    version=read_version(),
    description="Read-only analytics and reporting views over a star-schema Gold Layer",
    long_description=(HERE / "README.md").read_text(encoding="utf-8"),
    long_description_content_type="text/markdown",
    packages=find_packages(include=["gold_analytics", "gold_analytics.*"]),
    python_requires=">=3.11",
    install_requires=read_requirements(),
    extras_require={"test": TEST_REQUIREMENTS, "dev": TEST_REQUIREMENTS},
    entry_points={"console_scripts": ["gold-analytics=gold_analytics.cli:main"]},
    classifiers=[
        "Programming Language :: Python :: 3",
        "Framework :: FastAPI",
        "Topic :: Database",
        "Topic :: Scientific/Engineering :: Information Analysis",
    ],
    zip_safe=False,
)
