#!/usr/bin/env python

"""The setup script."""
from pathlib import Path

from setuptools import find_packages, setup

with open("README.md") as readme_file:
    readme = readme_file.read()

with open("HISTORY.md") as history_file:
    history = history_file.read()

install_requires = [
    line
    for line in Path("requirements.txt").read_text().splitlines()
    if line and line[0] not in ("-", "#")
]

test_requirements = [
    "pytest>=3",
]

setup(
    author="virtualstain developers",
    python_requires=">=3.9",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Science/Research",
        "Natural Language :: English",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Scientific/Engineering :: Image Processing",
    ],
    description="Make virtual H&E images from fluorescence microscopy images.",
    entry_points={
        "console_scripts": [
            "virtualstain=virtualstain.cli:main",
        ],
    },
    extras_require={"test": test_requirements},
    install_requires=install_requires,
    long_description=readme + "\n\n" + history,
    long_description_content_type="text/markdown",
    include_package_data=True,
    package_data={"virtualstain": ["data/*.yaml"]},
    keywords="virtualstain",
    name="virtualstain",
    packages=find_packages(include=["virtualstain", "virtualstain.*"]),
    version="0.3.0",
    zip_safe=False,
)
