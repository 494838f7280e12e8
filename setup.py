#!/usr/bin/env python3
"""Setup script for the hierarchy builder engine."""

from setuptools import setup, find_packages


setup(
    name="hierarchy-builder",
    version="1.0.0",
    description="Tree mutation engine for drag-and-drop hierarchy builders",
    author="Hierarchy Builder Project",
    license="MIT",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.11",
    install_requires=[],
    extras_require={
        "test": [
            "pytest>=7.4",
        ],
    },
    classifiers=[
        "Development Status :: 5 - Production/Stable",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Software Development :: Libraries",
    ],
)
