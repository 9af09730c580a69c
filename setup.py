#!/usr/bin/env python
"""
sandboxfs: a sandboxed host filesystem for emulated guest processes
"""
from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

# Define required packages
required_packages = [
    "pydantic>=2.0.0",  # For configuration validation
    "pyyaml>=6.0",      # For configuration file support
    "rich>=13.5.0",     # For rich terminal output
]

setup(
    name="sandboxfs",
    version="1.0.0",
    description="A sandboxed host filesystem for emulated guest processes",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["sandboxfs", "sandboxfs.*"]),
    python_requires=">=3.8",
    install_requires=required_packages,
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        'console_scripts': [
            'sandboxfs=sandboxfs.cli:main',
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: POSIX",
    ],
)
