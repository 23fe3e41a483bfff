#!/usr/bin/env python3
"""Setup script for Mizan Arabic morphology."""

from setuptools import setup, find_packages

setup(
    name="mizan",
    version="0.1.0",
    description="Arabic root classification, scheme derivation and decomposition",
    author="Mizan Team",
    python_requires=">=3.9",
    packages=find_packages(include=["mizan", "mizan.*"]),
    install_requires=[
        "fastapi>=0.100.0",
        "pydantic>=2.0.0",
        "uvicorn>=0.22.0",
    ],
    extras_require={
        "dev": [
            "pytest",
            "httpx",
            "black",
            "flake8",
        ],
    },
    entry_points={
        "console_scripts": [
            "mizan=mizan.cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Topic :: Text Processing :: Linguistic",
    ],
)
