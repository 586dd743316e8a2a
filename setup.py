#!/usr/bin/env python3
"""Setup script for Saga Maker."""

from setuptools import setup, find_packages

setup(
    name="sagamaker",
    version="1.0.0",
    description="A personal skill tree editor for the GNOME desktop",
    author="Saga Maker Project",
    license="MIT",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.11",
    install_requires=[
        "PyGObject>=3.46.0",
        "pycairo>=1.25.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "sagamaker=sagamaker.launcher:main",
        ],
        "gui_scripts": [
            "sagamaker-gui=sagamaker.launcher:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: X11 Applications :: GTK",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: MIT License",
        "Operating System :: POSIX :: Linux",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Games/Entertainment",
    ],
)
