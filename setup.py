"""
Setup script for the fhe-battleship package.

Installs the ``fhe_battleship`` engine from ``src/`` together with the
SQLite schema used by the game-created feed.
"""

from setuptools import setup, find_packages

setup(
    name="fhe-battleship",
    version="1.0.0",
    description="Confidential two-player Battleship engine over encrypted game state",
    python_requires=">=3.10",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "python-dotenv>=1.0.0",
        "pydantic>=2.5.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0",
            "build",
            "wheel",
        ],
    },
    package_data={
        "fhe_battleship._registry": ["schema.sql"],
    },
    entry_points={
        "console_scripts": [
            "fhe-battleship=fhe_battleship.cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
