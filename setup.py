"""
Setup script for the docstore project.

Allows development installation with `pip install -e .`
"""

from setuptools import setup, find_packages

setup(
    name="docstore",
    version="0.1.0",
    packages=find_packages(include=["docstore", "docstore.*"]),
    python_requires=">=3.11",
    install_requires=[
        "pymongo>=4.10",
        "python-dotenv>=1.0",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
            "pytest-asyncio>=0.23",
        ],
    },
)
