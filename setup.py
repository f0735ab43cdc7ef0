# setup.py
"""Setup script for AppFlow Builder."""

from setuptools import setup, find_packages

setup(
    name="appflow-builder",
    version="0.1.0",
    packages=find_packages(exclude=("tests", "tests.*")),
    include_package_data=True,
    install_requires=[
        "click>=8.0",
        "pyyaml>=6.0",
        "pydantic>=2.5",
        "pydantic-settings>=2.0",
        "structlog>=23.1",
        "networkx>=3.0",
        "aiosqlite>=0.19",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0",
            "pytest-asyncio>=0.21",
            "black>=23.0",
            "flake8>=6.0",
        ]
    },
    entry_points={
        "console_scripts": [
            "appflow=cli.main:cli",
        ],
    },
    python_requires=">=3.9",
)
