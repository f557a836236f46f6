"""setuptools setup for Pomodorise.

Install for development:
    pip install -e ".[test]"
"""

from setuptools import setup, find_packages

setup(
    name="pomodorise",
    version="0.1.0",
    description="Focus intervals with points, levels and streaks",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    install_requires=[
        "SQLAlchemy>=2.0",
        "PyQt6>=6.4",
    ],
    extras_require={
        "test": ["pytest>=7"],
    },
    entry_points={
        "console_scripts": ["pomodorise=pomodorise.__main__:main"],
    },
)
