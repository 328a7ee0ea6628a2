"""setuptools setup for PomoFlow.

Install for development:
    pip install -e ".[test]"
"""

from setuptools import setup, find_packages

setup(
    name="PomoFlow",
    version="0.1.0",
    description="Pomodoro timer with persisted session tracking",
    packages=find_packages(include=["pomoflow", "pomoflow.*"]),
    python_requires=">=3.10",
    install_requires=[
        "PyQt6>=6.5",
        "SQLAlchemy>=2.0",
        "supabase>=2.0",
        "python-dotenv>=1.0",
        "numpy>=1.24",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "gui_scripts": ["pomoflow = pomoflow.__main__:main"],
    },
)
