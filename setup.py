# setup.py

from setuptools import setup, find_packages
from pathlib import Path

readme = Path(__file__).parent / "README.md"
long_description = readme.read_text() if readme.exists() else ""

setup(
    name="fraudscope",
    version="0.1.0",
    description="Heuristic payment fraud pattern detection with a configurable synthetic transaction generator",
    long_description=long_description,
    long_description_content_type="text/markdown",

    packages=find_packages(exclude=["tests", "tests.*"]),

    install_requires=[
        "pydantic>=2.0.0",
        "pandas>=2.0.0",
    ],

    extras_require={
        "kafka": ["kafka-python>=2.0.2"],
        "dev": ["pytest", "black", "mypy", "kafka-python>=2.0.2"]
    },

    entry_points={
        "console_scripts": [
            "fraudscope=fraudscope.main:main",
        ]
    },

    python_requires=">=3.9",

    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ]
)
